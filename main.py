"""GitHub OAuth relay for static CMS front ends.

This server handles:
- /auth: starts the GitHub authorization flow for an allow-listed origin
- /callback: exchanges the code server-side and hands the token back to
  the CMS window through a postMessage handshake
- /healthz: liveness probe

The client secret stays on this server; nothing is stored between requests.
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from config import VERSION, Config, load_config
from logging_config import setup_logging
from oauth.endpoints import router as oauth_router
from oauth.middleware import AllowListCORSMiddleware
from oauth.origins import OriginPolicy


logger = logging.getLogger(__name__)


def create_app(config: Config) -> FastAPI:
    """Build the application around an immutable configuration."""
    if not config.is_valid():
        logger.error(f"[STARTUP] Missing env. Required: {', '.join(config.missing())}")

    policy = OriginPolicy(config.origins)

    app = FastAPI(
        title="GitHub OAuth Relay",
        description="OAuth token relay for static CMS front ends",
        version=VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.state.origin_policy = policy

    app.add_middleware(AllowListCORSMiddleware, policy=policy)
    app.include_router(oauth_router)

    @app.get("/healthz", response_class=PlainTextResponse)
    async def health_check():
        """Liveness only, no dependency checks."""
        return "ok"

    logger.info(f"[STARTUP] Allowed origins: {', '.join(config.origins) or '(none)'}")
    logger.info(f"[STARTUP] Default scope: {config.scopes}")
    return app


# Load environment: .env (local override)
_env_file = Path(".env")
if _env_file.exists():
    load_dotenv(_env_file)

settings = load_config()
setup_logging(service_name="oauth-relay", json_logs=settings.log_format == "json")

app = create_app(settings)


# ============== Main Entry Point ==============

if __name__ == "__main__":
    import uvicorn
    logger.info(f"OAuth provider listening on :{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)
