"""Config management for the OAuth relay.

Configuration is read from the environment once at startup and handed to
the application as an immutable value.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

DEFAULT_SCOPES = "public_repo"
DEFAULT_TOKEN_EXCHANGE_TIMEOUT = 10.0
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000

# Accepted names, first non-empty wins
CLIENT_ID_VARS = ("OAUTH_CLIENT_ID", "GITHUB_CLIENT_ID", "OAUTH_GITHUB_CLIENT_ID")
CLIENT_SECRET_VARS = ("OAUTH_CLIENT_SECRET", "GITHUB_CLIENT_SECRET", "OAUTH_GITHUB_CLIENT_SECRET")


@dataclass(frozen=True)
class Config:
    """Configuration container."""

    client_id: str = ""
    client_secret: str = field(default="", repr=False)
    redirect_url: str = ""
    origins: tuple = ()
    scopes: str = DEFAULT_SCOPES
    token_timeout: float = DEFAULT_TOKEN_EXCHANGE_TIMEOUT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_format: str = "plain"

    def missing(self) -> list[str]:
        """Names of required settings that are not set."""
        missing = []
        if not self.client_id:
            missing.append("OAUTH_CLIENT_ID")
        if not self.client_secret:
            missing.append("OAUTH_CLIENT_SECRET")
        if not self.redirect_url:
            missing.append("REDIRECT_URL")
        if not self.origins:
            missing.append("ORIGINS")
        return missing

    def is_valid(self) -> bool:
        """Check if config has required fields."""
        return not self.missing()


def parse_origins(raw: Optional[str]) -> tuple:
    """Split a comma-separated allow-list, dropping blanks and duplicates."""
    entries = []
    for item in (raw or "").split(","):
        item = item.strip()
        if item and item not in entries:
            entries.append(item)
    return tuple(entries)


def _first(environ: Mapping[str, str], names) -> str:
    for name in names:
        value = (environ.get(name) or "").strip()
        if value:
            return value
    return ""


def _number(environ: Mapping[str, str], name: str, default, cast):
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning(f"[STARTUP] Ignoring invalid {name}={raw!r}, using {default}")
        return default


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Load config from the environment."""
    if environ is None:
        environ = os.environ

    log_format = (environ.get("LOG_FORMAT") or "plain").strip().lower()
    if log_format not in ("plain", "json"):
        log_format = "plain"

    return Config(
        client_id=_first(environ, CLIENT_ID_VARS),
        client_secret=_first(environ, CLIENT_SECRET_VARS),
        redirect_url=(environ.get("REDIRECT_URL") or "").strip(),
        origins=parse_origins(environ.get("ORIGINS")),
        scopes=(environ.get("SCOPES") or "").strip() or DEFAULT_SCOPES,
        token_timeout=_number(environ, "TOKEN_EXCHANGE_TIMEOUT", DEFAULT_TOKEN_EXCHANGE_TIMEOUT, float),
        host=(environ.get("HOST") or "").strip() or DEFAULT_HOST,
        port=_number(environ, "PORT", DEFAULT_PORT, int),
        log_format=log_format,
    )
