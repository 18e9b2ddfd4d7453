"""GitHub OAuth endpoints and the server-side code exchange."""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from config import Config

logger = logging.getLogger(__name__)

PROVIDER = "github"
AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"


class TokenExchangeError(RuntimeError):
    """The token endpoint could not be reached or answered with garbage."""


def build_authorize_url(config: Config, scope: str, state: str) -> str:
    """GitHub authorization URL for this flow.

    The redirect URI always comes from configuration, never from the caller.
    """
    params = {
        "client_id": config.client_id,
        "redirect_uri": config.redirect_url,
        "scope": scope,
        "state": state,
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


async def exchange_code(config: Config, code: str) -> Optional[str]:
    """Exchange an authorization code for an access token.

    Returns the access token, or None when GitHub answered without one
    (expired or already used code, bad credentials, ...).

    Raises:
        TokenExchangeError: on transport failures, timeouts and non-JSON replies.
    """
    body = {
        "client_id": config.client_id,
        "client_secret": config.client_secret,
        "code": code,
        "redirect_uri": config.redirect_url,
    }
    try:
        async with httpx.AsyncClient(timeout=config.token_timeout) as client:
            response = await client.post(
                TOKEN_URL,
                json=body,
                headers={"Accept": "application/json"},
            )
    except httpx.TimeoutException as e:
        raise TokenExchangeError("Token endpoint timed out") from e
    except httpx.HTTPError as e:
        raise TokenExchangeError("Token endpoint unreachable") from e

    try:
        data = response.json()
    except ValueError as e:
        raise TokenExchangeError("Token endpoint returned malformed response") from e
    if not isinstance(data, dict):
        logger.warning(f"[TOKEN] Unexpected token response shape (status {response.status_code})")
        return None

    access_token = data.get("access_token")
    if not access_token or not isinstance(access_token, str):
        logger.warning(
            f"[TOKEN] No access token in response (status {response.status_code}, "
            f"error: {data.get('error', 'none')})"
        )
        return None

    logger.info("[TOKEN] Access token obtained")
    return access_token
