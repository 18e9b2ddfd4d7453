"""OAuth relay endpoints.

This module contains the two legs of the browser flow:
- /auth: validates the requesting origin, sets the state cookie and
  redirects to GitHub
- /callback: validates state, exchanges the code for a token and returns
  the handshake page that relays the result to the opener window
"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from config import Config
from oauth.github import PROVIDER, TokenExchangeError, build_authorize_url, exchange_code
from oauth.origins import OriginPolicy, normalize_origin
from oauth.state import FlowState, StateDecodeError, decode_state, encode_state, new_csrf
from oauth.templates import render_handshake_page

logger = logging.getLogger(__name__)

STATE_COOKIE = "oauth_state"
STATE_COOKIE_MAX_AGE = 10 * 60  # 10 minutes

# Router for OAuth endpoints
router = APIRouter(tags=["oauth"])


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_origin_policy(request: Request) -> OriginPolicy:
    return request.app.state.origin_policy


def _bad_request(message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=400)


def _same_state(cookie_state: str, query_state: str) -> bool:
    return hmac.compare_digest(cookie_state.encode("utf-8"), query_state.encode("utf-8"))


# ============== Authorization ==============

@router.get("/auth")
async def authorize(
    provider: str = PROVIDER,
    origin: str = "",
    site_id: str = "",
    scope: str = "",
    config: Config = Depends(get_config),
    policy: OriginPolicy = Depends(get_origin_policy),
):
    """Start the flow: redirect the popup to GitHub's authorization page."""
    if provider != PROVIDER:
        return _bad_request("Unsupported provider")

    # accept both origin and site_id parameters
    raw = origin or site_id
    if not raw:
        return _bad_request("Origin not allowed")

    flow_origin = normalize_origin(raw)
    if not flow_origin or not policy.is_allowed(flow_origin):
        logger.info(f"[AUTH] Rejected origin: {raw!r}")
        return _bad_request("Origin not allowed")

    state = encode_state(FlowState(csrf=new_csrf(), origin=flow_origin))
    url = build_authorize_url(config, scope or config.scopes, state)

    response = RedirectResponse(url=url, status_code=302)
    response.set_cookie(
        STATE_COOKIE,
        state,
        max_age=STATE_COOKIE_MAX_AGE,
        httponly=True,
        secure=True,
        samesite="lax",
    )
    logger.info(f"[AUTH] Redirecting to {PROVIDER} for {flow_origin}")
    return response


# ============== Callback ==============

@router.get("/callback")
async def callback(
    code: str = "",
    state: str = "",
    oauth_state: Optional[str] = Cookie(None),
    config: Config = Depends(get_config),
    policy: OriginPolicy = Depends(get_origin_policy),
):
    """Finish the flow: exchange the code and relay the token to the opener."""
    if not code or not state:
        return _bad_request("Missing code/state")

    # The cookie is the only server-held half of the state; never trust the query alone
    if not oauth_state or not _same_state(oauth_state, state):
        logger.info("[CALLBACK] Rejected: state does not match cookie")
        return _bad_request("Invalid state")

    try:
        flow = decode_state(state)
    except StateDecodeError as e:
        logger.info(f"[CALLBACK] Rejected: {e}")
        return _bad_request("Bad state")

    if not policy.is_allowed(flow.origin):
        logger.info(f"[CALLBACK] Rejected origin: {flow.origin!r}")
        return _bad_request("Origin not allowed")

    try:
        access_token = await exchange_code(config, code)
    except TokenExchangeError as e:
        logger.exception(f"[CALLBACK] Token exchange failed for {flow.origin}")
        page = render_handshake_page("error", {"error": str(e)}, flow.origin, PROVIDER)
        response = HTMLResponse(page, status_code=500)
    else:
        if not access_token:
            response = _bad_request("Failed to obtain access token")
        else:
            logger.info(f"[CALLBACK] Relaying token to {flow.origin}")
            content = {"token": access_token, "provider": PROVIDER}
            page = render_handshake_page("success", content, flow.origin, PROVIDER)
            response = HTMLResponse(page, status_code=200)

    # single-use state
    response.delete_cookie(STATE_COOKIE, secure=True, httponly=True, samesite="lax")
    return response
