"""CORS middleware backed by the origin allow-list.

Credentialed cross-origin requests are only answered with CORS headers for
origins the OriginPolicy accepts. Requests without an Origin header
(server-to-server, top-level navigation) pass through untouched.
"""

import logging

from fastapi.middleware.cors import CORSMiddleware

from oauth.origins import OriginPolicy

logger = logging.getLogger(__name__)


class AllowListCORSMiddleware(CORSMiddleware):
    """Starlette CORSMiddleware that consults an OriginPolicy."""

    def __init__(self, app, policy: OriginPolicy):
        super().__init__(
            app,
            allow_origins=(),
            allow_methods=("GET", "POST", "OPTIONS"),
            allow_headers=("*",),
            allow_credentials=True,
        )
        self.policy = policy

    def is_allowed_origin(self, origin: str) -> bool:
        allowed = self.policy.is_allowed(origin)
        if not allowed:
            logger.debug(f"[CORS] Origin not allowed: {origin}")
        return allowed
