"""OAuth ``state`` encoding.

The state value binds a CSRF nonce to the origin the flow was started for.
It is compact JSON, URL-safe base64 encoded without padding, and doubles as
the content of the ``oauth_state`` cookie.
"""

import base64
import binascii
import json
import re
import secrets
from dataclasses import dataclass

CSRF_BYTES = 16

_CSRF_RE = re.compile(r"[0-9a-f]{32,}")


class StateDecodeError(ValueError):
    """The state value is not a well-formed encoded FlowState."""


@dataclass(frozen=True)
class FlowState:
    csrf: str
    origin: str


def new_csrf() -> str:
    """Fresh CSRF nonce rendered as fixed-width hex."""
    return secrets.token_hex(CSRF_BYTES)


def encode_state(state: FlowState) -> str:
    payload = json.dumps({"csrf": state.csrf, "origin": state.origin}, separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode("utf-8")).rstrip(b"=").decode("ascii")


def decode_state(token: str) -> FlowState:
    """Decode a state value produced by encode_state.

    Both the URL-safe and the standard base64 alphabets are accepted, with
    or without padding.

    Raises:
        StateDecodeError: on any malformed input.
    """
    if not isinstance(token, str) or not token:
        raise StateDecodeError("empty state")
    try:
        raw = token.strip().encode("ascii")
    except UnicodeEncodeError as e:
        raise StateDecodeError("state is not ASCII") from e

    raw = raw.replace(b"+", b"-").replace(b"/", b"_").rstrip(b"=")
    raw += b"=" * (-len(raw) % 4)
    try:
        payload = base64.b64decode(raw, altchars=b"-_", validate=True)
        data = json.loads(payload.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StateDecodeError("malformed state") from e

    if not isinstance(data, dict):
        raise StateDecodeError("state is not an object")
    csrf = data.get("csrf")
    origin = data.get("origin")
    if not isinstance(csrf, str) or not _CSRF_RE.fullmatch(csrf):
        raise StateDecodeError("state has no valid csrf")
    if not isinstance(origin, str):
        raise StateDecodeError("state has no origin")
    return FlowState(csrf=csrf, origin=origin)
