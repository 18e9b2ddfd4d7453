"""Origin allow-list policy.

Decides whether an origin (or bare host) may take part in the OAuth flow.
Entries are exact hosts, optionally with an http(s):// prefix, or
wildcard suffixes of the form ``*.example.com``. Matching is a literal
string comparison on the host (including any port), not a DNS-aware check.
"""

import re
from typing import Iterable, Optional
from urllib.parse import urlsplit

_SCHEME_PREFIX = re.compile(r"^https?://")
_DEFAULT_PORTS = {"https": 443, "http": 80}


def _split(raw: str):
    candidate = (raw or "").strip()
    if not candidate:
        return None
    if "://" not in candidate:
        candidate = f"https://{candidate}"
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return None
    host = parts.netloc.rpartition("@")[2]
    if not parts.scheme or not host:
        return None
    return parts.scheme, host


def host_of(raw: str) -> Optional[str]:
    """Host (with port) of an origin URL or bare host, or None if unparsable."""
    split = _split(raw)
    return split[1] if split else None


def normalize_origin(raw: str) -> Optional[str]:
    """Turn an origin or site id into ``scheme://host[:port]``.

    The result is serialized the way browsers report ``event.origin``:
    lowercase scheme and host, default port dropped. Values without a
    scheme are assumed to be https. Returns None when the value has no
    usable host.
    """
    candidate = (raw or "").strip()
    if candidate and "://" not in candidate:
        candidate = f"https://{candidate}"
    if _split(candidate) is None:
        return None
    try:
        parts = urlsplit(candidate)
        port = parts.port
    except ValueError:
        return None
    scheme = parts.scheme.lower()
    host = parts.hostname
    if not host:
        return None
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"
    return f"{scheme}://{host}"


class OriginPolicy:
    """Allow-list of hosts permitted to start or complete a flow."""

    def __init__(self, entries: Iterable[str]):
        self.entries = tuple(entries)

    def is_allowed(self, candidate: str) -> bool:
        host = host_of(candidate)
        if not host:
            return False
        return any(self._matches(entry, host) for entry in self.entries)

    @staticmethod
    def _matches(entry: str, host: str) -> bool:
        if not entry:
            return False
        if entry.startswith("*."):
            suffix = entry[1:]  # '.example.com'
            return host.endswith(suffix) or host == suffix[1:]
        return host == entry or host == _SCHEME_PREFIX.sub("", entry).rstrip("/")
