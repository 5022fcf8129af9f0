"""Host normalization."""

from __future__ import annotations

_SCHEME_PREFIXES = ("http://", "https://")
_WWW_PREFIX = "www."


def normalize_host(host: str | None) -> str:
    """
    Strip a leading scheme and one leading 'www.' from a host string.

    'http://' and 'https://' are each removed at most once, in that order,
    and matched case-sensitively. Never raises.
    """
    if not host:
        return ""

    result = host
    for prefix in _SCHEME_PREFIXES:
        if result.startswith(prefix):
            result = result[len(prefix) :]
    if result.startswith(_WWW_PREFIX):
        result = result[len(_WWW_PREFIX) :]
    return result
