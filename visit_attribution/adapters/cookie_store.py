"""
Cookie-backed key-value store (KeyValueStorePort implementation).

Reads values from an incoming Cookie header and renders Set-Cookie headers
for values written during the request.

Key behaviors:
- Values are percent-encoded on write so JSON payloads survive the cookie
  grammar; bare JSON values from other writers are read as-is
- The incoming header is split on ";" by hand, so one malformed cookie
  never hides the ones after it
- Written cookies carry Path, Max-Age, Expires and SameSite attributes
- Later reads in the same request see earlier writes
"""

from __future__ import annotations

from datetime import timedelta
from email.utils import format_datetime
from http.cookies import SimpleCookie
from urllib.parse import quote, unquote

from visit_attribution.adapters.clock import SystemClock
from visit_attribution.core.ports.clock import ClockPort
from visit_attribution.core.services.config import DEFAULT_CONFIG, AttributionConfig

SECONDS_PER_DAY = 24 * 60 * 60


def parse_cookie_header(cookie_header: str | None) -> dict[str, str]:
    """
    Split a Cookie header into raw name -> value pairs.

    Values are returned undecoded. The first occurrence of a name wins, as
    browsers send the most specific path first.
    """
    values: dict[str, str] = {}
    for pair in (cookie_header or "").split(";"):
        name, sep, value = pair.strip().partition("=")
        if not sep or not name:
            continue
        values.setdefault(name.strip(), value.strip())
    return values


class CookieJarStore:
    """Cookie jar for a single request/response cycle."""

    def __init__(
        self,
        cookie_header: str = "",
        *,
        path: str = "/",
        same_site: str = "Lax",
        clock: ClockPort | None = None,
    ) -> None:
        self._path = path
        self._same_site = same_site
        self._clock = clock or SystemClock()

        self._values: dict[str, str] = parse_cookie_header(cookie_header)
        self._pending: SimpleCookie = SimpleCookie()

    @classmethod
    def from_config(
        cls,
        cookie_header: str = "",
        config: AttributionConfig = DEFAULT_CONFIG,
        clock: ClockPort | None = None,
    ) -> CookieJarStore:
        return cls(
            cookie_header,
            path=config.cookie_path,
            same_site=config.same_site,
            clock=clock,
        )

    def get(self, key: str) -> str | None:
        raw = self._values.get(key)
        if not raw:
            return None
        if raw.startswith("{"):
            return raw
        return unquote(raw)

    def set(self, key: str, value: str, ttl_days: int) -> None:
        encoded = quote(value, safe="")
        expires_at = self._clock.now_utc() + timedelta(days=ttl_days)

        self._pending[key] = encoded
        morsel = self._pending[key]
        morsel["path"] = self._path
        morsel["max-age"] = str(ttl_days * SECONDS_PER_DAY)
        morsel["expires"] = format_datetime(expires_at, usegmt=True)
        morsel["samesite"] = self._same_site

        self._values[key] = encoded

    def set_cookie_headers(self) -> list[str]:
        """Set-Cookie header values for every cookie written so far."""
        return [morsel.OutputString() for morsel in self._pending.values()]
