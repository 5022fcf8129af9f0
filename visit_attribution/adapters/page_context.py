"""Page context built from a full page URL and a referrer string."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True)
class UrlPageContext:
    """Implements PageContextPort for a known page URL."""

    query_string: str = ""
    hostname: str = ""
    referrer: str = ""

    @classmethod
    def from_url(cls, url: str, referrer: str | None = None) -> UrlPageContext:
        """
        Split a page URL into hostname and query string.

        A URL without a scheme is read as http.
        """
        if "://" not in url:
            url = f"http://{url}"
        parts = urlsplit(url)
        return cls(
            query_string=parts.query,
            hostname=parts.hostname or "",
            referrer=referrer or "",
        )
