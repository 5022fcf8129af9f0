"""
Page context port.

Supplies the raw per-page-load inputs read from the host environment:
the query string, the current hostname and the referrer.
"""

from __future__ import annotations

from typing import Protocol


class PageContextPort(Protocol):
    """Read-only view of the current page load."""

    @property
    def query_string(self) -> str:
        """Raw query string, with or without the leading '?'."""
        ...

    @property
    def hostname(self) -> str:
        """Hostname of the current page (e.g. 'example.com')."""
        ...

    @property
    def referrer(self) -> str:
        """Referrer string, empty when absent."""
        ...
