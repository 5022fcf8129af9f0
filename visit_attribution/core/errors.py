"""
Attribution error taxonomy.

None of these reach the caller of a page-load operation: each one is caught
at the boundary that can degrade it to a safe default (direct attribution or
an empty ledger). RulesError is the exception, raised at configuration time.
"""

from __future__ import annotations


class AttributionError(Exception):
    """Base class for attribution errors."""


class MalformedReferrerUrl(AttributionError):
    """Raised when a referrer string cannot be parsed as a URL."""

    def __init__(self, referrer: str, reason: str = "") -> None:
        self.referrer = referrer
        self.reason = reason
        message = f"Malformed referrer URL: {referrer!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class MalformedPersistedPayload(AttributionError):
    """Raised when the stored ledger payload is not a valid ledger object."""

    def __init__(self, raw: str, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"Malformed persisted payload: {reason}")


class StorageWriteFailure(AttributionError):
    """Raised when the key-value store rejects a write."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Failed to write key: {key}")


class RulesError(ValueError):
    """Raised when the rules file is missing or invalid."""
