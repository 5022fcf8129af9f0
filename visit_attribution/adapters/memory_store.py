"""
In-memory key-value store (KeyValueStorePort implementation).

Used for tests and embedding. Honors TTLs against an injected clock and can
be told to reject writes to exercise failure handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from visit_attribution.adapters.clock import SystemClock
from visit_attribution.core.ports.clock import ClockPort


@dataclass
class StoredEntry:
    value: str
    expires_at: datetime


class InMemoryKeyValueStore:
    """Dict-backed store with per-entry expiry."""

    def __init__(
        self,
        clock: ClockPort | None = None,
        *,
        fail_writes: bool = False,
    ) -> None:
        self._clock = clock or SystemClock()
        self._entries: dict[str, StoredEntry] = {}
        self.fail_writes = fail_writes
        self.writes: list[tuple[str, str, int]] = []

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock.now_utc():
            del self._entries[key]
            return None
        return entry.value or None

    def set(self, key: str, value: str, ttl_days: int) -> None:
        if self.fail_writes:
            raise OSError(f"Write rejected for key: {key}")
        self.writes.append((key, value, ttl_days))
        self._entries[key] = StoredEntry(
            value=value,
            expires_at=self._clock.now_utc() + timedelta(days=ttl_days),
        )

    def entry(self, key: str) -> StoredEntry | None:
        """Raw entry lookup, ignoring expiry."""
        return self._entries.get(key)

    def clear(self) -> None:
        self._entries.clear()
