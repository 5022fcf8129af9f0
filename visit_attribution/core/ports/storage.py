"""
Key-value store port.

Protocol-based interface for the persisted ledger slot.
Implementations: in-memory, cookie header, JSON file.

Invariants:
- A single string value per key; the last write wins
- Entries expire ttl_days after their last write
"""

from __future__ import annotations

from typing import Protocol


class KeyValueStorePort(Protocol):
    """
    Persistent key-value store interface.

    Mirrors a browser cookie jar: string values with a time-to-live.
    """

    def get(self, key: str) -> str | None:
        """
        Read the value stored under key.

        Returns:
            The stored string, or None if the key is absent, empty or expired
        """
        ...

    def set(self, key: str, value: str, ttl_days: int) -> None:
        """
        Store value under key for ttl_days.

        Args:
            key: Entry name
            value: Serialized value
            ttl_days: Lifetime in days from now

        Raises:
            Exception: Any failure of the underlying store propagates
        """
        ...
