"""
JSON file key-value store (KeyValueStorePort implementation).

Persists entries with an absolute expiry in a single JSON document, for the
CLI and local runs.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from visit_attribution.adapters.clock import SystemClock
from visit_attribution.core.ports.clock import ClockPort

logger = logging.getLogger(__name__)


class JsonFileStore:
    """
    File-backed store.

    Document layout: {key: {"value": str, "expires_at": ISO-8601}}.
    An unreadable document reads as empty and is replaced on the next write.
    """

    def __init__(self, path: str | Path, clock: ClockPort | None = None) -> None:
        self.path = Path(path)
        self._clock = clock or SystemClock()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store %s: not a JSON object", self.path)
            return {}
        return data

    def get(self, key: str) -> str | None:
        entry = self._load().get(key)
        if not isinstance(entry, dict):
            return None

        value = entry.get("value")
        try:
            expires_at = datetime.fromisoformat(entry["expires_at"])
        except (KeyError, TypeError, ValueError):
            return None

        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        if expires_at <= self._clock.now_utc():
            return None
        if not isinstance(value, str) or not value:
            return None
        return value

    def set(self, key: str, value: str, ttl_days: int) -> None:
        data = self._load()
        expires_at = self._clock.now_utc() + timedelta(days=ttl_days)
        data[key] = {"value": value, "expires_at": expires_at.isoformat()}

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        finally:
            # Already gone after a successful replace
            tmp_path.unlink(missing_ok=True)
