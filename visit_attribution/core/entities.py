"""
Core entities for visit attribution.

AttributionTuple is the canonical {source, medium, campaign, term, content}
result of resolving a single page load. VisitRecord and VisitLedger model the
persisted two-slot history.

Invariants:
- Every AttributionTuple field always holds a value (default or override)
- first_visit is written once and never replaced
- second_visit holds the most recent qualifying visit
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

DIRECT_SOURCE = "direct"
NOT_SET = "(not set)"

UTM_SOURCE = "utm_source"
UTM_MEDIUM = "utm_medium"
UTM_CAMPAIGN = "utm_campaign"
UTM_TERM = "utm_term"
UTM_CONTENT = "utm_content"

# Serialized key -> AttributionTuple attribute, in canonical order.
UTM_FIELDS: tuple[tuple[str, str], ...] = (
    (UTM_SOURCE, "source"),
    (UTM_MEDIUM, "medium"),
    (UTM_CAMPAIGN, "campaign"),
    (UTM_TERM, "term"),
    (UTM_CONTENT, "content"),
)

UTM_PARAMS: tuple[str, ...] = tuple(key for key, _ in UTM_FIELDS)


@dataclass(frozen=True)
class AttributionTuple:
    """Resolved traffic attribution for one page load."""

    source: str = DIRECT_SOURCE
    medium: str = NOT_SET
    campaign: str = NOT_SET
    term: str = NOT_SET
    content: str = NOT_SET

    @property
    def is_direct(self) -> bool:
        return self.source == DIRECT_SOURCE

    def with_source(self, source: str, medium: str) -> AttributionTuple:
        """Return a copy with source and medium replaced."""
        return replace(self, source=source, medium=medium)

    def to_dict(self) -> dict[str, str]:
        return {key: getattr(self, attr) for key, attr in UTM_FIELDS}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttributionTuple:
        """Build from utm_* keys, defaulting missing fields."""
        defaults = cls()
        values = {}
        for key, attr in UTM_FIELDS:
            value = data.get(key)
            values[attr] = value if isinstance(value, str) else getattr(defaults, attr)
        return cls(**values)


DEFAULT_ATTRIBUTION = AttributionTuple()


@dataclass(frozen=True)
class VisitRecord:
    """One ledger slot: attribution, external referrer and write time."""

    utm: AttributionTuple
    referrer: str = ""
    timestamp: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"utm": self.utm.to_dict(), "referrer": self.referrer}
        # Records written by older clients carry no timestamp
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data


@dataclass(frozen=True)
class VisitLedger:
    """Persisted visit history with a first and a most recent qualifying visit."""

    first_visit: VisitRecord | None = None
    second_visit: VisitRecord | None = None

    @property
    def is_empty(self) -> bool:
        return self.first_visit is None and self.second_visit is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.first_visit is not None:
            data["first_visit"] = self.first_visit.to_dict()
        if self.second_visit is not None:
            data["second_visit"] = self.second_visit.to_dict()
        return data


EMPTY_LEDGER = VisitLedger()
