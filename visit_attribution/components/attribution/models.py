"""
Attribution component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from visit_attribution.core.entities import AttributionTuple, VisitLedger

# --- Input Models ---


@dataclass(frozen=True)
class PageVisitInput:
    """A page load described by its URL and referrer."""

    url: str
    referrer: str = ""


# --- Output Models ---


@dataclass(frozen=True)
class ResolveOutput:
    """Output from resolving the current attribution."""

    attribution: AttributionTuple


@dataclass(frozen=True)
class LoadLedgerOutput:
    """Output from loading the ledger (repaired for reading)."""

    ledger: VisitLedger
    malformed: bool


@dataclass(frozen=True)
class RecordVisitOutput:
    """Output from recording a visit."""

    attribution: AttributionTuple
    ledger: VisitLedger
    persisted: bool
    reset_malformed: bool = False
