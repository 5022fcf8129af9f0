"""
Attribution component - Visit attribution and ledger persistence.

Builds a tracker for one page load from a URL and referrer.

Shell Layer - handles I/O wiring.
"""

from __future__ import annotations

from visit_attribution.adapters.page_context import UrlPageContext
from visit_attribution.core.services.config import DEFAULT_CONFIG, AttributionConfig
from visit_attribution.core.services.ledger import repair_on_read

from ._impl import AttributionTracker, read_ledger
from .models import LoadLedgerOutput, PageVisitInput, RecordVisitOutput, ResolveOutput
from .ports import ClockPort, KeyValueStorePort


class _NoStore:
    """Store for resolve-only runs; holds nothing."""

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str, ttl_days: int) -> None:
        raise OSError("resolve-only run has no store")


def create_tracker(
    input_data: PageVisitInput,
    store: KeyValueStorePort,
    clock: ClockPort | None = None,
    config: AttributionConfig | None = None,
) -> AttributionTracker:
    """Create an AttributionTracker for a page URL."""
    page = UrlPageContext.from_url(input_data.url, input_data.referrer)
    return AttributionTracker(page, store, clock=clock, config=config)


# --- Shell Layer Functions ---


def run_resolve(
    input_data: PageVisitInput,
    config: AttributionConfig | None = None,
) -> ResolveOutput:
    """Resolve the attribution of a page load without touching storage."""
    tracker = create_tracker(input_data, _NoStore(), config=config)
    return ResolveOutput(attribution=tracker.resolve_current_attribution())


def run_record_visit(
    input_data: PageVisitInput,
    store: KeyValueStorePort,
    clock: ClockPort | None = None,
    config: AttributionConfig | None = None,
) -> RecordVisitOutput:
    """Record a page load into the store."""
    tracker = create_tracker(input_data, store, clock=clock, config=config)
    result = tracker.record()

    return RecordVisitOutput(
        attribution=result.attribution,
        ledger=result.ledger,
        persisted=result.persisted,
        reset_malformed=result.reset_malformed,
    )


def run_load_ledger(
    store: KeyValueStorePort,
    config: AttributionConfig | None = None,
) -> LoadLedgerOutput:
    """Load the stored ledger, repaired for reading."""
    decoded = read_ledger(store, (config or DEFAULT_CONFIG).storage_key)
    return LoadLedgerOutput(
        ledger=repair_on_read(decoded.ledger),
        malformed=decoded.malformed,
    )
