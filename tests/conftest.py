from datetime import UTC, datetime

import pytest

from visit_attribution.adapters.clock import FixedClock
from visit_attribution.adapters.memory_store import InMemoryKeyValueStore
from visit_attribution.adapters.page_context import UrlPageContext
from visit_attribution.components.attribution import AttributionTracker

SITE = "example.com"


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 10, 19, 8, 15, 0, tzinfo=UTC))


@pytest.fixture
def store(clock):
    return InMemoryKeyValueStore(clock)


@pytest.fixture
def visit(store, clock):
    """
    Run one page load against the shared store.

    Returns the tracker so tests can inspect the ledger it wrote.
    """

    def _visit(query: str = "", referrer: str = "", hostname: str = SITE) -> AttributionTracker:
        page = UrlPageContext(query_string=query, hostname=hostname, referrer=referrer)
        tracker = AttributionTracker(page, store, clock=clock)
        tracker.record_visit()
        return tracker

    return _visit
