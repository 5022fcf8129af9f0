"""
Attribution component - Traffic source attribution and visit ledger.
"""

from ._impl import AttributionTracker, RecordResult
from .component import (
    create_tracker,
    run_load_ledger,
    run_record_visit,
    run_resolve,
)
from .models import (
    LoadLedgerOutput,
    PageVisitInput,
    RecordVisitOutput,
    ResolveOutput,
)
from .ports import ClockPort, KeyValueStorePort, PageContextPort

__all__ = [
    # Entry points
    "run_resolve",
    "run_record_visit",
    "run_load_ledger",
    "create_tracker",
    # Input models
    "PageVisitInput",
    # Output models
    "ResolveOutput",
    "LoadLedgerOutput",
    "RecordVisitOutput",
    # Ports
    "PageContextPort",
    "KeyValueStorePort",
    "ClockPort",
    # Tracker
    "AttributionTracker",
    "RecordResult",
]
