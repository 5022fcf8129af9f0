"""
Visit ledger state machine.

Combines the current page load's attribution with the persisted ledger.

Invariants:
- first_visit is written on the load where none exists, then never again
- second_visit is (over)written on every qualifying visit: any non-direct
  attribution, or direct traffic arriving from an external referrer
- Only external referrers are stored; internal navigation stores ""
- A ledger holding only second_visit reads as if first_visit equalled it;
  the repair is applied on read and never written back
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

from visit_attribution.core.entities import AttributionTuple, VisitLedger, VisitRecord
from visit_attribution.core.services.referrer import is_external_referrer


def format_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    text = moment.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def external_or_empty(referrer: str | None, current_domain: str) -> str:
    """Return the referrer if it is external, otherwise ""."""
    if referrer and is_external_referrer(referrer, current_domain):
        return referrer
    return ""


def should_update_second_visit(
    current: AttributionTuple,
    referrer: str | None,
    current_domain: str,
) -> bool:
    """Direct traffic without an external referrer is not a new touchpoint."""
    if not current.is_direct:
        return True
    return is_external_referrer(referrer, current_domain)


def make_record(
    current: AttributionTuple,
    referrer: str | None,
    current_domain: str,
    timestamp: str,
) -> VisitRecord:
    return VisitRecord(
        utm=current,
        referrer=external_or_empty(referrer, current_domain),
        timestamp=timestamp,
    )


def apply_visit(
    existing: VisitLedger,
    current: AttributionTuple,
    referrer: str | None,
    current_domain: str,
    timestamp: str,
) -> VisitLedger:
    """
    Apply one page load to the ledger.

    Args:
        existing: Ledger as persisted (not repaired)
        current: Attribution resolved for this page load
        referrer: Raw referrer string
        current_domain: Hostname of the current page
        timestamp: Formatted write time for new records

    Returns:
        The ledger to persist
    """
    ledger = existing
    record = make_record(current, referrer, current_domain, timestamp)

    if ledger.first_visit is None:
        ledger = replace(ledger, first_visit=record)

    if should_update_second_visit(current, referrer, current_domain):
        ledger = replace(ledger, second_visit=record)

    return ledger


def repair_on_read(ledger: VisitLedger) -> VisitLedger:
    """Fill a missing first_visit from second_visit for consumption."""
    if ledger.first_visit is None and ledger.second_visit is not None:
        return replace(ledger, first_visit=ledger.second_visit)
    return ledger
