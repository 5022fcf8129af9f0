"""
Ledger payload codec.

The persisted payload is a JSON object:

    {"first_visit": {"utm": {"utm_source": ..., ...}, "referrer": "", "timestamp": "..."},
     "second_visit": {...}}

Absent slots are omitted. Reads are lenient about missing fields and extra
keys, but anything that is not a JSON object of that shape decodes to an
empty ledger flagged as malformed.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, ValidationError

from visit_attribution.core.entities import (
    DIRECT_SOURCE,
    EMPTY_LEDGER,
    NOT_SET,
    AttributionTuple,
    VisitLedger,
    VisitRecord,
)
from visit_attribution.core.errors import MalformedPersistedPayload

logger = logging.getLogger(__name__)


# --- Payload schema ---


class UtmPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    utm_source: str = DIRECT_SOURCE
    utm_medium: str = NOT_SET
    utm_campaign: str = NOT_SET
    utm_term: str = NOT_SET
    utm_content: str = NOT_SET


class VisitRecordPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    utm: UtmPayload | None = None
    referrer: str | None = ""
    timestamp: str | None = None


class LedgerPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first_visit: VisitRecordPayload | None = None
    second_visit: VisitRecordPayload | None = None


# --- Decoding ---


@dataclass(frozen=True)
class DecodedLedger:
    """Result of reading a persisted payload."""

    ledger: VisitLedger
    malformed: bool = False
    error: MalformedPersistedPayload | None = None


def _to_record(payload: VisitRecordPayload | None) -> VisitRecord | None:
    # A slot without attribution data counts as absent
    if payload is None or payload.utm is None:
        return None
    return VisitRecord(
        utm=AttributionTuple.from_dict(payload.utm.model_dump()),
        referrer=payload.referrer or "",
        timestamp=payload.timestamp,
    )


def parse_ledger(raw: str) -> VisitLedger:
    """
    Strictly parse a persisted payload.

    Raises:
        MalformedPersistedPayload: If raw is not a JSON object of ledger shape
    """
    text = raw.strip()
    if not text.startswith("{"):
        raise MalformedPersistedPayload(raw, "not a JSON object")

    try:
        payload = LedgerPayload.model_validate_json(text)
    except ValidationError as e:
        raise MalformedPersistedPayload(raw, f"{e.error_count()} validation error(s)") from e

    return VisitLedger(
        first_visit=_to_record(payload.first_visit),
        second_visit=_to_record(payload.second_visit),
    )


def decode_ledger(raw: str | None) -> DecodedLedger:
    """Decode a stored payload, degrading to an empty ledger on any error."""
    if not raw:
        return DecodedLedger(ledger=EMPTY_LEDGER)

    try:
        return DecodedLedger(ledger=parse_ledger(raw))
    except MalformedPersistedPayload as e:
        logger.warning("%s; treating ledger as empty", e)
        return DecodedLedger(ledger=EMPTY_LEDGER, malformed=True, error=e)


# --- Encoding ---


def encode_ledger(ledger: VisitLedger) -> str:
    """Serialize a ledger to compact JSON."""
    return json.dumps(ledger.to_dict(), separators=(",", ":"), ensure_ascii=False)
