"""
AttributionTracker - per-page-load attribution and ledger persistence.

Reads the page through its ports, resolves the attribution, applies the
visit to the persisted ledger and writes it back.

Key behaviors:
- Nothing raises to the caller; failures degrade to direct attribution
  or an empty ledger
- A malformed stored payload reads as an empty ledger; the next write
  resets the slot to {} before the new ledger is written
- A rejected write resets the in-memory ledger to empty for the session
- load_ledger repairs a missing first_visit for reading only
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from visit_attribution.adapters.clock import SystemClock
from visit_attribution.core.entities import EMPTY_LEDGER, AttributionTuple, VisitLedger
from visit_attribution.core.errors import StorageWriteFailure
from visit_attribution.core.services.config import DEFAULT_CONFIG, AttributionConfig
from visit_attribution.core.services.ledger import apply_visit, format_timestamp, repair_on_read
from visit_attribution.core.services.ledger_codec import (
    DecodedLedger,
    decode_ledger,
    encode_ledger,
)
from visit_attribution.core.services.resolver import parse_query_string, resolve_attribution

from .ports import ClockPort, KeyValueStorePort, PageContextPort

module_logger = logging.getLogger(__name__)

EMPTY_PAYLOAD = "{}"


def read_ledger(
    store: KeyValueStorePort,
    key: str,
    logger: logging.Logger = module_logger,
) -> DecodedLedger:
    """Decode the payload stored under key, without repair. Never raises."""
    try:
        raw = store.get(key)
    except Exception:
        logger.exception("Failed to read %s", key)
        return DecodedLedger(ledger=EMPTY_LEDGER)
    return decode_ledger(raw)


@dataclass(frozen=True)
class RecordResult:
    """Outcome of one record() call."""

    attribution: AttributionTuple
    ledger: VisitLedger
    persisted: bool
    reset_malformed: bool


class AttributionTracker:
    """
    Attribution tracker for one page load.

    Holds the in-memory ledger for the session; everything else is read
    from the injected ports on each call.
    """

    def __init__(
        self,
        page: PageContextPort,
        store: KeyValueStorePort,
        *,
        clock: ClockPort | None = None,
        config: AttributionConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._page = page
        self._store = store
        self._clock = clock or SystemClock()
        self._config = config or DEFAULT_CONFIG
        self._logger = logger or module_logger
        self._ledger: VisitLedger = EMPTY_LEDGER

    @property
    def ledger(self) -> VisitLedger:
        """Ledger as last written (or reset) during this session."""
        return self._ledger

    # --- Public operations ---

    def resolve_current_attribution(self) -> AttributionTuple:
        """Resolve the attribution of the current page load."""
        query_params = parse_query_string(self._page.query_string)
        attribution = resolve_attribution(
            query_params,
            self._page.referrer,
            self._page.hostname,
            self._config,
        )
        self._logger.debug("Current attribution: %s", attribution)
        return attribution

    def load_ledger(self) -> VisitLedger:
        """Load the persisted ledger, repaired for reading."""
        return repair_on_read(self.read_stored().ledger)

    def record_visit(self) -> None:
        """Resolve, apply and persist the current visit. Never raises."""
        self.record()

    def record(self) -> RecordResult:
        """Like record_visit, but reports what happened."""
        attribution = self.resolve_current_attribution()
        decoded = self.read_stored()

        ledger = apply_visit(
            decoded.ledger,
            attribution,
            self._page.referrer,
            self._page.hostname,
            format_timestamp(self._clock.now_utc()),
        )

        try:
            if decoded.malformed:
                self._logger.info("Resetting malformed ledger payload")
                self._write(EMPTY_PAYLOAD)
            self._write(encode_ledger(ledger))
        except StorageWriteFailure as e:
            self._logger.error("%s; resetting ledger for this session", e, exc_info=e.__cause__)
            self._ledger = EMPTY_LEDGER
            self._reset_store()
            return RecordResult(attribution, EMPTY_LEDGER, False, decoded.malformed)

        self._ledger = ledger
        return RecordResult(attribution, ledger, True, decoded.malformed)

    # --- Store access ---

    def read_stored(self) -> DecodedLedger:
        """Decode the stored payload without repair; read errors give an empty ledger."""
        return read_ledger(self._store, self._config.storage_key, self._logger)

    def _write(self, value: str) -> None:
        """
        Raises:
            StorageWriteFailure: If the store rejects the write
        """
        try:
            self._store.set(self._config.storage_key, value, self._config.ttl_days)
        except Exception as e:
            raise StorageWriteFailure(self._config.storage_key) from e

    def _reset_store(self) -> None:
        try:
            self._write(EMPTY_PAYLOAD)
        except StorageWriteFailure as e:
            self._logger.warning("Could not reset %s: %s", e.key, e.__cause__)
