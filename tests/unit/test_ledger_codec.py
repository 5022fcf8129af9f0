"""
Tests for the persisted ledger payload codec.
"""

from __future__ import annotations

import json

import pytest

from visit_attribution.core.entities import (
    EMPTY_LEDGER,
    NOT_SET,
    AttributionTuple,
    VisitLedger,
    VisitRecord,
)
from visit_attribution.core.errors import MalformedPersistedPayload
from visit_attribution.core.services.ledger_codec import decode_ledger, encode_ledger, parse_ledger

T1 = "2026-10-19T08:15:00.000Z"


class TestEncodeLedger:
    """Serialization to the wire format."""

    def test_empty(self) -> None:
        assert encode_ledger(EMPTY_LEDGER) == "{}"

    def test_full_shape(self) -> None:
        ledger = VisitLedger(
            first_visit=VisitRecord(
                utm=AttributionTuple("google", "organic"),
                referrer="https://www.google.com/",
                timestamp=T1,
            )
        )

        assert json.loads(encode_ledger(ledger)) == {
            "first_visit": {
                "utm": {
                    "utm_source": "google",
                    "utm_medium": "organic",
                    "utm_campaign": NOT_SET,
                    "utm_term": NOT_SET,
                    "utm_content": NOT_SET,
                },
                "referrer": "https://www.google.com/",
                "timestamp": T1,
            }
        }

    def test_compact_and_unicode(self) -> None:
        ledger = VisitLedger(
            first_visit=VisitRecord(utm=AttributionTuple("newsletter", "email", "весна"))
        )

        encoded = encode_ledger(ledger)

        assert " " not in encoded.replace("(not set)", "")
        assert "весна" in encoded

    def test_missing_timestamp_omitted(self) -> None:
        ledger = VisitLedger(second_visit=VisitRecord(utm=AttributionTuple()))

        assert "timestamp" not in json.loads(encode_ledger(ledger))["second_visit"]


class TestDecodeLedger:
    """Lenient reads with malformed detection."""

    def test_absent(self) -> None:
        decoded = decode_ledger(None)

        assert decoded.ledger == EMPTY_LEDGER
        assert decoded.malformed is False

    def test_empty_string(self) -> None:
        assert decode_ledger("").malformed is False

    def test_empty_object(self) -> None:
        decoded = decode_ledger("{}")

        assert decoded.ledger == EMPTY_LEDGER
        assert decoded.malformed is False

    def test_round_trip(self) -> None:
        ledger = VisitLedger(
            first_visit=VisitRecord(utm=AttributionTuple("google", "organic"), timestamp=T1),
            second_visit=VisitRecord(
                utm=AttributionTuple("adwords", "cpc", "brand"),
                referrer="https://partner.org/",
                timestamp=T1,
            ),
        )

        assert decode_ledger(encode_ledger(ledger)).ledger == ledger

    @pytest.mark.parametrize(
        "raw",
        [
            "invalid-json",
            "[1, 2, 3]",
            '"a string"',
            "{not json",
            '{"first_visit": "oops"}',
            '{"first_visit": {"utm": {"utm_source": 5}}}',
            '{"second_visit": {"utm": [], "referrer": ""}}',
        ],
    )
    def test_malformed(self, raw: str) -> None:
        decoded = decode_ledger(raw)

        assert decoded.ledger == EMPTY_LEDGER
        assert decoded.malformed is True
        assert isinstance(decoded.error, MalformedPersistedPayload)

    def test_missing_utm_fields_default(self) -> None:
        decoded = decode_ledger('{"first_visit": {"utm": {"utm_source": "bing"}}}')

        assert decoded.ledger.first_visit is not None
        assert decoded.ledger.first_visit.utm == AttributionTuple("bing")
        assert decoded.ledger.first_visit.referrer == ""
        assert decoded.ledger.first_visit.timestamp is None

    def test_slot_without_utm_is_absent(self) -> None:
        decoded = decode_ledger('{"first_visit": {"referrer": "x"}}')

        assert decoded.ledger == EMPTY_LEDGER
        assert decoded.malformed is False

    def test_null_referrer_reads_as_empty(self) -> None:
        decoded = decode_ledger('{"first_visit": {"utm": {}, "referrer": null}}')

        assert decoded.ledger.first_visit is not None
        assert decoded.ledger.first_visit.referrer == ""

    def test_extra_keys_ignored(self) -> None:
        decoded = decode_ledger('{"first_visit": {"utm": {}, "extra": 1}, "version": 2}')

        assert decoded.malformed is False
        assert decoded.ledger.first_visit is not None

    def test_surrounding_whitespace(self) -> None:
        assert decode_ledger('  {"second_visit": {"utm": {}}}  ').ledger.second_visit is not None


class TestParseLedger:
    def test_raises_on_non_object(self) -> None:
        with pytest.raises(MalformedPersistedPayload) as exc_info:
            parse_ledger("invalid-json")

        assert exc_info.value.raw == "invalid-json"
        assert "not a JSON object" in str(exc_info.value)
