"""
Attribution resolution.

Merges explicit campaign parameters, click identifiers and the referrer
into one AttributionTuple.

Precedence, lowest to highest:
1. Defaults (direct / (not set))
2. Referrer classification, only while the source is still direct and no
   explicit utm_source parameter is present
3. Click identifiers, only while the source is still direct
4. Explicit utm_* parameters, applied last, field by field

The Instagram lite referrer check runs before stages 2 and 3 and so
shadows both; explicit parameters still override it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from urllib.parse import parse_qsl

from visit_attribution.core.entities import (
    DEFAULT_ATTRIBUTION,
    UTM_FIELDS,
    UTM_SOURCE,
    AttributionTuple,
)
from visit_attribution.core.services.click_ids import detect_click_id
from visit_attribution.core.services.config import DEFAULT_CONFIG, AttributionConfig
from visit_attribution.core.services.referrer import classify_referrer

logger = logging.getLogger(__name__)


def parse_query_string(query_string: str | None) -> dict[str, str]:
    """
    Parse a raw query string into an ordered mapping.

    Blank values are kept; for repeated keys the last value wins.
    """
    if not query_string:
        return {}
    if query_string.startswith("?"):
        query_string = query_string[1:]

    params: dict[str, str] = {}
    for key, value in parse_qsl(query_string, keep_blank_values=True):
        params[key] = value
    return params


def explicit_utm_overrides(query_params: Mapping[str, str]) -> dict[str, str]:
    """Map present utm_* parameters to AttributionTuple field names."""
    return {attr: query_params[key] for key, attr in UTM_FIELDS if key in query_params}


def resolve_attribution(
    query_params: Mapping[str, str],
    referrer: str | None,
    current_domain: str,
    config: AttributionConfig = DEFAULT_CONFIG,
) -> AttributionTuple:
    """Resolve the attribution for one page load."""
    result = DEFAULT_ATTRIBUTION

    if referrer and config.instagram_lite_marker in referrer:
        result = result.with_source(config.instagram_source, config.instagram_medium)

    if result.is_direct:
        click = detect_click_id(query_params, config)
        if click is not None:
            result = result.with_source(click.source, click.medium)

    if result.is_direct and UTM_SOURCE not in query_params:
        guess = classify_referrer(referrer, current_domain, config)
        if guess is not None:
            result = result.with_source(guess.source, guess.medium)

    overrides = explicit_utm_overrides(query_params)
    if overrides:
        result = replace(result, **overrides)

    logger.debug("Resolved attribution %s", result)
    return result
