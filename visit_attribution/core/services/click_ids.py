"""Ad-platform click identifier detection."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from visit_attribution.core.entities import AttributionTuple
from visit_attribution.core.services.config import DEFAULT_CONFIG, AttributionConfig

logger = logging.getLogger(__name__)


def detect_click_id(
    query_params: Mapping[str, str],
    config: AttributionConfig = DEFAULT_CONFIG,
) -> AttributionTuple | None:
    """
    Map the first present click identifier to its {source, medium}.

    Only presence matters; the parameter value is ignored.
    """
    for rule in config.click_ids:
        if rule.param in query_params:
            logger.debug("Click id %s -> %s/%s", rule.param, rule.source, rule.medium)
            return AttributionTuple(source=rule.source, medium=rule.medium)
    return None
