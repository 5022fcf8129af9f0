"""
Referrer classification.

Turns a raw referrer string and the current domain into an optional
{source, medium} guess.

Key behaviors:
- Same-site and empty referrers carry no signal (None)
- Instagram lite links and Google search result URLs are special-cased
- Known sources match on the bare domain or any true subdomain
- Unrecognized external hosts become referral traffic
- Unparseable referrers fall back to manual domain extraction; if that
  also fails the result is None, never an explicit "direct"
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from visit_attribution.core.entities import AttributionTuple
from visit_attribution.core.errors import MalformedReferrerUrl
from visit_attribution.core.services.config import DEFAULT_CONFIG, AttributionConfig
from visit_attribution.core.services.host import normalize_host

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[a-zA-Z]+://")
_MANUAL_PREFIX_RE = re.compile(r"^(https?://)?(www\.)?", re.IGNORECASE)
_MANUAL_TERMINATORS_RE = re.compile(r"[/?#:]")
# Placeholder host that is never recorded as referral traffic
UNPARSEABLE_HOST = "invalid-url"


def is_external_referrer(referrer: str | None, current_domain: str) -> bool:
    """True when referrer is non-empty and does not mention current_domain."""
    if not referrer:
        return False
    return current_domain not in referrer


def _parse_hostname(referrer: str) -> str:
    """
    Strictly parse referrer as a URL and return its normalized hostname.

    Raises:
        MalformedReferrerUrl: If the URL cannot be parsed or has no hostname
    """
    url = referrer if _SCHEME_RE.match(referrer) else f"http://{referrer}"
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        # Accessing port validates it
        _ = parts.port
    except ValueError as e:
        raise MalformedReferrerUrl(referrer, str(e)) from e

    if not hostname:
        raise MalformedReferrerUrl(referrer, "no hostname")
    return normalize_host(hostname)


def _extract_manually(referrer: str) -> str:
    """Best-effort domain extraction for referrers that fail URL parsing."""
    stripped = _MANUAL_PREFIX_RE.sub("", referrer, count=1)
    return _MANUAL_TERMINATORS_RE.split(stripped, maxsplit=1)[0]


def extract_referrer_host(referrer: str | None) -> str | None:
    """
    Extract the normalized host of a referrer.

    Returns None when no host can be recovered, or the host is the
    "invalid-url" placeholder.
    """
    if not referrer:
        return None

    try:
        host = _parse_hostname(referrer)
    except MalformedReferrerUrl as e:
        logger.debug("%s; extracting domain manually", e)
        host = _extract_manually(referrer)

    if not host or host == UNPARSEABLE_HOST:
        logger.debug("No usable domain in referrer %r", referrer)
        return None
    return host


def match_known_source(
    host: str,
    config: AttributionConfig = DEFAULT_CONFIG,
) -> AttributionTuple | None:
    """
    Look a normalized host up in the known-source table.

    Exact matches win; otherwise the first entry whose domain equals the
    host or is a dot-separated suffix of it.
    """
    entry = config.known_source_for(host)
    if entry is None:
        for candidate in config.known_sources:
            if host == candidate.domain or host.endswith("." + candidate.domain):
                entry = candidate
                break

    if entry is None:
        return None
    return AttributionTuple(source=entry.source, medium=entry.medium)


def classify_referrer(
    referrer: str | None,
    current_domain: str,
    config: AttributionConfig = DEFAULT_CONFIG,
) -> AttributionTuple | None:
    """
    Classify a referrer into a {source, medium} attribution.

    Returns None for internal navigation, empty referrers and referrers
    from which no domain can be recovered.
    """
    if not referrer or current_domain in referrer:
        return None

    if config.instagram_lite_marker in referrer:
        logger.debug("Instagram lite referrer detected")
        return AttributionTuple(
            source=config.instagram_source, medium=config.instagram_medium
        )

    host = extract_referrer_host(referrer)
    if host is None:
        return None

    if config.google_search_marker in referrer:
        logger.debug("Google search referrer detected")
        return AttributionTuple(
            source=config.google_search_source, medium=config.google_search_medium
        )

    known = match_known_source(host, config)
    if known is not None:
        logger.debug("Referrer host %s -> %s/%s", host, known.source, known.medium)
        return known

    logger.debug("Referrer host %s classified as referral", host)
    return AttributionTuple(source=host, medium=config.referral_medium)
