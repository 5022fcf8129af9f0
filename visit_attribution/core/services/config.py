"""
Attribution configuration.

The built-in values reproduce the fixed known-source table, click-id rules
and persistence contract. A rules file can replace any of them; see
AttributionConfig.from_rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from visit_attribution.rules.models import Rules


@dataclass(frozen=True)
class KnownSource:
    """Known-source table entry: a normalized domain and its classification."""

    domain: str
    source: str
    medium: str


@dataclass(frozen=True)
class ClickIdRule:
    """Ad-platform click identifier and the source it implies."""

    param: str
    source: str
    medium: str


# Order matters: the subdomain scan returns the first matching entry.
KNOWN_SOURCES: tuple[KnownSource, ...] = (
    KnownSource("google.com", "google", "organic"),
    KnownSource("google.com.ua", "google", "organic"),
    KnownSource("bing.com", "bing", "organic"),
    KnownSource("yahoo.com", "yahoo", "organic"),
    KnownSource("duckduckgo.com", "duckduckgo", "organic"),
    KnownSource("instagram.com", "instagram", "social"),
    KnownSource("l.instagram.com", "instagram", "social"),
    KnownSource("facebook.com", "facebook", "social"),
    KnownSource("l.facebook.com", "facebook", "social"),
    KnownSource("m.facebook.com", "facebook", "social"),
    KnownSource("twitter.com", "twitter", "social"),
    KnownSource("linkedin.com", "linkedin", "social"),
)

CLICK_ID_RULES: tuple[ClickIdRule, ...] = (
    ClickIdRule("fbclid", "facebook", "social"),
    ClickIdRule("gclid", "google", "cpc"),
    ClickIdRule("dclid", "doubleclick", "display"),
    ClickIdRule("gad_source", "google", "cpc"),
)


@dataclass(frozen=True)
class AttributionConfig:
    """Attribution configuration."""

    known_sources: tuple[KnownSource, ...] = KNOWN_SOURCES
    click_ids: tuple[ClickIdRule, ...] = CLICK_ID_RULES

    # Referrer special cases
    instagram_lite_marker: str = "l.instagram.com"
    instagram_source: str = "instagram"
    instagram_medium: str = "social"
    google_search_marker: str = "google.com/search"
    google_search_source: str = "google"
    google_search_medium: str = "organic"
    referral_medium: str = "referral"

    # Persistence contract
    storage_key: str = "utm_data"
    ttl_days: int = 30
    cookie_path: str = "/"
    same_site: str = "Lax"

    def known_source_for(self, domain: str) -> KnownSource | None:
        """Exact lookup in the known-source table."""
        for entry in self.known_sources:
            if entry.domain == domain:
                return entry
        return None

    @classmethod
    def from_rules(cls, rules: Rules) -> AttributionConfig:
        """Build configuration from validated rules."""
        return cls(
            known_sources=tuple(
                KnownSource(s.domain, s.source, s.medium) for s in rules.known_sources
            ),
            click_ids=tuple(ClickIdRule(c.param, c.source, c.medium) for c in rules.click_ids),
            instagram_lite_marker=rules.referrer.instagram_lite_marker,
            google_search_marker=rules.referrer.google_search_marker,
            referral_medium=rules.referrer.referral_medium,
            storage_key=rules.storage.key,
            ttl_days=rules.storage.ttl_days,
            cookie_path=rules.storage.path,
            same_site=rules.storage.same_site,
        )


DEFAULT_CONFIG = AttributionConfig()
