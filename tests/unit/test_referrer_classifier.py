"""
Tests for referrer classification.

Covers known-source matching (exact and subdomain), the Instagram lite and
Google search special cases, referral fallback and malformed referrers.
"""

from __future__ import annotations

import pytest

from visit_attribution.core.entities import NOT_SET
from visit_attribution.core.services.config import AttributionConfig, KnownSource
from visit_attribution.core.services.referrer import (
    classify_referrer,
    extract_referrer_host,
    is_external_referrer,
    match_known_source,
)

SITE = "example.com"


def source_medium(referrer: str, current_domain: str = SITE) -> tuple[str, str] | None:
    result = classify_referrer(referrer, current_domain)
    if result is None:
        return None
    return result.source, result.medium


# --- Known sources ---


class TestKnownSources:
    """Referrers from the known-source table."""

    @pytest.mark.parametrize(
        "referrer, expected",
        [
            ("https://www.google.com/", ("google", "organic")),
            ("https://www.google.com.ua/", ("google", "organic")),
            ("https://www.bing.com/search?q=test", ("bing", "organic")),
            ("https://search.yahoo.com/search?p=test", ("yahoo", "organic")),
            ("https://duckduckgo.com/", ("duckduckgo", "organic")),
            ("https://www.instagram.com/", ("instagram", "social")),
            ("https://www.facebook.com/", ("facebook", "social")),
            ("https://m.facebook.com/story.php", ("facebook", "social")),
            ("https://l.facebook.com/l.php?u=abc", ("facebook", "social")),
            ("https://twitter.com/user/status/1", ("twitter", "social")),
            ("https://www.linkedin.com/feed/", ("linkedin", "social")),
        ],
    )
    def test_known_source(self, referrer: str, expected: tuple[str, str]) -> None:
        assert source_medium(referrer) == expected

    def test_nested_subdomain(self) -> None:
        """Subdomains classify like the bare domain."""
        assert source_medium("https://news.blog.google.com/article") == ("google", "organic")

    def test_host_is_lowercased(self) -> None:
        assert source_medium("https://WWW.Bing.COM/") == ("bing", "organic")

    def test_scheme_less_referrer(self) -> None:
        """A referrer without a scheme is parsed as http."""
        assert source_medium("facebook.com/some/page") == ("facebook", "social")

    def test_lookalike_is_not_subdomain(self) -> None:
        """Suffix matching requires a dot boundary."""
        assert source_medium("https://notgoogle.com/") == ("notgoogle.com", "referral")

    def test_known_domain_as_prefix_is_referral(self) -> None:
        assert source_medium("https://google.com.evil.net/") == (
            "google.com.evil.net",
            "referral",
        )

    def test_other_fields_default(self) -> None:
        result = classify_referrer("https://www.bing.com/", SITE)

        assert result is not None
        assert result.campaign == NOT_SET
        assert result.term == NOT_SET
        assert result.content == NOT_SET


# --- Special cases ---


class TestSpecialCases:
    """Instagram lite links and Google search result URLs."""

    def test_instagram_lite(self) -> None:
        assert source_medium("https://l.instagram.com/?u=https%3A%2F%2Fshop.test") == (
            "instagram",
            "social",
        )

    def test_instagram_lite_without_parseable_host(self) -> None:
        """The marker wins before any URL parsing happens."""
        assert source_medium("[l.instagram.com") == ("instagram", "social")

    def test_google_search(self) -> None:
        assert source_medium("https://www.google.com/search?q=a") == ("google", "organic")

    def test_google_search_marker_on_other_host(self) -> None:
        """The Google search rule matches on the substring, before the table."""
        assert source_medium("https://proxy.net/google.com/search?q=a") == (
            "google",
            "organic",
        )


# --- Referral and no-signal cases ---


class TestReferralAndNoSignal:
    """Unknown hosts, internal navigation and malformed referrers."""

    def test_unknown_host_is_referral(self) -> None:
        assert source_medium("https://some-other-site.com/page") == (
            "some-other-site.com",
            "referral",
        )

    def test_referral_host_is_normalized(self) -> None:
        assert source_medium("https://www.reddit.com/r/python") == ("reddit.com", "referral")

    def test_empty_referrer(self) -> None:
        assert classify_referrer("", SITE) is None
        assert classify_referrer(None, SITE) is None

    def test_same_site_referrer(self) -> None:
        """Internal navigation carries no signal."""
        assert classify_referrer("https://example.com/some-page", SITE) is None

    def test_same_site_subdomain_referrer(self) -> None:
        """The same-site check is a substring match."""
        assert classify_referrer("https://blog.example.com/post", SITE) is None

    def test_bare_token_is_not_a_domain(self) -> None:
        assert classify_referrer("invalid-url", SITE) is None

    def test_unparseable_url_keeps_manual_host(self) -> None:
        """Whatever the manual fallback recovers is still classified."""
        assert source_medium("http://[broken/page") == ("[broken", "referral")

    def test_localhost_is_referral(self) -> None:
        """A dotless host is still an external referrer."""
        assert source_medium("http://localhost:3000/page") == ("localhost", "referral")

    def test_ipv6_literal_is_referral(self) -> None:
        assert source_medium("http://[2001:db8::1]/x") == ("2001:db8::1", "referral")

    def test_ipv4_literal_is_referral(self) -> None:
        assert source_medium("http://192.0.2.10/landing") == ("192.0.2.10", "referral")

    def test_invalid_port_falls_back_to_manual_extraction(self) -> None:
        assert source_medium("https://www.partner-site.org:99999/page") == (
            "partner-site.org",
            "referral",
        )


# --- Helpers ---


class TestExtractReferrerHost:
    """Host extraction used by the classifier."""

    def test_strips_path_query_and_www(self) -> None:
        assert extract_referrer_host("https://www.example.org/path?x=1#frag") == "example.org"

    def test_keeps_subdomain(self) -> None:
        assert extract_referrer_host("https://news.example.org/") == "news.example.org"

    def test_ignores_valid_port(self) -> None:
        assert extract_referrer_host("http://shop.example.org:8080/cart") == "shop.example.org"

    def test_manual_fallback(self) -> None:
        assert extract_referrer_host("HTTPS://WWW.partner.org:abc/x") == "partner.org"

    def test_empty(self) -> None:
        assert extract_referrer_host("") is None
        assert extract_referrer_host(None) is None

    def test_no_hostname(self) -> None:
        assert extract_referrer_host("http:///path-only") is None

    def test_placeholder_host(self) -> None:
        assert extract_referrer_host("invalid-url") is None
        assert extract_referrer_host("https://invalid-url/") is None

    def test_dotless_host(self) -> None:
        assert extract_referrer_host("http://intranet/") == "intranet"


class TestMatchKnownSource:
    """Direct lookups against the table."""

    def test_exact_match(self) -> None:
        result = match_known_source("l.instagram.com")

        assert result is not None
        assert result.source == "instagram"

    def test_no_match(self) -> None:
        assert match_known_source("example.org") is None

    def test_first_matching_entry_wins(self) -> None:
        config = AttributionConfig(
            known_sources=(
                KnownSource("example.org", "first", "referral"),
                KnownSource("shop.example.org", "second", "referral"),
            )
        )

        result = match_known_source("eu.shop.example.org", config)

        assert result is not None
        assert result.source == "first"

    def test_exact_match_beats_earlier_suffix(self) -> None:
        config = AttributionConfig(
            known_sources=(
                KnownSource("example.org", "first", "referral"),
                KnownSource("shop.example.org", "second", "referral"),
            )
        )

        result = match_known_source("shop.example.org", config)

        assert result is not None
        assert result.source == "second"


class TestIsExternalReferrer:
    def test_cases(self) -> None:
        assert is_external_referrer("https://www.facebook.com", SITE) is True
        assert is_external_referrer("https://example.com/page", SITE) is False
        assert is_external_referrer("", SITE) is False
        assert is_external_referrer(None, SITE) is False
