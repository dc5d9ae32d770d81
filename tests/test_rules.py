"""Tests for articlex.extractors.rules - phrase and class tables."""

from __future__ import annotations

import dataclasses

import pytest

from articlex.extractors.rules import DEFAULT_RULES, RuleTables


class TestNavigationText:
    @pytest.mark.parametrize("text", [
        "Read more",
        "Subscribe now to keep reading",
        "Next: The history of the lighthouse",
        "You might also like",
        "Читайте также: новости",
        "Lesen Sie auch",
        "Articles similaires",
        "关联 相关文章",
    ])
    def test_navigation_phrases_match(self, text):
        assert DEFAULT_RULES.is_navigation_text(text), f"Expected nav match: {text!r}"

    @pytest.mark.parametrize("text", [
        "Intro.",
        "The tide came in slowly over the rocks.",
        "",
        "   ",
    ])
    def test_prose_does_not_match(self, text):
        assert not DEFAULT_RULES.is_navigation_text(text), f"Unexpected nav match: {text!r}"

    def test_contains_is_case_insensitive(self):
        assert DEFAULT_RULES.matches_nav_contains("Please SIGN UP today")


class TestRuleTables:
    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_RULES.excluded_classes = ()  # type: ignore[misc]

    def test_extended_appends_entries(self):
        rules = DEFAULT_RULES.extended(
            excluded_classes=["Promo-Rail"],
            navigation_phrases=[r"more\s+from\s+the\s+shore"],
            paywall_phrases=["Members Only"],
            logo_patterns=["masthead"],
        )
        assert "promo-rail" in rules.excluded_classes
        assert "members only" in rules.paywall_phrases
        assert "masthead" in rules.logo_patterns
        assert rules.matches_nav_contains("More from the shore this week")

    def test_extended_leaves_defaults_untouched(self):
        DEFAULT_RULES.extended(excluded_classes=["promo-rail"])
        assert "promo-rail" not in DEFAULT_RULES.excluded_classes

    def test_default_instance_equivalent(self):
        fresh = RuleTables()
        assert fresh.excluded_classes == DEFAULT_RULES.excluded_classes
        assert len(fresh.nav_starts_with) == len(DEFAULT_RULES.nav_starts_with)
