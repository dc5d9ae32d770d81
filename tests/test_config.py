"""Tests for articlex.config - limits and YAML rule profiles."""

from __future__ import annotations

import dataclasses

import pytest

from articlex.config import (
    ExtractorConfig,
    RuleConfigError,
    config_from_settings,
    load_rules_profile,
)
from articlex.extractors.rules import DEFAULT_RULES

_PROFILE = """\
default:
  max_ancestor_hops: 30
  rules:
    extra_excluded_classes: [Promo-Rail]
domains:
  example.com:
    date_scan_limit: 5
    rules:
      extra_excluded_classes: [sponsor-box]
      extra_navigation_phrases: ["more from example"]
  news.example.com:
    max_fallback_elements: 40
"""


@pytest.fixture
def profile(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(_PROFILE, encoding="utf-8")
    return path


class TestDefaults:
    def test_default_limits(self):
        cfg = ExtractorConfig()
        assert cfg.max_ancestor_hops == 50
        assert cfg.max_fallback_elements == 100
        assert cfg.max_featured_candidates == 10
        assert cfg.date_scan_limit == 20
        assert cfg.rules is DEFAULT_RULES

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ExtractorConfig().max_ancestor_hops = 3


class TestLoadProfile:
    def test_default_only(self, profile):
        settings = load_rules_profile(profile, "https://other.org/post")
        assert settings == {
            "max_ancestor_hops": 30,
            "rules": {"extra_excluded_classes": ["Promo-Rail"]},
        }

    def test_domain_merge_extends_rule_lists(self, profile):
        settings = load_rules_profile(profile, "https://www.example.com/a")
        assert settings["date_scan_limit"] == 5
        assert settings["rules"]["extra_excluded_classes"] == ["Promo-Rail", "sponsor-box"]
        assert settings["rules"]["extra_navigation_phrases"] == ["more from example"]

    def test_most_specific_domain_wins(self, profile):
        settings = load_rules_profile(profile, "https://news.example.com/a")
        assert settings["max_fallback_elements"] == 40
        assert "date_scan_limit" not in settings

    @pytest.mark.parametrize("value", ["teaser", "5"])
    def test_domain_rule_value_must_be_list(self, tmp_path, value):
        path = tmp_path / "rules.yaml"
        path.write_text(
            "default:\n  rules:\n    extra_excluded_classes: [promo]\n"
            f"domains:\n  example.com:\n    rules:\n      extra_excluded_classes: {value}\n",
            encoding="utf-8",
        )
        with pytest.raises(RuleConfigError, match="extra_excluded_classes"):
            load_rules_profile(path, "https://example.com/a")

    def test_domain_string_without_default_rules(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(
            "domains:\n  example.com:\n    rules:\n      extra_excluded_classes: teaser\n",
            encoding="utf-8",
        )
        with pytest.raises(RuleConfigError):
            ExtractorConfig.from_yaml(path, "https://example.com/a")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_rules_profile(path) == {}

    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("default: [unclosed", encoding="utf-8")
        with pytest.raises(RuleConfigError, match="Invalid YAML"):
            load_rules_profile(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(RuleConfigError):
            load_rules_profile(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_rules_profile(tmp_path / "nope.yaml")


class TestConfigFromSettings:
    def test_builds_extended_rules(self, profile):
        cfg = ExtractorConfig.from_yaml(profile, "https://example.com/a")
        assert cfg.max_ancestor_hops == 30
        assert cfg.date_scan_limit == 5
        assert "promo-rail" in cfg.rules.excluded_classes
        assert "sponsor-box" in cfg.rules.excluded_classes
        assert cfg.rules.is_navigation_text("More from Example this week")
        assert not DEFAULT_RULES.is_navigation_text("More from Example this week")

    def test_no_rules_keeps_defaults(self):
        cfg = config_from_settings({"max_fallback_elements": 7})
        assert cfg.max_fallback_elements == 7
        assert cfg.rules is DEFAULT_RULES

    def test_unknown_rule_key(self):
        with pytest.raises(RuleConfigError, match="Unknown rule keys: extra_colors"):
            config_from_settings({"rules": {"extra_colors": ["red"]}})

    @pytest.mark.parametrize("value", [0, -3, "10", True, 2.5])
    def test_limits_must_be_positive_ints(self, value):
        with pytest.raises(RuleConfigError):
            config_from_settings({"max_ancestor_hops": value})

    def test_rule_lists_must_hold_strings(self):
        with pytest.raises(RuleConfigError):
            config_from_settings({"rules": {"extra_excluded_classes": "promo"}})
        with pytest.raises(RuleConfigError):
            config_from_settings({"rules": {"extra_logo_patterns": [1, 2]}})

    def test_invalid_navigation_regex(self):
        with pytest.raises(RuleConfigError, match="Invalid navigation phrase"):
            config_from_settings({"rules": {"extra_navigation_phrases": ["read (more"]}})

    def test_rules_must_be_mapping(self):
        with pytest.raises(RuleConfigError):
            config_from_settings({"rules": ["promo"]})
