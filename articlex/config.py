"""Extractor configuration and YAML rule profiles.

Profile layout::

    default:
      max_ancestor_hops: 50
      rules:
        extra_excluded_classes: [promo-rail]
    domains:
      example.com:
        rules:
          extra_navigation_phrases: ["more from example"]

The ``domains`` block whose key best matches the page host is merged over
``default``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml

from articlex.extractors.rules import DEFAULT_RULES, RuleTables

_RULE_KEYS: dict[str, str] = {
    "extra_excluded_classes": "excluded_classes",
    "extra_navigation_phrases": "navigation_phrases",
    "extra_paywall_phrases": "paywall_phrases",
    "extra_logo_patterns": "logo_patterns",
}
_INT_KEYS: tuple[str, ...] = (
    "max_ancestor_hops",
    "max_fallback_elements",
    "max_featured_candidates",
    "date_scan_limit",
)


class RuleConfigError(ValueError):
    """Raised for malformed YAML rule profiles."""


@dataclass(frozen=True)
class ExtractorConfig:
    max_ancestor_hops: int = 50
    max_fallback_elements: int = 100
    max_featured_candidates: int = 10
    date_scan_limit: int = 20
    rules: RuleTables = field(default=DEFAULT_RULES)

    @classmethod
    def from_yaml(cls, path: str | Path, url: str = "") -> ExtractorConfig:
        """Build a config from the profile at *path*, merged for *url*."""
        return config_from_settings(load_rules_profile(path, url))


def load_rules_profile(path: str | Path, url: str = "") -> dict[str, Any]:
    """Load YAML profile and return merged settings for the given URL."""
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise RuleConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise RuleConfigError(f"{path}: top level must be a mapping")

    default = data.get("default", {}) or {}
    domains = data.get("domains", {}) or {}
    if not isinstance(default, dict) or not isinstance(domains, dict):
        raise RuleConfigError(f"{path}: 'default' and 'domains' must be mappings")

    netloc = urlparse(url).netloc.lower()
    best_key = ""
    best_cfg: dict[str, Any] = {}
    for key, cfg in domains.items():
        if not isinstance(key, str) or not isinstance(cfg, dict):
            continue
        key_lower = key.lower()
        if (netloc == key_lower or netloc.endswith("." + key_lower)) and (
            len(key_lower) > len(best_key)
        ):
            best_key = key_lower
            best_cfg = cfg

    merged: dict[str, Any] = dict(default)
    for key, value in best_cfg.items():
        if key == "rules" and isinstance(value, dict) and isinstance(merged.get("rules"), dict):
            rules = dict(merged["rules"])
            for rule_key, extra in value.items():
                base = rules.get(rule_key) or []
                extra = extra or []
                if not isinstance(base, list) or not isinstance(extra, list):
                    raise RuleConfigError(f"rules.{rule_key} must be a list of strings")
                rules[rule_key] = base + extra
            merged["rules"] = rules
        else:
            merged[key] = value
    return merged


def _string_list(key: str, value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise RuleConfigError(f"rules.{key} must be a list of strings")
    return value


def config_from_settings(settings: dict[str, Any]) -> ExtractorConfig:
    """Validate merged profile *settings* and build an :class:`ExtractorConfig`."""
    kwargs: dict[str, Any] = {}
    for key in _INT_KEYS:
        if key not in settings:
            continue
        value = settings[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise RuleConfigError(f"{key} must be a positive integer, got {value!r}")
        kwargs[key] = value

    raw_rules = settings.get("rules") or {}
    if not isinstance(raw_rules, dict):
        raise RuleConfigError("rules must be a mapping")
    unknown = set(raw_rules) - set(_RULE_KEYS)
    if unknown:
        raise RuleConfigError(f"Unknown rule keys: {', '.join(sorted(unknown))}")

    extras = {_RULE_KEYS[k]: _string_list(k, v) for k, v in raw_rules.items()}
    for pattern in extras.get("navigation_phrases", []):
        try:
            re.compile(pattern)
        except re.error as exc:
            raise RuleConfigError(f"Invalid navigation phrase {pattern!r}: {exc}") from exc

    if extras:
        kwargs["rules"] = DEFAULT_RULES.extended(**extras)
    return ExtractorConfig(**kwargs)
