"""Extraction sub-package: locator, exclusion filter, assembler and metadata."""

from .assembler import ContentAssembler
from .dedup import deduplicate
from .exclusion import ExclusionFilter
from .locator import locate_main_content, score_container
from .metadata import extract_metadata, parse_date
from .rules import DEFAULT_RULES, RuleTables

__all__ = [
    "ContentAssembler",
    "DEFAULT_RULES",
    "ExclusionFilter",
    "RuleTables",
    "deduplicate",
    "extract_metadata",
    "locate_main_content",
    "parse_date",
    "score_container",
]
