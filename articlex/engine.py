"""Extraction pipeline: locate → metadata → assemble → dedup.

Pure HTML in, :class:`~articlex.items.ExtractionResult` out.  Neither public
function raises; any failure is reported through ``error``/``errorStack``
with the raw document ``<title>`` kept as the title.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from bs4 import BeautifulSoup, Tag

from articlex.config import ExtractorConfig
from articlex.extractors.assembler import ContentAssembler
from articlex.extractors.dedup import Deduplicator
from articlex.extractors.dom import Document
from articlex.extractors.exclusion import ExclusionFilter
from articlex.extractors.locator import locate_main_content
from articlex.extractors.metadata import extract_metadata, standfirst_html
from articlex.items import ContentItem, ExtractionResult, Image, Subtitle

logger = logging.getLogger(__name__)


def _raw_title(soup: BeautifulSoup | Tag | None) -> str:
    try:
        title = soup.find("title") if soup is not None else None
        return title.get_text().strip() if title is not None else ""
    except Exception as exc:
        logger.debug("Raw title lookup failed: %s", exc)
        return ""


def _run(
    soup: BeautifulSoup | Tag,
    base_url: str,
    debug: bool,
    config: ExtractorConfig,
) -> ExtractionResult:
    rules = config.rules
    doc = Document(soup)
    exclusion = ExclusionFilter(rules, config)

    located = locate_main_content(doc, exclusion, rules)
    container = located.node

    meta = extract_metadata(
        doc,
        container,
        base_url,
        rules,
        date_scan_limit=config.date_scan_limit,
        max_featured_candidates=config.max_featured_candidates,
    )

    dedup = Deduplicator(meta.title)
    lead: list[ContentItem] = []
    if meta.featured_image:
        dedup.keep_image(meta.featured_image)
        lead.append(Image(src=meta.featured_image, alt=meta.title, is_featured=True))
    if meta.standfirst:
        lead.append(Subtitle(text=meta.standfirst, html=standfirst_html(meta.standfirst)))

    assembler = ContentAssembler(doc, meta, exclusion, dedup, config, base_url)
    assembled = assembler.assemble(container)

    final = Deduplicator(meta.title).run([*lead, *assembled.items])

    debug_info: dict[str, Any] | None = None
    if debug:
        stats = assembled.stats
        final_types: dict[str, int] = {}
        for item in final.items:
            final_types[item.type] = final_types.get(item.type, 0) + 1
        debug_info = {
            "mainContentTag": container.name if container is not None else None,
            "mainContentScore": located.score,
            "locatorStrategy": located.strategy,
            "fallback": stats.fallback,
            "contentTypes": dict(stats.content_types),
            "processedCount": stats.processed,
            "skippedCount": stats.skipped,
            "skipReasons": dict(stats.skip_reasons),
            "finalImageCount": final_types.get("image", 0),
            "duplicateHeadingsRemoved": final.headings_removed,
            "duplicateImagesRemoved": final.images_removed,
            "finalContentTypes": final_types,
        }

    return ExtractionResult(
        title=meta.title,
        author=meta.author,
        publish_date=meta.publish_date,
        content=final.items,
        debug_info=debug_info,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_article(
    soup: BeautifulSoup | Tag,
    base_url: str = "",
    debug: bool = False,
    config: ExtractorConfig | None = None,
) -> ExtractionResult:
    """Extract title, author, date and ordered content from a parsed page.

    The tree is only read; cleaning works on copies.

    Args:
        soup:     Parsed document (BeautifulSoup or a root Tag).
        base_url: Used to absolutize image URLs.  Empty string if unknown.
        debug:    Attach locator and assembly counters as ``debugInfo``.
        config:   Limits and rule tables; defaults to :class:`ExtractorConfig`.
    """
    config = config or ExtractorConfig()
    try:
        return _run(soup, base_url, debug, config)
    except Exception as exc:
        logger.warning("Extraction failed for %s: %s", base_url or "<input>", exc)
        return ExtractionResult(
            title=_raw_title(soup),
            content=[],
            error=str(exc) or exc.__class__.__name__,
            error_stack=traceback.format_exc(),
        )


def extract_html(
    html: str,
    base_url: str = "",
    debug: bool = False,
    config: ExtractorConfig | None = None,
) -> ExtractionResult:
    """Parse *html* with lxml and run :func:`extract_article` on it."""
    try:
        soup = BeautifulSoup(html or "", "lxml")
    except Exception as exc:
        logger.warning("HTML parse failed for %s: %s", base_url or "<input>", exc)
        return ExtractionResult(
            error=str(exc) or exc.__class__.__name__,
            error_stack=traceback.format_exc(),
        )
    return extract_article(soup, base_url, debug, config)
