"""Final deduplication pass over an assembled content sequence.

Headings are keyed by their cleaned, lower-cased text and images by
origin + path.  The first occurrence wins, so the synthetic featured image
and standfirst inserted at the front take precedence over copies found
later in the body.  Running the pass on its own output changes nothing.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Sequence

from articlex.extractors.cleaner import heading_key
from articlex.extractors.images import normalize_image_url
from articlex.items import ContentItem, Heading, Image

logger = logging.getLogger(__name__)


class DedupResult(NamedTuple):
    items: list[ContentItem]
    headings_removed: int
    images_removed: int


class Deduplicator:
    """Per-call dedup state; create a new one for every extraction."""

    def __init__(self, title: str = "") -> None:
        self.title_key = heading_key(title) if title else ""
        self.seen_headings: set[str] = set()
        self.seen_images: set[str] = set()

    def is_repeat_heading(self, text: str) -> bool:
        key = heading_key(text)
        return key == self.title_key or key in self.seen_headings

    def keep_heading(self, text: str) -> bool:
        """Record *text*; False when it repeats the title or an earlier heading."""
        key = heading_key(text)
        if not key or key == self.title_key or key in self.seen_headings:
            return False
        self.seen_headings.add(key)
        return True

    def keep_image(self, src: str) -> bool:
        key = normalize_image_url(src)
        if key in self.seen_images:
            return False
        self.seen_images.add(key)
        return True

    def run(self, items: Sequence[ContentItem]) -> DedupResult:
        kept: list[ContentItem] = []
        headings_removed = images_removed = 0
        for item in items:
            if isinstance(item, Heading) and not self.keep_heading(item.text):
                headings_removed += 1
                continue
            if isinstance(item, Image) and not self.keep_image(item.src):
                images_removed += 1
                continue
            kept.append(item)
        if headings_removed or images_removed:
            logger.debug(
                "Dedup removed %d headings, %d images", headings_removed, images_removed,
            )
        return DedupResult(kept, headings_removed, images_removed)


def deduplicate(items: Sequence[ContentItem], title: str = "") -> DedupResult:
    """Drop repeated headings (and the title) and repeated images."""
    return Deduplicator(title).run(items)
