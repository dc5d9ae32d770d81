"""Content assembler: turn the located container into ordered content items.

Collects ``h1-h6, p, img, figure, blockquote, pre, code, ul, ol, table``
(plus headings and paragraphs of "About the author" boxes), drops what the
exclusion filter rejects, sorts by document order and emits one typed item
per node.  Nodes nested inside an emitted block are not emitted again, with
one exception: images are only swallowed by an emitted ``<figure>``.

When the primary pass yields nothing, two fallbacks run in turn:
  (a) the first ``<article>``/``<main>`` with lenient filtering
  (b) the ``<div>`` with the most paragraphs and more than 500 chars of text
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from articlex.extractors.cleaner import (
    QUOTE_TAGS,
    clean_heading_text,
    is_footnote_link,
    is_marker_only,
    pre_to_text,
    sanitize_fragment,
    sanitize_table,
    text_without_footnotes,
    visible_text,
)
from articlex.extractors.dedup import Deduplicator
from articlex.extractors.dom import HEADING_TAGS, Document, Node, normalize_ws
from articlex.extractors.exclusion import (
    ExclusionFilter,
    has_course_price,
    is_byline_paragraph,
    is_donation_text,
    is_email_signup,
    is_marketing_text,
    is_newsletter_text,
    is_original_article_line,
    is_word_count_line,
)
from articlex.extractors.images import (
    figure_caption,
    image_caption,
    is_decorative_image,
    is_tracking_pixel,
    resolve_image_url,
    to_absolute_url,
)
from articlex.items import Code, ContentItem, Heading, Image, ListItem, Paragraph, Quote, Table

if TYPE_CHECKING:
    from articlex.config import ExtractorConfig
    from articlex.extractors.metadata import ArticleMetadata

logger = logging.getLogger(__name__)

CONTENT_TAGS: tuple[str, ...] = (
    "h1", "h2", "h3", "h4", "h5", "h6", "p", "img", "figure", "blockquote",
    "pre", "code", "ul", "ol", "table",
)
_IMAGE_TAGS = frozenset({"img", "figure"})

_NUMERIC_HEADING_RE = re.compile(r"^\d+\.?\s*$")
_AFTER_BY_RE = re.compile(r"^[a-z]+(\s+[a-z]+){0,2}$")
_BY_SPLIT_RE = re.compile(r"\.?\s+by\s+", re.IGNORECASE)
_DATE_ONLY_RE = re.compile(
    r"^(january|february|march|april|may|june|july|august|september|october|"
    r"november|december)\s+\d{1,2},?\s+\d{4}$",
    re.IGNORECASE,
)
_LANGUAGE_RE = re.compile(r"(?:language|lang)-([\w+#-]+)")
_OBJECT_OBJECT_RE = re.compile(r"^\[object\s+object\]\s*$", re.IGNORECASE)

_SUBSCRIPTION_HEADINGS: tuple[str, ...] = (
    "like what you're reading", "subscribe to", "subscribe today", "sign up",
    "newsletter",
)
_EDITOR_CREDIT_PREFIXES: tuple[str, ...] = (
    "editor:", "art director:", "copy editor:", "fact checker:", "illustrator:",
    "published in",
)
_EDITOR_CREDIT_WORDS: tuple[str, ...] = ("math editor", "science editor", "physics editor")
_AUTHOR_META_CLASSES: tuple[str, ...] = (
    "post__title__author-date", "author-date", "byline", "author-meta",
)
_RELATED_CLASSES: tuple[str, ...] = ("related-articles", "recommended", "related-posts")
_PRICE_HINTS: tuple[str, ...] = ("$", "price", "money-back", "guarantee")

_MIN_HEADING_CHARS = 3
_PHRASE_TABLE_MAX_CHARS = 200
_LARGEST_DIV_MIN_CHARS = 500


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

@dataclass
class AssemblyStats:
    processed: int = 0
    skipped: int = 0
    content_types: Counter = field(default_factory=Counter)
    skip_reasons: Counter = field(default_factory=Counter)
    fallback: str = "none"

    def skip(self, reason: str) -> None:
        self.skipped += 1
        self.skip_reasons[reason] += 1


@dataclass
class AssemblyOutput:
    items: list[ContentItem]
    stats: AssemblyStats


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------

class ContentAssembler:
    """Walk a container and emit :mod:`articlex.items` content items.

    Args:
        doc:        Wrapped page.
        meta:       Metadata from :func:`~articlex.extractors.metadata.extract_metadata`;
                    its title, standfirst and featured image drive dedup.
        exclusion:  Filter used for every candidate node.
        dedup:      Per-call dedup state shared with the final pass.
        base_url:   Base for absolute image URLs.
    """

    def __init__(
        self,
        doc: Document,
        meta: ArticleMetadata,
        exclusion: ExclusionFilter,
        dedup: Deduplicator,
        config: ExtractorConfig,
        base_url: str = "",
    ) -> None:
        self.doc = doc
        self.meta = meta
        self.exclusion = exclusion
        self.rules = exclusion.rules
        self.dedup = dedup
        self.config = config
        self.base_url = base_url
        self.stats = AssemblyStats()
        self.root: Node | None = None
        self._handlers: dict[str, Callable[[Node], ContentItem | None]] = {
            "p": self._paragraph,
            "img": self._image,
            "figure": self._figure,
            "blockquote": self._quote,
            "pre": self._pre,
            "code": self._inline_code,
            "ul": self._list,
            "ol": self._list,
            "table": self._table,
        }
        for tag in HEADING_TAGS:
            self._handlers[tag] = self._heading

    # -- public ----------------------------------------------------------

    def assemble(self, container: Node | None) -> AssemblyOutput:
        items: list[ContentItem] = []
        if container is not None:
            items = self._primary_pass(container)
        if not items:
            items = self._fallback_article_main()
            if items:
                self.stats.fallback = "article_main"
        if not items:
            items = self._fallback_largest_div()
            if items:
                self.stats.fallback = "largest_div"
        if self.stats.fallback != "none":
            logger.debug("Content assembled by fallback %s", self.stats.fallback)
        for item in items:
            self.stats.content_types[item.type] += 1
        return AssemblyOutput(items, self.stats)

    # -- collection ------------------------------------------------------

    def _author_sections(self, container: Node) -> list[Node]:
        sections = []
        for el in container.find_all(("section", "div")):
            combined = el.class_and_id
            lower = el.text_lower
            marked = any(c in combined for c in self.rules.about_author_classes)
            if not marked and "about the author" not in lower and "about author" not in lower:
                continue
            if len(lower) > 50 and not self.exclusion.is_excluded(el):
                sections.append(el)
        return sections

    def collect(self, container: Node) -> list[Node]:
        """Candidate nodes inside *container*, unique and in document order."""
        seen: dict[Node, None] = dict.fromkeys(container.find_all(CONTENT_TAGS))
        for section in self._author_sections(container):
            for el in section.find_all((*HEADING_TAGS, "p")):
                seen.setdefault(el, None)
        return sorted(seen, key=lambda n: n.position)

    def _inside_emitted(self, node: Node, emitted: set[Node]) -> bool:
        if not emitted:
            return False
        image = node.name in _IMAGE_TAGS
        for anc in node.ancestors(self.config.max_ancestor_hops, stop=self.root):
            if anc in emitted and (not image or anc.name == "figure"):
                return True
        return False

    def _primary_pass(self, container: Node) -> list[ContentItem]:
        self.root = container
        self.exclusion = self.exclusion.with_root(container)
        items: list[ContentItem] = []
        emitted: set[Node] = set()

        for node in self.collect(container):
            if self._inside_emitted(node, emitted):
                continue
            reason = self.exclusion.reason(node)
            if reason is not None:
                self.stats.skip(reason)
                continue
            handler = self._handlers.get(node.name)
            if handler is None:
                continue
            try:
                item = handler(node)
            except Exception as exc:
                logger.debug("Handling %r failed: %s", node, exc)
                self.stats.skip("error")
                continue
            if item is None:
                continue
            emitted.add(node)
            items.append(item)
            self.stats.processed += 1
        return items

    # -- shared checks ----------------------------------------------------

    def _is_standfirst(self, node: Node) -> bool:
        sf = self.meta.standfirst_node
        if sf is None:
            return False
        return node == sf or node.contains(sf) or sf.contains(node)

    def _has_ancestor_class(self, node: Node, tokens: tuple[str, ...], use_id: bool = False) -> bool:
        for el in (node, *node.ancestors(self.config.max_ancestor_hops, stop=self.root)):
            value = el.class_and_id if use_id else el.class_string
            if any(t in value for t in tokens):
                return True
        return False

    def _in_email_signup(self, node: Node) -> bool:
        for anc in node.ancestors(5, stop=self.root):
            if is_email_signup(anc):
                return True
        return False

    # -- headings -------------------------------------------------------

    def _heading(self, node: Node) -> ContentItem | None:
        if self._is_standfirst(node):
            return None
        cleaned = clean_heading_text(node.text)
        if len(cleaned) < _MIN_HEADING_CHARS or _NUMERIC_HEADING_RE.match(cleaned):
            return None
        if self.meta.standfirst and cleaned == self.meta.standfirst:
            return None
        if self.dedup.is_repeat_heading(cleaned):
            self.stats.skip("duplicate_heading")
            return None

        lower = cleaned.lower()
        level = int(node.name[1])
        heading_id = node.get("id") or None

        if any(p in lower for p in _SUBSCRIPTION_HEADINGS):
            return None

        parts = lower.split(" by ")
        if len(parts) == 2:
            after_by = parts[1].strip()
            if _AFTER_BY_RE.match(after_by) and len(after_by) < 50 and len(parts[0].strip()) > 10:
                title_part = _BY_SPLIT_RE.split(cleaned, maxsplit=1)[0].strip()
                if len(title_part) >= _MIN_HEADING_CHARS and self.dedup.keep_heading(title_part):
                    return Heading(level=level, text=title_part, id=heading_id)
                return None

        if lower.startswith("meet ") and any(
            w in lower for w in ("course", "book", "training", "product")
        ):
            return None
        if "more from" in lower:
            return None
        if self._has_ancestor_class(node, ("accordion",)):
            return None
        if "article-section-title" in node.class_string:
            return None
        for anc in node.ancestors(self.config.max_ancestor_hops, stop=self.root):
            if any(t in anc.class_and_id for t in _RELATED_CLASSES):
                return None
        if "video" in lower and ("training" in lower or "course" in lower):
            for sib in node.next_siblings(3):
                sib_text = sib.text.lower()
                if any(h in sib_text for h in _PRICE_HINTS):
                    return None

        if not self.dedup.keep_heading(cleaned):
            return None
        return Heading(level=level, text=cleaned, id=heading_id)

    # -- paragraphs -----------------------------------------------------

    def _paragraph_metadata(self, node: Node, text: str) -> bool:
        lower = text.lower()
        if is_byline_paragraph(node):
            return True
        if lower.startswith("edited by") and len(text) < 200:
            return True
        if is_word_count_line(text) or is_original_article_line(text):
            return True
        if len(text) < 100 and "original article" in lower and re.search(r"\d+\s*words?", lower):
            return True
        if lower.startswith(_EDITOR_CREDIT_PREFIXES) or any(w in lower for w in _EDITOR_CREDIT_WORDS):
            return True
        if _DATE_ONLY_RE.match(text):
            return True
        if self._has_ancestor_class(node, _AUTHOR_META_CLASSES):
            return True
        return is_marker_only(text) or bool(_OBJECT_OBJECT_RE.match(text))

    def _paragraph_solicitation(self, node: Node, text: str) -> bool:
        lower = text.lower()
        if "like what you're reading" in lower or ("subscribe" in lower and "atavist" in lower):
            return True
        if is_newsletter_text(text) or is_marketing_text(text) or is_donation_text(text):
            return True
        if self._in_email_signup(node):
            return True
        if has_course_price(text, self.rules):
            return True
        if "measure ux & design impact" in lower and (
            "code" in lower or "save" in lower or "off" in lower
        ):
            return True
        return self._has_ancestor_class(node, self.rules.ad_cta_classes, use_id=True)

    def _is_phrase_table_paragraph(self, text: str) -> bool:
        if len(text) >= _PHRASE_TABLE_MAX_CHARS:
            return False
        lower = text.lower()
        if self.rules.is_navigation_text(text):
            return True
        if any(p in lower for p in self.rules.paywall_phrases):
            return True
        return any(p in lower for p in self.rules.related_phrases)

    def _is_footnote_only(self, node: Node) -> bool:
        links = node.find_all("a")
        if not links or not all(is_footnote_link(a.tag) for a in links):
            return False
        return len(text_without_footnotes(node.tag)) < 10

    def _paragraph(self, node: Node) -> ContentItem | None:
        if self._is_standfirst(node):
            return None
        text = normalize_ws(node.text)
        if not text:
            return None
        if self.meta.standfirst and text == self.meta.standfirst:
            return None
        if self._has_ancestor_class(node, ("accordion",)):
            return None
        if self._paragraph_metadata(node, text):
            self.stats.skip("paragraph_metadata")
            return None
        if self._paragraph_solicitation(node, text):
            self.stats.skip("paragraph_solicitation")
            return None
        if self._is_phrase_table_paragraph(text):
            self.stats.skip("paragraph_navigation")
            return None
        if self._is_footnote_only(node):
            return None

        html = sanitize_fragment(node.tag)
        if not visible_text(html):
            return None
        return Paragraph(html=html)

    # -- images ---------------------------------------------------------

    def _image_item(self, img: Node, caption: str) -> ContentItem | None:
        src = resolve_image_url(img, self.rules)
        if not src:
            return None
        if is_tracking_pixel(img, self.rules) or is_decorative_image(img, self.rules, src):
            self.stats.skip("decorative_image")
            return None
        absolute = to_absolute_url(src, self.base_url)
        if not self.dedup.keep_image(absolute):
            self.stats.skip("duplicate_image")
            return None
        alt = img.get("alt").strip() or caption
        return Image(src=absolute, alt=alt, caption=caption)

    def _figure(self, node: Node) -> ContentItem | None:
        img = node.find("img")
        if img is None:
            return None
        return self._image_item(img, figure_caption(node, img))

    def _image(self, node: Node) -> ContentItem | None:
        if node.closest("figure", self.config.max_ancestor_hops) is not None:
            return None
        return self._image_item(node, image_caption(node))

    # -- blocks -----------------------------------------------------------

    def _quote(self, node: Node) -> ContentItem | None:
        html = sanitize_fragment(node.tag, QUOTE_TAGS)
        if not visible_text(html):
            return None
        return Quote(html=html)

    @staticmethod
    def _code_language(node: Node) -> str:
        candidates = [node]
        inner = node.find("code")
        if inner is not None:
            candidates.append(inner)
        for el in candidates:
            m = _LANGUAGE_RE.search(el.class_string)
            if m:
                return m.group(1)
        return ""

    def _pre(self, node: Node) -> ContentItem | None:
        text = pre_to_text(node.tag)
        if not text.strip():
            return None
        return Code(language=self._code_language(node), text=text)

    def _inline_code(self, node: Node) -> ContentItem | None:
        if node.closest("pre", self.config.max_ancestor_hops) is not None:
            return None
        text = node.tag.get_text()
        if not text.strip():
            return None
        return Code(language=self._code_language(node), text=text)

    def _list(self, node: Node) -> ContentItem | None:
        items = [normalize_ws(li.text) for li in node.children if li.name == "li"]
        items = [i for i in items if i]
        if not items:
            return None
        return ListItem(ordered=node.name == "ol", items=items)

    def _table(self, node: Node) -> ContentItem | None:
        for anc in node.ancestors(self.config.max_ancestor_hops, stop=self.root):
            if self.exclusion.is_excluded(anc):
                return None
        rows = node.find_all("tr")
        columns = max((len(r.find_all(("td", "th"))) for r in rows), default=0)
        if not ((len(rows) >= 2 and columns >= 2) or len(node.text) >= 50):
            return None
        return Table(html=sanitize_table(node.tag))

    # -- fallbacks --------------------------------------------------------

    def _fallback_heading(self, node: Node) -> ContentItem | None:
        cleaned = clean_heading_text(node.text)
        if len(cleaned) < _MIN_HEADING_CHARS or not self.dedup.keep_heading(cleaned):
            return None
        return Heading(level=int(node.name[1]), text=cleaned, id=node.get("id") or None)

    def _fallback_paragraph(self, node: Node) -> ContentItem | None:
        html = sanitize_fragment(node.tag)
        if not visible_text(html):
            return None
        return Paragraph(html=html)

    def _fallback_article_main(self) -> list[ContentItem]:
        box = self.doc.select_one("article") or self.doc.select_one("main")
        if box is None:
            return []
        self.root = box
        lenient = self.exclusion.with_root(box)
        items: list[ContentItem] = []
        limit = self.config.max_fallback_elements
        for node in box.find_all(("h1", "h2", "h3", "h4", "h5", "h6", "p", "img", "figure"))[:limit]:
            if lenient.is_excluded_lenient(node):
                self.stats.skip("fallback_filter")
                continue
            try:
                if node.name in HEADING_TAGS:
                    item = self._fallback_heading(node)
                elif node.name == "p":
                    item = self._fallback_paragraph(node)
                elif node.name == "figure":
                    item = self._figure(node)
                else:
                    item = self._image(node)
            except Exception as exc:
                logger.debug("Fallback handling %r failed: %s", node, exc)
                continue
            if item is not None:
                items.append(item)
                self.stats.processed += 1
        return items

    def _largest_div(self) -> Node | None:
        best: Node | None = None
        best_count = 0
        for div in self.doc.find_all("div"):
            if len(div.text) <= _LARGEST_DIV_MIN_CHARS:
                continue
            count = len(div.find_all("p"))
            if count > best_count:
                best, best_count = div, count
        return best

    def _fallback_largest_div(self) -> list[ContentItem]:
        box = self._largest_div()
        if box is None:
            return []
        self.root = box
        items: list[ContentItem] = []
        candidates = [
            n for n in box.find_all((*HEADING_TAGS, "p")) if len(n.text) > 5
        ][: self.config.max_fallback_elements]
        for node in candidates:
            try:
                if node.name in HEADING_TAGS:
                    item = self._fallback_heading(node)
                else:
                    item = self._fallback_paragraph(node)
            except Exception as exc:
                logger.debug("Fallback handling %r failed: %s", node, exc)
                continue
            if item is not None:
                items.append(item)
                self.stats.processed += 1
        return items
