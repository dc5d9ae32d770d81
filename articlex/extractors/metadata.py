"""Deterministic article metadata: title, author, publish date, featured
image and standfirst.

Priority chains (highest → lowest):
    title:   <article> h1 → <main> h1 → first h1 → <title>
    author:  author selectors → JSON-LD author → "By <Name>" bylines
    date:    date selectors → JSON-LD datePublished → short date lines
    image:   og:image / twitter:image → first large image of the container
"""

from __future__ import annotations

import html as html_lib
import json
import logging
import re
from dataclasses import dataclass
from typing import Any

import dateparser

from articlex.extractors.cleaner import clean_heading_text
from articlex.extractors.dom import Document, Node, normalize_ws
from articlex.extractors.images import (
    is_decorative_image,
    is_tracking_pixel,
    resolve_image_url,
    to_absolute_url,
)
from articlex.extractors.rules import DEFAULT_RULES, RuleTables

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_ISO_CLEANUP_RE = re.compile(r"\s+")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_ISO_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_YEAR_RE = re.compile(r"^(\d{4})$")
_DAY_MONTH_YEAR_RE = re.compile(r"(\d{1,2})(?:st|nd|rd|th)?\s+([A-Za-z]+)\.?,?\s+(\d{4})")
_MONTH_DAY_YEAR_RE = re.compile(r"([A-Za-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})")
_MONTH_YEAR_RE = re.compile(r"([A-Za-z]+)\.?,?\s+(\d{4})")
_STANDALONE_DATE_RE = re.compile(r"^([A-Za-z]+)\.?\s+(\d{1,2}),?\s+(\d{4})$")

_MONTHS: dict[str, str] = {
    "january": "01", "jan": "01",
    "february": "02", "feb": "02",
    "march": "03", "mar": "03",
    "april": "04", "apr": "04",
    "may": "05",
    "june": "06", "jun": "06",
    "july": "07", "jul": "07",
    "august": "08", "aug": "08",
    "september": "09", "sep": "09", "sept": "09",
    "october": "10", "oct": "10",
    "november": "11", "nov": "11",
    "december": "12", "dec": "12",
}

_MIN_YEAR = 1990
_MAX_YEAR = 2099


def _first(*values: Any) -> Any:
    """Return the first non-empty, non-None value."""
    for v in values:
        if v:
            return v
    return None


def month_number(name: str) -> str | None:
    """``"Sept"`` → ``"09"``; unknown names give None."""
    return _MONTHS.get(name.lower().rstrip("."))


def _in_range(year: int) -> bool:
    return _MIN_YEAR <= year <= _MAX_YEAR


def _dateparser_iso(raw: str) -> str | None:
    """Full-date parse with dateparser; rejects years outside 1990-2099."""
    try:
        parsed = dateparser.parse(
            raw,
            settings={
                "PREFER_DAY_OF_MONTH": "first",
                "PREFER_LOCALE_DATE_ORDER": False,
                "STRICT_PARSING": True,
            },
        )
    except Exception as exc:
        logger.debug("Date parse failed for %r: %s", raw, exc)
        return None
    if parsed is None or not _in_range(parsed.year):
        return None
    return parsed.strftime("%Y-%m-%d")


def parse_date(raw: str | None) -> str | None:
    """Parse a date string to ``YYYY-MM-DD``, ``YYYY-MM`` or ``YYYY``.

    Order: ISO prefix → partial forms (``YYYY-MM``, bare year, ``Month
    YYYY``) → dateparser → ``Day Month Year`` / ``Month Day, Year`` →
    ``Month Year``.  Partial forms are kept partial instead of being padded
    to the first of the month.
    """
    if not raw:
        return None
    raw = _ISO_CLEANUP_RE.sub(" ", raw.strip())
    if not raw:
        return None

    m = _ISO_DATE_RE.match(raw)
    if m:
        return m.group(0) if _in_range(int(m.group(1))) else None
    m = _ISO_MONTH_RE.match(raw)
    if m:
        return raw if _in_range(int(m.group(1))) else None
    m = _YEAR_RE.match(raw)
    if m:
        return raw if _in_range(int(raw)) else None
    m = _MONTH_YEAR_RE.fullmatch(raw)
    if m and month_number(m.group(1)) and _in_range(int(m.group(2))):
        return f"{m.group(2)}-{month_number(m.group(1))}"

    parsed = _dateparser_iso(raw)
    if parsed:
        return parsed

    m = _DAY_MONTH_YEAR_RE.search(raw)
    if m and month_number(m.group(2)) and _in_range(int(m.group(3))):
        return f"{m.group(3)}-{month_number(m.group(2))}-{int(m.group(1)):02d}"
    m = _MONTH_DAY_YEAR_RE.search(raw)
    if m and month_number(m.group(1)) and _in_range(int(m.group(3))):
        return f"{m.group(3)}-{month_number(m.group(1))}-{int(m.group(2)):02d}"
    m = _MONTH_YEAR_RE.search(raw)
    if m and month_number(m.group(1)) and _in_range(int(m.group(2))):
        return f"{m.group(2)}-{month_number(m.group(1))}"
    return None


# ---------------------------------------------------------------------------
# JSON-LD
# ---------------------------------------------------------------------------

_ARTICLE_TYPES: frozenset[str] = frozenset(
    {
        "article",
        "blogposting",
        "newsarticle",
        "techarticle",
        "scholarlyarticle",
        "liveblogposting",
        "reportage",
    },
)


def _extract_jsonld(doc: Document) -> dict:
    """Return the most article-like JSON-LD node on the page."""
    result: dict = {}

    for script in doc.soup.find_all("script", type="application/ld+json"):
        try:
            raw = json.loads(script.string or "")
        except (json.JSONDecodeError, TypeError):
            continue

        nodes: list[dict] = []
        if isinstance(raw, list):
            nodes = raw
        elif isinstance(raw, dict):
            nodes = raw.get("@graph", [raw])

        for node in nodes:
            if not isinstance(node, dict):
                continue
            dtype = str(node.get("@type", "")).lower()
            if dtype not in _ARTICLE_TYPES and dtype not in {"webpage", "website"}:
                continue
            if dtype in _ARTICLE_TYPES or not result:
                result = node

    return result


def _author_from_jsonld(node: dict) -> str | None:
    author = node.get("author")
    if isinstance(author, dict):
        return author.get("name")
    if isinstance(author, list) and author:
        first = author[0]
        if isinstance(first, dict):
            return first.get("name")
        return str(first)
    if isinstance(author, str):
        return author
    return None


# ---------------------------------------------------------------------------
# Title
# ---------------------------------------------------------------------------

_GENERIC_TITLES: frozenset[str] = frozenset(
    {"home", "about", "contact", "blog", "news", "archive"},
)


def is_valid_title(text: str) -> bool:
    """Reject empty, very short and generic site-section titles."""
    text = text.strip()
    if len(text) < 5:
        return False
    return text.lower() not in _GENERIC_TITLES


def _find_title(doc: Document) -> tuple[str, Node | None]:
    article = doc.select_one("article")
    main = doc.select_one("main")
    from_article = article.find("h1") if article is not None else None

    h1: Node | None = None
    if from_article is not None and is_valid_title(from_article.text):
        h1 = from_article
    if h1 is None and main is not None:
        candidate = main.find("h1")
        if candidate is not None and is_valid_title(candidate.text):
            h1 = candidate
    if h1 is None:
        candidate = doc.select_one("h1")
        if candidate is not None and is_valid_title(candidate.text):
            h1 = candidate
    if h1 is None and from_article is not None:
        h1 = from_article

    if h1 is not None and h1.text:
        return clean_heading_text(h1.text) or h1.text, h1
    return doc.title, None


# ---------------------------------------------------------------------------
# Author
# ---------------------------------------------------------------------------

_AUTHOR_SELECTORS: tuple[str, ...] = (
    'meta[name="author"]',
    'meta[name="citation_author"]',
    'meta[property="article:author"]',
    '[rel="author"]',
    ".author",
    ".byline",
    ".meta-author",
    '[itemprop="author"]',
    'a[href*="/author/"]',
    'a[href*="/profile/"]',
)
_PROFILE_SLUG_RE = re.compile(r"/(?:profile|author)/([^/?#]+)", re.IGNORECASE)
_CAMEL_RE = re.compile(r"^([a-z]+)([A-Z][a-z]*)$")
_SLUG_TEXT_RE = re.compile(r"^[a-z0-9]+(?:[-_][a-z0-9]+)*$")
_AUTHOR_PREFIX_RE = re.compile(
    r"^(?:written\s+by|by|от|von|par|por)\s*:?\s+|^(?:автор|da|di)\s*:\s*",
    re.IGNORECASE,
)
_BYLINE_RE = re.compile(r"\bby\s+([A-Z][a-zA-Z\s]+?)(?:\s+[A-Z][a-z]+\s+\d|\s+\d|$)", re.IGNORECASE)
_PERSON_NAME_RE = re.compile(r"^[A-Z][a-z]+(\s+[A-Z][a-z]+){0,3}$")
_NAME_ENDINGS: tuple[str, ...] = ("ia", "na", "ra", "la", "sa", "a")
_MAX_AUTHOR_LEN = 100


def _capitalize(part: str) -> str:
    return part[:1].upper() + part[1:].lower()


def _valid_name(name: str) -> str | None:
    return name if 2 < len(name) < _MAX_AUTHOR_LEN else None


def _split_run(run: str) -> str | None:
    """Split a single lowercase run such as ``susannarustin`` into two names."""
    for cut in range(len(run) - 3, 2, -1):
        first, second = run[:cut], run[cut:]
        if not (3 <= len(first) <= 15 and 3 <= len(second) <= 15):
            continue
        if first.endswith(_NAME_ENDINGS):
            return f"{_capitalize(first)} {_capitalize(second)}"
    if len(run) > 10:
        mid = len(run) // 2
        return f"{_capitalize(run[:mid])} {_capitalize(run[mid:])}"
    return None


def author_from_url(url: str | None) -> str | None:
    """Derive a display name from an ``/author/<slug>`` or ``/profile/<slug>`` URL.

    ``jane-doe`` → ``Jane Doe``; ``johnSmith`` → ``John Smith``;
    ``susannarustin`` → ``Susanna Rustin``; otherwise the capitalized slug.
    """
    if not url:
        return None
    m = _PROFILE_SLUG_RE.search(url)
    if not m:
        return None
    slug = m.group(1)

    parts = [p for p in re.split(r"[-_]", slug) if p]
    if len(parts) > 1:
        return _valid_name(" ".join(_capitalize(p) for p in parts))
    if not parts:
        return None

    single = parts[0]
    camel = _CAMEL_RE.match(single)
    if camel:
        return _valid_name(f"{_capitalize(camel.group(1))} {_capitalize(camel.group(2))}")

    if len(single) > 6 and single.isalpha() and single.islower():
        split = _split_run(single)
        if split:
            return _valid_name(split)
    return _valid_name(_capitalize(single))


def strip_author_prefix(text: str) -> str:
    """Remove localized "by"/"von"/"par"/"автор:" prefixes."""
    return _AUTHOR_PREFIX_RE.sub("", normalize_ws(text)).strip()


def _is_url_like(text: str) -> bool:
    lower = text.lower()
    return "http://" in lower or "https://" in lower or "/profile/" in lower or "/author/" in lower


def _author_from_element(el: Node) -> str | None:
    text = el.text or el.get("content").strip()
    href = el.get("href").strip()

    if href and (not text or _is_url_like(text) or _SLUG_TEXT_RE.match(text)):
        name = author_from_url(href)
        if name:
            return name
        if not text:
            text = href

    if not text:
        return None
    if _is_url_like(text):
        return author_from_url(text)

    cleaned = strip_author_prefix(text)
    if cleaned and len(cleaned) < _MAX_AUTHOR_LEN:
        return cleaned
    return None


def _author_from_byline(article: Node) -> str | None:
    for el in article.select('.post-author, .meta-wrapper, .byline, [class*="author"]'):
        m = _BYLINE_RE.search(el.text)
        if m:
            name = _valid_name(m.group(1).strip())
            if name:
                return name

        for link in el.select('a[href*="/author/"], a[href*="/profile/"]'):
            text = link.text
            if not text and link.find("img") is not None:
                continue
            if not text or _is_url_like(text):
                name = author_from_url(link.get("href"))
                if name:
                    return name
            elif 2 < len(text) < _MAX_AUTHOR_LEN:
                return strip_author_prefix(text)

        for link in el.find_all("a"):
            text = link.text
            if _PERSON_NAME_RE.match(text) and 5 < len(text) < 50:
                return text
    return None


def _find_author(doc: Document, jsonld: dict) -> str:
    for selector in _AUTHOR_SELECTORS:
        try:
            el = doc.select_one(selector)
            if el is None:
                continue
            name = _author_from_element(el)
            if name:
                return name
        except Exception as exc:
            logger.debug("Author selector %r failed: %s", selector, exc)

    jsonld_author = _author_from_jsonld(jsonld)
    if jsonld_author and str(jsonld_author).strip():
        return strip_author_prefix(str(jsonld_author))

    article = doc.select_one("article")
    if article is not None:
        try:
            return _author_from_byline(article) or ""
        except Exception as exc:
            logger.debug("Byline author scan failed: %s", exc)
    return ""


# ---------------------------------------------------------------------------
# Publish date
# ---------------------------------------------------------------------------

_DATE_SELECTORS: tuple[str, ...] = (
    'meta[property="article:published_time"]',
    'meta[name="datePublished"]',
    'meta[name="date"]',
    'meta[name="citation_date"]',
    "time[datetime]",
    "time[pubdate]",
    '[itemprop="datePublished"]',
    ".published",
    ".date",
    ".meta-date",
)


def _find_date(doc: Document, jsonld: dict, scan_limit: int) -> str:
    for selector in _DATE_SELECTORS:
        try:
            el = doc.select_one(selector)
            if el is None:
                continue
            value = _first(el.get("datetime").strip(), el.get("content").strip(), el.text)
            parsed = parse_date(value)
            if parsed:
                return parsed
        except Exception as exc:
            logger.debug("Date selector %r failed: %s", selector, exc)

    parsed = parse_date(_safe_jsonld_str(jsonld.get("datePublished")))
    if parsed:
        return parsed

    article = doc.select_one("article")
    if article is None:
        return ""
    for el in article.select(
        '.meta-date, .post-date, .published-date, [class*="date"]',
    ):
        m = _MONTH_DAY_YEAR_RE.search(el.text)
        if m:
            parsed = parse_date(m.group(0))
            if parsed:
                return parsed
    for el in article.find_all(("p", "span", "div", "time"))[:scan_limit]:
        text = el.text
        if len(text) < 100 and _STANDALONE_DATE_RE.match(text):
            parsed = parse_date(text)
            if parsed:
                return parsed
    return ""


def _safe_jsonld_str(val: Any) -> str | None:
    if isinstance(val, str):
        return val
    if isinstance(val, list) and val and isinstance(val[0], str):
        return val[0]
    return None


# ---------------------------------------------------------------------------
# Featured image
# ---------------------------------------------------------------------------

_FEATURED_META_SELECTORS: tuple[str, ...] = (
    'meta[property="og:image"]',
    'meta[name="twitter:image"]',
    'meta[property="article:image"]',
    'meta[name="image"]',
    '[itemprop="image"]',
)


def find_featured_image(
    doc: Document,
    container: Node | None,
    base_url: str = "",
    rules: RuleTables = DEFAULT_RULES,
    max_candidates: int = 10,
) -> str | None:
    """Absolute URL of the page's hero image, or None."""
    for selector in _FEATURED_META_SELECTORS:
        try:
            el = doc.select_one(selector)
            if el is None:
                continue
            url = (el.get("content") or el.get("src")).strip()
            if url and "logo" not in url.lower() and "icon" not in url.lower():
                return to_absolute_url(url, base_url)
        except Exception as exc:
            logger.debug("Featured image selector %r failed: %s", selector, exc)

    if container is None:
        return None

    article = doc.select_one("article")
    containers = [article, container] if article is not None else [container]
    for box in containers:
        try:
            media = box.find_all(("img", "figure"))[:max_candidates]
            for index, el in enumerate(media):
                img = el if el.name == "img" else el.find("img")
                if img is None:
                    continue
                src = resolve_image_url(img, rules)
                if not src or is_tracking_pixel(img, rules) or is_decorative_image(img, rules, src):
                    continue
                width = img.dimension("width") or 0
                height = img.dimension("height") or 0
                large = width >= 400 or height >= 300
                captioned = el.name == "figure" and el.find("figcaption") is not None
                first = index == 0
                if large or (captioned and first) or (first and not width and not height):
                    return to_absolute_url(src, base_url)
        except Exception as exc:
            logger.debug("Featured image scan failed: %s", exc)
    return None


# ---------------------------------------------------------------------------
# Standfirst
# ---------------------------------------------------------------------------

_STANDFIRST_SELECTORS: tuple[str, ...] = (
    ".standfirst", ".subtitle", ".deck", ".lede", ".intro", ".article__subhead",
    '[class*="standfirst"]', '[class*="subtitle"]', '[class*="deck"]',
    '[class*="intro"]', '[class*="summary"]', '[class*="subhead"]',
)
_NARRATIVE_OPENERS: tuple[str, ...] = (
    "the ", "a ", "an ", "in ", "on ", "at ", "when ", "where ", "why ", "how ",
    "what ", "this ", "that ", "these ", "those ",
)


def find_standfirst(container: Node | None) -> tuple[str, Node | None]:
    """Return ``(text, node)`` of the article's deck, or ``("", None)``."""
    if container is None:
        return "", None

    for selector in _STANDFIRST_SELECTORS:
        el = container.select_one(selector)
        if el is not None:
            text = normalize_ws(el.text)
            if 50 <= len(text) <= 500:
                return text, el

    first_p = container.find("p")
    if first_p is None:
        return "", None
    text = normalize_ws(first_p.text)
    if not (50 <= len(text) <= 200) or first_p.find("a") is not None:
        return "", None
    opening = " ".join(text.split()[:3]).lower()
    if opening.startswith(_NARRATIVE_OPENERS):
        return "", None
    return text, first_p


def standfirst_html(text: str) -> str:
    return f'<p class="standfirst">{html_lib.escape(text, quote=False)}</p>'


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

@dataclass
class ArticleMetadata:
    title: str = ""
    title_node: Node | None = None
    author: str = ""
    publish_date: str = ""
    featured_image: str | None = None
    standfirst: str = ""
    standfirst_node: Node | None = None


def extract_metadata(
    doc: Document,
    container: Node | None = None,
    base_url: str = "",
    rules: RuleTables = DEFAULT_RULES,
    *,
    date_scan_limit: int = 20,
    max_featured_candidates: int = 10,
) -> ArticleMetadata:
    """Extract title, author, date, featured image and standfirst.

    Args:
        doc:       Wrapped page.
        container: Located article container (featured image and standfirst
                   are looked up inside it).
        base_url:  Used to absolutize the featured image URL.
    """
    jsonld: dict = {}
    try:
        jsonld = _extract_jsonld(doc)
    except Exception as exc:
        logger.debug("JSON-LD extraction failed: %s", exc)

    title, title_node = _find_title(doc)
    author = _find_author(doc, jsonld)
    publish_date = _find_date(doc, jsonld, date_scan_limit)
    featured = find_featured_image(doc, container, base_url, rules, max_featured_candidates)

    standfirst, standfirst_node = "", None
    try:
        standfirst, standfirst_node = find_standfirst(container)
    except Exception as exc:
        logger.debug("Standfirst lookup failed: %s", exc)

    return ArticleMetadata(
        title=title,
        title_node=title_node,
        author=author,
        publish_date=publish_date,
        featured_image=featured,
        standfirst=standfirst,
        standfirst_node=standfirst_node,
    )
