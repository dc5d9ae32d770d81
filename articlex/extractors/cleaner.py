"""Clone-based HTML sanitizing and text cleanup.

Every function that rewrites markup works on ``copy.copy(tag)``, which in
BeautifulSoup is a detached deep copy; the caller's tree is never touched.
"""

from __future__ import annotations

import copy
import logging
import re

from bs4 import Comment, NavigableString, Tag

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Text cleanup
# ---------------------------------------------------------------------------

# Stray object markers left behind by copy-paste from rich editors.
_OBJ_MARKER_RE = re.compile(r"\s*(?:\[obj\]|(?<![\w\[])obj(?![\w\]]))\s*", re.IGNORECASE)
_OBJ_ONLY_RE = re.compile(r"^\[?obj\]?\s*$", re.IGNORECASE)
_OBJECT_REPLACEMENT = "￼"
_TRAILING_ANCHOR_RE = re.compile(r"\s*[#¶]\s*$")
_WS_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]+>")

ARROW_RE = re.compile(r"[←→↑↓↗↘◀▶▲▼↩]")
_ARROWS_ONLY_RE = re.compile(r"^[←→↑↓↗↘↩]+$")
_DIGITS_ONLY_RE = re.compile(r"^[\d\s]+$")


def strip_markers(text: str) -> str:
    """Remove ``[OBJ]`` tokens and U+FFFC object-replacement characters."""
    text = text.replace(_OBJECT_REPLACEMENT, "")
    return _OBJ_MARKER_RE.sub(" ", text).strip()


def is_marker_only(text: str) -> bool:
    stripped = text.replace(_OBJECT_REPLACEMENT, "").strip()
    return bool(stripped) and bool(_OBJ_ONLY_RE.match(stripped))


def clean_heading_text(text: str) -> str:
    """Heading text with tags, markers and trailing anchor glyphs removed."""
    text = _TAG_RE.sub("", text)
    text = strip_markers(text)
    text = _TRAILING_ANCHOR_RE.sub("", text)
    return _WS_RE.sub(" ", text).strip()


def heading_key(text: str) -> str:
    """Normalized dedup key for a heading or title."""
    return clean_heading_text(text).lower()


# ---------------------------------------------------------------------------
# Footnotes and icons
# ---------------------------------------------------------------------------

def _attr(tag: Tag, name: str) -> str:
    val = tag.get(name)
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val or "")


def is_footnote_link(tag: Tag) -> bool:
    """Anchor pointing at ``#…`` / ``#note`` whose text is a number or arrow."""
    if tag.name != "a":
        return False
    href = _attr(tag, "href")
    if not (href == "#" or href.startswith("#") or "#note" in href):
        return False
    text = tag.get_text().strip()
    if _DIGITS_ONLY_RE.match(text) or _ARROWS_ONLY_RE.match(text) or "open these" in text.lower():
        return True
    img = tag.find("img")
    if isinstance(img, Tag):
        alt = _attr(img, "alt")
        if alt == "↩" or "emoji" in _attr(img, "src") or "emoji" in _attr(img, "class"):
            return True
    return False


def is_icon(tag: Tag) -> bool:
    """SVGs, icon-class elements, arrow glyph spans and arrow images."""
    name = tag.name or ""
    if name == "svg":
        return True
    if "icon" in _attr(tag, "class").lower() or "icon" in _attr(tag, "id").lower():
        return True
    if name in ("span", "i", "em", "sup"):
        text = tag.get_text().strip()
        if len(text) <= 3 and ARROW_RE.search(text):
            return True
        if name == "sup" and "open these" in text.lower():
            return True
    if name == "img":
        alt = _attr(tag, "alt").strip()
        src = _attr(tag, "src").lower()
        if alt == "↩" or ARROW_RE.search(alt) or ("emoji" in src and "arrow" in alt):
            return True
    return False


def _is_arrow_sup(tag: Tag) -> bool:
    if tag.name != "sup":
        return False
    text = tag.get_text().strip()
    return (len(text) <= 3 and bool(ARROW_RE.search(text))) or "open these" in text.lower()


# ---------------------------------------------------------------------------
# Sanitizing
# ---------------------------------------------------------------------------

SAFE_ATTRIBUTES: frozenset[str] = frozenset(
    {"href", "src", "alt", "title", "class", "id", "target", "rel"},
)

# Inline markup kept in paragraph HTML; everything else is unwrapped.
INLINE_TAGS: frozenset[str] = frozenset(
    {"a", "b", "strong", "i", "em", "code", "br"},
)
QUOTE_TAGS: frozenset[str] = INLINE_TAGS | {"p", "cite", "footer"}

_DROP_TAGS: frozenset[str] = frozenset(
    {
        "script", "style", "noscript", "template", "object", "embed", "iframe",
        "svg", "button", "input", "select", "textarea", "form", "img",
        "picture", "video", "audio", "source",
    },
)


def _strip_attributes(tag: Tag) -> None:
    for attr in list(tag.attrs):
        lower = attr.lower()
        if lower.startswith("on") or lower not in SAFE_ATTRIBUTES:
            del tag.attrs[attr]


def _should_drop(tag: Tag) -> bool:
    if tag.name in _DROP_TAGS:
        return True
    if tag.name == "a" and is_footnote_link(tag):
        return True
    if is_icon(tag) or _is_arrow_sup(tag):
        return True
    return is_marker_only(tag.get_text())


def sanitize_fragment(tag: Tag, allowed: frozenset[str] = INLINE_TAGS) -> str:
    """Return the inner HTML of a cleaned clone of *tag*.

    Removes footnote links, icons, arrow ``<sup>``, embeds and marker-only
    elements; unwraps tags outside *allowed*; drops ``style``, ``on*`` and
    every attribute outside :data:`SAFE_ATTRIBUTES`; removes empty
    ``span``/``div`` wrappers.
    """
    clone = copy.copy(tag)

    for comment in clone.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    for el in list(clone.find_all(True)):
        if el.decomposed:
            continue
        if _should_drop(el):
            el.decompose()

    for el in list(clone.find_all(True)):
        if el.decomposed:
            continue
        _strip_attributes(el)
        if el.name in ("span", "div") and not el.get_text().strip() and not el.find("img"):
            el.decompose()
        elif el.name not in allowed:
            el.unwrap()

    for text_node in list(clone.find_all(string=True)):
        if isinstance(text_node, NavigableString) and re.search("obj|￼", text_node, re.IGNORECASE):
            cleaned = strip_markers(str(text_node))
            if cleaned != str(text_node).strip():
                text_node.replace_with(NavigableString(_pad(str(text_node), cleaned)))

    return clone.decode_contents().strip()


def _pad(original: str, cleaned: str) -> str:
    """Keep the surrounding whitespace of *original* around *cleaned*."""
    if not cleaned:
        return " " if original.strip() != original else ""
    lead = " " if original[:1].isspace() else ""
    trail = " " if original[-1:].isspace() else ""
    return f"{lead}{cleaned}{trail}"


def visible_text(html: str) -> str:
    """Plain text of a sanitized fragment, markers removed."""
    return strip_markers(_WS_RE.sub(" ", _TAG_RE.sub("", html))).strip()


def sanitize_table(tag: Tag) -> str:
    """Outer HTML of a clone of *tag* without ``style``/``on*`` attributes or scripts."""
    clone = copy.copy(tag)
    for el in list(clone.find_all(["script", "style", "noscript"])):
        el.decompose()
    for el in [clone, *clone.find_all(True)]:
        for attr in list(el.attrs):
            lower = attr.lower()
            if lower == "style" or lower.startswith("on"):
                del el.attrs[attr]
    return str(clone)


def text_without_footnotes(tag: Tag) -> str:
    """Text of *tag* once footnote links, icons and arrow sups are removed."""
    clone = copy.copy(tag)
    for el in list(clone.find_all(True)):
        if el.decomposed:
            continue
        if (el.name == "a" and is_footnote_link(el)) or is_icon(el) or _is_arrow_sup(el):
            el.decompose()
    return clone.get_text().strip()


def pre_to_text(tag: Tag) -> str:
    """Code text of a ``<pre>``: ``<br>`` becomes a newline, tags are
    stripped and entities decoded."""
    clone = copy.copy(tag)
    for br in list(clone.find_all("br")):
        br.replace_with(NavigableString("\n"))
    return clone.get_text()
