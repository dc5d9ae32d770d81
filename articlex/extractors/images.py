"""Image resolution: best source URL, placeholders, tracking pixels,
decorative images and captions.

Resolution order for :func:`resolve_image_url`:
    currentsrc → src → srcset → <picture><source srcset> → lazy data-*
    attributes → enclosing <a href> that points at an image file.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urljoin, urlparse

from articlex.extractors.dom import Node
from articlex.extractors.rules import DEFAULT_RULES, RuleTables

logger = logging.getLogger(__name__)

_IMAGE_HREF_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp|svg)(\?|$)", re.IGNORECASE)
_PERSON_NAME_RE = re.compile(r"^[A-Z][a-z]+(\s+[A-Z][a-z]+){0,3}$")
_CAPTION_PREFIX_RE = re.compile(r"^(image|photo|picture|credit|source)[:\s]*", re.IGNORECASE)
_DEFAULT_PORTS = {"http": 80, "https": 443}

_AUTHOR_CONTEXT_TOKENS: tuple[str, ...] = (
    "contributor", "byline", "author-info", "author-bio", "author-meta", "vcard",
)
_NAME_CONTEXT_TOKENS: tuple[str, ...] = (
    "author", "byline", "headshot", "contributor", "vcard",
)
_FACEPILE_TOKENS: tuple[str, ...] = (
    "facepile", "likes", "restacks", "engagement", "reactions",
)
_BRAND_TOKENS: tuple[str, ...] = ("logo", "icon", "brand", "social", "share", "button")
_SOCIAL_PARENT_TOKENS: tuple[str, ...] = ("social", "share", "icon", "logo")

# Short logo tokens ("bg", "dot", "line", "user") only count as whole tokens.
_SHORT_TOKEN_LEN = 4


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------

def is_placeholder_url(url: str | None, rules: RuleTables = DEFAULT_RULES) -> bool:
    """Return True for empty URLs, tiny data URIs and spacer/blank images."""
    if not url:
        return True
    lower = url.strip().lower()
    if lower.startswith("data:image") and (
        "1x1" in lower or "transparent" in lower or len(lower) < 100
    ):
        return True
    return any(p in lower for p in rules.placeholder_patterns)


def best_srcset_url(srcset: str | None, rules: RuleTables = DEFAULT_RULES) -> str | None:
    """Pick the candidate with the highest ``w`` or ``x`` descriptor.

    A candidate without a descriptor is only used when nothing better is
    found.  Placeholder candidates are skipped.
    """
    if not srcset:
        return None
    best_url: str | None = None
    best_size = 0.0
    fallback: str | None = None
    for candidate in srcset.split(","):
        parts = candidate.strip().split()
        if not parts:
            continue
        url = parts[0]
        if is_placeholder_url(url, rules):
            continue
        if len(parts) == 1:
            fallback = fallback or url
            continue
        descriptor = parts[1].lower()
        try:
            size = float(descriptor[:-1]) if descriptor[-1] in "wx" else 0.0
        except ValueError:
            size = 0.0
        if size > best_size:
            best_size = size
            best_url = url
    return best_url or fallback


def to_absolute_url(url: str, base_url: str = "") -> str:
    url = url.strip()
    if not base_url or url.startswith("data:"):
        return url
    try:
        return urljoin(base_url, url)
    except ValueError:
        return url


def normalize_image_url(url: str) -> str:
    """Reduce *url* to scheme://host[:port]/path so query variants compare equal.

    The host is lower-cased, userinfo is dropped and the scheme's default
    port is omitted.
    """
    try:
        parsed = urlparse(url)
        port = parsed.port
    except ValueError:
        return url
    if not parsed.scheme or not parsed.hostname:
        return url.split("?", 1)[0].split("#", 1)[0]
    host = parsed.hostname
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS.get(parsed.scheme):
        host = f"{host}:{port}"
    return f"{parsed.scheme}://{host}{parsed.path}"


def _looks_like_image_href(href: str) -> bool:
    return bool(_IMAGE_HREF_RE.search(href)) or "image" in href.lower()


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_image_url(img: Node, rules: RuleTables = DEFAULT_RULES) -> str | None:
    """Return the best raw (possibly relative) source URL for *img*, or None."""
    for attr in ("currentsrc", "data-current-src", "src"):
        value = img.get(attr).strip()
        if value and not is_placeholder_url(value, rules):
            return value

    src = best_srcset_url(img.get("srcset"), rules)
    if src:
        return src

    picture = img.closest("picture", limit=3)
    if picture is not None:
        for source in picture.select("source[srcset]"):
            candidate = best_srcset_url(source.get("srcset"), rules)
            if candidate:
                return candidate

    for attr in rules.image_data_attributes:
        value = img.get(attr).strip()
        if not value or "data:" in value or is_placeholder_url(value, rules):
            continue
        candidate = best_srcset_url(value, rules) if attr == "data-srcset" else value
        if candidate:
            return candidate

    anchor = img.closest("a", limit=10)
    if anchor is not None:
        href = anchor.get("href").strip()
        if href and _looks_like_image_href(href):
            return href
    return None


def resolve_absolute_image_url(
    img: Node, base_url: str = "", rules: RuleTables = DEFAULT_RULES,
) -> str | None:
    src = resolve_image_url(img, rules)
    return to_absolute_url(src, base_url) if src else None


# ---------------------------------------------------------------------------
# Tracking pixels
# ---------------------------------------------------------------------------

def is_tracking_pixel(img: Node, rules: RuleTables = DEFAULT_RULES) -> bool:
    """Hidden ≤3×3 images, ≤3×3 natural size, ≤1×1 CSS size, or tracker URLs."""
    width = img.dimension("width") or 0
    height = img.dimension("height") or 0
    natural_w = img.dimension("width") if img.get("width") else None
    natural_h = img.dimension("height") if img.get("height") else None

    if (img.is_hidden() or img.is_transparent()) and width > 0 and height > 0:
        if width <= 3 and height <= 3:
            return True

    if natural_w and natural_h:
        if natural_w <= 3 and natural_h <= 3:
            return True
    else:
        css_w = img.css_dimension("width") or 0
        css_h = img.css_dimension("height") or 0
        if 0 < css_w <= 1 and 0 < css_h <= 1:
            return True

    src = img.get("src").lower()
    return any(p in src for p in rules.tracking_patterns)


# ---------------------------------------------------------------------------
# Decorative images
# ---------------------------------------------------------------------------

def _url_has_logo_token(url: str, rules: RuleTables) -> bool:
    lower = url.lower()
    if lower.startswith("data:"):
        haystack = lower
    else:
        try:
            parsed = urlparse(lower)
            haystack = parsed.path + ("?" + parsed.query if parsed.query else "")
        except ValueError:
            haystack = lower
    for token in rules.logo_patterns:
        if len(token) <= _SHORT_TOKEN_LEN:
            if re.search(rf"(?<![a-z0-9]){re.escape(token)}(?![a-z0-9])", haystack):
                return True
        elif token in haystack:
            return True
    return False


def _dims(img: Node) -> tuple[float, float]:
    return img.dimension("width") or 0, img.dimension("height") or 0


def _has_ancestor_token(img: Node, tokens: tuple[str, ...], depth: int) -> bool:
    for anc in img.ancestors(depth):
        combined = anc.class_and_id
        if any(t in combined for t in tokens):
            return True
        if "vcard" in tokens and anc.name == "address":
            return True
    return False


def _author_image(img: Node, alt: str, raw_alt: str, combined: str) -> bool:
    width, height = _dims(img)
    sized = width > 0 and height > 0

    if any(t in combined for t in ("headshot", "author-image", "author-avatar", "byline-thumb",
                                   "contributor-thumb")):
        return True

    if _has_ancestor_token(img, _AUTHOR_CONTEXT_TOKENS, 5):
        if sized and width <= 150 and height <= 150:
            return True
        if not alt:
            return True

    if alt and len(alt) < 100 and _PERSON_NAME_RE.match(raw_alt.strip()):
        if _has_ancestor_token(img, _NAME_CONTEXT_TOKENS, 5):
            return True
        if sized and width <= 250 and height <= 250 and abs(width - height) < 50:
            return True

    if sized and width <= 250 and height <= 250 and abs(width - height) < 50:
        return _has_ancestor_token(img, ("author", "byline"), 3)
    return False


def _facepile_avatar(img: Node) -> bool:
    width, height = _dims(img)
    if not (0 < width <= 100 and 0 < height <= 100):
        return False
    for anc in img.ancestors(6):
        if any(t in anc.class_and_id for t in _FACEPILE_TOKENS):
            return True
        if "likes" in anc.text_lower or "restacks" in anc.text_lower:
            return True
    return False


def _avatar_alt(img: Node, alt: str) -> bool:
    if not (alt == "avatar" or alt.endswith("avatar") or " avatar" in alt):
        return False
    width, height = _dims(img)
    if 0 < width <= 50 and 0 < height <= 50:
        return True
    return "'s avatar" in alt or alt.endswith(" avatar")


def is_decorative_image(
    img: Node, rules: RuleTables = DEFAULT_RULES, src: str | None = None,
) -> bool:
    """Return True for logos, icons, avatars, author headshots and UI chrome.

    Every layer is checked; any match excludes the image.  *src* defaults
    to the raw ``src`` attribute.
    """
    raw_alt = img.get("alt")
    alt = raw_alt.strip().lower()
    combined = img.class_and_id
    url = (src or img.get("src")).lower()

    if any(t in combined for t in rules.author_image_classes):
        return True
    if _author_image(img, alt, raw_alt, combined):
        return True
    if _facepile_avatar(img) or _avatar_alt(img, alt):
        return True
    if url and _url_has_logo_token(url, rules):
        return True

    if alt and any(t in alt for t in _BRAND_TOKENS):
        return not (
            len(alt) > 30 and any(w in alt for w in ("photo", "image", "picture"))
        )
    if any(t in combined for t in _BRAND_TOKENS):
        return True

    width, height = _dims(img)
    if 0 < width <= 50 and 0 < height <= 50 and "author" not in combined:
        if any(t in url or t in alt for t in ("icon", "logo", "social")):
            return True

    if 0 < width < 100 and 0 < height < 100 and not alt:
        if img.closest(("figure", "a"), limit=20) is None:
            return _has_ancestor_token(img, _SOCIAL_PARENT_TOKENS, 3)
    return False


# ---------------------------------------------------------------------------
# Captions
# ---------------------------------------------------------------------------

def image_caption(img: Node) -> str:
    """Caption for a standalone image: figcaption, aria-label, title,
    caption-like next sibling, or a caption element in the parent."""
    figure = img.closest("figure", limit=10)
    if figure is not None:
        figcaption = figure.find("figcaption")
        if figcaption is not None:
            return figcaption.text

    aria = img.get("aria-label").strip()
    if aria:
        return aria
    title = img.get("title").strip()
    if title and title != img.get("alt"):
        return title

    sibling = img.next_element_sibling
    if sibling is not None and (sibling.name == "p" or "caption" in sibling.class_string):
        return sibling.text

    parent = img.parent
    if parent is not None:
        caption_el = parent.select_one('.caption, .image-caption, .photo-caption, [class*="caption"]')
        if caption_el is not None and caption_el.text and caption_el.text != img.get("alt"):
            return caption_el.text
    return ""


def figure_caption(figure: Node, img: Node) -> str:
    """Caption for a ``<figure>``: figcaption, caption/credit-class child,
    else the figure text with the alt text removed."""
    figcaption = figure.find("figcaption")
    if figcaption is not None:
        return figcaption.text

    for candidate in figure.find_all(("p", "div", "span")):
        cls = candidate.class_string
        if candidate.text and ("caption" in cls or "credit" in cls):
            return candidate.text

    alt = img.get("alt")
    text = figure.text
    if text and text != alt:
        caption = text.replace(alt, "", 1).strip() if alt else text
        return _CAPTION_PREFIX_RE.sub("", caption).strip()
    return ""
