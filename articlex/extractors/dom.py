"""Read-only node adapter over BeautifulSoup.

The heuristics never touch ``bs4.Tag`` directly; they go through
:class:`Node`, which exposes only reading operations (tag name, attributes,
classes, inline style, parent/children/siblings, text and CSS selection).
Wrappers are memoized per :class:`Document` so cached text and document
positions are computed once per extraction call.

Usage::

    soup = BeautifulSoup(html, "lxml")
    doc = Document(soup)
    article = doc.select_one("article")
    if article is not None and not article.is_hidden():
        print(article.text)
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Iterator

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")
_PX_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(px)?\s*$", re.IGNORECASE)

HEADING_TAGS: frozenset[str] = frozenset({f"h{i}" for i in range(1, 7)})


def _safe_str(val: Any, default: str = "") -> str:
    """Safely convert a BeautifulSoup attribute value (str | list | None) to str."""
    if val is None:
        return default
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def parse_dimension(raw: str | None) -> float | None:
    """Parse ``"120"`` / ``"120px"`` into a number; other units yield None."""
    if not raw:
        return None
    m = _PX_RE.match(raw)
    if not m:
        return None
    return float(m.group(1))


def parse_style(raw: str) -> dict[str, str]:
    """Parse an inline ``style`` attribute into a lower-cased property map."""
    styles: dict[str, str] = {}
    for decl in raw.split(";"):
        if ":" not in decl:
            continue
        prop, _, value = decl.partition(":")
        prop = prop.strip().lower()
        value = value.replace("!important", "").strip().lower()
        if prop:
            styles[prop] = value
    return styles


class Document:
    """Per-call view of a parsed page.  Owns the node cache."""

    def __init__(self, soup: BeautifulSoup | Tag) -> None:
        self.soup = soup
        self._nodes: dict[int, Node] = {}
        self._positions: dict[int, int] | None = None

    def node(self, tag: Tag) -> Node:
        key = id(tag)
        cached = self._nodes.get(key)
        if cached is None:
            cached = Node(tag, self)
            self._nodes[key] = cached
        return cached

    def position(self, tag: Tag) -> int:
        if self._positions is None:
            self._positions = {
                id(t): i for i, t in enumerate(self.soup.find_all(True))
            }
        return self._positions.get(id(tag), -1)

    # -- queries ---------------------------------------------------------

    def select(self, selector: str) -> list[Node]:
        try:
            return [self.node(t) for t in self.soup.select(selector) if isinstance(t, Tag)]
        except Exception as exc:
            logger.debug("CSS selector %r failed: %s", selector, exc)
            return []

    def select_one(self, selector: str) -> Node | None:
        found = self.select(selector)
        return found[0] if found else None

    def find_all(self, names: str | Iterable[str]) -> list[Node]:
        if not isinstance(names, str):
            names = list(names)
        return [self.node(t) for t in self.soup.find_all(names) if isinstance(t, Tag)]

    @property
    def body(self) -> Node | None:
        body = self.soup.find("body")
        return self.node(body) if isinstance(body, Tag) else None

    @property
    def title(self) -> str:
        tag = self.soup.find("title")
        return normalize_ws(tag.get_text()) if isinstance(tag, Tag) else ""


class Node:
    """Read-only wrapper around a ``bs4.Tag``.

    Equality is identity of the wrapped tag: two ``<p>Intro.</p>`` elements
    in different places are different nodes.
    """

    __slots__ = ("tag", "doc", "_text", "_style")

    def __init__(self, tag: Tag, doc: Document) -> None:
        self.tag = tag
        self.doc = doc
        self._text: str | None = None
        self._style: dict[str, str] | None = None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Node) and other.tag is self.tag

    def __hash__(self) -> int:
        return id(self.tag)

    def __repr__(self) -> str:
        return f"<Node {self.name} id={self.id!r} class={self.class_string!r}>"

    # -- attributes ------------------------------------------------------

    @property
    def name(self) -> str:
        return (self.tag.name or "").lower()

    def get(self, attr: str, default: str = "") -> str:
        return _safe_str(self.tag.get(attr), default)

    def has_attr(self, attr: str) -> bool:
        return self.tag.has_attr(attr)

    @property
    def attrs(self) -> dict[str, str]:
        return {k: _safe_str(v) for k, v in self.tag.attrs.items()}

    @property
    def classes(self) -> list[str]:
        raw = self.tag.get("class") or []
        if isinstance(raw, str):
            raw = raw.split()
        return [str(c) for c in raw]

    @property
    def class_string(self) -> str:
        return " ".join(self.classes).lower()

    @property
    def id(self) -> str:
        return self.get("id").lower()

    @property
    def class_and_id(self) -> str:
        return f"{self.class_string} {self.id}".strip()

    @property
    def style(self) -> dict[str, str]:
        if self._style is None:
            self._style = parse_style(self.get("style"))
        return self._style

    def dimension(self, name: str) -> float | None:
        """Width/height from the attribute, else from inline style."""
        value = parse_dimension(self.get(name))
        if value is None:
            value = parse_dimension(self.style.get(name))
        return value

    def css_dimension(self, name: str) -> float | None:
        return parse_dimension(self.style.get(name))

    def is_hidden(self) -> bool:
        """Hidden via inline ``display``/``visibility`` or the ``hidden`` attribute."""
        if self.has_attr("hidden"):
            return True
        style = self.style
        return style.get("display") == "none" or style.get("visibility") == "hidden"

    def is_transparent(self) -> bool:
        opacity = self.style.get("opacity")
        if not opacity:
            return False
        try:
            return float(opacity) == 0
        except ValueError:
            return False

    # -- text ------------------------------------------------------------

    @property
    def text(self) -> str:
        if self._text is None:
            self._text = self.tag.get_text().strip()
        return self._text

    @property
    def text_lower(self) -> str:
        return self.text.lower()

    @property
    def html(self) -> str:
        return self.tag.decode_contents()

    # -- tree ------------------------------------------------------------

    @property
    def parent(self) -> Node | None:
        parent = self.tag.parent
        if isinstance(parent, Tag) and not isinstance(parent, BeautifulSoup):
            return self.doc.node(parent)
        return None

    @property
    def children(self) -> list[Node]:
        return [self.doc.node(c) for c in self.tag.children if isinstance(c, Tag)]

    @property
    def next_element_sibling(self) -> Node | None:
        found = self.next_siblings(1)
        return found[0] if found else None

    @property
    def previous_element_sibling(self) -> Node | None:
        for sib in self.tag.previous_siblings:
            if isinstance(sib, Tag):
                return self.doc.node(sib)
        return None

    def next_siblings(self, limit: int) -> list[Node]:
        found: list[Node] = []
        for sib in self.tag.next_siblings:
            if len(found) >= limit:
                break
            if isinstance(sib, Tag):
                found.append(self.doc.node(sib))
        return found

    def ancestors(self, limit: int, stop: Node | None = None) -> Iterator[Node]:
        """Yield at most *limit* ancestors, stopping before *stop* or ``<body>``."""
        current = self.parent
        hops = 0
        while current is not None and hops < limit:
            if stop is not None and current == stop:
                return
            if current.name in ("body", "html"):
                return
            yield current
            hops += 1
            current = current.parent

    def closest(self, names: str | Iterable[str], limit: int = 50) -> Node | None:
        wanted = {names} if isinstance(names, str) else set(names)
        if self.name in wanted:
            return self
        for anc in self.ancestors(limit):
            if anc.name in wanted:
                return anc
        return None

    def contains(self, other: Node) -> bool:
        return any(p is self.tag for p in other.tag.parents)

    def select(self, selector: str) -> list[Node]:
        try:
            return [self.doc.node(t) for t in self.tag.select(selector) if isinstance(t, Tag)]
        except Exception as exc:
            logger.debug("CSS selector %r failed: %s", selector, exc)
            return []

    def select_one(self, selector: str) -> Node | None:
        found = self.select(selector)
        return found[0] if found else None

    def find_all(self, names: str | Iterable[str], limit: int | None = None) -> list[Node]:
        if not isinstance(names, str):
            names = list(names)
        return [
            self.doc.node(t)
            for t in self.tag.find_all(names, limit=limit)
            if isinstance(t, Tag)
        ]

    def find(self, names: str | Iterable[str]) -> Node | None:
        found = self.find_all(names, limit=1)
        return found[0] if found else None

    @property
    def position(self) -> int:
        return self.doc.position(self.tag)


def normalize_ws(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()
