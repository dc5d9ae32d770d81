"""Content locator: pick the container most likely to hold the article body.

Strategy (first hit wins):
  1. first ``<article>``: accepted when its score is positive and it is
     substantial
  2. first ``<main>``: same rule
  3. scan every ``div``/``section``/``article``/``main`` the exclusion
     filter keeps; the highest-scoring substantial one wins

The scoring rule is an ordered chain of additive and multiplicative
adjustments.  Each adjustment is a small named function so it can be tested
on its own; :func:`score_container` applies them in order, and the order is
part of the behavior because later multipliers act on the adjusted score.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import NamedTuple

from articlex.extractors.dom import HEADING_TAGS, Document, Node
from articlex.extractors.exclusion import ExclusionFilter
from articlex.extractors.rules import DEFAULT_RULES, RuleTables

logger = logging.getLogger(__name__)

_SENTENCE_RE = re.compile(r"[.!?]+\s+")
_SCAN_TAGS: tuple[str, ...] = ("div", "section", "article", "main")
_NEWSLETTER_INPUT_WORDS: tuple[str, ...] = (
    "newsletter", "subscribe", "get the latest", "inbox", "marketing cloud",
)

LONG_PARAGRAPH_CHARS = 200
NEWSLETTER_PENALTY = 1000.0


# ---------------------------------------------------------------------------
# Score context
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoreContext:
    """Counts taken from one candidate container."""

    tag: str = "div"
    paragraphs: int = 0
    long_paragraphs: int = 0
    headings: int = 0
    text_length: int = 0
    links: int = 0
    lists: int = 0
    list_items: int = 0
    sentences: int = 0
    commas: int = 0
    images: int = 0
    content_hint: bool = False
    newsletter: bool = False

    @classmethod
    def from_node(cls, node: Node, rules: RuleTables = DEFAULT_RULES) -> ScoreContext:
        text = node.text
        lower = text.lower()
        paragraphs = node.find_all("p")
        combined = node.class_and_id
        return cls(
            tag=node.name,
            paragraphs=len(paragraphs),
            long_paragraphs=sum(1 for p in paragraphs if len(p.text) > LONG_PARAGRAPH_CHARS),
            headings=len(node.find_all(HEADING_TAGS)),
            text_length=len(text),
            links=len(node.find_all("a")),
            lists=len(node.find_all(("ul", "ol"))),
            list_items=len(node.find_all("li")),
            sentences=len(_SENTENCE_RE.findall(text)),
            commas=text.count(","),
            images=len(node.find_all("img")),
            content_hint=any(h in combined for h in rules.content_hints),
            newsletter=_has_newsletter_signals(node, lower),
        )


def _has_newsletter_signals(node: Node, lower: str) -> bool:
    if "get the latest" in lower and "inbox" in lower:
        return True
    if "email powered by" in lower or "marketing cloud" in lower:
        return True
    if node.select_one('input[type="email"]') is not None:
        return any(w in lower for w in _NEWSLETTER_INPUT_WORDS)
    return False


# ---------------------------------------------------------------------------
# Scoring adjustments (applied in this order)
# ---------------------------------------------------------------------------

def _base_score(ctx: ScoreContext) -> float:
    return 10 * ctx.paragraphs + 5 * ctx.headings + min(ctx.text_length / 100, 50)


def _link_density(ctx: ScoreContext) -> float:
    if ctx.paragraphs:
        return ctx.links / ctx.paragraphs
    return ctx.links / max(ctx.text_length / 100, 1)


def _link_density_factor(ctx: ScoreContext) -> float:
    density = _link_density(ctx)
    if density > 1.0:
        return 0.5
    if density > 0.7:
        return 0.75
    if density > 0.5:
        return 0.9
    return 1.0


def _comma_factor(ctx: ScoreContext) -> float:
    if ctx.commas > 10:
        return 1.2
    if ctx.commas > 5:
        return 1.1
    return 1.0


def _sentence_bonus(ctx: ScoreContext) -> float:
    if ctx.sentences > 5:
        return min(ctx.sentences * 2, 30)
    return 0.0


def _tag_multiplier(ctx: ScoreContext) -> float:
    if ctx.tag == "article":
        return 2.0
    if ctx.tag == "main":
        return 1.5
    if ctx.tag == "section" and ctx.paragraphs >= 3:
        return 1.2
    return 1.0


def _content_hint_bonus(ctx: ScoreContext) -> float:
    return 100.0 if ctx.content_hint else 0.0


def _length_factor(ctx: ScoreContext) -> float:
    if ctx.text_length < 100:
        return 0.5
    if ctx.text_length < 200:
        return 0.8
    return 1.0


def _list_factor(ctx: ScoreContext) -> float:
    # Lists that heavily outnumber paragraphs read as link menus.
    if ctx.lists < 2:
        return 1.0
    if ctx.lists > 2 * ctx.paragraphs:
        return 0.6
    if ctx.lists > ctx.paragraphs:
        return 0.8
    return 1.0


def _newsletter_penalty(ctx: ScoreContext) -> float:
    return -NEWSLETTER_PENALTY if ctx.newsletter else 0.0


def _image_bonus(ctx: ScoreContext) -> float:
    return min(ctx.images * 3, 20)


def _long_paragraph_bonus(ctx: ScoreContext) -> float:
    return 5.0 * ctx.long_paragraphs


def score_container(ctx: ScoreContext) -> float:
    """Heuristic content score for one candidate container."""
    score = _base_score(ctx)
    score *= _link_density_factor(ctx)
    score *= _comma_factor(ctx)
    score += _sentence_bonus(ctx)
    score *= _tag_multiplier(ctx)
    score += _content_hint_bonus(ctx)
    score *= _length_factor(ctx)
    score *= _list_factor(ctx)
    score += _newsletter_penalty(ctx)
    score += _image_bonus(ctx)
    score += _long_paragraph_bonus(ctx)
    return score


def score_node(node: Node, rules: RuleTables = DEFAULT_RULES) -> float:
    """Score *node*, then let registered scorer plugins adjust the result."""
    score = score_container(ScoreContext.from_node(node, rules))
    from articlex.plugins import get_scorers

    for plugin in get_scorers():
        try:
            score = float(plugin.score(node, score))
        except Exception as exc:
            logger.warning("Scorer plugin %s failed: %s", plugin.name, exc)
    return score


def is_substantial(node: Node) -> bool:
    """More than 100 chars of text and a paragraph, or more than 300 chars."""
    length = len(node.text)
    if length <= 100:
        return False
    return length > 300 or node.find("p") is not None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class LocatorResult(NamedTuple):
    node: Node | None
    score: float
    strategy: str  # "article" | "main" | "scan" | "none"


def locate_main_content(
    doc: Document,
    exclusion: ExclusionFilter | None = None,
    rules: RuleTables = DEFAULT_RULES,
) -> LocatorResult:
    """Return the container most likely to hold the article body."""
    exclusion = exclusion or ExclusionFilter(rules)

    for tag in ("article", "main"):
        found = doc.find_all(tag)
        if not found:
            continue
        node = found[0]
        try:
            score = score_node(node, rules)
        except Exception as exc:
            logger.debug("Scoring <%s> failed: %s", tag, exc)
            continue
        if score > 0 and is_substantial(node):
            logger.debug("Main content: first <%s> (score %.1f)", tag, score)
            return LocatorResult(node, score, tag)

    best: Node | None = None
    best_score = 0.0
    for candidate in doc.find_all(_SCAN_TAGS):
        if len(candidate.text) <= 100:
            continue
        if exclusion.is_excluded(candidate):
            continue
        try:
            score = score_node(candidate, rules)
        except Exception as exc:
            logger.debug("Scoring %r failed: %s", candidate, exc)
            continue
        if score > best_score and is_substantial(candidate):
            best, best_score = candidate, score

    if best is None:
        logger.debug("No main content container found")
        return LocatorResult(None, 0.0, "none")
    logger.debug("Main content: %r (score %.1f)", best, best_score)
    return LocatorResult(best, best_score, "scan")
