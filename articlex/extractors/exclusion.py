"""Boilerplate classifier: decides whether a node is navigation, an ad, a
paywall prompt, a newsletter form, a related-articles block and so on.

Stages run in order and short-circuit on the first match:

    visibility → structural → class/id → text → heading → controls →
    ancestor walk → plugins

The filter never writes to the tree.  Any exception raised while looking at
a node is logged at DEBUG level and the node is kept.

Usage::

    doc = Document(BeautifulSoup(html, "lxml"))
    flt = ExclusionFilter(rules=DEFAULT_RULES, root=container)
    kept = [n for n in container.find_all("p") if not flt.is_excluded(n)]
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Callable

from articlex.extractors.cleaner import is_footnote_link, is_icon
from articlex.extractors.dom import HEADING_TAGS, Node
from articlex.extractors.rules import DEFAULT_RULES, RuleTables

if TYPE_CHECKING:
    from articlex.config import ExtractorConfig

logger = logging.getLogger(__name__)

DEFAULT_MAX_ANCESTOR_HOPS = 50

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_WORD_COUNT_RE = re.compile(r"^\d+[,\s]\d+\s+words?$|^\d+\s+words?$", re.IGNORECASE)
_ORIGINAL_ARTICLE_RE = re.compile(r"^original\s+article\s*[•·]", re.IGNORECASE)
_WORDS_RE = re.compile(r"\d+\s*words?", re.IGNORECASE)
_PRICE_RE = re.compile(r"\$\s*\d{3,4}(\.\d{2})?")
_ANY_PRICE_RE = re.compile(r"[$€£]\s*\d+")
_CURRENCY_SYMBOLS: tuple[str, ...] = ("$", "€", "£")
_GET_LATEST_RE = re.compile(r"get\s+the\s+latest\s+.+\s+stories?\s+in\s+your\s+inbox", re.IGNORECASE)
_URL_RE = re.compile(r"(https?://)?([a-z0-9-]+\.)+[a-z]{2,}(/\S*)?", re.IGNORECASE)
_SENTENCE_END_RE = re.compile(r"[.!?]$")

_EMAIL_INPUT_SELECTOR = 'input[type="email"], input[name*="email"], input[id*="email"]'
_ARTICLE_LINK_SELECTOR = 'a[href*="/article/"], a[href*="/post/"], a[href*="/essay/"]'

_NEWSLETTER_FORM_WORDS: tuple[str, ...] = (
    "newsletter", "subscribe", "signup", "sign-up", "get the latest", "inbox",
    "marketing cloud",
)
_SIGNUP_CLASS_WORDS: tuple[str, ...] = (
    "newsletter", "subscribe", "signup", "sign-up", "email-signup", "email-sign-up",
)
_MARKETING_PHRASES: tuple[str, ...] = (
    "email powered by", "powered by salesforce", "salesforce marketing cloud",
    "marketing cloud",
)
_AD_KEYWORDS: tuple[str, ...] = (
    "video", "training", "course", "buy", "purchase", "money-back",
    "guarantee", "enroll", "sign up",
)
_MEET_PRODUCT_WORDS: tuple[str, ...] = ("course", "book", "training", "product", "measure ux")
_PRICE_HINTS: tuple[str, ...] = ("$", "price", "money-back", "guarantee")
_MEET_PRICE_HINTS: tuple[str, ...] = _PRICE_HINTS + ("495", "799", "250", "395")
_NAV_TAB_WORDS: tuple[str, ...] = (
    "читать", "read", "править", "edit", "обсуждение", "discussion", "редакции",
    "revisions", "view", "просмотр", "history", "история", "source", "исходник",
    "talk", "watch", "смотреть", "contribute", "вклад", "watchlist", "список",
    "preferences", "настройки", "user", "пользователь", "log", "вход", "create",
    "создать", "account", "аккаунт", "sign", "войти", "register", "регистрация",
    "login",
)
_NAV_TAB_RE = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(w) for w in _NAV_TAB_WORDS) + r")(?!\w)",
    re.IGNORECASE,
)
_CONTROL_BUTTON_WORDS: tuple[str, ...] = (
    "email", "save", "post", "share", "syndicate", "читать", "read", "править",
    "edit", "обсуждение", "discussion", "редакции", "revisions", "view",
    "просмотр", "history", "история",
)
_METADATA_KEYWORDS: tuple[str, ...] = (
    "ссылка", "link", "url", "адрес", "address", "короткая", "short", "сюда",
    "here", "permalink", "постоянная", "permanent",
)
_IFRAME_AD_WORDS: tuple[str, ...] = (
    "ad", "ads", "advertisement", "doubleclick", "googleads", "pubmatic",
    "openx", "adsystem",
)
_SEPARATOR_TAGS = frozenset({"hr", "separator"})
_REGION_TAGS = frozenset({"aside", "nav", "footer", "header"})
_SEMANTIC_CONTAINERS = frozenset({"article", "main"})
_IMAGE_TAGS = frozenset({"img", "figure"})

# Ancestors with more text than this are page wrappers, not widgets.
_NAV_ANCESTOR_MAX_TEXT = 500
# Non-paragraph nodes holding this many paragraphs are treated as body blocks.
_BODY_BLOCK_PARAGRAPHS = 3


# ---------------------------------------------------------------------------
# Shared text predicates (also used by the assembler)
# ---------------------------------------------------------------------------

def has_course_price(text: str, rules: RuleTables = DEFAULT_RULES) -> bool:
    """A $NNN / $NNNN price next to a course/training ad phrase."""
    lower = text.lower()
    return bool(_PRICE_RE.search(text)) and any(p in lower for p in rules.course_ad_phrases)


def is_donation_text(text: str) -> bool:
    lower = text.lower()
    return ("donate" in lower or "donation" in lower) and any(
        w in lower for w in ("support", "mission", "select amount", "per month")
    )


def is_word_count_line(text: str) -> bool:
    return len(text) < 100 and bool(_WORD_COUNT_RE.match(text))


def is_original_article_line(text: str) -> bool:
    return len(text) < 150 and bool(_ORIGINAL_ARTICLE_RE.match(text)) and bool(
        _WORDS_RE.search(text),
    )


def is_marketing_text(text: str) -> bool:
    lower = text.lower()
    if any(p in lower for p in _MARKETING_PHRASES):
        return True
    if "privacy notice" in lower and "terms" in lower:
        return True
    return "privacy" in lower and "terms" in lower and "conditions" in lower


def is_newsletter_text(text: str) -> bool:
    lower = text.lower()
    if "sign up to our newsletter" in lower:
        return True
    if "join more than" in lower and "newsletter subscribers" in lower:
        return True
    return bool(_GET_LATEST_RE.search(text))


def has_email_input(node: Node) -> bool:
    return node.select_one(_EMAIL_INPUT_SELECTOR) is not None


def is_email_signup(node: Node) -> bool:
    """Container holding an email input that reads like a newsletter form."""
    combined = node.class_and_id
    if "marketing-cloud" in combined or "salesforce" in combined:
        return True
    if not has_email_input(node):
        return False
    if any(w in combined for w in _SIGNUP_CLASS_WORDS):
        return True
    lower = node.text_lower
    return "inbox" in lower or "get the latest" in lower


def is_related_section(node: Node) -> bool:
    """Section marked as related articles that links to ≥2 other articles."""
    combined = node.class_and_id
    if "related-articles" not in combined and "related-posts" not in combined:
        return False
    return len(node.select(_ARTICLE_LINK_SELECTOR)) >= 2


def is_byline_paragraph(node: Node) -> bool:
    """Short ``By <Name>`` line: ≤5 words, ≤1 link, under 100 chars."""
    text = node.text
    lower = text.lower()
    if not lower.startswith(("by ", "by\u00a0")) or len(text) >= 100:
        return False
    links = node.find_all("a")
    if len(links) > 1:
        return False
    non_link = text
    for link in links:
        non_link = non_link.replace(link.text, "")
    return len(non_link.strip()) < 50 and len(text.split()) <= 5


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------

Stage = Callable[[Node], bool]


class ExclusionFilter:
    """Decide whether a node is boilerplate.

    Args:
        rules:  Rule tables to match against.
        config: Optional :class:`~articlex.config.ExtractorConfig`; only
                ``max_ancestor_hops`` is read.
        root:   Located content container.  Ancestor walks stop there.
    """

    def __init__(
        self,
        rules: RuleTables = DEFAULT_RULES,
        config: ExtractorConfig | None = None,
        root: Node | None = None,
    ) -> None:
        self.rules = rules
        self.root = root
        self.max_hops = (
            config.max_ancestor_hops if config is not None else DEFAULT_MAX_ANCESTOR_HOPS
        )
        self._class_patterns = tuple(
            (token, re.compile(rf"\b{re.escape(token)}\b")) for token in rules.excluded_classes
        )
        self._stages: tuple[tuple[str, Stage], ...] = (
            ("visibility", self._hidden),
            ("structural", self._structural),
            ("class", self._excluded_class),
            ("text", self._text_veto),
            ("heading", self._heading_veto),
            ("controls", self._control_veto),
            ("ancestor", self._ancestor_veto),
        )

    def with_root(self, root: Node | None) -> ExclusionFilter:
        clone = ExclusionFilter.__new__(ExclusionFilter)
        clone.__dict__.update(self.__dict__)
        clone.root = root
        return clone

    # -- public ----------------------------------------------------------

    def is_excluded(self, node: Node) -> bool:
        return self.reason(node) is not None

    def reason(self, node: Node) -> str | None:
        """Return the name of the first stage that rejects *node*, else None."""
        for name, stage in self._stages:
            try:
                if stage(node):
                    return name
            except Exception as exc:
                logger.debug("Exclusion stage %s failed on %r: %s", name, node, exc)
                return None
        return self._plugin_veto(node)

    def is_hidden(self, node: Node) -> bool:
        try:
            return self._hidden(node)
        except Exception as exc:
            logger.debug("Visibility check failed on %r: %s", node, exc)
            return False

    def is_excluded_lenient(self, node: Node) -> bool:
        """Visibility and structural stages only, on *node* and its ancestors
        up to the root.  Used by the fallback pass."""
        for el in (node, *node.ancestors(self.max_hops, stop=self.root)):
            for name, stage in self._stages[:2]:
                try:
                    if stage(el):
                        return True
                except Exception as exc:
                    logger.debug("Exclusion stage %s failed on %r: %s", name, el, exc)
        return False

    def matches_excluded_class(self, value: str) -> bool:
        if not value:
            return False
        for token, pattern in self._class_patterns:
            if value == token or pattern.search(value):
                return True
        return False

    # -- stage 1: visibility --------------------------------------------

    def _has_lazy_source(self, node: Node) -> bool:
        if any(node.has_attr(a) for a in self.rules.lazy_attributes):
            return True
        if node.name == "figure":
            img = node.find("img")
            return img is not None and any(img.has_attr(a) for a in self.rules.lazy_attributes)
        return False

    def _hidden(self, node: Node) -> bool:
        if node.name in _IMAGE_TAGS:
            if node.is_hidden():
                return not self._has_lazy_source(node)
            return False
        return node.is_hidden() or node.is_transparent()

    # -- stage 2: structural --------------------------------------------

    def _structural(self, node: Node) -> bool:
        name = node.name
        if name == "iframe":
            src = node.get("src").lower()
            if any(w in src for w in _IFRAME_AD_WORDS):
                logger.debug("Ad iframe excluded: %s", src)
            return True
        if name == "a" and is_footnote_link(node.tag):
            return True
        if is_icon(node.tag):
            return True
        if name == "aside" or node.get("role") == "complementary":
            return True

        if name not in _IMAGE_TAGS and node.select_one('input[type="email"]') is not None:
            lower = node.text_lower
            if any(w in lower for w in _NEWSLETTER_FORM_WORDS):
                return True
            if node.closest(("nav", "aside", "footer", "header"), self.max_hops) is not None:
                return True
            for anc in node.ancestors(self.max_hops):
                if {"sidebar", "navigation"} & set(anc.class_string.split()):
                    return True

        combined = node.class_and_id
        if any(c in combined for c in self.rules.ad_cta_classes):
            return True
        return any(c in combined for c in self.rules.paywall_classes)

    # -- stage 3: class / id --------------------------------------------

    def _excluded_class(self, node: Node) -> bool:
        if node.name in _IMAGE_TAGS:
            tokens = set(node.class_string.split())
            ident = node.id
            return any(t in tokens or t == ident for t in self.rules.excluded_classes)
        return self.matches_excluded_class(node.class_string) or self.matches_excluded_class(
            node.id,
        )

    # -- stage 4: text --------------------------------------------------

    def _is_body_block(self, node: Node) -> bool:
        return len(node.find_all("p", limit=_BODY_BLOCK_PARAGRAPHS)) >= _BODY_BLOCK_PARAGRAPHS

    def _text_veto(self, node: Node) -> bool:
        name = node.name
        if name in _IMAGE_TAGS or name in _SEMANTIC_CONTAINERS:
            return False
        text = node.text
        if not text:
            return False
        is_para = name == "p" or name in HEADING_TAGS
        if not is_para and self._is_body_block(node):
            return False
        lower = text.lower()

        if is_word_count_line(text) or is_original_article_line(text):
            return True
        if lower.startswith("edited by") and len(text) < (100 if is_para else 200):
            return True
        if name == "p" and is_byline_paragraph(node):
            return True
        if name == "a" and "syndicate this essay" in lower:
            return True
        if is_donation_text(text) or has_course_price(text, self.rules):
            return True

        combined = node.class_and_id
        if "summary" in combined and (
            "measure ux & design impact" in lower
            or "use the code" in lower
            or "save 20%" in lower
            or ("save" in lower and "off" in lower)
        ):
            return True

        if is_newsletter_text(text) or is_marketing_text(text):
            return True
        if "newsletter" in lower and "subscribe" in lower and has_email_input(node):
            return True

        if is_para:
            if len(text) < 200 and self.rules.is_navigation_text(text):
                return True
        elif self.rules.matches_nav_contains(text):
            return True

        if (
            "email newsletter" in lower
            or ("newsletter" in lower and "email" in lower)
            or "weekly tips" in lower
            or ("trusted by" in lower and "folks" in lower)
        ):
            check: Node | None = node
            for _ in range(3):
                if check is None:
                    break
                if has_email_input(check):
                    return True
                check = check.parent

        if (
            any(s in text for s in _CURRENCY_SYMBOLS)
            and _ANY_PRICE_RE.search(text)
            and any(k in lower for k in _AD_KEYWORDS)
        ):
            return True
        return lower.startswith("meet ") and any(
            w in lower for w in ("course", "book", "training", "product")
        )

    # -- stage 5: headings ----------------------------------------------

    def _nearby_text_has(self, node: Node, hints: tuple[str, ...]) -> bool:
        parent = node.parent
        sibling = node.next_element_sibling
        for _ in range(3):
            if parent is None and sibling is None:
                break
            check = ((parent.text if parent else "") + (sibling.text if sibling else "")).lower()
            if any(h in check for h in hints):
                return True
            parent = parent.parent if parent else None
            sibling = sibling.next_element_sibling if sibling else None
        return False

    def _heading_veto(self, node: Node) -> bool:
        if node.name not in HEADING_TAGS:
            return False
        lower = node.text_lower.strip()
        if lower.startswith("meet ") and any(w in lower for w in _MEET_PRODUCT_WORDS):
            if self._nearby_text_has(node, _MEET_PRICE_HINTS):
                return True
        if "video" in lower and ("training" in lower or "course" in lower):
            if self._nearby_text_has(node, _PRICE_HINTS):
                return True
        if "useful resources" in lower or "further reading" in lower:
            links = 0
            text_len = 0
            for sib in node.next_siblings(5):
                links += len(sib.find_all("a"))
                text_len += len(sib.text)
            if links >= 3 and text_len < 500:
                return True
        if lower in ("tags", "related"):
            return True
        return "more from" in lower or "from the archive" in lower

    # -- stage 6: separators, tabs, controls ------------------------------

    def _in_nav_structure(self, node: Node) -> bool:
        if node.closest("nav", self.max_hops) is not None:
            return True
        for anc in node.ancestors(self.max_hops):
            if anc.get("role") in ("navigation", "tablist"):
                return True
            if {"nav", "navigation", "menu", "tabs", "tab-list"} & set(anc.class_string.split()):
                return True
        return False

    def _in_navigation_group(self, node: Node) -> bool:
        parent = node.parent
        if parent is None or parent.name not in ("ul", "ol", "div", "nav"):
            return False
        short_nav = 0
        for sib in parent.children:
            text = sib.text
            if len(text) < 50 and len(text.split()) <= 4 and _NAV_TAB_RE.search(text):
                short_nav += 1
        return short_nav >= 2

    def _control_veto(self, node: Node) -> bool:
        name = node.name
        combined = node.class_and_id
        role = node.get("role")
        if name in _SEPARATOR_TAGS or role == "separator" or "separator" in combined:
            return True
        if role in ("tab", "tabpanel"):
            return True
        for anc in node.ancestors(self.max_hops):
            if anc.get("role") in ("tablist", "tabpanel"):
                return True

        text = node.text
        words = text.split()
        is_short = len(text) < 50 and len(words) <= 4
        if is_short and text and name not in _IMAGE_TAGS:
            nav_word = bool(_NAV_TAB_RE.search(text) or _NAV_TAB_RE.search(node.get("aria-label")))
            if nav_word and (
                role == "tab" or self._in_nav_structure(node) or self._in_navigation_group(node)
            ):
                return True

        if name in ("a", "p", "span") and text and len(text) < 100:
            urls = _URL_RE.findall(text)
            if urls:
                lower = text.lower()
                if any(k in lower for k in _METADATA_KEYWORDS):
                    return True
                if len(words) <= 3 and len(urls) == 1:
                    likely_meta = (
                        not _SENTENCE_END_RE.search(text) and "http" not in lower
                    ) or len(re.split(r"[:/]", text)) >= 2
                    if likely_meta:
                        return True

        if "share-buttons" in combined or "font-adjust" in combined:
            return True

        if name == "button":
            lower = text.lower()
            if any(w in lower for w in _CONTROL_BUTTON_WORDS):
                return True

        if name == "a":
            href = node.get("href").lower()
            if "/essay/" in href and node.find("img") is not None and len(text) > 30:
                parent = node.parent
                if parent is not None and len(parent.select('a[href*="/essay/"]')) >= 2:
                    return True
            if text.startswith("[") and text.endswith("]") and len(text) < 50:
                return True
        return False

    # -- stage 7: bounded ancestor walk -----------------------------------

    def _is_clear_ad(self, node: Node) -> bool:
        cls = node.class_string
        ident = node.id
        return any(p.search(cls) or p.search(ident) for p in self.rules.clear_ad_patterns)

    def _ancestor_veto(self, node: Node) -> bool:
        name = node.name
        if name in _SEMANTIC_CONTAINERS:
            return False
        is_para = name == "p" or name in HEADING_TAGS

        for anc in node.ancestors(self.max_hops, stop=self.root):
            tag = anc.name
            if name in _IMAGE_TAGS:
                if self._is_clear_ad(anc) or tag in ("iframe", "aside"):
                    return True
                continue

            if is_para:
                if tag in _REGION_TAGS or self._is_clear_ad(anc):
                    return True
                if is_related_section(anc) or is_email_signup(anc):
                    return True
                continue

            combined = anc.class_and_id
            if tag == "section" and "related-articles" in combined:
                return True
            if len(anc.text) < _NAV_ANCESTOR_MAX_TEXT and self.rules.matches_nav_contains(anc.text):
                return True
            if tag == "aside" and "ad" in combined:
                return True
            if self.matches_excluded_class(anc.class_string) or self.matches_excluded_class(
                anc.id,
            ):
                return True
        return False

    # -- plugins ----------------------------------------------------------

    def _plugin_veto(self, node: Node) -> str | None:
        from articlex.plugins import get_filters

        for plugin in get_filters():
            try:
                if plugin.exclude(node):
                    return plugin.name
            except Exception as exc:
                logger.warning("Filter plugin %s failed: %s", plugin.name, exc)
        return None
