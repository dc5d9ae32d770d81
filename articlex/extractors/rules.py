"""Data-driven rule tables for boilerplate detection.

Everything here is plain data: phrase tables, class/id tokens and URL
tokens.  The exclusion filter, image resolver and locator receive a
:class:`RuleTables` instance at construction time, so site-specific
additions (see :func:`articlex.config.load_rules_profile`) extend the
tables without touching control flow.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Pattern

# ---------------------------------------------------------------------------
# Navigation phrases (11 languages)
# ---------------------------------------------------------------------------

# Matched against the start of the text.
_NAV_STARTS_WITH: tuple[str, ...] = (
    # English
    r"next:", r"read more", r"keep reading", r"subscribe", r"sign (in|up)",
    r"already have an account", r"try \d+ days", r"start (free )?trial",
    r"give a gift", r"manage subscription", r"essential journalism",
    r"support independent journalism", r"you might also like",
    r"you may also like", r"also in ", r"more in ", r"previous post",
    r"next post", r"related posts?", r"recommended posts?",
    r"subscribe (now|today|for)", r"support (independent )?journalism",
    r"donate (to|now)", r"give a year of", r"plus a free",
    r"comment on this article", r"view / add comments",
    r"published in the print edition", r"published in the",
    r"fuel your wonder", r"feed your curiosity", r"expand your mind",
    r"access the entire", r"ad-free", r"become a member",
    r"nautilus members enjoy", r"log in or join",
    # Russian
    r"чтобы прочитать целиком", r"купите подписку", r"платный журнал",
    r"я уже подписчик", r"подписка предоставлена", r"оформить подписку",
    r"чтобы читать далее", r"подпишитесь чтобы", r"чтобы продолжить",
    r"новое и лучшее", r"первая полоса", r"рекомендуем",
    r"читайте также", r"похожие статьи", r"связанные статьи",
    r"другие статьи", r"ещё по теме", r"по теме",
    # Ukrainian
    r"щоб прочитати цілком", r"купити підписку", r"платний журнал",
    r"я вже передплатник", r"підписка надана", r"оформити підписку",
    r"щоб читати далі", r"підпишіться щоб", r"щоб продовжити",
    r"нове і краще", r"перша смуга", r"рекомендуємо",
    r"читайте також", r"схожі статті", r"пов'язані статті",
    r"інші статті", r"ще за темою", r"за темою",
    # German
    r"um weiterzulesen", r"abonnement kaufen", r"bezahltes magazin",
    r"ich bin bereits abonnent", r"abonnement bereitgestellt",
    r"abonnement abschließen", r"um weiter zu lesen", r"abonnieren um",
    r"um fortzufahren", r"neu und besser", r"erste seite", r"empfehlen",
    r"lesen sie auch", r"ähnliche artikel", r"verwandte artikel",
    r"andere artikel", r"mehr zum thema", r"zum thema",
    # French
    r"pour lire en entier", r"acheter un abonnement", r"magazine payant",
    r"je suis déjà abonné", r"abonnement fourni", r"s'abonner",
    r"pour continuer à lire", r"abonnez-vous pour", r"pour continuer",
    r"nouveau et mieux", r"première page", r"recommandons",
    r"lisez aussi", r"articles similaires", r"articles connexes",
    r"autres articles", r"plus sur le sujet", r"sur le sujet",
    # Spanish
    r"para leer completo", r"comprar suscripción", r"revista de pago",
    r"ya soy suscriptor", r"suscripción proporcionada", r"suscribirse",
    r"para seguir leyendo", r"suscríbete para", r"para continuar",
    r"nuevo y mejor", r"primera página", r"recomendamos",
    r"lee también", r"artículos similares", r"artículos relacionados",
    r"otros artículos", r"más sobre el tema", r"sobre el tema",
    # Italian
    r"per leggere completo", r"acquista abbonamento", r"rivista a pagamento",
    r"sono già abbonato", r"abbonamento fornito", r"abbonarsi",
    r"per continuare a leggere", r"abbonati per", r"per continuare",
    r"nuovo e migliore", r"prima pagina", r"consigliamo",
    r"leggi anche", r"articoli simili", r"articoli correlati",
    r"altri articoli", r"altro sull'argomento", r"sull'argomento",
    # Portuguese
    r"para ler completo", r"comprar assinatura", r"revista paga",
    r"já sou assinante", r"assinatura fornecida", r"assinar",
    r"para continuar lendo", r"assine para",
    r"novo e melhor", r"primeira página",
    r"leia também", r"artigos similares", r"artigos relacionados",
    r"outros artigos", r"mais sobre o tema", r"sobre o tema",
    # Chinese
    r"阅读全文", r"购买订阅", r"付费杂志", r"我已经是订阅者", r"已提供订阅",
    r"订阅", r"继续阅读", r"订阅以", r"继续", r"最新和最佳", r"头版", r"推荐",
    r"也阅读", r"相似文章", r"相关文章", r"其他文章", r"更多主题", r"主题",
    # Japanese
    r"全文を読む", r"購読を購入", r"有料雑誌", r"既に購読者です",
    r"購読が提供されました", r"購読する", r"続きを読む", r"購読して", r"続ける",
    r"新しくて最高", r"第一面", r"おすすめ", r"こちらも読む", r"類似記事",
    r"関連記事", r"その他の記事", r"トピックの詳細", r"トピック",
    # Korean
    r"전체 읽기", r"구독 구매", r"유료 잡지", r"이미 구독자입니다", r"구독 제공됨",
    r"구독하기", r"계속 읽기", r"구독하여", r"계속", r"새로운 것과 최고",
    r"첫 페이지", r"추천", r"또한 읽기", r"유사한 기사", r"관련 기사",
    r"다른 기사", r"주제에 대해 더", r"주제",
)

# Matched anywhere in the text.
_NAV_CONTAINS: tuple[str, ...] = (
    # English
    r"previous\s+post", r"next\s+post", r"related\s+posts?",
    r"recommended\s+posts?", r"read\s+more", r"keep\s+reading",
    r"you\s+might\s+also\s+like", r"you\s+may\s+also\s+like",
    r"also\s+in\s+", r"more\s+in\s+", r"next\s+article",
    r"previous\s+article", r"next:", r"subscribe\s+(now|today|for)",
    r"sign\s+up", r"start\s+(free\s+)?trial",
    r"support\s+(independent\s+)?journalism", r"donate\s+(to|now)",
    r"essential\s+journalism", r"give\s+a\s+gift",
    r"comment\s+on\s+this\s+article", r"view\s+/\s+add\s+comments",
    r"published\s+in\s+the\s+print\s+edition",
    # Paywall / subscription
    r"get\s+access\s+to\s+print\s+and\s+digital",
    r"subscribe\s+for\s+full\s+access", r"free\s+articles?\s+this\s+month",
    r"subscribe\s+for\s+less\s+than", r"subscribe\s+or\s+log\s+in\s+to\s+access",
    r"connect\s+to\s+your\s+subscription", r"you've\s+read\s+(one|your)",
    r"you've\s+reached\s+your\s+free", r"download\s+pdf",
    # Russian
    r"чтобы\s+прочитать\s+целиком", r"купите\s+подписку", r"платный\s+журнал",
    r"я\s+уже\s+подписчик", r"подписка\s+предоставлена", r"оформить\s+подписку",
    r"чтобы\s+читать\s+далее", r"подпишитесь\s+чтобы", r"чтобы\s+продолжить",
    r"новое\s+и\s+лучшее", r"первая\s+полоса", r"рекомендуем",
    r"читайте\s+также", r"похожие\s+статьи", r"связанные\s+статьи",
    r"другие\s+статьи", r"ещё\s+по\s+теме", r"по\s+теме",
    # Ukrainian
    r"щоб\s+прочитати\s+цілком", r"купити\s+підписку", r"платний\s+журнал",
    r"я\s+вже\s+передплатник", r"підписка\s+надана", r"оформити\s+підписку",
    r"щоб\s+читати\s+далі", r"підпишіться\s+щоб", r"щоб\s+продовжити",
    r"нове\s+і\s+краще", r"перша\s+смуга", r"рекомендуємо",
    r"читайте\s+також", r"схожі\s+статті", r"пов'язані\s+статті",
    r"інші\s+статті", r"ще\s+за\s+темою", r"за\s+темою",
    # German
    r"um\s+weiterzulesen", r"abonnement\s+kaufen", r"bezahltes\s+magazin",
    r"ich\s+bin\s+bereits\s+abonnent", r"abonnement\s+bereitgestellt",
    r"abonnement\s+abschließen", r"um\s+weiter\s+zu\s+lesen", r"abonnieren\s+um",
    r"um\s+fortzufahren", r"neu\s+und\s+besser", r"erste\s+seite", r"empfehlen",
    r"lesen\s+sie\s+auch", r"ähnliche\s+artikel", r"verwandte\s+artikel",
    r"andere\s+artikel", r"mehr\s+zum\s+thema", r"zum\s+thema",
    # French
    r"pour\s+lire\s+en\s+entier", r"acheter\s+un\s+abonnement",
    r"magazine\s+payant", r"je\s+suis\s+déjà\s+abonné", r"abonnement\s+fourni",
    r"s'abonner", r"pour\s+continuer\s+à\s+lire", r"abonnez-vous\s+pour",
    r"pour\s+continuer", r"nouveau\s+et\s+mieux", r"première\s+page",
    r"recommandons", r"lisez\s+aussi", r"articles\s+similaires",
    r"articles\s+connexes", r"autres\s+articles", r"plus\s+sur\s+le\s+sujet",
    r"sur\s+le\s+sujet",
    # Spanish
    r"para\s+leer\s+completo", r"comprar\s+suscripción", r"revista\s+de\s+pago",
    r"ya\s+soy\s+suscriptor", r"suscripción\s+proporcionada", r"suscribirse",
    r"para\s+seguir\s+leyendo", r"suscríbete\s+para", r"para\s+continuar",
    r"nuevo\s+y\s+mejor", r"primera\s+página", r"recomendamos",
    r"lee\s+también", r"artículos\s+similares", r"artículos\s+relacionados",
    r"otros\s+artículos", r"más\s+sobre\s+el\s+tema", r"sobre\s+el\s+tema",
    # Italian
    r"per\s+leggere\s+completo", r"acquista\s+abbonamento",
    r"rivista\s+a\s+pagamento", r"sono\s+già\s+abbonato",
    r"abbonamento\s+fornito", r"abbonarsi", r"per\s+continuare\s+a\s+leggere",
    r"abbonati\s+per", r"per\s+continuare", r"nuovo\s+e\s+migliore",
    r"prima\s+pagina", r"consigliamo", r"leggi\s+anche", r"articoli\s+simili",
    r"articoli\s+correlati", r"altri\s+articoli", r"altro\s+sull'argomento",
    r"sull'argomento",
    # Portuguese
    r"para\s+ler\s+completo", r"comprar\s+assinatura", r"revista\s+paga",
    r"já\s+sou\s+assinante", r"assinatura\s+fornecida", r"assinar",
    r"para\s+continuar\s+lendo", r"assine\s+para", r"novo\s+e\s+melhor",
    r"primeira\s+página", r"leia\s+também", r"artigos\s+similares",
    r"artigos\s+relacionados", r"outros\s+artigos", r"mais\s+sobre\s+o\s+tema",
    r"sobre\s+o\s+tema",
    # Chinese
    r"阅读全文", r"购买订阅", r"付费杂志", r"我已经是订阅者", r"已提供订阅",
    r"订阅", r"继续阅读", r"订阅以", r"继续", r"最新和最佳", r"头版", r"推荐",
    r"也阅读", r"相似文章", r"相关文章", r"其他文章", r"更多主题", r"主题",
    # Japanese
    r"全文を読む", r"購読を購入", r"有料雑誌", r"既に購読者です",
    r"購読が提供されました", r"購読する", r"続きを読む", r"購読して", r"続ける",
    r"新しくて最高", r"第一面", r"おすすめ", r"こちらも読む", r"類似記事",
    r"関連記事", r"その他の記事", r"トピックの詳細", r"トピック",
    # Korean
    r"전체\s+읽기", r"구독\s+구매", r"유료\s+잡지", r"이미\s+구독자입니다",
    r"구독\s+제공됨", r"구독하기", r"계속\s+읽기", r"구독하여", r"계속",
    r"새로운\s+것과\s+최고", r"첫\s+페이지", r"추천", r"또한\s+읽기",
    r"유사한\s+기사", r"관련\s+기사", r"다른\s+기사", r"주제에\s+대해\s+더", r"주제",
)

# ---------------------------------------------------------------------------
# Plain substring phrase tables (lower-case)
# ---------------------------------------------------------------------------

PAYWALL_PHRASES: tuple[str, ...] = (
    # English
    "keep reading", "subscribe", "sign up", "try 30 days",
    "already have an account", "start free trial",
    "get access to print and digital", "subscribe for full access",
    "free articles this month", "subscribe for less than",
    "subscribe or log in to access", "connect to your subscription",
    "you've read one", "you've read your", "you've reached your free",
    # Russian
    "чтобы прочитать целиком", "купите подписку", "платный журнал",
    "я уже подписчик", "подписка предоставлена", "оформить подписку",
    "чтобы читать далее", "подпишитесь чтобы", "чтобы продолжить",
    # Ukrainian
    "щоб прочитати цілком", "купити підписку", "платний журнал",
    "я вже передплатник", "підписка надана", "оформити підписку",
    "щоб читати далі", "підпишіться щоб", "щоб продовжити",
    # German
    "um weiterzulesen", "abonnement kaufen", "bezahltes magazin",
    "ich bin bereits abonnent", "abonnement bereitgestellt",
    "abonnement abschließen", "um weiter zu lesen", "abonnieren um",
    "um fortzufahren",
    # French
    "pour lire en entier", "acheter un abonnement", "magazine payant",
    "je suis déjà abonné", "abonnement fourni", "s'abonner",
    "pour continuer à lire", "abonnez-vous pour", "pour continuer",
    # Spanish
    "para leer completo", "comprar suscripción", "revista de pago",
    "ya soy suscriptor", "suscripción proporcionada", "suscribirse",
    "para seguir leyendo", "suscríbete para", "para continuar",
    # Italian
    "per leggere completo", "acquista abbonamento", "rivista a pagamento",
    "sono già abbonato", "abbonamento fornito", "abbonarsi",
    "per continuare a leggere", "abbonati per", "per continuare",
    # Portuguese
    "para ler completo", "comprar assinatura", "revista paga",
    "já sou assinante", "assinatura fornecida", "assinar",
    "para continuar lendo", "assine para",
    # Chinese
    "阅读全文", "购买订阅", "付费杂志", "我已经是订阅者", "已提供订阅", "订阅",
    "继续阅读", "订阅以", "继续",
    # Japanese
    "全文を読む", "購読を購入", "有料雑誌", "既に購読者です",
    "購読が提供されました", "購読する", "続きを読む", "購読して", "続ける",
    # Korean
    "전체 읽기", "구독 구매", "유료 잡지", "이미 구독자입니다", "구독 제공됨",
    "구독하기", "계속 읽기", "구독하여", "계속",
)

RELATED_PHRASES: tuple[str, ...] = (
    # English
    "new and best", "read also", "similar articles", "related articles",
    "other articles", "more on topic",
    # Russian
    "новое и лучшее", "первая полоса", "рекомендуем", "читайте также",
    "похожие статьи", "связанные статьи", "другие статьи", "ещё по теме",
    "по теме",
    # Ukrainian
    "нове і краще", "перша смуга", "рекомендуємо", "читайте також",
    "схожі статті", "пов'язані статті", "інші статті", "ще за темою",
    "за темою",
    # German
    "neu und besser", "erste seite", "empfehlen", "lesen sie auch",
    "ähnliche artikel", "verwandte artikel", "andere artikel",
    "mehr zum thema", "zum thema",
    # French
    "nouveau et mieux", "première page", "recommandons", "lisez aussi",
    "articles similaires", "articles connexes", "autres articles",
    "plus sur le sujet", "sur le sujet",
    # Spanish
    "nuevo y mejor", "primera página", "recomendamos", "lee también",
    "artículos similares", "artículos relacionados", "otros artículos",
    "más sobre el tema", "sobre el tema",
    # Italian
    "nuovo e migliore", "prima pagina", "consigliamo", "leggi anche",
    "articoli simili", "articoli correlati", "altri articoli",
    "altro sull'argomento", "sull'argomento",
    # Portuguese
    "novo e melhor", "primeira página", "leia também", "artigos similares",
    "artigos relacionados", "outros artigos", "mais sobre o tema",
    "sobre o tema",
    # Chinese
    "最新和最佳", "头版", "推荐", "也阅读", "相似文章", "相关文章", "其他文章",
    "更多主题",
    # Japanese
    "新しくて最高", "第一面", "おすすめ", "こちらも読む", "類似記事", "関連記事",
    "その他の記事", "トピックの詳細",
    # Korean
    "새로운 것과 최고", "첫 페이지", "추천", "또한 읽기", "유사한 기사",
    "관련 기사", "다른 기사", "주제에 대해 더",
)

COURSE_AD_PHRASES: tuple[str, ...] = (
    "video + ux training", "get video", "video training", "video course",
    "measure ux & design impact", "money-back-guarantee", "money back guarantee",
    "get the video course", "get video + ux training",
    "use the code", "save 20%", "save 20% off",
)

NEWSLETTER_PHRASES: tuple[str, ...] = (
    "sign up to our newsletter",
    "join more than",
    "newsletter subscribers",
    "get the latest",
    "inbox",
    "email powered by",
    "powered by salesforce",
    "salesforce marketing cloud",
    "marketing cloud",
)

# ---------------------------------------------------------------------------
# Class / id tokens
# ---------------------------------------------------------------------------

EXCLUDED_CLASSES: tuple[str, ...] = (
    "nav", "navigation", "menu", "sidebar", "footer", "header",
    "ad", "advertisement", "ads", "sponsor", "sponsored", "advert",
    "comment", "comments", "discussion", "thread", "disqus",
    "related", "related-posts", "related-articles", "related-articles__title",
    "recommended", "also-in",
    "article-section-title", "entry-wrapper", "c-accordion", "accordion",
    "social", "share", "share-buttons", "share-menu",
    "author-bio", "author-info", "about-author",
    "translation-notice", "translation-badge",
    "post-navigation", "post-nav", "prev", "next", "previous",
    "read-more", "readmore", "keep-reading", "subscribe", "paywall", "gate",
    "newsletter", "newsletter-signup", "subscribe-box",
    "support", "donate", "donation",
    "corrections", "correction",
    "you-might-also-like", "you-may-also-like", "more-in",
    "next-article", "previous-article", "article-nav",
    "comment-section", "comments-section", "view-comments", "add-comment",
    "book-cta", "course-cta", "product-cta", "course-ad", "product-ad",
    "content-tabs", "content-tab", "book-cta__inverted", "book-cta__col",
    "useful-resources", "further-reading", "resources-section",
    "component-share-buttons", "aria-font-adjusts", "font-adjust",
)

PAYWALL_CLASSES: tuple[str, ...] = (
    "freebie-message", "subscribe-text", "message--freebie", "subscribe-",
    "paywall", "subscription", "freebie", "article-limit", "access-message",
)

AD_CTA_CLASSES: tuple[str, ...] = (
    "book-cta", "course-cta", "product-cta", "course-ad", "product-ad",
)

# Ancestor classes that mark an unmistakable ad slot.
CLEAR_AD_PATTERNS: tuple[str, ...] = (
    r"\bad\b", r"\badvertisement\b", r"\bads\b", r"\bsponsor\b",
    r"\bsponsored\b", r"ad-container", r"ad-wrapper", r"ad-box",
    r"advertisement-container",
)

CONTENT_HINTS: tuple[str, ...] = (
    "article", "content", "post", "entry", "main", "story", "text",
)

SHARE_CLASSES: tuple[str, ...] = (
    "share", "social-share", "share-buttons", "sharing", "social-links",
)

# Containers whose paragraphs and headings belong to the author box.
ABOUT_AUTHOR_CLASSES: tuple[str, ...] = (
    "about-author", "author-bio", "author-info",
)

# ---------------------------------------------------------------------------
# Image tokens
# ---------------------------------------------------------------------------

LOGO_PATTERNS: tuple[str, ...] = (
    "logo", "brand", "icon", "badge", "watermark", "sprite", "spacer", "blank",
    "clear", "pixel",
    "youtube", "facebook", "twitter", "instagram", "linkedin", "pinterest", "rss",
    "social-media", "social-icon", "share-icon", "share-button",
    "youtube-white-logo", "youtube-logo", "yt-logo",
    "facebook-logo", "twitter-logo", "instagram-logo",
    "arrow", "chevron", "bullet", "dot", "gradient", "bg", "background",
    "shadow", "border", "divider", "line", "separator", "spinner", "loader",
    "loading", "placeholder", "default", "avatar", "user", "profile", "gravatar",
    "data:image/gif;base64,r0lgodlh",
    "data:image/png;base64,i",
)

TRACKING_PATTERNS: tuple[str, ...] = (
    "pixel", "tracking", "beacon", "analytics", "facebook.com/tr",
    "doubleclick", "googleads",
)

PLACEHOLDER_PATTERNS: tuple[str, ...] = (
    "placeholder", "spacer", "blank", "1x1", "pixel.gif",
)

LAZY_ATTRIBUTES: tuple[str, ...] = (
    "data-src", "data-lazy-src", "data-original", "data-srcset",
)

# Lazy-load attributes tried, in order, by the image resolver.
IMAGE_DATA_ATTRIBUTES: tuple[str, ...] = (
    "data-src", "data-lazy-src", "data-original", "data-lazy",
    "data-full-src", "data-high-res", "data-srcset", "data-original-src",
)

AUTHOR_IMAGE_CLASSES: tuple[str, ...] = (
    "headshot", "author-photo", "byline-thumbnail", "contributor-thumbnail",
    "rich-byline", "wp-post-image",
)


# ---------------------------------------------------------------------------
# RuleTables
# ---------------------------------------------------------------------------

def _compile(patterns: tuple[str, ...], prefix: str = "") -> tuple[Pattern[str], ...]:
    return tuple(re.compile(prefix + p, re.IGNORECASE) for p in patterns)


@dataclass(frozen=True)
class RuleTables:
    """Immutable bundle of every rule table the engine consults."""

    nav_starts_with: tuple[Pattern[str], ...] = field(
        default_factory=lambda: _compile(_NAV_STARTS_WITH, "^"),
    )
    nav_contains: tuple[Pattern[str], ...] = field(
        default_factory=lambda: _compile(_NAV_CONTAINS),
    )
    paywall_phrases: tuple[str, ...] = PAYWALL_PHRASES
    related_phrases: tuple[str, ...] = RELATED_PHRASES
    course_ad_phrases: tuple[str, ...] = COURSE_AD_PHRASES
    newsletter_phrases: tuple[str, ...] = NEWSLETTER_PHRASES
    excluded_classes: tuple[str, ...] = EXCLUDED_CLASSES
    paywall_classes: tuple[str, ...] = PAYWALL_CLASSES
    ad_cta_classes: tuple[str, ...] = AD_CTA_CLASSES
    clear_ad_patterns: tuple[Pattern[str], ...] = field(
        default_factory=lambda: _compile(CLEAR_AD_PATTERNS),
    )
    content_hints: tuple[str, ...] = CONTENT_HINTS
    share_classes: tuple[str, ...] = SHARE_CLASSES
    about_author_classes: tuple[str, ...] = ABOUT_AUTHOR_CLASSES
    logo_patterns: tuple[str, ...] = LOGO_PATTERNS
    tracking_patterns: tuple[str, ...] = TRACKING_PATTERNS
    placeholder_patterns: tuple[str, ...] = PLACEHOLDER_PATTERNS
    lazy_attributes: tuple[str, ...] = LAZY_ATTRIBUTES
    image_data_attributes: tuple[str, ...] = IMAGE_DATA_ATTRIBUTES
    author_image_classes: tuple[str, ...] = AUTHOR_IMAGE_CLASSES

    def is_navigation_text(self, text: str) -> bool:
        """Return True if *text* reads like navigation / subscription chrome."""
        stripped = text.strip()
        if not stripped:
            return False
        if any(p.search(stripped) for p in self.nav_starts_with):
            return True
        return any(p.search(stripped) for p in self.nav_contains)

    def matches_nav_contains(self, text: str) -> bool:
        return any(p.search(text) for p in self.nav_contains)

    def extended(
        self,
        *,
        excluded_classes: list[str] | tuple[str, ...] = (),
        navigation_phrases: list[str] | tuple[str, ...] = (),
        paywall_phrases: list[str] | tuple[str, ...] = (),
        logo_patterns: list[str] | tuple[str, ...] = (),
    ) -> RuleTables:
        """Return a copy with extra entries appended to the named tables.

        *navigation_phrases* are regular expressions matched anywhere in
        the text; the others are plain lower-case substrings / tokens.
        """
        return replace(
            self,
            excluded_classes=self.excluded_classes
            + tuple(c.lower() for c in excluded_classes),
            nav_contains=self.nav_contains + _compile(tuple(navigation_phrases)),
            paywall_phrases=self.paywall_phrases
            + tuple(p.lower() for p in paywall_phrases),
            logo_patterns=self.logo_patterns + tuple(p.lower() for p in logo_patterns),
        )


DEFAULT_RULES = RuleTables()
