"""articlex - heuristic article extraction from HTML.

Quick usage::

    from articlex import extract_html

    result = extract_html(html, base_url="https://example.com/post")
    print(result.title, result.author, result.publish_date)
    print(result.to_json())

Plugin extension points::

    from articlex import register_scorer

    class BoostStoryBody:
        name = "boost_story_body"
        def score(self, node, base_score):
            return base_score + (50 if "story-body" in node.class_string else 0)

    register_scorer(BoostStoryBody())
"""

from articlex.config import ExtractorConfig, RuleConfigError
from articlex.engine import extract_article, extract_html
from articlex.items import (
    Code,
    ContentItem,
    ExtractionResult,
    Heading,
    Image,
    ListItem,
    Paragraph,
    Quote,
    Subtitle,
    Table,
)
from articlex.plugins import register_filter, register_scorer

__version__ = "0.1.0"
__all__ = [
    "Code",
    "ContentItem",
    "ExtractionResult",
    "ExtractorConfig",
    "Heading",
    "Image",
    "ListItem",
    "Paragraph",
    "Quote",
    "RuleConfigError",
    "Subtitle",
    "Table",
    "extract_article",
    "extract_html",
    "register_filter",
    "register_scorer",
]
