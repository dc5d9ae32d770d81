"""Tests for articlex.extractors.metadata - title, author, date, image, standfirst."""

from __future__ import annotations

import pytest

from articlex.extractors.metadata import (
    author_from_url,
    extract_metadata,
    find_featured_image,
    find_standfirst,
    is_valid_title,
    parse_date,
    standfirst_html,
    strip_author_prefix,
)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

class TestParseDate:
    @pytest.mark.parametrize("raw,expected", [
        ("2024-03-15T10:00:00Z", "2024-03-15"),
        ("2024-03-15", "2024-03-15"),
        ("  2024-03 ", "2024-03"),
        ("2024", "2024"),
        ("March 2024", "2024-03"),
        ("Sept 2021", "2021-09"),
        ("15 March 2024", "2024-03-15"),
        ("March 15, 2024", "2024-03-15"),
    ])
    def test_accepted(self, raw, expected):
        assert parse_date(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "1850", "1850-01-01", "2150-06", "no date here"])
    def test_rejected(self, raw):
        assert parse_date(raw) is None


class TestDateLookup:
    def test_time_datetime(self, make_doc):
        doc = make_doc('<body><article><time datetime="2024-03-15T10:00:00Z">March 15</time></article></body>')
        assert extract_metadata(doc).publish_date == "2024-03-15"

    def test_meta_beats_time(self, make_doc):
        doc = make_doc(
            '<head><meta property="article:published_time" content="2022-01-02"></head>'
            '<body><time datetime="2024-03-15">x</time></body>'
        )
        assert extract_metadata(doc).publish_date == "2022-01-02"

    def test_jsonld_date(self, make_doc):
        doc = make_doc(
            '<head><script type="application/ld+json">'
            '{"@type": "NewsArticle", "datePublished": "2022-05-06T08:00:00Z"}'
            "</script></head><body><p>Text</p></body>"
        )
        assert extract_metadata(doc).publish_date == "2022-05-06"

    def test_standalone_date_line(self, make_doc):
        doc = make_doc("<body><article><h1>Some headline</h1><p>March 5, 2023</p></article></body>")
        assert extract_metadata(doc).publish_date == "2023-03-05"

    def test_no_date(self, make_doc):
        doc = make_doc("<body><article><p>Nothing dated here.</p></article></body>")
        assert extract_metadata(doc).publish_date == ""


# ---------------------------------------------------------------------------
# Authors
# ---------------------------------------------------------------------------

class TestAuthorHelpers:
    @pytest.mark.parametrize("url,expected", [
        ("/author/jane-doe", "Jane Doe"),
        ("https://example.com/author/jane_doe/", "Jane Doe"),
        ("/profile/johnSmith", "John Smith"),
        ("/profile/susannarustin", "Susanna Rustin"),
        ("/author/admin", "Admin"),
        ("/about/team", None),
        ("", None),
    ])
    def test_author_from_url(self, url, expected):
        assert author_from_url(url) == expected

    @pytest.mark.parametrize("raw,expected", [
        ("By Jane Doe", "Jane Doe"),
        ("Written by  Jane Doe", "Jane Doe"),
        ("von Max Weber", "Max Weber"),
        ("Автор: Иван Петров", "Иван Петров"),
        ("da: Marco Rossi", "Marco Rossi"),
        ("Davide Rossi", "Davide Rossi"),
    ])
    def test_strip_author_prefix(self, raw, expected):
        assert strip_author_prefix(raw) == expected


class TestAuthorLookup:
    def test_slug_link_text_uses_href(self, make_doc):
        doc = make_doc('<body><article><a href="/author/jane-doe">jane-doe</a></article></body>')
        assert extract_metadata(doc).author == "Jane Doe"

    def test_meta_beats_jsonld(self, make_doc):
        doc = make_doc(
            '<head><meta name="author" content="Ann Lee">'
            '<script type="application/ld+json">{"@type": "Article", "author": {"name": "Other"}}</script>'
            "</head><body></body>"
        )
        assert extract_metadata(doc).author == "Ann Lee"

    def test_rel_author_strips_prefix(self, make_doc):
        doc = make_doc('<body><span rel="author">By Tom Reyes</span></body>')
        assert extract_metadata(doc).author == "Tom Reyes"

    def test_jsonld_author(self, make_doc):
        doc = make_doc(
            '<head><script type="application/ld+json">'
            '{"@graph": [{"@type": "WebSite"}, {"@type": "BlogPosting", "author": [{"name": "Kim Park"}]}]}'
            "</script></head><body></body>"
        )
        assert extract_metadata(doc).author == "Kim Park"

    def test_article_byline_text(self, make_doc):
        doc = make_doc('<body><article><div class="meta-wrapper">Posted by Lee Chang</div></article></body>')
        assert extract_metadata(doc).author == "Lee Chang"

    def test_no_author(self, make_doc):
        doc = make_doc("<body><article><p>Anonymous text.</p></article></body>")
        assert extract_metadata(doc).author == ""


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------

class TestTitle:
    def test_is_valid_title(self):
        assert is_valid_title("Reading the Tide Pools")
        assert not is_valid_title("Hi")
        assert not is_valid_title("  News ")

    def test_article_h1_first(self, make_doc):
        doc = make_doc("<body><h1>Coastal Notes</h1><article><h1>The Real Headline</h1></article></body>")
        meta = extract_metadata(doc)
        assert meta.title == "The Real Headline"
        assert meta.title_node == doc.select_one("article").find("h1")

    def test_main_h1_when_article_has_none(self, make_doc):
        doc = make_doc("<body><h1>Coastal Notes</h1><main><h1>Main Headline</h1></main></body>")
        assert extract_metadata(doc).title == "Main Headline"

    def test_heading_markers_cleaned(self, make_doc):
        doc = make_doc("<body><article><h1>Zones of the shore #</h1></article></body>")
        assert extract_metadata(doc).title == "Zones of the shore"

    def test_document_title_fallback(self, make_doc):
        doc = make_doc("<head><title>Tide Tables</title></head><body><p>x</p></body>")
        meta = extract_metadata(doc)
        assert meta.title == "Tide Tables"
        assert meta.title_node is None


# ---------------------------------------------------------------------------
# Featured image and standfirst
# ---------------------------------------------------------------------------

class TestFeaturedImage:
    def test_og_image_absolutized(self, make_doc):
        doc = make_doc('<head><meta property="og:image" content="/img/hero.jpg"></head><body></body>')
        assert find_featured_image(doc, None, "https://example.com/a/b") == "https://example.com/img/hero.jpg"

    def test_logo_meta_skipped_for_container_image(self, make_doc):
        doc = make_doc(
            '<head><meta property="og:image" content="/static/logo.png"></head>'
            '<body><article><img src="/static/site-logo.png">'
            '<img src="/img/crab.jpg" width="900" height="600"></article></body>'
        )
        container = doc.select_one("article")
        assert find_featured_image(doc, container, "https://example.com/") == "https://example.com/img/crab.jpg"

    def test_large_image_or_nothing(self, make_doc):
        doc = make_doc(
            '<body><article><p>Text</p><img src="/a.jpg" width="800" height="600">'
            '</article></body>'
        )
        container = doc.select_one("article")
        assert find_featured_image(doc, container) == "/a.jpg"

        doc = make_doc(
            '<body><article><img src="/tiny.png" width="120" height="90">'
            '<img src="/small.jpg" width="200" height="100"></article></body>'
        )
        assert find_featured_image(doc, doc.select_one("article")) is None

    def test_none_without_sources(self, make_doc):
        doc = make_doc("<body><p>No pictures.</p></body>")
        assert find_featured_image(doc, None) is None


class TestStandfirst:
    def test_deck_class(self, make_doc):
        deck = "A short guide to the small worlds left behind when the sea pulls back."
        doc = make_doc(f'<body><article><p class="deck">{deck}</p><p>Body.</p></article></body>')
        text, node = find_standfirst(doc.select_one("article"))
        assert text == deck
        assert node == doc.select_one("p.deck")

    def test_first_paragraph_summary(self, make_doc):
        lede = "Scientists counted more species than expected in a single rock pool this spring."
        doc = make_doc(f"<body><article><p>{lede}</p></article></body>")
        text, _ = find_standfirst(doc.select_one("article"))
        assert text == lede

    def test_narrative_opening_is_not_standfirst(self, make_doc):
        doc = make_doc(
            "<body><article><p>The morning we arrived the tide was already going out fast.</p></article></body>"
        )
        assert find_standfirst(doc.select_one("article")) == ("", None)

    def test_linked_or_short_first_paragraph(self, make_doc):
        doc = make_doc(
            '<body><article><p>Counted more species than expected, <a href="/x">see the data</a> here.</p>'
            "</article></body>"
        )
        assert find_standfirst(doc.select_one("article")) == ("", None)
        assert find_standfirst(None) == ("", None)

    def test_standfirst_html_escapes(self):
        assert standfirst_html("Fish & chips <b>") == '<p class="standfirst">Fish &amp; chips &lt;b&gt;</p>'
