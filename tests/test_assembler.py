"""Tests for articlex.extractors.assembler - typed items from a container."""

from __future__ import annotations

from articlex.config import ExtractorConfig
from articlex.extractors.assembler import ContentAssembler
from articlex.extractors.dedup import Deduplicator
from articlex.extractors.exclusion import ExclusionFilter
from articlex.extractors.metadata import ArticleMetadata
from articlex.items import Code, Heading, Image, ListItem, Paragraph, Quote, Table

_BODY = (
    "Tide pools warm up quickly in the afternoon sun, and the animals living in them "
    "have learned to cope with sudden changes in temperature and salinity."
)


def _assembler(doc, meta=None, base_url=""):
    meta = meta or ArticleMetadata()
    return ContentAssembler(
        doc, meta, ExclusionFilter(), Deduplicator(meta.title), ExtractorConfig(), base_url,
    )


def _run(doc, selector="article", **kwargs):
    container = doc.select_one(selector) if selector else None
    return _assembler(doc, **kwargs).assemble(container)


# ---------------------------------------------------------------------------
# Primary pass
# ---------------------------------------------------------------------------

class TestBlocks:
    def test_nested_nodes_emitted_once(self, make_doc):
        doc = make_doc(
            f"<body><article><p>{_BODY}</p>"
            "<blockquote><p>The tide pool is a city that floods twice a day.</p></blockquote>"
            '<pre><code class="language-js">const tide = low();</code></pre>'
            f"<p>{_BODY} Use <code>tide.check()</code> first.</p>"
            "</article></body>"
        )
        out = _run(doc)
        assert [i.type for i in out.items] == ["paragraph", "quote", "code", "paragraph"]
        quote = out.items[1]
        assert isinstance(quote, Quote)
        assert quote.html == "<p>The tide pool is a city that floods twice a day.</p>"
        assert out.items[2] == Code(language="js", text="const tide = low();")
        assert "<code>tide.check()</code>" in out.items[3].html

    def test_standalone_inline_code(self, make_doc):
        doc = make_doc(f"<body><article><p>{_BODY}</p><div><code>npm install</code></div></article></body>")
        out = _run(doc)
        assert out.items[-1] == Code(language="", text="npm install")

    def test_lists(self, make_doc):
        doc = make_doc(
            f"<body><article><p>{_BODY}</p>"
            "<ul><li>Sea stars</li><li> </li><li>Hermit   crabs</li></ul>"
            "<ol><li>Check the tide table</li><li>Wear boots</li></ol></article></body>"
        )
        lists = [i for i in _run(doc).items if isinstance(i, ListItem)]
        assert lists == [
            ListItem(ordered=False, items=["Sea stars", "Hermit crabs"]),
            ListItem(ordered=True, items=["Check the tide table", "Wear boots"]),
        ]

    def test_tables(self, make_doc):
        doc = make_doc(
            f"<body><article><p>{_BODY}</p>"
            "<table><tr><td>tiny</td></tr></table>"
            '<table style="width:100%"><tr><th>Zone</th><th>Animals</th></tr>'
            "<tr><td>High</td><td>Barnacles</td></tr></table></article></body>"
        )
        tables = [i for i in _run(doc).items if isinstance(i, Table)]
        assert len(tables) == 1
        assert "Barnacles" in tables[0].html
        assert "style" not in tables[0].html


class TestHeadings:
    def test_title_repeat_skipped(self, make_doc):
        doc = make_doc(
            f"<body><article><h2>Reading the Tide Pools</h2><p>{_BODY}</p>"
            f'<h2 id="zones">Zones of the shore</h2><p>{_BODY}</p></article></body>'
        )
        out = _run(doc, meta=ArticleMetadata(title="Reading the Tide Pools"))
        headings = [i for i in out.items if isinstance(i, Heading)]
        assert headings == [Heading(level=2, text="Zones of the shore", id="zones")]
        assert out.stats.skip_reasons["duplicate_heading"] == 1

    def test_numeric_and_short_headings(self, make_doc):
        doc = make_doc(f"<body><article><h3>3.</h3><h3>Hi</h3><p>{_BODY}</p></article></body>")
        assert [i.type for i in _run(doc).items] == ["paragraph"]

    def test_author_suffix_split(self, make_doc):
        doc = make_doc(
            f"<body><article><h2>A field guide to rock pools by Maria Lopez</h2><p>{_BODY}</p></article></body>"
        )
        assert _run(doc).items[0] == Heading(level=2, text="A field guide to rock pools")

    def test_repeated_section_heading(self, make_doc):
        doc = make_doc(
            f"<body><article><h2>Low tide</h2><p>{_BODY}</p><h3>Low Tide</h3><p>{_BODY}</p></article></body>"
        )
        assert [i.type for i in _run(doc).items] == ["heading", "paragraph", "paragraph"]


class TestParagraphs:
    def test_standfirst_not_repeated(self, make_doc):
        deck = "A short guide to the small worlds left behind when the sea pulls back."
        doc = make_doc(f'<body><article><p class="deck">{deck}</p><p>{_BODY}</p></article></body>')
        meta = ArticleMetadata(standfirst=deck, standfirst_node=doc.select_one("p.deck"))
        out = _run(doc, meta=meta)
        assert [i.type for i in out.items] == ["paragraph"]
        assert deck not in out.items[0].html

    def test_metadata_lines(self, make_doc):
        doc = make_doc(
            f"<body><article><p>{_BODY}</p><p>Editor: Sam Green</p><p>March 15, 2024</p>"
            "<p>[object Object]</p></article></body>"
        )
        out = _run(doc)
        assert len(out.items) == 1
        assert out.stats.skip_reasons["paragraph_metadata"] == 3

    def test_word_count_line_rejected_by_filter(self, make_doc):
        doc = make_doc(f"<body><article><p>{_BODY}</p><p>1,200 words</p></article></body>")
        out = _run(doc)
        assert len(out.items) == 1
        assert out.stats.skip_reasons["text"] == 1

    def test_solicitation(self, make_doc):
        doc = make_doc(
            f"<body><article><p>{_BODY}</p>"
            "<p>Like what you're reading? Tell a friend about us.</p></article></body>"
        )
        out = _run(doc)
        assert len(out.items) == 1
        assert out.stats.skip_reasons["paragraph_solicitation"] == 1

    def test_footnote_only_paragraph(self, make_doc):
        doc = make_doc(
            f'<body><article><p>{_BODY}</p><p><a href="#fn1">1</a> <a href="#fn2">2</a></p></article></body>'
        )
        assert len(_run(doc).items) == 1

    def test_about_author_paragraph_kept(self, make_doc):
        bio = "Maria Lopez has written about the coast of Oregon for twenty years and teaches marine biology."
        doc = make_doc(
            f"<body><article><p>{_BODY}</p>"
            f'<section class="bio-box"><h3>About the author</h3><p>{bio}</p></section></article></body>'
        )
        htmls = [i.html for i in _run(doc).items if isinstance(i, Paragraph)]
        assert bio in htmls

    def test_handler_failure_counted(self, make_doc):
        doc = make_doc(f"<body><article><p>{_BODY}</p><ul><li>Sea stars</li></ul></article></body>")
        assembler = _assembler(doc)

        def boom(node):
            raise RuntimeError("broken handler")

        assembler._handlers["p"] = boom
        out = assembler.assemble(doc.select_one("article"))
        assert [i.type for i in out.items] == ["list"]
        assert out.stats.skip_reasons["error"] == 1


class TestImages:
    def test_figure_and_duplicates(self, make_doc):
        doc = make_doc(
            f"<body><article><p>{_BODY}</p>"
            '<figure><img src="/img/crab.jpg?w=800" alt="A hermit crab" width="800" height="600">'
            "<figcaption>A hermit crab in a borrowed shell.</figcaption></figure>"
            '<img src="/img/crab.jpg" width="800" height="600" alt="A hermit crab">'
            "</article></body>"
        )
        out = _run(doc, base_url="https://example.com/post/1")
        images = [i for i in out.items if isinstance(i, Image)]
        assert images == [
            Image(
                src="https://example.com/img/crab.jpg?w=800",
                alt="A hermit crab",
                caption="A hermit crab in a borrowed shell.",
            ),
        ]
        assert out.stats.skip_reasons["duplicate_image"] == 1

    def test_featured_image_not_repeated(self, make_doc):
        doc = make_doc(
            f'<body><article><img src="/img/hero.jpg" width="1200" height="800"><p>{_BODY}</p></article></body>'
        )
        assembler = _assembler(doc, base_url="https://example.com/")
        assembler.dedup.keep_image("https://example.com/img/hero.jpg")
        out = assembler.assemble(doc.select_one("article"))
        assert [i.type for i in out.items] == ["paragraph"]

    def test_caption_used_as_alt(self, make_doc):
        doc = make_doc(
            f"<body><article><p>{_BODY}</p>"
            '<figure><img data-src="/img/anemone.jpg" src="data:image/gif;base64,R0lGOD">'
            "<figcaption>Green anemones close at low tide.</figcaption></figure></article></body>"
        )
        image = [i for i in _run(doc).items if isinstance(i, Image)][0]
        assert image.src == "/img/anemone.jpg"
        assert image.alt == image.caption == "Green anemones close at low tide."

    def test_logo_dropped(self, make_doc):
        doc = make_doc(f'<body><article><img src="/static/site-logo.png"><p>{_BODY}</p></article></body>')
        assert [i.type for i in _run(doc).items] == ["paragraph"]


# ---------------------------------------------------------------------------
# Fallbacks
# ---------------------------------------------------------------------------

class TestFallbacks:
    def test_article_main_fallback(self, make_doc):
        doc = make_doc("<body><article><h1>My Title</h1><p>Intro.</p><h2>My Title</h2><p>Body.</p></article></body>")
        out = _run(doc, selector=None, meta=ArticleMetadata(title="My Title"))
        assert [i.to_dict() for i in out.items] == [
            {"type": "paragraph", "html": "Intro."},
            {"type": "paragraph", "html": "Body."},
        ]
        assert out.stats.fallback == "article_main"
        assert out.stats.content_types == {"paragraph": 2}

    def test_article_main_fallback_drops_signup(self, make_doc):
        doc = make_doc(
            "<body><article><p>Short note.</p>"
            '<div class="newsletter"><input type="email"><p>Get the latest stories in your inbox</p></div>'
            "</article></body>"
        )
        out = _run(doc, selector=None)
        assert [i.html for i in out.items] == ["Short note."]
        assert out.stats.skip_reasons["fallback_filter"] >= 1

    def test_largest_div_fallback(self, make_doc):
        doc = make_doc(
            '<body><div class="teaser"><p>Short teaser text.</p></div>'
            f'<div class="body-copy"><h2>On the rocks</h2>{"".join(f"<p>{_BODY}</p>" for _ in range(4))}'
            "<p>ok</p></div></body>"
        )
        out = _run(doc, selector=None)
        assert out.stats.fallback == "largest_div"
        assert [i.type for i in out.items] == ["heading"] + ["paragraph"] * 4

    def test_nothing_found(self, make_doc):
        doc = make_doc("<body><span>Nothing here</span></body>")
        out = _run(doc, selector=None)
        assert out.items == []
        assert out.stats.fallback == "none"
