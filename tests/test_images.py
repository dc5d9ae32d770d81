"""Tests for articlex.extractors.images - URL resolution and image filters."""

from __future__ import annotations

import pytest

from articlex.extractors.images import (
    best_srcset_url,
    figure_caption,
    image_caption,
    is_decorative_image,
    is_placeholder_url,
    is_tracking_pixel,
    normalize_image_url,
    resolve_absolute_image_url,
    resolve_image_url,
    to_absolute_url,
)


class TestUrlHelpers:
    @pytest.mark.parametrize("url", [
        "",
        None,
        "placeholder.gif",
        "/img/spacer.png",
        "data:image/gif;base64,R0lGODlhAQABAAAAACw=",
    ])
    def test_placeholders(self, url):
        assert is_placeholder_url(url)

    def test_real_url_not_placeholder(self):
        assert not is_placeholder_url("https://example.com/photos/harbor.jpg")

    def test_best_srcset_prefers_largest(self):
        srcset = "small.jpg 320w, large.jpg 1280w, medium.jpg 640w"
        assert best_srcset_url(srcset) == "large.jpg"

    def test_best_srcset_density_and_fallback(self):
        assert best_srcset_url("a.jpg 1x, b.jpg 2x") == "b.jpg"
        assert best_srcset_url("only.jpg") == "only.jpg"
        assert best_srcset_url("") is None

    def test_to_absolute_url(self):
        assert to_absolute_url("/a/b.jpg", "https://example.com/post/1") == "https://example.com/a/b.jpg"
        assert to_absolute_url("b.jpg", "https://example.com/post/1") == "https://example.com/post/b.jpg"
        assert to_absolute_url("b.jpg") == "b.jpg"

    def test_normalize_strips_query_and_fragment(self):
        assert (
            normalize_image_url("https://cdn.example.com/p/x.jpg?w=800#top")
            == "https://cdn.example.com/p/x.jpg"
        )
        assert normalize_image_url("/p/x.jpg?w=1") == "/p/x.jpg"

    def test_normalize_same_origin_variants(self):
        key = "https://example.com/a.jpg"
        for url in (
            "https://Example.com/a.jpg",
            "https://EXAMPLE.COM:443/a.jpg?w=2",
            "https://user:pw@example.com/a.jpg",
        ):
            assert normalize_image_url(url) == key
        assert normalize_image_url("http://example.com:80/a.jpg") == "http://example.com/a.jpg"
        assert normalize_image_url("https://example.com:8443/a.jpg") == "https://example.com:8443/a.jpg"


class TestResolveImageUrl:
    def test_placeholder_src_with_srcset(self, make_doc):
        doc = make_doc('<body><img src="placeholder.gif" srcset="full.jpg 800w"></body>')
        img = doc.select_one("img")
        assert resolve_image_url(img) == "full.jpg"

    def test_lazy_data_src(self, make_doc):
        doc = make_doc(
            '<body><img src="data:image/gif;base64,R0lGOD" data-src="/photos/crab.jpg"></body>'
        )
        assert resolve_image_url(doc.select_one("img")) == "/photos/crab.jpg"

    def test_data_srcset(self, make_doc):
        doc = make_doc('<body><img data-srcset="a.jpg 400w, b.jpg 900w"></body>')
        assert resolve_image_url(doc.select_one("img")) == "b.jpg"

    def test_picture_source(self, make_doc):
        doc = make_doc(
            '<body><picture><source srcset="wide.webp 1600w"><img src="blank.gif"></picture></body>'
        )
        assert resolve_image_url(doc.select_one("img")) == "wide.webp"

    def test_anchor_href_last_resort(self, make_doc):
        doc = make_doc('<body><a href="/full/whale.jpg"><img></a></body>')
        assert resolve_image_url(doc.select_one("img")) == "/full/whale.jpg"

    def test_unresolvable(self, make_doc):
        doc = make_doc('<body><img src="spacer.gif"></body>')
        assert resolve_image_url(doc.select_one("img")) is None

    def test_absolute(self, make_doc):
        doc = make_doc('<body><img src="/photos/crab.jpg"></body>')
        img = doc.select_one("img")
        assert resolve_absolute_image_url(img, "https://example.com/x") == "https://example.com/photos/crab.jpg"


class TestImageFilters:
    def test_tracking_pixel_by_size(self, make_doc):
        doc = make_doc('<body><img src="/t.gif" width="1" height="1"></body>')
        assert is_tracking_pixel(doc.select_one("img"))

    def test_tracking_pixel_by_url(self, make_doc):
        doc = make_doc('<body><img src="https://www.facebook.com/tr?id=1" width="10" height="10"></body>')
        assert is_tracking_pixel(doc.select_one("img"))

    def test_content_image_not_tracking(self, make_doc):
        doc = make_doc('<body><img src="/photos/crab.jpg" width="800" height="600"></body>')
        assert not is_tracking_pixel(doc.select_one("img"))

    def test_logo_is_decorative(self, make_doc):
        doc = make_doc('<body><img src="/static/site-logo.png" alt="Coastal Notes"></body>')
        assert is_decorative_image(doc.select_one("img"))

    def test_headshot_is_decorative(self, make_doc):
        doc = make_doc(
            '<body><div class="byline"><img src="/p/maria.jpg" width="80" height="80" alt="Maria Lopez"></div></body>'
        )
        assert is_decorative_image(doc.select_one("img"))

    def test_short_logo_token_needs_boundary(self, make_doc):
        doc = make_doc('<body><img src="/photos/lichen-on-granite.jpg" alt="Lichen"></body>')
        assert not is_decorative_image(doc.select_one("img"))

    def test_content_photo_not_decorative(self, make_doc):
        doc = make_doc(
            '<body><figure><img src="/photos/crab.jpg" width="800" height="600" alt="A hermit crab"></figure></body>'
        )
        assert not is_decorative_image(doc.select_one("img"))


class TestCaptions:
    def test_figcaption(self, make_doc):
        doc = make_doc('<body><figure><img src="a.jpg"><figcaption>Low tide.</figcaption></figure></body>')
        assert figure_caption(doc.select_one("figure"), doc.select_one("img")) == "Low tide."

    def test_credit_class(self, make_doc):
        doc = make_doc(
            '<body><figure><img src="a.jpg"><span class="photo-credit">Photo by R. Kim</span></figure></body>'
        )
        assert figure_caption(doc.select_one("figure"), doc.select_one("img")) == "Photo by R. Kim"

    def test_figure_text_minus_prefix(self, make_doc):
        doc = make_doc('<body><figure><img src="a.jpg">Photo: The harbor at dawn</figure></body>')
        assert figure_caption(doc.select_one("figure"), doc.select_one("img")) == "The harbor at dawn"

    def test_standalone_caption_sources(self, make_doc):
        doc = make_doc(
            '<body><div><img src="a.jpg" aria-label="Harbor seals"></div>'
            '<div><img src="b.jpg"><p>Seals resting on the dock.</p></div></body>'
        )
        first, second = doc.find_all("img")
        assert image_caption(first) == "Harbor seals"
        assert image_caption(second) == "Seals resting on the dock."
