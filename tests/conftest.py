"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from articlex.extractors.dom import Document
from articlex.plugins import clear_plugins

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def article_html() -> str:
    return _read_fixture("article.html")


@pytest.fixture
def minimal_article_html() -> str:
    return _read_fixture("minimal_article.html")


@pytest.fixture
def make_doc():
    """Build a :class:`Document` from an HTML string."""

    def _make(html: str) -> Document:
        return Document(BeautifulSoup(html, "lxml"))

    return _make


@pytest.fixture(autouse=True)
def _reset_plugins():
    clear_plugins()
    yield
    clear_plugins()
