"""Pydantic schema for extracted articles.

``ContentItem`` is a tagged union discriminated on ``type``.  Two-word field
names serialize with camelCase aliases (``isFeatured``, ``publishDate``,
``debugInfo``, ``errorStack``) and unset optional fields are left out of the
JSON output.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Content items
# ---------------------------------------------------------------------------

class _Item(BaseModel):
    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Heading(_Item):
    type: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=6)
    text: str
    id: str | None = None


class Paragraph(_Item):
    type: Literal["paragraph"] = "paragraph"
    html: str


class Subtitle(_Item):
    type: Literal["subtitle"] = "subtitle"
    text: str
    html: str


class Image(_Item):
    type: Literal["image"] = "image"
    src: str
    alt: str = ""
    caption: str = ""
    is_featured: bool | None = Field(default=None, alias="isFeatured")


class Quote(_Item):
    type: Literal["quote"] = "quote"
    html: str


class Code(_Item):
    type: Literal["code"] = "code"
    language: str = ""
    text: str


class ListItem(_Item):
    type: Literal["list"] = "list"
    ordered: bool = False
    items: list[str] = Field(default_factory=list)


class Table(_Item):
    type: Literal["table"] = "table"
    html: str


ContentItem = Annotated[
    Union[Heading, Paragraph, Subtitle, Image, Quote, Code, ListItem, Table],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

class ExtractionResult(BaseModel):
    """Canonical output of one extraction call."""

    model_config = {"populate_by_name": True}

    title: str = ""
    author: str = ""
    publish_date: str = Field(default="", alias="publishDate")
    content: list[ContentItem] = Field(default_factory=list)
    debug_info: dict[str, Any] | None = Field(default=None, alias="debugInfo")
    error: str | None = None
    error_stack: str | None = Field(default=None, alias="errorStack")

    @field_validator("title", "author", "publish_date", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v or ""

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @property
    def images(self) -> list[Image]:
        return [item for item in self.content if isinstance(item, Image)]

    @property
    def headings(self) -> list[Heading]:
        return [item for item in self.content if isinstance(item, Heading)]
