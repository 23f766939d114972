"""Data models for documents, shortcodes, and index views"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


EPOCH = datetime(1, 1, 1, tzinfo=timezone.utc)


class Author(BaseModel):
    model_config = ConfigDict(frozen=True)
    name:   str = ""
    avatar: str = ""     # URL or path to avatar image
    bio:    str = ""


class Citation(BaseModel):
    """A reusable citation declared in frontmatter and referenced by alias."""
    model_config = ConfigDict(frozen=True)
    text: str = ""
    url:  str = ""


class DocumentMeta(BaseModel):
    """Metadata decoded from a document's YAML frontmatter."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title:        str = ""
    slug:         str = ""
    summary:      str = ""
    series:       str = ""
    publish_date: datetime = Field(default=EPOCH, alias="publishDate")
    draft:        bool = False
    tags:         tuple[str, ...] = ()
    author:       Optional[Author] = None
    citations:    dict[str, Citation] = Field(default_factory=dict)
    word_count:   int = Field(default=0, ge=0, exclude=True)   # computed, never authored

    @classmethod
    def from_frontmatter(cls, data: dict[str, Any]) -> "DocumentMeta":
        """Validate a frontmatter mapping, ignoring any authored word count."""
        data = {k: v for k, v in data.items() if k not in ("word_count", "wordCount")}
        return cls.model_validate(data)

    @field_validator("title", "slug", "summary", "series", mode="before")
    @classmethod
    def _scalar_to_str(cls, v):
        return "" if v is None else str(v)

    @field_validator("publish_date", mode="before")
    @classmethod
    def _normalize_date(cls, v):
        if v is None:
            return EPOCH
        if isinstance(v, date) and not isinstance(v, datetime):
            v = datetime.combine(v, time.min)
        return v

    @field_validator("publish_date")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, v):
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        return tuple(dict.fromkeys(str(t) for t in v))

    def reading_time(self, words_per_minute: int = 200) -> int:
        """Estimated reading time in whole minutes, never less than one."""
        return max(1, self.word_count // words_per_minute)


class Document(BaseModel):
    """A loaded, rendered document. Immutable once built."""
    model_config = ConfigDict(frozen=True)

    meta:        DocumentMeta
    raw_content: str                      # markdown body without frontmatter
    html:        str                      # rendered markup
    source_path: Optional[Path] = None
    bundle_dir:  Optional[Path] = None    # set only for directory bundles

    @property
    def slug(self) -> str:
        return self.meta.slug

    @property
    def label(self) -> str:
        """Title plus source path, for error messages."""
        return f"{self.meta.title} ({self.source_path})" if self.source_path else self.meta.title


@dataclass(frozen=True)
class ShortcodeRecord:
    """A shortcode extracted from a body; `id` keys its placeholder."""
    id:      str
    name:    str
    attrs:   dict[str, str] = field(default_factory=dict)
    content: str = ""                     # empty for self-closing shortcodes


@dataclass(frozen=True)
class RenderContext:
    """Document-scoped data available to shortcode renderers."""
    citations: Mapping[str, Citation] = field(default_factory=dict)


@dataclass(frozen=True)
class TagCount:
    tag:   str
    count: int


@dataclass(frozen=True)
class SeriesCount:
    series:           str
    count:            int
    top_tags:         tuple[str, ...] = ()   # up to 3, most frequent first, ties alphabetical
    has_recent_posts: bool = False           # any member published within the last 7 days


class SortField(str, Enum):
    date = "date"
    title = "title"
    reading_time = "readingTime"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class ListOptions(BaseModel):
    """Filters, sort, and pagination for ContentIndex.list_documents."""
    tag:        str = ""
    series:     str = ""
    offset:     int = Field(default=0, ge=0)
    limit:      int = Field(default=0, ge=0, description="0 = unlimited")
    sort_by:    SortField = SortField.date
    sort_order: SortOrder = SortOrder.desc

    @property
    def is_default_sort(self) -> bool:
        return self.sort_by == SortField.date and self.sort_order == SortOrder.desc
