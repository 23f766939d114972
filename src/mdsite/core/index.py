"""In-memory content index: derived views and read-only queries"""

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from mdsite.core.errors import (
    AssetNotFoundError, DocumentNotFoundError, DuplicateSlugError, InvalidAssetPathError,
)
from mdsite.core.loader import DEFAULT_ASSET_PREFIX, load_documents
from mdsite.core.models import (
    Author, Document, ListOptions, SeriesCount, SortField, SortOrder, TagCount,
)
from mdsite.core.render.pipeline import Renderer
from mdsite.core.utils.bundle import is_safe_asset_name


RECENT_WINDOW = timedelta(days=7)    # SeriesCount.has_recent_posts
ACTIVE_WINDOW = timedelta(days=30)   # active series sort first
TOP_TAGS = 3
WORDS_PER_MINUTE = 200


@dataclass(frozen=True)
class _Snapshot:
    """All derived views, built once and never mutated."""
    by_slug: Mapping[str, Document]
    by_date: tuple[Document, ...]
    by_tag:  Mapping[str, tuple[Document, ...]]
    tags:    tuple[TagCount, ...]
    series:  tuple[SeriesCount, ...]


def _by_date_desc(documents: Iterable[Document]) -> tuple[Document, ...]:
    # sorted() is stable, so equal dates keep insertion order
    return tuple(sorted(documents, key=lambda d: d.meta.publish_date, reverse=True))


def _top_tags(documents: Iterable[Document]) -> tuple[str, ...]:
    counts = Counter(tag for d in documents for tag in d.meta.tags)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return tuple(tag for tag, _ in ranked[:TOP_TAGS])


def _series_counts(documents: tuple[Document, ...], now: datetime) -> tuple[SeriesCount, ...]:
    members: dict[str, list[Document]] = defaultdict(list)
    for doc in documents:
        if doc.meta.series:
            members[doc.meta.series].append(doc)

    entries = []
    for name, docs in members.items():
        latest = max(d.meta.publish_date for d in docs)
        entry = SeriesCount(
            series=name,
            count=len(docs),
            top_tags=_top_tags(docs),
            has_recent_posts=latest >= now - RECENT_WINDOW,
        )
        active = latest >= now - ACTIVE_WINDOW
        entries.append((not active, -entry.count, entry.series, entry))
    return tuple(e[-1] for e in sorted(entries, key=lambda e: e[:3]))


def _unique_by_slug(documents: Iterable[Document]) -> dict[str, Document]:
    """Map slug -> document in input order; a repeated slug raises DuplicateSlugError."""
    by_slug: dict[str, Document] = {}
    for doc in documents:
        if (existing := by_slug.get(doc.slug)) is not None:
            raise DuplicateSlugError(doc.slug, existing.label, doc.label)
        by_slug[doc.slug] = doc
    return by_slug


def build_snapshot(documents: Iterable[Document], now: datetime) -> _Snapshot:
    by_slug = _unique_by_slug(documents)
    by_date = _by_date_desc(by_slug.values())

    tag_lists: dict[str, list[Document]] = defaultdict(list)
    for doc in by_date:
        for tag in doc.meta.tags:
            tag_lists[tag].append(doc)

    tags = tuple(sorted(
        (TagCount(tag=t, count=len(docs)) for t, docs in tag_lists.items()),
        key=lambda tc: (-tc.count, tc.tag),
    ))
    return _Snapshot(
        by_slug=MappingProxyType(by_slug),
        by_date=by_date,
        by_tag=MappingProxyType({t: tuple(docs) for t, docs in tag_lists.items()}),
        tags=tags,
        series=_series_counts(by_date, now),
    )


class ContentIndex:
    """Read-only index over a loaded corpus.

    All views are computed at construction into an immutable snapshot; every
    query is a synchronous in-memory read and safe to call concurrently.
    """

    def __init__(
        self,
        documents: Iterable[Document],
        now: Optional[datetime] = None,
        words_per_minute: int = WORDS_PER_MINUTE,
        ):
        self.loaded_at = now or datetime.now(timezone.utc)
        self.words_per_minute = words_per_minute
        self._snapshot = build_snapshot(documents, self.loaded_at)

    @classmethod
    def load(
        cls,
        root: Path,
        renderer: Renderer,
        default_author: Optional[Author] = None,
        asset_prefix: str = DEFAULT_ASSET_PREFIX,
        now: Optional[datetime] = None,
        words_per_minute: int = WORDS_PER_MINUTE,
        ) -> "ContentIndex":
        """Load and render every document under root; raises LoadError on any failure."""
        now = now or datetime.now(timezone.utc)
        documents = load_documents(root, renderer, default_author, asset_prefix, now)
        return cls(documents, now=now, words_per_minute=words_per_minute)

    def __len__(self) -> int:
        return len(self._snapshot.by_date)

    def get_document(self, slug: str) -> Document:
        """Return the document for slug or raise DocumentNotFoundError."""
        try:
            return self._snapshot.by_slug[slug]
        except KeyError:
            raise DocumentNotFoundError(slug) from None

    def list_documents(self, options: Optional[ListOptions] = None) -> tuple[list[Document], int]:
        """Return (page, total) where total counts matches before pagination."""
        opts = options or ListOptions()
        snap = self._snapshot

        source = snap.by_tag.get(opts.tag, ()) if opts.tag else snap.by_date
        docs = [d for d in source if not opts.series or d.meta.series == opts.series]

        if not opts.is_default_sort:
            docs.sort(key=self._sort_key(opts.sort_by), reverse=opts.sort_order == SortOrder.desc)

        total = len(docs)
        docs = docs[opts.offset:]
        if opts.limit:
            docs = docs[:opts.limit]
        return docs, total

    def list_tags(self) -> tuple[TagCount, ...]:
        """Tags by document count descending, ties alphabetical."""
        return self._snapshot.tags

    def list_series(self) -> tuple[SeriesCount, ...]:
        """Series active in the last 30 days first, then by count descending, ties alphabetical."""
        return self._snapshot.series

    def get_document_asset(self, slug: str, filename: str) -> bytes:
        """Read a file co-located with a bundle document."""
        doc = self.get_document(slug)
        if not is_safe_asset_name(filename):
            raise InvalidAssetPathError(f"invalid asset path: {filename!r}")
        if doc.bundle_dir is None:
            raise AssetNotFoundError(slug, filename)

        path = doc.bundle_dir / filename
        if not path.is_file():
            raise AssetNotFoundError(slug, filename)
        try:
            return path.read_bytes()
        except OSError as e:
            raise AssetNotFoundError(slug, filename) from e

    def _sort_key(self, field: SortField):
        if field == SortField.title:
            return lambda d: d.meta.title.casefold()
        if field == SortField.reading_time:
            return lambda d: d.meta.reading_time(self.words_per_minute)
        return lambda d: d.meta.publish_date
