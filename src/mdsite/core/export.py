"""JSON-ready views of documents, tags, and series"""

from typing import Any

from mdsite.core.models import Document, SeriesCount, TagCount


def document_to_dict(doc: Document, include_html: bool = True, words_per_minute: int = 200) -> dict[str, Any]:
    """Serialize a document; list views pass include_html=False.

    Optional keys (series, author) are omitted when unset.
    """
    meta = doc.meta
    data: dict[str, Any] = {
        "slug": meta.slug,
        "title": meta.title,
        "summary": meta.summary,
        "publishDate": meta.publish_date.isoformat(),
        "tags": list(meta.tags),
        "readingTime": meta.reading_time(words_per_minute),
    }
    if meta.series:
        data["series"] = meta.series
    if meta.author is not None and meta.author.name:
        data["author"] = meta.author.model_dump()
    if include_html:
        data["htmlContent"] = doc.html
    return data


def documents_to_dicts(docs: list[Document], words_per_minute: int = 200) -> list[dict[str, Any]]:
    return [document_to_dict(d, include_html=False, words_per_minute=words_per_minute) for d in docs]


def tag_to_dict(tc: TagCount) -> dict[str, Any]:
    return {"tag": tc.tag, "count": tc.count}


def series_to_dict(sc: SeriesCount) -> dict[str, Any]:
    return {
        "series": sc.series,
        "count": sc.count,
        "topTags": list(sc.top_tags),
        "hasRecentPosts": sc.has_recent_posts,
    }
