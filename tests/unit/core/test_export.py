"""Unit tests for core/export.py"""

from datetime import datetime, timezone

from mdsite.core.export import document_to_dict, documents_to_dicts, series_to_dict, tag_to_dict
from mdsite.core.models import Author, Document, DocumentMeta, SeriesCount, TagCount


def _doc(**meta) -> Document:
    fields = {"title": "T", "slug": "t", "publish_date": datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)}
    fields.update(meta)
    return Document(meta=DocumentMeta(**fields), raw_content="body", html="<p>body</p>")


def test_document_to_dict_minimal():
    assert document_to_dict(_doc(summary="S", tags=("a", "b"), word_count=450)) == {
        "slug": "t",
        "title": "T",
        "summary": "S",
        "publishDate": "2024-01-15T09:30:00+00:00",
        "tags": ["a", "b"],
        "readingTime": 2,
        "htmlContent": "<p>body</p>",
    }


def test_document_to_dict_optional_fields():
    data = document_to_dict(_doc(series="intro", author=Author(name="Ada", avatar="/a.png")))
    assert data["series"] == "intro"
    assert data["author"] == {"name": "Ada", "avatar": "/a.png", "bio": ""}


def test_document_to_dict_nameless_author_omitted():
    assert "author" not in document_to_dict(_doc(author=Author(avatar="/a.png")))


def test_document_to_dict_words_per_minute():
    assert document_to_dict(_doc(word_count=450), words_per_minute=100)["readingTime"] == 4


def test_documents_to_dicts_excludes_html():
    data = documents_to_dicts([_doc(slug="a"), _doc(slug="b")])
    assert [d["slug"] for d in data] == ["a", "b"]
    assert all("htmlContent" not in d for d in data)


def test_tag_and_series_to_dict():
    assert tag_to_dict(TagCount("go", 3)) == {"tag": "go", "count": 3}
    assert series_to_dict(SeriesCount("intro", 2, ("a", "b"), True)) == {
        "series": "intro",
        "count": 2,
        "topTags": ["a", "b"],
        "hasRecentPosts": True,
    }
