"""Root test configuration: shared corpus-building fixtures"""

from datetime import datetime, timedelta, timezone

import pytest
import yaml

from mdsite.config import Settings
from mdsite.core.pipeline import build_renderer


# Fixed load time for index tests; well in the past so real-clock loads see every doc as published.
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(name="now")
def now_fixture():
    return NOW


@pytest.fixture(name="content_dir")
def content_dir_fixture(tmp_path):
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture(name="write_doc")
def write_doc_fixture(content_dir):
    """Return a helper that writes a markdown file with YAML frontmatter under content_dir.

    days_ago is relative to NOW; negative values produce future documents.
    """
    def _write(rel: str, title: str = "Doc", days_ago: float = 1, body: str = "Content.", **fields):
        header = {"title": title, "publishDate": (NOW - timedelta(days=days_ago)).isoformat(), **fields}
        text = "---\n" + yaml.safe_dump(header, sort_keys=False) + "---\n" + body + "\n"
        path = content_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture(scope="session", name="renderer")
def renderer_fixture():
    return build_renderer(Settings())
