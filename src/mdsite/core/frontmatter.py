"""Frontmatter splitting and metadata decoding"""

from typing import Any

import yaml
from pydantic import ValidationError

from mdsite.core.errors import FrontmatterError
from mdsite.core.models import DocumentMeta


DELIMITER = "---"


def split_frontmatter(text: str | bytes, source: str = "<string>") -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body).

    Input without a leading delimiter line is all body, with empty frontmatter.
    An opening delimiter without a closing one raises FrontmatterError. A closing
    delimiter on the final line counts even without a trailing newline.
    The body is stripped of leading/trailing whitespace.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != DELIMITER:
        return {}, text.strip()

    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == DELIMITER:
            break
    else:
        raise FrontmatterError(f"{source}: unclosed frontmatter")

    header = "".join(lines[1:end])
    try:
        data = yaml.safe_load(header) if header.strip() else {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"{source}: invalid YAML frontmatter: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(f"{source}: invalid YAML frontmatter: expected a mapping, got {type(data).__name__}")
    return data, "".join(lines[end + 1:]).strip()


def parse_frontmatter(text: str | bytes, source: str = "<string>") -> tuple[DocumentMeta, str]:
    """Split text and decode its header into DocumentMeta."""
    data, body = split_frontmatter(text, source)
    try:
        meta = DocumentMeta.from_frontmatter(data)
    except ValidationError as e:
        raise FrontmatterError(f"{source}: invalid frontmatter values: {e}") from e
    return meta, body
