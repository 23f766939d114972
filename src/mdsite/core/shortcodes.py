"""Shortcode extraction: replace {{name ...}} spans with placeholder comments.

Two passes over the body:

1. Block pass. Each opening tag ``{{name attrs}}`` is paired with the first
   following ``{{/name}}``; the whole span becomes one placeholder and the
   trimmed text between the tags becomes the record's content. Tags with no
   closing tag are left for the next pass.
2. Self-closing pass. Every remaining opening tag becomes a placeholder with
   empty content.

Block records precede self-closing ones; each pass is in source order. Nested
blocks of the same name are not supported: the first closing tag ends the block.
"""

import re
from typing import Iterator, NamedTuple
from uuid import uuid4

from mdsite.core.models import ShortcodeRecord


OPEN = "{{"
CLOSE = "}}"
PLACEHOLDER = "<!--shortcode:{id}-->"

_ATTR_RE = re.compile(r"""([\w-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")


class Tag(NamedTuple):
    """An opening tag located in the source text."""
    start: int      # index of the leading "{{"
    end:   int      # index just past the trailing "}}"
    name:  str
    attrs: str      # raw text between the name and "}}"


def placeholder(shortcode_id: str) -> str:
    return PLACEHOLDER.format(id=shortcode_id)


def replace_placeholder(text: str, shortcode_id: str, html: str) -> str:
    """Replace exactly one occurrence of the placeholder for shortcode_id."""
    return text.replace(placeholder(shortcode_id), html, 1)


def parse_attrs(raw: str) -> dict[str, str]:
    """Parse key="value" / key='value' pairs; anything else is skipped."""
    attrs = {}
    for m in _ATTR_RE.finditer(raw):
        attrs[m.group(1)] = m.group(2) if m.group(2) is not None else m.group(3)
    return attrs


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch in "-_"


def _match_open(text: str, pos: int) -> Tag | None:
    """Match an opening tag whose "{{" starts exactly at pos."""
    cursor = pos + len(OPEN)
    name_end = cursor
    while name_end < len(text) and _is_name_char(text[name_end]):
        name_end += 1
    if name_end == cursor:
        return None
    # attributes run to the first "}", which must begin the closing "}}"
    brace = text.find("}", name_end)
    if brace == -1 or not text.startswith(CLOSE, brace):
        return None
    return Tag(pos, brace + len(CLOSE), text[cursor:name_end], text[name_end:brace])


def scan_tags(text: str, pos: int = 0) -> Iterator[Tag]:
    """Yield opening tags left to right, starting the search at pos."""
    while True:
        start = text.find(OPEN, pos)
        if start == -1:
            return
        tag = _match_open(text, start)
        if tag is None:
            pos = start + 1
            continue
        yield tag
        pos = tag.end


def _next_tag(text: str, pos: int) -> Tag | None:
    return next(scan_tags(text, pos), None)


class ShortcodeParser:
    """Extracts shortcodes into records and placeholder-bearing text."""

    def __init__(self, id_factory=None):
        self._new_id = id_factory or (lambda: str(uuid4()))

    def parse(self, text: str) -> tuple[str, list[ShortcodeRecord]]:
        records: list[ShortcodeRecord] = []
        text = self._parse_blocks(text, records)
        text = self._parse_self_closing(text, records)
        return text, records

    def _parse_blocks(self, text: str, records: list[ShortcodeRecord]) -> str:
        out: list[str] = []
        last = 0
        pos = 0
        while (tag := _next_tag(text, pos)) is not None:
            closing = f"{OPEN}/{tag.name}{CLOSE}"
            close_start = text.find(closing, tag.end)
            if close_start == -1:
                pos = tag.end
                continue
            record = ShortcodeRecord(
                id=self._new_id(),
                name=tag.name,
                attrs=parse_attrs(tag.attrs),
                content=text[tag.end:close_start].strip(),
            )
            records.append(record)
            out.append(text[last:tag.start])
            out.append(placeholder(record.id))
            last = pos = close_start + len(closing)
        out.append(text[last:])
        return "".join(out)

    def _parse_self_closing(self, text: str, records: list[ShortcodeRecord]) -> str:
        out: list[str] = []
        last = 0
        for tag in scan_tags(text):
            record = ShortcodeRecord(id=self._new_id(), name=tag.name, attrs=parse_attrs(tag.attrs))
            records.append(record)
            out.append(text[last:tag.start])
            out.append(placeholder(record.id))
            last = tag.end
        out.append(text[last:])
        return "".join(out)
