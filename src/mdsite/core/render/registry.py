"""Shortcode renderers: name -> function(record, context) -> HTML fragment"""

import re
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import quote_plus

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from mdsite.core.markdown import MarkdownConverter
from mdsite.core.models import RenderContext, ShortcodeRecord


TEMPLATES_DIR = Path(__file__).parent / "templates"
BIBLE_GATEWAY_URL = "https://www.biblegateway.com/passage/"

ShortcodeRenderer = Callable[[ShortcodeRecord, Optional[RenderContext]], str]

_VERSE_RE = re.compile(r"(?:^|(?<=\s))(\\?)(\d+)\s+")
_DROP_CAP_RE = re.compile(r"^((?:\s*<sup\b[^>]*>.*?</sup>)*\s*)([^\s<])", re.DOTALL)


def make_environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


@dataclass
class Fragments:
    """Shared tools for renderers: inline markdown and template rendering."""
    converter: MarkdownConverter
    env: Environment

    def inline(self, text: str) -> Markup:
        return Markup(self.converter.convert_inline(text))

    def render(self, template: str, **values) -> str:
        return self.env.get_template(template).render(**values).strip()


@dataclass(frozen=True)
class TimelineEvent:
    date: str
    title: str
    description: str = ""


def parse_timeline_events(content: str) -> list[TimelineEvent]:
    """Parse `date|title|description` lines; blank and single-field lines are skipped."""
    events = []
    for line in content.splitlines():
        parts = [p.strip() for p in line.split("|", 2)]
        if len(parts) < 2:
            continue
        events.append(TimelineEvent(*parts))
    return events


def bible_gateway_url(ref: str, version: str = "") -> str:
    url = f"{BIBLE_GATEWAY_URL}?search={quote_plus(ref)}"
    if version:
        url += f"&version={quote_plus(version)}"
    return url


def format_verse_numbers(html: str) -> str:
    r"""Turn leading `N ` verse numbers into superscripts; `\N` keeps a literal number."""
    def _sub(m: re.Match) -> str:
        if m.group(1):
            return m.group(2) + " "
        return f'<sup class="verse-num">{m.group(2)}</sup>'
    return _VERSE_RE.sub(_sub, html)


def apply_scripture_drop_cap(html: str) -> str:
    """Wrap the first letter (after any leading verse numbers) in a drop-cap span."""
    return _DROP_CAP_RE.sub(r'\1<span class="scripture-drop-cap">\2</span>', html, count=1)


def render_figure(fx: Fragments, sc: ShortcodeRecord, ctx: Optional[RenderContext]) -> str:
    return fx.render("figure.html", src=sc.attrs.get("src", ""),
                     alt=sc.attrs.get("alt", ""), caption=sc.attrs.get("caption", ""))


def render_quote(fx: Fragments, sc: ShortcodeRecord, ctx: Optional[RenderContext]) -> str:
    return fx.render("quote.html", author=sc.attrs.get("author", ""),
                     source=sc.attrs.get("source", ""), content=fx.inline(sc.content))


def render_sidenote(fx: Fragments, sc: ShortcodeRecord, ctx: Optional[RenderContext]) -> str:
    return fx.render("sidenote.html", id=sc.attrs.get("id", ""), content=fx.inline(sc.content))


def render_cite(fx: Fragments, sc: ShortcodeRecord, ctx: Optional[RenderContext]) -> str:
    text = sc.attrs.get("text", "")
    url = sc.attrs.get("url", "")
    alias = sc.attrs.get("alias")
    if alias and ctx is not None and alias in ctx.citations:
        citation = ctx.citations[alias]
        text, url = citation.text, citation.url
    return fx.render("cite.html", text=text, url=url)


def render_term(fx: Fragments, sc: ShortcodeRecord, ctx: Optional[RenderContext]) -> str:
    return fx.render("term.html", word=sc.attrs.get("word", ""),
                     origin=sc.attrs.get("origin", ""), content=fx.inline(sc.content))


def render_parallel(fx: Fragments, sc: ShortcodeRecord, ctx: Optional[RenderContext]) -> str:
    left, _, right = sc.content.partition("---")
    return fx.render(
        "parallel.html",
        left_label=sc.attrs.get("left", ""),
        right_label=sc.attrs.get("right", ""),
        left=fx.inline(left.strip()),
        right=fx.inline(right.strip()),
    )


def render_timeline(fx: Fragments, sc: ShortcodeRecord, ctx: Optional[RenderContext]) -> str:
    return fx.render("timeline.html", start=sc.attrs.get("start", ""),
                     end=sc.attrs.get("end", ""), events=parse_timeline_events(sc.content))


def render_scripture(fx: Fragments, sc: ShortcodeRecord, ctx: Optional[RenderContext]) -> str:
    # Verse markup is injected after conversion so markdown never sees it.
    content = format_verse_numbers(str(fx.inline(sc.content.strip())))
    ref = sc.attrs.get("ref", "")
    version = sc.attrs.get("version", "")
    return fx.render(
        "scripture.html",
        ref=ref,
        version=version,
        url=bible_gateway_url(ref, version),
        poetry=sc.attrs.get("format") == "poetry",
        content=Markup(apply_scripture_drop_cap(content)),
    )


BUILTIN_RENDERERS = {
    "figure": render_figure,
    "quote": render_quote,
    "sidenote": render_sidenote,
    "cite": render_cite,
    "term": render_term,
    "parallel": render_parallel,
    "timeline": render_timeline,
    "scripture": render_scripture,
}


def default_renderers(
    converter: MarkdownConverter,
    env: Environment | None = None,
    ) -> dict[str, ShortcodeRenderer]:
    """Build the built-in registry bound to one converter instance."""
    fx = Fragments(converter=converter, env=env or make_environment())
    return {name: partial(fn, fx) for name, fn in BUILTIN_RENDERERS.items()}
