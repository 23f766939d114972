"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdsite.config import Settings, load_config
from mdsite.core.errors import ContentError, LoadError, NotFoundError
from mdsite.core.export import document_to_dict, documents_to_dicts, series_to_dict, tag_to_dict
from mdsite.core.frontmatter import parse_frontmatter
from mdsite.core.index import ContentIndex
from mdsite.core.models import ListOptions, RenderContext, SortField, SortOrder
from mdsite.core.pipeline import build_renderer, load_index


ContentDir = Annotated[Optional[str], typer.Option("--content-dir", help="Root of the document tree")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _index(settings: Settings) -> ContentIndex:
    try:
        return load_index(settings)
    except LoadError as e:
        _fail("Load failed", e)


def _echo_json(data) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def list_cmd(
    content_dir: ContentDir = None,
    tag: Annotated[Optional[str], typer.Option("--tag", help="Only documents with this tag")] = None,
    series: Annotated[Optional[str], typer.Option("--series", help="Only documents in this series")] = None,
    limit: Annotated[int, typer.Option("--limit", min=0, help="Page size; 0 = unlimited")] = 0,
    offset: Annotated[int, typer.Option("--offset", min=0, help="Documents to skip")] = 0,
    sort_by: Annotated[SortField, typer.Option("--sort-by", help="Sort field")] = SortField.date,
    order: Annotated[SortOrder, typer.Option("--order", help="Sort direction")] = SortOrder.desc,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON")] = False,
    ):
    """List published documents, newest first by default."""
    settings = _settings(overrides={"content_dir": content_dir})
    index = _index(settings)
    opts = ListOptions(
        tag=tag or "", series=series or "", limit=limit, offset=offset,
        sort_by=sort_by, sort_order=order,
    )
    docs, total = index.list_documents(opts)

    if as_json:
        _echo_json({"posts": documents_to_dicts(docs, settings.words_per_minute), "total": total})
        return
    for doc in docs:
        typer.echo(f"{doc.meta.publish_date:%Y-%m-%d}  {doc.slug}  {doc.meta.title}")
    typer.echo(f"Showing {len(docs)} of {total} document(s)")


def show_cmd(
    slug: Annotated[str, typer.Argument(help="Document slug")],
    content_dir: ContentDir = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON including rendered HTML")] = False,
    ):
    """Print one document's rendered HTML."""
    settings = _settings(overrides={"content_dir": content_dir})
    index = _index(settings)
    try:
        doc = index.get_document(slug)
    except NotFoundError as e:
        _fail(str(e))
    if as_json:
        _echo_json(document_to_dict(doc, words_per_minute=settings.words_per_minute))
    else:
        typer.echo(doc.html)


def tags_cmd(
    content_dir: ContentDir = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON")] = False,
    ):
    """List tags with document counts."""
    settings = _settings(overrides={"content_dir": content_dir})
    index = _index(settings)
    tags = index.list_tags()
    if as_json:
        _echo_json([tag_to_dict(tc) for tc in tags])
        return
    if not tags:
        typer.echo("No tags found.")
        return
    for tc in tags:
        typer.echo(f"{tc.count:>4}  {tc.tag}")


def series_cmd(
    content_dir: ContentDir = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON")] = False,
    ):
    """List series, recently active first."""
    settings = _settings(overrides={"content_dir": content_dir})
    index = _index(settings)
    series = index.list_series()
    if as_json:
        _echo_json([series_to_dict(s) for s in series])
        return
    if not series:
        typer.echo("No series found.")
        return
    for sc in series:
        recent = " (recent)" if sc.has_recent_posts else ""
        typer.echo(f"{sc.count:>4}  {sc.series}{recent}  [{', '.join(sc.top_tags)}]")


def render_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Markdown file to render")],
    ):
    """Render a single markdown file (frontmatter optional) to HTML on stdout."""
    settings = _settings()
    try:
        meta, body = parse_frontmatter(path.read_bytes(), str(path))
    except ContentError as e:
        _fail("Render failed", e)
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)
    context = RenderContext(citations=meta.citations) if meta.citations else None
    typer.echo(build_renderer(settings).render(body, context))
