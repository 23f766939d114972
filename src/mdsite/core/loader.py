"""Loading phase: discover markdown files, parse, render, and filter documents"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from mdsite.core.errors import DuplicateSlugError, LoadError
from mdsite.core.frontmatter import parse_frontmatter
from mdsite.core.models import Author, Document, DocumentMeta, RenderContext
from mdsite.core.render.pipeline import Renderer
from mdsite.core.utils.bundle import rewrite_image_refs
from mdsite.core.utils.text import count_words


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {".md", ".markdown"}
INDEX_STEM = "index"
DEFAULT_ASSET_PREFIX = "/posts"


@dataclass(frozen=True)
class SourceFile:
    path: Path
    bundle_dir: Optional[Path] = None


def _is_index(path: Path) -> bool:
    return path.stem == INDEX_STEM and path.suffix.lower() in MD_EXTENSIONS


def discover_files(root: Path) -> list[SourceFile]:
    """Return markdown sources under root in sorted path order.

    A subdirectory holding an index file (index.md, index.markdown) is a
    bundle: only its index file is a document and the directory is kept for
    asset lookups. Hidden files and directories are skipped.
    """
    files = sorted(
        p for p in root.rglob("*")
        if p.is_file()
        and p.suffix.lower() in MD_EXTENSIONS
        and not any(part.startswith(".") for part in p.relative_to(root).parts)
    )
    bundles = {p.parent for p in files if _is_index(p) and p.parent != root}

    sources = []
    for p in files:
        if p.parent in bundles:
            if _is_index(p):
                sources.append(SourceFile(p, bundle_dir=p.parent))
            continue
        sources.append(SourceFile(p))
    return sources


def read_source(source: SourceFile) -> tuple[DocumentMeta, str]:
    """Read and split a source file, wrapping I/O and decode failures as LoadError."""
    try:
        raw = source.path.read_bytes()
        return parse_frontmatter(raw, str(source.path))
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Failed to load {source.path}: {e}") from e


def build_document(
    source: SourceFile,
    meta: DocumentMeta,
    body: str,
    renderer: Renderer,
    default_author: Optional[Author] = None,
    asset_prefix: str = DEFAULT_ASSET_PREFIX,
    ) -> Document:
    """Resolve defaults, count words, and render a parsed source."""
    updates = {"word_count": count_words(body)}
    if not meta.slug:
        updates["slug"] = source.bundle_dir.name if source.bundle_dir else source.path.stem
    if default_author is not None and (meta.author is None or not meta.author.name):
        updates["author"] = default_author
    meta = meta.model_copy(update=updates)

    markdown = body
    if source.bundle_dir is not None:
        markdown = rewrite_image_refs(body, meta.slug, asset_prefix)

    context = RenderContext(citations=meta.citations) if meta.citations else None
    return Document(
        meta=meta,
        raw_content=body,
        html=renderer.render(markdown, context),
        source_path=source.path,
        bundle_dir=source.bundle_dir,
    )


def load_documents(
    root: Path,
    renderer: Renderer,
    default_author: Optional[Author] = None,
    asset_prefix: str = DEFAULT_ASSET_PREFIX,
    now: Optional[datetime] = None,
    ) -> list[Document]:
    """Load every published document under root, in discovery order.

    Drafts and documents dated after `now` are dropped before rendering. Any
    per-file failure or a slug shared by two documents aborts the whole load.
    """
    root = Path(root)
    if not root.is_dir():
        raise LoadError(f"content directory not found: {root}")
    now = now or datetime.now(timezone.utc)

    documents: dict[str, Document] = {}
    skipped = 0
    for source in discover_files(root):
        meta, body = read_source(source)
        if meta.draft or meta.publish_date > now:
            logger.debug("Skipping unpublished document %s", source.path)
            skipped += 1
            continue

        doc = build_document(source, meta, body, renderer, default_author, asset_prefix)
        if (existing := documents.get(doc.slug)) is not None:
            raise DuplicateSlugError(doc.slug, existing.label, doc.label)
        documents[doc.slug] = doc
        logger.debug("Loaded %s as %r", source.path, doc.slug)

    logger.info("Loaded %d document(s) from %s (%d unpublished skipped)", len(documents), root, skipped)
    return list(documents.values())
