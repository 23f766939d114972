"""Construction entry points: wire settings into a renderer and a loaded index"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from mdsite.config import Settings
from mdsite.core.index import ContentIndex
from mdsite.core.markdown import MarkdownConverter
from mdsite.core.render.pipeline import Renderer
from mdsite.core.render.registry import default_renderers


def build_renderer(settings: Settings) -> Renderer:
    """One converter instance, shared by the pipeline and the shortcode registry."""
    converter = MarkdownConverter(style=settings.highlight_style)
    return Renderer(converter, default_renderers(converter))


def load_index(
    settings: Settings,
    renderer: Optional[Renderer] = None,
    now: Optional[datetime] = None,
    ) -> ContentIndex:
    """Build a ready-to-query index from settings.content_dir."""
    return ContentIndex.load(
        Path(settings.content_dir),
        renderer or build_renderer(settings),
        default_author=settings.default_author,
        asset_prefix=settings.asset_prefix,
        now=now,
        words_per_minute=settings.words_per_minute,
    )
