"""Rendering pipeline: shortcodes -> placeholders -> markdown -> rendered shortcodes"""

import logging
from typing import Mapping, Optional

from mdsite.core.markdown import MarkdownConverter
from mdsite.core.models import RenderContext
from mdsite.core.render.registry import ShortcodeRenderer
from mdsite.core.shortcodes import ShortcodeParser, replace_placeholder


logger = logging.getLogger(__name__)


class Renderer:
    """Combines markdown conversion with shortcode processing.

    The converter and registry are supplied at construction and never
    mutated, so render() is a pure function of its arguments.
    """

    def __init__(
        self,
        converter: MarkdownConverter,
        renderers: Mapping[str, ShortcodeRenderer],
        parser: ShortcodeParser | None = None,
        ):
        self.converter = converter
        self.renderers = dict(renderers)
        self.parser = parser or ShortcodeParser()

    def render(self, raw: str, context: Optional[RenderContext] = None) -> str:
        text, shortcodes = self.parser.parse(raw)
        html = self.converter.convert(text)

        for sc in shortcodes:
            render_fn = self.renderers.get(sc.name)
            if render_fn is None:
                logger.debug("Unknown shortcode %r left as placeholder", sc.name)
                continue
            html = replace_placeholder(html, sc.id, render_fn(sc, context))
        return html
