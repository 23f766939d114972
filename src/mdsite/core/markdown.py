"""Markdown-to-HTML conversion via markdown-it with GFM extras and Pygments highlighting"""

from html import escape

from markdown_it import MarkdownIt
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound


DEFAULT_PRESET = "gfm-like"
DEFAULT_STYLE = "dracula"


class MarkdownConverter:
    """Converts markdown text to HTML.

    Tables, strikethrough, autolinks, footnotes, task lists, heading ids and
    typographic replacements are enabled. Raw HTML (including the placeholder
    comments left by the shortcode parser) passes through untouched.
    """

    def __init__(self, preset: str = DEFAULT_PRESET, style: str = DEFAULT_STYLE):
        self._formatter = HtmlFormatter(style=style, noclasses=True, nowrap=True)
        self._md = (
            MarkdownIt(preset, options_update={
                "html": True,
                "linkify": True,
                "typographer": True,
                "highlight": self._highlight,
            })
            .enable(["replacements", "smartquotes"])
            .use(footnote_plugin)
            .use(tasklists_plugin)
            .use(anchors_plugin, max_level=6)
        )

    def convert(self, text: str) -> str:
        return self._md.render(text)

    def convert_inline(self, text: str) -> str:
        """Convert text and strip the single <p> wrapper markdown-it adds."""
        html = self.convert(text).strip()
        return html.removeprefix("<p>").removesuffix("</p>")

    def _highlight(self, code: str, lang: str, attrs: str) -> str:
        # An empty return makes markdown-it fall back to its escaped <pre><code>.
        if not lang:
            return ""
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            return ""
        body = highlight(code, lexer, self._formatter)
        background = self._formatter.style.background_color
        return (
            f'<pre class="highlight" style="background-color: {background}">'
            f'<code class="language-{escape(lang)}">{body}</code></pre>'
        )
