"""Word counting on raw markdown"""

import re


FENCED_CODE_RE = re.compile(r"```.*?```", re.DOTALL)
INLINE_CODE_RE = re.compile(r"`[^`]+`")
SHORTCODE_RE = re.compile(r"\{\{[^}]+\}\}")


def count_words(markdown: str) -> int:
    """Count whitespace-delimited words, ignoring code and shortcode tags.

    Runs on raw markdown so markup never inflates the count. A shortcode tag
    whose attributes contain "}" is not stripped and its tokens are counted.
    """
    text = FENCED_CODE_RE.sub("", markdown)
    text = INLINE_CODE_RE.sub("", text)
    text = SHORTCODE_RE.sub("", text)
    return len(text.split())
