"""Bundle helpers: rewrite relative image references and guard asset paths"""

import re
from pathlib import PurePosixPath
from urllib.parse import urlsplit

from mdsite.core.utils.text import FENCED_CODE_RE, INLINE_CODE_RE


MD_IMAGE_RE = re.compile(r"(!\[[^\]]*\]\()(\s*)([^)\s]+)")
FIGURE_SRC_RE = re.compile(r"""(\{\{figure\b[^}]*?\bsrc=)(["'])([^"']*)(\2)""")
CODE_RE = re.compile(f"{FENCED_CODE_RE.pattern}|{INLINE_CODE_RE.pattern}", re.DOTALL)


def is_relative_ref(url: str) -> bool:
    """True for bare relative paths (no scheme, not rooted, not a fragment)."""
    if not url or url.startswith(("/", "#", "\\")):
        return False
    return not urlsplit(url).scheme


def asset_url(prefix: str, slug: str, ref: str) -> str:
    return f"{prefix.rstrip('/')}/{slug}/{ref.removeprefix('./')}"


def rewrite_image_refs(markdown: str, slug: str, prefix: str) -> str:
    """Point relative markdown images and figure src attributes at the bundle's asset URL.

    Fenced code blocks and inline code spans are left verbatim.
    """
    def _image(m: re.Match) -> str:
        url = m.group(3)
        if is_relative_ref(url):
            url = asset_url(prefix, slug, url)
        return f"{m.group(1)}{m.group(2)}{url}"

    def _figure(m: re.Match) -> str:
        url = m.group(3)
        if is_relative_ref(url):
            url = asset_url(prefix, slug, url)
        return f"{m.group(1)}{m.group(2)}{url}{m.group(4)}"

    def _rewrite(text: str) -> str:
        return FIGURE_SRC_RE.sub(_figure, MD_IMAGE_RE.sub(_image, text))

    out: list[str] = []
    last = 0
    for m in CODE_RE.finditer(markdown):
        out.append(_rewrite(markdown[last:m.start()]))
        out.append(m.group(0))
        last = m.end()
    out.append(_rewrite(markdown[last:]))
    return "".join(out)


def is_safe_asset_name(filename: str) -> bool:
    """Reject empty names, rooted paths, and any parent-directory segment."""
    if not filename or filename.startswith(("/", "\\")):
        return False
    parts = PurePosixPath(filename.replace("\\", "/")).parts
    return ".." not in parts
