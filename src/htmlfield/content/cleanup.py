"""Post-sanitization passes: inline styles, empty tags, non-breaking spaces, 4-byte characters."""

from __future__ import annotations

import re
from typing import Mapping

_FONT_TAG_RE = re.compile(r"</?font\b[^>]*>")

_STYLED_TAGS = (
    "h1|h2|h3|h4|h5|h6|p|div|blockquote|pre|strong|em|b|i|u|a|span|img|table|thead|tbody|tr|td|th"
)
_STYLE_ATTR_RE = re.compile(rf'(<(?:{_STYLED_TAGS})\b[^>]*)\s+style="([^"]*)"')

_EMPTY_TAGS = "h1|h2|h3|h4|h5|h6|p|div|blockquote|pre|strong|em|a|b|i|u|span"
_EMPTY_TAG_RE = re.compile(rf"<({_EMPTY_TAGS})\s*></\1>")

_NBSP_RE = re.compile("(&nbsp;|&#160;|\u00a0)")
_MULTI_SPACE_RE = re.compile(r"  +")

_MB4_RE = re.compile("[\U00010000-\U0010ffff]")


def filter_style_declarations(style: str, allowed_styles: Mapping[str, bool]) -> str:
    """Keep only the ``name: value`` declarations whose name is allowed."""
    kept: list[str] = []
    for declaration in style.split(";"):
        name, _, value = declaration.partition(":")
        name, value = name.strip(), value.strip()
        if name in allowed_styles:
            kept.append(f"{name}: {value}")
    return "; ".join(kept)


def remove_inline_styles(html: str, allowed_styles: Mapping[str, bool]) -> str:
    """Drop ``<font>`` tags and any inline style declaration that isn't allowed."""
    html = _FONT_TAG_RE.sub("", html)

    def _filter(match: re.Match) -> str:
        style = filter_style_declarations(match.group(2), allowed_styles)
        if not style:
            return match.group(1)
        return f'{match.group(1)} style="{style}"'

    return _STYLE_ATTR_RE.sub(_filter, html)


def remove_empty_tags(html: str) -> str:
    """Remove empty element pairs like ``<p></p>``.

    Single pass: a parent left empty by the removal is kept.
    """
    return _EMPTY_TAG_RE.sub("", html)


def remove_nbsp(html: str) -> str:
    """Replace non-breaking spaces with regular spaces and collapse runs of spaces."""
    html = _NBSP_RE.sub(" ", html)
    return _MULTI_SPACE_RE.sub(" ", html)


def encode_mb4(html: str) -> str:
    """Encode 4-byte UTF-8 characters (emoji etc.) as hex character references."""
    return _MB4_RE.sub(lambda m: f"&#x{ord(m.group(0)):X};", html)
