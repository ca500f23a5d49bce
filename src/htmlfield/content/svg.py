"""Inline SVG handling: sanitize SVGs separately and hide them from the HTML sanitizer."""

from __future__ import annotations

import logging
import re
import secrets
import string

import bleach

from htmlfield.core.ports import SvgSanitizer

logger = logging.getLogger(__name__)

_SVG_RE = re.compile(r"<svg\b.*?>.*?</svg>", re.IGNORECASE | re.DOTALL)

_TOKEN_PREFIX = "svg:"
_TOKEN_LENGTH = 10
_TOKEN_ALPHABET = string.ascii_letters + string.digits

# html5lib camel-cases some SVG element names, so both spellings are listed
_SVG_TAGS = [
    "svg", "g", "defs", "symbol", "use", "title", "desc",
    "path", "rect", "circle", "ellipse", "line", "polyline", "polygon",
    "text", "tspan", "textPath", "textpath",
    "linearGradient", "lineargradient", "radialGradient", "radialgradient", "stop",
    "clipPath", "clippath", "mask", "pattern", "image",
]

_SVG_ATTRIBUTES = [
    "id", "class", "xmlns", "version", "role", "aria-hidden", "aria-label",
    "width", "height", "x", "y", "x1", "y1", "x2", "y2", "cx", "cy", "r", "rx", "ry",
    "d", "points", "transform", "viewBox", "viewbox", "preserveAspectRatio",
    "preserveaspectratio", "fill", "fill-opacity", "fill-rule", "clip-rule", "clip-path",
    "stroke", "stroke-width", "stroke-linecap", "stroke-linejoin", "stroke-opacity",
    "stroke-dasharray", "opacity", "offset", "stop-color", "stop-opacity",
    "gradientUnits", "gradientunits", "gradientTransform", "gradienttransform",
    "font-family", "font-size", "font-weight", "text-anchor", "dominant-baseline",
    "mask", "href", "xlink:href",
]


def _new_token() -> str:
    return _TOKEN_PREFIX + "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(_TOKEN_LENGTH))


def sanitize_svg(markup: str) -> str:
    """Strip scripts, event handlers and unknown elements from an ``<svg>`` block."""
    if not markup.lstrip().lower().startswith("<svg"):
        raise ValueError("Not an SVG element")
    return bleach.clean(
        markup,
        tags=_SVG_TAGS,
        attributes=_SVG_ATTRIBUTES,
        protocols=["http", "https"],
        strip=True,
        strip_comments=True,
    )


def extract_svgs(html: str, svg_sanitizer: SvgSanitizer = sanitize_svg) -> tuple[str, dict[str, str]]:
    """Replace every inline SVG with a placeholder token.

    Returns (html_with_tokens, {token: sanitized_svg}). Exceptions raised by
    ``svg_sanitizer`` propagate.
    """
    tokens: dict[str, str] = {}

    def _tokenize(match: re.Match) -> str:
        token = _new_token()
        tokens[token] = svg_sanitizer(match.group(0))
        return token

    html = _SVG_RE.sub(_tokenize, html)
    if tokens:
        logger.debug("Tokenized %d inline SVG(s)", len(tokens))
    return html, tokens


def restore_svgs(html: str, tokens: dict[str, str]) -> str:
    """Put sanitized SVGs back in place of their tokens."""
    for token, svg in tokens.items():
        html = html.replace(token, svg)
    return html
