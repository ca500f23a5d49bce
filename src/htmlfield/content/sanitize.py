"""XSS sanitization for authored HTML, plus the optional post-passes."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional

import bleach
from bleach.css_sanitizer import ALLOWED_CSS_PROPERTIES, CSSSanitizer

from htmlfield.content import cleanup
from htmlfield.content.svg import extract_svgs, restore_svgs, sanitize_svg
from htmlfield.core.config import load_purifier_config
from htmlfield.core.models import FieldSettings
from htmlfield.core.ports import ReferenceResolver, Sanitizer, SvgSanitizer
from htmlfield.refs.parser import parse_refs

logger = logging.getLogger(__name__)

# Tags safe for rich text content
_ALLOWED_TAGS = [
    "p", "h1", "h2", "h3", "h4", "h5", "h6",
    "a", "strong", "em", "b", "i", "u", "s", "span", "font",
    "ul", "ol", "li",
    "blockquote", "br", "hr",
    "img", "figure", "figcaption",
    "code", "pre",
    "table", "caption", "thead", "tbody", "tr", "th", "td",
    "div",
    "dl", "dt", "dd",
    "sup", "sub",
    "abbr",
]

_ALLOWED_ATTRIBUTES = {
    "*": ["class", "style"],
    "a": ["href", "title", "target", "rel"],
    "img": ["src", "alt", "title", "width", "height"],
    "td": ["colspan", "rowspan", "align"],
    "th": ["colspan", "rowspan", "align"],
    "abbr": ["title"],
    "font": ["color", "face", "size"],
}

_IFRAME_ATTRIBUTES = ["src", "width", "height", "frameborder", "allow", "allowfullscreen", "title"]

_ALLOWED_PROTOCOLS = ["http", "https", "mailto", "tel"]

DEFAULT_PURIFIER_OPTIONS: dict[str, Any] = {
    "allowed_frame_targets": ["_blank"],
    "enable_id": True,
    "safe_iframe": True,
    "safe_iframe_url_pattern": (
        r"^(https?:)?//(www\.youtube(-nocookie)?\.com/embed/|player\.vimeo\.com/video/)"
    ),
}


# ---- Policy ----

@dataclass
class PurifierConfigEvent:
    """Passed to policy hooks, which may edit ``config`` in place."""

    config: dict[str, Any]
    file_name: Optional[str] = None


PolicyHook = Callable[[PurifierConfigEvent], None]


def build_policy(
    config_path: Optional[str | Path],
    file_name: Optional[str] = None,
    default_options: Optional[Mapping[str, Any]] = None,
    hooks: Iterable[PolicyHook] = (),
) -> dict[str, Any]:
    """Load the named rule-set, else ``Default.json``, else ``default_options``."""
    config = load_purifier_config(config_path, file_name) if config_path else None
    if not config:
        logger.debug("Using built-in purifier options")
        config = dict(default_options if default_options is not None else DEFAULT_PURIFIER_OPTIONS)

    event = PurifierConfigEvent(config=dict(config), file_name=file_name)
    for hook in hooks:
        hook(event)
    return event.config


# ---- Sanitizer engine ----

def _attribute_filter(policy: Mapping[str, Any]) -> Callable[[str, str, str], bool]:
    attributes = policy.get("attributes") or _ALLOWED_ATTRIBUTES
    enable_id = bool(policy.get("enable_id", False))
    frame_targets = set(policy.get("allowed_frame_targets") or [])
    safe_iframe = bool(policy.get("safe_iframe", False))
    iframe_pattern = policy.get("safe_iframe_url_pattern")
    iframe_re = re.compile(iframe_pattern) if iframe_pattern else None

    def allow(tag: str, name: str, value: str) -> bool:
        if name == "id":
            return enable_id
        if tag == "a" and name == "target":
            return value in frame_targets
        if tag == "iframe":
            if name == "src":
                return bool(safe_iframe and iframe_re and iframe_re.search(value))
            return name in _IFRAME_ATTRIBUTES
        return name in attributes.get(tag, []) or name in attributes.get("*", [])

    return allow


def bleach_sanitize(raw_html: str, policy: Mapping[str, Any]) -> str:
    """Sanitize HTML, stripping dangerous tags/attributes while keeping safe content markup."""
    tags = set(policy.get("tags") or _ALLOWED_TAGS)
    if policy.get("safe_iframe"):
        tags.add("iframe")

    css_sanitizer = CSSSanitizer(
        allowed_css_properties=policy.get("css_properties") or ALLOWED_CSS_PROPERTIES
    )

    return bleach.clean(
        raw_html,
        tags=tags,
        attributes=_attribute_filter(policy),
        protocols=policy.get("protocols") or _ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=bool(policy.get("strip_comments", True)),
        css_sanitizer=css_sanitizer,
    )


# ---- Sanitization stage ----

@dataclass
class ContentSanitizer:
    """Runs the purifier and the post-passes enabled in ``settings``."""

    settings: FieldSettings
    resolver: ReferenceResolver
    policy: Mapping[str, Any] = field(default_factory=lambda: dict(DEFAULT_PURIFIER_OPTIONS))
    sanitizer: Sanitizer = bleach_sanitize
    svg_sanitizer: SvgSanitizer = sanitize_svg

    def purify(self, html: str, site_id: Optional[int] = None) -> str:
        # Resolve reference tags first so the sanitizer doesn't encode their curly braces
        html = parse_refs(html, self.resolver, site_id)

        html, svg_tokens = extract_svgs(html, self.svg_sanitizer)
        html = self.sanitizer(html, self.policy)
        return restore_svgs(html, svg_tokens)

    def process(self, html: str, site_id: Optional[int] = None) -> str:
        if self.settings.purify_html:
            html = self.purify(html, site_id)

        if self.settings.remove_inline_styles:
            html = cleanup.remove_inline_styles(html, self.settings.allowed_styles)

        if self.settings.remove_empty_tags:
            html = cleanup.remove_empty_tags(html)

        if self.settings.remove_nbsp:
            html = cleanup.remove_nbsp(html)

        return html
