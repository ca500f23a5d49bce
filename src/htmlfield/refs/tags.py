"""Reference tag grammar: ``type:id[@siteId][:transform]`` and its ``{...}`` embedding."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Optional

from htmlfield.core.models import ReferenceTag

# Same shape as a handle, with backslash separators for namespaced type names
HANDLE_PATTERN = r"[a-zA-Z][a-zA-Z0-9_]*"
TYPE_PATTERN = r"[a-zA-Z][\w\\]*"

REF_PATTERN = rf"({TYPE_PATTERN}):(\d+)(?:@(\d+))?(?::((?:transform:)?{HANDLE_PATTERN}))?"

_BARE_RE = re.compile(REF_PATTERN)
_EMBEDDED_RE = re.compile(rf"\{{{REF_PATTERN}(?:\|\|([^}}]+))?\}}")

DEFAULT_TRANSFORM = "url"


def parse_tag(text: str) -> Optional[ReferenceTag]:
    """Parse a bare (``entry:5@1:url``) or embedded (``{entry:5:url||/x}``) tag.

    Returns None when ``text`` isn't a reference tag.
    """
    text = text.strip()
    m = _EMBEDDED_RE.fullmatch(text)
    if m:
        ref_type, ref_id, site_id, transform, fallback = m.groups()
    else:
        m = _BARE_RE.fullmatch(text)
        if not m:
            return None
        ref_type, ref_id, site_id, transform = m.groups()
        fallback = None

    return ReferenceTag(
        type=ref_type,
        id=int(ref_id),
        site_id=int(site_id) if site_id is not None else None,
        transform=transform,
        fallback_url=fallback,
    )


def format_tag(tag: ReferenceTag) -> str:
    """Return the bare ``type:id[@siteId][:transform]`` form."""
    text = f"{tag.type}:{tag.id}"
    if tag.site_id is not None:
        text += f"@{tag.site_id}"
    if tag.transform:
        text += f":{tag.transform}"
    return text


def embed_tag(tag: ReferenceTag) -> str:
    """Return the braced form stored in content, ``{ref}`` or ``{ref||fallback}``."""
    if tag.fallback_url:
        return f"{{{format_tag(tag)}||{tag.fallback_url}}}"
    return f"{{{format_tag(tag)}}}"


def with_default_transform(tag: ReferenceTag) -> ReferenceTag:
    """Make sure the tag targets a concrete attribute, ``url`` by default."""
    if tag.transform:
        return tag
    return replace(tag, transform=DEFAULT_TRANSFORM)
