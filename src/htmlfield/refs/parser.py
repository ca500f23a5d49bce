"""Resolve reference tags in ``href``/``src`` attributes to real URLs.

``href="{entry:5:url}"`` becomes ``href="/blog/hello#entry:5:url"``: the
original tag is kept as a URL fragment so the save pipeline can turn the
parsed URL back into the same tag.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from htmlfield.core.ports import ReferenceResolver
from htmlfield.refs.tags import HANDLE_PATTERN, TYPE_PATTERN
from htmlfield.utils.text import decode_entities

logger = logging.getLogger(__name__)

_REF_ATTR_RE = re.compile(
    r"(href=|src=)(['\"])"
    rf"(\{{({TYPE_PATTERN}:\d+(?:@\d+)?(?::(?:transform:)?{HANDLE_PATTERN})?)(?:\|\|[^}}]+)?\}})"
    r"(?:\?([^'\"#]*))?"
    r"(#[^'\"#]+)?"
    r"\2"
)


def _resolve_match(match: re.Match, resolver: ReferenceResolver, site_id: Optional[int]) -> str:
    attr, quote, tag_text, ref, query, fragment = match.groups()

    resolved = resolver.resolve_tag(tag_text, site_id)
    if resolved == tag_text:
        logger.debug("Leaving unresolvable reference tag %s", tag_text)
        return match.group(0)

    remainder = ""
    if query:
        query = decode_entities(query)
        # Already part of the resolved URL
        if query not in resolved:
            remainder += f"?{query}"

    if fragment and fragment not in resolved:
        remainder += fragment

    return f"{attr}{quote}{resolved}{remainder}#{ref}{quote}"


def parse_refs(html: str, resolver: ReferenceResolver, site_id: Optional[int] = None) -> str:
    """Swap reference tags in ``href``/``src`` values for their resolved URLs."""
    if "{" not in html:
        return html
    return _REF_ATTR_RE.sub(lambda m: _resolve_match(m, resolver, site_id), html)
