"""Swap URLs in saved HTML for reference tags.

Runs at save time, after sanitization. Two passes:

1. ``normalize_element_urls`` turns parsed URLs that still carry their tag as
   a fragment (``/blog/hello#entry:5:url``) back into ``{entry:5:url||/blog/hello}``.
2. ``rewrite_urls`` matches plain URLs against the site and volume base URLs
   and asks the resolver which entry or asset lives there.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Iterable, Optional
from urllib.parse import urlsplit

from htmlfield.core.models import BaseUrlEntry, ReferenceTag, Site, Volume
from htmlfield.core.ports import ReferenceResolver, SiteRegistry
from htmlfield.refs.tags import HANDLE_PATTERN, TYPE_PATTERN, embed_tag, format_tag, with_default_transform
from htmlfield.utils.text import decode_entities, ensure_trailing_slash, remove_prefix, split_file_path

logger = logging.getLogger(__name__)

_ELEMENT_URL_RE = re.compile(
    r"(href=|src=)(['\"])([^'\"?#]*)(\?[^'\"?#]+)?(#[^'\"?#]+)?(?:#|%23)"
    rf"({TYPE_PATTERN}):(\d+)(?:@(\d+))?(?::((?:transform:)?{HANDLE_PATTERN}))?\2"
)

_URL_ATTR_RE = re.compile(r"(href=|src=)(['\"])((?:/|http).*?)\2")
_QUERY_RE = re.compile(r"\?.*")


# --- Base URL registry ---

def build_registry(sites: Iterable[Site], volumes: Iterable[Volume]) -> tuple[BaseUrlEntry, ...]:
    """Collect site and volume base URLs, longest first."""
    entries: list[BaseUrlEntry] = []
    for site in sites:
        if site.has_urls and site.base_url:
            entries.append(BaseUrlEntry(ensure_trailing_slash(site.base_url), site_id=site.id))
    for volume in volumes:
        if volume.has_urls and volume.base_url:
            entries.append(BaseUrlEntry(ensure_trailing_slash(volume.base_url), volume_id=volume.id))

    # Longest first so a nested base URL wins over its parent
    entries.sort(key=lambda e: len(e.base_url), reverse=True)
    return tuple(entries)


def registry_from(sites: SiteRegistry) -> tuple[BaseUrlEntry, ...]:
    return build_registry(sites.list_sites(), sites.list_volumes())


# --- Element URLs ---

def normalize_element_urls(html: str, resolver: ReferenceResolver) -> str:
    """Turn ``url#type:id[@site][:transform]`` values into ``{ref||url}`` tags."""

    def _normalize(match: re.Match) -> str:
        attr, quote, url, query, fragment, ref_type, ref_id, site_id, transform = match.groups()

        tag = with_default_transform(ReferenceTag(
            type=ref_type,
            id=int(ref_id),
            site_id=int(site_id) if site_id else None,
            transform=transform,
        ))

        query = query or ""
        fragment = fragment or ""
        if query or fragment:
            # The URL format itself may include a query or hash (e.g. "?slug={slug}"),
            # in which case it belongs to the fallback URL
            parsed = resolver.resolve_tag(f"{{{format_tag(tag)}}}")
            if query:
                query = decode_entities(query)
                if query in parsed:
                    url += query
                    query = ""
            if fragment and fragment in parsed:
                url += fragment
                fragment = ""

        stored = embed_tag(replace(tag, fallback_url=url))
        return f"{attr}{quote}{stored}{query}{fragment}{quote}"

    return _ELEMENT_URL_RE.sub(_normalize, html)


# --- Plain URLs ---

def _strip_page_trigger(uri: str, page_trigger: str) -> str:
    if not page_trigger or page_trigger.startswith("?"):
        return uri
    return re.sub(rf"^(?:(.*)/)?{re.escape(page_trigger)}(\d+)$", r"\1", uri)


def _ref_for_url(
    url: str,
    registry: Iterable[BaseUrlEntry],
    resolver: ReferenceResolver,
    page_trigger: str,
) -> Optional[str]:
    for entry in registry:
        if not url.startswith(entry.base_url):
            continue

        if urlsplit(url).query:
            logger.debug("Not swapping %s for a reference tag: it has a query string", url)
            return None

        uri = _QUERY_RE.sub("", url)
        uri = _strip_page_trigger(uri, page_trigger)
        uri = remove_prefix(uri, entry.base_url)

        if entry.is_site:
            content = resolver.find_content_by_uri(uri, entry.site_id)
            if content is not None:
                if not content.ref_handle:
                    return None
                tag = ReferenceTag(type=content.ref_handle, id=content.id, site_id=entry.site_id, fallback_url=url)
                return embed_tag(with_default_transform(tag))
        else:
            filename, folder_path = split_file_path(uri)
            file = resolver.find_file_by_location(entry.volume_id, filename, folder_path)
            if file is not None:
                tag = ReferenceTag(type="asset", id=file.id, fallback_url=url)
                return embed_tag(with_default_transform(tag))
    return None


def rewrite_urls(
    html: str,
    registry: Iterable[BaseUrlEntry],
    resolver: ReferenceResolver,
    page_trigger: str = "p",
) -> str:
    """Swap site and volume URLs for reference tags; anything unmatched is left as-is."""
    registry = tuple(registry)

    def _rewrite(match: re.Match) -> str:
        attr, quote, url = match.groups()
        ref = _ref_for_url(url, registry, resolver, page_trigger)
        return f"{attr}{quote}{ref or url}{quote}"

    return _URL_ATTR_RE.sub(_rewrite, html)


def swap_urls_for_refs(
    html: str,
    registry: Iterable[BaseUrlEntry],
    resolver: ReferenceResolver,
    page_trigger: str = "p",
) -> str:
    """Run both passes: element URLs first, then plain URLs."""
    html = normalize_element_urls(html, resolver)
    return rewrite_urls(html, registry, resolver, page_trigger)
