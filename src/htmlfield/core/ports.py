"""Collaborator interfaces the transformation pipeline is wired against."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol

from htmlfield.core.models import ContentRef, FileRef, Site, Volume

Sanitizer = Callable[[str, Mapping[str, Any]], str]
SvgSanitizer = Callable[[str], str]


class ReferenceResolver(Protocol):
    """Resolves reference tags and finds the items that own a URI."""

    def resolve_tag(self, tag_text: str, site_id: Optional[int] = None) -> str:
        """Return the tag's resolved value, or ``tag_text`` unchanged if it can't be resolved."""
        ...

    def find_content_by_uri(self, uri: str, site_id: int) -> Optional[ContentRef]:
        ...

    def find_file_by_location(
        self, volume_id: int, filename: str, folder_path: str
    ) -> Optional[FileRef]:
        ...


class SiteRegistry(Protocol):
    """Lists the sites and file volumes that own base URLs."""

    def list_sites(self) -> list[Site]:
        ...

    def list_volumes(self) -> list[Volume]:
        ...
