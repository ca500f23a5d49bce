from __future__ import annotations

from typing import Optional

import pytest

from htmlfield.core.models import ContentRef, FileRef, Site, Volume
from htmlfield.refs.catalog import CatalogAsset, CatalogEntry, ReferenceCatalog
from htmlfield.refs.tags import format_tag, parse_tag


class StubResolver:
    """Resolver backed by plain dicts, recording every call."""

    def __init__(
        self,
        refs: Optional[dict[str, str]] = None,
        content: Optional[dict[tuple[str, int], ContentRef]] = None,
        files: Optional[dict[tuple[int, str, str], FileRef]] = None,
    ) -> None:
        self.refs = refs or {}
        self.content = content or {}
        self.files = files or {}
        self.calls: list[tuple] = []

    def resolve_tag(self, tag_text: str, site_id: Optional[int] = None) -> str:
        self.calls.append(("resolve_tag", tag_text, site_id))
        tag = parse_tag(tag_text)
        if tag is None:
            return tag_text
        return self.refs.get(format_tag(tag), tag_text)

    def find_content_by_uri(self, uri: str, site_id: int) -> Optional[ContentRef]:
        self.calls.append(("find_content_by_uri", uri, site_id))
        return self.content.get((uri, site_id))

    def find_file_by_location(self, volume_id: int, filename: str, folder_path: str) -> Optional[FileRef]:
        self.calls.append(("find_file_by_location", volume_id, filename, folder_path))
        return self.files.get((volume_id, filename, folder_path))


class StubSites:
    def __init__(self, sites: list[Site], volumes: Optional[list[Volume]] = None) -> None:
        self.sites = sites
        self.volumes = volumes or []

    def list_sites(self) -> list[Site]:
        return self.sites

    def list_volumes(self) -> list[Volume]:
        return self.volumes


def passthrough_sanitizer(html: str, policy) -> str:
    return html


def identity_svg(markup: str) -> str:
    return markup


@pytest.fixture
def resolver() -> StubResolver:
    return StubResolver(
        refs={
            "entry:5:url": "/blog/hello",
            "entry:5@1:url": "/blog/hello",
            "asset:42:url": "/uploads/photo.jpg",
        },
        content={("blog/hello", 1): ContentRef(id=5, ref_handle="entry")},
        files={(3, "photo.jpg", ""): FileRef(id=42)},
    )


@pytest.fixture
def sites() -> StubSites:
    return StubSites(
        sites=[Site(id=1, handle="default", base_url="/")],
        volumes=[Volume(id=3, handle="uploads", base_url="/uploads")],
    )


@pytest.fixture
def catalog() -> ReferenceCatalog:
    return ReferenceCatalog(
        sites=[
            Site(id=1, handle="default", base_url="https://example.com/"),
            Site(id=2, handle="blog", base_url="https://example.com/blog/"),
        ],
        volumes=[Volume(id=1, handle="uploads", base_url="https://example.com/uploads/")],
        entries=[
            CatalogEntry(type="entry", id=5, site_id=1, uri="about", url="https://example.com/about"),
            CatalogEntry(type="entry", id=6, site_id=1, uri="blog", url="https://example.com/blog"),
            CatalogEntry(
                type="entry", id=7, site_id=2, uri="post-1", url="https://example.com/blog/post-1"
            ),
            CatalogEntry(type="category", id=9, site_id=1, uri="news", url="https://example.com/news"),
            CatalogEntry(
                type="global", id=11, site_id=1, uri="footer", url="https://example.com/footer",
                has_ref_handle=False,
            ),
        ],
        assets=[
            CatalogAsset(
                id=42, volume_id=1, filename="photo.jpg", folder_path="images",
                url="https://example.com/uploads/images/photo.jpg",
                transforms={"thumb": "https://example.com/uploads/images/_thumb/photo.jpg"},
            ),
            CatalogAsset(
                id=43, volume_id=1, filename="logo.svg",
                url="https://example.com/uploads/logo.svg",
            ),
        ],
    )
