from __future__ import annotations

from htmlfield.core.models import ContentRef, FileRef
from htmlfield.refs.catalog import ReferenceCatalog


def test_resolves_entry_url(catalog):
    assert catalog.resolve_tag("{entry:5:url}") == "https://example.com/about"


def test_resolves_other_attributes(catalog):
    assert catalog.resolve_tag("{entry:5:uri}") == "about"
    assert catalog.resolve_tag("{entry:5}") == "https://example.com/about"


def test_only_declared_fields_resolve(catalog):
    assert catalog.resolve_tag("{entry:5:model_config}") == "{entry:5:model_config}"
    assert catalog.resolve_tag("{entry:5:model_dump||/about}") == "/about"
    assert catalog.resolve_tag("{asset:42:model_fields}") == "{asset:42:model_fields}"
    assert catalog.resolve_tag("{asset:42:filename}") == "photo.jpg"


def test_site_scoping(catalog):
    assert catalog.resolve_tag("{entry:7@2:url}") == "https://example.com/blog/post-1"
    assert catalog.resolve_tag("{entry:7:url}", site_id=2) == "https://example.com/blog/post-1"
    assert catalog.resolve_tag("{entry:7:url}", site_id=1) == "{entry:7:url}"


def test_resolves_asset_transforms(catalog):
    assert catalog.resolve_tag("{asset:42:url}") == "https://example.com/uploads/images/photo.jpg"
    assert catalog.resolve_tag("{asset:42:transform:thumb}") == (
        "https://example.com/uploads/images/_thumb/photo.jpg"
    )
    assert catalog.resolve_tag("{asset:42:transform:missing}") == "https://example.com/uploads/images/photo.jpg"


def test_unresolvable_returns_fallback_or_tag(catalog):
    assert catalog.resolve_tag("{entry:999:url||/old}") == "/old"
    assert catalog.resolve_tag("{entry:999:url}") == "{entry:999:url}"
    assert catalog.resolve_tag("not a tag") == "not a tag"


def test_find_content_by_uri(catalog):
    assert catalog.find_content_by_uri("about", 1) == ContentRef(id=5, ref_handle="entry")
    assert catalog.find_content_by_uri("news", 1) == ContentRef(id=9, ref_handle="category")
    assert catalog.find_content_by_uri("footer", 1) == ContentRef(id=11, ref_handle=None)
    assert catalog.find_content_by_uri("about", 2) is None


def test_find_file_by_location(catalog):
    assert catalog.find_file_by_location(1, "photo.jpg", "images") == FileRef(id=42)
    assert catalog.find_file_by_location(1, "photo.jpg", "images/") == FileRef(id=42)
    assert catalog.find_file_by_location(1, "logo.svg", "") == FileRef(id=43)
    assert catalog.find_file_by_location(2, "logo.svg", "") is None


def test_from_yaml(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "sites:\n"
        "  - {id: 1, base_url: 'https://a.test/'}\n"
        "entries:\n"
        "  - {type: entry, id: 3, site_id: 1, uri: home, url: 'https://a.test/home'}\n"
    )
    catalog = ReferenceCatalog.from_yaml(path)
    assert catalog.list_sites()[0].base_url == "https://a.test/"
    assert catalog.list_volumes() == []
    assert catalog.resolve_tag("{entry:3:url}") == "https://a.test/home"


def test_from_yaml_missing_file(tmp_path):
    catalog = ReferenceCatalog.from_yaml(tmp_path / "nope.yaml")
    assert catalog.list_sites() == []
