"""In-memory reference catalog: resolver and site/volume registry backed by a YAML file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from htmlfield.core.models import ContentRef, FileRef, ReferenceTag, Site, Volume
from htmlfield.refs.tags import DEFAULT_TRANSFORM, parse_tag

logger = logging.getLogger(__name__)

_TRANSFORM_PREFIX = "transform:"


def _field_value(model: BaseModel, name: str) -> str:
    """Value of a declared model field; anything else resolves to nothing."""
    if name not in type(model).model_fields:
        return ""
    return str(getattr(model, name) or "")


class CatalogEntry(BaseModel):
    type: str = "entry"
    id: int
    site_id: int
    uri: str = ""
    url: str = ""
    title: str = ""
    has_ref_handle: bool = True


class CatalogAsset(BaseModel):
    id: int
    volume_id: int
    filename: str
    folder_path: str = ""
    url: str = ""
    title: str = ""
    transforms: dict[str, str] = Field(default_factory=dict)


class ReferenceCatalog(BaseModel):
    """Looks references up in static lists of sites, volumes, entries and assets."""

    sites: list[Site] = Field(default_factory=list)
    volumes: list[Volume] = Field(default_factory=list)
    entries: list[CatalogEntry] = Field(default_factory=list)
    assets: list[CatalogAsset] = Field(default_factory=list)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ReferenceCatalog":
        """Load a catalog file; a missing file gives an empty catalog."""
        path = Path(path)
        if not path.exists():
            logger.info("No reference catalog at %s", path)
            return cls()
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    # ---- Site registry ----

    def list_sites(self) -> list[Site]:
        return list(self.sites)

    def list_volumes(self) -> list[Volume]:
        return list(self.volumes)

    # ---- Resolver ----

    def _find_entry(self, tag: ReferenceTag, site_id: Optional[int]) -> Optional[CatalogEntry]:
        wanted_site = tag.site_id if tag.site_id is not None else site_id
        for entry in self.entries:
            if entry.type != tag.type or entry.id != tag.id:
                continue
            if wanted_site is None or entry.site_id == wanted_site:
                return entry
        return None

    def _find_asset(self, asset_id: int) -> Optional[CatalogAsset]:
        return next((a for a in self.assets if a.id == asset_id), None)

    def _attribute(self, tag: ReferenceTag, site_id: Optional[int]) -> str:
        attr = tag.transform or DEFAULT_TRANSFORM
        if tag.type == "asset":
            asset = self._find_asset(tag.id)
            if asset is None:
                return ""
            name = attr[len(_TRANSFORM_PREFIX):] if attr.startswith(_TRANSFORM_PREFIX) else attr
            if name in asset.transforms:
                return asset.transforms[name]
            if attr.startswith(_TRANSFORM_PREFIX):
                return asset.url
            return _field_value(asset, attr)

        entry = self._find_entry(tag, site_id)
        if entry is None:
            return ""
        return _field_value(entry, attr)

    def resolve_tag(self, tag_text: str, site_id: Optional[int] = None) -> str:
        tag = parse_tag(tag_text)
        if tag is None:
            return tag_text
        value = self._attribute(tag, site_id)
        if value:
            return value
        return tag.fallback_url or tag_text

    def find_content_by_uri(self, uri: str, site_id: int) -> Optional[ContentRef]:
        for entry in self.entries:
            if entry.site_id == site_id and entry.uri == uri:
                return ContentRef(id=entry.id, ref_handle=entry.type if entry.has_ref_handle else None)
        return None

    def find_file_by_location(self, volume_id: int, filename: str, folder_path: str) -> Optional[FileRef]:
        folder_path = folder_path.strip("/")
        for asset in self.assets:
            if (
                asset.volume_id == volume_id
                and asset.filename == filename
                and asset.folder_path.strip("/") == folder_path
            ):
                return FileRef(id=asset.id)
        return None
