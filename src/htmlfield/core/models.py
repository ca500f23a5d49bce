"""Pydantic and dataclass models for the htmlfield pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ColumnType(str, Enum):
    TEXT = "text"
    MEDIUMTEXT = "mediumtext"
    LONGTEXT = "longtext"


# --- Reference tags ---

@dataclass(frozen=True)
class ReferenceTag:
    type: str
    id: int
    site_id: Optional[int] = None
    transform: Optional[str] = None
    fallback_url: Optional[str] = None


# --- Base URL registry ---

@dataclass(frozen=True)
class BaseUrlEntry:
    base_url: str
    site_id: Optional[int] = None
    volume_id: Optional[int] = None

    @property
    def is_site(self) -> bool:
        return self.site_id is not None


# --- Sites & volumes ---

class Site(BaseModel):
    id: int
    handle: str = ""
    base_url: str = ""
    has_urls: bool = True


class Volume(BaseModel):
    id: int
    handle: str = ""
    base_url: str = ""
    has_urls: bool = True


# --- Resolver lookups ---

class ContentRef(BaseModel):
    id: int
    ref_handle: Optional[str] = None


class FileRef(BaseModel):
    id: int


# --- Config models ---

class FieldSettings(BaseModel):
    purifier_config: Optional[str] = None
    purify_html: bool = True
    remove_inline_styles: bool = False
    remove_empty_tags: bool = False
    remove_nbsp: bool = False
    encode_mb4: bool = False
    column_type: ColumnType = ColumnType.TEXT
    allowed_styles: dict[str, bool] = Field(default_factory=dict)


class AppConfig(BaseModel):
    field: FieldSettings = Field(default_factory=FieldSettings)
    config_path: str = "config"
    page_trigger: str = "p"
    catalog_path: str = "config/catalog.yaml"
