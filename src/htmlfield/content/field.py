"""HTML field: the save pipeline (sanitize, then swap URLs for reference tags) and value handling."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from htmlfield.content import cleanup
from htmlfield.content.field_data import HtmlFieldData, normalize_content
from htmlfield.content.sanitize import (
    DEFAULT_PURIFIER_OPTIONS,
    ContentSanitizer,
    PolicyHook,
    bleach_sanitize,
    build_policy,
)
from htmlfield.content.svg import sanitize_svg
from htmlfield.core.config import available_policies
from htmlfield.core.models import BaseUrlEntry, FieldSettings
from htmlfield.core.ports import ReferenceResolver, Sanitizer, SiteRegistry, SvgSanitizer
from htmlfield.refs.parser import parse_refs
from htmlfield.refs.rewriter import registry_from, swap_urls_for_refs

logger = logging.getLogger(__name__)

FieldValue = Union[HtmlFieldData, str, None]


class HtmlField:
    """Base HTML field.

    Collaborators are passed in explicitly. Subclasses (or callers) customise
    behaviour through ``settings`` and by overriding ``default_purifier_options``
    and ``allowed_styles``.
    """

    def __init__(
        self,
        settings: FieldSettings,
        resolver: ReferenceResolver,
        sites: SiteRegistry,
        config_path: Optional[Union[str, Path]] = None,
        sanitizer: Sanitizer = bleach_sanitize,
        svg_sanitizer: SvgSanitizer = sanitize_svg,
        page_trigger: str = "p",
        policy_hooks: Iterable[PolicyHook] = (),
    ) -> None:
        self.settings = settings
        self.resolver = resolver
        self.sites = sites
        self.config_path = config_path
        self.sanitizer = sanitizer
        self.svg_sanitizer = svg_sanitizer
        self.page_trigger = page_trigger
        self.policy_hooks = list(policy_hooks)

    # ---- Capability points ----

    def content_column_type(self) -> str:
        return self.settings.column_type.value

    def default_purifier_options(self) -> dict[str, Any]:
        """Purifier options used when no config file is specified or exists."""
        return dict(DEFAULT_PURIFIER_OPTIONS)

    def allowed_styles(self) -> dict[str, bool]:
        """Inline CSS properties kept when inline styles are removed."""
        return dict(self.settings.allowed_styles)

    def purifier_policy(self) -> dict[str, Any]:
        return build_policy(
            self.config_path,
            self.settings.purifier_config,
            self.default_purifier_options(),
            self.policy_hooks,
        )

    def config_options(self) -> dict[str, str]:
        """Selectable purifier configs, keyed by file name."""
        if not self.config_path:
            return {"": "Default"}
        return available_policies(self.config_path)

    def base_url_registry(self) -> tuple[BaseUrlEntry, ...]:
        return registry_from(self.sites)

    # ---- Values ----

    def create_field_data(self, content: str, site_id: Optional[int]) -> HtmlFieldData:
        return HtmlFieldData(content, site_id, self.resolver)

    def normalize_value(self, value: FieldValue, site_id: Optional[int] = None) -> Optional[HtmlFieldData]:
        if value is None or isinstance(value, HtmlFieldData):
            return value
        content = normalize_content(value)
        if content is None:
            return None
        return self.create_field_data(content, site_id)

    def is_value_empty(self, value: FieldValue) -> bool:
        if value is None:
            return True
        if isinstance(value, HtmlFieldData):
            value = value.raw_content
        return value.strip() == ""

    def prep_value_for_input(self, value: FieldValue, site_id: Optional[int] = None) -> str:
        """Raw content with reference tags resolved, for the editor."""
        if isinstance(value, HtmlFieldData):
            value = value.raw_content
        if value is None:
            return ""
        return parse_refs(value, self.resolver, site_id)

    def serialize_value(self, value: FieldValue, site_id: Optional[int] = None) -> Optional[str]:
        """Sanitize the value and swap URLs for reference tags; this is what gets stored."""
        if not value:
            return None
        if isinstance(value, HtmlFieldData):
            value = value.raw_content
        if value == "":
            return None

        settings = self.settings.model_copy(update={"allowed_styles": self.allowed_styles()})
        sanitizer = ContentSanitizer(
            settings=settings,
            resolver=self.resolver,
            policy=self.purifier_policy() if settings.purify_html else {},
            sanitizer=self.sanitizer,
            svg_sanitizer=self.svg_sanitizer,
        )
        value = sanitizer.process(value, site_id)

        value = swap_urls_for_refs(value, self.base_url_registry(), self.resolver, self.page_trigger)

        if settings.encode_mb4:
            value = cleanup.encode_mb4(value)

        logger.debug("Serialized HTML field value (%d chars)", len(value))
        return value
