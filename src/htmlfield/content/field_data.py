"""The stored value of an HTML field: raw content plus its parsed rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Optional

from htmlfield.core.ports import ReferenceResolver
from htmlfield.refs.parser import parse_refs

# Values editors produce for an empty document
_EMPTY_VALUES = ("", "<p></p>", "<p><br></p>", "<p>&nbsp;</p>")


def normalize_content(value: Optional[str]) -> Optional[str]:
    """Trim the value; None if nothing worth storing is left."""
    if value is None:
        return None
    value = value.strip()
    if value in _EMPTY_VALUES:
        return None
    return value


@dataclass(frozen=True)
class HtmlFieldData:
    """Raw content with reference tags intact, and the parsed content for display.

    ``parsed_content`` is resolved on first access and then cached on the instance.
    """

    raw_content: str
    site_id: Optional[int] = None
    resolver: Optional[ReferenceResolver] = field(default=None, repr=False, compare=False)

    @cached_property
    def parsed_content(self) -> str:
        if self.resolver is None:
            return self.raw_content
        return parse_refs(self.raw_content, self.resolver, self.site_id)

    def is_empty(self) -> bool:
        return len(self.parsed_content.strip()) == 0

    def __html__(self) -> str:
        return self.parsed_content

    def __str__(self) -> str:
        return self.parsed_content
