"""
Theme and ThemeGroup - the named, uniquely-titled levels of the library.
"""

from typing import Optional
from pydantic import Field, field_validator

from config import DEFAULT_COLOR
from .base import BaseEntity


class Theme(BaseEntity):
    """
    A mini-theme that extracts are filed under.

    `name` is unique across the store (case-sensitive).
    """
    name: str = Field(min_length=1)
    description: Optional[str] = None
    color: str = DEFAULT_COLOR


class ThemeGroup(BaseEntity):
    """A named set of themes (many-to-many)."""
    name: str = Field(min_length=1)
    description: Optional[str] = None
    color: str = DEFAULT_COLOR
    theme_ids: list[str] = Field(default_factory=list)

    @field_validator("theme_ids")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        # Keep first occurrence order
        return list(dict.fromkeys(value))

    def without_theme(self, theme_id: str) -> "ThemeGroup":
        """Copy of this group with one member removed."""
        return self.model_copy(update={"theme_ids": [t for t in self.theme_ids if t != theme_id]})
