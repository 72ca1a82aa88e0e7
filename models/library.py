"""
Library - the whole content graph as one consistent read.
"""

from pydantic import BaseModel, Field

from .theme import Theme, ThemeGroup
from .extract import Extract


class Library(BaseModel):
    """Themes, theme groups and extracts in store (creation) order."""
    themes: list[Theme] = Field(default_factory=list)
    theme_groups: list[ThemeGroup] = Field(default_factory=list)
    extracts: list[Extract] = Field(default_factory=list)

    def extract_count(self, theme_id: str) -> int:
        """Derived count of extracts filed under a theme."""
        return sum(1 for e in self.extracts if e.theme_id == theme_id)

    def group_extract_count(self, group: ThemeGroup) -> int:
        """Derived count of extracts over all member themes."""
        members = set(group.theme_ids)
        return sum(1 for e in self.extracts if e.theme_id in members)
