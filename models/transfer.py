"""
Transfer models - conflicts, resolutions and import/export results.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from .snapshot import WireModel, SnapshotMetadata


class ExportKind(str, Enum):
    """Selection modes for an export."""
    THEMES = "themes"
    THEME_GROUPS = "themeGroups"
    EXTRACTS = "extracts"
    ALL = "all"


class ConflictType(str, Enum):
    THEME_NAME_EXISTS = "THEME_NAME_EXISTS"
    THEME_GROUP_NAME_EXISTS = "THEME_GROUP_NAME_EXISTS"


class Resolution(str, Enum):
    """Caller's decision for one conflict."""
    REUSE_EXISTING = "REUSE_EXISTING"
    CREATE_DUPLICATE = "CREATE_DUPLICATE"
    SKIP = "SKIP"


class ConflictItem(WireModel):
    """One side of a conflict. For the imported side `id` is the originalId."""
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    color: Optional[str] = None


class Conflict(WireModel):
    """A name collision between an imported item and a live entity."""
    type: ConflictType
    imported_item: ConflictItem
    existing_item: ConflictItem

    @property
    def original_id(self) -> str:
        return self.imported_item.id

    @property
    def existing_id(self) -> str:
        return self.existing_item.id


class ConflictResolution(WireModel):
    """A resolution as sent by the caller of execute_import."""
    original_id: str
    type: Optional[ConflictType] = None
    resolution: Resolution
    existing_id: Optional[str] = None  # Informational only


class ImportResult(WireModel):
    """Outcome counters of one executed import."""
    created_themes: int = 0
    created_theme_groups: int = 0
    created_extracts: int = 0
    skipped_items: int = 0
    errors: list[str] = Field(default_factory=list)


class PreviewTheme(WireModel):
    original_id: str
    name: str
    description: Optional[str] = None
    color: str
    extract_count: int = 0


class PreviewThemeGroup(WireModel):
    original_id: str
    name: str
    description: Optional[str] = None
    color: str
    theme_count: int = 0


class PreviewExtract(WireModel):
    original_id: str
    text: str
    anime_title: str
    theme_name: Optional[str] = None


class PreviewSummary(WireModel):
    total_themes: int = 0
    total_theme_groups: int = 0
    total_extracts: int = 0
    conflicts_count: int = 0


class ImportPreview(WireModel):
    themes: list[PreviewTheme] = Field(default_factory=list)
    theme_groups: list[PreviewThemeGroup] = Field(default_factory=list)
    extracts: list[PreviewExtract] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
    summary: PreviewSummary = Field(default_factory=PreviewSummary)


class ExportResult(BaseModel):
    """Encoded snapshot ready to be written or downloaded."""
    data: bytes
    file_name: str
    metadata: SnapshotMetadata
