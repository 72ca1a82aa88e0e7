"""
Domain models - single source of truth for library entities and the
transfer (export/import) documents built from them.

Design principles:
- Every entity defined once
- Validation at the boundary
- Backend-agnostic (repository handles persistence)
"""

from .base import BaseEntity, TimestampMixin, new_id
from .theme import Theme, ThemeGroup
from .extract import Extract, Timing, Character
from .library import Library
from .snapshot import (
    Snapshot,
    SnapshotMetadata,
    SnapshotTheme,
    SnapshotThemeGroup,
    SnapshotExtract,
    SnapshotCharacter,
)
from .transfer import (
    ExportKind,
    ConflictType,
    Resolution,
    ConflictItem,
    Conflict,
    ConflictResolution,
    ImportResult,
    ImportPreview,
    PreviewTheme,
    PreviewThemeGroup,
    PreviewExtract,
    PreviewSummary,
    ExportResult,
)

__all__ = [
    # Base
    "BaseEntity",
    "TimestampMixin",
    "new_id",
    # Library
    "Theme",
    "ThemeGroup",
    "Extract",
    "Timing",
    "Character",
    "Library",
    # Snapshot
    "Snapshot",
    "SnapshotMetadata",
    "SnapshotTheme",
    "SnapshotThemeGroup",
    "SnapshotExtract",
    "SnapshotCharacter",
    # Transfer
    "ExportKind",
    "ConflictType",
    "Resolution",
    "ConflictItem",
    "Conflict",
    "ConflictResolution",
    "ImportResult",
    "ImportPreview",
    "PreviewTheme",
    "PreviewThemeGroup",
    "PreviewExtract",
    "PreviewSummary",
    "ExportResult",
]
