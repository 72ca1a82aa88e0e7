"""
Transfer service - the engine boundary.

    export_selection(kind, ids)          -> ExportResult
    preview_import(data)                 -> ImportPreview
    execute_import(data, resolutions)    -> ImportResult

Preview and execute both decode the raw bytes again: the service keeps
no state between calls. Conflicts are re-detected at execute time so
the resolution check runs against the names that are live right now.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, Optional, Union

from config import get_settings
from models import (
    ExportKind,
    ExportResult,
    ConflictResolution,
    ImportPreview,
    ImportResult,
    PreviewTheme,
    PreviewThemeGroup,
    PreviewExtract,
    PreviewSummary,
    Snapshot,
    Conflict,
)
from repositories import Repository, get_repository
from . import codec
from .assembler import assemble
from .conflicts import NameIndex, detect
from .executor import execute
from .resolver import ResolutionMap, build_plan

logger = logging.getLogger(__name__)


def build_preview(snapshot: Snapshot, conflicts: list[Conflict]) -> ImportPreview:
    """Summary of a decoded snapshot for display before import."""
    extract_counts = Counter(x.theme_original_id for x in snapshot.extracts if x.theme_original_id)
    theme_names = {t.original_id: t.name for t in snapshot.themes}

    return ImportPreview(
        themes=[
            PreviewTheme(
                original_id=t.original_id,
                name=t.name,
                description=t.description,
                color=t.color,
                extract_count=extract_counts.get(t.original_id, 0),
            )
            for t in snapshot.themes
        ],
        theme_groups=[
            PreviewThemeGroup(
                original_id=g.original_id,
                name=g.name,
                description=g.description,
                color=g.color,
                theme_count=len(g.theme_original_ids),
            )
            for g in snapshot.theme_groups
        ],
        extracts=[
            PreviewExtract(
                original_id=x.original_id,
                text=x.text,
                anime_title=x.anime_title,
                theme_name=theme_names.get(x.theme_original_id),
            )
            for x in snapshot.extracts
        ],
        conflicts=conflicts,
        summary=PreviewSummary(
            total_themes=len(snapshot.themes),
            total_theme_groups=len(snapshot.theme_groups),
            total_extracts=len(snapshot.extracts),
            conflicts_count=len(conflicts),
        ),
    )


class TransferService:
    """Export/import operations bound to one repository."""

    def __init__(self, repo: Optional[Repository] = None, duplicate_suffix: Optional[str] = None):
        self.repo = repo or get_repository()
        self.duplicate_suffix = duplicate_suffix if duplicate_suffix is not None else get_settings().duplicate_suffix

    def export_selection(
        self,
        kind: Union[ExportKind, str],
        ids: Optional[Iterable[str]] = None,
        now: Optional[datetime] = None,
    ) -> ExportResult:
        """Snapshot the live library for a selection."""
        kind = ExportKind(kind)
        now = now or datetime.now()

        snapshot = assemble(self.repo.read_all(), kind, ids, exported_at=now)
        logger.info(
            "Exported %s: %d themes, %d groups, %d extracts",
            kind.value, snapshot.metadata.total_themes,
            snapshot.metadata.total_theme_groups, snapshot.metadata.total_extracts,
        )
        return ExportResult(
            data=codec.encode(snapshot),
            file_name=codec.suggest_file_name(kind.value, now),
            metadata=snapshot.metadata,
        )

    def detect_conflicts(self, snapshot: Snapshot) -> list[Conflict]:
        return detect(snapshot, NameIndex.from_library(self.repo.read_all()))

    def preview_import(self, data: Union[bytes, str]) -> ImportPreview:
        """Decode and report what an import would do. Read-only."""
        snapshot = codec.decode(data)
        return build_preview(snapshot, self.detect_conflicts(snapshot))

    def execute_import(
        self,
        data: Union[bytes, str],
        resolutions: Iterable[Union[ConflictResolution, dict]] = (),
    ) -> ImportResult:
        """
        Import a snapshot.

        Raises TransferError (nothing written) for a bad snapshot or a
        conflict without resolution. Per-item failures end up in
        ImportResult.errors.
        """
        snapshot = codec.decode(data)
        resolution_map = ResolutionMap(
            r if isinstance(r, ConflictResolution) else ConflictResolution.model_validate(r)
            for r in resolutions
        )
        conflicts = self.detect_conflicts(snapshot)
        plan = build_plan(snapshot, conflicts, resolution_map, self.duplicate_suffix)
        logger.debug("Remapping plan: %s", plan.to_dict())
        return execute(snapshot, plan, self.repo)


def export_selection(kind, ids=None) -> ExportResult:
    return TransferService().export_selection(kind, ids)


def preview_import(data) -> ImportPreview:
    return TransferService().preview_import(data)


def execute_import(data, resolutions=()) -> ImportResult:
    return TransferService().execute_import(data, resolutions)
