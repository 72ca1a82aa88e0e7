"""
Import executor - applies a remapping plan to the store.

Order is fixed: themes, then theme groups, then extracts, each in
snapshot order. One failing item is recorded in `errors` and the batch
carries on. Anything that depends on a failed theme is not created.
"""

import logging
from typing import Optional

from models import (
    Snapshot,
    SnapshotThemeGroup,
    SnapshotExtract,
    Theme,
    ThemeGroup,
    Extract,
    Character,
    ImportResult,
)
from repositories import Repository, EntityNotFoundError
from .resolver import Action, Outcome, RemappingPlan

logger = logging.getLogger(__name__)


class DependencyFailedError(Exception):
    """A referenced theme could not be resolved during this import."""

    def __init__(self, theme_original_id: str, cause: str):
        self.theme_original_id = theme_original_id
        super().__init__(f"theme '{theme_original_id}' was not imported ({cause})")


class ImportExecutor:
    """
    Executes one plan against one repository.

    Usage:
        result = ImportExecutor(repo).execute(snapshot, plan)
    """

    def __init__(self, repo: Repository):
        self.repo = repo
        self._failed_themes: dict[str, str] = {}
        self._result = ImportResult()

    def execute(self, snapshot: Snapshot, plan: RemappingPlan) -> ImportResult:
        self._failed_themes = {}
        self._result = ImportResult()

        for theme in snapshot.themes:
            outcome = plan.themes[theme.original_id]
            try:
                self._apply_theme(theme, outcome)
            except Exception as e:
                self._failed_themes[theme.original_id] = str(e)
                self._record_error("Theme", theme.original_id, e)

        for group in snapshot.theme_groups:
            try:
                self._apply_group(group, plan.theme_groups[group.original_id], plan)
            except Exception as e:
                self._record_error("Theme group", group.original_id, e)

        for extract in snapshot.extracts:
            try:
                self._apply_extract(extract, plan.extracts[extract.original_id], plan)
            except Exception as e:
                self._record_error("Extract", extract.original_id, e)

        r = self._result
        logger.info(
            "Import finished: %d themes, %d groups, %d extracts created, %d skipped, %d errors",
            r.created_themes, r.created_theme_groups, r.created_extracts,
            r.skipped_items, len(r.errors),
        )
        return r

    def _record_error(self, kind: str, original_id: str, error: Exception) -> None:
        message = f"{kind} '{original_id}': {error}"
        logger.warning("Import item failed - %s", message)
        self._result.errors.append(message)

    def _apply_theme(self, theme, outcome: Outcome) -> None:
        if outcome.action is Action.SKIP:
            self._result.skipped_items += 1
        elif outcome.action is Action.REUSE:
            if not self.repo.themes.exists(outcome.final_id):
                raise EntityNotFoundError("theme", outcome.final_id)
        else:
            self.repo.themes.create(Theme(
                id=outcome.final_id,
                name=outcome.name,
                description=theme.description,
                color=theme.color,
            ))
            self._result.created_themes += 1

    def _final_theme_id(self, theme_original_id: Optional[str], plan: RemappingPlan) -> Optional[str]:
        if theme_original_id in self._failed_themes:
            raise DependencyFailedError(theme_original_id, self._failed_themes[theme_original_id])
        return plan.theme_id(theme_original_id)

    def _apply_group(self, group: SnapshotThemeGroup, outcome: Outcome, plan: RemappingPlan) -> None:
        if outcome.action is Action.SKIP:
            self._result.skipped_items += 1
            return
        if outcome.action is Action.REUSE:
            # Existing group is left untouched, members included
            if not self.repo.theme_groups.exists(outcome.final_id):
                raise EntityNotFoundError("theme group", outcome.final_id)
            return

        for theme_original_id in group.theme_original_ids:
            self._final_theme_id(theme_original_id, plan)

        self.repo.theme_groups.create(ThemeGroup(
            id=outcome.final_id,
            name=outcome.name,
            description=group.description,
            color=group.color,
            theme_ids=plan.member_ids(group),
        ))
        self._result.created_theme_groups += 1

    def _apply_extract(self, extract: SnapshotExtract, outcome: Outcome, plan: RemappingPlan) -> None:
        theme_id = self._final_theme_id(extract.theme_original_id, plan)

        self.repo.extracts.create(Extract(
            id=outcome.final_id,
            text=extract.text,
            anime_id=extract.anime_id,
            anime_title=extract.anime_title,
            anime_image=extract.anime_image,
            api_source=extract.api_source,
            timing=extract.timing,
            episode=extract.episode,
            season=extract.season,
            characters=[Character(mal_id=c.mal_id, name=c.name, image=c.image) for c in extract.characters],
            theme_id=theme_id,
            is_used_in_video=False,
        ))
        self._result.created_extracts += 1


def execute(snapshot: Snapshot, plan: RemappingPlan, repo: Repository) -> ImportResult:
    """Apply `plan` to `repo`. Never raises for a single item."""
    return ImportExecutor(repo).execute(snapshot, plan)
