"""
Resolution resolver - turns conflicts + caller decisions into a
remapping plan.

The plan maps every snapshot originalId to its final disposition
(created under a pre-assigned ID, reused, or skipped) before anything
is written, so the executor never re-derives skip logic on the fly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Union

from config import DUPLICATE_SUFFIX
from models import (
    Snapshot,
    SnapshotTheme,
    SnapshotThemeGroup,
    Conflict,
    ConflictType,
    ConflictResolution,
    Resolution,
    new_id,
)
from .errors import UnresolvedConflictError

SKIPPED = "SKIPPED"


class Action(str, Enum):
    CREATE = "CREATE"
    REUSE = "REUSE"
    SKIP = "SKIP"


@dataclass(frozen=True)
class Outcome:
    """Disposition of one snapshot item. `final_id` is None only for SKIP."""
    action: Action
    final_id: Optional[str] = None
    name: Optional[str] = None  # Name to create under (CREATE)

    @property
    def skipped(self) -> bool:
        return self.action is Action.SKIP


NamedItem = Union[SnapshotTheme, SnapshotThemeGroup]


def resolve(
    item: NamedItem,
    conflict: Optional[Conflict],
    decision: Optional[Resolution],
    duplicate_suffix: str = DUPLICATE_SUFFIX,
) -> Outcome:
    """
    Outcome for one theme or theme group.

    Without a conflict the item is created verbatim and `decision` is
    ignored. A conflict without a decision is a caller error.
    """
    if conflict is None:
        return Outcome(Action.CREATE, new_id(), item.name)

    if decision is Resolution.REUSE_EXISTING:
        return Outcome(Action.REUSE, conflict.existing_id, conflict.existing_item.name)
    if decision is Resolution.CREATE_DUPLICATE:
        # The suffixed name is not re-checked here; the store rejects it if taken
        return Outcome(Action.CREATE, new_id(), f"{item.name}{duplicate_suffix}")
    if decision is Resolution.SKIP:
        return Outcome(Action.SKIP)

    raise UnresolvedConflictError([conflict])


class ResolutionMap:
    """
    Caller decisions keyed by (conflict type, originalId).

    An entry sent without a type matches by originalId alone.
    """

    def __init__(self, resolutions: Iterable[ConflictResolution] = ()):
        self._typed: dict[tuple[ConflictType, str], Resolution] = {}
        self._untyped: dict[str, Resolution] = {}
        for r in resolutions:
            if r.type is None:
                self._untyped[r.original_id] = r.resolution
            else:
                self._typed[(r.type, r.original_id)] = r.resolution

    def get(self, conflict: Conflict) -> Optional[Resolution]:
        decision = self._typed.get((conflict.type, conflict.original_id))
        if decision is None:
            decision = self._untyped.get(conflict.original_id)
        return decision

    def __len__(self) -> int:
        return len(self._typed) + len(self._untyped)


@dataclass
class RemappingPlan:
    """originalId -> Outcome for every entity in a snapshot, in snapshot order."""
    themes: dict[str, Outcome] = field(default_factory=dict)
    theme_groups: dict[str, Outcome] = field(default_factory=dict)
    extracts: dict[str, Outcome] = field(default_factory=dict)

    def theme_id(self, original_id: Optional[str]) -> Optional[str]:
        """Final theme ID for a reference; None if absent or skipped."""
        if original_id is None:
            return None
        return self.themes[original_id].final_id

    def member_ids(self, group: SnapshotThemeGroup) -> list[str]:
        """Final member IDs of a group, skipped themes dropped."""
        return [
            self.themes[t].final_id
            for t in group.theme_original_ids
            if not self.themes[t].skipped
        ]

    @property
    def skipped_count(self) -> int:
        return sum(
            1 for o in (*self.themes.values(), *self.theme_groups.values()) if o.skipped
        )

    def to_dict(self) -> dict:
        """Audit view: originalId -> finalId | SKIPPED."""
        def view(outcomes: dict[str, Outcome]) -> dict:
            return {k: (SKIPPED if o.skipped else o.final_id) for k, o in outcomes.items()}

        return {
            "themes": view(self.themes),
            "themeGroups": view(self.theme_groups),
            "extracts": view(self.extracts),
        }


def missing_resolutions(conflicts: list[Conflict], resolutions: ResolutionMap) -> list[Conflict]:
    return [c for c in conflicts if resolutions.get(c) is None]


def build_plan(
    snapshot: Snapshot,
    conflicts: list[Conflict],
    resolutions: ResolutionMap,
    duplicate_suffix: str = DUPLICATE_SUFFIX,
) -> RemappingPlan:
    """
    Compute the full remapping plan.

    Raises UnresolvedConflictError if any conflict lacks a decision;
    nothing is planned in that case.
    """
    missing = missing_resolutions(conflicts, resolutions)
    if missing:
        raise UnresolvedConflictError(missing)

    by_key = {(c.type, c.original_id): c for c in conflicts}
    plan = RemappingPlan()

    for theme in snapshot.themes:
        conflict = by_key.get((ConflictType.THEME_NAME_EXISTS, theme.original_id))
        decision = resolutions.get(conflict) if conflict else None
        plan.themes[theme.original_id] = resolve(theme, conflict, decision, duplicate_suffix)

    for group in snapshot.theme_groups:
        conflict = by_key.get((ConflictType.THEME_GROUP_NAME_EXISTS, group.original_id))
        decision = resolutions.get(conflict) if conflict else None
        plan.theme_groups[group.original_id] = resolve(group, conflict, decision, duplicate_suffix)

    # Extracts have no uniqueness constraint: always created
    for extract in snapshot.extracts:
        plan.extracts[extract.original_id] = Outcome(Action.CREATE, new_id())

    return plan
