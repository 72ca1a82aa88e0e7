"""
Conflict detector - name collisions between a snapshot and the live store.

Pure function of two read-only inputs. Extracts never conflict; they
are only affected through their theme reference.
"""

from dataclasses import dataclass, field

from models import (
    Library,
    Snapshot,
    Theme,
    ThemeGroup,
    Conflict,
    ConflictItem,
    ConflictType,
)


@dataclass(frozen=True)
class NameIndex:
    """Live theme and theme group names, name -> entity."""
    themes: dict[str, Theme] = field(default_factory=dict)
    theme_groups: dict[str, ThemeGroup] = field(default_factory=dict)

    @classmethod
    def from_library(cls, library: Library) -> "NameIndex":
        return cls(
            themes={t.name: t for t in library.themes},
            theme_groups={g.name: g for g in library.theme_groups},
        )


def _item(id, name, description, color) -> ConflictItem:
    return ConflictItem(id=id, name=name, description=description, color=color)


def detect(snapshot: Snapshot, index: NameIndex) -> list[Conflict]:
    """
    Conflicts in snapshot order: all themes first, then all theme groups.

    Names are compared exactly (case-sensitive).
    """
    conflicts = []

    for theme in snapshot.themes:
        existing = index.themes.get(theme.name)
        if existing is not None:
            conflicts.append(Conflict(
                type=ConflictType.THEME_NAME_EXISTS,
                imported_item=_item(theme.original_id, theme.name, theme.description, theme.color),
                existing_item=_item(existing.id, existing.name, existing.description, existing.color),
            ))

    for group in snapshot.theme_groups:
        existing = index.theme_groups.get(group.name)
        if existing is not None:
            conflicts.append(Conflict(
                type=ConflictType.THEME_GROUP_NAME_EXISTS,
                imported_item=_item(group.original_id, group.name, group.description, group.color),
                existing_item=_item(existing.id, existing.name, existing.description, existing.color),
            ))

    return conflicts
