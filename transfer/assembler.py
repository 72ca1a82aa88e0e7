"""
Export assembler - walks the library outward from a selection.

- themes:       selected themes + every extract filed under them
- themeGroups:  selected groups + member themes + their extracts
- extracts:     selected extracts + the themes they reference
- all:          everything

Store IDs are kept as originalIds. Lists keep store order.
"""

from datetime import datetime
from typing import Iterable, Optional

from models import (
    ExportKind,
    Library,
    Snapshot,
    SnapshotTheme,
    SnapshotThemeGroup,
    SnapshotExtract,
)
from .codec import with_metadata
from .errors import SelectionNotFoundError


def _require(kind: str, wanted: list[str], available: set[str]) -> None:
    missing = [i for i in wanted if i not in available]
    if missing:
        raise SelectionNotFoundError(kind, missing)


def assemble(
    library: Library,
    kind: ExportKind,
    ids: Optional[Iterable[str]] = None,
    exported_at: Optional[datetime] = None,
) -> Snapshot:
    """
    Build a self-contained snapshot for a selection.

    Raises SelectionNotFoundError if a selected ID is not in the library.
    `ids` is ignored for ExportKind.ALL.
    """
    kind = ExportKind(kind)
    wanted = list(dict.fromkeys(ids or []))

    if kind is ExportKind.ALL:
        themes = list(library.themes)
        groups = list(library.theme_groups)
        extracts = list(library.extracts)

    elif kind is ExportKind.THEMES:
        _require("theme", wanted, {t.id for t in library.themes})
        selected = set(wanted)
        themes = [t for t in library.themes if t.id in selected]
        groups = []
        extracts = [e for e in library.extracts if e.theme_id in selected]

    elif kind is ExportKind.THEME_GROUPS:
        _require("theme group", wanted, {g.id for g in library.theme_groups})
        selected = set(wanted)
        groups = [g for g in library.theme_groups if g.id in selected]
        member_ids = {t for g in groups for t in g.theme_ids}
        themes = [t for t in library.themes if t.id in member_ids]
        extracts = [e for e in library.extracts if e.theme_id in member_ids]

    else:
        _require("extract", wanted, {e.id for e in library.extracts})
        selected = set(wanted)
        extracts = [e for e in library.extracts if e.id in selected]
        referenced = {e.theme_id for e in extracts if e.theme_id}
        themes = [t for t in library.themes if t.id in referenced]
        groups = []

    included = {t.id for t in themes}
    snapshot = Snapshot(
        export_type=kind.value,
        themes=[
            SnapshotTheme(original_id=t.id, name=t.name, description=t.description, color=t.color)
            for t in themes
        ],
        theme_groups=[
            SnapshotThemeGroup(
                original_id=g.id,
                name=g.name,
                description=g.description,
                color=g.color,
                theme_original_ids=[t for t in g.theme_ids if t in included],
            )
            for g in groups
        ],
        extracts=[SnapshotExtract.from_extract(e) for e in extracts],
    )
    return with_metadata(snapshot, exported_at)
