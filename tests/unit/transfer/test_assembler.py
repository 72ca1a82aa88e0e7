"""Unit tests for the export assembler."""

import pytest

from models import ExportKind, Extract
from transfer import assemble, SelectionNotFoundError


def _ids(items):
    return [i.original_id for i in items]


class TestSelectionWalk:
    """What each selection mode pulls in."""

    def test_themes(self, seeded_repo):
        snapshot = assemble(seeded_repo.read_all(), ExportKind.THEMES, ["t1"])
        assert _ids(snapshot.themes) == ["t1"]
        assert _ids(snapshot.extracts) == ["e1", "e2"]
        assert snapshot.theme_groups == []
        assert snapshot.metadata.total_themes == 1
        assert snapshot.metadata.total_extracts == 2

    def test_theme_groups(self, seeded_repo):
        snapshot = assemble(seeded_repo.read_all(), ExportKind.THEME_GROUPS, ["g1"])
        assert _ids(snapshot.theme_groups) == ["g1"]
        assert _ids(snapshot.themes) == ["t1", "t2"]
        assert _ids(snapshot.extracts) == ["e1", "e2", "e3"]
        assert snapshot.theme_groups[0].theme_original_ids == ["t1", "t2"]

    def test_extracts(self, seeded_repo):
        snapshot = assemble(seeded_repo.read_all(), ExportKind.EXTRACTS, ["e1", "e4"])
        assert _ids(snapshot.extracts) == ["e1", "e4"]
        # Referenced theme only, no sibling extracts
        assert _ids(snapshot.themes) == ["t1"]
        assert snapshot.theme_groups == []

    def test_all(self, seeded_repo):
        snapshot = assemble(seeded_repo.read_all(), ExportKind.ALL, ["ignored"])
        assert _ids(snapshot.themes) == ["t1", "t2", "t3"]
        assert _ids(snapshot.theme_groups) == ["g1"]
        assert _ids(snapshot.extracts) == ["e1", "e2", "e3", "e4"]
        assert snapshot.export_type == "all"

    def test_store_order_not_selection_order(self, seeded_repo):
        snapshot = assemble(seeded_repo.read_all(), ExportKind.THEMES, ["t2", "t1", "t2"])
        assert _ids(snapshot.themes) == ["t1", "t2"]

    def test_empty_selection(self, seeded_repo):
        snapshot = assemble(seeded_repo.read_all(), ExportKind.THEMES, [])
        assert snapshot.themes == [] and snapshot.extracts == []

    def test_accepts_kind_string(self, seeded_repo):
        snapshot = assemble(seeded_repo.read_all(), "themeGroups", ["g1"])
        assert snapshot.export_type == "themeGroups"

    def test_unknown_ids(self, seeded_repo):
        with pytest.raises(SelectionNotFoundError) as exc:
            assemble(seeded_repo.read_all(), ExportKind.THEMES, ["t1", "zz"])
        assert exc.value.code == "SELECTION_NOT_FOUND"
        assert exc.value.missing == ["zz"]

    def test_used_in_video_not_exported(self, seeded_repo):
        seeded_repo.extracts.save(seeded_repo.extracts.get("e1").model_copy(update={"is_used_in_video": True}))
        snapshot = assemble(seeded_repo.read_all(), ExportKind.ALL)
        assert "isUsedInVideo" not in snapshot.to_wire()["extracts"][0]


class TestNoDanglingReferences:
    """Every snapshot reference resolves inside the snapshot."""

    @pytest.mark.parametrize("kind,ids", [
        (ExportKind.THEMES, ["t1", "t3"]),
        (ExportKind.THEME_GROUPS, ["g1"]),
        (ExportKind.EXTRACTS, ["e2", "e3", "e4"]),
        (ExportKind.ALL, None),
    ])
    def test_references_resolve(self, seeded_repo, kind, ids):
        snapshot = assemble(seeded_repo.read_all(), kind, ids)
        theme_ids = set(_ids(snapshot.themes))
        for extract in snapshot.extracts:
            assert extract.theme_original_id is None or extract.theme_original_id in theme_ids
        for group in snapshot.theme_groups:
            assert set(group.theme_original_ids) <= theme_ids
