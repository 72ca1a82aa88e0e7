"""
Integration test: export/import over HTTP against the JSON backend.
"""

import json
import pytest

from models import Theme
from repositories import JsonRepository
from tests.conftest import seed_library


@pytest.fixture
def seeded(json_repo):
    return seed_library(json_repo)


def _export(client, kind="all", ids=None):
    response = client.post(f"/api/export/{kind}", json={"ids": ids} if ids is not None else {})
    assert response.status_code == 200
    return response.get_json()


class TestLibraryApi:

    def test_create_and_list_theme(self, client):
        response = client.post("/api/themes", json={"name": "Friendship", "color": "#10B981"})
        assert response.status_code == 201

        themes = client.get("/api/themes").get_json()
        assert [t["name"] for t in themes] == ["Friendship"]
        assert themes[0]["extract_count"] == 0

    def test_duplicate_theme_name(self, client):
        client.post("/api/themes", json={"name": "Friendship"})
        response = client.post("/api/themes", json={"name": "Friendship"})
        assert response.status_code == 409
        assert response.get_json()["code"] == "DUPLICATE_NAME"

    def test_empty_name_rejected(self, client):
        response = client.post("/api/themes", json={"name": ""})
        assert response.status_code == 400
        assert response.get_json()["code"] == "INVALID_INPUT"

    def test_group_with_unknown_member(self, client):
        response = client.post("/api/theme-groups", json={"name": "G", "theme_ids": ["ghost"]})
        assert response.status_code == 409
        assert response.get_json()["code"] == "MISSING_REFERENCE"

    def test_extract_used_in_video_not_settable(self, client):
        response = client.post("/api/extracts", json={"text": "x", "is_used_in_video": True})
        assert response.status_code == 201
        assert response.get_json()["is_used_in_video"] is False

    def test_delete_unknown_theme(self, client):
        response = client.delete("/api/themes/ghost")
        assert response.status_code == 404
        assert response.get_json()["code"] == "NOT_FOUND"

    def test_extracts_filtered_by_theme(self, client, seeded):
        extracts = client.get("/api/extracts?theme_id=t1").get_json()
        assert [e["id"] for e in extracts] == ["e1", "e2"]


class TestExportApi:

    def test_export_themes(self, client, seeded):
        body = _export(client, "themes", ["t1"])

        snapshot = json.loads(body["data"])
        assert [t["originalId"] for t in snapshot["themes"]] == ["t1"]
        assert len(snapshot["extracts"]) == 2
        assert body["metadata"]["totalExtracts"] == 2
        assert body["fileName"].startswith("extracts-export-themes-")

    def test_export_ids_from_query(self, client, seeded):
        response = client.get("/api/export/extracts?ids=e1,e3")
        snapshot = json.loads(response.get_json()["data"])
        assert [x["originalId"] for x in snapshot["extracts"]] == ["e1", "e3"]

    def test_export_download(self, client, seeded):
        response = client.get("/api/export/themeGroups?ids=g1&download=1")
        assert response.status_code == 200
        assert "attachment" in response.headers["Content-Disposition"]
        assert json.loads(response.data)["exportType"] == "themeGroups"

    def test_unknown_kind(self, client):
        response = client.get("/api/export/users")
        assert response.status_code == 400

    def test_unknown_selection(self, client, seeded):
        response = client.post("/api/export/themes", json={"ids": ["ghost"]})
        assert response.status_code == 400
        assert response.get_json()["code"] == "SELECTION_NOT_FOUND"


class TestImportApi:

    def test_preview_and_execute_into_other_store(self, client, seeded, temp_dir):
        from app import create_app

        data = _export(client, "themes", ["t1"])["data"]
        target_dir = temp_dir / "other"
        target = JsonRepository(target_dir)
        target.themes.create(Theme(id="mine", name="Friendship"))
        other = create_app(target).test_client()

        preview = other.post("/api/import/preview", json={"jsonData": data}).get_json()
        assert preview["summary"]["conflictsCount"] == 1
        conflict = preview["conflicts"][0]
        assert conflict["type"] == "THEME_NAME_EXISTS"
        assert conflict["existingItem"]["id"] == "mine"

        response = other.post("/api/import/execute", json={
            "jsonData": data,
            "conflictResolutions": [{
                "originalId": conflict["importedItem"]["id"],
                "type": conflict["type"],
                "resolution": "REUSE_EXISTING",
                "existingId": "mine",
            }],
        })
        assert response.status_code == 200
        result = response.get_json()
        assert result["createdThemes"] == 0
        assert result["createdExtracts"] == 2
        assert result["errors"] == []
        assert [e.theme_id for e in JsonRepository(target_dir).extracts.list()] == ["mine", "mine"]

    def test_execute_without_resolution(self, client, seeded):
        data = _export(client)["data"]
        response = client.post("/api/import/execute", json={"jsonData": data})
        assert response.status_code == 400
        assert response.get_json()["code"] == "UNRESOLVED_CONFLICT"

    def test_preview_file_upload(self, client, seeded):
        import io
        data = _export(client)["data"].encode("utf-8")
        response = client.post(
            "/api/import/preview",
            data={"file": (io.BytesIO(data), "export.json")},
            content_type="multipart/form-data",
        )
        assert response.status_code == 200
        assert response.get_json()["summary"]["totalThemes"] == 3

    def test_malformed_snapshot(self, client):
        response = client.post("/api/import/preview", data=b"not json", content_type="application/json")
        assert response.status_code == 400
        assert response.get_json()["code"] == "MALFORMED_SNAPSHOT"

    def test_nesting_too_deep(self, client):
        body = b"[" * 100000 + b"]" * 100000
        response = client.post("/api/import/preview", data=body, content_type="application/octet-stream")
        assert response.status_code == 400
        assert response.get_json()["code"] == "MALFORMED_SNAPSHOT"

    def test_unsupported_version(self, client):
        response = client.post("/api/import/preview", json={"jsonData": json.dumps({"formatVersion": "9.0"})})
        assert response.status_code == 400
        assert response.get_json()["code"] == "UNSUPPORTED_VERSION"

    def test_bad_resolution_value(self, client, seeded):
        data = _export(client)["data"]
        response = client.post("/api/import/execute", json={
            "jsonData": data,
            "conflictResolutions": [{"originalId": "t1", "resolution": "MERGE"}],
        })
        assert response.status_code == 400
        assert response.get_json()["code"] == "INVALID_INPUT"


class TestImportSessionApi:

    def test_full_workflow(self, client, app, seeded):
        data = _export(client, "themes", ["t1"])["data"]

        response = client.post("/api/import/sessions", json={"jsonData": data, "fileName": "x.json"})
        assert response.status_code == 201
        session = response.get_json()
        assert session["state"] == "preview"
        sid = session["id"]

        # Conflicts not reviewed yet
        assert client.post(f"/api/import/sessions/{sid}/execute").status_code == 409

        assert client.post(f"/api/import/sessions/{sid}/conflicts").get_json()["state"] == "conflicts"
        response = client.put(f"/api/import/sessions/{sid}/resolutions", json={
            "resolutions": [{"originalId": "t1", "resolution": "CREATE_DUPLICATE"}],
        })
        assert response.get_json()["resolutions"][0]["resolution"] == "CREATE_DUPLICATE"

        session = client.post(f"/api/import/sessions/{sid}/execute").get_json()
        assert session["state"] == "success"
        assert session["result"]["createdThemes"] == 1
        assert seeded.themes.find_by_name("Friendship (copie)") is not None

        # Finished session is dropped once the result is returned
        assert client.get(f"/api/import/sessions/{sid}").status_code == 404
        assert len(app.extensions["import_sessions"]) == 0

    def test_close_session(self, client, seeded):
        data = _export(client, "themes", ["t1"])["data"]
        sid = client.post("/api/import/sessions", json={"jsonData": data}).get_json()["id"]

        assert client.delete(f"/api/import/sessions/{sid}").status_code == 200
        assert client.get(f"/api/import/sessions/{sid}").status_code == 404
        assert client.delete(f"/api/import/sessions/{sid}").status_code == 404

    def test_bad_upload_does_not_leave_session(self, client, app):
        response = client.post("/api/import/sessions", json={"jsonData": "[]"})
        assert response.status_code == 400
        assert len(app.extensions["import_sessions"]) == 0

    def test_resolution_for_unknown_conflict(self, client, seeded):
        data = _export(client, "themes", ["t1"])["data"]
        sid = client.post("/api/import/sessions", json={"jsonData": data}).get_json()["id"]
        response = client.put(f"/api/import/sessions/{sid}/resolutions", json={
            "resolutions": [{"originalId": "ghost", "resolution": "SKIP"}],
        })
        assert response.status_code == 404
        assert response.get_json()["code"] == "NOT_FOUND"

    def test_unknown_session(self, client):
        assert client.post("/api/import/sessions/nope/execute").status_code == 404
