"""
Integration test: App startup.

This test verifies the app can import and start without crashing.
This is the most basic integration test - if it fails, nothing works.
"""


class TestAppStartup:
    """Verify app can start."""

    def test_app_imports(self):
        """App module imports without error."""
        import app
        assert app.app is not None

    def test_flask_app_configured(self):
        """Flask app has required configuration."""
        import app

        blueprint_names = list(app.app.blueprints.keys())
        assert "library" in blueprint_names
        assert "transfer" in blueprint_names
        assert "import_sessions" in app.app.extensions

    def test_routes_exist(self):
        """Core routes are registered."""
        import app

        rules = [rule.rule for rule in app.app.url_map.iter_rules()]

        assert "/" in rules
        assert "/api/themes" in rules
        assert "/api/export/<kind>" in rules
        assert "/api/import/preview" in rules
        assert "/api/import/execute" in rules
        assert "/api/import/sessions/<session_id>/execute" in rules

    def test_index(self, client):
        """Index lists the API endpoints."""
        response = client.get("/")

        assert response.status_code == 200
        assert "/api/themes" in response.get_json()["endpoints"]

    def test_api_themes_endpoint(self, client):
        response = client.get("/api/themes")
        assert response.status_code == 200
        assert response.get_json() == []
