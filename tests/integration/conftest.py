"""
Integration test fixtures.

Integration tests:
- Test component boundaries
- Use real I/O but to temp locations
- Should be deterministic
"""

import pytest
import tempfile
import shutil
from pathlib import Path

from repositories import JsonRepository


@pytest.fixture
def temp_dir():
    """Temporary directory for test data."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def data_dir(temp_dir):
    """Temporary library data directory."""
    p = temp_dir / "data"
    p.mkdir()
    return p


@pytest.fixture
def json_repo(data_dir):
    return JsonRepository(data_dir)


@pytest.fixture
def app(json_repo):
    """Flask app bound to a JSON repository in a temp directory."""
    from app import create_app
    flask_app = create_app(json_repo)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
