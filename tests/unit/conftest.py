"""
Unit test fixtures.

All unit tests should be:
- Fast (< 100ms)
- Isolated (in-memory store only)
- Deterministic (same result every time)
"""

import json
import pytest
from datetime import datetime


@pytest.fixture
def fixed_time():
    """Fixed datetime for deterministic tests."""
    return datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture
def snapshot_data():
    """Raw snapshot document: 2 themes, 1 group, 3 extracts."""
    return {
        "formatVersion": "1.0",
        "exportType": "all",
        "themes": [
            {"originalId": "a1", "name": "Friendship", "description": "Imported", "color": "#000000"},
            {"originalId": "a2", "name": "Rivalry", "description": None, "color": "#111111"},
        ],
        "themeGroups": [
            {"originalId": "ga", "name": "Feelings", "description": None, "color": "#222222",
             "themeOriginalIds": ["a1", "a2"]},
        ],
        "extracts": [
            {"originalId": "x1", "text": "First", "animeId": 1, "animeTitle": "Naruto",
             "animeImage": None, "timing": {"start": "00:00:01", "end": "00:00:05"},
             "episode": 1, "season": None,
             "characters": [{"malId": 17, "name": "Naruto Uzumaki", "image": None}],
             "themeOriginalId": "a1"},
            {"originalId": "x2", "text": "Second", "animeTitle": "Bleach",
             "timing": {"start": "1", "end": "2"}, "themeOriginalId": "a2"},
            {"originalId": "x3", "text": "Third", "animeTitle": "Mushishi",
             "timing": {"start": "", "end": ""}},
        ],
        "metadata": {"totalThemes": 2, "totalThemeGroups": 1, "totalExtracts": 3},
    }


@pytest.fixture
def snapshot_bytes(snapshot_data):
    return json.dumps(snapshot_data).encode("utf-8")
