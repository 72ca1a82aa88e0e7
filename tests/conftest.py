"""
Root test configuration.

Test organization:
- unit/        Fast, isolated, in-memory store
- integration/ Component boundaries, JSON files in temp dirs, Flask client

Run specific levels:
    pytest tests/unit -v           # Fast feedback loop
    pytest tests/integration -v    # Before commit
    pytest tests -v                # Everything
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from models import Theme, ThemeGroup, Extract, Timing, Character
from repositories import MemoryRepository


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast isolated tests")
    config.addinivalue_line("markers", "integration: Component boundary tests")
    config.addinivalue_line("markers", "slow: Tests that take > 1s")


def seed_library(repo):
    """
    Standard library:

        t1 Friendship  <- e1, e2
        t2 Loss        <- e3
        t3 Courage     (no extracts)
        g1 Feelings    = {t1, t2}
        e4             (no theme)
    """
    repo.themes.create(Theme(id="t1", name="Friendship", description="Bonds between characters", color="#10B981"))
    repo.themes.create(Theme(id="t2", name="Loss", color="#EF4444"))
    repo.themes.create(Theme(id="t3", name="Courage"))
    repo.theme_groups.create(ThemeGroup(id="g1", name="Feelings", color="#F59E0B", theme_ids=["t1", "t2"]))
    repo.extracts.create(Extract(
        id="e1",
        text="I'm not gonna run away, I never go back on my word!",
        anime_id=20,
        anime_title="Naruto",
        anime_image="https://cdn.example/naruto.jpg",
        timing=Timing(start="00:12:31", end="00:12:40"),
        episode=19,
        season=1,
        characters=[Character(mal_id=17, name="Naruto Uzumaki", image="https://cdn.example/n.jpg")],
        theme_id="t1",
    ))
    repo.extracts.create(Extract(id="e2", text="Those who abandon their friends are worse than scum.",
                                 anime_title="Naruto", theme_id="t1"))
    repo.extracts.create(Extract(id="e3", text="People die if they are killed.", anime_title="Fate/stay night",
                                 theme_id="t2"))
    repo.extracts.create(Extract(id="e4", text="Loose extract", anime_title="Mushishi"))
    return repo


@pytest.fixture
def repo():
    """Empty in-memory repository."""
    return MemoryRepository()


@pytest.fixture
def seeded_repo():
    """In-memory repository with the standard library."""
    return seed_library(MemoryRepository())
