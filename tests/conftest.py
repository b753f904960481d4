"""
Pytest fixtures for tests.

Performance optimization: the roster schema is created once per session in a
template database, and each test copies that file instead of re-running the
schema setup.
"""

import shutil

import pytest

from domain.models.candidate import Candidate, Gender
from domain.models.division import Division
from infrastructure.schema_manager import SchemaManager
from repositories.roster_repository import RosterRepository
from utils.placement_cache import clear_placement_cache


@pytest.fixture(autouse=True)
def clear_caches():
    """
    Clear global caches before and after each test to prevent cross-test contamination.

    The placement cache is process-global (LRU cache), so a stale entry could
    leak a previous test's division split.
    """
    clear_placement_cache()
    yield
    clear_placement_cache()


@pytest.fixture
def make_candidate():
    """
    Factory for candidates with sensible defaults.

    Usage:
        player = make_candidate("p1", 120)
        captain = make_candidate("c1", 40, is_captain=True, captain_division_id=1)
    """

    def _make(player_id: str, score: float, gender: Gender = Gender.MALE, **overrides) -> Candidate:
        fields = {
            "id": player_id,
            "display_name": f"Player {player_id}",
            "placement_score": float(score),
            "gender": gender,
        }
        fields.update(overrides)
        return Candidate(**fields)

    return _make


@pytest.fixture
def make_division():
    """Factory for divisions; rank defaults to the id so lower ids are stronger."""

    def _make(division_id: int, team_count: int = 1, rank: int | None = None, name: str | None = None) -> Division:
        return Division(
            id=division_id,
            name=name or f"Division {division_id}",
            rank=rank if rank is not None else division_id,
            team_count=team_count,
        )

    return _make


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    """Create a schema template database once per test session."""
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    SchemaManager(template_path).initialize()
    yield template_path


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path (no schema)."""
    path = str(tmp_path / "temp.db")
    yield path


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """A fresh database file with the roster schema already applied."""
    path = str(tmp_path / "rosters.db")
    shutil.copy2(_schema_template_path, path)
    yield path


@pytest.fixture
def roster_repository(repo_db_path):
    """Create a roster repository backed by a fresh database."""
    return RosterRepository(repo_db_path)
