"""Tests for the create_rosters command-line entry point."""

import pytest

import create_rosters
from create_rosters import main
from repositories.roster_repository import RosterRepository


@pytest.fixture(autouse=True)
def keep_pytest_logging(monkeypatch):
    """basicConfig(force=True) would replace pytest's log capture handlers."""
    monkeypatch.setattr(create_rosters, "_configure_logging", lambda verbose: None)


def _seed(db_path: str) -> int:
    repo = RosterRepository(db_path)
    season_id = repo.add_season("Spring", 2025, is_current=True)
    top = repo.add_division("Division A", level=1, team_count=1)
    repo.add_division("Division B", level=2, team_count=1)
    for index in range(6):
        user_id = f"u{index}"
        repo.add_player(user_id, f"First{index}", f"Last{index}", male=index % 2 == 0)
        repo.add_signup(season_id, user_id)
        repo.add_draft_pick(user_id, 0, overall=index + 1)
    repo.add_captain(season_id, "u0", top)
    return season_id


class TestCreateRostersCli:
    """Test main() exit codes and side effects."""

    def test_missing_database(self, tmp_path, capsys):
        code = main(["--db-path", str(tmp_path / "missing.db")])

        assert code == 2
        assert "Database file not found" in capsys.readouterr().err

    def test_dry_run_writes_nothing(self, repo_db_path, capsys):
        season_id = _seed(repo_db_path)

        code = main(["--db-path", repo_db_path, "--dry-run"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Division A" in out
        assert "Dry-run" in out
        assert RosterRepository(repo_db_path).get_assignments(season_id) == []

    def test_saves_rosters(self, repo_db_path, capsys):
        season_id = _seed(repo_db_path)

        code = main(["--db-path", repo_db_path, "--verbose"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Saved 6 roster assignments." in out
        assert "(C)" in out  # verbose lists each team's players
        assert len(RosterRepository(repo_db_path).get_assignments(season_id)) == 6

    def test_unknown_season_fails(self, repo_db_path, capsys):
        _seed(repo_db_path)

        code = main(["--db-path", repo_db_path, "--season-id", "999"])

        assert code == 1
        assert "no_current_season" in capsys.readouterr().err
