"""
Repository for season signups, divisions and saved rosters.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from domain.models.assignment import Assignment
from domain.services.candidate_intake import DraftRecord, SignupRecord
from repositories.base_repository import BaseRepository
from repositories.interfaces import IRosterRepository

logger = logging.getLogger("roster.repositories.roster")


@dataclass
class Season:
    """A league season."""
    id: int
    name: str
    year: int | None
    tryout2_date: str | None
    is_current: bool

    @property
    def label(self) -> str:
        return f"{self.name} {self.year}" if self.year else self.name


@dataclass
class DivisionRecord:
    """A stored division; team_count is None when the default applies."""
    id: int
    name: str
    level: int
    active: bool
    team_count: int | None


class RosterRepository(BaseRepository, IRosterRepository):
    """Repository for roster creation data."""

    # --- Seeding ---

    def add_season(
        self,
        name: str,
        year: int | None = None,
        tryout2_date: str | None = None,
        is_current: bool = False,
    ) -> int:
        """
        Create a season. Marking it current clears the flag on every other season.

        Returns:
            The new season id
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            if is_current:
                cursor.execute("UPDATE seasons SET is_current = 0")
            cursor.execute(
                """
                INSERT INTO seasons (name, year, tryout2_date, is_current)
                VALUES (?, ?, ?, ?)
                """,
                (name, year, tryout2_date, 1 if is_current else 0),
            )
            return cursor.lastrowid

    def add_division(
        self, name: str, level: int, active: bool = True, team_count: int | None = None
    ) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO divisions (name, level, active, team_count) VALUES (?, ?, ?, ?)",
                (name, level, 1 if active else 0, team_count),
            )
            return cursor.lastrowid

    def add_player(
        self,
        user_id: str,
        first_name: str,
        last_name: str,
        preferred_name: str | None = None,
        male: bool | None = None,
    ) -> None:
        with self.connection() as conn:
            conn.execute(
                """
                INSERT INTO players (user_id, first_name, last_name, preferred_name, male)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    first_name = excluded.first_name,
                    last_name = excluded.last_name,
                    preferred_name = excluded.preferred_name,
                    male = excluded.male
                """,
                (user_id, first_name, last_name, preferred_name, None if male is None else int(male)),
            )

    def add_signup(
        self,
        season_id: int,
        user_id: str,
        pair_pick: str | None = None,
        dates_missing: str | None = None,
    ) -> None:
        with self.connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO signups (season_id, user_id, pair_pick, dates_missing)
                VALUES (?, ?, ?, ?)
                """,
                (season_id, user_id, pair_pick, dates_missing),
            )

    def add_captain(self, season_id: int, user_id: str, division_id: int) -> None:
        with self.connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO season_captains (season_id, user_id, division_id)
                VALUES (?, ?, ?)
                """,
                (season_id, user_id, division_id),
            )

    def add_draft_pick(self, user_id: str, season_id: int, overall: int) -> None:
        with self.connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO draft_history (user_id, season_id, overall)
                VALUES (?, ?, ?)
                """,
                (user_id, season_id, overall),
            )

    def add_evaluation(self, season_id: int, player_id: str, division_id: int) -> None:
        with self.connection() as conn:
            conn.execute(
                "INSERT INTO evaluations (season_id, player_id, division_id) VALUES (?, ?, ?)",
                (season_id, player_id, division_id),
            )

    # --- Reads ---

    @staticmethod
    def _row_to_season(row) -> Season:
        return Season(
            id=row["id"],
            name=row["name"],
            year=row["year"],
            tryout2_date=row["tryout2_date"],
            is_current=bool(row["is_current"]),
        )

    def get_season(self, season_id: int) -> Season | None:
        with self.connection() as conn:
            row = conn.execute(
                "SELECT id, name, year, tryout2_date, is_current FROM seasons WHERE id = ?",
                (season_id,),
            ).fetchone()
            return self._row_to_season(row) if row else None

    def get_current_season(self) -> Season | None:
        """Most recent season flagged current, if any."""
        with self.connection() as conn:
            row = conn.execute(
                """
                SELECT id, name, year, tryout2_date, is_current
                FROM seasons
                WHERE is_current = 1
                ORDER BY id DESC
                LIMIT 1
                """
            ).fetchone()
            return self._row_to_season(row) if row else None

    def get_active_divisions(self) -> list[DivisionRecord]:
        """Active divisions ordered strongest (lowest level) first."""
        with self.connection() as conn:
            rows = conn.execute(
                """
                SELECT id, name, level, active, team_count
                FROM divisions
                WHERE active = 1
                ORDER BY level, id
                """
            ).fetchall()
            return [
                DivisionRecord(
                    id=row["id"],
                    name=row["name"],
                    level=row["level"],
                    active=bool(row["active"]),
                    team_count=row["team_count"],
                )
                for row in rows
            ]

    def get_signups(self, season_id: int) -> list[SignupRecord]:
        """Season signups joined with player profiles, in signup order."""
        with self.connection() as conn:
            rows = conn.execute(
                """
                SELECT s.user_id, p.first_name, p.last_name, p.preferred_name, p.male,
                       s.pair_pick, s.dates_missing
                FROM signups s
                JOIN players p ON p.user_id = s.user_id
                WHERE s.season_id = ?
                ORDER BY s.created_at, s.rowid
                """,
                (season_id,),
            ).fetchall()
            return [
                SignupRecord(
                    user_id=row["user_id"],
                    first_name=row["first_name"],
                    last_name=row["last_name"],
                    preferred_name=row["preferred_name"],
                    male=None if row["male"] is None else bool(row["male"]),
                    pair_pick_id=row["pair_pick"],
                    dates_missing=row["dates_missing"],
                )
                for row in rows
            ]

    def get_captains(self, season_id: int) -> dict[str, int]:
        """Captain user id -> captained division id for the season."""
        with self.connection() as conn:
            rows = conn.execute(
                "SELECT user_id, division_id FROM season_captains WHERE season_id = ?",
                (season_id,),
            ).fetchall()
            return {row["user_id"]: row["division_id"] for row in rows}

    def get_draft_history(self, user_ids: list[str]) -> dict[str, list[DraftRecord]]:
        """Draft picks per player, most recent season first."""
        if not user_ids:
            return {}

        placeholders = ",".join("?" * len(user_ids))
        with self.connection() as conn:
            rows = conn.execute(
                f"""
                SELECT user_id, season_id, overall
                FROM draft_history
                WHERE user_id IN ({placeholders})
                ORDER BY season_id DESC, overall
                """,
                list(user_ids),
            ).fetchall()

        history: dict[str, list[DraftRecord]] = {}
        for row in rows:
            history.setdefault(row["user_id"], []).append(
                DraftRecord(season_id=row["season_id"], overall=row["overall"])
            )
        return history

    def get_evaluation_levels(self, season_id: int, user_ids: list[str]) -> dict[str, list[int]]:
        """Division levels each player was evaluated into this season."""
        if not user_ids:
            return {}

        placeholders = ",".join("?" * len(user_ids))
        with self.connection() as conn:
            rows = conn.execute(
                f"""
                SELECT e.player_id, d.level
                FROM evaluations e
                JOIN divisions d ON d.id = e.division_id
                WHERE e.season_id = ? AND e.player_id IN ({placeholders})
                ORDER BY e.id
                """,
                [season_id, *user_ids],
            ).fetchall()

        levels: dict[str, list[int]] = {}
        for row in rows:
            levels.setdefault(row["player_id"], []).append(row["level"])
        return levels

    # --- Rosters ---

    def save_assignments(self, season_id: int, assignments: Sequence[Assignment]) -> int:
        """
        Replace the season's saved rosters with the given assignments.

        Delete and insert run in one immediate transaction; on any error the
        previous rosters are left untouched and the error propagates.

        Returns:
            Number of rows written
        """
        with self.atomic_transaction() as conn:
            conn.execute("DELETE FROM roster_assignments WHERE season_id = ?", (season_id,))
            conn.executemany(
                """
                INSERT INTO roster_assignments
                    (season_id, user_id, division_id, team_number, is_captain)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (season_id, a.player_id, a.division_id, a.team_number, 1 if a.is_captain else 0)
                    for a in assignments
                ],
            )
        logger.info(f"Saved {len(assignments)} roster assignments for season {season_id}")
        return len(assignments)

    def get_assignments(self, season_id: int) -> list[Assignment]:
        with self.connection() as conn:
            rows = conn.execute(
                """
                SELECT user_id, division_id, team_number, is_captain
                FROM roster_assignments
                WHERE season_id = ?
                ORDER BY division_id, team_number, is_captain DESC, user_id
                """,
                (season_id,),
            ).fetchall()
            return [
                Assignment(
                    player_id=row["user_id"],
                    division_id=row["division_id"],
                    team_number=row["team_number"],
                    is_captain=bool(row["is_captain"]),
                )
                for row in rows
            ]
