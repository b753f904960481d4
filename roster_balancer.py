"""
Balanced roster construction: divisions first, then teams within each division.
"""

import logging
from collections.abc import Sequence

from config import ROSTER_SETTINGS, USE_PLACEMENT_CACHE
from domain.models.assignment import Assignment
from domain.models.candidate import Candidate
from domain.models.division import Division, DivisionBucket
from domain.models.roster_draft import DivisionRosters
from domain.models.team import TeamBucket
from domain.services.division_placement_service import DivisionPlacementService, to_division_rosters
from domain.services.team_formation_service import TeamFormationService
from services.result import Result
from services.roster_moves import move_player
from utils.placement_cache import get_cached_division_placement

logger = logging.getLogger("roster.balancer")


class RosterBalancer:
    """
    Splits a candidate pool into skill divisions and then into teams.

    Greedy construction plus bounded local search: deterministic for identical
    inputs, never fails on valid inputs, and not guaranteed to be optimal.
    """

    def __init__(
        self,
        division_rebalance_passes: int | None = None,
        gender_swap_passes: int | None = None,
        new_player_swap_passes: int | None = None,
        score_swap_passes: int | None = None,
        use_cache: bool | None = None,
    ):
        """
        Initialize the balancer.

        Args:
            division_rebalance_passes: Gender swap passes between divisions (default 6)
            gender_swap_passes: Team non-male quota swap passes (default 20)
            new_player_swap_passes: Team new-player quota swap passes (default 12)
            score_swap_passes: Team score spread swap passes (default 24)
            use_cache: Memoize division placement (default USE_PLACEMENT_CACHE)
        """
        settings = ROSTER_SETTINGS
        self.division_rebalance_passes = (
            division_rebalance_passes
            if division_rebalance_passes is not None
            else settings["division_rebalance_passes"]
        )
        self.gender_swap_passes = (
            gender_swap_passes if gender_swap_passes is not None else settings["gender_swap_passes"]
        )
        self.new_player_swap_passes = (
            new_player_swap_passes
            if new_player_swap_passes is not None
            else settings["new_player_swap_passes"]
        )
        self.score_swap_passes = (
            score_swap_passes if score_swap_passes is not None else settings["score_swap_passes"]
        )
        self.use_cache = use_cache if use_cache is not None else USE_PLACEMENT_CACHE
        self.team_service = TeamFormationService(
            gender_swap_passes=self.gender_swap_passes,
            new_player_swap_passes=self.new_player_swap_passes,
            score_swap_passes=self.score_swap_passes,
        )

    @staticmethod
    def order_divisions(divisions: Sequence[Division]) -> list[Division]:
        """Strongest first; the last division is the catch-all."""
        return sorted(divisions, key=lambda d: (d.rank, d.id))

    def place_divisions(
        self,
        candidates: Sequence[Candidate],
        divisions: Sequence[Division],
    ) -> dict[int, DivisionBucket]:
        """
        Run the division split and return the final buckets.

        Args:
            candidates: Eligible candidate pool
            divisions: Divisions in any order

        Returns:
            Mapping of division id to DivisionBucket, strongest division first
        """
        ordered = self.order_divisions(divisions)
        if self.use_cache:
            return get_cached_division_placement(candidates, ordered, self.division_rebalance_passes)
        return DivisionPlacementService(self.division_rebalance_passes).place(ordered, candidates)

    def split_divisions(
        self,
        candidates: Sequence[Candidate],
        divisions: Sequence[Division],
    ) -> DivisionRosters:
        """Division split as per-division candidate lists (males first, then score)."""
        return to_division_rosters(self.place_divisions(candidates, divisions))

    def build_teams(
        self,
        rosters: DivisionRosters,
        divisions: Sequence[Division],
    ) -> dict[int, list[TeamBucket]]:
        """
        Form the teams of every division from its current candidate list.

        Args:
            rosters: Division id -> candidates in that division
            divisions: Divisions in any order

        Returns:
            Division id -> teams, strongest division first
        """
        ordered = self.order_divisions(divisions)
        teams_by_division: dict[int, list[TeamBucket]] = {}
        for index, division in enumerate(ordered):
            teams_by_division[division.id] = self.team_service.form_teams(
                division,
                rosters.get(division.id, ()),
                is_catch_all=index == len(ordered) - 1,
            )
        return teams_by_division

    @staticmethod
    def to_assignments(teams_by_division: dict[int, list[TeamBucket]]) -> list[Assignment]:
        """Flatten teams into the assignment list, in division/team/roster order."""
        return [
            Assignment(
                player_id=player.id,
                division_id=division_id,
                team_number=team.number,
                is_captain=player.is_captain,
            )
            for division_id, teams in teams_by_division.items()
            for team in teams
            for player in team.players
        ]

    def form_teams(
        self,
        rosters: DivisionRosters,
        divisions: Sequence[Division],
    ) -> list[Assignment]:
        """Team formation for an existing (possibly hand-edited) division split."""
        return self.to_assignments(self.build_teams(rosters, divisions))

    def balance(
        self,
        candidates: Sequence[Candidate],
        divisions: Sequence[Division],
    ) -> list[Assignment]:
        """
        Full pipeline: division split, then team formation in every division.

        Args:
            candidates: Eligible candidate pool
            divisions: Divisions in any order

        Returns:
            One Assignment per candidate; empty when there is nothing to place
        """
        if not candidates or sum(d.team_count for d in divisions) == 0:
            logger.info("Nothing to place: empty candidate pool or no teams")
            return []

        rosters = self.split_divisions(candidates, divisions)
        assignments = self.form_teams(rosters, divisions)
        logger.info(
            f"Balanced {len(candidates)} candidates into {len(divisions)} divisions "
            f"({sum(d.team_count for d in divisions)} teams)"
        )
        return assignments

    def move_player(
        self,
        rosters: DivisionRosters,
        divisions: Sequence[Division],
        division_index: int,
        player_id: str,
        direction: int,
    ) -> Result[DivisionRosters]:
        """
        Manual single move between adjacent divisions with a compensating swap.

        Only the two affected divisions change; call form_teams afterwards to
        rebuild their teams.
        """
        return move_player(rosters, self.order_divisions(divisions), division_index, player_id, direction)
