"""
Roster service: builds a season's draft from stored signups, applies manual
moves, and persists the final team assignments.
"""

import logging
import sqlite3
from dataclasses import dataclass

from config import ROSTER_SETTINGS
from domain.models.assignment import Assignment
from domain.models.division import Division
from domain.models.roster_draft import RosterDraft
from domain.services.candidate_intake import CandidateIntakeService
from domain.services.division_placement_service import to_division_rosters
from repositories.interfaces import IRosterRepository
from roster_balancer import RosterBalancer
from services import error_codes
from services.result import Result
from services.roster_validation import validate_assignments

logger = logging.getLogger("roster.services.roster")


@dataclass
class DivisionSummary:
    """Counts for one division of a draft, next to its targets."""

    division_id: int
    name: str
    size: int
    target_size: int
    male_count: int
    target_male: int
    non_male_count: int
    target_non_male: int
    new_count: int
    captain_count: int

    @property
    def on_target(self) -> bool:
        return (
            self.size == self.target_size
            and self.male_count == self.target_male
            and self.non_male_count == self.target_non_male
        )


class RosterService:
    """
    Orchestrates roster creation for a season.

    Loading and saving go through the repository; every balancing decision
    is delegated to RosterBalancer.
    """

    def __init__(
        self,
        roster_repo: IRosterRepository,
        balancer: RosterBalancer | None = None,
        intake: CandidateIntakeService | None = None,
    ):
        self.roster_repo = roster_repo
        self.balancer = balancer or RosterBalancer()
        self.intake = intake or CandidateIntakeService(
            default_placement_score=ROSTER_SETTINGS["default_placement_score"],
            evaluation_level_weight=ROSTER_SETTINGS["evaluation_level_weight"],
        )

    def load_divisions(self) -> list[Division]:
        """
        Active divisions as engine divisions, strongest first.

        A stored team count wins; otherwise the weakest division gets the
        catch-all default and every other division the regular default.
        """
        records = self.roster_repo.get_active_divisions()
        divisions = []
        for index, record in enumerate(records):
            team_count = record.team_count
            if team_count is None:
                team_count = (
                    ROSTER_SETTINGS["catch_all_team_count"]
                    if index == len(records) - 1
                    else ROSTER_SETTINGS["default_team_count"]
                )
            divisions.append(
                Division(id=record.id, name=record.name, rank=record.level, team_count=team_count)
            )
        return divisions

    def prepare_draft(self, season_id: int | None = None) -> Result[RosterDraft]:
        """
        Build the draft for a season (the current season when omitted).

        Returns:
            Result.ok(draft) holding the computed division split, or
            Result.fail when there is no season or no active division
        """
        season = (
            self.roster_repo.get_season(season_id)
            if season_id is not None
            else self.roster_repo.get_current_season()
        )
        if season is None:
            message = (
                f"Season {season_id} not found." if season_id is not None else "No current season found."
            )
            return Result.fail(message, code=error_codes.NO_CURRENT_SEASON)

        divisions = self.balancer.order_divisions(self.load_divisions())
        if not divisions:
            return Result.fail("There are no active divisions to fill.", code=error_codes.NOTHING_TO_PLACE)

        signups = self.roster_repo.get_signups(season.id)
        user_ids = [s.user_id for s in signups]
        intake = self.intake.build_candidates(
            signups,
            captain_divisions=self.roster_repo.get_captains(season.id),
            draft_history=self.roster_repo.get_draft_history(user_ids),
            evaluation_levels=self.roster_repo.get_evaluation_levels(season.id, user_ids),
            tryout_date=season.tryout2_date,
        )
        if intake.excluded:
            logger.info(f"Excluded {len(intake.excluded)} signups missing the tryout date")

        placement = self.balancer.place_divisions(intake.candidates, divisions)
        rosters = to_division_rosters(placement)
        draft = RosterDraft(
            season_id=season.id,
            divisions=tuple(divisions),
            candidates=tuple(intake.candidates),
            targets={division_id: bucket.target for division_id, bucket in placement.items()},
            initial_rosters=dict(rosters),
            rosters=dict(rosters),
            excluded_players=tuple(intake.excluded),
            season_label=season.label,
        )
        logger.info(
            f"Prepared draft for season {season.id}: {len(intake.candidates)} candidates "
            f"across {len(divisions)} divisions"
        )
        return Result.ok(draft)

    def move_player(
        self,
        draft: RosterDraft,
        division_index: int,
        player_id: str,
        direction: int,
    ) -> Result[RosterDraft]:
        """
        Apply a manual move to the draft. On failure the draft is unchanged.
        """
        result = self.balancer.move_player(
            draft.rosters, draft.divisions, division_index, player_id, direction
        )
        if not result.success:
            return Result.fail(result.error, code=result.error_code)
        draft.apply(result.value)
        return Result.ok(draft)

    def compute_assignments(self, draft: RosterDraft) -> list[Assignment]:
        """Form teams from the draft's current division split."""
        if draft.is_empty:
            return []
        return self.balancer.form_teams(draft.rosters, draft.divisions)

    def save_draft(self, draft: RosterDraft) -> Result[int]:
        """
        Validate and persist the draft's team assignments.

        Returns:
            Result.ok(saved_count), or Result.fail with a validation or
            persistence error code
        """
        assignments = self.compute_assignments(draft)
        validation = validate_assignments(
            assignments,
            signed_up_ids=[s.user_id for s in self.roster_repo.get_signups(draft.season_id)],
            active_division_ids=[d.id for d in self.roster_repo.get_active_divisions()],
            captain_divisions=self.roster_repo.get_captains(draft.season_id),
        )
        if not validation.success:
            logger.warning(f"Refusing to save season {draft.season_id} rosters: {validation.error}")
            return validation

        try:
            saved = self.roster_repo.save_assignments(draft.season_id, assignments)
        except sqlite3.Error:
            logger.exception(f"Error saving rosters for season {draft.season_id}")
            return Result.fail(
                "Something went wrong while saving rosters.",
                code=error_codes.PERSISTENCE_ERROR,
            )
        return Result.ok(saved)

    def summarize_divisions(self, draft: RosterDraft) -> list[DivisionSummary]:
        """Per-division counts against targets, strongest division first."""
        summaries = []
        for division in draft.divisions:
            players = draft.players_in(division.id)
            target = draft.targets.get(division.id)
            male_count = sum(1 for p in players if p.is_male)
            summaries.append(
                DivisionSummary(
                    division_id=division.id,
                    name=division.name,
                    size=len(players),
                    target_size=target.size if target else 0,
                    male_count=male_count,
                    target_male=target.male if target else 0,
                    non_male_count=len(players) - male_count,
                    target_non_male=target.non_male if target else 0,
                    new_count=sum(1 for p in players if p.is_new),
                    captain_count=sum(1 for p in players if p.is_captain),
                )
            )
        return summaries
