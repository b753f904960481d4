"""
Candidate intake domain service.

Turns raw season signups into balancer candidates: drops players who miss
the tryout date, resolves mutual pair picks, and derives placement scores
from draft history or tryout evaluations.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from domain.models.candidate import Candidate, Gender
from domain.models.roster_draft import ExcludedPlayer


@dataclass(frozen=True)
class SignupRecord:
    """A season signup joined with the player's profile."""

    user_id: str
    first_name: str
    last_name: str
    preferred_name: str | None = None
    male: bool | None = None
    pair_pick_id: str | None = None
    dates_missing: str | None = None  # Comma-separated, free-form dates


@dataclass(frozen=True)
class DraftRecord:
    """One past draft pick for a player."""

    season_id: int
    overall: int


@dataclass
class IntakeResult:
    """Result of candidate intake."""

    candidates: list[Candidate]
    excluded: list[ExcludedPlayer]


def display_name(first_name: str, last_name: str, preferred_name: str | None = None) -> str:
    """Preferred name wins over first name when present."""
    return f"{preferred_name or first_name} {last_name}"


class CandidateIntakeService:
    """
    Pure domain logic for building the candidate pool.

    Handles:
    - Tryout-date exclusion
    - Mutual pair resolution
    - Placement score derivation (draft pick, evaluation level, default)
    """

    def __init__(self, default_placement_score: float = 200.0, evaluation_level_weight: float = 50.0):
        """
        Initialize the intake service.

        Args:
            default_placement_score: Score for players with no history or evaluations
            evaluation_level_weight: Score per evaluated division level below the top
        """
        self.default_placement_score = default_placement_score
        self.evaluation_level_weight = evaluation_level_weight

    @staticmethod
    def misses_date(record: SignupRecord, tryout_date: str | None) -> bool:
        """True if the signup lists the tryout date among its missing dates."""
        wanted = (tryout_date or "").strip().lower()
        if not wanted:
            return False
        missing = [d.strip().lower() for d in (record.dates_missing or "").split(",")]
        return wanted in [d for d in missing if d]

    @staticmethod
    def mutual_pairs(records: Sequence[SignupRecord]) -> dict[str, str]:
        """Map user id -> partner id for picks that are reciprocated."""
        picks = {r.user_id: r.pair_pick_id for r in records if r.pair_pick_id}
        return {
            user_id: partner_id
            for user_id, partner_id in picks.items()
            if partner_id != user_id and picks.get(partner_id) == user_id
        }

    def placement_score(
        self,
        history: Sequence[DraftRecord],
        evaluation_levels: Sequence[int],
    ) -> float:
        """
        Most recent draft pick; else (average evaluated level - 1) * weight; else default.

        Args:
            history: Draft records, most recent season first
            evaluation_levels: Division levels this player was evaluated into
        """
        if history:
            return float(history[0].overall)
        if evaluation_levels:
            average_level = sum(evaluation_levels) / len(evaluation_levels)
            return (average_level - 1) * self.evaluation_level_weight
        return self.default_placement_score

    def build_candidates(
        self,
        signups: Sequence[SignupRecord],
        captain_divisions: Mapping[str, int],
        draft_history: Mapping[str, Sequence[DraftRecord]],
        evaluation_levels: Mapping[str, Sequence[int]],
        tryout_date: str | None = None,
    ) -> IntakeResult:
        """
        Build the eligible candidate pool for one season.

        Args:
            signups: Season signups
            captain_divisions: Captain user id -> captained division id
            draft_history: User id -> draft records (most recent first)
            evaluation_levels: User id -> evaluated division levels
            tryout_date: Required tryout date; signups missing it are excluded

        Returns:
            IntakeResult with candidates ordered by (score, last name, name)
        """
        excluded: list[ExcludedPlayer] = []
        eligible: list[SignupRecord] = []
        for record in signups:
            if self.misses_date(record, tryout_date):
                excluded.append(
                    ExcludedPlayer(
                        user_id=record.user_id,
                        display_name=display_name(record.first_name, record.last_name, record.preferred_name),
                        reason=f"missing tryout date {tryout_date}",
                    )
                )
            else:
                eligible.append(record)

        pairs = self.mutual_pairs(eligible)
        built: list[tuple[Candidate, str]] = []
        for record in eligible:
            history = draft_history.get(record.user_id, ())
            captain_division = captain_divisions.get(record.user_id)
            candidate = Candidate(
                id=record.user_id,
                display_name=display_name(record.first_name, record.last_name, record.preferred_name),
                placement_score=self.placement_score(history, evaluation_levels.get(record.user_id, ())),
                gender=Gender.from_flag(record.male),
                is_captain=captain_division is not None,
                captain_division_id=captain_division,
                pair_user_id=pairs.get(record.user_id),
                is_new=not history,
            )
            built.append((candidate, record.last_name.lower()))

        built.sort(key=lambda item: (item[0].placement_score, item[1], item[0].display_name.lower()))
        return IntakeResult(candidates=[c for c, _ in built], excluded=excluded)
