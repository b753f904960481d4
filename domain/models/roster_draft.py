"""
Roster draft domain model: one season's division split under manual editing.
"""

from dataclasses import dataclass, field

from domain.models.candidate import Candidate
from domain.models.division import Division, DivisionTarget

# Division id -> candidates currently in that division (display order)
DivisionRosters = dict[int, tuple[Candidate, ...]]


@dataclass(frozen=True)
class ExcludedPlayer:
    """A signup kept out of the draft upstream (e.g. missing the tryout date)."""

    user_id: str
    display_name: str
    reason: str = ""


@dataclass
class RosterDraft:
    """
    Represents the state of a season's roster draft.

    Tracks:
    - The ordered divisions and the eligible candidate pool
    - The computed division split (initial_rosters) and its targets
    - The edited split after manual moves (rosters)
    - Players excluded before balancing
    """

    season_id: int
    divisions: tuple[Division, ...]
    candidates: tuple[Candidate, ...]
    targets: dict[int, DivisionTarget] = field(default_factory=dict)
    initial_rosters: DivisionRosters = field(default_factory=dict)
    rosters: DivisionRosters = field(default_factory=dict)
    excluded_players: tuple[ExcludedPlayer, ...] = ()
    season_label: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.candidates or not self.divisions

    @property
    def male_count(self) -> int:
        return sum(1 for c in self.candidates if c.is_male)

    @property
    def non_male_count(self) -> int:
        return len(self.candidates) - self.male_count

    def players_in(self, division_id: int) -> tuple[Candidate, ...]:
        return self.rosters.get(division_id, ())

    def division_index(self, division_id: int) -> int | None:
        for index, division in enumerate(self.divisions):
            if division.id == division_id:
                return index
        return None

    def apply(self, rosters: DivisionRosters) -> None:
        """Replace the edited split (used after a successful manual move)."""
        self.rosters = dict(rosters)

    def reset(self) -> None:
        """Discard every manual move and return to the computed split."""
        self.rosters = dict(self.initial_rosters)
