"""
Team domain model.
"""

from dataclasses import dataclass, replace

from domain.models.candidate import Candidate, candidate_sort_key


@dataclass(frozen=True)
class TeamBucket:
    """
    One team being built inside a division.

    This is a pure domain model with no infrastructure dependencies. The
    running aggregates are derived from the player tuple, so a swap only has
    to replace one entry.
    """

    index: int
    capacity: int
    players: tuple[Candidate, ...] = ()

    @property
    def number(self) -> int:
        """1-based team number used in saved assignments."""
        return self.index + 1

    @property
    def size(self) -> int:
        return len(self.players)

    @property
    def remaining(self) -> int:
        return self.capacity - self.size

    @property
    def score_sum(self) -> float:
        return sum(p.placement_score for p in self.players)

    @property
    def male_count(self) -> int:
        return sum(1 for p in self.players if p.is_male)

    @property
    def non_male_count(self) -> int:
        return self.size - self.male_count

    @property
    def new_count(self) -> int:
        return sum(1 for p in self.players if p.is_new)

    def with_players(self, players) -> "TeamBucket":
        return replace(self, players=self.players + tuple(players))

    def with_swap(self, outgoing: Candidate, incoming: Candidate) -> "TeamBucket":
        """Replace `outgoing` with `incoming`, keeping its roster position."""
        return replace(
            self,
            players=tuple(incoming if p.id == outgoing.id else p for p in self.players),
        )

    def sorted_for_display(self) -> "TeamBucket":
        """Captain first, then ascending score, then name."""
        ordered = sorted(
            self.players,
            key=lambda p: (not p.is_captain, *candidate_sort_key(p)),
        )
        return replace(self, players=tuple(ordered))
