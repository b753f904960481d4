"""
Placement unit domain model.
"""

from dataclasses import dataclass

from domain.models.candidate import Candidate


@dataclass(frozen=True)
class PlacementUnit:
    """
    One candidate, or a mutual pair, that must always be placed together.
    """

    id: str  # Sorted member ids joined with ":"
    players: tuple[Candidate, ...]
    locked_division_id: int | None = None

    @classmethod
    def from_players(cls, players: list[Candidate]) -> "PlacementUnit":
        locked = next(
            (p.captain_division_id for p in players if p.captain_division_id is not None),
            None,
        )
        return cls(
            id=":".join(sorted(p.id for p in players)),
            players=tuple(players),
            locked_division_id=locked,
        )

    @property
    def size(self) -> int:
        return len(self.players)

    @property
    def male_count(self) -> int:
        return sum(1 for p in self.players if p.is_male)

    @property
    def non_male_count(self) -> int:
        return self.size - self.male_count

    @property
    def new_count(self) -> int:
        return sum(1 for p in self.players if p.is_new)

    @property
    def score_sum(self) -> float:
        return sum(p.placement_score for p in self.players)

    @property
    def average_score(self) -> float:
        return self.score_sum / self.size

    @property
    def is_locked(self) -> bool:
        return self.locked_division_id is not None
