"""
Candidate domain model.
"""

from dataclasses import dataclass
from enum import Enum


class Gender(Enum):
    """Gender as recorded at signup. Unknown counts toward the non-male quota."""

    MALE = "male"
    NOT_MALE = "not-male"
    UNKNOWN = "unknown"

    @classmethod
    def from_flag(cls, male: bool | None) -> "Gender":
        """Map the stored nullable `male` flag onto a Gender."""
        if male is True:
            return cls.MALE
        if male is False:
            return cls.NOT_MALE
        return cls.UNKNOWN


@dataclass(frozen=True)
class Candidate:
    """
    A tryout candidate entering the roster balancer.

    This is a pure domain model with no infrastructure dependencies.
    Lower placement_score means a stronger player.
    """

    id: str
    display_name: str
    placement_score: float
    gender: Gender = Gender.UNKNOWN
    is_captain: bool = False
    captain_division_id: int | None = None  # Division a captain is locked to
    pair_user_id: str | None = None  # Requested partner (may not be mutual)
    is_new: bool = False  # No prior draft history

    @property
    def is_male(self) -> bool:
        return self.gender is Gender.MALE


def candidate_sort_key(candidate: Candidate) -> tuple[float, str, str]:
    """
    Global ordering used everywhere: score ascending, then name, then id.

    Every component sorts through this key so identical inputs always
    produce identical placements.
    """
    return (
        candidate.placement_score,
        candidate.display_name.lower(),
        candidate.id,
    )


def division_display_key(candidate: Candidate) -> tuple[bool, float, str, str]:
    """Display order inside a division list: males first, then the global order."""
    return (not candidate.is_male, *candidate_sort_key(candidate))


def is_mutual_pair(candidate: Candidate, partner: Candidate | None) -> bool:
    """True when both candidates name each other as pair partner."""
    return (
        partner is not None
        and partner.id != candidate.id
        and candidate.pair_user_id == partner.id
        and partner.pair_user_id == candidate.id
    )
