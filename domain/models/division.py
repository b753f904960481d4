"""
Division domain models: the division itself, its targets, and the working bucket.
"""

from dataclasses import dataclass, field, replace

from domain.models.placement_unit import PlacementUnit


@dataclass(frozen=True)
class Division:
    """
    A skill division. Lower rank is stronger; the highest rank is the catch-all.
    """

    id: int
    name: str
    rank: int
    team_count: int

    def __post_init__(self):
        if self.team_count <= 0:
            raise ValueError(f"Division {self.name} must have a positive team count")


@dataclass(frozen=True)
class DivisionTarget:
    """Size and gender quotas for one division."""

    size: int = 0
    male: int = 0
    non_male: int = 0


@dataclass(frozen=True)
class DivisionBucket:
    """
    A division with its currently assigned placement units.

    Buckets are immutable; with_unit / without_unit return a new bucket, and
    aggregates are derived from the units so they can never drift.
    """

    division: Division
    target: DivisionTarget = field(default_factory=DivisionTarget)
    units: tuple[PlacementUnit, ...] = ()

    @property
    def size(self) -> int:
        return sum(unit.size for unit in self.units)

    @property
    def male_count(self) -> int:
        return sum(unit.male_count for unit in self.units)

    @property
    def non_male_count(self) -> int:
        return sum(unit.non_male_count for unit in self.units)

    @property
    def has_room(self) -> bool:
        return self.size < self.target.size

    def fits_strict(self, unit: PlacementUnit) -> bool:
        """Adding the unit keeps size, male and non-male counts within target."""
        return (
            self.size + unit.size <= self.target.size
            and self.male_count + unit.male_count <= self.target.male
            and self.non_male_count + unit.non_male_count <= self.target.non_male
        )

    def fits_size(self, unit: PlacementUnit) -> bool:
        """Adding the unit keeps size within target."""
        return self.size + unit.size <= self.target.size

    def with_unit(self, unit: PlacementUnit) -> "DivisionBucket":
        return replace(self, units=self.units + (unit,))

    def without_unit(self, unit: PlacementUnit) -> "DivisionBucket":
        return replace(self, units=tuple(u for u in self.units if u.id != unit.id))

    def players(self):
        """All candidates in this bucket, in unit order."""
        return [player for unit in self.units for player in unit.players]
