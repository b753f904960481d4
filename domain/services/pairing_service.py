"""
Pairing unit builder.

Resolves pair requests and captain locks once into PlacementUnits so later
stages never re-derive who must travel together.
"""

from collections.abc import Iterable

from domain.models.candidate import Candidate, candidate_sort_key, is_mutual_pair
from domain.models.placement_unit import PlacementUnit


def _lock_compatible(candidate: Candidate, partner: Candidate) -> bool:
    """Two captains locked to different divisions can never share a unit."""
    return not (
        candidate.captain_division_id is not None
        and partner.captain_division_id is not None
        and candidate.captain_division_id != partner.captain_division_id
    )


def unit_sort_key(unit: PlacementUnit) -> tuple[float, str]:
    return (unit.average_score, unit.id)


def build_placement_units(candidates: Iterable[Candidate]) -> list[PlacementUnit]:
    """
    Group candidates into singles and mutual pairs.

    Candidates are visited in the global order; a pair is formed only when the
    request is mutual, both are still unplaced, and no conflicting captain
    locks are involved. Anything else becomes a single.

    Args:
        candidates: Candidate pool (any order)

    Returns:
        Units sorted by (average score, unit id)
    """
    ordered = sorted(candidates, key=candidate_sort_key)
    by_id = {c.id: c for c in ordered}
    used: set[str] = set()
    units: list[PlacementUnit] = []

    for candidate in ordered:
        if candidate.id in used:
            continue

        partner = by_id.get(candidate.pair_user_id) if candidate.pair_user_id else None
        can_pair = (
            partner is not None
            and partner.id not in used
            and is_mutual_pair(candidate, partner)
            and _lock_compatible(candidate, partner)
        )

        members = [candidate, partner] if can_pair else [candidate]
        units.append(PlacementUnit.from_players(members))
        used.update(p.id for p in members)

    return sorted(units, key=unit_sort_key)
