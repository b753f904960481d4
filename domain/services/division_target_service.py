"""
Division target calculator: per-division size and gender quotas.
"""

import math
from collections.abc import Sequence

from domain.models.candidate import Candidate
from domain.models.division import Division, DivisionTarget
from domain.services.apportionment import allocate


def compute_division_targets(
    divisions: Sequence[Division],
    candidates: Sequence[Candidate],
) -> dict[int, DivisionTarget]:
    """
    Compute size, male and non-male targets for each division.

    Sizes follow team counts: every team gets floor(players / teams) and the
    leftover players are apportioned by team count. The non-male quota is the
    pool's non-male ratio applied to each size (floored), with any shortfall
    handed out one per division in rank order until exhausted.

    Args:
        divisions: Divisions ordered strongest to weakest
        candidates: Eligible candidate pool

    Returns:
        Mapping of division id to its DivisionTarget (empty when there are no teams)
    """
    total_players = len(candidates)
    total_teams = sum(d.team_count for d in divisions)
    if total_teams == 0:
        return {}

    base_team_size = total_players // total_teams
    extra_players = total_players - base_team_size * total_teams
    team_counts = [d.team_count for d in divisions]
    extra = allocate(extra_players, team_counts, list(team_counts))
    size_targets = [d.team_count * base_team_size + extra[i] for i, d in enumerate(divisions)]

    total_non_male = sum(1 for c in candidates if not c.is_male)
    ratio = total_non_male / total_players if total_players > 0 else 0.0
    non_male_targets = [min(size, math.floor(size * ratio)) for size in size_targets]

    remaining = total_non_male - sum(non_male_targets)
    while remaining > 0:
        placed = False
        for index, size in enumerate(size_targets):
            if remaining <= 0:
                break
            if non_male_targets[index] >= size:
                continue
            non_male_targets[index] += 1
            remaining -= 1
            placed = True
        if not placed:
            break

    return {
        division.id: DivisionTarget(
            size=size_targets[index],
            male=size_targets[index] - non_male_targets[index],
            non_male=non_male_targets[index],
        )
        for index, division in enumerate(divisions)
    }
