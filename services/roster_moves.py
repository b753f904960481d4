"""
Manual division moves with automatic compensation.

A player (with a mutual partner, if any) moves one division up or down and
is swapped against the closest-scored eligible players of the destination,
so both divisions keep their exact sizes.
"""

import logging
from collections.abc import Sequence

from domain.models.candidate import Candidate, candidate_sort_key, division_display_key, is_mutual_pair
from domain.models.division import Division
from domain.models.roster_draft import DivisionRosters
from services import error_codes
from services.result import Result

logger = logging.getLogger("roster.services.moves")


def captain_partner_ids(rosters: DivisionRosters) -> set[str]:
    """Ids of every candidate whose pair request names a captain."""
    everyone = [c for players in rosters.values() for c in players]
    captain_ids = {c.id for c in everyone if c.is_captain}
    return {c.id for c in everyone if c.pair_user_id in captain_ids}


def find_closest_replacement(
    players: Sequence[Candidate],
    mover: Candidate,
    used_ids: set[str],
) -> Candidate | None:
    """
    Closest-scored eligible replacement for `mover` among `players`.

    Eligible means: not already chosen, not a captain, no pair request, and
    the same gender value. Ties fall back to the global candidate order.
    """
    eligible = [
        c
        for c in players
        if c.id not in used_ids
        and not c.is_captain
        and c.pair_user_id is None
        and c.gender == mover.gender
    ]
    if not eligible:
        return None
    return min(
        eligible,
        key=lambda c: (abs(c.placement_score - mover.placement_score), *candidate_sort_key(c)),
    )


def move_player(
    rosters: DivisionRosters,
    divisions: Sequence[Division],
    division_index: int,
    player_id: str,
    direction: int,
) -> Result[DivisionRosters]:
    """
    Move a player one division up (-1) or down (+1).

    Args:
        rosters: Current division split
        divisions: Divisions ordered strongest to weakest
        division_index: Index of the player's current division
        player_id: Player to move
        direction: -1 toward the stronger division, +1 toward the weaker

    Returns:
        Result.ok(new_rosters) with only the two affected divisions rebuilt,
        or Result.fail(reason, code) leaving the input untouched

    Raises:
        ValueError: If direction is not -1 or +1
    """
    if direction not in (-1, 1):
        raise ValueError(f"Move direction must be -1 or +1, got {direction}")

    target_index = division_index + direction
    if not (0 <= division_index < len(divisions)) or not (0 <= target_index < len(divisions)):
        return Result.fail(
            "There is no division in that direction.",
            code=error_codes.DIVISION_OUT_OF_RANGE,
        )

    source_id = divisions[division_index].id
    target_id = divisions[target_index].id
    source_players = rosters.get(source_id, ())
    target_players = rosters.get(target_id, ())

    selected = next((p for p in source_players if p.id == player_id), None)
    if selected is None:
        return Result.fail(
            f"Player {player_id} is not in division {divisions[division_index].name}.",
            code=error_codes.PLAYER_NOT_FOUND,
        )

    if selected.is_captain or selected.id in captain_partner_ids(rosters):
        return Result.fail(
            "Captains and their paired partners cannot be moved between divisions.",
            code=error_codes.CAPTAIN_LOCKED,
        )

    # Intake keeps only mutual picks, so a one-sided or dangling request only
    # reaches this point from direct engine callers; such a player moves alone.
    movers = [selected]
    if selected.pair_user_id is not None:
        partner = next((p for p in source_players if p.id == selected.pair_user_id), None)
        if is_mutual_pair(selected, partner):
            movers.append(partner)
        elif any(
            is_mutual_pair(selected, p)
            for players in rosters.values()
            for p in players
            if p.id == selected.pair_user_id
        ):
            return Result.fail(
                "Paired player move requires both pair members in the same division.",
                code=error_codes.PAIR_SPLIT,
            )

    used_ids: set[str] = set()
    replacements: list[Candidate] = []
    for mover in movers:
        replacement = find_closest_replacement(target_players, mover, used_ids)
        if replacement is None:
            return Result.fail(
                "No valid replacement found in the destination division "
                "(must be closest score, same gender, and not captain/pair).",
                code=error_codes.NO_ELIGIBLE_REPLACEMENT,
            )
        used_ids.add(replacement.id)
        replacements.append(replacement)

    moving_ids = {p.id for p in movers}
    next_rosters = dict(rosters)
    next_rosters[source_id] = tuple(
        sorted(
            [p for p in source_players if p.id not in moving_ids] + replacements,
            key=division_display_key,
        )
    )
    next_rosters[target_id] = tuple(
        sorted(
            [p for p in target_players if p.id not in used_ids] + movers,
            key=division_display_key,
        )
    )

    logger.info(
        f"Moved {', '.join(p.display_name for p in movers)} from "
        f"{divisions[division_index].name} to {divisions[target_index].name}; "
        f"replaced by {', '.join(p.display_name for p in replacements)}"
    )
    return Result.ok(next_rosters)
