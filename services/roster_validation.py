"""
Roster assignment validation before persistence.

Checks the computed assignment list against what the store knows about the
season, so a stale or hand-edited plan can never be written.
"""

from collections.abc import Collection, Mapping, Sequence

from domain.models.assignment import Assignment
from services import error_codes
from services.result import Result


def validate_assignments(
    assignments: Sequence[Assignment],
    signed_up_ids: Collection[str],
    active_division_ids: Collection[int],
    captain_divisions: Mapping[str, int],
) -> Result[int]:
    """
    Check an assignment list before it is saved.

    The list must be non-empty, name each player once, only use signed-up
    players and active divisions, and keep every captain in the division
    they captain with the captain flag set.

    Args:
        assignments: Computed assignments
        signed_up_ids: Players signed up for the season
        active_division_ids: Divisions currently active
        captain_divisions: Captain user id -> captained division id

    Returns:
        Result.ok(assignment_count) if the list can be saved
        Result.fail(error, code) otherwise

    Examples:
        >>> validate_assignments([], {"u1"}, {1}, {})
        Result(success=False, ..., error_code="nothing_to_place")
    """
    if not assignments:
        return Result.fail("No roster assignments provided.", code=error_codes.NOTHING_TO_PLACE)

    player_ids = [a.player_id for a in assignments]
    if len(set(player_ids)) != len(player_ids):
        return Result.fail(
            "Duplicate players found in roster assignments.",
            code=error_codes.DUPLICATE_ASSIGNMENT,
        )

    signed_up = set(signed_up_ids)
    unknown = [pid for pid in player_ids if pid not in signed_up]
    if unknown:
        return Result.fail(
            f"All selected players must be signed up for the season ({len(unknown)} are not).",
            code=error_codes.UNKNOWN_PLAYER,
        )

    active = set(active_division_ids)
    if any(a.division_id not in active for a in assignments):
        return Result.fail(
            "One or more assignments are using an invalid division.",
            code=error_codes.INVALID_DIVISION,
        )

    for assignment in assignments:
        captain_division = captain_divisions.get(assignment.player_id)
        if captain_division is not None and (
            assignment.division_id != captain_division or not assignment.is_captain
        ):
            return Result.fail(
                "Captains must remain in their captained division and be flagged as captains.",
                code=error_codes.CAPTAIN_MISMATCH,
            )

    return Result.ok(len(assignments))
