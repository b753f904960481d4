"""
Standard error codes for the roster service layer.

These error codes allow callers to programmatically handle specific error
conditions without parsing error message text.

Usage:
    from services.error_codes import CAPTAIN_LOCKED
    from services.result import Result

    if player.is_captain:
        return Result.fail("Captains cannot be moved", code=CAPTAIN_LOCKED)
"""

# General errors
PERSISTENCE_ERROR = "persistence_error"

# Season/draft errors
NO_CURRENT_SEASON = "no_current_season"
NOTHING_TO_PLACE = "nothing_to_place"

# Manual move errors
DIVISION_OUT_OF_RANGE = "division_out_of_range"
PLAYER_NOT_FOUND = "player_not_found"
CAPTAIN_LOCKED = "captain_locked"
PAIR_SPLIT = "pair_split"
NO_ELIGIBLE_REPLACEMENT = "no_eligible_replacement"

# Assignment validation errors
DUPLICATE_ASSIGNMENT = "duplicate_assignment"
UNKNOWN_PLAYER = "unknown_player"
INVALID_DIVISION = "invalid_division"
CAPTAIN_MISMATCH = "captain_mismatch"
