"""
Assignment domain model - the engine's only persisted output.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Assignment:
    """A player's final division, team number (1-based) and captain flag."""

    player_id: str
    division_id: int
    team_number: int
    is_captain: bool = False
