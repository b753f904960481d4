"""
Domain models - pure data structures representing business entities.
"""

from domain.models.assignment import Assignment
from domain.models.candidate import Candidate, Gender, candidate_sort_key
from domain.models.division import Division, DivisionBucket, DivisionTarget
from domain.models.placement_unit import PlacementUnit
from domain.models.roster_draft import DivisionRosters, ExcludedPlayer, RosterDraft
from domain.models.team import TeamBucket

__all__ = [
    "Assignment",
    "Candidate",
    "Gender",
    "candidate_sort_key",
    "Division",
    "DivisionBucket",
    "DivisionTarget",
    "DivisionRosters",
    "ExcludedPlayer",
    "PlacementUnit",
    "RosterDraft",
    "TeamBucket",
]
