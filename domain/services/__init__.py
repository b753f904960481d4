"""
Domain services containing pure business logic.
"""

from domain.services.apportionment import allocate
from domain.services.candidate_intake import CandidateIntakeService
from domain.services.division_placement_service import DivisionPlacementService
from domain.services.division_target_service import compute_division_targets
from domain.services.pairing_service import build_placement_units
from domain.services.team_formation_service import TeamFormationService

__all__ = [
    "allocate",
    "build_placement_units",
    "compute_division_targets",
    "CandidateIntakeService",
    "DivisionPlacementService",
    "TeamFormationService",
]
