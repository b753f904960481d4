"""
Application services layer.

Services orchestrate business operations using repositories and domain services.
RosterService depends on roster_balancer, which itself uses this package; import
it from services.roster_service directly.
"""

from services.roster_moves import move_player
from services.roster_validation import validate_assignments

# Result type for consistent error handling
from services.result import Result

__all__ = [
    "move_player",
    "validate_assignments",
    # Result type
    "Result",
]
