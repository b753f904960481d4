"""
Repository layer for data access abstraction.
"""

from repositories.base_repository import BaseRepository
from repositories.interfaces import IRosterRepository
from repositories.roster_repository import DivisionRecord, RosterRepository, Season

__all__ = [
    "BaseRepository",
    "RosterRepository",
    "IRosterRepository",
    "Season",
    "DivisionRecord",
]
