"""
Service-layer caching for division placement.

The division split is deterministic for a given candidate pool and division
list, so repeated recomputation (every team re-formation after a manual
move, every summary render) can reuse it. Candidates and divisions are frozen
dataclasses, which makes the input tuples usable as cache keys.

Thread-safety: Uses a lock so concurrent callers never interleave cache updates.
"""

import threading
from functools import lru_cache

from config import PLACEMENT_CACHE_SIZE
from domain.services.division_placement_service import DivisionPlacementService

# Lock to protect cache operations during parallel execution
_cache_lock = threading.Lock()


@lru_cache(maxsize=PLACEMENT_CACHE_SIZE)
def _compute_cached_placement(candidates: tuple, divisions: tuple, rebalance_passes: int):
    """
    Internal cached computation. Protected by _cache_lock in public wrapper.
    """
    return DivisionPlacementService(rebalance_passes).place(divisions, candidates)


def get_cached_division_placement(candidates, divisions, rebalance_passes: int = 6):
    """
    Compute and cache the division placement for a pool.

    Args:
        candidates: Candidate pool (converted to a tuple for hashing)
        divisions: Divisions ordered strongest to weakest
        rebalance_passes: Gender rebalancing pass limit

    Returns:
        Mapping of division id to DivisionBucket (a fresh dict per call)
    """
    with _cache_lock:
        placement = _compute_cached_placement(tuple(candidates), tuple(divisions), rebalance_passes)
    return dict(placement)


def clear_placement_cache() -> None:
    """Clear the placement cache. Useful for testing."""
    with _cache_lock:
        _compute_cached_placement.cache_clear()


def get_cache_info():
    """Get cache statistics. Useful for monitoring/debugging."""
    with _cache_lock:
        return _compute_cached_placement.cache_info()
