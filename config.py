"""
Centralized configuration for the league roster balancer.
"""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


DB_PATH = os.getenv("DB_PATH", "league_rosters.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

ROSTER_SETTINGS: dict[str, Any] = {
    # Local-search bounds; every swap loop stops at these counts
    "division_rebalance_passes": _parse_int("DIVISION_REBALANCE_PASSES", 6),
    "gender_swap_passes": _parse_int("GENDER_SWAP_PASSES", 20),
    "new_player_swap_passes": _parse_int("NEW_PLAYER_SWAP_PASSES", 12),
    "score_swap_passes": _parse_int("SCORE_SWAP_PASSES", 24),
    # Team counts for division records that do not carry one
    "default_team_count": _parse_int("DEFAULT_TEAM_COUNT", 6),
    "catch_all_team_count": _parse_int("CATCH_ALL_TEAM_COUNT", 4),
    # Placement score derivation for players without draft history
    "default_placement_score": _parse_float("DEFAULT_PLACEMENT_SCORE", 200.0),
    "evaluation_level_weight": _parse_float("EVALUATION_LEVEL_WEIGHT", 50.0),
}

PLACEMENT_CACHE_SIZE = _parse_int("PLACEMENT_CACHE_SIZE", 64)
USE_PLACEMENT_CACHE = _parse_bool("USE_PLACEMENT_CACHE", True)
