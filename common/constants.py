"""
Centralized constants for the Shrdlite blocks-world planner.

This module provides a single source of truth for the numbers and fixed
messages used by the planner, the search engine and the execution sink.
Centralizing these values keeps the search cost model and the user-facing
texts consistent across components.

Organization:
    - Action Model: primitive actions and their costs
    - Search Limits: timeout and cache sizes
    - Heuristics: obstruction cost model and heuristic names
    - Messages: fixed texts shown to the user

Usage:
    from common.constants import DEFAULT_SEARCH_TIMEOUT, ACTION_COST

Note:
    These constants define default values. Runtime overrides go through
    shrdlite_config.get_config() (config file or SHRDLITE_* environment
    variables).
"""

from typing import Dict, Tuple

# =============================================================================
# Action Model
# =============================================================================

ACTION_LEFT: str = "l"
ACTION_RIGHT: str = "r"
ACTION_PICK: str = "p"
ACTION_DROP: str = "d"

ACTIONS: Tuple[str, ...] = (ACTION_LEFT, ACTION_RIGHT, ACTION_PICK, ACTION_DROP)
"""
Primitive robot actions, in the order successors are generated.

The order only matters for tie-breaking inside the search: nodes with equal
f-score are expanded first-in first-out, so generation order decides which of
several optimal plans is returned.
"""

ACTION_COST: float = 1.0
"""Every primitive action costs one unit; plan cost equals plan length."""

FLOOR_ID: str = "floor"
"""Synthetic identifier used by goal literals for the floor (not a placed object)."""

# =============================================================================
# Search Limits
# =============================================================================

DEFAULT_SEARCH_TIMEOUT: float = 10.0
"""
Wall-clock budget for a single A* search, in seconds.

Rationale:
    The five-column example worlds are solved well below one second for
    ordinary commands. Goals that are physically impossible force the search
    to enumerate the reachable state space, which for the larger worlds does
    not finish; the timeout turns those into an ordinary "no plan" outcome.
"""

DEFAULT_PLAN_CACHE_SIZE: int = 128
"""Maximum number of (goal, world state) -> outcome entries kept by the Planner."""

DEFAULT_HEURISTIC_CACHE_SIZE: int = 50000
"""Maximum number of memoized heuristic values per goal."""

# =============================================================================
# Heuristics
# =============================================================================

OBSTRUCTION_COST: int = 4
"""
Estimated actions needed to relocate one object stacked above a target.

Moving an obstructing object takes at least: move to it, pick, move away,
drop. Used by the "obstruction" heuristic.
"""

HEURISTIC_OBSTRUCTION: str = "obstruction"
HEURISTIC_COLUMN_DISTANCE: str = "column_distance"

HEURISTICS: Tuple[str, ...] = (HEURISTIC_OBSTRUCTION, HEURISTIC_COLUMN_DISTANCE)

DEFAULT_HEURISTIC: str = HEURISTIC_OBSTRUCTION

# =============================================================================
# Messages
# =============================================================================

MSG_ALREADY_TRUE: str = "That is already true!"
MSG_NO_PLAN: str = "I don't know how to do that."
MSG_NO_INTERPRETATION: str = "I couldn't find anything matching that description."

ACTION_MESSAGES: Dict[str, str] = {
    ACTION_LEFT: "Moving left",
    ACTION_RIGHT: "Moving right",
    ACTION_PICK: "Picking up",
    ACTION_DROP: "Dropping",
}

DEFAULT_WORLD: str = "small"
