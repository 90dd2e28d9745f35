"""
Component 5: Goal & Heuristic Adapter

Translates a DNF goal formula into the two callables the A* engine needs:
- is_goal(state): termination predicate
- estimate(state): distance estimate guiding the search

Literal semantics (X = first argument, Y = second):
    holding(X)         the arm holds X
    ontop/inside(X,Y)  Y is directly below X (Y = floor: X is at the bottom)
    under(X,Y)         Y is somewhere above X in X's column
    above(X,Y)         Y is somewhere below X in X's column (floor: always)
    beside(X,Y)        Y is in a column adjacent to X's column
    leftof(X,Y)        Y is in a column strictly right of X's column
    rightof(X,Y)       Y is in a column strictly left of X's column

A literal whose X is neither placed nor held is false. Negative literals hold
when their relation does not. Literals are evaluated independently: no joint
consistency between literals of one conjunction is inferred.

Heuristics:
    obstruction      per literal: 1 if X is held, else
                     4 * (objects above X) + |arm - column(X)| + 1;
                     minimum over all literals of all conjunctions
    column_distance  per literal: 0 if satisfied, negative or the object to
                     move is held, else the arm distance to it (X, or the
                     nearer of X and Y where moving Y also works);
                     minimum over all literals (admissible)

Author: Shrdlite Development Team
Date: 2025-12-05
"""

import math
from typing import Callable, Dict, Optional, Sequence

from cachetools import LRUCache

from common.constants import (
    DEFAULT_HEURISTIC,
    DEFAULT_HEURISTIC_CACHE_SIZE,
    FLOOR_ID,
    HEURISTIC_COLUMN_DISTANCE,
    HEURISTIC_OBSTRUCTION,
    OBSTRUCTION_COST,
)
from component_15_logging_config import get_logger
from component_1_blocks_world_types import Literal, Relation
from component_3_world_graph import WorldState
from shrdlite_exceptions import InvalidConfigError, MalformedLiteralError

logger = get_logger(__name__)


# ============================================================================
# Literal Evaluation
# ============================================================================


def _column_holds(state: WorldState, col: int, obj: str) -> bool:
    return 0 <= col < len(state.stacks) and obj in state.stacks[col]


def relation_holds(literal: Literal, state: WorldState) -> bool:
    """
    Evaluate the relation of a literal against a state, ignoring polarity.

    Args:
        literal: Goal literal
        state: World state

    Returns:
        True if the relation currently holds
    """
    relation = literal.relation
    subject = literal.subject

    if relation is Relation.HOLDING:
        return state.holding == subject

    position = state.locate(subject)
    if position is None:
        return False

    col, row = position
    column = state.stacks[col]
    target = literal.target

    if relation is Relation.ONTOP or relation is Relation.INSIDE:
        if row == 0:
            return target == FLOOR_ID
        return column[row - 1] == target

    if relation is Relation.UNDER:
        return target in column[row + 1:]

    if relation is Relation.ABOVE:
        return target == FLOOR_ID or target in column[:row]

    if relation is Relation.BESIDE:
        return _column_holds(state, col - 1, target) or _column_holds(state, col + 1, target)

    if relation is Relation.LEFTOF:
        return any(target in other for other in state.stacks[col + 1:])

    if relation is Relation.RIGHTOF:
        return any(target in other for other in state.stacks[:col])

    raise MalformedLiteralError(
        f"Unsupported relation '{relation.value}'", literal=str(literal)
    )


def literal_holds(literal: Literal, state: WorldState) -> bool:
    """Evaluate a literal including its polarity."""
    return relation_holds(literal, state) == literal.polarity


# ============================================================================
# Per-literal Estimates
# ============================================================================

# Relations that only become true by moving their first argument
_SUBJECT_MOVES = (Relation.HOLDING, Relation.ONTOP, Relation.INSIDE, Relation.ABOVE)


def obstruction_estimate(literal: Literal, state: WorldState) -> float:
    """
    Obstruction-aware estimate for one literal.

    Each object stacked above the subject costs OBSTRUCTION_COST actions
    (move to it, pick, move away, drop), plus travel to the column and one pick.
    """
    subject = literal.subject
    if state.holding == subject:
        return 1.0

    position = state.locate(subject)
    if position is None:
        return math.inf

    col, row = position
    above = len(state.stacks[col]) - row - 1
    return float(above * OBSTRUCTION_COST + abs(state.arm - col) + 1)


def column_distance_estimate(literal: Literal, state: WorldState) -> float:
    """
    Arm travel distance to an object that has to move.

    Never overestimates: satisfied and negative literals cost 0, and for
    relations that can also be reached by moving the second object the
    nearer of the two counts.
    """
    for obj in literal.args:
        if obj != FLOOR_ID and not state.contains(obj):
            return math.inf

    if not literal.polarity or relation_holds(literal, state):
        return 0.0

    if literal.relation in _SUBJECT_MOVES:
        movers = [literal.subject]
    else:
        movers = [obj for obj in literal.args if obj != FLOOR_ID]

    if state.holding in movers:
        return 0.0
    return float(min(abs(state.arm - state.locate(obj)[0]) for obj in movers))


ESTIMATORS: Dict[str, Callable[[Literal, WorldState], float]] = {
    HEURISTIC_OBSTRUCTION: obstruction_estimate,
    HEURISTIC_COLUMN_DISTANCE: column_distance_estimate,
}


# ============================================================================
# Goal Adapter
# ============================================================================


class GoalAdapter:
    """
    Goal predicate and heuristic for one DNF formula.

    Heuristic values are memoized per state in a bounded LRU cache, since
    the search evaluates the heuristic for every state it (re)queues.

    Example:
        adapter = GoalAdapter(parse_dnf("inside(f,l)"))
        result = a_star_search(graph, start, adapter.is_goal, adapter.estimate)
    """

    def __init__(
        self,
        formula: Sequence[Sequence[Literal]],
        heuristic: str = DEFAULT_HEURISTIC,
        cache_size: int = DEFAULT_HEURISTIC_CACHE_SIZE,
    ):
        """
        Initialize the adapter.

        Args:
            formula: Goal in disjunctive normal form
            heuristic: Name of the per-literal estimator
            cache_size: Maximum number of memoized heuristic values

        Raises:
            MalformedLiteralError: Formula has no conjunctions
            InvalidConfigError: Unknown heuristic name
        """
        if not formula:
            raise MalformedLiteralError("Goal formula has no conjunctions")
        if heuristic not in ESTIMATORS:
            raise InvalidConfigError(
                f"Unknown heuristic '{heuristic}'", context={"known": sorted(ESTIMATORS)}
            )

        self.formula = [tuple(conjunction) for conjunction in formula]
        self.heuristic = heuristic
        self._estimator = ESTIMATORS[heuristic]
        self._cache: LRUCache = LRUCache(maxsize=cache_size)
        self._literals = [lit for conjunction in self.formula for lit in conjunction]

    def is_goal(self, state: WorldState) -> bool:
        """True iff every literal of at least one conjunction holds."""
        return any(
            all(literal_holds(literal, state) for literal in conjunction)
            for conjunction in self.formula
        )

    def estimate(self, state: WorldState) -> float:
        """
        Optimistic distance estimate: the cheapest literal over all conjunctions.

        Returns math.inf when no literal's subject exists in the state.
        """
        cached: Optional[float] = self._cache.get(state)
        if cached is not None:
            return cached

        if not self._literals:
            value = 0.0
        else:
            value = min(self._estimator(literal, state) for literal in self._literals)

        self._cache[state] = value
        return value

    def __call__(self, state: WorldState) -> bool:
        return self.is_goal(state)
