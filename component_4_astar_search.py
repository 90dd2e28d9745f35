"""
Component 4: Generic A* Search

Graph-agnostic best-first search:
- AStarSearchEngine: A* over any BaseGraph with a goal predicate and heuristic
- a_star_search: functional shortcut with a fresh engine

Binding design decisions:
- open set ordered by f = g + h, ties broken first-in first-out
- open, closed and came-from maps keyed by graph.node_key(node), never by
  object identity
- a node is expanded at most once (closed set)
- the wall-clock budget is polled every iteration; running out of time or
  states is reported as a failed SearchResult, not as an exception

The heuristic only orders exploration. Optimality of the returned path
requires an admissible heuristic; that is the caller's responsibility.

Author: Shrdlite Development Team
Date: 2025-12-05
"""

import itertools
import math
import time
from heapq import heappop, heappush
from typing import Callable, Dict, Hashable, List, Optional, Tuple, TypeVar

from component_15_logging_config import get_logger
from infrastructure.interfaces import BaseGraph, SearchResult

logger = get_logger(__name__)

N = TypeVar("N")

REASON_FOUND = "found"
REASON_EXHAUSTED = "exhausted"
REASON_TIMEOUT = "timeout"


class AStarSearchEngine:
    """
    A* search with structural node keys and a time budget.

    Features:
    - FIFO tie-breaking among equal f-scores (deterministic results)
    - Closed-set monotonicity: expanded keys are never expanded again
    - Optional expansion limit in addition to the timeout
    - Search statistics (expansions, generated, elapsed)

    Not thread-safe: one engine instance serves one search at a time. All
    bookkeeping lives in local variables of search(), so separate engines
    can run concurrently.
    """

    def __init__(self, max_expansions: Optional[int] = None):
        """
        Initialize the engine.

        Args:
            max_expansions: Optional hard limit on expanded nodes (None = unlimited)
        """
        self.max_expansions = max_expansions
        self.stats: Dict[str, float] = {"expansions": 0, "generated": 0, "elapsed": 0.0}
        self.expanded_keys: List[Hashable] = []

    def search(
        self,
        graph: BaseGraph[N],
        start: N,
        goal: Callable[[N], bool],
        heuristic: Callable[[N], float],
        timeout: Optional[float] = None,
    ) -> SearchResult[N]:
        """
        Find the lowest-cost path from `start` to a node satisfying `goal`.

        Args:
            graph: Graph providing outgoing edges and node keys
            start: Initial node
            goal: Goal predicate
            heuristic: Estimated remaining cost; math.inf marks dead ends,
                which are not enqueued
            timeout: Wall-clock budget in seconds (None = unlimited)

        Returns:
            SearchResult; success=False with reason "exhausted" or "timeout"
            when no goal node was reached
        """
        started = time.monotonic()
        deadline = started + timeout if timeout is not None else None

        self.stats = {"expansions": 0, "generated": 0, "elapsed": 0.0}
        self.expanded_keys = []

        tie = itertools.count()
        start_key = graph.node_key(start)

        nodes: Dict[Hashable, N] = {start_key: start}
        g_score: Dict[Hashable, float] = {start_key: 0.0}
        f_score: Dict[Hashable, float] = {start_key: heuristic(start)}
        came_from: Dict[Hashable, Tuple[Hashable, Optional[str]]] = {}
        explored = set()

        open_heap: List[Tuple[float, int, Hashable]] = [
            (f_score[start_key], next(tie), start_key)
        ]
        self.stats["generated"] = 1

        reason = REASON_EXHAUSTED

        while open_heap:
            if deadline is not None and time.monotonic() >= deadline:
                reason = REASON_TIMEOUT
                break
            if (
                self.max_expansions is not None
                and self.stats["expansions"] >= self.max_expansions
            ):
                reason = REASON_EXHAUSTED
                break

            current_f, _, current_key = heappop(open_heap)

            # Stale entry: node already expanded or re-queued with a better score
            if current_key in explored or current_f > f_score[current_key]:
                continue

            current = nodes[current_key]

            if goal(current):
                return self._success(
                    nodes, came_from, g_score, current_key, start_key, started
                )

            explored.add(current_key)
            self.expanded_keys.append(current_key)
            self.stats["expansions"] += 1

            for edge in graph.outgoing_edges(current):
                child = edge.target
                child_key = graph.node_key(child)

                if child_key in explored:
                    continue

                tentative_g = g_score[current_key] + edge.cost

                if child_key not in g_score or tentative_g < g_score[child_key]:
                    h = heuristic(child)
                    if math.isinf(h):
                        continue

                    nodes[child_key] = child
                    g_score[child_key] = tentative_g
                    f_score[child_key] = tentative_g + h
                    came_from[child_key] = (current_key, edge.action)

                    heappush(open_heap, (f_score[child_key], next(tie), child_key))
                    self.stats["generated"] += 1

        self.stats["elapsed"] = time.monotonic() - started
        logger.warning(
            "No path found",
            extra={
                "reason": reason,
                "expansions": self.stats["expansions"],
                "elapsed_s": round(self.stats["elapsed"], 3),
            },
        )
        return SearchResult(
            success=False,
            reason=reason,
            expansions=int(self.stats["expansions"]),
            generated=int(self.stats["generated"]),
            elapsed=self.stats["elapsed"],
        )

    def _success(
        self,
        nodes: Dict[Hashable, N],
        came_from: Dict[Hashable, Tuple[Hashable, Optional[str]]],
        g_score: Dict[Hashable, float],
        goal_key: Hashable,
        start_key: Hashable,
        started: float,
    ) -> SearchResult[N]:
        """Walk the came-from map back to the start and build the result."""
        path = [nodes[goal_key]]
        actions: List[str] = []

        key = goal_key
        while key != start_key:
            key, action = came_from[key]
            path.append(nodes[key])
            if action is not None:
                actions.append(action)

        path.reverse()
        actions.reverse()

        self.stats["elapsed"] = time.monotonic() - started
        logger.info(
            "Path found",
            extra={
                "cost": g_score[goal_key],
                "length": len(actions),
                "expansions": self.stats["expansions"],
                "elapsed_s": round(self.stats["elapsed"], 3),
            },
        )
        return SearchResult(
            success=True,
            path=path,
            actions=actions,
            cost=g_score[goal_key],
            reason=REASON_FOUND,
            expansions=int(self.stats["expansions"]),
            generated=int(self.stats["generated"]),
            elapsed=self.stats["elapsed"],
        )


def a_star_search(
    graph: BaseGraph[N],
    start: N,
    goal: Callable[[N], bool],
    heuristic: Callable[[N], float],
    timeout: Optional[float] = None,
) -> SearchResult[N]:
    """Run a single A* search with a fresh engine."""
    return AStarSearchEngine().search(graph, start, goal, heuristic, timeout)
