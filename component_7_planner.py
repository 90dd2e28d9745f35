"""
Component 7: Planner Driver

Turns goal formulas into plans for a concrete world:
- Planner.plan_interpretation: one DNF -> PlanOutcome (return-level result)
- Planner.plan: every interpretation of a command -> rendered plans
- validate_plan / simulate_plan / diagnose_failure: replay tools for plans

Failure to find a plan is a PlanOutcome with success=False and a reason,
never an exception. Only Planner.plan raises (PlanningFailedError) when no
interpretation at all could be planned, so the caller gets one error to
report.

Author: Shrdlite Development Team
Date: 2025-12-08
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from cachetools import LRUCache

from common.constants import MSG_NO_PLAN
from component_15_logging_config import PerformanceLogger, get_logger
from component_1_blocks_world_types import DNFFormula, formula_objects, stringify_dnf
from component_3_world_graph import (
    World,
    WorldGraph,
    WorldState,
    apply_action,
    check_action,
)
from component_4_astar_search import REASON_FOUND, AStarSearchEngine
from component_5_goal_heuristics import GoalAdapter
from component_6_plan_renderer import render_plan
from component_8_interpreter import InterpretationResult
from shrdlite_config import get_config
from shrdlite_exceptions import PlanningFailedError

logger = get_logger(__name__)

REASON_ALREADY_SATISFIED = "already_satisfied"
REASON_UNSATISFIABLE = "unsatisfiable"


# ============================================================================
# Results
# ============================================================================


@dataclass(frozen=True)
class PlanOutcome:
    """
    Result of planning one goal formula.

    Attributes:
        success: A plan was found (possibly empty)
        actions: Action letters, empty when the goal already holds
        cost: Total action cost (0.0 on failure)
        reason: already_satisfied | found | exhausted | timeout | unsatisfiable
        stats: Search statistics (expansions, generated, elapsed)
    """

    success: bool
    actions: Tuple[str, ...] = ()
    cost: float = 0.0
    reason: str = REASON_FOUND
    stats: Dict[str, float] = field(default_factory=dict, compare=False)


@dataclass
class PlannerResult:
    """An interpretation together with its rendered plan."""

    interpretation: InterpretationResult
    plan: List[str]
    outcome: PlanOutcome


# ============================================================================
# Planner
# ============================================================================


class Planner:
    """
    A* planner over the blocks-world graph.

    Usage:
        planner = Planner(timeout=2.0)
        outcome = planner.plan_interpretation(parse_dnf("holding(e)"), world)
        if outcome.success:
            print(outcome.actions)

    Outcomes are cached per (formula, heuristic, state, descriptor table);
    identical requests against an unchanged world return the cached outcome
    without searching.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        heuristic: Optional[str] = None,
        cache_size: Optional[int] = None,
    ):
        """
        Initialize the planner.

        Args:
            timeout: Search budget in seconds (default: config search_timeout)
            heuristic: Heuristic name (default: config heuristic)
            cache_size: Outcome cache size (default: config plan_cache_size)
        """
        config = get_config()
        self.timeout = timeout if timeout is not None else config.get("search_timeout")
        self.heuristic = heuristic or config.get("heuristic")
        self.heuristic_cache_size = config.get("heuristic_cache_size")
        self._cache: LRUCache = LRUCache(
            maxsize=cache_size if cache_size is not None else config.get("plan_cache_size")
        )

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan_interpretation(self, formula: DNFFormula, world: World) -> PlanOutcome:
        """
        Search for a minimum-cost plan reaching `formula` from world.state.

        Args:
            formula: Goal in disjunctive normal form
            world: World providing start state and object descriptors

        Returns:
            PlanOutcome (failures are reported through success/reason)

        Raises:
            MalformedLiteralError: Empty formula
        """
        adapter = GoalAdapter(formula, self.heuristic, self.heuristic_cache_size)
        start = world.state
        goal_text = stringify_dnf(adapter.formula)
        cache_key = (goal_text, self.heuristic, start, frozenset(world.objects.items()))

        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Plan cache hit", extra={"goal": goal_text})
            return cached

        viable = self._viable_conjunctions(adapter.formula, start)

        if adapter.is_goal(start):
            outcome = PlanOutcome(success=True, reason=REASON_ALREADY_SATISFIED)
        elif not viable:
            logger.info("Goal needs an object that is not in the world", extra={"goal": goal_text})
            outcome = PlanOutcome(success=False, reason=REASON_UNSATISFIABLE)
        else:
            search_goal = GoalAdapter(viable, self.heuristic, self.heuristic_cache_size)
            engine = AStarSearchEngine()
            graph = WorldGraph(world.objects)
            with PerformanceLogger(
                logger.logger, "A* search", goal=goal_text, heuristic=self.heuristic
            ):
                result = engine.search(
                    graph, start, search_goal.is_goal, search_goal.estimate, self.timeout
                )
            outcome = PlanOutcome(
                success=result.success,
                actions=tuple(result.actions),
                cost=result.cost if result.success else 0.0,
                reason=result.reason,
                stats=dict(engine.stats),
            )

        self._cache[cache_key] = outcome
        return outcome

    def plan(
        self, interpretations: Sequence[InterpretationResult], world: World
    ) -> List[PlannerResult]:
        """
        Plan every interpretation of a command.

        Returns:
            One PlannerResult per interpretation that could be planned

        Raises:
            PlanningFailedError: No interpretation could be planned; carries
                the reason of the first failure
        """
        results: List[PlannerResult] = []
        failures: List[Tuple[InterpretationResult, PlanOutcome]] = []

        for interpretation in interpretations:
            outcome = self.plan_interpretation(interpretation.interpretation, world)
            if outcome.success:
                plan = render_plan(list(outcome.actions), world)
                results.append(PlannerResult(interpretation, plan, outcome))
            else:
                failures.append((interpretation, outcome))

        if results:
            logger.info(
                "Planning finished",
                extra={"planned": len(results), "failed": len(failures)},
            )
            return results

        if failures:
            first, outcome = failures[0]
            raise PlanningFailedError(
                MSG_NO_PLAN,
                reason=outcome.reason,
                context={"goal": str(first), "failures": len(failures)},
            )
        raise PlanningFailedError(MSG_NO_PLAN, reason=REASON_UNSATISFIABLE)

    @staticmethod
    def _viable_conjunctions(formula: DNFFormula, state: WorldState) -> DNFFormula:
        """
        Conjunctions that can still become true.

        Objects are never created, so a positive literal over an object that
        is absent from the state rules out its whole conjunction.
        """
        absent = {obj for obj in formula_objects(formula) if not state.contains(obj)}
        return [
            conjunction
            for conjunction in formula
            if not any(literal.polarity and absent.intersection(literal.args) for literal in conjunction)
        ]

    def clear_cache(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------
    # Plan replay
    # ------------------------------------------------------------------

    def validate_plan(
        self, formula: DNFFormula, world: World, actions: Sequence[str]
    ) -> Tuple[bool, Optional[str]]:
        """
        Check that a plan is legal and reaches the goal.

        Returns:
            (success, error_message)
        """
        diagnosis = self.diagnose_failure(formula, world, actions)
        return diagnosis["error"] is None, diagnosis["error"]

    @staticmethod
    def simulate_plan(world: World, actions: Sequence[str]) -> List[WorldState]:
        """
        Execute a plan and return the state trajectory (including the start).

        Raises:
            PlanExecutionError: An action is illegal
        """
        states = [world.state]
        for action in actions:
            states.append(apply_action(states[-1], action, world.objects))
        return states

    def diagnose_failure(
        self, formula: DNFFormula, world: World, actions: Sequence[str]
    ) -> Dict[str, Any]:
        """
        Analyze why a plan fails.

        Returns:
            Diagnostic information:
            - failed_at: Index of the failing action (len(actions) if the plan
              runs but misses the goal)
            - failed_action: The failing action, or None
            - state_before: State in which the plan failed
            - error: Description, or None if the plan succeeds
        """
        adapter = GoalAdapter(formula, self.heuristic, self.heuristic_cache_size)
        state = world.state

        for i, action in enumerate(actions):
            violation = check_action(state, action, world.objects)
            if violation is not None:
                return {
                    "failed_at": i,
                    "failed_action": action,
                    "state_before": state,
                    "error": f"Action {i} ({action}): {violation}",
                }
            state = apply_action(state, action, world.objects)

        if not adapter.is_goal(state):
            return {
                "failed_at": len(actions),
                "failed_action": None,
                "state_before": state,
                "error": f"Goal not achieved: {stringify_dnf(adapter.formula)}",
            }

        return {"error": None}


def stringify(result: PlannerResult) -> str:
    """Plan items joined with ', '."""
    return ", ".join(result.plan)
