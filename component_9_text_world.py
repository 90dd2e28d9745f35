"""
Component 9: Text World

Console execution sink for plans. Holds a mutable current state, executes
action letters one at a time with the same legality rules as the search
graph, and renders the world as ASCII art (arm, held object, columns,
column numbers and an object legend).

Plan items that are not action letters are status messages; they are written
to the transcript (items starting with '#' are comments and skipped).

Author: Shrdlite Development Team
Date: 2025-12-09
"""

from typing import Callable, Dict, List, Optional, Sequence

from common.constants import ACTION_DROP, ACTION_LEFT, ACTION_PICK, ACTION_RIGHT
from component_15_logging_config import get_logger
from component_3_world_graph import World, WorldState, apply_action
from shrdlite_exceptions import PlanExecutionError

logger = get_logger(__name__)


class TextWorld:
    """
    World execution sink with a text transcript.

    Usage:
        text_world = TextWorld(load_world("small"))
        text_world.perform_plan(["Picking up", "p"])
        print(text_world.render())
    """

    def __init__(self, world: World, output: Optional[Callable[[str], None]] = None):
        """
        Initialize the sink.

        Args:
            world: Initial world (never mutated; the sink tracks its own state)
            output: Optional callback receiving every transcript line
        """
        self.world = world
        self.current_state: WorldState = world.state
        self.transcript: List[str] = []
        self._output = output
        self._actions: Dict[str, Callable[[], None]] = {
            ACTION_LEFT: self.left,
            ACTION_RIGHT: self.right,
            ACTION_PICK: self.pick,
            ACTION_DROP: self.drop,
        }

    # ------------------------------------------------------------------
    # Primitive actions
    # ------------------------------------------------------------------

    def _apply(self, action: str) -> None:
        self.current_state = apply_action(self.current_state, action, self.world.objects)

    def left(self) -> None:
        self._apply(ACTION_LEFT)

    def right(self) -> None:
        self._apply(ACTION_RIGHT)

    def pick(self) -> None:
        self._apply(ACTION_PICK)

    def drop(self) -> None:
        self._apply(ACTION_DROP)

    # ------------------------------------------------------------------
    # Plans
    # ------------------------------------------------------------------

    def print_system_output(self, text: str) -> None:
        self.transcript.append(text)
        if self._output is not None:
            self._output(text)

    def perform_plan(self, plan: Sequence[str]) -> WorldState:
        """
        Execute a rendered plan.

        Args:
            plan: Action letters interleaved with status messages

        Returns:
            The state after the last action

        Raises:
            PlanExecutionError: An action is illegal; step_index is the
                position of the offending item in `plan`
        """
        for index, raw_item in enumerate(plan):
            item = raw_item.strip()
            action = self._actions.get(item.lower())

            if action is None:
                if item and not item.startswith("#"):
                    self.print_system_output(item)
                continue

            try:
                action()
            except PlanExecutionError as e:
                self.print_system_output(f"ERROR: {e.message}")
                logger.log_exception(
                    e, "Illegal action during execution", action=item, step_index=index
                )
                raise PlanExecutionError(
                    e.message, action=item.lower(), step_index=index
                ) from e

        return self.current_state

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @staticmethod
    def _center(text: str, width: int) -> str:
        padding = width - len(text)
        if padding <= 0:
            return text
        left = (padding + 1) // 2
        return " " * left + text + " " * (padding - left)

    def render(self) -> str:
        """ASCII picture of the current state followed by an object legend."""
        state = self.current_state
        stacks = state.stacks
        names = [obj for column in stacks for obj in column]
        if state.holding is not None:
            names.append(state.holding)
        width = 3 + max((len(name) for name in names), default=1)

        lines = [""]
        indent = " " * (state.arm * width)
        lines.append(indent + self._center("\\_/", width))
        if state.holding is not None:
            lines.append(indent + self._center(state.holding, width))

        height = max(len(column) for column in stacks)
        for row in range(height, -1, -1):
            cells = [
                self._center(column[row] if row < len(column) else "", width)
                for column in stacks
            ]
            lines.append("".join(cells).rstrip())

        lines.append("+" + "+".join("-" * (width - 1) for _ in stacks) + "+")
        lines.append("".join(self._center(str(col), width) for col in range(len(stacks))).rstrip())
        lines.append("")

        legend = ([state.holding] if state.holding is not None else []) + [
            obj for column in stacks for obj in column
        ]
        for obj in legend:
            descriptor = self.world.describe(obj)
            lines.append(
                f"{self._center(obj, width)}: {descriptor.form.value}, "
                f"{descriptor.size.value if descriptor.size else None}, {descriptor.color}"
            )
        return "\n".join(lines)

    @property
    def current_world(self) -> World:
        """The initial world with the current state."""
        return self.world.with_state(self.current_state)
