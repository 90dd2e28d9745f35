"""
Component 6: Plan Renderer

Turns an action-letter sequence into the interleaved plan shown to the user:
status messages followed by the action letters they describe. A message is
inserted only when the action differs from the previous one, so a run of
moves is announced once:

    ["r", "r", "p"]  ->  ["Moving right", "r", "r", "Picking up the small black ball", "p"]

An empty action list renders as the single message "That is already true!".

Author: Shrdlite Development Team
Date: 2025-12-06
"""

from typing import List, Optional, Sequence

from common.constants import (
    ACTION_DROP,
    ACTION_MESSAGES,
    ACTION_PICK,
    ACTIONS,
    MSG_ALREADY_TRUE,
)
from component_3_world_graph import World, WorldState, apply_action


def describe_action(action: str, obj_description: Optional[str] = None) -> str:
    """Status message for one action, naming the object for picks and drops."""
    message = ACTION_MESSAGES[action]
    if obj_description and action in (ACTION_PICK, ACTION_DROP):
        message += f" the {obj_description}"
    return message


def render_plan(actions: Sequence[str], world: Optional[World] = None) -> List[str]:
    """
    Interleave status messages with action letters.

    Args:
        actions: Action letters in execution order
        world: When given, the plan is replayed against world.state so picks
            and drops can name the object involved

    Returns:
        Plan items (messages and letters); ["That is already true!"] if empty

    Raises:
        ValueError: Unknown action letter
        PlanExecutionError: Replaying the plan hits an illegal action
    """
    if not actions:
        return [MSG_ALREADY_TRUE]

    plan: List[str] = []
    state: Optional[WorldState] = world.state if world is not None else None
    previous: Optional[str] = None

    for action in actions:
        if action not in ACTIONS:
            raise ValueError(f"Unknown action letter '{action}'")

        if action != previous:
            description = None
            if world is not None and state is not None:
                obj = state.top(state.arm) if action == ACTION_PICK else state.holding
                if obj is not None:
                    description = str(world.describe(obj))
            plan.append(describe_action(action, description))

        plan.append(action)
        previous = action

        if world is not None and state is not None:
            state = apply_action(state, action)

    return plan


def plan_actions(plan: Sequence[str]) -> List[str]:
    """Extract the action letters from a rendered plan."""
    return [item for item in plan if item in ACTIONS]
