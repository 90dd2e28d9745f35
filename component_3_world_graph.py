"""
Component 3: World-State Graph

Blocks-world configurations as search nodes:
- WorldState: immutable snapshot (stacks, holding, arm), compared structurally
- World: a WorldState together with the descriptor table of its objects
- check_action / apply_action: legality and effect of the four primitive actions
- WorldGraph: BaseGraph implementation generating legal successor states

Primitive actions:
    l  move the arm one column left
    r  move the arm one column right
    p  pick up the top object of the arm's column
    d  drop the held object onto the arm's column

Every action costs one unit. Drops onto a non-empty column are filtered by the
physical laws (component_2).

Author: Shrdlite Development Team
Date: 2025-12-04
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from common.constants import (
    ACTION_COST,
    ACTION_DROP,
    ACTION_LEFT,
    ACTION_PICK,
    ACTION_RIGHT,
    ACTIONS,
    FLOOR_ID,
)
from component_15_logging_config import get_logger
from component_1_blocks_world_types import FLOOR, ObjectDescriptor
from component_2_physical_laws import supports
from infrastructure.interfaces import BaseGraph, Edge
from shrdlite_exceptions import InvalidWorldStateError, PlanExecutionError

logger = get_logger(__name__)

Stacks = Tuple[Tuple[str, ...], ...]


# ============================================================================
# World State
# ============================================================================


@dataclass(frozen=True)
class WorldState:
    """
    Immutable blocks-world configuration.

    Equality and hashing are structural over (stacks, holding, arm): two
    states reached by different action sequences compare equal. The hash is
    computed once at construction, since states are hashed on every lookup
    in the search bookkeeping.

    Attributes:
        stacks: Columns, each ordered bottom -> top
        holding: Object held by the arm, or None
        arm: Column index of the arm
    """

    stacks: Stacks
    holding: Optional[str] = None
    arm: int = 0
    _hash: int = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_hash", hash((self.stacks, self.holding, self.arm)))

    def __hash__(self) -> int:
        return self._hash

    @classmethod
    def create(
        cls,
        stacks: Sequence[Sequence[Optional[str]]],
        holding: Optional[str] = None,
        arm: int = 0,
    ) -> "WorldState":
        """
        Build a validated state from plain lists.

        None entries inside columns are dropped (world tables sometimes pad
        columns).

        Raises:
            InvalidWorldStateError: Duplicate objects or arm out of range
        """
        state = cls(
            stacks=tuple(tuple(obj for obj in column if obj is not None) for column in stacks),
            holding=holding or None,
            arm=arm,
        )
        state.validate()
        return state

    def validate(self) -> None:
        """
        Check the structural invariants.

        Raises:
            InvalidWorldStateError: Duplicate object, reserved identifier or
                arm outside the column range
        """
        if not self.stacks:
            raise InvalidWorldStateError("World must have at least one column")

        if not 0 <= self.arm < len(self.stacks):
            raise InvalidWorldStateError(
                f"Arm position {self.arm} outside 0..{len(self.stacks) - 1}",
                context={"arm": self.arm, "columns": len(self.stacks)},
            )

        seen = set()
        for obj in self.all_objects():
            if obj == FLOOR_ID:
                raise InvalidWorldStateError(
                    f"'{FLOOR_ID}' is reserved and cannot be placed", object_id=obj
                )
            if obj in seen:
                raise InvalidWorldStateError(
                    f"Object '{obj}' appears more than once", object_id=obj
                )
            seen.add(obj)

    def all_objects(self) -> Iterator[str]:
        """Every object of the state: column contents bottom-up, then the held one."""
        for column in self.stacks:
            yield from column
        if self.holding is not None:
            yield self.holding

    def locate(self, obj: str) -> Optional[Tuple[int, int]]:
        """
        Find an object in the columns.

        Returns:
            (column, row) or None if the object is held or absent
        """
        for col, column in enumerate(self.stacks):
            if obj in column:
                return col, column.index(obj)
        return None

    def contains(self, obj: str) -> bool:
        return self.holding == obj or self.locate(obj) is not None

    def top(self, col: int) -> Optional[str]:
        column = self.stacks[col]
        return column[-1] if column else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stacks": [list(column) for column in self.stacks],
            "holding": self.holding,
            "arm": self.arm,
        }

    def __str__(self) -> str:
        columns = " ".join("[" + ",".join(column) + "]" for column in self.stacks)
        return f"{columns} holding={self.holding} arm={self.arm}"


@dataclass
class World:
    """
    A world state plus the descriptors of its objects.

    The descriptor table may describe more objects than are placed (example
    worlds share one table); every placed object must be described.

    Attributes:
        objects: Object id -> ObjectDescriptor
        state: Current configuration
        name: Optional world name (example worlds)
        examples: Example utterances for this world
    """

    objects: Dict[str, ObjectDescriptor]
    state: WorldState
    name: str = ""
    examples: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.state.validate()
        for obj in self.state.all_objects():
            if obj not in self.objects:
                raise InvalidWorldStateError(
                    f"Object '{obj}' has no descriptor", object_id=obj
                )

    def describe(self, obj: str) -> ObjectDescriptor:
        """Descriptor of an object; 'floor' maps to the synthetic FLOOR descriptor."""
        if obj == FLOOR_ID:
            return FLOOR
        return self.objects[obj]

    def with_state(self, state: WorldState) -> "World":
        return World(objects=self.objects, state=state, name=self.name, examples=self.examples)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], name: str = "") -> "World":
        """
        Build a world from a table such as the ones in component_10.

        Expected keys: "objects", "stacks", optional "holding", "arm", "examples".

        Raises:
            InvalidWorldStateError: Malformed table or inconsistent state
        """
        try:
            objects = {
                obj_id: ObjectDescriptor.from_dict(desc)
                for obj_id, desc in data["objects"].items()
            }
            state = WorldState.create(
                data["stacks"], data.get("holding"), data.get("arm") or 0
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise InvalidWorldStateError(
                "Malformed world table",
                context={"world": name},
                original_exception=e,
            ) from e

        return cls(
            objects=objects,
            state=state,
            name=name,
            examples=list(data.get("examples", [])),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.state.to_dict()
        data["objects"] = {obj_id: desc.to_dict() for obj_id, desc in self.objects.items()}
        data["examples"] = list(self.examples)
        return data


# ============================================================================
# Primitive Actions
# ============================================================================


def check_action(
    state: WorldState,
    action: str,
    objects: Optional[Mapping[str, ObjectDescriptor]] = None,
) -> Optional[str]:
    """
    Check whether a primitive action is legal in a state.

    Args:
        state: Current state
        action: One of "l", "r", "p", "d"
        objects: Descriptor table; when given, drops are checked against the
            physical laws

    Returns:
        None if legal, otherwise a message describing the violation
    """
    if action == ACTION_LEFT:
        if state.arm <= 0:
            return "Already at left edge!"
    elif action == ACTION_RIGHT:
        if state.arm >= len(state.stacks) - 1:
            return "Already at right edge!"
    elif action == ACTION_PICK:
        if state.holding is not None:
            return "Already holding something!"
        if not state.stacks[state.arm]:
            return "Stack is empty!"
    elif action == ACTION_DROP:
        if state.holding is None:
            return "Not holding anything!"
        top = state.top(state.arm)
        if (
            objects is not None
            and top is not None
            and not supports(objects[top], objects[state.holding], True)
        ):
            return "Physical laws violated!"
    else:
        return f"Unknown action '{action}'"
    return None


def _transition(state: WorldState, action: str) -> WorldState:
    """Effect of an action already known to be legal. Copies only the touched column."""
    if action == ACTION_LEFT:
        return WorldState(state.stacks, state.holding, state.arm - 1)
    if action == ACTION_RIGHT:
        return WorldState(state.stacks, state.holding, state.arm + 1)

    stacks = list(state.stacks)
    column = stacks[state.arm]
    if action == ACTION_PICK:
        stacks[state.arm] = column[:-1]
        return WorldState(tuple(stacks), column[-1], state.arm)

    stacks[state.arm] = column + (state.holding,)
    return WorldState(tuple(stacks), None, state.arm)


def apply_action(
    state: WorldState,
    action: str,
    objects: Optional[Mapping[str, ObjectDescriptor]] = None,
) -> WorldState:
    """
    Apply a primitive action, returning the new state.

    Args:
        state: Current state (left untouched)
        action: One of "l", "r", "p", "d"
        objects: Descriptor table for the physical-law check of drops

    Returns:
        The successor state

    Raises:
        PlanExecutionError: Action is illegal in `state`
    """
    violation = check_action(state, action, objects)
    if violation is not None:
        raise PlanExecutionError(violation, action=action)
    return _transition(state, action)


# ============================================================================
# World Graph
# ============================================================================


class WorldGraph(BaseGraph[WorldState]):
    """
    Graph whose nodes are WorldStates and whose edges are legal primitive actions.

    Successors are generated in the order l, r, p, d. Nodes are keyed by
    structural equality, so the engine's closed set collapses states reached
    by different action sequences.
    """

    def __init__(self, objects: Mapping[str, ObjectDescriptor]):
        """
        Initialize the graph.

        Args:
            objects: Descriptor table used for the physical-law check of drops
        """
        self.objects = objects

    def outgoing_edges(self, node: WorldState) -> List[Edge[WorldState]]:
        edges: List[Edge[WorldState]] = []
        for action in ACTIONS:
            if check_action(node, action, self.objects) is None:
                edges.append(
                    Edge(
                        source=node,
                        target=_transition(node, action),
                        cost=ACTION_COST,
                        action=action,
                    )
                )
        return edges

    def node_key(self, node: WorldState) -> WorldState:
        return node
