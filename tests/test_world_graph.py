"""
tests/test_world_graph.py

Unit tests for world states, primitive actions and successor generation.

Tests cover:
- Structural equality and hashing of WorldState
- Validation of world tables
- Legality and effect of l / r / p / d
- WorldGraph successors: soundness and legality on random states
"""

import random
from typing import Optional

import pytest

from component_10_example_worlds import load_world
from component_1_blocks_world_types import Form, ObjectDescriptor, Size
from component_2_physical_laws import supports
from component_3_world_graph import (
    World,
    WorldGraph,
    WorldState,
    apply_action,
    check_action,
)
from shrdlite_exceptions import InvalidWorldStateError, PlanExecutionError


@pytest.fixture
def small_world() -> World:
    return load_world("small")


def random_state(rng: random.Random, objects, columns: int = 5) -> WorldState:
    """Distribute a random subset of objects over the columns."""
    ids = sorted(objects)
    rng.shuffle(ids)
    ids = ids[: rng.randint(0, len(ids))]

    holding: Optional[str] = None
    if ids and rng.random() < 0.4:
        holding = ids.pop()

    stacks = [[] for _ in range(columns)]
    for obj in ids:
        stacks[rng.randrange(columns)].append(obj)

    return WorldState.create(stacks, holding, rng.randrange(columns))


# ==================== WorldState ====================


class TestWorldState:
    def test_structural_equality(self):
        a = WorldState.create([["e"], ["g", "l"]], None, 0)
        b = WorldState.create([["e"], ["g", "l"]], None, 0)
        assert a == b
        assert hash(a) == hash(b)
        assert a is not b

    def test_arm_and_holding_are_part_of_identity(self):
        base = WorldState.create([["e"], []], None, 0)
        assert base != WorldState.create([["e"], []], None, 1)
        assert WorldState.create([[], []], "e", 0) != WorldState.create([["e"], []], None, 0)

    def test_create_drops_none_entries(self):
        state = WorldState.create([["a", None], [None]], None, 0)
        assert state.stacks == (("a",), ())

    def test_duplicate_object_rejected(self):
        with pytest.raises(InvalidWorldStateError):
            WorldState.create([["a"], ["a"]])
        with pytest.raises(InvalidWorldStateError):
            WorldState.create([["a"], []], "a")

    def test_arm_out_of_range_rejected(self):
        with pytest.raises(InvalidWorldStateError):
            WorldState.create([["a"], []], None, 2)

    def test_floor_cannot_be_placed(self):
        with pytest.raises(InvalidWorldStateError):
            WorldState.create([["floor"]])

    def test_no_columns_rejected(self):
        with pytest.raises(InvalidWorldStateError):
            WorldState.create([])

    def test_locate(self, small_world):
        state = small_world.state
        assert state.locate("f") == (3, 2)
        assert state.locate("a") is None
        assert state.contains("a")
        assert not state.contains("b")

    def test_world_requires_descriptors(self):
        with pytest.raises(InvalidWorldStateError):
            World(objects={}, state=WorldState.create([["x"]]))

    def test_world_from_dict_malformed(self):
        with pytest.raises(InvalidWorldStateError):
            World.from_dict({"objects": {}}, name="broken")
        with pytest.raises(InvalidWorldStateError):
            World.from_dict({"objects": {"a": {"form": "cylinder"}}, "stacks": [["a"]]})


# ==================== Primitive actions ====================


class TestActions:
    def test_left_at_edge(self, small_world):
        assert check_action(small_world.state, "l") == "Already at left edge!"

    def test_right_at_edge(self):
        state = WorldState.create([[], []], None, 1)
        assert check_action(state, "r") == "Already at right edge!"

    def test_pick_while_holding(self, small_world):
        assert check_action(small_world.state, "p") == "Already holding something!"

    def test_pick_from_empty_column(self):
        state = WorldState.create([[], ["a"]], None, 0)
        assert check_action(state, "p") == "Stack is empty!"

    def test_drop_empty_handed(self):
        state = WorldState.create([["a"]], None, 0)
        assert check_action(state, "d") == "Not holding anything!"

    def test_drop_checks_physical_laws_only_with_objects(self, small_world):
        state = small_world.state  # holding the brick above the ball column
        assert check_action(state, "d") is None
        assert check_action(state, "d", small_world.objects) == "Physical laws violated!"

    def test_unknown_action(self, small_world):
        assert check_action(small_world.state, "x") == "Unknown action 'x'"

    def test_pick_and_drop_effects(self):
        state = WorldState.create([["a", "b"], []], None, 0)
        picked = apply_action(state, "p")
        assert picked.holding == "b"
        assert picked.stacks == (("a",), ())

        moved = apply_action(picked, "r")
        dropped = apply_action(moved, "d")
        assert dropped.stacks == (("a",), ("b",))
        assert dropped.holding is None
        assert dropped.arm == 1

    def test_apply_leaves_original_untouched(self):
        state = WorldState.create([["a", "b"], []], None, 0)
        apply_action(state, "p")
        assert state.stacks == (("a", "b"), ())
        assert state.holding is None

    def test_untouched_columns_are_shared(self):
        state = WorldState.create([["a", "b"], ["c"]], None, 0)
        picked = apply_action(state, "p")
        assert picked.stacks[1] is state.stacks[1]

    def test_apply_illegal_raises(self, small_world):
        with pytest.raises(PlanExecutionError) as exc_info:
            apply_action(small_world.state, "l")
        assert exc_info.value.message == "Already at left edge!"
        assert exc_info.value.context["action"] == "l"


# ==================== WorldGraph ====================


class TestWorldGraph:
    def test_successor_order_and_cost(self, small_world):
        graph = WorldGraph(small_world.objects)
        state = WorldState.create([["e"], ["g", "l"]], None, 0)
        edges = graph.outgoing_edges(state)
        assert [edge.action for edge in edges] == ["r", "p"]
        assert all(edge.cost == 1.0 for edge in edges)
        assert all(edge.source is state for edge in edges)

    def test_drop_on_ball_not_generated(self, small_world):
        graph = WorldGraph(small_world.objects)
        actions = [edge.action for edge in graph.outgoing_edges(small_world.state)]
        assert "d" not in actions
        assert actions == ["r"]

    def test_node_key_is_structural(self, small_world):
        graph = WorldGraph(small_world.objects)
        a = WorldState.create([["e"]], None, 0)
        b = WorldState.create([["e"]], None, 0)
        assert graph.node_key(a) == graph.node_key(b)

    @pytest.mark.parametrize("seed", range(25))
    def test_successors_sound(self, seed, small_world):
        rng = random.Random(seed)
        graph = WorldGraph(small_world.objects)
        state = random_state(rng, small_world.objects)

        for edge in graph.outgoing_edges(state):
            replayed = apply_action(edge.source, edge.action, small_world.objects)
            assert replayed == edge.target

    @pytest.mark.parametrize("seed", range(25))
    def test_successors_legal(self, seed, small_world):
        rng = random.Random(seed)
        objects = small_world.objects
        graph = WorldGraph(objects)
        state = random_state(rng, objects)

        for edge in graph.outgoing_edges(state):
            if edge.action == "l":
                assert state.arm > 0
            elif edge.action == "r":
                assert state.arm < len(state.stacks) - 1
            elif edge.action == "p":
                assert state.holding is None
                assert state.stacks[state.arm]
            else:
                assert state.holding is not None
                top = state.top(state.arm)
                assert top is None or supports(objects[top], objects[state.holding])

            # Invariant: every object in exactly one place
            placed = list(edge.target.all_objects())
            assert len(placed) == len(set(placed))
            assert sorted(placed) == sorted(state.all_objects())

    def test_custom_descriptor_table(self):
        objects = {
            "x": ObjectDescriptor(Form.BOX, Size.SMALL, "red"),
            "y": ObjectDescriptor(Form.BALL, Size.LARGE, "white"),
        }
        graph = WorldGraph(objects)
        state = WorldState.create([["x"]], "y", 0)
        assert [edge.action for edge in graph.outgoing_edges(state)] == []
