"""
tests/test_interpreter.py

Tests for the command interpreter on the "small" example world.

Parse trees are built by hand; each test names the utterance it stands for.
Expected interpretations are compared as sets of canonical formula strings
(literals sorted inside a conjunction, conjunctions sorted inside a formula).
"""

from typing import List, Optional, Set

import pytest

from common.constants import MSG_NO_INTERPRETATION
from component_10_example_worlds import load_world
from component_1_blocks_world_types import Form, Relation, Size
from component_3_world_graph import World, WorldState
from component_8_interpreter import (
    Command,
    Entity,
    Interpreter,
    Location,
    ObjectDescription,
    interpret,
)
from shrdlite_exceptions import InterpretationError

# ==================== Parse tree helpers ====================


def obj(form: Optional[Form] = None, size: Optional[Size] = None, color: Optional[str] = None) -> ObjectDescription:
    return ObjectDescription(form=form, size=size, color=color)


def where(desc: ObjectDescription, relation: Relation, quantifier: str, target: ObjectDescription) -> ObjectDescription:
    """'<desc> <relation> <quantifier> <target>' as a nested description."""
    return ObjectDescription(object=desc, location=Location(relation, Entity(quantifier, target)))


def the(desc: ObjectDescription) -> Entity:
    return Entity("the", desc)


def any_(desc: ObjectDescription) -> Entity:
    return Entity("any", desc)


def all_(desc: ObjectDescription) -> Entity:
    return Entity("all", desc)


def take(entity: Entity) -> Command:
    return Command("take", entity=entity)


def put(entity: Optional[Entity], relation: Relation, target: Entity) -> Command:
    return Command("put", entity=entity, location=Location(relation, target))


FLOOR_DESC = obj(Form.FLOOR)


def canonical(formula) -> str:
    return " | ".join(
        sorted(" & ".join(sorted(str(lit) for lit in conjunction)) for conjunction in formula)
    )


def interpretations(parses: List[Command], world: World) -> Set[str]:
    try:
        results = interpret(parses, world)
    except InterpretationError:
        return set()
    return {canonical(result.interpretation) for result in results}


@pytest.fixture
def world() -> World:
    return load_world("small")


# ==================== Take ====================


class TestTake:
    def test_take_an_object(self, world):
        result = interpretations([take(any_(obj(Form.ANYFORM)))], world)
        expected = ["holding(e)", "holding(f)", "holding(g)", "holding(k)", "holding(l)", "holding(m)"]
        assert result == {" | ".join(sorted(expected))}

    def test_take_a_blue_object(self, world):
        result = interpretations([take(any_(obj(Form.ANYFORM, color="blue")))], world)
        assert result == {"holding(g) | holding(m)"}

    def test_take_a_box(self, world):
        result = interpretations([take(any_(obj(Form.BOX)))], world)
        assert result == {"holding(k) | holding(l) | holding(m)"}

    def test_take_the_floor(self, world):
        assert interpretations([take(the(FLOOR_DESC))], world) == set()

    def test_take_white_object_beside_blue_object(self, world):
        desc = where(obj(Form.ANYFORM, color="white"), Relation.BESIDE, "any", obj(Form.ANYFORM, color="blue"))
        assert interpretations([take(any_(desc))], world) == {"holding(e)"}

    def test_take_ball_left_of_table(self, world):
        desc = where(obj(Form.BALL), Relation.LEFTOF, "any", obj(Form.TABLE))
        assert interpretations([take(any_(desc))], world) == {"holding(e)"}

    def test_take_ball_right_of_table(self, world):
        desc = where(obj(Form.BALL), Relation.RIGHTOF, "any", obj(Form.TABLE))
        assert interpretations([take(any_(desc))], world) == {"holding(f)"}

    def test_take_ball_in_box_right_of_table(self, world):
        # a ball in (a box right of a table) / (a ball in a box) right of a table
        box_right_of_table = where(obj(Form.BOX), Relation.RIGHTOF, "any", obj(Form.TABLE))
        first = where(obj(Form.BALL), Relation.INSIDE, "any", box_right_of_table)
        ball_in_box = where(obj(Form.BALL), Relation.INSIDE, "any", obj(Form.BOX))
        second = where(ball_in_box, Relation.RIGHTOF, "any", obj(Form.TABLE))

        results = interpret([take(any_(first)), take(any_(second))], world)
        assert [canonical(r.interpretation) for r in results] == ["holding(f)", "holding(f)"]

    def test_take_ball_beside_table_beside_box(self, world):
        table_beside_box = where(obj(Form.TABLE), Relation.BESIDE, "any", obj(Form.BOX))
        first = where(obj(Form.BALL), Relation.BESIDE, "any", table_beside_box)
        ball_beside_table = where(obj(Form.BALL), Relation.BESIDE, "any", obj(Form.TABLE))
        second = where(ball_beside_table, Relation.BESIDE, "any", obj(Form.BOX))

        assert interpretations([take(any_(first)), take(any_(second))], world) == {"holding(e)"}

    def test_take_ball_below_floor(self, world):
        desc = where(obj(Form.BALL), Relation.UNDER, "the", FLOOR_DESC)
        assert interpretations([take(any_(desc))], world) == set()

    def test_take_all_of_several_raises(self, world):
        with pytest.raises(InterpretationError):
            Interpreter(world).interpret_command(take(all_(obj(Form.BALL))))

    def test_held_object_is_not_taken_again(self, world):
        result = interpretations([take(any_(obj(Form.BRICK)))], world)
        assert result == set()


# ==================== Put / Move ====================


class TestPut:
    def test_put_ball_in_box(self, world):
        result = interpretations([put(any_(obj(Form.BALL)), Relation.INSIDE, any_(obj(Form.BOX)))], world)
        assert result == {"inside(e,k) | inside(e,l) | inside(f,k) | inside(f,l) | inside(f,m)"}

    def test_put_ball_on_table(self, world):
        result = interpretations([put(any_(obj(Form.BALL)), Relation.ONTOP, any_(obj(Form.TABLE)))], world)
        assert result == set()

    def test_put_ball_above_table(self, world):
        result = interpretations([put(any_(obj(Form.BALL)), Relation.ABOVE, any_(obj(Form.TABLE)))], world)
        assert result == {"above(e,g) | above(f,g)"}

    def test_put_big_ball_in_small_box(self, world):
        command = put(any_(obj(Form.BALL, Size.LARGE)), Relation.INSIDE, any_(obj(Form.BOX, Size.SMALL)))
        assert interpretations([command], world) == set()

    def test_put_ball_left_of_ball(self, world):
        result = interpretations([put(any_(obj(Form.BALL)), Relation.LEFTOF, any_(obj(Form.BALL)))], world)
        assert result == {"leftof(e,f) | leftof(f,e)"}

    def test_put_white_object_beside_blue_object(self, world):
        command = put(
            any_(obj(Form.ANYFORM, color="white")), Relation.BESIDE, any_(obj(Form.ANYFORM, color="blue"))
        )
        assert interpretations([command], world) == {"beside(e,g) | beside(e,m)"}

    def test_put_ball_in_box_on_floor(self, world):
        # put a ball in (a box on the floor) / put (a ball in a box) on the floor
        box_on_floor = where(obj(Form.BOX), Relation.ONTOP, "the", FLOOR_DESC)
        first = put(any_(obj(Form.BALL)), Relation.INSIDE, any_(box_on_floor))
        ball_in_box = where(obj(Form.BALL), Relation.INSIDE, "any", obj(Form.BOX))
        second = put(any_(ball_in_box), Relation.ONTOP, the(FLOOR_DESC))

        assert interpretations([first, second], world) == {
            "inside(e,k) | inside(f,k)",
            "ontop(f,floor)",
        }

    def test_put_white_ball_in_box_on_floor(self, world):
        box_on_floor = where(obj(Form.BOX), Relation.ONTOP, "the", FLOOR_DESC)
        first = put(the(obj(Form.BALL, color="white")), Relation.INSIDE, any_(box_on_floor))
        white_ball_in_box = where(obj(Form.BALL, color="white"), Relation.INSIDE, "any", obj(Form.BOX))
        second = put(the(white_ball_in_box), Relation.ONTOP, the(FLOOR_DESC))

        assert interpretations([first, second], world) == {"inside(e,k)"}

    def test_put_yellow_box_below_blue_box(self, world):
        command = put(the(obj(Form.BOX, color="yellow")), Relation.UNDER, the(obj(Form.BOX, color="blue")))
        assert interpretations([command], world) == {"under(k,m)"}

    def test_put_yellow_box_on_floor_beside_blue_box(self, world):
        yellow_box_on_floor = where(obj(Form.BOX, color="yellow"), Relation.ONTOP, "the", FLOOR_DESC)
        first = put(the(yellow_box_on_floor), Relation.BESIDE, the(obj(Form.BOX, color="blue")))
        floor_beside_box = where(FLOOR_DESC, Relation.BESIDE, "the", obj(Form.BOX, color="blue"))
        second = put(the(obj(Form.BOX, color="yellow")), Relation.ONTOP, the(floor_beside_box))

        assert interpretations([first, second], world) == {"beside(k,m)"}

    def test_put_ball_below_floor(self, world):
        command = put(any_(obj(Form.BALL)), Relation.UNDER, the(FLOOR_DESC))
        assert interpretations([command], world) == set()

    def test_put_box_beside_floor(self, world):
        command = put(any_(obj(Form.BOX)), Relation.BESIDE, the(FLOOR_DESC))
        assert interpretations([command], world) == set()

    def test_put_it_uses_held_object(self, world):
        command = put(None, Relation.ONTOP, the(FLOOR_DESC))
        assert interpretations([command], world) == {"ontop(a,floor)"}

    def test_put_it_empty_handed_raises(self, world):
        empty = world.with_state(WorldState.create([["e"], [], []], None, 0))
        with pytest.raises(InterpretationError):
            interpret([put(None, Relation.ONTOP, the(FLOOR_DESC))], empty)

    def test_held_object_can_be_moved(self, world):
        command = put(the(obj(Form.BRICK, color="green")), Relation.INSIDE, the(obj(Form.BOX, color="red")))
        assert interpretations([command], world) == {"inside(a,l)"}


# ==================== Quantifier "all" ====================


class TestAllQuantifier:
    def test_put_all_balls_on_floor(self, world):
        command = put(all_(obj(Form.BALL)), Relation.ONTOP, the(FLOOR_DESC))
        assert interpretations([command], world) == {"ontop(e,floor) & ontop(f,floor)"}

    def test_put_every_ball_right_of_all_blue_things(self, world):
        command = put(all_(obj(Form.BALL)), Relation.RIGHTOF, all_(obj(Form.ANYFORM, color="blue")))
        assert interpretations([command], world) == {
            "rightof(e,g) & rightof(e,m) & rightof(f,g) & rightof(f,m)"
        }

    def test_put_all_balls_left_of_box_on_floor(self, world):
        box_on_floor = where(obj(Form.BOX), Relation.ONTOP, "the", FLOOR_DESC)
        first = put(all_(obj(Form.BALL)), Relation.LEFTOF, any_(box_on_floor))
        balls_left_of_box = where(obj(Form.BALL), Relation.LEFTOF, "any", obj(Form.BOX))
        second = put(all_(balls_left_of_box), Relation.ONTOP, the(FLOOR_DESC))

        assert interpretations([first, second], world) == {
            "leftof(e,k) & leftof(f,k)",
            "ontop(e,floor)",
        }

    def test_put_every_ball_in_a_box(self, world):
        command = put(all_(obj(Form.BALL)), Relation.INSIDE, any_(obj(Form.BOX)))
        result = interpret([command], world)[0].interpretation
        # e fits k or l, f fits k, l or m
        assert len(result) == 6
        assert all(len(conjunction) == 2 for conjunction in result)

    def test_object_left_of_all_boxes(self, world):
        # l only has to be left of the other boxes
        desc = where(obj(Form.ANYFORM), Relation.LEFTOF, "all", obj(Form.BOX))
        assert Interpreter(world).find_objects(any_(desc)) == ["e", "l"]


# ==================== Resolution ====================


class TestResolution:
    def test_floor_only_as_location(self, world):
        interpreter = Interpreter(world)
        assert interpreter.find_objects(the(FLOOR_DESC)) == []
        assert interpreter.find_objects(the(FLOOR_DESC), is_location=True) == ["floor"]

    def test_anyform_never_matches_floor(self, world):
        found = Interpreter(world).find_objects(any_(obj(Form.ANYFORM)), is_location=True)
        assert "floor" not in found

    def test_shared_subdescription_is_not_a_cycle(self, world):
        # "a ball in a box right of a box", with one box node used twice
        box = obj(Form.BOX)
        desc = where(where(obj(Form.BALL), Relation.INSIDE, "any", box), Relation.RIGHTOF, "any", box)
        assert Interpreter(world).find_objects(any_(desc)) == ["f"]

    def test_cyclic_description_rejected(self, world):
        a = obj(Form.BALL)
        b = ObjectDescription(object=obj(Form.BOX))
        cyclic = ObjectDescription(object=a, location=Location(Relation.BESIDE, Entity("any", b)))
        b.location = Location(Relation.BESIDE, Entity("any", cyclic))

        with pytest.raises(InterpretationError):
            Interpreter(world).find_objects(any_(cyclic))

    def test_no_match_and_no_error(self, world):
        with pytest.raises(InterpretationError) as exc_info:
            interpret([take(any_(obj(Form.PYRAMID)))], world)
        assert exc_info.value.message == MSG_NO_INTERPRETATION
