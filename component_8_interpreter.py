"""
Component 8: Command Interpreter

Maps a parsed command plus the current world into a DNF goal formula:
- resolves object descriptions ("the ball in a box right of a table") to
  object identifiers
- filters candidate goals by the physical laws (component_2)
- expands quantifiers into conjunctions / disjunctions

Parse trees are built by an external grammar; this module only defines their
shape (Command, Entity, Location, ObjectDescription).

Resolution of nested descriptions runs over an explicit worklist with a
memo table and an in-progress set: every description node is evaluated once,
and a description that (directly or indirectly) contains itself is rejected
instead of looping.

Author: Shrdlite Development Team
Date: 2025-12-08
"""

import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from common.constants import FLOOR_ID, MSG_NO_INTERPRETATION
from component_15_logging_config import get_logger
from component_1_blocks_world_types import (
    DNFFormula,
    Form,
    Literal,
    ObjectDescriptor,
    Relation,
    Size,
    stringify_dnf,
)
from component_2_physical_laws import relation_allowed
from component_3_world_graph import World, WorldState
from shrdlite_exceptions import InterpretationError

logger = get_logger(__name__)

Position = Tuple[int, int]

FLOOR_POSITION: Position = (-1, -1)
HELD_POSITION: Position = (-2, -2)

QUANTIFIER_THE = "the"
QUANTIFIER_ANY = "any"
QUANTIFIER_ALL = "all"


# ============================================================================
# Parse Tree
# ============================================================================


@dataclass
class ObjectDescription:
    """
    Description of one or more objects.

    Either a plain description (form / size / color, each None = any), or a
    nested one: `object` describes the object itself and `location` restricts
    where it is ("the ball [in a box]").
    """

    form: Optional[Form] = None
    size: Optional[Size] = None
    color: Optional[str] = None
    object: Optional["ObjectDescription"] = None
    location: Optional["Location"] = None


@dataclass
class Entity:
    """Quantified description: quantifier is 'the', 'any' or 'all'."""

    quantifier: str
    object: ObjectDescription


@dataclass
class Location:
    """Spatial relation to an entity ("on the floor", "left of all boxes")."""

    relation: Relation
    entity: Entity


@dataclass
class Command:
    """
    A parsed command.

    Attributes:
        command: "take", "put" or "move"
        entity: Object to act on; None means "it" (the held object)
        location: Target location; None for plain take commands
    """

    command: str
    entity: Optional[Entity] = None
    location: Optional[Location] = None


@dataclass
class InterpretationResult:
    """A parse together with its goal formula."""

    parse: Command
    interpretation: DNFFormula = field(default_factory=list)

    def __str__(self) -> str:
        return stringify_dnf(self.interpretation)


# ============================================================================
# Interpreter
# ============================================================================


class Interpreter:
    """
    Interprets parsed commands in the context of a world.

    Usage:
        interpreter = Interpreter(world)
        results = interpreter.interpret(parses)
    """

    def __init__(self, world: World):
        self.world = world
        self.state: WorldState = world.state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def interpret(self, parses: Sequence[Command]) -> List[InterpretationResult]:
        """
        Interpret every parse; keep those that yield a goal.

        Args:
            parses: Alternative parse trees of one utterance

        Returns:
            One InterpretationResult per parse with a non-empty goal

        Raises:
            InterpretationError: No parse could be interpreted (the first
                error encountered is raised)
        """
        errors: List[InterpretationError] = []
        results: List[InterpretationResult] = []

        for parse in parses:
            try:
                formula = self.interpret_command(parse)
            except InterpretationError as e:
                errors.append(e)
                continue
            if formula:
                results.append(InterpretationResult(parse=parse, interpretation=formula))

        if results:
            logger.info(
                "Interpretations found",
                extra={"count": len(results), "goals": [str(r) for r in results]},
            )
            return results

        if errors:
            raise errors[0]
        raise InterpretationError(MSG_NO_INTERPRETATION, context={"parses": len(parses)})

    def interpret_command(self, cmd: Command) -> Optional[DNFFormula]:
        """
        Interpret a single parse.

        Returns:
            The goal formula, or None if nothing in the world matches

        Raises:
            InterpretationError: "it" used while empty-handed, more than one
                object to hold, or a cyclic description
        """
        objects = self._command_objects(cmd)
        if not objects:
            return None

        if cmd.location is None:
            if cmd.entity is not None and cmd.entity.quantifier == QUANTIFIER_ALL and len(objects) > 1:
                raise InterpretationError(
                    "I can only hold one object at a time", context={"objects": objects}
                )
            return [(Literal(Relation.HOLDING, (obj,)),) for obj in objects]

        location_objects = self.find_objects(cmd.location.entity, is_location=True)
        if not location_objects:
            return None

        formula = self._combine(
            objects,
            location_objects,
            cmd.location.relation,
            all_objects=cmd.entity is not None and cmd.entity.quantifier == QUANTIFIER_ALL,
            all_locations=cmd.location.entity.quantifier == QUANTIFIER_ALL,
        )
        return formula or None

    def find_objects(
        self, entity: Entity, is_location: bool = False, include_held: bool = False
    ) -> List[str]:
        """
        Resolve an entity to object identifiers, in world order.

        The floor is only returned for locations. The held object is returned
        only with include_held, and never matches a description with a
        location (it has no position to relate).
        """
        positions = self._resolve(entity.object)

        objects: List[str] = []
        for position in sorted(positions):
            if position == FLOOR_POSITION:
                continue
            if position == HELD_POSITION and not include_held:
                continue
            objects.append(self._object_at(position))

        if is_location and FLOOR_POSITION in positions:
            objects.append(FLOOR_ID)
        return objects

    # ------------------------------------------------------------------
    # Goal construction
    # ------------------------------------------------------------------

    def _command_objects(self, cmd: Command) -> List[str]:
        if cmd.entity is None:
            if self.state.holding is None:
                raise InterpretationError("I'm not holding anything")
            return [self.state.holding]
        # Taking what the arm already holds is no goal
        return self.find_objects(
            cmd.entity, is_location=False, include_held=cmd.location is not None
        )

    def _allowed(self, obj: str, location: str, relation: Relation) -> bool:
        return obj != location and relation_allowed(
            self.world.describe(obj), self.world.describe(location), relation
        )

    def _combine(
        self,
        objects: List[str],
        locations: List[str],
        relation: Relation,
        all_objects: bool,
        all_locations: bool,
    ) -> DNFFormula:
        """
        Build the DNF for "put <objects> <relation> <locations>".

        - any/any: one conjunction per allowed (object, location) pair
        - all/any: every object gets its own location choice; one conjunction
          per combination of choices
        - any/all: one conjunction per object relating it to every location
        - all/all: a single conjunction of every pair
        """
        if not all_objects and not all_locations:
            return [
                (Literal(relation, (obj, loc)),)
                for obj in objects
                for loc in locations
                if self._allowed(obj, loc, relation)
            ]

        if all_objects and not all_locations:
            choices = [
                [loc for loc in locations if self._allowed(obj, loc, relation)]
                for obj in objects
            ]
            if any(not options for options in choices):
                return []
            return [
                tuple(Literal(relation, (obj, loc)) for obj, loc in zip(objects, combination))
                for combination in itertools.product(*choices)
            ]

        if not all_objects:
            formula: DNFFormula = []
            for obj in objects:
                targets = [loc for loc in locations if loc != obj]
                if targets and all(self._allowed(obj, loc, relation) for loc in targets):
                    formula.append(tuple(Literal(relation, (obj, loc)) for loc in targets))
            return formula

        pairs = [(obj, loc) for obj in objects for loc in locations if obj != loc]
        if not pairs or not all(self._allowed(obj, loc, relation) for obj, loc in pairs):
            return []
        return [tuple(Literal(relation, pair) for pair in pairs)]

    # ------------------------------------------------------------------
    # Description resolution
    # ------------------------------------------------------------------

    def _resolve(self, root: ObjectDescription) -> Set[Position]:
        """
        Positions matching a (possibly nested) description.

        Post-order evaluation over an explicit stack; memo maps id(description)
        to its matching positions.
        """
        memo: Dict[int, Set[Position]] = {}
        in_progress: Set[int] = set()
        stack: List[Tuple[ObjectDescription, bool]] = [(root, False)]

        while stack:
            desc, children_done = stack.pop()
            key = id(desc)

            if children_done:
                memo[key] = self._match(desc, memo)
                in_progress.discard(key)
                continue

            if key in memo:
                continue
            if key in in_progress:
                raise InterpretationError("Description refers to itself")

            in_progress.add(key)
            stack.append((desc, True))
            for child in self._children(desc):
                if id(child) not in memo:
                    stack.append((child, False))

        return memo[id(root)]

    @staticmethod
    def _children(desc: ObjectDescription) -> List[ObjectDescription]:
        children = []
        if desc.object is not None:
            children.append(desc.object)
        if desc.location is not None:
            children.append(desc.location.entity.object)
        return children

    def _match(
        self, desc: ObjectDescription, memo: Dict[int, Set[Position]]
    ) -> Set[Position]:
        if desc.object is not None:
            candidates = memo[id(desc.object)]
        else:
            candidates = {
                position
                for position in self._all_positions()
                if self._attributes_match(desc, self._descriptor_at(position))
            }

        if desc.location is None:
            return candidates

        relation = desc.location.relation
        targets = memo[id(desc.location.entity.object)]
        require_all = desc.location.entity.quantifier == QUANTIFIER_ALL

        matched = set()
        for position in candidates:
            related = self._related_positions(relation, position)
            if require_all:
                others = targets - {position}
                if others and others <= related:
                    matched.add(position)
            elif targets & related:
                matched.add(position)
        return matched

    @staticmethod
    def _attributes_match(desc: ObjectDescription, descriptor: ObjectDescriptor) -> bool:
        if desc.color is not None and desc.color != descriptor.color:
            return False
        if desc.size is not None and desc.size != descriptor.size:
            return False
        if desc.form is None or desc.form is Form.ANYFORM:
            return descriptor.form is not Form.FLOOR
        return desc.form is descriptor.form

    def _all_positions(self) -> List[Position]:
        positions = [
            (col, row)
            for col, column in enumerate(self.state.stacks)
            for row in range(len(column))
        ]
        positions.append(FLOOR_POSITION)
        if self.state.holding is not None:
            positions.append(HELD_POSITION)
        return positions

    def _object_at(self, position: Position) -> str:
        if position == FLOOR_POSITION:
            return FLOOR_ID
        if position == HELD_POSITION:
            return self.state.holding
        col, row = position
        return self.state.stacks[col][row]

    def _descriptor_at(self, position: Position) -> ObjectDescriptor:
        return self.world.describe(self._object_at(position))

    def _related_positions(self, relation: Relation, position: Position) -> Set[Position]:
        """
        Positions a location object may occupy for `position` to satisfy
        `relation` to it.
        """
        if position in (FLOOR_POSITION, HELD_POSITION):
            return set()

        col, row = position
        stacks = self.state.stacks

        def column_positions(columns: range) -> Set[Position]:
            return {(c, r) for c in columns for r in range(len(stacks[c]))}

        if relation is Relation.BESIDE:
            neighbours = [c for c in (col - 1, col + 1) if 0 <= c < len(stacks)]
            return {(c, r) for c in neighbours for r in range(len(stacks[c]))}
        if relation is Relation.LEFTOF:
            return column_positions(range(col + 1, len(stacks)))
        if relation is Relation.RIGHTOF:
            return column_positions(range(0, col))
        if relation.is_direct_support:
            return {(col, row - 1)} if row > 0 else {FLOOR_POSITION}
        if relation is Relation.UNDER:
            return {(col, r) for r in range(row + 1, len(stacks[col]))}
        if relation is Relation.ABOVE:
            return {(col, r) for r in range(row)} | {FLOOR_POSITION}
        return set()


def interpret(parses: Sequence[Command], world: World) -> List[InterpretationResult]:
    """Interpret parses against a world (see Interpreter.interpret)."""
    return Interpreter(world).interpret(parses)
