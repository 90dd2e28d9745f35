"""
Component 1: Blocks World - Type Definitions

Shared vocabulary for every component of the planner:
- Closed enumerations for object forms, sizes and spatial relations
- ObjectDescriptor: the physical description of one object
- Literal: a single relation assertion of a goal formula
- DNF helpers: formatting and parsing goal formulas in disjunctive normal form

The goal formula text format is the one shown to users and accepted by the
command line:

    inside(f,m) & ontop(e,floor) | holding(e)

'&' joins literals into a conjunction, '|' joins conjunctions, and a leading
'-' marks a negative literal.

Author: Shrdlite Development Team
Date: 2025-12-04
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from common.constants import FLOOR_ID
from shrdlite_exceptions import MalformedLiteralError

# ============================================================================
# Enums
# ============================================================================


class Form(Enum):
    """Object forms. FLOOR is synthetic and ANYFORM only occurs in descriptions."""

    BRICK = "brick"
    PLANK = "plank"
    BALL = "ball"
    PYRAMID = "pyramid"
    BOX = "box"
    TABLE = "table"
    FLOOR = "floor"
    ANYFORM = "anyform"


class Size(Enum):
    """Object sizes. Unknown size is represented by None, not by a member."""

    SMALL = "small"
    LARGE = "large"

    @property
    def rank(self) -> int:
        return 0 if self is Size.SMALL else 1


class Relation(Enum):
    """Spatial relations usable in goal literals and location phrases."""

    ONTOP = "ontop"
    INSIDE = "inside"
    ABOVE = "above"
    UNDER = "under"
    BESIDE = "beside"
    LEFTOF = "leftof"
    RIGHTOF = "rightof"
    HOLDING = "holding"

    @property
    def arity(self) -> int:
        """Number of arguments a literal of this relation takes."""
        return 1 if self is Relation.HOLDING else 2

    @property
    def is_direct_support(self) -> bool:
        """Relations where the second argument directly supports the first."""
        return self in (Relation.ONTOP, Relation.INSIDE)


# ============================================================================
# Data Structures
# ============================================================================


@dataclass(frozen=True)
class ObjectDescriptor:
    """
    Physical description of an object: form, size and color.

    Immutable and hashable. Size and color may be None (unknown / any).
    """

    form: Form
    size: Optional[Size] = None
    color: Optional[str] = None

    def __str__(self) -> str:
        parts = [p for p in (self.size and self.size.value, self.color) if p]
        parts.append(self.form.value)
        return " ".join(parts)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ObjectDescriptor":
        """
        Build a descriptor from a world table entry.

        Args:
            data: Mapping with "form" and optional "size" / "color"

        Raises:
            ValueError: Unknown form or size
        """
        size = data.get("size")
        return cls(
            form=Form(data["form"]),
            size=Size(size) if size else None,
            color=data.get("color"),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "form": self.form.value,
            "size": self.size.value if self.size else None,
            "color": self.color,
        }


FLOOR: ObjectDescriptor = ObjectDescriptor(form=Form.FLOOR)


@dataclass(frozen=True)
class Literal:
    """
    A single relation assertion, e.g. inside(f,m).

    Attributes:
        relation: The relation that should (or should not) hold
        args: Object identifiers, or "floor" as a location
        polarity: False for negated literals
    """

    relation: Relation
    args: Tuple[str, ...]
    polarity: bool = True

    def __post_init__(self):
        if len(self.args) != self.relation.arity:
            raise MalformedLiteralError(
                f"Relation '{self.relation.value}' takes {self.relation.arity} "
                f"argument(s), got {len(self.args)}",
                literal=f"{self.relation.value}({','.join(self.args)})",
            )

    @property
    def subject(self) -> str:
        """The primary object of the literal (the one that has to be moved)."""
        return self.args[0]

    @property
    def target(self) -> Optional[str]:
        return self.args[1] if len(self.args) > 1 else None

    def __str__(self) -> str:
        return stringify_literal(self)

    @classmethod
    def create(cls, relation: str, args: Sequence[str], polarity: bool = True) -> "Literal":
        """
        Build a literal from plain strings.

        Raises:
            MalformedLiteralError: Unknown relation or wrong arity
        """
        try:
            rel = Relation(relation)
        except ValueError as e:
            raise MalformedLiteralError(
                f"Unknown relation '{relation}'", literal=f"{relation}({','.join(args)})"
            ) from e
        return cls(relation=rel, args=tuple(args), polarity=polarity)


Conjunction = Tuple[Literal, ...]
DNFFormula = List[Conjunction]


# ============================================================================
# Formatting and Parsing
# ============================================================================

_LITERAL_PATTERN = re.compile(r"^(-?)\s*([a-z]+)\s*\(([^()]*)\)$")


def stringify_literal(literal: Literal) -> str:
    return (
        ("" if literal.polarity else "-")
        + literal.relation.value
        + "("
        + ",".join(literal.args)
        + ")"
    )


def stringify_dnf(formula: Sequence[Sequence[Literal]]) -> str:
    """Format a DNF as 'a & b | c'."""
    return " | ".join(
        " & ".join(stringify_literal(lit) for lit in conjunction)
        for conjunction in formula
    )


def parse_literal(text: str) -> Literal:
    """
    Parse a single literal such as 'inside(f,m)' or '-ontop(a,floor)'.

    Raises:
        MalformedLiteralError: Text is not a well-formed literal
    """
    match = _LITERAL_PATTERN.match(text.strip())
    if not match:
        raise MalformedLiteralError("Cannot parse literal", literal=text)

    negation, relation, raw_args = match.groups()
    args = [a.strip() for a in raw_args.split(",") if a.strip()]
    return Literal.create(relation, args, polarity=not negation)


def parse_dnf(text: str) -> DNFFormula:
    """
    Parse a DNF goal formula.

    Example:
        parse_dnf("inside(f,k) | ontop(f,floor)") yields two single-literal
        conjunctions.

    Raises:
        MalformedLiteralError: Empty formula or malformed literal
    """
    if not text.strip():
        raise MalformedLiteralError("Goal formula is empty", literal=text)

    formula: DNFFormula = []
    for raw_conjunction in text.split("|"):
        literals = [parse_literal(part) for part in raw_conjunction.split("&")]
        formula.append(tuple(literals))
    return formula


def formula_objects(formula: Sequence[Sequence[Literal]]) -> List[str]:
    """All object identifiers mentioned by a formula, excluding the floor."""
    seen: List[str] = []
    for conjunction in formula:
        for literal in conjunction:
            for arg in literal.args:
                if arg != FLOOR_ID and arg not in seen:
                    seen.append(arg)
    return seen
