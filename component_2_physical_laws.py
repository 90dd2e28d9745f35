"""
Component 2: Physical Laws

Support-compatibility rules between objects of the blocks world:
- supports(): may one object rest directly on / in another
- relation_allowed(): interpreter-side filter for goal relations

Both functions are pure predicates over ObjectDescriptors. They never raise.

Author: Shrdlite Development Team
Date: 2025-12-04
"""

from typing import Optional

from component_1_blocks_world_types import Form, ObjectDescriptor, Relation, Size


def _strictly_larger(size: Optional[Size], other: Optional[Size]) -> bool:
    """Unknown sizes never count as larger or smaller."""
    if size is None or other is None:
        return False
    return size.rank > other.rank


def supports(
    supporter: ObjectDescriptor, supported: ObjectDescriptor, polarity: bool = True
) -> bool:
    """
    Decide whether `supported` may be placed directly on (or in) `supporter`.

    With polarity=False the two roles are swapped first, which expresses
    "under" as the negation of "on top of": supports(a, b, False) is the same
    question as supports(b, a, True).

    Rules, first match wins:
    1. Balls support nothing.
    2. A large object cannot rest on a small one.
    3. Balls only rest on boxes or the floor.
       A box cannot sit in or on a same-size pyramid, plank or box.
       A small box cannot sit on a brick or a pyramid.
       A large box cannot sit on a pyramid.
    4. Everything else is allowed.

    Args:
        supporter: The object underneath (may be the FLOOR descriptor)
        supported: The object placed on top
        polarity: False swaps the roles of the two objects

    Returns:
        True if the placement obeys the physical laws
    """
    if not polarity:
        supporter, supported = supported, supporter

    if supporter.form is Form.BALL:
        return False

    if _strictly_larger(supported.size, supporter.size):
        return False

    if supported.form is Form.BALL:
        return supporter.form in (Form.BOX, Form.FLOOR)

    if supported.form is Form.BOX:
        if supported.size == supporter.size:
            return supporter.form not in (Form.PYRAMID, Form.PLANK, Form.BOX)
        if supported.size is Size.SMALL:
            return supporter.form not in (Form.BRICK, Form.PYRAMID)
        if supported.size is Size.LARGE:
            return supporter.form is not Form.PYRAMID
        return True

    return True


def relation_allowed(
    obj: ObjectDescriptor,
    location: ObjectDescriptor,
    relation: Relation,
) -> bool:
    """
    Check whether a goal relation between two objects can ever hold.

    Used by the interpreter to drop interpretations that violate the physical
    laws before any planning happens.

    - ontop / inside: `location` must be able to support `obj`
    - under: `obj` must be able to support `location`
    - with the floor as location only ontop and above make sense
    - any other relation is always allowed

    Args:
        obj: Description of the object to be moved
        location: Description of the reference object (or FLOOR)
        relation: Requested relation obj -> location

    Returns:
        True if the relation is physically possible
    """
    if location.form is Form.FLOOR:
        return relation in (Relation.ONTOP, Relation.ABOVE)

    if relation.is_direct_support:
        return supports(location, obj, True)

    if relation is Relation.UNDER:
        return supports(location, obj, False)

    return True
