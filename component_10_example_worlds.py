"""
Component 10: Example Worlds

Static world tables (small, medium, complex, impossible) and loaders that
turn them, or JSON files of the same shape, into World objects.

Table shape:
    {
        "stacks":   [["e"], ["g", "l"], [], ...],   # bottom -> top
        "holding":  "a" | None,
        "arm":      0,
        "objects":  {"a": {"form": "brick", "size": "large", "color": "green"}, ...},
        "examples": ["put the white ball in a box on the floor", ...],
    }

Author: Shrdlite Development Team
Date: 2025-12-09
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Union

from component_15_logging_config import get_logger
from component_3_world_graph import World
from shrdlite_exceptions import InvalidConfigError, wrap_exception

logger = get_logger(__name__)


def _objects(brick_color: str) -> Dict[str, Dict[str, str]]:
    """The object table shared by the small, medium and complex worlds."""
    return {
        "a": {"form": "brick", "size": "large", "color": brick_color},
        "b": {"form": "brick", "size": "small", "color": "white"},
        "c": {"form": "plank", "size": "large", "color": "red"},
        "d": {"form": "plank", "size": "small", "color": "green"},
        "e": {"form": "ball", "size": "large", "color": "white"},
        "f": {"form": "ball", "size": "small", "color": "black"},
        "g": {"form": "table", "size": "large", "color": "blue"},
        "h": {"form": "table", "size": "small", "color": "red"},
        "i": {"form": "pyramid", "size": "large", "color": "yellow"},
        "j": {"form": "pyramid", "size": "small", "color": "red"},
        "k": {"form": "box", "size": "large", "color": "yellow"},
        "l": {"form": "box", "size": "large", "color": "red"},
        "m": {"form": "box", "size": "small", "color": "blue"},
    }


EXAMPLE_WORLDS: Dict[str, Dict[str, Any]] = {
    "complex": {
        "stacks": [["e"], ["a", "l"], ["i", "h", "j"], ["c", "k", "g", "b"], ["d", "m", "f"]],
        "holding": None,
        "arm": 0,
        "objects": _objects("yellow"),
        "examples": [
            "put a box in a box",
            "put all balls on the floor",
            "take the yellow box",
            "put any object under all tables",
            "put any object under all tables on the floor",
            "put a ball in a small box in a large box",
            "put all balls in a large box",
            "put all balls left of a ball",
            "put all balls beside a ball",
            "put all balls beside every ball",
            "put a box beside all objects",
            "put all red objects above a yellow object on the floor",
            "put all yellow objects under a red object under an object",
        ],
    },
    "medium": {
        "stacks": [
            ["e"], ["a", "l"], [], [], ["i", "h", "j"],
            [], [], ["k", "g", "c", "b"], [], ["d", "m", "f"],
        ],
        "holding": None,
        "arm": 0,
        "objects": _objects("green"),
        "examples": [
            "put the brick that is to the left of a pyramid in a box",
            "put the white ball in a box on the floor",
            "move the large ball inside a yellow box on the floor",
            "move the large ball inside a red box on the floor",
            "take a red object",
            "take the white ball",
            "put all boxes on the floor",
            "put the large plank under the blue brick",
            "move all bricks on a table",
            "move all balls inside a large box",
        ],
    },
    "small": {
        "stacks": [["e"], ["g", "l"], [], ["k", "m", "f"], []],
        "holding": "a",
        "arm": 0,
        "objects": _objects("green"),
        "examples": [
            "put the white ball in a box on the floor",
            "put the black ball in a box on the floor",
            "take a blue object",
            "take the white ball",
            "put all boxes on the floor",
            "move all balls inside a large box",
        ],
    },
    "impossible": {
        "stacks": [
            ["lbrick1", "lball1", "sbrick1"],
            [],
            ["lpyr1", "lbox1", "lplank2", "sball2"],
            [],
            ["sbrick2", "sbox1", "spyr1", "ltable1", "sball1"],
        ],
        "holding": None,
        "arm": 0,
        "objects": {
            "lbrick1": {"form": "brick", "size": "large", "color": "green"},
            "sbrick1": {"form": "brick", "size": "small", "color": "yellow"},
            "sbrick2": {"form": "brick", "size": "small", "color": "blue"},
            "lplank1": {"form": "plank", "size": "large", "color": "red"},
            "lplank2": {"form": "plank", "size": "large", "color": "black"},
            "splank1": {"form": "plank", "size": "small", "color": "green"},
            "lball1": {"form": "ball", "size": "large", "color": "white"},
            "sball1": {"form": "ball", "size": "small", "color": "black"},
            "sball2": {"form": "ball", "size": "small", "color": "red"},
            "ltable1": {"form": "table", "size": "large", "color": "green"},
            "stable1": {"form": "table", "size": "small", "color": "red"},
            "lpyr1": {"form": "pyramid", "size": "large", "color": "white"},
            "spyr1": {"form": "pyramid", "size": "small", "color": "blue"},
            "lbox1": {"form": "box", "size": "large", "color": "yellow"},
            "sbox1": {"form": "box", "size": "small", "color": "red"},
            "sbox2": {"form": "box", "size": "small", "color": "blue"},
        },
        "examples": ["this is just an impossible world"],
    },
}


def list_worlds() -> List[str]:
    return sorted(EXAMPLE_WORLDS)


def load_world(name: str) -> World:
    """
    Build one of the example worlds.

    Raises:
        InvalidConfigError: Unknown world name
    """
    if name not in EXAMPLE_WORLDS:
        raise InvalidConfigError(
            f"Unknown world '{name}'", context={"known": list_worlds()}
        )
    # Tables are module-level; never hand out shared mutable lists
    return World.from_dict(copy.deepcopy(EXAMPLE_WORLDS[name]), name=name)


def load_world_file(path: Union[str, Path]) -> World:
    """
    Load a world table from a JSON file.

    Raises:
        InvalidConfigError: File missing or not valid JSON
        InvalidWorldStateError: Table malformed or state inconsistent
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise wrap_exception(
            e, InvalidConfigError, "Could not read world file", path=str(path)
        ) from e

    if not isinstance(data, dict):
        raise InvalidConfigError(
            "World file must contain a JSON object", context={"path": str(path)}
        )

    world = World.from_dict(data, name=path.stem)
    logger.info(
        "World loaded",
        extra={"path": str(path), "columns": len(world.state.stacks)},
    )
    return world
