# main_shrdlite.py
"""
Command-line entry point for the Shrdlite planner.

Plans a goal formula in an example world (or a JSON world file), prints the
rendered plan and optionally executes it on the text world.

Examples:
    python main_shrdlite.py --list-worlds
    python main_shrdlite.py --world small --goal "inside(f,k)" --execute
    python main_shrdlite.py --world-file my_world.json --goal "holding(x) | holding(y)"
"""

import argparse
import logging
import sys
from typing import List, Optional

from component_10_example_worlds import list_worlds, load_world, load_world_file
from component_15_logging_config import get_logger, setup_logging
from component_1_blocks_world_types import parse_dnf
from component_7_planner import Planner, stringify
from component_8_interpreter import Command, InterpretationResult
from component_9_text_world import TextWorld
from shrdlite_config import ShrdliteConfig, get_config, reset_config
from shrdlite_exceptions import ShrdliteException, get_user_friendly_message

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shrdlite blocks-world planner")
    parser.add_argument("--world", type=str, default=None, help="Example world name (default: config default_world)")
    parser.add_argument("--world-file", type=str, default=None, help="JSON world file (overrides --world)")
    parser.add_argument("--goal", type=str, default=None, help='Goal in DNF, e.g. "ontop(e,floor) & holding(f) | holding(m)"')
    parser.add_argument("--timeout", type=float, default=None, help="Search timeout in seconds")
    parser.add_argument("--heuristic", type=str, default=None, help="Heuristic: obstruction | column_distance")
    parser.add_argument("--execute", action="store_true", help="Execute the plan on the text world and show the result")
    parser.add_argument("--list-worlds", action="store_true", help="List the example worlds and exit")
    parser.add_argument("--config", type=str, default=None, help="JSON configuration file")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging on the console")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
        enable_file_logging=False,
    )

    try:
        if args.config:
            reset_config(ShrdliteConfig(config_file=args.config))

        if args.list_worlds:
            for name in list_worlds():
                print(name)
            return 0

        if args.world_file:
            world = load_world_file(args.world_file)
        else:
            world = load_world(args.world or get_config().get("default_world"))

        text_world = TextWorld(world, output=print)

        if not args.goal:
            print(text_world.render())
            for example in world.examples:
                print(f"  {example}")
            return 0

        formula = parse_dnf(args.goal)
        interpretation = InterpretationResult(parse=Command(command="goal"), interpretation=formula)

        planner = Planner(timeout=args.timeout, heuristic=args.heuristic)
        result = planner.plan([interpretation], world)[0]
        print(stringify(result))

        if args.execute:
            text_world.perform_plan(result.plan)
            print(text_world.render())

    except ShrdliteException as e:
        logger.info("Command failed", extra={"error": type(e).__name__, "detail": e.message})
        print(get_user_friendly_message(e, include_details=args.verbose), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
