"""
Command-line interface for playing Pico Chess in the terminal.
"""

import argparse
import logging
import random
from typing import List, Optional

from pico_chess.api import play_match
from pico_chess.core.types import Color
from pico_chess.utils.config import STRATEGIES, Config
from pico_chess.utils.factory import create_strategy


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Play 6x6 chess with drops against a bot"
    )
    parser.add_argument(
        "--strategy", "-s",
        choices=list(STRATEGIES.keys()),
        default="greedy",
        help="Bot strategy (default: greedy)",
    )
    parser.add_argument(
        "--color", "-c",
        choices=[c.value for c in Color],
        default=Color.WHITE.value,
        help="Color you play (default: WHITE)",
    )
    parser.add_argument(
        "--self-play",
        action="store_true",
        help="Bot plays both sides (no human player)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible bot play",
    )
    parser.add_argument(
        "--turn-limit", "-t",
        type=int,
        default=None,
        help="Stop after this many actions (default: no limit)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = Config(strategy=args.strategy)
    strategy = create_strategy(config.strategy, rng=random.Random(args.seed))
    human_colors = [] if args.self_play else [Color(args.color)]

    play_match(
        human_colors=human_colors,
        strategy=strategy,
        config=config,
        turn_limit=args.turn_limit,
    )


if __name__ == "__main__":
    main()
