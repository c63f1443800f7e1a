#!/usr/bin/env python3
"""
tilemerge interactive play script

Usage:
    tilemerge              # normal game in a pygame window
    tilemerge win          # start from the near-win board
    tilemerge lose         # start from the near-loss board
    tilemerge --console    # play in the terminal
"""
import logging
from typing import List, Optional

from .config import parse_args
from .game import Game2048, Scenario
from .rng import UniformRandomSource

logger = logging.getLogger(__name__)

MODE_SCENARIOS = {
    "normal": None,
    "win": Scenario.WIN_TEST,
    "lose": Scenario.LOSE_TEST,
}


def create_game(mode: str = "normal", seed: Optional[int] = None) -> Game2048:
    return Game2048(rng=UniformRandomSource(seed), scenario=MODE_SCENARIOS[mode])


def main(argv: Optional[List[str]] = None) -> int:
    config = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, config["log_level"]),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    game = create_game(config["mode"], config["seed"])
    logger.info(f"Starting in {config['mode']} mode (seed={config['seed']})")

    if config["console"]:
        from .console import run_console
        run_console(game)
    else:
        from .interface import PygameInterface
        PygameInterface(game).run()

    logger.info(f"Final score: {game.score()}, max tile: {game.max_tile()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
