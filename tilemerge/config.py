import argparse
from typing import Any, Dict, List, Optional

MODES = ("normal", "win", "lose")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="tilemerge - sliding tile puzzle")

    parser.add_argument("mode", nargs="?", choices=MODES, default="normal",
                        help="Startup board: normal game, near-win or near-loss fixture")
    parser.add_argument("--console", action="store_true", help="Play in the terminal instead of a window")
    parser.add_argument("--seed", type=int, default=None, help="Seed for tile spawns")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default="WARNING",
                        help="Logging verbosity")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> Dict[str, Any]:
    args = build_parser().parse_args(argv)

    config = {
        "mode": args.mode,
        "console": args.console,
        "seed": args.seed,
        "log_level": args.log_level,
    }
    return config
