"""Startup configuration parsed from the command line.

Usage (arguments after ``--`` are forwarded by Streamlit):

    streamlit run double_pendulum/app_streamlit.py -- 5 true --seed 42
"""

from __future__ import annotations

import argparse
import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from double_pendulum.physics import DEFAULT_TICK_RATE, gravity_per_tick

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 1
INITIAL_SCREEN_SIZE = (400.0, 400.0)
MIN_SCREEN_SIZE = 200.0


@dataclass
class Config:
    size: int = DEFAULT_SIZE
    show_trail: bool = False
    tick_rate: float = DEFAULT_TICK_RATE
    gravity: float = gravity_per_tick(DEFAULT_TICK_RATE)
    width: float = INITIAL_SCREEN_SIZE[0]
    height: float = INITIAL_SCREEN_SIZE[1]
    seed: Optional[int] = None
    log_level: str = "INFO"

    @property
    def center(self):
        return (self.width / 2.0, self.height / 2.0)


class _LenientParser(argparse.ArgumentParser):
    """Raises ArgumentError instead of exiting on malformed arguments."""

    def error(self, message):
        raise argparse.ArgumentError(None, message)


def build_parser() -> argparse.ArgumentParser:
    parser = _LenientParser(description="Real-time double pendulum simulator")
    parser.add_argument(
        "size",
        nargs="?",
        default=str(DEFAULT_SIZE),
        help="Initial number of pendulums (default: 1)",
    )
    parser.add_argument(
        "show_trail",
        nargs="?",
        default="false",
        help="Draw the trail of every pendulum when 'true' (default: false)",
    )
    parser.add_argument(
        "--tick-rate",
        default=str(DEFAULT_TICK_RATE),
        help="Physics updates per second (default: 240)",
    )
    parser.add_argument(
        "--gravity",
        default=None,
        help="Gravity in length units per tick squared (default: 9.8 / tick rate)",
    )
    parser.add_argument("--width", default=str(INITIAL_SCREEN_SIZE[0]), help="Initial screen width")
    parser.add_argument("--height", default=str(INITIAL_SCREEN_SIZE[1]), help="Initial screen height")
    parser.add_argument("--seed", default=None, help="Seed for the random generator")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def _parse_size(raw: str) -> int:
    try:
        size = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid pendulum count %r, using %d", raw, DEFAULT_SIZE)
        return DEFAULT_SIZE
    if size < 0:
        logger.warning("Negative pendulum count %r, using %d", raw, DEFAULT_SIZE)
        return DEFAULT_SIZE
    return size


def _parse_positive_float(raw: str, default: float, name: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid %s %r, using %s", name, raw, default)
        return default
    if not math.isfinite(value) or value <= 0.0:
        logger.warning("Out of range %s %r, using %s", name, raw, default)
        return default
    return value


def _parse_seed(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid seed %r, using a random seed", raw)
        return None


def parse_config(argv: Optional[Sequence[str]] = None) -> Config:
    """Parse arguments into a Config. Bad values fall back to defaults, never raise."""
    try:
        args, unknown = build_parser().parse_known_args(argv)
    except argparse.ArgumentError as exc:
        logger.warning("Invalid arguments (%s), using defaults", exc)
        return Config()
    if unknown:
        logger.warning("Ignoring unknown arguments: %s", " ".join(unknown))

    tick_rate = _parse_positive_float(args.tick_rate, DEFAULT_TICK_RATE, "tick rate")
    gravity = gravity_per_tick(tick_rate)
    if args.gravity is not None:
        gravity = _parse_positive_float(args.gravity, gravity, "gravity")

    return Config(
        size=_parse_size(args.size),
        show_trail=args.show_trail == "true",
        tick_rate=tick_rate,
        gravity=gravity,
        width=max(MIN_SCREEN_SIZE, _parse_positive_float(args.width, INITIAL_SCREEN_SIZE[0], "width")),
        height=max(MIN_SCREEN_SIZE, _parse_positive_float(args.height, INITIAL_SCREEN_SIZE[1], "height")),
        seed=_parse_seed(args.seed),
        log_level=args.log_level,
    )
