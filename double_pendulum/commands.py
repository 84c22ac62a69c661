from __future__ import annotations

import logging
from typing import Tuple

from double_pendulum.controller import SimulationController

logger = logging.getLogger(__name__)

SPAWN = "c"
RESET = "r"
TOGGLE_TRAIL = "t"
QUIT = "q"

KEY_BINDINGS = {
    SPAWN: "New pendulum",
    RESET: "Reset",
    TOGGLE_TRAIL: "Toggle trail",
    QUIT: "Quit",
}


def handle_command(controller: SimulationController, key: str) -> bool:
    """Apply the command bound to `key`. Returns False when quit was requested.

    Unknown keys are ignored.
    """
    key = (key or "").strip().lower()
    if key == SPAWN:
        controller.spawn()
    elif key == RESET:
        controller.reset()
    elif key == TOGGLE_TRAIL:
        controller.toggle_trail()
    elif key == QUIT:
        logger.info("Quit requested")
        return False
    return True


def handle_resize(controller: SimulationController, width: float, height: float) -> Tuple[float, float]:
    """Move the rendering center to the middle of the new screen size."""
    center = (width / 2.0, height / 2.0)
    controller.set_center(center)
    return center
