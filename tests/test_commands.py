import random

from double_pendulum.commands import handle_command, handle_resize
from double_pendulum.controller import SimulationController


def _controller():
    return SimulationController.new(size=2, rng=random.Random(0))


def test_spawn_reset_toggle_keys():
    controller = _controller()
    assert handle_command(controller, "c") is True
    assert len(controller.bodies) == 3
    assert handle_command(controller, "R") is True
    assert len(controller.bodies) == 1
    assert handle_command(controller, "t") is True
    assert controller.show_trail is True


def test_quit_key():
    controller = _controller()
    assert handle_command(controller, "q") is False
    assert len(controller.bodies) == 2


def test_unknown_key_is_ignored():
    controller = _controller()
    assert handle_command(controller, "x") is True
    assert handle_command(controller, "") is True
    assert len(controller.bodies) == 2
    assert controller.show_trail is False


def test_resize_moves_center_only():
    controller = _controller()
    states = [(b.p1, b.p2) for b in controller.bodies]
    assert handle_resize(controller, 800.0, 600.0) == (400.0, 300.0)
    assert controller.center == (400.0, 300.0)
    assert [(b.p1, b.p2) for b in controller.bodies] == states
