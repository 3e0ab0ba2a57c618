"""Shared fixtures: a render target that records every call made on it."""
from dataclasses import dataclass, field
from typing import Any, List, Tuple

import pytest

from display import Display, DisplayConfig, FontSpec
from hw.simulator import SimulatedTarget
from hw.target import Rect


@dataclass
class Call:
    method: str
    args: Tuple[Any, ...] = ()


class TrackedTarget(SimulatedTarget):
    """SimulatedTarget that logs calls and can be told to fail."""

    def __init__(self, size=(128, 64)):
        super().__init__(size)
        self.calls: List[Call] = []
        self.error_on_open = False
        self.error_on_close = False
        self.error_on_draw = False

    def open(self):
        self.calls.append(Call("open"))
        if self.error_on_open:
            raise OSError("mock open error")
        super().open()

    def close(self):
        self.calls.append(Call("close"))
        if self.error_on_close:
            raise OSError("mock close error")
        super().close()

    def bounds(self) -> Rect:
        self.calls.append(Call("bounds"))
        return super().bounds()

    def draw(self, region, frame, offset):
        self.calls.append(Call("draw", (region, frame, offset)))
        if self.error_on_draw:
            raise OSError("mock draw error")
        super().draw(region, frame, offset)

    def was_called(self, method: str) -> bool:
        return any(c.method == method for c in self.calls)

    def call_count(self, method: str) -> int:
        return sum(1 for c in self.calls if c.method == method)

    def last_draw_args(self):
        for c in reversed(self.calls):
            if c.method == "draw":
                return c.args
        return None


@pytest.fixture
def target():
    return TrackedTarget()


@pytest.fixture
def font():
    return FontSpec.default()


@pytest.fixture
def display(target, font):
    return Display(DisplayConfig(target=target, font=font))


@pytest.fixture
def ready(display):
    display.initialize()
    yield display
    display.close()
