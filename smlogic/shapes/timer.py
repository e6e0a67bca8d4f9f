"""Timer: delays its input by a fixed number of game ticks."""

from __future__ import annotations

from typing import Any

from smlogic.engine.constants import TICKS_PER_SECOND
from smlogic.engine.shape import ShapeBase, ShapeBuildData, out_conns_to_controller, sm_child
from smlogic.utils.geometry import Bounds

TIMER_UUID = "8f7fd0e7-c46e-4944-a414-7ce2437bb30f"
DEFAULT_TIMER_COLOR = "df7f00"


class Timer(ShapeBase):
    """Usage:
        Timer(410)               # 10 seconds and 10 ticks
        Timer.from_time(10, 10)  # same delay
    """

    def __init__(self, ticks: int) -> None:
        if ticks < 0:
            raise ValueError(f"Timer delay cannot be negative, got {ticks}")
        self.seconds, self.ticks = divmod(ticks, TICKS_PER_SECOND)

    @classmethod
    def from_time(cls, seconds: int, ticks: int) -> Timer:
        return cls(seconds * TICKS_PER_SECOND + ticks)

    @property
    def total_ticks(self) -> int:
        return self.seconds * TICKS_PER_SECOND + self.ticks

    def build(self, data: ShapeBuildData) -> dict[str, Any]:
        child = sm_child(data, TIMER_UUID, DEFAULT_TIMER_COLOR)
        child["controller"] = {
            "active": False,
            "id": data.id,
            "joints": None,
            "controllers": out_conns_to_controller(data.out_conns),
            "seconds": self.seconds,
            "ticks": self.ticks,
        }
        return child

    def size(self) -> Bounds:
        return (1, 1, 2)

    def has_input(self) -> bool:
        return True

    def has_output(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Timer(seconds={self.seconds}, ticks={self.ticks})"
