"""Logic gate: the workhorse unit of every scheme."""

from __future__ import annotations

import enum
from typing import Any

from smlogic.engine.shape import ShapeBase, ShapeBuildData, out_conns_to_controller, sm_child
from smlogic.utils.geometry import Bounds

GATE_UUID = "9f0f56e8-2c31-4d83-996c-d00a9b296c3f"
DEFAULT_GATE_COLOR = "df7f00"


class GateMode(enum.IntEnum):
    """Gate modes, valued by their wire encoding."""

    AND = 0
    OR = 1
    XOR = 2
    NAND = 3
    NOR = 4
    XNOR = 5


class Gate(ShapeBase):
    def __init__(self, mode: GateMode) -> None:
        self.mode = GateMode(mode)

    def build(self, data: ShapeBuildData) -> dict[str, Any]:
        child = sm_child(data, GATE_UUID, DEFAULT_GATE_COLOR)
        child["controller"] = {
            "active": False,
            "id": data.id,
            "joints": None,
            "controllers": out_conns_to_controller(data.out_conns),
            "mode": int(self.mode),
        }
        return child

    def size(self) -> Bounds:
        return (1, 1, 1)

    def has_input(self) -> bool:
        return True

    def has_output(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Gate({self.mode.name})"
