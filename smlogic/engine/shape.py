"""Leaf units: the atomic parts a scheme is made of.

A ``ShapeBase`` is the immutable kind of a part (gate mode, timer delay, block
type) and exposes only what the compiler needs: its size, whether it takes
and emits signals, and how to write itself into a blueprint. ``Shape`` wraps a
base with the mutable per-instance state: outgoing connections (global unit
indices, filled during compilation), an optional color override and the
forced-use marker respected by dead-unit elimination.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from smlogic.utils.geometry import Bounds, Point
from smlogic.utils.rot import Rot


@dataclass
class ShapeBuildData:
    out_conns: list[int]
    color: str | None
    pos: Point
    rot: Rot
    id: int


class ShapeBase(ABC):
    @abstractmethod
    def build(self, data: ShapeBuildData) -> dict[str, Any]:
        """Return the blueprint child record of this part."""

    @abstractmethod
    def size(self) -> Bounds: ...

    @abstractmethod
    def has_input(self) -> bool: ...

    @abstractmethod
    def has_output(self) -> bool: ...


class Shape:
    def __init__(self, base: ShapeBase, color: str | None = None, forcibly_used: bool = False) -> None:
        self.base = base
        self.out_conns: list[int] = []
        self.color = color
        self.forcibly_used = forcibly_used

    @classmethod
    def coerce(cls, value: Shape | ShapeBase) -> Shape:
        if isinstance(value, Shape):
            return value
        if isinstance(value, ShapeBase):
            return cls(value)
        raise TypeError(f"Expected Shape or ShapeBase, got {type(value).__name__}")

    def push_conn(self, controller_id: int) -> None:
        self.out_conns.append(controller_id)

    def extend_conn(self, controller_ids) -> None:
        self.out_conns.extend(controller_ids)

    def shift_conns(self, offset: int) -> None:
        """Move every recorded connection by ``offset`` (used when flattening)."""
        if offset:
            self.out_conns = [c + offset for c in self.out_conns]

    def set_color(self, color: str | None) -> Shape:
        self.color = color
        return self

    def force_used(self, used: bool = True) -> Shape:
        self.forcibly_used = used
        return self

    def size(self) -> Bounds:
        return self.base.size()

    def has_input(self) -> bool:
        return self.base.has_input()

    def has_output(self) -> bool:
        return self.base.has_output()

    def build(self, pos: Point, rot: Rot, id: int, color: str | None = None) -> dict[str, Any]:
        """Serialize; an explicit ``color`` is used only when no override is set."""
        data = ShapeBuildData(
            out_conns=self.out_conns,
            color=self.color if self.color is not None else color,
            pos=pos,
            rot=rot,
            id=id,
        )
        return self.base.build(data)

    def __repr__(self) -> str:
        return f"Shape({self.base!r}, out_conns={self.out_conns})"


def out_conns_to_controller(out_conns: list[int]) -> list[dict[str, int]] | None:
    if not out_conns:
        return None
    return [{"id": conn} for conn in out_conns]


def sm_child(data: ShapeBuildData, shape_id: str, default_color: str) -> dict[str, Any]:
    """Common part of every child record: color, uuid, rotation and position."""
    xaxis, zaxis, offset = data.rot.to_sm_data()
    x, y, z = (data.pos[i] + offset[i] for i in range(3))
    return {
        "color": data.color if data.color is not None else default_color,
        "shapeId": shape_id,
        "xaxis": xaxis,
        "zaxis": zaxis,
        "pos": {"x": x, "y": y, "z": z},
    }
