"""Building blocks used by the other presets."""

from __future__ import annotations

import copy

from smlogic.engine.constants import DEFAULT_SLOT
from smlogic.engine.scheme import Scheme
from smlogic.engine.shape import Shape, ShapeBase
from smlogic.engine.slot import Slot, SlotSector
from smlogic.presets.registry import preset
from smlogic.shapes.gate import Gate, GateMode
from smlogic.utils.geometry import Bounds, as_bounds, iter_points
from smlogic.utils.map3d import Map3D
from smlogic.utils.rot import Rot


def point_sector_name(x: int, y: int, z: int) -> str:
    return f"{x}_{y}_{z}"


def shapes_cube(
    bounds: Bounds,
    shape: Shape | ShapeBase,
    rot: Rot | tuple[int, int, int] = (0, 0, 0),
    kind: str = "binary",
) -> Scheme:
    """A box of identical units, one per point, each turned by ``rot`` in place.

    The default input and output slots cover the whole box; every point is
    also a sector named ``x_y_z``.
    """
    bounds = as_bounds(bounds)
    rot = Rot.coerce(rot)
    shape = Shape.coerce(shape)

    points = list(iter_points(bounds))
    shapes = [(point, rot, copy.deepcopy(shape)) for point in points]

    def make_slot() -> Slot:
        shape_map: Map3D[list[int]] = Map3D.filled(bounds, list)
        for i, point in enumerate(points):
            shape_map.set(point, [i])
        slot = Slot(DEFAULT_SLOT, kind, bounds, shape_map)
        for point in points:
            bind_point_sector(slot, point)
        return slot

    inputs = [make_slot()] if shape.has_input() else []
    outputs = [make_slot()] if shape.has_output() else []
    return Scheme(shapes, inputs, outputs)


def bind_point_sector(slot: Slot, point: tuple[int, int, int], kind: str = "bit") -> None:
    slot.bind_sector(point_sector_name(*point), SlotSector(point, (1, 1, 1), kind))


@preset(
    name="gate_cube",
    params={"x": 8, "y": 1, "z": 1, "mode": "OR"},
    description="Box of identical logic gates with per-point sectors",
)
def gate_cube(x: int, y: int, z: int, mode: str) -> Scheme:
    try:
        gate_mode = GateMode[mode.upper()]
    except KeyError:
        raise ValueError(f"Unknown gate mode {mode!r}, expected one of {[m.name for m in GateMode]}") from None
    return shapes_cube((x, y, z), Gate(gate_mode))
