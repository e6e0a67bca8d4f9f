"""Scheme: a compiled circuit fragment with named input and output slots.

Positions follow the center-of-first-cell convention: a unit at ``pos`` with
rotation ``rot`` and size ``s`` occupies the cells ``pos + rot(0..s-1)``, so
rotating a unit never moves the cell it is anchored to. Bounding boxes,
disassembly and the wire-format position offsets all rely on this.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable
from typing import Any

from smlogic.engine.constants import DEFAULT_SLOT, DEFAULT_SLOT_KIND
from smlogic.engine.shape import Shape, ShapeBase
from smlogic.engine.slot import Slot
from smlogic.models.blueprint import Blueprint
from smlogic.utils.geometry import Bounds, Point, add, as_point, fold_max, fold_min, sub
from smlogic.utils.palette import input_color, output_color
from smlogic.utils.rot import Rot

logger = logging.getLogger(__name__)

ShapeEntry = tuple[Point, Rot, Shape]


def find_slot(name: str, slots: Iterable[Slot]) -> Slot | None:
    for slot in slots:
        if slot.name == name:
            return slot
    return None


def _occupied_box(pos: Point, rot: Rot, size: Bounds) -> tuple[Point, Point]:
    """Inclusive min/max cell of a rotated unit."""
    far = add(pos, rot.apply(tuple(max(s - 1, 0) for s in size)))
    return fold_min(pos, far), fold_max(pos, far)


class Scheme:
    def __init__(
        self,
        shapes: Iterable[tuple[Point, Rot, Shape | ShapeBase]] = (),
        inputs: Iterable[Slot] = (),
        outputs: Iterable[Slot] = (),
    ) -> None:
        self._shapes: list[ShapeEntry] = []
        seen: set[int] = set()
        for pos, rot, shape in shapes:
            shape = Shape.coerce(shape)
            # every unit owns its connection list
            if id(shape) in seen:
                shape = copy.deepcopy(shape)
            seen.add(id(shape))
            self._shapes.append((as_point(pos), Rot.coerce(rot), shape))
        self._inputs = list(inputs)
        self._outputs = list(outputs)
        for side, slots in (("input", self._inputs), ("output", self._outputs)):
            names = [slot.name for slot in slots]
            duplicates = {n for n in names if names.count(n) > 1}
            if duplicates:
                raise ValueError(f"Duplicate {side} slot names: {sorted(duplicates)}")
            for slot in slots:
                for shape_id in slot.connected_ids():
                    if not 0 <= shape_id < len(self._shapes):
                        raise ValueError(
                            f"{side.capitalize()} slot {slot.name!r} references unit {shape_id}, "
                            f"scheme has {len(self._shapes)}"
                        )
        self._bounds = self.calculate_bounds()[1]

    @classmethod
    def from_shape(cls, shape: Shape | ShapeBase) -> Scheme:
        """Wrap one unit; its default slots exist according to its capabilities."""
        shape = Shape.coerce(shape)
        inputs = [Slot.point(DEFAULT_SLOT, DEFAULT_SLOT_KIND, 0)] if shape.has_input() else []
        outputs = [Slot.point(DEFAULT_SLOT, DEFAULT_SLOT_KIND, 0)] if shape.has_output() else []
        return cls([((0, 0, 0), Rot.identity(), shape)], inputs, outputs)

    @classmethod
    def coerce(cls, value: Scheme | Shape | ShapeBase) -> Scheme:
        if isinstance(value, Scheme):
            return value
        return cls.from_shape(value)

    # --- accessors ---

    @property
    def shapes(self) -> list[ShapeEntry]:
        return list(self._shapes)

    @property
    def inputs(self) -> list[Slot]:
        return list(self._inputs)

    @property
    def outputs(self) -> list[Slot]:
        return list(self._outputs)

    def input(self, name: str = DEFAULT_SLOT) -> Slot | None:
        return find_slot(name, self._inputs)

    def output(self, name: str = DEFAULT_SLOT) -> Slot | None:
        return find_slot(name, self._outputs)

    def shapes_count(self) -> int:
        return len(self._shapes)

    @property
    def bounds(self) -> Bounds:
        return self._bounds

    def calculate_bounds(self) -> tuple[Point, Bounds]:
        """Return ``(start corner, size)``; an empty scheme is ``((0,0,0), (0,0,0))``."""
        if not self._shapes:
            return (0, 0, 0), (0, 0, 0)

        lo: Point | None = None
        hi: Point | None = None
        for pos, rot, shape in self._shapes:
            a, b = _occupied_box(pos, rot, shape.size())
            lo = a if lo is None else fold_min(lo, a)
            hi = b if hi is None else fold_max(hi, b)

        size = add(sub(hi, lo), (1, 1, 1))
        return lo, size

    def clone(self) -> Scheme:
        return copy.deepcopy(self)

    # --- transforms ---

    def rotate(self, rot: Rot | tuple[int, int, int]) -> Scheme:
        """Rotate the whole scheme about the origin; ``rot`` applies after each unit's own."""
        rot = Rot.coerce(rot)
        self._shapes = [
            (rot.apply(pos), rot.apply_to_rot(unit_rot), shape) for pos, unit_rot, shape in self._shapes
        ]
        self._bounds = self.calculate_bounds()[1]
        return self

    def disassemble(
        self, global_offset: int, pos: Point, rot: Rot
    ) -> tuple[list[ShapeEntry], list[Slot], list[Slot]]:
        """Relocate units for embedding into a parent.

        Unit positions become relative to the bounding box corner, are rotated
        by ``rot`` and moved to ``pos``; every internal connection index is
        shifted by ``global_offset``. Slots keep their local indices. The
        scheme must not be used afterwards.
        """
        start, _ = self.calculate_bounds()
        pos = as_point(pos)
        shapes: list[ShapeEntry] = []
        for unit_pos, unit_rot, shape in self._shapes:
            shape.shift_conns(global_offset)
            shapes.append((add(rot.apply(sub(unit_pos, start)), pos), rot.apply_to_rot(unit_rot), shape))
        return shapes, self._inputs, self._outputs

    # --- dead unit elimination ---

    def _used_flags(self) -> list[bool]:
        used = [shape.forcibly_used for _, _, shape in self._shapes]
        for slot in self._outputs:
            for shape_id in slot.connected_ids():
                used[shape_id] = True

        changed = True
        while changed:
            changed = False
            for i, (_, _, shape) in enumerate(self._shapes):
                if not used[i] and any(used[c] for c in shape.out_conns):
                    used[i] = True
                    changed = True
        return used

    def _apply_remap(self, remap: list[int | None]) -> None:
        kept: list[ShapeEntry] = []
        for i, entry in enumerate(self._shapes):
            if remap[i] is None:
                continue
            shape = entry[2]
            shape.out_conns = [remap[c] for c in shape.out_conns if remap[c] is not None]
            kept.append(entry)
        self._shapes = kept
        for slot in self._inputs + self._outputs:
            slot.remap_shapes(remap)
        self._bounds = self.calculate_bounds()[1]

    def filter_shapes(self, predicate: Callable[[Point, Rot, Shape], bool]) -> int:
        """Keep the units accepted by ``predicate``; returns the number removed."""
        remap: list[int | None] = []
        next_id = 0
        for pos, rot, shape in self._shapes:
            if predicate(pos, rot, shape):
                remap.append(next_id)
                next_id += 1
            else:
                remap.append(None)
        removed = len(self._shapes) - next_id
        if removed:
            self._apply_remap(remap)
        return removed

    def remove_shape(self, index: int) -> ShapeEntry:
        if not 0 <= index < len(self._shapes):
            raise IndexError(f"Unit {index} out of range for scheme of {len(self._shapes)} units")
        entry = self._shapes.pop(index)
        for _, _, shape in self._shapes:
            shape.out_conns = [c - 1 if c > index else c for c in shape.out_conns if c != index]
        for slot in self._inputs + self._outputs:
            slot.shape_was_removed(index)
        self._bounds = self.calculate_bounds()[1]
        return entry

    def remove_unused(self) -> int:
        used = self._used_flags()
        remap: list[int | None] = []
        next_id = 0
        for flag in used:
            remap.append(next_id if flag else None)
            next_id += flag
        removed = len(used) - next_id
        if removed:
            self._apply_remap(remap)
        logger.info("Removed %d unused unit(s), %d left", removed, len(self._shapes))
        return removed

    def replace_unused_with(self, placeholder: Shape | ShapeBase) -> int:
        """Swap every unused unit for a copy of ``placeholder`` at the same spot.

        The replaced unit keeps its color; connections into it and input slot
        references to it are dropped since the placeholder is inert.
        """
        placeholder = Shape.coerce(placeholder)
        used = self._used_flags()
        replaced = {i for i, flag in enumerate(used) if not flag}

        shapes: list[ShapeEntry] = []
        for i, (pos, rot, shape) in enumerate(self._shapes):
            if i in replaced:
                color = shape.color if shape.color is not None else placeholder.color
                shape = Shape(copy.deepcopy(placeholder.base), color=color, forcibly_used=shape.forcibly_used)
            else:
                shape.out_conns = [c for c in shape.out_conns if c not in replaced]
            shapes.append((pos, rot, shape))
        self._shapes = shapes

        if replaced:
            remap = [None if i in replaced else i for i in range(len(used))]
            for slot in self._inputs + self._outputs:
                slot.remap_shapes(remap)
        self._bounds = self.calculate_bounds()[1]
        logger.info("Replaced %d unused unit(s) with %r", len(replaced), placeholder.base)
        return len(replaced)

    # --- serialization ---

    def paint(self) -> dict[int, str]:
        """Per-unit colors derived from the slots reaching each unit.

        Units with an explicit color are left alone. Output colors win over
        input colors when a unit is reached by both.
        """
        painted: dict[int, str] = {}
        for color_fn, slots in ((input_color, self._inputs), (output_color, self._outputs)):
            for slot_id, slot in enumerate(slots):
                for point, ids in slot.shape_map.items():
                    for shape_id in ids:
                        if self._shapes[shape_id][2].color is None:
                            painted[shape_id] = color_fn(slot_id, point)
        return painted

    def to_blueprint(self) -> Blueprint:
        painted = self.paint()
        childs = [
            shape.build(pos, rot, i, color=painted.get(i))
            for i, (pos, rot, shape) in enumerate(self._shapes)
        ]
        return Blueprint.from_childs(childs)

    def to_json(self) -> dict[str, Any]:
        return self.to_blueprint().model_dump()

    def __repr__(self) -> str:
        return (
            f"Scheme(units={len(self._shapes)}, bounds={self._bounds}, "
            f"inputs={[s.name for s in self._inputs]}, outputs={[s.name for s in self._outputs]})"
        )
