"""Bind: a deferred slot description compiled against already placed schemes.

A bind records ``(local sector, target path, connection)`` entries. Compiling
resolves every target path against a namespace of ``name -> (global offset,
slots)`` and never aborts: entries whose path does not resolve are skipped
and reported one by one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from smlogic.engine.connection import Connection, ConnDim, ConnStraight, PointPair
from smlogic.engine.constants import DEFAULT_SLOT
from smlogic.engine.errors import SectorNameTakenError, SectorOutOfBoundsError
from smlogic.engine.scheme import find_slot
from smlogic.engine.slot import Slot, SlotSector, SlotSide
from smlogic.utils.geometry import (
    Bounds,
    Point,
    add,
    as_bounds,
    as_point,
    is_box_in_bounds,
    is_point_in_bounds,
    iter_points,
    split_path,
)
from smlogic.utils.map3d import Map3D

logger = logging.getLogger(__name__)

# scheme name -> (global index offset, slots of one side)
SlotNamespace = dict[str, tuple[int, list[Slot]]]


@dataclass
class BindEntry:
    sector_corner: Point
    sector_size: Bounds
    target: str
    conn: Connection


@dataclass
class TargetSchemeMissing:
    target: str
    scheme: str
    entry: BindEntry | None = None

    def describe(self) -> str:
        return f"{self.target!r}: scheme {self.scheme!r} does not exist"


@dataclass
class TargetSlotMissing:
    target: str
    scheme: str
    slot: str
    entry: BindEntry | None = None

    def describe(self) -> str:
        return f"{self.target!r}: scheme {self.scheme!r} has no slot {self.slot!r}"


@dataclass
class TargetSectorMissing:
    target: str
    scheme: str
    slot: str
    sector: str
    entry: BindEntry | None = None

    def describe(self) -> str:
        return f"{self.target!r}: slot {self.scheme}/{self.slot} has no sector {self.sector!r}"


InvalidConn = TargetSchemeMissing | TargetSlotMissing | TargetSectorMissing


@dataclass
class ResolvedSlot:
    offset: int
    slot: Slot
    sector: SlotSector


def resolve_slot_path(path: str, namespace: SlotNamespace) -> ResolvedSlot | InvalidConn:
    """Look up ``scheme[/slot[/sector]]``; a failure names the first missing part."""
    scheme_name, slot_name, sector_name = split_path(path, DEFAULT_SLOT)

    found = namespace.get(scheme_name)
    if found is None:
        return TargetSchemeMissing(path, scheme_name)
    offset, slots = found

    slot = find_slot(slot_name, slots)
    if slot is None:
        return TargetSlotMissing(path, scheme_name, slot_name)

    sector = slot.get_sector(sector_name)
    if sector is None:
        return TargetSectorMissing(path, scheme_name, slot_name, sector_name)

    return ResolvedSlot(offset, slot, sector)


def filter_pairs(
    pairs: list[PointPair],
    start: ResolvedSlot | tuple[Point, Bounds, Bounds],
    end: ResolvedSlot | tuple[Point, Bounds, Bounds],
) -> list[PointPair]:
    """Drop pairs outside either sector and lift the rest to slot coordinates.

    Each side is a resolved slot or a raw ``(sector corner, sector size, slot
    size)`` triple.
    """
    start_corner, start_size, start_slot = _sector_frame(start)
    end_corner, end_size, end_slot = _sector_frame(end)

    kept: list[PointPair] = []
    for s, e in pairs:
        if not (is_point_in_bounds(s, start_size) and is_point_in_bounds(e, end_size)):
            continue
        s, e = add(s, start_corner), add(e, end_corner)
        if is_point_in_bounds(s, start_slot) and is_point_in_bounds(e, end_slot):
            kept.append((s, e))
    return kept


def _sector_frame(side: ResolvedSlot | tuple[Point, Bounds, Bounds]) -> tuple[Point, Bounds, Bounds]:
    if isinstance(side, ResolvedSlot):
        return side.sector.pos, side.sector.bounds, side.slot.size
    return side


class Bind:
    def __init__(self, name: str, kind: str, bounds: Bounds) -> None:
        self.name = name
        self.kind = kind
        self.bounds = as_bounds(bounds)
        self.entries: list[BindEntry] = []
        self.sectors: dict[str, SlotSector] = {}

    # --- entries ---

    def custom(self, sector: tuple[Point, Bounds], target: str, conn: Connection) -> Bind:
        corner, size = sector
        self.entries.append(BindEntry(as_point(corner), as_bounds(size), target, conn))
        return self

    def connect(self, sector: tuple[Point, Bounds], target: str) -> Bind:
        return self.custom(sector, target, ConnStraight())

    def dim(self, sector: tuple[Point, Bounds], target: str, adapt_axes: tuple[bool, bool, bool]) -> Bind:
        return self.custom(sector, target, ConnDim(adapt_axes))

    def custom_full(self, target: str, conn: Connection) -> Bind:
        return self.custom(((0, 0, 0), self.bounds), target, conn)

    def connect_full(self, target: str) -> Bind:
        return self.connect(((0, 0, 0), self.bounds), target)

    def dim_full(self, target: str, adapt_axes: tuple[bool, bool, bool]) -> Bind:
        return self.dim(((0, 0, 0), self.bounds), target, adapt_axes)

    def connect_func(self, func: Callable[[int, int, int], str | None]) -> Bind:
        """Connect every point on its own to the path ``func(x, y, z)`` returns."""
        for point in iter_points(self.bounds):
            target = func(*point)
            if target is not None:
                self.connect((point, (1, 1, 1)), target)
        return self

    # --- sectors ---

    def add_sector(self, name: str, corner: Point, size: Bounds, kind: str | None = None) -> Bind:
        corner, size = as_point(corner), as_bounds(size)
        if name == "" or name in self.sectors:
            raise SectorNameTakenError(self.name, name)
        if not is_box_in_bounds(corner, size, self.bounds):
            raise SectorOutOfBoundsError(self.name, name, corner, size, self.bounds)
        self.sectors[name] = SlotSector(corner, size, kind if kind is not None else self.kind)
        return self

    def gen_point_sectors(self, kind: str, name_fn: Callable[[int, int, int], str]) -> Bind:
        """Declare a 1x1x1 sector for every point, named by ``name_fn(x, y, z)``."""
        for point in iter_points(self.bounds):
            self.add_sector(name_fn(*point), point, (1, 1, 1), kind)
        return self

    # --- compilation ---

    def compile(self, namespace: SlotNamespace, side: SlotSide) -> tuple[Slot, list[InvalidConn]]:
        shape_map: Map3D[list[int]] = Map3D.filled(self.bounds, list)
        errors: list[InvalidConn] = []

        for entry in self.entries:
            target = resolve_slot_path(entry.target, namespace)
            if not isinstance(target, ResolvedSlot):
                target.entry = entry
                errors.append(target)
                continue

            local = (entry.sector_corner, entry.sector_size, self.bounds)
            if side is SlotSide.INPUT:
                # the new slot feeds the target
                pairs = filter_pairs(entry.conn.connect(entry.sector_size, target.sector.bounds), local, target)
            else:
                # the target feeds the new slot
                pairs = [
                    (local_point, target_point)
                    for target_point, local_point in filter_pairs(
                        entry.conn.connect(target.sector.bounds, entry.sector_size), target, local
                    )
                ]

            for local_point, target_point in pairs:
                ids = target.slot.get_point(target_point)
                shape_map.get(local_point).extend(i + target.offset for i in ids)

        slot = Slot(self.name, self.kind, self.bounds, shape_map, self.sectors)
        if errors:
            logger.debug("%s bind %r: %d unresolved entries", side.value, self.name, len(errors))
        return slot, errors

    def __repr__(self) -> str:
        return f"Bind({self.name!r}, kind={self.kind!r}, bounds={self.bounds}, entries={len(self.entries)})"
