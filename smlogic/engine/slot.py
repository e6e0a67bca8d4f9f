"""Slots: the addressable interface surfaces of a scheme."""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from smlogic.engine.constants import WHOLE_SLOT_SECTOR
from smlogic.engine.errors import SectorNameTakenError, SectorOutOfBoundsError
from smlogic.utils.geometry import Bounds, Point, as_bounds, is_box_in_bounds
from smlogic.utils.map3d import Map3D

logger = logging.getLogger(__name__)


class SlotSide(str, enum.Enum):
    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class SlotSector:
    """Named box inside a slot, usable as a connection endpoint."""

    pos: Point
    bounds: Bounds
    kind: str


class Slot:
    """Grid of abstract points, each mapped to zero or more unit indices.

    Indices are local to the owning scheme until the combiner shifts them by
    the scheme's global offset.
    """

    def __init__(
        self,
        name: str,
        kind: str,
        size: Bounds,
        shape_map: Map3D[list[int]] | None = None,
        sectors: dict[str, SlotSector] | None = None,
    ) -> None:
        self.name = name
        self.kind = kind
        self.size = as_bounds(size)
        if shape_map is None:
            shape_map = Map3D.filled(self.size, list)
        elif shape_map.size != self.size:
            raise ValueError(f"Shape map size {shape_map.size} differs from slot size {self.size}")
        self.shape_map = shape_map
        self._sectors: dict[str, SlotSector] = {}
        for sector_name, sector in (sectors or {}).items():
            self.bind_sector(sector_name, sector)

    @classmethod
    def point(cls, name: str, kind: str, shape_id: int) -> Slot:
        """A 1x1x1 slot addressing a single unit."""
        return cls(name, kind, (1, 1, 1), Map3D((1, 1, 1), [[shape_id]]))

    @property
    def sectors(self) -> dict[str, SlotSector]:
        return dict(self._sectors)

    def get_point(self, point: Point) -> list[int]:
        """Unit indices behind ``point``; empty when unconnected or outside."""
        ids = self.shape_map.get(point)
        return ids if ids is not None else []

    def get_sector(self, name: str) -> SlotSector | None:
        if name == WHOLE_SLOT_SECTOR:
            return SlotSector((0, 0, 0), self.size, self.kind)
        return self._sectors.get(name)

    def bind_sector(self, name: str, sector: SlotSector) -> None:
        if name == WHOLE_SLOT_SECTOR or name in self._sectors:
            raise SectorNameTakenError(self.name, name)
        if not is_box_in_bounds(sector.pos, sector.bounds, self.size):
            raise SectorOutOfBoundsError(self.name, name, sector.pos, sector.bounds, self.size)
        self._sectors[name] = sector

    def shape_was_removed(self, shape_id: int, offset: int = -1) -> None:
        """Renumber after unit ``shape_id`` was deleted from the owning scheme.

        References to the removed unit are dropped; every greater index moves
        by ``offset``.
        """
        for point, ids in self.shape_map.items():
            if not ids:
                continue
            self.shape_map.set(
                point,
                [i + offset if i > shape_id else i for i in ids if i != shape_id],
            )

    def remap_shapes(self, remap: Sequence[int | None]) -> None:
        """Apply an old-index -> new-index table; ``None`` drops the reference."""
        for point, ids in self.shape_map.items():
            if not ids:
                continue
            self.shape_map.set(point, [remap[i] for i in ids if remap[i] is not None])

    def connected_ids(self) -> set[int]:
        found: set[int] = set()
        for ids in self.shape_map.values():
            found.update(ids)
        return found

    def __repr__(self) -> str:
        return f"Slot({self.name!r}, kind={self.kind!r}, size={self.size}, sectors={len(self._sectors)})"
