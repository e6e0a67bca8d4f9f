"""Dense fixed-size 3D array backed by a numpy object array."""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Iterator
from typing import Generic, TypeVar

import numpy as np

from smlogic.utils.geometry import Bounds, Point, as_bounds, is_point_in_bounds

T = TypeVar("T")


class Map3D(Generic[T]):
    """Maps every integer point of a box to one payload.

    Out-of-range lookups return ``None`` instead of wrapping around the way
    negative numpy indices would.
    """

    def __init__(self, size: Bounds, data: Iterable[T] | None = None) -> None:
        self._size = as_bounds(size)
        self._cells = np.empty(self._size, dtype=object)
        if data is not None:
            items = list(data)
            if len(items) != self._cells.size:
                raise ValueError(
                    f"Map3D of size {self._size} needs {self._cells.size} items, got {len(items)}"
                )
            # Flat data is x-fastest, matching the (x, y, z) -> x + y*X + z*X*Y layout
            for idx, item in enumerate(items):
                self._cells[self._unflatten(idx)] = item

    @classmethod
    def filled(cls, size: Bounds, factory: Callable[[], T]) -> Map3D[T]:
        """Create a map with a fresh ``factory()`` value in every cell."""
        m = cls(size)
        for idx in np.ndindex(*m._size):
            m._cells[idx] = factory()
        return m

    @classmethod
    def from_nested(cls, nested: Iterable[Iterable[Iterable[T]]]) -> Map3D[T]:
        """Build from ``nested[z][y][x]``; every row must have the same length."""
        planes = [[list(row) for row in plane] for plane in nested]
        z_size = len(planes)
        y_size = len(planes[0]) if planes else 0
        x_size = len(planes[0][0]) if y_size else 0
        data: list[T] = []
        for plane in planes:
            if len(plane) != y_size:
                raise ValueError("Inconsistent size of Y axis rows in nested data")
            for row in plane:
                if len(row) != x_size:
                    raise ValueError("Inconsistent size of X axis rows in nested data")
                data.extend(row)
        return cls((x_size, y_size, z_size), data)

    @property
    def size(self) -> Bounds:
        return self._size

    def _unflatten(self, idx: int) -> Point:
        x_size, y_size, _ = self._size
        return (idx % x_size, (idx // x_size) % y_size, idx // (x_size * y_size))

    def to_id(self, point: Point) -> int | None:
        """Flat index of a point, ``None`` when outside the map."""
        if not is_point_in_bounds(point, self._size):
            return None
        x_size, y_size, _ = self._size
        return point[0] + point[1] * x_size + point[2] * x_size * y_size

    def get(self, point: Point) -> T | None:
        if not is_point_in_bounds(point, self._size):
            return None
        return self._cells[tuple(point)]

    def set(self, point: Point, item: T) -> T | None:
        """Replace the payload at ``point``, returning the previous one."""
        if not is_point_in_bounds(point, self._size):
            raise IndexError(f"Point {point} is outside Map3D of size {self._size}")
        previous = self._cells[tuple(point)]
        self._cells[tuple(point)] = item
        return previous

    def items(self) -> Iterator[tuple[Point, T]]:
        for idx in np.ndindex(*self._size):
            yield (int(idx[0]), int(idx[1]), int(idx[2])), self._cells[idx]

    def values(self) -> Iterator[T]:
        for _, value in self.items():
            yield value

    def __deepcopy__(self, memo: dict) -> Map3D[T]:
        clone: Map3D[T] = Map3D(self._size)
        for idx in np.ndindex(*self._size):
            clone._cells[idx] = copy.deepcopy(self._cells[idx], memo)
        return clone

    def __len__(self) -> int:
        return int(self._cells.size)

    def __repr__(self) -> str:
        return f"Map3D(size={self._size})"
