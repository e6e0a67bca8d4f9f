"""Discrete 90-degree rotations (the 24 signed permutation matrices).

A ``Rot`` is built from quarter turns about the x, y and z axes, applied in
that order. Composition is matrix multiplication: ``a.apply_to_rot(b)``
rotates by ``b`` first and then by ``a``.
"""

from __future__ import annotations

import enum
from functools import lru_cache

import numpy as np
from numpy.typing import NDArray

from smlogic.utils.geometry import Bounds, Point

# (cos, sin) of 0, 90, 180 and 270 degrees
_QUARTER_TRIG = ((1, 0), (0, 1), (-1, 0), (0, -1))


def _axis_matrix(axis: int, quarter_turns: int) -> NDArray[np.int64]:
    c, s = _QUARTER_TRIG[quarter_turns % 4]
    if axis == 0:
        rows = [[1, 0, 0], [0, c, -s], [0, s, c]]
    elif axis == 1:
        rows = [[c, 0, s], [0, 1, 0], [-s, 0, c]]
    else:
        rows = [[c, -s, 0], [s, c, 0], [0, 0, 1]]
    return np.array(rows, dtype=np.int64)


class Rot:
    """One of the 24 orthogonal rotations of the integer grid."""

    __slots__ = ("_matrix",)

    def __init__(self, rot_x: int = 0, rot_y: int = 0, rot_z: int = 0) -> None:
        matrix = _axis_matrix(2, rot_z) @ _axis_matrix(1, rot_y) @ _axis_matrix(0, rot_x)
        self._set_matrix(matrix)

    def _set_matrix(self, matrix: NDArray[np.int64]) -> None:
        matrix = np.array(matrix, dtype=np.int64)
        matrix.flags.writeable = False
        self._matrix = matrix

    @classmethod
    def from_matrix(cls, matrix) -> Rot:
        m = np.array(matrix, dtype=np.int64)
        if m.shape != (3, 3) or not np.array_equal(m @ m.T, np.eye(3, dtype=np.int64)):
            raise ValueError(f"Not an orthogonal integer rotation: {m.tolist()}")
        if round(np.linalg.det(m)) != 1:
            raise ValueError(f"Matrix is a reflection, not a rotation: {m.tolist()}")
        rot = cls.__new__(cls)
        rot._set_matrix(m)
        return rot

    @classmethod
    def coerce(cls, value) -> Rot:
        """Accept a ``Rot`` or a ``(rot_x, rot_y, rot_z)`` quarter-turn triple."""
        if isinstance(value, Rot):
            return value
        rx, ry, rz = value
        return cls(int(rx), int(ry), int(rz))

    @classmethod
    def identity(cls) -> Rot:
        return cls(0, 0, 0)

    @staticmethod
    def all() -> list[Rot]:
        return list(_all_rotations())

    @property
    def matrix(self) -> NDArray[np.int64]:
        return self._matrix

    def apply(self, point: Point) -> Point:
        x, y, z = self._matrix @ np.array(point, dtype=np.int64)
        return (int(x), int(y), int(z))

    def apply_to_rot(self, other: Rot) -> Rot:
        """Compose: the result rotates by ``other`` first, then by ``self``."""
        rot = Rot.__new__(Rot)
        rot._set_matrix(self._matrix @ other._matrix)
        return rot

    def apply_to_bounds(self, bounds: Bounds) -> Bounds:
        """Rotate a box diagonal and normalize it back to non-negative extents."""
        x, y, z = self.apply(bounds)
        return (abs(x), abs(y), abs(z))

    def inverse(self) -> Rot:
        rot = Rot.__new__(Rot)
        rot._set_matrix(self._matrix.T)
        return rot

    # immutable, so copies can share the instance
    def __copy__(self) -> Rot:
        return self

    def __deepcopy__(self, memo: dict) -> Rot:
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rot):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other._matrix))

    def __hash__(self) -> int:
        return hash(tuple(int(v) for v in self._matrix.flat))

    def __repr__(self) -> str:
        return f"Rot({self._matrix.tolist()})"

    # --- target engine encoding ---

    def to_facing_orient(self) -> tuple[Facing, Orient]:
        """Find the table entry whose axes match this rotation.

        A wire record stores the part's rotated x axis and its rotated -y axis
        as signed axis numbers; the part faces along the rotated z axis.
        """
        facing = Facing.from_vector(self.apply((0, 0, 1)))
        axes = (_axis_number(self.apply((1, 0, 0))), _axis_number(self.apply((0, -1, 0))))
        for orient in Orient:
            if facing.to_data(orient)[:2] == axes:
                return facing, orient
        raise ValueError(f"No wire rotation for {self!r}")

    def to_sm_data(self) -> tuple[int, int, Point]:
        """Return ``(xaxis, zaxis, position offset)`` for a wire record."""
        facing, orient = self.to_facing_orient()
        xaxis, zaxis, dx, dy, dz = facing.to_data(orient)
        return xaxis, zaxis, (dx, dy, dz)


def _axis_number(vec: Point) -> int:
    """``(0, -1, 0)`` -> ``-2``: 1-based axis index signed by direction."""
    for i, v in enumerate(vec):
        if v:
            return (i + 1) * v
    raise ValueError(f"Not a unit axis vector: {vec}")


@lru_cache(maxsize=1)
def _all_rotations() -> tuple[Rot, ...]:
    seen: dict[Rot, None] = {}
    for rx in range(4):
        for ry in range(4):
            for rz in range(4):
                seen.setdefault(Rot(rx, ry, rz))
    return tuple(seen)


# (xaxis, zaxis, offset_x, offset_y, offset_z) indexed by facing * 4 + orient
ROTATIONS_DATA: tuple[tuple[int, int, int, int, int], ...] = (
    (1, -2, 0, 0, 0),
    (-2, -1, 1, 0, 0),
    (-1, 2, 1, -1, 0),
    (2, 1, 0, -1, 0),
    (3, -1, 1, -1, 0),
    (-1, -3, 1, -1, 1),
    (-3, 1, 0, -1, 1),
    (1, 3, 0, -1, 0),
    (3, 2, 0, -1, 0),
    (2, -3, 0, -1, 1),
    (-3, -2, 0, 0, 1),
    (-2, 3, 0, 0, 0),
    (1, 2, 0, -1, 1),
    (2, -1, 1, -1, 1),
    (-1, -2, 1, 0, 1),
    (-2, 1, 0, 0, 1),
    (3, 1, 0, 0, 0),
    (1, -3, 0, 0, 1),
    (-3, -1, 1, 0, 1),
    (-1, 3, 1, 0, 0),
    (3, -2, 1, 0, 0),
    (-2, -3, 1, 0, 1),
    (-3, 2, 1, -1, 1),
    (2, 3, 1, -1, 0),
)


class Orient(enum.IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3


class Facing(enum.IntEnum):
    """Direction the local +z axis points to after rotation."""

    POS_Z = 0
    POS_Y = 1
    POS_X = 2
    NEG_Z = 3
    NEG_Y = 4
    NEG_X = 5

    @classmethod
    def from_vector(cls, vec: Point) -> Facing:
        lookup = {
            (0, 0, 1): cls.POS_Z,
            (0, 0, -1): cls.NEG_Z,
            (0, 1, 0): cls.POS_Y,
            (0, -1, 0): cls.NEG_Y,
            (1, 0, 0): cls.POS_X,
            (-1, 0, 0): cls.NEG_X,
        }
        try:
            return lookup[tuple(vec)]
        except KeyError:
            raise ValueError(f"Not a unit axis vector: {vec}") from None

    def to_data(self, orient: Orient) -> tuple[int, int, int, int, int]:
        return ROTATIONS_DATA[int(self) * 4 + int(orient)]

    def to_rot(self) -> Rot:
        return {
            Facing.POS_X: Rot(0, 1, 0),
            Facing.POS_Y: Rot(-1, 0, 0),
            Facing.POS_Z: Rot(0, 0, 0),
            Facing.NEG_X: Rot(0, -1, 0),
            Facing.NEG_Y: Rot(1, 0, 0),
            Facing.NEG_Z: Rot(2, 0, 0),
        }[self]
