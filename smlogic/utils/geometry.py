"""Leaf-node geometry helpers. No engine imports.

Points are signed integer triples (used as offsets too), bounds are
non-negative integer triples describing a box size.
"""

from __future__ import annotations

from collections.abc import Iterator

Point = tuple[int, int, int]
Bounds = tuple[int, int, int]

PATH_SEPARATOR = "/"


def add(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def as_point(value) -> Point:
    """Coerce any 3-sequence of numbers into a Point tuple."""
    x, y, z = value
    return (int(x), int(y), int(z))


def as_bounds(value) -> Bounds:
    """Coerce a 3-sequence into Bounds, rejecting negative extents."""
    bounds = as_point(value)
    if min(bounds) < 0:
        raise ValueError(f"Bounds must be non-negative, got {bounds}")
    return bounds


def volume(bounds: Bounds) -> int:
    return bounds[0] * bounds[1] * bounds[2]


def is_point_in_bounds(point: Point, bounds: Bounds) -> bool:
    """True if every coordinate lies in the ``0..bound`` range."""
    return (
        0 <= point[0] < bounds[0]
        and 0 <= point[1] < bounds[1]
        and 0 <= point[2] < bounds[2]
    )


def is_box_in_bounds(corner: Point, size: Bounds, bounds: Bounds) -> bool:
    """True if the box ``corner..corner+size`` fits inside ``0..bounds``."""
    return all(
        corner[i] >= 0 and corner[i] + size[i] <= bounds[i]
        for i in range(3)
    )


def iter_points(bounds: Bounds) -> Iterator[Point]:
    """Every point of a box, x outermost, z innermost."""
    for x in range(bounds[0]):
        for y in range(bounds[1]):
            for z in range(bounds[2]):
                yield (x, y, z)


def fold_min(a: Point, b: Point) -> Point:
    return (min(a[0], b[0]), min(a[1], b[1]), min(a[2], b[2]))


def fold_max(a: Point, b: Point) -> Point:
    return (max(a[0], b[0]), max(a[1], b[1]), max(a[2], b[2]))


def split_first_token(path: str) -> tuple[str, str | None]:
    """Split at the first separator: ``"a/b/c"`` -> ``("a", "b/c")``.

    The tail is ``None`` when there is no separator at all and ``""`` when the
    path ends with one.
    """
    token, sep, tail = path.partition(PATH_SEPARATOR)
    if not sep:
        return token, None
    return token, tail


def split_path(path: str, default_slot: str) -> tuple[str, str, str]:
    """Split ``scheme[/slot[/sector]]`` into its three parts.

    A missing or empty slot falls back to ``default_slot``; a missing sector is
    ``""`` (the whole slot). The sector part keeps any further separators.
    """
    scheme, tail = split_first_token(path)
    if not tail:
        return scheme, default_slot, ""
    slot, sector = split_first_token(tail)
    return scheme, slot or default_slot, sector or ""
