"""Connection strategies: rules wiring the points of one box to another.

A strategy only sees the two box sizes, never their content, and proposes
``(start point, end point)`` pairs. It does not validate them: the caller
(bind compilation or the combiner) drops every pair that falls outside either
box. This is what lets ``ConnStraight`` between mismatched boxes or
``ConnDim`` on a non-adapted axis propose pairs that are later discarded.

Usage:
    conn = ConnDim((True, False, False))
    conn.connect((1, 1, 1), (4, 1, 1))   # one start point fanned out to 4

    # bit shift: every point connects to the one with x + 1
    conn = shift((1, 0, 0))

    # chain strategies through an intermediate box
    conn = ConnStraight().chain((8, 1, 1), ConnDim((False, True, False)))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from smlogic.utils.geometry import Bounds, Point, add, as_bounds, as_point, is_point_in_bounds, iter_points

PointPair = tuple[Point, Point]
MapFunction = Callable[[Point, Bounds, Bounds], "Point | None"]
FilterPredicate = Callable[[Point, Point], bool]


class Connection(ABC):
    @abstractmethod
    def connect(self, start: Bounds, end: Bounds) -> list[PointPair]:
        """Propose point pairs between a ``start`` box and an ``end`` box."""

    def chain(self, virtual_bounds: Bounds | None, other: Connection) -> ConnJoint:
        """Continue this strategy with ``other``.

        ``virtual_bounds`` overrides the size of the intermediate box ``other``
        starts from; ``None`` keeps the box the previous step ended in.
        """
        return ConnJoint(self).chain(virtual_bounds, other)


class ConnStraight(Connection):
    """One-to-one mapping, truncated to the smaller box on each axis."""

    def connect(self, start: Bounds, end: Bounds) -> list[PointPair]:
        size = (min(start[0], end[0]), min(start[1], end[1]), min(start[2], end[2]))
        return [(p, p) for p in iter_points(size)]

    def __repr__(self) -> str:
        return "ConnStraight()"


class ConnDim(Connection):
    """Fans every start point out along the adapted axes of the end box.

    Non-adapted coordinates are copied unchanged, so they may land outside
    ``end``; such pairs are left for the caller to drop.
    """

    def __init__(self, adapt_axes: Sequence[bool]) -> None:
        adapt_x, adapt_y, adapt_z = adapt_axes
        self.adapt_axes = (bool(adapt_x), bool(adapt_y), bool(adapt_z))

    def _ranges(self, point: Point, end: Bounds) -> list[range]:
        return [
            range(end[axis]) if self.adapt_axes[axis] else range(point[axis], point[axis] + 1)
            for axis in range(3)
        ]

    def connect(self, start: Bounds, end: Bounds) -> list[PointPair]:
        pairs: list[PointPair] = []
        for point in iter_points(start):
            x_range, y_range, z_range = self._ranges(point, end)
            for x in x_range:
                for y in y_range:
                    for z in z_range:
                        pairs.append((point, (x, y, z)))
        return pairs

    def __repr__(self) -> str:
        return f"ConnDim({self.adapt_axes})"


class ConnMap(Connection):
    """Maps each start point through ``function(point, start, end)``.

    A ``None`` result drops the point.
    """

    def __init__(self, function: MapFunction) -> None:
        self.function = function

    def connect(self, start: Bounds, end: Bounds) -> list[PointPair]:
        pairs: list[PointPair] = []
        for point in iter_points(start):
            target = self.function(point, start, end)
            if target is not None:
                pairs.append((point, as_point(target)))
        return pairs

    def __repr__(self) -> str:
        return f"ConnMap({getattr(self.function, '__name__', '?')})"


class ConnFilter(Connection):
    """Keeps only the pairs of ``inner`` accepted by ``predicate(start, end)``."""

    def __init__(self, inner: Connection, predicate: FilterPredicate) -> None:
        self.inner = inner
        self.predicate = predicate

    def connect(self, start: Bounds, end: Bounds) -> list[PointPair]:
        return [(s, e) for s, e in self.inner.connect(start, end) if self.predicate(s, e)]

    def __repr__(self) -> str:
        return f"ConnFilter({self.inner!r})"


class ConnJoint(Connection):
    """Sequential composition of strategies through intermediate boxes."""

    def __init__(self, first: Connection) -> None:
        self.steps: list[tuple[Bounds | None, Connection]] = [(None, first)]

    def chain(self, virtual_bounds: Bounds | None, other: Connection) -> ConnJoint:
        bounds = as_bounds(virtual_bounds) if virtual_bounds is not None else None
        self.steps.append((bounds, other))
        return self

    def connect(self, start: Bounds, end: Bounds) -> list[PointPair]:
        start_bounds = start
        live: list[PointPair] = [(p, p) for p in iter_points(start)]

        for i, (override, conn) in enumerate(self.steps):
            if override is not None:
                start_bounds = override

            if i + 1 < len(self.steps):
                next_override = self.steps[i + 1][0]
                end_bounds = next_override if next_override is not None else start_bounds
            else:
                end_bounds = end

            # index step pairs by their start point to thread the chain
            forward: dict[Point, list[Point]] = {}
            for s, e in conn.connect(start_bounds, end_bounds):
                if is_point_in_bounds(e, end_bounds):
                    forward.setdefault(s, []).append(e)

            live = [(origin, e) for origin, mid in live for e in forward.get(mid, ())]
            start_bounds = end_bounds

        return sorted(set(live))

    def __repr__(self) -> str:
        return f"ConnJoint({[conn for _, conn in self.steps]!r})"


def shift(offset: Point) -> ConnMap:
    """Connect every point to the point displaced by ``offset``."""
    offset = as_point(offset)

    def shifted(point: Point, start: Bounds, end: Bounds) -> Point:
        return add(point, offset)

    return ConnMap(shifted)
