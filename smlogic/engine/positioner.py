"""Positioners: give every sub-scheme of a combiner a position and rotation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from smlogic.engine.errors import PositionerError
from smlogic.engine.scheme import Scheme
from smlogic.utils.geometry import Point, as_point
from smlogic.utils.rot import Rot

logger = logging.getLogger(__name__)

Placement = tuple[Point, Rot, Scheme]


class Positioner(ABC):
    def set_last_scheme(self, name: str) -> None:
        """Called by the combiner with the name of every scheme it accepts."""

    @abstractmethod
    def arrange(self, schemes: dict[str, Scheme]) -> dict[str, Placement]:
        """Place every scheme or raise a ``PositionerError``."""


class ManualPosError(PositionerError):
    NOT_MENTIONED = "never placed"
    NO_POSITION = "rotated but never placed"

    def __init__(self, unplaced: dict[str, str]) -> None:
        self.unplaced = unplaced
        details = ", ".join(f"{name!r} ({reason})" for name, reason in unplaced.items())
        super().__init__(f"{len(unplaced)} scheme(s) have no position: {details}")


class ManualPos(Positioner):
    """Every scheme is placed by an explicit ``place`` call.

    Usage:
        pos = ManualPos()
        pos.place("adder", (0, 0, 0))
        pos.rotate("adder", Facing.NEG_X.to_rot())
    """

    def __init__(self) -> None:
        self._poses: dict[str, tuple[Point | None, Rot]] = {}
        self._last_scheme: str | None = None

    def set_last_scheme(self, name: str) -> None:
        self._last_scheme = name

    def _last(self) -> str:
        if self._last_scheme is None:
            raise LookupError("No scheme was added yet, nothing to place or rotate")
        return self._last_scheme

    def place(self, name: str, at: Point) -> ManualPos:
        _, rot = self._poses.get(name, (None, Rot.identity()))
        self._poses[name] = (as_point(at), rot)
        return self

    def place_iter(self, pairs: Iterable[tuple[str, Point]]) -> ManualPos:
        for name, at in pairs:
            self.place(name, at)
        return self

    def place_last(self, at: Point) -> ManualPos:
        return self.place(self._last(), at)

    def rotate(self, name: str, by: Rot | tuple[int, int, int]) -> ManualPos:
        """Rotate ``name`` by ``by`` on top of any rotation set before."""
        pos, rot = self._poses.get(name, (None, Rot.identity()))
        self._poses[name] = (pos, Rot.coerce(by).apply_to_rot(rot))
        return self

    def rotate_iter(self, pairs: Iterable[tuple[str, Rot | tuple[int, int, int]]]) -> ManualPos:
        for name, by in pairs:
            self.rotate(name, by)
        return self

    def rotate_last(self, by: Rot | tuple[int, int, int]) -> ManualPos:
        return self.rotate(self._last(), by)

    def arrange(self, schemes: dict[str, Scheme]) -> dict[str, Placement]:
        placed: dict[str, Placement] = {}
        unplaced: dict[str, str] = {}

        for name, scheme in schemes.items():
            pose = self._poses.get(name)
            if pose is None:
                unplaced[name] = ManualPosError.NOT_MENTIONED
            elif pose[0] is None:
                unplaced[name] = ManualPosError.NO_POSITION
            else:
                placed[name] = (pose[0], pose[1], scheme)

        if unplaced:
            raise ManualPosError(unplaced)

        stray = set(self._poses) - set(schemes)
        if stray:
            logger.debug("Ignoring placements of unknown schemes: %s", sorted(stray))
        return placed
