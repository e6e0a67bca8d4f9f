"""Combiner: builds a new scheme out of named sub-schemes.

Usage:
    c = Combiner.pos_manual()
    c.add("and", Gate(GateMode.AND))
    c.add("or", Gate(GateMode.OR))
    c.connect("and", "or")
    c.pos.place("and", (0, 0, 0))
    c.pos.place("or", (1, 0, 0))
    c.pass_input("a", "and/_")
    c.pass_output("res", "or/_")
    scheme, invalid = c.compile()

Connection paths are ``scheme[/slot[/sector]]``; pass paths need the slot.
Connections and binds are resolved only in ``compile``; paths that do not
resolve end up in the returned ``InvalidActs`` instead of raising.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from smlogic.engine.bind import (
    Bind,
    InvalidConn,
    ResolvedSlot,
    SlotNamespace,
    filter_pairs,
    resolve_slot_path,
)
from smlogic.engine.config import CompileConfig, get_default_config
from smlogic.engine.connection import Connection, ConnDim, ConnStraight
from smlogic.engine.constants import PATH_SEPARATOR, WHOLE_SLOT_SECTOR
from smlogic.engine.errors import (
    CombinerConsumedError,
    CombinerError,
    CombinerErrors,
    ConnectionsOverflowError,
    InvalidNameError,
    PassTargetError,
    SchemeNameTakenError,
    SchemesNotPlacedError,
    SlotNameTakenError,
)
from smlogic.engine.positioner import ManualPos, Positioner
from smlogic.engine.scheme import Scheme, ShapeEntry, find_slot
from smlogic.engine.shape import Shape, ShapeBase
from smlogic.engine.slot import SlotSide
from smlogic.utils.geometry import split_first_token

logger = logging.getLogger(__name__)


@dataclass
class ConnCase:
    from_path: str
    to_path: str
    conn: Connection


@dataclass
class InvalidConnection:
    case: ConnCase
    # one entry per side that failed to resolve
    reasons: list[InvalidConn]


@dataclass
class InvalidActs:
    """Everything ``compile`` could not resolve, by origin."""

    connections: list[InvalidConnection] = field(default_factory=list)
    inputs: dict[str, list[InvalidConn]] = field(default_factory=dict)
    outputs: dict[str, list[InvalidConn]] = field(default_factory=dict)

    def count(self) -> int:
        return (
            len(self.connections)
            + sum(len(v) for v in self.inputs.values())
            + sum(len(v) for v in self.outputs.values())
        )

    def is_empty(self) -> bool:
        return self.count() == 0

    def describe(self) -> list[str]:
        lines: list[str] = []
        for invalid in self.connections:
            case = invalid.case
            reasons = "; ".join(r.describe() for r in invalid.reasons)
            lines.append(f"connection {case.from_path!r} -> {case.to_path!r}: {reasons}")
        for side, binds in (("input", self.inputs), ("output", self.outputs)):
            for name, errors in binds.items():
                for error in errors:
                    lines.append(f"{side} {name!r}: {error.describe()}")
        return lines


def _check_name(name: str, what: str) -> None:
    if not name:
        raise InvalidNameError(name, f"{what} name cannot be empty")
    if PATH_SEPARATOR in name:
        raise InvalidNameError(name, f"{what} name cannot contain {PATH_SEPARATOR!r}")


class Combiner:
    def __init__(self, positioner: Positioner, config: CompileConfig | None = None) -> None:
        self._positioner = positioner
        self.config = config if config is not None else replace(get_default_config())
        self._schemes: dict[str, Scheme] = {}
        self._connections: list[ConnCase] = []
        self._inputs: list[Bind] = []
        self._outputs: list[Bind] = []
        self._consumed = False

    @classmethod
    def pos_manual(cls, config: CompileConfig | None = None) -> Combiner:
        return cls(ManualPos(), config)

    @property
    def pos(self) -> Positioner:
        return self._positioner

    def _ensure_building(self) -> None:
        if self._consumed:
            raise CombinerConsumedError()

    def check_connections_overflow(self, enabled: bool) -> Combiner:
        self._ensure_building()
        self.config.check_connections_overflow = enabled
        return self

    # --- schemes ---

    def add(self, name: str, scheme: Scheme | Shape | ShapeBase) -> Combiner:
        """Add a private copy of ``scheme`` under ``name``."""
        self._ensure_building()
        scheme = Scheme.coerce(scheme)
        _check_name(name, "Scheme")
        if name in self._schemes:
            raise SchemeNameTakenError(name, scheme)
        self._schemes[name] = scheme.clone()
        self._positioner.set_last_scheme(name)
        return self

    def add_iter(self, pairs: Iterable[tuple[str, Scheme | Shape | ShapeBase]]) -> Combiner:
        errors: list[CombinerError] = []
        for name, scheme in pairs:
            try:
                self.add(name, scheme)
            except CombinerConsumedError:
                raise
            except CombinerError as e:
                errors.append(e)
        if errors:
            raise CombinerErrors(errors)
        return self

    def add_mul(self, names: Iterable[str], scheme: Scheme | Shape | ShapeBase) -> Combiner:
        scheme = Scheme.coerce(scheme)
        return self.add_iter((name, scheme) for name in names)

    def schemes(self) -> list[str]:
        return list(self._schemes)

    # --- connections ---

    def custom(self, from_path: str, to_path: str, conn: Connection) -> Combiner:
        self._ensure_building()
        self._connections.append(ConnCase(from_path, to_path, conn))
        return self

    def connect(self, from_path: str, to_path: str) -> Combiner:
        return self.custom(from_path, to_path, ConnStraight())

    def dim(self, from_path: str, to_path: str, adapt_axes: tuple[bool, bool, bool]) -> Combiner:
        return self.custom(from_path, to_path, ConnDim(adapt_axes))

    def custom_iter(self, from_paths: Iterable[str], to_paths: Iterable[str], conn: Connection) -> Combiner:
        """Connect every path of ``from_paths`` to every path of ``to_paths``."""
        to_paths = list(to_paths)
        for from_path in from_paths:
            for to_path in to_paths:
                self.custom(from_path, to_path, conn)
        return self

    def connect_iter(self, from_paths: Iterable[str], to_paths: Iterable[str]) -> Combiner:
        return self.custom_iter(from_paths, to_paths, ConnStraight())

    # --- own slots ---

    def _bind(self, bind: Bind, side: SlotSide) -> Combiner:
        self._ensure_building()
        _check_name(bind.name, f"{side.value.capitalize()} slot")
        binds = self._inputs if side is SlotSide.INPUT else self._outputs
        if any(b.name == bind.name for b in binds):
            raise SlotNameTakenError(bind.name, side, bind)
        binds.append(bind)
        return self

    def bind_input(self, bind: Bind) -> Combiner:
        return self._bind(bind, SlotSide.INPUT)

    def bind_output(self, bind: Bind) -> Combiner:
        return self._bind(bind, SlotSide.OUTPUT)

    def _pass(self, name: str, path: str, new_kind: str | None, side: SlotSide) -> Combiner:
        self._ensure_building()
        _check_name(name, "Pass")

        def fail(tip: str) -> PassTargetError:
            return PassTargetError(name, side, path, tip, new_kind)

        scheme_name, tail = split_first_token(path)
        if not scheme_name:
            raise fail("No scheme name given, expected <scheme>/<slot>[/<sector>]")
        if not tail:
            raise fail("No slot name given, expected <scheme>/<slot>[/<sector>]")
        slot_name, sector_name = split_first_token(tail)
        if not slot_name:
            raise fail("No slot name given, expected <scheme>/<slot>[/<sector>]")
        sector_name = sector_name or WHOLE_SLOT_SECTOR

        scheme = self._schemes.get(scheme_name)
        if scheme is None:
            raise fail(f"Scheme {scheme_name!r} was not added")
        slots = scheme.inputs if side is SlotSide.INPUT else scheme.outputs
        slot = find_slot(slot_name, slots)
        if slot is None:
            raise fail(f"Scheme {scheme_name!r} has no {side.value} slot {slot_name!r}")
        sector = slot.get_sector(sector_name)
        if sector is None:
            raise fail(f"Slot {slot_name!r} has no sector {sector_name!r}")

        bind = Bind(name, new_kind if new_kind is not None else sector.kind, sector.bounds)
        target = f"{scheme_name}{PATH_SEPARATOR}{slot_name}"
        if sector_name != WHOLE_SLOT_SECTOR:
            target += f"{PATH_SEPARATOR}{sector_name}"
        bind.connect_full(target)
        if sector_name == WHOLE_SLOT_SECTOR:
            for sub_name, sub in slot.sectors.items():
                bind.add_sector(sub_name, sub.pos, sub.bounds, sub.kind)
        return self._bind(bind, side)

    def pass_input(self, name: str, path: str, new_kind: str | None = None) -> Combiner:
        """Expose a sub-scheme's input slot (or one of its sectors) as ``name``."""
        return self._pass(name, path, new_kind, SlotSide.INPUT)

    def pass_output(self, name: str, path: str, new_kind: str | None = None) -> Combiner:
        return self._pass(name, path, new_kind, SlotSide.OUTPUT)

    # --- compilation ---

    def compile(self) -> tuple[Scheme, InvalidActs]:
        """Flatten, wire and validate. The combiner cannot be used afterwards."""
        self._ensure_building()
        self._consumed = True
        start = time.perf_counter()

        placed = self._positioner.arrange(dict(self._schemes))
        missing = [name for name in self._schemes if name not in placed]
        if missing:
            raise SchemesNotPlacedError(missing)

        shapes: list[ShapeEntry] = []
        inputs_ns: SlotNamespace = {}
        outputs_ns: SlotNamespace = {}
        for name in self._schemes:
            pos, rot, scheme = placed[name]
            offset = len(shapes)
            units, inputs, outputs = scheme.disassemble(offset, pos, rot)
            shapes.extend(units)
            inputs_ns[name] = (offset, inputs)
            outputs_ns[name] = (offset, outputs)
            logger.debug("  %s: %d units at offset %d, pos %s", name, len(units), offset, pos)

        invalid = InvalidActs()
        input_slots = []
        for bind in self._inputs:
            slot, errors = bind.compile(inputs_ns, SlotSide.INPUT)
            input_slots.append(slot)
            if errors:
                invalid.inputs[bind.name] = errors
        output_slots = []
        for bind in self._outputs:
            slot, errors = bind.compile(outputs_ns, SlotSide.OUTPUT)
            output_slots.append(slot)
            if errors:
                invalid.outputs[bind.name] = errors

        for case in self._connections:
            source = resolve_slot_path(case.from_path, outputs_ns)
            target = resolve_slot_path(case.to_path, inputs_ns)
            reasons = [r for r in (source, target) if not isinstance(r, ResolvedSlot)]
            if reasons:
                invalid.connections.append(InvalidConnection(case, reasons))
                continue

            pairs = case.conn.connect(source.sector.bounds, target.sector.bounds)
            for s, e in filter_pairs(pairs, source, target):
                targets = [i + target.offset for i in target.slot.get_point(e)]
                for i in source.slot.get_point(s):
                    shapes[i + source.offset][2].extend_conn(targets)

        if self.config.check_connections_overflow:
            self._check_overflow(shapes, inputs_ns, outputs_ns)

        result = Scheme(shapes, input_slots, output_slots)

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "Compiled %d schemes into %d units (%d connections) in %.0fms",
            len(self._schemes),
            len(shapes),
            len(self._connections),
            elapsed,
        )
        if not invalid.is_empty():
            logger.warning("%d unresolved reference(s) left out of the compiled scheme", invalid.count())
        return result, invalid

    def _check_overflow(
        self,
        shapes: list[ShapeEntry],
        inputs_ns: SlotNamespace,
        outputs_ns: SlotNamespace,
    ) -> None:
        limit = self.config.max_connections
        overflowing = {
            i: len(shape.out_conns) for i, (_, _, shape) in enumerate(shapes) if len(shape.out_conns) > limit
        }
        if not overflowing:
            return

        def reaching(namespace: SlotNamespace) -> list[str]:
            paths = []
            for name, (offset, slots) in namespace.items():
                for slot in slots:
                    if any(i + offset in overflowing for i in slot.connected_ids()):
                        paths.append(f"{name}{PATH_SEPARATOR}{slot.name}")
            return paths

        raise ConnectionsOverflowError(reaching(inputs_ns), reaching(outputs_ns), limit, overflowing)
