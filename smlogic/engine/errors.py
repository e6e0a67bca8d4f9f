"""Exception hierarchy of the scheme compiler.

Construction-time mistakes raise immediately from the offending call and leave
the builder usable. Only two conditions abort ``Combiner.compile``: a failed
placement and a fan-out overflow. Unresolved paths are never raised; they are
collected into ``InvalidActs``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from smlogic.engine.bind import Bind
    from smlogic.engine.scheme import Scheme
    from smlogic.engine.slot import SlotSide
    from smlogic.utils.geometry import Bounds, Point


class SmLogicError(Exception):
    """Root of every error raised by this package."""


# --- builder errors ---


class CombinerError(SmLogicError, ValueError):
    pass


class InvalidNameError(CombinerError):
    def __init__(self, name: str, tip: str) -> None:
        self.name = name
        self.tip = tip
        super().__init__(f"Invalid name {name!r}: {tip}")


class SchemeNameTakenError(CombinerError):
    def __init__(self, name: str, failed_to_add: Scheme) -> None:
        self.name = name
        self.failed_to_add = failed_to_add
        super().__init__(f"Scheme name {name!r} was already taken")


class SlotNameTakenError(CombinerError):
    def __init__(self, name: str, side: SlotSide, failed_to_add: Bind) -> None:
        self.name = name
        self.side = side
        self.failed_to_add = failed_to_add
        super().__init__(f"{side.value.capitalize()} slot name {name!r} was already taken")


class PassTargetError(CombinerError):
    def __init__(
        self,
        pass_name: str,
        side: SlotSide,
        target: str,
        tip: str,
        new_kind: str | None = None,
    ) -> None:
        self.pass_name = pass_name
        self.side = side
        self.target = target
        self.tip = tip
        self.new_kind = new_kind
        super().__init__(f"Cannot pass {side.value} {pass_name!r} to {target!r}: {tip}")


class CombinerErrors(CombinerError):
    """Several items of a bulk call failed; the others were applied."""

    def __init__(self, errors: list[CombinerError]) -> None:
        self.errors = errors
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"{len(errors)} item(s) failed: {details}")


class CombinerConsumedError(CombinerError):
    def __init__(self) -> None:
        super().__init__("Combiner was already compiled and cannot be modified or compiled again")


# --- slot errors ---


class SlotError(SmLogicError, ValueError):
    pass


class SectorNameTakenError(SlotError):
    def __init__(self, slot_name: str, sector_name: str) -> None:
        self.slot_name = slot_name
        self.sector_name = sector_name
        if sector_name == "":
            reason = "the empty name is reserved for the whole slot"
        else:
            reason = "the name is already taken"
        super().__init__(f"Cannot add sector {sector_name!r} to slot {slot_name!r}: {reason}")


class SectorOutOfBoundsError(SlotError):
    def __init__(
        self,
        slot_name: str,
        sector_name: str,
        sector_pos: Point,
        sector_size: Bounds,
        slot_size: Bounds,
    ) -> None:
        self.slot_name = slot_name
        self.sector_name = sector_name
        self.sector_pos = sector_pos
        self.sector_size = sector_size
        self.slot_size = slot_size
        super().__init__(
            f"Sector {sector_name!r} at {sector_pos} of size {sector_size} "
            f"does not fit slot {slot_name!r} of size {slot_size}"
        )


# --- fatal compile errors ---


class CompileError(SmLogicError):
    pass


class PositionerError(CompileError):
    """The positioner could not give every scheme a placement."""


class SchemesNotPlacedError(PositionerError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Positioner returned no placement for: {', '.join(missing)}")


class ConnectionsOverflowError(CompileError):
    def __init__(
        self,
        inputs: list[str],
        outputs: list[str],
        max_connections: int,
        overflowing: dict[int, int] | None = None,
    ) -> None:
        self.inputs = inputs
        self.outputs = outputs
        self.max_connections = max_connections
        self.overflowing: dict[int, Any] = overflowing or {}
        self.message = (
            f"{len(self.overflowing)} unit(s) exceed the limit of {max_connections} "
            f"outgoing connections. Slots reaching them: inputs {inputs}, outputs {outputs}. "
            "Split the fan-out through intermediate gates or disable the check."
        )
        super().__init__(self.message)
