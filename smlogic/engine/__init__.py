"""smlogic scheme composition and wiring engine."""

from smlogic.engine.bind import Bind
from smlogic.engine.combiner import Combiner, InvalidActs
from smlogic.engine.config import CompileConfig
from smlogic.engine.connection import ConnDim, ConnFilter, ConnJoint, ConnMap, ConnStraight, Connection, shift
from smlogic.engine.positioner import ManualPos, Positioner
from smlogic.engine.scheme import Scheme
from smlogic.engine.shape import Shape, ShapeBase
from smlogic.engine.slot import Slot, SlotSector, SlotSide

__all__ = [
    "Bind",
    "Combiner",
    "InvalidActs",
    "CompileConfig",
    "Connection",
    "ConnStraight",
    "ConnDim",
    "ConnMap",
    "ConnFilter",
    "ConnJoint",
    "shift",
    "ManualPos",
    "Positioner",
    "Scheme",
    "Shape",
    "ShapeBase",
    "Slot",
    "SlotSector",
    "SlotSide",
]
