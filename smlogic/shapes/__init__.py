"""Vanilla unit catalog."""

from smlogic.shapes.block import BlockBody, BlockType
from smlogic.shapes.gate import Gate, GateMode
from smlogic.shapes.timer import Timer

__all__ = ["BlockBody", "BlockType", "Gate", "GateMode", "Timer"]
