"""Tests for deferred slot binds."""

import pytest

from smlogic.engine.bind import (
    Bind,
    ResolvedSlot,
    TargetSchemeMissing,
    TargetSectorMissing,
    TargetSlotMissing,
    filter_pairs,
    resolve_slot_path,
)
from smlogic.engine.errors import SectorNameTakenError, SectorOutOfBoundsError
from smlogic.engine.slot import Slot, SlotSector, SlotSide
from smlogic.utils.map3d import Map3D

OFFSET = 5


def _namespace() -> dict:
    """One scheme ``g`` at offset 5 with a 4-wide slot mapping bit x to unit x."""
    slot = Slot("_", "binary", (4, 1, 1), Map3D((4, 1, 1), [[0], [1], [2], [3]]))
    slot.bind_sector("hi", SlotSector((2, 0, 0), (2, 1, 1), "binary"))
    return {"g": (OFFSET, [slot])}


def test_resolve_slot_path():
    ns = _namespace()
    found = resolve_slot_path("g", ns)
    assert isinstance(found, ResolvedSlot)
    assert found.offset == OFFSET
    assert found.sector.bounds == (4, 1, 1)

    assert isinstance(resolve_slot_path("x", ns), TargetSchemeMissing)
    assert isinstance(resolve_slot_path("g/res", ns), TargetSlotMissing)
    assert isinstance(resolve_slot_path("g/_/lo", ns), TargetSectorMissing)
    assert resolve_slot_path("g/_/hi", ns).sector.pos == (2, 0, 0)


def test_filter_pairs_checks_sector_then_slot():
    pairs = [((0, 0, 0), (0, 0, 0)), ((1, 0, 0), (1, 0, 0)), ((0, 0, 0), (5, 0, 0))]
    start = ((0, 0, 0), (2, 1, 1), (2, 1, 1))
    end = ((3, 0, 0), (2, 1, 1), (4, 1, 1))
    # (1, 0, 0) lifts to (4, 0, 0), outside the 4-wide end slot
    assert filter_pairs(pairs, start, end) == [((0, 0, 0), (3, 0, 0))]


def test_input_connect_full():
    slot, errors = Bind("in", "binary", (2, 1, 1)).connect_full("g").compile(_namespace(), SlotSide.INPUT)
    assert errors == []
    assert slot.name == "in"
    assert slot.get_point((0, 0, 0)) == [5]
    assert slot.get_point((1, 0, 0)) == [6]


def test_input_dim_fans_out_to_target():
    bind = Bind("in", "bit", (1, 1, 1)).dim_full("g", (True, False, False))
    slot, _ = bind.compile(_namespace(), SlotSide.INPUT)
    assert slot.get_point((0, 0, 0)) == [5, 6, 7, 8]


def test_output_dim_collects_from_target():
    bind = Bind("out", "bit", (1, 1, 1)).dim_full("g", (True, False, False))
    slot, _ = bind.compile(_namespace(), SlotSide.OUTPUT)
    assert slot.get_point((0, 0, 0)) == [5, 6, 7, 8]


def test_dim_from_single_point_on_both_sides():
    # output: the target point fans out over the local box; input: every local point collapses onto it
    ns = {"p": (0, [Slot.point("_", "bit", 9)])}
    bind = Bind("out", "binary", (3, 1, 1)).dim_full("p", (True, False, False))
    slot, _ = bind.compile(ns, SlotSide.OUTPUT)
    assert [slot.get_point((x, 0, 0)) for x in range(3)] == [[9], [9], [9]]

    bind = Bind("in", "binary", (3, 1, 1)).dim_full("p", (True, False, False))
    slot, _ = bind.compile(ns, SlotSide.INPUT)
    assert [slot.get_point((x, 0, 0)) for x in range(3)] == [[9], [9], [9]]


def test_target_sector():
    slot, _ = Bind("in", "binary", (2, 1, 1)).connect_full("g/_/hi").compile(_namespace(), SlotSide.INPUT)
    assert slot.get_point((0, 0, 0)) == [7]
    assert slot.get_point((1, 0, 0)) == [8]


def test_local_sector_entry():
    bind = Bind("in", "binary", (4, 1, 1)).connect(((2, 0, 0), (2, 1, 1)), "g")
    slot, _ = bind.compile(_namespace(), SlotSide.INPUT)
    assert slot.get_point((0, 0, 0)) == []
    assert slot.get_point((2, 0, 0)) == [5]
    assert slot.get_point((3, 0, 0)) == [6]


def test_connect_func():
    bind = Bind("in", "binary", (3, 1, 1)).connect_func(lambda x, y, z: "g" if x != 1 else None)
    assert len(bind.entries) == 2
    slot, _ = bind.compile(_namespace(), SlotSide.INPUT)
    assert slot.get_point((0, 0, 0)) == [5]
    assert slot.get_point((1, 0, 0)) == []
    # every entry is 1x1x1 and starts from the target origin
    assert slot.get_point((2, 0, 0)) == [5]


def test_unresolved_entries_are_reported():
    bind = (
        Bind("in", "bit", (1, 1, 1))
        .connect_full("nope")
        .connect_full("g/res")
        .connect_full("g/_/lo")
        .connect_full("g")
    )
    slot, errors = bind.compile(_namespace(), SlotSide.INPUT)
    assert [type(e) for e in errors] == [TargetSchemeMissing, TargetSlotMissing, TargetSectorMissing]
    assert errors[0].entry is bind.entries[0]
    assert "nope" in errors[0].describe()
    # the valid entry still applies
    assert slot.get_point((0, 0, 0)) == [5]


def test_sectors_reach_compiled_slot():
    bind = Bind("in", "binary", (4, 1, 1)).add_sector("top", (3, 0, 0), (1, 1, 1), "bit")
    slot, _ = bind.compile(_namespace(), SlotSide.INPUT)
    assert slot.get_sector("top") == SlotSector((3, 0, 0), (1, 1, 1), "bit")


def test_add_sector_errors():
    bind = Bind("in", "binary", (2, 1, 1)).add_sector("low", (0, 0, 0), (1, 1, 1))
    assert bind.sectors["low"].kind == "binary"
    with pytest.raises(SectorNameTakenError):
        bind.add_sector("low", (1, 0, 0), (1, 1, 1))
    with pytest.raises(SectorNameTakenError):
        bind.add_sector("", (1, 0, 0), (1, 1, 1))
    with pytest.raises(SectorOutOfBoundsError):
        bind.add_sector("far", (2, 0, 0), (1, 1, 1))


def test_gen_point_sectors():
    bind = Bind("in", "binary", (3, 1, 1)).gen_point_sectors("bit", lambda x, y, z: f"b{x}")
    assert sorted(bind.sectors) == ["b0", "b1", "b2"]
    assert bind.sectors["b2"].pos == (2, 0, 0)
