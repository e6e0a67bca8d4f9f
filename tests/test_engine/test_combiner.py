"""Tests for the combiner: flattening, wiring, diagnostics and fatal checks."""

import pytest

from smlogic.engine.bind import Bind, TargetSchemeMissing, TargetSectorMissing, TargetSlotMissing
from smlogic.engine.combiner import Combiner
from smlogic.engine.config import CompileConfig, get_default_config
from smlogic.engine.connection import shift
from smlogic.engine.errors import (
    CombinerConsumedError,
    CombinerErrors,
    ConnectionsOverflowError,
    InvalidNameError,
    PassTargetError,
    SchemeNameTakenError,
    SchemesNotPlacedError,
    SlotNameTakenError,
)
from smlogic.engine.positioner import ManualPos, ManualPosError, Positioner
from smlogic.engine.scheme import Scheme
from smlogic.engine.shape import Shape
from smlogic.engine.slot import Slot
from smlogic.presets.basic import shapes_cube
from smlogic.shapes.block import BlockBody, BlockType
from smlogic.shapes.gate import Gate, GateMode
from smlogic.shapes.timer import Timer
from smlogic.utils.rot import Rot
from tests.conftest import gate, two_gate_chain


def test_chain_compiles(chain):
    scheme, invalid = chain.compile()
    assert invalid.is_empty()
    assert scheme.shapes_count() == 2
    assert scheme.shapes[0][2].out_conns == [1]
    assert scheme.shapes[1][2].out_conns == []
    assert scheme.input("in").get_point((0, 0, 0)) == [0]
    assert scheme.output("out").get_point((0, 0, 0)) == [1]


def test_flatten_in_insertion_order():
    c = Combiner.pos_manual()
    c.add("z", Gate(GateMode.AND))
    c.add("a", Timer(3))
    c.pos.place_iter([("z", (0, 0, 0)), ("a", (1, 0, 0))])
    scheme, _ = c.compile()
    assert c.schemes() == ["z", "a"]
    assert isinstance(scheme.shapes[0][2].base, Gate)
    assert isinstance(scheme.shapes[1][2].base, Timer)


def test_sub_scheme_placed_by_bounding_corner():
    c = Combiner.pos_manual()
    c.add("pair", shapes_cube((2, 1, 1), Gate(GateMode.OR)).rotate((0, 2, 0)))
    c.pos.place("pair", (10, 0, 0))
    scheme, _ = c.compile()
    # the rotated pair spans x = -1..0, its corner lands on (10, 0, 0)
    assert sorted(pos for pos, _, _ in scheme.shapes) == [(10, 0, 0), (11, 0, 0)]


def test_placement_rotation_reaches_units():
    c = Combiner.pos_manual()
    c.add("t", Timer(0))
    c.pos.place_last((5, 0, 0)).rotate_last((1, 0, 0))
    scheme, _ = c.compile()
    pos, rot, _ = scheme.shapes[0]
    assert pos == (5, 0, 0)
    assert rot == Rot(1, 0, 0)
    assert scheme.calculate_bounds() == ((5, -1, 0), (1, 2, 1))


def test_nested_scheme_connections_are_shifted():
    inner, _ = two_gate_chain().compile()
    c = Combiner.pos_manual()
    c.add("x", Gate(GateMode.OR))
    c.add("chain", inner)
    c.pos.place("x", (0, 0, 0)).place("chain", (1, 0, 0))
    c.connect("x", "chain/in")
    scheme, invalid = c.compile()
    assert invalid.is_empty()
    assert [shape.out_conns for _, _, shape in scheme.shapes] == [[1], [2], []]
    assert [pos for pos, _, _ in scheme.shapes] == [(0, 0, 0), (1, 0, 0), (2, 0, 0)]


def test_added_copies_are_independent():
    c = Combiner.pos_manual()
    g = gate()
    c.add_mul(["a", "b"], g)
    c.pos.place("a", (0, 0, 0)).place("b", (1, 0, 0))
    c.connect("a", "b")
    scheme, _ = c.compile()
    assert scheme.shapes[0][2].out_conns == [1]
    assert scheme.shapes[1][2].out_conns == []
    assert g.shapes[0][2].out_conns == []


def test_dim_connection():
    c = Combiner.pos_manual()
    c.add("g", Gate(GateMode.OR))
    c.add("cube", shapes_cube((4, 1, 1), Gate(GateMode.AND)))
    c.pos.place("g", (0, 0, 0)).place("cube", (0, 1, 0))
    c.dim("g", "cube", (True, False, False))
    scheme, _ = c.compile()
    assert scheme.shapes[0][2].out_conns == [1, 2, 3, 4]


def test_shift_connection_between_cubes():
    c = Combiner.pos_manual()
    c.add_mul(["src", "dst"], shapes_cube((3, 1, 1), Gate(GateMode.OR)))
    c.pos.place("src", (0, 0, 0)).place("dst", (0, 1, 0))
    c.custom("src", "dst", shift((1, 0, 0)))
    scheme, _ = c.compile()
    assert [scheme.shapes[i][2].out_conns for i in range(3)] == [[4], [5], []]


def test_sector_paths():
    c = Combiner.pos_manual()
    c.add_mul(["src", "dst"], shapes_cube((3, 1, 1), Gate(GateMode.OR)))
    c.pos.place("src", (0, 0, 0)).place("dst", (0, 1, 0))
    c.connect("src/_/0_0_0", "dst/_/2_0_0")
    scheme, invalid = c.compile()
    assert invalid.is_empty()
    assert scheme.shapes[0][2].out_conns == [5]


def test_unplaced_scheme_aborts_compile():
    c = Combiner.pos_manual()
    c.add("a", Gate(GateMode.OR))
    c.add("b", Gate(GateMode.OR))
    c.pos.place("a", (0, 0, 0))
    with pytest.raises(ManualPosError) as exc_info:
        c.compile()
    assert list(exc_info.value.unplaced) == ["b"]


def test_consumed_after_compile(chain):
    chain.compile()
    with pytest.raises(CombinerConsumedError):
        chain.compile()
    with pytest.raises(CombinerConsumedError):
        chain.add("c", Gate(GateMode.OR))
    with pytest.raises(CombinerConsumedError):
        chain.connect("a", "b")


def test_invalid_scheme_names():
    c = Combiner.pos_manual()
    with pytest.raises(InvalidNameError):
        c.add("", gate())
    with pytest.raises(InvalidNameError):
        c.add("a/b", gate())
    c.add("a", gate())
    with pytest.raises(SchemeNameTakenError) as exc_info:
        c.add("a", Gate(GateMode.AND))
    assert exc_info.value.failed_to_add.shapes_count() == 1
    # builder errors are value errors too
    assert isinstance(exc_info.value, ValueError)


def test_add_iter_reports_all_failures():
    c = Combiner.pos_manual()
    g = gate()
    with pytest.raises(CombinerErrors) as exc_info:
        c.add_iter([("a", g), ("a", g), ("", g), ("b", g)])
    assert [type(e) for e in exc_info.value.errors] == [SchemeNameTakenError, InvalidNameError]
    assert c.schemes() == ["a", "b"]


def test_slot_names():
    c = Combiner.pos_manual()
    c.bind_input(Bind("x", "bit", (1, 1, 1)))
    c.bind_output(Bind("x", "bit", (1, 1, 1)))
    with pytest.raises(SlotNameTakenError):
        c.bind_input(Bind("x", "bit", (1, 1, 1)))
    with pytest.raises(InvalidNameError):
        c.bind_output(Bind("a/b", "bit", (1, 1, 1)))


def test_unresolved_references_are_collected(chain):
    chain.connect("a", "missing")
    chain.connect("nope", "b")
    chain.connect("a/x", "b/_/s")
    chain.bind_input(Bind("bad_in", "bit", (1, 1, 1)).connect_full("zzz"))
    chain.bind_output(Bind("bad_out", "bit", (1, 1, 1)).connect_full("a/q"))
    scheme, invalid = chain.compile()

    assert invalid.count() == 5
    assert [type(r) for r in invalid.connections[0].reasons] == [TargetSchemeMissing]
    assert invalid.connections[1].case.from_path == "nope"
    assert [type(r) for r in invalid.connections[2].reasons] == [TargetSlotMissing, TargetSectorMissing]
    assert list(invalid.inputs) == ["bad_in"]
    assert isinstance(invalid.outputs["bad_out"][0], TargetSlotMissing)
    assert len(invalid.describe()) == 5
    # the valid parts still compile
    assert scheme.shapes[0][2].out_conns == [1]
    assert scheme.input("bad_in").get_point((0, 0, 0)) == []


def test_sources_resolve_in_outputs():
    c = Combiner.pos_manual()
    c.add("blk", BlockBody(BlockType.GLASS))
    c.add("g", Gate(GateMode.OR))
    c.pos.place("blk", (0, 0, 0)).place("g", (1, 0, 0))
    c.connect("blk", "g")
    c.connect("g", "blk")
    _, invalid = c.compile()
    assert [type(i.reasons[0]) for i in invalid.connections] == [TargetSlotMissing, TargetSlotMissing]


def test_pass_whole_slot_copies_sectors():
    c = Combiner.pos_manual()
    c.add("c", shapes_cube((4, 1, 1), Gate(GateMode.OR)))
    c.pos.place_last((0, 0, 0))
    c.pass_input("in", "c/_")
    c.pass_output("sum", "c/_", new_kind="number")
    scheme, invalid = c.compile()
    assert invalid.is_empty()

    inp = scheme.input("in")
    assert inp.kind == "binary"
    assert inp.size == (4, 1, 1)
    assert [inp.get_point((x, 0, 0)) for x in range(4)] == [[0], [1], [2], [3]]
    assert inp.get_sector("3_0_0").kind == "bit"
    assert scheme.output("sum").kind == "number"


def test_pass_sector():
    c = Combiner.pos_manual()
    c.add("c", shapes_cube((4, 1, 1), Gate(GateMode.OR)))
    c.pos.place_last((0, 0, 0))
    c.pass_input("bit", "c/_/2_0_0")
    scheme, _ = c.compile()
    slot = scheme.input("bit")
    assert slot.size == (1, 1, 1)
    assert slot.kind == "bit"
    assert slot.get_point((0, 0, 0)) == [2]
    assert slot.sectors == {}


def test_pass_errors():
    c = Combiner.pos_manual()
    c.add("c", shapes_cube((2, 1, 1), Gate(GateMode.OR)))
    c.add("blk", BlockBody(BlockType.GLASS))
    for path in ("", "/x", "c", "c/", "c//2_0_0", "missing/_", "c/nope", "c/_/nope", "blk/_"):
        with pytest.raises(PassTargetError):
            c.pass_input("in", path)
    with pytest.raises(InvalidNameError):
        c.pass_output("", "c/_")


def _overflowing(config: CompileConfig) -> Combiner:
    c = Combiner(ManualPos(), config)
    c.add("src", Gate(GateMode.OR))
    c.add("dst", shapes_cube((3, 1, 1), Gate(GateMode.AND)))
    c.pos.place("src", (0, 0, 0)).place("dst", (0, 1, 0))
    c.dim("src", "dst", (True, False, False))
    return c


def test_connections_overflow():
    with pytest.raises(ConnectionsOverflowError) as exc_info:
        _overflowing(CompileConfig(max_connections=2)).compile()
    error = exc_info.value
    assert error.overflowing == {0: 3}
    assert error.inputs == ["src/_"]
    assert error.outputs == ["src/_"]
    assert "2" in error.message


def test_connections_overflow_check_can_be_disabled():
    c = _overflowing(CompileConfig(max_connections=2)).check_connections_overflow(False)
    scheme, _ = c.compile()
    assert len(scheme.shapes[0][2].out_conns) == 3


def test_default_config_is_copied():
    c = Combiner.pos_manual()
    assert c.config == get_default_config()
    assert c.config is not get_default_config()
    c.check_connections_overflow(False)
    assert get_default_config().check_connections_overflow


def test_duplicate_name_keeps_first():
    c = Combiner.pos_manual()
    c.add("a", Gate(GateMode.AND))
    with pytest.raises(SchemeNameTakenError):
        c.add("a", Timer(1))
    c.pos.place("a", (0, 0, 0))
    scheme, _ = c.compile()
    assert scheme.shapes_count() == 1
    assert scheme.shapes[0][2].base.mode is GateMode.AND


def test_connect_iter_wires_every_pair():
    c = Combiner.pos_manual()
    c.add_mul(["a", "b", "out"], gate())
    c.pos.place_iter([("a", (0, 0, 0)), ("b", (1, 0, 0)), ("out", (2, 0, 0))])
    c.connect_iter(["a", "b"], ["out"])
    scheme, invalid = c.compile()
    assert invalid.is_empty()
    assert [shape.out_conns for _, _, shape in scheme.shapes] == [[2], [2], []]


class _PlacesOnly(Positioner):
    def __init__(self, *names: str) -> None:
        self.names = names

    def arrange(self, schemes: dict[str, Scheme]) -> dict:
        return {name: ((0, 0, 0), Rot.identity(), schemes[name]) for name in self.names}


def test_positioner_missing_names_abort_compile():
    c = Combiner(_PlacesOnly("b"))
    c.add_iter([("a", gate()), ("b", gate()), ("c", gate())])
    with pytest.raises(SchemesNotPlacedError) as exc_info:
        c.compile()
    assert exc_info.value.missing == ["a", "c"]


def test_literal_with_repeated_shape_wires_one_unit():
    shape = Shape(Gate(GateMode.OR))
    literal = Scheme(
        [((0, 0, 0), Rot.identity(), shape), ((1, 0, 0), Rot.identity(), shape)],
        inputs=[Slot.point("_", "bit", 0)],
        outputs=[Slot.point("_", "bit", 1)],
    )
    c = Combiner.pos_manual()
    c.add("src", gate())
    c.add("lit", literal)
    c.pos.place("src", (0, 1, 0)).place("lit", (0, 0, 0))
    c.connect("lit", "src")
    scheme, invalid = c.compile()
    assert invalid.is_empty()
    assert [s.out_conns for _, _, s in scheme.shapes] == [[], [], [0]]
