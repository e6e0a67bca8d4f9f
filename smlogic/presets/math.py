"""Arithmetic presets: adders and an inverter.

Slot conventions: multi-bit slots are ``(word_size, 1, 1)`` with bit ``x`` at
``(x, 0, 0)``, kind ``binary``, and a 1x1x1 sector named after each bit index.
"""

from __future__ import annotations

from smlogic.engine.bind import Bind
from smlogic.engine.combiner import Combiner
from smlogic.engine.connection import shift
from smlogic.engine.scheme import Scheme
from smlogic.presets.basic import shapes_cube
from smlogic.presets.registry import compile_logged, preset
from smlogic.shapes.gate import Gate, GateMode
from smlogic.utils.rot import Facing


def _bit_name(x: int, y: int, z: int) -> str:
    return str(x)


def _word_bind(name: str, word_size: int) -> Bind:
    bind = Bind(name, "binary", (word_size, 1, 1))
    bind.gen_point_sectors("bit", _bit_name)
    return bind


def _check_word_size(word_size: int) -> None:
    if word_size < 1:
        raise ValueError(f"Word size must be positive, got {word_size}")


@preset(name="adder_section", description="One-bit full adder: inputs a, b, _ (carry), outputs res, _ (carry)")
def adder_section() -> Scheme:
    s = Combiner.pos_manual()

    s.add_mul(["a", "b", "_"], Gate(GateMode.OR))
    s.add_mul(["and_1", "and_2", "and_3"], Gate(GateMode.AND))
    s.add("res", Gate(GateMode.XOR))

    s.pos.place_iter([
        ("a", (0, 0, 0)),
        ("b", (0, 0, 1)),
        ("_", (2, 0, 1)),
        ("and_1", (1, 0, 0)),
        ("and_2", (1, 0, 1)),
        ("and_3", (2, 0, 0)),
        ("res", (3, 0, 0)),
    ])
    s.pos.rotate("a", Facing.NEG_X.to_rot())
    s.pos.rotate("b", Facing.NEG_X.to_rot())
    s.pos.rotate("res", Facing.POS_X.to_rot())

    for name in ("a", "b", "_"):
        s.bind_input(Bind(name, "bit", (1, 1, 1)).connect_full(name))

    s.connect_iter(["a", "b", "_"], ["res"])
    s.connect_iter(["a"], ["and_1", "and_2"])
    s.connect_iter(["b"], ["and_2", "and_3"])
    s.connect_iter(["_"], ["and_3", "and_1"])

    carry = Bind("_", "bit", (1, 1, 1))
    carry.connect_full("and_1").connect_full("and_2").connect_full("and_3")
    s.bind_output(carry)
    s.bind_output(Bind("res", "bit", (1, 1, 1)).connect_full("res"))

    return compile_logged(s, "adder_section")


@preset(name="adder", params={"word_size": 8}, description="Ripple-carry adder built from adder sections")
def adder(word_size: int) -> Scheme:
    """Inputs: a, b. Output: _ (sum, carry out of the top bit is dropped)."""
    _check_word_size(word_size)
    section = adder_section()
    c = Combiner.pos_manual()

    for i in range(word_size):
        c.add(str(i), section)
        c.pos.place_last((0, i, 0))
        if i + 1 < word_size:
            # carry out of bit i into carry in of bit i + 1
            c.connect(str(i), str(i + 1))

    a = _word_bind("a", word_size)
    for x in range(word_size):
        a.connect(((x, 0, 0), (1, 1, 1)), f"{x}/a")
    c.bind_input(a)

    b = _word_bind("b", word_size)
    b.connect_func(lambda x, y, z: f"{x}/b")
    c.bind_input(b)

    out = _word_bind("_", word_size)
    out.connect_func(lambda x, y, z: f"{x}/res")
    c.bind_output(out)

    return compile_logged(c, "adder")


@preset(name="adder_compact", params={"word_size": 8}, description="Gate-saving adder with carry in/out slots")
def adder_compact(word_size: int) -> Scheme:
    """Inputs: a, b, carry. Outputs: _ (sum), carry.

    Inputs a and b feed AND gates directly, so each bit must be driven by a
    single gate.
    """
    _check_word_size(word_size)
    s = Combiner.pos_manual()

    s.add("carry", shapes_cube((word_size, 1, 1), Gate(GateMode.OR)))
    s.add_mul(["and_1", "and_2", "and_3"], shapes_cube((word_size, 1, 1), Gate(GateMode.AND)))
    s.add("res", shapes_cube((word_size, 1, 1), Gate(GateMode.XOR), Facing.NEG_Y.to_rot()))

    s.pos.place_iter([
        ("carry", (1, 0, 1)),
        ("and_1", (0, 0, 0)),
        ("and_2", (0, 0, 1)),
        ("and_3", (1, 0, 0)),
        ("res", (2, 0, 0)),
    ])
    s.pos.rotate_iter((name, (0, 0, 1)) for name in ("carry", "and_1", "and_2", "and_3", "res"))

    s.connect_iter(["carry"], ["res", "and_3", "and_1"])
    # the carry of bit x lands on bit x + 1
    s.custom_iter(["and_1", "and_2", "and_3"], ["carry"], shift((1, 0, 0)))

    a = _word_bind("a", word_size)
    a.connect_full("and_1").connect_full("and_2").connect_full("res")
    s.bind_input(a)

    b = _word_bind("b", word_size)
    b.connect_full("and_2").connect_full("and_3").connect_full("res")
    s.bind_input(b)

    out = _word_bind("_", word_size)
    out.connect_full("res")
    s.bind_output(out)

    s.bind_input(Bind("carry", "bit", (1, 1, 1)).connect_full("carry"))

    top = f"{word_size - 1}_0_0"
    carry_out = Bind("carry", "bit", (1, 1, 1))
    for name in ("and_1", "and_2", "and_3"):
        carry_out.connect_full(f"{name}/_/{top}")
    s.bind_output(carry_out)

    return compile_logged(s, "adder_compact")


@preset(name="inverter", params={"word_size": 8}, description="Two's complement negation of a binary word")
def inverter(word_size: int) -> Scheme:
    """Input: _ (number). Output: _ (negated number)."""
    _check_word_size(word_size)
    c = Combiner.pos_manual()

    c.add_iter([
        ("const_signal", Gate(GateMode.NOR)),
        ("const_signal_start", Gate(GateMode.AND)),
    ])
    c.pos.place_iter([
        ("const_signal", (2, -1, 0)),
        ("const_signal_start", (1, -1, 0)),
    ])
    c.connect("const_signal_start", "const_signal")
    # a constant one added to the lowest bit
    c.connect_iter(["const_signal"], ["carry", "out"])

    c.add("or", shapes_cube((word_size, 1, 1), Gate(GateMode.OR), Facing.POS_Y.to_rot()))
    c.add("nor", shapes_cube((word_size, 1, 1), Gate(GateMode.NOR), Facing.POS_Z.to_rot()))
    c.add("carry", shapes_cube((word_size, 1, 1), Gate(GateMode.AND), Facing.POS_Z.to_rot()))
    c.add("out", shapes_cube((word_size, 1, 1), Gate(GateMode.XOR), Facing.NEG_Y.to_rot()))

    c.connect("or", "nor")
    c.connect("nor", "out")
    c.connect("nor", "carry")
    shift_1 = shift((1, 0, 0))
    c.custom("carry", "carry", shift_1)
    c.custom("carry", "out", shift_1)

    c.pos.place_iter([
        ("or", (0, 0, 0)),
        ("nor", (1, 0, 0)),
        ("carry", (2, 0, 0)),
        ("out", (3, 0, 0)),
    ])
    c.pos.rotate_iter((name, (0, 0, 1)) for name in ("or", "nor", "carry", "out"))

    inp = _word_bind("_", word_size)
    inp.connect_full("or")
    c.bind_input(inp)

    out = _word_bind("_", word_size)
    out.connect_full("out")
    c.bind_output(out)

    return compile_logged(c, "inverter")
