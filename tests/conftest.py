"""Shared fixtures and helpers for the smlogic test suite."""

from __future__ import annotations

import pytest

from smlogic.engine.bind import Bind
from smlogic.engine.combiner import Combiner
from smlogic.engine.config import CompileConfig
from smlogic.engine.scheme import Scheme
from smlogic.presets.registry import load_presets
from smlogic.shapes.gate import Gate, GateMode
from smlogic.storage.blueprints import BlueprintStore

# Every preset module registers on import; load them once for the whole run
load_presets()


def gate(mode: GateMode = GateMode.OR) -> Scheme:
    return Scheme.from_shape(Gate(mode))


def two_gate_chain(config: CompileConfig | None = None) -> Combiner:
    """``a -> b`` with the input of ``a`` and the output of ``b`` exposed."""
    c = Combiner.pos_manual(config)
    c.add("a", Gate(GateMode.OR))
    c.add("b", Gate(GateMode.AND))
    c.pos.place("a", (0, 0, 0))
    c.pos.place("b", (1, 0, 0))
    c.connect("a", "b")
    c.bind_input(Bind("in", "bit", (1, 1, 1)).connect_full("a"))
    c.bind_output(Bind("out", "bit", (1, 1, 1)).connect_full("b"))
    return c


def _gate_output(mode: GateMode, inputs: list[bool]) -> bool:
    on = sum(inputs)
    if mode is GateMode.AND:
        return bool(inputs) and on == len(inputs)
    if mode is GateMode.OR:
        return on > 0
    if mode is GateMode.XOR:
        return on % 2 == 1
    if mode is GateMode.NAND:
        return not (bool(inputs) and on == len(inputs))
    if mode is GateMode.NOR:
        return on == 0
    return on % 2 == 0


def simulate(scheme: Scheme, inputs: dict[str, int], max_ticks: int = 500) -> dict[str, int]:
    """Run a gate-only scheme until it settles and read every output slot as a number.

    Bit ``x`` of an input value drives the units at slot point ``(x, 0, 0)``;
    an output point reads as on when any of its units is on.
    """
    count = scheme.shapes_count()
    sources: list[list[int]] = [[] for _ in range(count)]
    for i, (_, _, shape) in enumerate(scheme.shapes):
        for target in shape.out_conns:
            sources[target].append(i)

    external: list[list[bool]] = [[] for _ in range(count)]
    for name, value in inputs.items():
        for (x, _, _), ids in scheme.input(name).shape_map.items():
            for i in ids:
                external[i].append(bool(value >> x & 1))

    modes = [shape.base.mode for _, _, shape in scheme.shapes]
    state = [False] * count
    for _ in range(max_ticks):
        new_state = [
            _gate_output(modes[i], [state[s] for s in sources[i]] + external[i]) for i in range(count)
        ]
        if new_state == state:
            break
        state = new_state
    else:
        raise AssertionError(f"Scheme did not settle in {max_ticks} ticks")

    result = {}
    for slot in scheme.outputs:
        result[slot.name] = sum(
            1 << x for (x, _, _), ids in slot.shape_map.items() if any(state[i] for i in ids)
        )
    return result


def controllers(child: dict) -> list[int]:
    conns = child["controller"]["controllers"]
    return [c["id"] for c in conns] if conns else []


@pytest.fixture
def or_gate() -> Scheme:
    return gate(GateMode.OR)


@pytest.fixture
def chain() -> Combiner:
    return two_gate_chain()


@pytest.fixture
def store(tmp_path) -> BlueprintStore:
    return BlueprintStore.from_folder(tmp_path / "Blueprints", create=True)
