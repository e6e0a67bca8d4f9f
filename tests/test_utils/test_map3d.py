"""Tests for the dense 3D map."""

import copy

import pytest

from smlogic.utils.map3d import Map3D


def test_flat_data_is_x_fastest():
    m = Map3D((2, 2, 1), [1, 2, 3, 4])
    assert m.get((1, 0, 0)) == 2
    assert m.get((0, 1, 0)) == 3
    assert m.to_id((1, 1, 0)) == 3


def test_wrong_data_length():
    with pytest.raises(ValueError):
        Map3D((2, 2, 2), [1, 2, 3])


def test_from_nested():
    m = Map3D.from_nested([[[1, 2, 3], [4, 5, 6]]])
    assert m.size == (3, 2, 1)
    assert m.get((2, 1, 0)) == 6
    with pytest.raises(ValueError):
        Map3D.from_nested([[[1, 2], [3]]])


def test_outside_lookups():
    m = Map3D((2, 2, 2), list(range(8)))
    assert m.get((2, 0, 0)) is None
    assert m.get((-1, 0, 0)) is None
    assert m.to_id((0, 0, 5)) is None
    with pytest.raises(IndexError):
        m.set((0, 2, 0), 1)


def test_set_returns_previous():
    m = Map3D((1, 1, 1), ["old"])
    assert m.set((0, 0, 0), "new") == "old"
    assert m.get((0, 0, 0)) == "new"


def test_filled_creates_independent_cells():
    m = Map3D.filled((2, 1, 1), list)
    m.get((0, 0, 0)).append(7)
    assert m.get((1, 0, 0)) == []
    assert len(m) == 2


def test_deepcopy_is_independent():
    m = Map3D.filled((1, 1, 2), list)
    clone = copy.deepcopy(m)
    m.get((0, 0, 1)).append(1)
    assert clone.get((0, 0, 1)) == []
    assert [p for p, _ in clone.items()] == [(0, 0, 0), (0, 0, 1)]
