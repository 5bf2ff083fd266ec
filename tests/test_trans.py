import random

import pytest

from labkit.summary import TransRegistry, correct_trans, rand_matrix
from labkit.trans import is_transpose, register_functions, trans, transpose_submit


def _empty(rows, cols):
    return [[0] * cols for _ in range(rows)]


@pytest.mark.parametrize("m, n", [(32, 32), (64, 64), (61, 67), (5, 3), (17, 40)])
def test_transpose_submit_matches_baseline(m, n):
    a = rand_matrix(m, n, random.Random(m * 1000 + n))
    b = _empty(m, n)
    expected = _empty(m, n)
    transpose_submit(m, n, a, b)
    correct_trans(m, n, a, expected)
    assert b == expected
    assert is_transpose(m, n, a, b)


@pytest.mark.parametrize("m, n", [(1, 1), (3, 5), (8, 2)])
def test_trans_matches_baseline(m, n):
    a = rand_matrix(m, n, random.Random(n))
    b = _empty(m, n)
    expected = _empty(m, n)
    trans(m, n, a, b)
    correct_trans(m, n, a, expected)
    assert b == expected


def test_is_transpose_detects_mismatch():
    a = [[1, 2, 3], [4, 5, 6]]
    b = _empty(3, 2)
    trans(3, 2, a, b)
    assert is_transpose(3, 2, a, b)
    b[2][1] += 1
    assert not is_transpose(3, 2, a, b)


def test_transpose_twice_restores():
    a = rand_matrix(64, 64, random.Random(9))
    b = _empty(64, 64)
    back = _empty(64, 64)
    transpose_submit(64, 64, a, b)
    transpose_submit(64, 64, b, back)
    assert back == a


def test_register_functions():
    registry = TransRegistry()
    register_functions(registry)
    assert [entry.description for entry in registry] == [
        "Transpose submission",
        "Simple row-wise scan transpose",
    ]
    assert [entry.func for entry in registry] == [transpose_submit, trans]