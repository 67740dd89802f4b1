import math

import pytest

from core.vector import Vector3
from core.utils import clamp_color, reflect, to_rgb_bytes


def assert_vec_close(a, b, tol=1e-9):
    assert a.x == pytest.approx(b.x, abs=tol)
    assert a.y == pytest.approx(b.y, abs=tol)
    assert a.z == pytest.approx(b.z, abs=tol)


def test_dot_and_length():
    a = Vector3(1, 2, 3)
    b = Vector3(4, -5, 6)
    assert a.dot(b) == 1 * 4 + 2 * -5 + 3 * 6
    assert Vector3(3, 4, 0).length() == pytest.approx(5.0)


def test_arithmetic_returns_new_values():
    a = Vector3(1, 2, 3)
    b = Vector3(0.5, 0.5, 0.5)
    assert a + b == Vector3(1.5, 2.5, 3.5)
    assert a - b == Vector3(0.5, 1.5, 2.5)
    assert 2 * a == Vector3(2, 4, 6)
    assert -a == Vector3(-1, -2, -3)
    # Operands untouched.
    assert a == Vector3(1, 2, 3)


def test_normalize_zero_vector_is_safe():
    assert Vector3(0, 0, 0).normalize() == Vector3(0, 0, 0)
    assert Vector3(0, 0, 7).normalize().length() == pytest.approx(1.0)


def test_reflect_about_axis():
    # Mirroring (1, 1, 0) about the y axis flips the x component.
    assert reflect(Vector3(1, 1, 0), Vector3(0, 1, 0)) == Vector3(-1, 1, 0)


@pytest.mark.parametrize("v, n", [
    (Vector3(1, 2, 3), Vector3(0, 0, 1)),
    (Vector3(-0.3, 5, 2.2), Vector3(1, 1, 1).normalize()),
    (Vector3(4, 0, -1), Vector3(0.6, -0.8, 0)),
])
def test_reflect_is_an_involution_for_unit_axes(v, n):
    assert_vec_close(reflect(reflect(v, n), n), v)


def test_reflect_does_not_normalize_the_axis():
    # With |n| = 2 the result is scaled: 2 * (v.n) * n - v.
    v = Vector3(1, 0, 0)
    n = Vector3(2, 0, 0)
    assert reflect(v, n) == Vector3(7, 0, 0)


def test_clamp_color():
    assert clamp_color(Vector3(300, -10, 255)) == Vector3(255, 0, 255)
    assert to_rgb_bytes(Vector3(300, -10, 255)) == (255, 0, 255)


def test_to_rgb_bytes_rounds_to_integers():
    assert to_rgb_bytes(Vector3(12.4, 12.6, math.inf)) == (12, 13, 255)
