"""Tests for points, vectors and colors."""

import math

import pytest

from raytracer.tuples import BLACK, Color, Vec4, approx_equal, point, vector


class TestVec4:
    """Homogeneous tuple arithmetic."""

    def test_point_and_vector_flags(self):
        p = point(4.3, -4.2, 3.1)
        v = vector(4.3, -4.2, 3.1)
        assert p.w == 1.0 and p.is_point and not p.is_vector
        assert v.w == 0.0 and v.is_vector and not v.is_point

    def test_subtracting_points_gives_vector(self):
        assert point(3, 2, 1) - point(5, 6, 7) == vector(-2, -4, -6)

    def test_point_plus_vector_is_point(self):
        assert point(3, -2, 5) + vector(-2, 3, 1) == point(1, 1, 6)

    def test_point_minus_vector(self):
        assert point(3, 2, 1) - vector(5, 6, 7) == point(-2, -4, -6)

    def test_negate(self):
        assert -Vec4(1, -2, 3, -4) == Vec4(-1, 2, -3, 4)

    def test_scalar_multiply_and_divide(self):
        a = Vec4(1, -2, 3, -4)
        assert a * 3.5 == Vec4(3.5, -7, 10.5, -14)
        assert 0.5 * a == Vec4(0.5, -1, 1.5, -2)
        assert a / 2 == Vec4(0.5, -1, 1.5, -2)

    def test_approximate_equality(self):
        assert point(1, 2, 3) == point(1 + 1e-7, 2, 3 - 1e-7)
        assert point(1, 2, 3) != point(1.001, 2, 3)

    def test_nan_is_never_equal(self):
        nan = float("nan")
        assert not approx_equal(nan, nan)
        assert vector(nan, 0, 0) != vector(nan, 0, 0)

    def test_infinities_compare_equal(self):
        assert approx_equal(math.inf, math.inf)
        assert not approx_equal(math.inf, -math.inf)

    @pytest.mark.parametrize("v, expected", [
        (vector(1, 0, 0), 1.0),
        (vector(0, 0, 1), 1.0),
        (vector(1, 2, 3), math.sqrt(14)),
        (vector(-1, -2, -3), math.sqrt(14)),
    ])
    def test_magnitude(self, v, expected):
        assert v.magnitude() == pytest.approx(expected)

    def test_normalize(self):
        assert vector(4, 0, 0).normalize() == vector(1, 0, 0)
        n = vector(1, 2, 3).normalize()
        assert n == vector(1 / math.sqrt(14), 2 / math.sqrt(14), 3 / math.sqrt(14))
        assert n.magnitude() == pytest.approx(1.0)

    def test_normalize_zero_vector_raises(self):
        with pytest.raises(ValueError):
            vector(0, 0, 0).normalize()

    def test_dot_and_cross(self):
        a, b = vector(1, 2, 3), vector(2, 3, 4)
        assert a.dot(b) == pytest.approx(20.0)
        assert a.cross(b) == vector(-1, 2, -1)
        assert b.cross(a) == vector(1, -2, 1)

    def test_reflect_at_45_degrees(self):
        assert vector(1, -1, 0).reflect(vector(0, 1, 0)) == vector(1, 1, 0)

    def test_reflect_off_slanted_surface(self, sqrt2_2):
        n = vector(sqrt2_2, sqrt2_2, 0)
        assert vector(0, -1, 0).reflect(n) == vector(1, 0, 0)

    def test_to_vector_drops_w(self):
        assert point(1, 2, 3).to_vector() == vector(1, 2, 3)

    def test_iteration_and_rounding(self):
        assert list(point(1, 2, 3)) == [1.0, 2.0, 3.0, 1.0]
        assert vector(0.123456789, 0, 0).rounded(3) == vector(0.123, 0, 0)


class TestColor:
    """Color arithmetic."""

    def test_add_subtract(self):
        c1, c2 = Color(0.9, 0.6, 0.75), Color(0.7, 0.1, 0.25)
        assert c1 + c2 == Color(1.6, 0.7, 1.0)
        assert c1 - c2 == Color(0.2, 0.5, 0.5)

    def test_scalar_multiply(self):
        assert Color(0.2, 0.3, 0.4) * 2 == Color(0.4, 0.6, 0.8)
        assert 2 * Color(0.2, 0.3, 0.4) == Color(0.4, 0.6, 0.8)

    def test_hadamard_product(self):
        assert Color(1, 0.2, 0.4) * Color(0.9, 1, 0.1) == Color(0.9, 0.2, 0.04)

    def test_black_absorbs(self):
        assert Color(0.3, 0.5, 0.9) * BLACK == BLACK

    def test_color_is_not_a_tuple(self):
        assert Color(1, 2, 3) != point(1, 2, 3)
