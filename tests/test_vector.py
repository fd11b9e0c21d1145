import math
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from py_geolinmath import (ComplexNumber, ComponentCountError, InvalidArgumentError, ScalarOverflowError,
                           SqrtNotImplementedError, Vector2, Vector3)


class TestVector2:

    def test_components_and_unpacking(self):
        v = Vector2(1, 2)
        assert v.components == (1, 2)
        x, y = v
        assert (x, y) == (1, 2)
        assert Vector2.dimension == 2

    def test_immutable(self):
        v = Vector2(1, 2)
        with pytest.raises(AttributeError):
            v.x = 5  # type: ignore[misc]

    def test_create(self):
        assert Vector2.create([3, 4]) == Vector2(3, 4)
        with pytest.raises(ComponentCountError) as exc_info:
            Vector2.create([1, 2, 3])
        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 3
        with pytest.raises(InvalidArgumentError):
            Vector2.create(iter([1]))

    def test_uniform_and_origin(self):
        assert Vector2.uniform(7) == Vector2(7, 7)
        assert Vector2.origin() == Vector2(0.0, 0.0)
        assert type(Vector2.origin(np.int16).x) is np.int16

    def test_axis_units(self):
        assert Vector2.to_positive_x(int) == Vector2(1, 0)
        assert Vector2.to_negative_x(int) == Vector2(-1, 0)
        assert Vector2.to_positive_y(int) == Vector2(0, 1)
        assert Vector2.to_negative_y(int) == Vector2(0, -1)
        units = Vector2.axis_unit_vectors(int)
        assert set(units) == {Vector2(1, 0), Vector2(-1, 0), Vector2(0, 1), Vector2(0, -1)}

    def test_axis_units_unsigned(self):
        units = Vector2.axis_unit_vectors(np.uint8)
        assert set(units) == {Vector2(np.uint8(1), np.uint8(0)), Vector2(np.uint8(0), np.uint8(1))}

    def test_add_subtract_negate(self):
        a, b = Vector2(1, 2), Vector2(3, 5)
        assert a + b == Vector2(4, 7) == a.add_checked(b)
        assert a - b == Vector2(-2, -3) == a.subtract_checked(b)
        assert -a == Vector2(-1, -2) == a.negate_checked()
        assert +a is a

    def test_scalar_multiply_divide(self):
        v = Vector2(2.0, -4.0)
        assert v * 2 == Vector2(4.0, -8.0)
        assert 2 * v == Vector2(4.0, -8.0)
        assert v / 2 == Vector2(1.0, -2.0)
        assert v.scale_checked(0.5) == Vector2(1.0, -2.0)

    def test_integer_division_floors(self):
        assert Vector2(7, -7) / 2 == Vector2(3, -4)

    def test_scalar_over_vector(self):
        # s * v / |v|^2
        assert 10 / Vector2(Fraction(3), Fraction(4)) == Vector2(Fraction(30, 25), Fraction(40, 25))
        assert Vector2(3.0, 4.0).rdivide_checked(25.0) == Vector2(3.0, 4.0)

    def test_dot_and_magnitude(self):
        a, b = Vector2(1, 2), Vector2(3, 4)
        assert a.dot_unchecked(b) == a.dot_checked(b) == 11
        assert Vector2(3, 4).square_magnitude_unchecked() == 25
        assert Vector2(3.0, 4.0).magnitude_checked() == 5.0
        assert Vector2(3, 4).magnitude_unchecked() == 5
        assert Vector2(-3, 4).taxicab_magnitude_checked() == 7

    def test_magnitude_without_sqrt(self):
        with pytest.raises(SqrtNotImplementedError):
            Vector2(Fraction(3), Fraction(4)).magnitude_unchecked()

    def test_determinant_and_swizzle(self):
        assert Vector2(1, 2).determinant_unchecked(Vector2(3, 4)) == -2
        assert Vector2(1, 2).swizzle() == Vector2(2, 1)

    def test_geometric_product(self):
        assert Vector2(1, 2) * Vector2(3, 4) == ComplexNumber(11, -2)
        assert Vector2(1, 2).geometric_product_checked(Vector2(3, 4)) == ComplexNumber(11, -2)

    def test_vector_times_complex(self):
        # x·re − y·im, y·re + x·im
        assert Vector2(1, 0) * ComplexNumber(0, 1) == Vector2(0, 1)
        assert Vector2(1, 2) * ComplexNumber(3, 4) == Vector2(-5, 10)

    def test_vector_over_vector(self):
        q = Vector2(Fraction(1), Fraction(2)) / Vector2(Fraction(3), Fraction(4))
        assert q == ComplexNumber(Fraction(11, 25), Fraction(-2, 25))

    def test_vector_over_complex(self):
        z = ComplexNumber(Fraction(3), Fraction(4))
        v = Vector2(Fraction(1), Fraction(2))
        assert (v / z) * z == v

    def test_reciprocal(self):
        assert Vector2(Fraction(3), Fraction(4)).reciprocal_unchecked() == Vector2(Fraction(3, 25), Fraction(4, 25))
        v = Vector2(2.0, 0.0)
        assert v.reciprocal_checked() == Vector2(0.5, 0.0)

    def test_zero_reciprocal(self):
        with pytest.raises(ZeroDivisionError):
            Vector2(0, 0).reciprocal_unchecked()
        with pytest.raises(ZeroDivisionError):
            Vector2(0.0, 0.0).reciprocal_checked()
        r = Vector2(np.float64(0), np.float64(0)).reciprocal_unchecked()
        assert all(math.isnan(c) for c in r)

    def test_is_in_box_and_clamp(self):
        lo, hi = Vector2(0, 0), Vector2(10, 10)
        assert Vector2(5, 10).is_in_box(lo, hi)
        assert not Vector2(-1, 5).is_in_box(lo, hi)
        assert Vector2(-1, 15).clamp(lo, hi) == Vector2(0, 10)
        with pytest.raises(InvalidArgumentError):
            Vector2(1, 1).clamp(hi, lo)

    def test_conversions(self):
        v = Vector2(300.5, -2.5)
        assert v.convert_saturating(np.uint8) == Vector2(np.uint8(255), np.uint8(0))
        assert v.convert_truncating(np.int16) == Vector2(np.int16(300), np.int16(-2))
        with pytest.raises(ScalarOverflowError):
            v.convert_checked(np.int8)
        assert Vector2(1, 2).convert_checked(Decimal) == Vector2(Decimal(1), Decimal(2))

    def test_checked_overflow(self):
        a = Vector2(np.int8(100), np.int8(0))
        assert (a + a).x == np.int8(-56)
        with pytest.raises(ScalarOverflowError):
            a.add_checked(a)
        with pytest.raises(ScalarOverflowError):
            a.square_magnitude_checked()
        assert a.square_magnitude_unchecked() == np.int8(16)

    @pytest.mark.parametrize(
        "divisor, expected",
        [
            (Vector2(np.int16(200), np.int16(0)), ComplexNumber(np.int16(-1), np.int16(0))),
            (ComplexNumber(np.int16(200), np.int16(0)), Vector2(np.int16(-1), np.int16(0))),
        ],
        ids=["vector", "complex"],
    )
    def test_checked_divide_uses_checked_square_magnitude(self, divisor, expected):
        # 200 ** 2 does not fit int16
        v = Vector2(np.int16(1), np.int16(0))
        assert v.divide_unchecked(divisor) == expected
        with pytest.raises(ScalarOverflowError):
            v.divide_checked(divisor)

    def test_equality_and_hash(self):
        assert Vector2(1, 2) == Vector2(1.0, 2.0)
        assert hash(Vector2(1, 2)) == hash(Vector2(1.0, 2.0))
        assert Vector2(1, 2) != Vector2(2, 1)
        assert Vector2(1, 2) != (1, 2)
        assert Vector2(1, 2) != Vector3(1, 2, 0)
        nan = Vector2(math.nan, 0.0)
        assert nan != nan

    def test_type_errors(self):
        v = Vector2(1.0, 2.0)
        with pytest.raises(TypeError):
            _ = v * "x"  # type: ignore[operator]
        with pytest.raises(TypeError):
            _ = v + Vector3(1.0, 2.0, 3.0)  # type: ignore[operator]
        with pytest.raises(TypeError):
            v.add_unchecked(Vector3(1.0, 2.0, 3.0))  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            v.multiply_checked([1, 2])

    def test_to_complex(self):
        assert Vector2(1, 2).to_complex() == ComplexNumber(1, 2)
        assert ComplexNumber(1, 2).to_vector() == Vector2(1, 2)


class TestVector3:

    def test_from_vector2(self):
        assert Vector3.from_vector2(Vector2(1, 2), 3) == Vector3(1, 2, 3)

    def test_create(self):
        assert Vector3.create((1, 2, 3)) == Vector3(1, 2, 3)
        with pytest.raises(ComponentCountError):
            Vector3.create((1, 2))

    def test_axis_units(self):
        units = set(Vector3.axis_unit_vectors(int))
        assert len(units) == 6
        assert Vector3.to_positive_z(int) in units
        assert Vector3.to_negative_z(int) == Vector3(0, 0, -1)
        assert Vector3.to_negative_y(int) == Vector3(0, -1, 0)
        for unit in units:
            assert sum(1 for c in unit if c != 0) == 1

    def test_arithmetic(self):
        a, b = Vector3(1, 2, 3), Vector3(4, 5, 6)
        assert a + b == Vector3(5, 7, 9)
        assert b - a == Vector3(3, 3, 3)
        assert a.dot_checked(b) == 32
        assert a * 2 == Vector3(2, 4, 6)
        assert Vector3(2.0, 3.0, 6.0).magnitude_unchecked() == 7.0
        assert Vector3(-1, 2, -3).taxicab_magnitude_unchecked() == 6

    def test_reciprocal(self):
        v = Vector3(Fraction(1), Fraction(2), Fraction(2))
        assert v.reciprocal_checked() == Vector3(Fraction(1, 9), Fraction(2, 9), Fraction(2, 9))

    def test_no_vector_product(self):
        with pytest.raises(TypeError):
            _ = Vector3(1, 2, 3) * Vector3(1, 2, 3)  # type: ignore[operator]
        with pytest.raises(TypeError):
            _ = Vector3(1, 2, 3) * ComplexNumber(1, 2)  # type: ignore[operator]

    def test_clamp(self):
        v = Vector3(5.0, -5.0, 0.5).clamp(Vector3.uniform(0.0), Vector3.uniform(1.0))
        assert v == Vector3(1.0, 0.0, 0.5)
