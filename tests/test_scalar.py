import math
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from py_geolinmath import (InvalidArgumentError, NumberFormat, ScalarOverflowError, ScalarTypeError,
                           is_scalar, register_scalar, scalar_ops)
from py_geolinmath.scalar import ExactOps, FixedWidthIntOps


class TestScalarRegistry:

    @pytest.mark.parametrize(
        "value, ops_type",
        [
            (1, "ExactOps"),
            (True, "ExactOps"),
            (Fraction(1, 3), "ExactOps"),
            (1.5, "FloatOps"),
            (np.float32(1.5), "FloatOps"),
            (np.int16(3), "FixedWidthIntOps"),
            (np.uint8(3), "FixedWidthIntOps"),
            (Decimal("1.5"), "DecimalOps"),
        ],
        ids=["int", "bool", "fraction", "float", "float32", "int16", "uint8", "decimal"],
    )
    def test_lookup_by_value(self, value, ops_type):
        assert type(scalar_ops(value)).__name__ == ops_type
        assert is_scalar(value)

    def test_lookup_by_type(self):
        assert scalar_ops(np.int8).scalar_type is np.int8
        assert scalar_ops(float).scalar_type is float

    def test_unknown_type(self):
        assert not is_scalar("1")
        assert not is_scalar(1j)
        with pytest.raises(ScalarTypeError):
            scalar_ops(str)
        with pytest.raises(TypeError):
            scalar_ops(object())

    def test_register_subclass(self):
        class Meters(float):
            pass

        assert scalar_ops(Meters).scalar_type is float
        ops = ExactOps(Meters)
        register_scalar(Meters, ops)
        assert scalar_ops(Meters(2.0)) is ops


class TestFixedWidthIntOps:

    def test_wraps_unchecked(self):
        ops = scalar_ops(np.int8)
        assert ops.add_unchecked(np.int8(127), np.int8(1)) == -128
        assert ops.subtract_unchecked(np.int8(-128), np.int8(1)) == 127
        assert ops.multiply_unchecked(np.int8(64), np.int8(2)) == -128
        assert ops.negate_unchecked(np.int8(-128)) == -128
        assert ops.abs_unchecked(np.int8(-128)) == -128
        assert type(ops.add_unchecked(np.int8(127), np.int8(1))) is np.int8

    @pytest.mark.parametrize(
        "operation, operands",
        [
            ("add_checked", (127, 1)),
            ("subtract_checked", (-128, 1)),
            ("multiply_checked", (64, 2)),
            ("negate_checked", (-128,)),
            ("abs_checked", (-128,)),
            ("divide_checked", (-128, -1)),
        ],
    )
    def test_checked_raises(self, operation, operands):
        ops = scalar_ops(np.int8)
        with pytest.raises(ScalarOverflowError) as exc_info:
            getattr(ops, operation)(*(np.int8(each) for each in operands))
        assert exc_info.value.scalar_type is np.int8

    def test_checked_matches_unchecked_in_range(self):
        ops = scalar_ops(np.int32)
        a, b = np.int32(1000), np.int32(-7)
        assert ops.add_checked(a, b) == ops.add_unchecked(a, b) == 993
        assert ops.multiply_checked(a, b) == ops.multiply_unchecked(a, b) == -7000
        assert ops.divide_checked(a, b) == ops.divide_unchecked(a, b) == -143

    def test_unsigned(self):
        ops = scalar_ops(np.uint8)
        assert ops.subtract_unchecked(np.uint8(0), np.uint8(1)) == 255
        with pytest.raises(ScalarOverflowError):
            ops.subtract_checked(np.uint8(0), np.uint8(1))

    def test_float_operand_rejected(self):
        with pytest.raises(TypeError):
            scalar_ops(np.int8).multiply_unchecked(np.int8(2), 0.5)

    def test_division_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            scalar_ops(np.int16).divide_unchecked(np.int16(1), np.int16(0))

    def test_conversions(self):
        ops = scalar_ops(np.int8)
        assert ops.create_checked(100.7) == 100
        with pytest.raises(ScalarOverflowError):
            ops.create_checked(300)
        with pytest.raises(ScalarOverflowError):
            ops.create_checked(math.inf)
        assert ops.create_saturating(300) == 127
        assert ops.create_saturating(-300.0) == -128
        assert ops.create_saturating(math.inf) == 127
        assert ops.create_saturating(math.nan) == 0
        assert ops.create_truncating(300) == 44

    def test_parse_range(self):
        ops = scalar_ops(np.uint8)
        assert ops.parse("255") == 255
        with pytest.raises(ValueError):
            ops.parse("256")
        with pytest.raises(ValueError):
            ops.parse("-1")


class TestFloatOps:

    def test_overflow(self):
        ops = scalar_ops(float)
        big = 1e308
        assert ops.multiply_unchecked(big, 10.0) == math.inf
        with pytest.raises(ScalarOverflowError):
            ops.multiply_checked(big, 10.0)
        # infinite operands are not an overflow
        assert ops.add_checked(math.inf, 1.0) == math.inf

    def test_numpy_overflow(self):
        ops = scalar_ops(np.float32)
        big = np.float32(3e38)
        assert np.isinf(ops.add_unchecked(big, big))
        with pytest.raises(ScalarOverflowError):
            ops.add_checked(big, big)

    def test_division_by_zero(self):
        assert scalar_ops(np.float64).divide_unchecked(np.float64(1.0), np.float64(0.0)) == math.inf
        with pytest.raises(ZeroDivisionError):
            scalar_ops(np.float64).divide_checked(np.float64(1.0), np.float64(0.0))
        with pytest.raises(ZeroDivisionError):
            scalar_ops(float).divide_unchecked(1.0, 0.0)

    def test_predicates(self):
        ops = scalar_ops(float)
        assert ops.is_nan(math.nan) and not ops.is_real_number(math.nan)
        assert ops.is_infinity(-math.inf) and ops.is_negative_infinity(-math.inf)
        assert ops.is_positive_infinity(math.inf)
        assert not ops.is_finite(math.inf)
        assert ops.is_negative(-0.0) and not ops.is_positive(-0.0)
        assert ops.is_positive(0.0) and ops.is_zero(-0.0)
        assert ops.is_integer(4.0) and ops.is_even_integer(4.0) and ops.is_odd_integer(-3.0)
        assert not ops.is_integer(4.5) and not ops.is_integer(math.inf)
        assert ops.is_normal(1.0) and not ops.is_normal(0.0)
        assert ops.is_subnormal(5e-324) and not ops.is_normal(5e-324)

    def test_conversions(self):
        ops = scalar_ops(np.float16)
        with pytest.raises(ScalarOverflowError):
            ops.create_checked(1e6)
        assert ops.create_saturating(1e6) == np.finfo(np.float16).max
        assert np.isinf(ops.create_truncating(1e6))
        assert ops.create_checked(math.inf) == math.inf


class TestDecimalOps:

    def test_overflow(self):
        ops = scalar_ops(Decimal)
        big = Decimal("9e999999")
        assert ops.multiply_unchecked(big, Decimal(10)).is_infinite()
        with pytest.raises(ScalarOverflowError):
            ops.multiply_checked(big, Decimal(10))

    def test_predicates(self):
        ops = scalar_ops(Decimal)
        assert ops.is_integer(Decimal("2.00"))
        assert ops.is_even_integer(Decimal("2.00"))
        assert not ops.is_integer(Decimal("2.5"))
        assert ops.is_nan(Decimal("NaN"))
        assert ops.is_negative(Decimal("-0"))

    def test_create_from_fraction(self):
        assert scalar_ops(Decimal).create_checked(Fraction(1, 4)) == Decimal("0.25")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            scalar_ops(Decimal).parse("1,5")


class TestExactOps:

    def test_int_division_floors(self):
        ops = scalar_ops(int)
        assert ops.divide_unchecked(7, 2) == 3
        assert ops.divide_checked(-7, 2) == -4

    def test_fraction_division(self):
        assert scalar_ops(Fraction).divide_checked(Fraction(1), Fraction(3)) == Fraction(1, 3)

    def test_never_overflows(self):
        ops = scalar_ops(int)
        assert ops.multiply_checked(2 ** 64, 2 ** 64) == 2 ** 128

    def test_create(self):
        assert scalar_ops(int).create_checked(2.9) == 2
        assert scalar_ops(Fraction).create_checked(0.5) == Fraction(1, 2)
        with pytest.raises(ScalarOverflowError):
            scalar_ops(int).create_checked(math.inf)


class TestClamp:

    def test_clamp(self):
        ops = scalar_ops(int)
        assert ops.clamp(5, 0, 3) == 3
        assert ops.clamp(-5, 0, 3) == 0
        assert ops.clamp(2, 0, 3) == 2

    def test_invalid_range(self):
        with pytest.raises(InvalidArgumentError):
            scalar_ops(float).clamp(1.0, 2.0, 1.0)


class TestScalarText:

    def test_format_localized(self):
        nf = NumberFormat(decimal_point=",", group_separator=".")
        assert scalar_ops(float).format(-1234.5, ",.1f", nf) == "-1.234,5"
        assert scalar_ops(float).format(0.25, "", nf) == "0,25"

    def test_parse_localized(self):
        nf = NumberFormat(decimal_point=",", group_separator=".")
        assert scalar_ops(float).parse("-0,25", nf) == -0.25
        with pytest.raises(ValueError):
            scalar_ops(float).parse("1.234,5", nf)

    def test_multi_character_symbols(self):
        nf = NumberFormat(negative_sign="minus ")
        assert scalar_ops(int).format(-3, "", nf) == "minus 3"
        assert scalar_ops(int).parse("minus 3", nf) == -3

    def test_numpy_float_text(self):
        assert scalar_ops(np.float32).format(np.float32(0.1)) == "0.1"
        assert scalar_ops(np.float32).parse("0.1") == np.float32(0.1)

    def test_fixed_width_is_instance(self):
        assert isinstance(scalar_ops(np.int64), FixedWidthIntOps)
