"""Immutable complex numbers over any registered scalar type.

Unlike the built-in `complex`, a ComplexNumber keeps the scalar type of its parts, so it
works with exact (`int`, `Fraction`, `Decimal`) and fixed-width (numpy) scalars, and every
arithmetic operation exists as a checked/unchecked pair (see [py_geolinmath.scalar][]).
The Python operators are the unchecked forms.

Examples:
    >>> from py_geolinmath import ComplexNumber, Vector2
    >>> ComplexNumber(1, 2) * ComplexNumber(3, 4)
    ComplexNumber(real=-5, imaginary=10)
    >>> ComplexNumber(0, 1) * Vector2(1, 0)
    Vector2(x=0, y=-1)
    >>> str(ComplexNumber(0, 5)), str(ComplexNumber(3, 0)), str(ComplexNumber(3, -2))
    ('5i', '3', '3 + -2i')
"""

# Standard library imports
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, TypeVar

# Local imports
from py_geolinmath.exceptions import NotRealError, QuantityFormatError
from py_geolinmath.globalization import ComplexNumberFormatInfo, FormatBuffer, FormatProvider
from py_geolinmath.logger import logger
from py_geolinmath.quantity import MultiplicativeInverse, Quantity
from py_geolinmath.scalar import Arithmetic, ScalarOps, is_scalar, scalar_ops
from py_geolinmath.vector import Vector2

__all__ = ('ComplexNumber',)

T = TypeVar('T')


@dataclass(frozen=True, eq=False)
class ComplexNumber(Quantity[T], MultiplicativeInverse):
    """Complex number ``real + imaginary·i``.

    Attributes:
        real: Real part.
        imaginary: Imaginary part.
    """

    __slots__ = ('real', 'imaginary')

    __array_ufunc__ = None

    real: T
    imaginary: T

    def _scalar(self) -> ScalarOps:
        return scalar_ops(self.real)

    # ----------------------------- Creation -----------------------------

    @classmethod
    def from_real(cls, value: T) -> ComplexNumber:
        return cls(value, scalar_ops(value).zero)

    @classmethod
    def zero(cls, scalar_type: type = float) -> ComplexNumber:
        ops = scalar_ops(scalar_type)
        return cls(ops.zero, ops.zero)

    @classmethod
    def one(cls, scalar_type: type = float) -> ComplexNumber:
        ops = scalar_ops(scalar_type)
        return cls(ops.one, ops.zero)

    @classmethod
    def imaginary_unit(cls, scalar_type: type = float) -> ComplexNumber:
        ops = scalar_ops(scalar_type)
        return cls(ops.zero, ops.one)

    @classmethod
    def from_complex(cls, value: complex, scalar_type: type = float) -> ComplexNumber:
        """Convert a built-in complex, raising ScalarOverflowError if a part is not representable."""
        ops = scalar_ops(scalar_type)
        return cls(ops.create_checked(value.real), ops.create_checked(value.imag))

    def to_vector(self) -> Vector2:
        return Vector2(self.real, self.imaginary)

    def to_real_unchecked(self) -> T:
        """Real part; the imaginary part is discarded."""
        return self.real

    def to_real_checked(self) -> T:
        """Real part.

        Raises:
            NotRealError: If the imaginary part is not zero.
        """
        if not self._scalar().is_zero(self.imaginary):
            raise NotRealError(f"{self!r} has a non-zero imaginary part")
        return self.real

    def __complex__(self) -> complex:
        return complex(float(self.real), float(self.imaginary))

    # ----------------------------- Magnitude -----------------------------

    def _square_magnitude(self, arith: Arithmetic) -> T:
        return arith.add(arith.multiply(self.real, self.real), arith.multiply(self.imaginary, self.imaginary))

    def square_magnitude_unchecked(self) -> T:
        return self._square_magnitude(self._scalar().unchecked)

    def square_magnitude_checked(self) -> T:
        return self._square_magnitude(self._scalar().checked)

    def __abs__(self) -> T:
        return self.magnitude_checked()

    @staticmethod
    def max_magnitude(x: ComplexNumber, y: ComplexNumber) -> ComplexNumber:
        """Operand with the greater magnitude; x on a tie, the NaN operand if any."""
        if x.is_nan():
            return x
        if y.is_nan():
            return y
        return y if y.square_magnitude_unchecked() > x.square_magnitude_unchecked() else x

    @staticmethod
    def min_magnitude(x: ComplexNumber, y: ComplexNumber) -> ComplexNumber:
        """Operand with the smaller magnitude; x on a tie, the NaN operand if any."""
        if x.is_nan():
            return x
        if y.is_nan():
            return y
        return y if y.square_magnitude_unchecked() < x.square_magnitude_unchecked() else x

    # ----------------------------- Arithmetic -----------------------------

    def _add(self, arith: Arithmetic, other: Any) -> ComplexNumber:
        if isinstance(other, ComplexNumber):
            return ComplexNumber(arith.add(self.real, other.real), arith.add(self.imaginary, other.imaginary))
        if is_scalar(other):
            return ComplexNumber(arith.add(self.real, other), self.imaginary)
        raise TypeError(f"Can't add {type(other).__name__} to ComplexNumber")

    def add_unchecked(self, other: Any) -> ComplexNumber:
        """Sum with a ComplexNumber or a scalar."""
        return self._add(self._scalar().unchecked, other)

    def add_checked(self, other: Any) -> ComplexNumber:
        return self._add(self._scalar().checked, other)

    def _subtract(self, arith: Arithmetic, other: Any) -> ComplexNumber:
        if isinstance(other, ComplexNumber):
            return ComplexNumber(arith.subtract(self.real, other.real),
                                 arith.subtract(self.imaginary, other.imaginary))
        if is_scalar(other):
            return ComplexNumber(arith.subtract(self.real, other), self.imaginary)
        raise TypeError(f"Can't subtract {type(other).__name__} from ComplexNumber")

    def subtract_unchecked(self, other: Any) -> ComplexNumber:
        """Difference with a ComplexNumber or a scalar."""
        return self._subtract(self._scalar().unchecked, other)

    def subtract_checked(self, other: Any) -> ComplexNumber:
        return self._subtract(self._scalar().checked, other)

    def _rsubtract(self, arith: Arithmetic, scalar: T) -> ComplexNumber:
        return ComplexNumber(arith.subtract(scalar, self.real), arith.negate(self.imaginary))

    def rsubtract_unchecked(self, scalar: T) -> ComplexNumber:
        """Scalar minus this number."""
        return self._rsubtract(self._scalar().unchecked, scalar)

    def rsubtract_checked(self, scalar: T) -> ComplexNumber:
        return self._rsubtract(self._scalar().checked, scalar)

    def _product(self, arith: Arithmetic, other: ComplexNumber) -> ComplexNumber:
        a, b, c, d = self.real, self.imaginary, other.real, other.imaginary
        return ComplexNumber(arith.subtract(arith.multiply(a, c), arith.multiply(b, d)),
                             arith.add(arith.multiply(a, d), arith.multiply(b, c)))

    def _rotate(self, arith: Arithmetic, v: Vector2) -> Vector2:
        return Vector2(arith.add(arith.multiply(self.real, v.x), arith.multiply(self.imaginary, v.y)),
                       arith.subtract(arith.multiply(self.real, v.y), arith.multiply(self.imaginary, v.x)))

    def _multiply(self, arith: Arithmetic, other: Any) -> Any:
        if isinstance(other, ComplexNumber):
            return self._product(arith, other)
        if isinstance(other, Vector2):
            return self._rotate(arith, other)
        if is_scalar(other):
            return ComplexNumber(arith.multiply(self.real, other), arith.multiply(self.imaginary, other))
        raise TypeError(f"Can't multiply ComplexNumber by {type(other).__name__}")

    def multiply_unchecked(self, other: Any) -> Any:
        """Product with a ComplexNumber (ComplexNumber), a Vector2 (Vector2) or a scalar (ComplexNumber).

        The product with a vector is ``(re·x + im·y, re·y − im·x)``, which equals
        ``vector * self.conjugate()``.
        """
        return self._multiply(self._scalar().unchecked, other)

    def multiply_checked(self, other: Any) -> Any:
        return self._multiply(self._scalar().checked, other)

    def _divide_scalar(self, arith: Arithmetic, scalar: T) -> ComplexNumber:
        return ComplexNumber(arith.divide(self.real, scalar), arith.divide(self.imaginary, scalar))

    def _quotient(self, arith: Arithmetic, other: ComplexNumber) -> ComplexNumber:
        a, b, c, d = self.real, self.imaginary, other.real, other.imaginary
        denominator = other._square_magnitude(arith)
        return ComplexNumber(arith.divide(arith.add(arith.multiply(a, c), arith.multiply(b, d)), denominator),
                             arith.divide(arith.subtract(arith.multiply(b, c), arith.multiply(a, d)), denominator))

    def _divide(self, arith: Arithmetic, other: Any) -> Any:
        if isinstance(other, ComplexNumber):
            return self._quotient(arith, other)
        if isinstance(other, Vector2):
            return self._rotate(arith, other)._map(arith.divide, other._square_magnitude(arith))
        if is_scalar(other):
            return self._divide_scalar(arith, other)
        raise TypeError(f"Can't divide ComplexNumber by {type(other).__name__}")

    def divide_unchecked(self, other: Any) -> Any:
        """Quotient by a ComplexNumber (ComplexNumber), a Vector2 (Vector2) or a scalar (ComplexNumber).

        Division by a complex number or vector goes through its squared magnitude; the checked
        form uses the checked squared magnitude.
        """
        return self._divide(self._scalar().unchecked, other)

    def divide_checked(self, other: Any) -> Any:
        return self._divide(self._scalar().checked, other)

    def _rdivide(self, arith: Arithmetic, scalar: T) -> ComplexNumber:
        denominator = self._square_magnitude(arith)
        return ComplexNumber(arith.divide(arith.multiply(scalar, self.real), denominator),
                             arith.divide(arith.negate(arith.multiply(scalar, self.imaginary)), denominator))

    def rdivide_unchecked(self, scalar: T) -> ComplexNumber:
        """Scalar divided by this number."""
        return self._rdivide(self._scalar().unchecked, scalar)

    def rdivide_checked(self, scalar: T) -> ComplexNumber:
        return self._rdivide(self._scalar().checked, scalar)

    def _reciprocal(self, arith: Arithmetic) -> ComplexNumber:
        return self._conjugate(arith)._divide_scalar(arith, self._square_magnitude(arith))

    def reciprocal_unchecked(self) -> ComplexNumber:
        """``conjugate / |self|²``; zero divides by zero."""
        return self._reciprocal(self._scalar().unchecked)

    def reciprocal_checked(self) -> ComplexNumber:
        return self._reciprocal(self._scalar().checked)

    def _conjugate(self, arith: Arithmetic) -> ComplexNumber:
        return ComplexNumber(self.real, arith.negate(self.imaginary))

    def conjugate_unchecked(self) -> ComplexNumber:
        return self._conjugate(self._scalar().unchecked)

    def conjugate_checked(self) -> ComplexNumber:
        return self._conjugate(self._scalar().checked)

    def negate_unchecked(self) -> ComplexNumber:
        arith = self._scalar().unchecked
        return ComplexNumber(arith.negate(self.real), arith.negate(self.imaginary))

    def negate_checked(self) -> ComplexNumber:
        arith = self._scalar().checked
        return ComplexNumber(arith.negate(self.real), arith.negate(self.imaginary))

    def increment_unchecked(self) -> ComplexNumber:
        """Add one to the real part."""
        ops = self._scalar()
        return ComplexNumber(ops.add_unchecked(self.real, ops.one), self.imaginary)

    def increment_checked(self) -> ComplexNumber:
        ops = self._scalar()
        return ComplexNumber(ops.add_checked(self.real, ops.one), self.imaginary)

    def decrement_unchecked(self) -> ComplexNumber:
        """Subtract one from the real part."""
        ops = self._scalar()
        return ComplexNumber(ops.subtract_unchecked(self.real, ops.one), self.imaginary)

    def decrement_checked(self) -> ComplexNumber:
        ops = self._scalar()
        return ComplexNumber(ops.subtract_checked(self.real, ops.one), self.imaginary)

    # ----------------------------- Predicates -----------------------------

    def _both(self, predicate_name: str) -> bool:
        predicate = getattr(self._scalar(), predicate_name)
        return predicate(self.real) and predicate(self.imaginary)

    def is_real(self) -> bool:
        """Imaginary part is exactly zero."""
        return self._scalar().is_zero(self.imaginary)

    def is_imaginary(self) -> bool:
        """Real part is exactly zero."""
        return self._scalar().is_zero(self.real)

    def is_complex(self) -> bool:
        """Both parts are non-zero."""
        ops = self._scalar()
        return not ops.is_zero(self.real) and not ops.is_zero(self.imaginary)

    def is_zero(self) -> bool:
        return self._both('is_zero')

    def is_positive(self) -> bool:
        """Real with a positive real part."""
        return self.is_real() and self._scalar().is_positive(self.real)

    def is_negative(self) -> bool:
        """Real with a negative real part."""
        return self.is_real() and self._scalar().is_negative(self.real)

    def is_integer(self) -> bool:
        return self.is_real() and self._scalar().is_integer(self.real)

    def is_even_integer(self) -> bool:
        return self.is_real() and self._scalar().is_even_integer(self.real)

    def is_odd_integer(self) -> bool:
        return self.is_real() and self._scalar().is_odd_integer(self.real)

    def is_nan(self) -> bool:
        """Either part is NaN."""
        ops = self._scalar()
        return ops.is_nan(self.real) or ops.is_nan(self.imaginary)

    def is_finite(self) -> bool:
        return self._both('is_finite')

    def is_infinity(self) -> bool:
        """Either part is infinite."""
        ops = self._scalar()
        return ops.is_infinity(self.real) or ops.is_infinity(self.imaginary)

    def is_positive_infinity(self) -> bool:
        return self.is_real() and self._scalar().is_positive_infinity(self.real)

    def is_negative_infinity(self) -> bool:
        return self.is_real() and self._scalar().is_negative_infinity(self.real)

    def is_normal(self) -> bool:
        """Both parts are zero or normal, and not both zero."""
        ops = self._scalar()
        parts = (self.real, self.imaginary)
        return (all(ops.is_zero(part) or ops.is_normal(part) for part in parts)
                and not all(ops.is_zero(part) for part in parts))

    def is_subnormal(self) -> bool:
        ops = self._scalar()
        return ops.is_subnormal(self.real) or ops.is_subnormal(self.imaginary)

    def is_canonical(self) -> bool:
        return self._both('is_canonical')

    # ----------------------------- Operators -----------------------------

    @staticmethod
    def _is_operand(other: Any) -> bool:
        return isinstance(other, (ComplexNumber, Vector2)) or is_scalar(other)

    def __add__(self, other: Any) -> ComplexNumber:
        if not (isinstance(other, ComplexNumber) or is_scalar(other)):
            return NotImplemented
        return self.add_unchecked(other)

    def __radd__(self, other: Any) -> ComplexNumber:
        if not is_scalar(other):
            return NotImplemented
        return self.add_unchecked(other)

    def __sub__(self, other: Any) -> ComplexNumber:
        if not (isinstance(other, ComplexNumber) or is_scalar(other)):
            return NotImplemented
        return self.subtract_unchecked(other)

    def __rsub__(self, other: Any) -> ComplexNumber:
        if not is_scalar(other):
            return NotImplemented
        return self.rsubtract_unchecked(other)

    def __mul__(self, other: Any) -> Any:
        if not self._is_operand(other):
            return NotImplemented
        return self.multiply_unchecked(other)

    def __rmul__(self, other: Any) -> ComplexNumber:
        if not is_scalar(other):
            return NotImplemented
        return self.multiply_unchecked(other)

    def __truediv__(self, other: Any) -> Any:
        if not self._is_operand(other):
            return NotImplemented
        return self.divide_unchecked(other)

    def __rtruediv__(self, other: Any) -> ComplexNumber:
        if not is_scalar(other):
            return NotImplemented
        return self.rdivide_unchecked(other)

    def __neg__(self) -> ComplexNumber:
        return self.negate_unchecked()

    def __pos__(self) -> ComplexNumber:
        return self

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ComplexNumber):
            return NotImplemented
        return self.real == other.real and self.imaginary == other.imaginary

    def __hash__(self) -> int:
        return hash((self.real, self.imaginary))

    # ----------------------------- Text -----------------------------

    def try_format(self, buffer: FormatBuffer, format_spec: str = '',
                   provider: Optional[FormatProvider] = None) -> bool:
        """Write ``a + bi``, ``bi`` or ``a`` into buffer.

        Returns:
            True if the text fit; otherwise False, with the buffer unchanged.
        """
        info = ComplexNumberFormatInfo.get_instance(provider)
        return info.try_format(buffer, self.real, self.imaginary, format_spec)

    def to_string(self, format_spec: str = '', provider: Optional[FormatProvider] = None) -> str:
        buffer = FormatBuffer()
        self.try_format(buffer, format_spec, provider)
        return buffer.getvalue()

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, format_spec: str) -> str:
        return self.to_string(format_spec)

    @classmethod
    def parse(cls, text: str, scalar_type: type = float,
              provider: Optional[FormatProvider] = None) -> ComplexNumber:
        """Parse ``a + bi``, ``bi`` or ``a``.

        Raises:
            TypeError: If text is not a string.
            QuantityFormatError: If the text is not a valid complex number.
        """
        if not isinstance(text, str):
            raise TypeError(f"Expected str, got {type(text).__name__}")
        info = ComplexNumberFormatInfo.get_instance(provider)
        return cls(*info.parse_parts(text, scalar_type, cls.__name__))

    @classmethod
    def try_parse(cls, text: str, scalar_type: type = float,
                  provider: Optional[FormatProvider] = None) -> Optional[ComplexNumber]:
        """Like `parse`, but returns None instead of raising QuantityFormatError."""
        try:
            return cls.parse(text, scalar_type, provider)
        except QuantityFormatError as error:
            logger.debug(f"{cls.__name__}.try_parse: {error}")
            return None
