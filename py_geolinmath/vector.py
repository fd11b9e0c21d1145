"""Immutable 2D and 3D vectors over any registered scalar type.

Every arithmetic operation comes in a checked/unchecked pair of named methods (see
[py_geolinmath.scalar][]); the Python operators are the unchecked forms:

    * ``a + b``, ``a - b``, ``-a``: componentwise.
    * ``a * s``, ``s * a``, ``a / s``: scaling by a scalar.
    * ``s / a``: scalar over vector, ``s * a / |a|²``.
    * ``a * b`` for two `Vector2`: geometric product, a `ComplexNumber` (dot, determinant).
    * ``a / b`` for two `Vector2`: ``a * b / |b|²``.
    * ``a * z``, ``a / z`` for a `ComplexNumber` z: rotation-scaling of a `Vector2`.

Examples:
    >>> from py_geolinmath import Vector2
    >>> Vector2(1, 2) + Vector2(3, 4)
    Vector2(x=4, y=6)
    >>> Vector2(1, 2) * Vector2(3, 4)
    ComplexNumber(real=11, imaginary=-2)
    >>> str(Vector2(1.5, -2.0))
    '(1.5, -2.0)'
"""

# Standard library imports
from __future__ import annotations
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, ClassVar, Iterable, Iterator, Optional, Tuple, TypeVar, TYPE_CHECKING

# Third-party imports
from typing_extensions import Self

# Local imports
from py_geolinmath.exceptions import ComponentCountError, QuantityFormatError
from py_geolinmath.globalization import FormatBuffer, FormatProvider, VectorFormatInfo
from py_geolinmath.logger import logger
from py_geolinmath.quantity import MultiplicativeInverse, Quantity
from py_geolinmath.scalar import Arithmetic, ScalarOps, is_scalar, scalar_ops

if TYPE_CHECKING:
    from py_geolinmath.complex_number import ComplexNumber

__all__ = ('Vector', 'Vector2', 'Vector3')

T = TypeVar('T')


def _complex_type() -> type:
    # complex_number imports this module at load time
    from py_geolinmath.complex_number import ComplexNumber
    return ComplexNumber


class Vector(Quantity[T], MultiplicativeInverse):
    """Base of the fixed-dimension vector types.

    Subclasses are frozen dataclasses that set `dimension` and `_fields`; everything here is
    expressed over `components` and works for any dimension.

    Equality compares the components with ``==`` and only between vectors of the same type,
    so a vector with a NaN component is not equal to itself.
    """

    __slots__ = ()

    # numpy scalars on the left defer to the reflected operators
    __array_ufunc__ = None

    dimension: ClassVar[int]
    _fields: ClassVar[Tuple[str, ...]]

    @property
    def components(self) -> Tuple[T, ...]:
        return tuple(getattr(self, name) for name in self._fields)

    def __iter__(self) -> Iterator[T]:
        return iter(self.components)

    def _scalar(self) -> ScalarOps:
        return scalar_ops(getattr(self, self._fields[0]))

    def _map(self, op: Callable[..., Any], *args: Any) -> Self:
        return type(self)(*(op(component, *args) for component in self.components))

    def _zip(self, op: Callable[[Any, Any], Any], other: Vector) -> Self:
        return type(self)(*map(op, self.components, other.components))

    def _require_same_type(self, other: Any, operation: str) -> None:
        if type(other) is not type(self):
            raise TypeError(f"{type(self).__name__}.{operation} requires a {type(self).__name__}, "
                            f"got {type(other).__name__}")

    # ----------------------------- Creation -----------------------------

    @classmethod
    def create(cls, components: Iterable[T]) -> Self:
        """Create a vector from exactly `dimension` components.

        Raises:
            ComponentCountError: If the number of components is not `dimension`.
        """
        values = tuple(components)
        if len(values) != cls.dimension:
            raise ComponentCountError(cls.dimension, len(values), cls.__name__)
        return cls(*values)

    @classmethod
    def uniform(cls, value: T) -> Self:
        """Vector with every component equal to value."""
        return cls(*(value,) * cls.dimension)

    @classmethod
    def origin(cls, scalar_type: type = float) -> Self:
        return cls.uniform(scalar_ops(scalar_type).zero)

    @classmethod
    def _axis_unit(cls, axis: int, scalar_type: type, negative: bool = False) -> Self:
        ops = scalar_ops(scalar_type)
        values = [ops.zero] * cls.dimension
        values[axis] = ops.negate_unchecked(ops.one) if negative else ops.one
        return cls(*values)

    @classmethod
    def axis_unit_vectors(cls, scalar_type: type = float) -> Tuple[Self, ...]:
        """Unit vectors along every axis in both directions.

        Negative directions are omitted for scalar types without negative values.
        The order of the result is unspecified.
        """
        ops = scalar_ops(scalar_type)
        units = [cls._axis_unit(axis, scalar_type) for axis in range(cls.dimension)]
        if ops.is_negative(ops.negate_unchecked(ops.one)):
            units.extend(cls._axis_unit(axis, scalar_type, negative=True) for axis in range(cls.dimension))
        return tuple(units)

    # ----------------------------- Arithmetic -----------------------------

    def add_unchecked(self, other: Self) -> Self:
        self._require_same_type(other, 'add_unchecked')
        return self._zip(self._scalar().unchecked.add, other)

    def add_checked(self, other: Self) -> Self:
        self._require_same_type(other, 'add_checked')
        return self._zip(self._scalar().checked.add, other)

    def subtract_unchecked(self, other: Self) -> Self:
        self._require_same_type(other, 'subtract_unchecked')
        return self._zip(self._scalar().unchecked.subtract, other)

    def subtract_checked(self, other: Self) -> Self:
        self._require_same_type(other, 'subtract_checked')
        return self._zip(self._scalar().checked.subtract, other)

    def negate_unchecked(self) -> Self:
        return self._map(self._scalar().unchecked.negate)

    def negate_checked(self) -> Self:
        return self._map(self._scalar().checked.negate)

    def scale_unchecked(self, scalar: T) -> Self:
        """Multiply every component by a scalar."""
        return self._map(self._scalar().unchecked.multiply, scalar)

    def scale_checked(self, scalar: T) -> Self:
        return self._map(self._scalar().checked.multiply, scalar)

    def _is_operand(self, other: Any) -> bool:
        return is_scalar(other)

    def multiply_unchecked(self, other: Any) -> Any:
        """Product of this vector and a scalar."""
        if not is_scalar(other):
            raise TypeError(f"Can't multiply {type(self).__name__} by {type(other).__name__}")
        return self.scale_unchecked(other)

    def multiply_checked(self, other: Any) -> Any:
        if not is_scalar(other):
            raise TypeError(f"Can't multiply {type(self).__name__} by {type(other).__name__}")
        return self.scale_checked(other)

    def divide_unchecked(self, other: Any) -> Any:
        """Quotient of this vector and a scalar."""
        if not is_scalar(other):
            raise TypeError(f"Can't divide {type(self).__name__} by {type(other).__name__}")
        return self._map(self._scalar().unchecked.divide, other)

    def divide_checked(self, other: Any) -> Any:
        if not is_scalar(other):
            raise TypeError(f"Can't divide {type(self).__name__} by {type(other).__name__}")
        return self._map(self._scalar().checked.divide, other)

    def _rdivide(self, arith: Arithmetic, scalar: T) -> Self:
        return self._map(arith.multiply, scalar)._map(arith.divide, self._square_magnitude(arith))

    def rdivide_unchecked(self, scalar: T) -> Self:
        """Scalar divided by this vector, ``scalar * self / |self|²``."""
        return self._rdivide(self._scalar().unchecked, scalar)

    def rdivide_checked(self, scalar: T) -> Self:
        return self._rdivide(self._scalar().checked, scalar)

    def _dot(self, arith: Arithmetic, other: Vector) -> T:
        return reduce(arith.add, map(arith.multiply, self.components, other.components))

    def dot_unchecked(self, other: Self) -> T:
        self._require_same_type(other, 'dot_unchecked')
        return self._dot(self._scalar().unchecked, other)

    def dot_checked(self, other: Self) -> T:
        self._require_same_type(other, 'dot_checked')
        return self._dot(self._scalar().checked, other)

    def _square_magnitude(self, arith: Arithmetic) -> T:
        return self._dot(arith, self)

    def square_magnitude_unchecked(self) -> T:
        return self._square_magnitude(self._scalar().unchecked)

    def square_magnitude_checked(self) -> T:
        return self._square_magnitude(self._scalar().checked)

    def _taxicab_magnitude(self, arith: Arithmetic) -> T:
        return reduce(arith.add, map(arith.abs, self.components))

    def taxicab_magnitude_unchecked(self) -> T:
        """Sum of the absolute values of the components."""
        return self._taxicab_magnitude(self._scalar().unchecked)

    def taxicab_magnitude_checked(self) -> T:
        return self._taxicab_magnitude(self._scalar().checked)

    def _reciprocal(self, arith: Arithmetic) -> Self:
        return self._map(arith.divide, self._square_magnitude(arith))

    def reciprocal_unchecked(self) -> Self:
        """``self / |self|²``; the zero vector divides by zero."""
        return self._reciprocal(self._scalar().unchecked)

    def reciprocal_checked(self) -> Self:
        return self._reciprocal(self._scalar().checked)

    # ----------------------------- Bounds -----------------------------

    def is_in_box(self, min_corner: Self, max_corner: Self) -> bool:
        """Whether every component lies within the inclusive range of the corners."""
        return all(low <= value <= high
                   for value, low, high in zip(self.components, min_corner.components, max_corner.components))

    def clamp(self, min_corner: Self, max_corner: Self) -> Self:
        """Clamp every component to the inclusive range of the corners.

        Raises:
            InvalidArgumentError: If a component of min_corner is greater than the one of max_corner.
        """
        ops = self._scalar()
        return type(self)(*map(ops.clamp, self.components, min_corner.components, max_corner.components))

    # ----------------------------- Conversions -----------------------------

    def convert_checked(self, scalar_type: type) -> Vector:
        """Vector of scalar_type, raising ScalarOverflowError for unrepresentable components."""
        return self._map(scalar_ops(scalar_type).create_checked)

    def convert_saturating(self, scalar_type: type) -> Vector:
        return self._map(scalar_ops(scalar_type).create_saturating)

    def convert_truncating(self, scalar_type: type) -> Vector:
        return self._map(scalar_ops(scalar_type).create_truncating)

    # ----------------------------- Operators -----------------------------

    def __add__(self, other: Any) -> Self:
        if type(other) is not type(self):
            return NotImplemented
        return self.add_unchecked(other)

    def __sub__(self, other: Any) -> Self:
        if type(other) is not type(self):
            return NotImplemented
        return self.subtract_unchecked(other)

    def __neg__(self) -> Self:
        return self.negate_unchecked()

    def __pos__(self) -> Self:
        return self

    def __mul__(self, other: Any) -> Any:
        if not self._is_operand(other):
            return NotImplemented
        return self.multiply_unchecked(other)

    def __rmul__(self, other: Any) -> Any:
        if not is_scalar(other):
            return NotImplemented
        return self.scale_unchecked(other)

    def __truediv__(self, other: Any) -> Any:
        if not self._is_operand(other):
            return NotImplemented
        return self.divide_unchecked(other)

    def __rtruediv__(self, other: Any) -> Any:
        if not is_scalar(other):
            return NotImplemented
        return self.rdivide_unchecked(other)

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(a == b for a, b in zip(self.components, other.components))

    def __hash__(self) -> int:
        return hash(self.components)

    # ----------------------------- Text -----------------------------

    def try_format(self, buffer: FormatBuffer, format_spec: str = '',
                   provider: Optional[FormatProvider] = None) -> bool:
        """Write the text form of this vector into buffer.

        Args:
            buffer: Destination.
            format_spec: Python format spec applied to every component.
            provider: Format provider, None for the current defaults.

        Returns:
            True if the text fit; otherwise False, with the buffer unchanged.
        """
        return VectorFormatInfo.get_instance(provider).try_format(buffer, self.components, format_spec)

    def to_string(self, format_spec: str = '', provider: Optional[FormatProvider] = None) -> str:
        buffer = FormatBuffer()
        self.try_format(buffer, format_spec, provider)
        return buffer.getvalue()

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, format_spec: str) -> str:
        return self.to_string(format_spec)

    @classmethod
    def parse(cls, text: str, scalar_type: type = float, provider: Optional[FormatProvider] = None) -> Self:
        """Parse the text form of a vector.

        Args:
            text: Text such as ``"(1, 2)"``.
            scalar_type: Type of the parsed components.
            provider: Format provider, None for the current defaults.

        Raises:
            TypeError: If text is not a string.
            QuantityFormatError: If the text is not a valid vector of this dimension.
        """
        if not isinstance(text, str):
            raise TypeError(f"Expected str, got {type(text).__name__}")
        info = VectorFormatInfo.get_instance(provider)
        return cls(*info.parse_components(text, cls.dimension, scalar_type, cls.__name__))

    @classmethod
    def try_parse(cls, text: str, scalar_type: type = float,
                  provider: Optional[FormatProvider] = None) -> Optional[Self]:
        """Like `parse`, but returns None instead of raising QuantityFormatError."""
        try:
            return cls.parse(text, scalar_type, provider)
        except QuantityFormatError as error:
            logger.debug(f"{cls.__name__}.try_parse: {error}")
            return None


@dataclass(frozen=True, eq=False)
class Vector2(Vector[T]):
    """Two-dimensional vector.

    Besides the common vector operations, a Vector2 multiplies and divides with another
    Vector2 (geometric product) and with a ComplexNumber (rotation and scaling).

    Attributes:
        x: First component.
        y: Second component.
    """

    __slots__ = ('x', 'y')

    x: T
    y: T

    dimension: ClassVar[int] = 2
    _fields: ClassVar[Tuple[str, ...]] = ('x', 'y')

    @classmethod
    def to_positive_x(cls, scalar_type: type = float) -> Vector2:
        return cls._axis_unit(0, scalar_type)

    @classmethod
    def to_negative_x(cls, scalar_type: type = float) -> Vector2:
        return cls._axis_unit(0, scalar_type, negative=True)

    @classmethod
    def to_positive_y(cls, scalar_type: type = float) -> Vector2:
        return cls._axis_unit(1, scalar_type)

    @classmethod
    def to_negative_y(cls, scalar_type: type = float) -> Vector2:
        return cls._axis_unit(1, scalar_type, negative=True)

    def swizzle(self) -> Vector2:
        """Vector with the components exchanged."""
        return Vector2(self.y, self.x)

    def to_complex(self) -> ComplexNumber:
        return _complex_type()(self.x, self.y)

    def _determinant(self, arith: Arithmetic, other: Vector2) -> T:
        return arith.subtract(arith.multiply(self.x, other.y), arith.multiply(self.y, other.x))

    def determinant_unchecked(self, other: Vector2) -> T:
        """``self.x * other.y - self.y * other.x``."""
        self._require_same_type(other, 'determinant_unchecked')
        return self._determinant(self._scalar().unchecked, other)

    def determinant_checked(self, other: Vector2) -> T:
        self._require_same_type(other, 'determinant_checked')
        return self._determinant(self._scalar().checked, other)

    def _geometric_product(self, arith: Arithmetic, other: Vector2) -> ComplexNumber:
        return _complex_type()(self._dot(arith, other), self._determinant(arith, other))

    def geometric_product_unchecked(self, other: Vector2) -> ComplexNumber:
        """``ComplexNumber(dot, determinant)``."""
        self._require_same_type(other, 'geometric_product_unchecked')
        return self._geometric_product(self._scalar().unchecked, other)

    def geometric_product_checked(self, other: Vector2) -> ComplexNumber:
        self._require_same_type(other, 'geometric_product_checked')
        return self._geometric_product(self._scalar().checked, other)

    def _rotate(self, arith: Arithmetic, z: ComplexNumber) -> Vector2:
        return Vector2(arith.subtract(arith.multiply(self.x, z.real), arith.multiply(self.y, z.imaginary)),
                       arith.add(arith.multiply(self.y, z.real), arith.multiply(self.x, z.imaginary)))

    def _multiply(self, arith: Arithmetic, other: Any) -> Any:
        if isinstance(other, Vector2):
            return self._geometric_product(arith, other)
        if isinstance(other, _complex_type()):
            return self._rotate(arith, other)
        if is_scalar(other):
            return self._map(arith.multiply, other)
        raise TypeError(f"Can't multiply Vector2 by {type(other).__name__}")

    def multiply_unchecked(self, other: Any) -> Any:
        """Product with a Vector2 (ComplexNumber), a ComplexNumber (Vector2) or a scalar (Vector2)."""
        return self._multiply(self._scalar().unchecked, other)

    def multiply_checked(self, other: Any) -> Any:
        return self._multiply(self._scalar().checked, other)

    def _divide(self, arith: Arithmetic, other: Any) -> Any:
        if isinstance(other, Vector2):
            return self._geometric_product(arith, other)._divide_scalar(arith, other._square_magnitude(arith))
        complex_type = _complex_type()
        if isinstance(other, complex_type):
            rotated = other._rotate(arith, self)
            return rotated._map(arith.divide, other._square_magnitude(arith))
        if is_scalar(other):
            return self._map(arith.divide, other)
        raise TypeError(f"Can't divide Vector2 by {type(other).__name__}")

    def divide_unchecked(self, other: Any) -> Any:
        """Quotient by a Vector2 (ComplexNumber), a ComplexNumber (Vector2) or a scalar (Vector2).

        Division by a vector or complex number goes through its squared magnitude; the checked
        form uses the checked squared magnitude.
        """
        return self._divide(self._scalar().unchecked, other)

    def divide_checked(self, other: Any) -> Any:
        return self._divide(self._scalar().checked, other)

    def _is_operand(self, other: Any) -> bool:
        return isinstance(other, (Vector2, _complex_type())) or is_scalar(other)


@dataclass(frozen=True, eq=False)
class Vector3(Vector[T]):
    """Three-dimensional vector.

    Attributes:
        x: First component.
        y: Second component.
        z: Third component.
    """

    __slots__ = ('x', 'y', 'z')

    x: T
    y: T
    z: T

    dimension: ClassVar[int] = 3
    _fields: ClassVar[Tuple[str, ...]] = ('x', 'y', 'z')

    @classmethod
    def from_vector2(cls, xy: Vector2, z: T) -> Vector3:
        return cls(xy.x, xy.y, z)

    @classmethod
    def to_positive_x(cls, scalar_type: type = float) -> Vector3:
        return cls._axis_unit(0, scalar_type)

    @classmethod
    def to_negative_x(cls, scalar_type: type = float) -> Vector3:
        return cls._axis_unit(0, scalar_type, negative=True)

    @classmethod
    def to_positive_y(cls, scalar_type: type = float) -> Vector3:
        return cls._axis_unit(1, scalar_type)

    @classmethod
    def to_negative_y(cls, scalar_type: type = float) -> Vector3:
        return cls._axis_unit(1, scalar_type, negative=True)

    @classmethod
    def to_positive_z(cls, scalar_type: type = float) -> Vector3:
        return cls._axis_unit(2, scalar_type)

    @classmethod
    def to_negative_z(cls, scalar_type: type = float) -> Vector3:
        return cls._axis_unit(2, scalar_type, negative=True)
