"""Scalar numeric contract.

Every quantity type in the library is generic over the type of its components. This module
defines what the quantity algorithms require from that scalar type and provides the
implementations for the scalar types supported out of the box.

Each arithmetic entry point exists twice, as separately named operations:

    * ``*_unchecked``: the scalar's native behavior on overflow (fixed-width integers wrap,
      IEEE floats produce infinities, ``Decimal`` produces ``Infinity``).
    * ``*_checked``: raises [`ScalarOverflowError`][py_geolinmath.exceptions.ScalarOverflowError]
      instead of producing a value outside the representable range.

Both produce the same result whenever nothing overflows.

Supported scalar types:
    * `int`, `fractions.Fraction`: exact, never overflow. `int` division floors.
    * numpy fixed-width integers (`int8` ... `uint64`): wrap modulo 2**bits. Division floors.
    * `float` and numpy floats (`float16`, `float32`, `float64`): IEEE 754.
    * `decimal.Decimal`: arithmetic in the current decimal context.

Other types are supported by registering a [`ScalarOps`][py_geolinmath.scalar.ScalarOps]
subclass with [`register_scalar`][py_geolinmath.scalar.register_scalar].

Examples:
    >>> import numpy as np
    >>> ops = scalar_ops(np.int8)
    >>> ops.add_unchecked(np.int8(127), np.int8(1))
    np.int8(-128)
    >>> ops.add_checked(np.int8(127), np.int8(1))
    Traceback (most recent call last):
    ...
    py_geolinmath.exceptions.ScalarOverflowError: add(np.int8(127), np.int8(1)) is not representable by int8
"""

# Standard library imports
from __future__ import annotations
import decimal
import math
import operator
from abc import ABC, abstractmethod
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar, Union, TYPE_CHECKING

# Third-party imports
import numpy as np
from typing_extensions import TypeAlias, override

# Local imports
from py_geolinmath.exceptions import InvalidArgumentError, ScalarOverflowError, ScalarTypeError
from py_geolinmath.logger import logger

if TYPE_CHECKING:
    from py_geolinmath.globalization import NumberFormat

__all__ = (
    'ScalarOps',
    'ExactOps',
    'FixedWidthIntOps',
    'FloatOps',
    'DecimalOps',
    'Arithmetic',
    'register_scalar',
    'scalar_ops',
    'is_scalar',
)

T = TypeVar('T')
ArithmeticOp: TypeAlias = Callable[..., Any]


def _to_python(value: Any) -> Any:
    """Unwrap numpy scalars into the equivalent Python number."""
    if isinstance(value, np.generic):
        return value.item()
    return value


class ScalarOps(ABC, Generic[T]):
    """Operations the quantity types require from one scalar type.

    Subclasses implement `_apply`, which evaluates a Python operator on the operands under
    one overflow policy; the public checked/unchecked pairs are defined on top of it.

    Attributes:
        scalar_type: The type this instance describes.
        checked: [`Arithmetic`][py_geolinmath.scalar.Arithmetic] view using the checked operations.
        unchecked: [`Arithmetic`][py_geolinmath.scalar.Arithmetic] view using the unchecked operations.
    """

    def __init__(self, scalar_type: type, divide: ArithmeticOp = operator.truediv):
        self.scalar_type: type = scalar_type
        self._divide_op: ArithmeticOp = divide
        self.checked: Arithmetic = Arithmetic(self, checked=True)
        self.unchecked: Arithmetic = Arithmetic(self, checked=False)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.scalar_type.__name__})'

    @abstractmethod
    def _apply(self, name: str, op: ArithmeticOp, operands: Tuple[Any, ...], checked: bool) -> T:
        """Evaluate `op(*operands)` under the checked or unchecked overflow policy.

        Args:
            name: Operation name used in overflow errors.
            op: Python operator to evaluate.
            operands: Operands of the operation.
            checked: Whether to raise on overflow instead of producing the native result.
        """

    @property
    def zero(self) -> T:
        """Additive identity."""
        return self.scalar_type(0)

    @property
    def one(self) -> T:
        """Multiplicative identity."""
        return self.scalar_type(1)

    def arithmetic(self, checked: bool) -> Arithmetic:
        return self.checked if checked else self.unchecked

    # ----------------------------- Arithmetic -----------------------------

    def add_unchecked(self, a: T, b: T) -> T:
        return self._apply('add', operator.add, (a, b), False)

    def add_checked(self, a: T, b: T) -> T:
        return self._apply('add', operator.add, (a, b), True)

    def subtract_unchecked(self, a: T, b: T) -> T:
        return self._apply('subtract', operator.sub, (a, b), False)

    def subtract_checked(self, a: T, b: T) -> T:
        return self._apply('subtract', operator.sub, (a, b), True)

    def multiply_unchecked(self, a: T, b: T) -> T:
        return self._apply('multiply', operator.mul, (a, b), False)

    def multiply_checked(self, a: T, b: T) -> T:
        return self._apply('multiply', operator.mul, (a, b), True)

    def divide_unchecked(self, a: T, b: T) -> T:
        return self._apply('divide', self._divide_op, (a, b), False)

    def divide_checked(self, a: T, b: T) -> T:
        return self._apply('divide', self._divide_op, (a, b), True)

    def negate_unchecked(self, a: T) -> T:
        return self._apply('negate', operator.neg, (a,), False)

    def negate_checked(self, a: T) -> T:
        return self._apply('negate', operator.neg, (a,), True)

    def abs_unchecked(self, a: T) -> T:
        return self._apply('abs', abs, (a,), False)

    def abs_checked(self, a: T) -> T:
        return self._apply('abs', abs, (a,), True)

    def clamp(self, value: T, min_value: T, max_value: T) -> T:
        """Clamp value to the inclusive range [min_value, max_value].

        Raises:
            InvalidArgumentError: If min_value is greater than max_value.
        """
        if min_value > max_value:
            raise InvalidArgumentError(f"{min_value=} cannot be greater than {max_value=}")
        if value < min_value:
            return min_value
        if value > max_value:
            return max_value
        return value

    # ----------------------------- Predicates -----------------------------

    def is_zero(self, value: T) -> bool:
        return value == 0

    def is_negative(self, value: T) -> bool:
        return value < 0

    def is_positive(self, value: T) -> bool:
        return value >= 0

    def is_integer(self, value: T) -> bool:
        return value == int(value)

    def is_even_integer(self, value: T) -> bool:
        return self.is_integer(value) and int(value) % 2 == 0

    def is_odd_integer(self, value: T) -> bool:
        return self.is_integer(value) and int(value) % 2 == 1

    def is_nan(self, value: T) -> bool:
        return False

    def is_finite(self, value: T) -> bool:
        return True

    def is_infinity(self, value: T) -> bool:
        return False

    def is_positive_infinity(self, value: T) -> bool:
        return self.is_infinity(value) and value > 0

    def is_negative_infinity(self, value: T) -> bool:
        return self.is_infinity(value) and value < 0

    def is_real_number(self, value: T) -> bool:
        return not self.is_nan(value)

    def is_normal(self, value: T) -> bool:
        return not self.is_zero(value)

    def is_subnormal(self, value: T) -> bool:
        return False

    def is_canonical(self, value: T) -> bool:
        return True

    # ----------------------------- Conversions -----------------------------

    def create_checked(self, value: Any) -> T:
        """Convert value to this scalar type, raising if it is not representable."""
        return self.scalar_type(_to_python(value))

    def create_saturating(self, value: Any) -> T:
        """Convert value to this scalar type, clamping values outside the representable range."""
        return self.create_checked(value)

    def create_truncating(self, value: Any) -> T:
        """Convert value to this scalar type, discarding bits that are not representable."""
        return self.create_checked(value)

    # ----------------------------- Text -----------------------------

    def _to_text(self, value: T, format_spec: str) -> str:
        return format(value, format_spec)

    @abstractmethod
    def _from_text(self, text: str) -> T:
        """Parse the invariant text form of a value; raise ValueError on failure."""

    def format(self, value: T, format_spec: str = '', number_format: Optional[NumberFormat] = None) -> str:
        """Format value with a Python format spec, localized by number_format."""
        text = self._to_text(value, format_spec)
        return number_format.localize(text) if number_format is not None else text

    def parse(self, text: str, number_format: Optional[NumberFormat] = None) -> T:
        """Parse the text of one value written with number_format.

        Raises:
            ValueError: If the text is not a valid value of this scalar type.
        """
        if number_format is not None:
            text = number_format.delocalize(text)
        return self._from_text(text)


class ExactOps(ScalarOps[T]):
    """Arbitrary-precision scalars (`int`, `Fraction`); arithmetic never overflows."""

    @override
    def _apply(self, name: str, op: ArithmeticOp, operands: Tuple[Any, ...], checked: bool) -> T:
        return op(*operands)

    @override
    def create_checked(self, value: Any) -> T:
        try:
            return self.scalar_type(_to_python(value))
        except OverflowError as exc:
            raise ScalarOverflowError('create', (value,), self.scalar_type) from exc

    @override
    def _from_text(self, text: str) -> T:
        return self.scalar_type(text)


class FixedWidthIntOps(ScalarOps[T]):
    """numpy fixed-width integers.

    Arithmetic is evaluated on Python integers; the unchecked result is wrapped to the
    width of the type, the checked result raises if it does not fit. Division floors.
    """

    def __init__(self, scalar_type: type):
        super().__init__(scalar_type, divide=operator.floordiv)
        info = np.iinfo(scalar_type)
        self.bits: int = info.bits
        self.min_value: int = int(info.min)
        self.max_value: int = int(info.max)

    def _wrap(self, value: int) -> int:
        return (value - self.min_value) % (1 << self.bits) + self.min_value

    def _fits(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value

    @override
    def _apply(self, name: str, op: ArithmeticOp, operands: Tuple[Any, ...], checked: bool) -> T:
        result = op(*(operator.index(each) for each in operands))
        if self._fits(result):
            return self.scalar_type(result)
        if checked:
            raise ScalarOverflowError(name, operands, self.scalar_type)
        return self.scalar_type(self._wrap(result))

    @override
    def is_integer(self, value: T) -> bool:
        return True

    @override
    def create_checked(self, value: Any) -> T:
        try:
            integral = int(_to_python(value))
        except OverflowError as exc:
            raise ScalarOverflowError('create', (value,), self.scalar_type) from exc
        if not self._fits(integral):
            raise ScalarOverflowError('create', (value,), self.scalar_type)
        return self.scalar_type(integral)

    @override
    def create_saturating(self, value: Any) -> T:
        value = _to_python(value)
        if isinstance(value, float):
            if math.isnan(value):
                return self.zero
            if math.isinf(value):
                return self.scalar_type(self.max_value if value > 0 else self.min_value)
        return self.scalar_type(min(max(int(value), self.min_value), self.max_value))

    @override
    def create_truncating(self, value: Any) -> T:
        return self.scalar_type(self._wrap(int(_to_python(value))))

    @override
    def _to_text(self, value: T, format_spec: str) -> str:
        return format(int(value), format_spec)

    @override
    def _from_text(self, text: str) -> T:
        value = int(text)
        if not self._fits(value):
            raise ValueError(f"{text!r} is out of range for {self.scalar_type.__name__}")
        return self.scalar_type(value)


class FloatOps(ScalarOps[T]):
    """IEEE 754 binary floating point (`float` and numpy floating types).

    Unchecked arithmetic returns the IEEE result. Checked arithmetic raises when finite
    operands produce an infinity, and raises ZeroDivisionError on division by zero.
    """

    def __init__(self, scalar_type: type):
        super().__init__(scalar_type)
        info = np.finfo(scalar_type)
        self.smallest_normal: float = float(info.smallest_normal)
        self.max_value: float = float(info.max)

    @override
    def _apply(self, name: str, op: ArithmeticOp, operands: Tuple[Any, ...], checked: bool) -> T:
        if checked and op is operator.truediv and operands[1] == 0:
            raise ZeroDivisionError(f"{self.scalar_type.__name__} division by zero")
        with np.errstate(all='ignore'):
            result = op(*operands)
        if checked and math.isinf(result) and all(math.isfinite(each) for each in operands):
            raise ScalarOverflowError(name, operands, self.scalar_type)
        return result

    @override
    def is_negative(self, value: T) -> bool:
        return math.copysign(1.0, value) < 0

    @override
    def is_positive(self, value: T) -> bool:
        return not math.isnan(value) and math.copysign(1.0, value) > 0

    @override
    def is_integer(self, value: T) -> bool:
        return math.isfinite(value) and float(value).is_integer()

    @override
    def is_nan(self, value: T) -> bool:
        return math.isnan(value)

    @override
    def is_finite(self, value: T) -> bool:
        return math.isfinite(value)

    @override
    def is_infinity(self, value: T) -> bool:
        return math.isinf(value)

    @override
    def is_normal(self, value: T) -> bool:
        return math.isfinite(value) and abs(value) >= self.smallest_normal

    @override
    def is_subnormal(self, value: T) -> bool:
        return 0 < abs(value) < self.smallest_normal

    @override
    def create_checked(self, value: Any) -> T:
        value = _to_python(value)
        try:
            with np.errstate(all='ignore'):
                result = self.scalar_type(value)
        except OverflowError as exc:
            raise ScalarOverflowError('create', (value,), self.scalar_type) from exc
        if math.isinf(result) and not (isinstance(value, float) and math.isinf(value)):
            raise ScalarOverflowError('create', (value,), self.scalar_type)
        return result

    @override
    def create_saturating(self, value: Any) -> T:
        value = _to_python(value)
        if isinstance(value, float) and not math.isfinite(value):
            return self.scalar_type(value)
        if value > self.max_value:
            return self.scalar_type(self.max_value)
        if value < -self.max_value:
            return self.scalar_type(-self.max_value)
        return self.scalar_type(value)

    @override
    def create_truncating(self, value: Any) -> T:
        with np.errstate(all='ignore'):
            return self.scalar_type(_to_python(value))

    @override
    def _to_text(self, value: T, format_spec: str) -> str:
        # str() of a numpy float is its shortest round-trip repr
        if not format_spec:
            return str(value)
        return format(float(value), format_spec)

    @override
    def _from_text(self, text: str) -> T:
        return self.scalar_type(float(text))


class DecimalOps(ScalarOps[Decimal]):
    """`decimal.Decimal`, evaluated in a local copy of the current context.

    Unchecked arithmetic clears the Overflow trap so an overflowing result becomes
    ``Infinity``; checked arithmetic sets it.
    """

    def __init__(self) -> None:
        super().__init__(Decimal)

    @override
    def _apply(self, name: str, op: ArithmeticOp, operands: Tuple[Any, ...], checked: bool) -> Decimal:
        with decimal.localcontext() as ctx:
            ctx.traps[decimal.Overflow] = checked
            try:
                return op(*operands)
            except decimal.Overflow as exc:
                raise ScalarOverflowError(name, operands, Decimal) from exc

    @override
    def is_negative(self, value: Decimal) -> bool:
        return value.is_signed()

    @override
    def is_positive(self, value: Decimal) -> bool:
        return not value.is_signed() and not value.is_nan()

    @override
    def is_integer(self, value: Decimal) -> bool:
        return value.is_finite() and value == value.to_integral_value()

    @override
    def is_nan(self, value: Decimal) -> bool:
        return value.is_nan()

    @override
    def is_finite(self, value: Decimal) -> bool:
        return value.is_finite()

    @override
    def is_infinity(self, value: Decimal) -> bool:
        return value.is_infinite()

    @override
    def is_normal(self, value: Decimal) -> bool:
        return value.is_normal()

    @override
    def is_subnormal(self, value: Decimal) -> bool:
        return value.is_subnormal()

    @override
    def is_canonical(self, value: Decimal) -> bool:
        return value.is_canonical()

    @override
    def create_checked(self, value: Any) -> Decimal:
        value = _to_python(value)
        if isinstance(value, Fraction):
            return self.divide_checked(Decimal(value.numerator), Decimal(value.denominator))
        return Decimal(value)

    @override
    def _from_text(self, text: str) -> Decimal:
        with decimal.localcontext() as ctx:
            ctx.traps[decimal.InvalidOperation] = True
            try:
                return Decimal(text)
            except decimal.InvalidOperation as exc:
                raise ValueError(f"Invalid decimal literal {text!r}") from exc


class Arithmetic:
    """Scalar arithmetic of one scalar type under one overflow policy.

    Generic quantity algorithms are written once against this interface and run with either
    `ops.checked` or `ops.unchecked`, so a checked operation is the unchecked algorithm
    evaluated with checked scalar arithmetic.

    Examples:
        >>> def dot(arith, a, b):
        ...     return arith.add(arith.multiply(a[0], b[0]), arith.multiply(a[1], b[1]))
        >>> dot(scalar_ops(int).checked, (1, 2), (3, 4))
        11
    """

    __slots__ = ('ops', 'is_checked')

    def __init__(self, ops: ScalarOps, checked: bool):
        self.ops: ScalarOps = ops
        self.is_checked: bool = checked

    def __repr__(self) -> str:
        return f"<Arithmetic {'checked' if self.is_checked else 'unchecked'} {self.ops.scalar_type.__name__}>"

    def add(self, a: Any, b: Any) -> Any:
        return self.ops.add_checked(a, b) if self.is_checked else self.ops.add_unchecked(a, b)

    def subtract(self, a: Any, b: Any) -> Any:
        return self.ops.subtract_checked(a, b) if self.is_checked else self.ops.subtract_unchecked(a, b)

    def multiply(self, a: Any, b: Any) -> Any:
        return self.ops.multiply_checked(a, b) if self.is_checked else self.ops.multiply_unchecked(a, b)

    def divide(self, a: Any, b: Any) -> Any:
        return self.ops.divide_checked(a, b) if self.is_checked else self.ops.divide_unchecked(a, b)

    def negate(self, a: Any) -> Any:
        return self.ops.negate_checked(a) if self.is_checked else self.ops.negate_unchecked(a)

    def abs(self, a: Any) -> Any:
        return self.ops.abs_checked(a) if self.is_checked else self.ops.abs_unchecked(a)


_SCALAR_OPS: Dict[type, ScalarOps] = {}


def register_scalar(scalar_type: type, ops: ScalarOps) -> None:
    """Register the scalar operations for a type (and, by default, its subclasses)."""
    _SCALAR_OPS[scalar_type] = ops
    logger.debug(f"Registered {ops!r} for {scalar_type.__name__}")


def scalar_ops(value_or_type: Union[type, Any]) -> ScalarOps:
    """Find the scalar operations of a value or a type.

    Args:
        value_or_type: A scalar value or a scalar type.

    Returns:
        The registered ScalarOps of the type or of its nearest registered base class.

    Raises:
        ScalarTypeError: If no scalar operations are registered for the type.
    """
    scalar_type = value_or_type if isinstance(value_or_type, type) else type(value_or_type)
    for each in scalar_type.__mro__:
        if (ops := _SCALAR_OPS.get(each)) is not None:
            return ops
    raise ScalarTypeError(f"{scalar_type.__name__} is not a registered scalar type")


def is_scalar(value: Any) -> bool:
    """Whether value has registered scalar operations."""
    return any(each in _SCALAR_OPS for each in type(value).__mro__)


register_scalar(int, ExactOps(int, divide=operator.floordiv))
register_scalar(Fraction, ExactOps(Fraction))
register_scalar(float, FloatOps(float))
register_scalar(Decimal, DecimalOps())
for _int_type in (np.int8, np.int16, np.int32, np.int64, np.intc, np.longlong,
                  np.uint8, np.uint16, np.uint32, np.uint64, np.uintc, np.ulonglong):
    register_scalar(_int_type, FixedWidthIntOps(_int_type))
for _float_type in (np.float16, np.float32, np.float64):
    register_scalar(_float_type, FloatOps(_float_type))
