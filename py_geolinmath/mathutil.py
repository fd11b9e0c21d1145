"""Square-root primitive used by the magnitude operations.

A generic scalar type has no square root of its own, so magnitudes go through a registry of
square-root providers keyed by scalar type. A provider is a callable
``provider(value, checked) -> value`` returning a value of the same scalar type.

Functions:
    sqrt_unchecked: Square root with the scalar's native overflow behavior.
    sqrt_checked: Square root that raises instead of overflowing.
    register_sqrt: Install a provider for a scalar type.
    unregister_sqrt: Remove the provider of a scalar type.
    install_default_sqrt: Install the providers for the built-in scalar types.

Examples:
    >>> sqrt_unchecked(25.0)
    5.0
    >>> sqrt_checked(-1.0)
    Traceback (most recent call last):
    ...
    py_geolinmath.exceptions.InvalidArgumentError: Square root of negative value -1.0
"""

import decimal
import math
import operator
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

import numpy as np
from typing_extensions import TypeAlias

from py_geolinmath.exceptions import InvalidArgumentError, SqrtNotImplementedError
from py_geolinmath.logger import logger

__all__ = (
    'SqrtProvider',
    'sqrt_unchecked',
    'sqrt_checked',
    'register_sqrt',
    'unregister_sqrt',
    'float_sqrt',
    'integer_sqrt',
    'decimal_sqrt',
    'install_default_sqrt',
)

SqrtProvider: TypeAlias = Callable[[Any, bool], Any]

_SQRT_PROVIDERS: Dict[type, SqrtProvider] = {}


def register_sqrt(scalar_type: type, provider: SqrtProvider) -> None:
    """Install the square-root provider of a scalar type (and its subclasses)."""
    _SQRT_PROVIDERS[scalar_type] = provider
    logger.debug(f"Registered square root {getattr(provider, '__name__', provider)} "
                 f"for {scalar_type.__name__}")


def unregister_sqrt(scalar_type: type) -> None:
    """Remove the square-root provider of a scalar type, if any."""
    if _SQRT_PROVIDERS.pop(scalar_type, None) is not None:
        logger.debug(f"Unregistered square root for {scalar_type.__name__}")


def _find_provider(value: Any) -> Optional[SqrtProvider]:
    for each in type(value).__mro__:
        if (provider := _SQRT_PROVIDERS.get(each)) is not None:
            return provider
    return None


def _sqrt(value: Any, checked: bool) -> Any:
    if value < 0:
        raise InvalidArgumentError(f"Square root of negative value {value!r}")
    provider = _find_provider(value)
    if provider is None:
        raise SqrtNotImplementedError(
            f"Square root is not implemented for {type(value).__name__}, "
            f"use register_sqrt() to provide one")
    return provider(value, checked)


def sqrt_unchecked(value: Any) -> Any:
    """Square root of a non-negative scalar.

    Raises:
        InvalidArgumentError: If value is negative.
        SqrtNotImplementedError: If no provider is registered for the type of value.
    """
    return _sqrt(value, False)


def sqrt_checked(value: Any) -> Any:
    """Square root of a non-negative scalar, raising instead of overflowing.

    Raises:
        InvalidArgumentError: If value is negative.
        SqrtNotImplementedError: If no provider is registered for the type of value.
    """
    return _sqrt(value, True)


def float_sqrt(value: Any, checked: bool) -> Any:
    """IEEE square root, keeping the float type of value."""
    return type(value)(math.sqrt(value))


def integer_sqrt(value: Any, checked: bool) -> Any:
    """Floor of the square root, keeping the integer type of value."""
    return type(value)(math.isqrt(operator.index(value)))


def decimal_sqrt(value: Decimal, checked: bool) -> Decimal:
    """Square root in the current decimal context."""
    with decimal.localcontext() as ctx:
        ctx.traps[decimal.Overflow] = checked
        return value.sqrt()


def install_default_sqrt() -> None:
    """Install the providers for `float`, `int`, `Decimal` and the numpy number types."""
    for float_type in (float, np.floating):
        register_sqrt(float_type, float_sqrt)
    for int_type in (int, np.integer):
        register_sqrt(int_type, integer_sqrt)
    register_sqrt(Decimal, decimal_sqrt)
