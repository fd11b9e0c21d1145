"""py_geolinmath exception types.

Exception Hierarchy
-------------------

Exception (built-in Python)
├── TypeError
│   └── ScalarTypeError
│       └── NotRealError
├── ValueError
│   ├── InvalidArgumentError
│   │   └── ComponentCountError
│   └── QuantityFormatError
├── OverflowError
│   └── ScalarOverflowError
└── NotImplementedError
    └── SqrtNotImplementedError

Exception Types
---------------

- ScalarTypeError: A value's type has no registered scalar operations, so it cannot be
  used as the component type of a vector or complex number.

- NotRealError: Raised by a checked conversion of a complex number to its real part when
  the imaginary part is not zero.

- InvalidArgumentError: An argument is outside the domain of the operation, e.g. the square
  root of a negative number or a clamp box whose lower corner exceeds its upper corner.

- ComponentCountError: A component sequence does not have exactly as many elements as the
  dimension of the vector being created. Contains:
  - expected: The dimension of the vector type
  - actual: The number of components supplied

- QuantityFormatError: Raised by `parse` entry points when the text is malformed: a
  missing delimiter, the wrong number of fields or an unparsable component. Contains:
  - text: The text that failed to parse
  - target: Name of the type that was being parsed
  - reason: What was wrong with the text

- ScalarOverflowError: Raised by checked arithmetic when a result is not representable by
  the scalar type. Contains:
  - operation: Name of the scalar operation
  - operands: The operands of the operation
  - scalar_type: The scalar type whose range was exceeded

- SqrtNotImplementedError: Raised when a magnitude needs a square root and no square root
  provider is registered for the scalar type.
"""
from __future__ import annotations

from typing import Any, Optional, Tuple

__all__ = (
    'ScalarTypeError',
    'NotRealError',
    'InvalidArgumentError',
    'ComponentCountError',
    'QuantityFormatError',
    'ScalarOverflowError',
    'SqrtNotImplementedError',
)


class ScalarTypeError(TypeError):
    """Scalar type error."""


class NotRealError(ScalarTypeError):
    """Complex number has an imaginary part."""


class InvalidArgumentError(ValueError):
    """Invalid argument error."""


class ComponentCountError(InvalidArgumentError):
    """Exception for component sequences of the wrong length.

    Contains:
    - Expected number of components
    - Actual number of components
    """

    def __init__(self, expected: int, actual: int, type_name: str = "vector"):
        self.expected: int = expected
        self.actual: int = actual
        super().__init__(f'Expected {expected} components for {type_name}, got {actual}.')


class QuantityFormatError(ValueError):
    """Exception for text that is not a valid representation of a quantity.

    Contains:
    - The text that failed to parse
    - The name of the target type
    - The reason for the failure
    """

    MISSING_DELIMITERS = "Missing opening or closing delimiter"
    MISSING_SEPARATOR = "Too few components"
    EXCESS_SEPARATOR = "Too many components"
    INVALID_COMPONENT = "Invalid component"

    def __init__(self, text: str, target: str, reason: str = ""):
        self.text: str = text
        self.target: str = target
        self.reason: str = reason
        msg = f"Can't parse {text!r} as {target}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ScalarOverflowError(OverflowError):
    """Exception for checked arithmetic whose result is not representable.

    Contains:
    - The name of the operation
    - The operands
    - The scalar type
    """

    def __init__(self, operation: str, operands: Tuple[Any, ...],
                 scalar_type: Optional[type] = None):
        self.operation: str = operation
        self.operands: Tuple[Any, ...] = operands
        self.scalar_type: Optional[type] = scalar_type
        type_name = scalar_type.__name__ if scalar_type is not None else "scalar"
        args = ", ".join(repr(each) for each in operands)
        super().__init__(f"{operation}({args}) is not representable by {type_name}")


class SqrtNotImplementedError(NotImplementedError):
    """Square root is not available for the scalar type."""
