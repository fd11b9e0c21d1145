"""Capability contracts shared by vectors and complex numbers.

`Quantity` is anything with a magnitude; `MultiplicativeInverse` is anything with a
reciprocal. Both come in checked/unchecked pairs, see [py_geolinmath.scalar][].
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from typing_extensions import Self

from py_geolinmath.mathutil import sqrt_checked, sqrt_unchecked

__all__ = ('Quantity', 'MultiplicativeInverse')

T = TypeVar('T')


class Quantity(ABC, Generic[T]):
    """A value with a magnitude of scalar type T.

    Prefer the squared magnitude for comparisons: it avoids the square root and is exact for
    exact scalar types.
    """

    __slots__ = ()

    @abstractmethod
    def square_magnitude_unchecked(self) -> T:
        """Squared magnitude with the scalar's native overflow behavior."""

    def square_magnitude_checked(self) -> T:
        """Squared magnitude, raising ScalarOverflowError instead of overflowing."""
        return self.square_magnitude_unchecked()

    def magnitude_unchecked(self) -> T:
        return sqrt_unchecked(self.square_magnitude_unchecked())

    def magnitude_checked(self) -> T:
        return sqrt_checked(self.square_magnitude_checked())


class MultiplicativeInverse(ABC):
    """A value with a reciprocal of its own type."""

    __slots__ = ()

    @abstractmethod
    def reciprocal_unchecked(self) -> Self:
        """Reciprocal with the scalar's native overflow behavior."""

    def reciprocal_checked(self) -> Self:
        return self.reciprocal_unchecked()
