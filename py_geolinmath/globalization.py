"""Culture-aware text formatting and parsing of vectors and complex numbers.

A *format provider* is any object with a ``get_format(format_type)`` method returning an
instance of ``format_type`` or ``None``. The format-info types of this module are providers
themselves, and so are [`Culture`][py_geolinmath.globalization.Culture] and
[`NumberFormat`][py_geolinmath.globalization.NumberFormat].

Every format and parse entry point of the library takes an optional provider, resolved by
[`resolve_format_info`][py_geolinmath.globalization.resolve_format_info]:

    1. ``None``: the current defaults (`PreferredFormat` and the process locale).
    2. `Culture.INVARIANT`: the invariant format-info.
    3. An instance of the requested format-info type: used as-is.
    4. ``provider.get_format(info_type)``, if it yields an instance.
    5. Otherwise a format-info with the preferred delimiters and the provider's number format.

Classes:
    NumberFormat: Decimal point, group separator and signs of scalar text.
    Culture: Named provider bundling a number format and optional format-infos.
    VectorFormatInfo: Delimiters of the vector text form ``(x, y)``.
    ComplexNumberFormatInfo: Operator and imaginary unit of the complex text form ``a + bi``.
    FormatBuffer: Bounded-capacity destination of `try_format`.
    PreferredFormat: Process-wide default delimiters.

Examples:
    >>> from py_geolinmath import Vector2, VectorFormatInfo
    >>> Vector2(1, 2).to_string(provider=VectorFormatInfo(opening='[', separator='; ', closing=']'))
    '[1; 2]'
    >>> Vector2.parse('<1.5|2>', provider=VectorFormatInfo(opening='<', separator='|', closing='>'))
    Vector2(x=1.5, y=2.0)
"""

# Standard library imports
from __future__ import annotations
import locale
from dataclasses import dataclass, field, fields, replace, MISSING
from typing import Any, ClassVar, List, Optional, Sequence, Tuple, Type, TypeVar, Union

# Third-party imports
from typing_extensions import Protocol, Self, runtime_checkable

# Local imports
from py_geolinmath.exceptions import InvalidArgumentError, QuantityFormatError
from py_geolinmath.logger import logger
from py_geolinmath.scalar import scalar_ops

__all__ = (
    'FormatProvider',
    'NumberFormat',
    'Culture',
    'CompositeFormatInfo',
    'VectorFormatInfo',
    'ComplexNumberFormatInfo',
    'FormatBuffer',
    'PreferredFormat',
    'resolve_format_info',
)


@runtime_checkable
class FormatProvider(Protocol):
    """Object that supplies formatting information of a requested type."""

    def get_format(self, format_type: type) -> Optional[Any]:
        ...


@dataclass(frozen=True)
class NumberFormat:
    """Symbols of the text form of a scalar.

    Scalars format and parse themselves in the invariant form (``-1234.5``); this class maps
    that text to and from the localized form. Group separators are emitted only when the
    format spec requests grouping (``','``) and are never accepted by parsing.

    Attributes:
        decimal_point: Decimal point symbol.
        group_separator: Digit group separator symbol.
        negative_sign: Negative sign symbol.
        positive_sign: Positive sign symbol (exponents, explicit ``'+'`` format specs).
    """

    decimal_point: str = '.'
    group_separator: str = ','
    negative_sign: str = '-'
    positive_sign: str = '+'

    _INVARIANT_SYMBOLS: ClassVar[Tuple[str, str, str, str]] = ('.', ',', '-', '+')

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str) or not value:
                raise InvalidArgumentError(f"NumberFormat.{f.name} must be a non-empty string, got {value!r}")

    @property
    def _symbols(self) -> Tuple[str, str, str, str]:
        return self.decimal_point, self.group_separator, self.negative_sign, self.positive_sign

    def get_format(self, format_type: type) -> Optional[NumberFormat]:
        return self if isinstance(self, format_type) else None

    def localize(self, text: str) -> str:
        """Replace the invariant symbols of text with the symbols of this format."""
        if self._symbols == self._INVARIANT_SYMBOLS:
            return text
        table = dict(zip(self._INVARIANT_SYMBOLS, self._symbols))
        return ''.join(table.get(char, char) for char in text)

    def delocalize(self, text: str) -> str:
        """Replace the symbols of this format in text with the invariant symbols."""
        if self._symbols == self._INVARIANT_SYMBOLS:
            return text
        # longest symbol first, so multi-character symbols win over their prefixes
        symbols = sorted(zip(self._symbols, self._INVARIANT_SYMBOLS), key=lambda pair: -len(pair[0]))
        result: List[str] = []
        index = 0
        while index < len(text):
            for local, invariant in symbols:
                if text.startswith(local, index):
                    result.append(invariant)
                    index += len(local)
                    break
            else:
                result.append(text[index])
                index += 1
        return ''.join(result)

    @classmethod
    def invariant(cls) -> NumberFormat:
        return _INVARIANT_NUMBER_FORMAT

    @classmethod
    def current(cls) -> NumberFormat:
        """Number format of the process locale (``LC_NUMERIC``)."""
        conv = locale.localeconv()
        return cls(decimal_point=str(conv['decimal_point']) or '.',
                   group_separator=str(conv['thousands_sep']) or ',')

    @classmethod
    def get_instance(cls, provider: Optional[FormatProvider]) -> NumberFormat:
        """Number format supplied by provider, else the current one."""
        if provider is None:
            return cls.current()
        if isinstance(provider, NumberFormat):
            return provider
        get_format = getattr(provider, 'get_format', None)
        if get_format is not None and isinstance(result := get_format(NumberFormat), NumberFormat):
            return result
        return cls.current()


_INVARIANT_NUMBER_FORMAT = NumberFormat()


@dataclass(frozen=True)
class CompositeFormatInfo:
    """Base of the format-info types of composite values.

    A format-info supplies itself when asked for its own type and delegates any other request
    to its number format.

    Attributes:
        number_format: Format of the scalar components; None means the current number format.
    """

    number_format: Optional[NumberFormat] = None

    def get_format(self, format_type: type) -> Optional[Any]:
        if isinstance(self, format_type):
            return self
        if self.number_format is not None:
            return self.number_format.get_format(format_type)
        return None

    def _require_text(self, *names: str, allow_empty: Sequence[str] = ()) -> None:
        for name in names:
            value = getattr(self, name)
            if not isinstance(value, str):
                raise InvalidArgumentError(f"{type(self).__name__}.{name} must be a string, got {value!r}")
            if not value and name not in allow_empty:
                raise InvalidArgumentError(f"{type(self).__name__}.{name} can't be empty")

    def _format_scalar(self, value: Any, format_spec: str) -> str:
        return scalar_ops(value).format(value, format_spec, self.number_format)

    def _parse_scalar(self, field_text: str, scalar_type: type, text: str, target: str) -> Any:
        try:
            return scalar_ops(scalar_type).parse(field_text, self.number_format)
        except ValueError as exc:
            raise QuantityFormatError(
                text, target, f"{QuantityFormatError.INVALID_COMPONENT} {field_text!r}"
            ) from exc

    @classmethod
    def invariant(cls) -> Self:
        raise NotImplementedError

    @classmethod
    def current(cls) -> Self:
        raise NotImplementedError

    @classmethod
    def from_number_format(cls, number_format: NumberFormat) -> Self:
        raise NotImplementedError

    @classmethod
    def get_instance(cls, provider: Optional[FormatProvider] = None) -> Self:
        return resolve_format_info(provider, cls)


@dataclass(frozen=True)
class VectorFormatInfo(CompositeFormatInfo):
    """Delimiters of the text form of vectors, ``(x, y)`` by default.

    Examples:
        >>> info = VectorFormatInfo(opening='[', separator='; ', closing=']')
        >>> info.parse_components('[1; 2]', 2, int)
        (1, 2)
    """

    opening: str = '('
    separator: str = ', '
    closing: str = ')'

    def __post_init__(self):
        self._require_text('opening', 'separator', 'closing', allow_empty=('opening', 'closing'))

    @classmethod
    def invariant(cls) -> VectorFormatInfo:
        return _INVARIANT_VECTOR_FORMAT

    @classmethod
    def current(cls) -> VectorFormatInfo:
        return cls.from_number_format(NumberFormat.current())

    @classmethod
    def from_number_format(cls, number_format: NumberFormat) -> VectorFormatInfo:
        return cls(number_format=number_format,
                   opening=PreferredFormat.opening,
                   separator=PreferredFormat.separator,
                   closing=PreferredFormat.closing)

    def try_format(self, buffer: FormatBuffer, components: Sequence[Any], format_spec: str = '') -> bool:
        """Write opening, components with the separator interposed, and closing.

        Returns:
            True if everything fit; otherwise False, with the buffer unchanged.
        """
        mark = buffer.mark()
        if self._write(buffer, components, format_spec):
            return True
        buffer.rollback(mark)
        return False

    def _write(self, buffer: FormatBuffer, components: Sequence[Any], format_spec: str) -> bool:
        if not buffer.write(self.opening):
            return False
        for index, component in enumerate(components):
            if index and not buffer.write(self.separator):
                return False
            if not buffer.write(self._format_scalar(component, format_spec)):
                return False
        return buffer.write(self.closing)

    def parse_components(self, text: str, dimension: int, scalar_type: type,
                         target: str = 'vector') -> Tuple[Any, ...]:
        """Split text into exactly `dimension` components and parse each of them.

        Raises:
            QuantityFormatError: If a delimiter is missing, the number of components is wrong
                or a component is not a valid value of scalar_type.
        """
        if (len(text) < len(self.opening) + len(self.closing)
                or not text.startswith(self.opening) or not text.endswith(self.closing)):
            raise QuantityFormatError(text, target, QuantityFormatError.MISSING_DELIMITERS)
        rest = text[len(self.opening):len(text) - len(self.closing)]
        parts: List[str] = []
        for _ in range(dimension - 1):
            head, separator, rest = rest.partition(self.separator)
            if not separator:
                raise QuantityFormatError(text, target, QuantityFormatError.MISSING_SEPARATOR)
            parts.append(head)
        if self.separator in rest:
            raise QuantityFormatError(text, target, QuantityFormatError.EXCESS_SEPARATOR)
        parts.append(rest)
        return tuple(self._parse_scalar(part, scalar_type, text, target) for part in parts)


@dataclass(frozen=True)
class ComplexNumberFormatInfo(CompositeFormatInfo):
    """Operator and imaginary unit of the text form of complex numbers, ``a + bi`` by default.

    Formatting writes ``a + bi``; ``bi`` when the real part is zero; ``a`` when the imaginary
    part is zero. Parsing accepts all three forms.
    """

    operator: str = ' + '
    imaginary_unit: str = 'i'

    def __post_init__(self):
        self._require_text('operator', 'imaginary_unit')

    @classmethod
    def invariant(cls) -> ComplexNumberFormatInfo:
        return _INVARIANT_COMPLEX_FORMAT

    @classmethod
    def current(cls) -> ComplexNumberFormatInfo:
        return cls.from_number_format(NumberFormat.current())

    @classmethod
    def from_number_format(cls, number_format: NumberFormat) -> ComplexNumberFormatInfo:
        return cls(number_format=number_format,
                   operator=PreferredFormat.operator,
                   imaginary_unit=PreferredFormat.imaginary_unit)

    def try_format(self, buffer: FormatBuffer, real: Any, imaginary: Any, format_spec: str = '') -> bool:
        """Write the text form of real + imaginary·i.

        Returns:
            True if everything fit; otherwise False, with the buffer unchanged.
        """
        mark = buffer.mark()
        if self._write(buffer, real, imaginary, format_spec):
            return True
        buffer.rollback(mark)
        return False

    def _write(self, buffer: FormatBuffer, real: Any, imaginary: Any, format_spec: str) -> bool:
        if scalar_ops(imaginary).is_zero(imaginary):
            return buffer.write(self._format_scalar(real, format_spec))
        if not scalar_ops(real).is_zero(real):
            if not (buffer.write(self._format_scalar(real, format_spec)) and buffer.write(self.operator)):
                return False
        return (buffer.write(self._format_scalar(imaginary, format_spec))
                and buffer.write(self.imaginary_unit))

    def parse_parts(self, text: str, scalar_type: type, target: str = 'ComplexNumber') -> Tuple[Any, Any]:
        """Parse ``a + bi``, ``bi`` or ``a`` into (real, imaginary).

        Raises:
            QuantityFormatError: If the text matches none of the forms.
        """
        zero = scalar_ops(scalar_type).zero
        if not text.endswith(self.imaginary_unit):
            return self._parse_scalar(text, scalar_type, text, target), zero
        body = text[:len(text) - len(self.imaginary_unit)]
        splits = self._operator_positions(body)
        if not splits:
            return zero, self._parse_scalar(body, scalar_type, text, target)

        # the operator may also occur inside a part (``1e+20+1j``), so every position is tried
        candidates: List[Tuple[Any, Any]] = []
        for index in splits:
            real_text, imaginary_text = body[:index], body[index + len(self.operator):]
            try:
                candidates.append((self._parse_scalar(real_text, scalar_type, text, target),
                                   self._parse_scalar(imaginary_text, scalar_type, text, target)))
            except QuantityFormatError as error:
                logger.debug(f"Split at {index} rejected: {error}")
        if len(candidates) == 1:
            return candidates[0]
        if not candidates:
            try:
                return zero, self._parse_scalar(body, scalar_type, text, target)
            except QuantityFormatError:
                if len(splits) == 1:
                    raise
        raise QuantityFormatError(text, target, QuantityFormatError.EXCESS_SEPARATOR)

    def _operator_positions(self, body: str) -> List[int]:
        positions: List[int] = []
        index = body.find(self.operator)
        while index != -1:
            positions.append(index)
            index = body.find(self.operator, index + 1)
        return positions


_INVARIANT_VECTOR_FORMAT = VectorFormatInfo(number_format=_INVARIANT_NUMBER_FORMAT)
_INVARIANT_COMPLEX_FORMAT = ComplexNumberFormatInfo(number_format=_INVARIANT_NUMBER_FORMAT)


@dataclass(frozen=True)
class Culture:
    """Named format provider bundling a number format with optional format-infos.

    Examples:
        >>> german = Culture('de', NumberFormat(decimal_point=',', group_separator='.'),
        ...                  vector_format=VectorFormatInfo(separator='; '))
        >>> Vector2(1.5, 2.0).to_string(provider=german)
        '(1,5; 2,0)'
    """

    name: str
    number_format: NumberFormat = field(default_factory=NumberFormat)
    vector_format: Optional[VectorFormatInfo] = None
    complex_format: Optional[ComplexNumberFormatInfo] = None

    INVARIANT: ClassVar[Culture]

    def get_format(self, format_type: type) -> Optional[Any]:
        for each in (self.vector_format, self.complex_format):
            if each is not None and isinstance(each, format_type):
                # format-infos of a culture use the culture's number format unless they carry their own
                if each.number_format is None:
                    return replace(each, number_format=self.number_format)
                return each
        return self.number_format.get_format(format_type)

    @classmethod
    def current(cls) -> Culture:
        language, encoding = locale.getlocale(locale.LC_NUMERIC)
        name = '.'.join(part for part in (language, encoding) if part) or 'C'
        return cls(name, NumberFormat.current())


Culture.INVARIANT = Culture('', _INVARIANT_NUMBER_FORMAT)


InfoT = TypeVar('InfoT', bound=CompositeFormatInfo)


def resolve_format_info(provider: Optional[Union[FormatProvider, Culture]], info_type: Type[InfoT]) -> InfoT:
    """Resolve the format-info of type info_type supplied by provider.

    Args:
        provider: Format provider or None for the current defaults.
        info_type: Requested CompositeFormatInfo subclass.

    Returns:
        The resolved info_type instance; never None.
    """
    if provider is None:
        return info_type.current()
    if provider is Culture.INVARIANT:
        return info_type.invariant()
    if isinstance(provider, info_type):
        return provider
    get_format = getattr(provider, 'get_format', None)
    if get_format is not None and isinstance(result := get_format(info_type), info_type):
        return result
    return info_type.from_number_format(NumberFormat.get_instance(provider))


class FormatBuffer:
    """Character destination with an optional capacity.

    `write` appends a whole chunk or nothing; `mark`/`rollback` let a formatter undo a
    partially written value.

    Examples:
        >>> buffer = FormatBuffer(capacity=5)
        >>> Vector2(1, 2).try_format(buffer)
        False
        >>> buffer = FormatBuffer(capacity=6)
        >>> Vector2(1, 2).try_format(buffer), buffer.getvalue()
        (True, '(1, 2)')
    """

    def __init__(self, capacity: Optional[int] = None):
        if capacity is not None and capacity < 0:
            raise InvalidArgumentError(f"{capacity=} can't be negative")
        self.capacity: Optional[int] = capacity
        self._chunks: List[str] = []
        self._length: int = 0

    def __len__(self) -> int:
        return self._length

    def __str__(self) -> str:
        return self.getvalue()

    @property
    def remaining(self) -> Optional[int]:
        """Number of characters that still fit, None when unbounded."""
        return None if self.capacity is None else self.capacity - self._length

    def write(self, text: str) -> bool:
        if self.capacity is not None and self._length + len(text) > self.capacity:
            return False
        self._chunks.append(text)
        self._length += len(text)
        return True

    def mark(self) -> int:
        return len(self._chunks)

    def rollback(self, mark: int) -> None:
        self._length -= sum(len(chunk) for chunk in self._chunks[mark:])
        del self._chunks[mark:]

    def clear(self) -> None:
        self.rollback(0)

    def getvalue(self) -> str:
        return ''.join(self._chunks)


class PreferredFormatMeta(type):
    """Provide representation method for static dataclasses."""

    def __repr__(cls):
        return '\n'.join(f'{name} = {getattr(cls, name)!r}'
                         for name in getattr(cls, '__dataclass_fields__'))


@dataclass
class PreferredFormat(metaclass=PreferredFormatMeta):
    """Process-wide default delimiters of the text forms.

    Used whenever no provider, or a provider without its own format-info, is given. The
    invariant format-infos ignore these settings.

    Default Configuration:
        * opening: ``(``
        * separator: ``, ``
        * closing: ``)``
        * operator: `` + ``
        * imaginary_unit: ``i``

    Examples:
        >>> PreferredFormat.set(opening='[', closing=']')
        >>> str(Vector2(1, 2))
        '[1, 2]'
        >>> PreferredFormat.restore_defaults()
    """

    opening: str = '('
    separator: str = ', '
    closing: str = ')'
    operator: str = ' + '
    imaginary_unit: str = 'i'

    _MAY_BE_EMPTY: ClassVar[Tuple[str, ...]] = ('opening', 'closing')

    @classmethod
    def restore_defaults(cls):
        """Reset all preferred delimiters to their default values."""
        for f in fields(cls):
            if f.default is not MISSING:
                setattr(cls, f.name, f.default)

    @classmethod
    def set(cls, **kwargs: str):
        """Set preferred delimiters from keyword arguments.

        Unknown attributes and invalid values are logged as warnings and skipped.

        Examples:
            >>> PreferredFormat.set(separator='; ', imaginary_unit='j')
        """
        for attribute, value in kwargs.items():
            if attribute not in cls.__dataclass_fields__:
                logger.warning(f"{attribute=} not found in preferred_format")
            elif not isinstance(value, str):
                logger.warning(f"type of {value=} is not str, {attribute} not changed")
            elif not value and attribute not in cls._MAY_BE_EMPTY:
                logger.warning(f"{attribute} can't be empty, not changed")
            else:
                setattr(cls, attribute, value)
