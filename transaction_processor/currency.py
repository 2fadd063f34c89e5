"""
Currency Amount Module

Exact decimal amounts for ledger calculations. NEVER uses float for monetary
values. Amounts are backed by ``decimal.Decimal`` but bounded like a 96-bit
mantissa fixed-point number: the unscaled value must fit in 96 bits and the
scale (digits after the decimal point) is at most 28.

All arithmetic is checked. Overflow raises OutOfBoundsError instead of
wrapping or losing integer digits.
"""

from decimal import Decimal, Context, ROUND_HALF_EVEN
from dataclasses import dataclass
from typing import ClassVar, Union
import re

from .exceptions import InvalidNumericValueError, OutOfBoundsError

MAX_MANTISSA = 2 ** 96 - 1
MAX_SCALE = 28

# 29 integer digits + 28 fractional digits always fit, so arithmetic is exact
_CONTEXT = Context(prec=100, rounding=ROUND_HALF_EVEN)

_AMOUNT_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")


def _mantissa(value: Decimal) -> int:
    """Unscaled magnitude of a decimal value"""
    _, digits, _ = value.as_tuple()
    return int("".join(str(digit) for digit in digits))


def _fit(value: Decimal) -> Decimal:
    """
    Bring a decimal value into the representable range.

    Keeps the value's scale when the mantissa fits, otherwise drops fractional
    digits (rounding half-even) until it does. Negative zero becomes zero.

    Raises:
        OutOfBoundsError: If the integer part alone does not fit
    """
    if not value.is_finite():
        raise OutOfBoundsError(f"Out of bounds: {value}")

    if value.adjusted() > 28:
        raise OutOfBoundsError()

    exponent = value.as_tuple().exponent
    scale = min(max(-exponent, 0), MAX_SCALE)

    for candidate_scale in range(scale, -1, -1):
        candidate = value.quantize(
            Decimal(1).scaleb(-candidate_scale),
            rounding=ROUND_HALF_EVEN,
            context=_CONTEXT
        )
        if _mantissa(candidate) <= MAX_MANTISSA:
            if candidate.is_zero():
                candidate = candidate.copy_abs()
            return candidate

    raise OutOfBoundsError()


@dataclass(frozen=True, order=True)
class CurrencyAmount:
    """
    An amount of money, represented as an exact decimal number.

    For ``x`` decimal places this handles values with magnitude up to
    ``(2^96 - 1) / 10^x``. Equality and ordering are numeric (``12.0 == 12``)
    while ``str()`` keeps the original scale (``"12.0"``).

    Arithmetic goes through ``checked_add``/``checked_sub``, which raise
    OutOfBoundsError rather than returning an invalid value.
    """
    value: Decimal

    ZERO: ClassVar["CurrencyAmount"]

    def __post_init__(self):
        value = self.value
        if not isinstance(value, Decimal):
            # strings go through the strict parser, floats and bools are rejected
            value = amount_from(value).value
        object.__setattr__(self, 'value', _fit(value))

    @classmethod
    def parse(cls, text: str) -> 'CurrencyAmount':
        """
        Parse a plain decimal string such as ``"12.34"``, ``"-0.5"``, ``"12."``
        or ``".5"``.

        Raises:
            InvalidNumericValueError: If the text is not a decimal number or its
                integer part is out of range
        """
        if not isinstance(text, str) or not _AMOUNT_PATTERN.fullmatch(text):
            raise InvalidNumericValueError(text)

        try:
            return cls(Decimal(text))
        except OutOfBoundsError as e:
            raise InvalidNumericValueError(text) from e

    @property
    def scale(self) -> int:
        """Number of digits after the decimal point"""
        return -self.value.as_tuple().exponent

    def checked_add(self, other: 'CurrencyAmount') -> 'CurrencyAmount':
        """
        Add two amounts exactly.

        Raises:
            OutOfBoundsError: If the result cannot be represented
        """
        return CurrencyAmount(_CONTEXT.add(self.value, other.value))

    def checked_sub(self, other: 'CurrencyAmount') -> 'CurrencyAmount':
        """
        Subtract ``other`` from this amount exactly.

        Raises:
            OutOfBoundsError: If the result cannot be represented
        """
        return CurrencyAmount(_CONTEXT.subtract(self.value, other.value))

    def negate(self) -> 'CurrencyAmount':
        """Negated amount, same scale"""
        return CurrencyAmount(self.value.copy_negate())

    def __neg__(self) -> 'CurrencyAmount':
        return self.negate()

    def is_negative(self) -> bool:
        """Check if amount is strictly below zero"""
        return self.value < 0

    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.value.is_zero()

    def __str__(self) -> str:
        return format(self.value, "f")


CurrencyAmount.ZERO = CurrencyAmount(Decimal(0))


def amount_from(value: Union[str, int, Decimal, CurrencyAmount]) -> CurrencyAmount:
    """
    Convert loosely typed input into a CurrencyAmount.

    Strings go through the strict parser; ints and Decimals are range-checked.
    """
    if isinstance(value, CurrencyAmount):
        return value
    if isinstance(value, str):
        return CurrencyAmount.parse(value)
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise InvalidNumericValueError(repr(value))
    return CurrencyAmount(Decimal(value))
