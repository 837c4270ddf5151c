"""
Exact rational numbers.

A Rational stores an integer numerator and a positive denominator in lowest
terms. All arithmetic is exact; the only approximation in the value
hierarchy is the square root of a non-perfect square.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..core.config import get_settings
from ..core.errors import (
    ComputorError,
    DivideByZeroError,
    InvalidArgumentError,
    InvalidFormatError,
    MathError,
)
from .value import MathValue, ValueKind

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)$")


def gcd(a: int, b: int) -> int:
    """Greatest common divisor of the absolute values."""
    return math.gcd(a, b)


def lcm(a: int, b: int) -> int:
    """Least common multiple (always non-negative)."""
    if a == 0 or b == 0:
        return 0
    return abs(a // gcd(a, b) * b)


def reduce_fraction(num: int, den: int) -> tuple[int, int]:
    """
    Reduce a fraction to lowest terms with a positive denominator.

    Raises:
        InvalidArgumentError: If den is zero
    """
    if den == 0:
        raise InvalidArgumentError("Denominator cannot be zero")
    if den < 0:
        num, den = -num, -den
    g = gcd(num, den)
    return num // g, den // g


def _parse_decimal(text: str) -> tuple[int, int]:
    """Parse '4', '-4.3' or '.5' into an integer ratio."""
    if not _DECIMAL_RE.match(text):
        raise InvalidFormatError(f"Invalid rational number: '{text}'")
    return Decimal(text).as_integer_ratio()


def _as_ratio(value: Any) -> tuple[int, int]:
    """Convert a constructor argument into an (unreduced) integer ratio."""
    if isinstance(value, Rational):
        return value.numerator, value.denominator
    if isinstance(value, int):
        return int(value), 1
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidArgumentError(f"Cannot represent {value} as a rational number")
        return Decimal(repr(value)).as_integer_ratio()
    if isinstance(value, Decimal):
        try:
            return value.as_integer_ratio()
        except (ValueError, OverflowError, InvalidOperation) as e:
            raise InvalidArgumentError(f"Cannot represent {value} as a rational number") from e
    if isinstance(value, str):
        parsed = Rational.parse(value)
        return parsed.numerator, parsed.denominator
    raise InvalidArgumentError(f"Cannot build a rational number from {type(value).__name__}")


class Rational(BaseModel, MathValue):
    """
    Rational number numerator/denominator.

    Examples:
        >>> Rational(6, 4)         # 3/2
        >>> Rational("4.242")      # 2121/500
        >>> Rational("3/4") + 1    # 7/4
    """

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[ValueKind] = ValueKind.RATIONAL

    numerator: int = Field(description="The numerator, carrying the sign")
    denominator: int = Field(description="The denominator, always positive")

    def __init__(self, numerator: Any = 0, denominator: Any = 1):
        """
        Create a Rational.

        Args:
            numerator: int, Rational, float, Decimal or a numeric string
                ("4.242", "-3/4")
            denominator: Same accepted types (default 1)

        Raises:
            InvalidArgumentError: If the denominator is zero
        """
        num_n, num_d = _as_ratio(numerator)
        den_n, den_d = _as_ratio(denominator)
        num, den = reduce_fraction(num_n * den_d, num_d * den_n)
        super().__init__(numerator=num, denominator=den)

    @classmethod
    def zero(cls) -> Rational:
        return cls(0)

    @classmethod
    def one(cls) -> Rational:
        return cls(1)

    @classmethod
    def parse(cls, text: str) -> Rational:
        """
        Parse an integer, a decimal or a fraction of those.

        Raises:
            InvalidFormatError: If the text is not a rational literal
            InvalidArgumentError: If a fraction has a zero denominator
        """
        cleaned = text.replace(" ", "")
        if not cleaned:
            raise InvalidFormatError("Invalid rational number: empty input")

        if "/" in cleaned:
            left, _, right = cleaned.partition("/")
            if "/" in right or not left or not right:
                raise InvalidFormatError(f"Invalid rational number: '{text}'")
            num_n, num_d = _parse_decimal(left)
            den_n, den_d = _parse_decimal(right)
            return cls(Rational(num_n, num_d), Rational(den_n, den_d))

        return cls(*_parse_decimal(cleaned))

    @classmethod
    def try_parse(cls, text: str) -> Rational | None:
        """Parse text, returning None instead of raising."""
        try:
            return cls.parse(text)
        except ComputorError:
            return None

    # Properties

    @property
    def is_zero(self) -> bool:
        return self.numerator == 0

    @property
    def is_integer(self) -> bool:
        return self.denominator == 1

    @property
    def is_terminating(self) -> bool:
        """True when the decimal expansion is finite (denominator is 2^a * 5^b)."""
        den = self.denominator
        for factor in (2, 5):
            while den % factor == 0:
                den //= factor
        return den == 1

    def fits_decimal(self, places: int | None = None) -> bool:
        """True when the value is exactly representable with ``places`` decimal digits."""
        if places is None:
            places = get_settings().DECIMAL_PLACES
        return (10 ** places) % self.denominator == 0

    # Rendering

    def to_string(self) -> str:
        if self.denominator == 1:
            return str(self.numerator)
        return f"{self.numerator}/{self.denominator}"

    def to_decimal_string(self, places: int | None = None) -> str:
        """
        Decimal expansion rounded half-up to ``places`` digits.

        Trailing zeros are stripped, so Rational(1, 2) renders as "0.5" and
        Rational(1, 3) as "0.3333333333" with the default ten places.
        """
        if places is None:
            places = get_settings().DECIMAL_PLACES

        scale = 10 ** places
        quotient, remainder = divmod(abs(self.numerator) * scale, self.denominator)
        if 2 * remainder >= self.denominator:
            quotient += 1

        whole, fraction = divmod(quotient, scale)
        text = str(whole)
        if places:
            digits = str(fraction).rjust(places, "0").rstrip("0")
            if digits:
                text = f"{text}.{digits}"

        if self.numerator < 0 and quotient != 0:
            text = "-" + text
        return text

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Rational({self.numerator}, {self.denominator})"

    # Conversion

    def __float__(self) -> float:
        return self.numerator / self.denominator

    def __complex__(self) -> complex:
        return complex(float(self))

    def __int__(self) -> int:
        # Truncates toward zero
        quotient = abs(self.numerator) // self.denominator
        return quotient if self.numerator >= 0 else -quotient

    def __round__(self, ndigits: int | None = None) -> Any:
        """Round half away from zero; an int without ndigits, a Rational with it."""
        rounded = Rational(self.to_decimal_string(ndigits or 0))
        return int(rounded) if ndigits is None else rounded

    def promote(self, other: MathValue) -> MathValue:
        from .numeric import Complex

        if isinstance(other, Complex):
            return Complex(self, 0)
        return self

    @staticmethod
    def _coerce(other: Any) -> Rational | None:
        if isinstance(other, Rational):
            return other
        if isinstance(other, int):
            return Rational(other)
        return None

    # Comparison

    def __eq__(self, other: Any) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.numerator == o.numerator and self.denominator == o.denominator

    def __hash__(self) -> int:
        if self.denominator == 1:
            return hash(self.numerator)
        return hash((self.numerator, self.denominator))

    def __lt__(self, other: Any) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.numerator * o.denominator < o.numerator * self.denominator

    def __le__(self, other: Any) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.numerator * o.denominator <= o.numerator * self.denominator

    def __gt__(self, other: Any) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.numerator * o.denominator > o.numerator * self.denominator

    def __ge__(self, other: Any) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.numerator * o.denominator >= o.numerator * self.denominator

    # Arithmetic operators

    def __add__(self, other: Any) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Rational(
            self.numerator * o.denominator + o.numerator * self.denominator,
            self.denominator * o.denominator,
        )

    def __radd__(self, other: Any) -> Rational:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Rational(
            self.numerator * o.denominator - o.numerator * self.denominator,
            self.denominator * o.denominator,
        )

    def __rsub__(self, other: Any) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return o - self

    def __mul__(self, other: Any) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Rational(self.numerator * o.numerator, self.denominator * o.denominator)

    def __rmul__(self, other: Any) -> Rational:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        if o.is_zero:
            raise DivideByZeroError()
        return Rational(self.numerator * o.denominator, self.denominator * o.numerator)

    def __rtruediv__(self, other: Any) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return o / self

    def __mod__(self, other: Any) -> Rational:
        """Truncated remainder: the result takes the sign of the dividend."""
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        if o.is_zero:
            raise DivideByZeroError("Cannot perform modulo by zero")
        num = self.numerator * o.denominator
        den = self.denominator * o.numerator
        quotient = abs(num) // abs(den)
        if (num < 0) != (den < 0):
            quotient = -quotient
        return self - o * quotient

    def __rmod__(self, other: Any) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return o % self

    def __pow__(self, exponent: Any) -> Rational:
        n = self.exponent_to_int(exponent)
        if n < 0:
            if self.is_zero:
                raise DivideByZeroError("Cannot raise zero to negative power")
            return Rational(self.denominator ** -n, self.numerator ** -n)
        return Rational(self.numerator ** n, self.denominator ** n)

    def __rpow__(self, base: Any) -> Rational:
        o = self._coerce(base)
        if o is None:
            return NotImplemented
        return o ** self

    def __neg__(self) -> Rational:
        return Rational(-self.numerator, self.denominator)

    def __pos__(self) -> Rational:
        return self

    def __abs__(self) -> Rational:
        return Rational(abs(self.numerator), self.denominator)

    def sqrt(self, places: int | None = None) -> Rational:
        """
        Square root.

        Exact when numerator and denominator are perfect squares; otherwise a
        float approximation rounded to ``places`` digits (settings default).

        Raises:
            MathError: For negative values
        """
        if self.numerator < 0:
            raise MathError(f"Cannot take the square root of a negative number: {self}")

        root_num = math.isqrt(self.numerator)
        root_den = math.isqrt(self.denominator)
        if root_num * root_num == self.numerator and root_den * root_den == self.denominator:
            return Rational(root_num, root_den)

        if places is None:
            places = get_settings().SQRT_DECIMAL_PLACES
        return Rational(f"{math.sqrt(float(self)):.{places}f}")
