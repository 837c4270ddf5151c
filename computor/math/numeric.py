"""
Complex numbers with exact rational components.
"""

from __future__ import annotations

import math
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import (
    ComputorError,
    DivideByZeroError,
    InvalidFormatError,
    NotSupportedError,
)
from .fraction import Rational
from .value import MathValue, ValueKind


class Complex(BaseModel, MathValue):
    """
    Complex number real + imag*i.

    Ordering compares magnitudes only; two numbers of equal magnitude are
    neither less nor greater than one another.

    Reference grammar for ``parse``:
        "3", "4i", "i", "-i", "3+2i", "3-2i", "2i+3", "1/2-3/4i"
    """

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[ValueKind] = ValueKind.COMPLEX

    real: Rational = Field(description="Real part")
    imag: Rational = Field(description="Imaginary part")

    def __init__(self, real: Any = 0, imag: Any = 0):
        real_part = real if isinstance(real, Rational) else Rational(real)
        imag_part = imag if isinstance(imag, Rational) else Rational(imag)
        super().__init__(real=real_part, imag=imag_part)

    @classmethod
    def parse(cls, text: str) -> Complex:
        """
        Parse a complex literal.

        Raises:
            InvalidFormatError: If the text does not follow the grammar
        """
        s = text.replace(" ", "").lower()
        if not s:
            raise InvalidFormatError("Invalid complex number: empty input")

        if "i" not in s:
            return cls(Rational.parse(s), 0)
        if s in ("i", "+i"):
            return cls(0, 1)
        if s == "-i":
            return cls(0, -1)

        # Last sign that is not the leading one splits real and imaginary parts
        split = 0
        for idx in range(len(s) - 1, 0, -1):
            if s[idx] in "+-":
                split = idx
                break

        first, second = s[:split], s[split:]
        if "i" in second and "i" not in first:
            real_text, imag_text = first, second
        elif "i" in first and "i" not in second:
            real_text, imag_text = second, first
        else:
            raise InvalidFormatError(f"Invalid complex number: '{text}'")

        try:
            real = Rational.parse(real_text) if real_text else Rational(0)
            imag = cls._parse_imaginary(imag_text)
        except InvalidFormatError as e:
            raise InvalidFormatError(f"Invalid complex number: '{text}'") from e
        return cls(real, imag)

    @staticmethod
    def _parse_imaginary(text: str) -> Rational:
        if not text.endswith("i") or text.count("i") != 1:
            raise InvalidFormatError(f"Invalid imaginary part: '{text}'")
        coefficient = text[:-1]
        if coefficient.endswith("*"):
            coefficient = coefficient[:-1]
        if coefficient in ("", "+"):
            return Rational(1)
        if coefficient == "-":
            return Rational(-1)
        return Rational.parse(coefficient)

    @classmethod
    def try_parse(cls, text: str) -> Complex | None:
        """Parse text containing an imaginary marker; None otherwise."""
        if "i" not in text.lower():
            return None
        try:
            return cls.parse(text)
        except ComputorError:
            return None

    # Properties

    @property
    def is_zero(self) -> bool:
        return self.real.is_zero and self.imag.is_zero

    @property
    def is_real(self) -> bool:
        return self.imag.is_zero

    @property
    def is_imaginary(self) -> bool:
        return self.real.is_zero

    @property
    def magnitude(self) -> float:
        return math.hypot(float(self.real), float(self.imag))

    @property
    def magnitude_squared(self) -> Rational:
        return self.real * self.real + self.imag * self.imag

    def conjugate(self) -> Complex:
        return Complex(self.real, -self.imag)

    def reciprocal(self) -> Complex:
        """
        Multiplicative inverse.

        Raises:
            DivideByZeroError: For zero
        """
        denominator = self.magnitude_squared
        if denominator.is_zero:
            raise DivideByZeroError()
        return Complex(self.real / denominator, -self.imag / denominator)

    def simplify(self) -> MathValue:
        if self.imag.is_zero:
            return self.real
        return self

    # Rendering

    def _imaginary_text(self, render) -> str:
        if self.imag == 1:
            return "i"
        if self.imag == -1:
            return "-i"
        return f"{render(self.imag)}i"

    def _render(self, render) -> str:
        if self.imag.is_zero:
            return render(self.real)
        imag = self._imaginary_text(render)
        if self.real.is_zero:
            return imag
        if imag.startswith("-"):
            return f"{render(self.real)}{imag}"
        return f"{render(self.real)}+{imag}"

    def to_string(self) -> str:
        return self._render(Rational.to_string)

    def to_decimal_string(self, places: int | None = None) -> str:
        """Render components that are exact decimals within ``places`` digits as decimals."""

        def render(part: Rational) -> str:
            if part.is_integer or not part.fits_decimal(places):
                return part.to_string()
            return part.to_decimal_string(places)

        return self._render(render)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Complex({self.real.to_string()}, {self.imag.to_string()})"

    def __complex__(self) -> complex:
        return complex(float(self.real), float(self.imag))

    def _coerce(self, other: Any) -> Complex | None:
        if isinstance(other, Complex):
            return other
        if isinstance(other, Rational):
            return other.promote(self)
        if isinstance(other, int):
            return Complex(other, 0)
        return None

    # Comparison

    def __eq__(self, other: Any) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.real == o.real and self.imag == o.imag

    def __hash__(self) -> int:
        if self.imag.is_zero:
            return hash(self.real)
        return hash((self.real, self.imag))

    def __lt__(self, other: Any) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.magnitude_squared < o.magnitude_squared

    def __le__(self, other: Any) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.magnitude_squared <= o.magnitude_squared

    def __gt__(self, other: Any) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.magnitude_squared > o.magnitude_squared

    def __ge__(self, other: Any) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.magnitude_squared >= o.magnitude_squared

    # Arithmetic operators

    def __add__(self, other: Any) -> Complex:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Complex(self.real + o.real, self.imag + o.imag)

    def __radd__(self, other: Any) -> Complex:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Complex:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Complex(self.real - o.real, self.imag - o.imag)

    def __rsub__(self, other: Any) -> Complex:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return o - self

    def __mul__(self, other: Any) -> Complex:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Complex(
            self.real * o.real - self.imag * o.imag,
            self.real * o.imag + self.imag * o.real,
        )

    def __rmul__(self, other: Any) -> Complex:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> Complex:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        denominator = o.magnitude_squared
        if denominator.is_zero:
            raise DivideByZeroError()
        numerator = self * o.conjugate()
        return Complex(numerator.real / denominator, numerator.imag / denominator)

    def __rtruediv__(self, other: Any) -> Complex:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return o / self

    def __mod__(self, other: Any) -> Complex:
        raise NotSupportedError("Modulo is not defined for complex numbers")

    def __rmod__(self, other: Any) -> Complex:
        raise NotSupportedError("Modulo is not defined for complex numbers")

    def __pow__(self, exponent: Any) -> Complex:
        n = self.exponent_to_int(exponent)
        base: Complex = self
        if n < 0:
            if self.is_zero:
                raise DivideByZeroError("Cannot raise zero to negative power")
            base = self.reciprocal()
            n = -n

        result = Complex(1, 0)
        while n:
            if n & 1:
                result = result * base
            base = base * base
            n >>= 1
        return result

    def __neg__(self) -> Complex:
        return Complex(-self.real, -self.imag)

    def __pos__(self) -> Complex:
        return self

    def __abs__(self) -> Rational:
        return self.magnitude_squared.sqrt()
