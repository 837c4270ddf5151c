"""
Base MathValue class for the computor value hierarchy.

Every concrete value (Rational, Complex, Matrix, Polynomial) implements the
same operator set, so an expression can be evaluated without knowing the
operand kinds up front: an operator that does not understand its right-hand
operand returns ``NotImplemented`` and Python retries with the reflected
method of the other value.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import IntEnum
from typing import Any, ClassVar


class ValueKind(IntEnum):
    """
    Value kinds in promotion order.

    A value of a lower kind promotes to a higher kind when the two are
    combined (a Rational becomes a Complex with zero imaginary part).
    """

    RATIONAL = 0
    COMPLEX = 1
    MATRIX = 2
    POLYNOMIAL = 3


class MathValue(ABC):
    """
    Base class for all mathematical value objects.

    Concrete subclasses inherit from both BaseModel and MathValue, e.g.
    ``class Rational(BaseModel, MathValue)``; BaseModel comes first, so each
    subclass redefines ``__str__``, ``__repr__``, ``__eq__`` and ``__hash__``.
    """

    kind: ClassVar[ValueKind]

    @abstractmethod
    def to_string(self) -> str:
        """Convert to the canonical display string."""

    @property
    @abstractmethod
    def is_zero(self) -> bool:
        """True for the additive identity of the value's kind."""

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_string()})"

    # Operator overloading

    @abstractmethod
    def __add__(self, other: Any) -> MathValue:
        """Addition: self + other"""

    @abstractmethod
    def __radd__(self, other: Any) -> MathValue:
        """Right addition: other + self"""

    @abstractmethod
    def __sub__(self, other: Any) -> MathValue:
        """Subtraction: self - other"""

    @abstractmethod
    def __rsub__(self, other: Any) -> MathValue:
        """Right subtraction: other - self"""

    @abstractmethod
    def __mul__(self, other: Any) -> MathValue:
        """Multiplication: self * other"""

    @abstractmethod
    def __rmul__(self, other: Any) -> MathValue:
        """Right multiplication: other * self"""

    @abstractmethod
    def __truediv__(self, other: Any) -> MathValue:
        """Division: self / other"""

    @abstractmethod
    def __rtruediv__(self, other: Any) -> MathValue:
        """Right division: other / self"""

    @abstractmethod
    def __mod__(self, other: Any) -> MathValue:
        """Modulo: self % other"""

    @abstractmethod
    def __pow__(self, exponent: Any) -> MathValue:
        """Integer exponentiation: self ** exponent"""

    @abstractmethod
    def __neg__(self) -> MathValue:
        """Unary negation: -self"""

    def __pos__(self) -> MathValue:
        return self

    # Promotion

    def promote(self, other: MathValue) -> MathValue:
        """
        Promote this value to be compatible with another type.

        Only scalars promote: Rational(2).promote(Complex(1, 1)) → Complex(2, 0).
        Everything else is returned unchanged.
        """
        return self

    def simplify(self) -> MathValue:
        """Collapse to the simplest kind holding the same value."""
        return self

    @staticmethod
    def exponent_to_int(exponent: Any) -> int:
        """
        Convert an exponent to a Python int.

        Raises:
            NotSupportedError: If the exponent is not an integer
        """
        from ..core.errors import NotSupportedError
        from .fraction import Rational

        if isinstance(exponent, bool):
            return int(exponent)
        if isinstance(exponent, int):
            return exponent
        exponent = exponent.simplify() if isinstance(exponent, MathValue) else exponent
        if isinstance(exponent, Rational) and exponent.is_integer:
            return exponent.numerator
        raise NotSupportedError(f"Exponent must be an integer: {exponent}")

    @classmethod
    def from_python(cls, value: Any) -> MathValue:
        """
        Convert a Python value to a MathValue.

        ints, floats, Decimals and numeric strings become Rationals; Python
        complex numbers and strings with an imaginary marker become Complex;
        nested lists become a Matrix.
        """
        from ..core.errors import InvalidArgumentError
        from .fraction import Rational
        from .matrix import Matrix
        from .numeric import Complex

        if isinstance(value, MathValue):
            return value
        if isinstance(value, (bool, int, float, Decimal)):
            return Rational(value)
        if isinstance(value, complex):
            return Complex(Rational(value.real), Rational(value.imag)).simplify()
        if isinstance(value, str):
            parsed = Complex.try_parse(value)
            return parsed.simplify() if parsed is not None else Rational(value)
        if isinstance(value, (list, tuple)) and value and isinstance(value[0], (list, tuple)):
            return Matrix(value)
        raise InvalidArgumentError(f"Cannot convert {type(value).__name__} to a math value")
