"""
Single-variable polynomials with generic coefficients.

Terms are stored sparsely as power -> coefficient; coefficients may be any
scalar or matrix value, so ``[[8,4]] * z`` is a valid degree-one polynomial.
"""

from __future__ import annotations

import re
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..core.config import get_settings
from ..core.errors import (
    DivideByZeroError,
    InvalidArgumentError,
    InvalidFormatError,
    NotSupportedError,
)
from .fraction import Rational
from .numeric import Complex
from .value import MathValue, ValueKind

_POWER_RE = re.compile(r"^\^(\d+)")


class AllRealNumbers:
    """Solution set of an identity such as ``0 = 0``."""

    _instance: AllRealNumbers | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __str__(self) -> str:
        return "All real numbers"

    def __repr__(self) -> str:
        return "ALL_REAL_NUMBERS"


ALL_REAL_NUMBERS = AllRealNumbers()


class Polynomial(BaseModel, MathValue):
    """
    Polynomial in one display variable.

    Zero coefficients are never stored, so the zero polynomial has no terms
    and degree 0.

    Examples:
        >>> Polynomial.parse("2x^2 - 3x + 1")
        >>> Polynomial.quadratic(1, 0, 1).solve()   # [i, -i]
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    kind: ClassVar[ValueKind] = ValueKind.POLYNOMIAL

    terms: dict[int, MathValue] = Field(default_factory=dict)
    variable: str = Field(default="x", description="Display name of the variable")

    def __init__(self, terms: dict[int, Any] | None = None, variable: str = "x"):
        """
        Create a Polynomial from a power -> coefficient mapping.

        Raises:
            InvalidArgumentError: On negative or non-integer powers, or
                polynomial coefficients
        """
        normalized: dict[int, MathValue] = {}
        for power, coefficient in (terms or {}).items():
            if isinstance(power, bool) or not isinstance(power, int) or power < 0:
                raise InvalidArgumentError(f"Polynomial powers must be non-negative integers: {power}")
            value = MathValue.from_python(coefficient)
            if isinstance(value, Polynomial):
                raise InvalidArgumentError("Polynomial coefficients cannot be polynomials")
            value = value.simplify()
            if not value.is_zero:
                normalized[power] = value
        ordered = {power: normalized[power] for power in sorted(normalized, reverse=True)}
        super().__init__(terms=ordered, variable=variable)

    @classmethod
    def constant(cls, value: Any, variable: str = "x") -> Polynomial:
        return cls({0: value}, variable)

    @classmethod
    def linear(cls, a: Any, b: Any, variable: str = "x") -> Polynomial:
        """a*x + b"""
        return cls({1: a, 0: b}, variable)

    @classmethod
    def quadratic(cls, a: Any, b: Any, c: Any, variable: str = "x") -> Polynomial:
        """a*x^2 + b*x + c"""
        return cls({2: a, 1: b, 0: c}, variable)

    @classmethod
    def monomial(cls, variable: str = "x") -> Polynomial:
        """The polynomial consisting of the bare variable."""
        return cls({1: 1}, variable)

    # Parsing

    @classmethod
    def parse(cls, text: str, variable: str | None = None) -> Polynomial:
        """
        Parse a polynomial such as ``2 * x^2 - 3x + 1/2``.

        Args:
            text: Polynomial source
            variable: Variable name; inferred from the single letter other
                than ``i`` when omitted

        Raises:
            InvalidFormatError: If a term cannot be read
        """
        s = text.replace(" ", "")
        if not s:
            raise InvalidFormatError("Invalid polynomial: empty input")
        if variable is None:
            variable = cls._infer_variable(s, text)

        terms: dict[int, MathValue] = {}
        for term in cls._split_terms(s):
            power, coefficient = cls._parse_term(term, variable, text)
            terms[power] = terms[power] + coefficient if power in terms else coefficient
        return cls(terms, variable)

    @staticmethod
    def _infer_variable(s: str, source: str) -> str:
        letters = {ch for ch in s if ch.isalpha() and ch.lower() != "i"}
        if len(letters) > 1:
            raise InvalidFormatError(
                f"Invalid polynomial: more than one variable in '{source}'"
            )
        return letters.pop() if letters else "x"

    @staticmethod
    def _split_terms(s: str) -> list[str]:
        """Split on top-level '+'/'-' into signed terms."""
        if s[0] not in "+-":
            s = "+" + s
        terms = []
        depth = 0
        start = 0
        for idx, ch in enumerate(s):
            if ch in "([":
                depth += 1
            elif ch in ")]":
                depth -= 1
            elif ch in "+-" and idx > 0 and depth == 0 and s[idx - 1] not in "^*/+-(":
                terms.append(s[start:idx])
                start = idx
        terms.append(s[start:])
        return terms

    @staticmethod
    def _parse_term(term: str, variable: str, source: str) -> tuple[int, MathValue]:
        from ..parser.postfix import evaluate

        sign, body = term[0], term[1:]
        if not body:
            raise InvalidFormatError(f"Invalid polynomial: dangling sign in '{source}'")

        idx = body.find(variable)
        if idx == -1:
            coefficient = evaluate(body)
            power = 0
        else:
            before, after = body[:idx], body[idx + len(variable):]
            if before.endswith("*"):
                before = before[:-1]
            if before.endswith("/") or variable in after:
                raise InvalidFormatError(f"Invalid polynomial term '{term}' in '{source}'")
            coefficient = evaluate(before) if before else Rational(1)

            match = _POWER_RE.match(after)
            if match:
                power = int(match.group(1))
                after = after[match.end():]
            else:
                power = 1

            if after.startswith("*") and len(after) > 1:
                coefficient = coefficient * evaluate(after[1:])
            elif after.startswith("/") and len(after) > 1:
                coefficient = coefficient / evaluate(after[1:])
            elif after:
                raise InvalidFormatError(f"Invalid polynomial term '{term}' in '{source}'")

        if isinstance(coefficient, Polynomial):
            raise InvalidFormatError(f"Invalid polynomial term '{term}' in '{source}'")
        if sign == "-":
            coefficient = -coefficient
        return power, coefficient

    # Properties

    @property
    def degree(self) -> int:
        return max(self.terms) if self.terms else 0

    @property
    def is_zero(self) -> bool:
        return not self.terms

    @property
    def is_constant(self) -> bool:
        return self.degree == 0

    def coefficient(self, power: int) -> MathValue:
        return self.terms.get(power, Rational(0))

    def simplify(self) -> MathValue:
        if self.is_constant:
            return self.coefficient(0).simplify()
        return self

    # Rendering

    def _monomial(self, power: int) -> str:
        if power == 0:
            return ""
        if power == 1:
            return self.variable
        return f"{self.variable}^{power}"

    @staticmethod
    def _coefficient_text(coefficient: MathValue, unit_allowed: bool) -> tuple[bool, str]:
        """Return (negative, magnitude text); an empty text stands for 1."""
        if isinstance(coefficient, Rational):
            negative = coefficient < 0
            magnitude = abs(coefficient)
            if unit_allowed and magnitude == 1:
                return negative, ""
            return negative, magnitude.to_string()
        if isinstance(coefficient, Complex):
            if coefficient.is_imaginary:
                return coefficient.imag < 0, Complex(0, abs(coefficient.imag)).to_string()
            return False, f"({coefficient.to_string()})"
        return False, coefficient.to_string()

    def to_string(self) -> str:
        if not self.terms:
            return "0"

        parts = []
        for power in sorted(self.terms, reverse=True):
            monomial = self._monomial(power)
            negative, text = self._coefficient_text(self.terms[power], bool(monomial))
            if monomial:
                body = f"{text} * {monomial}" if text else monomial
            else:
                body = text
            if not parts:
                parts.append(f"-{body}" if negative else body)
            else:
                parts.append(f" - {body}" if negative else f" + {body}")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Polynomial({self.to_string()})"

    # Comparison

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Polynomial):
            if self.is_constant and other.is_constant:
                return self.coefficient(0) == other.coefficient(0)
            return self.variable == other.variable and self.terms == other.terms
        if isinstance(other, (MathValue, int)):
            return self.is_constant and self.coefficient(0) == other
        return NotImplemented

    def __hash__(self) -> int:
        if self.is_constant:
            return hash(self.coefficient(0))
        return hash((self.variable, frozenset(self.terms.items())))

    # Arithmetic operators

    def _as_polynomial(self, other: Any) -> Polynomial | None:
        if isinstance(other, Polynomial):
            return other
        if isinstance(other, (MathValue, int)):
            return Polynomial.constant(other, self.variable)
        return None

    def _shared_variable(self, other: Polynomial) -> str:
        if self.variable == other.variable or other.is_constant:
            return self.variable
        if self.is_constant:
            return other.variable
        raise InvalidArgumentError(
            f"Cannot combine polynomials in different variables: '{self.variable}' and '{other.variable}'"
        )

    @staticmethod
    def _add(left: Polynomial, right: Polynomial) -> Polynomial:
        merged: dict[int, MathValue] = dict(left.terms)
        for power, coefficient in right.terms.items():
            merged[power] = merged[power] + coefficient if power in merged else coefficient
        return Polynomial(merged, left._shared_variable(right))

    @staticmethod
    def _multiply(left: Polynomial, right: Polynomial) -> Polynomial:
        product: dict[int, MathValue] = {}
        for p1, c1 in left.terms.items():
            for p2, c2 in right.terms.items():
                term = c1 * c2
                power = p1 + p2
                product[power] = product[power] + term if power in product else term
        return Polynomial(product, left._shared_variable(right))

    def __add__(self, other: Any) -> Polynomial:
        o = self._as_polynomial(other)
        if o is None:
            return NotImplemented
        return self._add(self, o)

    def __radd__(self, other: Any) -> Polynomial:
        o = self._as_polynomial(other)
        if o is None:
            return NotImplemented
        return self._add(o, self)

    def __sub__(self, other: Any) -> Polynomial:
        o = self._as_polynomial(other)
        if o is None:
            return NotImplemented
        return self._add(self, -o)

    def __rsub__(self, other: Any) -> Polynomial:
        o = self._as_polynomial(other)
        if o is None:
            return NotImplemented
        return self._add(o, -self)

    def __mul__(self, other: Any) -> Polynomial:
        o = self._as_polynomial(other)
        if o is None:
            return NotImplemented
        return self._multiply(self, o)

    def __rmul__(self, other: Any) -> Polynomial:
        o = self._as_polynomial(other)
        if o is None:
            return NotImplemented
        return self._multiply(o, self)

    def _scalar_divisor(self, other: Any) -> MathValue:
        """
        Reduce a divisor to a scalar.

        Raises:
            NotSupportedError: If the divisor is a non-constant polynomial
        """
        if isinstance(other, Polynomial):
            if not other.is_constant:
                raise NotSupportedError(
                    f"Polynomial division is not supported: ({self}) / ({other})"
                )
            other = other.coefficient(0)
        if other == 0:
            raise DivideByZeroError()
        return other

    def __truediv__(self, other: Any) -> Polynomial:
        if not isinstance(other, (MathValue, int)):
            return NotImplemented
        divisor = self._scalar_divisor(other)
        return Polynomial({p: c / divisor for p, c in self.terms.items()}, self.variable)

    def __rtruediv__(self, other: Any) -> MathValue:
        if not isinstance(other, (MathValue, int)):
            return NotImplemented
        if not self.is_constant:
            raise NotSupportedError(f"Cannot divide by a polynomial: {other} / ({self})")
        if self.is_zero:
            raise DivideByZeroError()
        return Polynomial.constant(other / self.coefficient(0), self.variable)

    def __mod__(self, other: Any) -> Polynomial:
        if not isinstance(other, (MathValue, int)):
            return NotImplemented
        divisor = self._scalar_divisor(other)
        return Polynomial({p: c % divisor for p, c in self.terms.items()}, self.variable)

    def __rmod__(self, other: Any) -> MathValue:
        if not isinstance(other, (MathValue, int)):
            return NotImplemented
        if not self.is_constant:
            raise NotSupportedError(f"Cannot take a value modulo a polynomial: {other} % ({self})")
        if self.is_zero:
            raise DivideByZeroError("Cannot perform modulo by zero")
        return Polynomial.constant(other % self.coefficient(0), self.variable)

    def __pow__(self, exponent: Any) -> Polynomial:
        n = self.exponent_to_int(exponent)
        if n < 0:
            if self.is_constant:
                return Polynomial.constant(self.coefficient(0) ** n, self.variable)
            raise NotSupportedError(f"Negative powers of a polynomial are not supported: ({self})^{n}")

        result = Polynomial.constant(1, self.variable)
        base = self
        while n:
            if n & 1:
                result = result * base
            n >>= 1
            if n:
                base = base * base
        return result

    def __neg__(self) -> Polynomial:
        return Polynomial({p: -c for p, c in self.terms.items()}, self.variable)

    def __pos__(self) -> Polynomial:
        return self

    # Calculus and evaluation

    def evaluate(self, value: Any) -> MathValue:
        """Sum of coefficient * value^power."""
        value = MathValue.from_python(value)
        total: MathValue | None = None
        for power in sorted(self.terms):
            coefficient = self.terms[power]
            term = coefficient if power == 0 else coefficient * value ** power
            total = term if total is None else total + term
        if total is None:
            return Rational(0)
        return total.simplify()

    def derivative(self) -> Polynomial:
        return Polynomial(
            {p - 1: c * p for p, c in self.terms.items() if p > 0},
            self.variable,
        )

    def integral(self) -> Polynomial:
        """Antiderivative without a constant of integration."""
        return Polynomial(
            {p + 1: c / (p + 1) for p, c in self.terms.items()},
            self.variable,
        )

    def solve(self) -> list:
        """
        Roots of ``self = 0``.

        Returns:
            [] when there is no solution, [ALL_REAL_NUMBERS] for the zero
            polynomial, otherwise the roots (real roots ascending; complex
            roots as a conjugate pair)

        Raises:
            NotSupportedError: For degree > 2, matrix coefficients, or a
                degree-2 polynomial with non-rational coefficients
        """
        degree = self.degree
        if degree == 0:
            return [ALL_REAL_NUMBERS] if self.is_zero else []
        if degree > 2:
            raise NotSupportedError(
                f"Polynomial degree {degree} is strictly greater than 2, cannot solve"
            )
        if not all(isinstance(value, (Rational, Complex)) for value in self.terms.values()):
            raise NotSupportedError(
                f"Cannot solve an equation with non-scalar coefficients: {self} = 0"
            )

        if degree == 1:
            return [(-self.coefficient(0) / self.coefficient(1)).simplify()]

        a, b, c = self.coefficient(2), self.coefficient(1), self.coefficient(0)
        if not all(isinstance(value, Rational) for value in (a, b, c)):
            raise NotSupportedError(
                f"Cannot solve a degree 2 polynomial with non-rational coefficients: {self}"
            )

        discriminant = b * b - 4 * a * c
        two_a = 2 * a
        if discriminant.is_zero:
            return [-b / two_a]
        places = get_settings().SQRT_DECIMAL_PLACES
        root = abs(discriminant).sqrt(places)
        exact = root * root == abs(discriminant)

        def settle(value: Rational) -> Rational:
            # Approximate roots keep the precision of the square root
            return value if exact else round(value, places)

        if discriminant > 0:
            return sorted([settle((-b - root) / two_a), settle((-b + root) / two_a)])

        real = -b / two_a
        imag = settle(root / two_a)
        return [Complex(real, imag), Complex(real, -imag)]
