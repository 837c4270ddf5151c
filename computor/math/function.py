"""
Named single-parameter functions.

A Function binds one variable name to an expression value; its algebra
delegates to the operators of the underlying expressions and composes the
display name, so ``f + g`` is the function ``(f + g)``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import InvalidArgumentError
from .fraction import Rational
from .matrix import Matrix
from .numeric import Complex
from .polynomial import Polynomial
from .value import MathValue


class Function(BaseModel):
    """
    Named function ``name(variable) = expression``.

    The expression is a Rational, Complex, Matrix or Polynomial. A string
    expression is parsed trying Complex, Rational, Matrix, then Polynomial.

    Examples:
        >>> f = Function("f", "x", "2x + 1")
        >>> f(5)              # Rational(11)
        >>> str(f.derive())   # "f'(x) = 2"
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str = Field(description="Display name")
    variable: str = Field(description="Parameter name")
    expression: MathValue = Field(description="Function body")

    def __init__(self, name: str, variable: str, expression: Any):
        if isinstance(expression, str):
            expression = self.parse_expression(expression, variable)
        else:
            expression = MathValue.from_python(expression).simplify()

        if isinstance(expression, Polynomial) and expression.variable != variable:
            if not expression.is_constant:
                raise InvalidArgumentError(
                    f"Function {name}({variable}) cannot have a body in '{expression.variable}'"
                )
            expression = Polynomial(expression.terms, variable)

        super().__init__(name=name, variable=variable, expression=expression)

    @staticmethod
    def parse_expression(text: str, variable: str) -> MathValue:
        """Parse a body string in priority order Complex, Rational, Matrix, Polynomial."""
        for parser in (Complex.try_parse, Rational.try_parse, Matrix.try_parse):
            value = parser(text)
            if value is not None:
                return value.simplify()
        return Polynomial.parse(text, variable)

    # Evaluation

    def evaluate(self, value: Any) -> MathValue:
        """Substitute ``value`` for the variable; constant bodies return themselves."""
        if isinstance(self.expression, Polynomial):
            return self.expression.evaluate(value)
        return self.expression

    def __call__(self, value: Any) -> MathValue:
        return self.evaluate(value)

    # Algebra

    def _require_same_variable(self, other: Function) -> None:
        if other.variable != self.variable:
            raise InvalidArgumentError(
                f"Functions must share a variable: {self.name}({self.variable}) "
                f"and {other.name}({other.variable})"
            )

    def _combine(self, other: Any, symbol: str, op) -> Function:
        if not isinstance(other, Function):
            return NotImplemented
        self._require_same_variable(other)
        return Function(
            f"({self.name} {symbol} {other.name})",
            self.variable,
            op(self.expression, other.expression),
        )

    def __add__(self, other: Any) -> Function:
        return self._combine(other, "+", lambda a, b: a + b)

    def __sub__(self, other: Any) -> Function:
        return self._combine(other, "-", lambda a, b: a - b)

    def __mul__(self, other: Any) -> Function:
        return self._combine(other, "*", lambda a, b: a * b)

    def __truediv__(self, other: Any) -> Function:
        return self._combine(other, "/", lambda a, b: a / b)

    def __neg__(self) -> Function:
        return Function(f"-{self.name}", self.variable, -self.expression)

    def __pow__(self, exponent: int) -> Function:
        return Function(f"{self.name}^{exponent}", self.variable, self.expression ** exponent)

    def compose(self, other: Function) -> Function:
        """``(f ∘ g)(x) = f(g(x))``"""
        self._require_same_variable(other)
        return Function(
            f"({self.name} ∘ {other.name})",
            self.variable,
            self.evaluate(other.expression),
        )

    def derive(self) -> Function:
        """Derivative; constant bodies derive to zero."""
        if isinstance(self.expression, Polynomial):
            derived: MathValue = self.expression.derivative()
        elif isinstance(self.expression, Matrix):
            derived = Matrix.zeros(*self.expression.shape)
        else:
            derived = Rational(0)
        return Function(f"{self.name}'", self.variable, derived)

    # Comparison and display

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Function):
            return NotImplemented
        return (
            self.name == other.name
            and self.variable == other.variable
            and self.expression == other.expression
        )

    def __hash__(self) -> int:
        return hash((self.name, self.variable, self.expression))

    def __str__(self) -> str:
        return f"{self.name}({self.variable}) = {self.expression.to_string()}"

    def __repr__(self) -> str:
        return f"Function({self})"
