"""
Shunting-yard conversion to reverse Polish notation and stack evaluation.

An expression is parsed once into an RPN token sequence whose identifier
leaves stay named; they are resolved against bindings and the environment
only when the sequence is evaluated. Operators are applied through the
operands' own dunder methods, so mixed rational, complex, matrix and
polynomial operands combine without the evaluator inspecting their types.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from ..core.errors import ExpressionSyntaxError, MathError, UndefinedNameError
from ..math import Complex, Function, Matrix, MathValue, Rational
from .tokenizer import BINARY_OPERATORS, OPERAND_TYPES, Token, Tokenizer, TokenType

PRECEDENCE: dict[TokenType, int] = {
    TokenType.PLUS: 2,
    TokenType.MINUS: 2,
    TokenType.MULTIPLY: 3,
    TokenType.MATMUL: 3,
    TokenType.DIVIDE: 3,
    TokenType.MODULO: 3,
    TokenType.NEGATE: 4,
    TokenType.POWER: 5,
}

RIGHT_ASSOCIATIVE = frozenset({TokenType.POWER, TokenType.NEGATE})

_BINARY_FUNCTIONS: dict[TokenType, Callable[[Any, Any], Any]] = {
    TokenType.PLUS: operator.add,
    TokenType.MINUS: operator.sub,
    TokenType.MULTIPLY: operator.mul,
    TokenType.DIVIDE: operator.truediv,
    TokenType.MODULO: operator.mod,
    TokenType.POWER: operator.pow,
}

_tokenizer = Tokenizer()


def _matrix_product(left: Any, right: Any) -> Any:
    """``**``: matrix product for two matrices, ordinary product otherwise."""
    if isinstance(left, Matrix) and isinstance(right, Matrix):
        return left @ right
    return left * right


_BINARY_FUNCTIONS[TokenType.MATMUL] = _matrix_product


@dataclass
class PostfixExpression:
    """
    An expression in reverse Polish notation.

    Examples:
        >>> expr = PostfixExpression.parse("2 + 3 * x")
        >>> str(expr)
        '2 3 x * +'
        >>> expr.evaluate(variables={"x": Rational(4)})
        Rational(14, 1)
    """

    tokens: list[Token]
    source: str = ""
    identifiers: list[str] = field(default_factory=list)
    function_names: list[str] = field(default_factory=list)

    def __post_init__(self):
        for token in self.tokens:
            if token.type == TokenType.IDENTIFIER and token.value not in self.identifiers:
                self.identifiers.append(token.value)
            elif token.type == TokenType.FUNCTION and token.value not in self.function_names:
                self.function_names.append(token.value)

    @classmethod
    def parse(cls, text: str, source: str | None = None) -> PostfixExpression:
        """Tokenize and convert in one step."""
        source = text if source is None else source
        return cls.from_tokens(_tokenizer.tokenize(text, source), source)

    @classmethod
    def from_tokens(cls, tokens: list[Token], source: str = "") -> PostfixExpression:
        """
        Shunting-yard conversion of infix tokens.

        Raises:
            ExpressionSyntaxError: On mismatched parentheses
        """
        output: list[Token] = []
        stack: list[Token] = []

        for token in tokens:
            kind = token.type
            if kind in OPERAND_TYPES:
                output.append(token)
            elif kind in (TokenType.FUNCTION, TokenType.LPAREN, TokenType.NEGATE):
                stack.append(token)
            elif kind in BINARY_OPERATORS:
                precedence = PRECEDENCE[kind]
                while stack and stack[-1].type in PRECEDENCE:
                    top = PRECEDENCE[stack[-1].type]
                    if top > precedence or (top == precedence and kind not in RIGHT_ASSOCIATIVE):
                        output.append(stack.pop())
                    else:
                        break
                stack.append(token)
            elif kind == TokenType.RPAREN:
                while stack and stack[-1].type != TokenType.LPAREN:
                    output.append(stack.pop())
                if not stack:
                    raise ExpressionSyntaxError(f"Postfix: mismatched parentheses: {source}")
                stack.pop()
                if stack and stack[-1].type == TokenType.FUNCTION:
                    output.append(stack.pop())

        while stack:
            token = stack.pop()
            if token.type in (TokenType.LPAREN, TokenType.FUNCTION):
                raise ExpressionSyntaxError(f"Postfix: mismatched parentheses: {source}")
            output.append(token)

        return cls(tokens=output, source=source)

    def __str__(self) -> str:
        return " ".join("neg" if t.type == TokenType.NEGATE else t.value for t in self.tokens)

    def evaluate(
        self,
        variables: Mapping[str, MathValue] | None = None,
        functions: Mapping[str, Function] | None = None,
        bindings: Mapping[str, MathValue] | None = None,
    ) -> MathValue:
        """
        Evaluate the RPN sequence.

        Args:
            variables: Environment variables
            functions: Environment functions, called by name
            bindings: Names resolved before ``variables`` (function parameters,
                solve unknowns)

        Raises:
            UndefinedNameError: For an unknown variable or function
            MathError: When no operand type supports the operation
            ExpressionSyntaxError: When the operand stack is malformed
        """
        variables = variables or {}
        functions = functions or {}
        bindings = bindings or {}
        stack: list[Any] = []

        for token in self.tokens:
            kind = token.type
            if kind == TokenType.NUMBER:
                stack.append(Rational.parse(token.value))
            elif kind == TokenType.IMAGINARY:
                stack.append(Complex.parse(token.value))
            elif kind == TokenType.MATRIX:
                stack.append(Matrix.parse(
                    token.value,
                    cell_parser=lambda text: evaluate(text, variables, functions, bindings),
                ))
            elif kind == TokenType.IDENTIFIER:
                stack.append(self._resolve(token.value, variables, bindings))
            elif kind == TokenType.FUNCTION:
                if not stack:
                    raise ExpressionSyntaxError(f"Postfix: invalid expression: {self.source}")
                function = functions.get(token.value)
                if function is None:
                    raise UndefinedNameError(
                        f"Variable Substitution: expression contains undefined functions: {self.source}",
                        names=[token.value],
                    )
                stack.append(function.evaluate(stack.pop()))
            elif kind == TokenType.NEGATE:
                if not stack:
                    raise ExpressionSyntaxError(f"Postfix: invalid expression: {self.source}")
                stack.append(-stack.pop())
            else:
                if len(stack) < 2:
                    raise ExpressionSyntaxError(f"Postfix: invalid expression: {self.source}")
                right = stack.pop()
                left = stack.pop()
                stack.append(self._apply(token, left, right))

        if len(stack) != 1:
            raise ExpressionSyntaxError(f"Postfix: invalid expression: {self.source}")
        return stack[0].simplify()

    def _resolve(
        self,
        name: str,
        variables: Mapping[str, MathValue],
        bindings: Mapping[str, MathValue],
    ) -> MathValue:
        if name in bindings:
            return bindings[name]
        if name in variables:
            return variables[name]
        raise UndefinedNameError(
            f"Variable Substitution: expression contains undefined variables: {self.source}",
            names=[name],
        )

    @staticmethod
    def _apply(token: Token, left: MathValue, right: MathValue) -> MathValue:
        try:
            return _BINARY_FUNCTIONS[token.type](left, right)
        except TypeError as e:
            raise MathError(
                f"Unsupported operation: {left} {token.value} {right}",
                details={"operator": token.value},
            ) from e


def evaluate(
    text: str,
    variables: Mapping[str, MathValue] | None = None,
    functions: Mapping[str, Function] | None = None,
    bindings: Mapping[str, MathValue] | None = None,
) -> MathValue:
    """Parse and evaluate ``text`` in one call."""
    return PostfixExpression.parse(text).evaluate(variables, functions, bindings)
