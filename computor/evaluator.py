"""
Evaluator orchestration.

The Evaluator owns an Environment of variables and functions and implements
the two user-facing pipelines:

- ``assign``: ``name = expr`` stores a value, ``f(x) = expr`` stores a
  function whose body is a polynomial in its parameter.
- ``compute``: evaluates ``expr``, ``expr = ?``, shows a stored function
  with ``f(x) = ?``, and solves ``lhs = rhs ?`` for its single unknown.

Expressions are parsed once into RPN; names are resolved against the
environment at evaluation time, never spliced into the text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .core.config import Settings, get_settings
from .core.errors import (
    ComputorError,
    ExpressionSyntaxError,
    SemanticError,
    UndefinedNameError,
)
from .core.logging import get_context_logger
from .math import (
    ALL_REAL_NUMBERS,
    AllRealNumbers,
    Complex,
    Function,
    MathValue,
    Polynomial,
    Rational,
)
from .parser import InputKind, Parser, PostfixExpression, Tokenizer

logger = get_context_logger(__name__)


@dataclass
class Environment:
    """Variables and functions of one evaluation session."""

    variables: dict[str, MathValue] = field(default_factory=dict)
    functions: dict[str, Function] = field(default_factory=dict)

    def get_variable(self, name: str) -> MathValue | None:
        return self.variables.get(name)

    def set_variable(self, name: str, value: MathValue) -> None:
        self.variables[name] = value

    def get_function(self, name: str) -> Function | None:
        return self.functions.get(name)

    def set_function(self, function: Function) -> None:
        self.functions[function.name] = function

    def clear_variables(self) -> None:
        self.variables.clear()

    def clear_functions(self) -> None:
        self.functions.clear()


class Evaluator:
    """
    Evaluates input lines against an Environment.

    Examples:
        >>> evaluator = Evaluator()
        >>> evaluator.assign("f(x) = 2*x + 1")
        '2 * x + 1'
        >>> evaluator.compute("f(5)")
        '11'
    """

    def __init__(self, environment: Environment | None = None, settings: Settings | None = None):
        self.environment = environment if environment is not None else Environment()
        self.settings = settings or get_settings()
        self.tokenizer = Tokenizer()

    # Environment access

    @property
    def variables(self) -> dict[str, MathValue]:
        return self.environment.variables

    @property
    def functions(self) -> dict[str, Function]:
        return self.environment.functions

    def get_variable(self, name: str) -> MathValue | None:
        """Value of a variable, or None when it is not defined."""
        return self.environment.get_variable(name)

    def get_function(self, name: str) -> Function | None:
        return self.environment.get_function(name)

    def get_functions(self) -> dict[str, Function]:
        return dict(self.environment.functions)

    def clear_functions(self) -> None:
        self.environment.clear_functions()
        logger.debug("Functions cleared")

    def clear_variables(self) -> None:
        self.environment.clear_variables()
        logger.debug("Variables cleared")

    @staticmethod
    def is_assignment(expr: str) -> bool:
        return Parser.is_assignment(expr)

    # Public pipelines

    def assign(self, expr: str) -> str:
        """
        Assign a variable or define a function.

        Returns:
            The formatted stored value, or the formatted function body

        Raises:
            ComputorError: On any syntax, naming or math failure
        """
        value = self._run(self._assign, expr)
        if isinstance(value, Function):
            return value.expression.to_string()
        return self.format_value(value)

    def compute(self, expr: str) -> str:
        """
        Evaluate an expression, show a function or solve an equation.

        Raises:
            ComputorError: On any syntax, naming or math failure
        """
        return self.format_value(self._run(self._compute, expr))

    def solve(self, expr: str) -> list:
        """
        Solve ``lhs = rhs`` (or ``expr = 0``) for its single unknown.

        The unknown is the one name that is not a defined variable. A side
        written exactly as ``f(x)``, with x the parameter of f, solves for x
        even when a variable x exists; x then stays symbolic on both sides.

        Returns:
            [] for no solution, [ALL_REAL_NUMBERS] for an identity, else the roots

        Raises:
            SemanticError: If more than one name is undefined
            NotSupportedError: If the equation has degree > 2 or matrix coefficients
        """
        return self._run(self._solve, expr)

    def evaluate(self, expr: str) -> Any:
        """
        Dispatch on the input kind and return the resulting value.

        Assignments return the stored value (a Function for definitions),
        solve requests return the list of roots.
        """
        if self.is_assignment(expr):
            return self._run(self._assign, expr)
        return self._run(self._compute, expr)

    def _run(self, operation, expr: str) -> Any:
        try:
            return operation(expr)
        except ComputorError as e:
            logger.debug("Evaluation failed", extra_data={"input": expr, **e.to_dict()})
            raise

    # Assignment

    def _assign(self, expr: str) -> MathValue | Function:
        text = Parser.normalize(expr)
        if not Parser.is_assignment(text):
            raise ExpressionSyntaxError(f"Assignation: expression is not an assignment: {expr}")

        lhs, rhs = Parser.split_assignment(text, expr)
        if not rhs:
            raise ExpressionSyntaxError(f"Assignation: missing value: {expr}")

        header = Parser.parse_function_header(lhs)
        if header is not None:
            return self._define_function(header[0], header[1], rhs, expr)

        Parser.validate_identifier(lhs, expr)
        value = self._evaluate_expression(rhs, expr)
        self.environment.set_variable(lhs, value)
        logger.debug(
            "Variable assigned",
            extra_data={"name": lhs, "kind": value.kind.name, "value": value.to_string()},
        )
        return value

    def _define_function(self, name: str, parameter: str, body: str, expr: str) -> Function:
        Parser.validate_identifier(name, expr)
        Parser.validate_identifier(parameter, expr)

        bindings = {parameter: Polynomial.monomial(parameter)}
        value = self._evaluate_expression(body, expr, bindings)
        if not isinstance(value, Polynomial):
            value = Polynomial.constant(value, parameter)

        function = Function(name, parameter, value)
        self.environment.set_function(function)
        logger.debug("Function defined", extra_data={"function": str(function)})
        return function

    # Computation

    def _compute(self, expr: str) -> Any:
        text = Parser.normalize(expr)
        kind = Parser.classify(expr)
        if kind == InputKind.SOLVE_REQUEST:
            return self._solve(expr)

        if text.endswith("?"):
            text = text[:-1]
            if text.endswith("="):
                text = text[:-1]
        elif "=" in text:
            raise ExpressionSyntaxError(f"Computation: use '= ?' to request a result: {expr}")

        if not text:
            raise ExpressionSyntaxError(f"Computation: empty expression: {expr}")

        function = self._displayed_function(text)
        if function is not None:
            return function

        value = self._evaluate_expression(text, expr)
        logger.debug("Computed", extra_data={"input": expr, "value": value.to_string()})
        return value

    def _own_call(self, text: str) -> Function | None:
        """The stored function when text is exactly ``f(x)`` with x its own parameter."""
        header = Parser.parse_function_header(text)
        if header is None:
            return None
        name, argument = header
        function = self.environment.get_function(name)
        if function is None or argument != function.variable:
            return None
        return function

    def _displayed_function(self, text: str) -> Function | None:
        """``f(x)`` with x the function's own, unassigned parameter shows f itself."""
        function = self._own_call(text)
        if function is None or function.variable in self.environment.variables:
            return None
        return function

    # Solving

    def _solve(self, expr: str) -> list:
        text = Parser.normalize(expr)
        if text.endswith("?"):
            text = text[:-1]
        if "=" in text:
            lhs, rhs = Parser.split_assignment(text, expr)
        else:
            lhs, rhs = text, "0"
        if not lhs or not rhs:
            raise ExpressionSyntaxError(f"Solve: both sides of the equation are required: {expr}")

        names = []
        for side in (lhs, rhs):
            variables, _ = Parser.find_names(side)
            names.extend(n for n in variables if n not in names)
        unknowns = [n for n in names if n not in self.environment.variables]
        # A side written as f(x) solves for x even when x is also a variable
        for side in (lhs, rhs):
            function = self._own_call(side)
            if function is not None and function.variable not in unknowns:
                unknowns.insert(0, function.variable)
        if len(unknowns) > 1:
            raise SemanticError(
                f"Solve: equation can only contain one unknown: {expr}",
                details={"unknowns": unknowns},
            )
        unknown = unknowns[0] if unknowns else "x"
        bindings = {unknown: Polynomial.monomial(unknown)} if unknowns else {}

        left = self._evaluate_expression(lhs, expr, bindings)
        right = self._evaluate_expression(rhs, expr, bindings)
        difference = left - right
        if not isinstance(difference, Polynomial):
            difference = Polynomial.constant(difference, unknown)

        roots = difference.solve()
        logger.debug(
            "Equation solved",
            extra_data={
                "equation": f"{difference} = 0",
                "degree": difference.degree,
                "roots": [str(root) for root in roots],
            },
        )
        return roots

    # Shared evaluation

    def _check_names(self, text: str, source: str, bound: Iterable[str] = ()) -> None:
        """
        Fail fast on names that nothing defines.

        Raises:
            UndefinedNameError: Naming the whole input
        """
        bound = set(bound)
        variables, functions = Parser.find_names(text)
        missing = [n for n in variables if n not in bound and n not in self.environment.variables]
        if missing:
            raise UndefinedNameError(
                f"Variable Substitution: expression contains undefined variables: {source}",
                names=missing,
            )
        missing = [n for n in functions if n not in self.environment.functions]
        if missing:
            raise UndefinedNameError(
                f"Variable Substitution: expression contains undefined functions: {source}",
                names=missing,
            )

    def _evaluate_expression(
        self,
        text: str,
        source: str,
        bindings: dict[str, MathValue] | None = None,
    ) -> MathValue:
        Parser.check_brackets(text, source)
        self._check_names(text, source, bound=(bindings or {}).keys())

        tokens = self.tokenizer.tokenize(text, source)
        expression = PostfixExpression.from_tokens(tokens, source)
        logger.debug(
            "Evaluating",
            extra_data={
                "input": source,
                "rpn": str(expression),
            },
        )
        return expression.evaluate(
            self.environment.variables,
            self.environment.functions,
            bindings,
        )

    # Formatting

    def format_value(self, value: Any) -> str:
        """
        Render a result.

        Rationals and complex numbers that are exact decimals within
        ``DECIMAL_PLACES`` digits render in decimal form when
        ``DISPLAY_DECIMALS`` is set (``8.484``); everything else renders
        exactly (``868/3``).
        """
        places = self.settings.DECIMAL_PLACES
        decimals = self.settings.DISPLAY_DECIMALS
        if isinstance(value, list):
            return self.format_solutions(value)
        if isinstance(value, Rational):
            if decimals and not value.is_integer and value.fits_decimal(places):
                return value.to_decimal_string(places)
            return value.to_string()
        if isinstance(value, Complex):
            return value.to_decimal_string(places) if decimals else value.to_string()
        if isinstance(value, (Function, AllRealNumbers)):
            return str(value)
        if isinstance(value, MathValue):
            return value.to_string()
        raise TypeError(f"Cannot format {type(value).__name__}")

    def format_solutions(self, roots: list) -> str:
        if not roots:
            return "No solution"
        if len(roots) == 1 and roots[0] is ALL_REAL_NUMBERS:
            return str(ALL_REAL_NUMBERS)
        return ", ".join(self.format_value(root) for root in roots)
