"""
Input classification and identifier validation.

Decides whether a line assigns a variable, defines a function, asks for a
computation or asks for an equation to be solved, and validates the names
it introduces.
"""

import re
from enum import Enum, auto

from ..core.errors import ExpressionSyntaxError, SemanticError

FUNCTION_HEADER_RE = re.compile(r"^([A-Za-z]+)\(([A-Za-z]+)\)$")
NAME_RE = re.compile(r"[A-Za-z]+")


class InputKind(Enum):
    """What a line of input asks for."""

    VARIABLE_ASSIGNMENT = auto()  # x = 2
    FUNCTION_DEFINITION = auto()  # f(x) = 2x + 1
    COMPUTATION = auto()  # 2 + 2, 2 + 2 = ?
    SOLVE_REQUEST = auto()  # f(x) = 0 ?


class Parser:
    """Stateless classifier for raw input lines."""

    @staticmethod
    def normalize(text: str) -> str:
        """Remove all whitespace."""
        return "".join(text.split())

    @classmethod
    def is_request(cls, text: str) -> bool:
        return cls.normalize(text).endswith("?")

    @classmethod
    def is_assignment(cls, text: str) -> bool:
        """An assignment contains '=' and is not a '?' request."""
        normalized = cls.normalize(text)
        return "=" in normalized and not normalized.endswith("?")

    @classmethod
    def classify(cls, text: str) -> InputKind:
        """
        Classify a line.

        Raises:
            ExpressionSyntaxError: If the line contains more than one '='
        """
        normalized = cls.normalize(text)
        if normalized.endswith("?"):
            body = normalized[:-1]
            if "=" not in body:
                return InputKind.COMPUTATION
            _, rhs = cls.split_assignment(body, text)
            return InputKind.SOLVE_REQUEST if rhs else InputKind.COMPUTATION

        if "=" in normalized:
            lhs, _ = cls.split_assignment(normalized, text)
            if cls.parse_function_header(lhs) is not None:
                return InputKind.FUNCTION_DEFINITION
            return InputKind.VARIABLE_ASSIGNMENT

        return InputKind.COMPUTATION

    @staticmethod
    def split_assignment(text: str, source: str | None = None) -> tuple[str, str]:
        """
        Split ``lhs=rhs``.

        Raises:
            ExpressionSyntaxError: Unless there is exactly one '='
        """
        source = text if source is None else source
        if text.count("=") != 1:
            raise ExpressionSyntaxError(
                f"Parser: expression can only contain one '=' token: {source}"
            )
        lhs, rhs = text.split("=")
        return lhs, rhs

    @staticmethod
    def parse_function_header(text: str) -> tuple[str, str] | None:
        """Return (name, variable) for ``name(variable)``, else None."""
        match = FUNCTION_HEADER_RE.match(text)
        if match is None:
            return None
        return match.group(1), match.group(2)

    @staticmethod
    def validate_identifier(name: str, source: str | None = None) -> None:
        """
        Check that ``name`` can be assigned.

        Raises:
            SemanticError: If the name is empty or is the imaginary unit
            ExpressionSyntaxError: If the name starts with a digit or has
                characters other than letters
        """
        source = name if source is None else source
        if not name:
            raise SemanticError(f"Assignation: variable name can not be empty: {source}")
        if name[0].isdigit():
            raise ExpressionSyntaxError(
                f"Assignation: variable name can not start with a digit: {source}"
            )
        if NAME_RE.fullmatch(name) is None:
            raise ExpressionSyntaxError(
                f"Assignation: variable name can only contain letters: {source}"
            )
        if name.lower() == "i":
            raise SemanticError(
                f"Assignation: variable name can not contain 'i' character: {source}"
            )

    @staticmethod
    def check_brackets(text: str, source: str | None = None) -> None:
        """
        Check that square brackets balance.

        Raises:
            ExpressionSyntaxError: On unbalanced '[' or ']'
        """
        source = text if source is None else source
        depth = 0
        for ch in text:
            if ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1
                if depth < 0:
                    break
        if depth != 0:
            raise ExpressionSyntaxError(f"Parser: invalid type (check syntax!): {source}")

    @staticmethod
    def find_names(text: str) -> tuple[list[str], list[str]]:
        """
        Names referenced by an expression.

        Returns:
            (variable names, called function names), each in order of first
            appearance; the imaginary unit is not a name
        """
        variables: list[str] = []
        functions: list[str] = []
        normalized = "".join(text.split())
        for match in NAME_RE.finditer(normalized):
            name = match.group()
            if name.lower() == "i":
                continue
            called = match.end() < len(normalized) and normalized[match.end()] == "("
            target = functions if called else variables
            if name not in target:
                target.append(name)
        return variables, functions
