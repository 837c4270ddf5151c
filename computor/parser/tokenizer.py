"""
Tokenizer for computor expressions.

Whitespace is removed before scanning. Matrix literals are kept whole as a
single token, a leading or post-operator '-' becomes an explicit NEGATE
token, and implicit multiplication is inserted for juxtaposed operands
(``2x``, ``2(x+1)``, ``(a)(b)``).
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from ..core.errors import ExpressionSyntaxError


class TokenType(Enum):
    """Token types for computor expressions."""

    # Operands
    NUMBER = auto()
    IMAGINARY = auto()  # i, 4i, 2.5i
    MATRIX = auto()  # [[1,2];[3,4]]
    IDENTIFIER = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    NEGATE = auto()  # unary minus
    MULTIPLY = auto()
    MATMUL = auto()  # **
    DIVIDE = auto()
    MODULO = auto()
    POWER = auto()

    # Grouping
    LPAREN = auto()
    RPAREN = auto()

    # Name directly followed by '('
    FUNCTION = auto()


OPERAND_TYPES = frozenset({
    TokenType.NUMBER,
    TokenType.IMAGINARY,
    TokenType.MATRIX,
    TokenType.IDENTIFIER,
})

BINARY_OPERATORS = frozenset({
    TokenType.PLUS,
    TokenType.MINUS,
    TokenType.MULTIPLY,
    TokenType.MATMUL,
    TokenType.DIVIDE,
    TokenType.MODULO,
    TokenType.POWER,
})

# Tokens after which an operand may start without an implicit '*'
_OPERAND_END = OPERAND_TYPES | {TokenType.RPAREN}
_OPERAND_START = OPERAND_TYPES | {TokenType.FUNCTION, TokenType.LPAREN}


@dataclass
class Token:
    """
    A single token.

    Attributes:
        type: The token type
        value: The matched text
        pos: Offset in the whitespace-stripped expression
    """

    type: TokenType
    value: str
    pos: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, '{self.value}', pos={self.pos})"


class Tokenizer:
    """Regex-based scanner producing a flat token list."""

    # Order matters: longer operators first, imaginary before number
    PATTERNS = {
        "IMAGINARY": r"(?:\d+(?:\.\d+)?)?[iI](?![a-zA-Z])",
        "NUMBER": r"\d+(?:\.\d+)?",
        "IDENTIFIER": r"[a-zA-Z]+",
        "MATMUL": r"\*\*",
        "MULTIPLY": r"\*",
        "POWER": r"\^",
        "PLUS": r"\+",
        "MINUS": r"-",
        "DIVIDE": r"/",
        "MODULO": r"%",
        "LPAREN": r"\(",
        "RPAREN": r"\)",
    }

    def __init__(self):
        self.combined_pattern = re.compile(
            "|".join(f"(?P<{name}>{pattern})" for name, pattern in self.PATTERNS.items())
        )

    def tokenize(self, expression: str, source: str | None = None) -> list[Token]:
        """
        Tokenize an expression.

        Args:
            expression: The expression to tokenize
            source: Original user input, quoted in error messages

        Returns:
            List of tokens

        Raises:
            ExpressionSyntaxError: On invalid characters, unbalanced
                brackets or misplaced operators
        """
        source = expression if source is None else source
        text = "".join(expression.split())
        if not text:
            raise ExpressionSyntaxError(f"Tokenizer: empty expression: {source}")

        tokens: list[Token] = []
        depth = 0
        pos = 0

        while pos < len(text):
            if text[pos] == "[":
                end = self._matching_bracket(text, pos, source)
                self._append(tokens, Token(TokenType.MATRIX, text[pos:end + 1], pos), source)
                pos = end + 1
                continue

            match = self.combined_pattern.match(text, pos)
            if not match:
                raise ExpressionSyntaxError(
                    f"Tokenizer: invalid character at position {pos}: '{text[pos]}' in {source}",
                    details={"position": pos, "expression": source},
                )

            kind = match.lastgroup
            value = match.group()
            token_pos = pos
            pos = match.end()

            if kind == "IDENTIFIER" and pos < len(text) and text[pos] == "(":
                token_type = TokenType.FUNCTION
            elif kind == "MINUS" and self._expects_operand(tokens):
                token_type = TokenType.NEGATE
            else:
                token_type = TokenType[kind]

            if token_type == TokenType.LPAREN:
                depth += 1
            elif token_type == TokenType.RPAREN:
                depth -= 1
                if depth < 0:
                    raise ExpressionSyntaxError(
                        f"Tokenizer: unmatched ')' at position {token_pos} in {source}",
                        details={"position": token_pos, "expression": source},
                    )

            self._append(tokens, Token(token_type, value, token_pos), source)

        if depth != 0:
            raise ExpressionSyntaxError(f"Tokenizer: unmatched '(' in {source}")
        if tokens[-1].type not in _OPERAND_END:
            raise ExpressionSyntaxError(f"Tokenizer: invalid expression: {source}")

        return tokens

    @staticmethod
    def _expects_operand(tokens: list[Token]) -> bool:
        """True at the start, after '(' and after any operator."""
        if not tokens:
            return True
        return tokens[-1].type not in _OPERAND_END

    def _append(self, tokens: list[Token], token: Token, source: str) -> None:
        """Append a token, validating its position and inserting implicit '*'."""
        previous = tokens[-1] if tokens else None
        expects_operand = self._expects_operand(tokens)

        if token.type in BINARY_OPERATORS or token.type == TokenType.RPAREN:
            if expects_operand:
                raise ExpressionSyntaxError(
                    f"Tokenizer: invalid expression: {source}",
                    details={"position": token.pos, "expression": source},
                )
        elif token.type == TokenType.NEGATE:
            if previous is not None and previous.type == TokenType.NEGATE:
                raise ExpressionSyntaxError(
                    f"Tokenizer: invalid expression: {source}",
                    details={"position": token.pos, "expression": source},
                )
        elif token.type in _OPERAND_START and not expects_operand:
            tokens.append(Token(TokenType.MULTIPLY, "*", token.pos))

        tokens.append(token)

    @staticmethod
    def _matching_bracket(text: str, start: int, source: str) -> int:
        depth = 0
        for idx in range(start, len(text)):
            if text[idx] == "[":
                depth += 1
            elif text[idx] == "]":
                depth -= 1
                if depth == 0:
                    return idx
        raise ExpressionSyntaxError(
            f"Tokenizer: unmatched '[' at position {start} in {source}",
            details={"position": start, "expression": source},
        )
