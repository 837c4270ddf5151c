"""
computor.parser - expression parsing

Tokenization, shunting-yard conversion to RPN, stack evaluation, and
classification of input lines.
"""

from .tokenizer import Token, TokenType, Tokenizer
from .postfix import PostfixExpression, evaluate
from .classifier import InputKind, Parser

__all__ = [
    "Token",
    "TokenType",
    "Tokenizer",
    "PostfixExpression",
    "evaluate",
    "InputKind",
    "Parser",
]
