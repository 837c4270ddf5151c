"""Core utilities package"""

from .config import Settings, settings, get_settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    ComputorError,
    ExpressionSyntaxError,
    InvalidFormatError,
    SemanticError,
    UndefinedNameError,
    InvalidArgumentError,
    MathError,
    DivideByZeroError,
    SingularMatrixError,
    DimensionMismatchError,
    NotSquareError,
    NotSupportedError,
)

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "ComputorError",
    "ExpressionSyntaxError",
    "InvalidFormatError",
    "SemanticError",
    "UndefinedNameError",
    "InvalidArgumentError",
    "MathError",
    "DivideByZeroError",
    "SingularMatrixError",
    "DimensionMismatchError",
    "NotSquareError",
    "NotSupportedError",
]
