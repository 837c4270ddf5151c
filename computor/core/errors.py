"""
Computor exceptions.

Every failure is raised at the point of detection and carries a single-line
diagnostic naming the failing stage and the offending input. The hierarchy
mirrors the four error families of the evaluator (syntax, semantic, math,
not-supported); each class also derives from the matching builtin so callers
may catch ``ValueError`` or ``ZeroDivisionError`` directly.
"""

from typing import Any, Dict, Optional


class ComputorError(Exception):
    """Base exception for all evaluator errors"""

    category = "error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Structured form used by the logging layer"""
        data: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "category": self.category,
            "message": self.message,
        }
        if self.details:
            data["details"] = self.details
        return data


# Syntax errors

class ExpressionSyntaxError(ComputorError, ValueError):
    """Raised for malformed input: stray characters, brackets, '=' count"""

    category = "syntax"


class InvalidFormatError(ExpressionSyntaxError):
    """Raised when a literal (number, complex, matrix, polynomial) cannot be parsed"""

    def __init__(self, message: str, position: Optional[Any] = None):
        details = {"position": position} if position is not None else {}
        super().__init__(message=message, details=details)


# Semantic errors

class SemanticError(ComputorError, ValueError):
    """Raised for well-formed input that names something invalid"""

    category = "semantic"


class UndefinedNameError(SemanticError):
    """Raised when an expression references an unknown variable or function"""

    def __init__(self, message: str, names: Optional[list[str]] = None):
        super().__init__(message=message, details={"names": names or []})


class InvalidArgumentError(ComputorError, ValueError):
    """Raised when a value is constructed or combined with invalid arguments"""

    category = "argument"


# Math errors

class MathError(ComputorError, ArithmeticError):
    """Raised when an operation is mathematically undefined"""

    category = "math"


class DivideByZeroError(MathError, ZeroDivisionError):
    """Raised on division, modulo or negative power of zero"""

    def __init__(self, message: str = "Cannot divide by zero"):
        super().__init__(message=message)


class SingularMatrixError(MathError):
    """Raised when inverting a matrix whose determinant is zero"""

    def __init__(self, message: str = "Matrix is singular"):
        super().__init__(message=message)


class DimensionMismatchError(MathError):
    """Raised when matrix shapes are incompatible for an operation"""

    def __init__(self, operation: str, left: tuple[int, int], right: tuple[int, int]):
        super().__init__(
            message=(
                f"Matrix dimensions do not match for {operation}: "
                f"{left[0]}x{left[1]} and {right[0]}x{right[1]}"
            ),
            details={"operation": operation, "left": list(left), "right": list(right)}
        )


class NotSquareError(MathError):
    """Raised when a square matrix is required"""

    def __init__(self, operation: str, shape: tuple[int, int]):
        super().__init__(
            message=f"Matrix must be square for {operation}: got {shape[0]}x{shape[1]}",
            details={"operation": operation, "shape": list(shape)}
        )


# Unsupported operations

class NotSupportedError(ComputorError, NotImplementedError):
    """Raised for operations outside the supported domain"""

    category = "not_supported"
