"""
computor - exact algebra evaluator

Evaluates single-line expressions over rationals, complex numbers, matrices
and single-variable polynomials, with named functions and an equation
solver for degree 2 and below.

    >>> from computor import Evaluator
    >>> evaluator = Evaluator()
    >>> evaluator.assign("varB = 4.242")
    '4.242'
    >>> evaluator.compute("varB * 2")
    '8.484'
"""

from .evaluator import Environment, Evaluator
from .math import (
    ALL_REAL_NUMBERS,
    Complex,
    Function,
    MathValue,
    Matrix,
    Polynomial,
    Rational,
)

__version__ = "0.1.0"

__all__ = [
    "Environment",
    "Evaluator",
    "MathValue",
    "Rational",
    "Complex",
    "Matrix",
    "Polynomial",
    "Function",
    "ALL_REAL_NUMBERS",
]
