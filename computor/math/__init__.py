"""
computor.math - exact value types

- Rational: exact fractions
- Complex: complex numbers with rational parts
- Matrix: rectangular grids of rational/complex cells
- Polynomial: single-variable polynomials, solvable up to degree 2
- Function: named single-parameter functions over those values
"""

from .value import MathValue, ValueKind
from .fraction import Rational, gcd, lcm, reduce_fraction
from .numeric import Complex
from .matrix import Matrix, parse_cell
from .polynomial import ALL_REAL_NUMBERS, AllRealNumbers, Polynomial
from .function import Function

__all__ = [
    "MathValue",
    "ValueKind",
    "Rational",
    "gcd",
    "lcm",
    "reduce_fraction",
    "Complex",
    "Matrix",
    "parse_cell",
    "Polynomial",
    "AllRealNumbers",
    "ALL_REAL_NUMBERS",
    "Function",
]
