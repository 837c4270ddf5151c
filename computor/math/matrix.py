"""
Matrices of exact scalar cells.

Cells are Rational or Complex values; arithmetic on cells goes through their
own operators, so rational and complex entries mix freely.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Iterable

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import (
    ComputorError,
    DimensionMismatchError,
    DivideByZeroError,
    InvalidArgumentError,
    InvalidFormatError,
    MathError,
    NotSquareError,
    NotSupportedError,
    SingularMatrixError,
)
from .fraction import Rational
from .numeric import Complex
from .value import MathValue, ValueKind


def parse_cell(text: str) -> MathValue:
    """Parse a matrix entry: a complex literal first, else a rational."""
    value = Complex.try_parse(text)
    if value is not None:
        return value.simplify()
    return Rational.parse(text)


class Matrix(BaseModel, MathValue):
    """
    Rectangular matrix.

    Examples:
        >>> Matrix([[1, 2], [3, 4]])
        >>> Matrix.parse("[[1,2];[3,4]]")
        >>> Matrix.parse("[[1,i];[2+3i,4]]")
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    kind: ClassVar[ValueKind] = ValueKind.MATRIX

    rows: tuple[tuple[MathValue, ...], ...] = Field(description="Cells, row by row")

    def __init__(self, rows: Iterable[Iterable[Any]] | np.ndarray):
        """
        Initialize a Matrix ensuring rectangular structure.

        Raises:
            InvalidArgumentError: If the grid is empty, ragged, or holds
                non-scalar cells
        """
        super().__init__(rows=self._coerce_rows(rows))

    @staticmethod
    def _coerce_rows(raw_rows: Any) -> tuple[tuple[MathValue, ...], ...]:
        if isinstance(raw_rows, Matrix):
            return raw_rows.rows
        if isinstance(raw_rows, np.ndarray):
            raw_rows = raw_rows.tolist()

        normalized = []
        for row in raw_rows:
            cells = []
            for cell in row:
                value = MathValue.from_python(cell).simplify()
                if not isinstance(value, (Rational, Complex)):
                    raise InvalidArgumentError(
                        f"Matrix cells must be rational or complex numbers, got {value}"
                    )
                cells.append(value)
            normalized.append(tuple(cells))

        if not normalized or not normalized[0]:
            raise InvalidArgumentError("Matrix must have at least one row and one column")
        width = len(normalized[0])
        if any(len(row) != width for row in normalized):
            raise InvalidArgumentError("Matrix rows must all have same length")
        return tuple(normalized)

    @classmethod
    def zeros(cls, n_rows: int, n_cols: int) -> Matrix:
        return cls([[0] * n_cols for _ in range(n_rows)])

    @classmethod
    def identity(cls, size: int) -> Matrix:
        return cls([[1 if i == j else 0 for j in range(size)] for i in range(size)])

    @classmethod
    def parse(
        cls,
        text: str,
        cell_parser: Callable[[str], MathValue] | None = None,
    ) -> Matrix:
        """
        Parse bracketed-row syntax.

        Accepts ``[[a,b];[c,d]]``, a single row ``[a,b]``, a column ``[a;b]``
        and ``[a]``. Rows are split on ';' and entries on ','.

        Args:
            text: Matrix literal
            cell_parser: Converts one entry; defaults to :func:`parse_cell`

        Raises:
            InvalidFormatError: Naming the offending position
        """
        cell_parser = cell_parser or parse_cell
        s = text.replace(" ", "")
        if len(s) < 3 or not (s.startswith("[") and s.endswith("]")):
            raise InvalidFormatError(f"Invalid matrix: '{text}'")

        inner = s[1:-1]
        row_texts = inner.split(";")
        if inner.startswith("["):
            stripped = []
            for i, row_text in enumerate(row_texts):
                if not (row_text.startswith("[") and row_text.endswith("]")):
                    raise InvalidFormatError(f"Invalid matrix row {i}: '{row_text}'", position=i)
                stripped.append(row_text[1:-1])
            row_texts = stripped

        grid = []
        for i, row_text in enumerate(row_texts):
            row = []
            for j, cell_text in enumerate(row_text.split(",")):
                if not cell_text or "[" in cell_text or "]" in cell_text:
                    raise InvalidFormatError(
                        f"Invalid matrix entry at ({i},{j}): '{cell_text}'", position=(i, j)
                    )
                try:
                    row.append(cell_parser(cell_text))
                except InvalidFormatError as e:
                    raise InvalidFormatError(
                        f"Invalid matrix entry at ({i},{j}): '{cell_text}'", position=(i, j)
                    ) from e
            grid.append(row)

        width = len(grid[0])
        for i, row in enumerate(grid):
            if len(row) != width:
                raise InvalidFormatError(
                    f"Invalid matrix: row {i} has {len(row)} entries, expected {width}",
                    position=i,
                )
        try:
            return cls(grid)
        except InvalidArgumentError as e:
            raise InvalidFormatError(f"Invalid matrix: {e.message}") from e

    @classmethod
    def try_parse(cls, text: str) -> Matrix | None:
        try:
            return cls.parse(text)
        except ComputorError:
            return None

    # Shape

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self.rows), len(self.rows[0]))

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_cols(self) -> int:
        return len(self.rows[0])

    @property
    def is_square(self) -> bool:
        return self.n_rows == self.n_cols

    @property
    def is_zero(self) -> bool:
        return all(cell.is_zero for row in self.rows for cell in row)

    def cell(self, i: int, j: int) -> MathValue:
        return self.rows[i][j]

    def __getitem__(self, index: tuple[int, int] | int) -> MathValue | tuple[MathValue, ...]:
        """Get element by (row, col) or a whole row."""
        if isinstance(index, tuple):
            i, j = index
            return self.rows[i][j]
        return self.rows[index]

    # Rendering

    def to_string(self) -> str:
        return "[" + ";".join(
            "[" + ",".join(cell.to_string() for cell in row) + "]" for row in self.rows
        ) + "]"

    def to_pretty_string(self) -> str:
        """One bracketed line per row, e.g. ``[ 1 , 2 ]``."""
        return "\n".join(
            "[ " + " , ".join(cell.to_string() for cell in row) + " ]" for row in self.rows
        )

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Matrix({self.to_string()})"

    def to_numpy(self) -> np.ndarray:
        """Convert to a float array, or a complex array when any cell is complex."""
        if any(isinstance(cell, Complex) for row in self.rows for cell in row):
            return np.array([[complex(cell) for cell in row] for row in self.rows])
        return np.array([[float(cell) for cell in row] for row in self.rows])

    # Comparison

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.rows == other.rows

    def __hash__(self) -> int:
        return hash(self.rows)

    # Arithmetic operators

    @staticmethod
    def _is_scalar(other: Any) -> bool:
        return isinstance(other, (Rational, Complex, int))

    def _elementwise(self, other: Matrix, op: Callable[[Any, Any], Any], name: str) -> Matrix:
        if self.shape != other.shape:
            raise DimensionMismatchError(name, self.shape, other.shape)
        return Matrix([
            [op(a, b) for a, b in zip(row_a, row_b)]
            for row_a, row_b in zip(self.rows, other.rows)
        ])

    def _map(self, op: Callable[[Any], Any]) -> Matrix:
        return Matrix([[op(cell) for cell in row] for row in self.rows])

    def __add__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            return self._elementwise(other, lambda a, b: a + b, "addition")
        if self._is_scalar(other):
            raise MathError(f"Cannot add a scalar to a matrix: {self} + {other}")
        return NotImplemented

    def __radd__(self, other: Any) -> Matrix:
        if self._is_scalar(other):
            raise MathError(f"Cannot add a matrix to a scalar: {other} + {self}")
        return NotImplemented

    def __sub__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            return self._elementwise(other, lambda a, b: a - b, "subtraction")
        if self._is_scalar(other):
            raise MathError(f"Cannot subtract a scalar from a matrix: {self} - {other}")
        return NotImplemented

    def __rsub__(self, other: Any) -> Matrix:
        if self._is_scalar(other):
            raise MathError(f"Cannot subtract a matrix from a scalar: {other} - {self}")
        return NotImplemented

    def __matmul__(self, other: Any) -> Matrix:
        """Matrix product; inner dimensions must agree."""
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.n_cols != other.n_rows:
            raise DimensionMismatchError("multiplication", self.shape, other.shape)

        result = []
        for i in range(self.n_rows):
            row = []
            for j in range(other.n_cols):
                total: MathValue = Rational(0)
                for k in range(self.n_cols):
                    total = total + self.rows[i][k] * other.rows[k][j]
                row.append(total)
            result.append(row)
        return Matrix(result)

    def __mul__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            return self @ other
        if self._is_scalar(other):
            return self._map(lambda cell: cell * other)
        return NotImplemented

    def __rmul__(self, other: Any) -> Matrix:
        if self._is_scalar(other):
            return self._map(lambda cell: other * cell)
        return NotImplemented

    def __truediv__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            raise NotSupportedError("Matrix division is not supported, multiply by the inverse instead")
        if self._is_scalar(other):
            if other == 0:
                raise DivideByZeroError()
            return self._map(lambda cell: cell / other)
        return NotImplemented

    def __rtruediv__(self, other: Any) -> Matrix:
        if self._is_scalar(other):
            raise NotSupportedError(f"Cannot divide a scalar by a matrix: {other} / {self}")
        return NotImplemented

    def __mod__(self, other: Any) -> Matrix:
        raise NotSupportedError("Modulo is not defined for matrices")

    def __rmod__(self, other: Any) -> Matrix:
        raise NotSupportedError("Modulo is not defined for matrices")

    def __pow__(self, exponent: Any) -> Matrix:
        """
        Integer power: identity at 0, inverse first for negative exponents.

        Raises:
            NotSquareError: If the matrix is not square
        """
        if not self.is_square:
            raise NotSquareError("power", self.shape)
        n = self.exponent_to_int(exponent)
        if n == 0:
            return Matrix.identity(self.n_rows)
        if n == 1:
            return Matrix(self.rows)

        base = self
        if n < 0:
            base = self.inverse()
            n = -n

        result: Matrix | None = None
        while n:
            if n & 1:
                result = base if result is None else result @ base
            n >>= 1
            if n:
                base = base @ base
        return result

    def __neg__(self) -> Matrix:
        return self._map(lambda cell: -cell)

    def __pos__(self) -> Matrix:
        return self

    # Linear algebra

    def transpose(self) -> Matrix:
        return Matrix(list(zip(*self.rows)))

    def determinant(self) -> MathValue:
        """
        Determinant by cofactor expansion along the first row.

        Raises:
            NotSquareError: If the matrix is not square
        """
        if not self.is_square:
            raise NotSquareError("determinant", self.shape)
        return self._determinant(self.rows).simplify()

    @classmethod
    def _determinant(cls, rows: tuple[tuple[MathValue, ...], ...]) -> MathValue:
        size = len(rows)
        if size == 1:
            return rows[0][0]
        if size == 2:
            return rows[0][0] * rows[1][1] - rows[0][1] * rows[1][0]

        total: MathValue = Rational(0)
        for j, cell in enumerate(rows[0]):
            if cell.is_zero:
                continue
            minor = tuple(row[:j] + row[j + 1:] for row in rows[1:])
            term = cell * cls._determinant(minor)
            total = total + term if j % 2 == 0 else total - term
        return total

    def inverse(self) -> Matrix:
        """
        Inverse by Gauss-Jordan elimination on [A|I].

        Each column pivots on the remaining row of largest magnitude.

        Raises:
            NotSquareError: If the matrix is not square
            SingularMatrixError: If the determinant is zero
        """
        if not self.is_square:
            raise NotSquareError("inverse", self.shape)
        if self.determinant().is_zero:
            raise SingularMatrixError()

        size = self.n_rows
        one, zero = Rational(1), Rational(0)
        augmented = [
            list(row) + [one if i == j else zero for j in range(size)]
            for i, row in enumerate(self.rows)
        ]

        for col in range(size):
            magnitudes = np.abs(np.array([complex(augmented[r][col]) for r in range(col, size)]))
            pivot = col + int(np.argmax(magnitudes))
            if augmented[pivot][col].is_zero:
                raise SingularMatrixError()
            augmented[col], augmented[pivot] = augmented[pivot], augmented[col]

            pivot_value = augmented[col][col]
            augmented[col] = [cell / pivot_value for cell in augmented[col]]

            for r in range(size):
                if r == col:
                    continue
                factor = augmented[r][col]
                if factor.is_zero:
                    continue
                augmented[r] = [a - factor * b for a, b in zip(augmented[r], augmented[col])]

        return Matrix([row[size:] for row in augmented])

    def norm(self) -> Rational:
        """Largest column sum of absolute values."""
        return max(
            sum((abs(self.rows[i][j]) for i in range(self.n_rows)), Rational(0))
            for j in range(self.n_cols)
        )
