"""Tests for the Polynomial value type and its solver."""

import pytest
import sympy

from computor.core.errors import (
    DivideByZeroError,
    InvalidArgumentError,
    InvalidFormatError,
    NotSupportedError,
)
from computor.math.fraction import Rational
from computor.math.matrix import Matrix
from computor.math.numeric import Complex
from computor.math.polynomial import ALL_REAL_NUMBERS, AllRealNumbers, Polynomial


def poly(text):
    return Polynomial.parse(text)


class TestPolynomialParsing:
    """Test parsing and rendering."""

    def test_parse_terms(self):
        """Test that terms are collected by power."""
        p = poly("2 * x^5 + 4 * x^2 - 5 * x + 4")
        assert p.terms == {5: Rational(2), 2: Rational(4), 1: Rational(-5), 0: Rational(4)}
        assert p.degree == 5

    @pytest.mark.parametrize("text,expected", [
        ("2 * x^5 + 4 * x^2 - 5 * x + 4", "2 * x^5 + 4 * x^2 - 5 * x + 4"),
        ("-2z - 5", "-2 * z - 5"),
        ("2y - 11/3", "2 * y - 11/3"),
        ("3b", "3 * b"),
        ("1/2 * X^2 + 2X", "1/2 * X^2 + 2 * X"),
        ("X^2 - 2X + 1", "X^2 - 2 * X + 1"),
        ("2*3 + x", "x + 6"),
        ("x^2 + x^2", "2 * x^2"),
        ("x - x", "0"),
        ("4x/2", "2 * x"),
        ("(1+i)x", "(1+i) * x"),
        ("2ix", "2i * x"),
        ("-x", "-x"),
        ("x*3", "3 * x"),
    ])
    def test_render(self, text, expected):
        """Test the canonical display form."""
        assert poly(text).to_string() == expected

    def test_variable_inference(self):
        """Test that the variable is the single non-'i' letter."""
        assert poly("3z^2 + i").variable == "z"
        assert poly("5").variable == "x"
        assert Polynomial.parse("7", variable="t").variable == "t"

    @pytest.mark.parametrize("text", ["", "x + y", "x^", "x*x", "2/x", "x-"])
    def test_parse_invalid(self, text):
        """Test malformed polynomials."""
        with pytest.raises(InvalidFormatError):
            poly(text)


class TestPolynomialConstruction:
    """Test constructors and normalization."""

    def test_constructors(self):
        """Test constant, linear, quadratic and monomial."""
        assert str(Polynomial.quadratic(1, -3, 2)) == "x^2 - 3 * x + 2"
        assert str(Polynomial.linear(2, 0, "t")) == "2 * t"
        assert str(Polynomial.constant(Rational(1, 2))) == "1/2"
        assert str(Polynomial.monomial("z")) == "z"

    def test_zero_coefficients_dropped(self):
        """Test that zero terms are not stored."""
        p = Polynomial({2: 0, 1: 1})
        assert p.degree == 1
        assert 2 not in p.terms
        assert Polynomial().is_zero
        assert Polynomial().degree == 0

    def test_invalid_powers(self):
        """Test that powers must be non-negative integers."""
        with pytest.raises(InvalidArgumentError):
            Polynomial({-1: 1})
        with pytest.raises(InvalidArgumentError):
            Polynomial({Rational(1, 2): 1})

    def test_polynomial_coefficient_rejected(self):
        """Test that coefficients cannot themselves be polynomials."""
        with pytest.raises(InvalidArgumentError):
            Polynomial({1: Polynomial.monomial()})

    def test_matrix_coefficient(self):
        """Test a matrix-valued coefficient."""
        p = Polynomial.monomial("z") * Matrix.parse("[[8,4]]")
        assert str(p) == "[[8,4]] * z"

    def test_simplify(self):
        """Test that constants collapse to their coefficient."""
        assert isinstance(Polynomial.constant(3).simplify(), Rational)
        assert isinstance(poly("x + 1").simplify(), Polynomial)


class TestPolynomialArithmetic:
    """Test polynomial operators."""

    def test_add_subtract(self):
        """Test addition and subtraction."""
        assert poly("x + 1") + poly("x - 1") == poly("2x")
        assert poly("x + 1") - poly("x + 1") == Polynomial()
        assert 1 + poly("x") == poly("x + 1")
        assert 1 - poly("x") == poly("-x + 1")

    def test_multiply(self):
        """Test multiplication."""
        assert poly("x + 1") * poly("x - 1") == poly("x^2 - 1")
        assert str(2 * poly("x + 1")) == "2 * x + 2"

    def test_power(self):
        """Test integer powers."""
        assert poly("x + 1") ** 2 == poly("x^2 + 2x + 1")
        assert poly("x") ** 0 == Rational(1)
        assert Polynomial.constant(2) ** -1 == Rational(1, 2)

    def test_negative_power(self):
        """Test that negative powers of non-constants are rejected."""
        with pytest.raises(NotSupportedError):
            poly("x + 1") ** -1

    def test_divide_by_scalar(self):
        """Test division by constants."""
        assert str(poly("x + 1") / 2) == "1/2 * x + 1/2"
        assert poly("2x + 4") / Polynomial.constant(2) == poly("x + 2")

    def test_divide_errors(self):
        """Test division by polynomials and by zero."""
        with pytest.raises(NotSupportedError):
            poly("x + 1") / poly("x")
        with pytest.raises(NotSupportedError):
            Rational(1) / poly("x")
        with pytest.raises(DivideByZeroError):
            poly("x + 1") / 0

    def test_modulo(self):
        """Test modulo by a constant."""
        assert poly("5x + 7") % 3 == poly("2x + 1")

    def test_different_variables(self):
        """Test that distinct variables cannot be mixed."""
        with pytest.raises(InvalidArgumentError):
            poly("x + 1") + poly("y + 1")
        assert (Polynomial.constant(3, "y") + poly("x")).variable == "x"

    def test_complex_coefficients(self):
        """Test arithmetic with complex coefficients."""
        p = poly("x") * Complex(0, 1) + 1
        assert p.coefficient(1) == Complex(0, 1)
        assert str(p) == "i * x + 1"


class TestPolynomialCalculus:
    """Test evaluation, derivative and integral."""

    def test_evaluate(self):
        """Test substitution of scalars."""
        p = poly("2x^2 + 3x + 1")
        assert p.evaluate(2) == Rational(15)
        assert p.evaluate(Complex(0, 1)) == Complex(-1, 3)
        assert Polynomial().evaluate(5) == Rational(0)

    def test_evaluate_polynomial(self):
        """Test composition by substituting a polynomial."""
        assert poly("x^2").evaluate(poly("x + 1")) == poly("x^2 + 2x + 1")

    def test_evaluate_matches_sympy(self):
        """Test evaluation against sympy for several points."""
        x = sympy.Symbol("x")
        expr = 3 * x ** 4 - sympy.Rational(1, 2) * x ** 3 + 7 * x - 2
        p = poly("3x^4 - 1/2x^3 + 7x - 2")
        for point in (-3, -1, 0, 2, sympy.Rational(5, 7)):
            expected = sympy.Rational(expr.subs(x, point))
            assert p.evaluate(Rational(str(point))) == Rational(int(expected.p), int(expected.q))

    def test_derivative(self):
        """Test the derivative."""
        assert str(poly("x^3 + 2x^2 - x + 5").derivative()) == "3 * x^2 + 4 * x - 1"
        assert poly("7").derivative().is_zero

    def test_integral(self):
        """Test the antiderivative."""
        assert str(poly("3x^2 + 2").integral()) == "x^3 + 2 * x"


class TestPolynomialSolve:
    """Test the equation solver."""

    def test_constant(self):
        """Test degree 0 polynomials."""
        assert Polynomial.constant(3).solve() == []
        assert Polynomial().solve() == [ALL_REAL_NUMBERS]
        assert str(ALL_REAL_NUMBERS) == "All real numbers"
        assert AllRealNumbers() is ALL_REAL_NUMBERS

    def test_linear(self):
        """Test a linear equation."""
        assert poly("2x - 4").solve() == [Rational(2)]
        assert poly("3x + 1").solve() == [Rational(-1, 3)]

    def test_two_real_roots(self):
        """Test a positive discriminant."""
        assert poly("x^2 - 3x + 2").solve() == [Rational(1), Rational(2)]

    def test_double_root(self):
        """Test a zero discriminant."""
        assert poly("x^2 - 2x + 1").solve() == [Rational(1)]

    def test_complex_roots(self):
        """Test a negative discriminant."""
        assert poly("x^2 + 1").solve() == [Complex(0, 1), Complex(0, -1)]
        assert poly("x^2 + 2x + 5").solve() == [Complex(-1, 2), Complex(-1, -2)]

    def test_irrational_roots(self):
        """Test approximate roots against sympy."""
        p = poly("x^2 - 2")
        roots = p.solve()
        expected = sorted(float(r) for r in sympy.solve(sympy.Symbol("x") ** 2 - 2))
        assert [float(r) for r in roots] == pytest.approx(expected, abs=1e-9)
        for root in roots:
            assert abs(float(p.evaluate(root))) < 1e-8

    def test_irrational_roots_rounded(self):
        """Test that approximate roots carry the square root precision."""
        assert poly("x^2 - 2").solve() == [Rational("-1.4142135624"), Rational("1.4142135624")]
        assert poly("3x^2 - 1").solve() == [Rational("-0.5773502692"), Rational("0.5773502692")]
        real, imag = Rational(-1, 14), Rational("0.3711537445")
        assert poly("7x^2 + x + 1").solve() == [Complex(real, imag), Complex(real, -imag)]

    @pytest.mark.parametrize("a,b,c", [(1, -5, 6), (2, 3, -2), (-1, 0, 4), (4, 4, 1)])
    def test_roots_satisfy_equation(self, a, b, c):
        """Test that rational roots are exact zeros."""
        p = Polynomial.quadratic(a, b, c)
        for root in p.solve():
            assert p.evaluate(root) == Rational(0)

    def test_degree_three(self):
        """Test that degree > 2 is not solved."""
        with pytest.raises(NotSupportedError, match="Polynomial degree 3 is strictly greater than 2"):
            poly("x^3 + 1").solve()

    def test_complex_coefficients(self):
        """Test that complex quadratic coefficients are rejected."""
        with pytest.raises(NotSupportedError):
            Polynomial.quadratic(1, Complex(0, 1), 1).solve()

    def test_matrix_coefficients(self):
        """Test that matrix coefficients are rejected before dividing."""
        p = Polynomial.monomial("x") * Matrix.parse("[[1,2]]")
        with pytest.raises(NotSupportedError, match="Cannot solve an equation with non-scalar coefficients"):
            p.solve()

    def test_linear_complex(self):
        """Test that a linear equation may have complex coefficients."""
        p = Polynomial.linear(Complex(0, 2), 4)
        assert p.solve() == [Complex(0, 2)]


class TestPolynomialEquality:
    """Test equality and hashing."""

    def test_constant_equals_scalar(self):
        """Test that constant polynomials compare equal to their value."""
        assert Polynomial.constant(3) == Rational(3)
        assert Rational(3) == Polynomial.constant(3)
        assert Polynomial.constant(3, "y") == Polynomial.constant(3, "x")

    def test_term_order_irrelevant(self):
        """Test equality regardless of input order."""
        assert poly("x + 1") == poly("1 + x")
        assert hash(poly("x + 1")) == hash(poly("1 + x"))

    def test_variable_matters(self):
        """Test that variables distinguish non-constant polynomials."""
        assert poly("x + 1") != poly("y + 1")
