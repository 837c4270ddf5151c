"""Tests for the Rational value type."""

from decimal import Decimal
from math import gcd as math_gcd

import pytest

from computor.core.errors import (
    DivideByZeroError,
    InvalidArgumentError,
    InvalidFormatError,
    MathError,
    NotSupportedError,
)
from computor.math.fraction import Rational, gcd, lcm, reduce_fraction
from computor.math.value import MathValue, ValueKind


class TestRationalHelpers:
    """Test helper functions for fractions."""

    def test_gcd(self):
        """Test GCD of simple, coprime and negative numbers."""
        assert gcd(12, 8) == 4
        assert gcd(7, 11) == 1
        assert gcd(-12, 8) == 4
        assert gcd(0, 5) == 5

    def test_lcm(self):
        """Test LCM."""
        assert lcm(4, 6) == 12
        assert lcm(-4, 6) == 12
        assert lcm(0, 6) == 0

    def test_reduce_fraction(self):
        """Test reduction with a positive denominator."""
        assert reduce_fraction(2, 4) == (1, 2)
        assert reduce_fraction(3, -6) == (-1, 2)
        assert reduce_fraction(0, -7) == (0, 1)

    def test_reduce_fraction_zero_denominator(self):
        """Test that a zero denominator is rejected."""
        with pytest.raises(InvalidArgumentError, match="Denominator cannot be zero"):
            reduce_fraction(1, 0)


class TestRationalConstruction:
    """Test construction and normalization."""

    def test_is_math_value(self):
        """Test that Rational implements the MathValue contract."""
        value = Rational(1, 2)
        assert isinstance(value, MathValue)
        assert value.kind == ValueKind.RATIONAL

    def test_reduced_on_construction(self):
        """Test that fractions are stored in lowest terms."""
        value = Rational(6, 4)
        assert value.numerator == 3
        assert value.denominator == 2

    def test_sign_moves_to_numerator(self):
        """Test that the denominator is always positive."""
        value = Rational(3, -6)
        assert value.numerator == -1
        assert value.denominator == 2

    @pytest.mark.parametrize("num,den", [
        (0, 5), (10, -4), (-9, -27), (123456, 7890), (17, 1), (-1, 3),
    ])
    def test_invariants(self, num, den):
        """Test denominator > 0 and gcd(|numerator|, denominator) == 1."""
        value = Rational(num, den)
        assert value.denominator > 0
        assert math_gcd(abs(value.numerator), value.denominator) == 1

    def test_zero_denominator(self):
        """Test that a zero denominator raises InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError, match="Denominator cannot be zero"):
            Rational(1, 0)

    def test_from_decimal_string(self):
        """Test construction from decimal strings."""
        assert Rational("4.242") == Rational(2121, 500)
        assert Rational("-4.3") == Rational(-43, 10)
        assert Rational(".5") == Rational(1, 2)

    def test_from_float_and_decimal(self):
        """Test construction from floats and Decimals."""
        assert Rational(0.5) == Rational(1, 2)
        assert Rational(0.1) == Rational(1, 10)
        assert Rational(Decimal("1.25")) == Rational(5, 4)

    def test_from_fraction_strings(self):
        """Test construction from fraction strings."""
        assert Rational("3/4") == Rational(3, 4)
        assert Rational("3/1.5") == Rational(2)

    def test_rational_arguments(self):
        """Test that Rational arguments are divided out."""
        assert Rational(Rational(1, 2), Rational(3, 4)) == Rational(2, 3)

    def test_unsupported_argument(self):
        """Test that other types are rejected."""
        with pytest.raises(InvalidArgumentError):
            Rational([1, 2])

    def test_infinite_float(self):
        """Test that infinities are rejected."""
        with pytest.raises(InvalidArgumentError):
            Rational(float("inf"))


class TestRationalParsing:
    """Test parse and try_parse."""

    def test_parse_integer(self):
        """Test integer literals."""
        assert Rational.parse("42") == Rational(42)
        assert Rational.parse("-7") == Rational(-7)

    def test_parse_fraction(self):
        """Test fraction literals."""
        assert Rational.parse("-3/4") == Rational(-3, 4)

    def test_parse_invalid(self):
        """Test invalid literals."""
        for text in ("abc", "1.2.3", "", "1/2/3", "/2"):
            with pytest.raises(InvalidFormatError):
                Rational.parse(text)

    def test_try_parse(self):
        """Test that try_parse returns None on failure."""
        assert Rational.try_parse("2.5") == Rational(5, 2)
        assert Rational.try_parse("x") is None
        assert Rational.try_parse("1/0") is None


class TestRationalArithmetic:
    """Test arithmetic operators."""

    def test_add(self):
        """Test addition with rationals and ints."""
        assert Rational(1, 2) + Rational(1, 3) == Rational(5, 6)
        assert Rational(1, 2) + 1 == Rational(3, 2)
        assert 1 + Rational(1, 2) == Rational(3, 2)

    def test_subtract(self):
        """Test subtraction."""
        assert Rational(1, 2) - Rational(1, 3) == Rational(1, 6)
        assert 1 - Rational(1, 4) == Rational(3, 4)

    def test_multiply(self):
        """Test multiplication."""
        assert Rational(2, 3) * Rational(3, 4) == Rational(1, 2)
        assert 3 * Rational(1, 6) == Rational(1, 2)

    def test_divide(self):
        """Test division."""
        assert Rational(1, 2) / Rational(1, 4) == Rational(2)
        assert 1 / Rational(4) == Rational(1, 4)

    def test_divide_by_zero(self):
        """Test that dividing by zero raises DivideByZeroError."""
        with pytest.raises(DivideByZeroError, match="Cannot divide by zero"):
            Rational(2) / Rational(0)
        with pytest.raises(ZeroDivisionError):
            Rational(2) / 0

    def test_modulo(self):
        """Test truncated remainder."""
        assert Rational(5) % Rational(4) == Rational(1)
        assert Rational(-5) % 4 == Rational(-1)
        assert Rational(7, 2) % 1 == Rational(1, 2)
        assert 7 % Rational(3) == Rational(1)

    def test_modulo_by_zero(self):
        """Test modulo by zero."""
        with pytest.raises(DivideByZeroError, match="Cannot perform modulo by zero"):
            Rational(5) % 0

    def test_power(self):
        """Test integer powers, including negative ones."""
        assert Rational(2, 3) ** 2 == Rational(4, 9)
        assert Rational(2, 3) ** -2 == Rational(9, 4)
        assert Rational(-2, 3) ** -1 == Rational(-3, 2)
        assert Rational(5) ** 0 == Rational(1)
        assert Rational(2) ** Rational(3) == Rational(8)

    def test_zero_to_negative_power(self):
        """Test that 0 ** -n raises DivideByZeroError."""
        with pytest.raises(DivideByZeroError, match="Cannot raise zero to negative power"):
            Rational(0) ** -1

    def test_fractional_exponent(self):
        """Test that non-integer exponents are not supported."""
        with pytest.raises(NotSupportedError):
            Rational(2) ** Rational(1, 2)

    def test_unary(self):
        """Test negation and absolute value."""
        assert -Rational(1, 2) == Rational(-1, 2)
        assert abs(Rational(-1, 2)) == Rational(1, 2)
        assert +Rational(1, 2) == Rational(1, 2)

    def test_unknown_operand(self):
        """Test that unsupported operands fall through to TypeError."""
        with pytest.raises(TypeError):
            Rational(1) + "2"


class TestRationalComparison:
    """Test equality, hashing and ordering."""

    def test_equality_with_int(self):
        """Test equality against ints."""
        assert Rational(4, 2) == 2
        assert Rational(1, 2) != 1

    def test_hash_matches_int(self):
        """Test that integral rationals hash like ints."""
        assert hash(Rational(2)) == hash(2)
        assert len({Rational(1, 2), Rational(2, 4)}) == 1

    def test_ordering(self):
        """Test cross-multiplied ordering."""
        assert Rational(1, 3) < Rational(1, 2)
        assert Rational(-1, 2) < 0
        assert Rational(2, 4) <= Rational(1, 2)
        assert Rational(3, 2) > 1
        assert sorted([Rational(3), Rational(-1, 2), Rational(1, 3)]) == [
            Rational(-1, 2), Rational(1, 3), Rational(3)
        ]


class TestRationalRendering:
    """Test string renderings and conversions."""

    def test_to_string(self):
        """Test exact rendering."""
        assert str(Rational(3, 4)) == "3/4"
        assert str(Rational(-3, 4)) == "-3/4"
        assert str(Rational(10, 2)) == "5"

    def test_repr(self):
        """Test debug representation."""
        assert repr(Rational(3, 4)) == "Rational(3, 4)"

    def test_to_decimal_string(self):
        """Test rounded decimal rendering."""
        assert Rational(1, 3).to_decimal_string(4) == "0.3333"
        assert Rational(2, 3).to_decimal_string(4) == "0.6667"
        assert Rational(-1, 2).to_decimal_string() == "-0.5"
        assert Rational(1, 8).to_decimal_string(2) == "0.13"
        assert Rational(5).to_decimal_string(3) == "5"
        assert Rational(-1, 1000).to_decimal_string(2) == "0"

    def test_terminating(self):
        """Test finite decimal expansion detection."""
        assert Rational(1, 8).is_terminating
        assert Rational(3, 20).is_terminating
        assert not Rational(1, 3).is_terminating

    def test_fits_decimal(self):
        """Test exact representability within a number of places."""
        assert Rational(1, 8).fits_decimal(3)
        assert not Rational(1, 8).fits_decimal(2)
        assert not Rational(1, 3).fits_decimal(10)

    def test_conversions(self):
        """Test float, int and complex conversions."""
        assert float(Rational(1, 4)) == 0.25
        assert int(Rational(-7, 2)) == -3
        assert complex(Rational(1, 2)) == 0.5 + 0j

    def test_round(self):
        """Test rounding half away from zero."""
        assert round(Rational(1, 3), 4) == Rational("0.3333")
        assert round(Rational(-1, 3), 2) == Rational("-0.33")
        assert round(Rational(5, 2)) == 3
        assert round(Rational(-5, 2)) == -3
        assert isinstance(round(Rational(7, 2)), int)


class TestRationalSqrt:
    """Test the square root helper."""

    def test_perfect_square(self):
        """Test exact roots of perfect squares."""
        assert Rational(9, 4).sqrt() == Rational(3, 2)
        assert Rational(0).sqrt() == Rational(0)

    def test_approximation(self):
        """Test rounded roots of non-perfect squares."""
        assert Rational(2).sqrt(places=4) == Rational("1.4142")
        assert abs(float(Rational(2).sqrt()) - 2 ** 0.5) < 1e-9

    def test_negative(self):
        """Test that negative values raise MathError."""
        with pytest.raises(MathError):
            Rational(-4).sqrt()
