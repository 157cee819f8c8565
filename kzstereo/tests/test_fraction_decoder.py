"""Tests for cost token decoding."""

import pytest

from kzstereo.errors import InvalidFraction
from kzstereo.parameters.fraction_decoder import Fraction, decode_fraction, format_fraction


class TestDecodeFraction:
    """Test decode_fraction."""

    def test_auto(self) -> None:
        """AUTO should decode to the (-1, 1) sentinel."""
        fraction = decode_fraction("AUTO")

        assert fraction.numerator == -1
        assert fraction.denominator == 1
        assert fraction.is_auto is True

    def test_fraction(self) -> None:
        """Should decode N/D."""
        fraction = decode_fraction("5/2")

        assert (fraction.numerator, fraction.denominator) == (5, 2)
        assert fraction.is_auto is False

    def test_integer(self) -> None:
        """Should decode N as N/1."""
        fraction = decode_fraction("7")

        assert (fraction.numerator, fraction.denominator) == (7, 1)

    def test_zero_is_valid(self) -> None:
        """Zero numerator is allowed."""
        assert decode_fraction("0").numerator == 0

    def test_whitespace_and_sign(self) -> None:
        """Should accept spaces around numbers and an explicit plus sign."""
        fraction = decode_fraction(" +3 / 4 ")

        assert (fraction.numerator, fraction.denominator) == (3, 4)

    @pytest.mark.parametrize("token", [
        "abc",
        "",
        "-1",
        "-3/2",
        "3/0",
        "3/-2",
        "1/2/3",
        "3.5",
        "auto",
        "5/",
    ])
    def test_invalid_tokens(self, token: str) -> None:
        """Should reject malformed or out-of-range tokens."""
        with pytest.raises(InvalidFraction) as excinfo:
            decode_fraction(token)

        assert excinfo.value.token == token
        assert f"Unable to decode {token} as fraction" in str(excinfo.value)

    def test_invalid_fraction_is_value_error(self) -> None:
        """InvalidFraction should be catchable as ValueError."""
        with pytest.raises(ValueError):
            decode_fraction("x/y")


class TestFormatFraction:
    """Test format_fraction."""

    def test_integer_form(self) -> None:
        """Denominator 1 should render without a slash."""
        assert format_fraction(30, 1) == "30"

    def test_fraction_form(self) -> None:
        """Other denominators should render as N/D."""
        assert format_fraction(25, 2) == "25/2"

    @pytest.mark.parametrize("numerator,denominator", [(0, 1), (5, 2), (12, 8), (1, 1024)])
    def test_decode_of_formatted(self, numerator: int, denominator: int) -> None:
        """Decoding a formatted fraction should give back the same pair."""
        fraction = decode_fraction(format_fraction(numerator, denominator))

        assert fraction == Fraction(numerator=numerator, denominator=denominator)
