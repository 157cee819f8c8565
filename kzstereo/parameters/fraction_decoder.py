"""Decode user cost tokens into integer fractions."""

import re

from kzstereo.errors import InvalidFraction
from kzstereo.utilities.arbitrary_types_model import ABaseModel

AUTO_TOKEN = "AUTO"

_FRACTION_PATTERN = re.compile(r"\s*([+-]?\d+)\s*(?:/\s*([+-]?\d+)\s*)?")


class Fraction(ABaseModel):
    """A decoded token. Numerator -1 means "compute automatically"."""
    numerator: int
    denominator: int = 1

    @property
    def is_auto(self) -> bool:
        return self.numerator == -1 and self.denominator == 1


def decode_fraction(token: str) -> Fraction:
    """Decode a token of the form ``N``, ``N/D`` or ``AUTO``.

    Args:
        token: Text given on the command line

    Returns:
        Decoded fraction, ``(-1, 1)`` for AUTO

    Raises:
        InvalidFraction: If the token does not parse, N < 0 or D < 1
    """
    if token == AUTO_TOKEN:
        return Fraction(numerator=-1, denominator=1)

    match = _FRACTION_PATTERN.fullmatch(token)
    if match is None:
        raise InvalidFraction(token)

    numerator = int(match.group(1))
    denominator = int(match.group(2)) if match.group(2) is not None else 1
    if numerator < 0 or denominator < 1:
        raise InvalidFraction(token)
    return Fraction(numerator=numerator, denominator=denominator)


def format_fraction(numerator: int, denominator: int) -> str:
    """Render ``N`` when the denominator is 1, ``N/D`` otherwise."""
    if denominator == 1:
        return str(numerator)
    return f"{numerator}/{denominator}"
