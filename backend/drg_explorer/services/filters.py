"""Request-boundary parsing of filter parameters.

DRG search text is classified once, here, into a tagged filter value that the
repository interprets without re-inspecting the raw string.
"""

import math
from dataclasses import dataclass

from drg_explorer.errors import InvalidFilterError

# Signed 64-bit range of an SQL INTEGER column
SQL_INT_MIN = -(2**63)
SQL_INT_MAX = 2**63 - 1


@dataclass(frozen=True)
class ExactCode:
    """Match DRGs whose code equals ``code``."""

    code: int


@dataclass(frozen=True)
class TextContains:
    """Match DRGs whose description contains ``text`` (case-insensitive)."""

    text: str


DrgFilter = ExactCode | TextContains


def clean_param(value: str | None) -> str:
    """Trim a raw query parameter; None becomes the empty string."""
    return (value or "").strip()


def parse_drg_search(search: str | None) -> DrgFilter | None:
    """Classify DRG search text.

    An all-digit query is treated as a DRG code lookup, anything else as a
    description substring. Blank input means "no search".

    Examples:
        >>> parse_drg_search("470")
        ExactCode(code=470)
        >>> parse_drg_search(" hip ")
        TextContains(text='hip')
    """
    text = clean_param(search)
    if not text:
        return None
    # str.isdigit() also accepts superscripts and other Unicode digits
    if text.isascii() and text.isdigit():
        return ExactCode(int(text))
    return TextContains(text)


def is_storable_code(code: int | float) -> bool:
    """True if ``code`` could equal a DRG code held in the store."""
    return isinstance(code, int) and SQL_INT_MIN <= code <= SQL_INT_MAX


def parse_drg_code(raw: str | None) -> int | float | None:
    """Parse the optional ``drg_cd`` record filter.

    Returns:
        The DRG code as an int when it is a whole number, the float itself
        when it has a fractional part (it matches no row), or None when the
        parameter is absent or blank.

    Raises:
        InvalidFilterError: The value is not a finite number.
    """
    text = clean_param(raw)
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        raise InvalidFilterError("drg_cd must be a number") from None
    if not math.isfinite(number):
        raise InvalidFilterError("drg_cd must be a number")
    if not number.is_integer():
        return number
    return int(number)
