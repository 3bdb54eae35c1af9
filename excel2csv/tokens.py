"""
Token types produced by the format code parser.

A parsed section is a plain tuple of tokens; order is significant.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class PlaceholderKind(Enum):
    ZERO = "0"
    HASH = "#"
    QUESTION = "?"


@dataclass(frozen=True)
class Literal:
    """A character emitted verbatim."""

    char: str


@dataclass(frozen=True)
class DigitPlaceholder:
    """A digit position (`0`, `#` or `?`)."""

    kind: PlaceholderKind


@dataclass(frozen=True)
class DecimalPoint:
    pass


@dataclass(frozen=True)
class ThousandsMarker:
    """A comma inside the digit run; switches on integer grouping."""


@dataclass(frozen=True)
class Skip:
    """Fill or padding directive (`_x`, `*x`); renders nothing."""

    char: str


@dataclass(frozen=True)
class Directive:
    """Bracketed content such as `[Red]` or `[$€-407]`."""

    content: str


@dataclass(frozen=True)
class Percent:
    """An unquoted `%`: scales the value by 100."""


@dataclass(frozen=True)
class TextPlaceholder:
    """`@`: substitutes the cell text."""


@dataclass(frozen=True)
class GeneralPlaceholder:
    """The `General` keyword."""


Token = Union[
    Literal,
    DigitPlaceholder,
    DecimalPoint,
    ThousandsMarker,
    Skip,
    Directive,
    Percent,
    TextPlaceholder,
    GeneralPlaceholder,
]

Section = Tuple[Token, ...]

# Tokens that make up the numeric run of a section
NUMERIC_TOKENS = (DigitPlaceholder, DecimalPoint, ThousandsMarker)


def has_digit_placeholder(section: Section) -> bool:
    return any(isinstance(token, DigitPlaceholder) for token in section)
