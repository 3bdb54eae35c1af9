"""
Excel format string parser and formatter.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnformattableError
from .parser import parse_format_code
from .tokens import (
    NUMERIC_TOKENS,
    DigitPlaceholder,
    DecimalPoint,
    GeneralPlaceholder,
    Literal,
    Percent,
    PlaceholderKind,
    Section,
    TextPlaceholder,
    ThousandsMarker,
    Token,
    has_digit_placeholder,
)

Number = Union[int, float, Decimal]
Value = Union[Number, str]


class FormatOptions(BaseModel):
    """Separators used when rendering numbers."""

    model_config = ConfigDict(frozen=True)

    decimal_separator: str = Field(
        default=".",
        description="Character emitted for the decimal point"
    )
    grouping_separator: str = Field(
        default=",",
        description="Character inserted every three integer digits"
    )


DEFAULT_OPTIONS = FormatOptions()


class ValueClass(Enum):
    POSITIVE = "positive"
    ZERO = "zero"
    NEGATIVE = "negative"
    TEXT = "text"


# (section count, value class) -> section index
_SECTION_TABLE = {
    (1, ValueClass.POSITIVE): 0,
    (1, ValueClass.ZERO): 0,
    (1, ValueClass.NEGATIVE): 0,
    (1, ValueClass.TEXT): 0,
    (2, ValueClass.POSITIVE): 0,
    (2, ValueClass.ZERO): 0,
    (2, ValueClass.NEGATIVE): 1,
    (2, ValueClass.TEXT): 0,
    (3, ValueClass.POSITIVE): 0,
    (3, ValueClass.ZERO): 2,
    (3, ValueClass.NEGATIVE): 1,
    (3, ValueClass.TEXT): 0,
    (4, ValueClass.POSITIVE): 0,
    (4, ValueClass.ZERO): 2,
    (4, ValueClass.NEGATIVE): 1,
    (4, ValueClass.TEXT): 3,
}

_PADDING = {
    PlaceholderKind.ZERO: "0",
    PlaceholderKind.QUESTION: " ",
    PlaceholderKind.HASH: "",
}


def classify(value: Value) -> ValueClass:
    """Return the sign class used to pick a section."""
    if isinstance(value, str):
        return ValueClass.TEXT
    if value > 0:
        return ValueClass.POSITIVE
    if value < 0:
        return ValueClass.NEGATIVE
    return ValueClass.ZERO


def section_index(section_count: int, value: Value) -> int:
    return _SECTION_TABLE[(section_count, classify(value))]


def select_section(sections: Sequence[Section], value: Value) -> Section:
    """Pick the section of a parsed format code that governs ``value``."""
    return sections[section_index(len(sections), value)]


def _to_decimal(value: Number) -> Decimal:
    # str() keeps the shortest repr of a float, avoiding binary artefacts
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _render_integer(digits: str, slots: Sequence[Token], group: bool, separator: str) -> str:
    """Lay integer digits out over placeholders, right to left."""
    placeholders = [i for i, token in enumerate(slots) if isinstance(token, DigitPlaceholder)]
    leftmost = placeholders[0] if placeholders else None
    remaining = digits

    # (text, is_digit) pairs, collected right to left
    cells: List[Tuple[str, bool]] = []
    for index in reversed(range(len(slots))):
        token = slots[index]
        if isinstance(token, Literal):
            cells.append((token.char, False))
            continue
        if not isinstance(token, DigitPlaceholder):
            continue
        if index == leftmost and remaining:
            cells.extend((d, True) for d in reversed(remaining))
            remaining = ""
        elif remaining:
            cells.append((remaining[-1], True))
            remaining = remaining[:-1]
        else:
            pad = _PADDING[token.kind]
            cells.append((pad, pad == "0"))
    cells.extend((d, True) for d in reversed(remaining))

    pieces: List[str] = []
    seen = 0
    for text, is_digit in cells:
        if is_digit and group:
            if seen and seen % 3 == 0:
                pieces.append(separator)
            seen += 1
        pieces.append(text)
    return "".join(reversed(pieces))


def _render_fraction(digits: str, slots: Sequence[Token]) -> str:
    """Lay fractional digits out over placeholders, dropping insignificant zeros."""
    kinds = [token.kind for token in slots if isinstance(token, DigitPlaceholder)]
    chars = list(digits)
    for j in reversed(range(len(chars))):
        if chars[j] != "0" or kinds[j] is PlaceholderKind.ZERO:
            break
        chars[j] = _PADDING[kinds[j]]

    position = 0
    pieces: List[str] = []
    for token in slots:
        if isinstance(token, DigitPlaceholder):
            pieces.append(chars[position])
            position += 1
        elif isinstance(token, Literal):
            pieces.append(token.char)
    return "".join(pieces)


def render_number(abs_value: Number, tokens: Sequence[Token], options: FormatOptions = DEFAULT_OPTIONS) -> str:
    """
    Render a non-negative number over a run of digit tokens.

    Args:
        abs_value: Magnitude of the value (no sign is ever emitted)
        tokens: The digit run of a section; literals inside it stay in place
        options: Decimal and grouping separators

    Returns:
        The rendered digits
    """
    point = next((i for i, t in enumerate(tokens) if isinstance(t, DecimalPoint)), None)
    integer_slots = tokens if point is None else tokens[:point]
    fraction_slots = [] if point is None else tokens[point + 1:]
    places = sum(isinstance(t, DigitPlaceholder) for t in fraction_slots)
    group = any(isinstance(t, ThousandsMarker) for t in tokens)

    magnitude = _to_decimal(abs_value)
    with localcontext() as ctx:
        # precision must cover every integer digit plus the decimal places
        ctx.prec = max(ctx.prec, magnitude.adjusted() + places + 2)
        # ROUND_HALF_UP on a magnitude is round-half-away-from-zero
        rounded = magnitude.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    integer_digits, _, fraction_digits = f"{rounded:f}".partition(".")
    if integer_digits == "0":
        integer_digits = ""

    result = _render_integer(integer_digits, integer_slots, group, options.grouping_separator)
    if point is not None:
        result += options.decimal_separator + _render_fraction(fraction_digits.ljust(places, "0"), fraction_slots)
    return result


def _render_text_token(token: Token, substitute: str) -> str:
    if isinstance(token, Literal):
        return token.char
    if isinstance(token, Percent):
        return "%"
    if isinstance(token, (TextPlaceholder, GeneralPlaceholder)):
        return substitute
    return ""


def render_section(
    section: Section,
    value: Value,
    options: FormatOptions = DEFAULT_OPTIONS,
    signed: bool = False
) -> str:
    """
    Render a value through a single section.

    Args:
        section: Tokens of the selected section
        value: Number or text
        options: Decimal and grouping separators
        signed: Prefix a minus sign (negative value in a section shared with positives)

    Returns:
        The rendered string

    Raises:
        UnformattableError: If text reaches a section with digit placeholders
    """
    if isinstance(value, str):
        if has_digit_placeholder(section):
            raise UnformattableError(f"text value {value!r} cannot fill digit placeholders")
        return "".join(_render_text_token(token, value) for token in section)

    magnitude = abs(_to_decimal(value))
    for token in section:
        if isinstance(token, Percent):
            magnitude *= 100
    sign = "-" if signed else ""
    general = ExcelFormatter.general(float(magnitude))

    if not has_digit_placeholder(section):
        return sign + "".join(_render_text_token(token, general) for token in section)

    numeric = [i for i, token in enumerate(section) if isinstance(token, NUMERIC_TOKENS)]
    start, end = numeric[0], numeric[-1]
    prefix = "".join(_render_text_token(token, general) for token in section[:start])
    suffix = "".join(_render_text_token(token, general) for token in section[end + 1:])
    digits = render_number(magnitude, section[start:end + 1], options)
    return sign + prefix + digits + suffix


class ExcelFormatter:
    """Format values according to Excel number format strings."""

    @staticmethod
    def format_value(value: Any, format_string: str, options: Optional[FormatOptions] = None) -> str:
        """
        Format a value according to an Excel format string.

        Args:
            value: The value to format (number or text)
            format_string: Excel format string
            options: Separators to use; defaults to ``.`` and ``,``

        Returns:
            Formatted string representation

        Raises:
            FormatError: If the format string is malformed, or
                UnformattableError if the value does not fit the selected section
        """
        if value is None:
            return ""

        sections = parse_format_code(format_string or "")

        if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
            raise UnformattableError(f"unsupported value type: {type(value).__name__}")
        if not isinstance(value, str):
            try:
                finite = math.isfinite(float(value))
            except OverflowError:
                finite = False
            if not finite:
                raise UnformattableError(f"value out of floating point range: {value}")

        count = len(sections)
        index = section_index(count, value)
        signed = (
            not isinstance(value, str)
            and value < 0
            and index == _SECTION_TABLE[(count, ValueClass.POSITIVE)]
        )

        return render_section(sections[index], value, options or DEFAULT_OPTIONS, signed)

    @staticmethod
    def general(value: Any) -> str:
        """Render a value the way the General format displays it."""
        if value is None:
            return ""
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, Decimal):
            value = float(value)
        if isinstance(value, float):
            if value == 0:
                return "0"
            if value.is_integer() and abs(value) < 1e15:
                return f"{value:.0f}"
            return repr(value)
        return str(value)


format_value = ExcelFormatter.format_value
