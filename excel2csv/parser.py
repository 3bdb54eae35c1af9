"""
Format code parser.

Turns an Excel number format code such as ``#,##0.00;(#,##0.00);"-"`` into
up to four sections, each a tuple of tokens, in a single left-to-right scan.
"""

import logging
from functools import lru_cache
from typing import List, Tuple

from .errors import DanglingEscapeError, UnbalancedBracketError, UnbalancedQuoteError
from .tokens import (
    DecimalPoint,
    DigitPlaceholder,
    Directive,
    GeneralPlaceholder,
    Literal,
    Percent,
    PlaceholderKind,
    Section,
    Skip,
    TextPlaceholder,
    Token,
    ThousandsMarker,
)

logger = logging.getLogger(__name__)

MAX_SECTIONS = 4

_PLACEHOLDERS = {
    "0": PlaceholderKind.ZERO,
    "#": PlaceholderKind.HASH,
    "?": PlaceholderKind.QUESTION,
}
_GENERAL = "general"


def _currency_literals(content: str) -> List[Token]:
    """Literal tokens for the symbol of a ``[$SYM-LCID]`` directive."""
    if not content.startswith("$"):
        return []
    symbol = content[1:].split("-", 1)[0]
    return [Literal(c) for c in symbol]


@lru_cache(maxsize=1024)
def parse_format_code(format_code: str) -> Tuple[Section, ...]:
    """
    Parse a format code into its sections.

    Args:
        format_code: Excel number format code

    Returns:
        Tuple of 1 to 4 sections

    Raises:
        UnbalancedQuoteError: If a quoted run is never closed
        UnbalancedBracketError: If a ``[`` block is never closed
        DanglingEscapeError: If the code ends with a lone backslash
    """
    if not format_code or format_code.strip().lower() == _GENERAL:
        return ((GeneralPlaceholder(),),)

    sections: List[Tuple[Token, ...]] = []
    tokens: List[Token] = []
    seen_decimal = False
    length = len(format_code)
    i = 0

    while i < length:
        c = format_code[i]

        if c == ";":
            sections.append(tuple(tokens))
            tokens = []
            seen_decimal = False
            i += 1

        elif c == "\\":
            if i + 1 >= length:
                raise DanglingEscapeError(format_code)
            tokens.append(Literal(format_code[i + 1]))
            i += 2

        elif c == '"':
            end = format_code.find('"', i + 1)
            if end == -1:
                raise UnbalancedQuoteError(format_code)
            tokens.extend(Literal(q) for q in format_code[i + 1:end])
            i = end + 1

        elif c == "[":
            end = format_code.find("]", i + 1)
            if end == -1:
                raise UnbalancedBracketError(format_code)
            content = format_code[i + 1:end]
            tokens.append(Directive(content))
            tokens.extend(_currency_literals(content))
            i = end + 1

        elif c in _PLACEHOLDERS:
            tokens.append(DigitPlaceholder(_PLACEHOLDERS[c]))
            i += 1

        elif c == ".":
            # First dot is the decimal point, later ones are plain text
            tokens.append(Literal(".") if seen_decimal else DecimalPoint())
            seen_decimal = True
            i += 1

        elif c == ",":
            previous = tokens[-1] if tokens else None
            following = format_code[i + 1] if i + 1 < length else ""
            if isinstance(previous, (DigitPlaceholder, ThousandsMarker)) or following in _PLACEHOLDERS:
                tokens.append(ThousandsMarker())
            else:
                tokens.append(Literal(","))
            i += 1

        elif c in "_*":
            tokens.append(Skip(format_code[i + 1] if i + 1 < length else ""))
            i += 2

        elif c == "%":
            tokens.append(Percent())
            i += 1

        elif c == "@":
            tokens.append(TextPlaceholder())
            i += 1

        elif format_code[i:i + len(_GENERAL)].lower() == _GENERAL:
            tokens.append(GeneralPlaceholder())
            i += len(_GENERAL)

        else:
            tokens.append(Literal(c))
            i += 1

    sections.append(tuple(tokens))

    if len(sections) > MAX_SECTIONS:
        logger.debug("Ignoring %d extra sections in %r", len(sections) - MAX_SECTIONS, format_code)
        sections = sections[:MAX_SECTIONS]

    return tuple(sections)
