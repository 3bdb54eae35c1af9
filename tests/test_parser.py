"""
Tests for the format code parser.
"""

import pytest

from excel2csv import DanglingEscapeError, UnbalancedBracketError, UnbalancedQuoteError
from excel2csv.parser import parse_format_code
from excel2csv.tokens import (
    DecimalPoint,
    DigitPlaceholder,
    Directive,
    GeneralPlaceholder,
    Literal,
    Percent,
    PlaceholderKind,
    Skip,
    TextPlaceholder,
    ThousandsMarker,
)

ZERO = DigitPlaceholder(PlaceholderKind.ZERO)
HASH = DigitPlaceholder(PlaceholderKind.HASH)
QUESTION = DigitPlaceholder(PlaceholderKind.QUESTION)


class TestSections:
    """Test splitting a format code into sections."""

    def test_single_section(self):
        assert parse_format_code("0.00") == ((ZERO, DecimalPoint(), ZERO, ZERO),)

    def test_three_sections(self):
        sections = parse_format_code('0.00;(0.00);"-"')
        assert len(sections) == 3
        assert sections[1] == (Literal("("), ZERO, DecimalPoint(), ZERO, ZERO, Literal(")"))
        assert sections[2] == (Literal("-"),)

    def test_semicolon_inside_quotes_does_not_split(self):
        sections = parse_format_code('0;"a;b"')
        assert len(sections) == 2
        assert sections[1] == (Literal("a"), Literal(";"), Literal("b"))

    def test_escaped_semicolon_does_not_split(self):
        assert parse_format_code("0\\;0") == ((ZERO, Literal(";"), ZERO),)

    def test_empty_middle_section(self):
        sections = parse_format_code("0;-0;;@")
        assert len(sections) == 4
        assert sections[2] == ()
        assert sections[3] == (TextPlaceholder(),)

    def test_extra_sections_are_dropped(self):
        sections = parse_format_code("0;0;0;@;0")
        assert len(sections) == 4

    def test_decimal_point_resets_per_section(self):
        sections = parse_format_code("0.0;0.0")
        assert all(DecimalPoint() in section for section in sections)


class TestTokens:
    """Test tokenization of a single section."""

    def test_thousands_marker(self):
        assert parse_format_code("#,##0") == ((HASH, ThousandsMarker(), HASH, HASH, ZERO),)

    def test_comma_outside_digit_run_is_literal(self):
        section = parse_format_code('"Total", 0')[0]
        assert section[5] == Literal(",")
        assert section[6] == Literal(" ")
        assert section[7] == ZERO

    def test_escaped_braces(self):
        assert parse_format_code("\\{###\\}") == ((Literal("{"), HASH, HASH, HASH, Literal("}")),)

    def test_quoted_text_becomes_literals(self):
        assert parse_format_code('0" kg"') == ((ZERO, Literal(" "), Literal("k"), Literal("g")),)

    def test_first_decimal_point_wins(self):
        # later dots are plain text
        assert parse_format_code("0.0.0") == ((ZERO, DecimalPoint(), ZERO, Literal("."), ZERO),)

    def test_skip_directives(self):
        assert parse_format_code("_)0*-") == ((Skip(")"), ZERO, Skip("-")),)

    def test_color_directive(self):
        assert parse_format_code("[Red]0") == ((Directive("Red"), ZERO),)

    def test_currency_directive_emits_symbol(self):
        assert parse_format_code("[$€-407]0") == ((Directive("$€-407"), Literal("€"), ZERO),)

    def test_percent_text_and_question(self):
        assert parse_format_code("?%@") == ((QUESTION, Percent(), TextPlaceholder()),)

    def test_parentheses_and_spaces_are_literal(self):
        assert parse_format_code("( 0 )") == (
            (Literal("("), Literal(" "), ZERO, Literal(" "), Literal(")")),
        )

    @pytest.mark.parametrize("code", ["", "General", "general"])
    def test_general(self, code):
        assert parse_format_code(code) == ((GeneralPlaceholder(),),)

    def test_general_inside_section(self):
        assert parse_format_code('General" units"')[0][0] == GeneralPlaceholder()


class TestErrors:
    """Test malformed format codes."""

    def test_unbalanced_quote(self):
        with pytest.raises(UnbalancedQuoteError):
            parse_format_code('"unterminated')

    def test_unbalanced_bracket(self):
        with pytest.raises(UnbalancedBracketError):
            parse_format_code("[Red0.00")

    def test_dangling_escape(self):
        with pytest.raises(DanglingEscapeError):
            parse_format_code("0.00\\")

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            parse_format_code('0;"oops')


class TestDeterminism:
    def test_reparse_yields_identical_sections(self):
        first = parse_format_code('#,##0.00;[Red](#,##0.00);"-"')
        parse_format_code.cache_clear()
        second = parse_format_code('#,##0.00;[Red](#,##0.00);"-"')
        assert first == second
