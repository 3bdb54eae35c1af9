"""
excel2csv - Convert Excel sheets to CSV with cell number formats applied.

Cells are rendered the way a spreadsheet displays them, following each cell's
custom number format code:
- Digit placeholders, decimal places and thousands grouping (#,##0.00)
- Literal text from quotes, escapes and currency codes (\\{###\\}, [$€-407]0.00)
- Positive/negative/zero/text sections (0.00;(0.00);"-")

Example:
    from excel2csv import ExcelFormatter, ExcelToCsvConverter

    ExcelFormatter.format_value(1234.5, "#,##0.00")   # '1,234.50'

    converter = ExcelToCsvConverter()
    csv_content = converter.convert_to_csv('data.xlsx', sheet='Sheet1')
"""

from .converter import ConverterConfig, ExcelToCsvConverter
from .errors import (
    DanglingEscapeError,
    Excel2CsvError,
    FormatError,
    UnbalancedBracketError,
    UnbalancedQuoteError,
    UnformattableError,
)
from .formatter import ExcelFormatter, FormatOptions, format_value
from .parser import parse_format_code

__version__ = "0.1.0"
__all__ = [
    "ConverterConfig",
    "ExcelToCsvConverter",
    "ExcelFormatter",
    "FormatOptions",
    "format_value",
    "parse_format_code",
    "Excel2CsvError",
    "FormatError",
    "UnbalancedQuoteError",
    "UnbalancedBracketError",
    "DanglingEscapeError",
    "UnformattableError",
]
