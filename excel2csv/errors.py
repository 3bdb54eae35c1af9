"""
Exceptions raised by the format engine and the converter.
"""

from pathlib import Path
from typing import Iterable, Union


class Excel2CsvError(Exception):
    """Base class for every error raised by excel2csv."""

    exit_code = 1


# Format code errors

class FormatError(Excel2CsvError, ValueError):
    """A format code could not be parsed or applied."""


class UnbalancedQuoteError(FormatError):
    def __init__(self, format_code: str):
        super().__init__(f"unterminated quoted text in format code: {format_code!r}")
        self.format_code = format_code


class UnbalancedBracketError(FormatError):
    def __init__(self, format_code: str):
        super().__init__(f"unterminated [ ] block in format code: {format_code!r}")
        self.format_code = format_code


class DanglingEscapeError(FormatError):
    def __init__(self, format_code: str):
        super().__init__(f"format code ends with a lone backslash: {format_code!r}")
        self.format_code = format_code


class UnformattableError(FormatError):
    """The value cannot be rendered by the selected section.

    Callers are expected to fall back to the unformatted value.
    """


# Conversion errors

class WorkbookNotFoundError(Excel2CsvError, FileNotFoundError):
    exit_code = 1

    def __init__(self, path: Union[str, Path]):
        super().__init__(f"file not found: {path}")
        self.path = Path(path)


class InvalidWorkbookError(Excel2CsvError, ValueError):
    exit_code = 2

    def __init__(self, path: Union[str, Path], details: str):
        super().__init__(f"invalid Excel file: {path} ({details})")
        self.path = Path(path)
        self.details = details


class SheetNotFoundError(Excel2CsvError, ValueError):
    exit_code = 3

    def __init__(self, name: str, available: Iterable[str]):
        self.name = name
        self.available = list(available)
        super().__init__(
            f'sheet "{name}" not found (available: {", ".join(self.available)})'
        )


class SheetIndexOutOfRangeError(Excel2CsvError, ValueError):
    exit_code = 3

    def __init__(self, index: int, count: int):
        super().__init__(f"sheet index {index} out of range (have {count} sheets)")
        self.index = index
        self.count = count


class MultipleSheetsNoOutputError(Excel2CsvError, ValueError):
    exit_code = 3

    def __init__(self):
        super().__init__("multiple sheets require -o <directory>")


class UnsupportedFormatError(Excel2CsvError, ValueError):
    exit_code = 3

    def __init__(self, extension: str):
        super().__init__(f"unsupported file format: {extension or '(none)'}")
        self.extension = extension


class CsvWriteError(Excel2CsvError):
    exit_code = 4

    def __init__(self, details: str):
        super().__init__(f"failed to write CSV: {details}")
        self.details = details
