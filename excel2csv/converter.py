"""
Main Excel to CSV converter implementation.
"""

import csv
import io
import logging
import re
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import List, Literal, Optional, Sequence, Union

import pandas as pd
from pydantic import BaseModel, Field

from .errors import CsvWriteError, FormatError, MultipleSheetsNoOutputError
from .formatter import ExcelFormatter, FormatOptions
from .reader import GENERAL, CellData, Workbook, open_workbook, resolve_sheets

logger = logging.getLogger(__name__)

OutputFormat = Literal["csv", "tsv", "european"]

DELIMITERS = {"csv": ",", "tsv": "\t", "european": ";"}
EXTENSIONS = {"csv": "csv", "tsv": "tsv", "european": "csv"}

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


class ConverterConfig(BaseModel):
    """Configuration for Excel to CSV conversion."""

    output_format: OutputFormat = Field(
        default="csv",
        description="Delimiter style: csv (comma), tsv (tab) or european (semicolon)"
    )
    empty_value: str = Field(
        default="",
        description="Text written for empty cells"
    )
    decimal_separator: str = Field(
        default=".",
        description="Decimal separator used when applying number formats"
    )
    grouping_separator: str = Field(
        default=",",
        description="Thousands separator used when applying number formats"
    )


class ExcelToCsvConverter:
    """Convert Excel sheets to delimited text with cell number formats applied."""

    def __init__(self, config: Optional[ConverterConfig] = None):
        """
        Initialize the converter.

        Args:
            config: Optional configuration for the converter
        """
        self.config = config or ConverterConfig()
        self._options = FormatOptions(
            decimal_separator=self.config.decimal_separator,
            grouping_separator=self.config.grouping_separator,
        )

    @property
    def delimiter(self) -> str:
        return DELIMITERS[self.config.output_format]

    @property
    def extension(self) -> str:
        return EXTENSIONS[self.config.output_format]

    def convert_to_csv(self, input_file_path: Union[str, Path], sheet: Optional[str] = None) -> str:
        """
        Convert a single sheet of an Excel file to delimited text.

        Args:
            input_file_path: Path to the Excel file
            sheet: Sheet name or 0-based index; may be omitted for single-sheet workbooks

        Returns:
            The delimited text

        Raises:
            WorkbookNotFoundError: If the input file doesn't exist
            SheetNotFoundError: If the sheet doesn't exist in the workbook
            MultipleSheetsNoOutputError: If no sheet is given and the workbook has several
        """
        workbook = open_workbook(input_file_path)
        names = resolve_sheets(workbook.sheet_names, sheet)
        if len(names) != 1:
            raise MultipleSheetsNoOutputError()
        return self._sheet_to_text(workbook, names[0])

    def convert_to_path(
        self,
        input_file_path: Union[str, Path],
        output: Union[str, Path],
        sheet: Optional[str] = None
    ) -> List[Path]:
        """
        Convert sheets of an Excel file and write them to disk.

        A single sheet is written to ``output`` unless it is an existing
        directory; several sheets are written into the ``output`` directory as
        ``<sheet name>.<csv|tsv>``.

        Args:
            input_file_path: Path to the Excel file
            output: Output file or directory
            sheet: Sheet name or 0-based index; None converts every sheet

        Returns:
            The files written
        """
        workbook = open_workbook(input_file_path)
        names = resolve_sheets(workbook.sheet_names, sheet)
        output = Path(output)

        if len(names) == 1 and not output.is_dir():
            targets = [output]
        else:
            output.mkdir(parents=True, exist_ok=True)
            targets = [output / f"{_UNSAFE_FILENAME_CHARS.sub('_', name)}.{self.extension}" for name in names]

        for name, target in zip(names, targets):
            target.write_text(self._sheet_to_text(workbook, name), encoding="utf-8")
            logger.info("Wrote sheet %r to %s", name, target)
        return targets

    def format_cell(self, cell: CellData) -> str:
        """Render one cell as it should appear in the output."""
        value = cell.value
        if value is None or value == "":
            return self.config.empty_value

        if isinstance(value, bool):
            text = "TRUE" if value else "FALSE"
        elif isinstance(value, datetime):
            text = value.strftime("%Y-%m-%d" if value.time() == time() else "%Y-%m-%d %H:%M:%S")
        elif isinstance(value, date):
            text = value.strftime("%Y-%m-%d")
        elif isinstance(value, time):
            text = value.strftime("%H:%M:%S")
        elif isinstance(value, timedelta):
            text = _format_duration(value)
        elif cell.number_format and cell.number_format != GENERAL:
            try:
                text = ExcelFormatter.format_value(value, cell.number_format, self._options)
            except FormatError as e:
                logger.debug("Falling back to raw value for format %r: %s", cell.number_format, e)
                text = ExcelFormatter.general(value)
        else:
            text = ExcelFormatter.general(value)

        return text if text != "" else self.config.empty_value

    def sheet_rows(self, workbook: Workbook, sheet_name: str) -> List[List[str]]:
        """Formatted rows of a sheet, with trailing empty rows and columns trimmed."""
        raw_rows = list(workbook.rows(sheet_name))

        last_row = -1
        last_col = -1
        for row_idx, row in enumerate(raw_rows):
            for col_idx, cell in enumerate(row):
                if not _is_empty(cell):
                    last_row = row_idx
                    last_col = max(last_col, col_idx)

        width = last_col + 1
        rows = []
        for row in raw_rows[:last_row + 1]:
            formatted = [self.format_cell(cell) for cell in row[:width]]
            formatted.extend([self.config.empty_value] * (width - len(formatted)))
            rows.append(formatted)

        logger.debug("Sheet %r: %d rows x %d columns", sheet_name, len(rows), width)
        return rows

    def _sheet_to_text(self, workbook: Workbook, sheet_name: str) -> str:
        return self.to_delimited(self.sheet_rows(workbook, sheet_name))

    def to_delimited(self, rows: Sequence[Sequence[str]]) -> str:
        """Serialize rows of strings with the configured delimiter."""
        if not rows:
            return ""
        df = pd.DataFrame(list(rows), dtype=object)
        buffer = io.StringIO()
        try:
            df.to_csv(buffer, sep=self.delimiter, header=False, index=False, lineterminator="\n")
        except csv.Error as e:
            raise CsvWriteError(str(e)) from e
        return buffer.getvalue()


def _is_empty(cell: CellData) -> bool:
    return cell.value is None or cell.value == ""


def _format_duration(value: timedelta) -> str:
    sign = "-" if value < timedelta(0) else ""
    seconds = int(abs(value).total_seconds())
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{sign}{hours:02}:{minutes:02}:{seconds:02}"
