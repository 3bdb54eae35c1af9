"""
Workbook loading for the converter.

``.xlsx``/``.xlsm`` files are read with openpyxl so that every cell keeps its
number format; legacy ``.xls`` files go through pandas' xlrd engine and only
expose raw values.
"""

import logging
import warnings
from pathlib import Path
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Union

import pandas as pd
from openpyxl import load_workbook

from .errors import (
    InvalidWorkbookError,
    SheetIndexOutOfRangeError,
    SheetNotFoundError,
    UnsupportedFormatError,
    WorkbookNotFoundError,
)

logger = logging.getLogger(__name__)

GENERAL = "General"


class CellData(NamedTuple):
    value: Any
    number_format: str = GENERAL


class OpenpyxlWorkbook:
    """Workbook backed by openpyxl, cached values only (no recalculation)."""

    def __init__(self, path: Path):
        self.path = path
        with warnings.catch_warnings():
            # openpyxl warns about extensions it drops (data validation, slicers...)
            warnings.simplefilter("ignore")
            self._wb = load_workbook(path, data_only=True, keep_links=False)

    @property
    def sheet_names(self) -> List[str]:
        return list(self._wb.sheetnames)

    def rows(self, sheet_name: str) -> Iterator[List[CellData]]:
        ws = self._wb[sheet_name]
        for row in ws.iter_rows(min_row=1, min_col=1, max_row=ws.max_row, max_col=ws.max_column):
            yield [CellData(cell.value, cell.number_format or GENERAL) for cell in row]


class XlsWorkbook:
    """Legacy ``.xls`` workbook read through pandas and xlrd."""

    def __init__(self, path: Path):
        self.path = path
        frames: Dict[str, pd.DataFrame] = pd.read_excel(path, sheet_name=None, header=None, engine="xlrd")
        self._frames = frames

    @property
    def sheet_names(self) -> List[str]:
        return list(self._frames)

    def rows(self, sheet_name: str) -> Iterator[List[CellData]]:
        df = self._frames[sheet_name]
        for row in df.itertuples(index=False, name=None):
            yield [CellData(_to_python(value)) for value in row]


Workbook = Union[OpenpyxlWorkbook, XlsWorkbook]


def _to_python(value: Any) -> Any:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    # numpy scalars -> builtin int/float
    if hasattr(value, "item") and not isinstance(value, pd.Timestamp):
        return value.item()
    return value


def open_workbook(path: Union[str, Path]) -> Workbook:
    """
    Open an Excel workbook.

    Args:
        path: Path to a .xlsx, .xlsm or .xls file

    Returns:
        A workbook exposing ``sheet_names`` and ``rows(sheet_name)``

    Raises:
        WorkbookNotFoundError: If the file doesn't exist
        UnsupportedFormatError: If the extension isn't a known Excel one
        InvalidWorkbookError: If the file can't be parsed
    """
    path = Path(path)
    if not path.exists():
        raise WorkbookNotFoundError(path)

    extension = path.suffix.lower().lstrip(".")
    if extension in ("xlsx", "xlsm"):
        loader = OpenpyxlWorkbook
    elif extension == "xls":
        loader = XlsWorkbook
    else:
        raise UnsupportedFormatError(extension)

    logger.debug("Opening %s with %s", path, loader.__name__)
    try:
        return loader(path)
    except Exception as e:
        raise InvalidWorkbookError(path, str(e) or type(e).__name__) from e


def resolve_sheets(sheet_names: List[str], selector: Optional[str] = None) -> List[str]:
    """
    Resolve a sheet selector against a workbook's sheets.

    Args:
        sheet_names: Sheets in workbook order
        selector: Sheet name, or 0-based index; None selects every sheet

    Returns:
        The selected sheet names

    Raises:
        SheetNotFoundError: If no sheet matches the selector
        SheetIndexOutOfRangeError: If a numeric selector is past the last sheet
    """
    if selector is None:
        return list(sheet_names)
    if selector in sheet_names:
        return [selector]
    if selector.isdigit():
        index = int(selector)
        if index >= len(sheet_names):
            raise SheetIndexOutOfRangeError(index, len(sheet_names))
        return [sheet_names[index]]
    raise SheetNotFoundError(selector, sheet_names)
