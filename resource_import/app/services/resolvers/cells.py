from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple, Union

from openpyxl import load_workbook
from openpyxl.cell.read_only import EmptyCell
from openpyxl.utils.datetime import WINDOWS_EPOCH, to_excel

from resource_import.app.core.errors import (
    CellNotFoundError,
    InvalidAddressError,
    InvalidFlagError,
    SheetNotFoundError,
    TransportError,
    UnsupportedCellTypeError,
)
from resource_import.app.models.config import ResourceType
from resource_import.app.models.values import Value
from resource_import.app.services.resolvers.base import PathResolver

ADDRESS_SEPARATOR = ","

TRUTHY_VALUES = ("X", "x", "Y", "y", "yes")
FALSY_VALUES = ("N", "n", "no")

FLAG_DEFAULT = 0
FLAG_PRESENCE = 1

# string cells whose empty text reads back as None
STRING_DATA_TYPES = ("s", "inlineStr", "str")

# placeholder for a cell the sheet does not define
MISSING_CELL = object()

# immutable snapshot of a sheet: rows of cell values, None for an undefined row
SheetRows = Tuple[Optional[Tuple[Any, ...]], ...]


@dataclass(frozen=True)
class CellAddress:
    # 0-based
    row: int
    column: int
    flag: Optional[int] = None


def _parse_component(raw: str, component: str, expression: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise InvalidAddressError(
            f"Invalid {component} number in {expression!r}", component=component, path=expression
        ) from None


def parse_cell_address(expression: str) -> CellAddress:
    """
    Parses `row,column[,flag]` (1-based row/column) into a 0-based CellAddress.
    """
    parts = expression.split(ADDRESS_SEPARATOR)
    if len(parts) not in (2, 3):
        raise InvalidAddressError(
            f"Wrong cell address {expression!r}: expected row and column numbers and an optional flag, "
            f"separated by '{ADDRESS_SEPARATOR}'",
            path=expression,
        )
    row = _parse_component(parts[0], "row", expression) - 1
    column = _parse_component(parts[1], "column", expression) - 1
    flag = _parse_component(parts[2], "flag", expression) if len(parts) == 3 else None
    return CellAddress(row=row, column=column, flag=flag)


def to_serial(raw: Any, epoch: datetime = WINDOWS_EPOCH) -> Value:
    """Dates are numeric cells with a date format; gives back the stored serial number."""
    return to_excel(raw, epoch)


def coerce_cell_value(raw: Any, address: Optional[CellAddress] = None) -> Value:
    where = f" at ({address.row},{address.column})" if address else ""
    if raw is None:
        raise UnsupportedCellTypeError(f"Cell{where} is blank")
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw
    if isinstance(raw, (datetime, date, time, timedelta)):
        return to_serial(raw)
    if isinstance(raw, str):
        if raw in TRUTHY_VALUES:
            return True
        if raw in FALSY_VALUES:
            return False
        return raw
    raise UnsupportedCellTypeError(f"Cell{where} holds an unsupported value of type {type(raw).__name__}")


def apply_flag(value: Value, flag: Optional[int], expression: str = "") -> Value:
    if flag is None or flag == FLAG_DEFAULT:
        return value
    if flag == FLAG_PRESENCE:
        if isinstance(value, str):
            return value != ""
        return True
    raise InvalidFlagError(
        f"Invalid flag {flag}: only {FLAG_DEFAULT} (cell value) and {FLAG_PRESENCE} (cell presence) are valid",
        path=expression or None,
    )


def _read_cell(cell: Any, epoch: datetime) -> Any:
    if isinstance(cell, EmptyCell):
        return MISSING_CELL
    value = cell.value
    if value is None and cell.data_type in STRING_DATA_TYPES:
        return ""
    if isinstance(value, (datetime, date, time, timedelta)):
        return to_serial(value, epoch)
    return value


def _read_row(cells: Sequence[Any], epoch: datetime) -> Optional[Tuple[Any, ...]]:
    row = [_read_cell(cell, epoch) for cell in cells]
    # read-only sheets pad rows up to the widest one
    while row and row[-1] is MISSING_CELL:
        row.pop()
    return tuple(row) if row else None


def load_sheet(path: Union[str, Path], sheet: str) -> SheetRows:
    """
    Reads every row of `sheet`. Cells the sheet does not define come back as
    MISSING_CELL and rows without any defined cell as None.
    """
    try:
        workbook = load_workbook(filename=str(path), read_only=True, data_only=True)
    except Exception as e:
        raise TransportError(f"Could not open workbook {path}: {e}", resource_type=ResourceType.XLSX.value) from e
    try:
        if sheet not in workbook.sheetnames:
            raise SheetNotFoundError(
                f"No sheet named {sheet!r} was found in file {path}", resource_type=ResourceType.XLSX.value
            )
        return tuple(_read_row(cells, workbook.epoch) for cells in workbook[sheet].iter_rows())
    finally:
        workbook.close()


class CellResolver(PathResolver):
    kind = "cell"

    def __init__(self, rows: Sequence[Optional[Sequence[Any]]], sheet_name: str = "", resource_type: ResourceType = ResourceType.XLSX):
        super().__init__(resource_type)
        self.rows = rows
        self.sheet_name = sheet_name

    def cell(self, address: CellAddress, expression: str = "") -> Any:
        if not 0 <= address.row < len(self.rows) or self.rows[address.row] is None:
            raise CellNotFoundError(
                f"No row {address.row} in sheet {self.sheet_name!r}", path=expression or None
            )
        row = self.rows[address.row]
        if not 0 <= address.column < len(row) or row[address.column] is MISSING_CELL:
            raise CellNotFoundError(
                f"No cell is available in row {address.row} and column {address.column}", path=expression or None
            )
        return row[address.column]

    def resolve(self, expression: str) -> Value:
        try:
            address = parse_cell_address(expression)
            value = coerce_cell_value(self.cell(address, expression), address)
            return apply_flag(value, address.flag, expression)
        except (InvalidAddressError, CellNotFoundError, UnsupportedCellTypeError, InvalidFlagError) as e:
            e.with_context(path=expression, resource_type=self.resource_type.value)
            raise
