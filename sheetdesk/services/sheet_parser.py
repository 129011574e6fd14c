from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from ..core.errors import ParseError

Record = Dict[str, Any]

# Key given to a header cell that is blank, as spreadsheet-to-JSON tools do
EMPTY_HEADER = "__EMPTY"


@dataclass
class ParsedSheet:
    sheet_name: str
    columns: List[str] = field(default_factory=list)
    records: List[Record] = field(default_factory=list)


def _to_cell(value: Any) -> Any:
    """
    Turn one pandas cell into a plain Python value.
    Missing cells become "" so every record keeps the full header key set.
    """
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return ""
    if isinstance(value, (pd.Timestamp, np.datetime64)):
        return pd.Timestamp(value).to_pydatetime()
    if isinstance(value, (pd.Timedelta, np.timedelta64)):
        return pd.Timedelta(value).to_pytimedelta()
    if isinstance(value, np.generic):
        return value.item()
    return value


def _header_name(value: Any) -> str:
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return EMPTY_HEADER
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(_to_cell(value))


def _unique_headers(raw: List[Any]) -> List[str]:
    """Stringify header cells; repeats get a _1, _2, ... suffix."""
    seen = set()
    headers = []
    for value in raw:
        base = _header_name(value)
        name, n = base, 1
        while name in seen:
            name = f"{base}_{n}"
            n += 1
        seen.add(name)
        headers.append(name)
    return headers


def parse_first_sheet(path: Path) -> ParsedSheet:
    """
    Read the first sheet of an Excel workbook into uniform records.

    - First non-blank row is the header; header cells are stringified,
      blank ones become __EMPTY and repeated names get a _N suffix
    - Fully blank rows are skipped
    - Cells keep their native types (dates stay datetime values,
      durations stay timedelta values)
    - Every record has every header key, missing cells default to ""

    Raises ParseError if the file is not a readable workbook or has no sheets.
    """
    try:
        with pd.ExcelFile(path) as workbook:
            if not workbook.sheet_names:
                raise ParseError("Workbook has no sheets")
            sheet_name = str(workbook.sheet_names[0])
            df = workbook.parse(sheet_name, header=None, dtype=object)
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(f"Failed to parse Excel: {e}") from e

    df = df.dropna(how="all")
    if df.empty:
        return ParsedSheet(sheet_name=sheet_name)

    columns = _unique_headers(list(df.iloc[0]))

    records: List[Record] = []
    for row in df.iloc[1:].itertuples(index=False, name=None):
        records.append({col: _to_cell(val) for col, val in zip(columns, row)})

    return ParsedSheet(sheet_name=sheet_name, columns=columns, records=records)
