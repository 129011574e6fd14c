# sheetdesk/client/table_view.py

import json
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Tuple

import pandas as pd

from ..core.errors import ValidationError

Row = Dict[str, Any]


def deduce_columns(rows: List[Row]) -> List[str]:
    """Union of keys over all rows, first-seen order, without the synthetic id."""
    columns: Dict[str, None] = {}
    for r in rows:
        for k in r:
            columns.setdefault(k, None)
    columns.pop("id", None)
    return list(columns)


def stringify(value: Any) -> str:
    """Text shown in a table cell; filters match against the same text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


@dataclass
class FilterRow:
    column: str
    query: str = ""

    def matches(self, row: Row) -> bool:
        q = self.query.strip().lower()
        if not q:
            return True
        if self.column not in row:
            return False
        return q in stringify(row[self.column]).lower()


@dataclass
class TableView:
    """
    Client-side view over one loaded dataset.

    rows      -- everything fetched for the dataset
    filtered  -- what is currently displayed
    columns   -- Column Set of the loaded rows
    filters   -- filter rows added by the user

    Only the methods below change this state.
    """
    rows: List[Row] = field(default_factory=list)
    filtered: List[Row] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    filters: List[FilterRow] = field(default_factory=list)

    def load(self, rows: List[Row]) -> None:
        self.rows = list(rows)
        self.columns = deduce_columns(self.rows)
        self.filtered = list(self.rows)

    def reset(self) -> None:
        self.rows = []
        self.filtered = []
        self.columns = []
        self.filters = []

    def add_filter(self, column: str, query: str = "") -> FilterRow:
        if not self.columns:
            raise ValidationError("Load data first")
        if column not in self.columns:
            raise ValidationError(f"Unknown column: {column}")
        flt = FilterRow(column=column, query=query)
        self.filters.append(flt)
        return flt

    def remove_filter(self, index: int) -> None:
        del self.filters[index]

    def apply_filters(self) -> List[Row]:
        """Keep the loaded rows that pass every filter. Never refetches."""
        if not self.filters:
            raise ValidationError("No filters added")
        self.filtered = [r for r in self.rows if all(f.matches(r) for f in self.filters)]
        return self.filtered

    def clear_filters(self) -> List[Row]:
        self.filters = []
        self.filtered = list(self.rows)
        return self.filtered

    # -------------------------
    # Rendering
    # -------------------------
    def render(self) -> Tuple[List[str], List[List[str]]]:
        header = list(self.columns)
        body = [[stringify(r.get(col)) for col in self.columns] for r in self.filtered]
        return header, body

    def to_frame(self) -> pd.DataFrame:
        header, body = self.render()
        return pd.DataFrame(body, columns=header)

    def to_text(self) -> str:
        df = self.to_frame()
        table = df.to_string(index=False) if self.columns else ""
        return f"{table}\nRows: {len(self.filtered)}".lstrip("\n")
