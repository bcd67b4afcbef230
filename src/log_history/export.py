"""Spreadsheet export of the currently selected log entries."""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter

from log_history.models.log_entry import LogEntry
from log_history.timestamps import format_timestamp

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Entity",
    "Entity Name",
    "Field",
    "Old Value",
    "New Value",
    "Changed By",
    "Date/Time",
    "Change Type",
]

DEFAULT_SHEET_TITLE = "Log History"
DEFAULT_FILENAME = "Log_History.xlsx"


def format_value(value: Any) -> str:
    """Text for an old/new value: N/A for null, compact JSON for objects."""
    if value is None:
        return "N/A"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def export_row(entry: LogEntry) -> dict[str, Any]:
    """One export row, keyed by column name in EXPORT_COLUMNS order."""
    return {
        "Entity": entry.entity_type.label,
        "Entity Name": entry.entity_name,
        "Field": entry.field,
        "Old Value": format_value(entry.old_value),
        "New Value": format_value(entry.new_value),
        "Changed By": entry.changed_by,
        "Date/Time": format_timestamp(entry.changed_at),
        "Change Type": entry.change_type,
    }


def export_rows(entries: Iterable[LogEntry]) -> list[dict[str, Any]]:
    return [export_row(e) for e in entries]


def _cell_value(value: Any) -> Any:
    """Cell-safe value: control characters stripped, objects as JSON text."""
    if value is None or isinstance(value, (int, float, bool)):
        return value
    if not isinstance(value, str):
        value = format_value(value)
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def write_xlsx(
    rows: list[dict[str, Any]],
    path: str | Path,
    *,
    sheet_title: str = DEFAULT_SHEET_TITLE,
    columns: list[str] = EXPORT_COLUMNS,
) -> Path:
    """Write rows to an .xlsx workbook with a header row. Returns the written path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title
    ws.append(columns)
    for row in rows:
        ws.append([_cell_value(row.get(col)) for col in columns])

    # API text is data, never a formula
    for ws_row in ws.iter_rows(min_row=2):
        for cell in ws_row:
            if cell.data_type == "f":
                cell.data_type = "s"

    for idx, col in enumerate(columns, start=1):
        width = max([len(col)] + [len(str(r.get(col) or "")) for r in rows])
        ws.column_dimensions[get_column_letter(idx)].width = min(width + 2, 60)

    wb.save(path)
    logger.info("Exported %d rows to %s", len(rows), path)
    return path


def read_xlsx(path: str | Path) -> list[dict[str, Any]]:
    """Read a workbook written by write_xlsx back into row dicts."""
    wb = load_workbook(Path(path), read_only=True)
    try:
        ws = wb.active
        rows = list(ws.iter_rows(values_only=True))
    finally:
        wb.close()
    if not rows:
        return []
    header = [str(h) for h in rows[0]]
    return [dict(zip(header, r)) for r in rows[1:]]
