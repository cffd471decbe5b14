"""
Temple Billing - Excel export
Builds .xlsx workbooks with pandas/openpyxl
"""

import io
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

import pandas as pd
from openpyxl.utils import get_column_letter

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class ExportColumn:
    header: str
    key: str
    width: int


def _cell(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


def build_workbook(sheet_name: str, columns: list[ExportColumn], rows: Iterable[dict]) -> bytes:
    """
    Single-sheet workbook, one column per ExportColumn

    Returns:
        xlsx file content
    """
    headers = [c.header for c in columns]
    records = [[_cell(row.get(c.key)) for c in columns] for row in rows]
    df = pd.DataFrame(records, columns=headers)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        sheet = writer.sheets[sheet_name]
        for idx, column in enumerate(columns, start=1):
            sheet.column_dimensions[get_column_letter(idx)].width = column.width
    return buffer.getvalue()


def attachment_headers(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f"attachment; filename={filename}"}
