from __future__ import annotations

from dataclasses import astuple, dataclass
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter

SHEET_TITLE = "Class Timespent"

# (header, width) in output order
COLUMNS = (
    ("Class ID", 40),
    ("Member ID", 40),
    ("First Name", 20),
    ("Last Name", 20),
    ("Total Assessment Timespent", 25),
    ("Timestamp", 30),
)


def _cell_value(value: Any) -> Any:
    if value is None or isinstance(value, (int, float, bool)):
        return value
    # Control characters are not allowed in worksheet XML.
    return ILLEGAL_CHARACTERS_RE.sub("", str(value))


@dataclass(frozen=True)
class OutputRow:
    class_id: str
    member_id: Any
    first_name: Any
    last_name: Any
    total_assessment_timespent: Any
    timestamp: str


class ClassTimespentWorkbook:
    def __init__(self) -> None:
        self._rows: list[OutputRow] = []

    @property
    def rows(self) -> list[OutputRow]:
        return list(self._rows)

    def add_row(self, row: OutputRow) -> None:
        self._rows.append(row)

    def save(self, output_file: str) -> str:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = SHEET_TITLE

        sheet.append([header for header, _ in COLUMNS])
        for index, (_, width) in enumerate(COLUMNS, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = width

        for row in self._rows:
            sheet.append([_cell_value(value) for value in astuple(row)])
            # API text is data, never a formula.
            for cell in sheet[sheet.max_row]:
                if cell.data_type == "f":
                    cell.data_type = "s"

        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(output_path)
        return str(output_path)
