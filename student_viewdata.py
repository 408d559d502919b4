"""student_viewdata.py

Pure (UI-free) view logic for the students window.

Goal:
- Keep list/pandas logic out of the Tkinter code so the window stays thin
  and the rules can be tested without a display.

``build_table_view(state)`` turns an ``AppState`` into everything the window
shows: the rows of the current page, the pagination bar, the stats panel and
the dialog labels. Row actions are plain identifiers (``"edit:12"``) that the
window routes back to the controller with ``parse_action``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from app_state import MODE_EDIT, AppState
from formatting import format_int, format_one_decimal, format_timestamp, format_year, round_half_up
from models import Student
from pagination import PageButton, clamp_page, has_next, has_prev, page_buttons, page_slice, total_pages

TABLE_COLUMNS: Tuple[str, ...] = ("ID", "Name", "Email", "Department", "Year", "Phone")

EMPTY_MESSAGE = 'No students found. Click "Add Student" to get started.'

ACTION_EDIT = "edit"
ACTION_DELETE = "delete"


@dataclass(frozen=True)
class StudentRow:
    student_id: int
    cells: Tuple[str, ...]
    created: str = ""

    @property
    def actions(self) -> Tuple[str, str]:
        return (action_id(ACTION_EDIT, self.student_id), action_id(ACTION_DELETE, self.student_id))


@dataclass(frozen=True)
class Stats:
    total: int = 0
    departments: int = 0
    avg_year: float = 0.0
    active: int = 0

    def labels(self) -> dict:
        return {
            "Total Students": format_int(self.total),
            "Departments": format_int(self.departments),
            "Avg Year": format_one_decimal(self.avg_year),
            "Active": format_int(self.active),
        }


@dataclass(frozen=True)
class PaginationView:
    page: int = 1
    pages: int = 0
    buttons: Tuple[PageButton, ...] = ()
    prev_enabled: bool = False
    next_enabled: bool = False

    @property
    def visible(self) -> bool:
        return self.pages > 1


@dataclass
class StudentTableView:
    rows: List[StudentRow] = field(default_factory=list)
    empty_message: Optional[str] = None
    pagination: PaginationView = field(default_factory=PaginationView)
    stats: Stats = field(default_factory=Stats)
    modal_title: str = "Add New Student"
    submit_label: str = "Add Student"


def action_id(action: str, student_id: int) -> str:
    return f"{action}:{int(student_id)}"


def parse_action(ident: str) -> Tuple[str, int]:
    """``"delete:7"`` -> ``("delete", 7)``; raises ValueError on anything else."""
    action, _, raw = str(ident).partition(":")
    if action not in (ACTION_EDIT, ACTION_DELETE) or not raw:
        raise ValueError(f"unknown row action: {ident!r}")
    return action, int(raw)


def students_to_dataframe(students: Iterable[Student]) -> pd.DataFrame:
    cols = ["studentId", "name", "email", "department", "year", "phoneNumber", "createdAt"]
    records = [{c: getattr(s, c) for c in cols} for s in students]
    return pd.DataFrame.from_records(records, columns=cols)


def compute_stats(all_students: Sequence[Student], filtered: Sequence[Student]) -> Stats:
    """Total, distinct departments and mean year of ``all_students``; ``active`` = len(filtered)."""
    df = students_to_dataframe(all_students)
    if df.empty:
        return Stats(active=len(filtered))
    years = pd.to_numeric(df["year"], errors="coerce")
    mean = years.mean()
    avg = 0.0 if pd.isna(mean) else round_half_up(float(mean), 1)
    return Stats(
        total=len(df),
        departments=int(df["department"].nunique(dropna=False)),
        avg_year=avg,
        active=len(filtered),
    )


def build_row(student: Student) -> StudentRow:
    return StudentRow(
        student_id=student.studentId,
        cells=(
            str(student.studentId),
            student.name,
            student.email,
            student.department,
            format_year(student.year),
            student.phoneNumber,
        ),
        created=format_timestamp(student.createdAt),
    )


def build_pagination(page: int, count: int, page_size: int) -> PaginationView:
    pages = total_pages(count, page_size)
    current = clamp_page(page, count, page_size)
    return PaginationView(
        page=current,
        pages=pages,
        buttons=tuple(page_buttons(current, pages)),
        prev_enabled=has_prev(current),
        next_enabled=has_next(current, pages),
    )


def build_table_view(state: AppState) -> StudentTableView:
    editing = state.mode == MODE_EDIT
    view = StudentTableView(
        stats=compute_stats(state.all_students, state.filtered),
        modal_title="Edit Student" if editing else "Add New Student",
        submit_label="Update Student" if editing else "Add Student",
    )
    if not state.filtered:
        view.empty_message = EMPTY_MESSAGE
        return view

    view.pagination = build_pagination(state.page, len(state.filtered), state.page_size)
    view.rows = [build_row(s) for s in page_slice(state.filtered, view.pagination.page, state.page_size)]
    return view


def rows_to_dataframe(rows: Iterable[StudentRow]) -> pd.DataFrame:
    """Rows in ``TABLE_COLUMNS`` order."""
    data = [list(r.cells) for r in rows]
    return pd.DataFrame(data, columns=list(TABLE_COLUMNS))


def rows_as_tsv(rows: Iterable[StudentRow]) -> str:
    """Tab-separated text with a header line, for pasting into a spreadsheet."""
    return rows_to_dataframe(rows).to_csv(sep="\t", index=False, lineterminator="\n")
