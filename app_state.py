"""Application state for one client session.

One ``AppState`` is owned by the ``StudentController``. ``all_students`` is
the last successful load; ``filtered`` is derived from it by the query
(search/filter recompute it from scratch, sort reorders it in place).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from form_validation import empty_form
from models import PAGE_SIZE, SORT_ID, Student

MODE_CREATE = "create"
MODE_EDIT = "edit"


@dataclass
class QueryState:
    """Current values of the search box and the three selectors."""
    search: str = ""
    department: str = ""
    year: str = ""
    sort_key: str = SORT_ID

    def reset(self) -> None:
        self.search = ""
        self.department = ""
        self.year = ""
        self.sort_key = SORT_ID


@dataclass
class ModalState:
    is_open: bool = False
    form: Dict[str, str] = field(default_factory=empty_form)

    def reset(self) -> None:
        self.is_open = False
        self.form = empty_form()


@dataclass
class AppState:
    all_students: List[Student] = field(default_factory=list)
    filtered: List[Student] = field(default_factory=list)
    edit_target: Optional[int] = None
    page: int = 1
    page_size: int = PAGE_SIZE
    departments: List[str] = field(default_factory=list)
    query: QueryState = field(default_factory=QueryState)
    modal: ModalState = field(default_factory=ModalState)

    @property
    def mode(self) -> str:
        return MODE_EDIT if self.edit_target is not None else MODE_CREATE

    def replace_all(self, students: List[Student]) -> None:
        """Full reset after a load: ``filtered`` mirrors ``all_students``, page 1."""
        self.all_students = list(students)
        self.filtered = list(students)
        self.page = 1
