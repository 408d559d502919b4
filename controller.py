"""
controller.py
-------------
``StudentController`` owns the session state (``AppState``) and the API
client, and drives a ``StudentView``. The window calls the controller for
every user action; the controller calls back into the view to render, show
toasts, ask for confirmation and open/close the student dialog.

Flow:
- query change (search / filter / sort / page) -> recompute ``state`` -> render
- mutation (create / update / delete) -> backend first -> full ``load()``

Errors from the backend never escape: they are logged, shown as an error
toast, and the state is left as it was.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from app_state import AppState
from form_validation import FormValidationError, empty_form, form_from_student, parse_form
from logger import get_logger
from models import SORT_ID, Student, StudentPayload
from pagination import clamp_page
from student_api import StudentApiClient, StudentApiError
from student_filters import filter_students, sort_students
from student_viewdata import ACTION_DELETE, ACTION_EDIT, StudentTableView, build_table_view, parse_action

log = get_logger("controller")

MSG_LOAD_FAILED = "Failed to load students. Please check if the backend is running."
MSG_FETCH_FAILED = "Failed to fetch student details"
MSG_DELETE_CONFIRM = "Are you sure you want to delete this student? This action cannot be undone."
MSG_CREATED = "Student added successfully!"
MSG_UPDATED = "Student updated successfully!"
MSG_DELETED = "Student deleted successfully!"
MSG_REFRESHED = "Data refreshed successfully!"


class StudentView:
    """Callbacks the controller needs from a window. The base class is a no-op view."""

    def render(self, view: StudentTableView, state: AppState) -> None: ...
    def set_departments(self, departments: List[str]) -> None: ...
    def notify(self, message: str, kind: str = "success") -> None: ...
    def confirm(self, message: str) -> bool: return False
    def show_loading(self, text: str = "Loading...") -> None: ...
    def hide_loading(self) -> None: ...
    def open_modal(self, title: str, submit_label: str, form: Mapping[str, str]) -> None: ...
    def close_modal(self) -> None: ...
    def scroll_to_top(self) -> None: ...
    def focus_search(self) -> None: ...


class StudentController:
    def __init__(self, api: StudentApiClient, view: Optional[StudentView] = None) -> None:
        self.api = api
        self.view: StudentView = view or StudentView()
        self.state = AppState()
        self._load_seq = 0

    def start(self) -> None:
        """Initial population: students, then the department selector."""
        self.load()
        self.load_departments()

    # ------------------------------------------------------------------
    # Data loader
    # ------------------------------------------------------------------

    def load(self) -> bool:
        """Fetch the whole collection and reset ``filtered`` / ``page``.

        Returns False if the request failed or a newer load superseded it.

        Requests run synchronously on the Tk main thread, so a newer load can
        only start re-entrantly while this one is in flight (a handler fired
        from inside the request). The sequence number guards that case; it is
        not a lock for loads running on other threads.
        """
        self._load_seq += 1
        ticket = self._load_seq
        self.view.show_loading("Loading students...")
        try:
            students = self.api.list_students()
        except StudentApiError as e:
            log.error("Error loading students: %s", e.message)
            self.view.notify(MSG_LOAD_FAILED, "error")
            return False
        finally:
            self.view.hide_loading()

        if ticket != self._load_seq:
            log.info("Discarding stale student load #%s (latest is #%s)", ticket, self._load_seq)
            return False

        self.state.replace_all(students)
        log.info("Loaded %s students", len(students))
        self.render()
        return True

    def load_departments(self) -> List[str]:
        """Populate the department selector; failures are logged and ignored."""
        try:
            departments = self.api.list_departments()
        except StudentApiError as e:
            log.warning("Error loading departments: %s", e.message)
            return []
        self.state.departments = departments
        self.view.set_departments(departments)
        return departments

    def get_student(self, student_id: int) -> Optional[Student]:
        """Single student for the edit dialog; None (plus an error toast) on failure."""
        try:
            return self.api.get_student(student_id)
        except StudentApiError as e:
            log.error("Error fetching student %s: %s", student_id, e.message)
            self.view.notify(MSG_FETCH_FAILED, "error")
            return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_student(self, payload: StudentPayload) -> bool:
        try:
            created = self.api.create_student(payload)
        except StudentApiError as e:
            log.error("Error creating student: %s", e.message)
            self.view.notify(e.message, "error")
            return False
        log.info("Student created: %s", created.studentId)
        self._after_mutation(MSG_CREATED)
        return True

    def update_student(self, student_id: int, payload: StudentPayload) -> bool:
        try:
            self.api.update_student(student_id, payload)
        except StudentApiError as e:
            log.error("Error updating student %s: %s", student_id, e.message)
            self.view.notify(e.message, "error")
            return False
        log.info("Student updated: %s", student_id)
        self._after_mutation(MSG_UPDATED)
        return True

    def delete_student(self, student_id: int) -> bool:
        """Ask first; declining does nothing at all."""
        if not self.view.confirm(MSG_DELETE_CONFIRM):
            return False
        self.view.show_loading("Deleting student...")
        try:
            self.api.delete_student(student_id)
        except StudentApiError as e:
            log.error("Error deleting student %s: %s", student_id, e.message)
            self.view.notify(e.message, "error")
            return False
        finally:
            self.view.hide_loading()
        log.info("Student deleted: %s", student_id)
        self._after_mutation(MSG_DELETED)
        return True

    def _after_mutation(self, message: str) -> None:
        self.close_modal()
        self.view.notify(message, "success")
        self.load()

    # ------------------------------------------------------------------
    # Query composer
    # ------------------------------------------------------------------

    def _recompute(self) -> None:
        q = self.state.query
        self.state.filtered = filter_students(
            self.state.all_students, search=q.search, department=q.department, year=q.year
        )
        self.state.page = 1
        self.render()

    def search(self, text: str) -> None:
        self.state.query.search = text or ""
        self._recompute()

    def set_filter(self, department: Optional[str] = None, year: Any = None) -> None:
        """Update the facets that are passed (None = leave as is) and recompute."""
        q = self.state.query
        if department is not None:
            q.department = department
        if year is not None:
            q.year = str(year)
        self._recompute()

    def sort(self, key: str) -> None:
        """Reorder the current ``filtered`` list; ``page`` is kept."""
        self.state.query.sort_key = key or SORT_ID
        self.state.filtered = sort_students(self.state.filtered, self.state.query.sort_key)
        self.render()

    def reset_filters(self) -> None:
        self.state.query.reset()
        self.state.filtered = list(self.state.all_students)
        self.state.page = 1
        self.render()

    def refresh(self) -> bool:
        self.reset_filters()
        ok = self.load()
        if ok:
            self.view.notify(MSG_REFRESHED, "success")
        return ok

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def change_page(self, page: int) -> int:
        self.state.page = clamp_page(page, len(self.state.filtered), self.state.page_size)
        self.render()
        self.view.scroll_to_top()
        return self.state.page

    def next_page(self) -> int:
        return self.change_page(self.state.page + 1)

    def prev_page(self) -> int:
        return self.change_page(self.state.page - 1)

    # ------------------------------------------------------------------
    # Modal / form
    # ------------------------------------------------------------------

    def open_create(self) -> None:
        self.state.edit_target = None
        self.state.modal.is_open = True
        self.state.modal.form = empty_form()
        view = build_table_view(self.state)
        self.view.open_modal(view.modal_title, view.submit_label, self.state.modal.form)

    def open_edit(self, student_id: int) -> bool:
        """Fetch and pre-fill; the dialog stays closed if the fetch fails."""
        student = self.get_student(student_id)
        if student is None:
            return False
        self.state.edit_target = student.studentId
        self.state.modal.is_open = True
        self.state.modal.form = form_from_student(student)
        view = build_table_view(self.state)
        self.view.open_modal(view.modal_title, view.submit_label, self.state.modal.form)
        return True

    def close_modal(self) -> None:
        """Discard the form and leave edit mode, whatever was typed."""
        self.state.modal.reset()
        self.state.edit_target = None
        self.view.close_modal()

    def submit(self, values: Mapping[str, Any]) -> bool:
        try:
            payload = parse_form(values)
        except FormValidationError as e:
            log.info("Form rejected: %s", e.message)
            self.view.notify(e.message, "error")
            return False
        if self.state.edit_target is not None:
            return self.update_student(self.state.edit_target, payload)
        return self.create_student(payload)

    # ------------------------------------------------------------------
    # Row actions / rendering
    # ------------------------------------------------------------------

    def handle_action(self, ident: str) -> bool:
        """Route a row action id (``"edit:3"`` / ``"delete:3"``)."""
        action, student_id = parse_action(ident)
        if action == ACTION_EDIT:
            return self.open_edit(student_id)
        if action == ACTION_DELETE:
            return self.delete_student(student_id)
        return False

    def table_view(self) -> StudentTableView:
        return build_table_view(self.state)

    def render(self) -> StudentTableView:
        view = build_table_view(self.state)
        self.state.page = max(1, view.pagination.page)
        self.view.render(view, self.state)
        return view
