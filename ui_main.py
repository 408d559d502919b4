"""
ui_main.py

Main window of the student admin client.

Layout (top to bottom):

- Header   : title, "Add Student", "Refresh" and "Log"
- Stats    : total / departments / average year / active
- Toolbar  : search, department, year, sort, "Reset filters"
- Table    : current page of students, Edit/Delete for the selected row,
             "Copy rows" puts the page on the clipboard
- Paging   : previous, page numbers (with "..."), next
- Toast    : last notification, cleared after 3 seconds

All state lives in ``StudentController``; this module only turns its
``StudentTableView`` into widgets and forwards user input.
"""

from __future__ import annotations

import tkinter as tk
from tkinter import messagebox, ttk
from typing import Any, Dict, List, Mapping, Optional

from app_state import AppState
from controller import StudentController, StudentView
from logger import clear_buffer, get_buffer, get_logger, log_exceptions
from models import SORT_CREATED, SORT_DEPARTMENT, SORT_ID, SORT_NAME, SORT_YEAR
from pagination import ELLIPSIS
from student_api import StudentApiClient
from student_viewdata import TABLE_COLUMNS, StudentTableView, rows_as_tsv
from ui_hotkeys import install_hotkeys
from ui_loading import LoadingOverlay

log = get_logger("ui")

TOAST_MS = 3000
YEAR_CHOICES = ("", "1", "2", "3", "4")

# Sort selector: label -> key
SORT_CHOICES: Dict[str, str] = {
    "ID": SORT_ID,
    "Name": SORT_NAME,
    "Department": SORT_DEPARTMENT,
    "Year": SORT_YEAR,
    "Newest first": SORT_CREATED,
}
_SORT_LABELS = {v: k for k, v in SORT_CHOICES.items()}

_TOAST_COLORS = {"success": "#10b981", "error": "#dc2626", "info": "#2563eb"}


class StudentDialog(tk.Toplevel):
    """Add/edit form. Submit and cancel go straight to the controller."""

    FIELDS = (
        ("name", "Name"),
        ("email", "Email"),
        ("department", "Department"),
        ("year", "Year"),
        ("phoneNumber", "Phone number"),
    )

    def __init__(self, app: "App", title: str, submit_label: str, form: Mapping[str, str]) -> None:
        super().__init__(app)
        self.app = app
        self.title(title)
        self.transient(app)
        self.resizable(False, False)

        body = ttk.Frame(self, padding=12)
        body.pack(fill=tk.BOTH, expand=True)

        self.vars: Dict[str, tk.StringVar] = {}
        for row, (key, label) in enumerate(self.FIELDS):
            ttk.Label(body, text=label).grid(row=row, column=0, sticky="w", pady=3, padx=(0, 8))
            var = tk.StringVar(master=self, value=str(form.get(key, "") or ""))
            self.vars[key] = var
            if key == "department":
                w = ttk.Combobox(body, textvariable=var, values=list(app.controller.state.departments), width=32)
            elif key == "year":
                w = ttk.Combobox(body, textvariable=var, values=list(YEAR_CHOICES[1:]), width=32, state="readonly")
            else:
                w = ttk.Entry(body, textvariable=var, width=35)
            w.grid(row=row, column=1, sticky="ew", pady=3)
            if row == 0:
                w.focus_set()

        bar = ttk.Frame(body)
        bar.grid(row=len(self.FIELDS), column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(bar, text="Cancel", command=self._cancel).pack(side=tk.RIGHT, padx=(6, 0))
        ttk.Button(bar, text=submit_label, command=self._submit).pack(side=tk.RIGHT)

        self.bind("<Return>", lambda _e: self._submit())
        self.protocol("WM_DELETE_WINDOW", self._cancel)

    def values(self) -> Dict[str, str]:
        return {k: v.get() for k, v in self.vars.items()}

    @log_exceptions
    def _submit(self) -> None:
        self.app.controller.submit(self.values())

    @log_exceptions
    def _cancel(self) -> None:
        self.app.controller.close_modal()


class LogWindow(tk.Toplevel):
    """Recent log records from the in-memory buffer, refreshed every second."""

    def __init__(self, app: "App") -> None:
        super().__init__(app)
        self.title("Log")
        self.geometry("900x360")

        bar = ttk.Frame(self, padding=8)
        bar.pack(fill=tk.X)
        ttk.Button(bar, text="Refresh", command=self.refresh).pack(side=tk.RIGHT, padx=(4, 0))
        ttk.Button(bar, text="Clear log", command=self._clear).pack(side=tk.RIGHT)

        cols = ("time", "level", "source", "message")
        self.tree = ttk.Treeview(self, columns=cols, show="headings")
        for c, w in zip(cols, (150, 70, 180, 480)):
            self.tree.heading(c, text=c.capitalize())
            self.tree.column(c, width=w, anchor="w")
        self.tree.pack(fill=tk.BOTH, expand=True, padx=8, pady=(0, 8))

        self._job: Optional[str] = None
        self.protocol("WM_DELETE_WINDOW", self.close)
        self._tick()

    def refresh(self) -> None:
        self.tree.delete(*self.tree.get_children())
        for e in get_buffer():
            self.tree.insert("", tk.END, values=(e["time"], e["level"], e["name"], e["message"]))
        self.tree.yview_moveto(1)

    def _clear(self) -> None:
        clear_buffer()
        self.refresh()

    def _tick(self) -> None:
        self.refresh()
        self._job = self.after(1000, self._tick)

    def close(self) -> None:
        if self._job is not None:
            self.after_cancel(self._job)
            self._job = None
        self.destroy()


class App(tk.Tk, StudentView):
    def __init__(self, api: Optional[StudentApiClient] = None) -> None:
        super().__init__()
        self.title("Student Management System")
        self.geometry("1100x720")
        self.minsize(900, 560)

        self.controller = StudentController(api or StudentApiClient(), self)
        self.loading = LoadingOverlay(self)
        self._dialog: Optional[StudentDialog] = None
        self._toast_job: Optional[str] = None
        self._syncing = False
        self._view: Optional[StudentTableView] = None
        self._log_window: Optional[LogWindow] = None
        # Treeview iid -> (edit action, delete action)
        self._row_actions: Dict[str, tuple] = {}

        self._build_header()
        self._build_stats()
        self._build_toolbar()
        self._build_table()
        self.pager = ttk.Frame(self, padding=(8, 4))
        self.pager.pack(fill=tk.X)
        self.toast = tk.Label(self, text="", anchor="w", padx=8, pady=4, fg="white")

        install_hotkeys(self, on_escape=self.controller.close_modal, on_focus_search=self.focus_search)
        self.bind("<Button-1>", self._on_backdrop_click, add="+")

        log.info("API URL: %s", self.controller.api.base_url)
        self.after(0, self.controller.start)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_header(self) -> None:
        top = ttk.Frame(self, padding=(8, 8, 8, 0))
        top.pack(fill=tk.X)
        ttk.Label(top, text="Student Management System", font=("TkDefaultFont", 14, "bold")).pack(side=tk.LEFT)
        ttk.Button(top, text="Log", command=self._on_show_log).pack(side=tk.RIGHT, padx=(6, 0))
        ttk.Button(top, text="Refresh", command=self._on_refresh).pack(side=tk.RIGHT, padx=(6, 0))
        ttk.Button(top, text="Add Student", command=self._on_add).pack(side=tk.RIGHT)

    def _build_stats(self) -> None:
        frm = ttk.Frame(self, padding=8)
        frm.pack(fill=tk.X)
        self.stat_labels: Dict[str, ttk.Label] = {}
        for name in ("Total Students", "Departments", "Avg Year", "Active"):
            box = ttk.LabelFrame(frm, text=name, padding=(12, 4))
            box.pack(side=tk.LEFT, padx=(0, 8))
            lbl = ttk.Label(box, text="0", font=("TkDefaultFont", 12, "bold"))
            lbl.pack()
            self.stat_labels[name] = lbl

    def _build_toolbar(self) -> None:
        bar = ttk.Frame(self, padding=(8, 0, 8, 4))
        bar.pack(fill=tk.X)

        ttk.Label(bar, text="Search:").pack(side=tk.LEFT)
        self.var_search = tk.StringVar(master=self)
        self.ent_search = ttk.Entry(bar, textvariable=self.var_search, width=28)
        self.ent_search.pack(side=tk.LEFT, padx=(4, 12))
        self.var_search.trace_add("write", lambda *_: self._on_search())

        ttk.Label(bar, text="Department:").pack(side=tk.LEFT)
        self.var_dept = tk.StringVar(master=self)
        self.cmb_dept = ttk.Combobox(bar, textvariable=self.var_dept, values=[""], width=20, state="readonly")
        self.cmb_dept.pack(side=tk.LEFT, padx=(4, 12))
        self.cmb_dept.bind("<<ComboboxSelected>>", lambda _e: self._on_filter())

        ttk.Label(bar, text="Year:").pack(side=tk.LEFT)
        self.var_year = tk.StringVar(master=self)
        self.cmb_year = ttk.Combobox(bar, textvariable=self.var_year, values=list(YEAR_CHOICES), width=5, state="readonly")
        self.cmb_year.pack(side=tk.LEFT, padx=(4, 12))
        self.cmb_year.bind("<<ComboboxSelected>>", lambda _e: self._on_filter())

        ttk.Label(bar, text="Sort by:").pack(side=tk.LEFT)
        self.var_sort = tk.StringVar(master=self, value=_SORT_LABELS[SORT_ID])
        self.cmb_sort = ttk.Combobox(bar, textvariable=self.var_sort, values=list(SORT_CHOICES), width=14, state="readonly")
        self.cmb_sort.pack(side=tk.LEFT, padx=(4, 12))
        self.cmb_sort.bind("<<ComboboxSelected>>", lambda _e: self._on_sort())

        ttk.Button(bar, text="Reset filters", command=self._on_reset).pack(side=tk.RIGHT)

    def _build_table(self) -> None:
        frm = ttk.Frame(self, padding=(8, 0))
        frm.pack(fill=tk.BOTH, expand=True)
        self.tree = ttk.Treeview(frm, columns=TABLE_COLUMNS, show="headings", selectmode="browse", height=10)
        widths = {"ID": 60, "Name": 180, "Email": 240, "Department": 160, "Year": 80, "Phone": 120}
        for c in TABLE_COLUMNS:
            self.tree.heading(c, text=c)
            self.tree.column(c, width=widths.get(c, 120), anchor="w")
        vsb = ttk.Scrollbar(frm, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=vsb.set)
        self.tree.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        vsb.pack(side=tk.LEFT, fill=tk.Y)
        self.tree.bind("<Double-1>", lambda _e: self._on_row_action(0))
        self.tree.bind("<Delete>", lambda _e: self._on_row_action(1))

        self.lbl_empty = ttk.Label(self, text="", anchor="center")

        actions = ttk.Frame(self, padding=(8, 4))
        actions.pack(fill=tk.X)
        ttk.Button(actions, text="Delete", command=lambda: self._on_row_action(1)).pack(side=tk.RIGHT, padx=(6, 0))
        ttk.Button(actions, text="Edit", command=lambda: self._on_row_action(0)).pack(side=tk.RIGHT)
        ttk.Button(actions, text="Copy rows", command=self._on_copy_rows).pack(side=tk.LEFT)

    # ------------------------------------------------------------------
    # StudentView
    # ------------------------------------------------------------------

    def render(self, view: StudentTableView, state: AppState) -> None:
        self._view = view
        self._sync_controls(state)

        for name, text in view.stats.labels().items():
            self.stat_labels[name].config(text=text)

        self.tree.delete(*self.tree.get_children())
        self._row_actions.clear()
        for row in view.rows:
            iid = str(row.student_id)
            self.tree.insert("", tk.END, iid=iid, values=row.cells)
            self._row_actions[iid] = row.actions

        if view.empty_message:
            self.lbl_empty.config(text=view.empty_message)
            self.lbl_empty.pack(fill=tk.X, before=self.pager, pady=8)
        else:
            self.lbl_empty.pack_forget()

        self._render_pager(view)

    def _render_pager(self, view: StudentTableView) -> None:
        for w in self.pager.winfo_children():
            w.destroy()
        p = view.pagination
        if not p.visible:
            return
        prev = ttk.Button(self.pager, text="← Previous", command=self.controller.prev_page)
        prev.pack(side=tk.LEFT)
        if not p.prev_enabled:
            prev.state(["disabled"])
        for b in p.buttons:
            if b == ELLIPSIS:
                ttk.Label(self.pager, text=ELLIPSIS, padding=(6, 0)).pack(side=tk.LEFT)
                continue
            btn = ttk.Button(self.pager, text=str(b), width=4, command=lambda n=b: self.controller.change_page(n))
            btn.pack(side=tk.LEFT, padx=1)
            if b == p.page:
                btn.state(["pressed"])
        nxt = ttk.Button(self.pager, text="Next →", command=self.controller.next_page)
        nxt.pack(side=tk.LEFT)
        if not p.next_enabled:
            nxt.state(["disabled"])

    def _sync_controls(self, state: AppState) -> None:
        """Mirror the query state into the widgets without re-triggering handlers."""
        q = state.query
        self._syncing = True
        try:
            if self.var_search.get() != q.search:
                self.var_search.set(q.search)
            self.var_dept.set(q.department)
            self.var_year.set(q.year)
            self.var_sort.set(_SORT_LABELS.get(q.sort_key, _SORT_LABELS[SORT_ID]))
        finally:
            self._syncing = False

    def set_departments(self, departments: List[str]) -> None:
        self.cmb_dept.configure(values=[""] + list(departments))

    def notify(self, message: str, kind: str = "success") -> None:
        if self._toast_job is not None:
            self.after_cancel(self._toast_job)
        self.toast.config(text=message, bg=_TOAST_COLORS.get(kind, _TOAST_COLORS["info"]))
        self.toast.pack(fill=tk.X, side=tk.BOTTOM)
        self._toast_job = self.after(TOAST_MS, self._hide_toast)

    def _hide_toast(self) -> None:
        self._toast_job = None
        self.toast.pack_forget()

    def confirm(self, message: str) -> bool:
        return bool(messagebox.askyesno("Confirm", message, parent=self))

    def show_loading(self, text: str = "Loading...") -> None:
        self.loading.show(text)

    def hide_loading(self) -> None:
        self.loading.hide()

    def open_modal(self, title: str, submit_label: str, form: Mapping[str, str]) -> None:
        self._destroy_dialog()
        self._dialog = StudentDialog(self, title, submit_label, form)

    def close_modal(self) -> None:
        self._destroy_dialog()

    def _destroy_dialog(self) -> None:
        if self._dialog is not None:
            self._dialog.destroy()
            self._dialog = None

    def scroll_to_top(self) -> None:
        self.tree.yview_moveto(0)

    def focus_search(self) -> None:
        self.ent_search.focus_set()
        self.ent_search.select_range(0, tk.END)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    @log_exceptions
    def _on_search(self) -> None:
        if not self._syncing:
            self.controller.search(self.var_search.get())

    @log_exceptions
    def _on_filter(self) -> None:
        self.controller.set_filter(department=self.var_dept.get(), year=self.var_year.get())

    @log_exceptions
    def _on_sort(self) -> None:
        self.controller.sort(SORT_CHOICES.get(self.var_sort.get(), SORT_ID))

    @log_exceptions
    def _on_reset(self) -> None:
        self.controller.reset_filters()

    @log_exceptions
    def _on_refresh(self) -> None:
        self.controller.refresh()

    @log_exceptions
    def _on_add(self) -> None:
        self.controller.open_create()

    @log_exceptions
    def _on_copy_rows(self) -> None:
        if self._view is None or not self._view.rows:
            self.notify("Nothing to copy", "info")
            return
        self.clipboard_clear()
        self.clipboard_append(rows_as_tsv(self._view.rows))
        self.notify(f"Copied {len(self._view.rows)} rows", "info")

    @log_exceptions
    def _on_show_log(self) -> None:
        if self._log_window is not None and self._log_window.winfo_exists():
            self._log_window.lift()
            return
        self._log_window = LogWindow(self)

    @log_exceptions
    def _on_row_action(self, which: int) -> None:
        sel = self.tree.selection()
        if not sel:
            return
        actions = self._row_actions.get(sel[0])
        if actions:
            self.controller.handle_action(actions[which])

    def _on_backdrop_click(self, event: Any) -> None:
        # a click in the main window while the dialog is open counts as "outside"
        if self._dialog is None:
            return
        try:
            if event.widget.winfo_toplevel() is self:
                self.controller.close_modal()
        except (AttributeError, tk.TclError):
            return


def create_app(api: Optional[StudentApiClient] = None) -> App:
    return App(api)


if __name__ == "__main__":
    create_app().mainloop()
