# -*- coding: utf-8 -*-
"""
ui_loading.py - loading overlay for the students window.
Usage:
    self.loading = LoadingOverlay(self)
    self.loading.show("Loading students...")
    ...
    self.loading.hide()

Nested show/hide calls are counted; the overlay only disappears when the
last caller has hidden it, so overlapping operations cannot hide it early.
"""
from __future__ import annotations
import tkinter as tk
from tkinter import ttk

DEFAULT_TEXT = "Loading..."


class LoadingOverlay:
    def __init__(self, master: tk.Misc) -> None:
        self.master = master
        self._win: tk.Toplevel | None = None
        self._bar: ttk.Progressbar | None = None
        self._depth = 0
        self._text = tk.StringVar(master=master, value=DEFAULT_TEXT)

    @property
    def depth(self) -> int:
        return self._depth

    def _build(self) -> tk.Toplevel:
        if self._win is not None:
            return self._win
        top = self.master.winfo_toplevel()
        win = tk.Toplevel(top)
        win.withdraw()
        win.overrideredirect(True)
        win.attributes("-topmost", True)
        body = ttk.Frame(win, padding=16)
        body.pack(fill="both", expand=True)
        ttk.Label(body, textvariable=self._text, anchor="center").pack(fill="x", pady=(2, 8))
        self._bar = ttk.Progressbar(body, mode="indeterminate", length=260)
        self._bar.pack(fill="x")
        self._win = win
        return win

    def _center(self, win: tk.Toplevel) -> None:
        top = self.master.winfo_toplevel()
        top.update_idletasks()
        w, h = 320, 80
        x = top.winfo_rootx() + max(0, (top.winfo_width() - w) // 2)
        y = top.winfo_rooty() + max(0, (top.winfo_height() - h) // 2)
        win.geometry(f"{w}x{h}+{x}+{y}")

    def show(self, text: str = DEFAULT_TEXT) -> None:
        self._depth += 1
        self._text.set(text)
        if self._depth > 1:
            return
        win = self._build()
        self._center(win)
        win.deiconify()
        self.master.winfo_toplevel().config(cursor="watch")
        if self._bar is not None:
            self._bar.start(12)
        win.update_idletasks()

    def hide(self) -> None:
        if self._depth == 0:
            return
        self._depth -= 1
        if self._depth > 0 or self._win is None:
            return
        if self._bar is not None:
            self._bar.stop()
        self.master.winfo_toplevel().config(cursor="")
        self._win.withdraw()

