"""ui_hotkeys.py

Global hotkeys for the students window.

Hotkeys:
  - Escape: close the student dialog
  - Ctrl+K / Cmd+K: focus the search box

Design:
- Duck typing: works in pytest without a Tk window (anything with ``bind_all``).
- Idempotent install: calling it twice does not double-bind.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

ESCAPE_SEQUENCES = ("<Escape>",)
FOCUS_SEARCH_SEQUENCES = ("<Control-k>", "<Control-K>", "<Command-k>", "<Command-K>")

_INSTALLED_ATTR = "_student_admin_hotkeys_installed"


def _make_handler(fn: Callable[[], Any]) -> Callable[[Any], Optional[str]]:
    def _handler(_event: Any = None) -> Optional[str]:
        fn()
        # stop the default binding (Ctrl+K would otherwise reach the Entry)
        return "break"
    return _handler


def install_hotkeys(
    root: Any,
    *,
    on_escape: Callable[[], Any],
    on_focus_search: Callable[[], Any],
) -> bool:
    """Bind the hotkeys on ``root``. Returns False if they were already installed."""
    if getattr(root, _INSTALLED_ATTR, False):
        return False

    esc = _make_handler(on_escape)
    for seq in ESCAPE_SEQUENCES:
        root.bind_all(seq, esc, add="+")

    focus = _make_handler(on_focus_search)
    for seq in FOCUS_SEARCH_SEQUENCES:
        try:
            root.bind_all(seq, focus, add="+")
        except Exception:
            # <Command-...> only exists on macOS Tk builds
            continue

    setattr(root, _INSTALLED_ATTR, True)
    return True
