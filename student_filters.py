"""
student_filters.py
------------------

Search, facet filtering and sorting of the in-memory student list. Kept
free of any UI code so the rules can be unit tested directly.

Functions
~~~~~~~~~

``matches_search``
    Case-insensitive substring match against name, email or department.

``parse_year``
    Parse the year selector value. Empty means "any year".

``filter_students``
    Compose department facet, year facet and search term (all must hold).
    Always works from the full list and preserves its order.

``sort_students``
    Reorder a list by one of the sort keys in ``models.SORT_KEYS``. Unknown
    keys fall back to ascending ``studentId``. The sort is stable.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

import pandas as pd

from models import SORT_CREATED, SORT_DEPARTMENT, SORT_NAME, SORT_YEAR, Student

# Sentinel for a year selection that is set but not a number: matches nothing.
INVALID_YEAR = object()


def _text_key(s: str):
    # casefold first so "alice" and "Bob" interleave like a locale collation,
    # raw string second to keep the order total
    return (s.casefold(), s)


def matches_search(student: Student, term: str) -> bool:
    """True if ``term`` occurs (case-insensitive) in name, email or department."""
    if not term:
        return True
    needle = term.lower()
    return (
        needle in (student.name or "").lower()
        or needle in (student.email or "").lower()
        or needle in (student.department or "").lower()
    )


def parse_year(value: Union[str, int, None]):
    """``None`` for empty, an ``int`` for numeric input, ``INVALID_YEAR`` otherwise."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return int(s)
    except ValueError:
        return INVALID_YEAR


def filter_students(
    students: Iterable[Student],
    search: str = "",
    department: str = "",
    year: Union[str, int, None] = None,
) -> List[Student]:
    """Return the students matching every active criterion, in input order.

    ``department`` is an exact match (empty = any). ``year`` goes through
    ``parse_year``; a non-numeric year matches no record.
    """
    wanted_year = parse_year(year)
    out: List[Student] = []
    for s in students:
        if department and s.department != department:
            continue
        if wanted_year is INVALID_YEAR:
            continue
        if wanted_year is not None and s.year != wanted_year:
            continue
        if not matches_search(s, search):
            continue
        out.append(s)
    return out


def _created_ts(value: Optional[str]) -> Optional[pd.Timestamp]:
    if not value:
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return None
    # mixed naive/aware inputs must still compare
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def sort_students(students: Iterable[Student], key: str) -> List[Student]:
    """Return ``students`` ordered by ``key``.

    name/department: case-insensitive collation, ascending.
    year: numeric ascending.
    createdAt: newest first; unparseable timestamps last.
    anything else: studentId ascending.
    """
    items = list(students)
    if key == SORT_NAME:
        return sorted(items, key=lambda s: _text_key(s.name or ""))
    if key == SORT_DEPARTMENT:
        return sorted(items, key=lambda s: _text_key(s.department or ""))
    if key == SORT_YEAR:
        return sorted(items, key=lambda s: s.year)
    if key == SORT_CREATED:
        dated = []
        undated: List[Student] = []
        for s in items:
            ts = _created_ts(s.createdAt)
            if ts is None:
                undated.append(s)
            else:
                dated.append((ts, s))
        dated.sort(key=lambda t: t[0], reverse=True)
        return [s for _, s in dated] + undated
    return sorted(items, key=lambda s: s.studentId)
