"""Student form: raw widget values -> request payload, plus the phone check.

The only client-side rule is the phone number (exactly 10 decimal digits).
Everything else (required fields, email format, year range) is validated by
the backend and reported back as ``{"message": ...}``.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from models import Student, StudentPayload

PHONE_RE = re.compile(r"[0-9]{10}")
PHONE_ERROR = "Please enter a valid 10-digit phone number"

FORM_FIELDS = ("name", "email", "department", "year", "phoneNumber")


class FormValidationError(ValueError):
    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


def is_valid_phone(value: Any) -> bool:
    if value is None:
        return False
    return PHONE_RE.fullmatch(str(value)) is not None


def _parse_int(text: Any) -> Optional[int]:
    if text is None:
        return None
    if isinstance(text, int):
        return text
    s = str(text).strip()
    m = re.match(r"[+-]?\d+", s)
    return int(m.group(0)) if m else None


def build_payload(values: Mapping[str, Any]) -> StudentPayload:
    """Trim text fields, parse ``year`` leniently (leading integer, else None)."""
    def _txt(key: str) -> str:
        v = values.get(key)
        return "" if v is None else str(v).strip()

    return StudentPayload(
        name=_txt("name"),
        email=_txt("email"),
        department=str(values.get("department") or ""),
        year=_parse_int(values.get("year")),
        phoneNumber=_txt("phoneNumber"),
    )


def validate_payload(payload: StudentPayload) -> StudentPayload:
    if not is_valid_phone(payload.phoneNumber):
        raise FormValidationError(PHONE_ERROR, field="phoneNumber")
    return payload


def parse_form(values: Mapping[str, Any]) -> StudentPayload:
    """``build_payload`` + validation; raises ``FormValidationError``."""
    return validate_payload(build_payload(values))


def empty_form() -> dict:
    return {k: "" for k in FORM_FIELDS}


def form_from_student(student: Student) -> dict:
    return {
        "name": student.name,
        "email": student.email,
        "department": student.department,
        "year": str(student.year),
        "phoneNumber": student.phoneNumber,
    }
