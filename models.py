from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

PAGE_SIZE = 10

# Sort keys offered by the sort selector. Anything else falls back to studentId.
SORT_ID = "studentId"
SORT_NAME = "name"
SORT_DEPARTMENT = "department"
SORT_YEAR = "year"
SORT_CREATED = "createdAt"
SORT_KEYS = (SORT_ID, SORT_NAME, SORT_DEPARTMENT, SORT_YEAR, SORT_CREATED)


def _opt_int(v: Any) -> Optional[int]:
    if v is None or v == "":
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Student:
    studentId: int
    name: str = ""
    email: str = ""
    department: str = ""
    year: int = 0
    phoneNumber: str = ""
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "Student":
        """Build from a backend JSON object. Unknown keys are ignored."""
        return cls(
            studentId=int(obj["studentId"]),
            name=str(obj.get("name") or ""),
            email=str(obj.get("email") or ""),
            department=str(obj.get("department") or ""),
            year=_opt_int(obj.get("year")) or 0,
            phoneNumber=str(obj.get("phoneNumber") or ""),
            createdAt=obj.get("createdAt"),
            updatedAt=obj.get("updatedAt"),
        )

    def to_payload(self) -> "StudentPayload":
        return StudentPayload(
            name=self.name,
            email=self.email,
            department=self.department,
            year=self.year,
            phoneNumber=self.phoneNumber,
        )


@dataclass(frozen=True)
class StudentPayload:
    """Request body for create/update. ``year`` is None when the form had no usable number."""
    name: str
    email: str
    department: str
    year: Optional[int]
    phoneNumber: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "year": self.year,
            "phoneNumber": self.phoneNumber,
        }


@dataclass
class StudentPage:
    """One page of the server-side paged listing (0-based ``number``)."""
    content: List[Student] = field(default_factory=list)
    totalElements: int = 0
    totalPages: int = 0
    number: int = 0
    size: int = PAGE_SIZE

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "StudentPage":
        return cls(
            content=[Student.from_json(s) for s in (obj.get("content") or [])],
            totalElements=_opt_int(obj.get("totalElements")) or 0,
            totalPages=_opt_int(obj.get("totalPages")) or 0,
            number=_opt_int(obj.get("number")) or 0,
            size=_opt_int(obj.get("size")) or PAGE_SIZE,
        )
