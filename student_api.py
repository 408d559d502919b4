"""student_api.py

Thin client for the students REST backend.

All methods return model objects (``models.Student`` etc.) and raise
``StudentApiError`` on any failure, so callers only deal with one exception
type:

* transport failure (connection refused, timeout): ``status`` is None and the
  message is the caller's fallback text.
* non-2xx response: ``status`` is set; the message is the backend's
  ``{"message": ...}`` if the body carries one, else the fallback text.

Any 404 (GET, PUT or DELETE of an unknown id) raises ``StudentNotFound``,
a ``StudentApiError`` subclass.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

import preferences
from logger import get_logger
from models import PAGE_SIZE, SORT_ID, Student, StudentPage, StudentPayload

log = get_logger("api")


class StudentApiError(Exception):
    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        *,
        error: Optional[str] = None,
        path: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.error = error
        self.path = path

    @classmethod
    def from_response(cls, resp: httpx.Response, fallback: str) -> "StudentApiError":
        """Use the backend's error payload when it has a usable ``message``."""
        body: Any = None
        try:
            body = resp.json()
        except ValueError:
            body = None
        message = fallback
        error = path = None
        if isinstance(body, dict):
            msg = body.get("message")
            if isinstance(msg, str) and msg.strip():
                message = msg
            error = body.get("error")
            path = body.get("path")
        exc_cls = StudentNotFound if resp.status_code == 404 else cls
        return exc_cls(message, resp.status_code, error=error, path=path)


class StudentNotFound(StudentApiError):
    pass


class StudentApiClient:
    """Wraps an ``httpx.Client`` rooted at ``<base_url>/students``."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or preferences.api_base_url()).rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else preferences.api_timeout(),
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "StudentApiClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Low level
    # ------------------------------------------------------------------

    def _request(self, method: str, url: str, fallback: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            log.warning("%s %s failed: %s", method, url, e)
            raise StudentApiError(fallback) from e
        if resp.is_error:
            log.warning("%s %s -> HTTP %s", method, url, resp.status_code)
            raise StudentApiError.from_response(resp, fallback)
        return resp

    def _json(self, resp: httpx.Response, fallback: str) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise StudentApiError(fallback, resp.status_code) from e

    def _student_list(self, url: str, fallback: str, **kwargs: Any) -> List[Student]:
        resp = self._request("GET", url, fallback, **kwargs)
        data = self._json(resp, fallback)
        if not isinstance(data, list):
            raise StudentApiError(fallback, resp.status_code)
        try:
            return [Student.from_json(s) for s in data]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            log.warning("GET %s: malformed student record: %s", url, e)
            raise StudentApiError(fallback, resp.status_code) from e

    def _student(self, resp: httpx.Response, fallback: str) -> Student:
        data = self._json(resp, fallback)
        try:
            return Student.from_json(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            log.warning("%s %s: malformed student record: %s", resp.request.method, resp.request.url, e)
            raise StudentApiError(fallback, resp.status_code) from e

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def list_students(self) -> List[Student]:
        return self._student_list("/students", "Failed to load students")

    def get_student(self, student_id: int) -> Student:
        fallback = "Failed to fetch student details"
        resp = self._request("GET", f"/students/{int(student_id)}", fallback)
        return self._student(resp, fallback)

    def create_student(self, payload: StudentPayload) -> Student:
        fallback = "Failed to create student"
        resp = self._request("POST", "/students", fallback, json=payload.to_json())
        return self._student(resp, fallback)

    def update_student(self, student_id: int, payload: StudentPayload) -> Student:
        fallback = "Failed to update student"
        resp = self._request("PUT", f"/students/{int(student_id)}", fallback, json=payload.to_json())
        return self._student(resp, fallback)

    def delete_student(self, student_id: int) -> None:
        # The body ({message, studentId}) is informational only.
        self._request("DELETE", f"/students/{int(student_id)}", "Failed to delete student")

    def list_departments(self) -> List[str]:
        fallback = "Failed to load departments"
        resp = self._request("GET", "/students/departments", fallback)
        data = self._json(resp, fallback)
        if not isinstance(data, list):
            raise StudentApiError(fallback, resp.status_code)
        return [str(d) for d in data]

    # ------------------------------------------------------------------
    # Server-side queries
    # ------------------------------------------------------------------

    def search_students(self, term: str) -> List[Student]:
        return self._student_list("/students/search", "Failed to search students", params={"q": term or ""})

    def students_by_department(self, department: str) -> List[Student]:
        return self._student_list(
            f"/students/department/{quote(department, safe='')}",
            "Failed to load students for department",
        )

    def students_by_year(self, year: int) -> List[Student]:
        return self._student_list(f"/students/year/{int(year)}", "Failed to load students for year")

    def get_page(
        self,
        page: int = 0,
        size: int = PAGE_SIZE,
        sort_by: str = SORT_ID,
        direction: str = "ASC",
    ) -> StudentPage:
        fallback = "Failed to load students page"
        params: Dict[str, Any] = {
            "page": max(0, int(page)),
            "size": int(size),
            "sortBy": sort_by,
            "direction": "DESC" if str(direction).upper() == "DESC" else "ASC",
        }
        resp = self._request("GET", "/students/paginated", fallback, params=params)
        data = self._json(resp, fallback)
        if not isinstance(data, dict):
            raise StudentApiError(fallback, resp.status_code)
        try:
            return StudentPage.from_json(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StudentApiError(fallback, resp.status_code) from e

    def count_by_department(self, department: str) -> int:
        fallback = "Failed to count students for department"
        resp = self._request("GET", f"/students/count/department/{quote(department, safe='')}", fallback)
        data = self._json(resp, fallback)
        try:
            return int(data["count"])
        except (KeyError, TypeError, ValueError) as e:
            raise StudentApiError(fallback, resp.status_code) from e
