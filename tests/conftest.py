"""Pytest configuration for this repo.

- Puts the project root (the directory with the application modules) on
  ``sys.path`` so tests run from any cwd/rootdir.
- Provides ``FakeBackend``: an in-memory students API served through
  ``httpx.MockTransport``, so no test touches the network.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import pytest

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from student_api import StudentApiClient  # noqa: E402

BASE_URL = "http://backend.test/api"


def make_student(sid: int, name: str, department: str = "CS", year: int = 1, **extra: Any) -> Dict[str, Any]:
    d = {
        "studentId": sid,
        "name": name,
        "email": f"{name.lower().replace(' ', '.')}@uni.test",
        "department": department,
        "year": year,
        "phoneNumber": "0123456789",
        "createdAt": f"2024-01-{sid:02d}T10:00:00",
    }
    d.update(extra)
    return d


class FakeBackend:
    """Minimal students backend. ``requests`` records (method, path) of every call."""

    def __init__(self, students: Optional[List[Dict[str, Any]]] = None) -> None:
        self.students: Dict[int, Dict[str, Any]] = {s["studentId"]: dict(s) for s in (students or [])}
        self.requests: List[tuple] = []
        self.down = False
        self.fail: Dict[tuple, tuple] = {}  # (method, path) -> (status, body)
        self.on_request = None
        self._next_id = max(self.students, default=0) + 1

    # helpers -----------------------------------------------------------
    def calls(self, method: str) -> List[str]:
        return [p for m, p in self.requests if m == method]

    def fail_with(self, method: str, path: str, status: int, body: Any = None) -> None:
        self.fail[(method, path)] = (status, body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> StudentApiClient:
        return StudentApiClient(BASE_URL, timeout=5, transport=self.transport())

    # request handling --------------------------------------------------
    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        self.requests.append((method, path))
        if self.on_request is not None:
            self.on_request(method, path)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)
        if (method, path) in self.fail:
            status, body = self.fail[(method, path)]
            if body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=body)

        parts = [p for p in path.split("/") if p][1:]  # drop "api"
        if parts[:1] != ["students"]:
            return httpx.Response(404)
        rest = parts[1:]

        if method == "GET" and not rest:
            return httpx.Response(200, json=list(self.students.values()))
        if method == "POST" and not rest:
            return self._save(None, json.loads(request.content))
        if method == "GET" and rest == ["departments"]:
            return httpx.Response(200, json=sorted({s["department"] for s in self.students.values()}))
        if method == "GET" and rest == ["search"]:
            q = request.url.params.get("q", "").lower()
            hits = [s for s in self.students.values() if q in s["name"].lower() or q in s["department"].lower()]
            return httpx.Response(200, json=hits)
        if method == "GET" and rest == ["paginated"]:
            page = int(request.url.params.get("page", 0))
            size = int(request.url.params.get("size", 10))
            rows = sorted(self.students.values(), key=lambda s: s[request.url.params.get("sortBy", "studentId")])
            if request.url.params.get("direction") == "DESC":
                rows.reverse()
            total = len(rows)
            return httpx.Response(200, json={
                "content": rows[page * size:(page + 1) * size],
                "totalElements": total,
                "totalPages": -(-total // size),
                "number": page,
                "size": size,
            })
        if method == "GET" and len(rest) == 2 and rest[0] == "department":
            return httpx.Response(200, json=[s for s in self.students.values() if s["department"] == rest[1]])
        if method == "GET" and len(rest) == 2 and rest[0] == "year":
            return httpx.Response(200, json=[s for s in self.students.values() if s["year"] == int(rest[1])])
        if method == "GET" and rest[:2] == ["count", "department"]:
            n = sum(1 for s in self.students.values() if s["department"] == rest[2])
            return httpx.Response(200, json={"department": rest[2], "count": n})

        if len(rest) == 1 and rest[0].isdigit():
            sid = int(rest[0])
            if sid not in self.students:
                return httpx.Response(404, json={
                    "status": 404, "error": "Not Found",
                    "message": f"Student not found with id: {sid}", "path": path,
                })
            if method == "GET":
                return httpx.Response(200, json=self.students[sid])
            if method == "PUT":
                return self._save(sid, json.loads(request.content))
            if method == "DELETE":
                del self.students[sid]
                return httpx.Response(200, json={"message": "Student deleted successfully", "studentId": str(sid)})
        return httpx.Response(405)

    def _save(self, sid: Optional[int], body: Dict[str, Any]) -> httpx.Response:
        for other in self.students.values():
            if other["email"] == body.get("email") and other["studentId"] != sid:
                return httpx.Response(409, json={
                    "status": 409, "error": "Conflict",
                    "message": f"Student with email {body['email']} already exists",
                })
        if body.get("year") is None:
            return httpx.Response(400, json={"status": 400, "message": "Year is required"})
        created = sid is None
        if created:
            sid = self._next_id
            self._next_id += 1
            record = {"studentId": sid, "createdAt": "2024-06-01T12:00:00"}
        else:
            record = self.students[sid]
        record.update({k: body[k] for k in ("name", "email", "department", "year", "phoneNumber")})
        self.students[sid] = record
        return httpx.Response(201 if created else 200, json=record)


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend([
        make_student(1, "Alice Smith", "CS", 2),
        make_student(2, "bob Jones", "Math", 1),
        make_student(3, "Carol White", "CS", 3),
        make_student(4, "Dan Brown", "Physics", 2),
    ])


@pytest.fixture()
def api(backend: FakeBackend):
    client = backend.client()
    yield client
    client.close()
