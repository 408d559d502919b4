from __future__ import annotations

from models import SORT_CREATED, SORT_DEPARTMENT, SORT_ID, SORT_NAME, SORT_YEAR, Student
from student_filters import INVALID_YEAR, filter_students, matches_search, parse_year, sort_students


def _students() -> list[Student]:
    return [
        Student(3, "Carol White", "carol@uni.test", "CS", 3, "0123456789", "2024-01-03T10:00:00"),
        Student(1, "alice Smith", "alice@uni.test", "CS", 2, "0123456789", "2024-03-01T08:00:00"),
        Student(2, "Bob Jones", "bob@maths.test", "Math", 2, "0123456789", "2023-12-24T23:59:00"),
        Student(4, "Dan Brown", "dan@uni.test", "Physics", 1, "0123456789", None),
        Student(5, "Eve Black", "eve@uni.test", "CS", 2, "0123456789", "2024-02-10T09:30:00"),
    ]


def test_matches_search_is_case_insensitive_over_three_fields() -> None:
    s = _students()[2]
    assert matches_search(s, "BOB")
    assert matches_search(s, "maths.test")
    assert matches_search(s, "mat")
    assert not matches_search(s, "0123")  # phone is not searched
    assert matches_search(s, "")


def test_search_includes_exactly_the_matching_records() -> None:
    all_ = _students()
    out = filter_students(all_, search="cs")
    assert [s.studentId for s in out] == [3, 1, 4, 5]  # "physics" contains "cs"
    for s in all_:
        hit = any("cs" in f.lower() for f in (s.name, s.email, s.department))
        assert (s in out) == hit


def test_empty_criteria_keep_everything_in_order() -> None:
    all_ = _students()
    assert filter_students(all_) == all_


def test_department_and_year_facets_are_conjunctive() -> None:
    out = filter_students(_students(), department="CS", year="2")
    assert [s.studentId for s in out] == [1, 5]
    assert all(s.department == "CS" and s.year == 2 for s in out)


def test_facets_and_search_compose() -> None:
    out = filter_students(_students(), search="eve", department="CS", year=2)
    assert [s.studentId for s in out] == [5]


def test_department_is_exact_match() -> None:
    assert filter_students(_students(), department="C") == []


def test_parse_year() -> None:
    assert parse_year(None) is None
    assert parse_year("  ") is None
    assert parse_year("3") == 3
    assert parse_year(4) == 4
    assert parse_year("x") is INVALID_YEAR


def test_non_numeric_year_matches_nothing() -> None:
    assert filter_students(_students(), year="abc") == []


def test_sort_by_name_uses_case_insensitive_collation() -> None:
    out = sort_students(_students(), SORT_NAME)
    assert [s.name for s in out] == ["alice Smith", "Bob Jones", "Carol White", "Dan Brown", "Eve Black"]


def test_sort_by_department_is_stable() -> None:
    out = sort_students(_students(), SORT_DEPARTMENT)
    assert [s.studentId for s in out] == [3, 1, 5, 2, 4]


def test_sort_by_year_non_decreasing() -> None:
    years = [s.year for s in sort_students(_students(), SORT_YEAR)]
    assert years == sorted(years)


def test_sort_by_created_newest_first_unparseable_last() -> None:
    out = sort_students(_students(), SORT_CREATED)
    assert [s.studentId for s in out] == [1, 5, 3, 2, 4]


def test_unknown_key_falls_back_to_id() -> None:
    assert [s.studentId for s in sort_students(_students(), "bogus")] == [1, 2, 3, 4, 5]
    assert [s.studentId for s in sort_students(_students(), SORT_ID)] == [1, 2, 3, 4, 5]


def test_sort_does_not_mutate_input() -> None:
    all_ = _students()
    before = list(all_)
    sort_students(all_, SORT_NAME)
    assert all_ == before
