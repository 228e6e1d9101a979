from datetime import date

from devmetrics.core.errors import RateLimitError, soft_error
from devmetrics.schemas.common import DateRange
from devmetrics.services.daterange import filter_by_date_range, months_back, parse_date_range
from devmetrics.services.extractors import field_path, first_field, first_non_empty

TODAY = date(2025, 3, 14)


def test_explicit_bounds_win():
    r = parse_date_range("2024-01-01", None, "alltime", today=TODAY)
    assert r == DateRange(start="2024-01-01", end=None)


def test_named_ranges():
    assert parse_date_range(range_="last6months", today=TODAY) == DateRange(start="2024-09-01")
    assert parse_date_range(range_="last12months", today=TODAY) == DateRange(start="2024-03-01")
    assert parse_date_range(range_="alltime", today=TODAY) == DateRange()
    assert parse_date_range(range_="lastweek", today=TODAY) is None
    assert parse_date_range(today=TODAY) is None


def test_months_back_crosses_year():
    assert months_back(date(2025, 1, 31), 1) == date(2024, 12, 1)
    assert months_back(date(2025, 6, 2), 0) == date(2025, 6, 1)


def test_filter_by_date_range():
    items = [
        {"id": 1, "created_at": "2023-12-31T23:00:00Z"},
        {"id": 2, "created_at": "2024-01-01T08:00:00Z"},
        {"id": 3, "created_at": "2024-02-01T00:00:00Z"},
        {"id": 4},
    ]
    r = DateRange(start="2024-01-01", end="2024-01-31")
    assert [i["id"] for i in filter_by_date_range(items, "created_at", r)] == [2]
    assert len(filter_by_date_range(items, "created_at", None)) == 4


def test_first_non_empty_tries_in_order():
    issue = {"fields": {"customfield_10020": None, "customfield_10016": [], "customfield_10002": 0}}
    got = first_non_empty(issue, [
        field_path("fields", "customfield_10020"),
        field_path("fields", "customfield_10016"),
        field_path("fields", "customfield_10002"),
    ])
    assert got == 0


def test_first_non_empty_skips_lookup_errors_and_defaults():
    row = {"teams": {"home": {"name": "A"}}}
    assert first_non_empty(row, [field_path("fixture", "id"), field_path("id")], default="unknown") == "unknown"
    assert first_non_empty(row, [field_path("teams", "away", "name"), field_path("teams", "home", "name")]) == "A"


def test_first_field_under_prefix():
    issue = {"fields": {"customfield_10014": "EPIC-7"}}
    assert first_field(issue, ["customfield_10008", "customfield_10014"], under="fields") == "EPIC-7"
    assert first_field(issue, ["parent"], default=None, under="fields") is None


def test_soft_error_payload():
    assert soft_error(RateLimitError("Jira rate limit exceeded. Please retry later.")) == {
        "error": "Jira rate limit exceeded. Please retry later."
    }
    assert soft_error(ValueError()) == {"error": "ValueError"}
