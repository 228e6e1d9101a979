# devmetrics/services/daterange.py
from __future__ import annotations

from datetime import date as _date
from typing import Any, Dict, Iterable, List, Optional

from ..schemas.common import DateRange

# named windows -> months back to the first day of the month
RANGES_MONTHS_BACK: Dict[str, int] = {"last6months": 6, "last12months": 12}


def months_back(today: _date, months: int) -> _date:
    """First day of the month `months` before `today`'s month."""
    idx = today.year * 12 + (today.month - 1) - months
    return _date(idx // 12, idx % 12 + 1, 1)


def parse_date_range(
    start: Optional[str] = None,
    end: Optional[str] = None,
    range_: Optional[str] = None,
    *,
    today: Optional[_date] = None,
) -> Optional[DateRange]:
    """
    Resolve query parameters into a DateRange.

    Explicit start/end win over a named range. `alltime` is an open range.
    Unknown names and no input at all give None (no filtering).
    """
    if start or end:
        return DateRange(start=start or None, end=end or None)
    if not range_:
        return None
    if range_ == "alltime":
        return DateRange()
    back = RANGES_MONTHS_BACK.get(range_)
    if back is None:
        return None
    return DateRange(start=months_back(today or _date.today(), back).isoformat())


def filter_by_date_range(
    items: Iterable[Dict[str, Any]],
    field: str,
    date_range: Optional[DateRange],
) -> List[Dict[str, Any]]:
    if date_range is None:
        return list(items)
    return [it for it in items if date_range.contains(it.get(field))]
