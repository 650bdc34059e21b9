# calendar_service.py
# Builds the year/month donation compliance grid from sparse calendar events.

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from payment_utils import as_amount, normalize_list
from schemas import CalendarStatus

log = logging.getLogger(__name__)

MONTH_YEAR_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")
MONTHS_PER_YEAR = 12


def parse_month_year(value: Any) -> Optional[Tuple[int, int]]:
    """``"YYYY-MM"`` -> ``(year, month)`` with a 1-indexed month, else None."""
    if not isinstance(value, str):
        return None
    match = MONTH_YEAR_PATTERN.match(value)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def build_donation_calendar(events: Any) -> Dict[str, Any]:
    """
    Group calendar events into ``{year: [event | None] * 12}``.

    Returns ``{"calendar": {...}, "totalDonations": n}``. When two events fall
    on the same month the later one in iteration order replaces the earlier.
    Events with an unparseable ``monthYear`` are left out of the grid but
    their ``donationsCompleted`` still counts towards the total.
    """
    calendar: Dict[int, List[Optional[Mapping[str, Any]]]] = {}
    total_donations = 0

    for event in normalize_list(events):
        if not isinstance(event, Mapping):
            log.warning(f"Skipping calendar event that is not an object: {event!r}")
            continue

        total_donations += as_amount(event.get("donationsCompleted"))

        parsed = parse_month_year(event.get("monthYear"))
        if parsed is None:
            log.warning(f"Skipping calendar event with malformed monthYear: {event.get('monthYear')!r}")
            continue

        year, month = parsed
        if year not in calendar:
            calendar[year] = [None] * MONTHS_PER_YEAR
        calendar[year][month - 1] = event

    return {"calendar": calendar, "totalDonations": total_donations}


def calendar_months(calendar: Mapping[int, List[Optional[Mapping[str, Any]]]], year: int) -> List[Dict[str, Any]]:
    """Twelve display rows for one year; months without a record show as PENDING."""
    slots = calendar.get(year) or [None] * MONTHS_PER_YEAR
    months = []
    for index, event in enumerate(slots):
        status = CalendarStatus.PENDING.value
        completed = 0
        if event is not None:
            status = event.get("status") or CalendarStatus.PENDING.value
            completed = as_amount(event.get("donationsCompleted"))
        months.append({
            "month": index + 1,
            "monthYear": f"{year:04d}-{index + 1:02d}",
            "status": status,
            "donationsCompleted": completed,
        })
    return months
