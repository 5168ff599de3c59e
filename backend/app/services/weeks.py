"""Rotation week labels.

Runs go Monday to Saturday; a Sunday counts towards the following week.
Week numbers otherwise follow ISO-8601 and are rendered as `Week-N`.
"""

import re
from datetime import date, datetime, timedelta
from typing import NamedTuple, Optional, Union

from app.services.days import get_operational_date

_WEEK_LABEL = re.compile(r"^Week-(\d+)$", re.IGNORECASE)


class CustomWeek(NamedTuple):
    year: int
    week: str


class WeekInfo(NamedTuple):
    label: Optional[str]
    year: Optional[int]
    parity: Optional[str]


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def get_custom_week(value: Union[date, datetime]) -> CustomWeek:
    d = _as_date(value)
    if d.weekday() == 6:
        d = d + timedelta(days=1)
    iso_year, iso_week, _ = d.isocalendar()
    return CustomWeek(year=iso_year, week=f"Week-{iso_week}")


def get_rotation_week_key(value: Union[date, datetime]) -> str:
    """`2025-Week-7` style key used to group a week's proofs."""
    year, week = get_custom_week(value)
    return f"{year}-{week}"


def get_week_number_from_label(label: Optional[str]) -> Optional[int]:
    if not label:
        return None
    match = _WEEK_LABEL.match(label.strip())
    if not match:
        return None
    return int(match.group(1))


def _parity_of(value: Union[date, datetime]) -> str:
    week_number = get_week_number_from_label(get_custom_week(value).week)
    if not week_number:
        return "odd"
    return "even" if week_number % 2 == 0 else "odd"


def get_week_parity(now: Optional[datetime] = None) -> str:
    """Parity of the current operational week."""
    return _parity_of(get_operational_date(now))


def get_week_info_from_iso(value: Optional[Union[str, date, datetime]]) -> WeekInfo:
    """Week label, year and parity for an ISO date/datetime string."""
    if not value:
        return WeekInfo(None, None, None)

    if isinstance(value, str):
        try:
            parsed: Union[date, datetime] = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return WeekInfo(None, None, None)
    else:
        parsed = value

    if isinstance(parsed, datetime) and parsed.tzinfo is not None:
        local_date = get_operational_date(parsed)
    else:
        local_date = _as_date(parsed)

    year, week = get_custom_week(local_date)
    return WeekInfo(label=week, year=year, parity=_parity_of(local_date))


def get_start_of_week_string(reference: Optional[date] = None) -> str:
    """Monday of the week containing `reference`, as YYYY-MM-DD."""
    d = reference or date.today()
    return (d - timedelta(days=d.weekday())).isoformat()
