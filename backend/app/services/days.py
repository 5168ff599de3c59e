"""Weekday parsing and the operational day.

Property rows carry free-text weekday fields ("Mon, Thurs", "tuesday",
"WED/FRI"). These helpers map them to day indexes (Sunday=0 .. Saturday=6)
so a job can be matched against the day being operated.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from app.core.config import get_settings

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

DAY_ALIASES: dict[str, int] = {
    "sun": 0,
    "sunday": 0,
    "mon": 1,
    "monday": 1,
    "tue": 2,
    "tues": 2,
    "tuesday": 2,
    "wed": 3,
    "weds": 3,
    "wednesday": 3,
    "thu": 4,
    "thur": 4,
    "thurs": 4,
    "thursday": 4,
    "fri": 5,
    "friday": 5,
    "sat": 6,
    "saturday": 6,
}

_NON_LETTERS = re.compile(r"[^a-z]+")


def tokens_for(value: Optional[str]) -> list[str]:
    """Lower-case and split on anything that is not a letter."""
    return [token for token in _NON_LETTERS.split((value or "").lower()) if token]


def parse_day_index(value: Optional[str]) -> Optional[int]:
    """Return the index of the first recognised day in `value`."""
    for token in tokens_for(value):
        idx = DAY_ALIASES.get(token)
        if idx is not None:
            return idx
    return None


def matches_day(value: Optional[str], day_index: int) -> bool:
    """True if any day named in `value` is `day_index`."""
    return any(DAY_ALIASES.get(token) == day_index for token in tokens_for(value))


def extract_day_names(value: Optional[str]) -> list[str]:
    """Distinct full day names mentioned in `value`, Sunday first."""
    indexes = {DAY_ALIASES[token] for token in tokens_for(value) if token in DAY_ALIASES}
    return [DAY_NAMES[idx] for idx in sorted(indexes)]


def sunday_index(d: date) -> int:
    """Weekday index with Sunday=0."""
    return (d.weekday() + 1) % 7


@dataclass(frozen=True)
class OperationalDay:
    """The calendar day crews are working, in the operational timezone."""

    date: date
    day_index: int
    day_name: str

    @property
    def iso_date(self) -> str:
        return self.date.isoformat()


def get_operational_date(now: Optional[datetime] = None) -> date:
    """Current date in the operational timezone.

    Naive datetimes are treated as UTC.
    """
    tz = ZoneInfo(get_settings().operational_timezone)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz).date()


def get_operational_day_info(now: Optional[datetime] = None) -> OperationalDay:
    today = get_operational_date(now)
    idx = sunday_index(today)
    return OperationalDay(date=today, day_index=idx, day_name=DAY_NAMES[idx])


def get_job_generation_day_info(now: Optional[datetime] = None) -> OperationalDay:
    """Operational day, unless DEV_DAY_OVERRIDE names a weekday.

    The override only replaces the weekday; the date stays the real
    operational date.
    """
    operational = get_operational_day_info(now)
    override_index = parse_day_index(get_settings().dev_day_override)
    if override_index is None:
        return operational
    return OperationalDay(
        date=operational.date,
        day_index=override_index,
        day_name=DAY_NAMES[override_index],
    )
