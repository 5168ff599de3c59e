"""Bin rotation schedule.

Each property stores a frequency ("Weekly"/"Fortnightly") and a flip flag
per bin colour. Fortnightly bins alternate on week parity counted from a
fixed reference instant; the flip flag selects which parity.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional

from app.models.enums import BinColor

WEEK = timedelta(days=7)
REFERENCE_START = datetime(2024, 8, 4, 6, 0, 0, tzinfo=timezone.utc)

BIN_COLORS = (BinColor.RED, BinColor.YELLOW, BinColor.GREEN)

BIN_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Garbage", ("garbage", "landfill", "general", "trash", "rubbish", "red")),
    ("Recycling", ("recycling", "commingled", "co-mingled", "yellow")),
    ("Compost", ("compost", "organic", "food", "green")),
)


def _normalise(value: Optional[str]) -> str:
    return value.strip().lower() if value else ""


def _utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def weeks_since_reference(now: Optional[datetime] = None) -> int:
    """Whole weeks elapsed since REFERENCE_START (floored, may be negative)."""
    return (_utc(now) - REFERENCE_START) // WEEK


def is_bin_scheduled_this_week(
    frequency: Optional[str],
    flip: Optional[str],
    now: Optional[datetime] = None,
) -> bool:
    """Whether a bin goes out in the week containing `now`.

    Weekly bins always match. Fortnightly bins without a flip match on odd
    weeks since the reference; flipped ones match on even weeks. Any other
    frequency never matches.
    """
    frequency_value = _normalise(frequency)
    if not frequency_value:
        return False
    if frequency_value == "weekly":
        return True
    if frequency_value != "fortnightly":
        return False

    is_even_week = weeks_since_reference(now) % 2 == 0
    is_flipped = _normalise(flip) == "yes"
    return is_even_week if is_flipped else not is_even_week


@dataclass
class BinSchedule:
    status: dict[str, bool] = field(default_factory=dict)
    active_colors: list[str] = field(default_factory=list)


def get_bin_schedule(selection: Mapping[str, Any], now: Optional[datetime] = None) -> BinSchedule:
    """Evaluate red/yellow/green bins from `{color}_freq`/`{color}_flip` keys."""
    status = {
        color.value: is_bin_scheduled_this_week(
            selection.get(f"{color.value}_freq"),
            selection.get(f"{color.value}_flip"),
            now,
        )
        for color in BIN_COLORS
    }
    active = [color.value.capitalize() for color in BIN_COLORS if status[color.value]]
    return BinSchedule(status=status, active_colors=active)


def format_bin_label(raw_value: Any) -> Optional[str]:
    """Map a free-text bin name to Garbage/Recycling/Compost.

    Unrecognised names are returned title-cased.
    """
    if not isinstance(raw_value, str):
        return None
    trimmed = raw_value.strip()
    if not trimmed:
        return None
    lower = trimmed.lower()
    for label, keywords in BIN_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return label
    return trimmed.title()


def normalise_bin_list(value: Any) -> list[str]:
    """Normalise a comma string or list of bin names, keeping first-seen order."""
    if not value:
        return []
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return []

    labels: list[str] = []
    for item in items:
        label = format_bin_label(str(item))
        if label and label not in labels:
            labels.append(label)
    return labels
