"""
Wheel rotation scheduling.

Pure calendar arithmetic for due dates plus the read-time views built on it
(upcoming/overdue buckets and window counts). Nothing here runs on a timer;
everything is evaluated against the `today` the caller passes in.

Month and year offsets keep the day of month and clamp to the last day of a
shorter target month: Jan 31 + 1 month is Feb 29 in a leap year and Feb 28
otherwise.
"""

import calendar
from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from mro.core.entities.wheel_rotation import RotationFrequency, WheelRotationAsset
from mro.core.exceptions import InvalidRotationError

FULL_CIRCLE = 360

# Frequency -> (days, months); unknown frequencies fall back to one month
_FREQUENCY_OFFSETS: dict[str, tuple[int, int]] = {
    RotationFrequency.WEEKLY.value: (7, 0),
    RotationFrequency.MONTHLY.value: (0, 1),
    RotationFrequency.QUARTERLY.value: (0, 3),
    RotationFrequency.BIANNUALLY.value: (0, 6),
    RotationFrequency.ANNUALLY.value: (0, 12),
}
_DEFAULT_OFFSET = (0, 1)


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(UTC).date()


def validate_position(value: Any) -> int:
    """Return a wheel position as whole degrees in [0, 360)."""
    if value is None or isinstance(value, bool):
        raise InvalidRotationError(value)
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidRotationError(value) from None
    if not number.is_finite() or number != number.to_integral_value():
        raise InvalidRotationError(value)
    if not 0 <= number < FULL_CIRCLE:
        raise InvalidRotationError(value)
    return int(number)


def add_months(start: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping the day of month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


def add_years(start: date, years: int) -> date:
    """Shift a date by whole years (Feb 29 clamps to Feb 28)."""
    return add_months(start, years * 12)


def calculate_next_rotation_date(
    from_date: date, frequency: RotationFrequency | str
) -> date:
    """Return the due date one rotation interval after `from_date`."""
    key = frequency.value if isinstance(frequency, RotationFrequency) else str(frequency)
    days, months = _FREQUENCY_OFFSETS.get(key, _DEFAULT_OFFSET)
    if days:
        return from_date + timedelta(days=days)
    return add_months(from_date, months)


class Urgency(str, Enum):
    """How soon a scheduled rotation needs attention."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class ScheduledRotation:
    """An asset placed in an urgency bucket."""

    asset: WheelRotationAsset
    urgency: Urgency
    days_overdue: int | None = None


@dataclass
class UpcomingRotations:
    """Active assets bucketed by how soon they are due."""

    period_from: date
    period_to: date
    days: int
    overdue: list[ScheduledRotation] = field(default_factory=list)
    today: list[ScheduledRotation] = field(default_factory=list)
    this_week: list[ScheduledRotation] = field(default_factory=list)
    later: list[ScheduledRotation] = field(default_factory=list)
    by_frequency: dict[str, int] = field(default_factory=dict)
    by_station: dict[str, int] = field(default_factory=dict)

    @property
    def total_overdue(self) -> int:
        return len(self.overdue)

    @property
    def total_upcoming(self) -> int:
        return len(self.today) + len(self.this_week) + len(self.later)


def categorize_upcoming(
    assets: list[WheelRotationAsset], today: date, days: int
) -> UpcomingRotations:
    """
    Bucket active assets by due date relative to `today`.

    overdue: due before today. today: due today. this_week: due after today
    and before today + 7. later: due on or after today + 7 and no later than
    today + days. Inactive assets and assets due beyond the window are
    ignored.
    """
    window_end = today + timedelta(days=days)
    week_end = today + timedelta(days=7)
    result = UpcomingRotations(period_from=today, period_to=window_end, days=days)

    upcoming: list[WheelRotationAsset] = []
    for asset in sorted(assets, key=lambda a: a.next_rotation_due):
        if not asset.is_active:
            continue
        due = asset.next_rotation_due
        if due < today:
            result.overdue.append(
                ScheduledRotation(
                    asset=asset,
                    urgency=Urgency.CRITICAL,
                    days_overdue=(today - due).days,
                )
            )
        elif due > window_end:
            continue
        else:
            upcoming.append(asset)
            if due == today:
                result.today.append(ScheduledRotation(asset=asset, urgency=Urgency.HIGH))
            elif due < week_end:
                result.this_week.append(ScheduledRotation(asset=asset, urgency=Urgency.MEDIUM))
            else:
                result.later.append(ScheduledRotation(asset=asset, urgency=Urgency.LOW))

    result.by_frequency = dict(Counter(a.rotation_frequency for a in upcoming))
    result.by_station = dict(Counter(a.station for a in upcoming))
    return result


@dataclass
class RotationWindowCounts:
    """Number of active assets falling due within rolling windows."""

    today: int = 0
    this_week: int = 0
    this_month: int = 0
    this_quarter: int = 0
    this_year: int = 0
    overdue: int = 0
    total_active: int = 0
    frequency_breakdown: dict[str, int] = field(default_factory=dict)


def count_rotation_windows(
    assets: list[WheelRotationAsset], today: date
) -> RotationWindowCounts:
    """Count active assets due in each window starting today (end-exclusive)."""
    active = [a for a in assets if a.is_active]
    windows = {
        "today": today + timedelta(days=1),
        "this_week": today + timedelta(days=7),
        "this_month": add_months(today, 1),
        "this_quarter": add_months(today, 3),
        "this_year": add_years(today, 1),
    }

    counts = RotationWindowCounts(total_active=len(active))
    for asset in active:
        due = asset.next_rotation_due
        if due < today:
            counts.overdue += 1
            continue
        for name, end in windows.items():
            if due < end:
                setattr(counts, name, getattr(counts, name) + 1)

    counts.frequency_breakdown = dict(Counter(a.rotation_frequency for a in active))
    return counts
