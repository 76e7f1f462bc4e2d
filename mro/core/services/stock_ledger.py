"""Stock usage ledger rules: quantity validation, history statistics, replay."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from mro.core.entities.stock import StockItem, UsageRecord
from mro.core.exceptions import InvalidQuantityError, LedgerInconsistencyError


def coerce_used_quantity(value: Any) -> int:
    """
    Normalize a requested usage amount to a positive whole number.

    Accepts ints, integral floats and numeric strings. Booleans, fractions,
    zero, negatives and anything non-numeric raise InvalidQuantityError.
    """
    if value is None or isinstance(value, bool):
        raise InvalidQuantityError(value)

    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidQuantityError(value) from None

    if not number.is_finite() or number != number.to_integral_value() or number <= 0:
        raise InvalidQuantityError(value)
    return int(number)


@dataclass
class UsageStatistics:
    total_usage_records: int = 0
    total_quantity_used: int = 0
    current_quantity: int = 0
    last_used_at: datetime | None = None
    last_used_by: str | None = None
    unique_users: int = 0


@dataclass
class DailyUsage:
    date: date
    total_used: int = 0
    record_count: int = 0
    users: list[str] = field(default_factory=list)


@dataclass
class UsageSummary:
    statistics: UsageStatistics
    daily_summary: list[DailyUsage]


def _utc_day(moment: datetime) -> date:
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(UTC).date()


def summarize_usage(item: StockItem, history: list[UsageRecord]) -> UsageSummary:
    """Build usage statistics and a per-day summary (most recent day first)."""
    ordered = sorted(history, key=lambda r: r.used_at, reverse=True)

    stats = UsageStatistics(
        total_usage_records=len(ordered),
        total_quantity_used=sum(r.used_quantity for r in ordered),
        current_quantity=item.quantity,
        last_used_at=ordered[0].used_at if ordered else None,
        last_used_by=ordered[0].used_by_name if ordered else None,
        unique_users=len({r.used_by_name for r in ordered}),
    )

    days: dict[date, DailyUsage] = {}
    for record in ordered:
        day = _utc_day(record.used_at)
        summary = days.setdefault(day, DailyUsage(date=day))
        summary.total_used += record.used_quantity
        summary.record_count += 1
        if record.used_by_name not in summary.users:
            summary.users.append(record.used_by_name)

    return UsageSummary(statistics=stats, daily_summary=list(days.values()))


@dataclass
class LedgerReplay:
    initial_quantity: int
    final_quantity: int
    total_used: int


def verify_ledger(item: StockItem, history: list[UsageRecord]) -> LedgerReplay:
    """
    Replay usage records oldest-first and check they reach the item's quantity.

    Each record's remaining_quantity must equal the previous remaining minus
    its own used_quantity, and the last one must equal item.quantity.
    """
    item_id = item.id or ""
    if not history:
        return LedgerReplay(item.quantity, item.quantity, 0)

    ordered = sorted(history, key=lambda r: (r.used_at, -r.remaining_quantity))
    first = ordered[0]
    initial = first.remaining_quantity + first.used_quantity
    running = initial

    for record in ordered:
        if record.stock_item_id != item_id:
            raise LedgerInconsistencyError(
                item_id, f"record {record.id} belongs to {record.stock_item_id}"
            )
        running -= record.used_quantity
        if record.remaining_quantity != running:
            raise LedgerInconsistencyError(
                item_id,
                f"record {record.id} remaining {record.remaining_quantity}, expected {running}",
            )

    if running != item.quantity:
        raise LedgerInconsistencyError(
            item_id, f"ledger ends at {running}, item holds {item.quantity}"
        )

    return LedgerReplay(
        initial_quantity=initial,
        final_quantity=running,
        total_used=initial - running,
    )
