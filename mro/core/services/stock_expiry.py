"""
Stock expiry counts.

An item with an expiry date on or before today is expired; one expiring within
the next 30 days is expiring soon. Items without an expiry date are ignored.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from mro.core.entities.stock import StockItem

EXPIRING_SOON_DAYS = 30


@dataclass(frozen=True)
class ExpiryStatus:
    expired_count: int = 0
    expiring_soon_count: int = 0
    total_with_expiry: int = 0


def count_expiry_status(items: Iterable[StockItem], today: date) -> ExpiryStatus:
    """Count expired and soon-to-expire items relative to `today` (UTC day)."""
    expired = 0
    expiring_soon = 0
    total = 0
    for item in items:
        if item.expire_date is None:
            continue
        total += 1
        days_left = (item.expire_date - today).days
        if days_left <= 0:
            expired += 1
        elif days_left <= EXPIRING_SOON_DAYS:
            expiring_soon += 1
    return ExpiryStatus(
        expired_count=expired,
        expiring_soon_count=expiring_soon,
        total_with_expiry=total,
    )
