"""Pure domain services."""

from mro.core.services.authorization import (
    Permission,
    get_privilege_permissions,
    missing_permissions,
)
from mro.core.services.rotation_schedule import (
    RotationWindowCounts,
    ScheduledRotation,
    UpcomingRotations,
    Urgency,
    add_months,
    add_years,
    calculate_next_rotation_date,
    categorize_upcoming,
    count_rotation_windows,
    utc_today,
    validate_position,
)
from mro.core.services.stock_expiry import ExpiryStatus, count_expiry_status
from mro.core.services.stock_ledger import (
    DailyUsage,
    LedgerReplay,
    UsageStatistics,
    UsageSummary,
    coerce_used_quantity,
    summarize_usage,
    verify_ledger,
)

__all__ = [
    "Permission",
    "get_privilege_permissions",
    "missing_permissions",
    "RotationWindowCounts",
    "ScheduledRotation",
    "UpcomingRotations",
    "Urgency",
    "add_months",
    "add_years",
    "calculate_next_rotation_date",
    "categorize_upcoming",
    "count_rotation_windows",
    "utc_today",
    "validate_position",
    "ExpiryStatus",
    "count_expiry_status",
    "DailyUsage",
    "LedgerReplay",
    "UsageStatistics",
    "UsageSummary",
    "coerce_used_quantity",
    "summarize_usage",
    "verify_ledger",
]
