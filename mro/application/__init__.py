"""
Application layer - use cases, DTOs and the activity side channel.

Use cases are the only entry point for API handlers. Each takes the
caller's TenantContext and scopes every store call to its company.
"""

from mro.application.activity_dispatcher import (
    ActivityDispatcher,
    RequestOrigin,
    get_activity_dispatcher,
    reset_activity_dispatcher,
)

__all__ = [
    "ActivityDispatcher",
    "RequestOrigin",
    "get_activity_dispatcher",
    "reset_activity_dispatcher",
]
