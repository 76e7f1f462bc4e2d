"""API route modules."""

from mro.api.routes.health import router as health_router
from mro.api.routes.stock_inventory import router as stock_inventory_router
from mro.api.routes.user_activity import router as user_activity_router
from mro.api.routes.wheel_rotation import router as wheel_rotation_router

__all__ = [
    "health_router",
    "stock_inventory_router",
    "wheel_rotation_router",
    "user_activity_router",
]
