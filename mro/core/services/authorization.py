"""Privilege to permission policy for company users."""


class Permission:
    """Permission names checked by the API layer."""

    STOCK_VIEW = "stock:view"
    STOCK_CREATE = "stock:create"
    STOCK_CONSUME = "stock:consume"

    WHEEL_VIEW = "wheel:view"
    WHEEL_CREATE = "wheel:create"
    WHEEL_UPDATE = "wheel:update"
    WHEEL_ROTATE = "wheel:rotate"

    ACTIVITY_VIEW = "activity:view"


ALL_PERMISSIONS: frozenset[str] = frozenset(
    value
    for name, value in vars(Permission).items()
    if not name.startswith("_") and isinstance(value, str)
)

VIEW_PERMISSIONS: frozenset[str] = frozenset(
    {Permission.STOCK_VIEW, Permission.WHEEL_VIEW}
)

USER_PERMISSIONS: frozenset[str] = VIEW_PERMISSIONS | {
    Permission.STOCK_CREATE,
    Permission.STOCK_CONSUME,
    Permission.WHEEL_CREATE,
    Permission.WHEEL_UPDATE,
    Permission.WHEEL_ROTATE,
}

# Privileges not listed here are treated as regular users
PRIVILEGE_PERMISSIONS: dict[str, frozenset[str]] = {
    "admin": ALL_PERMISSIONS,
    "reader-only": VIEW_PERMISSIONS,
    "user": USER_PERMISSIONS,
}


def get_privilege_permissions(privilege: str | None) -> frozenset[str]:
    """Get permissions for a privilege."""
    return PRIVILEGE_PERMISSIONS.get(privilege or "user", USER_PERMISSIONS)


def missing_permissions(privilege: str | None, required: tuple[str, ...] | list[str]) -> list[str]:
    """Return the required permissions the privilege does not grant."""
    granted = get_privilege_permissions(privilege)
    return sorted(set(required) - granted)
