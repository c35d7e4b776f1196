from typing import Optional, Tuple

from hotel_core.models.users import UserRole

ADMIN_ROLES = {UserRole.ADMIN, UserRole.SUPERUSER}


def get_caller(event) -> Tuple[str, Optional[UserRole]]:
    """Pull user id and role from the request authorizer context.

    Raises KeyError when the authorizer did not run.
    """
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    user_id = authorizer["user_id"]
    role_raw = authorizer.get("role")
    role = None
    if role_raw:
        try:
            role = UserRole(role_raw.lower())
        except ValueError:
            role = None
    return user_id, role


def is_admin(role: Optional[UserRole]) -> bool:
    return role in ADMIN_ROLES
