# utils/permissions.py
from typing import Callable, Dict, FrozenSet, Iterable

from fastapi import Depends

from models.users import User, UserRole
from utils.errors import ForbiddenError
from utils.tokenJWT import get_current_user

ANY_ROLE: FrozenSet[UserRole] = frozenset(UserRole)
ADMIN_ONLY: FrozenSet[UserRole] = frozenset({UserRole.ADMIN})
STORE_OWNER_ONLY: FrozenSet[UserRole] = frozenset({UserRole.STORE_OWNER})

# Operation name -> roles allowed to invoke it.
# Object-level ownership (e.g. editing one's own rating) is checked by the services.
PERMISSIONS: Dict[str, FrozenSet[UserRole]] = {
    "auth:profile": ANY_ROLE,
    "auth:change-password": ANY_ROLE,

    "users:list": ADMIN_ONLY,
    "users:create": ADMIN_ONLY,
    "users:read": ANY_ROLE,
    "users:update": ADMIN_ONLY,
    "users:delete": ADMIN_ONLY,
    "users:stats": ADMIN_ONLY,

    "stores:list": ANY_ROLE,
    "stores:create": ADMIN_ONLY,
    "stores:mine": STORE_OWNER_ONLY,
    "stores:read": ANY_ROLE,
    "stores:update": ADMIN_ONLY,
    "stores:delete": ADMIN_ONLY,

    "ratings:create": ANY_ROLE,
    "ratings:list": ADMIN_ONLY,
    "ratings:mine": ANY_ROLE,
    "ratings:by-store": ANY_ROLE,
    "ratings:own-for-store": ANY_ROLE,
    "ratings:read": ANY_ROLE,
    "ratings:update": ANY_ROLE,
    "ratings:delete": ANY_ROLE,

    "logs:list": ADMIN_ONLY,
}


def is_allowed(role: UserRole, required_roles: Iterable[UserRole]) -> bool:
    return UserRole(role) in set(required_roles)


def authorize(role: UserRole, operation: str) -> None:
    if not is_allowed(role, PERMISSIONS[operation]):
        raise ForbiddenError("Forbidden")


# Dependency factory: authenticate, then check the caller's role for one operation
def permission_required(operation: str) -> Callable[..., User]:
    if operation not in PERMISSIONS:
        raise KeyError(f"Unknown operation: {operation}")

    def _checker(current_user: User = Depends(get_current_user)) -> User:
        authorize(current_user.role, operation)
        return current_user
    return _checker
