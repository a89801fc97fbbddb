import pytest

from models.users import UserRole
from utils.errors import ForbiddenError
from utils.permissions import PERMISSIONS, authorize, is_allowed, permission_required


def test_is_allowed_is_membership():
    assert is_allowed(UserRole.ADMIN, {UserRole.ADMIN})
    assert not is_allowed(UserRole.NORMAL_USER, {UserRole.ADMIN})
    assert is_allowed(UserRole.STORE_OWNER, {UserRole.STORE_OWNER, UserRole.ADMIN})


def test_admin_only_operations():
    for operation in ("users:list", "users:create", "users:update", "users:delete",
                      "users:stats", "stores:create", "stores:update", "stores:delete",
                      "ratings:list", "logs:list"):
        assert PERMISSIONS[operation] == {UserRole.ADMIN}, operation


def test_every_role_may_rate_and_browse():
    for operation in ("ratings:create", "ratings:update", "ratings:delete", "stores:list", "stores:read"):
        assert PERMISSIONS[operation] == set(UserRole), operation


def test_my_stores_is_for_store_owners():
    assert PERMISSIONS["stores:mine"] == {UserRole.STORE_OWNER}


def test_authorize_raises_forbidden():
    authorize(UserRole.ADMIN, "stores:create")
    with pytest.raises(ForbiddenError):
        authorize(UserRole.NORMAL_USER, "stores:create")


def test_unknown_operation_fails_fast():
    with pytest.raises(KeyError):
        permission_required("stores:launch")
