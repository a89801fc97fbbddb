# backend/routes/users.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User, UserRole
from schemas import user as schemas
from schemas.common import MessageResponse
from services import users as users_service
from utils.audit import write_log
from utils.errors import ValidationFailedError
from utils.permissions import permission_required

router = APIRouter(prefix="/users", tags=["Users"])

UserSortField = Literal["id", "name", "email", "address", "role", "createdAt", "updatedAt"]


# Retrieve a list of users with filtering and sorting (Admin only)
@router.get("", response_model=List[schemas.UserListItem])
def list_users(
    name: Optional[str] = Query(None, description="Substring of the name"),
    email: Optional[str] = Query(None, description="Substring of the e-mail"),
    address: Optional[str] = Query(None, description="Substring of the address"),
    role: Optional[UserRole] = Query(None, description="Exact role"),
    sort_by: UserSortField = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("users:list")),
):
    return users_service.list_users(
        db, name=name, email=email, address=address, role=role,
        sort_by=sort_by, sort_order=sort_order,
    )


# Create an account with any role (Admin only)
@router.post("", response_model=schemas.UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: schemas.UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("users:create")),
):
    user = users_service.create_user(db, payload, role=payload.role)
    write_log(db, user_id=current_user.id, action="USER_CREATE", resource="users",
              request=request, meta={"target_id": user.id, "role": user.role.value})
    return user


# Totals for the admin dashboard
@router.get("/dashboard-stats", response_model=schemas.DashboardStats)
def dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("users:stats")),
):
    return users_service.dashboard_stats(db)


@router.get("/{user_id}", response_model=schemas.UserDetail)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("users:read")),
):
    # Owned stores and ratings are only disclosed to the user and to admins
    include_relations = current_user.role == UserRole.ADMIN or current_user.id == user_id
    return users_service.get_user(db, user_id, include_relations=include_relations)


# Partial update (Admin only)
@router.patch("/{user_id}", response_model=schemas.UserOut)
def update_user(
    user_id: str,
    payload: schemas.UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("users:update")),
):
    user = users_service.update_user(db, user_id, payload)
    write_log(db, user_id=current_user.id, action="USER_UPDATE", resource="users", request=request,
              meta={"target_id": user_id, "fields": sorted(payload.model_dump(exclude_unset=True))})
    return user


# Delete a user account (Admin only)
@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("users:delete")),
):
    if user_id == current_user.id:
        raise ValidationFailedError("userId", "You cannot delete your own account")
    users_service.delete_user(db, user_id)
    write_log(db, user_id=current_user.id, action="USER_DELETE", resource="users",
              request=request, meta={"target_id": user_id})
    return {"message": "User deleted successfully"}
