# services/users.py
import logging
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from models.users import User, UserRole
from models.store import Store
from models.rating import Rating
from schemas.user import (
    SignupRequest, UserUpdate, UserOut, UserListItem, UserDetail,
    OwnedStoreOut, UserRatingOut, DashboardStats,
)
from schemas.common import StoreSummary
from utils.errors import ConflictError, NotFoundError, ValidationFailedError
from utils.hashing import get_password_hash, verify_password

logger = logging.getLogger(__name__)

# Sortable columns, keyed by their JSON name
USER_SORT_FIELDS = {
    "id": User.id,
    "name": User.name,
    "email": User.email,
    "address": User.address,
    "role": User.role,
    "createdAt": User.created_at,
    "updatedAt": User.updated_at,
}

EMAIL_TAKEN = "User with this email already exists"


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def _commit_or_conflict(db: Session, message: str):
    # The unique index decides when two writers race past the pre-check
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(message)


def create_user(db: Session, data: SignupRequest, role: UserRole = UserRole.NORMAL_USER) -> UserOut:
    if get_user_by_email(db, data.email):
        raise ConflictError(EMAIL_TAKEN)

    user = User(
        name=data.name,
        email=data.email,
        address=data.address,
        password_hash=get_password_hash(data.password),
        role=role,
    )
    db.add(user)
    _commit_or_conflict(db, EMAIL_TAKEN)
    db.refresh(user)

    logger.info("Created user %s with role %s", user.id, user.role.value)
    return UserOut.model_validate(user)


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def change_password(db: Session, user: User, old_password: str, new_password: str) -> None:
    if not verify_password(old_password, user.password_hash):
        raise ValidationFailedError("oldPassword", "Current password is incorrect")
    user.password_hash = get_password_hash(new_password)
    db.commit()


def list_users(
    db: Session,
    name: Optional[str] = None,
    email: Optional[str] = None,
    address: Optional[str] = None,
    role: Optional[UserRole] = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> List[UserListItem]:
    store_count = (
        select(func.count(Store.id)).where(Store.owner_id == User.id).correlate(User).scalar_subquery()
    )
    rating_count = (
        select(func.count(Rating.id)).where(Rating.user_id == User.id).correlate(User).scalar_subquery()
    )
    query = db.query(User, store_count.label("store_count"), rating_count.label("rating_count"))

    # Case-insensitive substring filters
    if name:
        query = query.filter(User.name.ilike(f"%{name}%"))
    if email:
        query = query.filter(User.email.ilike(f"%{email}%"))
    if address:
        query = query.filter(User.address.ilike(f"%{address}%"))
    if role:
        query = query.filter(User.role == role)

    col = USER_SORT_FIELDS.get(sort_by, User.created_at)
    query = query.order_by(col.asc() if sort_order == "asc" else col.desc())

    items = []
    for user, stores, ratings in query.all():
        item = UserListItem.model_validate(user)
        item.store_count = stores or 0
        item.rating_count = ratings or 0
        items.append(item)
    return items


def get_user(db: Session, user_id: str, include_relations: bool = False) -> UserDetail:
    user = _get_user_or_404(db, user_id)
    detail = UserDetail(**UserOut.model_validate(user).model_dump())
    if not include_relations:
        return detail

    counts = dict(
        db.query(Rating.store_id, func.count(Rating.id))
        .join(Store, Store.id == Rating.store_id)
        .filter(Store.owner_id == user.id)
        .group_by(Rating.store_id)
        .all()
    )
    detail.owned_stores = [
        OwnedStoreOut(id=s.id, name=s.name, address=s.address, rating_count=counts.get(s.id, 0))
        for s in user.owned_stores
    ]

    ratings = (
        db.query(Rating)
        .options(selectinload(Rating.store))
        .filter(Rating.user_id == user.id)
        .order_by(Rating.created_at.desc())
        .all()
    )
    detail.ratings = [
        UserRatingOut(
            id=r.id,
            rating_value=r.rating_value,
            created_at=r.created_at,
            store=StoreSummary.model_validate(r.store),
        )
        for r in ratings
    ]
    return detail


def update_user(db: Session, user_id: str, data: UserUpdate) -> UserOut:
    user = _get_user_or_404(db, user_id)

    # Explicit nulls in a PATCH body leave the field unchanged
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

    if "email" in changes and changes["email"] != user.email:
        other = get_user_by_email(db, changes["email"])
        if other and other.id != user.id:
            raise ConflictError(EMAIL_TAKEN)

    for field, value in changes.items():
        setattr(user, field, value)

    _commit_or_conflict(db, EMAIL_TAKEN)
    db.refresh(user)
    return UserOut.model_validate(user)


def delete_user(db: Session, user_id: str) -> None:
    user = _get_user_or_404(db, user_id)
    # ORM cascade removes owned stores (with their ratings) and the user's ratings
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s", user_id)


def dashboard_stats(db: Session) -> DashboardStats:
    return DashboardStats(
        total_users=db.query(func.count(User.id)).scalar() or 0,
        total_stores=db.query(func.count(Store.id)).scalar() or 0,
        total_ratings=db.query(func.count(Rating.id)).scalar() or 0,
    )


def ensure_admin(db: Session, email: str, password: str, name: str) -> Optional[UserOut]:
    """Create an ADMIN account for ``email`` unless one already exists."""
    if get_user_by_email(db, email):
        return None
    try:
        data = SignupRequest(name=name, email=email, address="", password=password)
    except ValidationError as exc:
        problems = "; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors())
        logger.error("Default administrator %s not created, invalid settings: %s", email, problems)
        return None
    return create_user(db, data, role=UserRole.ADMIN)
