# services/stores.py
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from models.users import User, UserRole
from models.store import Store
from models.rating import Rating
from schemas.common import OwnerSummary
from schemas.store import StoreCreate, StoreUpdate, StoreOut, StoreDetail, AverageRatingOut
from services.ratings import rating_to_out
from utils.errors import NotFoundError

logger = logging.getLogger(__name__)

STORE_SORT_FIELDS = {
    "id": Store.id,
    "name": Store.name,
    "address": Store.address,
    "ownerId": Store.owner_id,
    "createdAt": Store.created_at,
    "updatedAt": Store.updated_at,
}


def _round_average(value) -> Optional[float]:
    return round(float(value), 2) if value is not None else None


# Per-store rating count and average, computed at read time
def _rating_stats(db: Session):
    return (
        db.query(
            Rating.store_id.label("store_id"),
            func.count(Rating.id).label("rating_count"),
            func.avg(Rating.rating_value).label("average_rating"),
        )
        .group_by(Rating.store_id)
        .subquery()
    )


def _store_to_out(store: Store, rating_count, average, with_owner: bool = True) -> StoreOut:
    return StoreOut(
        id=store.id,
        name=store.name,
        address=store.address,
        owner_id=store.owner_id,
        owner=OwnerSummary.model_validate(store.owner) if with_owner and store.owner else None,
        rating_count=rating_count or 0,
        average_rating=_round_average(average),
        created_at=store.created_at,
        updated_at=store.updated_at,
    )


def _get_store_or_404(db: Session, store_id: str) -> Store:
    store = db.query(Store).filter(Store.id == store_id).first()
    if not store:
        raise NotFoundError("Store not found")
    return store


def _check_owner(db: Session, owner_id: str) -> User:
    owner = db.query(User).filter(User.id == owner_id).first()
    if not owner:
        raise NotFoundError("Owner not found")
    if owner.role != UserRole.STORE_OWNER:
        # Allowed, but usually a mistake in the admin panel
        logger.warning("Store assigned to user %s with role %s", owner.id, owner.role.value)
    return owner


def create_store(db: Session, data: StoreCreate) -> StoreOut:
    _check_owner(db, data.owner_id)

    store = Store(name=data.name, address=data.address, owner_id=data.owner_id)
    db.add(store)
    db.commit()
    db.refresh(store)

    logger.info("Created store %s for owner %s", store.id, store.owner_id)
    return _store_to_out(store, 0, None)


def list_stores(
    db: Session,
    name: Optional[str] = None,
    address: Optional[str] = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> List[StoreOut]:
    stats = _rating_stats(db)
    query = (
        db.query(Store, stats.c.rating_count, stats.c.average_rating)
        .outerjoin(stats, stats.c.store_id == Store.id)
        .options(joinedload(Store.owner))
    )

    if name:
        query = query.filter(Store.name.ilike(f"%{name}%"))
    if address:
        query = query.filter(Store.address.ilike(f"%{address}%"))

    col = STORE_SORT_FIELDS.get(sort_by, Store.created_at)
    query = query.order_by(col.asc() if sort_order == "asc" else col.desc())

    return [_store_to_out(store, count, avg) for store, count, avg in query.all()]


def list_stores_by_owner(db: Session, owner_id: str) -> List[StoreOut]:
    stats = _rating_stats(db)
    rows = (
        db.query(Store, stats.c.rating_count, stats.c.average_rating)
        .outerjoin(stats, stats.c.store_id == Store.id)
        .filter(Store.owner_id == owner_id)
        .order_by(Store.created_at.desc())
        .all()
    )
    return [_store_to_out(store, count, avg, with_owner=False) for store, count, avg in rows]


def get_store(db: Session, store_id: str) -> StoreDetail:
    store = _get_store_or_404(db, store_id)

    ratings = (
        db.query(Rating)
        .options(joinedload(Rating.user))
        .filter(Rating.store_id == store.id)
        .order_by(Rating.created_at.desc())
        .all()
    )
    values = [r.rating_value for r in ratings]
    average = sum(values) / len(values) if values else None

    out = _store_to_out(store, len(values), average)
    return StoreDetail(
        **out.model_dump(),
        ratings=[rating_to_out(r, with_user=True, with_store=False) for r in ratings],
    )


def get_average_rating(db: Session, store_id: str) -> AverageRatingOut:
    store = _get_store_or_404(db, store_id)
    count, average = (
        db.query(func.count(Rating.id), func.avg(Rating.rating_value))
        .filter(Rating.store_id == store.id)
        .one()
    )
    return AverageRatingOut(average_rating=_round_average(average), total_ratings=count or 0)


def update_store(db: Session, store_id: str, data: StoreUpdate) -> StoreOut:
    store = _get_store_or_404(db, store_id)

    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if "owner_id" in changes:
        _check_owner(db, changes["owner_id"])

    for field, value in changes.items():
        setattr(store, field, value)
    db.commit()
    db.refresh(store)

    count, average = (
        db.query(func.count(Rating.id), func.avg(Rating.rating_value))
        .filter(Rating.store_id == store.id)
        .one()
    )
    return _store_to_out(store, count, average)


def delete_store(db: Session, store_id: str) -> None:
    store = _get_store_or_404(db, store_id)
    # Ratings go with the store
    db.delete(store)
    db.commit()
    logger.info("Deleted store %s", store_id)
