# services/ratings.py
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from models.store import Store
from models.rating import Rating
from schemas.common import UserSummary, StoreSummary
from schemas.rating import RatingOut
from utils.errors import ConflictError, NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

ALREADY_RATED = "User has already rated this store"
# Same message whether the rating is missing or belongs to someone else
RATING_NOT_FOUND = "Rating not found"


# Map Rating model to RatingOut, embedding the requested summaries
def rating_to_out(rating: Rating, with_user: bool = True, with_store: bool = True) -> RatingOut:
    return RatingOut(
        id=rating.id,
        rating_value=rating.rating_value,
        user_id=rating.user_id,
        store_id=rating.store_id,
        user=UserSummary.model_validate(rating.user) if with_user and rating.user else None,
        store=StoreSummary.model_validate(rating.store) if with_store and rating.store else None,
        created_at=rating.created_at,
        updated_at=rating.updated_at,
    )


def _check_value(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
        raise ValidationFailedError("ratingValue", f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}")
    return value


def _find_rating(db: Session, user_id: str, store_id: str) -> Optional[Rating]:
    return db.query(Rating).filter(Rating.user_id == user_id, Rating.store_id == store_id).first()


def _get_owned_rating(db: Session, rating_id: str, user_id: str) -> Rating:
    rating = db.query(Rating).filter(Rating.id == rating_id).first()
    # Other users' ratings are reported as missing
    if not rating or rating.user_id != user_id:
        raise NotFoundError(RATING_NOT_FOUND)
    return rating


def create_rating(db: Session, user_id: str, store_id: str, value: int) -> RatingOut:
    _check_value(value)

    store = db.query(Store).filter(Store.id == store_id).first()
    if not store:
        raise NotFoundError("Store not found")

    # Fast path only; the unique constraint settles concurrent submissions
    if _find_rating(db, user_id, store_id):
        raise ConflictError(ALREADY_RATED)

    rating = Rating(user_id=user_id, store_id=store_id, rating_value=value)
    db.add(rating)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Duplicate rating for user %s and store %s rejected by constraint", user_id, store_id)
        raise ConflictError(ALREADY_RATED)
    db.refresh(rating)

    return rating_to_out(rating)


def list_ratings(db: Session) -> List[RatingOut]:
    ratings = (
        db.query(Rating)
        .options(joinedload(Rating.user), joinedload(Rating.store))
        .order_by(Rating.created_at.desc())
        .all()
    )
    return [rating_to_out(r) for r in ratings]


def get_rating(db: Session, rating_id: str) -> RatingOut:
    rating = (
        db.query(Rating)
        .options(joinedload(Rating.user), joinedload(Rating.store))
        .filter(Rating.id == rating_id)
        .first()
    )
    if not rating:
        raise NotFoundError(RATING_NOT_FOUND)
    return rating_to_out(rating)


def list_ratings_by_user(db: Session, user_id: str) -> List[RatingOut]:
    ratings = (
        db.query(Rating)
        .options(joinedload(Rating.store))
        .filter(Rating.user_id == user_id)
        .order_by(Rating.created_at.desc())
        .all()
    )
    return [rating_to_out(r, with_user=False) for r in ratings]


def list_ratings_by_store(db: Session, store_id: str) -> List[RatingOut]:
    ratings = (
        db.query(Rating)
        .options(joinedload(Rating.user))
        .filter(Rating.store_id == store_id)
        .order_by(Rating.created_at.desc())
        .all()
    )
    return [rating_to_out(r, with_store=False) for r in ratings]


# None (not an error) when the user has not rated the store yet
def get_rating_for_user_and_store(db: Session, user_id: str, store_id: str) -> Optional[RatingOut]:
    rating = _find_rating(db, user_id, store_id)
    if rating is None:
        return None
    return rating_to_out(rating, with_user=False, with_store=False)


def update_rating(db: Session, rating_id: str, user_id: str, value: int) -> RatingOut:
    _check_value(value)
    rating = _get_owned_rating(db, rating_id, user_id)

    rating.rating_value = value
    db.commit()
    db.refresh(rating)
    return rating_to_out(rating)


def delete_rating(db: Session, rating_id: str, user_id: str) -> None:
    rating = _get_owned_rating(db, rating_id, user_id)
    db.delete(rating)
    db.commit()
