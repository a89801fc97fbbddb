# backend/routes/ratings.py
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas import rating as schemas
from schemas.common import MessageResponse
from services import ratings as ratings_service
from utils.permissions import permission_required

router = APIRouter(prefix="/ratings", tags=["Ratings"])


# Submit a first rating for a store
@router.post("", response_model=schemas.RatingOut, status_code=status.HTTP_201_CREATED)
def create_rating(
    payload: schemas.RatingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("ratings:create")),
):
    return ratings_service.create_rating(db, current_user.id, payload.store_id, payload.rating_value)


# All ratings (Admin only)
@router.get("", response_model=List[schemas.RatingOut])
def list_ratings(
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("ratings:list")),
):
    return ratings_service.list_ratings(db)


@router.get("/my-ratings", response_model=List[schemas.RatingOut])
def my_ratings(
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("ratings:mine")),
):
    return ratings_service.list_ratings_by_user(db, current_user.id)


@router.get("/store/{store_id}", response_model=List[schemas.RatingOut])
def store_ratings(
    store_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("ratings:by-store")),
):
    return ratings_service.list_ratings_by_store(db, store_id)


# The caller's rating for one store, or null
@router.get("/user-rating/{store_id}", response_model=Optional[schemas.RatingOut])
def user_rating_for_store(
    store_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("ratings:own-for-store")),
):
    return ratings_service.get_rating_for_user_and_store(db, current_user.id, store_id)


@router.get("/{rating_id}", response_model=schemas.RatingOut)
def get_rating(
    rating_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("ratings:read")),
):
    return ratings_service.get_rating(db, rating_id)


# Only the author may change a rating
@router.patch("/{rating_id}", response_model=schemas.RatingOut)
def update_rating(
    rating_id: str,
    payload: schemas.RatingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("ratings:update")),
):
    return ratings_service.update_rating(db, rating_id, current_user.id, payload.rating_value)


@router.delete("/{rating_id}", response_model=MessageResponse)
def delete_rating(
    rating_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("ratings:delete")),
):
    ratings_service.delete_rating(db, rating_id, current_user.id)
    return {"message": "Rating deleted successfully"}
