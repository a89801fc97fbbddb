from typing import List, Optional

from pydantic import Field

from schemas.common import ORMBase, Timestamps, OwnerSummary
from schemas.rating import RatingOut


# Schema for creating a new store (Admin only)
class StoreCreate(ORMBase):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(max_length=400)
    owner_id: str


# Schema for PATCH requests - all fields optional
class StoreUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = Field(None, max_length=400)
    owner_id: Optional[str] = None


class StoreOut(Timestamps):
    id: str
    name: str
    address: str
    owner_id: str
    owner: Optional[OwnerSummary] = None
    rating_count: int = 0
    average_rating: Optional[float] = None


# Store detail including every rating with its author
class StoreDetail(StoreOut):
    ratings: List[RatingOut] = []


class AverageRatingOut(ORMBase):
    average_rating: Optional[float] = None
    total_ratings: int
