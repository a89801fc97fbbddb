from typing import Optional

from pydantic import Field

from schemas.common import ORMBase, Timestamps, UserSummary, StoreSummary


class RatingCreate(ORMBase):
    store_id: str
    rating_value: int = Field(ge=1, le=5, strict=True)


class RatingUpdate(ORMBase):
    rating_value: int = Field(ge=1, le=5, strict=True)


# Rating with optional author and store summaries
class RatingOut(Timestamps):
    id: str
    rating_value: int
    user_id: str
    store_id: str
    user: Optional[UserSummary] = None
    store: Optional[StoreSummary] = None
