from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel

from models.users import UserRole


# Base configuration: ORM compatibility and camelCase JSON keys
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


# Minimal user view embedded in ratings
class UserSummary(ORMBase):
    id: str
    name: str
    email: EmailStr


# Owner view embedded in stores
class OwnerSummary(UserSummary):
    address: str
    role: UserRole


# Minimal store view embedded in ratings
class StoreSummary(ORMBase):
    id: str
    name: str
    address: str


class MessageResponse(BaseModel):
    message: str


class Timestamps(ORMBase):
    created_at: datetime
    updated_at: datetime
