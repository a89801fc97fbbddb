# backend/routes/stores.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas import store as schemas
from schemas.common import MessageResponse
from services import stores as stores_service
from utils.audit import write_log
from utils.permissions import permission_required

router = APIRouter(prefix="/stores", tags=["Stores"])

StoreSortField = Literal["id", "name", "address", "ownerId", "createdAt", "updatedAt"]


@router.post("", response_model=schemas.StoreOut, status_code=status.HTTP_201_CREATED)
def create_store(
    payload: schemas.StoreCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("stores:create")),
):
    store = stores_service.create_store(db, payload)
    write_log(db, user_id=current_user.id, action="STORE_CREATE", resource="stores",
              request=request, meta={"store_id": store.id, "owner_id": store.owner_id})
    return store


# List stores with filtering and sorting
@router.get("", response_model=List[schemas.StoreOut])
def list_stores(
    name: Optional[str] = Query(None, description="Substring of the store name"),
    address: Optional[str] = Query(None, description="Substring of the address"),
    sort_by: StoreSortField = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("stores:list")),
):
    return stores_service.list_stores(db, name=name, address=address, sort_by=sort_by, sort_order=sort_order)


# Stores owned by the caller (Store Owner only)
@router.get("/my-stores", response_model=List[schemas.StoreOut])
def my_stores(
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("stores:mine")),
):
    return stores_service.list_stores_by_owner(db, current_user.id)


@router.get("/{store_id}/average-rating", response_model=schemas.AverageRatingOut)
def average_rating(
    store_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("stores:read")),
):
    return stores_service.get_average_rating(db, store_id)


@router.get("/{store_id}", response_model=schemas.StoreDetail)
def get_store(
    store_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("stores:read")),
):
    return stores_service.get_store(db, store_id)


@router.patch("/{store_id}", response_model=schemas.StoreOut)
def update_store(
    store_id: str,
    payload: schemas.StoreUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("stores:update")),
):
    store = stores_service.update_store(db, store_id, payload)
    write_log(db, user_id=current_user.id, action="STORE_UPDATE", resource="stores", request=request,
              meta={"store_id": store_id, "fields": sorted(payload.model_dump(exclude_unset=True))})
    return store


@router.delete("/{store_id}", response_model=MessageResponse)
def delete_store(
    store_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("stores:delete")),
):
    stores_service.delete_store(db, store_id)
    write_log(db, user_id=current_user.id, action="STORE_DELETE", resource="stores",
              request=request, meta={"store_id": store_id})
    return {"message": "Store deleted successfully"}
