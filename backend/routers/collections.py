from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from crud import transactions as crud
from database import get_db
from models.collections import Collection as CollectionModel
from models.transaction_records import RecordStatus
from schemas import transaction_records as schemas
from utils.auth_utils import get_user_identifier, require_permission
from utils.permissions import Capability, Role
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/collections", tags=["Collections"])

can_log = require_permission(Capability.LOG_COLLECTION)
can_view = require_permission(Capability.VIEW_ALL_TRANSACTIONS, Capability.VIEW_OWN_TRIPS)


def own_driver_id(user: dict, driver_id: Optional[int]) -> Optional[int]:
    """Drivers only see their own trips, whatever filter they ask for."""
    if user.get("role") == Role.DRIVER.value:
        return user.get("driver_id")
    return driver_id

def check_own_trip(user: dict, driver_id: int):
    if user.get("role") == Role.DRIVER.value and str(user.get("driver_id")) != str(driver_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Drivers can only access their own trips")

def _get_or_404(db: Session, collection_id: int, tenant_id: str) -> CollectionModel:
    db_collection = crud.get_record(db, CollectionModel, collection_id, tenant_id)
    if db_collection is None:
        raise HTTPException(status_code=404, detail="Collection not found")
    return db_collection


@router.post("", response_model=schemas.Collection, status_code=status.HTTP_201_CREATED)
def create_collection(collection: schemas.CollectionCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_log)):
    check_own_trip(user, collection.driver_id)
    return crud.create_collection(db=db, collection=collection, tenant_id=tenant_id, user_id=get_user_identifier(user))

@router.get("", response_model=List[schemas.Collection])
def read_collections(
    supplier_id: Optional[int] = None,
    driver_id: Optional[int] = None,
    status: Optional[RecordStatus] = None,
    is_invoiced: Optional[bool] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: dict = Depends(can_view),
):
    return crud.get_records(
        db, CollectionModel, tenant_id,
        counterparty_id=supplier_id,
        driver_id=own_driver_id(user, driver_id),
        status=status,
        is_invoiced=is_invoiced,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit,
    )

@router.get("/{collection_id}", response_model=schemas.Collection)
def read_collection(collection_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view)):
    db_collection = _get_or_404(db, collection_id, tenant_id)
    check_own_trip(user, db_collection.driver_id)
    return db_collection

@router.patch("/{collection_id}", response_model=schemas.Collection)
def update_collection(collection_id: int, changes: schemas.RecordUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_log)):
    db_collection = _get_or_404(db, collection_id, tenant_id)
    check_own_trip(user, db_collection.driver_id)
    return crud.update_record(db, db_collection, changes, user_id=get_user_identifier(user))

@router.put("/{collection_id}/status", response_model=schemas.Collection)
def update_collection_status(collection_id: int, body: schemas.RecordStatusUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_log)):
    db_collection = _get_or_404(db, collection_id, tenant_id)
    check_own_trip(user, db_collection.driver_id)
    return crud.change_record_status(db, db_collection, body.status, user_id=get_user_identifier(user))
