from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from crud import transactions as crud
from database import get_db
from models.deliveries import Delivery as DeliveryModel
from models.transaction_records import RecordStatus
from routers.collections import check_own_trip, own_driver_id
from schemas import transaction_records as schemas
from utils.auth_utils import get_user_identifier, require_permission
from utils.permissions import Capability
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/deliveries", tags=["Deliveries"])

can_log = require_permission(Capability.LOG_DELIVERY)
can_view = require_permission(Capability.VIEW_ALL_TRANSACTIONS, Capability.VIEW_OWN_TRIPS)


def _get_or_404(db: Session, delivery_id: int, tenant_id: str) -> DeliveryModel:
    db_delivery = crud.get_record(db, DeliveryModel, delivery_id, tenant_id)
    if db_delivery is None:
        raise HTTPException(status_code=404, detail="Delivery not found")
    return db_delivery


@router.post("", response_model=schemas.Delivery, status_code=status.HTTP_201_CREATED)
def create_delivery(delivery: schemas.DeliveryCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_log)):
    check_own_trip(user, delivery.driver_id)
    return crud.create_delivery(db=db, delivery=delivery, tenant_id=tenant_id, user_id=get_user_identifier(user))

@router.get("", response_model=List[schemas.Delivery])
def read_deliveries(
    society_id: Optional[int] = None,
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
        db, DeliveryModel, tenant_id,
        counterparty_id=society_id,
        driver_id=own_driver_id(user, driver_id),
        status=status,
        is_invoiced=is_invoiced,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit,
    )

@router.get("/{delivery_id}", response_model=schemas.Delivery)
def read_delivery(delivery_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view)):
    db_delivery = _get_or_404(db, delivery_id, tenant_id)
    check_own_trip(user, db_delivery.driver_id)
    return db_delivery

@router.patch("/{delivery_id}", response_model=schemas.Delivery)
def update_delivery(delivery_id: int, changes: schemas.RecordUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_log)):
    db_delivery = _get_or_404(db, delivery_id, tenant_id)
    check_own_trip(user, db_delivery.driver_id)
    return crud.update_record(db, db_delivery, changes, user_id=get_user_identifier(user))

@router.put("/{delivery_id}/status", response_model=schemas.Delivery)
def update_delivery_status(delivery_id: int, body: schemas.RecordStatusUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_log)):
    db_delivery = _get_or_404(db, delivery_id, tenant_id)
    check_own_trip(user, db_delivery.driver_id)
    return crud.change_record_status(db, db_delivery, body.status, user_id=get_user_identifier(user))
