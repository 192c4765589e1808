"""Collections and deliveries: the raw facts that invoices and outstanding figures are built from."""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Type, Union

from sqlalchemy.orm import Session

from crud.drivers import get_driver
from crud.societies import get_society
from crud.suppliers import get_supplier
from crud.vehicles import get_vehicle
from exceptions import NotFoundError, ValidationError
from models.collections import Collection
from models.deliveries import Delivery
from models.transaction_records import RecordStatus
from schemas import transaction_records as schemas
from utils.dates import day_range

logger = logging.getLogger("transactions")

TransactionRecord = Union[Collection, Delivery]

ALLOWED_STATUS_CHANGES = {
    RecordStatus.PENDING: {RecordStatus.COMPLETED, RecordStatus.CANCELLED},
}


def _check_fleet(db: Session, vehicle_id: int, driver_id: int, tenant_id: str):
    if get_vehicle(db, vehicle_id, tenant_id) is None:
        raise NotFoundError(f"Vehicle {vehicle_id} not found")
    if get_driver(db, driver_id, tenant_id) is None:
        raise NotFoundError(f"Driver {driver_id} not found")

def _resolve_rate(rate, default_rate) -> Decimal:
    resolved = Decimal(str(rate if rate is not None else (default_rate or 0)))
    if resolved <= 0:
        raise ValidationError("Rate must be greater than zero")
    return resolved


def create_collection(db: Session, collection: schemas.CollectionCreate, tenant_id: str, user_id: str = None) -> Collection:
    supplier = get_supplier(db, collection.supplier_id, tenant_id)
    if supplier is None:
        raise NotFoundError(f"Supplier {collection.supplier_id} not found")
    _check_fleet(db, collection.vehicle_id, collection.driver_id, tenant_id)

    data = collection.model_dump()
    data["rate"] = _resolve_rate(collection.rate, supplier.purchase_rate)
    db_collection = Collection(**data, tenant_id=tenant_id, created_by=user_id)
    db.add(db_collection)
    db.commit()
    db.refresh(db_collection)
    logger.info(f"Collection {db_collection.id} logged for supplier {supplier.id}: {db_collection.quantity} @ {db_collection.rate}")
    return db_collection

def create_delivery(db: Session, delivery: schemas.DeliveryCreate, tenant_id: str, user_id: str = None) -> Delivery:
    society = get_society(db, delivery.society_id, tenant_id)
    if society is None:
        raise NotFoundError(f"Society {delivery.society_id} not found")
    _check_fleet(db, delivery.vehicle_id, delivery.driver_id, tenant_id)
    if delivery.collection_id is not None and get_record(db, Collection, delivery.collection_id, tenant_id) is None:
        raise NotFoundError(f"Collection {delivery.collection_id} not found")

    data = delivery.model_dump()
    data["rate"] = _resolve_rate(delivery.rate, society.delivery_rate)
    db_delivery = Delivery(**data, tenant_id=tenant_id, created_by=user_id)
    db.add(db_delivery)
    db.commit()
    db.refresh(db_delivery)
    logger.info(f"Delivery {db_delivery.id} logged for society {society.id}: {db_delivery.quantity} @ {db_delivery.rate}")
    return db_delivery


def get_record(db: Session, model: Type[TransactionRecord], record_id: int, tenant_id: str) -> Optional[TransactionRecord]:
    return db.query(model).filter(model.id == record_id, model.tenant_id == tenant_id).first()

def get_records(
    db: Session,
    model: Type[TransactionRecord],
    tenant_id: str,
    counterparty_id: Optional[int] = None,
    driver_id: Optional[int] = None,
    status: Optional[RecordStatus] = None,
    is_invoiced: Optional[bool] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[TransactionRecord]:
    query = db.query(model).filter(model.tenant_id == tenant_id)
    if counterparty_id is not None:
        column = model.supplier_id if model is Collection else model.society_id
        query = query.filter(column == counterparty_id)
    if driver_id is not None:
        query = query.filter(model.driver_id == driver_id)
    if status is not None:
        query = query.filter(model.status == status)
    if is_invoiced is not None:
        query = query.filter(model.is_invoiced.is_(is_invoiced))
    if start_date and end_date:
        window_start, window_end = day_range(start_date, end_date)
        query = query.filter(model.created_at >= window_start, model.created_at < window_end)
    return query.order_by(model.created_at.desc(), model.id.desc()).offset(skip).limit(limit).all()

def update_record(db: Session, record: TransactionRecord, changes: schemas.RecordUpdate, user_id: str = None) -> TransactionRecord:
    """Edit quantity, rate or notes. Only pending records may change; the total follows on flush."""
    if not record.is_editable:
        raise ValidationError(f"Only pending records can be edited (current status: {record.status.value})")
    values = changes.model_dump(exclude_unset=True)
    if "rate" in values and (values["rate"] is None or values["rate"] <= 0):
        raise ValidationError("Rate must be greater than zero")
    for key, value in values.items():
        setattr(record, key, value)
    record.updated_by = user_id
    db.commit()
    db.refresh(record)
    return record

def change_record_status(db: Session, record: TransactionRecord, new_status: RecordStatus, user_id: str = None) -> TransactionRecord:
    if new_status not in ALLOWED_STATUS_CHANGES.get(record.status, set()):
        raise ValidationError(f"Cannot move a {record.status.value} record to {new_status.value}")
    record.status = new_status
    record.updated_by = user_id
    db.commit()
    db.refresh(record)
    logger.info(f"{type(record).__name__} {record.id} marked {new_status.value}")
    return record
