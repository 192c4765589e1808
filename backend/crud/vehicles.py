from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crud.drivers import get_driver
from exceptions import NotFoundError, ValidationError
from models.vehicles import Vehicle
from schemas import vehicles as schemas


def get_vehicle(db: Session, vehicle_id: int, tenant_id: str) -> Optional[Vehicle]:
    return db.query(Vehicle).filter(Vehicle.id == vehicle_id, Vehicle.tenant_id == tenant_id).first()

def get_vehicles(db: Session, tenant_id: str, skip: int = 0, limit: int = 100) -> List[Vehicle]:
    return db.query(Vehicle).filter(Vehicle.tenant_id == tenant_id).order_by(Vehicle.vehicle_number).offset(skip).limit(limit).all()

def _check_driver(db: Session, driver_id: Optional[int], tenant_id: str):
    if driver_id is not None and get_driver(db, driver_id, tenant_id) is None:
        raise NotFoundError(f"Driver {driver_id} not found")

def _commit_vehicle(db: Session, db_vehicle: Vehicle) -> Vehicle:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError(f"Vehicle number {db_vehicle.vehicle_number} is already registered")
    db.refresh(db_vehicle)
    return db_vehicle

def create_vehicle(db: Session, vehicle: schemas.VehicleCreate, tenant_id: str, user_id: str = None) -> Vehicle:
    _check_driver(db, vehicle.driver_id, tenant_id)
    db_vehicle = Vehicle(**vehicle.model_dump(), tenant_id=tenant_id, created_by=user_id)
    db.add(db_vehicle)
    return _commit_vehicle(db, db_vehicle)

def update_vehicle(db: Session, vehicle_id: int, vehicle: schemas.VehicleUpdate, tenant_id: str, user_id: str = None) -> Optional[Vehicle]:
    db_vehicle = get_vehicle(db, vehicle_id, tenant_id)
    if db_vehicle is None:
        return None
    changes = vehicle.model_dump(exclude_unset=True)
    _check_driver(db, changes.get("driver_id"), tenant_id)
    for key, value in changes.items():
        setattr(db_vehicle, key, value)
    db_vehicle.updated_by = user_id
    return _commit_vehicle(db, db_vehicle)
