from typing import List, Optional

from sqlalchemy.orm import Session

from models.drivers import Driver
from schemas import drivers as schemas


def get_driver(db: Session, driver_id: int, tenant_id: str) -> Optional[Driver]:
    return db.query(Driver).filter(Driver.id == driver_id, Driver.tenant_id == tenant_id).first()

def get_drivers(db: Session, tenant_id: str, active_only: bool = False, skip: int = 0, limit: int = 100) -> List[Driver]:
    query = db.query(Driver).filter(Driver.tenant_id == tenant_id)
    if active_only:
        query = query.filter(Driver.is_active.is_(True))
    return query.order_by(Driver.name).offset(skip).limit(limit).all()

def create_driver(db: Session, driver: schemas.DriverCreate, tenant_id: str, user_id: str = None) -> Driver:
    db_driver = Driver(**driver.model_dump(), tenant_id=tenant_id, created_by=user_id)
    db.add(db_driver)
    db.commit()
    db.refresh(db_driver)
    return db_driver

def update_driver(db: Session, driver_id: int, driver: schemas.DriverUpdate, tenant_id: str, user_id: str = None) -> Optional[Driver]:
    db_driver = get_driver(db, driver_id, tenant_id)
    if db_driver is None:
        return None
    for key, value in driver.model_dump(exclude_unset=True).items():
        setattr(db_driver, key, value)
    db_driver.updated_by = user_id
    db.commit()
    db.refresh(db_driver)
    return db_driver
