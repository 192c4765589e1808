import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from models.suppliers import Supplier
from schemas import suppliers as schemas

logger = logging.getLogger("suppliers")


def get_supplier(db: Session, supplier_id: int, tenant_id: str) -> Optional[Supplier]:
    return db.query(Supplier).filter(Supplier.id == supplier_id, Supplier.tenant_id == tenant_id).first()

def get_suppliers(db: Session, tenant_id: str, active_only: bool = False, skip: int = 0, limit: int = 100) -> List[Supplier]:
    query = db.query(Supplier).filter(Supplier.tenant_id == tenant_id)
    if active_only:
        query = query.filter(Supplier.is_active.is_(True))
    return query.order_by(Supplier.name).offset(skip).limit(limit).all()

def create_supplier(db: Session, supplier: schemas.SupplierCreate, tenant_id: str, user_id: str = None) -> Supplier:
    db_supplier = Supplier(**supplier.model_dump(), tenant_id=tenant_id, created_by=user_id)
    db.add(db_supplier)
    db.commit()
    db.refresh(db_supplier)
    logger.info(f"Supplier {db_supplier.id} ({db_supplier.name}) created for tenant {tenant_id}")
    return db_supplier

def update_supplier(db: Session, supplier_id: int, supplier: schemas.SupplierUpdate, tenant_id: str, user_id: str = None) -> Optional[Supplier]:
    db_supplier = get_supplier(db, supplier_id, tenant_id)
    if db_supplier is None:
        return None
    for key, value in supplier.model_dump(exclude_unset=True).items():
        setattr(db_supplier, key, value)
    db_supplier.updated_by = user_id
    db.commit()
    db.refresh(db_supplier)
    return db_supplier

def deactivate_supplier(db: Session, supplier_id: int, tenant_id: str, user_id: str = None) -> Optional[Supplier]:
    # Collections and payments keep pointing at the row, so it is never deleted.
    db_supplier = get_supplier(db, supplier_id, tenant_id)
    if db_supplier is None:
        return None
    db_supplier.is_active = False
    db_supplier.updated_by = user_id
    db.commit()
    db.refresh(db_supplier)
    return db_supplier
