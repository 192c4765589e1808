import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from models.societies import Society
from schemas import societies as schemas

logger = logging.getLogger("societies")


def get_society(db: Session, society_id: int, tenant_id: str) -> Optional[Society]:
    return db.query(Society).filter(Society.id == society_id, Society.tenant_id == tenant_id).first()

def get_societies(db: Session, tenant_id: str, active_only: bool = False, skip: int = 0, limit: int = 100) -> List[Society]:
    query = db.query(Society).filter(Society.tenant_id == tenant_id)
    if active_only:
        query = query.filter(Society.is_active.is_(True))
    return query.order_by(Society.name).offset(skip).limit(limit).all()

def create_society(db: Session, society: schemas.SocietyCreate, tenant_id: str, user_id: str = None) -> Society:
    db_society = Society(**society.model_dump(), tenant_id=tenant_id, created_by=user_id)
    db.add(db_society)
    db.commit()
    db.refresh(db_society)
    logger.info(f"Society {db_society.id} ({db_society.name}) created for tenant {tenant_id}")
    return db_society

def update_society(db: Session, society_id: int, society: schemas.SocietyUpdate, tenant_id: str, user_id: str = None) -> Optional[Society]:
    db_society = get_society(db, society_id, tenant_id)
    if db_society is None:
        return None
    for key, value in society.model_dump(exclude_unset=True).items():
        setattr(db_society, key, value)
    db_society.updated_by = user_id
    db.commit()
    db.refresh(db_society)
    return db_society

def deactivate_society(db: Session, society_id: int, tenant_id: str, user_id: str = None) -> Optional[Society]:
    # Deliveries and invoices keep pointing at the row, so it is never deleted.
    db_society = get_society(db, society_id, tenant_id)
    if db_society is None:
        return None
    db_society.is_active = False
    db_society.updated_by = user_id
    db.commit()
    db.refresh(db_society)
    return db_society
