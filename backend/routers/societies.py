import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from crud import outstanding as outstanding_crud
from crud import societies as crud
from database import get_db
from schemas import societies as schemas
from schemas.statements import CounterpartyStats
from utils.auth_utils import get_user_identifier, require_permission
from utils.permissions import Capability, Role
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/societies", tags=["Societies"])
logger = logging.getLogger("societies")

can_manage = require_permission(Capability.MANAGE_SOCIETIES)
can_view = require_permission(Capability.MANAGE_SOCIETIES, Capability.VIEW_FINANCIALS)


def check_own_society(user: dict, society_id: int):
    """Society admins only ever see their own society."""
    if user.get("role") == Role.SOCIETY_ADMIN.value and str(user.get("society_id")) != str(society_id):
        logger.warning(f"Society admin {get_user_identifier(user)} tried to read society {society_id}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied for this society")


@router.post("", response_model=schemas.Society, status_code=status.HTTP_201_CREATED)
def create_society(society: schemas.SocietyCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    return crud.create_society(db=db, society=society, tenant_id=tenant_id, user_id=get_user_identifier(user))

@router.get("", response_model=List[schemas.Society])
def read_societies(active_only: bool = False, skip: int = 0, limit: int = 100, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view)):
    return crud.get_societies(db=db, tenant_id=tenant_id, active_only=active_only, skip=skip, limit=limit)

@router.get("/{society_id}", response_model=schemas.Society)
def read_society(society_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view)):
    db_society = crud.get_society(db=db, society_id=society_id, tenant_id=tenant_id)
    if db_society is None:
        raise HTTPException(status_code=404, detail="Society not found")
    return db_society

@router.patch("/{society_id}", response_model=schemas.Society)
def update_society(society_id: int, society: schemas.SocietyUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    db_society = crud.update_society(db=db, society_id=society_id, society=society, tenant_id=tenant_id, user_id=get_user_identifier(user))
    if db_society is None:
        raise HTTPException(status_code=404, detail="Society not found")
    return db_society

@router.delete("/{society_id}", response_model=schemas.Society)
def deactivate_society(society_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    db_society = crud.deactivate_society(db=db, society_id=society_id, tenant_id=tenant_id, user_id=get_user_identifier(user))
    if db_society is None:
        raise HTTPException(status_code=404, detail="Society not found")
    logger.info(f"Society {society_id} deactivated by {get_user_identifier(user)} for tenant {tenant_id}")
    return db_society

@router.get("/{society_id}/outstanding", response_model=schemas.SocietyOutstanding)
def read_society_outstanding(
    society_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: dict = Depends(require_permission(Capability.VIEW_FINANCIALS, Capability.RECONCILE_ACCOUNTS, Capability.VIEW_OWN_INVOICES)),
):
    """Open (sent/overdue) invoices with what is paid on each, plus completed deliveries not billed yet."""
    check_own_society(user, society_id)
    return outstanding_crud.get_society_outstanding(db=db, tenant_id=tenant_id, society_id=society_id)

@router.get("/{society_id}/stats", response_model=CounterpartyStats)
def read_society_stats(society_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(require_permission(Capability.VIEW_FINANCIALS, Capability.RECONCILE_ACCOUNTS))):
    return outstanding_crud.get_society_stats(db=db, tenant_id=tenant_id, society_id=society_id)
