import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from crud import outstanding as outstanding_crud
from crud import suppliers as crud
from database import get_db
from schemas import suppliers as schemas
from schemas.statements import CounterpartyStats
from utils.auth_utils import get_user_identifier, require_permission
from utils.permissions import Capability
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])
logger = logging.getLogger("suppliers")

can_manage = require_permission(Capability.MANAGE_SUPPLIERS)
can_view_financials = require_permission(Capability.VIEW_FINANCIALS, Capability.RECONCILE_ACCOUNTS)


@router.post("", response_model=schemas.Supplier, status_code=status.HTTP_201_CREATED)
def create_supplier(supplier: schemas.SupplierCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    return crud.create_supplier(db=db, supplier=supplier, tenant_id=tenant_id, user_id=get_user_identifier(user))

@router.get("", response_model=List[schemas.Supplier])
def read_suppliers(active_only: bool = False, skip: int = 0, limit: int = 100, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(require_permission(Capability.MANAGE_SUPPLIERS, Capability.VIEW_FINANCIALS))):
    return crud.get_suppliers(db=db, tenant_id=tenant_id, active_only=active_only, skip=skip, limit=limit)

@router.get("/{supplier_id}", response_model=schemas.Supplier)
def read_supplier(supplier_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(require_permission(Capability.MANAGE_SUPPLIERS, Capability.VIEW_FINANCIALS))):
    db_supplier = crud.get_supplier(db=db, supplier_id=supplier_id, tenant_id=tenant_id)
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return db_supplier

@router.patch("/{supplier_id}", response_model=schemas.Supplier)
def update_supplier(supplier_id: int, supplier: schemas.SupplierUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    db_supplier = crud.update_supplier(db=db, supplier_id=supplier_id, supplier=supplier, tenant_id=tenant_id, user_id=get_user_identifier(user))
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return db_supplier

@router.delete("/{supplier_id}", response_model=schemas.Supplier)
def deactivate_supplier(supplier_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    db_supplier = crud.deactivate_supplier(db=db, supplier_id=supplier_id, tenant_id=tenant_id, user_id=get_user_identifier(user))
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    logger.info(f"Supplier {supplier_id} deactivated by {get_user_identifier(user)} for tenant {tenant_id}")
    return db_supplier

@router.get("/{supplier_id}/outstanding", response_model=schemas.SupplierOutstanding)
def read_supplier_outstanding(supplier_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view_financials)):
    """Completed collections against completed purchase payments, with the collections no payment names yet."""
    return outstanding_crud.get_supplier_outstanding(db=db, tenant_id=tenant_id, supplier_id=supplier_id)

@router.get("/{supplier_id}/stats", response_model=CounterpartyStats)
def read_supplier_stats(supplier_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view_financials)):
    return outstanding_crud.get_supplier_stats(db=db, tenant_id=tenant_id, supplier_id=supplier_id)
