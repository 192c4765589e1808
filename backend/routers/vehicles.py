from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from crud import vehicles as crud
from database import get_db
from schemas import vehicles as schemas
from utils.auth_utils import get_user_identifier, require_permission
from utils.permissions import Capability
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])

can_manage = require_permission(Capability.MANAGE_VEHICLES)


@router.post("", response_model=schemas.Vehicle, status_code=status.HTTP_201_CREATED)
def create_vehicle(vehicle: schemas.VehicleCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    return crud.create_vehicle(db=db, vehicle=vehicle, tenant_id=tenant_id, user_id=get_user_identifier(user))

@router.get("", response_model=List[schemas.Vehicle])
def read_vehicles(skip: int = 0, limit: int = 100, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(require_permission(Capability.MANAGE_VEHICLES, Capability.VIEW_ALL_TRANSACTIONS))):
    return crud.get_vehicles(db=db, tenant_id=tenant_id, skip=skip, limit=limit)

@router.get("/{vehicle_id}", response_model=schemas.Vehicle)
def read_vehicle(vehicle_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(require_permission(Capability.MANAGE_VEHICLES, Capability.VIEW_ALL_TRANSACTIONS))):
    db_vehicle = crud.get_vehicle(db=db, vehicle_id=vehicle_id, tenant_id=tenant_id)
    if db_vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return db_vehicle

@router.patch("/{vehicle_id}", response_model=schemas.Vehicle)
def update_vehicle(vehicle_id: int, vehicle: schemas.VehicleUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    db_vehicle = crud.update_vehicle(db=db, vehicle_id=vehicle_id, vehicle=vehicle, tenant_id=tenant_id, user_id=get_user_identifier(user))
    if db_vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return db_vehicle
