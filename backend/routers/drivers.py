import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from crud import attendance as attendance_crud
from crud import drivers as crud
from database import get_db
from schemas import drivers as schemas
from utils.auth_utils import get_user_identifier, require_permission
from utils.permissions import Capability
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/drivers", tags=["Drivers"])
logger = logging.getLogger("drivers")

can_manage = require_permission(Capability.MANAGE_DRIVERS)
can_view = require_permission(Capability.MANAGE_DRIVERS, Capability.MANAGE_ATTENDANCE, Capability.VIEW_FINANCIALS)
can_mark_attendance = require_permission(Capability.MANAGE_ATTENDANCE)


@router.post("", response_model=schemas.Driver, status_code=status.HTTP_201_CREATED)
def create_driver(driver: schemas.DriverCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    db_driver = crud.create_driver(db=db, driver=driver, tenant_id=tenant_id, user_id=get_user_identifier(user))
    logger.info(f"Driver {db_driver.id} created by {get_user_identifier(user)} for tenant {tenant_id}")
    return db_driver

@router.get("", response_model=List[schemas.Driver])
def read_drivers(active_only: bool = False, skip: int = 0, limit: int = 100, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view)):
    return crud.get_drivers(db=db, tenant_id=tenant_id, active_only=active_only, skip=skip, limit=limit)

@router.get("/{driver_id}", response_model=schemas.Driver)
def read_driver(driver_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view)):
    db_driver = crud.get_driver(db=db, driver_id=driver_id, tenant_id=tenant_id)
    if db_driver is None:
        raise HTTPException(status_code=404, detail="Driver not found")
    return db_driver

@router.patch("/{driver_id}", response_model=schemas.Driver)
def update_driver(driver_id: int, driver: schemas.DriverUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    db_driver = crud.update_driver(db=db, driver_id=driver_id, driver=driver, tenant_id=tenant_id, user_id=get_user_identifier(user))
    if db_driver is None:
        raise HTTPException(status_code=404, detail="Driver not found")
    return db_driver


@router.post("/{driver_id}/attendance", response_model=schemas.Attendance)
def mark_attendance(driver_id: int, mark: schemas.AttendanceMark, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_mark_attendance)):
    """Create or overwrite the driver's attendance for one day."""
    return attendance_crud.mark_attendance(db=db, tenant_id=tenant_id, driver_id=driver_id, mark=mark, user_id=get_user_identifier(user))

@router.get("/{driver_id}/attendance", response_model=List[schemas.Attendance])
def read_attendance(driver_id: int, month: str = Query(..., description="YYYY-MM"), db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view)):
    return attendance_crud.list_attendance(db=db, tenant_id=tenant_id, driver_id=driver_id, month=month)

@router.get("/{driver_id}/salary", response_model=schemas.SalaryBreakdown)
def read_salary(
    driver_id: int,
    month: str = Query(..., description="YYYY-MM"),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: dict = Depends(require_permission(Capability.VIEW_FINANCIALS, Capability.MANAGE_ATTENDANCE)),
):
    salary = attendance_crud.calculate_salary(db=db, tenant_id=tenant_id, driver_id=driver_id, month=month)
    logger.info(f"Salary for driver {driver_id} ({month}) computed by {get_user_identifier(user)}: net {salary['net_pay']}")
    return salary
