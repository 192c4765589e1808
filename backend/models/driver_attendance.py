import enum

from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base
from models.audit_mixin import TenantMixin, TimestampMixin


class AttendanceStatus(enum.Enum):
    PRESENT = "present"
    HALF = "half"
    ABSENT = "absent"


class DriverAttendance(Base, TenantMixin, TimestampMixin):
    __tablename__ = "driver_attendance"
    __table_args__ = (
        UniqueConstraint('tenant_id', 'driver_id', 'attendance_date', name='_tenant_driver_date_uc'),
    )

    id = Column(Integer, primary_key=True, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False, index=True)
    attendance_date = Column(Date, nullable=False)
    status = Column(Enum(AttendanceStatus), default=AttendanceStatus.PRESENT, nullable=False)
    note = Column(Text, nullable=True)
    marked_by = Column(String, nullable=True)

    driver = relationship("Driver", back_populates="attendance")
