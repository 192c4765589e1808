from sqlalchemy import Column, DateTime, String

from utils.dates import now_local


class TimestampMixin:
    """Created/updated timestamps and the user that made the change.

    Timestamps are timezone-aware and taken in the vendor's local timezone
    (Asia/Kolkata by default); DateTime(timezone=True) keeps the offset in
    PostgreSQL.
    """
    created_at = Column(DateTime(timezone=True), default=now_local, index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=now_local)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)


class TenantMixin:
    """Every row belongs to exactly one vendor; nothing is shared across tenants."""
    tenant_id = Column(String, nullable=False, index=True)
