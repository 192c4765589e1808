import os
import tempfile
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

# Point the app at an in-memory database and a throwaway log directory before
# anything imports database.py or main.py.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="tanker-billing-logs-")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ENABLE_SCHEDULER"] = "false"

import pytest
from fastapi.testclient import TestClient
from jose import jwt

import models  # noqa: F401
from database import Base, SessionLocal, engine, get_db
from models.collections import Collection
from models.deliveries import Delivery
from models.drivers import Driver
from models.societies import Society
from models.suppliers import Supplier
from models.transaction_records import RecordStatus
from models.vehicles import Vehicle
from utils.dates import LOCAL_TZ

TENANT = "vendor-1"


def local_dt(year, month, day, hour=10, minute=0):
    return LOCAL_TZ.localize(datetime(year, month, day, hour, minute))


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    from main import app

    # StaticPool shares one SQLite connection, so requests reuse the test session.
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def make(role="vendor", tenant=TENANT, **claims):
        payload = {"sub": f"{role}@example.com", "role": role, "vendor_id": tenant, **claims}
        token = jwt.encode(payload, "test-secret", algorithm="HS256")
        return {"Authorization": f"Bearer {token}", "X-Tenant-ID": tenant}
    return make


@pytest.fixture
def seed(db):
    supplier = Supplier(tenant_id=TENANT, name="Lake Wells", phone="9800000001", purchase_rate=Decimal("2.5"))
    society = Society(tenant_id=TENANT, name="Green Meadows", phone="9800000002", delivery_rate=Decimal("5"))
    driver = Driver(tenant_id=TENANT, name="Ravi", phone="9800000003", daily_wage=Decimal("500"))
    db.add_all([supplier, society, driver])
    db.flush()
    vehicle = Vehicle(tenant_id=TENANT, vehicle_number="TN-09-AB-1234", capacity=Decimal("12000"), driver_id=driver.id)
    db.add(vehicle)
    db.commit()
    return SimpleNamespace(supplier=supplier, society=society, driver=driver, vehicle=vehicle)


@pytest.fixture
def make_delivery(db, seed):
    def make(quantity=1000, rate=5, created_at=None, status=RecordStatus.COMPLETED, society=None):
        delivery = Delivery(
            tenant_id=TENANT,
            society_id=(society or seed.society).id,
            vehicle_id=seed.vehicle.id,
            driver_id=seed.driver.id,
            quantity=Decimal(str(quantity)),
            rate=Decimal(str(rate)),
            status=status,
            created_at=created_at or local_dt(2025, 3, 10),
        )
        db.add(delivery)
        db.commit()
        db.refresh(delivery)
        return delivery
    return make


@pytest.fixture
def make_collection(db, seed):
    def make(quantity=1000, rate=2.5, created_at=None, status=RecordStatus.COMPLETED):
        collection = Collection(
            tenant_id=TENANT,
            supplier_id=seed.supplier.id,
            vehicle_id=seed.vehicle.id,
            driver_id=seed.driver.id,
            quantity=Decimal(str(quantity)),
            rate=Decimal(str(rate)),
            status=status,
            created_at=created_at or local_dt(2025, 3, 10),
        )
        db.add(collection)
        db.commit()
        db.refresh(collection)
        return collection
    return make
