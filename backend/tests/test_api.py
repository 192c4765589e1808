
from models.invoices import Invoice
from conftest import TENANT, local_dt


def generate(client, headers, seed, **overrides):
    body = {"relatedTo": "society", "relatedId": seed.society.id, "startDate": "2025-03-01", "endDate": "2025-03-31", **overrides}
    return client.post("/invoices/generate-monthly", json=body, headers=headers)


def test_generate_monthly_invoice(client, auth_headers, seed, make_delivery):
    make_delivery(quantity=1000, rate=5, created_at=local_dt(2025, 3, 4))
    make_delivery(quantity=1000, rate=5, created_at=local_dt(2025, 3, 18))

    response = generate(client, auth_headers("accountant"), seed)

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["total"] == 10000
    assert body["subtotal"] == 10000
    assert body["status"] == "draft"
    assert body["relatedTo"] == "society"
    assert body["invoiceType"] == "monthly"
    assert body["period"] == {"startDate": "2025-03-01", "endDate": "2025-03-31"}
    assert len(body["items"]) == 2
    assert body["items"][0]["driverName"] == "Ravi"
    assert body["items"][0]["amount"] == 5000
    assert body["payments"] == []

    deliveries = client.get("/deliveries", params={"is_invoiced": True}, headers=auth_headers()).json()
    assert {d["invoiceId"] for d in deliveries} == {body["id"]}


def test_generate_errors(client, auth_headers, seed):
    headers = auth_headers()

    empty = generate(client, headers, seed)
    assert empty.status_code == 404
    assert "No completed" in empty.json()["detail"]

    missing = client.post("/invoices/generate-monthly", json={"relatedTo": "society"}, headers=headers)
    assert missing.status_code == 400

    reversed_range = generate(client, headers, seed, startDate="2025-03-31", endDate="2025-03-01")
    assert reversed_range.status_code == 400


def test_auth_boundary(client, auth_headers, seed):
    assert client.post("/invoices/generate-monthly", json={}, headers={"X-Tenant-ID": TENANT}).status_code == 401
    assert generate(client, auth_headers("driver"), seed).status_code == 403
    assert generate(client, auth_headers("super_admin"), seed).status_code == 403

    cross_tenant = auth_headers()
    cross_tenant["X-Tenant-ID"] = "vendor-2"
    assert generate(client, cross_tenant, seed).status_code == 403

    no_tenant = auth_headers()
    del no_tenant["X-Tenant-ID"]
    assert client.get("/suppliers", headers=no_tenant).status_code == 422


def test_payment_flow(client, auth_headers, seed, make_delivery, db):
    make_delivery(quantity=200, rate=5)
    invoice_id = generate(client, auth_headers(), seed).json()["id"]
    assert client.put(f"/invoices/{invoice_id}/send", headers=auth_headers()).json()["status"] == "sent"

    payment = {
        "type": "delivery",
        "relatedTo": "society",
        "relatedId": seed.society.id,
        "amount": 400,
        "invoiceId": invoice_id,
        "paymentMethod": "neft",
        "paymentDate": "2025-04-02",
        "referenceNumber": "UTR123",
    }
    first = client.post("/payments", json=payment, headers=auth_headers("accountant"))
    assert first.status_code == 201, first.text
    assert first.json()["status"] == "completed"
    assert first.json()["type"] == "delivery"
    assert first.json()["amount"] == 400
    assert client.get(f"/invoices/{invoice_id}", headers=auth_headers()).json()["status"] == "sent"

    society_admin = auth_headers("society_admin", society_id=seed.society.id)
    second = client.post("/payments", json={**payment, "amount": 600}, headers=society_admin)
    assert second.status_code == 201, second.text

    invoice = client.get(f"/invoices/{invoice_id}", headers=society_admin).json()
    assert invoice["status"] == "paid"
    assert invoice["paidDate"] is not None
    assert invoice["payments"] == [first.json()["id"], second.json()["id"]]

    other_society = auth_headers("society_admin", society_id=seed.society.id + 1)
    assert client.post("/payments", json=payment, headers=other_society).status_code == 403

    refund = client.patch(f"/payments/{first.json()['id']}", json={"status": "refunded"}, headers=auth_headers())
    assert refund.status_code == 200
    # due date 2025-03-31 has passed, so the uncovered invoice is overdue again
    assert db.get(Invoice, invoice_id).status.value == "overdue"


def test_payment_rejected_for_driver_and_bad_payloads(client, auth_headers, seed):
    payment = {"type": "purchase", "relatedTo": "supplier", "relatedId": seed.supplier.id, "amount": 10}
    assert client.post("/payments", json=payment, headers=auth_headers("driver")).status_code == 403
    assert client.post("/payments", json={**payment, "amount": -1}, headers=auth_headers()).status_code == 422
    assert client.post("/payments", json={**payment, "invoiceId": 999}, headers=auth_headers()).status_code == 404


def test_supplier_outstanding_endpoint(client, auth_headers, seed, make_collection):
    collection = make_collection(quantity=1000, rate=2.5)
    make_collection(quantity=400, rate=2.5)
    payment = {
        "type": "purchase",
        "relatedTo": "supplier",
        "relatedId": seed.supplier.id,
        "amount": 2500,
        "collectionId": collection.id,
    }
    assert client.post("/payments", json=payment, headers=auth_headers()).status_code == 201

    response = client.get(f"/suppliers/{seed.supplier.id}/outstanding", headers=auth_headers("accountant"))

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"totalCollections", "totalPaid", "outstanding", "unpaidCollections"}
    assert body["totalCollections"] == 3500
    assert body["totalPaid"] == 2500
    assert body["outstanding"] == 1000
    assert len(body["unpaidCollections"]) == 1
    assert body["unpaidCollections"][0]["vehicleNumber"] == "TN-09-AB-1234"

    assert client.get(f"/suppliers/{seed.supplier.id + 9}/outstanding", headers=auth_headers()).status_code == 404


def test_society_outstanding_endpoint(client, auth_headers, seed, make_delivery):
    make_delivery(quantity=1000, rate=5)
    invoice_id = generate(client, auth_headers(), seed).json()["id"]
    client.put(f"/invoices/{invoice_id}/send", headers=auth_headers())
    make_delivery(quantity=100, rate=5, created_at=local_dt(2025, 4, 2))

    response = client.get(f"/societies/{seed.society.id}/outstanding", headers=auth_headers("society_admin", society_id=seed.society.id))

    assert response.status_code == 200, response.text
    body = response.json()
    assert set(body) == {"outstandingInvoices", "totalOutstanding", "totalInvoiced", "totalPaid", "unbilledDeliveries", "unbilledAmount"}
    assert body["totalInvoiced"] == 5000
    assert body["totalOutstanding"] == 5000
    assert body["unbilledAmount"] == 500
    assert body["outstandingInvoices"][0]["paid"] == 0
    assert body["outstandingInvoices"][0]["period"]["endDate"] == "2025-03-31"
    assert body["unbilledDeliveries"][0]["driverName"] == "Ravi"

    foreign = auth_headers("society_admin", society_id=seed.society.id + 1)
    assert client.get(f"/societies/{seed.society.id}/outstanding", headers=foreign).status_code == 403


def test_attendance_and_salary_endpoints(client, auth_headers, seed):
    url = f"/drivers/{seed.driver.id}/attendance"
    headers = auth_headers("accountant")

    first = client.post(url, json={"date": "2025-03-03", "status": "present"}, headers=headers)
    assert first.status_code == 200, first.text
    second = client.post(url, json={"date": "2025-03-03", "status": "half", "note": "left early"}, headers=headers)
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["status"] == "half"
    client.post(url, json={"date": "2025-03-04", "status": "present"}, headers=headers)

    listed = client.get(url, params={"month": "2025-03"}, headers=headers).json()
    assert [row["attendanceDate"] for row in listed] == ["2025-03-03", "2025-03-04"]

    salary = client.get(f"/drivers/{seed.driver.id}/salary", params={"month": "2025-03"}, headers=headers)
    assert salary.status_code == 200
    body = salary.json()
    assert body["attendance"]["presentDays"] == 1
    assert body["attendance"]["halfDays"] == 1
    assert body["attendance"]["attendanceUnits"] == 1.5
    assert body["grossPay"] == 750
    assert body["netPay"] == 750

    assert client.get(f"/drivers/{seed.driver.id}/salary", params={"month": "2025-3"}, headers=headers).status_code == 400
    assert client.get(f"/drivers/{seed.driver.id + 5}/salary", params={"month": "2025-03"}, headers=headers).status_code == 404
    assert client.post(url, json={"date": "2025-03-05"}, headers=auth_headers("driver")).status_code == 403


def test_expense_workflow_endpoints(client, auth_headers, seed):
    driver = auth_headers("driver", driver_id=seed.driver.id)
    created = client.post("/expenses", json={"driverId": seed.driver.id, "category": "fuel", "amount": 1800}, headers=driver)
    assert created.status_code == 201, created.text
    expense_id = created.json()["id"]
    assert created.json()["chargedTo"] == "vendor"

    charge = client.put(f"/expenses/{expense_id}/charge", json={"chargedTo": "driver"}, headers=auth_headers())
    assert charge.status_code == 400

    approved = client.put(f"/expenses/{expense_id}/approve", json={"status": "approved"}, headers=auth_headers("accountant"))
    assert approved.json()["status"] == "approved"

    mine = client.get("/expenses", headers=driver).json()
    assert [e["id"] for e in mine] == [expense_id]


def test_invoice_update_and_overdue_endpoints(client, auth_headers, seed, make_delivery):
    make_delivery(quantity=1000, rate=5)
    invoice_id = generate(client, auth_headers(), seed).json()["id"]

    updated = client.patch(f"/invoices/{invoice_id}", json={"tax": 900, "discount": 400}, headers=auth_headers())
    assert updated.status_code == 200
    assert updated.json()["total"] == 5500

    client.put(f"/invoices/{invoice_id}/send", headers=auth_headers())
    swept = client.post("/invoices/mark-overdue", headers=auth_headers())
    assert swept.json() == {"markedOverdue": 1}

    cancelled = client.put(f"/invoices/{invoice_id}/cancel", headers=auth_headers())
    assert cancelled.json()["status"] == "cancelled"
    assert generate(client, auth_headers(), seed).status_code == 201


def test_master_data_endpoints(client, auth_headers):
    headers = auth_headers()
    supplier = client.post("/suppliers", json={"name": "Hill Spring", "phone": "9000000000", "purchaseRate": 1.75}, headers=headers)
    assert supplier.status_code == 201
    assert supplier.json()["purchaseRate"] == 1.75

    driver = client.post("/drivers", json={"name": "Kumar", "dailyWage": 650}, headers=headers).json()
    vehicle = client.post("/vehicles", json={"vehicleNumber": "KA-01-X-1", "capacity": 10000, "driverId": driver["id"]}, headers=headers)
    assert vehicle.status_code == 201
    duplicate = client.post("/vehicles", json={"vehicleNumber": "KA-01-X-1"}, headers=headers)
    assert duplicate.status_code == 400

    collection = client.post(
        "/collections",
        json={"supplierId": supplier.json()["id"], "vehicleId": vehicle.json()["id"], "driverId": driver["id"], "quantity": 1000},
        headers=auth_headers("driver", driver_id=driver["id"]),
    )
    assert collection.status_code == 201, collection.text
    assert collection.json()["totalAmount"] == 1750
    assert collection.json()["status"] == "pending"

    completed = client.put(f"/collections/{collection.json()['id']}/status", json={"status": "completed"}, headers=headers)
    assert completed.json()["status"] == "completed"
    frozen = client.patch(f"/collections/{collection.json()['id']}", json={"quantity": 5}, headers=headers)
    assert frozen.status_code == 400

    assert client.delete(f"/suppliers/{supplier.json()['id']}", headers=headers).json()["isActive"] is False


def test_drivers_only_touch_their_own_trips(client, auth_headers, seed, make_delivery):
    delivery = make_delivery()
    owner = auth_headers("driver", driver_id=seed.driver.id)
    stranger = auth_headers("driver", driver_id=seed.driver.id + 1)

    assert client.get(f"/deliveries/{delivery.id}", headers=owner).status_code == 200
    assert client.get(f"/deliveries/{delivery.id}", headers=stranger).status_code == 403
    assert client.patch(f"/deliveries/{delivery.id}", json={"notes": "x"}, headers=stranger).status_code == 403
    assert client.put(f"/deliveries/{delivery.id}/status", json={"status": "cancelled"}, headers=stranger).status_code == 403
    assert client.get(f"/deliveries/{delivery.id}", headers=auth_headers()).status_code == 200

    body = {"supplierId": seed.supplier.id, "vehicleId": seed.vehicle.id, "driverId": seed.driver.id, "quantity": 500}
    assert client.post("/collections", json=body, headers=stranger).status_code == 403
    created = client.post("/collections", json=body, headers=owner)
    assert created.status_code == 201
    assert client.get(f"/collections/{created.json()['id']}", headers=stranger).status_code == 403
    assert client.put(f"/collections/{created.json()['id']}/status", json={"status": "completed"}, headers=owner).status_code == 200
