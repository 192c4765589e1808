import re
from datetime import date
from decimal import Decimal

import pytest

from crud import invoices as crud
from crud import payments as payment_crud
from exceptions import NotFoundError, ValidationError
from models.collections import Collection
from models.invoices import Invoice, InvoiceCounter, InvoiceStatus, InvoiceType
from models.payments import PaymentStatus
from models.transaction_records import RecordStatus
from schemas.invoices import InvoiceUpdate
from schemas.payments import PaymentCreate, PaymentUpdate
from conftest import TENANT, local_dt


def generate_for_society(db, seed, start="2025-03-01", end="2025-03-31"):
    return crud.generate_invoice(db, TENANT, "society", seed.society.id, start, end, user_id="accounts@example.com")


def pay_society_invoice(db, seed, invoice, amount):
    payload = {"type": "delivery", "relatedTo": "society", "relatedId": seed.society.id, "amount": amount, "invoiceId": invoice.id}
    return payment_crud.record_payment(db, TENANT, PaymentCreate.model_validate(payload))


def test_monthly_society_invoice_end_to_end(db, seed, make_delivery):
    first = make_delivery(quantity=1000, rate=5, created_at=local_dt(2025, 3, 4))
    second = make_delivery(quantity=1000, rate=5, created_at=local_dt(2025, 3, 18))

    invoice = generate_for_society(db, seed)

    assert len(invoice.items) == 2
    assert invoice.total == Decimal("10000.00")
    assert invoice.subtotal == invoice.total
    assert invoice.tax == 0 and invoice.discount == 0
    assert invoice.status == InvoiceStatus.DRAFT
    assert invoice.invoice_type == InvoiceType.MONTHLY
    assert invoice.due_date == date(2025, 3, 31)
    assert invoice.period == {"start_date": date(2025, 3, 1), "end_date": date(2025, 3, 31)}
    assert re.fullmatch(r"MON-\d{6}-0001", invoice.invoice_number)

    for delivery in (first, second):
        db.refresh(delivery)
        assert delivery.is_invoiced is True
        assert delivery.invoice_id == invoice.id


def test_items_snapshot_source_records(db, seed, make_delivery):
    make_delivery(quantity="750.5", rate="4.2")
    make_delivery(quantity=300, rate=5)

    invoice = generate_for_society(db, seed)

    assert invoice.total == sum(item.amount for item in invoice.items)
    for item in invoice.items:
        assert item.amount == (item.quantity * item.rate).quantize(Decimal("0.01"))
        assert item.driver_name == "Ravi"
        assert item.vehicle_number == "TN-09-AB-1234"
        assert item.source_record_id == item.delivery_id


def test_items_do_not_change_when_source_changes(db, seed, make_delivery):
    delivery = make_delivery(quantity=1000, rate=5)
    invoice = generate_for_society(db, seed)

    delivery.rate = Decimal("9")
    seed.driver.name = "Someone Else"
    db.commit()
    db.refresh(invoice)

    assert invoice.items[0].rate == Decimal("5")
    assert invoice.items[0].amount == Decimal("5000.00")
    assert invoice.items[0].driver_name == "Ravi"
    assert invoice.total == Decimal("5000.00")


def test_date_range_covers_whole_local_days(db, seed, make_delivery):
    make_delivery(created_at=local_dt(2025, 2, 28, 23, 59))
    inside_start = make_delivery(created_at=local_dt(2025, 3, 1, 0, 0))
    inside_end = make_delivery(created_at=local_dt(2025, 3, 31, 23, 59))
    make_delivery(created_at=local_dt(2025, 4, 1, 0, 0))

    invoice = generate_for_society(db, seed)

    assert sorted(item.delivery_id for item in invoice.items) == sorted([inside_start.id, inside_end.id])


def test_only_completed_uninvoiced_deliveries_selected(db, seed, make_delivery):
    make_delivery(status=RecordStatus.PENDING)
    make_delivery(status=RecordStatus.CANCELLED)
    billable = make_delivery()

    invoice = generate_for_society(db, seed)

    assert [item.delivery_id for item in invoice.items] == [billable.id]


def test_empty_selection_creates_nothing(db, seed, make_delivery):
    make_delivery(created_at=local_dt(2025, 5, 2))

    with pytest.raises(NotFoundError):
        generate_for_society(db, seed)

    assert db.query(Invoice).count() == 0
    assert db.query(InvoiceCounter).count() == 0


def test_invoiced_deliveries_never_reselected(db, seed, make_delivery):
    make_delivery(created_at=local_dt(2025, 3, 10))
    generate_for_society(db, seed)

    with pytest.raises(NotFoundError):
        generate_for_society(db, seed, start="2025-03-05", end="2025-04-15")


def test_supplier_collections_are_flagged_and_not_reinvoiced(db, seed, make_collection):
    collection = make_collection(quantity=2000, rate=2.5)

    invoice = crud.generate_invoice(db, TENANT, "supplier", seed.supplier.id, "2025-03-01", "2025-03-31")

    assert invoice.total == Decimal("5000.00")
    assert invoice.items[0].collection_id == collection.id
    db.refresh(collection)
    assert collection.is_invoiced is True
    assert collection.invoice_id == invoice.id

    with pytest.raises(NotFoundError):
        crud.generate_invoice(db, TENANT, "supplier", seed.supplier.id, "2025-03-01", "2025-03-31")


@pytest.mark.parametrize("related_to, related_id, start, end", [
    (None, 1, "2025-03-01", "2025-03-31"),
    ("society", None, "2025-03-01", "2025-03-31"),
    ("society", 1, None, "2025-03-31"),
    ("society", 1, "2025-03-31", "2025-03-01"),
    ("society", 1, "not-a-date", "2025-03-31"),
    ("customer", 1, "2025-03-01", "2025-03-31"),
])
def test_generation_input_validation(db, seed, related_to, related_id, start, end):
    with pytest.raises(ValidationError):
        crud.generate_invoice(db, TENANT, related_to, related_id, start, end)


def test_unknown_or_foreign_counterparty(db, seed, make_delivery):
    make_delivery()
    with pytest.raises(NotFoundError):
        crud.generate_invoice(db, TENANT, "society", seed.society.id + 50, "2025-03-01", "2025-03-31")
    with pytest.raises(NotFoundError):
        crud.generate_invoice(db, "vendor-2", "society", seed.society.id, "2025-03-01", "2025-03-31")


def test_cancel_releases_records_for_rebilling(db, seed, make_delivery):
    delivery = make_delivery()
    invoice = generate_for_society(db, seed)

    crud.cancel_invoice(db, invoice)

    assert invoice.status == InvoiceStatus.CANCELLED
    db.refresh(delivery)
    assert delivery.is_invoiced is False
    assert delivery.invoice_id is None

    again = generate_for_society(db, seed)
    assert again.id != invoice.id
    assert [item.delivery_id for item in again.items] == [delivery.id]


def test_paid_invoice_cannot_be_cancelled_or_edited(db, seed, make_delivery):
    make_delivery()
    invoice = generate_for_society(db, seed)
    invoice.status = InvoiceStatus.PAID
    db.commit()

    with pytest.raises(ValidationError):
        crud.cancel_invoice(db, invoice)
    with pytest.raises(ValidationError):
        crud.update_invoice(db, invoice, InvoiceUpdate(tax=Decimal("10")))


def test_update_rederives_total(db, seed, make_delivery):
    make_delivery(quantity=1000, rate=5)
    invoice = generate_for_society(db, seed)

    crud.update_invoice(db, invoice, InvoiceUpdate(tax=Decimal("900"), discount=Decimal("400"), notes="GST added"))

    assert invoice.subtotal == Decimal("5000.00")
    assert invoice.total == Decimal("5500.00")
    assert invoice.notes == "GST added"

    with pytest.raises(ValidationError):
        crud.update_invoice(db, invoice, InvoiceUpdate(discount=Decimal("-1")))


def test_send_and_overdue_sweep(db, seed, make_delivery):
    make_delivery()
    invoice = generate_for_society(db, seed)

    assert crud.mark_overdue_invoices(db, TENANT, today=date(2025, 4, 10)) == 0  # drafts are left alone

    crud.send_invoice(db, invoice)
    assert invoice.status == InvoiceStatus.SENT
    assert crud.mark_overdue_invoices(db, TENANT, today=date(2025, 3, 31)) == 0
    assert crud.mark_overdue_invoices(db, TENANT, today=date(2025, 4, 1)) == 1
    db.refresh(invoice)
    assert invoice.status == InvoiceStatus.OVERDUE

    crud.send_invoice(db, invoice)
    assert invoice.status == InvoiceStatus.SENT
    crud.cancel_invoice(db, invoice)
    with pytest.raises(ValidationError):
        crud.send_invoice(db, invoice)


def test_list_invoices_filters(db, seed, make_delivery, make_collection):
    make_delivery()
    make_collection()
    society_invoice = generate_for_society(db, seed)
    supplier_invoice = crud.generate_invoice(db, TENANT, "supplier", seed.supplier.id, "2025-03-01", "2025-03-31")

    assert [i.id for i in crud.get_invoices(db, TENANT, related_id=seed.society.id, related_to=society_invoice.related_to)] == [society_invoice.id]
    assert {i.id for i in crud.get_invoices(db, TENANT)} == {society_invoice.id, supplier_invoice.id}
    assert crud.get_invoices(db, "vendor-2") == []
    assert db.query(Collection).filter(Collection.invoice_id == supplier_invoice.id).count() == 1


def test_discount_that_leaves_invoice_covered_marks_it_paid(db, seed, make_delivery):
    make_delivery(quantity=200, rate=5)
    invoice = generate_for_society(db, seed)
    crud.send_invoice(db, invoice)
    pay_society_invoice(db, seed, invoice, 900)
    assert invoice.status == InvoiceStatus.SENT

    crud.update_invoice(db, invoice, InvoiceUpdate(discount=Decimal("100")))

    assert invoice.total == Decimal("900.00")
    assert invoice.status == InvoiceStatus.PAID
    assert invoice.paid_date is not None


def test_discount_cannot_push_total_below_zero(db, seed, make_delivery):
    make_delivery(quantity=200, rate=5)
    invoice = generate_for_society(db, seed)

    with pytest.raises(ValidationError):
        crud.update_invoice(db, invoice, InvoiceUpdate(discount=Decimal("5000")))
    with pytest.raises(ValidationError):
        crud.update_invoice(db, invoice, InvoiceUpdate(tax=Decimal("50"), discount=Decimal("1050.01")))

    db.refresh(invoice)
    assert invoice.total == Decimal("1000.00")
    assert invoice.discount == Decimal("0.00")

    crud.update_invoice(db, invoice, InvoiceUpdate(tax=Decimal("50"), discount=Decimal("1050")))
    assert invoice.total == Decimal("0.00")


def test_invoice_with_payments_cannot_be_cancelled(db, seed, make_delivery):
    delivery = make_delivery(quantity=200, rate=5)
    invoice = generate_for_society(db, seed)
    crud.send_invoice(db, invoice)
    payment = pay_society_invoice(db, seed, invoice, 400)

    with pytest.raises(ValidationError):
        crud.cancel_invoice(db, invoice)
    db.refresh(delivery)
    assert delivery.is_invoiced is True
    assert invoice.status == InvoiceStatus.SENT

    payment_crud.update_payment(db, payment, PaymentUpdate(status=PaymentStatus.REFUNDED))
    crud.cancel_invoice(db, invoice)
    assert invoice.status == InvoiceStatus.CANCELLED


def test_send_records_first_sent_date(db, seed, make_delivery):
    make_delivery()
    invoice = generate_for_society(db, seed)
    assert invoice.sent_date is None

    crud.send_invoice(db, invoice)
    first_sent = invoice.sent_date
    assert first_sent is not None

    invoice.status = InvoiceStatus.OVERDUE
    db.commit()
    crud.send_invoice(db, invoice)
    assert invoice.sent_date == first_sent
