"""Invoice generation and lifecycle.

An invoice is a snapshot: its items copy date, driver, vehicle, quantity,
rate and amount from the source records at generation time and are never
re-read. ``total`` is fixed from the items (plus any later tax/discount
edit); payments only change the derived paid/outstanding figures.
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from crud.invoice_numbering import generate_invoice_number
from crud.payments import invoice_paid_amount, sync_invoice_status
from crud.societies import get_society
from crud.suppliers import get_supplier
from exceptions import NotFoundError, ValidationError
from models.collections import Collection
from models.deliveries import Delivery
from models.invoices import Invoice, InvoiceItem, InvoiceRelatedTo, InvoiceStatus, InvoiceType
from models.transaction_records import RecordStatus
from schemas import invoices as schemas
from utils import to_money
from utils.dates import day_range, now_local, parse_date, today_local

logger = logging.getLogger("invoices")

SENDABLE_STATUSES = {InvoiceStatus.DRAFT, InvoiceStatus.OVERDUE}
LOCKED_STATUSES = {InvoiceStatus.PAID, InvoiceStatus.CANCELLED}


def _parse_related_to(value) -> InvoiceRelatedTo:
    if isinstance(value, InvoiceRelatedTo):
        return value
    try:
        return InvoiceRelatedTo(value)
    except ValueError:
        raise ValidationError("relatedTo must be 'supplier' or 'society'")


def select_billable_records(db: Session, tenant_id: str, related_to: InvoiceRelatedTo, related_id: int,
                            start_date: date, end_date: date):
    """Completed, not yet invoiced records of the counterparty created within the whole days given."""
    if related_to == InvoiceRelatedTo.SOCIETY:
        model, counterparty_column = Delivery, Delivery.society_id
    else:
        model, counterparty_column = Collection, Collection.supplier_id

    window_start, window_end = day_range(start_date, end_date)
    return (
        db.query(model)
        .options(joinedload(model.vehicle), joinedload(model.driver))
        .filter(
            model.tenant_id == tenant_id,
            counterparty_column == related_id,
            model.status == RecordStatus.COMPLETED,
            model.is_invoiced.is_(False),
            model.created_at >= window_start,
            model.created_at < window_end,
        )
        .order_by(model.created_at, model.id)
        .all()
    )

def build_line_item(record) -> InvoiceItem:
    item = InvoiceItem(
        date=record.created_at,
        driver_name=record.driver_name,
        vehicle_number=record.vehicle_number,
        quantity=record.quantity,
        rate=record.rate,
        amount=to_money(record.total_amount),
    )
    if isinstance(record, Delivery):
        item.delivery_id = record.id
    else:
        item.collection_id = record.id
    return item


def generate_invoice(db: Session, tenant_id: str, related_to, related_id, start_date, end_date,
                     user_id: str = None) -> Invoice:
    """Bundle a counterparty's completed, uninvoiced records in a date range into a draft invoice.

    The invoice, its counter increment and the ``is_invoiced`` flags on the
    source records are committed together; any failure rolls all of them back.
    """
    if related_id is None or not related_to or not start_date or not end_date:
        raise ValidationError("relatedId, relatedTo, startDate and endDate are required")
    related_to = _parse_related_to(related_to)
    start = parse_date(start_date, "startDate")
    end = parse_date(end_date, "endDate")
    if start > end:
        raise ValidationError("startDate must be on or before endDate")

    if related_to == InvoiceRelatedTo.SOCIETY:
        counterparty = get_society(db, related_id, tenant_id)
    else:
        counterparty = get_supplier(db, related_id, tenant_id)
    if counterparty is None:
        raise NotFoundError(f"{related_to.value.capitalize()} {related_id} not found")

    records = select_billable_records(db, tenant_id, related_to, related_id, start, end)
    if not records:
        raise NotFoundError("No completed, uninvoiced records found for the selected period")

    items = [build_line_item(record) for record in records]
    subtotal = to_money(sum(item.amount for item in items))

    try:
        invoice = Invoice(
            tenant_id=tenant_id,
            invoice_number=generate_invoice_number(db, tenant_id, InvoiceType.MONTHLY),
            invoice_type=InvoiceType.MONTHLY,
            related_to=related_to,
            related_id=related_id,
            period_start=start,
            period_end=end,
            subtotal=subtotal,
            tax=to_money(0),
            discount=to_money(0),
            total=subtotal,
            status=InvoiceStatus.DRAFT,
            due_date=end,
            items=items,
            created_by=user_id,
        )
        db.add(invoice)
        db.flush()
        for record in records:
            record.is_invoiced = True
            record.invoice_id = invoice.id
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Invoice generation failed for {related_to.value} {related_id} (tenant {tenant_id})")
        raise

    db.refresh(invoice)
    logger.info(
        f"Invoice {invoice.invoice_number} generated for {related_to.value} {related_id}: "
        f"{len(items)} items, total {invoice.total} (tenant {tenant_id})"
    )
    return invoice


def get_invoice(db: Session, invoice_id: int, tenant_id: str) -> Optional[Invoice]:
    return db.query(Invoice).filter(Invoice.id == invoice_id, Invoice.tenant_id == tenant_id).first()

def get_invoices(
    db: Session,
    tenant_id: str,
    invoice_type: Optional[InvoiceType] = None,
    related_to: Optional[InvoiceRelatedTo] = None,
    related_id: Optional[int] = None,
    status: Optional[InvoiceStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Invoice]:
    query = db.query(Invoice).filter(Invoice.tenant_id == tenant_id)
    if invoice_type is not None:
        query = query.filter(Invoice.invoice_type == invoice_type)
    if related_to is not None:
        query = query.filter(Invoice.related_to == related_to)
    if related_id is not None:
        query = query.filter(Invoice.related_id == related_id)
    if status is not None:
        query = query.filter(Invoice.status == status)
    if start_date and end_date:
        window_start, window_end = day_range(start_date, end_date)
        query = query.filter(Invoice.created_at >= window_start, Invoice.created_at < window_end)
    return query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).offset(skip).limit(limit).all()


def update_invoice(db: Session, invoice: Invoice, changes: schemas.InvoiceUpdate, user_id: str = None) -> Invoice:
    """Edit tax, discount, due date or notes. Items and subtotal never change."""
    if invoice.status in LOCKED_STATUSES:
        raise ValidationError(f"A {invoice.status.value} invoice cannot be edited")
    values = changes.model_dump(exclude_unset=True)
    for key in ("tax", "discount"):
        if key in values:
            if values[key] is None or values[key] < 0:
                raise ValidationError(f"{key} must be zero or more")
            values[key] = to_money(values[key])
    tax = values.get("tax", invoice.tax)
    discount = values.get("discount", invoice.discount)
    total = to_money(invoice.subtotal + tax - discount)
    if total < 0:
        raise ValidationError(f"Discount {discount} exceeds subtotal plus tax ({invoice.subtotal + tax})")
    for key, value in values.items():
        setattr(invoice, key, value)
    invoice.total = total
    invoice.updated_by = user_id
    # A lower total may now be covered by payments already received.
    sync_invoice_status(db, invoice)
    db.commit()
    db.refresh(invoice)
    logger.info(f"Invoice {invoice.invoice_number} updated, total now {invoice.total}")
    return invoice

def send_invoice(db: Session, invoice: Invoice, user_id: str = None) -> Invoice:
    if invoice.status not in SENDABLE_STATUSES:
        raise ValidationError(f"A {invoice.status.value} invoice cannot be sent")
    invoice.status = InvoiceStatus.SENT
    if invoice.sent_date is None:
        invoice.sent_date = now_local()
    invoice.updated_by = user_id
    db.commit()
    db.refresh(invoice)
    logger.info(f"Invoice {invoice.invoice_number} sent")
    return invoice

def cancel_invoice(db: Session, invoice: Invoice, user_id: str = None) -> Invoice:
    """Cancel and release the source records so they can be billed again."""
    if invoice.status == InvoiceStatus.PAID:
        raise ValidationError("A paid invoice cannot be cancelled")
    if invoice.status == InvoiceStatus.CANCELLED:
        return invoice
    paid = invoice_paid_amount(db, invoice.id)
    if paid > 0:
        raise ValidationError(f"Invoice {invoice.invoice_number} has {paid} in completed payments; refund them before cancelling")

    model = Delivery if invoice.related_to == InvoiceRelatedTo.SOCIETY else Collection
    released = (
        db.query(model)
        .filter(model.tenant_id == invoice.tenant_id, model.invoice_id == invoice.id)
        .update({model.is_invoiced: False, model.invoice_id: None}, synchronize_session="fetch")
    )
    invoice.status = InvoiceStatus.CANCELLED
    invoice.updated_by = user_id
    db.commit()
    db.refresh(invoice)
    logger.info(f"Invoice {invoice.invoice_number} cancelled, {released} records released")
    return invoice


def mark_overdue_invoices(db: Session, tenant_id: Optional[str] = None, today: Optional[date] = None) -> int:
    """Move sent invoices whose due date has passed to overdue. ``tenant_id=None`` sweeps every tenant."""
    today = today or today_local()
    query = db.query(Invoice).filter(
        Invoice.status == InvoiceStatus.SENT,
        Invoice.due_date.isnot(None),
        Invoice.due_date < today,
    )
    if tenant_id is not None:
        query = query.filter(Invoice.tenant_id == tenant_id)
    invoices = query.all()
    for invoice in invoices:
        invoice.status = InvoiceStatus.OVERDUE
    db.commit()
    if invoices:
        logger.info(f"Marked {len(invoices)} invoices overdue (tenant {tenant_id or 'all'})")
    return len(invoices)
