"""Read-time reconciliation for suppliers and societies.

Nothing here is cached or stored: every call recomputes from the records and
payments. Outstanding figures are signed; a negative value means the
counterparty has paid more than it was billed.
"""
from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from crud.payments import invoice_paid_amount
from crud.societies import get_society
from crud.suppliers import get_supplier
from exceptions import NotFoundError, ValidationError
from models.collections import Collection
from models.deliveries import Delivery
from models.invoices import Invoice, InvoiceRelatedTo, InvoiceStatus
from models.payments import Payment, PaymentRelatedTo, PaymentStatus, PaymentType
from models.transaction_records import RecordStatus
from utils import to_money
from utils.dates import current_month_bounds

OPEN_INVOICE_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.OVERDUE)


def get_supplier_outstanding(db: Session, tenant_id: str, supplier_id: int) -> Dict:
    if get_supplier(db, supplier_id, tenant_id) is None:
        raise NotFoundError(f"Supplier {supplier_id} not found")

    completed = db.query(Collection).filter(
        Collection.tenant_id == tenant_id,
        Collection.supplier_id == supplier_id,
        Collection.status == RecordStatus.COMPLETED,
    )
    total_collections = completed.with_entities(func.coalesce(func.sum(Collection.total_amount), 0)).scalar()

    total_paid = (
        db.query(func.coalesce(func.sum(Payment.amount), 0))
        .filter(
            Payment.tenant_id == tenant_id,
            Payment.payment_type == PaymentType.PURCHASE,
            Payment.related_to == PaymentRelatedTo.SUPPLIER,
            Payment.related_id == supplier_id,
            Payment.status == PaymentStatus.COMPLETED,
        )
        .scalar()
    )

    # Collections have no paid flag; a collection is paid once a completed payment names it.
    paid_collection_ids = (
        select(Payment.collection_id)
        .where(
            Payment.tenant_id == tenant_id,
            Payment.status == PaymentStatus.COMPLETED,
            Payment.collection_id.isnot(None),
        )
    )
    unpaid_collections = (
        completed.options(joinedload(Collection.vehicle), joinedload(Collection.driver))
        .filter(Collection.id.notin_(paid_collection_ids))
        .order_by(Collection.created_at.desc(), Collection.id.desc())
        .all()
    )

    total_collections = to_money(total_collections)
    total_paid = to_money(total_paid)
    return {
        "total_collections": total_collections,
        "total_paid": total_paid,
        "outstanding": total_collections - total_paid,
        "unpaid_collections": unpaid_collections,
    }


def get_society_outstanding(db: Session, tenant_id: str, society_id: int) -> Dict:
    if get_society(db, society_id, tenant_id) is None:
        raise NotFoundError(f"Society {society_id} not found")

    invoices = (
        db.query(Invoice)
        .filter(
            Invoice.tenant_id == tenant_id,
            Invoice.related_to == InvoiceRelatedTo.SOCIETY,
            Invoice.related_id == society_id,
            Invoice.status.in_(OPEN_INVOICE_STATUSES),
        )
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        .all()
    )
    outstanding_invoices = []
    total_invoiced = to_money(0)
    total_paid = to_money(0)
    for invoice in invoices:
        paid = invoice_paid_amount(db, invoice.id)
        total_invoiced += invoice.total
        total_paid += paid
        outstanding_invoices.append({
            "id": invoice.id,
            "invoice_number": invoice.invoice_number,
            "total": invoice.total,
            "paid": paid,
            "outstanding": to_money(invoice.total - paid),
            "due_date": invoice.due_date,
            "status": invoice.status,
            "created_at": invoice.created_at,
            "period": invoice.period,
        })

    unbilled_deliveries = (
        db.query(Delivery)
        .options(joinedload(Delivery.vehicle), joinedload(Delivery.driver))
        .filter(
            Delivery.tenant_id == tenant_id,
            Delivery.society_id == society_id,
            Delivery.status == RecordStatus.COMPLETED,
            Delivery.is_invoiced.is_(False),
        )
        .order_by(Delivery.created_at.desc(), Delivery.id.desc())
        .all()
    )
    unbilled_amount = to_money(sum((d.total_amount for d in unbilled_deliveries), to_money(0)))

    return {
        "outstanding_invoices": outstanding_invoices,
        "total_outstanding": to_money(total_invoiced - total_paid),
        "total_invoiced": to_money(total_invoiced),
        "total_paid": to_money(total_paid),
        "unbilled_deliveries": unbilled_deliveries,
        "unbilled_amount": unbilled_amount,
    }


def get_outstanding(db: Session, tenant_id: str, counterparty_id: int, related_to) -> Dict:
    related_to = getattr(related_to, "value", related_to)
    if related_to == InvoiceRelatedTo.SUPPLIER.value:
        return get_supplier_outstanding(db, tenant_id, counterparty_id)
    if related_to == InvoiceRelatedTo.SOCIETY.value:
        return get_society_outstanding(db, tenant_id, counterparty_id)
    raise ValidationError("relatedTo must be 'supplier' or 'society'")


def _period_totals(query, model, window=None) -> Dict:
    if window is not None:
        query = query.filter(model.created_at >= window[0], model.created_at < window[1])
    count, quantity, amount = query.with_entities(
        func.count(model.id),
        func.coalesce(func.sum(model.quantity), 0),
        func.coalesce(func.sum(model.total_amount), 0),
    ).one()
    return {"count": count, "quantity": to_money(quantity), "amount": to_money(amount)}

def _counterparty_stats(db: Session, model, counterparty_column, tenant_id: str, counterparty_id: int) -> Dict:
    completed = db.query(model).filter(
        model.tenant_id == tenant_id,
        counterparty_column == counterparty_id,
        model.status == RecordStatus.COMPLETED,
    )
    return {
        "monthly": _period_totals(completed, model, current_month_bounds()),
        "total": _period_totals(completed, model),
    }

def get_supplier_stats(db: Session, tenant_id: str, supplier_id: int) -> Dict:
    if get_supplier(db, supplier_id, tenant_id) is None:
        raise NotFoundError(f"Supplier {supplier_id} not found")
    return _counterparty_stats(db, Collection, Collection.supplier_id, tenant_id, supplier_id)

def get_society_stats(db: Session, tenant_id: str, society_id: int) -> Dict:
    if get_society(db, society_id, tenant_id) is None:
        raise NotFoundError(f"Society {society_id} not found")
    return _counterparty_stats(db, Delivery, Delivery.society_id, tenant_id, society_id)
