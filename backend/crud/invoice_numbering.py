"""Human readable invoice numbers: ``{PREFIX}-{YYYY}{MM}-{seq:04d}``.

The sequence comes from an ``invoice_counters`` row per tenant, invoice type
and calendar month, incremented under a row lock. Numbering is best effort:
if the counter cannot be used the number falls back to a timestamp form and
invoice creation carries on.
"""
import logging
import time
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from models.invoices import InvoiceCounter, InvoiceType
from utils.dates import now_local

logger = logging.getLogger("invoice_numbering")

PREFIXES = {
    InvoiceType.PURCHASE: "PUR",
    InvoiceType.DELIVERY: "DEL",
    InvoiceType.MONTHLY: "MON",
}

COUNTER_ATTEMPTS = 2


def format_invoice_number(invoice_type: InvoiceType, year: int, month: int, sequence: int) -> str:
    return f"{PREFIXES[invoice_type]}-{year:04d}{month:02d}-{sequence:04d}"

def fallback_invoice_number(invoice_type: InvoiceType, epoch_millis: Optional[int] = None) -> str:
    if epoch_millis is None:
        epoch_millis = int(time.time() * 1000)
    return f"{PREFIXES[invoice_type]}-{str(epoch_millis)[-8:]}"


def next_sequence(db: Session, tenant_id: str, invoice_type: InvoiceType, period: str) -> int:
    """Increment and return the counter for (tenant, type, YYYYMM).

    Runs in a savepoint so a lost insert race only undoes the counter work,
    never the caller's pending invoice.
    """
    with db.begin_nested():
        counter = (
            db.query(InvoiceCounter)
            .filter(
                InvoiceCounter.tenant_id == tenant_id,
                InvoiceCounter.invoice_type == invoice_type,
                InvoiceCounter.period == period,
            )
            .with_for_update()
            .first()
        )
        if counter is None:
            counter = InvoiceCounter(tenant_id=tenant_id, invoice_type=invoice_type, period=period, last_value=0)
            db.add(counter)
        counter.last_value += 1
        db.flush()
        return counter.last_value


def generate_invoice_number(db: Session, tenant_id: str, invoice_type: InvoiceType, now: Optional[datetime] = None) -> str:
    now = now or now_local()
    period = f"{now.year:04d}{now.month:02d}"
    for attempt in range(1, COUNTER_ATTEMPTS + 1):
        try:
            sequence = next_sequence(db, tenant_id, invoice_type, period)
            return format_invoice_number(invoice_type, now.year, now.month, sequence)
        except Exception as e:
            # A concurrent first insert for the month trips the unique constraint; the retry finds the row.
            logger.warning(f"Invoice counter attempt {attempt} failed for tenant {tenant_id} ({invoice_type.value}, {period}): {e}")

    number = fallback_invoice_number(invoice_type)
    logger.error(f"Falling back to timestamp invoice number {number} for tenant {tenant_id}")
    return number
