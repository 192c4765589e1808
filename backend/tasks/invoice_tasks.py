import logging

from sqlalchemy.orm import Session

from crud.invoices import mark_overdue_invoices
from database import SessionLocal

logger = logging.getLogger(__name__)


def run_overdue_sweep() -> int:
    """
    Marks every tenant's sent invoices whose due date has passed as overdue.

    Runs from the scheduler once a day, after the business day has closed, so
    an invoice due today only turns overdue tomorrow.
    """
    logger.info("Starting overdue invoice sweep.")
    db: Session = SessionLocal()
    try:
        count = mark_overdue_invoices(db)
        logger.info(f"Overdue invoice sweep finished, {count} invoices marked overdue.")
        return count
    except Exception as e:
        logger.error(f"Overdue invoice sweep failed: {e}", exc_info=True)
        db.rollback()
        return 0
    finally:
        db.close()
