"""invoice sent date

Revision ID: 0002
Revises: 0001
Create Date: 2025-11-18 16:40:07.219845

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column('invoices', sa.Column('sent_date', sa.DateTime(timezone=True), nullable=True))
    # Invoices already past draft were sent at some point; the exact time is unknown.
    op.execute(
        "UPDATE invoices SET sent_date = COALESCE(updated_at, created_at) "
        "WHERE status IN ('SENT', 'OVERDUE') AND sent_date IS NULL"
    )


def downgrade() -> None:
    op.drop_column('invoices', 'sent_date')
