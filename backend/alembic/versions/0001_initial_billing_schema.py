"""initial billing schema

Revision ID: 0001
Revises:
Create Date: 2025-11-03 10:12:41.508317

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLAlchemy stores enum member names, not values.
ENUMS = {
    'recordstatus': ('PENDING', 'COMPLETED', 'CANCELLED'),
    'invoicetype': ('PURCHASE', 'DELIVERY', 'MONTHLY'),
    'invoicerelatedto': ('SUPPLIER', 'SOCIETY'),
    'invoicestatus': ('DRAFT', 'SENT', 'PAID', 'OVERDUE', 'CANCELLED'),
    'paymenttype': ('PURCHASE', 'DELIVERY', 'EXPENSE', 'OTHER'),
    'paymentrelatedto': ('SUPPLIER', 'SOCIETY', 'DRIVER', 'VENDOR'),
    'paymentmethod': ('CASH', 'BANK_TRANSFER', 'UPI', 'CHEQUE', 'CARD', 'NEFT', 'RTGS'),
    'paymentstatus': ('PENDING', 'COMPLETED', 'FAILED', 'REFUNDED'),
    'expensecategory': ('FUEL', 'TOLL', 'MAINTENANCE', 'FOOD', 'MEDICAL', 'PERSONAL', 'OTHER'),
    'expensestatus': ('PENDING', 'APPROVED', 'REJECTED', 'PAID'),
    'chargedto': ('VENDOR', 'DRIVER'),
    'attendancestatus': ('PRESENT', 'HALF', 'ABSENT'),
}


def _enum(name: str):
    # Types are created once up front; tables only reference them.
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _audit_columns():
    return [
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def _index_audit_columns(table_name: str):
    op.create_index(op.f(f'ix_{table_name}_id'), table_name, ['id'], unique=False)
    op.create_index(op.f(f'ix_{table_name}_tenant_id'), table_name, ['tenant_id'], unique=False)
    op.create_index(op.f(f'ix_{table_name}_created_at'), table_name, ['created_at'], unique=False)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        'suppliers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('contact_name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('purchase_rate', sa.Numeric(12, 4), nullable=False),
        sa.Column('payment_terms', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    _index_audit_columns('suppliers')

    op.create_table(
        'societies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('contact_name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('delivery_rate', sa.Numeric(12, 4), nullable=False),
        sa.Column('payment_terms', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    _index_audit_columns('societies')

    op.create_table(
        'drivers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('daily_wage', sa.Numeric(12, 2), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    _index_audit_columns('drivers')

    op.create_table(
        'vehicles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vehicle_number', sa.String(), nullable=False),
        sa.Column('vehicle_type', sa.String(), nullable=True),
        sa.Column('capacity', sa.Numeric(12, 2), nullable=False),
        sa.Column('driver_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['driver_id'], ['drivers.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'vehicle_number', name='_tenant_vehicle_number_uc'),
    )
    _index_audit_columns('vehicles')

    op.create_table(
        'invoices',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('invoice_number', sa.String(), nullable=False),
        sa.Column('invoice_type', _enum('invoicetype'), nullable=False),
        sa.Column('related_to', _enum('invoicerelatedto'), nullable=False),
        sa.Column('related_id', sa.Integer(), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=True),
        sa.Column('period_end', sa.Date(), nullable=True),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('tax', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount', sa.Numeric(12, 2), nullable=False),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', _enum('invoicestatus'), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('paid_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'invoice_number', name='_tenant_invoice_number_uc'),
    )
    _index_audit_columns('invoices')
    op.create_index(op.f('ix_invoices_invoice_number'), 'invoices', ['invoice_number'], unique=False)
    op.create_index(op.f('ix_invoices_related_id'), 'invoices', ['related_id'], unique=False)

    op.create_table(
        'invoice_counters',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('invoice_type', _enum('invoicetype'), nullable=False),
        sa.Column('period', sa.String(length=6), nullable=False),
        sa.Column('last_value', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'invoice_type', 'period', name='_tenant_type_period_uc'),
    )
    op.create_index(op.f('ix_invoice_counters_id'), 'invoice_counters', ['id'], unique=False)

    op.create_table(
        'collections',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('supplier_id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.Integer(), nullable=False),
        sa.Column('driver_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('rate', sa.Numeric(12, 4), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', _enum('recordstatus'), nullable=False),
        sa.Column('is_invoiced', sa.Boolean(), nullable=False),
        sa.Column('invoice_id', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['supplier_id'], ['suppliers.id']),
        sa.ForeignKeyConstraint(['vehicle_id'], ['vehicles.id']),
        sa.ForeignKeyConstraint(['driver_id'], ['drivers.id']),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    _index_audit_columns('collections')
    op.create_index(op.f('ix_collections_supplier_id'), 'collections', ['supplier_id'], unique=False)
    op.create_index(op.f('ix_collections_driver_id'), 'collections', ['driver_id'], unique=False)

    op.create_table(
        'deliveries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('society_id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.Integer(), nullable=False),
        sa.Column('driver_id', sa.Integer(), nullable=False),
        sa.Column('collection_id', sa.Integer(), nullable=True),
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('rate', sa.Numeric(12, 4), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', _enum('recordstatus'), nullable=False),
        sa.Column('is_invoiced', sa.Boolean(), nullable=False),
        sa.Column('invoice_id', sa.Integer(), nullable=True),
        sa.Column('signed_by', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['society_id'], ['societies.id']),
        sa.ForeignKeyConstraint(['vehicle_id'], ['vehicles.id']),
        sa.ForeignKeyConstraint(['driver_id'], ['drivers.id']),
        sa.ForeignKeyConstraint(['collection_id'], ['collections.id']),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    _index_audit_columns('deliveries')
    op.create_index(op.f('ix_deliveries_society_id'), 'deliveries', ['society_id'], unique=False)
    op.create_index(op.f('ix_deliveries_driver_id'), 'deliveries', ['driver_id'], unique=False)

    op.create_table(
        'invoice_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('invoice_id', sa.Integer(), nullable=False),
        sa.Column('collection_id', sa.Integer(), nullable=True),
        sa.Column('delivery_id', sa.Integer(), nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('driver_name', sa.String(), nullable=True),
        sa.Column('vehicle_number', sa.String(), nullable=True),
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('rate', sa.Numeric(12, 4), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id']),
        sa.ForeignKeyConstraint(['collection_id'], ['collections.id']),
        sa.ForeignKeyConstraint(['delivery_id'], ['deliveries.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_invoice_items_id'), 'invoice_items', ['id'], unique=False)
    op.create_index(op.f('ix_invoice_items_invoice_id'), 'invoice_items', ['invoice_id'], unique=False)

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('driver_id', sa.Integer(), nullable=False),
        sa.Column('collection_id', sa.Integer(), nullable=True),
        sa.Column('delivery_id', sa.Integer(), nullable=True),
        sa.Column('category', _enum('expensecategory'), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', _enum('expensestatus'), nullable=False),
        sa.Column('charged_to', _enum('chargedto'), nullable=False),
        sa.Column('approved_by', sa.String(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('payment_id', sa.Integer(), nullable=True),
        sa.Column('expense_date', sa.Date(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['driver_id'], ['drivers.id']),
        sa.ForeignKeyConstraint(['collection_id'], ['collections.id']),
        sa.ForeignKeyConstraint(['delivery_id'], ['deliveries.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    _index_audit_columns('expenses')
    op.create_index(op.f('ix_expenses_driver_id'), 'expenses', ['driver_id'], unique=False)

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('payment_type', _enum('paymenttype'), nullable=False),
        sa.Column('related_to', _enum('paymentrelatedto'), nullable=False),
        sa.Column('related_id', sa.Integer(), nullable=False),
        sa.Column('invoice_id', sa.Integer(), nullable=True),
        sa.Column('collection_id', sa.Integer(), nullable=True),
        sa.Column('delivery_id', sa.Integer(), nullable=True),
        sa.Column('expense_id', sa.Integer(), nullable=True),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_method', _enum('paymentmethod'), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('status', _enum('paymentstatus'), nullable=False),
        sa.Column('reference_number', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id']),
        sa.ForeignKeyConstraint(['collection_id'], ['collections.id']),
        sa.ForeignKeyConstraint(['delivery_id'], ['deliveries.id']),
        sa.ForeignKeyConstraint(['expense_id'], ['expenses.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    _index_audit_columns('payments')
    op.create_index(op.f('ix_payments_related_id'), 'payments', ['related_id'], unique=False)
    op.create_index(op.f('ix_payments_invoice_id'), 'payments', ['invoice_id'], unique=False)
    op.create_index(op.f('ix_payments_collection_id'), 'payments', ['collection_id'], unique=False)

    op.create_table(
        'driver_attendance',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('driver_id', sa.Integer(), nullable=False),
        sa.Column('attendance_date', sa.Date(), nullable=False),
        sa.Column('status', _enum('attendancestatus'), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('marked_by', sa.String(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['driver_id'], ['drivers.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'driver_id', 'attendance_date', name='_tenant_driver_date_uc'),
    )
    _index_audit_columns('driver_attendance')
    op.create_index(op.f('ix_driver_attendance_driver_id'), 'driver_attendance', ['driver_id'], unique=False)


def downgrade() -> None:
    for table_name in (
        'driver_attendance',
        'payments',
        'expenses',
        'invoice_items',
        'deliveries',
        'collections',
        'invoice_counters',
        'invoices',
        'vehicles',
        'drivers',
        'societies',
        'suppliers',
    ):
        op.drop_table(table_name)
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).drop(bind, checkfirst=True)
