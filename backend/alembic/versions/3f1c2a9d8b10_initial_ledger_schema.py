"""Initial ledger schema

Revision ID: 3f1c2a9d8b10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f1c2a9d8b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum types store member names, as SQLAlchemy's Enum(PyEnum) does
UNIT = sa.Enum('PCS', 'KG', 'G', 'LTR', 'ML', 'BOX', 'PACK', 'DOZEN', 'METER', 'FEET', name='unit')
PARTY_TYPE = sa.Enum('SUPPLIER', 'CUSTOMER', 'BOTH', name='partytype')
PAYMENT_STATUS = sa.Enum('UNPAID', 'PARTIAL', 'PAID', name='paymentstatus')
PURCHASE_STATUS = sa.Enum('DRAFT', 'CONFIRMED', 'CANCELLED', name='purchasestatus')
SALE_STATUS = sa.Enum('DRAFT', 'CONFIRMED', 'CANCELLED', 'RETURNED', name='salestatus')
PAYMENT_MODE = sa.Enum('CASH', 'UPI', 'CARD', 'BANK', 'CREDIT', 'CHEQUE', name='paymentmode')
MOVEMENT_TYPE = sa.Enum('PURCHASE', 'PURCHASE_REVERSAL', 'SALE', 'SALE_REVERSAL', 'ADJUSTMENT', name='movementtype')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
    ]


def _line_item_columns():
    return [
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('product_name', sa.String(), nullable=False),
        sa.Column('quantity', sa.Float(), sa.CheckConstraint('quantity >= 1'), nullable=False),
        sa.Column('unit_price', sa.Float(), sa.CheckConstraint('unit_price >= 0'), nullable=False),
        sa.Column('discount', sa.Float(), nullable=False),
        sa.Column('tax_rate', sa.Float(), nullable=False),
        sa.Column('tax_amount', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False),
    ]


# One non-unique ix_<table>_<column> index per column declared with index=True
def _indexes(table, *columns):
    for column in columns:
        op.create_index(op.f(f'ix_{table}_{column}'), table, [column])


def upgrade() -> None:
    """Upgrade schema."""
    # Accounts and audit trail
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    _indexes('users', 'id')

    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=True),
        sa.Column('resource', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
    )
    _indexes('logs', 'id', 'ts', 'user_id', 'action', 'resource', 'status')

    # Catalog
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'name', name='uq_category_owner_name'),
    )
    _indexes('categories', 'id', 'user_id', 'name', 'created_at')

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('sku', sa.String(), nullable=True),
        sa.Column('barcode', sa.String(), nullable=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('unit', UNIT, nullable=False),
        sa.Column('purchase_price', sa.Float(), sa.CheckConstraint('purchase_price >= 0'), nullable=False),
        sa.Column('sale_price', sa.Float(), sa.CheckConstraint('sale_price >= 0'), nullable=False),
        sa.Column('tax_rate', sa.Float(), sa.CheckConstraint('tax_rate >= 0 AND tax_rate <= 100'), nullable=False),
        sa.Column('hsn_code', sa.String(), nullable=True),
        sa.Column('current_stock', sa.Float(), sa.CheckConstraint('current_stock >= 0'), nullable=False),
        sa.Column('min_stock_level', sa.Float(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'sku', name='uq_product_owner_sku'),
    )
    _indexes('products', 'id', 'user_id', 'name', 'sku', 'category_id', 'created_at')

    # Trading parties
    op.create_table(
        'parties',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', PARTY_TYPE, nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('address_street', sa.String(), nullable=True),
        sa.Column('address_city', sa.String(), nullable=True),
        sa.Column('address_state', sa.String(), nullable=True),
        sa.Column('address_pincode', sa.String(), nullable=True),
        sa.Column('address_country', sa.String(), nullable=True),
        sa.Column('gstin', sa.String(), nullable=True),
        sa.Column('pan_number', sa.String(), nullable=True),
        sa.Column('opening_balance', sa.Float(), nullable=False),
        sa.Column('current_balance', sa.Float(), nullable=False),
        sa.Column('credit_limit', sa.Float(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    _indexes('parties', 'id', 'user_id', 'name', 'type', 'created_at')

    # Purchases
    op.create_table(
        'purchases',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('invoice_number', sa.String(), nullable=False),
        sa.Column('reference_number', sa.String(), nullable=True),
        sa.Column('party_id', sa.Integer(), sa.ForeignKey('parties.id'), nullable=False),
        sa.Column('purchase_date', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('discount_amount', sa.Float(), nullable=False),
        sa.Column('tax_amount', sa.Float(), nullable=False),
        sa.Column('shipping_charges', sa.Float(), nullable=False),
        sa.Column('other_charges', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('paid_amount', sa.Float(), sa.CheckConstraint('paid_amount >= 0'), nullable=False),
        sa.Column('payment_status', PAYMENT_STATUS, nullable=False),
        sa.Column('status', PURCHASE_STATUS, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'invoice_number', name='uq_purchase_owner_invoice'),
    )
    _indexes('purchases', 'id', 'user_id', 'invoice_number', 'party_id', 'payment_status', 'status', 'created_at')

    op.create_table(
        'purchase_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('purchase_id', sa.Integer(), sa.ForeignKey('purchases.id', ondelete='CASCADE'), nullable=False),
        *_line_item_columns(),
    )
    _indexes('purchase_items', 'id', 'purchase_id', 'product_id')

    # Sales
    op.create_table(
        'sales',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('invoice_number', sa.String(), nullable=False),
        sa.Column('party_id', sa.Integer(), sa.ForeignKey('parties.id'), nullable=True),
        sa.Column('customer_name', sa.String(), nullable=True),
        sa.Column('customer_phone', sa.String(), nullable=True),
        sa.Column('customer_address', sa.String(), nullable=True),
        sa.Column('sale_date', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('discount_amount', sa.Float(), nullable=False),
        sa.Column('tax_amount', sa.Float(), nullable=False),
        sa.Column('shipping_charges', sa.Float(), nullable=False),
        sa.Column('other_charges', sa.Float(), nullable=False),
        sa.Column('round_off', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('paid_amount', sa.Float(), sa.CheckConstraint('paid_amount >= 0'), nullable=False),
        sa.Column('payment_status', PAYMENT_STATUS, nullable=False),
        sa.Column('payment_mode', PAYMENT_MODE, nullable=False),
        sa.Column('status', SALE_STATUS, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'invoice_number', name='uq_sale_owner_invoice'),
    )
    _indexes('sales', 'id', 'user_id', 'invoice_number', 'party_id', 'payment_status', 'status', 'created_at')

    op.create_table(
        'sale_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sale_id', sa.Integer(), sa.ForeignKey('sales.id', ondelete='CASCADE'), nullable=False),
        *_line_item_columns(),
    )
    _indexes('sale_items', 'id', 'sale_id', 'product_id')

    # Stock ledger
    op.create_table(
        'stock_movements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('qty', sa.Float(), nullable=False),
        sa.Column('balance_after', sa.Float(), nullable=False),
        sa.Column('type', MOVEMENT_TYPE, nullable=False),
        sa.Column('reason', sa.String(), nullable=True),
        sa.Column('reference_type', sa.String(), nullable=True),
        sa.Column('reference_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
    )
    _indexes('stock_movements', 'id', 'user_id', 'product_id', 'type', 'created_at')


def downgrade() -> None:
    """Downgrade schema."""
    # Drop in reverse dependency order
    for table in (
        'stock_movements', 'sale_items', 'sales', 'purchase_items', 'purchases',
        'parties', 'products', 'categories', 'logs', 'users',
    ):
        op.drop_table(table)
    bind = op.get_bind()
    for enum_type in (MOVEMENT_TYPE, PAYMENT_MODE, SALE_STATUS, PURCHASE_STATUS, PAYMENT_STATUS, PARTY_TYPE, UNIT):
        enum_type.drop(bind, checkfirst=True)
