"""
Alembic migration: initial marketplace schema.

Creates vendor and customer accounts, the product catalog, carts, orders
with their line items, delivery agents and deliveries. Deliveries reference
their agent with ON DELETE SET NULL and a check constraint requires an agent
while a delivery is Assigned or Out for Delivery.

Revision ID: 001
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# Revision identifiers, used by Alembic
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ORDER_STATUSES = ('Pending', 'Preparing', 'Out for Delivery', 'Delivered', 'Cancelled')
DELIVERY_STATUSES = (
    'Pending Assignment',
    'Assigned',
    'Out for Delivery',
    'Delivered',
    'Attempted Delivery',
    'Cancelled',
    'Delayed',
)
VEHICLE_TYPES = ('bike', 'car', 'scooter', 'other')


def _base_columns() -> list:
    return [
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            'created_at',
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
        sa.Column(
            'updated_at',
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
    ]


def upgrade() -> None:
    """Create all marketplace tables, enums, indexes and constraints."""
    order_status = postgresql.ENUM(*ORDER_STATUSES, name='order_status', create_type=False)
    delivery_status = postgresql.ENUM(
        *DELIVERY_STATUSES, name='delivery_status', create_type=False
    )
    vehicle_type = postgresql.ENUM(*VEHICLE_TYPES, name='vehicle_type', create_type=False)

    bind = op.get_bind()
    order_status.create(bind, checkfirst=True)
    delivery_status.create(bind, checkfirst=True)
    vehicle_type.create(bind, checkfirst=True)

    # Accounts
    op.create_table(
        'vendors',
        *_base_columns(),
        sa.Column('business_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        sa.Column(
            'store_settings',
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id', name='pk_vendors'),
    )
    op.create_index('ix_vendors_email', 'vendors', ['email'], unique=True)

    op.create_table(
        'customers',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('address', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id', name='pk_customers'),
    )
    op.create_index('ix_customers_email', 'customers', ['email'], unique=True)

    # Catalog
    op.create_table(
        'products',
        *_base_columns(),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('unit', sa.String(length=50), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            'tags',
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.PrimaryKeyConstraint('id', name='pk_products'),
        sa.ForeignKeyConstraint(
            ['vendor_id'], ['vendors.id'], name='fk_products_vendor_id', ondelete='CASCADE'
        ),
        sa.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
        sa.CheckConstraint('stock >= 0', name='ck_products_stock_non_negative'),
    )
    op.create_index('ix_products_vendor_id', 'products', ['vendor_id'])
    op.create_index('ix_products_category', 'products', ['category'])
    op.create_index('ix_products_vendor_stock', 'products', ['vendor_id', 'stock'])

    op.create_table(
        'cart_items',
        *_base_columns(),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id', name='pk_cart_items'),
        sa.ForeignKeyConstraint(
            ['customer_id'], ['customers.id'],
            name='fk_cart_items_customer_id', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.id'],
            name='fk_cart_items_product_id', ondelete='CASCADE',
        ),
        sa.UniqueConstraint('customer_id', 'product_id', name='uq_cart_items_customer_product'),
        sa.CheckConstraint('quantity > 0', name='ck_cart_items_quantity_positive'),
    )
    op.create_index('ix_cart_items_customer_id', 'cart_items', ['customer_id'])

    # Orders
    op.create_table(
        'orders',
        *_base_columns(),
        sa.Column('order_number', sa.String(length=50), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', order_status, nullable=False, server_default='Pending'),
        sa.Column(
            'order_date',
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
        sa.Column('delivery_address', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_orders'),
        sa.ForeignKeyConstraint(
            ['customer_id'], ['customers.id'],
            name='fk_orders_customer_id', ondelete='RESTRICT',
        ),
        sa.ForeignKeyConstraint(
            ['vendor_id'], ['vendors.id'], name='fk_orders_vendor_id', ondelete='RESTRICT'
        ),
        sa.CheckConstraint('total_amount >= 0', name='ck_orders_total_non_negative'),
    )
    op.create_index('ix_orders_order_number', 'orders', ['order_number'], unique=True)
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])
    op.create_index('ix_orders_vendor_id', 'orders', ['vendor_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_vendor_created', 'orders', ['vendor_id', 'created_at'])
    op.create_index('ix_orders_customer_created', 'orders', ['customer_id', 'created_at'])

    op.create_table(
        'order_items',
        *_base_columns(),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('unit', sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_order_items'),
        sa.ForeignKeyConstraint(
            ['order_id'], ['orders.id'], name='fk_order_items_order_id', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.id'],
            name='fk_order_items_product_id', ondelete='SET NULL',
        ),
        sa.CheckConstraint('quantity > 0', name='ck_order_items_quantity_positive'),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    # Delivery
    op.create_table(
        'delivery_agents',
        *_base_columns(),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('vehicle_type', vehicle_type, nullable=False, server_default='other'),
        sa.Column('vehicle_details', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id', name='pk_delivery_agents'),
        sa.ForeignKeyConstraint(
            ['vendor_id'], ['vendors.id'],
            name='fk_delivery_agents_vendor_id', ondelete='CASCADE',
        ),
        sa.UniqueConstraint('vendor_id', 'phone', name='uq_delivery_agents_vendor_phone'),
    )
    op.create_index('ix_delivery_agents_vendor_id', 'delivery_agents', ['vendor_id'])

    op.create_table(
        'deliveries',
        *_base_columns(),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=True),
        sa.Column('customer_phone', sa.String(length=20), nullable=True),
        sa.Column('customer_address', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('order_value', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column(
            'status', delivery_status, nullable=False, server_default='Pending Assignment'
        ),
        sa.Column('delivery_agent_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('scheduled_pickup_time', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('actual_pickup_time', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('scheduled_delivery_time', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('estimated_delivery_time', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('actual_delivery_time', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('delivery_notes', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_deliveries'),
        sa.ForeignKeyConstraint(
            ['order_id'], ['orders.id'], name='fk_deliveries_order_id', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['customer_id'], ['customers.id'],
            name='fk_deliveries_customer_id', ondelete='RESTRICT',
        ),
        sa.ForeignKeyConstraint(
            ['vendor_id'], ['vendors.id'], name='fk_deliveries_vendor_id', ondelete='RESTRICT'
        ),
        sa.ForeignKeyConstraint(
            ['delivery_agent_id'], ['delivery_agents.id'],
            name='fk_deliveries_delivery_agent_id', ondelete='SET NULL',
        ),
        sa.UniqueConstraint('order_id', name='uq_deliveries_order_id'),
        sa.CheckConstraint(
            "delivery_agent_id IS NOT NULL "
            "OR status NOT IN ('Assigned', 'Out for Delivery')",
            name='ck_deliveries_agent_required',
        ),
    )
    op.create_index('ix_deliveries_customer_id', 'deliveries', ['customer_id'])
    op.create_index('ix_deliveries_vendor_id', 'deliveries', ['vendor_id'])
    op.create_index('ix_deliveries_status', 'deliveries', ['status'])
    op.create_index('ix_deliveries_delivery_agent_id', 'deliveries', ['delivery_agent_id'])
    op.create_index('ix_deliveries_vendor_created', 'deliveries', ['vendor_id', 'created_at'])


def downgrade() -> None:
    """Drop every table and enum created by upgrade, dependents first."""
    op.drop_table('deliveries')
    op.drop_table('delivery_agents')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('cart_items')
    op.drop_table('products')
    op.drop_table('customers')
    op.drop_table('vendors')

    bind = op.get_bind()
    postgresql.ENUM(name='vehicle_type').drop(bind, checkfirst=True)
    postgresql.ENUM(name='delivery_status').drop(bind, checkfirst=True)
    postgresql.ENUM(name='order_status').drop(bind, checkfirst=True)
