"""
Alembic migration: customer phone numbers and vendor product categories.

Adds the ``phone_numbers`` list to customers and the ``product_categories``
table, unique per vendor and name.

Revision ID: 002
Revises: 001
Create Date: 2026-10-18 10:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# Revision identifiers, used by Alembic
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add customer phone numbers and the product_categories table."""
    op.add_column(
        'customers',
        sa.Column(
            'phone_numbers',
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
    )

    op.create_table(
        'product_categories',
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
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column(
            'color', sa.String(length=50), nullable=False, server_default='text-blue-500'
        ),
        sa.Column(
            'bg_color', sa.String(length=50), nullable=False, server_default='bg-blue-50'
        ),
        sa.Column(
            'icon', sa.String(length=50), nullable=False, server_default='ShoppingBasket'
        ),
        sa.Column(
            'subcategories',
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.PrimaryKeyConstraint('id', name='pk_product_categories'),
        sa.ForeignKeyConstraint(
            ['vendor_id'], ['vendors.id'],
            name='fk_product_categories_vendor_id', ondelete='CASCADE',
        ),
        sa.UniqueConstraint('vendor_id', 'name', name='uq_product_categories_vendor_name'),
    )
    op.create_index(
        'ix_product_categories_vendor_id', 'product_categories', ['vendor_id']
    )


def downgrade() -> None:
    """Drop the categories table and the customer phone list."""
    op.drop_index('ix_product_categories_vendor_id', table_name='product_categories')
    op.drop_table('product_categories')
    op.drop_column('customers', 'phone_numbers')
