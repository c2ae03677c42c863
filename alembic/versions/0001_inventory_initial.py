"""Create category, supplier and product tables

Revision ID: 0001_inventory_initial
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_inventory_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'category',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'supplier',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('contact_person', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('country', sa.String(length=100), nullable=True),
        sa.Column('postal_code', sa.String(length=20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('uq_supplier_name_lower', 'supplier', [sa.text('lower(name)')], unique=True)

    op.create_table(
        'product',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('supplier_id', sa.Integer(), nullable=True),
        sa.Column('sku', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('inventory_quantity', sa.Integer(), server_default='0', nullable=False),
        sa.Column('low_stock_threshold', sa.Integer(), nullable=True),
        sa.Column('low_stock', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('price > 0', name='ck_product_price_positive'),
        sa.CheckConstraint('inventory_quantity >= 0', name='ck_product_quantity_non_negative'),
        sa.CheckConstraint(
            'low_stock_threshold IS NULL OR low_stock_threshold >= 1',
            name='ck_product_threshold_min',
        ),
        sa.ForeignKeyConstraint(['category_id'], ['category.id'], ),
        sa.ForeignKeyConstraint(['supplier_id'], ['supplier.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('sku'),
    )
    op.create_index('ix_product_category_id', 'product', ['category_id'], unique=False)
    op.create_index('ix_product_supplier_id', 'product', ['supplier_id'], unique=False)
    op.create_index('ix_product_name', 'product', ['name'], unique=False)
    op.create_index('ix_product_low_stock', 'product', ['low_stock'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_product_low_stock', table_name='product')
    op.drop_index('ix_product_name', table_name='product')
    op.drop_index('ix_product_supplier_id', table_name='product')
    op.drop_index('ix_product_category_id', table_name='product')
    op.drop_table('product')
    op.drop_index('uq_supplier_name_lower', table_name='supplier')
    op.drop_table('supplier')
    op.drop_table('category')
