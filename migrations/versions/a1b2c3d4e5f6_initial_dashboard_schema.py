"""initial dashboard schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'admin_user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('allowed_pages', sa.JSON(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_admin_user_email', 'admin_user', ['email'], unique=True)

    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('user_name', sa.String(length=120), nullable=True),
        sa.Column('user_email', sa.String(length=255), nullable=True),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('resource', sa.String(length=50), nullable=False),
        sa.Column('resource_id', sa.String(length=64), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_activity_log_user_id', 'activity_log', ['user_id'])
    op.create_index('ix_activity_log_action', 'activity_log', ['action'])
    op.create_index('ix_activity_log_resource', 'activity_log', ['resource'])
    op.create_index('ix_activity_log_created_at', 'activity_log', ['created_at'])

    op.create_table(
        'country',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=2), nullable=False),
        sa.Column('name_ar', sa.String(length=120), nullable=False),
        sa.Column('name_en', sa.String(length=120), nullable=False),
        sa.Column('currency_code', sa.String(length=10), nullable=False),
        sa.Column('currency_symbol', sa.String(length=10), nullable=True),
        sa.Column('flag_emoji', sa.String(length=16), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )
    op.create_index('ix_country_is_active', 'country', ['is_active'])

    op.create_table(
        'currency_rate',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('from_currency', sa.String(length=10), nullable=False),
        sa.Column('to_currency', sa.String(length=10), nullable=False),
        sa.Column('rate', sa.Numeric(precision=20, scale=6), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('api_provider', sa.String(length=50), nullable=True),
        sa.Column('last_api_sync', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('from_currency', 'to_currency', name='unique_currency_pair')
    )
    op.create_index('ix_currency_rate_from_currency', 'currency_rate', ['from_currency'])
    op.create_index('ix_currency_rate_to_currency', 'currency_rate', ['to_currency'])
    op.create_index('ix_currency_rate_is_active', 'currency_rate', ['is_active'])
    op.create_index('idx_active_rates', 'currency_rate', ['is_active', 'from_currency', 'to_currency'])

    op.create_table(
        'product',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name_ar', sa.String(length=255), nullable=False),
        sa.Column('name_en', sa.String(length=255), nullable=False),
        sa.Column('description_ar', sa.Text(), nullable=True),
        sa.Column('description_en', sa.Text(), nullable=True),
        sa.Column('base_currency', sa.String(length=10), nullable=False, server_default='SAR'),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('in_stock', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('work_as_sacrifice', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_product_in_stock', 'product', ['in_stock'])
    op.create_index('idx_product_display_order', 'product', ['display_order', 'created_at'])

    op.create_table(
        'product_size',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('name_ar', sa.String(length=255), nullable=False),
        sa.Column('name_en', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['product_id'], ['product.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_product_size_product_id', 'product_size', ['product_id'])

    op.create_table(
        'size_price',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('size_id', sa.Integer(), nullable=False),
        sa.Column('currency_code', sa.String(length=10), nullable=False),
        sa.Column('amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('is_manual', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['size_id'], ['product_size.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('size_id', 'currency_code', name='unique_size_currency')
    )
    op.create_index('ix_size_price_size_id', 'size_price', ['size_id'])

    op.create_table(
        'appearance',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project', sa.String(length=20), nullable=False),
        sa.Column('row1', sa.JSON(), nullable=False),
        sa.Column('row2', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('project')
    )

    op.create_table(
        'payment_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project', sa.String(length=20), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False, server_default='paymob'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('project')
    )


def downgrade() -> None:
    op.drop_table('payment_settings')
    op.drop_table('appearance')
    op.drop_index('ix_size_price_size_id', table_name='size_price')
    op.drop_table('size_price')
    op.drop_index('ix_product_size_product_id', table_name='product_size')
    op.drop_table('product_size')
    op.drop_index('idx_product_display_order', table_name='product')
    op.drop_index('ix_product_in_stock', table_name='product')
    op.drop_table('product')
    op.drop_index('idx_active_rates', table_name='currency_rate')
    op.drop_index('ix_currency_rate_is_active', table_name='currency_rate')
    op.drop_index('ix_currency_rate_to_currency', table_name='currency_rate')
    op.drop_index('ix_currency_rate_from_currency', table_name='currency_rate')
    op.drop_table('currency_rate')
    op.drop_index('ix_country_is_active', table_name='country')
    op.drop_table('country')
    op.drop_index('ix_activity_log_created_at', table_name='activity_log')
    op.drop_index('ix_activity_log_resource', table_name='activity_log')
    op.drop_index('ix_activity_log_action', table_name='activity_log')
    op.drop_index('ix_activity_log_user_id', table_name='activity_log')
    op.drop_table('activity_log')
    op.drop_index('ix_admin_user_email', table_name='admin_user')
    op.drop_table('admin_user')
