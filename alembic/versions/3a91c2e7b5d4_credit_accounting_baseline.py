"""credit_accounting_baseline

Revision ID: 3a91c2e7b5d4
Revises:
Create Date: 2026-10-19 10:12:41.208331

Production-safe migration: only creates tables that do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '3a91c2e7b5d4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    """Create users, plan catalog, subscriptions and the monthly usage ledger."""
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('full_name', sa.String(), nullable=True),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('preferred_language', sa.String(length=2), nullable=False, server_default='tr'),
            sa.Column('is_blocked', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    if not table_exists('subscription_plans'):
        op.create_table('subscription_plans',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(length=32), nullable=False),
            sa.Column('display_name_tr', sa.String(), nullable=False),
            sa.Column('display_name_en', sa.String(), nullable=False),
            sa.Column('description_tr', sa.String(), nullable=True),
            sa.Column('description_en', sa.String(), nullable=True),
            sa.Column('monthly_price_usd', sa.Numeric(10, 2), nullable=False, server_default='0'),
            sa.Column('annual_price_usd', sa.Numeric(10, 2), nullable=True),
            sa.Column('monthly_credit_limit', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('features', sa.JSON(), nullable=False, server_default='[]'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_subscription_plans_name'), 'subscription_plans', ['name'], unique=True)

    if not table_exists('user_subscriptions'):
        op.create_table('user_subscriptions',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('plan_id', sa.String(length=36), nullable=False),
            sa.Column('status', sa.String(), nullable=False, server_default='active'),
            sa.Column('billing_cycle', sa.String(), nullable=False, server_default='monthly'),
            sa.Column('current_period_start', sa.DateTime(timezone=True), nullable=False),
            sa.Column('current_period_end', sa.DateTime(timezone=True), nullable=False),
            sa.Column('auto_renew', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.ForeignKeyConstraint(['plan_id'], ['subscription_plans.id'], ),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_user_subscriptions_user_id'), 'user_subscriptions', ['user_id'], unique=False)
        # At most one active subscription per user
        op.create_index(
            'uq_user_subscriptions_one_active', 'user_subscriptions', ['user_id'],
            unique=True,
            postgresql_where=sa.text("status = 'active'"),
            sqlite_where=sa.text("status = 'active'"),
        )

    if not table_exists('user_usage'):
        op.create_table('user_usage',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('month_year', sa.String(length=7), nullable=False),
            sa.Column('pdfs_processed', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('animations_created', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('storage_used_mb', sa.Float(), nullable=False, server_default='0'),
            sa.Column('last_reset_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id', 'month_year', name='uq_user_usage_user_month')
        )
        op.create_index(op.f('ix_user_usage_user_id'), 'user_usage', ['user_id'], unique=False)
        op.create_index(op.f('ix_user_usage_month_year'), 'user_usage', ['month_year'], unique=False)


def downgrade() -> None:
    """Drop tables in reverse dependency order."""
    op.drop_index(op.f('ix_user_usage_month_year'), table_name='user_usage')
    op.drop_index(op.f('ix_user_usage_user_id'), table_name='user_usage')
    op.drop_table('user_usage')
    op.drop_index('uq_user_subscriptions_one_active', table_name='user_subscriptions')
    op.drop_index(op.f('ix_user_subscriptions_user_id'), table_name='user_subscriptions')
    op.drop_table('user_subscriptions')
    op.drop_index(op.f('ix_subscription_plans_name'), table_name='subscription_plans')
    op.drop_table('subscription_plans')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
