"""add_support_tickets

Revision ID: 7c4e1f2a9b03
Revises: 3a91c2e7b5d4
Create Date: 2026-10-26 09:41:07.552190

Production-safe migration: only creates tables that do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '7c4e1f2a9b03'
down_revision: Union[str, None] = '3a91c2e7b5d4'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    """Create support tickets and admin replies."""
    if not table_exists('support_tickets'):
        op.create_table('support_tickets',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=True),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('subject', sa.String(length=200), nullable=False),
            sa.Column('message', sa.Text(), nullable=False),
            sa.Column('status', sa.String(), nullable=False, server_default='open'),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.Column('replied_at', sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_support_tickets_user_id'), 'support_tickets', ['user_id'], unique=False)
        op.create_index(op.f('ix_support_tickets_status'), 'support_tickets', ['status'], unique=False)

    if not table_exists('support_ticket_replies'):
        op.create_table('support_ticket_replies',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('ticket_id', sa.String(length=36), nullable=False),
            sa.Column('admin_id', sa.String(), nullable=False),
            sa.Column('reply_text', sa.Text(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.ForeignKeyConstraint(['ticket_id'], ['support_tickets.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_support_ticket_replies_ticket_id'), 'support_ticket_replies', ['ticket_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_support_ticket_replies_ticket_id'), table_name='support_ticket_replies')
    op.drop_table('support_ticket_replies')
    op.drop_index(op.f('ix_support_tickets_status'), table_name='support_tickets')
    op.drop_index(op.f('ix_support_tickets_user_id'), table_name='support_tickets')
    op.drop_table('support_tickets')
