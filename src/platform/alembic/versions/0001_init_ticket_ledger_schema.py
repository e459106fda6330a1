"""init_ticket_ledger_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-16

Schema:
- user / event: read-only copies of the identity and catalogue records
- ticket_type: per-event inventory with sold_count bounded by quantity
- ticket: one row per purchase attempt, keyed by payment_reference
- platform_account / fee_credit: platform fee ledger

Constraints carrying the purchase guarantees:
- uq_ticket_payment_reference: a reference maps to exactly one ticket
- uq_ticket_active_user_event: one pending/completed ticket per (user, event)
- ck_ticket_type_not_oversold: sold_count <= quantity
- fee_credit.ticket_id unique: one fee entry per ticket
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


_ACTIVE_STATUS_CLAUSE = sa.text("payment_status IN ('pending', 'completed')")


def upgrade() -> None:
    """Create all tables with final schema."""

    # ========== STEP 1: Read-only aggregates ==========

    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'event',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('is_free', sa.Boolean(), nullable=False),
        sa.Column('gender_restriction', sa.String(length=20), nullable=False),
        sa.Column('age_restriction', sa.JSON(), nullable=False),
        sa.Column('has_multiple_ticket_types', sa.Boolean(), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_event_owner_id'), 'event', ['owner_id'], unique=False)

    # ========== STEP 2: Inventory and tickets ==========

    op.create_table(
        'ticket_type',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('sold_count', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('sold_count >= 0', name='ck_ticket_type_sold_count_non_negative'),
        sa.CheckConstraint('sold_count <= quantity', name='ck_ticket_type_not_oversold'),
        sa.ForeignKeyConstraint(['event_id'], ['event.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_ticket_type_event_id'), 'ticket_type', ['event_id'], unique=False)

    op.create_table(
        'ticket',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('ticket_type_id', sa.Integer(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_reference', sa.String(length=255), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column(
            'purchase_date',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.ForeignKeyConstraint(['event_id'], ['event.id']),
        sa.ForeignKeyConstraint(['ticket_type_id'], ['ticket_type.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_ticket_user_id'), 'ticket', ['user_id'], unique=False)
    op.create_index(op.f('ix_ticket_event_id'), 'ticket', ['event_id'], unique=False)
    op.create_index('uq_ticket_payment_reference', 'ticket', ['payment_reference'], unique=True)
    op.create_index(
        'uq_ticket_active_user_event',
        'ticket',
        ['user_id', 'event_id'],
        unique=True,
        postgresql_where=_ACTIVE_STATUS_CLAUSE,
        sqlite_where=_ACTIVE_STATUS_CLAUSE,
    )

    # ========== STEP 3: Platform fee ledger ==========

    op.create_table(
        'platform_account',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('balance', sa.Numeric(14, 4), nullable=False),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'fee_credit',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('ticket_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(14, 4), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column('credited_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['ticket_id'], ['ticket.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ticket_id'),
    )
    op.create_index(op.f('ix_fee_credit_status'), 'fee_credit', ['status'], unique=False)


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index(op.f('ix_fee_credit_status'), table_name='fee_credit')
    op.drop_table('fee_credit')
    op.drop_table('platform_account')
    op.drop_index('uq_ticket_active_user_event', table_name='ticket')
    op.drop_index('uq_ticket_payment_reference', table_name='ticket')
    op.drop_index(op.f('ix_ticket_event_id'), table_name='ticket')
    op.drop_index(op.f('ix_ticket_user_id'), table_name='ticket')
    op.drop_table('ticket')
    op.drop_index(op.f('ix_ticket_type_event_id'), table_name='ticket_type')
    op.drop_table('ticket_type')
    op.drop_index(op.f('ix_event_owner_id'), table_name='event')
    op.drop_table('event')
    op.drop_index(op.f('ix_user_email'), table_name='user')
    op.drop_table('user')
