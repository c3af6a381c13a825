"""initial_fx_desk_schema

Revision ID: 4c1d7e9a2b60
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d7e9a2b60'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, sessions, workspaces, invitations, cards and transactions."""
    op.create_table('users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('avatar', sa.String(length=500), nullable=True),
        sa.Column('provider', sa.String(length=20), server_default='EMAIL', nullable=False),
        sa.Column('provider_id', sa.String(length=255), nullable=True),
        sa.Column('email_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("provider IN ('EMAIL', 'GOOGLE', 'APPLE')", name='ck_users_provider'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('provider', 'provider_id', name='uq_users_provider_identity'),
    )

    op.create_table('refresh_tokens',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token_hash'),
    )
    op.create_index('ix_refresh_tokens_user_id', 'refresh_tokens', ['user_id'], unique=False)
    op.create_index('ix_refresh_tokens_expires_at', 'refresh_tokens', ['expires_at'], unique=False)

    op.create_table('workspaces',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('type', sa.String(length=20), server_default='SOLE_TRADER', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("type IN ('SOLE_TRADER', 'PARTNERSHIP')", name='ck_workspaces_type'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('workspace_members',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('workspace_id', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(length=20), server_default='MEMBER', nullable=False),
        sa.Column('is_owner', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('profit_split', sa.Numeric(precision=5, scale=2), server_default='0', nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("role IN ('OWNER', 'ADMIN', 'MEMBER')", name='ck_workspace_members_role'),
        sa.CheckConstraint(
            'profit_split >= 0 AND profit_split <= 100',
            name='ck_workspace_members_profit_split',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'workspace_id', name='uq_workspace_members_user_workspace'),
    )
    op.create_index('ix_workspace_members_user_id', 'workspace_members', ['user_id'], unique=False)
    op.create_index(
        'ix_workspace_members_workspace_id', 'workspace_members', ['workspace_id'], unique=False
    )
    # At most one owning member per workspace
    op.create_index(
        'uq_workspace_members_owner',
        'workspace_members',
        ['workspace_id'],
        unique=True,
        postgresql_where=sa.text('is_owner'),
    )

    op.create_table('workspace_settings',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('workspace_id', sa.UUID(), nullable=False),
        sa.Column('default_buy_rate', sa.Numeric(precision=10, scale=4), nullable=False),
        sa.Column('default_sell_rate', sa.Numeric(precision=10, scale=4), nullable=False),
        sa.Column('theme', sa.String(length=10), server_default='SYSTEM', nullable=False),
        sa.Column('currency', sa.String(length=10), server_default='MVR', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("theme IN ('LIGHT', 'DARK', 'SYSTEM')", name='ck_workspace_settings_theme'),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('workspace_id'),
    )

    op.create_table('invitations',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('workspace_id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('profit_split', sa.Numeric(precision=5, scale=2), server_default='0', nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('invited_by_id', sa.UUID(), nullable=False),
        sa.Column('invited_user_id', sa.UUID(), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='PENDING', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('accepted_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "status IN ('PENDING', 'ACCEPTED', 'EXPIRED', 'CANCELLED')",
            name='ck_invitations_status',
        ),
        sa.CheckConstraint(
            'profit_split >= 0 AND profit_split <= 100',
            name='ck_invitations_profit_split',
        ),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['invited_by_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['invited_user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token_hash'),
    )
    op.create_index('ix_invitations_workspace_id', 'invitations', ['workspace_id'], unique=False)
    # One live invitation per (workspace, email)
    op.create_index(
        'uq_invitations_pending_workspace_email',
        'invitations',
        ['workspace_id', 'email'],
        unique=True,
        postgresql_where=sa.text("status = 'PENDING'"),
    )

    op.create_table('cards',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('workspace_id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('usd_limit', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('color', sa.String(length=7), server_default='#3B82F6', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_cards_workspace_id', 'cards', ['workspace_id'], unique=False)

    op.create_table('transactions',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('workspace_id', sa.UUID(), nullable=False),
        sa.Column('card_id', sa.UUID(), nullable=False),
        sa.Column('usd_used', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('usdt_received', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('buy_rate', sa.Numeric(precision=10, scale=4), nullable=False),
        sa.Column('sell_rate', sa.Numeric(precision=10, scale=4), nullable=False),
        sa.Column('cost', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('sale', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('profit', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('site', sa.String(length=200), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='COMPLETED', nullable=False),
        sa.Column('transaction_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "status IN ('PENDING', 'COMPLETED', 'CANCELLED')",
            name='ck_transactions_status',
        ),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['card_id'], ['cards.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_transactions_card_id', 'transactions', ['card_id'], unique=False)
    op.create_index(
        'ix_transactions_workspace_date',
        'transactions',
        ['workspace_id', 'transaction_date'],
        unique=False,
    )


def downgrade() -> None:
    """Drop every FX Desk table."""
    op.drop_index('ix_transactions_workspace_date', table_name='transactions')
    op.drop_index('ix_transactions_card_id', table_name='transactions')
    op.drop_table('transactions')
    op.drop_index('ix_cards_workspace_id', table_name='cards')
    op.drop_table('cards')
    op.drop_index('uq_invitations_pending_workspace_email', table_name='invitations')
    op.drop_index('ix_invitations_workspace_id', table_name='invitations')
    op.drop_table('invitations')
    op.drop_table('workspace_settings')
    op.drop_index('uq_workspace_members_owner', table_name='workspace_members')
    op.drop_index('ix_workspace_members_workspace_id', table_name='workspace_members')
    op.drop_index('ix_workspace_members_user_id', table_name='workspace_members')
    op.drop_table('workspace_members')
    op.drop_index('ix_refresh_tokens_expires_at', table_name='refresh_tokens')
    op.drop_index('ix_refresh_tokens_user_id', table_name='refresh_tokens')
    op.drop_table('refresh_tokens')
    op.drop_table('users')
