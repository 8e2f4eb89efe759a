"""Initial schema for the Ascent Finance API

Revision ID: 3f1c9a2e7b40
Revises:
Create Date: 2026-10-18

Tables Created:
- users: Accounts, Google identity and preferences
- workspaces / workspace_members: Shared workspaces and invitations
- shared_users: Legacy per-owner sharing records
- accounts, positions, day_trades, portfolio_snapshots, portfolio_transactions
- expense_transactions, categories, cards, budgets
- financial_goals, notes
- dashboard_widgets, page_layouts

Every financial table carries created_by (owner e-mail), created_date and
updated_date.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3f1c9a2e7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')

OWNED_TABLES = (
    'shared_users',
    'accounts',
    'positions',
    'day_trades',
    'portfolio_snapshots',
    'portfolio_transactions',
    'expense_transactions',
    'categories',
    'cards',
    'budgets',
    'financial_goals',
    'notes',
    'dashboard_widgets',
    'page_layouts',
)


def _base_columns(owned: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_date', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]
    if owned:
        columns.append(sa.Column('created_by', sa.String(length=255), nullable=False))
    return columns


def upgrade() -> None:
    """Upgrade schema."""
    # =========================================================================
    # STEP 1: Identity and sharing
    # =========================================================================

    op.create_table(
        'users',
        *_base_columns(owned=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('google_id', sa.String(length=255), nullable=True),
        sa.Column('avatar', sa.String(length=1024), nullable=True),
        sa.Column('auth_provider', sa.String(length=20), nullable=False, server_default='local'),
        sa.Column('language', sa.String(length=10), nullable=False, server_default='en'),
        sa.Column('currency', sa.String(length=10), nullable=False, server_default='USD'),
        sa.Column('theme', sa.String(length=20), nullable=False, server_default='dark'),
        sa.Column('blur_values', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('price_alerts', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('weekly_reports', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('email_notifications', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_first_login', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('default_workspace_id', sa.Uuid(), nullable=True),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users'))
    )
    op.create_index(op.f('ix_users_created_date'), 'users', ['created_date'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_google_id'), 'users', ['google_id'], unique=False)

    op.create_table(
        'workspaces',
        *_base_columns(owned=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ['owner_id'], ['users.id'],
            name=op.f('fk_workspaces_owner_id_users'),
            ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_workspaces'))
    )
    op.create_index(op.f('ix_workspaces_created_date'), 'workspaces', ['created_date'], unique=False)
    op.create_index(op.f('ix_workspaces_owner_id'), 'workspaces', ['owner_id'], unique=False)

    op.create_table(
        'workspace_members',
        *_base_columns(owned=False),
        sa.Column('workspace_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='viewer'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('permissions', JSON_TYPE, nullable=False),
        sa.ForeignKeyConstraint(
            ['workspace_id'], ['workspaces.id'],
            name=op.f('fk_workspace_members_workspace_id_workspaces'),
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_workspace_members_user_id_users'),
            ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_workspace_members')),
        sa.UniqueConstraint('workspace_id', 'email', name='uq_workspace_members_workspace_email')
    )
    op.create_index(op.f('ix_workspace_members_created_date'), 'workspace_members', ['created_date'], unique=False)
    op.create_index(op.f('ix_workspace_members_workspace_id'), 'workspace_members', ['workspace_id'], unique=False)
    op.create_index(op.f('ix_workspace_members_user_id'), 'workspace_members', ['user_id'], unique=False)
    op.create_index(op.f('ix_workspace_members_email'), 'workspace_members', ['email'], unique=False)
    op.create_index(op.f('ix_workspace_members_status'), 'workspace_members', ['status'], unique=False)

    op.create_table(
        'shared_users',
        *_base_columns(),
        sa.Column('invited_email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('permissions', JSON_TYPE, nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_shared_users'))
    )
    op.create_index(op.f('ix_shared_users_invited_email'), 'shared_users', ['invited_email'], unique=False)

    # =========================================================================
    # STEP 2: Portfolio
    # =========================================================================

    op.create_table(
        'accounts',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('base_currency', sa.String(length=10), nullable=False, server_default='USD'),
        sa.Column('institution', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('initial_investment', sa.Float(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_accounts'))
    )

    op.create_table(
        'positions',
        *_base_columns(),
        sa.Column('account_id', sa.String(length=64), nullable=False),
        sa.Column('symbol', sa.String(length=32), nullable=False),
        sa.Column('asset_type', sa.String(length=32), nullable=False),
        sa.Column('strike_price', sa.Float(), nullable=True),
        sa.Column('expiration_date', sa.String(length=32), nullable=True),
        sa.Column('option_type', sa.String(length=8), nullable=True),
        sa.Column('option_action', sa.String(length=8), nullable=True),
        sa.Column('premium_price', sa.Float(), nullable=True),
        sa.Column('stock_price_at_purchase', sa.Float(), nullable=True),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('average_buy_price', sa.Float(), nullable=False),
        sa.Column('current_price', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(length=10), nullable=False, server_default='USD'),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('last_price_update', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_positions'))
    )
    op.create_index(op.f('ix_positions_account_id'), 'positions', ['account_id'], unique=False)
    op.create_index(op.f('ix_positions_symbol'), 'positions', ['symbol'], unique=False)

    op.create_table(
        'day_trades',
        *_base_columns(),
        sa.Column('account_id', sa.String(length=64), nullable=False),
        sa.Column('symbol', sa.String(length=32), nullable=False),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('entry_price', sa.Float(), nullable=False),
        sa.Column('exit_price', sa.Float(), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('profit_loss', sa.Float(), nullable=False),
        sa.Column('side', sa.String(length=8), nullable=False, server_default='long'),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_day_trades'))
    )
    op.create_index(op.f('ix_day_trades_account_id'), 'day_trades', ['account_id'], unique=False)

    op.create_table(
        'portfolio_snapshots',
        *_base_columns(),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('total_value', sa.Float(), nullable=False),
        sa.Column('total_cost_basis', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_pnl', sa.Float(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_portfolio_snapshots'))
    )
    op.create_index(op.f('ix_portfolio_snapshots_date'), 'portfolio_snapshots', ['date'], unique=False)

    op.create_table(
        'portfolio_transactions',
        *_base_columns(),
        sa.Column('account_id', sa.String(length=64), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('symbol', sa.String(length=32), nullable=True),
        sa.Column('asset_type', sa.String(length=32), nullable=True),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('price_per_unit', sa.Float(), nullable=False, server_default='1'),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(length=10), nullable=False, server_default='USD'),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('position_id', sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_portfolio_transactions'))
    )
    op.create_index(
        op.f('ix_portfolio_transactions_account_id'), 'portfolio_transactions', ['account_id'], unique=False
    )

    # =========================================================================
    # STEP 3: Expenses
    # =========================================================================

    op.create_table(
        'expense_transactions',
        *_base_columns(),
        sa.Column('type', sa.String(length=10), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(length=10), nullable=False, server_default='USD'),
        sa.Column('amount_in_global_currency', sa.Float(), nullable=True),
        sa.Column('exchange_rate', sa.Float(), nullable=True),
        sa.Column('category', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=False, server_default=''),
        sa.Column('card_id', sa.String(length=64), nullable=True),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('recurring_frequency', sa.String(length=10), nullable=True),
        sa.Column('recurring_start_date', sa.String(length=32), nullable=True),
        sa.Column('recurring_end_date', sa.String(length=32), nullable=True),
        sa.Column('related_account_id', sa.String(length=64), nullable=True),
        sa.Column('tags', JSON_TYPE, nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_expense_transactions'))
    )
    op.create_index(op.f('ix_expense_transactions_category'), 'expense_transactions', ['category'], unique=False)
    op.create_index(op.f('ix_expense_transactions_date'), 'expense_transactions', ['date'], unique=False)

    op.create_table(
        'categories',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('name_key', sa.String(length=100), nullable=True),
        sa.Column('type', sa.String(length=10), nullable=False, server_default='Expense'),
        sa.Column('icon', sa.String(length=32), nullable=True),
        sa.Column('color', sa.String(length=16), nullable=True),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_categories'))
    )

    op.create_table(
        'cards',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('last_four_digits', sa.String(length=4), nullable=True),
        sa.Column('type', sa.String(length=10), nullable=False, server_default='credit'),
        sa.Column('network', sa.String(length=20), nullable=False, server_default='visa'),
        sa.Column('color', sa.String(length=16), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_cards'))
    )

    op.create_table(
        'budgets',
        *_base_columns(),
        sa.Column('category', sa.String(length=255), nullable=False),
        sa.Column('monthly_limit', sa.Float(), nullable=False),
        sa.Column('alert_threshold', sa.Float(), nullable=False, server_default='80'),
        sa.Column('currency', sa.String(length=10), nullable=False, server_default='USD'),
        sa.Column('period', sa.String(length=10), nullable=False, server_default='monthly'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_budgets'))
    )

    # =========================================================================
    # STEP 4: Planning and layout
    # =========================================================================

    op.create_table(
        'financial_goals',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('target_amount', sa.Float(), nullable=False),
        sa.Column('current_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('target_date', sa.String(length=32), nullable=True),
        sa.Column('category', sa.String(length=20), nullable=False, server_default='savings'),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_financial_goals'))
    )

    op.create_table(
        'notes',
        *_base_columns(),
        sa.Column('title', sa.String(length=255), nullable=False, server_default='Untitled'),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('color', sa.String(length=16), nullable=False, server_default='#5C8374'),
        sa.Column('is_pinned', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_shared', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('tags', JSON_TYPE, nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_notes'))
    )

    op.create_table(
        'dashboard_widgets',
        *_base_columns(),
        sa.Column('widget_type', sa.String(length=100), nullable=False),
        sa.Column('x', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('y', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('w', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('h', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('settings', JSON_TYPE, nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_dashboard_widgets'))
    )

    op.create_table(
        'page_layouts',
        *_base_columns(),
        sa.Column('page_name', sa.String(length=100), nullable=False),
        sa.Column('widget_type', sa.String(length=100), nullable=False),
        sa.Column('x', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('y', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('w', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('h', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_page_layouts'))
    )
    op.create_index(op.f('ix_page_layouts_page_name'), 'page_layouts', ['page_name'], unique=False)

    # Owner scope and default sort on every owned table
    for table in OWNED_TABLES:
        op.create_index(op.f(f'ix_{table}_created_by'), table, ['created_by'], unique=False)
        op.create_index(op.f(f'ix_{table}_created_date'), table, ['created_date'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    for table in reversed(OWNED_TABLES):
        op.drop_table(table)

    op.drop_table('workspace_members')
    op.drop_table('workspaces')
    op.drop_table('users')
