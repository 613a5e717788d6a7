"""initial wealth schema

Revision ID: 5c1e9a7d3b20
Revises:
Create Date: 2026-10-19 10:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c1e9a7d3b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

currency_enum = sa.Enum('EUR', 'USD', 'GBP', 'CHF', name='currency')
transaction_type_enum = sa.Enum('income', 'expense', name='transactiontype')
asset_category_enum = sa.Enum('investment', 'crypto', name='assetcategory')
liability_type_enum = sa.Enum('mortgage', 'loan', 'credit_card', 'other', name='liabilitytype')
liquidity_type_enum = sa.Enum('checking', 'savings', 'cash', 'money_market', name='liquidityaccounttype')


def upgrade() -> None:
    """Upgrade schema: create all tables."""
    op.create_table(
        'user',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_user_email', 'user', ['email'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(), sa.ForeignKey('user.id'), primary_key=True, nullable=False),
        sa.Column('base_currency', currency_enum, nullable=False),
        sa.Column('is_privacy_mode', sa.Boolean(), nullable=False),
        sa.Column('finnhub_key', sa.String(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'assets',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('category', asset_category_enum, nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('symbol', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('avg_buy_price', sa.Float(), nullable=False),
        sa.Column('trading_currency', sa.String(), nullable=False),
        sa.Column('sector', sa.String(), nullable=True),
        sa.Column('geography', sa.String(), nullable=True),
        sa.Column('current_price', sa.Float(), nullable=False),
        sa.Column('last_price_update', sa.DateTime(timezone=True), nullable=True),
        sa.Column('coin_id', sa.String(), nullable=True),
        sa.Column('fees', sa.Float(), nullable=False),
        sa.Column('isin', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_assets_user_id', 'assets', ['user_id'])
    op.create_index('ix_assets_category', 'assets', ['category'])

    op.create_table(
        'liabilities',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', liability_type_enum, nullable=False),
        sa.Column('principal', sa.Float(), nullable=True),
        sa.Column('current_balance', sa.Float(), nullable=False),
        sa.Column('interest_rate', sa.Float(), nullable=False),
        sa.Column('monthly_payment', sa.Float(), nullable=True),
        sa.Column('currency', currency_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_liabilities_user_id', 'liabilities', ['user_id'])

    op.create_table(
        'liquidity_accounts',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', liquidity_type_enum, nullable=False),
        sa.Column('balance', sa.Float(), nullable=False),
        sa.Column('currency', currency_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_liquidity_accounts_user_id', 'liquidity_accounts', ['user_id'])

    op.create_table(
        'portfolio_snapshots',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('net_worth', sa.Float(), nullable=False),
        sa.Column('total_assets', sa.Float(), nullable=False),
        sa.Column('total_liabilities', sa.Float(), nullable=False),
        sa.Column('liquidity', sa.Float(), nullable=False),
        sa.Column('investments', sa.Float(), nullable=False),
        sa.Column('crypto', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_portfolio_snapshots_user_id', 'portfolio_snapshots', ['user_id'])
    op.create_index('ix_portfolio_snapshots_date', 'portfolio_snapshots', ['date'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('type', transaction_type_enum, nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_date', 'transactions', ['date'])


def downgrade() -> None:
    """Downgrade schema: drop all tables."""
    for table in (
        'transactions',
        'portfolio_snapshots',
        'liquidity_accounts',
        'liabilities',
        'assets',
        'profiles',
        'user',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (
        currency_enum,
        transaction_type_enum,
        asset_category_enum,
        liability_type_enum,
        liquidity_type_enum,
    ):
        enum.drop(bind, checkfirst=True)
