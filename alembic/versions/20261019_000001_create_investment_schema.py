"""Create investment platform schema.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, wallets, packages, investments, ledger and notifications."""

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('referral_code', sa.String(20), nullable=False),
        sa.Column('referred_by', sa.Integer(), nullable=True),
        sa.Column('is_blocked', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('blocked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['referred_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_referral_code', 'users', ['referral_code'], unique=True)
    op.create_index('ix_users_referred_by', 'users', ['referred_by'])
    op.create_index('ix_users_is_blocked', 'users', ['is_blocked'])

    op.create_table(
        'wallets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('balance', sa.BigInteger(), nullable=False, server_default='0', comment='Withdrawable cash, minor units'),
        sa.Column('points', sa.DECIMAL(18, 8), nullable=False, server_default='0', comment='1 point = 20 major units'),
        sa.Column('total_withdrawn', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('balance >= 0', name='check_wallet_balance_non_negative'),
        sa.CheckConstraint('points >= 0', name='check_wallet_points_non_negative'),
        sa.CheckConstraint('total_withdrawn >= 0', name='check_wallet_total_withdrawn_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_wallets_user_id', 'wallets', ['user_id'], unique=True)

    op.create_table(
        'investment_packages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('principal_amount', sa.BigInteger(), nullable=False),
        sa.Column('daily_return_amount', sa.BigInteger(), nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('principal_amount > 0', name='check_package_principal_positive'),
        sa.CheckConstraint('daily_return_amount > 0', name='check_package_daily_return_positive'),
        sa.CheckConstraint('duration_days > 0', name='check_package_duration_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_investment_packages_active', 'investment_packages', ['active'])

    op.create_table(
        'user_investments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('package_id', sa.Integer(), nullable=False),
        sa.Column('payment_mode', sa.String(20), nullable=False),
        sa.Column('amount_invested', sa.BigInteger(), nullable=False),
        sa.Column('amount_paid', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('initial_payment_deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('full_payment_deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_return_processed', sa.DateTime(timezone=True), nullable=True, comment='At most one daily return per UTC day'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint("payment_mode IN ('pay_now', 'pay_later')", name='check_investment_payment_mode'),
        sa.CheckConstraint("status IN ('pending', 'active', 'completed', 'cancelled')", name='check_investment_status'),
        sa.CheckConstraint('amount_invested > 0', name='check_investment_amount_positive'),
        sa.CheckConstraint('amount_paid >= 0', name='check_investment_paid_non_negative'),
        sa.CheckConstraint('amount_paid <= amount_invested', name='check_investment_paid_not_exceeds_invested'),
        sa.CheckConstraint(
            "(payment_mode = 'pay_later') = "
            "(initial_payment_deadline IS NOT NULL AND full_payment_deadline IS NOT NULL)",
            name='check_investment_deadlines_iff_pay_later',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['package_id'], ['investment_packages.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_user_investments_user_id', 'user_investments', ['user_id'])
    op.create_index('ix_user_investments_package_id', 'user_investments', ['package_id'])
    op.create_index('ix_user_investments_status', 'user_investments', ['status'])
    op.create_index('ix_user_investments_initial_payment_deadline', 'user_investments', ['initial_payment_deadline'])
    op.create_index('ix_user_investments_full_payment_deadline', 'user_investments', ['full_payment_deadline'])
    op.create_index('idx_investment_status_start', 'user_investments', ['status', 'start_date'])
    op.create_index('idx_investment_mode_status', 'user_investments', ['payment_mode', 'status'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False, comment='Signed minor units, negative is a debit'),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='completed'),
        sa.Column('funding_source', sa.String(20), nullable=False, server_default='balance'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint(
            "type IN ('bonus', 'cashback', 'withdrawal', 'investment', 'milestone', 'daily_return')",
            name='check_transaction_type',
        ),
        sa.CheckConstraint("status IN ('pending', 'completed', 'failed')", name='check_transaction_status'),
        sa.CheckConstraint("funding_source IN ('balance', 'points')", name='check_transaction_funding_source'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_type', 'transactions', ['type'])
    op.create_index('idx_transaction_user_created', 'transactions', ['user_id', 'created_at'])

    op.create_table(
        'referral_bonuses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('referrer_id', sa.Integer(), nullable=False),
        sa.Column('referred_id', sa.Integer(), nullable=False),
        sa.Column('investment_id', sa.Integer(), nullable=False),
        sa.Column('class', sa.String(1), nullable=False),
        sa.Column('percentage', sa.DECIMAL(5, 4), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint("\"class\" IN ('A', 'B', 'C')", name='check_referral_bonus_class'),
        sa.CheckConstraint('amount >= 0', name='check_referral_bonus_amount_non_negative'),
        sa.UniqueConstraint('referrer_id', 'investment_id', 'class', name='uq_referral_bonus_referrer_investment_class'),
        sa.ForeignKeyConstraint(['referrer_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['referred_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['investment_id'], ['user_investments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_referral_bonuses_referrer_id', 'referral_bonuses', ['referrer_id'])
    op.create_index('ix_referral_bonuses_referred_id', 'referral_bonuses', ['referred_id'])
    op.create_index('ix_referral_bonuses_investment_id', 'referral_bonuses', ['investment_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.String(1000), nullable=False),
        sa.Column('priority', sa.String(10), nullable=False, server_default='medium'),
        sa.Column('read', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint("priority IN ('low', 'medium', 'high')", name='check_notification_priority'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade() -> None:
    """Drop investment platform schema."""
    op.drop_table('notifications')
    op.drop_table('referral_bonuses')
    op.drop_table('transactions')
    op.drop_table('user_investments')
    op.drop_table('investment_packages')
    op.drop_table('wallets')
    op.drop_table('users')
