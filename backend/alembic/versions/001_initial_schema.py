"""
Initial schema: users, poojas, billing, receipt counters, withdrawals, expenses, audit logs

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


USER_ROLES = ('ADMIN', 'STAFF')
AUDIT_ACTIONS = (
    'USER_LOGIN', 'USER_LOGOUT',
    'USER_CREATE', 'USER_UPDATE', 'USER_DEACTIVATE',
    'POOJA_CREATE', 'POOJA_UPDATE', 'POOJA_DELETE', 'POOJA_TOGGLE',
    'BILLING_CREATE',
    'WITHDRAWAL_CREATE',
    'EXPENSE_CREATE',
)

json_type = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(50), nullable=False, comment='login id, also recorded on every bill'),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False, comment='display name'),
        sa.Column('role', sa.Enum(*USER_ROLES, name='user_role'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, comment='inactive users cannot log in'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'poojas',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False, unique=True, comment='pooja name'),
        sa.Column('price', sa.Numeric(12, 2), nullable=False, comment='unit price'),
        sa.Column('visible', sa.Boolean(), nullable=False, comment='shown on the billing form'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'billing',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('devotee_name', sa.String(200), nullable=True, comment='devotee name'),
        sa.Column('pooja_name', sa.String(255), nullable=False, comment="pooja name, or 'Donation – <purpose>'"),
        sa.Column('qty', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False, comment='unit price'),
        sa.Column('total', sa.Numeric(12, 2), nullable=False, comment='price x qty'),
        sa.Column('receipt_no', sa.String(40), nullable=False, unique=True, comment='SRI/<fiscal year>/<serial>'),
        sa.Column('fiscal_year', sa.String(5), nullable=False, comment='e.g. 25-26'),
        sa.Column('bill_date', sa.Date(), nullable=False, comment='business date'),
        sa.Column('bill_datetime', sa.DateTime(), nullable=False),
        sa.Column('username', sa.String(50), nullable=False, comment='issuing user'),
        sa.Column('payment_mode', sa.String(30), nullable=False),
        sa.Column('reference_id', sa.String(100), nullable=True, comment='payment reference, online payments only'),
        sa.Column('withdrawn', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_billing_user_date', 'billing', ['username', 'bill_date'])
    op.create_index('ix_billing_bill_date', 'billing', ['bill_date'])

    op.create_table(
        'receipt_counters',
        sa.Column('fiscal_year', sa.String(5), primary_key=True, comment='e.g. 25-26'),
        sa.Column('last_serial', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'withdrawals',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('withdrawal_date', sa.Date(), nullable=False, comment='business date handed over against'),
        sa.Column('cash', sa.Numeric(12, 2), nullable=False),
        sa.Column('online', sa.Numeric(12, 2), nullable=False),
        sa.Column('donation', sa.Numeric(12, 2), nullable=False),
        sa.Column('handover', sa.Numeric(12, 2), nullable=False, comment='amount handed over'),
        sa.Column('remaining', sa.Numeric(12, 2), nullable=False, comment='cash - (earlier handovers + handover), may be negative'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_withdrawals_user_date', 'withdrawals', ['username', 'withdrawal_date'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('purpose', sa.String(500), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('added_by', sa.String(50), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_expenses_expense_date', 'expenses', ['expense_date'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(50), nullable=False, comment='acting user'),
        sa.Column('action', sa.Enum(*AUDIT_ACTIONS, name='audit_action'), nullable=False),
        sa.Column('target_type', sa.String(50), nullable=False, comment='e.g. billing, pooja, withdrawal, expense, user'),
        sa.Column('target_id', sa.String(50), nullable=True),
        sa.Column('before_data', json_type, nullable=True),
        sa.Column('after_data', json_type, nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])
    op.create_index('ix_audit_logs_user_created', 'audit_logs', ['username', 'created_at'])
    op.create_index('ix_audit_logs_action_created', 'audit_logs', ['action', 'created_at'])
    op.create_index('ix_audit_logs_target', 'audit_logs', ['target_type', 'target_id'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('expenses')
    op.drop_table('withdrawals')
    op.drop_table('receipt_counters')
    op.drop_table('billing')
    op.drop_table('poojas')
    op.drop_table('users')

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        op.execute('DROP TYPE IF EXISTS audit_action')
        op.execute('DROP TYPE IF EXISTS user_role')
