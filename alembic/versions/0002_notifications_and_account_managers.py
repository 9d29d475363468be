"""Add notifications, per-user reads and account managers

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 18:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NOTIFICATION_TYPE = sa.Enum('INFO', 'WARNING', 'SUCCESS', 'PROMO', name='notificationtype')


def upgrade() -> None:
    # DB stores enum names in uppercase (SQLAlchemy default for pg enum)
    op.execute("ALTER TYPE approle ADD VALUE IF NOT EXISTS 'GERENTE_CONTAS'")

    op.create_table('notifications',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('message', sa.Text(), nullable=False),
    sa.Column('type', NOTIFICATION_TYPE, nullable=False),
    sa.Column('image_url', sa.String(length=1024), nullable=True),
    sa.Column('link_url', sa.String(length=2048), nullable=True),
    sa.Column('link_text', sa.String(length=100), nullable=True),
    sa.Column('priority', sa.Integer(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    sa.Column('starts_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('created_by', sa.Integer(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_notifications_id'), 'notifications', ['id'], unique=False)

    op.create_table('user_notification_reads',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('notification_id', sa.Integer(), nullable=False),
    sa.Column('read_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['notification_id'], ['notifications.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('user_id', 'notification_id', name='uq_user_notification_read')
    )
    op.create_index(op.f('ix_user_notification_reads_id'), 'user_notification_reads', ['id'], unique=False)
    op.create_index(op.f('ix_user_notification_reads_user_id'), 'user_notification_reads', ['user_id'], unique=False)

    op.create_table('account_manager_sellers',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('manager_id', sa.Integer(), nullable=False),
    sa.Column('seller_id', sa.Integer(), nullable=False),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['manager_id'], ['users.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['seller_id'], ['users.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('seller_id')
    )
    op.create_index(op.f('ix_account_manager_sellers_id'), 'account_manager_sellers', ['id'], unique=False)
    op.create_index(op.f('ix_account_manager_sellers_manager_id'), 'account_manager_sellers', ['manager_id'], unique=False)

    op.create_table('account_manager_logs',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('manager_id', sa.Integer(), nullable=False),
    sa.Column('target_user_id', sa.Integer(), nullable=True),
    sa.Column('action', sa.String(length=255), nullable=False),
    sa.Column('action_type', sa.String(length=50), nullable=False),
    sa.Column('details', sa.JSON(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['manager_id'], ['users.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['target_user_id'], ['users.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_account_manager_logs_id'), 'account_manager_logs', ['id'], unique=False)
    op.create_index(op.f('ix_account_manager_logs_manager_id'), 'account_manager_logs', ['manager_id'], unique=False)
    op.create_index(op.f('ix_account_manager_logs_created_at'), 'account_manager_logs', ['created_at'], unique=False)


def downgrade() -> None:
    for table in ('account_manager_logs', 'account_manager_sellers', 'user_notification_reads', 'notifications'):
        op.drop_table(table)
    NOTIFICATION_TYPE.drop(op.get_bind(), checkfirst=True)

    # Postgres cannot drop an enum value, so the type is rebuilt without it
    op.execute("UPDATE users SET role = 'USER' WHERE role = 'GERENTE_CONTAS'")
    op.execute("ALTER TYPE approle RENAME TO approle_old")
    op.execute(
        "CREATE TYPE approle AS ENUM ('ADMIN', 'USER', 'VENDOR', 'VENDOR_INSTAGRAM', "
        "'VENDOR_TIKTOK', 'VENDOR_MODEL', 'INDICADOR')"
    )
    op.execute("ALTER TABLE users ALTER COLUMN role TYPE approle USING role::text::approle")
    op.execute("DROP TYPE approle_old")
