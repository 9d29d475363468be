"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

APP_ROLE = sa.Enum('ADMIN', 'USER', 'VENDOR', 'VENDOR_INSTAGRAM', 'VENDOR_TIKTOK', 'VENDOR_MODEL', 'INDICADOR', name='approle')
PLAN_TYPE = sa.Enum('FREE', 'BASIC', 'PRO', 'AGENCY', name='plantype')
SUBSCRIPTION_STATUS = sa.Enum('ACTIVE', 'PENDING', 'CANCELLED', 'EXPIRED', name='subscriptionstatus')
TRANSACTION_STATUS = sa.Enum('PENDING', 'PAID', 'FAILED', 'REFUNDED', name='transactionstatus')
PRODUCT_TYPE = sa.Enum('SUBSCRIPTION', 'TIKTOK_ACCOUNT', 'INSTAGRAM_ACCOUNT', 'TELEGRAM_GROUP', 'MODEL', name='producttype')
VENDOR_SALE_STATUS = sa.Enum('PENDING', 'PAID', name='vendorsalestatus')

LISTING_TABLES = ('tiktok_accounts', 'instagram_accounts', 'telegram_groups', 'models_for_sale')


def _listing_columns():
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('niche', sa.String(length=100), nullable=True),
        sa.Column('image_url', sa.String(length=1024), nullable=True),
        sa.Column('is_sold', sa.Boolean(), nullable=False),
        sa.Column('sold_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sold_to_user_id', sa.Integer(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('deliverable_info', sa.Text(), nullable=True),
        sa.Column('deliverable_notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['sold_to_user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
    ]


def _account_columns():
    return [
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('followers', sa.Integer(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('deliverable_login', sa.String(length=255), nullable=True),
        sa.Column('deliverable_password', sa.Text(), nullable=True),
        sa.Column('deliverable_email', sa.String(length=255), nullable=True),
    ]


def upgrade() -> None:
    op.create_table('users',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('password_hash', sa.String(length=255), nullable=False),
    sa.Column('role', APP_ROLE, nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('profiles',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('full_name', sa.String(length=255), nullable=True),
    sa.Column('phone', sa.String(length=20), nullable=True),
    sa.Column('avatar_url', sa.String(length=1024), nullable=True),
    sa.Column('current_plan', PLAN_TYPE, nullable=False),
    sa.Column('is_suspended', sa.Boolean(), nullable=False),
    sa.Column('is_online', sa.Boolean(), nullable=False),
    sa.Column('last_seen_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('onboarding_completed', sa.Boolean(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_profiles_id'), 'profiles', ['id'], unique=False)
    op.create_index(op.f('ix_profiles_user_id'), 'profiles', ['user_id'], unique=True)

    op.create_table('plans',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('slug', PLAN_TYPE, nullable=False),
    sa.Column('name', sa.String(length=100), nullable=False),
    sa.Column('price_cents', sa.Integer(), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('features', sa.JSON(), nullable=True),
    sa.Column('max_destinations', sa.Integer(), nullable=True),
    sa.Column('max_media_per_month', sa.Integer(), nullable=True),
    sa.Column('max_funnels', sa.Integer(), nullable=True),
    sa.Column('has_scheduling', sa.Boolean(), nullable=False),
    sa.Column('has_ai_models', sa.Boolean(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('slug')
    )
    op.create_index(op.f('ix_plans_id'), 'plans', ['id'], unique=False)

    op.create_table('subscriptions',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('plan_id', sa.Integer(), nullable=False),
    sa.Column('status', SUBSCRIPTION_STATUS, nullable=False),
    sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['plan_id'], ['plans.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_subscriptions_id'), 'subscriptions', ['id'], unique=False)
    op.create_index(op.f('ix_subscriptions_user_id'), 'subscriptions', ['user_id'], unique=False)

    op.create_table('transactions',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('external_id', sa.String(length=255), nullable=False),
    sa.Column('amount_cents', sa.Integer(), nullable=False),
    sa.Column('net_amount_cents', sa.Integer(), nullable=True),
    sa.Column('status', TRANSACTION_STATUS, nullable=False),
    sa.Column('payment_method', sa.String(length=50), nullable=True),
    sa.Column('product_type', PRODUCT_TYPE, nullable=True),
    sa.Column('product_id', sa.Integer(), nullable=True),
    sa.Column('buyer_name', sa.String(length=255), nullable=True),
    sa.Column('buyer_email', sa.String(length=255), nullable=True),
    sa.Column('buyer_phone', sa.String(length=20), nullable=True),
    sa.Column('buyer_document', sa.String(length=30), nullable=True),
    sa.Column('is_admin_granted', sa.Boolean(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('external_id')
    )
    op.create_index(op.f('ix_transactions_id'), 'transactions', ['id'], unique=False)
    op.create_index(op.f('ix_transactions_user_id'), 'transactions', ['user_id'], unique=False)
    op.create_index(op.f('ix_transactions_created_at'), 'transactions', ['created_at'], unique=False)

    op.create_table('tiktok_accounts',
    *_listing_columns(),
    *_account_columns(),
    sa.Column('likes', sa.Integer(), nullable=False)
    )
    op.create_table('instagram_accounts',
    *_listing_columns(),
    *_account_columns(),
    sa.Column('following', sa.Integer(), nullable=False),
    sa.Column('posts_count', sa.Integer(), nullable=False),
    sa.Column('engagement_rate', sa.Float(), nullable=True)
    )
    op.create_table('telegram_groups',
    *_listing_columns(),
    sa.Column('group_name', sa.String(length=255), nullable=False),
    sa.Column('group_username', sa.String(length=255), nullable=True),
    sa.Column('group_type', sa.String(length=50), nullable=True),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('members_count', sa.Integer(), nullable=False),
    sa.Column('is_verified', sa.Boolean(), nullable=False),
    sa.Column('deliverable_invite_link', sa.String(length=1024), nullable=True)
    )
    op.create_table('models_for_sale',
    *_listing_columns(),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('bio', sa.Text(), nullable=True),
    sa.Column('category', sa.String(length=100), nullable=True),
    sa.Column('assets', sa.JSON(), nullable=True),
    sa.Column('scripts', sa.JSON(), nullable=True),
    sa.Column('funnel_json', sa.JSON(), nullable=True),
    sa.Column('deliverable_link', sa.String(length=1024), nullable=True)
    )
    for table in LISTING_TABLES:
        op.create_index(op.f(f'ix_{table}_id'), table, ['id'], unique=False)
        op.create_index(op.f(f'ix_{table}_sold_to_user_id'), table, ['sold_to_user_id'], unique=False)
        op.create_index(op.f(f'ix_{table}_created_by'), table, ['created_by'], unique=False)

    op.create_table('admin_media',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('pack_type', sa.String(length=50), nullable=False),
    sa.Column('image_url', sa.String(length=1024), nullable=True),
    sa.Column('min_plan', PLAN_TYPE, nullable=False),
    sa.Column('media_files', sa.JSON(), nullable=False),
    sa.Column('file_count', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_admin_media_id'), 'admin_media', ['id'], unique=False)

    op.create_table('vendor_sales',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('vendor_id', sa.Integer(), nullable=False),
    sa.Column('buyer_id', sa.Integer(), nullable=False),
    sa.Column('item_type', sa.String(length=50), nullable=False),
    sa.Column('item_id', sa.Integer(), nullable=False),
    sa.Column('transaction_id', sa.Integer(), nullable=True),
    sa.Column('sale_amount_cents', sa.Integer(), nullable=False),
    sa.Column('vendor_commission_cents', sa.Integer(), nullable=False),
    sa.Column('platform_fee_cents', sa.Integer(), nullable=False),
    sa.Column('status', VENDOR_SALE_STATUS, nullable=False),
    sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['vendor_id'], ['users.id'], ),
    sa.ForeignKeyConstraint(['buyer_id'], ['users.id'], ),
    sa.ForeignKeyConstraint(['transaction_id'], ['transactions.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_vendor_sales_id'), 'vendor_sales', ['id'], unique=False)
    op.create_index(op.f('ix_vendor_sales_vendor_id'), 'vendor_sales', ['vendor_id'], unique=False)
    op.create_index(op.f('ix_vendor_sales_created_at'), 'vendor_sales', ['created_at'], unique=False)

    op.create_table('smart_link_pages',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('slug', sa.String(length=100), nullable=False),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('avatar_url', sa.String(length=1024), nullable=True),
    sa.Column('background_color', sa.String(length=20), nullable=False),
    sa.Column('text_color', sa.String(length=20), nullable=False),
    sa.Column('button_style', sa.String(length=20), nullable=False),
    sa.Column('meta_pixel_id', sa.String(length=100), nullable=True),
    sa.Column('tiktok_pixel_id', sa.String(length=100), nullable=True),
    sa.Column('google_analytics_id', sa.String(length=100), nullable=True),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    sa.Column('total_views', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_smart_link_pages_id'), 'smart_link_pages', ['id'], unique=False)
    op.create_index(op.f('ix_smart_link_pages_user_id'), 'smart_link_pages', ['user_id'], unique=False)
    op.create_index(op.f('ix_smart_link_pages_slug'), 'smart_link_pages', ['slug'], unique=True)

    op.create_table('smart_link_buttons',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('page_id', sa.Integer(), nullable=False),
    sa.Column('label', sa.String(length=255), nullable=False),
    sa.Column('url', sa.String(length=2048), nullable=False),
    sa.Column('icon', sa.String(length=50), nullable=True),
    sa.Column('position', sa.Integer(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    sa.Column('clicks', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['page_id'], ['smart_link_pages.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_smart_link_buttons_id'), 'smart_link_buttons', ['id'], unique=False)
    op.create_index(op.f('ix_smart_link_buttons_page_id'), 'smart_link_buttons', ['page_id'], unique=False)

    op.create_table('dashboard_banners',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('title', sa.String(length=255), nullable=True),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('image_url', sa.String(length=1024), nullable=False),
    sa.Column('link_url', sa.String(length=2048), nullable=True),
    sa.Column('link_text', sa.String(length=100), nullable=True),
    sa.Column('priority', sa.Integer(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    sa.Column('starts_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_dashboard_banners_id'), 'dashboard_banners', ['id'], unique=False)

    op.create_table('funnel_templates',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('category', sa.String(length=50), nullable=False),
    sa.Column('is_free', sa.Boolean(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    sa.Column('min_plan', PLAN_TYPE, nullable=False),
    sa.Column('nodes', sa.JSON(), nullable=False),
    sa.Column('edges', sa.JSON(), nullable=False),
    sa.Column('schema_version', sa.Integer(), nullable=False),
    sa.Column('template_version', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_funnel_templates_id'), 'funnel_templates', ['id'], unique=False)

    op.create_table('admin_settings',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('setting_key', sa.String(length=100), nullable=False),
    sa.Column('setting_value', sa.Boolean(), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_by', sa.Integer(), nullable=True),
    sa.ForeignKeyConstraint(['updated_by'], ['users.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_admin_settings_id'), 'admin_settings', ['id'], unique=False)
    op.create_index(op.f('ix_admin_settings_setting_key'), 'admin_settings', ['setting_key'], unique=True)

    op.create_table('admin_settings_history',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('setting_key', sa.String(length=100), nullable=False),
    sa.Column('old_value', sa.Boolean(), nullable=True),
    sa.Column('new_value', sa.Boolean(), nullable=False),
    sa.Column('changed_by', sa.Integer(), nullable=True),
    sa.Column('changed_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['changed_by'], ['users.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_admin_settings_history_id'), 'admin_settings_history', ['id'], unique=False)
    op.create_index(op.f('ix_admin_settings_history_setting_key'), 'admin_settings_history', ['setting_key'], unique=False)
    op.create_index(op.f('ix_admin_settings_history_changed_at'), 'admin_settings_history', ['changed_at'], unique=False)

    op.create_table('admin_text_settings',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('setting_key', sa.String(length=100), nullable=False),
    sa.Column('setting_value', sa.Text(), nullable=True),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_by', sa.Integer(), nullable=True),
    sa.ForeignKeyConstraint(['updated_by'], ['users.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_admin_text_settings_id'), 'admin_text_settings', ['id'], unique=False)
    op.create_index(op.f('ix_admin_text_settings_setting_key'), 'admin_text_settings', ['setting_key'], unique=True)


def downgrade() -> None:
    for table in (
        'admin_text_settings', 'admin_settings_history', 'admin_settings', 'funnel_templates',
        'dashboard_banners', 'smart_link_buttons', 'smart_link_pages', 'vendor_sales', 'admin_media',
    ) + tuple(reversed(LISTING_TABLES)) + ('transactions', 'subscriptions', 'plans', 'profiles', 'users'):
        op.drop_table(table)
    bind = op.get_bind()
    for enum in (VENDOR_SALE_STATUS, PRODUCT_TYPE, TRANSACTION_STATUS, SUBSCRIPTION_STATUS, PLAN_TYPE, APP_ROLE):
        enum.drop(bind, checkfirst=True)
