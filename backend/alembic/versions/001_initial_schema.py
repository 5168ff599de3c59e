"""Initial BinDay Operations schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-16

Client list, jobs, completion logs, profiles, property requests,
proof photo preferences and portal tokens.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # === CLIENT LIST ===
    op.create_table(
        'client_list',
        sa.Column('property_id', sa.String(64), primary_key=True),
        sa.Column('account_id', sa.String(64), nullable=True, index=True),
        sa.Column('client_name', sa.String(255), nullable=True),
        sa.Column('company', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('collection_day', sa.String(100), nullable=True),
        sa.Column('put_bins_out', sa.String(100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('assigned_to', sa.String(255), nullable=True),
        sa.Column('lat_lng', sa.String(64), nullable=True),
        sa.Column('photo_path', sa.Text(), nullable=True),
        sa.Column('price_per_month', sa.Numeric(10, 2), nullable=True),
        sa.Column('red_freq', sa.String(20), nullable=True),
        sa.Column('red_flip', sa.String(10), nullable=True),
        sa.Column('yellow_freq', sa.String(20), nullable=True),
        sa.Column('yellow_flip', sa.String(10), nullable=True),
        sa.Column('green_freq', sa.String(20), nullable=True),
        sa.Column('green_flip', sa.String(10), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    # === JOBS ===
    op.create_table(
        'jobs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('account_id', sa.String(64), nullable=True, index=True),
        sa.Column('property_id', sa.String(64), nullable=True, index=True),
        sa.Column('address', sa.Text(), nullable=False, server_default=''),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lng', sa.Float(), nullable=True),
        sa.Column('job_type', sa.String(20), nullable=False),
        sa.Column('bins', sa.String(100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('client_name', sa.String(255), nullable=True),
        sa.Column('photo_path', sa.Text(), nullable=True),
        sa.Column('assigned_to', sa.String(255), nullable=True, index=True),
        sa.Column('day_of_week', sa.String(20), nullable=True),
        sa.Column('last_completed_on', sa.Date(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='scheduled'),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('arrived_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_jobs_day_open', 'jobs', ['day_of_week', 'last_completed_on'])

    # === LOGS ===
    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=True, index=True),
        sa.Column('client_name', sa.String(255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('task_type', sa.String(20), nullable=True),
        sa.Column('bins', sa.String(100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('photo_path', sa.Text(), nullable=True),
        sa.Column('done_on', sa.Date(), nullable=True),
        sa.Column('gps_lat', sa.Float(), nullable=True),
        sa.Column('gps_lng', sa.Float(), nullable=True),
        sa.Column('gps_acc', sa.Float(), nullable=True),
        sa.Column('gps_time', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now(), index=True),
    )

    # === USER PROFILE ===
    op.create_table(
        'user_profile',
        sa.Column('user_id', sa.String(128), primary_key=True),
        sa.Column('email', sa.String(255), nullable=True, index=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('role', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    # === PROPERTY REQUESTS ===
    op.create_table(
        'property_requests',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending', index=True),
        sa.Column('account_id', sa.String(64), nullable=True, index=True),
        sa.Column('account_name', sa.String(255), nullable=True),
        sa.Column('requester_email', sa.String(255), nullable=True),
        sa.Column('address_line1', sa.String(255), nullable=True),
        sa.Column('address_line2', sa.String(255), nullable=True),
        sa.Column('suburb', sa.String(100), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(50), nullable=True),
        sa.Column('postal_code', sa.String(20), nullable=True),
        sa.Column('start_date', sa.String(32), nullable=True),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('client_property_id', sa.String(64), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('approved_by', sa.String(128), nullable=True),
        sa.Column('submitted_by_user_id', sa.String(128), nullable=True),
        sa.Column('submitted_by_email', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    # === PROOF PHOTO PREFERENCES ===
    op.create_table(
        'proof_photo_preferences',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('property_id', sa.String(64), nullable=False, index=True),
        sa.Column('job_type', sa.String(20), nullable=False),
        sa.Column('parity', sa.String(10), nullable=False),
        sa.Column('photo_path', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('property_id', 'job_type', 'parity', name='uq_proof_pref_scope'),
        sa.CheckConstraint("job_type IN ('put_out', 'bring_in')", name='ck_proof_pref_job_type'),
        sa.CheckConstraint("parity IN ('odd', 'even')", name='ck_proof_pref_parity'),
    )

    # === CLIENT PORTAL TOKENS ===
    op.create_table(
        'client_portal_tokens',
        sa.Column('token', sa.String(128), primary_key=True),
        sa.Column('account_id', sa.String(64), nullable=True, index=True),
        sa.Column('property_id', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('client_portal_tokens')
    op.drop_table('proof_photo_preferences')
    op.drop_table('property_requests')
    op.drop_table('user_profile')
    op.drop_table('logs')
    op.drop_index('ix_jobs_day_open')
    op.drop_table('jobs')
    op.drop_table('client_list')
