"""create_scheduling_tables

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-03-02 10:00:00.000000

스케줄링 테이블 생성: users, 프로필, 관계, shift_types, shift_patterns,
shifts, time_off_requests, notifications.
Create scheduling tables: users, profiles, relationships, shift types,
recurrence patterns, shifts, time-off requests and notifications.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = 'a1c2e3f4b5d6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # users — 외부 인증 서비스 사용자 사본 (mirror of auth-service users)
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # 대상자/제공자 프로필 — Client and caregiver profiles
    op.create_table(
        'client_profiles',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'caregiver_profiles',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('color', sa.String(7), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # caregiver_client_relationships — 제공자↔대상자 관계
    op.create_table(
        'caregiver_client_relationships',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('caregiver_id', UUID(as_uuid=True), sa.ForeignKey('caregiver_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('client_id', UUID(as_uuid=True), sa.ForeignKey('client_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(20), server_default='ACTIVE', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_unique_constraint(
        'uq_relationship_caregiver_client',
        'caregiver_client_relationships',
        ['caregiver_id', 'client_id'],
    )

    # shift_types — 대상자 소유 시간대 (named time windows per client)
    op.create_table(
        'shift_types',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('client_id', UUID(as_uuid=True), sa.ForeignKey('client_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('color', sa.String(7), server_default='#3B82F6', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_shift_types_client', 'shift_types', ['client_id'])

    # shift_patterns — 반복 패턴 (soft delete via is_active)
    op.create_table(
        'shift_patterns',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('client_id', UUID(as_uuid=True), sa.ForeignKey('client_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('caregiver_id', UUID(as_uuid=True), sa.ForeignKey('caregiver_profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('shift_type_id', UUID(as_uuid=True), sa.ForeignKey('shift_types.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('recurrence_type', sa.String(20), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_by', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_shift_patterns_client_active', 'shift_patterns', ['client_id', 'is_active'])

    # shifts — 시프트 인스턴스 (concrete shifts on the calendar)
    op.create_table(
        'shifts',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('client_id', UUID(as_uuid=True), sa.ForeignKey('client_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('shift_type_id', UUID(as_uuid=True), sa.ForeignKey('shift_types.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('pattern_id', UUID(as_uuid=True), sa.ForeignKey('shift_patterns.id', ondelete='SET NULL'), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('caregiver_id', UUID(as_uuid=True), sa.ForeignKey('caregiver_profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', sa.String(20), server_default='SCHEDULED', nullable=False),
        sa.Column('origin', sa.String(20), server_default='MANUAL', nullable=False),
        sa.Column('internal_notes', sa.Text(), nullable=True),
        sa.Column('instruction_notes', sa.Text(), nullable=True),
        sa.Column('client_verified', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('client_verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('actual_start_time', sa.Time(), nullable=True),
        sa.Column('actual_end_time', sa.Time(), nullable=True),
        sa.Column('caregiver_note', sa.Text(), nullable=True),
        sa.Column('time_correction_status', sa.String(20), nullable=True),
        sa.Column('time_correction_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # 시프트 인덱스 — Shift indexes for caregiver and client calendars
    op.create_index('ix_shifts_caregiver_date', 'shifts', ['caregiver_id', 'date'])
    op.create_index('ix_shifts_client_date', 'shifts', ['client_id', 'date'])

    # 유니크 제약 — 대상자+유형+날짜당 시프트 하나
    # One shift per client, shift type and date
    op.create_unique_constraint(
        'uq_shift_client_type_date',
        'shifts',
        ['client_id', 'shift_type_id', 'date'],
    )

    # time_off_requests — 제공자 휴가 요청 (one row per client, grouped by group_id)
    op.create_table(
        'time_off_requests',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('group_id', UUID(as_uuid=True), nullable=True),
        sa.Column('caregiver_id', UUID(as_uuid=True), sa.ForeignKey('caregiver_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('client_id', UUID(as_uuid=True), sa.ForeignKey('client_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('request_type', sa.String(20), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), server_default='PENDING', nullable=False),
        sa.Column('is_emergency', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('dismissed', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_time_off_caregiver_status', 'time_off_requests', ['caregiver_id', 'status'])
    op.create_index('ix_time_off_client_status', 'time_off_requests', ['client_id', 'status'])
    op.create_index('ix_time_off_group', 'time_off_requests', ['group_id'])

    # notifications — 앱 내 알림 (in-app notifications)
    op.create_table(
        'notifications',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('message', sa.String(1000), nullable=False),
        sa.Column('reference_type', sa.String(50), nullable=True),
        sa.Column('reference_id', UUID(as_uuid=True), nullable=True),
        sa.Column('payload', JSONB(), nullable=True),
        sa.Column('is_read', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_user_read', 'notifications', ['user_id', 'is_read'])


def downgrade() -> None:
    op.drop_index('ix_notifications_user_read', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_time_off_group', table_name='time_off_requests')
    op.drop_index('ix_time_off_client_status', table_name='time_off_requests')
    op.drop_index('ix_time_off_caregiver_status', table_name='time_off_requests')
    op.drop_table('time_off_requests')
    op.drop_constraint('uq_shift_client_type_date', 'shifts', type_='unique')
    op.drop_index('ix_shifts_client_date', table_name='shifts')
    op.drop_index('ix_shifts_caregiver_date', table_name='shifts')
    op.drop_table('shifts')
    op.drop_index('ix_shift_patterns_client_active', table_name='shift_patterns')
    op.drop_table('shift_patterns')
    op.drop_index('ix_shift_types_client', table_name='shift_types')
    op.drop_table('shift_types')
    op.drop_constraint('uq_relationship_caregiver_client', 'caregiver_client_relationships', type_='unique')
    op.drop_table('caregiver_client_relationships')
    op.drop_table('caregiver_profiles')
    op.drop_table('client_profiles')
    op.drop_table('users')
