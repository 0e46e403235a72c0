"""initial training and safety schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Users, daily check-ins, exercise library, sessions, session exercises,
set logs and safety alerts.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('full_name', sa.Text(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('sport', sa.Text(), nullable=True),
        sa.Column('experience_level', sa.String(16), nullable=True),
        sa.Column('profile_data', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )

    op.create_table(
        'daily_check_ins',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('mood', sa.Integer(), nullable=False),
        sa.Column('energy_level', sa.Integer(), nullable=False),
        sa.Column('sleep_hours', sa.Float(), nullable=False),
        sa.Column('muscle_soreness', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('mood BETWEEN 1 AND 5', name='ck_check_in_mood'),
        sa.CheckConstraint('energy_level BETWEEN 1 AND 10', name='ck_check_in_energy'),
        sa.CheckConstraint('sleep_hours >= 0 AND sleep_hours <= 24', name='ck_check_in_sleep'),
        sa.CheckConstraint('muscle_soreness BETWEEN 1 AND 5', name='ck_check_in_soreness'),
    )
    op.create_index('ix_daily_check_ins_user_id', 'daily_check_ins', ['user_id'])
    op.create_index('uq_check_in_user_date', 'daily_check_ins', ['user_id', 'date'], unique=True)

    op.create_table(
        'exercises',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('muscle_groups', sa.JSON(), nullable=False),
        sa.Column('equipment', sa.JSON(), nullable=False),
        sa.Column('difficulty_level', sa.String(16), nullable=False),
        sa.Column('instructions', sa.JSON(), nullable=False),
        sa.Column('video_url', sa.Text(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('is_custom', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_exercises_name', 'exercises', ['name'])
    op.create_index('ix_exercises_category', 'exercises', ['category'])

    op.create_table(
        'sessions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('session_type', sa.String(2), nullable=False),
        sa.Column('week_number', sa.Integer(), nullable=False),
        sa.Column('day_number', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(16), server_default='planned', nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('total_sets', sa.Integer(), nullable=True),
        sa.Column('total_reps', sa.Integer(), nullable=True),
        sa.Column('average_rpe', sa.Float(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'])
    op.create_index('uq_session_user_date_type', 'sessions', ['user_id', 'date', 'session_type'], unique=True)

    op.create_table(
        'session_exercises',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('session_id', sa.Uuid(), sa.ForeignKey('sessions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('exercise_id', sa.Uuid(), sa.ForeignKey('exercises.id'), nullable=False),
        sa.Column('order_index', sa.Integer(), server_default='0', nullable=False),
        sa.Column('sets', sa.Integer(), nullable=False),
        sa.Column('reps', sa.Integer(), nullable=False),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('rest_seconds', sa.Integer(), server_default='60', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_session_exercises_session_id', 'session_exercises', ['session_id'])

    op.create_table(
        'set_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'session_exercise_id',
            sa.Uuid(),
            sa.ForeignKey('session_exercises.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('set_number', sa.Integer(), nullable=False),
        sa.Column('reps_completed', sa.Integer(), nullable=False),
        sa.Column('weight_used', sa.Float(), nullable=True),
        sa.Column('rpe', sa.Integer(), nullable=False),
        sa.Column('rest_taken_seconds', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('rpe BETWEEN 1 AND 10', name='ck_set_log_rpe'),
    )
    op.create_index('ix_set_logs_session_exercise_id', 'set_logs', ['session_exercise_id'])
    op.create_index('uq_set_log_exercise_set', 'set_logs', ['session_exercise_id', 'set_number'], unique=True)

    op.create_table(
        'safety_alerts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('alert_type', sa.String(16), nullable=False),
        sa.Column('severity', sa.String(16), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_resolved', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_safety_alerts_user_id', 'safety_alerts', ['user_id'])
    op.create_index('ix_safety_alert_user_resolved', 'safety_alerts', ['user_id', 'is_resolved'])


def downgrade() -> None:
    op.drop_table('safety_alerts')
    op.drop_table('set_logs')
    op.drop_table('session_exercises')
    op.drop_table('sessions')
    op.drop_table('exercises')
    op.drop_table('daily_check_ins')
    op.drop_table('users')
