"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-15 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create players, sessions, swings, scoring, messaging and drill video tables."""
    op.create_table(
        'players',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('email_opt_in', sa.Boolean(), nullable=False),
        sa.Column('sms_opt_in', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_players_email'), 'players', ['email'], unique=False)

    op.create_table(
        'sessions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('player_id', sa.String(), nullable=True),
        sa.Column('user_id', sa.String(length=64), nullable=True),
        sa.Column('player_name', sa.String(length=255), nullable=False),
        sa.Column('player_email', sa.String(length=255), nullable=False),
        sa.Column('player_phone', sa.String(length=32), nullable=True),
        sa.Column('swings_required', sa.Integer(), nullable=False),
        sa.Column('swing_count', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('composite_score', sa.Float(), nullable=True),
        sa.Column('grade', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('analyzed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['player_id'], ['players.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sessions_player_id'), 'sessions', ['player_id'], unique=False)
    op.create_index(op.f('ix_sessions_user_id'), 'sessions', ['user_id'], unique=False)
    op.create_index(op.f('ix_sessions_player_email'), 'sessions', ['player_email'], unique=False)
    op.create_index(op.f('ix_sessions_status'), 'sessions', ['status'], unique=False)
    op.create_index(op.f('ix_sessions_created_at'), 'sessions', ['created_at'], unique=False)

    op.create_table(
        'swings',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('swing_index', sa.Integer(), nullable=False),
        sa.Column('video_storage_path', sa.String(length=512), nullable=False),
        sa.Column('video_url', sa.String(length=1024), nullable=False),
        sa.Column('video_filename', sa.String(length=255), nullable=True),
        sa.Column('video_size_bytes', sa.Integer(), nullable=False),
        sa.Column('validation_passed', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False),
        sa.Column('sequence_score', sa.Integer(), nullable=True),
        sa.Column('analysis_json', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'swing_index', name='uq_swings_session_index')
    )
    op.create_index(op.f('ix_swings_session_id'), 'swings', ['session_id'], unique=False)

    op.create_table(
        'session_scores',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('brain', sa.Float(), nullable=False),
        sa.Column('body', sa.Float(), nullable=False),
        sa.Column('bat', sa.Float(), nullable=False),
        sa.Column('ball', sa.Float(), nullable=False),
        sa.Column('composite', sa.Float(), nullable=False),
        sa.Column('motor_profile', sa.String(length=32), nullable=True),
        sa.Column('leaks_json', sa.String(), nullable=False),
        sa.Column('sequence_score', sa.Integer(), nullable=False),
        sa.Column('sequence_match', sa.Boolean(), nullable=False),
        sa.Column('sequence_order_json', sa.String(), nullable=False),
        sa.Column('sequence_errors_json', sa.String(), nullable=False),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_session_scores_session_id'), 'session_scores', ['session_id'], unique=True)

    op.create_table(
        'session_metrics',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('metric_name', sa.String(length=64), nullable=False),
        sa.Column('metric_value', sa.Float(), nullable=False),
        sa.Column('metric_units', sa.String(length=20), nullable=True),
        sa.Column('source', sa.String(length=64), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_session_metrics_session_id'), 'session_metrics', ['session_id'], unique=False)

    op.create_table(
        'sms_templates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trigger_name', sa.String(length=64), nullable=False),
        sa.Column('message_body', sa.String(length=1600), nullable=False),
        sa.Column('delay_minutes', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sms_templates_trigger_name'), 'sms_templates', ['trigger_name'], unique=True)

    op.create_table(
        'sms_scheduled',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('trigger_name', sa.String(length=64), nullable=False),
        sa.Column('scheduled_for', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sms_scheduled_session_id'), 'sms_scheduled', ['session_id'], unique=False)
    op.create_index(op.f('ix_sms_scheduled_trigger_name'), 'sms_scheduled', ['trigger_name'], unique=False)
    op.create_index(op.f('ix_sms_scheduled_scheduled_for'), 'sms_scheduled', ['scheduled_for'], unique=False)
    op.create_index(op.f('ix_sms_scheduled_status'), 'sms_scheduled', ['status'], unique=False)

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.String(length=36), nullable=True),
        sa.Column('session_id', sa.String(length=36), nullable=True),
        sa.Column('phone_number', sa.String(length=32), nullable=False),
        sa.Column('channel', sa.String(length=20), nullable=False),
        sa.Column('direction', sa.String(length=20), nullable=False),
        sa.Column('body', sa.String(), nullable=False),
        sa.Column('provider_sid', sa.String(length=64), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('trigger_type', sa.String(length=64), nullable=True),
        sa.Column('metadata_json', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_messages_player_id'), 'messages', ['player_id'], unique=False)
    op.create_index(op.f('ix_messages_session_id'), 'messages', ['session_id'], unique=False)
    op.create_index(op.f('ix_messages_created_at'), 'messages', ['created_at'], unique=False)

    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.String(length=36), nullable=True),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('description', sa.String(length=1000), nullable=True),
        sa.Column('metadata_json', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_activity_log_player_id'), 'activity_log', ['player_id'], unique=False)
    op.create_index(op.f('ix_activity_log_action'), 'activity_log', ['action'], unique=False)
    op.create_index(op.f('ix_activity_log_created_at'), 'activity_log', ['created_at'], unique=False)

    op.create_table(
        'drill_videos',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('video_url', sa.String(length=1024), nullable=False),
        sa.Column('storage_path', sa.String(length=512), nullable=True),
        sa.Column('thumbnail_url', sa.String(length=1024), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('transcript', sa.String(), nullable=True),
        sa.Column('four_b_category', sa.String(length=20), nullable=True),
        sa.Column('problems_addressed_json', sa.String(), nullable=False),
        sa.Column('drill_name', sa.String(length=255), nullable=True),
        sa.Column('motor_profiles_json', sa.String(), nullable=False),
        sa.Column('player_level_json', sa.String(), nullable=False),
        sa.Column('video_type', sa.String(length=20), nullable=True),
        sa.Column('tags_json', sa.String(), nullable=False),
        sa.Column('access_level', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_drill_videos_status'), 'drill_videos', ['status'], unique=False)
    op.create_index(op.f('ix_drill_videos_created_at'), 'drill_videos', ['created_at'], unique=False)


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_index(op.f('ix_drill_videos_created_at'), table_name='drill_videos')
    op.drop_index(op.f('ix_drill_videos_status'), table_name='drill_videos')
    op.drop_table('drill_videos')

    op.drop_index(op.f('ix_activity_log_created_at'), table_name='activity_log')
    op.drop_index(op.f('ix_activity_log_action'), table_name='activity_log')
    op.drop_index(op.f('ix_activity_log_player_id'), table_name='activity_log')
    op.drop_table('activity_log')

    op.drop_index(op.f('ix_messages_created_at'), table_name='messages')
    op.drop_index(op.f('ix_messages_session_id'), table_name='messages')
    op.drop_index(op.f('ix_messages_player_id'), table_name='messages')
    op.drop_table('messages')

    op.drop_index(op.f('ix_sms_scheduled_status'), table_name='sms_scheduled')
    op.drop_index(op.f('ix_sms_scheduled_scheduled_for'), table_name='sms_scheduled')
    op.drop_index(op.f('ix_sms_scheduled_trigger_name'), table_name='sms_scheduled')
    op.drop_index(op.f('ix_sms_scheduled_session_id'), table_name='sms_scheduled')
    op.drop_table('sms_scheduled')

    op.drop_index(op.f('ix_sms_templates_trigger_name'), table_name='sms_templates')
    op.drop_table('sms_templates')

    op.drop_index(op.f('ix_session_metrics_session_id'), table_name='session_metrics')
    op.drop_table('session_metrics')

    op.drop_index(op.f('ix_session_scores_session_id'), table_name='session_scores')
    op.drop_table('session_scores')

    op.drop_index(op.f('ix_swings_session_id'), table_name='swings')
    op.drop_table('swings')

    op.drop_index(op.f('ix_sessions_created_at'), table_name='sessions')
    op.drop_index(op.f('ix_sessions_status'), table_name='sessions')
    op.drop_index(op.f('ix_sessions_player_email'), table_name='sessions')
    op.drop_index(op.f('ix_sessions_user_id'), table_name='sessions')
    op.drop_index(op.f('ix_sessions_player_id'), table_name='sessions')
    op.drop_table('sessions')

    op.drop_index(op.f('ix_players_email'), table_name='players')
    op.drop_table('players')
