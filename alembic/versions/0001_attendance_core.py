"""Create events, activities, participants and attendance_logs tables

Revision ID: 0001_attendance_core
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_attendance_core'
down_revision = None
branch_labels = None
depends_on = None

def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
    ]

def upgrade() -> None:
    op.create_table('events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_sequence', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('ix_events_id', 'events', ['id'])

    op.create_table('activities',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('event_id', 'name', name='uq_activities_event_name')
    )
    op.create_index('ix_activities_id', 'activities', ['id'])
    op.create_index('ix_activities_event_id', 'activities', ['event_id'])

    op.create_table('participants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('church', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('category', sa.String(length=20), nullable=False, server_default='student'),
        sa.Column('qr_code', sa.String(length=255), nullable=False),
        sa.Column('current_activity_id', sa.Integer(), sa.ForeignKey('activities.id'), nullable=True),
        sa.Column('location_timestamp', sa.DateTime(), nullable=True),
        sa.Column('location_sequence', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('event_id', 'qr_code', name='uq_participants_event_qr_code')
    )
    op.create_index('ix_participants_id', 'participants', ['id'])
    op.create_index('ix_participants_event_id', 'participants', ['event_id'])
    op.create_index('ix_participants_current_activity_id', 'participants', ['current_activity_id'])

    op.create_table('attendance_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('participant_id', sa.Integer(), sa.ForeignKey('participants.id'), nullable=False),
        sa.Column('activity_id', sa.Integer(), sa.ForeignKey('activities.id'), nullable=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('recorded_by', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('event_id', 'sequence', name='uq_attendance_logs_event_sequence')
    )
    op.create_index('ix_attendance_logs_id', 'attendance_logs', ['id'])
    op.create_index('ix_attendance_logs_activity_id', 'attendance_logs', ['activity_id'])
    op.create_index('ix_attendance_logs_event_id', 'attendance_logs', ['event_id'])
    op.create_index('idx_attendance_logs_participant_order', 'attendance_logs', ['participant_id', 'timestamp', 'sequence'])

def downgrade() -> None:
    op.drop_index('idx_attendance_logs_participant_order', table_name='attendance_logs')
    op.drop_index('ix_attendance_logs_event_id', table_name='attendance_logs')
    op.drop_index('ix_attendance_logs_activity_id', table_name='attendance_logs')
    op.drop_index('ix_attendance_logs_id', table_name='attendance_logs')
    op.drop_table('attendance_logs')

    op.drop_index('ix_participants_current_activity_id', table_name='participants')
    op.drop_index('ix_participants_event_id', table_name='participants')
    op.drop_index('ix_participants_id', table_name='participants')
    op.drop_table('participants')

    op.drop_index('ix_activities_event_id', table_name='activities')
    op.drop_index('ix_activities_id', table_name='activities')
    op.drop_table('activities')

    op.drop_index('ix_events_id', table_name='events')
    op.drop_table('events')
