"""Initial schema: projects, events and report definitions.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ### Projects table ###
    op.create_table(
        'projects',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('domain', sa.String(255), unique=True, index=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ### Events table (append-only) ###
    op.create_table(
        'events',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('visitor_hash', sa.String(64), nullable=False),
        sa.Column('session_id', sa.String(64), nullable=False),
        sa.Column('event_type', sa.String(20), nullable=False),
        sa.Column('event_name', sa.String(100)),
        sa.Column('path', sa.String(512), nullable=False),
        sa.Column('referrer', sa.String(512)),
        sa.Column('target_url', sa.String(2048)),
        sa.Column('scroll_depth', sa.Integer()),
        sa.Column('properties', sa.Text()),
        sa.Column('country', sa.String(100)),
        sa.Column('region', sa.String(100)),
        sa.Column('city', sa.String(100)),
        sa.Column('browser', sa.String(50)),
        sa.Column('os', sa.String(50)),
        sa.Column('device', sa.String(50)),
        sa.Column('utm_source', sa.String(255)),
        sa.Column('utm_medium', sa.String(255)),
        sa.Column('utm_campaign', sa.String(255)),
        sa.Column('utm_term', sa.String(255)),
        sa.Column('utm_content', sa.String(255)),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_events_timestamp', 'events', ['timestamp'])
    op.create_index('idx_events_project_timestamp', 'events', ['project_id', 'timestamp'])
    op.create_index('idx_events_project_session', 'events', ['project_id', 'session_id'])
    op.create_index('idx_events_project_type_timestamp', 'events', ['project_id', 'event_type', 'timestamp'])

    # ### Funnels tables ###
    op.create_table(
        'funnels',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), index=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        'funnel_steps',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('funnel_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('funnels.id', ondelete='CASCADE'), index=True),
        sa.Column('step_number', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('step_type', sa.String(20), nullable=False),
        sa.Column('match_value', sa.String(512), nullable=False),
        sa.UniqueConstraint('funnel_id', 'step_number', name='uq_funnel_steps_number'),
    )

    # ### Conversion goals table ###
    op.create_table(
        'conversion_goals',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), index=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('goal_type', sa.String(20), nullable=False),
        sa.Column('match_value', sa.String(512), nullable=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ### Segments table ###
    op.create_table(
        'segments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), index=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.String(255)),
        sa.Column('filters_json', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('segments')
    op.drop_table('conversion_goals')
    op.drop_table('funnel_steps')
    op.drop_table('funnels')
    op.drop_index('idx_events_project_type_timestamp', table_name='events')
    op.drop_index('idx_events_project_session', table_name='events')
    op.drop_index('idx_events_project_timestamp', table_name='events')
    op.drop_index('idx_events_timestamp', table_name='events')
    op.drop_table('events')
    op.drop_table('projects')
