"""Initial schema - periods, sub-periods and events

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Documents keep their nested parts (date, location, key figures, tags) as
JSON. References between collections are plain identifiers without
foreign keys, a dangling reference is legal.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'periods',
        sa.Column('id', sa.String(24), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200)),
        sa.Column('sort_order', sa.Integer(), default=0),
        sa.Column('color', sa.String(30)),
        sa.Column('start_year', sa.Integer()),
        sa.Column('end_year', sa.Integer()),
        sa.Column('description', sa.Text()),
        *_timestamps(),
    )
    op.create_index('ix_periods_slug', 'periods', ['slug'])
    op.create_index('ix_periods_sort_order', 'periods', ['sort_order'])

    op.create_table(
        'sub_periods',
        sa.Column('id', sa.String(24), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('sort_order', sa.Integer(), default=0),
        sa.Column('color', sa.String(30)),
        sa.Column('period_id', sa.String(24)),
        sa.Column('start_year', sa.Integer()),
        sa.Column('end_year', sa.Integer()),
        sa.Column('description', sa.Text()),
        *_timestamps(),
    )
    op.create_index('ix_sub_periods_sort_order', 'sub_periods', ['sort_order'])
    op.create_index('ix_sub_periods_period_id', 'sub_periods', ['period_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.String(24), primary_key=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('title_vietnamese', sa.String(500)),
        sa.Column('description', sa.Text()),
        sa.Column('short_description', sa.Text()),
        sa.Column('significance', sa.Text()),
        sa.Column('event_type', sa.String(100)),
        sa.Column('date', sa.JSON(), nullable=False),
        sa.Column('end_date', sa.JSON()),
        sa.Column('year', sa.Integer()),
        sa.Column('location', sa.JSON()),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
        sa.Column('period_id', sa.String(24)),
        sa.Column('sub_period_id', sa.String(24)),
        sa.Column('key_figures', sa.JSON()),
        sa.Column('tags', sa.JSON()),
        sa.Column('featured', sa.Boolean(), default=False),
        *_timestamps(),
    )
    op.create_index('ix_events_year', 'events', ['year'])
    op.create_index('ix_events_period_id', 'events', ['period_id'])
    op.create_index('ix_events_sub_period_id', 'events', ['sub_period_id'])


def downgrade() -> None:
    op.drop_index('ix_events_sub_period_id', 'events')
    op.drop_index('ix_events_period_id', 'events')
    op.drop_index('ix_events_year', 'events')
    op.drop_table('events')
    op.drop_index('ix_sub_periods_period_id', 'sub_periods')
    op.drop_index('ix_sub_periods_sort_order', 'sub_periods')
    op.drop_table('sub_periods')
    op.drop_index('ix_periods_sort_order', 'periods')
    op.drop_index('ix_periods_slug', 'periods')
    op.drop_table('periods')
