"""Create profiles, leads, site_visits and tasks

Revision ID: 0001_lead_crm
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_lead_crm'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


USER_ROLE = sa.Enum('admin', 'user', name='user_role')
LEAD_STATUS = sa.Enum(
    'new', 'assigned', 'in_progress', 'site_visit_scheduled',
    'site_visit_done', 'converted', 'lost',
    name='lead_status',
)
LEAD_QUALITY = sa.Enum('hot', 'warm', 'cold', name='lead_quality')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('role', USER_ROLE, nullable=False, server_default='user'),
        sa.Column('hashed_password', sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)
    op.create_index('ix_profiles_role', 'profiles', ['role'])

    op.create_table(
        'leads',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('mobile', sa.String(50), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('what_to_buy', sa.String(255), nullable=True),
        sa.Column('budget', sa.String(100), nullable=True),
        sa.Column('professional_background', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('quality', LEAD_QUALITY, nullable=True),
        sa.Column('status', LEAD_STATUS, nullable=False, server_default='new'),
        sa.Column('assigned_to', sa.Uuid(), nullable=True),
        sa.Column('followup_date', sa.Date(), nullable=True),
        sa.Column('buying_date', sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['assigned_to'], ['profiles.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_leads_city', 'leads', ['city'])
    op.create_index('ix_leads_status', 'leads', ['status'])
    op.create_index('ix_leads_assigned_to', 'leads', ['assigned_to'])
    op.create_index('ix_leads_followup_date', 'leads', ['followup_date'])

    op.create_table(
        'site_visits',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('lead_id', sa.Uuid(), nullable=False),
        sa.Column('scheduled_date', sa.Date(), nullable=False),
        sa.Column('scheduled_time', sa.Time(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['lead_id'], ['leads.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_site_visits_lead_id', 'site_visits', ['lead_id'])
    op.create_index('ix_site_visits_scheduled_date', 'site_visits', ['scheduled_date'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('lead_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('task_type', sa.String(50), nullable=False),
        sa.Column('task_date', sa.Date(), nullable=False),
        sa.Column('task_time', sa.Time(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['lead_id'], ['leads.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_tasks_id', 'tasks', ['id'])
    op.create_index('ix_tasks_lead_id', 'tasks', ['lead_id'])
    op.create_index('ix_tasks_user_id', 'tasks', ['user_id'])
    op.create_index('ix_tasks_task_date', 'tasks', ['task_date'])


def downgrade() -> None:
    op.drop_table('tasks')
    op.drop_table('site_visits')
    op.drop_table('leads')
    op.drop_table('profiles')

    bind = op.get_bind()
    for enum_type in (LEAD_QUALITY, LEAD_STATUS, USER_ROLE):
        enum_type.drop(bind, checkfirst=True)
