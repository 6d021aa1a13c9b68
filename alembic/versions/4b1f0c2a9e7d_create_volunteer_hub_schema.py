"""create volunteer hub schema

Revision ID: 4b1f0c2a9e7d
Revises:
Create Date: 2026-10-19 09:12:41.208733
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4b1f0c2a9e7d'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLE_ENUM = sa.Enum('volunteer', 'organizer', name='user_role_enum', native_enum=False, length=20)
STATUS_ENUM = sa.Enum('draft', 'published', 'cancelled', name='event_status_enum', native_enum=False, length=20)
CATEGORY_ENUM = sa.Enum(
    'environment', 'education', 'community', 'health', 'animals', 'arts', 'sports', 'other',
    name='event_category_enum', native_enum=False, length=20,
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # one row per identity; the primary key is what makes role synthesis race-safe
    op.create_table(
        'user_roles',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role', ROLE_ENUM, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'student_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('full_name', sa.String(length=150), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('university', sa.String(length=150), nullable=True),
        sa.Column('bio', sa.String(length=500), nullable=True),
        sa.Column('interests', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_student_profiles_id', 'student_profiles', ['id'])
    op.create_index('ix_student_profiles_user_id', 'student_profiles', ['user_id'], unique=True)

    op.create_table(
        'organization_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('org_name', sa.String(length=200), nullable=False),
        sa.Column('contact_person', sa.String(length=150), nullable=True),
        sa.Column('contact_phone', sa.String(length=20), nullable=True),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('logo_ref', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_organization_profiles_id', 'organization_profiles', ['id'])
    op.create_index('ix_organization_profiles_user_id', 'organization_profiles', ['user_id'], unique=True)

    op.create_table(
        'events',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', CATEGORY_ENUM, nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('status', STATUS_ENUM, nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('capacity > 0', name='ck_events_capacity_positive'),
        sa.CheckConstraint('end_time > start_time', name='ck_events_schedule_order'),
    )
    op.create_index('ix_events_owner_id', 'events', ['owner_id'])
    op.create_index('ix_events_start_time', 'events', ['start_time'])
    op.create_index('ix_events_status', 'events', ['status'])

    op.create_table(
        'event_registrations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_id', sa.Uuid(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('registered_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('event_id', 'user_id', name='uq_event_registration_event_user'),
    )
    op.create_index('ix_event_registrations_id', 'event_registrations', ['id'])
    op.create_index('ix_event_registrations_event_id', 'event_registrations', ['event_id'])
    op.create_index('ix_event_registrations_user_id', 'event_registrations', ['user_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('event_registrations')
    op.drop_table('events')
    op.drop_table('organization_profiles')
    op.drop_table('student_profiles')
    op.drop_table('user_roles')
    op.drop_table('users')
