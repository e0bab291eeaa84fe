"""initial_schema

Revision ID: a1f3c2d4e5b6
Revises:
Create Date: 2026-10-19 10:12:41.118532

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f3c2d4e5b6'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum('user', 'organizer', name='user_role')
structure_type = sa.Enum('pond_only', 'pond_zone', 'pond_zone_area', name='structure_type')
tournament_status = sa.Enum('draft', 'active', 'completed', 'cancelled', name='tournament_status')
registration_status = sa.Enum('draft', 'pending', 'confirmed', 'rejected', 'cancelled', name='registration_status')
approval_status = sa.Enum('pending', 'approved', 'rejected', name='approval_status')

ACTIVE_WHERE = sa.text("status IN ('pending', 'confirmed')")
DRAFT_WHERE = sa.text("status = 'draft'")


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(length=150), nullable=False),
        sa.Column('mobile_no', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('bank_account_no', sa.String(length=50), nullable=True),
        sa.Column('bank_name', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_mobile_no'), 'users', ['mobile_no'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'tournaments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('organizer_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('structure_type', structure_type, nullable=False),
        sa.Column('status', tournament_status, nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('tournament_start_time', sa.Time(), nullable=True),
        sa.Column('tournament_end_time', sa.Time(), nullable=True),
        sa.Column('registration_start_date', sa.Date(), nullable=True),
        sa.Column('registration_end_date', sa.Date(), nullable=True),
        sa.Column('registration_link', sa.String(length=64), nullable=False),
        sa.Column('leaderboard_link', sa.String(length=64), nullable=False),
        sa.Column('banner_image', sa.String(length=255), nullable=True),
        sa.Column('payment_details_image', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['organizer_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tournaments_id'), 'tournaments', ['id'], unique=False)
    op.create_index(op.f('ix_tournaments_organizer_id'), 'tournaments', ['organizer_id'], unique=False)
    op.create_index(op.f('ix_tournaments_registration_link'), 'tournaments', ['registration_link'], unique=True)
    op.create_index(op.f('ix_tournaments_leaderboard_link'), 'tournaments', ['leaderboard_link'], unique=True)

    op.create_table(
        'ponds',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tournament_id', sa.Integer(), nullable=False),
        sa.Column('pond_name', sa.String(length=150), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('layout_image', sa.String(length=255), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournaments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_ponds_id'), 'ponds', ['id'], unique=False)
    op.create_index(op.f('ix_ponds_tournament_id'), 'ponds', ['tournament_id'], unique=False)

    op.create_table(
        'zones',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('pond_id', sa.Integer(), nullable=False),
        sa.Column('zone_name', sa.String(length=150), nullable=False),
        sa.Column('zone_number', sa.Integer(), nullable=False),
        sa.Column('color', sa.String(length=20), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.ForeignKeyConstraint(['pond_id'], ['ponds.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('pond_id', 'zone_number', name='uq_zone_number_per_pond')
    )
    op.create_index(op.f('ix_zones_id'), 'zones', ['id'], unique=False)
    op.create_index(op.f('ix_zones_pond_id'), 'zones', ['pond_id'], unique=False)

    op.create_table(
        'areas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('zone_id', sa.Integer(), nullable=False),
        sa.Column('area_number', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('position_x', sa.Integer(), nullable=False),
        sa.Column('position_y', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['zone_id'], ['zones.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('zone_id', 'area_number', name='uq_area_number_per_zone')
    )
    op.create_index(op.f('ix_areas_id'), 'areas', ['id'], unique=False)
    op.create_index(op.f('ix_areas_zone_id'), 'areas', ['zone_id'], unique=False)

    op.create_table(
        'registrations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('tournament_id', sa.Integer(), nullable=False),
        sa.Column('pond_id', sa.Integer(), nullable=True),
        sa.Column('zone_id', sa.Integer(), nullable=True),
        sa.Column('status', registration_status, nullable=False),
        sa.Column('total_payment', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('payment_receipt', sa.String(length=255), nullable=True),
        sa.Column('bank_account_no', sa.String(length=50), nullable=True),
        sa.Column('bank_name', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('registered_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournaments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['pond_id'], ['ponds.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['zone_id'], ['zones.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_registrations_id'), 'registrations', ['id'], unique=False)
    op.create_index(op.f('ix_registrations_user_id'), 'registrations', ['user_id'], unique=False)
    op.create_index(op.f('ix_registrations_tournament_id'), 'registrations', ['tournament_id'], unique=False)
    op.create_index(op.f('ix_registrations_status'), 'registrations', ['status'], unique=False)
    op.create_index(
        'uq_registration_active_per_user', 'registrations', ['user_id', 'tournament_id'],
        unique=True, postgresql_where=ACTIVE_WHERE, sqlite_where=ACTIVE_WHERE
    )
    op.create_index(
        'uq_registration_draft_per_user', 'registrations', ['user_id', 'tournament_id'],
        unique=True, postgresql_where=DRAFT_WHERE, sqlite_where=DRAFT_WHERE
    )

    op.create_table(
        'area_selections',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('registration_id', sa.Integer(), nullable=False),
        sa.Column('area_id', sa.Integer(), nullable=False),
        sa.Column('selected_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['registration_id'], ['registrations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['area_id'], ['areas.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('registration_id', 'area_id', name='uq_selection_per_registration')
    )
    op.create_index(op.f('ix_area_selections_id'), 'area_selections', ['id'], unique=False)
    op.create_index(op.f('ix_area_selections_registration_id'), 'area_selections', ['registration_id'], unique=False)
    op.create_index(op.f('ix_area_selections_area_id'), 'area_selections', ['area_id'], unique=False)

    op.create_table(
        'catches',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('registration_id', sa.Integer(), nullable=False),
        sa.Column('catch_image', sa.String(length=255), nullable=False),
        sa.Column('weight', sa.Numeric(precision=10, scale=3), nullable=False),
        sa.Column('species', sa.String(length=100), nullable=True),
        sa.Column('approval_status', approval_status, nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['registration_id'], ['registrations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_catches_id'), 'catches', ['id'], unique=False)
    op.create_index(op.f('ix_catches_registration_id'), 'catches', ['registration_id'], unique=False)
    op.create_index(op.f('ix_catches_approval_status'), 'catches', ['approval_status'], unique=False)


def downgrade() -> None:
    op.drop_table('catches')
    op.drop_table('area_selections')
    op.drop_table('registrations')
    op.drop_table('areas')
    op.drop_table('zones')
    op.drop_table('ponds')
    op.drop_table('tournaments')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (approval_status, registration_status, tournament_status, structure_type, user_role):
        enum_type.drop(bind, checkfirst=True)
