"""create_matching_tables

Revision ID: 3f1a9c2d7e41
Revises:
Create Date: 2026-10-19 10:12:40.518221

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Users (identity reference; sessions are issued elsewhere)
    op.create_table(
        'users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('role', sa.Enum('MEMBER', 'MATCHMAKER', 'ADMIN', name='userrole'), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True, server_default='active'),
        sa.Column('last_active_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_status', 'users', ['status'])

    op.create_table(
        'profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('looking_for', sa.JSON(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('profile_hidden', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('can_start_matching', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('profile_image_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_profiles_id', 'profiles', ['id'])
    op.create_index('ix_profiles_user_id', 'profiles', ['user_id'], unique=True)
    op.create_index('ix_profiles_gender', 'profiles', ['gender'])
    op.create_index('ix_profiles_profile_hidden', 'profiles', ['profile_hidden'])
    op.create_index('ix_profiles_can_start_matching', 'profiles', ['can_start_matching'])
    op.create_index('ix_profiles_created_at', 'profiles', ['created_at'])

    op.create_table(
        'match_actions',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('actor_id', sa.UUID(), nullable=False),
        sa.Column('target_id', sa.UUID(), nullable=False),
        sa.Column('kind', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['actor_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['target_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('actor_id', 'target_id', name='unique_actor_target_action'),
        sa.CheckConstraint("kind IN ('like', 'pass', 'super_like')", name='check_match_action_kind'),
    )
    op.create_index('ix_match_actions_id', 'match_actions', ['id'])
    op.create_index('ix_match_actions_actor_id', 'match_actions', ['actor_id'])
    op.create_index('ix_match_actions_target_id', 'match_actions', ['target_id'])
    op.create_index('ix_match_actions_created_at', 'match_actions', ['created_at'])
    op.create_index('ix_match_actions_target_kind', 'match_actions', ['target_id', 'kind'])

    op.create_table(
        'blocks',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('blocker_id', sa.UUID(), nullable=False),
        sa.Column('blocked_id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['blocker_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['blocked_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('blocker_id', 'blocked_id', name='unique_blocker_blocked'),
    )
    op.create_index('ix_blocks_id', 'blocks', ['id'])
    op.create_index('ix_blocks_blocker_id', 'blocks', ['blocker_id'])
    op.create_index('ix_blocks_blocked_id', 'blocks', ['blocked_id'])

    op.create_table(
        'favorites',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('favorite_user_id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['favorite_user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'favorite_user_id', name='unique_user_favorite'),
    )
    op.create_index('ix_favorites_id', 'favorites', ['id'])
    op.create_index('ix_favorites_user_id', 'favorites', ['user_id'])
    op.create_index('ix_favorites_favorite_user_id', 'favorites', ['favorite_user_id'])

    op.create_table(
        'user_filters',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('max_distance_miles', sa.Float(), nullable=True),
        sa.Column('min_age', sa.Integer(), nullable=True),
        sa.Column('max_age', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_user_filters_id', 'user_filters', ['id'])
    op.create_index('ix_user_filters_user_id', 'user_filters', ['user_id'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_user_filters_user_id', 'user_filters')
    op.drop_index('ix_user_filters_id', 'user_filters')
    op.drop_table('user_filters')

    op.drop_index('ix_favorites_favorite_user_id', 'favorites')
    op.drop_index('ix_favorites_user_id', 'favorites')
    op.drop_index('ix_favorites_id', 'favorites')
    op.drop_table('favorites')

    op.drop_index('ix_blocks_blocked_id', 'blocks')
    op.drop_index('ix_blocks_blocker_id', 'blocks')
    op.drop_index('ix_blocks_id', 'blocks')
    op.drop_table('blocks')

    op.drop_index('ix_match_actions_target_kind', 'match_actions')
    op.drop_index('ix_match_actions_created_at', 'match_actions')
    op.drop_index('ix_match_actions_target_id', 'match_actions')
    op.drop_index('ix_match_actions_actor_id', 'match_actions')
    op.drop_index('ix_match_actions_id', 'match_actions')
    op.drop_table('match_actions')

    op.drop_index('ix_profiles_created_at', 'profiles')
    op.drop_index('ix_profiles_can_start_matching', 'profiles')
    op.drop_index('ix_profiles_profile_hidden', 'profiles')
    op.drop_index('ix_profiles_gender', 'profiles')
    op.drop_index('ix_profiles_user_id', 'profiles')
    op.drop_index('ix_profiles_id', 'profiles')
    op.drop_table('profiles')

    op.drop_index('ix_users_status', 'users')
    op.drop_index('ix_users_role', 'users')
    op.drop_index('ix_users_email', 'users')
    op.drop_index('ix_users_id', 'users')
    op.drop_table('users')

    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
