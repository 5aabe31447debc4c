"""Add discovery preference columns to profiles and user_filters

Revision ID: 8b2e4d6f1a93
Revises: 3f1a9c2d7e41
Create Date: 2026-10-20 09:41:17.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b2e4d6f1a93'
down_revision: Union[str, Sequence[str], None] = '3f1a9c2d7e41'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add lifestyle attributes to profiles and matching filters to user_filters."""
    op.add_column('profiles', sa.Column('height_inches', sa.Integer(), nullable=True))
    op.add_column('profiles', sa.Column('body_type', sa.String(length=30), nullable=True))
    op.add_column('profiles', sa.Column('ethnicity', sa.JSON(), nullable=True))
    op.add_column('profiles', sa.Column('religion', sa.String(length=50), nullable=True))
    op.add_column('profiles', sa.Column('education', sa.String(length=50), nullable=True))
    op.add_column('profiles', sa.Column('zodiac_sign', sa.String(length=20), nullable=True))
    op.add_column('profiles', sa.Column('smoking', sa.String(length=20), nullable=True))
    op.add_column('profiles', sa.Column('drinking', sa.String(length=20), nullable=True))
    op.add_column('profiles', sa.Column('marijuana', sa.String(length=20), nullable=True))
    op.add_column('profiles', sa.Column('has_kids', sa.String(length=30), nullable=True))
    op.add_column('profiles', sa.Column('wants_kids', sa.String(length=30), nullable=True))
    op.create_index('ix_profiles_date_of_birth', 'profiles', ['date_of_birth'])

    op.add_column('user_filters', sa.Column('min_height', sa.Integer(), nullable=True))
    op.add_column('user_filters', sa.Column('max_height', sa.Integer(), nullable=True))
    op.add_column('user_filters', sa.Column('body_types', sa.JSON(), nullable=True))
    op.add_column('user_filters', sa.Column('ethnicities', sa.JSON(), nullable=True))
    op.add_column('user_filters', sa.Column('religions', sa.JSON(), nullable=True))
    op.add_column('user_filters', sa.Column('education_levels', sa.JSON(), nullable=True))
    op.add_column('user_filters', sa.Column('zodiac_signs', sa.JSON(), nullable=True))
    op.add_column('user_filters', sa.Column('smoking', sa.String(length=20), nullable=True))
    op.add_column('user_filters', sa.Column('drinking', sa.String(length=20), nullable=True))
    op.add_column('user_filters', sa.Column('marijuana', sa.String(length=20), nullable=True))
    op.add_column('user_filters', sa.Column('has_kids', sa.String(length=30), nullable=True))
    op.add_column('user_filters', sa.Column('wants_kids', sa.String(length=30), nullable=True))


def downgrade() -> None:
    """Remove discovery preference columns."""
    for column in (
        'wants_kids', 'has_kids', 'marijuana', 'drinking', 'smoking',
        'zodiac_signs', 'education_levels', 'religions', 'ethnicities',
        'body_types', 'max_height', 'min_height',
    ):
        op.drop_column('user_filters', column)

    op.drop_index('ix_profiles_date_of_birth', 'profiles')
    for column in (
        'wants_kids', 'has_kids', 'marijuana', 'drinking', 'smoking',
        'zodiac_sign', 'education', 'religion', 'ethnicity', 'body_type',
        'height_inches',
    ):
        op.drop_column('profiles', column)
