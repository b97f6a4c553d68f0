"""initial create participants and feature_images

Revision ID: 001
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Criar tabela participants
    op.create_table(
        'participants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('birth_date', sa.String(length=50), nullable=True),
        sa.Column('gender', sa.String(length=50), nullable=True),
        sa.Column('birth_place', sa.String(length=200), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('job_type', sa.String(length=100), nullable=True),
        sa.Column('first_aid', sa.String(length=100), nullable=True),
        sa.Column('extra', sa.JSON(), nullable=True),
        sa.Column('timestamp', sa.String(length=40), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Criar tabela feature_images
    op.create_table(
        'feature_images',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('filename', sa.String(length=300), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_feature_images_category', 'feature_images', ['category'])


def downgrade() -> None:
    op.drop_index('ix_feature_images_category', table_name='feature_images')
    op.drop_table('feature_images')
    op.drop_table('participants')
