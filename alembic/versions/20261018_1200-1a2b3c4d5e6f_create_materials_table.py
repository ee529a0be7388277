"""create_materials_table

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-18 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '1a2b3c4d5e6f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'materials',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('desc', sa.Text(), nullable=False),
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('pdf_path', sa.Text(), nullable=False),
        sa.Column('image_path', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Duplicate check filters on these columns
    op.create_index(
        'idx_materials_name_category', 'materials', ['name', 'category'], unique=False
    )


def downgrade() -> None:
    op.drop_index('idx_materials_name_category', table_name='materials')
    op.drop_table('materials')
