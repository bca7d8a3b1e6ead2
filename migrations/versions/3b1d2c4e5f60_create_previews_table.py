"""create_previews_table

Revision ID: 3b1d2c4e5f60
Revises:
Create Date: 2025-12-06 10:12:41.502317

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1d2c4e5f60'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the previews table, one row per URL."""
    op.create_table(
        'previews',
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('added_date', sa.Date(), nullable=False),
        sa.Column('saved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('embellished', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('bookmarked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('source', sa.String(length=200), nullable=True),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('published_date', sa.String(length=100), nullable=True),
        sa.Column('tags', sa.Text(), nullable=True),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('url'),
    )
    op.create_index('ix_previews_added_date', 'previews', ['added_date'])
    op.create_index('ix_previews_source', 'previews', ['source'])


def downgrade() -> None:
    """Drop the previews table."""
    op.drop_index('ix_previews_source', table_name='previews')
    op.drop_index('ix_previews_added_date', table_name='previews')
    op.drop_table('previews')
