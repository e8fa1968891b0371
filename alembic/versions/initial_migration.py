"""Initial migration

Revision ID: initial_migration
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers, used by Alembic.
revision: str = 'initial_migration'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create media item table
    op.create_table(
        'mediaitem',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('file', sqlmodel.sql.sqltypes.AutoString(length=1024), nullable=True),
        sa.Column('mime_type', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('attachment_metadata', sa.JSON(), nullable=True),
        sa.Column('upload_date', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Create setting table
    op.create_table(
        'setting',
        sa.Column('key', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('value', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('key')
    )


def downgrade() -> None:
    # Drop tables in reverse order of creation
    op.drop_table('setting')
    op.drop_table('mediaitem')
