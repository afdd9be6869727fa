"""add branch and toc flags to work items

Revision ID: 3f8a6c21d904
Revises: 9c41d7a0b2e5
Create Date: 2026-10-18 16:40:12.902114

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f8a6c21d904'
down_revision: Union[str, Sequence[str], None] = '9c41d7a0b2e5'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def upgrade():
    # existing rows get false through the server default
    op.add_column('work_items', sa.Column('branch_required', sa.Boolean(), nullable=False, server_default=sa.false()))
    op.add_column('work_items', sa.Column('branch_name', sa.String(), nullable=True))
    op.add_column('work_items', sa.Column('toc_enabled', sa.Boolean(), nullable=False, server_default=sa.false()))

def downgrade():
    op.drop_column('work_items', 'toc_enabled')
    op.drop_column('work_items', 'branch_name')
    op.drop_column('work_items', 'branch_required')
