"""add last_daily_number to working_days

Revision ID: b4f2d81c6e13
Revises: 7c3e1a9d2b40
Create Date: 2026-10-19 09:41:07.552031

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b4f2d81c6e13'
down_revision: Union[str, Sequence[str], None] = '7c3e1a9d2b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.add_column(
        'working_days',
        sa.Column('last_daily_number', sa.Integer(), nullable=False, server_default='0'),
    )

    # Existing days start from the highest number already issued
    op.execute(
        """
        UPDATE working_days
        SET last_daily_number = COALESCE(
            (SELECT MAX(orders.daily_number) FROM orders
             WHERE orders.working_day_id = working_days.id),
            0
        )
        """
    )


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table('working_days') as batch_op:
        batch_op.drop_column('last_daily_number')
