"""create scheduling tables

Revision ID: 7c3e1a9d2b40
Revises:
Create Date: 2026-03-02 10:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c3e1a9d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    op.create_table('ingredients',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('code', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index(op.f('ix_ingredients_id'), 'ingredients', ['id'], unique=False)
    op.create_index(op.f('ix_ingredients_category'), 'ingredients', ['category'], unique=False)

    op.create_table('working_days',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('day', sa.Date(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('deadline_minutes', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('capacity >= 1', name='ck_working_days_capacity_positive'),
        sa.CheckConstraint('deadline_minutes >= 0', name='ck_working_days_deadline_non_negative'),
        sa.CheckConstraint('start_time < end_time', name='ck_working_days_hours_ordered'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('day')
    )
    op.create_index(op.f('ix_working_days_id'), 'working_days', ['id'], unique=False)

    op.create_table('time_slots',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('working_day_id', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.ForeignKeyConstraint(['working_day_id'], ['working_days.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('working_day_id', 'start_time', 'end_time', name='uix_time_slot_interval')
    )
    op.create_index(op.f('ix_time_slots_id'), 'time_slots', ['id'], unique=False)
    op.create_index(op.f('ix_time_slots_working_day_id'), 'time_slots', ['working_day_id'], unique=False)

    op.create_table('orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('time_slot_id', sa.Integer(), nullable=False),
        sa.Column('working_day_id', sa.Integer(), nullable=False),
        sa.Column('daily_number', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('daily_number >= 1', name='ck_orders_daily_number_positive'),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'ready', 'picked_up', 'rejected')",
            name='ck_orders_status'
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['time_slot_id'], ['time_slots.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['working_day_id'], ['working_days.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('working_day_id', 'daily_number', name='uix_order_daily_number')
    )
    op.create_index(op.f('ix_orders_id'), 'orders', ['id'], unique=False)
    op.create_index(op.f('ix_orders_user_id'), 'orders', ['user_id'], unique=False)
    op.create_index(op.f('ix_orders_time_slot_id'), 'orders', ['time_slot_id'], unique=False)
    op.create_index(op.f('ix_orders_working_day_id'), 'orders', ['working_day_id'], unique=False)
    op.create_index(op.f('ix_orders_status'), 'orders', ['status'], unique=False)
    op.create_index('ix_orders_time_slot_status', 'orders', ['time_slot_id', 'status'], unique=False)

    op.create_table('order_ingredients',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id', 'name', name='uix_order_ingredient_name')
    )
    op.create_index(op.f('ix_order_ingredients_id'), 'order_ingredients', ['id'], unique=False)
    op.create_index(op.f('ix_order_ingredients_order_id'), 'order_ingredients', ['order_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('order_ingredients')
    op.drop_table('orders')
    op.drop_table('time_slots')
    op.drop_table('working_days')
    op.drop_table('ingredients')
    op.drop_table('users')
