"""Initial migration

Revision ID: 001
Revises: 
Create Date: 2024-12-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PRODUCT_TYPES = ('overnight', 'daytrip', 'training')
PAYMENT_STATUSES = ('pending', 'partial', 'completed')
SCHEDULE_TYPES = ('d_minus_7', 'd_minus_1', 'd_day_morning', 'before_meal', 'before_close')
SCHEDULE_STATUSES = ('pending', 'in_flight', 'sent', 'failed', 'skipped')


def upgrade() -> None:
    # Create reservations table
    op.create_table(
        'reservations',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('use_date', sa.Date(), nullable=False),
        sa.Column('product_type', sa.Enum(*PRODUCT_TYPES, name='product_type', native_enum=False), nullable=False),
        sa.Column('people_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('company_name', sa.String(255)),
        sa.Column('manager_name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('deposit_amount', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('payment_status', sa.Enum(*PAYMENT_STATUSES, name='payment_status', native_enum=False), nullable=False, server_default='pending'),
        sa.Column('notes', sa.Text()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    op.create_index('ix_reservations_use_date', 'reservations', ['use_date'])

    # Create message_templates table
    op.create_table(
        'message_templates',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_type', sa.Enum(*PRODUCT_TYPES, name='product_type', native_enum=False), nullable=False),
        sa.Column('schedule_type', sa.Enum(*SCHEDULE_TYPES, name='schedule_type', native_enum=False), nullable=False),
        sa.Column('message_content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
        sa.UniqueConstraint('product_type', 'schedule_type', name='uq_message_templates_product_schedule'),
    )

    # Create sms_schedules table
    op.create_table(
        'sms_schedules',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('reservation_id', sa.Integer(), sa.ForeignKey('reservations.id', ondelete='SET NULL')),
        sa.Column('schedule_type', sa.Enum(*SCHEDULE_TYPES, name='schedule_type', native_enum=False), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(), nullable=False),
        sa.Column('status', sa.Enum(*SCHEDULE_STATUSES, name='schedule_status', native_enum=False), nullable=False, server_default='pending'),
        sa.Column('sent_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.UniqueConstraint('reservation_id', 'schedule_type', name='uq_sms_schedules_reservation_type'),
    )
    op.create_index('ix_sms_schedules_scheduled_at', 'sms_schedules', ['scheduled_at'])
    op.create_index('ix_sms_schedules_status', 'sms_schedules', ['status'])

    # Create sms_logs table
    op.create_table(
        'sms_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('reservation_id', sa.Integer(), sa.ForeignKey('reservations.id', ondelete='SET NULL')),
        sa.Column('schedule_id', sa.Integer(), sa.ForeignKey('sms_schedules.id', ondelete='SET NULL')),
        sa.Column('phone', sa.String(20)),
        sa.Column('message', sa.Text()),
        sa.Column('status', sa.Enum(*SCHEDULE_STATUSES, name='schedule_status', native_enum=False), nullable=False),
        sa.Column('response_data', sa.JSON()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('sms_logs')
    op.drop_index('ix_sms_schedules_status', table_name='sms_schedules')
    op.drop_index('ix_sms_schedules_scheduled_at', table_name='sms_schedules')
    op.drop_table('sms_schedules')
    op.drop_table('message_templates')
    op.drop_index('ix_reservations_use_date', table_name='reservations')
    op.drop_table('reservations')
