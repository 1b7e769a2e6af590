"""initial travel agency schema

Revision ID: 3b1f2c9a7d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f2c9a7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


booking_status = sa.Enum('CONFIRMED', 'PENDING', 'CANCELLED', name='bookingstatus')


def base_columns():
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
    ]


def create_table(name, *columns):
    op.create_table(name, *base_columns(), *columns, sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f(f'ix_{name}_id'), name, ['id'], unique=False)


def upgrade():
    create_table(
        'companies',
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('subdomain', sa.String(length=100), nullable=False),
        sa.Column('settings', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
    )
    op.create_index(op.f('ix_companies_subdomain'), 'companies', ['subdomain'], unique=True)

    create_table(
        'users',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('ADMIN', 'MANAGER', 'EMPLOYEE', 'ACCOUNTANT', name='userrole'), nullable=False),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    # Shifts and breaks
    create_table(
        'shifts',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('total_break_seconds', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.CheckConstraint('total_break_seconds >= 0', name='ck_shifts_break_seconds_positive'),
        sa.CheckConstraint('end_time IS NULL OR end_time >= start_time', name='ck_shifts_end_after_start'),
    )
    op.create_index(op.f('ix_shifts_user_id'), 'shifts', ['user_id'], unique=False)
    op.create_index(
        'uq_shifts_user_open', 'shifts', ['user_id'], unique=True,
        postgresql_where=sa.text('end_time IS NULL AND is_deleted = false'),
        sqlite_where=sa.text('end_time IS NULL AND is_deleted = 0'),
    )

    create_table(
        'breaks',
        sa.Column('shift_id', sa.Integer(), sa.ForeignKey('shifts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.CheckConstraint('end_time IS NULL OR end_time >= start_time', name='ck_breaks_end_after_start'),
    )
    op.create_index(op.f('ix_breaks_shift_id'), 'breaks', ['shift_id'], unique=False)
    op.create_index(
        'uq_breaks_shift_open', 'breaks', ['shift_id'], unique=True,
        postgresql_where=sa.text('end_time IS NULL AND is_deleted = false'),
        sqlite_where=sa.text('end_time IS NULL AND is_deleted = 0'),
    )

    create_table(
        'leave_requests',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('leave_type', sa.String(length=255), nullable=False),
        sa.Column('leave_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='leavestatus'), nullable=False),
        sa.Column('reviewed_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_leave_requests_user_id'), 'leave_requests', ['user_id'], unique=False)
    op.create_index(op.f('ix_leave_requests_leave_date'), 'leave_requests', ['leave_date'], unique=False)

    create_table(
        'notifications',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('category', sa.Enum('LEAVE_REQUEST', 'LEAVE_REVIEW', 'SHIFT', 'RESERVATION', name='notificationcategory'), nullable=False),
        sa.Column('reference_type', sa.String(length=50), nullable=True),
        sa.Column('reference_id', sa.Integer(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('read_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_notifications_user_id'), 'notifications', ['user_id'], unique=False)

    # Reservations
    create_table(
        'customers',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
    )
    create_table(
        'suppliers',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('payment_status', sa.Enum(
            'PAID', 'UNPAID', 'CONFIRMED', 'PENDING', 'CANCELLED', 'APPROVED', 'REJECTED',
            'SCHEDULED', 'COMPLETED', 'ACTIVE', 'EXPIRED', name='supplierpaymentstatus'
        ), nullable=False),
    )
    create_table(
        'reservations',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('supplier_id', sa.Integer(), sa.ForeignKey('suppliers.id'), nullable=True),
        sa.Column('reservable_type', sa.Enum(
            'FLIGHT', 'HOTEL', 'CRUISE', 'VISA', 'INSURANCE', 'TICKET', 'TRANSPORTATION', 'APPOINTMENT',
            name='reservabletype'
        ), nullable=False),
        sa.Column('reservable_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum('HOLD', 'ISSUED', 'CANCELLED', name='reservationstatus'), nullable=False),
        sa.Column('sell_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('cost', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('fees', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('net_profit', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('reason_cancelled', sa.Text(), nullable=True),
        sa.Column('sent', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('reservable_type', 'reservable_id', name='uq_reservations_reservable'),
    )

    # Booking variants
    create_table(
        'flights',
        sa.Column('flight_number', sa.String(length=50), nullable=False),
        sa.Column('from_airport', sa.String(length=50), nullable=False),
        sa.Column('to_airport', sa.String(length=50), nullable=False),
        sa.Column('departure_date', sa.DateTime(), nullable=False),
        sa.Column('arrival_date', sa.DateTime(), nullable=False),
        sa.Column('airline', sa.String(length=50), nullable=False),
        sa.Column('passenger_info', sa.Text(), nullable=False),
        sa.Column('status', booking_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    create_table(
        'hotels',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('booking_number', sa.String(length=50), nullable=False),
        sa.Column('number_of_guests', sa.Integer(), nullable=False),
        sa.Column('number_of_rooms', sa.Integer(), nullable=False),
        sa.Column('room_type', sa.String(length=50), nullable=False),
        sa.Column('check_in_date', sa.Date(), nullable=False),
        sa.Column('check_out_date', sa.Date(), nullable=False),
        sa.Column('status', booking_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    create_table(
        'cruises',
        sa.Column('cruise_name', sa.String(length=255), nullable=False),
        sa.Column('ship_name', sa.String(length=255), nullable=False),
        sa.Column('cabin_type', sa.String(length=50), nullable=False),
        sa.Column('departure_date', sa.DateTime(), nullable=False),
        sa.Column('arrival_date', sa.DateTime(), nullable=False),
        sa.Column('departure_port', sa.String(length=255), nullable=False),
        sa.Column('arrival_port', sa.String(length=255), nullable=False),
        sa.Column('cruise_line', sa.String(length=255), nullable=False),
        sa.Column('status', booking_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    create_table(
        'visas',
        sa.Column('country', sa.String(length=255), nullable=False),
        sa.Column('visa_type', sa.String(length=50), nullable=False),
        sa.Column('application_date', sa.Date(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('application_details', sa.Text(), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='visastatus'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    create_table(
        'insurances',
        sa.Column('insurance_type', sa.String(length=50), nullable=False),
        sa.Column('provider', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('insured_persons', sa.Text(), nullable=False),
        sa.Column('status', sa.Enum('ACTIVE', 'EXPIRED', 'CANCELLED', name='insurancestatus'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    create_table(
        'tickets',
        sa.Column('event_name', sa.String(length=255), nullable=False),
        sa.Column('event_date', sa.DateTime(), nullable=False),
        sa.Column('tickets_count', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('seat_category', sa.String(length=50), nullable=False),
        sa.Column('status', booking_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    create_table(
        'transportations',
        sa.Column('transport_type', sa.String(length=50), nullable=False),
        sa.Column('transportation_date', sa.DateTime(), nullable=False),
        sa.Column('pickup_location', sa.String(length=255), nullable=False),
        sa.Column('dropoff_location', sa.String(length=255), nullable=False),
        sa.Column('route_from', sa.String(length=255), nullable=False),
        sa.Column('route_to', sa.String(length=255), nullable=False),
        sa.Column('passenger_count', sa.Integer(), nullable=False),
        sa.Column('status', booking_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    create_table(
        'appointments',
        sa.Column('appointment_type', sa.String(length=50), nullable=False),
        sa.Column('appointment_date', sa.DateTime(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('status', sa.Enum('SCHEDULED', 'COMPLETED', 'CANCELLED', name='appointmentstatus'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )


def downgrade():
    for name in (
        'appointments', 'transportations', 'tickets', 'insurances', 'visas', 'cruises',
        'hotels', 'flights', 'reservations', 'suppliers', 'customers', 'notifications',
        'leave_requests', 'breaks', 'shifts', 'users', 'companies',
    ):
        op.drop_table(name)

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum_name in (
            'appointmentstatus', 'insurancestatus', 'visastatus', 'bookingstatus', 'reservationstatus',
            'reservabletype', 'supplierpaymentstatus', 'notificationcategory', 'leavestatus', 'userrole',
        ):
            op.execute(f'DROP TYPE IF EXISTS {enum_name}')
