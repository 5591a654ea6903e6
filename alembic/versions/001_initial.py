"""Initial migration

Revision ID: 001
Revises:
Create Date: 2025-05-01 00:00:00.000000

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
    # Create customers table
    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20)),
        sa.Column('vip_status', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('dietary_restrictions', sa.Text()),
        sa.Column('accessibility_needs', sa.Text()),
        sa.Column('email_marketing_consent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sms_marketing_consent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('total_bookings', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_spent', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('last_booking_date', sa.Date()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    # Create wineries table
    op.create_table(
        'wineries',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), unique=True, nullable=False),
        sa.Column('address', sa.String(500)),
        sa.Column('city', sa.String(100), server_default='Walla Walla'),
        sa.Column('state', sa.String(2), server_default='WA'),
        sa.Column('tasting_fee', sa.Numeric(6, 2)),
        sa.Column('average_visit_duration', sa.Integer(), server_default='60'),
        sa.Column('reservation_required', sa.Boolean(), server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )

    # Create restaurants table
    op.create_table(
        'restaurants',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('cuisine_type', sa.String(100)),
        sa.Column('address', sa.String(500)),
        sa.Column('phone', sa.String(20)),
        sa.Column('email', sa.String(255)),
        sa.Column('website', sa.String(500)),
        sa.Column('menu_url', sa.String(500)),
        sa.Column('accepts_pre_orders', sa.Boolean(), server_default=sa.true()),
        sa.Column('minimum_order_value', sa.Numeric(8, 2)),
        sa.Column('is_partner', sa.Boolean(), server_default=sa.false()),
        sa.Column('commission_rate', sa.Numeric(4, 2)),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )

    # Create reservations table
    op.create_table(
        'reservations',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('reservation_number', sa.String(20), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('customer_phone', sa.String(20)),
        sa.Column('party_size', sa.Integer(), nullable=False),
        sa.Column('preferred_date', sa.Date(), nullable=False),
        sa.Column('alternate_date', sa.Date()),
        sa.Column('event_type', sa.String(100)),
        sa.Column('special_requests', sa.Text()),
        sa.Column('deposit_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('deposit_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('payment_method', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('consultation_deadline', sa.DateTime(), nullable=False),
        sa.Column('brand_id', sa.Integer()),
        sa.Column('booking_id', sa.Integer()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('party_size BETWEEN 1 AND 50', name='ck_reservations_party_size'),
        sa.CheckConstraint('deposit_amount > 0', name='ck_reservations_deposit_positive'),
    )

    # Create itineraries table
    op.create_table(
        'itineraries',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('pickup_location', sa.String(500), nullable=False),
        sa.Column('pickup_time', sa.String(5), nullable=False),
        sa.Column('dropoff_location', sa.String(500), nullable=False),
        sa.Column('estimated_dropoff_time', sa.String(5), nullable=False),
        sa.Column('pickup_drive_time_minutes', sa.Integer()),
        sa.Column('dropoff_drive_time_minutes', sa.Integer()),
        sa.Column('driver_notes', sa.Text()),
        sa.Column('internal_notes', sa.Text()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    # Create itinerary_stops table
    op.create_table(
        'itinerary_stops',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('itinerary_id', sa.Integer(), sa.ForeignKey('itineraries.id', ondelete='CASCADE'), nullable=False),
        sa.Column('winery_id', sa.Integer(), nullable=False),
        sa.Column('stop_order', sa.Integer(), nullable=False),
        sa.Column('arrival_time', sa.String(5)),
        sa.Column('departure_time', sa.String(5)),
        sa.Column('duration_minutes', sa.Integer()),
        sa.Column('drive_time_to_next_minutes', sa.Integer()),
        sa.Column('stop_type', sa.String(50), nullable=False, server_default='tasting'),
        sa.Column('reservation_confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('special_notes', sa.Text()),
        sa.Column('is_lunch_stop', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('itinerary_id', 'stop_order', name='uq_itinerary_stops_order'),
    )

    # Create proposal_notes table
    op.create_table(
        'proposal_notes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('trip_proposal_id', sa.Integer(), nullable=False),
        sa.Column('author_type', sa.String(20), nullable=False),
        sa.Column('author_name', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('context_type', sa.String(50)),
        sa.Column('context_id', sa.Integer()),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("author_type IN ('client', 'staff')", name='ck_proposal_notes_author_type'),
    )

    # Create indexes
    op.create_index('ix_customers_email', 'customers', ['email'], unique=True)
    op.create_index('ix_customers_vip_status', 'customers', ['vip_status'])
    op.create_index('ix_reservations_reservation_number', 'reservations', ['reservation_number'], unique=True)
    op.create_index('ix_reservations_customer_id', 'reservations', ['customer_id'])
    op.create_index('ix_reservations_status', 'reservations', ['status'])
    op.create_index('ix_reservations_brand_id', 'reservations', ['brand_id'])
    op.create_index('ix_itineraries_booking_id', 'itineraries', ['booking_id'], unique=True)
    op.create_index('ix_itinerary_stops_itinerary_id', 'itinerary_stops', ['itinerary_id'])
    op.create_index('ix_proposal_notes_trip_proposal_id', 'proposal_notes', ['trip_proposal_id'])
    op.create_index('ix_proposal_notes_unread', 'proposal_notes', ['trip_proposal_id', 'author_type', 'is_read'])


def downgrade() -> None:
    op.drop_table('proposal_notes')
    op.drop_table('itinerary_stops')
    op.drop_table('itineraries')
    op.drop_table('reservations')
    op.drop_table('restaurants')
    op.drop_table('wineries')
    op.drop_table('customers')
