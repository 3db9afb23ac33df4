"""Initial schema: reservations, blocked_dates, inventory_locks

Revision ID: 001_initial
Revises:
Create Date: 2025-06-01 09:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'reservations',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('rental_type', sa.String(length=50), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'CONFIRMED', 'IN_PROGRESS', 'CANCELLED', 'COMPLETED',
                                    name='reservationstatus'), nullable=False),
        sa.Column('customer_name', sa.String(length=200), nullable=False),
        sa.Column('customer_email', sa.String(length=254), nullable=False),
        sa.Column('customer_phone', sa.String(length=50), nullable=False),
        sa.Column('fulfillment', sa.Enum('PICKUP', 'DELIVERY', name='fulfillmentmode'), nullable=False),
        sa.Column('delivery_address', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('total_amount_cents', sa.Integer(), nullable=False),
        sa.Column('deposit_amount_cents', sa.Integer(), nullable=False),
        sa.Column('stripe_session_id', sa.String(length=255), nullable=True),
        sa.Column('stripe_payment_intent', sa.String(length=255), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_reservations_status_span', 'reservations', ['status', 'start_date', 'end_date'])
    op.create_index('ix_reservations_stripe_session_id', 'reservations', ['stripe_session_id'])

    op.create_table(
        'blocked_dates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('machine_id', sa.Integer(), nullable=True),
        sa.Column('reason', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_blocked_dates_date', 'blocked_dates', ['date'])

    op.create_table(
        'inventory_locks',
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('name')
    )

    # Admission expects the fleet guard row to exist
    op.execute("INSERT INTO inventory_locks (name, version) VALUES ('fleet', 0)")


def downgrade():
    op.drop_table('inventory_locks')

    op.drop_index('ix_blocked_dates_date', table_name='blocked_dates')
    op.drop_table('blocked_dates')

    op.drop_index('ix_reservations_stripe_session_id', table_name='reservations')
    op.drop_index('ix_reservations_status_span', table_name='reservations')
    op.drop_table('reservations')

    sa.Enum(name='fulfillmentmode').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='reservationstatus').drop(op.get_bind(), checkfirst=True)
