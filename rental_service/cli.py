"""
Admin commands, registered on the Flask CLI

    flask block-date 2025-07-04 --reason "Holiday"
    flask unblock-date 2025-07-04
    flask cancel-reservation <booking-id>
    flask reap-pending --loop --interval 300
"""

import time
import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from rental_service.database import atomic
from rental_service.errors import BookingNotFound
from rental_service.repositories import BlockedDateRepository
from rental_service.services import ReservationService

logger = logging.getLogger(__name__)


def _validate_machine(machine):
    fleet_size = current_app.config['FLEET_SIZE']
    if machine is not None and not 1 <= machine <= fleet_size:
        raise click.BadParameter(f"machine must be between 1 and {fleet_size}", param_hint='--machine')


@click.command('block-date')
@with_appcontext
@click.argument('day', type=click.DateTime(formats=['%Y-%m-%d']))
@click.option('--machine', type=int, default=None, help='Block one machine instead of the whole fleet.')
@click.option('--reason', default=None, help='Shown to staff only.')
def block_date_command(day, machine, reason):
    """Take machines out of service for a date."""
    _validate_machine(machine)
    day = day.date()
    repo = BlockedDateRepository()

    with atomic():
        if repo.exists(day, machine):
            click.echo(f"{day.isoformat()} is already blocked")
            return
        repo.add(day, machine, reason)

    target = f"machine {machine}" if machine is not None else 'all machines'
    logger.info(f"Blocked {day.isoformat()} for {target}")
    click.echo(f"Blocked {day.isoformat()} for {target}")


@click.command('unblock-date')
@with_appcontext
@click.argument('day', type=click.DateTime(formats=['%Y-%m-%d']))
@click.option('--machine', type=int, default=None, help='Unblock one machine only.')
def unblock_date_command(day, machine):
    """Remove a blocked date."""
    _validate_machine(machine)
    day = day.date()

    with atomic():
        removed = BlockedDateRepository().remove(day, machine)

    if not removed:
        click.echo(f"No matching block on {day.isoformat()}")
        return
    logger.info(f"Unblocked {day.isoformat()} ({removed} rows)")
    click.echo(f"Unblocked {day.isoformat()}")


@click.command('cancel-reservation')
@with_appcontext
@click.argument('booking_id')
def cancel_reservation_command(booking_id):
    """Cancel a pending or confirmed reservation."""
    try:
        cancelled = ReservationService().cancel_booking(booking_id)
    except BookingNotFound:
        raise click.ClickException(f"Booking {booking_id} not found")

    if cancelled:
        click.echo(f"Cancelled booking {booking_id}")
    else:
        click.echo(f"Booking {booking_id} is not active; nothing to cancel")


@click.command('reap-pending')
@with_appcontext
@click.option('--loop', is_flag=True, help='Keep running until interrupted.')
@click.option('--interval', type=int, default=300, show_default=True, help='Seconds between sweeps.')
def reap_pending_command(loop, interval):
    """Cancel pending reservations whose checkout window has elapsed."""
    service = ReservationService()

    while True:
        try:
            result = service.expire_stale_pending()
            click.echo(f"Expired {result['processed_count']} pending reservations")
        except Exception as e:
            if not loop:
                raise
            logger.error(f"Pending sweep failed: {e}")

        if not loop:
            break
        time.sleep(interval)


def register_commands(app):
    """Attach admin commands to ``app.cli``"""
    for command in (block_date_command, unblock_date_command,
                    cancel_reservation_command, reap_pending_command):
        app.cli.add_command(command)
