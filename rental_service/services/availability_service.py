"""
Availability Service - per-date remaining machine capacity

The same CapacityCalendar answers both the advisory availability query and
the admission check made while the inventory lock is held.
"""

from collections import Counter, defaultdict
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Tuple
import logging

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from rental_service.catalog import RentalProduct, get_catalog
from rental_service.errors import InvalidRequest, UpstreamFailure
from rental_service.models import ACTIVE_STATUSES
from rental_service.repositories import ReservationRepository, BlockedDateRepository

logger = logging.getLogger(__name__)


class DateVerdict(Enum):
    OFFERED = "offered"
    NOT_OFFERED = "not_offered"  # product cannot start on this day
    SOLD_OUT = "sold_out"


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each date in [start, end]"""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


class CapacityCalendar:
    """Per-day machine usage built from reservations and blocked dates"""

    def __init__(self, fleet_size: int, reservations: Iterable = (), blocked_dates: Iterable = ()):
        self.fleet_size = fleet_size
        self._booked = Counter()
        self._fully_blocked = set()
        self._blocked_machines = defaultdict(set)

        for reservation in reservations:
            if reservation.status not in ACTIVE_STATUSES:
                continue
            for day in iter_days(reservation.start_date, reservation.end_date):
                self._booked[day] += 1

        for blocked in blocked_dates:
            if blocked.machine_id is None:
                self._fully_blocked.add(blocked.date)
            else:
                self._blocked_machines[blocked.date].add(blocked.machine_id)

    def booked(self, day: date) -> int:
        return self._booked[day]

    def blocked(self, day: date) -> int:
        if day in self._fully_blocked:
            return self.fleet_size
        return len(self._blocked_machines.get(day, ()))

    def is_fully_blocked(self, day: date) -> bool:
        return day in self._fully_blocked

    def remaining(self, day: date) -> int:
        return max(0, self.fleet_size - self.booked(day) - self.blocked(day))

    def span_available(self, start: date, days: int) -> bool:
        """Consecutive-availability check: every day of the span has a free machine"""
        for day in iter_days(start, start + timedelta(days=days - 1)):
            if self.is_fully_blocked(day) or self.remaining(day) <= 0:
                return False
        return True

    def verdict(self, product: RentalProduct, start: date) -> Tuple[DateVerdict, int]:
        """Classify a candidate start date; returns the verdict and remaining units on that date"""
        if not product.can_start_on(start):
            return DateVerdict.NOT_OFFERED, 0
        remaining = self.remaining(start)
        if remaining <= 0 or not self.span_available(start, product.duration_days):
            return DateVerdict.SOLD_OUT, remaining
        return DateVerdict.OFFERED, remaining


class AvailabilityService:
    """Business logic for availability queries"""

    def __init__(self, catalog=None, fleet_size: Optional[int] = None):
        self.catalog = catalog or get_catalog()
        self.fleet_size = fleet_size if fleet_size is not None else current_app.config['FLEET_SIZE']
        self.reservation_repo = ReservationRepository()
        self.blocked_repo = BlockedDateRepository()

    def load_calendar(self, start: date, end: date) -> CapacityCalendar:
        """Read current reservations and blocks touching [start, end]"""
        reservations = self.reservation_repo.find_active_overlapping(start, end)
        blocked_dates = self.blocked_repo.find_between(start, end)
        return CapacityCalendar(self.fleet_size, reservations, blocked_dates)

    def compute_availability(self, range_start: date, range_end: date, product_id: str) -> Dict[date, int]:
        """Bookable start dates in [range_start, range_end] mapped to remaining machines"""
        product = self.catalog.lookup(product_id)
        if range_start > range_end:
            return {}

        try:
            # Spans starting near range_end run past it
            calendar = self.load_calendar(range_start, product.end_date(range_end))
        except SQLAlchemyError as e:
            logger.error(f"Error loading calendar for {range_start}..{range_end}: {e}")
            raise UpstreamFailure() from e

        availability = {}
        for day in iter_days(range_start, range_end):
            verdict, remaining = calendar.verdict(product, day)
            if verdict is DateVerdict.OFFERED:
                availability[day] = remaining
        return availability

    def get_availability(self, start: Optional[date] = None, end: Optional[date] = None,
                         product_id: Optional[str] = None, today: Optional[date] = None) -> dict:
        """Availability query with caller-facing defaults applied"""
        config = current_app.config
        today = today or date.today()
        start = start or today
        end = end or today + timedelta(days=config['AVAILABILITY_WINDOW_DAYS'])
        product = self.catalog.lookup(product_id or self.catalog.default_product_id)

        max_days = config['MAX_AVAILABILITY_RANGE_DAYS']
        if (end - start).days + 1 > max_days:
            raise InvalidRequest(
                f"Date range cannot exceed {max_days} days",
                details={'start': start.isoformat(), 'end': end.isoformat()}
            )

        availability = self.compute_availability(start, end, product.id)
        machines_by_date = {day.isoformat(): count for day, count in availability.items()}

        return {
            'rental_type': product.id,
            'price': product.unit_price_cents,
            'days': product.duration_days,
            'available_dates': list(machines_by_date),
            'machines_by_date': machines_by_date
        }
