from datetime import date
from types import SimpleNamespace

from rental_service.catalog import RentalCatalog
from rental_service.models import ReservationStatus
from rental_service.services import CapacityCalendar, DateVerdict
from rental_service.services.availability_service import iter_days

CATALOG = RentalCatalog()
MONDAY = date(2025, 6, 2)
TUESDAY = date(2025, 6, 3)


def booking(start, end=None, status=ReservationStatus.CONFIRMED):
    return SimpleNamespace(start_date=start, end_date=end or start, status=status)


def block(day, machine_id=None):
    return SimpleNamespace(date=day, machine_id=machine_id)


class TestCapacityCalendar:
    """Test per-day capacity arithmetic."""

    def test_empty_calendar_has_full_fleet(self):
        calendar = CapacityCalendar(3)

        assert calendar.remaining(MONDAY) == 3
        assert calendar.booked(MONDAY) == 0
        assert calendar.blocked(MONDAY) == 0

    def test_reservations_count_every_covered_day(self):
        calendar = CapacityCalendar(3, [booking(MONDAY, date(2025, 6, 4))])

        assert [calendar.remaining(day) for day in iter_days(MONDAY, date(2025, 6, 5))] == [2, 2, 2, 3]

    def test_inactive_reservations_are_ignored(self):
        calendar = CapacityCalendar(3, [
            booking(MONDAY, status=ReservationStatus.CANCELLED),
            booking(MONDAY, status=ReservationStatus.COMPLETED),
            booking(MONDAY, status=ReservationStatus.PENDING),
            booking(MONDAY, status=ReservationStatus.IN_PROGRESS),
        ])

        assert calendar.remaining(MONDAY) == 1

    def test_machine_blocks_count_distinct_machines(self):
        calendar = CapacityCalendar(3, blocked_dates=[block(MONDAY, 1), block(MONDAY, 1), block(MONDAY, 2)])

        assert calendar.blocked(MONDAY) == 2
        assert calendar.remaining(MONDAY) == 1
        assert not calendar.is_fully_blocked(MONDAY)

    def test_fleet_block_removes_every_machine(self):
        calendar = CapacityCalendar(3, blocked_dates=[block(MONDAY)])

        assert calendar.is_fully_blocked(MONDAY)
        assert calendar.remaining(MONDAY) == 0
        assert calendar.remaining(TUESDAY) == 3

    def test_remaining_never_negative(self):
        calendar = CapacityCalendar(
            1, [booking(MONDAY), booking(MONDAY)], [block(MONDAY, 1)]
        )

        assert calendar.remaining(MONDAY) == 0

    def test_span_available(self):
        calendar = CapacityCalendar(1, [booking(date(2025, 6, 5))])

        assert calendar.span_available(MONDAY, 3)
        assert not calendar.span_available(MONDAY, 4)


class TestVerdict:
    """Test start-date classification."""

    def test_offered(self):
        calendar = CapacityCalendar(3, [booking(MONDAY)])

        assert calendar.verdict(CATALOG.lookup('full_day_weekday'), MONDAY) == (DateVerdict.OFFERED, 2)

    def test_wrong_day_type_is_not_offered(self):
        calendar = CapacityCalendar(3)

        verdict, _ = calendar.verdict(CATALOG.lookup('full_day_weekend'), MONDAY)

        assert verdict is DateVerdict.NOT_OFFERED

    def test_sold_out(self):
        calendar = CapacityCalendar(2, [booking(MONDAY), booking(MONDAY)])

        assert calendar.verdict(CATALOG.lookup('full_day_weekday'), MONDAY) == (DateVerdict.SOLD_OUT, 0)

    def test_multi_day_span_sold_out_later_in_span(self):
        calendar = CapacityCalendar(1, blocked_dates=[block(date(2025, 6, 6), 1)])

        verdict, remaining = calendar.verdict(CATALOG.lookup('weekly'), MONDAY)

        assert verdict is DateVerdict.SOLD_OUT
        assert remaining == 1
