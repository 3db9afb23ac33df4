"""
Model Enums
"""

from enum import Enum


class ReservationStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Statuses that hold a machine
ACTIVE_STATUSES = (
    ReservationStatus.PENDING,
    ReservationStatus.CONFIRMED,
    ReservationStatus.IN_PROGRESS,
)


class FulfillmentMode(Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


class DayType(Enum):
    WEEKDAY = "weekday"
    WEEKEND = "weekend"
    ANY = "any"

    def admits(self, day) -> bool:
        """Check whether a calendar date belongs to this day class"""
        if self is DayType.ANY:
            return True
        is_weekend = day.weekday() >= 5
        return is_weekend if self is DayType.WEEKEND else not is_weekend
