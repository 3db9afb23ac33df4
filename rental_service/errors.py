"""
Rental Service Exceptions

Every error a booking operation can surface to a caller. Controllers map
these onto HTTP responses through ``status_code`` and ``to_dict()``.
"""

from typing import Optional, Dict, Any


class RentalServiceError(Exception):
    """Base exception for rental service errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "RENTAL_SERVICE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


class InvalidRequest(RentalServiceError):
    """Raised when request input is missing or malformed."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        details: Optional[Dict[str, Any]] = None,
        code: str = "INVALID_REQUEST"
    ):
        super().__init__(message=message, code=code, details=details)


class InvalidProduct(InvalidRequest):
    """Raised when a rental type is not in the catalog."""

    def __init__(self, product_id: str = None):
        super().__init__(
            message="Invalid rental type",
            details={"rental_type": product_id},
            code="INVALID_PRODUCT"
        )


class CapacityExceeded(RentalServiceError):
    """Raised when no machine is free for the requested dates."""

    status_code = 409

    def __init__(self, start_date=None, end_date=None):
        super().__init__(
            message="No machines available for selected dates",
            code="CAPACITY_EXCEEDED",
            details={
                "start_date": start_date.isoformat() if start_date else None,
                "end_date": end_date.isoformat() if end_date else None,
            }
        )


class BookingNotFound(RentalServiceError):
    """Raised when a reservation id does not exist."""

    status_code = 404

    def __init__(self, booking_id: str = None):
        super().__init__(
            message="Booking not found",
            code="BOOKING_NOT_FOUND",
            details={"booking_id": booking_id}
        )


class UpstreamFailure(RentalServiceError):
    """Raised when the store or the payment provider fails.

    Callers log the cause; only the generic message reaches the client.
    """

    status_code = 502

    def __init__(self, message: str = "Service temporarily unavailable, please try again"):
        super().__init__(message=message, code="UPSTREAM_FAILURE")


class SignatureInvalid(RentalServiceError):
    """Raised when a webhook delivery fails authentication."""

    status_code = 400

    def __init__(self, message: str = "Invalid webhook signature"):
        super().__init__(message=message, code="SIGNATURE_INVALID")
