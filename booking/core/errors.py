"""Error taxonomy shared by the scheduling core and the HTTP layer."""

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError

NO_BUYER_FOUND = 'No Buyer found'
NO_VENDOR_FOUND = 'No Vendor found'
NO_APPOINTMENT_FOUND = 'No Appointment found'
BUYER_ALREADY_BOOKED = 'Buyer have already an appointment'
VENDOR_ALREADY_BOOKED = 'Vendor have already an appointment'
END_BEFORE_START = 'End time must be after start time'
DATABASE_UNAVAILABLE = 'Database unavailable. Verify DATABASE_URL and database credentials.'


class BookingError(Exception):
    """Base class for errors surfaced to API clients."""


class BusinessRuleError(BookingError):
    """A domain precondition failed: missing party, conflict or missing record."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FieldValidationError(BookingError):
    """One or more request fields have the wrong shape."""

    def __init__(self, messages: list[str]):
        super().__init__('; '.join(messages))
        self.messages = list(messages)


def error_status(exc: Exception) -> int:
    if isinstance(exc, FieldValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, BusinessRuleError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, SQLAlchemyError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(exc: Exception) -> dict:
    status_code = error_status(exc)
    if isinstance(exc, FieldValidationError):
        message = exc.messages
    elif isinstance(exc, BusinessRuleError):
        message = exc.message
    elif isinstance(exc, SQLAlchemyError):
        message = DATABASE_UNAVAILABLE
    else:
        message = 'Internal server error'
    return {'statusCode': status_code, 'message': message}
