from fastapi import HTTPException, status


# ─── Error codes (stable, clients switch on these) ─────────────────────────────
class ErrorCode:
    VALIDATION_ERROR      = "VALIDATION_ERROR"
    UNAUTHORIZED          = "UNAUTHORIZED"
    TOKEN_EXPIRED         = "TOKEN_EXPIRED"
    FORBIDDEN             = "FORBIDDEN"
    NOT_FOUND             = "NOT_FOUND"
    DUPLICATE_ENTRY       = "DUPLICATE_ENTRY"
    INSUFFICIENT_SEATS    = "INSUFFICIENT_SEATS"
    SEATS_EXHAUSTED       = "SEATS_EXHAUSTED"
    BOOKING_NOT_PENDING   = "BOOKING_NOT_PENDING"
    BOOKING_NOT_CONFIRMED = "BOOKING_NOT_CONFIRMED"
    TRIP_NOT_ACTIVE       = "TRIP_NOT_ACTIVE"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class AppException(HTTPException):
    """
    Base for every error the API reports on purpose.

    Subclasses pin the HTTP status, the ErrorCode and a default message as
    class attributes; raise sites only pass what differs. The handler in
    carpool.middleware.error_handler turns `detail` into the error envelope.
    """
    http_status: int = status.HTTP_400_BAD_REQUEST
    code: str = ErrorCode.VALIDATION_ERROR
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None, field: str | None = None, details: list | None = None):
        super().__init__(status_code=self.http_status, detail={
            "message": message or self.default_message,
            "error": {"code": self.code, "details": details, "field": field},
        })

    @property
    def error_code(self) -> str:
        return self.code


# ─── Request / identity ───────────────────────────────────────────────────────
class ValidationException(AppException):
    pass


class UnauthorizedException(AppException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = ErrorCode.UNAUTHORIZED
    default_message = "Authentication required"


class TokenExpiredException(UnauthorizedException):
    code = ErrorCode.TOKEN_EXPIRED
    default_message = "Access token has expired"


class ForbiddenException(AppException):
    http_status = status.HTTP_403_FORBIDDEN
    code = ErrorCode.FORBIDDEN
    default_message = "You do not have permission to perform this action"


class NotFoundException(AppException):
    http_status = status.HTTP_404_NOT_FOUND
    code = ErrorCode.NOT_FOUND

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class DuplicateEntryException(AppException):
    http_status = status.HTTP_409_CONFLICT
    code = ErrorCode.DUPLICATE_ENTRY
    default_message = "Record already exists"


# ─── Seat inventory / lifecycle ───────────────────────────────────────────────
class InsufficientSeatsException(AppException):
    code = ErrorCode.INSUFFICIENT_SEATS

    def __init__(self, available: int):
        super().__init__(f"Not enough available seats (only {available} left)", field="seatsBooked")


class SeatsExhaustedException(AppException):
    # Raised at confirmation time, after the request was accepted as pending
    http_status = status.HTTP_409_CONFLICT
    code = ErrorCode.SEATS_EXHAUSTED
    default_message = "Trip no longer has enough free seats to confirm this booking"


class BookingNotPendingException(AppException):
    http_status = status.HTTP_409_CONFLICT
    code = ErrorCode.BOOKING_NOT_PENDING
    default_message = "Booking already processed"


class BookingNotConfirmedException(AppException):
    http_status = status.HTTP_409_CONFLICT
    code = ErrorCode.BOOKING_NOT_CONFIRMED
    default_message = "Only confirmed bookings can be rated"


class TripNotActiveException(AppException):
    http_status = status.HTTP_409_CONFLICT
    code = ErrorCode.TRIP_NOT_ACTIVE

    def __init__(self, current: str):
        super().__init__(f"Trip is already {current}")
