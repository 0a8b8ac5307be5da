"""ORM models. Importing the package registers every table on Base.metadata (create_all, alembic)."""

from carpool.models.user import User, RoleName
from carpool.models.trip import Trip, TripStatus
from carpool.models.booking import Booking, BookingStatus
from carpool.models.review import Review
from carpool.models.audit_log import AuditLog

__all__ = [
    "User",
    "RoleName",
    "Trip",
    "TripStatus",
    "Booking",
    "BookingStatus",
    "Review",
    "AuditLog",
]
