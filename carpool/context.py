from carpool.config import Settings
from carpool.database import create_db_engine, create_session_factory
from carpool.services.auth_service import AuthService
from carpool.services.booking_service import BookingService
from carpool.services.review_service import ReviewService
from carpool.services.trip_service import TripService
from carpool.services.user_service import UserService
from carpool.utils.security import SecurityService


class AppContext:
    """
    Everything a request handler needs that outlives the request: settings,
    the engine and its session factory, the security service and the
    domain services wired together.

    One instance per application, built by create_app() and reachable from
    route dependencies through request.app.state.context.
    """

    def __init__(self, settings: Settings):
        self.settings        = settings
        self.engine          = create_db_engine(settings)
        self.session_factory = create_session_factory(self.engine)
        self.security        = SecurityService(settings)

        self.auth     = AuthService(self.security)
        self.users    = UserService()
        self.trips    = TripService()
        self.reviews  = ReviewService()
        self.bookings = BookingService(self.reviews)

    def dispose(self) -> None:
        self.engine.dispose()
