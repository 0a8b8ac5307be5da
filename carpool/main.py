import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carpool.config import Settings
from carpool.context import AppContext
from carpool.database import Base, check_db_connection
from carpool.middleware.error_handler import register_exception_handlers

from carpool.api.v1 import auth
from carpool.api.v1 import users
from carpool.api.v1 import trips
from carpool.api.v1 import bookings
from carpool.api.v1 import reviews

import carpool.models  # noqa: F401  registers every model on Base.metadata

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    context = AppContext(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Carpooling marketplace API: trips, seat bookings and mutual reviews",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )
    app.state.context = context

    # ─── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Exception Handlers ───────────────────────────────────────────────────
    register_exception_handlers(app)

    # ─── Routers ──────────────────────────────────────────────────────────────
    PREFIX = "/api/v1"
    app.include_router(auth.router,     prefix=PREFIX, tags=["Auth"])
    app.include_router(users.router,    prefix=PREFIX, tags=["Users"])
    app.include_router(trips.router,    prefix=PREFIX, tags=["Trips"])
    app.include_router(bookings.router, prefix=PREFIX, tags=["Bookings"])
    app.include_router(reviews.router,  prefix=PREFIX, tags=["Reviews"])

    # ─── Startup / Shutdown ───────────────────────────────────────────────────
    @app.on_event("startup")
    def on_startup():
        if settings.DATABASE_AUTO_CREATE:
            Base.metadata.create_all(bind=context.engine)
            logger.info("Database schema ensured (DATABASE_AUTO_CREATE)")
        ok = check_db_connection(context.engine)
        logger.info("✅ DB connected" if ok else "❌ DB connection FAILED")

    @app.on_event("shutdown")
    def on_shutdown():
        context.dispose()

    # ─── Health ───────────────────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "app": settings.APP_NAME, "version": "1.0.0"}

    return app


if __name__ == "__main__":
    import uvicorn
    _settings = Settings()
    uvicorn.run("carpool.main:create_app", factory=True,
                host=_settings.APP_HOST, port=_settings.APP_PORT,
                reload=_settings.is_development)
