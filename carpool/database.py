from fastapi import Depends, Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import QueuePool, StaticPool
from carpool.config import Settings
import logging

logger = logging.getLogger(__name__)


# ─── Base Model ────────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Declarative base shared by every model in carpool.models."""


# ─── Engine ────────────────────────────────────────────────────────────────────
def create_db_engine(settings: Settings) -> Engine:
    """
    Build the engine for the configured DATABASE_URL.

    PostgreSQL gets a QueuePool sized from settings. SQLite (dev / tests) is
    shared across threads, and an in-memory URL is pinned to one connection
    so every session sees the same database.
    """
    if settings.is_sqlite:
        kwargs = {"connect_args": {"check_same_thread": False}, "echo": settings.DATABASE_ECHO}
        if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(settings.DATABASE_URL, **kwargs)

    return create_engine(
        settings.DATABASE_URL,
        poolclass=QueuePool,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_pre_ping=True,
        echo=settings.DATABASE_ECHO,
    )


# ─── Session Factory ───────────────────────────────────────────────────────────
def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,      # services serialize rows after commit
    )


# ─── Dependency Injection ──────────────────────────────────────────────────────
def get_context(request: Request):
    """Return the AppContext that create_app() attached to the application."""
    return request.app.state.context


def get_db(ctx=Depends(get_context)):
    """One session per request, from the app's own session factory. Rolled back if the handler raises."""
    db = ctx.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# ─── Health Check ──────────────────────────────────────────────────────────────
def check_db_connection(engine: Engine) -> bool:
    """SELECT 1 against the engine; False (and an error log) if the database is unreachable."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
