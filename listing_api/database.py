from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from listing_api.config import settings
import os

# Safety check: Prevent accidental production database usage in tests
if os.getenv("TESTING") == "true" and not settings.DATABASE_URL.startswith("sqlite"):
    import warnings
    warnings.warn(
        f"Tests are configured but DATABASE_URL points to non-SQLite: {settings.DATABASE_URL[:50]}...\n"
        "Set DATABASE_URL=sqlite:///:memory: before importing listing_api modules.",
        RuntimeWarning,
        stacklevel=2
    )


def engine_options(database_url: str, timeout_seconds: int) -> dict:
    """Engine kwargs that bound every store call by ``timeout_seconds``."""
    # SQLite needs check_same_thread, PostgreSQL doesn't
    if database_url.startswith("sqlite"):
        from sqlalchemy.pool import NullPool
        # timeout is how long a statement waits on a locked database
        connect_args = {"check_same_thread": False, "timeout": timeout_seconds}
        # SQLite doesn't support max_overflow, pool_timeout, pool_recycle or pool_pre_ping
        return {
            "connect_args": connect_args,
            "poolclass": NullPool,
            "echo": False,
        }

    # A hung connect, checkout or statement surfaces as OperationalError and
    # is reported as a dependency failure.
    connect_args = {
        "connect_timeout": timeout_seconds,
        "options": f"-c statement_timeout={timeout_seconds * 1000}",
    }
    return {
        "connect_args": connect_args,
        "pool_size": 20,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_timeout": timeout_seconds,
        "echo": False,
    }


engine = create_engine(
    settings.DATABASE_URL,
    **engine_options(settings.DATABASE_URL, settings.STORE_TIMEOUT_SECONDS),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def enable_sqlite_foreign_keys(target_engine):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""

    @event.listens_for(target_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if settings.DATABASE_URL.startswith("sqlite"):
    enable_sqlite_foreign_keys(engine)
