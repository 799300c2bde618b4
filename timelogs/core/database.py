import logging
from typing import Generator

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from timelogs.core.config import settings

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for the duration of a request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_user_hourly_rate_column(bind: Engine) -> bool:
    """Add users.hourly_rate to a pre-existing users table that lacks it.

    Returns True when the column was added.
    """
    inspector = inspect(bind)
    if "users" not in inspector.get_table_names():
        return False

    columns = {column["name"] for column in inspector.get_columns("users")}
    if "hourly_rate" in columns:
        return False

    default_rate = settings.DEFAULT_HOURLY_RATE
    with bind.begin() as conn:
        conn.execute(
            text(f"ALTER TABLE users ADD COLUMN hourly_rate NUMERIC(10, 2) DEFAULT {default_rate}")
        )
    logger.info("Added users.hourly_rate column with default %s", default_rate)
    return True


def init_db(bind: Engine = engine) -> None:
    """Create missing tables and bring the users table up to date.

    Production deployments can run this once at startup (MIGRATE_ON_START);
    tests call it against their own engine.
    """
    # Import models so every table is registered on Base.metadata
    import timelogs.models  # noqa: F401

    ensure_user_hourly_rate_column(bind)
    Base.metadata.create_all(bind=bind)
