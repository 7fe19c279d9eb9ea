from typing import Any, Sequence

from sqlalchemy import create_engine
from sqlalchemy.engine import Result
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker
from app.core.config import settings
from app.core.sql import to_text

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def run_query(db: Session, sql: str, values: Sequence[Any] = ()) -> Result:
    """
    Execute a query written with $1, $2, ... placeholders.

    Args:
        db: Database session
        sql: Query text; values are never interpolated into it
        values: Values bound to the placeholders, in order

    Returns:
        SQLAlchemy Result for the statement
    """
    return db.execute(to_text(sql, values))


def dialect_name(db: Session) -> str:
    """Name of the SQL dialect the session is bound to (e.g. "postgresql")."""
    return db.get_bind().dialect.name


def init_db():
    """
    Initialize database.

    We rely on Alembic for table creation, so this only makes sure the
    table definitions are imported and registered on Base.metadata.

    Use "alembic upgrade head" to create/update database schema.
    """
    from app.models import company, job, user, application  # noqa: F401
