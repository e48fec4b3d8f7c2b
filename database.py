from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker  # Async SQLAlchemy engine/session.
from sqlalchemy.orm import DeclarativeBase  # Base class for ORM models.

from config import DATABASE_URL, SQL_ECHO

if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable not set")

# Ensure we use the async driver.
if DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
elif DATABASE_URL.startswith("sqlite://"):
    DATABASE_URL = DATABASE_URL.replace("sqlite://", "sqlite+aiosqlite://", 1)

engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO)  # Create async engine.

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)  # Session factory.


class Base(DeclarativeBase):
    """Base class for all ORM models (collects metadata)."""
    pass


def get_session_factory() -> async_sessionmaker:
    # Report queries fan out, so they need the factory rather than one session.
    return AsyncSessionLocal
