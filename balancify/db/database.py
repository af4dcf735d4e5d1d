# db/database.py

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from .base import Base

# --- Database Engine Setup ---

def build_engine(database_url: str) -> AsyncEngine:
    """
    Creates the async engine for the configured URL.
    In-memory SQLite must share a single connection, otherwise every checkout sees an empty database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool
        return create_async_engine(database_url, echo=False, **kwargs)

    # Postgres (postgresql+psycopg://)
    return create_async_engine(
        database_url,
        echo=False, # Set to True for verbose SQL logs (useful for debugging)
        pool_size=10,
        max_overflow=5,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False, # Prevents objects from expiring after commit
    )


# --- Utility for creating tables (Use this for initial setup/migrations) ---

async def create_db_and_tables(engine: AsyncEngine) -> None:
    """
    Creates all defined tables in the database.
    This should generally be managed by Alembic in production.
    """
    # Import all model modules so that SQLAlchemy knows about them
    from ..models import questionnaire, questionnaire_session  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
