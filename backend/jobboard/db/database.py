"""Database Configuration.

AsyncPG + SQLAlchemy setup for PostgreSQL with async support. SQLite URLs
(sqlite+aiosqlite) are accepted for local runs and tests.
"""

from functools import lru_cache

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base

from ..core.config import settings
from ..core.logging import get_logger
from .gateway import ConnectionGateway

logger = get_logger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite leaves foreign key enforcement off per connection by default
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database_engine(url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """Create the async engine.

    Args:
        url: Database URL (defaults to settings.DATABASE_URL with the asyncpg driver)
        echo: Echo SQL statements (defaults to settings.DEBUG)

    Returns:
        AsyncEngine bound to the database
    """
    database_url = url or settings.async_database_url
    echo = settings.DEBUG if echo is None else echo

    if database_url.startswith('sqlite'):
        engine = create_async_engine(database_url, echo=echo)
        event.listen(engine.sync_engine, 'connect', _enable_sqlite_foreign_keys)
    else:
        engine = create_async_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW
        )

    logger.debug(
        "Database engine created",
        extra={'driver': engine.url.drivername, 'database': engine.url.database}
    )
    return engine


async def init_models(engine: AsyncEngine) -> None:
    """Create the jobs, companies and applications tables if missing.

    Args:
        engine: Engine to create the schema on
    """
    from .. import models  # noqa: F401  (registers tables on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Database schema initialized",
        extra={'tables': sorted(Base.metadata.tables)}
    )


@lru_cache(maxsize=1)
def get_gateway() -> ConnectionGateway:
    """Process-wide ConnectionGateway over the settings-derived engine.

    Usage in FastAPI:
        @app.get("/jobs")
        async def list_jobs(gateway: ConnectionGateway = Depends(get_gateway)):
            ...
    """
    return ConnectionGateway(create_database_engine())
