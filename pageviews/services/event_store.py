from sqlalchemy import func, insert, select
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
import structlog

from pageviews.core.config import Settings
from pageviews.core.database import BEGIN_MODE_OPTION, create_sqlite_engine
from pageviews.core.errors import FatalStartupError, StoreError
from pageviews.models.pageview import Base, Pageview

logger = structlog.get_logger()


class EventStore:
    """
    Sole owner of the pageview database.

    Every operation runs in its own transaction on a pooled connection, so
    one instance is safe to share between concurrent request tasks. Writes
    take the SQLite write lock at BEGIN; reads use a deferred BEGIN and,
    under WAL, see a consistent snapshot without blocking the writer.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._engine: AsyncEngine | None = None
        self._writer: AsyncEngine | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("EventStore not initialized. Call initialize() at startup.")
        return self._engine

    async def initialize(self) -> None:
        """Open the store and create the pageviews table if it is missing."""
        try:
            engine = create_sqlite_engine(self.settings)
        except (ArgumentError, OSError, ValueError) as e:
            logger.error("event_store_open_failed", error=str(e), database_url=self.settings.database_url)
            raise FatalStartupError(f"Failed to open event store: {e}") from e

        writer = engine.execution_options(**{BEGIN_MODE_OPTION: "IMMEDIATE"})

        try:
            async with writer.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
                journal_mode = (await conn.exec_driver_sql("PRAGMA journal_mode")).scalar()
        except SQLAlchemyError as e:
            logger.error("event_store_init_failed", error=str(e), database_url=self.settings.database_url)
            await engine.dispose()
            raise FatalStartupError(f"Failed to initialize event store: {e}") from e

        self._engine = engine
        self._writer = writer

        logger.info(
            "event_store_initialized",
            database_url=self.settings.database_url,
            journal_mode=journal_mode
        )

    async def record_pageview(self, page: str) -> None:
        """
        Insert one pageview in an immediate write transaction.

        The transaction is rolled back on any failure, so a failed call
        never leaves a row behind.
        """
        if self._writer is None:
            raise RuntimeError("EventStore not initialized. Call initialize() at startup.")

        try:
            async with self._writer.begin() as conn:
                await conn.execute(insert(Pageview).values(page=page))
        except SQLAlchemyError as e:
            logger.error("pageview_insert_failed", page=page, error=str(e))
            raise StoreError(str(e)) from e

        logger.debug("pageview_recorded", page=page)

    async def count_pageviews(self) -> int:
        """Return the total number of pageviews from a single read snapshot."""
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(select(func.count()).select_from(Pageview))
                return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error("pageview_count_failed", error=str(e))
            raise StoreError(str(e)) from e

    async def dispose(self) -> None:
        """Close pooled connections (call on shutdown)."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._writer = None
