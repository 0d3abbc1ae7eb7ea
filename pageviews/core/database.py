# DB engine

from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from pageviews.core.config import Settings

# Execution option read by the "begin" hook; connections without it BEGIN DEFERRED
BEGIN_MODE_OPTION = "sqlite_begin_mode"
BEGIN_MODES = {"DEFERRED", "IMMEDIATE", "EXCLUSIVE"}


def _is_sqlite_memory(url: URL) -> bool:
    db = (url.database or "").strip()
    if not db or db == ":memory:":
        return True
    if db.startswith("file:") and (url.query or {}).get("mode") == "memory":
        return True
    return False


def _ensure_sqlite_parent_dir(url: URL) -> None:
    db = (url.database or "").strip()
    if not db or db == ":memory:" or db.startswith("file:"):
        return
    path = Path(db)
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)


def create_sqlite_engine(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the event store.

    Every new connection gets WAL journaling and a busy timeout. The
    pysqlite implicit transaction handling is switched off so that the
    "begin" hook owns the BEGIN statement and can pick its mode per
    connection through the ``sqlite_begin_mode`` execution option.
    """
    url = make_url(settings.database_url)
    if url.get_backend_name() != "sqlite":
        raise ValueError("Only SQLite databases are supported.")
    if url.drivername == "sqlite":
        url = url.set(drivername="sqlite+aiosqlite")

    kwargs = {"echo": settings.debug}
    if _is_sqlite_memory(url):
        kwargs["poolclass"] = StaticPool
    else:
        _ensure_sqlite_parent_dir(url)

    engine = create_async_engine(url, **kwargs)

    busy_ms = int(settings.sqlite_busy_timeout_ms)
    synchronous = settings.sqlite_synchronous

    @event.listens_for(engine.sync_engine, "connect")
    def _sqlite_on_connect(dbapi_conn, _):
        dbapi_conn.isolation_level = None

        cur = dbapi_conn.cursor()
        try:
            cur.execute(f"PRAGMA busy_timeout={busy_ms}")
            cur.execute("PRAGMA journal_mode=WAL")
            cur.execute(f"PRAGMA synchronous={synchronous}")
        finally:
            cur.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _sqlite_begin(conn):
        mode = conn.get_execution_options().get(BEGIN_MODE_OPTION, "DEFERRED")
        if mode not in BEGIN_MODES:
            raise ValueError(f"Unsupported SQLite begin mode: {mode}")
        conn.exec_driver_sql(f"BEGIN {mode}")

    return engine
