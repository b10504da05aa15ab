"""
core/database.py -- Engine construction shared by auth/store.py and catalog/store.py.

Both stores use SQLAlchemy Core (not ORM) so the domain dataclasses remain
the authoritative representation. Swapping SQLite for PostgreSQL is a
DATABASE_URL change, not a rewrite.

Layer rule: no imports from api/, auth/, or catalog/.
"""

from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    WAL (Write-Ahead Logging) allows readers to proceed without blocking
    during writes. Set per-connection because SQLite PRAGMAs are not
    inherited by new connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str) -> Engine:
    """Create an engine with the SQLite options the stores rely on.

    check_same_thread=False is required because sync route handlers run in
    the server's thread pool and share one engine.
    """
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
