from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from leaveease.core.config import settings


def use_immediate_transactions(bind: AsyncEngine) -> None:
    """Make every SQLite transaction take the database write lock when it begins.

    The sqlite driver defers BEGIN until the first write, so a read-check-write
    sequence would run unlocked and `FOR UPDATE` is not supported. With
    `BEGIN IMMEDIATE` concurrent units of work on the same file are serialized.
    """

    @event.listens_for(bind.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(bind.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


# pool_pre_ping: check connection is alive before use.
# pool_recycle: discard connections after this many seconds to avoid stale connections.
engine = create_async_engine(
    settings.database_url,
    echo=False,
    future=True,
    pool_pre_ping=True,
    pool_recycle=300,
)
if engine.dialect.name == "sqlite":
    use_immediate_transactions(engine)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session
