from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from catalog.config import settings

# Module-level engine variable allows tests to override with a test engine.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

_ON_COMMIT = "on_commit"


class Base(DeclarativeBase):
    pass


def on_commit(session: AsyncSession, callback) -> None:
    """
    Run the coroutine function *callback* once *session* has committed.

    Registering the same callback twice in one transaction runs it once.
    A rollback discards every pending callback.
    """
    callbacks = session.info.setdefault(_ON_COMMIT, [])
    if callback not in callbacks:
        callbacks.append(callback)


async def commit(session: AsyncSession) -> None:
    """Commit *session*, then run the callbacks registered with on_commit."""
    await session.commit()
    for callback in session.info.pop(_ON_COMMIT, []):
        await callback()


async def rollback(session: AsyncSession) -> None:
    session.info.pop(_ON_COMMIT, None)
    await session.rollback()


async def get_db():
    async with async_session() as session:
        try:
            yield session
            await commit(session)
        except Exception:
            await rollback(session)
            raise
