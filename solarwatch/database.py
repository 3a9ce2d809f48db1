import logging
from collections.abc import AsyncGenerator

from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from solarwatch.config import settings

logger = logging.getLogger(__name__)

DEFAULT_SECURITY_QUESTIONS = [
    "What was the name of your first pet?",
    "In what city were you born?",
    "What is your mother's maiden name?",
    "What was the make of your first car?",
    "What was the name of your elementary school?",
]

_is_sqlite = settings.database_url.startswith("sqlite")

engine = create_async_engine(
    settings.database_url,
    echo=False,
    connect_args={"check_same_thread": False, "timeout": 30} if _is_sqlite else {},
    pool_size=5,
    max_overflow=10,
)


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    """Configure SQLite on every new connection.

    Foreign keys are off by default in SQLite; media rows rely on
    ON DELETE CASCADE when their event goes away.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.close()


if _is_sqlite:
    event.listen(engine.sync_engine, "connect", _set_sqlite_pragmas)


async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session() as session:
        yield session


async def _seed(session: AsyncSession) -> None:
    from solarwatch.models import AdminUser, SecurityQuestion
    from solarwatch.services.auth import hash_password

    question_count = (await session.execute(select(func.count(SecurityQuestion.id)))).scalar() or 0
    if not question_count:
        session.add_all(SecurityQuestion(question_text=text) for text in DEFAULT_SECURITY_QUESTIONS)
        logger.info("Seeded %d security questions", len(DEFAULT_SECURITY_QUESTIONS))

    admin_count = (await session.execute(select(func.count(AdminUser.id)))).scalar() or 0
    if not admin_count and settings.bootstrap_admin_password:
        session.add(AdminUser(
            username=settings.bootstrap_admin_username,
            password_hash=hash_password(settings.bootstrap_admin_password),
            is_protected=True,
        ))
        logger.info("Created protected admin account %r", settings.bootstrap_admin_username)

    await session.commit()


async def init_db() -> None:
    """Create all database tables and seed reference rows."""
    from solarwatch.models import Base  # noqa: F811

    if _is_sqlite:
        (settings.data_dir / "db").mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        await _seed(session)

    logger.info("Database initialized at %s", settings.database_url)
