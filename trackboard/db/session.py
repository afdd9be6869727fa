import logging
import os
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from trackboard.core.errors import BoardError, Conflict, NotFound, TransactionFailed

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./trackboard.db")

engine = create_async_engine(DATABASE_URL, echo=False, future=True)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

FOREIGN_KEY_VIOLATION = "23503"


def is_foreign_key_violation(error: IntegrityError) -> bool:
    """True when the store rejected a write for pointing at a row that does not exist."""
    code = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
    return code == FOREIGN_KEY_VIOLATION or "foreign key" in str(error.orig).lower()


async def get_db():
    async with async_session() as session:
        yield session


@asynccontextmanager
async def transaction(db: AsyncSession):
    """
    One begin/commit scope for a logical mutation.
    Any failure rolls the whole scope back; store errors surface as
    NotFound (a reference to a missing row), Conflict (natural key
    collisions) or TransactionFailed.
    """
    try:
        yield db
        await db.commit()
    except BoardError:
        await db.rollback()
        raise
    except IntegrityError as e:
        await db.rollback()
        logger.error(f"Transaction rolled back on integrity error: {e.orig}")
        if is_foreign_key_violation(e):
            raise NotFound("referenced record not found") from e
        raise Conflict("conflicting record") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Transaction rolled back", exc_info=True)
        raise TransactionFailed() from e
    except Exception:
        await db.rollback()
        raise
