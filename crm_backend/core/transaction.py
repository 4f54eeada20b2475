"""
Scoped transactions for multi-row mutations.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.core.exceptions import CRMException, ConflictError, InternalError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block of repository calls as one unit of work.

    Commits only when the block finishes without raising. Any exception rolls
    the whole transaction back before it propagates, so no partial state from
    the block is ever committed.
    """
    try:
        yield session
        await session.commit()
    except CRMException:
        await session.rollback()
        raise
    except IntegrityError as e:
        await session.rollback()
        logger.warning(f"Integrity error, transaction rolled back: {e.orig}")
        raise ConflictError("Write rejected by a uniqueness or reference constraint") from e
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("Storage failure, transaction rolled back")
        raise InternalError("Storage failure") from e
    except BaseException:
        await session.rollback()
        raise
