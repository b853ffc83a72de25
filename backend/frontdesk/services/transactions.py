"""Unit-of-work helper for service methods that write."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from frontdesk.db.exceptions import is_unique_violation
from frontdesk.services.exceptions import RecordAlreadyExists

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def unit_of_work(session: AsyncSession, *, conflict_message: str) -> AsyncIterator[AsyncSession]:
    """Commit on success, roll back everything on any failure.

    Counter increments issued on ``session`` inside the block are part of the
    same transaction, so a failure leaves no consumed sequence numbers behind.
    A unique violation is re-raised as RecordAlreadyExists(conflict_message).

    Usage:
        async with unit_of_work(self.session, conflict_message="Patient already exists."):
            code = await generator.issue(SequenceType.MEDICAL_RECORD, now, self.session)
            self.session.add(Patient(medical_record_no=code, ...))
            await self.session.flush()
    """
    try:
        yield session
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        if is_unique_violation(e):
            logger.warning("Unique constraint conflict, transaction rolled back", error=str(e.orig))
            raise RecordAlreadyExists(conflict_message) from e
        raise
    except BaseException:
        await session.rollback()
        raise
