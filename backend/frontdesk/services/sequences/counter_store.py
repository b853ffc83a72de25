"""Atomic increment primitives for the daily sequence counters.

Two strategies, both serialized by the database rather than the application:

- ``upsert_increment``: a single INSERT ... ON CONFLICT DO UPDATE ... RETURNING
  statement. PostgreSQL takes a row lock on the conflicting row, so concurrent
  issuances for the same key queue behind each other and each sees the value
  the previous one committed.
- ``locked_increment``: SELECT ... FOR UPDATE followed by an UPDATE, for
  dialects without upsert-returning. A missing row is inserted inside a
  savepoint; losing the insert race to another transaction rolls back only
  the savepoint and the lock-read is retried.

Neither function begins or commits a transaction; both run on the caller's
session so the increment shares the caller's fate.
"""

from collections.abc import Callable
from datetime import date
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_random

from frontdesk.models.enums import SequenceType
from frontdesk.models.sequence_counter import SequenceCounter
from frontdesk.utils.datetime_utils import utc_now

logger = structlog.get_logger(__name__)

# Dialects whose insert() supports on_conflict_do_update() together with returning()
UPSERT_INSERT_FACTORIES: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

LOCKED_INCREMENT_MAX_ATTEMPTS = 5


def _dialect_name(session: AsyncSession) -> str:
    return session.get_bind().dialect.name


def _key_filter(sequence_date: date, sequence_type: SequenceType) -> tuple[Any, Any]:
    return (
        SequenceCounter.sequence_date == sequence_date,  # type: ignore[arg-type]
        SequenceCounter.sequence_type == sequence_type.value,  # type: ignore[arg-type]
    )


async def upsert_increment(session: AsyncSession, sequence_date: date, sequence_type: SequenceType) -> int:
    """Insert the (date, type) row with 1, or add 1 to it; return the new value.

    Raises ValueError on dialects without upsert-returning.
    """
    dialect = _dialect_name(session)
    insert_factory = UPSERT_INSERT_FACTORIES.get(dialect)
    if insert_factory is None:
        raise ValueError(f"INSERT ... ON CONFLICT ... RETURNING is not supported on {dialect!r}; use locked_increment")

    table = SequenceCounter.__table__  # type: ignore[attr-defined]
    stmt = insert_factory(table).values(
        sequence_date=sequence_date,
        sequence_type=sequence_type.value,
        last_value=1,
        updated_at=utc_now(),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["sequence_date", "sequence_type"],
        set_={
            "last_value": table.c.last_value + 1,
            "updated_at": stmt.excluded.updated_at,
        },
    ).returning(table.c.last_value)

    result = await session.execute(stmt)
    value: int = result.scalar_one()
    return value


async def _lock_and_increment(session: AsyncSession, sequence_date: date, sequence_type: SequenceType) -> int:
    stmt = (
        select(SequenceCounter)
        .where(*_key_filter(sequence_date, sequence_type))
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    counter = result.scalars().first()

    if counter is None:
        counter = SequenceCounter(sequence_date=sequence_date, sequence_type=sequence_type.value, last_value=1)
        try:
            async with session.begin_nested():
                session.add(counter)
        except IntegrityError:
            logger.warning(
                "Sequence counter row created concurrently, retrying",
                sequence_date=sequence_date.isoformat(),
                sequence_type=sequence_type.value,
            )
            raise
        return 1

    counter.last_value += 1
    counter.updated_at = utc_now()
    await session.flush()
    return counter.last_value


async def locked_increment(session: AsyncSession, sequence_date: date, sequence_type: SequenceType) -> int:
    """Row-lock based increment; same contract as ``upsert_increment``."""
    value: int | None = None
    async for attempt in AsyncRetrying(
        retry=retry_if_exception_type(IntegrityError),
        stop=stop_after_attempt(LOCKED_INCREMENT_MAX_ATTEMPTS),
        wait=wait_random(min=0.0, max=0.05),
        reraise=True,
    ):
        with attempt:
            value = await _lock_and_increment(session, sequence_date, sequence_type)
    assert value is not None
    return value


async def increment_counter(session: AsyncSession, sequence_date: date, sequence_type: SequenceType) -> int:
    """Atomically advance the counter for (date, type) using the best strategy for the dialect."""
    if _dialect_name(session) in UPSERT_INSERT_FACTORIES:
        return await upsert_increment(session, sequence_date, sequence_type)
    return await locked_increment(session, sequence_date, sequence_type)


async def get_counter(session: AsyncSession, sequence_date: date, sequence_type: SequenceType) -> int | None:
    """Current last_value for (date, type), or None if nothing was issued that day."""
    stmt = select(SequenceCounter.last_value).where(*_key_filter(sequence_date, sequence_type))
    result = await session.execute(stmt)
    value: int | None = result.scalar_one_or_none()
    return value
