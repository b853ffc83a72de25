"""Daily sequence number generator.

Issues codes of the form ``YYMMDD`` + zero-padded counter, e.g. ``251212001``
for the first medical record number of 12 Dec 2025 and ``251212000001`` for
the first registration number of that day. Each (UTC date, sequence type)
pair has its own counter starting at 1.
"""

from collections.abc import Mapping
from datetime import date, datetime
from types import MappingProxyType

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from frontdesk.models.enums import SequenceType
from frontdesk.services.sequences.counter_store import increment_counter
from frontdesk.services.sequences.exceptions import InvalidSequenceType, SequenceOverflow, StorageError
from frontdesk.utils.datetime_utils import utc_date

logger = structlog.get_logger(__name__)

DEFAULT_SEQUENCE_WIDTHS: Mapping[SequenceType, int] = MappingProxyType(
    {
        SequenceType.MEDICAL_RECORD: 3,
        SequenceType.REGISTRATION: 6,
    }
)


def parse_sequence_type(value: SequenceType | str) -> SequenceType:
    """Coerce ``value`` to a SequenceType or raise InvalidSequenceType."""
    if isinstance(value, SequenceType):
        return value
    try:
        return SequenceType(value)
    except ValueError:
        raise InvalidSequenceType(value) from None


def format_code(sequence_type: SequenceType, day: date, counter: int, width: int) -> str:
    """Render ``YYMMDD`` + counter padded to ``width`` digits.

    Raises SequenceOverflow instead of letting the code grow past its width.
    """
    if counter < 1:
        raise ValueError(f"Counter must be positive, got {counter}")
    if counter >= 10**width:
        raise SequenceOverflow(sequence_type, counter, width)
    return f"{day:%y%m%d}{counter:0{width}d}"


class SequenceGenerator:
    """Issues daily sequence codes against the ``sequence_counters`` table.

    Two entry points:
        issue(type, now, session)     - runs inside the caller's transaction;
                                        never commits or rolls back.
        issue_standalone(type, now)   - opens, commits (or rolls back) and
                                        closes its own session.

    Usage:
        generator = SequenceGenerator(async_session_maker)

        async with async_session_maker() as session:
            rm = await generator.issue(SequenceType.MEDICAL_RECORD, None, session)
            session.add(Patient(medical_record_no=rm, ...))
            await session.commit()  # counter and patient commit together
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        widths: Mapping[SequenceType, int] | None = None,
    ):
        self._session_maker = session_maker
        resolved = dict(DEFAULT_SEQUENCE_WIDTHS if widths is None else widths)

        missing = [t.value for t in SequenceType if t not in resolved]
        if missing:
            raise ValueError(f"No digit width configured for sequence types: {', '.join(missing)}")
        invalid = {t.value: w for t, w in resolved.items() if w < 1}
        if invalid:
            raise ValueError(f"Digit widths must be positive: {invalid}")

        self._widths: Mapping[SequenceType, int] = MappingProxyType(resolved)

    @property
    def widths(self) -> Mapping[SequenceType, int]:
        return self._widths

    def width_for(self, sequence_type: SequenceType | str) -> int:
        return self._widths[parse_sequence_type(sequence_type)]

    async def issue(
        self,
        sequence_type: SequenceType | str,
        now: datetime | None,
        session: AsyncSession,
    ) -> str:
        """Advance today's counter for ``sequence_type`` and return the formatted code.

        Args:
            sequence_type: SequenceType member or its value ("RM", "REG")
            now: Reference instant; only its UTC calendar date is used.
                 Naive datetimes are treated as UTC, None means now.
            session: Caller's session. The increment joins its transaction, so
                     rolling the session back also rolls back the counter.

        Returns:
            Code string, e.g. "251212001"

        Raises:
            InvalidSequenceType: Unknown type (raised before any database access)
            StorageError: The atomic increment failed
            SequenceOverflow: Counter exceeds the configured width. The
                increment already happened in the session; the caller must
                roll back.
        """
        seq_type = parse_sequence_type(sequence_type)
        width = self._widths[seq_type]
        day = utc_date(now)

        try:
            counter = await increment_counter(session, day, seq_type)
        except SQLAlchemyError as e:
            logger.error(
                "Sequence counter increment failed",
                sequence_type=seq_type.value,
                sequence_date=day.isoformat(),
                error=str(e),
            )
            raise StorageError(f"Could not advance {seq_type.value} counter for {day.isoformat()}") from e

        code = format_code(seq_type, day, counter, width)
        logger.debug("Issued sequence code", sequence_type=seq_type.value, code=code, counter=counter)
        return code

    async def issue_standalone(self, sequence_type: SequenceType | str, now: datetime | None = None) -> str:
        """Issue a code in a transaction of its own.

        The counter value is consumed as soon as this returns. If the caller
        later fails to store the record that carries the code, the day's
        sequence has a gap; use ``issue`` with the caller's session to avoid it.
        """
        seq_type = parse_sequence_type(sequence_type)

        async with self._session_maker() as session:
            try:
                code = await self.issue(seq_type, now, session)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Sequence commit failed", sequence_type=seq_type.value, error=str(e))
                raise StorageError(f"Could not commit {seq_type.value} counter") from e
            except BaseException:
                await session.rollback()
                raise

        return code
