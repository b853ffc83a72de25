"""Database error classification helpers."""

from sqlalchemy.exc import IntegrityError

# SQLSTATE for unique_violation (PostgreSQL)
UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError, constraint: str | None = None) -> bool:
    """Return True if ``exc`` is a unique/primary key violation.

    asyncpg exposes the SQLSTATE on the wrapped driver error; SQLite only
    reports it in the message ("UNIQUE constraint failed: table.column").
    When ``constraint`` is given, the constraint or column name must also
    appear in the error text.
    """
    orig = exc.orig
    error_str = str(orig).lower() if orig is not None else str(exc).lower()
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)

    if sqlstate is not None:
        matched = sqlstate == UNIQUE_VIOLATION_SQLSTATE
    else:
        matched = "unique constraint" in error_str or "duplicate key" in error_str

    if matched and constraint is not None:
        return constraint.lower() in error_str
    return matched
