"""
Data access exception classes.

Every failure reported by the storage driver reaches the caller as one of
the kinds below. The driver exception is chained and kept on ``orig``.
"""
import sqlite3

import sqlalchemy as sa


class DaoError(Exception):
    """Base class for all data access errors.
    """

    def __init__(self, message: str = '', orig: BaseException | None = None) -> None:
        super().__init__(message)
        self.orig = orig


class ConstraintViolation(DaoError):
    """Uniqueness, primary key, foreign key or not-null violation.
    """


class StorageError(DaoError):
    """Any other driver level failure (I/O, locked database, bad SQL).
    """


class ClosedHandle(DaoError):
    """Operation attempted on a closed data access object.
    """


class ValidationError(DaoError):
    """Error in input validation (identifiers, operators, column values).
    """


IntegrityError = (
    sa.exc.IntegrityError,
    sqlite3.IntegrityError,
    )

DriverError = (
    sa.exc.SQLAlchemyError,
    sqlite3.Error,
    )


def classify_error(exc: BaseException) -> DaoError:
    """Map a driver exception onto the data access error kinds.

    Exceptions that are already a `DaoError` are returned unchanged.
    """
    if isinstance(exc, DaoError):
        return exc
    orig = getattr(exc, 'orig', None) or exc
    if isinstance(exc, IntegrityError):
        return ConstraintViolation(str(orig), orig=orig)
    return StorageError(str(orig), orig=orig)
