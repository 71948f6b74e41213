"""
Storage driver over a single SQLAlchemy connection.

Exposes the prepare/run/all/get interface the data access engine executes
against, plus the native transaction primitive:

    stmt = driver.prepare('SELECT * FROM "test_table" WHERE "id" = :id')
    stmt.get({'id': 1})

Outside a transaction every statement runs in its own short transaction
and is committed before the call returns. Inside `transaction` statements
join the open transaction; a nested `transaction` uses a SAVEPOINT.

Driver exceptions are translated with `classify_error`.
"""
import logging
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple, TypeVar

import sqlalchemy as sa
from sqlitedao.exceptions import DriverError, classify_error

__all__ = ['Driver', 'PreparedStatement', 'RunResult']

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _kind(tx: sa.Transaction) -> str:
    return 'savepoint' if isinstance(tx, sa.NestedTransaction) else 'transaction'


class RunResult(NamedTuple):
    """Outcome of a statement that returns no rows."""
    lastrowid: int | None
    rowcount: int


class PreparedStatement:
    """SQL text with named `:param` binds, ready to execute on a driver.
    """

    def __init__(self, driver: 'Driver', sql: str) -> None:
        self.driver = driver
        self.sql = sql
        self.clause = sa.text(sql)

    def __repr__(self) -> str:
        return f'PreparedStatement({self.sql!r})'

    def run(self, params: Mapping[str, Any] | None = None) -> RunResult:
        """Execute and report the assigned row id and affected row count.
        """
        return self.driver.execute(
            self, params, lambda r: RunResult(r.lastrowid, r.rowcount))

    def all(self, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """Execute and return every row as a column -> value dict.
        """
        return self.driver.execute(
            self, params, lambda r: [dict(row) for row in r.mappings()])

    def get(self, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        """Execute and return the first row, or None when nothing matched.
        """
        def first(result: sa.CursorResult) -> dict[str, Any] | None:
            row = result.mappings().first()
            return None if row is None else dict(row)
        return self.driver.execute(self, params, first)


class Driver:
    """Owns one SQLAlchemy connection and the engine it came from.
    """

    def __init__(self, sa_connection: sa.Connection) -> None:
        self.sa_connection = sa_connection
        self.engine = sa_connection.engine
        self.calls = 0

    def prepare(self, sql: str) -> PreparedStatement:
        return PreparedStatement(self, sql)

    @property
    def in_transaction(self) -> bool:
        return self.sa_connection.in_transaction()

    def execute(self, statement: PreparedStatement, params: Mapping[str, Any] | None,
                consume: Callable[[sa.CursorResult], T]) -> T:
        """Execute a prepared statement and consume its result before commit.
        """
        params = dict(params or {})
        logger.debug(f'SQL: {statement.sql} params: {params}')
        self.calls += 1
        try:
            if self.in_transaction:
                return consume(self.sa_connection.execute(statement.clause, params))
            with self.sa_connection.begin():
                return consume(self.sa_connection.execute(statement.clause, params))
        except DriverError as exc:
            raise classify_error(exc) from exc

    def begin(self) -> sa.Transaction:
        """Open a native transaction, or a SAVEPOINT when one is already open.

        The caller owns the returned transaction and must pass it to
        `commit` or `rollback`.
        """
        try:
            if self.in_transaction:
                return self.sa_connection.begin_nested()
            return self.sa_connection.begin()
        except DriverError as exc:
            raise classify_error(exc) from exc

    def commit(self, tx: sa.Transaction) -> None:
        try:
            tx.commit()
        except DriverError as exc:
            self.rollback(tx, exc)
            raise classify_error(exc) from exc
        logger.debug(f'Committed {_kind(tx)}')

    def rollback(self, tx: sa.Transaction, cause: BaseException | None = None) -> None:
        try:
            tx.rollback()
        except DriverError as exc:
            raise classify_error(exc) from exc
        logger.warning(f'Rolled back {_kind(tx)}: {cause!r}')

    def transaction(self, func: Callable[[], T]) -> T:
        """Run `func` in a native transaction and return its result.

        Commits on normal return, rolls back on any exception, which then
        propagates. Nested calls use a SAVEPOINT, so a failing inner
        unit of work undoes only its own statements.
        """
        tx = self.begin()
        try:
            result = func()
        except BaseException as exc:
            self.rollback(tx, exc)
            raise
        self.commit(tx)
        return result

    def close(self) -> None:
        """Roll back anything still open, close the connection, dispose the engine.
        """
        try:
            if self.in_transaction:
                self.sa_connection.rollback()
                logger.warning('Rolling back the open transaction on close')
            self.sa_connection.close()
        except DriverError as exc:
            raise classify_error(exc) from exc
        finally:
            self.engine.dispose()
        logger.debug(f'Connection closed: {self.calls} statements')
