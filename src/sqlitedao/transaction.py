"""
Transaction handling for data access operations.
"""
import logging
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlitedao.exceptions import ClosedHandle

if TYPE_CHECKING:
    from sqlitedao.dao import SQLiteDao

logger = logging.getLogger(__name__)


class Transaction:
    """Context manager for running multiple operations in one transaction.

    Atomicity is the storage engine's own: the block runs inside a native
    transaction that commits on normal exit and rolls back on any exception,
    which then propagates. Inside another transaction a SAVEPOINT is used.
    Closing the dao inside the block rolls back its work and raises
    ClosedHandle on exit.

    Examples
        with Transaction(dao) as tx:
            tx.delete(TestTable(), ('id', '=', 1))
            tx.insert(TestTable(id=1, name='replaced'))
    """

    def __init__(self, dao: 'SQLiteDao') -> None:
        self.dao = dao
        self.tx: sa.Transaction | None = None

    def __enter__(self) -> 'SQLiteDao':
        self.dao.check_open()
        self.tx = self.dao.driver.begin()
        logger.debug(f'Started transaction for {self.dao!r}')
        return self.dao

    def __exit__(self, exc_type: type | None, value: BaseException | None, traceback: Any | None) -> None:
        tx, self.tx = self.tx, None
        if self.dao.closed:
            # closing the dao already rolled back the open transaction
            if exc_type is None:
                raise ClosedHandle(f'{self.dao!r} was closed inside a transaction, its work was rolled back')
            return
        if exc_type is None:
            self.dao.driver.commit(tx)
        else:
            self.dao.driver.rollback(tx, value)
