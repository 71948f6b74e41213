"""
Data access object for SQLite.

`SQLiteDao` owns one storage connection and turns entities and conditions
into INSERT, UPDATE, DELETE and SELECT statements:

    dao = connect({'database': ':memory:'})
    rowid = dao.insert(TestTable(name='alice'))
    dao.update(TestTable(remarks='x'), ('id', '=', rowid))
    dao.select(TestTable(), is_not_null('remarks'))
    dao.close()

Rows come back as attribute dictionaries keyed by field name. A dao is
either open or closed; once closed every operation, including a second
`close`, raises `ClosedHandle`.
"""
import logging
from collections.abc import Callable, Sequence
from dataclasses import fields
from typing import Any, Self, TypeVar

from sqlitedao.conditions import Condition
from sqlitedao.connection import open_driver
from sqlitedao.entity import Entity
from sqlitedao.exceptions import ClosedHandle
from sqlitedao.instrument import logged
from sqlitedao.options import DaoOptions
from sqlitedao.transaction import Transaction
from sqlitedao.utils.naming import snake_keys_to_camel
from sqlitedao.utils.sql_generation import build_delete_sql, build_insert_sql
from sqlitedao.utils.sql_generation import build_select_sql, build_update_sql

from libb import attrdict, load_options

__all__ = ['SQLiteDao', 'connect']

logger = logging.getLogger(__name__)

T = TypeVar('T')

ConditionLike = Condition | Sequence[Any]


def _to_fields(row: dict[str, Any]) -> attrdict:
    return attrdict(snake_keys_to_camel(row))


class SQLiteDao:
    """Data access object bound to one SQLite database.
    """

    def __init__(self, options: DaoOptions) -> None:
        self.options = options
        self.driver = open_driver(options)
        self._closed = False
        logger.debug(f'Opened {self!r}')

    def __repr__(self) -> str:
        state = 'closed' if self._closed else 'open'
        return f'<SQLiteDao database={self.options.database!r} {state}>'

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None,
                 exc_tb: Any | None) -> None:
        if not self._closed:
            self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def check_open(self) -> None:
        if self._closed:
            raise ClosedHandle(f'{self!r} is closed')

    @logged('SQLiteDao.insert')
    def insert(self, entity: Entity) -> int:
        """Insert the entity's columns and return the row id SQLite assigned.

        Raises ConstraintViolation on a unique, primary key, foreign key or
        not-null violation.
        """
        self.check_open()
        statement = build_insert_sql(entity)
        result = self.driver.prepare(statement.sql).run(statement.params)
        return result.lastrowid

    @logged('SQLiteDao.update')
    def update(self, entity: Entity, *conditions: ConditionLike) -> None:
        """Set the entity's columns on every row matching the conditions.

        Matching no rows is not an error.
        """
        self.check_open()
        statement = build_update_sql(entity, conditions)
        result = self.driver.prepare(statement.sql).run(statement.params)
        logger.debug(f'Updated {result.rowcount} row(s) in {entity.table_name}')

    @logged('SQLiteDao.delete')
    def delete(self, entity: Entity, *conditions: ConditionLike) -> None:
        """Delete the rows matching the conditions.

        With no conditions every row in the entity's table is deleted.
        The entity's column values are ignored.
        """
        self.check_open()
        statement = build_delete_sql(entity, conditions)
        result = self.driver.prepare(statement.sql).run(statement.params)
        logger.debug(f'Deleted {result.rowcount} row(s) from {entity.table_name}')

    @logged('SQLiteDao.select')
    def select(self, entity: Entity, *conditions: ConditionLike) -> list[attrdict]:
        """Return every row matching the conditions, all columns.
        """
        self.check_open()
        statement = build_select_sql(entity, conditions)
        rows = self.driver.prepare(statement.sql).all(statement.params)
        return [_to_fields(row) for row in rows]

    @logged('SQLiteDao.select_one')
    def select_one(self, entity: Entity, *conditions: ConditionLike) -> attrdict | None:
        """Return the first matching row in SQLite's natural order, or None.

        No ORDER BY is applied; add a condition on a unique column when the
        row must be deterministic.
        """
        self.check_open()
        statement = build_select_sql(entity, conditions)
        row = self.driver.prepare(statement.sql).get(statement.params)
        return None if row is None else _to_fields(row)

    def transaction(self, body: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run `body` so that its operations all commit or none do.

        Whatever `body` raises is re-raised after the rollback.
        """
        with Transaction(self):
            return body(*args, **kwargs)

    def close(self) -> None:
        """Release the connection. Closing twice raises ClosedHandle.
        """
        self.check_open()
        self._closed = True
        self.driver.close()
        logger.debug(f'Closed {self!r}')


@load_options(cls=DaoOptions)
def connect(options: DaoOptions | dict[str, Any] | str,
            config: Any | None = None, **kw: Any) -> SQLiteDao:
    """Open a data access object.

    Args:
        options: Can be:
                - DaoOptions object
                - String path to configuration
                - Dictionary of options
                - Options specified as keyword arguments
        config: Configuration object (for loading from config files)
        **kw: Additional keyword arguments to override options

    Returns
        SQLiteDao ready for use
    """
    if isinstance(options, DaoOptions):
        for field in fields(options):
            kw.pop(field.name, None)
    else:
        options_func = load_options(cls=DaoOptions)(lambda o, c: o)
        options = options_func(options, config, **kw)

    return SQLiteDao(options)
