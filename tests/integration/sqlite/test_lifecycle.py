"""
SQLite integration tests for connecting, closing and the storage driver.
"""
import logging

import sqlitedao as dao
import pytest
from sqlitedao import ClosedHandle, DaoError, DaoOptions, StorageError, eq
from sqlitedao.driver import RunResult


def test_connect_with_mapping(table):
    """Options given as a mapping, like a config section"""
    cn = dao.connect({'database': ':memory:'})
    try:
        assert isinstance(cn, dao.SQLiteDao)
        assert cn.options.database == ':memory:'
        assert not cn.closed
    finally:
        cn.close()


def test_connect_to_unreachable_path(tmp_path):
    with pytest.raises(StorageError):
        dao.connect(DaoOptions(database=str(tmp_path / 'missing' / 'test.db')))


def test_close_is_terminal(sqlite_dao):
    sqlite_dao.close()
    assert sqlite_dao.closed
    assert 'closed' in repr(sqlite_dao)


def test_close_twice(sqlite_dao):
    sqlite_dao.close()
    with pytest.raises(ClosedHandle):
        sqlite_dao.close()


@pytest.mark.parametrize(('operation', 'args'), [
    ('insert', ({'name': 'x'},)),
    ('update', ({'remarks': 'x'}, ('id', '=', 1))),
    ('delete', ({}, ('id', '=', 1))),
    ('select', ({},)),
    ('select_one', ({}, ('id', '=', 1))),
])
def test_operations_after_close(sqlite_dao, table, operation, args):
    columns, *conditions = args
    sqlite_dao.close()
    with pytest.raises(ClosedHandle) as excinfo:
        getattr(sqlite_dao, operation)(table(columns), *conditions)
    assert isinstance(excinfo.value, DaoError)


def test_context_manager_closes(table):
    with dao.connect(DaoOptions(database=':memory:')) as cn:
        assert not cn.closed
    assert cn.closed
    with pytest.raises(ClosedHandle):
        cn.select(table())


def test_context_manager_after_explicit_close():
    with dao.connect(DaoOptions(database=':memory:')) as cn:
        cn.close()
    assert cn.closed


def test_close_rolls_back_open_transaction(sqlite_file_dao, table):
    cn, path = sqlite_file_dao
    tx = dao.transaction(cn)
    tx.__enter__().delete(table())
    assert cn.driver.in_transaction
    cn.close()
    assert tx.tx is not None and not tx.tx.is_active

    with dao.connect(DaoOptions(database=str(path))) as other:
        assert len(other.select(table())) == 10


def test_foreign_keys_enforced_by_default(sqlite_dao):
    assert sqlite_dao.driver.prepare('PRAGMA foreign_keys').get() == {'foreign_keys': 1}


def test_foreign_keys_can_be_disabled():
    with dao.connect(DaoOptions(database=':memory:', foreign_keys=False)) as cn:
        assert cn.driver.prepare('PRAGMA foreign_keys').get() == {'foreign_keys': 0}


class TestDriver:

    def test_run_reports_rowid_and_rowcount(self, sqlite_dao):
        stmt = sqlite_dao.driver.prepare('INSERT INTO test_table (name) VALUES (:name)')
        assert stmt.run({'name': 'name-11'}) == RunResult(lastrowid=11, rowcount=1)

        update = sqlite_dao.driver.prepare('UPDATE test_table SET remarks = :remarks WHERE id > :id')
        assert update.run({'remarks': 'x', 'id': 8}).rowcount == 3

    def test_all_and_get(self, sqlite_dao):
        stmt = sqlite_dao.driver.prepare('SELECT id, name FROM test_table WHERE id <= :id ORDER BY id')
        assert stmt.all({'id': 2}) == [{'id': 1, 'name': 'name-1'}, {'id': 2, 'name': 'name-2'}]
        assert stmt.get({'id': 2}) == {'id': 1, 'name': 'name-1'}
        assert stmt.get({'id': 0}) is None

    def test_statements_commit_outside_transactions(self, sqlite_dao):
        sqlite_dao.driver.prepare('DELETE FROM test_table WHERE id = :id').run({'id': 1})
        assert not sqlite_dao.driver.in_transaction

    def test_native_transaction_returns_result(self, sqlite_dao):
        driver = sqlite_dao.driver
        assert driver.transaction(lambda: driver.in_transaction) is True
        assert not driver.in_transaction

    def test_missing_bind_parameter(self, sqlite_dao):
        stmt = sqlite_dao.driver.prepare('SELECT * FROM test_table WHERE id = :id')
        with pytest.raises(StorageError):
            stmt.all({})

    def test_statements_are_logged(self, sqlite_dao, table, caplog):
        caplog.set_level(logging.DEBUG, logger='sqlitedao.driver')
        sqlite_dao.select_one(table(), eq('id', 1))
        assert any('SQL: SELECT * FROM' in r.getMessage() for r in caplog.records)
