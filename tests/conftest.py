"""
Fixtures for data access tests.

Every database fixture creates `test_table` and seeds it with ten rows:
ids 1-10, names `name-<id>`, remarks set on even ids and NULL on odd ids.
"""
import sqlitedao as dao
import pytest
from sqlitedao import DaoOptions, Entity


class TestTable(Entity):
    id: int | None
    name: str
    remarks: str | None


class CustomerProfile(Entity):
    id: int | None
    firstName: str | None
    address2: str | None


class NullableRow(Entity):
    a: str | None
    b: int | None


CREATE_TABLES = [
    """
    CREATE TABLE test_table (
        id INTEGER PRIMARY KEY NOT NULL,
        name TEXT NOT NULL UNIQUE,
        remarks TEXT
    )
    """,
    """
    CREATE TABLE customer_profile (
        id INTEGER PRIMARY KEY,
        first_name TEXT,
        address_2 TEXT
    )
    """,
    """
    CREATE TABLE nullable_row (
        a TEXT,
        b INTEGER
    )
    """,
]

TEST_DATA = [
    {'id': i, 'name': f'name-{i}', 'remarks': 'remarks' if i % 2 == 0 else None}
    for i in range(1, 11)
]


def create_schema(cn):
    """Create the test tables and seed `test_table`."""
    for sql in CREATE_TABLES:
        cn.driver.prepare(sql).run()
    stmt = cn.driver.prepare('INSERT INTO test_table (id, name, remarks) VALUES (:id, :name, :remarks)')
    for row in TEST_DATA:
        stmt.run(row)


@pytest.fixture
def table():
    """Entity class mapped to `test_table`."""
    return TestTable


@pytest.fixture
def profile():
    """Entity class with camelCase and digit field names."""
    return CustomerProfile


@pytest.fixture
def nullable():
    """Entity class whose columns are all nullable."""
    return NullableRow


@pytest.fixture
def test_data():
    return [dict(row) for row in TEST_DATA]


@pytest.fixture
def sqlite_dao():
    """In-memory database with the seeded test schema."""
    cn = dao.connect(DaoOptions(database=':memory:'))
    create_schema(cn)
    yield cn
    if not cn.closed:
        cn.close()


@pytest.fixture
def sqlite_file_dao(tmp_path):
    """File-backed database, for checks made from a second connection."""
    path = tmp_path / 'test_sqlite.db'
    cn = dao.connect(DaoOptions(database=str(path), timeout=0))
    create_schema(cn)
    yield cn, path
    if not cn.closed:
        cn.close()
