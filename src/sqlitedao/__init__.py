"""
Minimal data access layer mapping typed entities to SQLite tables.

    import sqlitedao as dao

    with dao.connect({'database': 'app.db'}) as cn:
        cn.insert(TestTable(name='alice'))
        cn.select(TestTable(), ('name', '=', 'alice'))
"""
__version__ = '0.1.0'

from sqlitedao.conditions import Comparison, Condition, NullCheck, Operator
from sqlitedao.conditions import as_condition, build_where, eq, ge, gt
from sqlitedao.conditions import is_not_null, is_null, le, lt, ne
from sqlitedao.dao import SQLiteDao, connect
from sqlitedao.entity import Entity
from sqlitedao.exceptions import ClosedHandle, ConstraintViolation, DaoError
from sqlitedao.exceptions import StorageError, ValidationError
from sqlitedao.instrument import logged, wrap
from sqlitedao.options import DaoOptions
from sqlitedao.transaction import Transaction as transaction
from sqlitedao.utils.naming import camel_to_snake, snake_to_camel

__all__ = [
    'connect',
    'SQLiteDao',
    'DaoOptions',
    'transaction',
    'Entity',
    'Operator',
    'Comparison',
    'NullCheck',
    'Condition',
    'as_condition',
    'build_where',
    'eq',
    'ne',
    'lt',
    'le',
    'gt',
    'ge',
    'is_null',
    'is_not_null',
    'camel_to_snake',
    'snake_to_camel',
    'wrap',
    'logged',
    'DaoError',
    'ConstraintViolation',
    'StorageError',
    'ClosedHandle',
    'ValidationError',
]
