"""
Utilities for SQL statement generation from entities and conditions.
"""
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlitedao.conditions import Condition, as_condition, build_where
from sqlitedao.entity import Entity
from sqlitedao.exceptions import ValidationError
from sqlitedao.sql import named_placeholder, quote_identifier
from sqlitedao.utils.naming import camel_to_snake

logger = logging.getLogger(__name__)

__all__ = [
    'Statement',
    'build_insert_sql',
    'build_update_sql',
    'build_delete_sql',
    'build_select_sql',
]

ConditionLike = Condition | Sequence[Any]


@dataclass(frozen=True)
class Statement:
    """SQL text and the named parameters it binds."""
    sql: str
    params: dict[str, Any] = field(default_factory=dict)


def _column(name: str) -> str:
    return quote_identifier(camel_to_snake(name))


def _where(entity: Entity, conditions: Iterable[ConditionLike]) -> tuple[str, dict[str, Any]]:
    conditions = [as_condition(c) for c in conditions]
    for c in conditions:
        entity.check_field(c.field)
    return build_where(conditions)


def _join(*parts: str) -> str:
    return ' '.join(p for p in parts if p)


def build_insert_sql(entity: Entity) -> Statement:
    """Generate an INSERT for every column present on the entity.

    Omitted fields are left out of the statement so the table default
    applies; a field set to None is inserted as NULL.

    Args:
        entity: Entity carrying the column values

    Returns
        Statement with one `:field` placeholder per column
    """
    table = quote_identifier(entity.table_name)
    keys = list(entity.columns)
    if not keys:
        return Statement(f'INSERT INTO {table} DEFAULT VALUES')
    columns = ', '.join(_column(k) for k in keys)
    placeholders = ', '.join(named_placeholder(k) for k in keys)
    return Statement(f'INSERT INTO {table} ({columns}) VALUES ({placeholders})',
                     dict(entity.columns))


def build_update_sql(entity: Entity, conditions: Iterable[ConditionLike] = ()) -> Statement:
    """Generate an UPDATE setting every column present on the entity.

    Condition params are merged over the column values, so a field used
    both in SET and in WHERE binds the condition value in both places.
    """
    if not entity.columns:
        raise ValidationError(f'Nothing to update on {entity.table_name}: no columns set')
    table = quote_identifier(entity.table_name)
    assignments = ', '.join(f'{_column(k)} = {named_placeholder(k)}' for k in entity.columns)
    where, params = _where(entity, conditions)
    if set(entity.columns) & set(params):
        logger.debug(f'Condition values override SET values for {sorted(set(entity.columns) & set(params))}')
    return Statement(_join(f'UPDATE {table} SET {assignments}', where),
                     {**entity.columns, **params})


def build_delete_sql(entity: Entity, conditions: Iterable[ConditionLike] = ()) -> Statement:
    """Generate a DELETE. Without conditions every row of the table matches.

    Column values on the entity are ignored.
    """
    where, params = _where(entity, conditions)
    return Statement(_join(f'DELETE FROM {quote_identifier(entity.table_name)}', where), params)


def build_select_sql(entity: Entity, conditions: Iterable[ConditionLike] = ()) -> Statement:
    """Generate `SELECT *` over the entity table, filtered by conditions.
    """
    where, params = _where(entity, conditions)
    return Statement(_join(f'SELECT * FROM {quote_identifier(entity.table_name)}', where), params)
