"""
Filter conditions and WHERE clause construction.

A condition is either a comparison carrying a value or a null check
carrying none:

    >>> build_where([eq('name', 'alice'), is_null('remarks')])
    ('WHERE "name" = :name AND "remarks" IS NULL', {'name': 'alice'})

Conditions always combine with AND. The tuple form used by callers,
``('name', '=', 'alice')`` or ``('remarks', 'IS NULL')``, is accepted
wherever a condition is expected.
"""
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlitedao.exceptions import ValidationError
from sqlitedao.sql import check_identifier, named_placeholder
from sqlitedao.sql import quote_identifier
from sqlitedao.utils.naming import camel_to_snake

__all__ = [
    'Operator',
    'Comparison',
    'NullCheck',
    'Condition',
    'as_condition',
    'build_where',
    'eq', 'ne', 'lt', 'le', 'gt', 'ge',
    'is_null', 'is_not_null',
]

Scalar = str | int | float | None


class Operator(str, Enum):
    """Comparison keywords supported in conditions."""
    LT = '<'
    LE = '<='
    EQ = '='
    GE = '>='
    GT = '>'
    NE = '<>'
    IS_NULL = 'IS NULL'
    IS_NOT_NULL = 'IS NOT NULL'

    @property
    def is_null_check(self) -> bool:
        return self in {Operator.IS_NULL, Operator.IS_NOT_NULL}


@dataclass(frozen=True, slots=True)
class Comparison:
    """`field op :field` with one bound value."""
    field: str
    op: Operator
    value: Scalar

    def __post_init__(self):
        op = _to_operator(self.op)
        if op.is_null_check:
            raise ValidationError(f'{op.value} takes no value, use NullCheck')
        object.__setattr__(self, 'op', op)
        check_identifier(self.field)

    def render(self) -> str:
        return f'{quote_identifier(camel_to_snake(self.field))} {self.op.value} {named_placeholder(self.field)}'


@dataclass(frozen=True, slots=True)
class NullCheck:
    """`field IS [NOT] NULL`, nothing bound."""
    field: str
    negated: bool = False

    def __post_init__(self):
        check_identifier(self.field)

    @property
    def op(self) -> Operator:
        return Operator.IS_NOT_NULL if self.negated else Operator.IS_NULL

    def render(self) -> str:
        return f'{quote_identifier(camel_to_snake(self.field))} {self.op.value}'


Condition = Comparison | NullCheck


def _to_operator(op: Any) -> Operator:
    if isinstance(op, Operator):
        return op
    try:
        return Operator(' '.join(str(op).upper().split()))
    except ValueError:
        raise ValidationError(f'Unsupported operator: {op!r}')


def as_condition(obj: Condition | Sequence[Any]) -> Condition:
    """Coerce the tuple form of a condition into a `Condition`.

    >>> as_condition(('id', '>=', 3))
    Comparison(field='id', op=<Operator.GE: '>='>, value=3)
    >>> as_condition(('remarks', 'IS NOT NULL'))
    NullCheck(field='remarks', negated=True)
    """
    if isinstance(obj, Comparison | NullCheck):
        return obj
    if not isinstance(obj, tuple | list) or len(obj) not in {2, 3}:
        raise ValidationError(f'Expected (field, operator[, value]), got {obj!r}')
    field, op, *rest = obj
    op = _to_operator(op)
    if op.is_null_check:
        # a value given alongside a null check is ignored
        return NullCheck(field, negated=op is Operator.IS_NOT_NULL)
    if not rest:
        raise ValidationError(f'{op.value} requires a value for {field!r}')
    return Comparison(field, op, rest[0])


def build_where(conditions: Iterable[Condition | Sequence[Any]]) -> tuple[str, dict[str, Scalar]]:
    """Build a WHERE clause and its bind parameters.

    No conditions yield an empty clause (no WHERE keyword) and no params.
    When the same field is compared more than once the last value wins in
    the params, so both placeholders bind to it.

    >>> build_where([])
    ('', {})
    >>> build_where([('id', '>', 1), ('id', '<', 5)])
    ('WHERE "id" > :id AND "id" < :id', {'id': 5})
    """
    conditions = [as_condition(c) for c in conditions]
    if not conditions:
        return '', {}
    clause = 'WHERE ' + ' AND '.join(c.render() for c in conditions)
    params = {c.field: c.value for c in conditions if isinstance(c, Comparison)}
    return clause, params


def eq(field: str, value: Scalar) -> Comparison:
    return Comparison(field, Operator.EQ, value)


def ne(field: str, value: Scalar) -> Comparison:
    return Comparison(field, Operator.NE, value)


def lt(field: str, value: Scalar) -> Comparison:
    return Comparison(field, Operator.LT, value)


def le(field: str, value: Scalar) -> Comparison:
    return Comparison(field, Operator.LE, value)


def gt(field: str, value: Scalar) -> Comparison:
    return Comparison(field, Operator.GT, value)


def ge(field: str, value: Scalar) -> Comparison:
    return Comparison(field, Operator.GE, value)


def is_null(field: str) -> NullCheck:
    return NullCheck(field)


def is_not_null(field: str) -> NullCheck:
    return NullCheck(field, negated=True)


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
