"""
Unit tests for conditions and WHERE clause construction.
"""
import pytest
from sqlitedao.conditions import Comparison, NullCheck, Operator, as_condition
from sqlitedao.conditions import build_where, eq, ge, gt, is_not_null, is_null
from sqlitedao.conditions import le, lt, ne
from sqlitedao.exceptions import ValidationError


def test_empty_conditions():
    """No conditions means no WHERE keyword and no params"""
    assert build_where([]) == ('', {})


def test_single_comparison_binds_one_placeholder():
    clause, params = build_where([('name', '=', 'name-1')])
    assert clause == 'WHERE "name" = :name'
    assert clause.count(':') == 1
    assert params == {'name': 'name-1'}


def test_field_is_converted_but_placeholder_is_not():
    clause, params = build_where([eq('firstName', 'Ann')])
    assert clause == 'WHERE "first_name" = :firstName'
    assert params == {'firstName': 'Ann'}


@pytest.mark.parametrize(('helper', 'op'), [
    (lt, '<'), (le, '<='), (eq, '='), (ge, '>='), (gt, '>'), (ne, '<>'),
])
def test_comparison_helpers(helper, op):
    clause, params = build_where([helper('id', 5)])
    assert clause == f'WHERE "id" {op} :id'
    assert params == {'id': 5}


def test_null_checks_bind_nothing():
    clause, params = build_where([is_null('remarks'), is_not_null('name')])
    assert clause == 'WHERE "remarks" IS NULL AND "name" IS NOT NULL'
    assert params == {}


def test_null_check_tuple_ignores_value():
    clause, params = build_where([('remarks', 'IS NULL', 'ignored')])
    assert clause == 'WHERE "remarks" IS NULL'
    assert params == {}


def test_conditions_join_with_and():
    clause, params = build_where([gt('id', 2), ('id', '<=', 5), is_not_null('remarks')])
    assert clause == 'WHERE "id" > :id AND "id" <= :id AND "remarks" IS NOT NULL'
    assert params == {'id': 5}


def test_same_field_last_value_wins():
    """Both placeholders share one name, so the later value is bound"""
    _, params = build_where([('id', '>', 1), ('id', '<', 9)])
    assert params == {'id': 9}


def test_null_value_on_comparison_is_bound():
    _, params = build_where([('remarks', '=', None)])
    assert params == {'remarks': None}


@pytest.mark.parametrize(('given', 'expected'), [
    ('is null', Operator.IS_NULL),
    ('IS  NOT   NULL', Operator.IS_NOT_NULL),
    ('<>', Operator.NE),
])
def test_operator_spelling_is_normalized(given, expected):
    assert as_condition(('remarks', given, 1)).op is expected


def test_as_condition_passes_conditions_through():
    cond = eq('id', 1)
    assert as_condition(cond) is cond
    assert as_condition(['id', '=', 1]) == cond
    assert as_condition(('remarks', 'IS NOT NULL')) == NullCheck('remarks', negated=True)


def test_unknown_operator():
    with pytest.raises(ValidationError, match='Unsupported operator'):
        build_where([('name', 'LIKE', 'name-%')])


def test_comparison_requires_value():
    with pytest.raises(ValidationError, match='requires a value'):
        as_condition(('name', '='))


def test_comparison_rejects_null_operators():
    with pytest.raises(ValidationError):
        Comparison('remarks', Operator.IS_NULL, None)


@pytest.mark.parametrize('field', ['name; DROP TABLE test_table', 'na"me', '', '1id', 'first name'])
def test_field_names_are_validated(field):
    with pytest.raises(ValidationError, match='Invalid identifier'):
        build_where([(field, '=', 1)])


@pytest.mark.parametrize('obj', ['id = 1', ('id',), ('id', '=', 1, 2), 42])
def test_malformed_condition(obj):
    with pytest.raises(ValidationError):
        as_condition(obj)
