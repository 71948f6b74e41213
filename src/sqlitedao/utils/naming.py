"""
Field name <-> column name conversion.

Fields are camelCase in Python, columns are snake_case in the table.

    >>> camel_to_snake('remarksText')
    'remarks_text'
    >>> snake_to_camel('remarks_text')
    'remarksText'

The two functions are not inverses for every input. A leading uppercase
letter is lost on the way back, and a field that already contains `_` is
read back camelCased:

    >>> snake_to_camel(camel_to_snake('TestTable'))
    'testTable'
    >>> snake_to_camel(camel_to_snake('first_name'))
    'firstName'
"""
import re
from collections.abc import Mapping
from typing import Any

__all__ = ['camel_to_snake', 'snake_to_camel', 'snake_keys_to_camel']

_UPPER_OR_DIGIT = re.compile(r'[A-Z0-9]')
_UNDERSCORE_NEXT = re.compile(r'_(.)')


def camel_to_snake(name: str) -> str:
    """Prefix every uppercase letter and digit with `_` and lowercase it.

    A leading `_` produced by the first character is dropped.

    >>> camel_to_snake('address2')
    'address_2'
    >>> camel_to_snake('id')
    'id'
    """
    snake = _UPPER_OR_DIGIT.sub(lambda m: '_' + m.group(0).lower(), name)
    if snake.startswith('_') and not name.startswith('_'):
        snake = snake[1:]
    return snake


def snake_to_camel(name: str) -> str:
    """Drop every `_` and uppercase the character following it.

    >>> snake_to_camel('created_at')
    'createdAt'
    >>> snake_to_camel('name')
    'name'
    """
    return _UNDERSCORE_NEXT.sub(lambda m: m.group(1).upper(), name)


def snake_keys_to_camel(row: Mapping[str, Any]) -> dict[str, Any]:
    """Convert the keys of a result row to field names, keeping order.
    """
    return {snake_to_camel(k): v for k, v in row.items()}


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
