"""
Identifier handling for generated SQL.

Values always travel as named bind parameters. Only table and column names
are interpolated into SQL text, so they are checked here before use.
"""
import re

from sqlitedao.exceptions import ValidationError

__all__ = ['check_identifier', 'quote_identifier', 'named_placeholder']

_IDENTIFIER = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')


def check_identifier(identifier: str) -> str:
    """Return the identifier if it is a plain name, else raise ValidationError.

    >>> check_identifier('firstName')
    'firstName'
    """
    if not isinstance(identifier, str) or not _IDENTIFIER.fullmatch(identifier):
        raise ValidationError(f'Invalid identifier: {identifier!r}')
    return identifier


def quote_identifier(identifier: str) -> str:
    """Safely quote table and column names.

    >>> quote_identifier('test_table')
    '"test_table"'
    """
    return '"' + identifier.replace('"', '""') + '"'


def named_placeholder(field: str) -> str:
    """Bind parameter for a field, named after the field itself.

    >>> named_placeholder('firstName')
    ':firstName'
    """
    return f':{check_identifier(field)}'


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
