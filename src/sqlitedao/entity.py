"""
Entity descriptors.

An entity type names one table and declares its fields as annotations.
An entity instance carries a partial set of column values for a single
data access call:

    class TestTable(Entity):
        id: int | None
        name: str
        remarks: str | None

    TestTable(name='alice').columns     # {'name': 'alice'}
    TestTable.table_name                # 'test_table'

The table name is resolved once when the class is created, from the
``table_name`` class keyword, else from the nearest base that was given
one, else from the class name in snake_case.
"""
import inspect
import logging
from collections.abc import Mapping
from typing import Any, ClassVar, get_origin

from sqlitedao.exceptions import ValidationError
from sqlitedao.sql import check_identifier
from sqlitedao.utils.naming import camel_to_snake

__all__ = ['Entity']

logger = logging.getLogger(__name__)

_SCALARS = (str, int, float, type(None))


def _is_classvar(ann: Any) -> bool:
    if isinstance(ann, str):
        return ann.startswith(('ClassVar', 'typing.ClassVar'))
    return ann is ClassVar or get_origin(ann) is ClassVar


class Entity:
    """Base class for table row shapes.

    A subclass of an entity declared with `table_name=` maps to the same
    table unless it names its own; otherwise the table is the class name
    in snake_case.
    """

    table_name: ClassVar[str]
    _named_table: ClassVar[str | None] = None
    fields: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(cls, table_name: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if table_name is not None:
            cls._named_table = check_identifier(table_name)
        cls.table_name = cls._named_table or check_identifier(camel_to_snake(cls.__name__))
        fields: dict[str, None] = {}
        for klass in reversed(cls.__mro__):
            if klass is Entity or not issubclass(klass, Entity):
                continue
            for name, ann in inspect.get_annotations(klass).items():
                if not name.startswith('_') and not _is_classvar(ann):
                    fields[check_identifier(name)] = None
        cls.fields = tuple(fields)
        logger.debug(f'Registered entity {cls.__name__} -> {cls.table_name} {cls.fields}')

    def __init__(self, columns: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        if type(self) is Entity:
            raise TypeError('Entity must be subclassed to name a table')
        values = {**(columns or {}), **kwargs}
        for name, value in values.items():
            self.check_field(name)
            if not isinstance(value, _SCALARS):
                raise ValidationError(
                    f'{type(self).__name__}.{name} must be str, int, float or None, '
                    f'got {type(value).__name__}')
        self.columns: dict[str, Any] = values

    @classmethod
    def check_field(cls, name: str) -> str:
        """Validate a field name against the declared fields.

        Entities without annotations accept any plain identifier.
        """
        check_identifier(name)
        if cls.fields and name not in cls.fields:
            raise ValidationError(f'{cls.__name__} has no field {name!r}')
        return name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return type(self) is type(other) and self.columns == other.columns

    def __repr__(self) -> str:
        cols = ', '.join(f'{k}={v!r}' for k, v in self.columns.items())
        return f'{type(self).__name__}({cols})'
