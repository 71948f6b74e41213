from sqlitedao.utils.naming import camel_to_snake, snake_keys_to_camel
from sqlitedao.utils.naming import snake_to_camel

__all__ = ['camel_to_snake', 'snake_to_camel', 'snake_keys_to_camel']
