from dataclasses import dataclass

from libb import ConfigOptions

__all__ = ['DaoOptions']


@dataclass
class DaoOptions(ConfigOptions):
    """Options

    - database: path of the sqlite file, or `:memory:`
    - timeout: seconds to wait on a locked database (default: 5.0)
    - foreign_keys: enforce foreign key constraints (default: True)
    - echo: let SQLAlchemy log every statement (default: False)
    """
    database: str = None
    timeout: float = 5.0
    foreign_keys: bool = True
    echo: bool = False

    def __post_init__(self):
        if not self.database:
            raise ValueError('database must be a file path or :memory:')
        if self.timeout is None or self.timeout < 0:
            raise ValueError('timeout must be a non-negative number of seconds')
