"""
SQLite engine creation with SQLAlchemy.

SQLAlchemy is used for connection management only; one connection is opened
per data access object and held until it is closed. pysqlite's own implicit
transaction handling is switched off so that SQLAlchemy's BEGIN, COMMIT,
ROLLBACK and SAVEPOINT reach SQLite as issued.
"""
import logging
from collections.abc import Callable
from typing import Any

import sqlalchemy as sa
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool
from sqlitedao.driver import Driver
from sqlitedao.exceptions import DriverError, classify_error
from sqlitedao.options import DaoOptions

__all__ = [
    'create_url_from_options',
    'get_engine_for_options',
    'configure_engine',
    'open_driver',
]

logger = logging.getLogger(__name__)


def create_url_from_options(options: DaoOptions,
                            url_creator: Callable[..., sa.URL] = sa.URL.create) -> sa.URL:
    """Convert DaoOptions to SQLAlchemy URL.
    """
    return url_creator(drivername='sqlite', database=options.database)


def configure_engine(engine: Engine, options: DaoOptions) -> None:
    """Attach the per-connection SQLite settings to an engine.
    """
    foreign_keys = 'ON' if options.foreign_keys else 'OFF'

    @event.listens_for(engine, 'connect')
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute(f'PRAGMA foreign_keys = {foreign_keys}')
        finally:
            cursor.close()

    @event.listens_for(engine, 'begin')
    def _on_begin(conn: sa.Connection) -> None:
        conn.exec_driver_sql('BEGIN')


def get_engine_for_options(options: DaoOptions,
                           engine_factory: Callable[..., Engine] = sa.create_engine,
                           **kwargs: Any) -> Engine:
    """Create a SQLAlchemy engine for the given options.

    NullPool is used: the data access object holds its single connection
    for its whole lifetime.
    """
    url = create_url_from_options(options)
    engine_kwargs: dict[str, Any] = {
        'echo': options.echo,
        'poolclass': NullPool,
        'connect_args': {'timeout': options.timeout},
    }
    engine_kwargs.update(kwargs)
    engine = engine_factory(url, **engine_kwargs)
    configure_engine(engine, options)
    logger.debug(f'Created new engine for {options.database}')
    return engine


def open_driver(options: DaoOptions) -> Driver:
    """Open the single connection a data access object works on.
    """
    engine = get_engine_for_options(options)
    try:
        sa_connection = engine.connect()
    except DriverError as exc:
        engine.dispose()
        raise classify_error(exc) from exc
    return Driver(sa_connection)
