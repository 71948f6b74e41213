"""
Call tracing for data access operations.

`wrap` returns a callable with the same signature and result as the one it
is given, logging start, arguments, result or exception, and end under a
per-call id:

    insert = wrap('SQLiteDao.insert', dao.insert)

A returned future is logged when it settles; any other returned awaitable
is handed back wrapped, and logged once it is awaited.

`logged` is the decorator form. Nothing is logged, and the wrapped callable
runs directly, unless the `sqlitedao.instrument` logger is enabled for INFO.
"""
import asyncio
import functools
import inspect
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

__all__ = ['wrap', 'logged']

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _logged_args(args: tuple, target_args: Sequence[int] | None) -> list[Any]:
    if target_args is None:
        return list(args)
    return [a for i, a in enumerate(args) if i in target_args]


def _finish(uid: int, key: str, result: Any) -> None:
    logger.info(f'{uid} {key} returns: {result!r}')
    logger.info(f'{uid} {key} end...')


def _fail(uid: int, key: str, exc: BaseException) -> None:
    logger.error(f'{uid} {key} throws: {exc!r}')
    logger.error(f'{uid} {key} end...')


def _future_done(uid: int, key: str, fut: asyncio.Future) -> None:
    if fut.cancelled():
        logger.info(f'{uid} {key} cancelled')
    elif fut.exception() is not None:
        _fail(uid, key, fut.exception())
    else:
        _finish(uid, key, fut.result())


async def _resolve(uid: int, key: str, awaitable: Awaitable[T]) -> T:
    """Await a returned coroutine or awaitable and log how it settled."""
    try:
        result = await awaitable
    except Exception as exc:
        _fail(uid, key, exc)
        raise
    _finish(uid, key, result)
    return result


def wrap(key: str, fn: Callable[..., T], target_args: Sequence[int] | None = None) -> Callable[..., T]:
    """Wrap `fn` so each call is traced under `key`.

    Args:
        key: Operation name written with every message
        fn: Callable to trace
        target_args: Indexes of the positional arguments to log (default: all)

    Returns
        Callable with the same inputs, return value and exceptions as `fn`
    """
    if inspect.iscoroutinefunction(fn):
        @functools.wraps(fn)
        async def async_wrapper(*args: Any, **kwargs: Any) -> T:
            if not logger.isEnabledFor(logging.INFO):
                return await fn(*args, **kwargs)
            uid = time.monotonic_ns()
            logger.info(f'{uid} {key} start...')
            logger.info(f'{uid} {key} args: {_logged_args(args, target_args)!r} {kwargs!r}')
            try:
                result = await fn(*args, **kwargs)
            except Exception as exc:
                _fail(uid, key, exc)
                raise
            _finish(uid, key, result)
            return result
        return async_wrapper

    @functools.wraps(fn)
    def sync_wrapper(*args: Any, **kwargs: Any) -> T:
        if not logger.isEnabledFor(logging.INFO):
            return fn(*args, **kwargs)
        uid = time.monotonic_ns()
        logger.info(f'{uid} {key} start...')
        logger.info(f'{uid} {key} args: {_logged_args(args, target_args)!r} {kwargs!r}')
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            _fail(uid, key, exc)
            raise
        if isinstance(result, asyncio.Future):
            result.add_done_callback(functools.partial(_future_done, uid, key))
        elif inspect.isawaitable(result):
            return _resolve(uid, key, result)
        else:
            _finish(uid, key, result)
        return result
    return sync_wrapper


def logged(key: str, target_args: Sequence[int] | None = None) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator form of `wrap`."""
    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        return wrap(key, fn, target_args)
    return decorator
