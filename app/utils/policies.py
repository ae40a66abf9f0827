"""
Error-handling policies attached per operation.

Read paths that only shape the user experience degrade to a safe default
instead of failing the request.
"""
import functools
import logging
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


def fail_open(default_factory: Callable[[], Any], message: str) -> Callable:
    """
    Return ``default_factory()`` when the wrapped read raises a database error.

    Every degraded call gets a freshly built default, so callers may mutate
    what they receive.

    The wrapped callable must take the SQLAlchemy session as its first
    argument after ``self``; the session is rolled back so the request can
    keep using it.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, db, *args, **kwargs):
            try:
                return func(self, db, *args, **kwargs)
            except SQLAlchemyError as e:
                logger.error(f"{message}: {str(e)} (args={args})")
                db.rollback()
                return default_factory()
        return wrapper
    return decorator
