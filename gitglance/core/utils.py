"""Utility functions and decorators for gitglance core."""

import functools
import logging
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def safe_slot(func: F) -> F:
    """Decorator that keeps exceptions in Qt slots out of the event loop.

    Worker results reach the status session through queued signal
    connections; an exception raised there would otherwise be reported by
    Qt and lost. The wrapped slot logs the traceback and returns None.
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception("Exception in slot %s", func.__qualname__)
            return None
    return wrapper  # type: ignore[return-value]
