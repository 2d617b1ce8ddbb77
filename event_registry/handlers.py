"""
Exception hooks for handlers that raise during publish.

A handler's exception always propagates out of publish() and aborts the rest
of the fan-out. A hook installed with Registry.set_handler_exception_hook()
is called with the failing handler, event name and exception just before the
exception is re-raised, so it can observe the failure but never suppress it.
log_handler_exception is the built-in hook.
"""

import logging
from typing import Callable

from event_registry.event import HANDLER


logger = logging.getLogger(__name__)


HANDLER_EXCEPTION_HOOK = Callable[[HANDLER, str, Exception], None]
"""
Signature for handler exception hooks.

Hooks receive the failing handler, event name and exception. Their return
value is ignored and the exception is re-raised afterwards.
"""


def get_callable_name(callable_: Callable) -> str:
    """
    Returns the name of the callable, using class name for items with __self__,
    __name__ for anything with __name__, or str(callback) if neither are found.
    """
    if hasattr(callable_, "__self__") and hasattr(callable_, "__name__"):
        return f"{callable_.__self__.__class__.__name__}.{callable_.__name__}"
    elif hasattr(callable_, "__name__"):
        return callable_.__name__
    else:
        return str(callable_)


def log_handler_exception(
    handler: HANDLER, event_name: str, exception: Exception
) -> None:
    """Log the raised exception before publish re-raises it."""
    logger.error(
        f"Exception in event handler:\n"
        f"  Event:     {event_name}\n"
        f"  Handler:   {get_callable_name(handler)}\n"
        f"  Exception: {exception.__class__.__name__}: {exception}",
        exc_info=exception,
    )
