"""
# Event Registry

The registry owns two parallel tables: the declared events and the handlers
subscribed to them. An event may be registered with no subscribers, which is
different from not being registered at all.

Registries are constructed explicitly and handed to whatever needs them; there
is no module level default instance.
"""

import inspect
import json
import logging
import os
from typing import Any
from typing import Callable
from typing import Optional
from typing import Sequence
from typing import Union

from event_registry import handlers
from event_registry.errors import AlreadyRegisteredError
from event_registry.errors import ArityMismatchError
from event_registry.errors import MissingEventNameError
from event_registry.errors import MissingHandlerError
from event_registry.errors import NotRegisteredError
from event_registry.event import HANDLER
from event_registry.event import EventDefinition
from event_registry.parameter import ParameterSignature


logger = logging.getLogger(__name__)


def _read_signature(handler: HANDLER) -> Optional[inspect.Signature]:
    try:
        return inspect.signature(handler)
    except (TypeError, ValueError):
        return None


def _positional_capacity(sig: inspect.Signature) -> Optional[int]:
    """
    Count how many positional arguments a handler accepts.

    Returns None if the handler takes *args.
    """
    count = 0
    for param in sig.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1

    return count


def _required_keyword_only(sig: inspect.Signature) -> list[str]:
    """Names of keyword-only parameters without a default."""
    return [
        param.name
        for param in sig.parameters.values()
        if param.kind == inspect.Parameter.KEYWORD_ONLY
        and param.default is inspect.Parameter.empty
    ]


class Registry(object):
    """
    Primary event coordinator.

    Declare events with register(), attach handlers with subscribe() or the
    @registry.on() decorator, and fan out to them with publish().

    Handlers run synchronously in subscription order. A handler that raises
    aborts the rest of the fan-out and the exception reaches the caller of
    publish(). An exception hook, such as handlers.log_handler_exception, can
    observe the failure first.
    """

    def __init__(
        self,
        validate_on_publish: bool = False,
        check_handler_arity: bool = True,
        handler_exception_hook: Optional[handlers.HANDLER_EXCEPTION_HOOK] = None,
    ) -> None:
        """
        Args:
            validate_on_publish (bool): Check published arguments against the
                declared parameters before running any handler. Suggested True
                for development and False for production.
            check_handler_arity (bool): Reject handlers on subscribe that can't
                positionally accept every leading required parameter.
            handler_exception_hook (Optional[HANDLER_EXCEPTION_HOOK]): Called
                with (handler, event_name, exception) when a handler raises
                during publish, before the exception is re-raised.
        """
        self.validate_on_publish = bool(validate_on_publish)
        self.check_handler_arity = bool(check_handler_arity)

        self._handler_exception_hook = handler_exception_hook

        self._events: dict[str, EventDefinition] = {}
        """Declared events, in registration order."""

        self._subscriptions: dict[str, list[HANDLER]] = {}
        """Event name to handlers in subscription order. Empty lists are dropped."""

    def __repr__(self) -> str:
        return (
            f"<Registry events={len(self._events)} "
            f"validate_on_publish={self.validate_on_publish}>"
        )

    # -----Event Management----------------------------------------------------

    @staticmethod
    def _require_name(name: str, action: str) -> None:
        if not isinstance(name, str) or not name:
            raise MissingEventNameError(
                f"Expected an event name string with at least 1 character to "
                f"{action}, got {name!r}."
            )

    def _require_registered(self, name: str, action: str) -> EventDefinition:
        event = self._events.get(name)
        if event is None:
            raise NotRegisteredError(
                f"Event '{name}' is not registered. "
                f"Cannot {action} an event that isn't registered."
            )
        return event

    def register(
        self,
        name: str,
        parameters: Optional[Sequence[Union[ParameterSignature, dict]]] = None,
        description: str = "",
        registrant: Any = None,
    ) -> EventDefinition:
        """
        Register an event and define the parameters its handlers take.

        Args:
            name (str): The event name.
            parameters (Optional[Sequence]): ParameterSignatures or raw
                descriptor mappings ({'name', 'type', 'optional',
                'description'}), in positional order.
            description (str): A description of the event.
            registrant (Any): The object registering the event.
        Returns:
            EventDefinition: The new definition.
        Raises:
            MissingEventNameError: If name is empty.
            AlreadyRegisteredError: If the name is already registered.
            DeclarationError: If the parameters or description are malformed.
        """
        self._require_name(name, "register")

        if name in self._events:
            raise AlreadyRegisteredError(f"Event '{name}' is already registered.")

        event = EventDefinition(name, parameters, description, registrant)
        self._events[name] = event

        logger.debug(f"Registered event {event!r}")
        return event

    def deregister(self, name: str) -> None:
        """
        Remove an event and every handler subscribed to it.

        Raises:
            MissingEventNameError: If name is empty.
            NotRegisteredError: If the event isn't registered.
        """
        self._require_name(name, "deregister")
        self._require_registered(name, "deregister")

        self.unsubscribe(name)
        del self._events[name]

        logger.debug(f"Deregistered event '{name}'")

    def deregister_all(self) -> None:
        """Remove every event and subscription."""
        self._subscriptions.clear()
        self._events.clear()

        logger.debug("Deregistered all events")

    # -----Subscriber Management-----------------------------------------------

    def subscribe(self, name: str, handler: HANDLER) -> HANDLER:
        """
        Append a handler to an event.

        The same handler may be subscribed more than once and then runs once
        per subscription.

        Args:
            name (str): The event name.
            handler (Callable): Function to call when the event is published.
        Returns:
            Callable: The handler, unchanged, for use with unsubscribe().
        Raises:
            MissingEventNameError: If name is empty.
            NotRegisteredError: If the event isn't registered.
            MissingHandlerError: If handler is missing or not callable.
            ArityMismatchError: If arity checks are on and the handler can't
                take the event's required parameters.
        """
        self._require_name(name, "subscribe to")
        event = self._require_registered(name, "subscribe to")

        if handler is None or not callable(handler):
            raise MissingHandlerError(
                f"Expected a callable event handler for event '{name}', "
                f"got {handler!r}."
            )

        if self.check_handler_arity:
            self._check_arity(event, handler)

        self._subscriptions.setdefault(name, []).append(handler)

        logger.debug(
            f"Subscribed {handlers.get_callable_name(handler)} to '{name}'"
        )
        return handler

    @staticmethod
    def _check_arity(event: EventDefinition, handler: HANDLER) -> None:
        sig = _read_signature(handler)
        if sig is None:
            return

        keyword_only = _required_keyword_only(sig)
        if keyword_only:
            raise ArityMismatchError(
                f"The handler {handlers.get_callable_name(handler)} for event "
                f"'{event.name}' has required keyword-only parameters "
                f"{keyword_only}. Handlers are called positionally with "
                f"({event.format_parameters()})."
            )

        required = event.required_count
        capacity = _positional_capacity(sig)
        if capacity is None or capacity >= required:
            return

        raise ArityMismatchError(
            f"Expected ({event.format_parameters()}) parameters for the event "
            f"'{event.name}' handlers. The handler "
            f"{handlers.get_callable_name(handler)} does not cater for the "
            f"required parameters. At least {required} expected, "
            f"{capacity} found."
        )

    def on(self, name: str) -> Callable[[HANDLER], HANDLER]:
        """
        Decorator to subscribe a function to an event.

        The function is returned unchanged so it can still be unsubscribed
        with unsubscribe(name, func).
        """

        def decorator(func: HANDLER) -> HANDLER:
            return self.subscribe(name, func)

        return decorator

    def unsubscribe(self, name: str, handler: Optional[HANDLER] = None) -> bool:
        """
        Remove one handler, or all handlers, from an event.

        The event stays registered either way.

        Args:
            name (str): The event name.
            handler (Optional[Callable]): The exact handler object to remove.
                Only its first occurrence is removed. If omitted, every handler
                is removed.
        Returns:
            bool: True if handlers were removed or all were requested removed,
                False if handler was not subscribed.
        Raises:
            MissingEventNameError: If name is empty.
            NotRegisteredError: If the event isn't registered.
        """
        self._require_name(name, "unsubscribe from")
        self._require_registered(name, "unsubscribe from")

        if handler is None:
            self._subscriptions.pop(name, None)
            logger.debug(f"Unsubscribed all handlers from '{name}'")
            return True

        subscribed = self._subscriptions.get(name, [])
        for index, existing in enumerate(subscribed):
            if existing is handler:
                break
        else:
            return False

        del subscribed[index]
        if not subscribed:
            del self._subscriptions[name]

        logger.debug(
            f"Unsubscribed {handlers.get_callable_name(handler)} from '{name}'"
        )
        return True

    def set_handler_exception_hook(
        self, hook: Optional[handlers.HANDLER_EXCEPTION_HOOK]
    ) -> None:
        """
        Set the hook called when a handler raises during publish.

        The exception is re-raised after the hook returns either way.

        Args:
            hook (Optional[handlers.HANDLER_EXCEPTION_HOOK]):
                Callable with signature (HANDLER, str, Exception) -> None.
                Pass None to remove the hook.
        """
        self._handler_exception_hook = hook

    # -----Publishing----------------------------------------------------------

    def publish(self, name: str, *args: Any) -> bool:
        """
        Call every handler subscribed to an event with args.

        Handlers run in subscription order against the handler list as it was
        when publish was called; subscribing or unsubscribing from inside a
        handler only affects later publishes.

        Args:
            name (str): The event name.
            *args (Any): Positional arguments passed to each handler.
        Returns:
            bool: False if the event had no handlers, else True.
        Raises:
            MissingEventNameError: If name is empty.
            NotRegisteredError: If validation is on and the event isn't
                registered, whether or not it has handlers.
            ArgumentMismatchError: If validation is on and args don't match the
                declared parameters. No handler runs.
        """
        self._require_name(name, "publish")

        if self.validate_on_publish:
            event = self._require_registered(name, "publish")

        event_handlers = tuple(self._subscriptions.get(name, ()))
        if not event_handlers:
            logger.debug(f"Published '{name}' with no handlers")
            return False

        if self.validate_on_publish:
            event.check_arguments(args)

        logger.debug(f"Publishing '{name}' to {len(event_handlers)} handler(s)")

        for handler in event_handlers:
            try:
                handler(*args)
            except Exception as e:
                if self._handler_exception_hook is not None:
                    self._handler_exception_hook(handler, name, e)
                raise

        return True

    # -----Introspection-------------------------------------------------------

    def get_event(self, name: str) -> EventDefinition:
        """
        Get a registered event with its handlers filled in.

        Raises:
            MissingEventNameError: If name is empty.
            NotRegisteredError: If the event isn't registered.
        """
        self._require_name(name, "get")
        event = self._require_registered(name, "get")
        event.handlers = tuple(self._subscriptions.get(name, ()))
        return event

    def get_all_events(self) -> list[EventDefinition]:
        """Get every registered event, in registration order."""
        return [self.get_event(name) for name in self._events]

    def get_event_description(self, name: str) -> str:
        return self.get_event(name).description

    def get_event_handlers(self, name: str) -> tuple[HANDLER, ...]:
        return self.get_event(name).handlers

    def get_event_parameters(self, name: str) -> tuple[ParameterSignature, ...]:
        return self.get_event(name).parameters

    def get_event_registrant(self, name: str) -> Any:
        return self.get_event(name).registrant

    def is_registered(self, name: str) -> bool:
        return isinstance(name, str) and name in self._events

    def get_event_names(self) -> list[str]:
        """Get all registered event names, in registration order."""
        return list(self._events)

    def get_handler_count(self, name: str) -> int:
        """Number of subscriptions to an event, 0 if it isn't registered."""
        if not isinstance(name, str):
            return 0
        return len(self._subscriptions.get(name, ()))

    def is_subscribed(self, name: str, handler: HANDLER) -> bool:
        """Check if this exact handler object is subscribed to an event."""
        if not isinstance(name, str):
            return False
        return any(existing is handler for existing in self._subscriptions.get(name, ()))

    @staticmethod
    def _get_callback_info(callback: Callable) -> str:
        """Returns metadata on a callable as a string."""
        if hasattr(callback, "__self__") and hasattr(callback, "__name__"):
            obj = callback.__self__
            info = f"{obj.__class__.__name__}.{callback.__name__}"

        elif hasattr(callback, "__qualname__"):
            # Regular function, static method, or class method
            module = getattr(callback, "__module__", "<unknown>")
            info = f"{module}.{callback.__qualname__}"

        else:
            # Fallback for unusual callables
            info = str(callback)

        return info

    def to_dict(self) -> dict:
        """Convert the registry structure to a dictionary."""
        data = {}
        for name, event in self._events.items():
            event_data = event.to_dict()
            event_data["handlers"] = [
                self._get_callback_info(handler)
                for handler in self._subscriptions.get(name, ())
            ]
            data[name] = event_data

        return data

    def to_string(self) -> str:
        """Returns a string representation of the registry."""
        return json.dumps(self.to_dict(), indent=4)

    def export(self, filepath: Union[str, os.PathLike]) -> None:
        """Export registry structure to filepath."""
        with open(filepath, "w") as outfile:
            json.dump(self.to_dict(), outfile, indent=4)
