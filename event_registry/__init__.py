"""
# Event Registry

An in-process publish-subscribe registry. Events are declared with named,
typed parameters, handlers subscribe to them, and publishing calls every
subscribed handler in subscription order.

    registry = event_registry.Registry(validate_on_publish=True)
    registry.register(
        "sum",
        [{"name": "x", "type": "number"}, {"name": "y", "type": "number"}],
        "Two numbers to add.",
    )
    registry.subscribe("sum", lambda x, y: print(x + y))
    registry.publish("sum", 3, 4)

Each Registry is independent. Construct one and pass it to the components
that publish or subscribe.
"""

from event_registry import handlers
from event_registry.errors import AlreadyRegisteredError
from event_registry.errors import ArgumentMismatchError
from event_registry.errors import ArityMismatchError
from event_registry.errors import DeclarationError
from event_registry.errors import DuplicateParameterError
from event_registry.errors import InvalidEventError
from event_registry.errors import InvalidParameterListError
from event_registry.errors import InvalidParameterOrderError
from event_registry.errors import InvalidSignatureError
from event_registry.errors import MissingEventNameError
from event_registry.errors import MissingHandlerError
from event_registry.errors import NotRegisteredError
from event_registry.errors import RegistryError
from event_registry.errors import UsageError
from event_registry.event import HANDLER
from event_registry.event import EventDefinition
from event_registry.parameter import ParameterSignature
from event_registry.parameter import ParameterType
from event_registry.parameter import category_of
from event_registry.registry import Registry


version_major = 1
version_minor = 0
version_patch = 0
__version__ = f"{version_major}.{version_minor}.{version_patch}"

__all__ = [
    "AlreadyRegisteredError",
    "ArgumentMismatchError",
    "ArityMismatchError",
    "DeclarationError",
    "DuplicateParameterError",
    "EventDefinition",
    "HANDLER",
    "InvalidEventError",
    "InvalidParameterListError",
    "InvalidParameterOrderError",
    "InvalidSignatureError",
    "MissingEventNameError",
    "MissingHandlerError",
    "NotRegisteredError",
    "ParameterSignature",
    "ParameterType",
    "Registry",
    "RegistryError",
    "UsageError",
    "category_of",
    "handlers",
]
