"""
Exceptions raised by the event registry.

Declaration errors are raised while building parameter signatures and event
definitions, usage errors when the public registry API is called incorrectly,
and ArgumentMismatchError when publish-time validation fails.

Every error is raised synchronously to the direct caller and leaves the
registry unchanged.
"""


class RegistryError(Exception):
    """Base class for every error raised by the event registry."""


# -----Declaration Errors------------------------------------------------------


class DeclarationError(RegistryError):
    """Raised when an event or parameter declaration is malformed."""


class InvalidSignatureError(DeclarationError):
    """Raised when a parameter descriptor has a bad name, type or flag."""


class InvalidParameterListError(DeclarationError):
    """Raised when an event's parameters are not a sequence."""


class InvalidParameterOrderError(DeclarationError):
    """Raised when a required parameter follows an optional parameter."""


class DuplicateParameterError(DeclarationError):
    """Raised when two parameters of one event share a name."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


class InvalidEventError(DeclarationError):
    """Raised when an event's name or description is malformed."""


# -----Usage Errors------------------------------------------------------------


class UsageError(RegistryError):
    """Raised when the registry API is called with bad arguments."""


class MissingEventNameError(UsageError):
    """Raised when an operation is called without an event name."""


class NotRegisteredError(UsageError):
    """Raised when an operation targets an event that is not registered."""


class AlreadyRegisteredError(UsageError):
    """Raised when registering an event name that is already taken."""


class MissingHandlerError(UsageError):
    """Raised when subscribing without a callable handler."""


class ArityMismatchError(UsageError):
    """Raised when a handler cannot accept the event's required parameters."""


# -----Publish Errors----------------------------------------------------------


class ArgumentMismatchError(RegistryError):
    """Raised when published arguments don't match the declared parameters."""

    def __init__(
        self, message: str, position: int, expected: str, actual: str
    ) -> None:
        super().__init__(message)
        self.position = position
        self.expected = expected
        self.actual = actual
