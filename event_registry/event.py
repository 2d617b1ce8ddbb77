"""
Event definitions held by the registry.

An EventDefinition is the declaration side of an event: its name, the ordered
parameters its handlers receive, a description and the object that registered
it. Parameters are normalized and validated when the definition is built, so a
definition that exists is always well-formed.
"""

from typing import Any
from typing import Callable
from typing import Optional
from typing import Sequence

from event_registry.errors import ArgumentMismatchError
from event_registry.errors import DuplicateParameterError
from event_registry.errors import InvalidEventError
from event_registry.errors import InvalidParameterListError
from event_registry.errors import InvalidParameterOrderError
from event_registry.parameter import ABSENT
from event_registry.parameter import ParameterSignature
from event_registry.parameter import category_of


HANDLER = Callable[..., Any]
"""
A function subscribed to an event. Called positionally with the published
arguments. Return values are ignored.
"""


def _normalize_parameters(parameters: Any) -> tuple[ParameterSignature, ...]:
    """Convert raw descriptors into ParameterSignatures."""
    if parameters is None:
        return ()

    if isinstance(parameters, (str, bytes)) or not isinstance(parameters, Sequence):
        raise InvalidParameterListError(
            "Expected parameters to be a sequence of parameter definitions "
            f"(the sequence can be empty), got {type(parameters).__name__}."
        )

    return tuple(
        param
        if isinstance(param, ParameterSignature)
        else ParameterSignature.from_descriptor(param)
        for param in parameters
    )


class EventDefinition(object):
    """A registered event and its handler parameter signature."""

    def __init__(
        self,
        name: str,
        parameters: Optional[Sequence[Any]] = None,
        description: str = "",
        registrant: Any = None,
    ) -> None:
        """
        Args:
            name (str): The event name.
            parameters (Optional[Sequence]): ParameterSignatures or raw
                descriptor mappings, in the order handlers receive them.
                e.g. handlers shaped like greet(first_name, surname=None) are
                declared with
                [
                    {"name": "first_name", "type": "string"},
                    {"name": "surname", "type": "string", "optional": True},
                ]
            description (str): What the event means.
            registrant (Any): The object that registered the event.
        Raises:
            InvalidSignatureError: If a descriptor is malformed.
            InvalidParameterListError: If parameters isn't a sequence.
            InvalidEventError: If name or description are malformed.
            InvalidParameterOrderError: If a required parameter follows an
                optional one.
            DuplicateParameterError: If two parameters share a name.
        """
        self.name = name
        self.parameters = _normalize_parameters(parameters)
        self.description = "" if description is None else description
        self.registrant = registrant

        self.handlers: tuple[HANDLER, ...] = ()
        """Handlers subscribed when the registry last handed this event out."""

        self._validate()

    def __repr__(self) -> str:
        params = ", ".join(p.describe() for p in self.parameters)
        return f"<EventDefinition {self.name}({params})>"

    def _validate(self) -> None:
        if not isinstance(self.name, str) or len(self.name) <= 0:
            raise InvalidEventError(
                "Expected the event name to be a string with at least 1 character."
            )

        optional_found = False
        for param in self.parameters:
            if param.optional:
                optional_found = True
            elif optional_found:
                raise InvalidParameterOrderError(
                    f"Event '{self.name}': required parameter '{param.name}' "
                    "cannot follow an optional parameter."
                )

        seen: set[str] = set()
        for position, param in enumerate(self.parameters):
            if param.name in seen:
                raise DuplicateParameterError(
                    f"Event '{self.name}': parameter {position} "
                    f"('{param.name}') is already defined.",
                    position,
                )
            seen.add(param.name)

        if not isinstance(self.description, str):
            raise InvalidEventError(
                f"Expected description of event '{self.name}' to be a string."
            )

    @property
    def required_count(self) -> int:
        """Number of leading required parameters."""
        count = 0
        for param in self.parameters:
            if param.optional:
                break
            count += 1
        return count

    def format_parameters(self) -> str:
        """Parameters in short form, e.g. 'x: number, label?: string'."""
        return ", ".join(param.describe() for param in self.parameters)

    def check_arguments(self, args: Sequence[Any]) -> None:
        """
        Check positional arguments against the declared parameters.

        A missing or None argument is accepted only for optional parameters.
        Arguments past the declared parameters are not checked.

        Raises:
            ArgumentMismatchError: On the first argument whose type doesn't
                match its parameter.
        """
        for position, param in enumerate(self.parameters):
            value = args[position] if position < len(args) else None
            if param.matches(value):
                continue

            category = category_of(value)
            if param.optional and category is None:
                continue

            actual = ABSENT if category is None else category.value
            raise ArgumentMismatchError(
                f"The arguments given don't match those defined for event "
                f"'{self.name}'. Expected argument {position} ('{param.name}') "
                f'to be of type "{param.type.value}" but found type "{actual}".',
                position=position,
                expected=param.type.value,
                actual=actual,
            )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready description of the event, without handlers."""
        return {
            "description": self.description,
            "registrant": None if self.registrant is None else repr(self.registrant),
            "parameters": [param.to_dict() for param in self.parameters],
        }
