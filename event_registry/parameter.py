"""
Parameter signatures for registered events.

A ParameterSignature describes one positional argument that handlers of an
event receive: its name, its type tag, whether it may be left out, and a
description for documentation tools.

Type tags form the closed ParameterType enumeration. category_of() maps a
runtime Python value onto the same tags so published arguments can be checked
against a declaration.
"""

import enum
import numbers
from dataclasses import dataclass
from typing import Any
from typing import Mapping
from typing import Optional

from event_registry.errors import InvalidSignatureError


class ParameterType(str, enum.Enum):
    """The type tags a parameter can be declared with."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SYMBOL = "symbol"
    """Enum members, used as unique named tokens."""
    FUNCTION = "function"
    """Any callable, classes included."""
    OBJECT = "object"
    """Everything that fits no other tag: containers, instances, bytes..."""

    def __str__(self) -> str:
        return self.value


ABSENT = "absent"
"""Category reported for a missing or None argument."""


def category_of(value: Any) -> Optional[ParameterType]:
    """
    Classify a runtime value into a ParameterType.

    Returns None for None, which counts as an absent argument.
    """
    if value is None:
        return None
    # bool is a subclass of int, check it first.
    if isinstance(value, bool):
        return ParameterType.BOOLEAN
    if isinstance(value, numbers.Number):
        return ParameterType.NUMBER
    if isinstance(value, str):
        return ParameterType.STRING
    if isinstance(value, enum.Enum):
        return ParameterType.SYMBOL
    if callable(value):
        return ParameterType.FUNCTION
    return ParameterType.OBJECT


@dataclass(frozen=True)
class ParameterSignature(object):
    """One expected handler argument. Validated on construction."""

    name: str
    """The parameter name, unique within its event."""

    type: ParameterType
    """The declared type tag. A plain tag string is converted."""

    optional: bool = False
    """Optional parameters may be left out when publishing."""

    description: str = ""
    """Free text for documentation and debugging tools."""

    def __post_init__(self) -> None:
        # Defaulting happens before the checks, as descriptors often leave
        # optional and description unset.
        object.__setattr__(self, "optional", bool(self.optional))
        object.__setattr__(self, "description", self.description or "")

        if not isinstance(self.name, str) or len(self.name) <= 0:
            raise InvalidSignatureError(
                "Expected the parameter name to be a string with at least 1 "
                f"character, got {self.name!r}."
            )

        if not isinstance(self.optional, bool):
            raise InvalidSignatureError(
                f"Expected optional of parameter '{self.name}' to be a boolean."
            )

        try:
            param_type = ParameterType(self.type)
        except (ValueError, TypeError):
            valid = ", ".join(f'"{t.value}"' for t in ParameterType)
            raise InvalidSignatureError(
                f"The type {self.type!r} of parameter '{self.name}' is not a "
                f"valid parameter type. Expected one of: {valid}."
            ) from None
        object.__setattr__(self, "type", param_type)

        if not isinstance(self.description, str):
            raise InvalidSignatureError(
                f"Expected description of parameter '{self.name}' to be a string."
            )

    @classmethod
    def from_descriptor(cls, descriptor: Mapping[str, Any]) -> "ParameterSignature":
        """
        Build a signature from a raw descriptor mapping.

        Args:
            descriptor (Mapping[str, Any]): A mapping with 'name' and 'type'
                keys, and optionally 'optional' and 'description'.
        Raises:
            InvalidSignatureError: If descriptor isn't a mapping or any of its
                values are invalid.
        """
        if not isinstance(descriptor, Mapping):
            raise InvalidSignatureError(
                f"Unexpected parameter definition {descriptor!r}, expected a "
                "mapping with 'name' and 'type' keys."
            )

        return cls(
            name=descriptor.get("name"),
            type=descriptor.get("type"),
            optional=descriptor.get("optional", False),
            description=descriptor.get("description", ""),
        )

    def matches(self, value: Any) -> bool:
        """True if value's category is this parameter's declared type."""
        return category_of(value) is self.type

    def describe(self) -> str:
        """Short form used in messages, e.g. 'count?: number'."""
        marker = "?" if self.optional else ""
        return f"{self.name}{marker}: {self.type.value}"

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready descriptor, the inverse of from_descriptor()."""
        return {
            "name": self.name,
            "type": self.type.value,
            "optional": self.optional,
            "description": self.description,
        }
