"""Non-negative integer types for epochs, slots and slot counts."""

from typing import Any

from pydantic import Field
from typing_extensions import Annotated

from .exceptions import InvalidArgumentError

# A type alias for epoch numbers, slot numbers and absolute slot counts.
NonNegativeInt = Annotated[int, Field(ge=0)]


def require_non_negative(name: str, value: Any) -> int:
    """
    Return `value` if it is a non-negative integer.

    Booleans are rejected even though they are integers in Python.

    Raises:
        InvalidArgumentError: If the value is negative or not an integer.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(name, value)
    return value
