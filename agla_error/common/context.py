from collections.abc import Mapping
from typing import Any, Dict

# Shared by reference with the caller; errors never copy it.
ErrorContext = Dict[str, Any]


class InvalidErrorContextError(TypeError):
    """Raised by guard_error_context when the value is not a mapping."""


def is_valid_error_context(value: Any) -> bool:
    return isinstance(value, Mapping)


def guard_error_context(value: Any) -> ErrorContext:
    """
    Return the value unchanged if it can serve as an error context, otherwise raise.
    """
    if not is_valid_error_context(value):
        raise InvalidErrorContextError(
            f"Invalid error context: expected mapping, got {type(value).__name__}"
        )
    return value
