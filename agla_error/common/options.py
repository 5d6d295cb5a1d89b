import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple, TypedDict

from .context import ErrorContext
from .severity import ErrorSeverity

logger = logging.getLogger(__name__)

RESERVED_OPTION_KEYS: Tuple[str, ...] = ("code", "severity", "timestamp", "context", "cause")


class ErrorOptions(TypedDict, total=False):
    """
    Structured third constructor argument. Every key is optional; missing keys stay unset.
    """

    code: str
    severity: ErrorSeverity
    timestamp: datetime
    context: ErrorContext
    # Legacy string slot, unrelated to the causal link set by chain().
    cause: str


@dataclass(frozen=True)
class NormalizedOptions:
    code: Optional[str] = None
    severity: Optional[Any] = None
    timestamp: Optional[Any] = None
    context: Optional[Any] = None
    cause: Optional[str] = None


def is_structured_options(options: Any) -> bool:
    """
    True when the value is a mapping carrying at least one reserved option key.
    """
    if not isinstance(options, Mapping):
        return False
    return any(key in options for key in RESERVED_OPTION_KEYS)


def normalize_options(options: Any = None) -> NormalizedOptions:
    """
    Decode the third constructor argument into its canonical form.

    Two call styles share the same positional slot without a discriminant:
    a structured ErrorOptions mapping, or (older callers) a bare context mapping.
    A mapping that carries any reserved key is read as structured options, so a
    context that uses one of those keys as data is misread. Callers that need to
    avoid this should go through AglaError.from_context().

    Values are stored as given; severity and timestamp are not validated here.
    """
    if options is None:
        return NormalizedOptions()

    if is_structured_options(options):
        return NormalizedOptions(
            code=options.get("code"),
            severity=options.get("severity"),
            timestamp=options.get("timestamp"),
            context=options.get("context"),
            cause=options.get("cause"),
        )

    logger.debug("No reserved option keys in %s; treating it as a legacy context", type(options).__name__)
    return NormalizedOptions(context=options)
