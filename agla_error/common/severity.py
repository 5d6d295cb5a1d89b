from enum import Enum
from typing import Any, Tuple


class ErrorSeverity(str, Enum):
    """
    Closed set of severity tokens attached to an AglaError.
    Members are plain strings on the wire ("fatal", "error", ...).
    """

    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


SEVERITY_VALUES: Tuple[str, ...] = tuple(member.value for member in ErrorSeverity)


def is_valid_severity(value: Any) -> bool:
    """
    Exact-match membership check. No trimming or case folding; non-strings are rejected.
    """
    if not isinstance(value, str):
        return False
    # Tuple membership compares with ==, which also accepts ErrorSeverity members.
    return value in SEVERITY_VALUES
