import json
import logging
import traceback
from collections.abc import Mapping
from dataclasses import replace
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar

from ..config import LibraryConfig, SerializationConfig
from .context import ErrorContext
from .options import ErrorOptions, NormalizedOptions, normalize_options
from .serialization import dumps_compact, format_timestamp, join_error_line, json_default

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="AglaError")


class AglaError(Exception):
    """
    Abstract base for structured errors: a type tag plus optional code, severity,
    timestamp and context, with a non-mutating chain() for attaching causes.

    Concrete subtypes must accept (error_type, message, options) in their
    constructor, since chain() rebuilds instances through it. The context mapping
    is held by reference and never copied: mutating it after construction is
    visible through the error.
    """

    serialization: ClassVar[SerializationConfig] = SerializationConfig()

    def __init__(self, error_type: str, message: str, options: Optional[Any] = None):
        if type(self) is AglaError:
            raise TypeError("AglaError is abstract; raise a concrete subclass instead")

        super().__init__(message)
        self._message = message
        self._error_type = error_type
        self._options: NormalizedOptions = normalize_options(options)
        self._cause: Any = None
        self.name = type(self).__name__
        self._stack = self._capture_stack()

    @classmethod
    def from_options(
        cls: Type[E],
        error_type: str,
        message: str,
        *,
        code: Optional[str] = None,
        severity: Any = None,
        timestamp: Any = None,
        context: Optional[ErrorContext] = None,
        cause: Optional[str] = None,
    ) -> E:
        """Build from keyword options; the keywords are never read as a legacy context."""
        options: ErrorOptions = {
            "code": code,
            "severity": severity,
            "timestamp": timestamp,
            "context": context,
            "cause": cause,
        }
        return cls(error_type, message, options)

    @classmethod
    def from_context(cls: Type[E], error_type: str, message: str, context: ErrorContext) -> E:
        """Build with a bare context, even one that uses reserved option keys as data."""
        return cls(error_type, message, {"context": context})

    @classmethod
    def configure_serialization(cls, config: SerializationConfig) -> None:
        cls.serialization = config

    @property
    def error_type(self) -> str:
        return self._error_type

    @property
    def message(self) -> str:
        return self._message

    @property
    def code(self) -> Optional[str]:
        return self._options.code

    @property
    def severity(self) -> Any:
        return self._options.severity

    @property
    def timestamp(self) -> Any:
        return self._options.timestamp

    @property
    def context(self) -> Optional[ErrorContext]:
        return self._options.context

    @context.setter
    def context(self, context: ErrorContext) -> None:
        # Wholesale replacement; no merge.
        self._options = replace(self._options, context=context)

    @property
    def legacy_cause(self) -> Optional[str]:
        """The string 'cause' option. Stored as given and not used by chain()."""
        return self._options.cause

    @property
    def cause(self) -> Any:
        """Causal link set by chain(); None until then."""
        return self._cause

    @property
    def stack(self) -> str:
        frames = "".join(self._stack)
        return f"{self.name}: {self.message}\n{frames}"

    @staticmethod
    def _capture_stack() -> List[str]:
        try:
            frames = traceback.extract_stack()
        except Exception as exc:
            logger.debug("Stack capture unavailable: %s", exc)
            return []
        # Drop the frames inside this module (constructor and capture itself).
        while frames and frames[-1].filename == __file__:
            frames.pop()
        # Formatted eagerly so the error stays picklable.
        return frames.format()

    def chain(self: E, cause: Any) -> E:
        """
        Return a new error of the same concrete type carrying `cause` as its causal link.

        The copy keeps error_type, message, code, severity, timestamp and the same
        context object. This instance is left untouched. Any value is accepted as
        the cause, including None, non-exceptions and this error itself; no cycle
        detection is done. Each instance references only its immediate cause.
        """
        options: ErrorOptions = {
            "code": self.code,
            "severity": self.severity,
            "timestamp": self.timestamp,
            "context": self.context,
        }
        # Raw stored message, so a subtype's message property is not applied twice.
        chained = type(self)(self.error_type, self._message, options)
        chained._cause = cause
        # Only exceptions are allowed in __cause__; other values stay reachable via .cause.
        if isinstance(cause, BaseException):
            chained.__cause__ = cause
        return chained

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain record of the error. Absent fields are left out rather than set to None.
        """
        record: Dict[str, Any] = {
            "errorType": self.error_type,
            "message": self.message,
        }
        if self.code:
            record["code"] = self.code
        if self.severity:
            record["severity"] = self.severity
        if self.timestamp is not None:
            record["timestamp"] = format_timestamp(self.timestamp)
        if self._has_context():
            record["context"] = self.context
        return record

    def to_json(self, **kwargs: Any) -> str:
        """
        JSON text of to_dict(). Serialization errors from the context propagate.
        """
        config = self.serialization
        kwargs.setdefault("ensure_ascii", config.ensure_ascii)
        kwargs.setdefault("sort_keys", config.sort_keys)
        kwargs.setdefault("default", json_default)
        return json.dumps(self.to_dict(), **kwargs)

    def to_string(self) -> str:
        """
        Single line "<error_type>: <message>[ <context json>]", without cause or stack.
        """
        return join_error_line(self.error_type, self.message, self._context_json())

    def _has_context(self) -> bool:
        # Empty mappings count as present; falsy legacy values such as 0 or "" do not.
        context = self.context
        if context is None:
            return False
        return isinstance(context, Mapping) or bool(context)

    def _context_json(self) -> Optional[str]:
        if not self._has_context():
            return None

        config = self.serialization
        try:
            return dumps_compact(self.context, ensure_ascii=config.ensure_ascii, sort_keys=config.sort_keys)
        except (TypeError, ValueError) as exc:
            if config.on_context_error == "raise":
                raise
            logger.warning("Omitting context from %s string form: %s", self.error_type, exc)
            return None

    def __reduce__(self) -> Tuple[Any, ...]:
        # Exception.__reduce__ would call type(self)(message) and lose the other arguments.
        options: ErrorOptions = {
            "code": self.code,
            "severity": self.severity,
            "timestamp": self.timestamp,
            "context": self.context,
            "cause": self.legacy_cause,
        }
        state = dict(self.__dict__)
        # __cause__ is not in __dict__; BaseException.__setstate__ assigns it back via setattr.
        if self.__cause__ is not None:
            state["__cause__"] = self.__cause__
        return type(self), (self._error_type, self._message, options), state

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(error_type={self.error_type!r}, "
            f"message={self.message!r}, code={self.code!r})"
        )

def apply_config(config: LibraryConfig, error_cls: Type[AglaError] = AglaError) -> None:
    """Install a loaded LibraryConfig's serialization policy on error_cls and its subclasses."""
    error_cls.configure_serialization(config.serialization)
