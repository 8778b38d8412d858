"""
Error Tracking Types

Error classes, recorded errors and the exception value used to report them.
"""

import traceback
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Type


class ErrorType(Enum):
    """Class of an error seen by the platform."""
    ERROR = "error"
    WARNING = "warning"
    PARSE = "parse"
    NOTICE = "notice"
    CORE_ERROR = "core_error"
    CORE_WARNING = "core_warning"
    COMPILE_ERROR = "compile_error"
    COMPILE_WARNING = "compile_warning"
    USER_WARNING = "user_warning"
    USER_NOTICE = "user_notice"
    STRICT = "strict"
    DEPRECATED = "deprecated"


# Classes that never reach the exception/error hooks and are only
# reported when the request ends.
FATAL_ERROR_TYPES: FrozenSet[ErrorType] = frozenset({
    ErrorType.ERROR,
    ErrorType.PARSE,
    ErrorType.CORE_ERROR,
    ErrorType.CORE_WARNING,
    ErrorType.COMPILE_ERROR,
    ErrorType.COMPILE_WARNING,
    ErrorType.STRICT,
})


def classify_exception(exc: BaseException) -> Optional[ErrorType]:
    """
    Get the fatal error class of an exception.

    Args:
        exc: Exception raised while handling a request

    Returns:
        The fatal ErrorType, or None for ordinary recoverable exceptions
    """
    if isinstance(exc, SyntaxError):
        return ErrorType.PARSE
    if isinstance(exc, ImportError):
        return ErrorType.COMPILE_ERROR
    if isinstance(exc, (MemoryError, RecursionError)):
        return ErrorType.ERROR
    if isinstance(exc, SystemError):
        return ErrorType.CORE_ERROR
    return None


def classify_warning(category: Type[Warning]) -> ErrorType:
    """Get the error class of a warning category."""
    if issubclass(category, SyntaxWarning):
        return ErrorType.COMPILE_WARNING
    if issubclass(category, ImportWarning):
        return ErrorType.CORE_WARNING
    if issubclass(category, BytesWarning):
        return ErrorType.STRICT
    if issubclass(category, (DeprecationWarning, PendingDeprecationWarning, FutureWarning)):
        return ErrorType.DEPRECATED
    if issubclass(category, UserWarning):
        return ErrorType.USER_WARNING
    if issubclass(category, RuntimeWarning):
        return ErrorType.WARNING
    return ErrorType.NOTICE


@dataclass(frozen=True)
class ErrorRecord:
    """An error recorded by the platform, as reported by its last-error slot."""

    type: ErrorType
    message: str
    filename: Optional[str] = None
    lineno: Optional[int] = None
    exception: Optional[BaseException] = None

    @property
    def is_fatal(self) -> bool:
        """Check if this error is only reported at end of request."""
        return self.type in FATAL_ERROR_TYPES

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorRecord":
        """
        Build a record from an exception.

        The location is the innermost traceback frame, or the source
        position for syntax errors.
        """
        error_type = classify_exception(exc) or ErrorType.ERROR
        filename = None
        lineno = None

        if isinstance(exc, SyntaxError):
            filename, lineno = exc.filename, exc.lineno
        elif exc.__traceback__ is not None:
            frame = traceback.extract_tb(exc.__traceback__)[-1]
            filename, lineno = frame.filename, frame.lineno

        return cls(
            type=error_type,
            message=str(exc),
            filename=filename,
            lineno=lineno,
            exception=exc,
        )


class ReportedError(Exception):
    """
    Exception value wrapping an ErrorRecord for capture.

    Warnings and fatal errors are not raised as ordinary exceptions, so
    they are wrapped in this before being handed to the client.
    """

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        filename: Optional[str] = None,
        lineno: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.filename = filename
        self.lineno = lineno

    @classmethod
    def from_record(cls, record: ErrorRecord) -> "ReportedError":
        error = cls(
            message=record.message,
            error_type=record.type,
            filename=record.filename,
            lineno=record.lineno,
        )
        if record.exception is not None:
            error.__cause__ = record.exception
        return error

    def __str__(self) -> str:
        if self.filename is None:
            return self.message
        return f"{self.message} ({self.filename}:{self.lineno})"
