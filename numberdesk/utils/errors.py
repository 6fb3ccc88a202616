"""Exception hierarchy for numberdesk.

Every error raised on purpose derives from ``NumberDeskError`` and carries
an ``ErrorCategory``, an operator-facing message and optional structured
details. Per-number failures inside a batch are not raised past the
executor; they become ``Failure`` outcomes carrying ``format_error_message``.
"""

from enum import Enum
from typing import Any, Dict, Optional

from .logging import get_logger


def _logger():
    # Resolved on use; LogManager imports this module while it starts up
    return get_logger(__name__)


class ErrorCategory(Enum):
    VALIDATION = "validation"
    BATCH = "batch"
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    FILE_SYSTEM = "file_system"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class NumberDeskError(Exception):
    """Root of all numberdesk errors."""

    category = ErrorCategory.UNKNOWN
    user_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.user_message
        self.details = dict(details or {})
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": type(self).__name__,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }


## Validation

class ValidationError(NumberDeskError):
    category = ErrorCategory.VALIDATION
    user_message = "Invalid input"


class EmptyBatchError(ValidationError):
    """No selected number is eligible for the requested action."""

    user_message = "No eligible phone numbers selected"


class UnknownResourceError(ValidationError):
    """An id that is not part of the loaded page."""

    user_message = "Phone number is not in the current list"


class DuplicateResourceError(ValidationError):
    user_message = "Phone number id appears more than once"


class MissingRequiredFieldError(ValidationError):
    user_message = "A required field is missing"


## Batch

class BatchError(NumberDeskError):
    category = ErrorCategory.BATCH
    user_message = "The batch operation failed"


class BatchInProgressError(BatchError):
    """A job was started while another one is still running."""

    user_message = "Another batch operation is still running"


class BatchStateError(BatchError):
    """Progress was updated in a way a job can never produce."""

    user_message = "Batch progress was updated out of order"


## Network

class NetworkError(NumberDeskError):
    category = ErrorCategory.NETWORK
    user_message = "Could not reach the admin API"


class ApiError(NetworkError):
    """The admin API answered with an error status or an unusable body."""

    user_message = "The admin API rejected the request"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        details = dict(details or {})
        if status_code is not None:
            details.setdefault("status_code", status_code)
        super().__init__(message, details)


class NetworkTimeoutError(NetworkError):
    user_message = "The admin API did not answer in time"


class AuthenticationError(NumberDeskError):
    category = ErrorCategory.AUTHENTICATION
    user_message = "Not authorised to use the admin API"


## Local Environment

class FileSystemError(NumberDeskError):
    category = ErrorCategory.FILE_SYSTEM
    user_message = "A file could not be read or written"


class ConfigurationError(NumberDeskError):
    category = ErrorCategory.CONFIGURATION
    user_message = "The configuration could not be applied"


class MissingConfigError(ConfigurationError):
    user_message = "No such configuration setting"


class InvalidConfigError(ConfigurationError):
    user_message = "Invalid configuration value"


## Reporting

class ErrorHandler:
    """Logs errors that are reported instead of raised."""

    @staticmethod
    def handle(error: Exception, context: str = "", log_traceback: bool = True) -> Dict[str, Any]:
        """Log ``error`` under ``context``.

        Returns:
            The error as a dictionary (see ``NumberDeskError.to_dict``)
        """
        if isinstance(error, NumberDeskError):
            report = error.to_dict()
        else:
            report = {
                "error_type": "UnknownError",
                "category": ErrorCategory.UNKNOWN.value,
                "message": str(error),
                "details": {"context": context},
            }

        text = f"{context}: {report['message']}" if context else report["message"]
        _logger().error(text, exc_info=error if log_traceback else None)
        return report


def format_error_message(error: BaseException) -> str:
    """Message shown to operators and stored in Failure outcomes."""
    if isinstance(error, NumberDeskError):
        return error.message
    return str(error) or type(error).__name__
