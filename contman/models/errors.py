"""Error types raised by the runtime manager."""

from enum import Enum
from typing import Optional


class ErrorType(str, Enum):
    """Error type enumeration."""

    CONNECTION = "connection"
    REFERENCE_PARSE = "reference_parse"
    PULL = "pull"
    CREATE = "create"
    LIST = "list"
    CANCELLED = "cancelled"
    CONTAINER_OPERATION = "container_operation"


class ContmanError(Exception):
    """Base exception for all runtime manager failures."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class DaemonConnectionError(ContmanError, ConnectionError):
    """The daemon client could not be constructed. The manager is unusable."""

    def __init__(
        self,
        message: str = "Cannot connect to the Docker daemon",
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, ErrorType.CONNECTION, cause)


class ReferenceParseError(ContmanError, ValueError):
    """An image reference does not follow the reference grammar."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(
            f"Cannot parse image reference {reference!r}: {reason}",
            ErrorType.REFERENCE_PARSE,
        )


class PullError(ContmanError):
    """The daemon rejected or could not start an image pull."""

    def __init__(self, image: str, cause: Optional[BaseException] = None):
        self.image = image
        super().__init__(f"Error pulling image {image}", ErrorType.PULL, cause)


class CreateError(ContmanError):
    """Container creation failed (working directory or daemon)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorType.CREATE, cause)


class ListError(ContmanError):
    """Listing local images failed."""

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__("Unable to list images", ErrorType.LIST, cause)


class OperationCancelledError(ContmanError):
    """The manager's connection was cancelled before or during the call."""

    def __init__(self, message: str = "Runtime manager has been cancelled"):
        super().__init__(message, ErrorType.CANCELLED)


class ContainerOperationError(ContmanError):
    """A lifecycle call on a created container failed."""

    def __init__(
        self,
        container_id: str,
        operation: str,
        cause: Optional[BaseException] = None,
    ):
        self.container_id = container_id
        self.operation = operation
        super().__init__(
            f"Failed to {operation} container {container_id[:12]}",
            ErrorType.CONTAINER_OPERATION,
            cause,
        )
