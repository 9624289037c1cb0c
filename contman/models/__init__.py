"""Data models."""

from .auth import AuthCredentials
from .container import ContainerConfig, Mount
from .errors import (
    ContainerOperationError,
    ContmanError,
    CreateError,
    DaemonConnectionError,
    ErrorType,
    ListError,
    OperationCancelledError,
    PullError,
    ReferenceParseError,
)

__all__ = [
    "AuthCredentials",
    "ContainerConfig",
    "Mount",
    "ContainerOperationError",
    "ContmanError",
    "CreateError",
    "DaemonConnectionError",
    "ErrorType",
    "ListError",
    "OperationCancelledError",
    "PullError",
    "ReferenceParseError",
]
