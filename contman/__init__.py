"""contman - provision and run ephemeral command containers on a Docker daemon."""

from ._version import __version__
from .models import AuthCredentials, ContainerConfig, Mount
from .models.errors import (
    ContmanError,
    CreateError,
    DaemonConnectionError,
    ListError,
    OperationCancelledError,
    PullError,
    ReferenceParseError,
)
from .services.container import ContainerHandle, RuntimeManager
from .utils.logging import configure_default_logging

configure_default_logging()

__all__ = [
    "__version__",
    "AuthCredentials",
    "ContainerConfig",
    "ContainerHandle",
    "ContmanError",
    "CreateError",
    "DaemonConnectionError",
    "ListError",
    "Mount",
    "OperationCancelledError",
    "PullError",
    "ReferenceParseError",
    "RuntimeManager",
]
