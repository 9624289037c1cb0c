"""Docker client factory and connection state."""

import threading
from typing import Optional

import docker
import structlog
from docker.errors import DockerException

from ...config import settings
from ...models.errors import DaemonConnectionError, OperationCancelledError

logger = structlog.get_logger(__name__)


class DockerClientFactory:
    """Owns the single daemon connection of a runtime manager.

    The client is built once from the environment (``DOCKER_HOST``,
    ``DOCKER_TLS_VERIFY``, ``DOCKER_CERT_PATH``) with the API version
    negotiated against the daemon. ``cancel()`` releases it; from then on
    every call through this factory fails with ``OperationCancelledError``.
    """

    def __init__(self, timeout: Optional[int] = None):
        """Create the daemon client.

        Raises:
            DaemonConnectionError: the environment is malformed or the daemon
                cannot be reached for version negotiation
        """
        # Guards the client reference and the cancelled flag only.
        self._lock = threading.Lock()
        self._cancelled = False

        try:
            self._client: Optional[docker.DockerClient] = docker.from_env(
                version="auto",
                timeout=timeout or settings.docker.timeout,
            )
        except DockerException as e:
            logger.error("Cannot create Docker client", error=str(e))
            raise DaemonConnectionError(cause=e) from e

        logger.debug(
            "Docker client initialized",
            base_url=self._client.api.base_url,
            api_version=self._client.api.api_version,
        )

    @property
    def cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    def get_client(self) -> docker.DockerClient:
        """Return the live client.

        Raises:
            OperationCancelledError: ``cancel()`` has been called
        """
        with self._lock:
            if self._cancelled or self._client is None:
                raise OperationCancelledError()
            return self._client

    def cancel(self) -> None:
        """Release the connection, aborting in-flight and future calls."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            client, self._client = self._client, None

        if client is not None:
            try:
                client.close()
            except DockerException as e:
                logger.error("Error closing Docker client", error=str(e))
        logger.debug("Docker client cancelled")
