"""Handle to a container created by the runtime manager."""

from typing import TYPE_CHECKING, BinaryIO, Callable, TypeVar

import requests
import structlog
import urllib3
from docker.errors import DockerException

from ...models.errors import ContainerOperationError, OperationCancelledError

if TYPE_CHECKING:
    from .manager import RuntimeManager

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ContainerHandle:
    """A created container, bound to the manager whose connection created it."""

    def __init__(self, manager: "RuntimeManager", container_id: str):
        self._manager = manager
        self.id = container_id

    @property
    def short_id(self) -> str:
        return self.id[:12]

    def __repr__(self) -> str:
        return f"<ContainerHandle: {self.short_id}>"

    def _call(self, operation: str, fn: Callable[..., T]) -> T:
        client = self._manager.get_client()
        try:
            return fn(client.api)
        except (DockerException, requests.exceptions.RequestException) as e:
            if self._manager.cancelled:
                raise OperationCancelledError() from e
            logger.error(f"Failed to {operation} container", container_id=self.short_id, error=str(e))
            raise ContainerOperationError(self.id, operation, e) from e

    def start(self) -> None:
        """Start the container."""
        self._call("start", lambda api: api.start(self.id))
        logger.debug("Container started", container_id=self.short_id)

    def wait(self) -> int:
        """Block until the container exits and return its exit status."""
        result = self._call("wait", lambda api: api.wait(self.id))
        return int(result.get("StatusCode", -1))

    def logs(self, sink: BinaryIO) -> None:
        """Relay the container's combined stdout/stderr to ``sink`` until it exits."""
        stream = self._call(
            "read logs of",
            lambda api: api.logs(self.id, stdout=True, stderr=True, stream=True, follow=True),
        )
        try:
            for chunk in stream:
                sink.write(chunk)
            sink.flush()
        except (
            DockerException,
            requests.exceptions.RequestException,
            urllib3.exceptions.HTTPError,
        ) as e:
            if self._manager.cancelled:
                raise OperationCancelledError() from e
            raise ContainerOperationError(self.id, "read logs of", e) from e
        finally:
            close = getattr(stream, "close", None)
            if close is not None:
                close()

    def remove(self, force: bool = False) -> None:
        """Remove the container."""
        self._call("remove", lambda api: api.remove_container(self.id, force=force))
        logger.debug("Container removed", container_id=self.short_id)
