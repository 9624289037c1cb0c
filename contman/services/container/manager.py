"""Runtime manager: image presence, pulls and container creation."""

import os
import sys
from typing import Any, BinaryIO, List, Mapping, Optional, Union

import docker
import requests
import structlog
import urllib3
from docker.errors import DockerException
from docker.types import Mount as DockerMount

from ...config import settings
from ...models import ContainerConfig, Mount
from ...models.errors import (
    CreateError,
    ListError,
    OperationCancelledError,
    PullError,
    ReferenceParseError,
)
from ...utils.reference import parse_normalized_named, with_default_tag
from .auth import get_auth_config
from .client import DockerClientFactory
from .handle import ContainerHandle

logger = structlog.get_logger(__name__)

SHELL_ENTRYPOINT = ["sh"]
NETWORK_MODE = "host"
DOCKER_SOCKET_PATH = "/var/run/docker.sock"
DOCKER_CONFIG_DIR = "/root/.docker"

_DAEMON_ERRORS = (DockerException, requests.exceptions.RequestException)
# Raised while reading a streamed response body (broken connection, read timeout).
_STREAM_ERRORS = (*_DAEMON_ERRORS, urllib3.exceptions.HTTPError)


class RuntimeManager:
    """Mediates every interaction with the Docker daemon.

    One manager owns one connection. Calls are blocking and single-shot;
    nothing is retried. ``cancel()`` releases the connection and makes all
    later calls fail with ``OperationCancelledError``.
    """

    def __init__(
        self,
        timeout: Optional[int] = None,
        auth_config_path: Optional[str] = None,
    ):
        """Connect to the daemon.

        Raises:
            DaemonConnectionError: the client cannot be constructed
        """
        self._connection = DockerClientFactory(timeout=timeout)
        self._auth_config_path = auth_config_path or settings.docker.config_path

    def __enter__(self) -> "RuntimeManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()

    @property
    def cancelled(self) -> bool:
        return self._connection.cancelled

    def get_client(self) -> docker.DockerClient:
        """Get the Docker client of this manager's connection."""
        return self._connection.get_client()

    def cancel(self) -> None:
        """Release the daemon connection."""
        self._connection.cancel()

    close = cancel

    def has_image(self, image: str) -> bool:
        """Check whether ``image`` is present locally.

        Untagged references are checked as ``:latest``. Listing failures are
        logged and reported as absent so callers go on to pull.
        """
        if not image:
            return False

        image = with_default_tag(image)

        try:
            images = self.get_client().api.images(all=True)
        except (OperationCancelledError, *_DAEMON_ERRORS) as e:
            error = ListError(cause=e)
            logger.error(error.message, image=image, error=str(e))
            return False

        for image_info in images:
            if image in (image_info.get("RepoTags") or ()):
                return True
        return False

    def pull_image(self, image: str, sink: Optional[BinaryIO] = None) -> None:
        """Pull ``image`` from its registry, relaying progress to ``sink``.

        ``sink`` defaults to the process's standard output. Progress lines are
        the daemon's JSON-lines, written verbatim.

        Raises:
            ReferenceParseError: ``image`` is not a valid reference
            PullError: the daemon rejected the pull request
            OperationCancelledError: the manager has been cancelled
        """
        try:
            named = parse_normalized_named(image)
        except ReferenceParseError as e:
            logger.error("Cannot parse image name", image=image, error=str(e))
            raise

        credentials = get_auth_config(named.domain, config_path=self._auth_config_path)
        logger.debug(
            "Resolved registry credentials",
            registry=named.domain,
            anonymous=credentials.is_anonymous,
        )

        client = self.get_client()
        try:
            stream = client.api.pull(
                image,
                auth_config=credentials.to_auth_config(),
                stream=True,
                decode=False,
            )
        except _DAEMON_ERRORS as e:
            if self.cancelled:
                raise OperationCancelledError() from e
            logger.error("Error pulling image", image=image, error=str(e))
            raise PullError(image, e) from e

        self._relay(stream, sink if sink is not None else sys.stdout.buffer)
        logger.info("Pulled image", image=image)

    def _relay(self, stream, sink: BinaryIO) -> None:
        # Best effort: copy failures are logged, not raised.
        try:
            for chunk in stream:
                sink.write(chunk)
            sink.flush()
        except (OSError, ValueError, *_STREAM_ERRORS) as e:
            logger.warning("Pull progress relay interrupted", error=str(e))
        finally:
            close = getattr(stream, "close", None)
            if close is not None:
                close()

    def ensure_image(self, image: str, sink: Optional[BinaryIO] = None) -> bool:
        """Pull ``image`` unless it is already present. Returns True if pulled."""
        if self.has_image(image):
            logger.debug("Image already present", image=image)
            return False
        self.pull_image(image, sink=sink)
        return True

    def container_create(
        self, config: Union[ContainerConfig, Mapping[str, Any]]
    ) -> ContainerHandle:
        """Create a container running ``config.cmd`` through ``sh -c``.

        The working directory is the caller's current directory, mounts are
        bind mounts, and the container uses host networking. The daemon picks
        the container name.

        Raises:
            CreateError: the working directory cannot be resolved or the daemon
                rejected the container
            OperationCancelledError: the manager has been cancelled
        """
        if not isinstance(config, ContainerConfig):
            config = ContainerConfig.model_validate(config)

        try:
            working_dir = os.getcwd()
        except OSError as e:
            logger.error("Cannot resolve working directory", error=str(e))
            raise CreateError("Cannot resolve working directory", e) from e

        mounts = [
            DockerMount(
                target=m.target,
                source=m.source,
                type="bind",
                read_only=m.read_only,
            )
            for m in config.mounts
        ]
        env = [f"{key}={value}" for key, value in config.env.items()]

        client = self.get_client()
        try:
            host_config = client.api.create_host_config(
                mounts=mounts,
                network_mode=NETWORK_MODE,
            )
            resp = client.api.create_container(
                image=config.image,
                entrypoint=SHELL_ENTRYPOINT,
                command=["-c", config.cmd],
                working_dir=working_dir,
                environment=env,
                host_config=host_config,
            )
        except _DAEMON_ERRORS as e:
            if self.cancelled:
                raise OperationCancelledError() from e
            logger.error("Error creating container", image=config.image, error=str(e))
            raise CreateError("Error creating container", e) from e

        container = ContainerHandle(self, resp["Id"])
        logger.info(
            f"Created container {container.short_id}",
            image=config.image,
            mounts=[str(m) for m in config.mounts],
        )
        return container

    def get_system_mounts(self) -> List[Mount]:
        """Mounts a container needs to drive the daemon with the host's credentials."""
        return [
            Mount(source=DOCKER_SOCKET_PATH, target=DOCKER_SOCKET_PATH),
            Mount(source=DOCKER_CONFIG_DIR, target=DOCKER_CONFIG_DIR, read_only=True),
        ]
