"""Pytest configuration and shared fixtures."""

import base64
import json
import os
from unittest.mock import MagicMock, patch

import pytest
from docker import APIClient, DockerClient

# Keep the developer's environment out of the tests
os.environ.pop("DOCKER_CONFIG_PATH", None)
os.environ.pop("LOG_FORMAT", None)
os.environ.pop("LOG_LEVEL", None)

from contman.services.container import RuntimeManager


CONTAINER_ID = "4f66ad9a0b2e7c1d9e8f0a1b2c3d4e5f60718293a4b5c6d7e8f90a1b2c3d4e5f"


class FakeStream:
    """Iterable response body that records whether it was closed."""

    def __init__(self, chunks, fail_after=None, error=None):
        self.chunks = list(chunks)
        self.fail_after = fail_after
        self.error = error or OSError("connection reset")
        self.closed = False

    def __iter__(self):
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i >= self.fail_after:
                raise self.error
            yield chunk

    def close(self):
        self.closed = True


@pytest.fixture
def container_id():
    """Id returned by the mocked create call."""
    return CONTAINER_ID


@pytest.fixture
def fake_stream():
    """Factory for closable response bodies."""
    return FakeStream


@pytest.fixture
def mock_docker():
    """Mock Docker client for testing."""
    mock_client = MagicMock(spec=DockerClient)
    mock_api = MagicMock(spec=APIClient)

    mock_api.base_url = "http+docker://localhost"
    mock_api.api_version = "1.43"

    # Mock image operations
    mock_api.images.return_value = [
        {"Id": "sha256:aaa", "RepoTags": ["alpine:latest", "alpine:3.19"]},
        {"Id": "sha256:bbb", "RepoTags": ["localhost:5000/tools/builder:latest"]},
        {"Id": "sha256:ccc", "RepoTags": None},
    ]
    mock_api.pull.return_value = FakeStream(
        [b'{"status":"Pulling from library/busybox"}\r\n', b'{"status":"Download complete"}\r\n']
    )

    # Mock container operations
    mock_api.create_host_config.side_effect = lambda **kwargs: dict(kwargs)
    mock_api.create_container.return_value = {"Id": CONTAINER_ID, "Warnings": []}
    mock_api.wait.return_value = {"StatusCode": 0}

    mock_client.api = mock_api
    return mock_client


@pytest.fixture
def manager(mock_docker):
    """RuntimeManager connected to the mocked client."""
    with patch(
        "contman.services.container.client.docker.from_env", return_value=mock_docker
    ):
        yield RuntimeManager()


@pytest.fixture
def empty_docker_config(tmp_path):
    """Docker client config file with no stored credentials."""
    path = tmp_path / "config.json"
    path.write_text("{}")
    return str(path)


@pytest.fixture
def docker_config(tmp_path):
    """Docker client config file with credentials for two registries."""

    def encode(user, password):
        return base64.b64encode(f"{user}:{password}".encode()).decode()

    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "auths": {
                    "registry.example.com": {"auth": encode("builder", "s3cret")},
                    "https://index.docker.io/v1/": {
                        "auth": encode("hubuser", "hubpass"),
                        "email": "hub@example.com",
                    },
                    "tokens.example.com": {"identitytoken": "opaque-token"},
                }
            }
        )
    )
    return str(path)
