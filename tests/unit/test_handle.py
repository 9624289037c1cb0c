"""Unit tests for ContainerHandle."""

import io

import pytest
from docker.errors import APIError
from urllib3.exceptions import ProtocolError

from contman.models import ContainerConfig
from contman.models.errors import ContainerOperationError, OperationCancelledError


@pytest.fixture
def container(manager):
    return manager.container_create(ContainerConfig(image="alpine", cmd="echo hi"))


class TestContainerHandle:
    """Tests for lifecycle pass-throughs."""

    def test_short_id(self, container, container_id):
        assert container.short_id == container_id[:12]
        assert container.short_id in repr(container)

    def test_start(self, container, mock_docker, container_id):
        container.start()

        mock_docker.api.start.assert_called_once_with(container_id)

    def test_wait_returns_exit_status(self, container, mock_docker):
        mock_docker.api.wait.return_value = {"StatusCode": 3, "Error": None}

        assert container.wait() == 3

    def test_logs_relayed_to_sink(self, container, mock_docker, fake_stream, container_id):
        stream = fake_stream([b"hi\n", b"done\n"])
        mock_docker.api.logs.return_value = stream
        sink = io.BytesIO()

        container.logs(sink)

        assert sink.getvalue() == b"hi\ndone\n"
        assert stream.closed is True
        mock_docker.api.logs.assert_called_once_with(
            container_id, stdout=True, stderr=True, stream=True, follow=True
        )

    def test_broken_log_stream_wrapped(self, container, mock_docker, fake_stream):
        stream = fake_stream([b"hi\n", b"more\n"], fail_after=1, error=ProtocolError("Connection broken"))
        mock_docker.api.logs.return_value = stream

        with pytest.raises(ContainerOperationError) as exc_info:
            container.logs(io.BytesIO())

        assert isinstance(exc_info.value.cause, ProtocolError)
        assert stream.closed is True

    def test_remove(self, container, mock_docker, container_id):
        container.remove(force=True)

        mock_docker.api.remove_container.assert_called_once_with(container_id, force=True)

    def test_daemon_error_wrapped(self, container, mock_docker):
        mock_docker.api.start.side_effect = APIError("cannot start")

        with pytest.raises(ContainerOperationError) as exc_info:
            container.start()

        assert exc_info.value.operation == "start"
        assert isinstance(exc_info.value.cause, APIError)

    def test_cancelled_manager(self, container, manager, mock_docker):
        manager.cancel()

        with pytest.raises(OperationCancelledError):
            container.wait()

        mock_docker.api.wait.assert_not_called()
