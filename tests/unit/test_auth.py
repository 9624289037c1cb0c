"""Unit tests for registry credential lookup."""

import base64
import json
from unittest.mock import patch

from docker import auth
from docker.errors import DockerException

from contman.models import AuthCredentials
from contman.services.container.auth import get_auth_config


class TestGetAuthConfig:
    """Tests for get_auth_config."""

    def test_returns_stored_credentials(self, docker_config):
        """Test that username and password are read for a known registry."""
        creds = get_auth_config("registry.example.com", config_path=docker_config)

        assert creds == AuthCredentials(username="builder", password="s3cret")
        assert creds.is_anonymous is False

    def test_resolves_docker_hub_legacy_key(self, docker_config):
        """Test that docker.io matches the legacy index URL entry."""
        creds = get_auth_config("docker.io", config_path=docker_config)

        assert creds.username == "hubuser"
        assert creds.password == "hubpass"

    def test_unknown_registry_is_anonymous(self, docker_config):
        """Test that a registry without an entry yields empty credentials."""
        creds = get_auth_config("quay.io", config_path=docker_config)

        assert creds == AuthCredentials()
        assert creds.is_anonymous is True

    def test_empty_config_is_anonymous(self, empty_docker_config):
        """Test that a config without auths yields empty credentials."""
        creds = get_auth_config("registry.example.com", config_path=empty_docker_config)

        assert creds.is_anonymous is True

    def test_identity_token_is_not_propagated(self, docker_config):
        """Test that token-only entries do not leak into credentials."""
        creds = get_auth_config("tokens.example.com", config_path=docker_config)

        assert creds == AuthCredentials()

    def test_unreadable_config_is_anonymous(self):
        """Test that config loading failures degrade to anonymous auth."""
        with patch(
            "contman.services.container.auth.auth.load_config",
            side_effect=DockerException("credential helper failed"),
        ):
            creds = get_auth_config("registry.example.com")

        assert creds.is_anonymous is True

    def test_credential_helper_keys(self):
        """Test that title-case keys from credential helpers are accepted."""
        with patch("contman.services.container.auth.auth.load_config") as mock_load:
            mock_load.return_value.resolve_authconfig.return_value = {
                "ServerAddress": "registry.example.com",
                "Username": "helper-user",
                "Password": "helper-pass",
            }
            creds = get_auth_config("registry.example.com")

        assert creds == AuthCredentials(username="helper-user", password="helper-pass")
        mock_load.return_value.resolve_authconfig.assert_called_once_with("registry.example.com")


class TestAuthCredentials:
    """Tests for the AuthCredentials model."""

    def test_anonymous_encodes_to_empty_object(self):
        """Test that anonymous credentials still produce a valid auth blob."""
        header = auth.encode_header(AuthCredentials().to_auth_config())

        assert json.loads(base64.urlsafe_b64decode(header)) == {}

    def test_credentials_encode_username_and_password(self):
        header = auth.encode_header(
            AuthCredentials(username="u", password="p").to_auth_config()
        )

        assert json.loads(base64.urlsafe_b64decode(header)) == {
            "username": "u",
            "password": "p",
        }
