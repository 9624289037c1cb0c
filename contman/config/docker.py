"""Docker configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class DockerConfig(BaseSettings):
    """Docker daemon and credential settings.

    Host and TLS parameters are not listed here; the client reads them from
    ``DOCKER_HOST``, ``DOCKER_TLS_VERIFY`` and ``DOCKER_CERT_PATH``.
    """

    timeout: int = Field(default=60, ge=1, alias="docker_timeout")
    config_path: str | None = Field(default=None, alias="docker_config_path")

    class Config:
        env_prefix = ""
        extra = "ignore"
