"""Registry credential lookup."""

from typing import Any, Mapping, Optional

import structlog
from docker import auth
from docker.errors import DockerException

from ...models import AuthCredentials

logger = structlog.get_logger(__name__)


def _entry_value(entry: Mapping[str, Any], key: str) -> str:
    # Config file entries use lower case keys, credential helpers title case.
    return entry.get(key) or entry.get(key.capitalize()) or ""


def get_auth_config(domain: str, config_path: Optional[str] = None) -> AuthCredentials:
    """Look up stored credentials for a registry domain.

    Reads the local Docker client configuration (``config.json``, legacy
    ``.dockercfg`` and credential helpers). A missing or unreadable
    configuration, or no entry for ``domain``, yields anonymous credentials.
    Only the username and password are returned.
    """
    try:
        auth_configs = auth.load_config(config_path=config_path)
        entry = auth_configs.resolve_authconfig(domain)
    except (DockerException, OSError, ValueError) as e:
        logger.debug("Cannot read registry credentials", registry=domain, error=str(e))
        return AuthCredentials()

    if not entry:
        logger.debug("No stored credentials, using anonymous auth", registry=domain)
        return AuthCredentials()

    return AuthCredentials(
        username=_entry_value(entry, "username"),
        password=_entry_value(entry, "password"),
    )
