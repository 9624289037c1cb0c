"""Container runtime services.

- client.py: daemon connection (client construction and cancellation)
- auth.py: registry credential lookup
- manager.py: image presence/pull and container creation
- handle.py: handle to a created container
"""

from .auth import get_auth_config
from .client import DockerClientFactory
from .handle import ContainerHandle
from .manager import RuntimeManager

__all__ = ["RuntimeManager", "DockerClientFactory", "ContainerHandle", "get_auth_config"]
