"""Container configuration models."""

# Standard library imports
from typing import Dict, List

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field


class Mount(BaseModel):
    """A host path bound into the container. Always a bind mount."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = Field(..., alias="Source", description="Host path")
    target: str = Field(..., alias="Target", description="Path inside the container")
    read_only: bool = Field(
        default=False, alias="ReadOnly", description="Mount read-only"
    )

    def __str__(self) -> str:
        return f"{self.source}:{self.target}:{'ro' if self.read_only else 'rw'}"


class ContainerConfig(BaseModel):
    """Runtime-agnostic description of a command container.

    ``cmd`` is always run as a single shell string, so pipes and redirections
    work as typed. Accepts either the field names or the wire keys
    (``Image``, ``Cmd``, ``Env``, ``Mounts``).
    """

    model_config = ConfigDict(populate_by_name=True)

    image: str = Field(..., alias="Image", description="Image reference")
    cmd: str = Field(..., alias="Cmd", description="Shell command string")
    env: Dict[str, str] = Field(
        default_factory=dict, alias="Env", description="Environment variables"
    )
    mounts: List[Mount] = Field(
        default_factory=list, alias="Mounts", description="Bind mounts, in order"
    )
