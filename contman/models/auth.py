"""Registry credential model."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class AuthCredentials(BaseModel):
    """Username/password pair for one registry domain.

    The empty value stands for anonymous access.
    """

    model_config = ConfigDict(frozen=True)

    username: str = ""
    password: str = ""

    @property
    def is_anonymous(self) -> bool:
        return not self.username and not self.password

    def to_auth_config(self) -> Dict[str, Any]:
        """Registry auth mapping as sent in the ``X-Registry-Auth`` header.

        Empty fields are omitted so anonymous credentials encode to ``{}``.
        """
        auth_config: Dict[str, Any] = {}
        if self.username:
            auth_config["username"] = self.username
        if self.password:
            auth_config["password"] = self.password
        return auth_config
