import os
from dataclasses import dataclass, field
from typing import Union

from sshconnection.errors import ConfigurationError


@dataclass(frozen=True)
class PasswordCredential:
    password: str = field(repr=False)

    @property
    def kind(self) -> str:
        return "password"


@dataclass(frozen=True)
class PrivateKeyCredential:
    path: str
    passphrase: str | None = field(default=None, repr=False)

    @property
    def kind(self) -> str:
        return "public-private key pair"

    @property
    def expanded_path(self) -> str:
        return os.path.expanduser(self.path)


Credential = Union[PasswordCredential, PrivateKeyCredential]


@dataclass(frozen=True)
class ConnectionConfig:
    """Validated settings needed to open one SSH session."""

    hostname: str
    username: str
    credential: Credential | None
    port: int = 22
    timeout: float | None = None

    def validate(self) -> "ConnectionConfig":
        """Check the invariants required before any network attempt.

        Returns:
            The same config, to allow `ConnectionConfig(...).validate()`.

        Raises:
            ConfigurationError: If hostname, username or credential is missing.
        """
        if not self.hostname:
            raise ConfigurationError("Hostname not specified.")
        if not self.username:
            raise ConfigurationError("Username not specified.")
        if self.credential is None:
            raise ConfigurationError("No password or private key path specified.")
        if isinstance(self.credential, PasswordCredential) and not self.credential.password:
            raise ConfigurationError("No password or private key path specified.")
        if isinstance(self.credential, PrivateKeyCredential) and not self.credential.path:
            raise ConfigurationError("No password or private key path specified.")
        return self
