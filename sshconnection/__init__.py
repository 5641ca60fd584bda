"""Fluent SSH/SFTP client built on paramiko."""

from .config import ConnectionConfig, PasswordCredential, PrivateKeyCredential
from .errors import (
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    NotFoundError,
    SSHError,
    StateError,
)
from .ssh import (
    CommandResult,
    FingerprintType,
    Session,
    SessionState,
    SSHCommand,
    SSHConnection,
    TransferOutcome,
)

__version__ = "0.1.0"

__all__ = [
    "AuthenticationError",
    "CommandResult",
    "ConfigurationError",
    "ConnectionConfig",
    "ConnectionError",
    "FingerprintType",
    "NotFoundError",
    "PasswordCredential",
    "PrivateKeyCredential",
    "Session",
    "SessionState",
    "SSHCommand",
    "SSHConnection",
    "SSHError",
    "StateError",
    "TransferOutcome",
]
