"""Exception hierarchy for SSH/SFTP operations.

Every failure raised by this package derives from `SSHError`. Each concrete
class also subclasses the closest built-in exception so callers that only
know about `ValueError`, `RuntimeError` or `FileNotFoundError` keep working.
"""

from __future__ import annotations

import builtins


class SSHError(Exception):
    """Base class for all errors raised by sshconnection."""


class ConfigurationError(SSHError, ValueError):
    """Raised when required settings are missing or invalid."""


class ConnectionError(SSHError, builtins.ConnectionError):
    """Raised when the transport to the remote host cannot be established."""


class AuthenticationError(SSHError):
    """Raised when the remote host rejects the supplied credential."""


class StateError(SSHError, RuntimeError):
    """Raised when an operation is attempted in the wrong lifecycle state."""


class NotFoundError(SSHError, FileNotFoundError):
    """Raised when a required file does not exist."""
