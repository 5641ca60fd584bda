"""
SSH session, command and file transfer primitives.

The MCP tools in `sshconnection.ssh.tools` are registered by
`sshconnection.server`; importing this package does not start a server.
"""

from .command import CommandResult, SSHCommand
from .connection import SSHConnection
from .fingerprint import FingerprintType, compute_fingerprint
from .keys import load_private_key
from .session import Session, SessionState
from .transfer import TransferChannel, TransferOutcome

__all__ = [
    "CommandResult",
    "FingerprintType",
    "Session",
    "SessionState",
    "SSHCommand",
    "SSHConnection",
    "TransferChannel",
    "TransferOutcome",
    "compute_fingerprint",
    "load_private_key",
]
