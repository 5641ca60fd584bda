"""MCP tools that expose SSH actions.

This module registers MCP tools for listing configured hosts, running
commands, transferring files and reading host key fingerprints via
`SSHConnection`. Every tool opens its own connection and closes it before
returning. Errors are re-raised as `ValueError` with a short message so MCP
clients get a readable tool error.

Tools provided:
- `ssh_list_hosts()`: Return the host names declared in the inventory.
- `ssh_run_command(command, host_name)`: Run a command on a host.
- `ssh_upload_file(local_path, remote_path, host_name)`: Upload over SFTP.
- `ssh_download_file(remote_path, local_path, host_name)`: Download over SFTP.
- `ssh_host_fingerprint(host_name, algorithm)`: Host key fingerprint.
"""

# ruff: noqa: I001
import logging
from contextlib import contextmanager
from typing import Annotated, Iterator

import weave

from sshconnection.errors import AuthenticationError, SSHError
from sshconnection.server import mcp, get_config_manager

from .connection import SSHConnection
from .fingerprint import FingerprintType
from .utils import (
    FingerprintResult,
    ListHostsResult,
    RunCommandResult,
    TransferResult,
    mask_value,
)

logger = logging.getLogger(__name__)


@contextmanager
def _connection(host_name: str) -> Iterator[SSHConnection]:
    """Yield an unconnected `SSHConnection` for `host_name`, closing it afterwards.

    sshconnection errors raised inside the block are logged with masked
    host details and converted to `ValueError`.
    """
    connection = None
    try:
        connection = get_config_manager().connection(host_name)
        with connection:
            yield connection
    except AuthenticationError as e:
        config = connection.config() if connection is not None else None
        logger.error(
            "SSH authentication failed. Debug: HOST=%s, USERNAME=%s",
            mask_value(config.hostname if config else None),
            mask_value(config.username if config else None),
        )
        raise ValueError(f"SSH authentication failed for host '{host_name}': {e}") from e
    except SSHError as e:
        logger.error("SSH operation on '%s' failed: %s", host_name, e)
        raise ValueError(f"SSH operation failed: {e}") from e


@mcp.tool(
    name="ssh_list_hosts",
    description=(
        "List the host names declared in the YAML inventory.\n\n"
        "Returns: { hosts: string[] }.\n\n"
        "Important: Clients MUST call this first to discover valid host names."
    ),
)
@weave.op()
def ssh_list_hosts() -> ListHostsResult:
    """Return the configured host names."""
    try:
        return {"hosts": get_config_manager().list_hosts()}
    except SSHError as e:
        raise ValueError(f"Unable to load host inventory: {e}") from e


@mcp.tool(
    name="ssh_run_command",
    description=(
        "Execute a shell command on a configured host over SSH and return results.\n\n"
        "Parameters:\n"
        "- command (string): Command to execute remotely. No PTY is allocated.\n"
        "- host_name (string): Name of the target host as defined in the YAML inventory.\n"
        "Returns: { command, status: 'executed', stdout, stderr, return_code }. stdout and stderr are trimmed.\n\n"
        "Errors: Raises ValueError on SSH connection/authentication failures or non-zero return codes."
    ),
)
@weave.op()
def ssh_run_command(
    command: Annotated[str, "Command to execute remotely."],
    host_name: Annotated[str, "Name of a host from ssh_list_hosts"],
) -> RunCommandResult:
    """Execute a command on the specified host via SSH.

    Raises:
        ValueError: When authentication fails, the connection fails, or the
            remote command exits non-zero.
    """
    with _connection(host_name) as connection:
        result = connection.connect().run(command)

    if result.exit_status != 0:
        raise ValueError(
            f"Error running command (exit status {result.exit_status}): {result.get_error()}"
        )
    return {
        "command": command,
        "status": "executed",
        "stdout": result.get_output(),
        "stderr": result.get_error(),
        "return_code": result.exit_status,
    }


@mcp.tool(
    name="ssh_upload_file",
    description=(
        "Upload a local file to a configured host over SFTP, overwriting the remote file.\n\n"
        "Returns: { status: 'uploaded'|'failed', host, local_path, remote_path, bytes_transferred }.\n\n"
        "Errors: Raises ValueError if the local file does not exist or the connection fails."
    ),
)
@weave.op()
def ssh_upload_file(
    local_path: Annotated[str, "Path of the file on this machine."],
    remote_path: Annotated[str, "Destination path on the remote host."],
    host_name: Annotated[str, "Name of a host from ssh_list_hosts"],
) -> TransferResult:
    with _connection(host_name) as connection:
        outcome = connection.connect_sftp().upload(local_path, remote_path)
    return {
        "status": "uploaded" if outcome else "failed",
        "host": host_name,
        "local_path": local_path,
        "remote_path": remote_path,
        "bytes_transferred": outcome.bytes_transferred,
    }


@mcp.tool(
    name="ssh_download_file",
    description=(
        "Download a file from a configured host over SFTP, overwriting the local file.\n\n"
        "Returns: { status: 'downloaded'|'failed', host, local_path, remote_path, bytes_transferred }.\n\n"
        "Errors: Raises ValueError if the remote file does not exist or the connection fails."
    ),
)
@weave.op()
def ssh_download_file(
    remote_path: Annotated[str, "Path of the file on the remote host."],
    local_path: Annotated[str, "Destination path on this machine."],
    host_name: Annotated[str, "Name of a host from ssh_list_hosts"],
) -> TransferResult:
    with _connection(host_name) as connection:
        outcome = connection.connect_sftp().download(remote_path, local_path)
    return {
        "status": "downloaded" if outcome else "failed",
        "host": host_name,
        "local_path": local_path,
        "remote_path": remote_path,
        "bytes_transferred": outcome.bytes_transferred,
    }


@mcp.tool(
    name="ssh_host_fingerprint",
    description=(
        "Return the fingerprint of a configured host's public host key as uppercase hex.\n\n"
        "Parameters:\n"
        "- host_name (string): Name of the target host.\n"
        "- algorithm (string): 'md5' (default) or 'sha1'. Both are informational only.\n"
        "Returns: { host, algorithm, fingerprint }."
    ),
)
@weave.op()
def ssh_host_fingerprint(
    host_name: Annotated[str, "Name of a host from ssh_list_hosts"],
    algorithm: Annotated[str, "Hash algorithm: md5 or sha1"] = "md5",
) -> FingerprintResult:
    with _connection(host_name) as connection:
        fingerprint_type = FingerprintType.parse(algorithm)
        fingerprint = connection.connect().fingerprint(fingerprint_type)
    return {
        "host": host_name,
        "algorithm": fingerprint_type.value,
        "fingerprint": fingerprint,
    }
