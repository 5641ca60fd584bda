"""Single remote command execution.

An `SSHCommand` runs its command as soon as it is constructed and keeps the
captured output. Reading the output never re-executes anything.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import paramiko

from sshconnection.errors import ConnectionError

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)

BUFFER_SIZE = 32768
POLL_INTERVAL = 0.01


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class CommandResult:
    """Captured output of one finished remote command."""

    stdout: bytes
    stderr: bytes
    exit_status: int

    @property
    def raw_output(self) -> str:
        return _decode(self.stdout)

    @property
    def raw_error(self) -> str:
        return _decode(self.stderr)

    @property
    def output(self) -> str:
        return self.raw_output.strip()

    @property
    def error(self) -> str:
        return self.raw_error.strip()


def _pump(channel: paramiko.Channel, stdout: bytearray, stderr: bytearray) -> bool:
    pumped = False
    if channel.recv_ready():
        stdout += channel.recv(BUFFER_SIZE)
        pumped = True
    if channel.recv_stderr_ready():
        stderr += channel.recv_stderr(BUFFER_SIZE)
        pumped = True
    return pumped


def drain_channel(channel: paramiko.Channel) -> CommandResult:
    """Collect stdout, stderr and the exit status of an exec channel.

    Both streams are pumped until the server sends EOF or closes the channel.
    Output can keep arriving after the exit status, and paramiko only reopens
    the shared window as data is consumed, so neither stream is read to EOF
    on its own.
    """
    stdout = bytearray()
    stderr = bytearray()
    while not (channel.eof_received or channel.closed):
        if not _pump(channel, stdout, stderr):
            time.sleep(POLL_INTERVAL)
    # Data that landed between the last pump and EOF.
    while _pump(channel, stdout, stderr):
        pass
    return CommandResult(bytes(stdout), bytes(stderr), channel.recv_exit_status())


class SSHCommand:
    """Run one command on a connected session and expose its result.

    Usage:
        command = SSHCommand(session, "uname -a")
        print(command.get_output(), command.exit_status)
    """

    def __init__(self, session: "Session", command: str):
        self.session = session
        self.command = command
        self.result = self._execute()

    def __repr__(self) -> str:
        return f"<SSHCommand {self.command!r} exit_status={self.exit_status}>"

    def _execute(self) -> CommandResult:
        channel = self.session.open_exec_channel()
        started = time.monotonic()
        try:
            channel.exec_command(self.command)
            # No stdin is ever sent; let the remote process see EOF.
            channel.shutdown_write()
            result = drain_channel(channel)
        except paramiko.SSHException as e:
            raise ConnectionError(f"Error running command: {e}") from e
        finally:
            channel.close()
        logger.debug(
            "Ran %r: exit_status=%s stdout=%d bytes stderr=%d bytes in %.3fs",
            self.command,
            result.exit_status,
            len(result.stdout),
            len(result.stderr),
            time.monotonic() - started,
        )
        return result

    @property
    def exit_status(self) -> int:
        return self.result.exit_status

    def get_raw_output(self) -> str:
        return self.result.raw_output

    def get_raw_error(self) -> str:
        return self.result.raw_error

    def get_output(self) -> str:
        """Return stdout with leading and trailing whitespace stripped."""
        return self.result.output

    def get_error(self) -> str:
        """Return stderr with leading and trailing whitespace stripped."""
        return self.result.error
