"""Authenticated SSH transport session.

A `Session` owns one paramiko `SSHClient` (and therefore one socket) for its
whole life. It moves through `DISCONNECTED -> CONNECTED -> CLOSED`; every
operation other than `open()` requires the `CONNECTED` state.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable

import paramiko

from sshconnection.config.credentials import ConnectionConfig
from sshconnection.errors import AuthenticationError, ConnectionError, StateError

from .fingerprint import FingerprintType, compute_fingerprint
from .utils.masking import mask_value

if TYPE_CHECKING:
    from .command import SSHCommand
    from .transfer import TransferChannel

logger = logging.getLogger(__name__)


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    CLOSED = "closed"


class Session:
    """One authenticated connection to a remote host.

    Args:
        config: Validated connection settings.
        client_factory: Callable returning a fresh `paramiko.SSHClient`-like
            object. Tests substitute a fake here.
        host_key_policy: Policy for unknown host keys (defaults to auto-add).
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient,
        host_key_policy: paramiko.MissingHostKeyPolicy | None = None,
    ):
        self.config = config
        self._client_factory = client_factory
        self._host_key_policy = host_key_policy or paramiko.AutoAddPolicy()
        self._client: paramiko.SSHClient | None = None
        self._state = SessionState.DISCONNECTED
        self._fingerprints: dict[FingerprintType, str] = {}

    def __repr__(self) -> str:
        return (
            f"<Session {self.config.username}@{self.config.hostname}:"
            f"{self.config.port} {self._state.value}>"
        )

    @property
    def state(self) -> SessionState:
        return self._state

    def is_connected(self) -> bool:
        return self._state is SessionState.CONNECTED

    def open(self, pkey: paramiko.PKey | None = None) -> "Session":
        """Open the socket, negotiate the transport and authenticate.

        Args:
            pkey: Private key to authenticate with, already loaded. Required
                when the config carries a `PrivateKeyCredential`.

        Raises:
            StateError: If the session was already opened.
            ConnectionError: If the host cannot be reached or the SSH
                handshake fails.
            AuthenticationError: If the credential is rejected.
        """
        if self._state is not SessionState.DISCONNECTED:
            raise StateError(f"Unable to connect. Session is {self._state.value}.")

        config = self.config
        credential = config.credential
        password = getattr(credential, "password", None)

        client = self._client_factory()
        client.set_missing_host_key_policy(self._host_key_policy)
        logger.debug(
            "Connecting to %s:%s as %s", config.hostname, config.port, config.username
        )
        try:
            client.connect(
                hostname=config.hostname,
                port=config.port,
                username=config.username,
                password=password,
                pkey=pkey,
                timeout=config.timeout,
                banner_timeout=config.timeout,
                auth_timeout=config.timeout,
                look_for_keys=False,
                allow_agent=False,
            )
        except paramiko.AuthenticationException as e:
            client.close()
            logger.warning(
                "SSH authentication failed. Debug: HOST=%s, USERNAME=%s, PORT=%s",
                mask_value(config.hostname),
                mask_value(config.username),
                config.port,
            )
            kind = credential.kind if credential is not None else "password"
            raise AuthenticationError(f"Error authenticating with {kind}.") from e
        except (paramiko.SSHException, OSError) as e:
            client.close()
            logger.warning(
                "SSH connection failed: %s. Debug: HOST=%s, PORT=%s",
                e,
                mask_value(config.hostname),
                config.port,
            )
            raise ConnectionError(f"Error connecting to server: {e}") from e

        self._client = client
        self._state = SessionState.CONNECTED
        logger.info("Connected to %s:%s", config.hostname, config.port)
        return self

    def close(self) -> None:
        """Release the underlying transport.

        Raises:
            StateError: If the session was never connected or is already closed.
        """
        if self._state is SessionState.DISCONNECTED:
            raise StateError("Unable to disconnect. Not yet connected.")
        if self._state is SessionState.CLOSED:
            raise StateError("Unable to disconnect. Already disconnected.")
        self._client.close()
        self._client = None
        self._state = SessionState.CLOSED
        logger.info("Disconnected from %s:%s", self.config.hostname, self.config.port)

    def _require_connected(self, action: str) -> paramiko.SSHClient:
        if self._state is not SessionState.CONNECTED:
            raise StateError(f"Unable to {action} when not connected.")
        return self._client

    def _transport(self, action: str) -> paramiko.Transport:
        transport = self._require_connected(action).get_transport()
        if transport is None or not transport.is_active():
            raise ConnectionError("The SSH transport is no longer active.")
        return transport

    def open_exec_channel(self) -> paramiko.Channel:
        """Open a session channel for a single exec request, without a PTY."""
        transport = self._transport("run commands")
        try:
            channel = transport.open_session(timeout=self.config.timeout)
        except paramiko.SSHException as e:
            raise ConnectionError(f"Unable to open exec channel: {e}") from e
        channel.set_combine_stderr(False)
        return channel

    def run(self, command: str) -> "SSHCommand":
        """Execute `command` remotely and block until it has finished."""
        from .command import SSHCommand

        self._require_connected("run commands")
        return SSHCommand(self, command)

    def open_transfer_channel(self) -> "TransferChannel":
        """Open an SFTP subsystem channel on this session."""
        from .transfer import TransferChannel

        client = self._require_connected("open an SFTP channel")
        try:
            sftp = client.open_sftp()
        except (paramiko.SSHException, OSError) as e:
            raise ConnectionError(f"Unable to open SFTP channel: {e}") from e
        return TransferChannel(sftp)

    def server_host_key(self) -> bytes:
        """Return the raw public host key blob presented by the server."""
        return self._transport("get fingerprint").get_remote_server_key().asbytes()

    def fingerprint(self, fingerprint_type: FingerprintType | str = FingerprintType.MD5) -> str:
        """Return the server host key fingerprint as an uppercase hex string.

        Raises:
            StateError: If the session is not connected.
            ConfigurationError: If `fingerprint_type` is not supported.
        """
        self._require_connected("get fingerprint")
        fingerprint_type = FingerprintType.parse(fingerprint_type)
        if fingerprint_type not in self._fingerprints:
            self._fingerprints[fingerprint_type] = compute_fingerprint(
                self.server_host_key(), fingerprint_type
            )
        return self._fingerprints[fingerprint_type]

