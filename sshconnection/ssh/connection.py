"""Fluent SSH/SFTP connection builder.

`SSHConnection` collects connection settings through chained setters and
opens sessions on demand. The SSH session (for commands and fingerprints)
and the SFTP session (for file transfer) are independent transports.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Callable

import paramiko

from sshconnection.config.credentials import (
    ConnectionConfig,
    Credential,
    PasswordCredential,
    PrivateKeyCredential,
)
from sshconnection.errors import ConfigurationError, StateError

from .command import SSHCommand
from .fingerprint import FingerprintType
from .keys import load_private_key
from .session import Session
from .transfer import TransferChannel, TransferOutcome

logger = logging.getLogger(__name__)


class SSHConnection:
    """
    Chainable SSH connection settings plus the sessions opened from them.

    Usage:
        connection = (
            SSHConnection()
            .to("server.example.com")
            .on_port(22)
            .as_user("alice")
            .with_private_key("~/.ssh/id_ed25519")
            .timeout(10)
            .connect()
        )
        print(connection.run("uname -a").get_output())
        print(connection.fingerprint("sha1"))
        connection.disconnect()

        with SSHConnection().to("server").as_user("alice").with_password("pw") as conn:
            conn.connect_sftp()
            conn.upload("build.tar.gz", "/tmp/build.tar.gz")
    """

    def __init__(
        self,
        *,
        client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient,
        host_key_policy: paramiko.MissingHostKeyPolicy | None = None,
    ):
        self._hostname: str | None = None
        self._port = 22
        self._username: str | None = None
        self._password: str | None = None
        self._private_key_path: str | None = None
        self._passphrase: str | None = None
        self._timeout: float | None = None

        self._client_factory = client_factory
        self._host_key_policy = host_key_policy
        self._session: Session | None = None
        self._sftp_session: Session | None = None
        self._sftp: TransferChannel | None = None

    @classmethod
    def from_config(cls, config: ConnectionConfig, **kwargs) -> "SSHConnection":
        """Return a builder pre-filled from `config`."""
        connection = cls(**kwargs).to(config.hostname).on_port(config.port).as_user(config.username)
        if config.timeout is not None:
            connection.timeout(config.timeout)
        credential = config.credential
        if isinstance(credential, PasswordCredential):
            connection.with_password(credential.password)
        elif isinstance(credential, PrivateKeyCredential):
            connection.with_private_key(credential.path, credential.passphrase)
        return connection

    def __enter__(self) -> "SSHConnection":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -----------------------
    # Chained setters
    # -----------------------

    def to(self, hostname: str) -> "SSHConnection":
        self._hostname = hostname
        return self

    def on_port(self, port: int) -> "SSHConnection":
        self._port = port
        return self

    def as_user(self, username: str) -> "SSHConnection":
        self._username = username
        return self

    def with_password(self, password: str) -> "SSHConnection":
        self._password = password
        return self

    def with_private_key(self, private_key_path: str, passphrase: str | None = None) -> "SSHConnection":
        self._private_key_path = private_key_path
        self._passphrase = passphrase
        return self

    def timeout(self, timeout: float) -> "SSHConnection":
        """Set the connect-phase timeout in seconds."""
        self._timeout = timeout
        return self

    # -----------------------
    # Validation
    # -----------------------

    def config(self) -> ConnectionConfig:
        """Snapshot the current settings as a validated `ConnectionConfig`.

        Raises:
            ConfigurationError: If hostname, username or credential is
                missing, or if both a password and a private key are set.
        """
        if self._password and self._private_key_path:
            raise ConfigurationError("Specify either a password or a private key path, not both.")

        credential: Credential | None = None
        if self._private_key_path:
            credential = PrivateKeyCredential(self._private_key_path, self._passphrase)
        elif self._password:
            credential = PasswordCredential(self._password)

        return ConnectionConfig(
            hostname=self._hostname or "",
            username=self._username or "",
            credential=credential,
            port=self._port,
            timeout=self._timeout,
        ).validate()

    def _open_session(self) -> Session:
        config = self.config()
        pkey = None
        if isinstance(config.credential, PrivateKeyCredential):
            pkey = load_private_key(config.credential.expanded_path, config.credential.passphrase)
        session = Session(
            config,
            client_factory=self._client_factory,
            host_key_policy=self._host_key_policy,
        )
        return session.open(pkey=pkey)

    # -----------------------
    # SSH session
    # -----------------------

    def connect(self) -> "SSHConnection":
        """Open the SSH session used by `run()` and `fingerprint()`."""
        if self.is_connected():
            logger.debug("connect() called on an open session; ignoring")
            return self
        self._session = self._open_session()
        return self

    def disconnect(self) -> None:
        if self._session is None:
            raise StateError("Unable to disconnect. Not yet connected.")
        self._session.close()

    def is_connected(self) -> bool:
        return self._session is not None and self._session.is_connected()

    def run(self, command: str) -> SSHCommand:
        """Execute `command` and return the finished `SSHCommand`.

        Raises:
            StateError: If `connect()` has not succeeded.
        """
        if not self.is_connected():
            raise StateError("Unable to run commands when not connected.")
        return self._session.run(command)

    def fingerprint(self, fingerprint_type: FingerprintType | str = FingerprintType.MD5) -> str:
        """Return the server host key fingerprint as uppercase hex."""
        if not self.is_connected():
            raise StateError("Unable to get fingerprint when not connected.")
        return self._session.fingerprint(fingerprint_type)

    # -----------------------
    # SFTP session
    # -----------------------

    def connect_sftp(self) -> "SSHConnection":
        """Open the SFTP session used by `upload()` and `download()`."""
        if self.is_sftp_connected():
            logger.debug("connect_sftp() called on an open session; ignoring")
            return self
        session = self._open_session()
        try:
            self._sftp = session.open_transfer_channel()
        except Exception:
            session.close()
            raise
        self._sftp_session = session
        return self

    def disconnect_sftp(self) -> None:
        if self._sftp_session is None:
            raise StateError("Unable to disconnect. Not yet connected.")
        if self._sftp_session.is_connected():
            self._sftp.close()
        self._sftp_session.close()

    def is_sftp_connected(self) -> bool:
        return self._sftp_session is not None and self._sftp_session.is_connected()

    def upload(self, local_path: str, remote_path: str) -> TransferOutcome:
        """Upload a local file, overwriting `remote_path`.

        Raises:
            StateError: If `connect_sftp()` has not succeeded.
            NotFoundError: If `local_path` does not exist.
        """
        if not self.is_sftp_connected():
            raise StateError("Unable to upload file when not connected.")
        return self._sftp.upload(local_path, remote_path)

    def download(self, remote_path: str, local_path: str) -> TransferOutcome:
        """Download `remote_path` into `local_path`.

        Raises:
            StateError: If `connect_sftp()` has not succeeded.
            NotFoundError: If `remote_path` does not exist.
        """
        if not self.is_sftp_connected():
            raise StateError("Unable to download file when not connected.")
        return self._sftp.download(remote_path, local_path)

    def close(self) -> None:
        """Close whichever sessions are open; never raises `StateError`."""
        if self.is_sftp_connected():
            self.disconnect_sftp()
        if self.is_connected():
            self.disconnect()
