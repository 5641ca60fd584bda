"""In-memory stand-ins for paramiko's SSHClient, Channel and SFTPClient.

`FakeServer` holds what a remote host would: accepted credentials, a host
key, canned command results and a file store. `FakeSSHClient` is what
`SSHConnection(client_factory=...)` receives in tests.
"""

from __future__ import annotations

import errno
import io
from collections import deque
from types import SimpleNamespace

import paramiko
import pytest

DELIVERY_SIZE = 8192


class FakeHostKey:
    def __init__(self, blob: bytes):
        self._blob = blob

    def asbytes(self) -> bytes:
        return self._blob

    def get_name(self) -> str:
        return "ssh-ed25519"


class FakeChannel:
    """Exec channel that delivers a command's output over time.

    Each readiness check lets the "remote side" deliver one more event, but
    only while the unread bytes fit in `server.window`, as a real SSH window
    would. A `recv` that could never be satisfied raises instead of hanging.
    """

    def __init__(self, server: "FakeServer"):
        self.server = server
        self.command: str | None = None
        self.combine_stderr: bool | None = None
        self.write_shut = False
        self.closed = False
        self.eof_received = False
        self._pending: deque = deque()
        self._stdout = bytearray()
        self._stderr = bytearray()
        self._exit_status: int | None = None

    def set_combine_stderr(self, combine: bool) -> None:
        self.combine_stderr = combine

    def exec_command(self, command: str) -> None:
        self.command = command
        self.server.executed.append(command)
        script = self.server.commands.get(
            command, (b"", f"sh: {command}: command not found\n".encode(), 127)
        )
        if isinstance(script, tuple):
            stdout, stderr, status = script
            script = [("stdout", stdout), ("stderr", stderr), ("exit", status)]
        for kind, payload in script:
            if kind == "exit":
                self._pending.append((kind, payload))
                continue
            for start in range(0, len(payload), DELIVERY_SIZE):
                self._pending.append((kind, payload[start:start + DELIVERY_SIZE]))

    def shutdown_write(self) -> None:
        self.write_shut = True

    def _deliver(self) -> bool:
        if not self._pending:
            return False
        kind, payload = self._pending[0]
        if kind == "exit":
            self._exit_status = payload
        else:
            if len(self._stdout) + len(self._stderr) + len(payload) > self.server.window:
                return False
            (self._stdout if kind == "stdout" else self._stderr).extend(payload)
        self._pending.popleft()
        if not self._pending:
            self.eof_received = True
        return True

    def _read(self, buffer: bytearray, nbytes: int) -> bytes:
        while not buffer and not self.eof_received:
            if not self._deliver():
                raise AssertionError("recv would block forever: channel window is full")
        data = bytes(buffer[:nbytes])
        del buffer[:nbytes]
        return data

    def recv_ready(self) -> bool:
        self._deliver()
        return bool(self._stdout)

    def recv_stderr_ready(self) -> bool:
        self._deliver()
        return bool(self._stderr)

    def recv(self, nbytes: int) -> bytes:
        return self._read(self._stdout, nbytes)

    def recv_stderr(self, nbytes: int) -> bytes:
        return self._read(self._stderr, nbytes)

    def exit_status_ready(self) -> bool:
        self._deliver()
        return self._exit_status is not None

    def recv_exit_status(self) -> int:
        while self._exit_status is None:
            if not self._deliver():
                raise AssertionError("exit status never arrives: channel window is full")
        return self._exit_status

    def close(self) -> None:
        self.closed = True


class FakeTransport:
    def __init__(self, client: "FakeSSHClient"):
        self.client = client

    def is_active(self) -> bool:
        return not self.client.closed and self.client.server.active

    def open_session(self, timeout=None) -> FakeChannel:
        if self.client.server.refuse_channels:
            raise paramiko.ChannelException(2, "Connect failed")
        channel = FakeChannel(self.client.server)
        self.client.server.channels.append(channel)
        return channel

    def get_remote_server_key(self) -> FakeHostKey:
        return FakeHostKey(self.client.server.host_key)


class FakeSFTPFile:
    def __init__(self, server: "FakeServer", path: str, mode: str):
        self.server = server
        self.path = path
        self.mode = mode
        self.pipelined = False
        if "r" in mode:
            self._buffer = io.BytesIO(server.files[path])
        else:
            self._buffer = io.BytesIO()

    def __enter__(self) -> "FakeSFTPFile":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def set_pipelined(self, pipelined: bool = True) -> None:
        self.pipelined = pipelined

    def prefetch(self, file_size=None) -> None:
        pass

    def read(self, size: int) -> bytes:
        return self._buffer.read(size)

    def write(self, data: bytes) -> None:
        self.server.write_calls += 1
        self._buffer.write(data)

    def close(self) -> None:
        if "w" in self.mode:
            self.server.files[self.path] = self._buffer.getvalue()


class FakeSFTPClient:
    def __init__(self, server: "FakeServer"):
        self.server = server
        self.closed = False

    def _check(self, path: str) -> None:
        if path in self.server.denied:
            raise PermissionError(errno.EACCES, "Permission denied")

    def open(self, path: str, mode: str = "r") -> FakeSFTPFile:
        self._check(path)
        if "r" in mode and path not in self.server.files:
            raise FileNotFoundError(errno.ENOENT, "No such file")
        return FakeSFTPFile(self.server, path, mode)

    def stat(self, path: str) -> SimpleNamespace:
        self._check(path)
        if path not in self.server.files:
            raise FileNotFoundError(errno.ENOENT, "No such file")
        return SimpleNamespace(st_size=len(self.server.files[path]))

    def close(self) -> None:
        self.closed = True


class FakeSSHClient:
    def __init__(self, server: "FakeServer"):
        self.server = server
        self.policy = None
        self.connect_kwargs: dict | None = None
        self.closed = False
        self.sftp: FakeSFTPClient | None = None
        server.clients.append(self)

    def set_missing_host_key_policy(self, policy) -> None:
        self.policy = policy

    def connect(self, **kwargs) -> None:
        self.connect_kwargs = kwargs
        server = self.server
        if server.unreachable:
            raise OSError(errno.ECONNREFUSED, "Connection refused")
        if kwargs["username"] != server.username:
            raise paramiko.AuthenticationException("Authentication failed.")
        pkey = kwargs.get("pkey")
        if pkey is not None:
            if server.authorized_key is None or pkey.asbytes() != server.authorized_key.asbytes():
                raise paramiko.AuthenticationException("Authentication failed.")
        elif kwargs.get("password") != server.password:
            raise paramiko.AuthenticationException("Authentication failed.")

    def get_transport(self) -> FakeTransport:
        return FakeTransport(self)

    def open_sftp(self) -> FakeSFTPClient:
        self.sftp = FakeSFTPClient(self.server)
        return self.sftp

    def close(self) -> None:
        self.closed = True


class FakeServer:
    def __init__(self):
        self.username = "bob"
        self.password = "secret"
        self.authorized_key: paramiko.PKey | None = None
        self.host_key = b"\x00\x00\x00\x0bssh-ed25519\x00\x00\x00\x20" + bytes(range(32))
        # Values are (stdout, stderr, exit_status) or a list of
        # ("stdout" | "stderr", bytes) and ("exit", int) events in arrival order.
        self.commands: dict[str, tuple | list] = {
            "echo hi": (b"hi\n", b"", 0),
        }
        self.files: dict[str, bytes] = {}
        self.denied: set[str] = set()
        self.unreachable = False
        self.refuse_channels = False
        self.active = True
        self.clients: list[FakeSSHClient] = []
        self.channels: list[FakeChannel] = []
        self.executed: list[str] = []
        self.write_calls = 0
        self.window = 65536

    def client_factory(self) -> FakeSSHClient:
        return FakeSSHClient(self)


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture(scope="session")
def rsa_key() -> paramiko.RSAKey:
    return paramiko.RSAKey.generate(2048)


@pytest.fixture
def private_key_file(tmp_path, rsa_key) -> str:
    path = tmp_path / "id_rsa"
    rsa_key.write_private_key_file(str(path))
    return str(path)


@pytest.fixture
def public_key_file(tmp_path, rsa_key) -> str:
    path = tmp_path / "id_rsa.pub"
    path.write_text(f"{rsa_key.get_name()} {rsa_key.get_base64()} bob@laptop\n")
    return str(path)
