"""Chunked SFTP file transfer.

Uploads and downloads move one file per call. Neither direction is atomic:
a transfer that fails part-way can leave a partial file behind.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import paramiko

from sshconnection.errors import NotFoundError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 32768


@dataclass(frozen=True)
class TransferOutcome:
    bytes_transferred: int
    success: bool
    error: str | None = None

    def __bool__(self) -> bool:
        return self.success


def _copy(source, destination) -> int:
    transferred = 0
    while True:
        chunk = source.read(CHUNK_SIZE)
        if not chunk:
            return transferred
        destination.write(chunk)
        transferred += len(chunk)


class TransferChannel:
    """File transfer over an open `paramiko.SFTPClient`."""

    def __init__(self, sftp: paramiko.SFTPClient):
        self._sftp = sftp

    def close(self) -> None:
        self._sftp.close()

    def upload(self, local_path: str, remote_path: str) -> TransferOutcome:
        """Copy a local file to `remote_path`, overwriting any existing file.

        Raises:
            NotFoundError: If `local_path` does not exist. Nothing is sent.
        """
        if not os.path.isfile(local_path):
            raise NotFoundError("The local file does not exist.")

        logger.debug("Uploading %s -> %s", local_path, remote_path)
        try:
            with open(local_path, "rb") as source, self._sftp.open(remote_path, "wb") as target:
                target.set_pipelined(True)
                transferred = _copy(source, target)
            remote_size = self._sftp.stat(remote_path).st_size
        except OSError as e:
            logger.warning("Upload of %s to %s failed: %s", local_path, remote_path, e)
            return TransferOutcome(0, False, str(e))

        return self._verify(transferred, remote_size, remote_path)

    def download(self, remote_path: str, local_path: str) -> TransferOutcome:
        """Copy `remote_path` into a local file, overwriting it.

        Raises:
            NotFoundError: If `remote_path` does not exist on the server.
        """
        logger.debug("Downloading %s -> %s", remote_path, local_path)
        try:
            remote_size = self._sftp.stat(remote_path).st_size
        except FileNotFoundError:
            raise NotFoundError(f"The remote file does not exist: {remote_path}") from None
        except OSError as e:
            logger.warning("Unable to stat %s: %s", remote_path, e)
            return TransferOutcome(0, False, str(e))

        try:
            with self._sftp.open(remote_path, "rb") as source, open(local_path, "wb") as target:
                source.prefetch(remote_size)
                transferred = _copy(source, target)
        except OSError as e:
            logger.warning("Download of %s to %s failed: %s", remote_path, local_path, e)
            return TransferOutcome(0, False, str(e))

        return self._verify(transferred, remote_size, remote_path)

    @staticmethod
    def _verify(transferred: int, expected: int | None, remote_path: str) -> TransferOutcome:
        if expected is not None and transferred != expected:
            message = f"Size mismatch for {remote_path}: transferred {transferred}, remote has {expected}"
            logger.warning(message)
            return TransferOutcome(transferred, False, message)
        logger.debug("Transferred %d bytes for %s", transferred, remote_path)
        return TransferOutcome(transferred, True)
