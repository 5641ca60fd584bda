"""Private key loading.

Key material is read from disk and parsed with paramiko. Public keys are
rejected explicitly so that a misconfigured path fails before any network
connection is attempted.
"""

from __future__ import annotations

import io
import logging
import os

import paramiko

from sshconnection.errors import ConfigurationError, NotFoundError

logger = logging.getLogger(__name__)

# Ed25519 first: OpenSSH-format RSA/ECDSA keys share the same envelope.
_KEY_CLASSES: tuple[type[paramiko.PKey], ...] = (
    paramiko.Ed25519Key,
    paramiko.ECDSAKey,
    paramiko.RSAKey,
)

_PUBLIC_KEY_PREFIXES = ("ssh-", "ecdsa-sha2-", "sk-ssh-", "sk-ecdsa-")
_PUBLIC_KEY_MARKERS = (
    "BEGIN PUBLIC KEY",
    "BEGIN RSA PUBLIC KEY",
    "BEGIN SSH2 PUBLIC KEY",
)


def is_public_key(key_content: str) -> bool:
    """Return True if `key_content` looks like public (not private) key material."""
    content = key_content.strip()
    if "PRIVATE KEY" in content:
        return False
    if any(marker in content for marker in _PUBLIC_KEY_MARKERS):
        return True
    return content.startswith(_PUBLIC_KEY_PREFIXES)


def parse_private_key(key_content: str, passphrase: str | None = None) -> paramiko.PKey:
    """Parse private key material held in a string.

    Raises:
        ConfigurationError: If the material is a public key, is encrypted and
            no passphrase was given, or is not a format paramiko understands.
    """
    if is_public_key(key_content):
        raise ConfigurationError("Provided key must be private one not public.")

    errors: list[str] = []
    for key_class in _KEY_CLASSES:
        try:
            return key_class.from_private_key(io.StringIO(key_content), password=passphrase)
        except paramiko.PasswordRequiredException:
            raise ConfigurationError(
                "Private key is encrypted; a passphrase is required."
            ) from None
        except (paramiko.SSHException, ValueError) as e:
            errors.append(f"{key_class.__name__}: {e}")

    logger.debug("Private key parse attempts failed: %s", "; ".join(errors))
    raise ConfigurationError("Unsupported or unrecognized private key format.")


def load_private_key(path: str, passphrase: str | None = None) -> paramiko.PKey:
    """Read and parse the private key stored at `path`."""
    path = os.path.expanduser(path)
    if not os.path.isfile(path):
        raise NotFoundError(f"Private key file does not exist: {path}")
    with open(path, "r", encoding="utf-8") as f:
        key_content = f.read()
    return parse_private_key(key_content, passphrase=passphrase)
