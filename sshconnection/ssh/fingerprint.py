"""Host key fingerprints.

The algorithms follow the historical SSH fingerprint conventions (MD5 and
SHA-1 over the raw public host key blob). Both are weak hashes: use the
result for informational identity checks only. The digest is taken over the
binary key blob, as `ssh-keygen -E md5` does, so it intentionally differs
from wrappers that hash the base64 text form of the key.
"""

from __future__ import annotations

import hashlib
from enum import Enum

from sshconnection.errors import ConfigurationError


class FingerprintType(str, Enum):
    MD5 = "md5"
    SHA1 = "sha1"

    @classmethod
    def parse(cls, value: "FingerprintType | str") -> "FingerprintType":
        """Return the enum member for `value`, accepting names case-insensitively."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError("Invalid fingerprint type specified.") from None


_HASHERS = {
    FingerprintType.MD5: hashlib.md5,
    FingerprintType.SHA1: hashlib.sha1,
}


def compute_fingerprint(host_key: bytes, fingerprint_type: FingerprintType | str) -> str:
    """Hash a raw host key blob and return the digest as uppercase hex."""
    hasher = _HASHERS[FingerprintType.parse(fingerprint_type)]
    return hasher(host_key).hexdigest().upper()
