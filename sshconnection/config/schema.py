"""Schema validation for the YAML host inventory.

The inventory is a mapping with a single required `hosts` list. Each host
declares how to reach it and exactly one credential source.
"""

from __future__ import annotations

from typing import Any

from sshconnection.errors import ConfigurationError


class SchemaError(ConfigurationError):
    """Raised when the YAML configuration structure is invalid."""


_CREDENTIAL_KEYS = ("password", "password_env", "private_key")
_STRING_KEYS = ("password", "password_env", "private_key", "passphrase")


def validate_config_schema(data: Any) -> None:
    """Validate the host inventory structure.

    Checks:
    - hosts: non-empty list of objects with required keys (name, hostname, username)
    - names are unique and non-empty
    - port is an integer and timeout a number, if provided
    - exactly one of password, password_env, private_key is set

    Raises:
        SchemaError: on structural issues; the message contains human-friendly details.
    """
    if not isinstance(data, dict):
        raise SchemaError("Top-level YAML must be a mapping/object")

    hosts = data.get("hosts")
    if not isinstance(hosts, list) or not hosts:
        raise SchemaError("'hosts' must be a non-empty list")

    names: set[str] = set()
    for i, host in enumerate(hosts):
        if not isinstance(host, dict):
            raise SchemaError(f"hosts[{i}] must be a mapping/object")
        for req in ("name", "hostname", "username"):
            if req not in host:
                raise SchemaError(f"hosts[{i}] is missing required field '{req}'")
        name = str(host["name"]).strip()
        if not name:
            raise SchemaError(f"hosts[{i}].name cannot be empty")
        if name in names:
            raise SchemaError(f"Duplicate host name '{name}'")
        names.add(name)

        if "port" in host and (not isinstance(host["port"], int) or isinstance(host["port"], bool)):
            raise SchemaError(f"hosts[{i}].port must be an integer if provided")
        timeout = host.get("timeout")
        if timeout is not None and (not isinstance(timeout, (int, float)) or isinstance(timeout, bool)):
            raise SchemaError(f"hosts[{i}].timeout must be a number if provided")
        for key in _STRING_KEYS:
            if host.get(key) is not None and not isinstance(host[key], str):
                raise SchemaError(f"hosts[{i}].{key} must be a string if provided")

        credentials = [key for key in _CREDENTIAL_KEYS if host.get(key)]
        if not credentials:
            raise SchemaError(
                f"hosts[{i}] must define one of {', '.join(_CREDENTIAL_KEYS)}"
            )
        if len(credentials) > 1:
            raise SchemaError(
                f"hosts[{i}] defines more than one credential: {', '.join(credentials)}"
            )
