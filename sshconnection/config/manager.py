"""Configuration loader for SSH hosts.

Reads a YAML file containing a list of host entries and exposes helpers to
list available hosts and obtain typed connection settings for a given host.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Union

import yaml

from sshconnection.errors import ConfigurationError

from .credentials import ConnectionConfig, Credential, PasswordCredential, PrivateKeyCredential
from .schema import validate_config_schema

if TYPE_CHECKING:
    from sshconnection.ssh.connection import SSHConnection


class ConfigManager:
    """Manage access to the host inventory defined in a YAML file.

    The YAML file is expected to contain a top-level "hosts" key with a list
    of host objects. Each host must define "name", "hostname" and
    "username" plus one credential: "password", "password_env" (the name of
    an environment variable holding the password) or "private_key" (a path,
    optionally with "passphrase"). Optional keys are "port" (int, default
    22) and "timeout" (seconds).

    Args:
        config_path: Path to the YAML configuration file.
        client_factory: Passed to every `SSHConnection` built from this
            inventory; defaults to `paramiko.SSHClient`.
    """

    def __init__(self, config_path: Union[str, Path], client_factory: Callable | None = None):
        self.config_path = Path(config_path)
        self.client_factory = client_factory
        self.raw = self._load_config()
        self._hosts = {str(host["name"]).strip(): host for host in self.raw["hosts"]}

    def _load_config(self) -> dict[str, Any]:
        """Load and validate the YAML configuration file.

        Raises:
            ConfigurationError: If the file is missing or not valid YAML.
            SchemaError: If the structure is invalid.
        """
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Configuration file not found: {self.config_path}") from None
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
        validate_config_schema(data)
        return data

    def list_hosts(self) -> list[str]:
        """Return the list of host names available in the configuration."""
        return list(self._hosts.keys())

    def get_config(self, host_name: str) -> ConnectionConfig:
        """Return validated connection settings for the requested host.

        Raises:
            ConfigurationError: If the host is unknown or its password
                environment variable is unset.
        """
        if host_name not in self._hosts:
            raise ConfigurationError(f"Host '{host_name}' not found")
        host = self._hosts[host_name]
        timeout = host.get("timeout")
        return ConnectionConfig(
            hostname=str(host["hostname"]),
            username=str(host["username"]),
            credential=self._credential(host_name, host),
            port=int(host.get("port", 22)),
            timeout=float(timeout) if timeout is not None else None,
        ).validate()

    @staticmethod
    def _credential(host_name: str, host: dict[str, Any]) -> Credential:
        if host.get("private_key"):
            return PrivateKeyCredential(host["private_key"], host.get("passphrase"))
        if host.get("password_env"):
            password = os.getenv(host["password_env"])
            if not password:
                raise ConfigurationError(
                    f"Environment variable '{host['password_env']}' for host '{host_name}' is not set"
                )
            return PasswordCredential(password)
        return PasswordCredential(host["password"])

    def connection(self, host_name: str) -> "SSHConnection":
        """Return an unconnected `SSHConnection` pre-filled for `host_name`."""
        from sshconnection.ssh.connection import SSHConnection

        kwargs = {}
        if self.client_factory is not None:
            kwargs["client_factory"] = self.client_factory
        return SSHConnection.from_config(self.get_config(host_name), **kwargs)
