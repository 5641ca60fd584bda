from .credentials import (
    ConnectionConfig,
    Credential,
    PasswordCredential,
    PrivateKeyCredential,
)
from .manager import ConfigManager
from .schema import SchemaError, validate_config_schema

__all__ = [
    "ConfigManager",
    "ConnectionConfig",
    "Credential",
    "PasswordCredential",
    "PrivateKeyCredential",
    "SchemaError",
    "validate_config_schema",
]
