"""Utility helpers for the SSH package.

- masking: safe value masking for logs
- types: shared TypedDict contracts for tool results
"""

from .masking import mask_value
from .types import (
    BaseResult,
    FingerprintResult,
    ListHostsResult,
    RunCommandResult,
    TransferResult,
)

__all__ = [
    "mask_value",
    "BaseResult",
    "RunCommandResult",
    "ListHostsResult",
    "TransferResult",
    "FingerprintResult",
]
