"""Shared TypedDict contracts for the SSH MCP tools."""

from __future__ import annotations

from typing import TypedDict


class BaseResult(TypedDict):
    status: str
    stdout: str
    stderr: str
    return_code: int


class RunCommandResult(BaseResult):
    command: str


class ListHostsResult(TypedDict):
    hosts: list[str]


class TransferResult(TypedDict):
    status: str
    host: str
    local_path: str
    remote_path: str
    bytes_transferred: int


class FingerprintResult(TypedDict):
    host: str
    algorithm: str
    fingerprint: str
