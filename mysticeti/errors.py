"""Exceptions raised while operating a benchmark testbed.

Every error derives from ``TestbedError``.  SSH failures are also monitor
failures, because the monitor reaches its instances over SSH.
"""

from __future__ import annotations

from typing import Any


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_address(address: Any) -> str:
    if isinstance(address, tuple):
        host, port = address
        host = str(host)
        if ":" in host:
            return f"[{host}]:{port}"
        return f"{host}:{port}"
    return str(address)


class TestbedError(Exception):
    """Any failure while operating the testbed."""

    __test__ = False


class SettingsError(TestbedError):
    """The testbed settings, or a file they point to, could not be read."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidSettings(SettingsError):
    def __init__(self, file: str, message: str) -> None:
        self.file = file
        self.message = message
        super().__init__(f"Failed to read settings file '{_quoted(file)}': {message}")


class TokenFileError(SettingsError):
    def __init__(self, file: str, message: str) -> None:
        self.file = file
        self.message = message
        super().__init__(f"Failed to read token file '{_quoted(file)}': {message}")


class SshPublicKeyFileError(SettingsError):
    def __init__(self, file: str, message: str) -> None:
        self.file = file
        self.message = message
        super().__init__(
            f"Failed to read ssh public key file '{_quoted(file)}': {message}"
        )


class CloudProviderError(TestbedError):
    """The cloud provider rejected or failed a request."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class RequestError(CloudProviderError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Failed to send server request: {message}")


class UnexpectedResponse(CloudProviderError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Unexpected response: {message}")


class FailureResponseCode(CloudProviderError):
    def __init__(self, status: str, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"Received error status code ({status}): {message}")


class SshKeyNotFound(CloudProviderError):
    def __init__(self, key_name: str) -> None:
        self.key_name = key_name
        super().__init__(f'SSH key "{key_name}" not found')


class MonitorError(TestbedError):
    """The monitoring stack could not be operated."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class GrafanaError(MonitorError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Failed to start Grafana: {message}")


class SshError(MonitorError):
    """A remote instance could not be reached or a remote command failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class SessionError(SshError):
    def __init__(self, address: Any, error: Any) -> None:
        self.address = address
        self.error = error
        super().__init__(
            f"Failed to create ssh session with {_format_address(address)}: {error}"
        )


class SshConnectionError(SshError):
    def __init__(self, address: Any, error: Any) -> None:
        self.address = address
        self.error = error
        super().__init__(
            f"Failed to connect to instance {_format_address(address)}: {error}"
        )


class NonZeroExitCode(SshError):
    def __init__(self, address: Any, code: int, message: str) -> None:
        self.address = address
        self.code = code
        self.message = message
        super().__init__(
            f"Remote execution on {_format_address(address)} returned exit code "
            f"({code}): {message}"
        )


class InsufficientCapacity(TestbedError):
    def __init__(self, missing: int) -> None:
        self.missing = missing
        super().__init__(f"Not enough instances: missing {missing} instances")