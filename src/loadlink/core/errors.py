"""Errors raised below the device gateway boundary."""

from __future__ import annotations


class LoadlinkError(Exception):
    """Base error for loadlink."""


class DeviceError(LoadlinkError):
    """Base error for a failed device exchange."""


class TransportError(DeviceError):
    """Raised when the device cannot be reached or does not answer in time."""


class ProtocolError(DeviceError):
    """Raised when the device answers with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class DecodeError(DeviceError):
    """Raised when a payload does not match the expected shape."""


class ApplicationError(DeviceError):
    """Raised when the device reports ``status: error`` in a well-formed body."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
