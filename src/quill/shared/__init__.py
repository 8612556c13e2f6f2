"""Shared utilities and exceptions"""

from .exceptions import (
    ConfigurationError,
    DecodeError,
    InvalidStateError,
    QuillError,
    SigningError,
    TransportError,
)

__all__ = [
    "QuillError",
    "ConfigurationError",
    "InvalidStateError",
    "SigningError",
    "TransportError",
    "DecodeError",
]
