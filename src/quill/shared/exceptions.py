"""Consolidated exceptions for the quill client.

All custom exceptions are defined here to provide a single source of truth
for error handling across the application.
"""


class QuillError(Exception):
    """Base exception for quill errors"""

    pass


class ConfigurationError(QuillError):
    """Raised when a key, API key or request definition is missing or malformed"""

    pass


class InvalidStateError(QuillError):
    """Raised when the persisted replay counter cannot be parsed"""

    pass


class SigningError(QuillError):
    """Raised when the signing primitive rejects the key or digest"""

    pass


class TransportError(QuillError):
    """Raised when a connection, handshake, read or write fails"""

    pass


class DecodeError(QuillError):
    """Raised when an inbound frame does not match the session's message shape"""

    pass
