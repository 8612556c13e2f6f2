"""Signed API infrastructure

RequestSigner - Canonical message signing with RSA PKCS#1 v1.5 / SHA-256
CounterTokenProvider, TimestampTokenProvider - Replay tokens
AuthenticatedRequestBuilder - Signed request assembly
SignedRequestClient - One-shot HTTP transport
StreamSession - Authenticated WebSocket lifecycle
"""

from .auth import RequestSigner, canonical_message, load_private_key
from .replay import (
    CounterTokenProvider,
    ReplayTokenProvider,
    StateStore,
    TimestampTokenProvider,
    build_token_provider,
)
from .requests import (
    AuthenticatedRequestBuilder,
    SignedRequestClient,
    UnaryResponse,
)
from .stream import SessionState, StreamSession

__all__ = [
    "RequestSigner",
    "canonical_message",
    "load_private_key",
    "ReplayTokenProvider",
    "StateStore",
    "CounterTokenProvider",
    "TimestampTokenProvider",
    "build_token_provider",
    "AuthenticatedRequestBuilder",
    "SignedRequestClient",
    "UnaryResponse",
    "SessionState",
    "StreamSession",
]
