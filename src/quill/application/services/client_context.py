"""Client context wiring configuration to signing and transport components."""

import asyncio
import signal
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TextIO

from loguru import logger
from rich.console import Console

from quill.core.config import Config
from quill.infrastructure.api.auth import RequestSigner
from quill.infrastructure.api.replay import ReplayTokenProvider, build_token_provider
from quill.infrastructure.api.requests import (
    AuthenticatedRequestBuilder,
    SignedRequestClient,
)
from quill.infrastructure.storage.files import (
    FileStateStore,
    load_api_key,
    read_pem_file,
)


@dataclass
class ClientContext:
    """Dependencies shared by the command handlers.

    Credentials are read lazily so a failing mode only touches the files it
    needs. The token provider is created once and shared so the handler that
    generates a token is also the one that commits it.
    """

    config: Config
    console: Console = field(default_factory=lambda: Console(soft_wrap=True))
    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    interrupt: asyncio.Event = field(default_factory=asyncio.Event)
    request_client: SignedRequestClient | None = None

    _signer: RequestSigner | None = field(default=None, init=False, repr=False)
    _token_provider: ReplayTokenProvider | None = field(
        default=None, init=False, repr=False
    )

    def signer(self) -> RequestSigner:
        """Signer bound to the configured PEM file

        Raises:
            ConfigurationError: If the key file is missing or malformed
        """
        if self._signer is None:
            self._signer = RequestSigner.from_pem(read_pem_file(self.config.pem_file))
        return self._signer

    def token_provider(self) -> ReplayTokenProvider:
        """Replay token provider for the configured mode"""
        if self._token_provider is None:
            store = (
                FileStateStore(self.config.nonce_file)
                if self.config.token_mode == "counter"
                else None
            )
            self._token_provider = build_token_provider(self.config.token_mode, store)
        return self._token_provider

    def api_key(self) -> str:
        """Literal API key if configured, otherwise the encoded key file

        Raises:
            ConfigurationError: If the key file cannot be read
        """
        if self.config.api_key:
            return self.config.api_key
        return load_api_key(self.config.api_key_file)

    def request_builder(self, with_api_key: bool = True) -> AuthenticatedRequestBuilder:
        """Builder using this context's signer and token provider"""
        return AuthenticatedRequestBuilder(
            self.signer(),
            self.token_provider(),
            api_key=self.api_key() if with_api_key else "",
        )

    @contextmanager
    def interrupt_on_sigint(self) -> Iterator[asyncio.Event]:
        """Route SIGINT to self.interrupt while the block runs"""
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, self.interrupt.set)
        except (NotImplementedError, RuntimeError):
            # No loop signal support (Windows, or not on the main thread)
            logger.debug("SIGINT handler not installed; Ctrl-C raises instead")
            yield self.interrupt
            return

        try:
            yield self.interrupt
        finally:
            loop.remove_signal_handler(signal.SIGINT)

    def http_client(self) -> SignedRequestClient:
        """Unary transport, created on first use"""
        if self.request_client is None:
            self.request_client = SignedRequestClient(timeout=self.config.timeout)
        return self.request_client
