"""StreamSession - authenticated WebSocket lifecycle

The session is authenticated once, by the headers on the upgrade request.
Once connected two tasks run: the read loop, which decodes and publishes
frames, and the watcher in run(), which waits for either an interrupt or the
read loop to finish. Only the watcher closes the connection.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from loguru import logger
from websockets.asyncio.client import connect
from websockets.exceptions import (
    ConnectionClosedError,
    ConnectionClosedOK,
    InvalidStatus,
    WebSocketException,
)

from quill.domain.models.request import SignedRequest
from quill.domain.models.stream_message import StreamKind, StreamMessage, decode_frame
from quill.shared.exceptions import TransportError
from quill.shared.log_setup import install_logging_bridge

Connector = Callable[..., Awaitable[Any]]
MessageHandler = Callable[[StreamMessage], None]


class SessionState(Enum):
    """Lifecycle states of a streaming session"""

    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSING = "closing"
    CLOSED = "closed"
    FAILED = "failed"


class StreamSession:
    """One authenticated streaming connection

    Responsibilities:
    - Handshake with the signed headers
    - Read loop decoding frames against a single message shape
    - Interrupt-driven close bounded by close_timeout
    - Releasing the connection exactly once
    """

    def __init__(
        self,
        request: SignedRequest,
        kind: StreamKind,
        on_message: MessageHandler,
        close_timeout: float = 1.0,
        open_timeout: float = 30.0,
        connector: Connector | None = None,
    ) -> None:
        """Initialize the session

        Args:
            request: Signed handshake request (URI and auth headers)
            kind: Endpoint kind selecting the message shape for every frame
            on_message: Called with each decoded message, in delivery order
            close_timeout: Seconds to wait for the peer after sending a close frame
            open_timeout: Seconds allowed for the opening handshake
            connector: Coroutine function opening the connection (for testing)
        """
        self._request = request
        self._kind = kind
        self._on_message = on_message
        self._close_timeout = close_timeout
        self._open_timeout = open_timeout
        self._connector = connector or connect

        self._state = SessionState.CONNECTING
        self._connection: Any = None
        self._close_task: asyncio.Task | None = None
        self._messages_received = 0

        install_logging_bridge()

    @property
    def state(self) -> SessionState:
        """Current lifecycle state"""
        return self._state

    @property
    def kind(self) -> StreamKind:
        """Endpoint kind fixed at construction"""
        return self._kind

    @property
    def messages_received(self) -> int:
        """Number of frames decoded and published"""
        return self._messages_received

    async def run(self, interrupt: asyncio.Event | None = None) -> None:
        """Connect, stream until the peer closes or interrupt is set, then close

        Args:
            interrupt: Set by the caller to request a graceful shutdown

        Raises:
            TransportError: If the handshake fails or the connection breaks
            DecodeError: If a frame does not match the session's message shape
        """
        if self._state is not SessionState.CONNECTING:
            raise RuntimeError(f"Session already used (state={self._state.value})")

        interrupt = interrupt or asyncio.Event()

        await self._open()

        read_task = asyncio.create_task(self._read_loop(), name="quill-stream-read")
        interrupt_task = asyncio.create_task(
            interrupt.wait(), name="quill-stream-interrupt"
        )
        interrupted = False

        try:
            await asyncio.wait(
                {read_task, interrupt_task}, return_when=asyncio.FIRST_COMPLETED
            )
            self._state = SessionState.CLOSING

            if not read_task.done():
                interrupted = True
                logger.info("Interrupt received, closing stream")
                await self._close_gracefully(read_task)
        finally:
            self._state = SessionState.CLOSING
            interrupt_task.cancel()
            if not read_task.done():
                read_task.cancel()
            await asyncio.wait({read_task, interrupt_task})
            await self._release()

        error = None if read_task.cancelled() else read_task.exception()
        if error is not None and not interrupted:
            self._state = SessionState.FAILED
            logger.error(f"Stream ended with error: {error}")
            raise error

        if error is not None:
            logger.debug(f"Read loop ended during close: {error}")

        self._state = SessionState.CLOSED
        logger.info(
            f"Stream closed after {self._messages_received} message(s)"
        )

    async def _open(self) -> None:
        """Perform the authenticated handshake

        Raises:
            TransportError: If the handshake is rejected or the network fails
        """
        logger.info(f"Connecting to {self._request.uri}")
        try:
            self._connection = await self._connector(
                self._request.uri,
                additional_headers=self._request.headers,
                open_timeout=self._open_timeout,
                close_timeout=self._close_timeout,
                max_size=None,
            )
        except InvalidStatus as e:
            self._state = SessionState.FAILED
            raise TransportError(
                f"Cannot connect to websocket: handshake rejected with HTTP {e.response.status_code}"
            ) from e
        except (WebSocketException, OSError, asyncio.TimeoutError) as e:
            self._state = SessionState.FAILED
            raise TransportError(f"Cannot connect to websocket: {e}") from e

        self._state = SessionState.CONNECTED
        logger.info("Connected")

    async def _read_loop(self) -> None:
        """Decode and publish frames until the connection closes

        Returns normally on a normal closure. Decode errors propagate and end
        the session.
        """
        while True:
            try:
                frame = await self._connection.recv()
            except ConnectionClosedOK:
                logger.info("Server closed the stream")
                return
            except ConnectionClosedError as e:
                raise TransportError(f"Read from websocket failed: {e}") from e

            message = decode_frame(frame, self._kind)
            self._messages_received += 1
            self._on_message(message)

    async def _close_gracefully(self, read_task: asyncio.Task) -> None:
        """Send a normal-closure frame and wait briefly for the read loop"""
        self._start_close()

        done, _ = await asyncio.wait({read_task}, timeout=self._close_timeout)
        if not done:
            logger.warning(
                f"Peer did not acknowledge close within {self._close_timeout}s"
            )

    def _start_close(self) -> asyncio.Task:
        """Begin closing the connection; later calls return the same task"""
        if self._close_task is None:
            self._close_task = asyncio.create_task(
                self._connection.close(code=1000), name="quill-stream-close"
            )
        return self._close_task

    async def _release(self) -> None:
        """Close the connection once, aborting it if the close stalls"""
        if self._connection is None:
            return

        close_task = self._start_close()
        done, _ = await asyncio.wait({close_task}, timeout=self._close_timeout)

        if not done:
            logger.warning("Close did not complete in time, aborting connection")
            close_task.cancel()
            await asyncio.wait({close_task})
            transport = getattr(self._connection, "transport", None)
            if transport is not None:
                transport.abort()
        elif not close_task.cancelled() and close_task.exception() is not None:
            logger.warning(f"Error closing websocket: {close_task.exception()}")
