"""Pytest fixtures for integration tests against local servers"""

import asyncio
import base64
import hashlib

import pytest_asyncio
from websockets.asyncio.server import serve

WS_GUID = "258EAFA5-E914-47DA-95CA-C5AB0DC85B11"


class HandshakeLog:
    """Handshake requests seen by a test server"""

    def __init__(self) -> None:
        self.paths: list[str] = []
        self.headers: list[dict[str, str]] = []


@pytest_asyncio.fixture
async def frame_server():
    """Server sending three frames then closing normally

    Yields (base_url, HandshakeLog). Requests without x-sign get 403.
    """
    log = HandshakeLog()
    frames = ['{"seq": 1}', '{"seq": 2}', '{"seq": 3}']

    def process_request(connection, request):
        log.paths.append(request.path)
        log.headers.append({k.lower(): v for k, v in request.headers.raw_items()})
        if "x-sign" not in request.headers:
            return connection.respond(403, "Forbidden\n")
        return None

    async def handler(websocket):
        for frame in frames:
            await websocket.send(frame)
        await websocket.close(code=1000)

    async with serve(
        handler, "127.0.0.1", 0, process_request=process_request
    ) as server:
        port = server.sockets[0].getsockname()[1]
        yield f"ws://127.0.0.1:{port}", log


@pytest_asyncio.fixture
async def rejecting_server():
    """Server refusing every handshake with 401"""

    def process_request(connection, request):
        return connection.respond(401, "Unauthorized\n")

    async def handler(websocket):
        await websocket.close()

    async with serve(
        handler, "127.0.0.1", 0, process_request=process_request
    ) as server:
        port = server.sockets[0].getsockname()[1]
        yield f"ws://127.0.0.1:{port}"


@pytest_asyncio.fixture
async def silent_server():
    """Server completing the handshake, then ignoring every frame

    It never answers a close frame, so the client has to give up on its own.
    """
    writers: list[asyncio.StreamWriter] = []

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        writers.append(writer)
        head = await reader.readuntil(b"\r\n\r\n")
        key = ""
        for line in head.decode("latin-1").split("\r\n"):
            name, _, value = line.partition(":")
            if name.strip().lower() == "sec-websocket-key":
                key = value.strip()
        accept = base64.b64encode(
            hashlib.sha1((key + WS_GUID).encode()).digest()
        ).decode()
        writer.write(
            (
                "HTTP/1.1 101 Switching Protocols\r\n"
                "Upgrade: websocket\r\n"
                "Connection: Upgrade\r\n"
                f"Sec-WebSocket-Accept: {accept}\r\n\r\n"
            ).encode()
        )
        await writer.drain()
        # Drain and discard until the client drops the socket
        while await reader.read(1024):
            pass

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield f"ws://127.0.0.1:{port}"
    finally:
        for writer in writers:
            writer.close()
        server.close()
        await server.wait_closed()
