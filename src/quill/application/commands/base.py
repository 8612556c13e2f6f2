from dataclasses import dataclass

from quill.domain.models.stream_message import StreamKind


@dataclass
class Command:
    """Base command class"""

    name: str
    nonce: str | None = None


@dataclass
class SignCommand(Command):
    """Sign a URL and body read interactively, print the headers"""

    url: str | None = None
    verify: bool = False


@dataclass
class StreamCommand(Command):
    """Open an authenticated streaming session"""

    url: str | None = None
    kind: StreamKind = StreamKind.RAW


@dataclass
class SendCommand(Command):
    """Send a stored request definition"""

    request_name: str = ""
