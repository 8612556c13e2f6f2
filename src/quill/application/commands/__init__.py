from quill.application.commands.base import (
    Command,
    SendCommand,
    SignCommand,
    StreamCommand,
)

__all__ = [
    "Command",
    "SignCommand",
    "StreamCommand",
    "SendCommand",
]
