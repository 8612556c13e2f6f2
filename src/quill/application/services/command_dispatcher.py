import argparse

from loguru import logger

from quill.application.commands.base import SendCommand, SignCommand, StreamCommand
from quill.application.commands.send import handle_send
from quill.application.commands.sign import handle_sign
from quill.application.commands.stream import handle_stream
from quill.domain.models.stream_message import StreamKind

USAGE = "quill sign|stream|<request> [flags]"


def build_flag_parser() -> argparse.ArgumentParser:
    """Flags accepted after the mode argument"""
    parser = argparse.ArgumentParser(prog="quill", usage=USAGE)
    parser.add_argument("--url", help="URL (prompted for when omitted)")
    parser.add_argument("--pemfile", dest="pem_file", help="Private key PEM file")
    parser.add_argument("--keyfile", dest="api_key_file", help="API key file")
    parser.add_argument("--apikey", dest="api_key", help="API key")
    parser.add_argument("--nonce", help="Reset nonce (previous counter value)")
    parser.add_argument("--noncefile", dest="nonce_file", help="Nonce file")
    parser.add_argument(
        "--token-mode",
        dest="token_mode",
        choices=("counter", "timestamp"),
        help="Replay protection scheme",
    )
    parser.add_argument(
        "--requests-dir", dest="requests_dir", help="Request definitions root"
    )
    parser.add_argument("--timeout", type=float, help="Network timeout (seconds)")
    parser.add_argument(
        "--kind",
        choices=[k.value for k in StreamKind],
        default=StreamKind.RAW.value,
        help="Streaming endpoint kind",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Verify the signature against the public key (sign mode)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output")
    return parser


class CommandDispatcher:
    """Dispatches CLI commands to appropriate handlers"""

    CONFIG_FLAGS = (
        "pem_file",
        "api_key_file",
        "api_key",
        "nonce_file",
        "token_mode",
        "requests_dir",
        "timeout",
    )

    def __init__(self, context) -> None:
        self.context = context
        self._handlers = {
            "sign": self._handle_sign,
            "stream": self._handle_stream,
            "websocket": self._handle_stream,
        }

    async def dispatch(self, argv: list[str]) -> int:
        """Parse and execute command

        Args:
            argv: Command line arguments (sys.argv)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        if len(argv) < 2 or argv[1].startswith("-"):
            self._print_usage()
            return 1

        method = argv[1]
        try:
            flags = build_flag_parser().parse_args(argv[2:])
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1

        try:
            self.context.config = self.context.config.with_overrides(
                **{name: getattr(flags, name) for name in self.CONFIG_FLAGS}
            )
        except ValueError as e:
            logger.error(f"Configuration error: {e}")
            return 1

        handler = self._handlers.get(method, self._handle_send)
        return await handler(method, flags)

    def _print_usage(self) -> None:
        """Print available commands"""
        logger.error(f"No method specified. Usage: {USAGE}")

    async def _handle_sign(self, method: str, flags: argparse.Namespace) -> int:
        """Handle sign command"""
        command = SignCommand(
            name="sign", nonce=flags.nonce, url=flags.url, verify=flags.verify
        )
        return await handle_sign(self.context, command)

    async def _handle_stream(self, method: str, flags: argparse.Namespace) -> int:
        """Handle stream command"""
        command = StreamCommand(
            name="stream",
            nonce=flags.nonce,
            url=flags.url,
            kind=StreamKind(flags.kind),
        )
        return await handle_stream(self.context, command)

    async def _handle_send(self, method: str, flags: argparse.Namespace) -> int:
        """Handle a stored request name"""
        command = SendCommand(name="send", nonce=flags.nonce, request_name=method)
        return await handle_send(self.context, command)
