from loguru import logger

from quill.application.commands.base import StreamCommand
from quill.application.commands.interview import read_url
from quill.application.commands.send import commit_token, print_line, print_request
from quill.infrastructure.api.stream import StreamSession
from quill.shared.exceptions import QuillError


async def handle_stream(context, command: StreamCommand) -> int:
    """Open a signed streaming session and print every message

    Runs until the server closes the stream or context.interrupt is set.
    The token is committed once the session has ended.

    Args:
        context: ClientContext instance
        command: StreamCommand with url, endpoint kind and nonce override

    Returns:
        Exit code (0 for a clean close with the token recorded, 1 otherwise)
    """
    console = context.console

    try:
        url = read_url(console, context.stdin, command.url)
        builder = context.request_builder()
        request = builder.build_handshake(url, token_override=command.nonce)
    except QuillError as e:
        logger.error(f"Stream preparation failed ({type(e).__name__}): {e}")
        return 1

    print_request(console, request)

    def show(message) -> None:
        print_line(console, message.render())

    session = StreamSession(
        request,
        command.kind,
        on_message=show,
        close_timeout=context.config.close_timeout,
        open_timeout=context.config.timeout,
    )

    failed = False
    try:
        try:
            with context.interrupt_on_sigint() as interrupt:
                await session.run(interrupt)
        except QuillError as e:
            failed = True
            logger.error(f"Stream {session.state.value} ({type(e).__name__}): {e}")
    finally:
        committed = commit_token(builder.token_provider, request.token)

    return 1 if failed or not committed else 0
