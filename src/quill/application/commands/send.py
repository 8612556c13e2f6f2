from loguru import logger

from quill.application.commands.base import SendCommand
from quill.domain.models.request import SignedRequest
from quill.infrastructure.api.replay import ReplayTokenProvider
from quill.infrastructure.storage.files import load_request
from quill.shared.exceptions import QuillError


def print_line(console, text: str) -> None:
    """Print text verbatim on one line, whatever the console width"""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def print_request(console, request: SignedRequest) -> None:
    """Print the request line and authentication headers"""
    print_line(console, f"{request.method} {request.uri}")
    for name, value in request.headers.items():
        print_line(console, f"{name}: {value}")


def commit_token(provider: ReplayTokenProvider, token: str) -> bool:
    """Persist a used token, logging instead of raising on failure

    Returns:
        True if the token was recorded
    """
    try:
        provider.commit(token)
    except QuillError as e:
        logger.error(
            f"Could not record replay token {token} ({type(e).__name__}): {e}"
        )
        return False
    return True


async def handle_send(context, command: SendCommand) -> int:
    """Sign and send a stored request definition

    The counter is committed after the attempt whether it succeeded or not.
    A failed commit is reported but does not hide the response.

    Args:
        context: ClientContext instance
        command: SendCommand naming the request definition

    Returns:
        Exit code (0 for a 2xx response with the token recorded, 1 otherwise)
    """
    console = context.console
    logger.info(f"Sending request: {command.request_name}")

    try:
        definition = load_request(
            context.config.requests_dir, command.request_name
        )
        builder = context.request_builder()
        request = builder.build(
            definition.method,
            definition.uri,
            definition.body,
            token_override=command.nonce,
        )
    except QuillError as e:
        logger.error(f"Request preparation failed ({type(e).__name__}): {e}")
        return 1

    print_request(console, request)
    print_line(console, "---")

    response = None
    try:
        try:
            response = await context.http_client().send(request)
        except QuillError as e:
            logger.error(f"Request failed ({type(e).__name__}): {e}")

        if response is not None:
            print_line(console, response.status_line)
            print_line(console, response.text)
    finally:
        committed = commit_token(builder.token_provider, request.token)

    if response is None or not committed:
        return 1
    return 0 if response.is_success else 1
