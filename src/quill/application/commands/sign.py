from loguru import logger

from quill.application.commands.base import SignCommand
from quill.application.commands.interview import read_body, read_url
from quill.application.commands.send import print_line
from quill.shared.exceptions import QuillError


async def handle_sign(context, command: SignCommand) -> int:
    """Sign a URL and body without sending anything

    The counter is committed as soon as the signature exists, since the
    headers are handed to the operator for use elsewhere.

    Args:
        context: ClientContext instance
        command: SignCommand with optional url and nonce override

    Returns:
        Exit code (0 for success, 1 for error)
    """
    console = context.console
    try:
        url = read_url(console, context.stdin, command.url)
        body = read_body(console, context.stdin)

        signer = context.signer()
        provider = context.token_provider()

        token = provider.next(command.nonce)
        digest = signer.digest(token, url, body)
        signature = signer.sign(token, url, body)
        provider.commit(token)
    except QuillError as e:
        logger.error(f"Sign failed ({type(e).__name__}): {e}")
        return 1

    print_line(console, digest.hex())
    print_line(console, f"x-sign: {signature}")
    print_line(console, f"{provider.header_name}: {token}")

    if command.verify:
        if not signer.verify(token, url, body, signature):
            logger.error("Signature verification failed")
            return 1
        logger.info("Signature verified against public key")

    return 0
