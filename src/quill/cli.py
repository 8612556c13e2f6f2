import asyncio
import sys

from dotenv import load_dotenv
from loguru import logger

from quill.application.services.client_context import ClientContext
from quill.application.services.command_dispatcher import CommandDispatcher
from quill.core.config import Config
from quill.shared.log_setup import configure_logging


def main() -> int:
    """CLI entry point for the quill client

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    verbose = "-v" in sys.argv or "--verbose" in sys.argv
    configure_logging(verbose=verbose)
    load_dotenv()

    try:
        config = Config.from_env()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    async def run():
        dispatcher = CommandDispatcher(ClientContext(config=config))
        return await dispatcher.dispatch(sys.argv)

    try:
        return asyncio.run(run())
    except KeyboardInterrupt:
        logger.warning("Stopped manually.")
        return 1
    except Exception as e:
        logger.opt(exception=True).critical(f"Unhandled exception: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
