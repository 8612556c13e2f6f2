"""Loguru setup and stdlib logging bridge"""

import logging
import sys

from loguru import logger

_logging_bridge_installed = False


class _LoguruHandler(logging.Handler):
    """Bridge stdlib logging into loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


def install_logging_bridge() -> None:
    """Bridge stdlib logging used by httpx/websockets into loguru once."""
    global _logging_bridge_installed
    if _logging_bridge_installed:
        return

    handler = _LoguruHandler()
    for name in ("httpx", "websockets"):
        std_logger = logging.getLogger(name)
        std_logger.setLevel(logging.INFO)
        std_logger.addHandler(handler)
        std_logger.propagate = False

    _logging_bridge_installed = True


def configure_logging(verbose: bool = False, log_dir: str | None = "logs") -> None:
    """Replace loguru's default sink with the CLI sinks

    Args:
        verbose: Emit DEBUG records to stderr (digests, masked headers)
        log_dir: Directory for rotating log files, None to disable file logging
    """
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")
    if log_dir:
        logger.add(
            f"{log_dir}/quill_{{time}}.log",
            rotation="1 day",
            retention="30 days",
            compression="gz",
            level="DEBUG",
        )
    install_logging_bridge()
