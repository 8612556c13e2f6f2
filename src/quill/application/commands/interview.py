"""Interactive prompts for values not supplied on the command line"""

import json

from loguru import logger
from rich.console import Console

from quill.shared.exceptions import ConfigurationError


def read_url(console: Console, stdin, url: str | None = None) -> str:
    """Return url if given, otherwise prompt for it on stdin

    Raises:
        ConfigurationError: If no URL is supplied
    """
    if url:
        console.print(
            f"url: {url}", markup=False, highlight=False, soft_wrap=True
        )
        return url

    console.print("url: ", end="", markup=False)
    url = stdin.readline().strip("\n ")
    if not url:
        raise ConfigurationError("No URL given")
    return url


def read_body(console: Console, stdin) -> bytes:
    """Read a JSON body line by line until an empty line, return it compacted

    Raises:
        ConfigurationError: If the body is not valid JSON
    """
    console.print("body (hit return to end):", markup=False)
    lines = []
    for line in iter(stdin.readline, ""):
        if line.rstrip("\r\n") == "":
            break
        lines.append(line)

    text = "".join(lines)
    if not text.strip():
        return b""
    return compact_json(text)


JSON_WHITESPACE = frozenset(" \t\n\r")


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def compact_json(text: str) -> bytes:
    """Remove insignificant whitespace from a JSON document

    Only whitespace between tokens is dropped. Numbers, escapes, key order
    and duplicate keys are kept exactly as typed, so the signed bytes match
    the body the operator sends.

    Raises:
        ConfigurationError: If text is not valid JSON
    """
    try:
        json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise ConfigurationError(f"Body is not valid JSON: {e}") from e

    out = []
    in_string = False
    escaped = False
    for char in text:
        if in_string:
            out.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
            out.append(char)
        elif char not in JSON_WHITESPACE:
            out.append(char)

    compacted = "".join(out)
    logger.debug(f"Compacted body: {compacted}")
    return compacted.encode("utf-8")
