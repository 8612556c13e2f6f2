"""Local file storage for credentials, request definitions and counter state"""

import base64
from pathlib import Path

from loguru import logger

from quill.domain.models.request import (
    HTTP_METHODS,
    RequestDefinition,
    carries_payload,
)
from quill.shared.exceptions import ConfigurationError, InvalidStateError


class FileStateStore:
    """Single scalar counter persisted as decimal text

    load() returns None when the file does not exist; save() overwrites it.
    Concurrent writers on the same file are not coordinated.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Location of the counter file"""
        return self._path

    def load(self) -> str | None:
        """Read the stored value with surrounding whitespace trimmed

        Raises:
            InvalidStateError: If the file exists but cannot be read
        """
        try:
            return self._path.read_text().strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise InvalidStateError(
                f"Error loading nonce file {self._path}: {e}"
            ) from e

    def save(self, value: str) -> None:
        """Overwrite the stored value

        Raises:
            InvalidStateError: If the file cannot be written
        """
        try:
            self._path.write_text(value)
        except OSError as e:
            raise InvalidStateError(
                f"Error writing nonce file {self._path}: {e}"
            ) from e
        logger.debug(f"Persisted replay counter {value} to {self._path}")


def read_pem_file(path: str | Path) -> bytes:
    """Read PEM-encoded key material

    Raises:
        ConfigurationError: If the file cannot be read
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Cannot read private key {path}: {e}") from e


def load_api_key(path: str | Path) -> str:
    """Load an API key file and encode its raw bytes for the header

    The header carries the unpadded URL-safe base64 form of the file content,
    byte for byte, including any trailing newline.

    Raises:
        ConfigurationError: If the file cannot be read
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Cannot read API key file {path}: {e}") from e
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def load_request(requests_dir: str | Path, name: str) -> RequestDefinition:
    """Load a stored request definition

    Layout:
        <requests_dir>/<name>/uri   "METHOD URI" on a single line
        <requests_dir>/<name>/body  raw body, read only for POST/PUT/PATCH

    Args:
        requests_dir: Root directory of request definitions
        name: Request identifier (sub-directory name)

    Returns:
        RequestDefinition with the method upper-cased

    Raises:
        ConfigurationError: If a file is missing or the uri line is malformed
    """
    base = Path(requests_dir) / name
    uri_path = base / "uri"

    try:
        uri_line = uri_path.read_text().strip("\n ")
    except OSError as e:
        raise ConfigurationError(f"Cannot read request {uri_path}: {e}") from e

    words = uri_line.split(" ")
    if len(words) != 2:
        raise ConfigurationError(
            f"Invalid uri file {uri_path}: expected 'METHOD URI', got {uri_line!r}"
        )

    method, uri = words[0].upper(), words[1]
    if method not in HTTP_METHODS:
        raise ConfigurationError(
            f"Invalid uri file {uri_path}: unsupported method {words[0]!r}"
        )

    body = b""
    if carries_payload(method):
        body_path = base / "body"
        try:
            body = body_path.read_bytes()
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read request body {body_path}: {e}"
            ) from e

    logger.debug(f"Loaded request {name}: {method} {uri} ({len(body)} body bytes)")
    return RequestDefinition(method=method, uri=uri, body=body)
