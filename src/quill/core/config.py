"""Configuration management for the quill client"""

import os
from dataclasses import dataclass, fields, replace
from typing import Literal

from loguru import logger

TokenMode = Literal["counter", "timestamp"]

TOKEN_MODES: tuple[str, ...] = ("counter", "timestamp")


@dataclass(frozen=True)
class Config:
    """Configuration for the quill client loaded from environment variables

    Command-line flags are layered on top with with_overrides().
    """

    # Credential locations
    pem_file: str = "private.pem"
    api_key_file: str = "apikey"

    # Literal API key, takes precedence over api_key_file when set
    api_key: str | None = None

    # Replay protection
    token_mode: TokenMode = "counter"
    nonce_file: str = "nonce"

    # Directory holding <name>/uri and <name>/body request definitions
    requests_dir: str = "requests"

    # HTTP request and WebSocket open timeout (seconds)
    timeout: float = 30.0

    # Grace period after sending a close frame on interrupt (seconds)
    close_timeout: float = 1.0

    def __post_init__(self) -> None:
        if self.token_mode not in TOKEN_MODES:
            raise ValueError(
                f"Invalid token mode {self.token_mode!r}, expected one of {TOKEN_MODES}"
            )
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout}")
        if self.close_timeout <= 0:
            raise ValueError(
                f"Close timeout must be positive, got {self.close_timeout}"
            )

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables

        Returns:
            Config instance with values from environment

        Raises:
            ValueError: If an environment variable holds an invalid value
        """
        defaults = cls()

        try:
            timeout = float(os.getenv("QUILL_TIMEOUT", str(defaults.timeout)))
            close_timeout = float(
                os.getenv("QUILL_CLOSE_TIMEOUT", str(defaults.close_timeout))
            )
        except ValueError as e:
            raise ValueError(f"Invalid timeout in environment: {e}") from e

        config = cls(
            pem_file=os.getenv("QUILL_PEM_FILE", defaults.pem_file),
            api_key_file=os.getenv("QUILL_API_KEY_FILE", defaults.api_key_file),
            api_key=os.getenv("QUILL_API_KEY") or None,
            token_mode=os.getenv("QUILL_TOKEN_MODE", defaults.token_mode).lower(),  # type: ignore[arg-type]
            nonce_file=os.getenv("QUILL_NONCE_FILE", defaults.nonce_file),
            requests_dir=os.getenv("QUILL_REQUESTS_DIR", defaults.requests_dir),
            timeout=timeout,
            close_timeout=close_timeout,
        )

        config.log_summary()
        return config

    def with_overrides(self, **overrides: object) -> "Config":
        """Return a copy with every non-None override applied

        Raises:
            ValueError: If an override names an unknown field or is invalid
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown configuration fields: {sorted(unknown)}")

        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)

    def log_summary(self) -> None:
        """Log the effective configuration with the API key masked"""
        logger.info("Configuration loaded:")
        logger.info(f"  PEM File: {self.pem_file}")
        logger.info(
            f"  API Key: {'Literal (masked)' if self.api_key else self.api_key_file}"
        )
        logger.info(f"  Token Mode: {self.token_mode}")
        if self.token_mode == "counter":
            logger.info(f"  Nonce File: {self.nonce_file}")
        logger.info(f"  Requests Dir: {self.requests_dir}")
        logger.info(f"  Timeout: {self.timeout}s")
        logger.info(f"  Close Timeout: {self.close_timeout}s")
