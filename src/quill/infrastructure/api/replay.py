"""Replay token providers - counter and timestamp schemes"""

import time
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from loguru import logger

from quill.shared.exceptions import InvalidStateError


@runtime_checkable
class StateStore(Protocol):
    """Persisted scalar holding the last-used counter value."""

    def load(self) -> str | None:
        """Return the stored value, or None when nothing is stored."""
        ...

    def save(self, value: str) -> None:
        """Overwrite the stored value."""
        ...


@runtime_checkable
class ReplayTokenProvider(Protocol):
    """Produces the anti-replay value covered by each signature."""

    header_name: str

    def next(self, override: str | None = None) -> str:
        """Return the token for the next signed operation."""
        ...

    def commit(self, token: str) -> None:
        """Record that a signed operation using token has completed."""
        ...


class CounterTokenProvider:
    """Monotonic counter persisted between invocations

    next() reads the previous value and returns previous + 1 without writing
    anything. The caller calls commit() once the request attempt completes,
    success or failure. A crash between the two leaves the counter behind the
    value already sent, and the next run reuses it.
    """

    header_name = "x-nonce"

    def __init__(self, store: StateStore) -> None:
        self._store = store

    def next(self, override: str | None = None) -> str:
        """Return previous + 1 as a decimal string

        Args:
            override: Used verbatim as the previous value instead of the store

        Raises:
            InvalidStateError: If the previous value is not an integer
        """
        if override is not None:
            previous = override
        else:
            stored = self._store.load()
            if stored is None:
                logger.info("Nonce file not found, starting from 0")
                previous = "0"
            else:
                previous = stored

        try:
            value = int(previous.strip())
        except ValueError as e:
            raise InvalidStateError(
                f"Error parsing nonce {previous!r}: not an integer"
            ) from e

        return str(value + 1)

    def commit(self, token: str) -> None:
        """Persist the token as the new previous value"""
        self._store.save(token)


class TimestampTokenProvider:
    """Current Unix epoch seconds; no persisted state

    Clock skew tolerance is enforced by the server only.
    """

    header_name = "x-timestamp"

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock

    def next(self, override: str | None = None) -> str:
        """Return the current epoch second count, or the override unchanged"""
        if override is not None:
            return override
        now = self._clock() if self._clock is not None else time.time()
        return str(int(now))

    def commit(self, token: str) -> None:
        """Nothing to persist for timestamps"""
        return None


def build_token_provider(
    mode: str, store: StateStore | None = None
) -> ReplayTokenProvider:
    """Create the provider for a token mode

    Args:
        mode: "counter" or "timestamp"
        store: State store, required for counter mode

    Raises:
        ValueError: If mode is unknown or counter mode has no store
    """
    if mode == "counter":
        if store is None:
            raise ValueError("Counter token mode requires a state store")
        return CounterTokenProvider(store)
    if mode == "timestamp":
        return TimestampTokenProvider()
    raise ValueError(f"Unknown token mode: {mode}")
