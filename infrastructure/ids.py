from __future__ import annotations

import time

from domain.repositories import IdGenerator


def epoch_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""

    return int(time.time() * 1000)


class TimestampIdGenerator(IdGenerator):
    """
    Issues ids of the form `<prefix><epoch millis>`.

    Two calls in the same millisecond would collide, so each id is forced
    to be strictly greater than the previous one from this generator.
    Ids from separate generators (e.g. two processes) can still collide;
    `register` re-draws when an id is already taken.
    """

    def __init__(self, prefix: str = "u_", clock=epoch_millis) -> None:
        self._prefix = prefix
        self._clock = clock
        self._last = 0

    def next_id(self) -> str:
        value = max(self._clock(), self._last + 1)
        self._last = value
        return f"{self._prefix}{value}"
