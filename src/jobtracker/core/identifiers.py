"""Client-side record identifiers."""

import time
from typing import Callable, Iterable, Optional


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class IdGenerator:
    """Millisecond timestamps, bumped so that every id is strictly larger than the last.

    Ids minted inside one clock tick, or after the wall clock steps
    backwards, still come out unique.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None, floor: int = 0):
        self._clock = clock or _now_ms
        self._last = floor

    def __call__(self) -> int:
        return self.next_id()

    def next_id(self) -> int:
        candidate = self._clock()
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate

    def observe(self, existing_ids: Iterable[int]) -> None:
        """Make sure future ids stay above ids already in use."""
        for existing in existing_ids:
            if existing > self._last:
                self._last = existing
