from __future__ import annotations
import time
from typing import Callable, Optional


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def format_time(elapsed_ms: int) -> str:
    """12345 -> '0:12'"""
    total_seconds = max(0, int(elapsed_ms)) // 1000
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


class ElapsedClock:
    """
    Round timer. Reads the time source only; display ticks are the caller's job.
    """

    def __init__(self, now_ms: Optional[Callable[[], int]] = None):
        self._now = now_ms or monotonic_ms
        self._started_at: Optional[int] = None
        self._frozen_ms = 0

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def start(self, offset_ms: int = 0) -> None:
        """Start (or resume) so that elapsed_ms() == offset_ms right now."""
        self._started_at = self._now() - int(offset_ms)

    def stop(self) -> int:
        if self._started_at is not None:
            self._frozen_ms = self._now() - self._started_at
            self._started_at = None
        return self._frozen_ms

    def reset(self) -> None:
        self._started_at = None
        self._frozen_ms = 0

    def elapsed_ms(self) -> int:
        if self._started_at is None:
            return self._frozen_ms
        return max(0, self._now() - self._started_at)

    def text(self) -> str:
        return format_time(self.elapsed_ms())
