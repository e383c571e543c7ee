"""Periodic runtime ticker.

Simulates runtime while the host is active: every ``period_seconds`` it
advances running units by ``minutes_per_tick``. Ticks run on the thread
that called ``run``; ``stop`` may be called from anywhere (another thread
or a signal handler) and ends the loop at the next wait.
"""

from __future__ import annotations

import logging
import threading

from .ledger import Ledger

logger = logging.getLogger(__name__)


class Ticker:
    """Cancellable fixed-interval driver for ``Ledger.advance_time``."""

    def __init__(
        self,
        ledger: Ledger,
        period_seconds: float = 60.0,
        minutes_per_tick: int = 1,
    ) -> None:
        if period_seconds <= 0:
            raise ValueError("period_seconds must be positive")
        self.ledger = ledger
        self.period_seconds = period_seconds
        self.minutes_per_tick = minutes_per_tick
        self.ticks = 0
        self._stop = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def tick(self) -> list[str]:
        """Apply one tick immediately."""
        advanced = self.ledger.advance_time(self.minutes_per_tick)
        self.ticks += 1
        return advanced

    def run(self, max_ticks: int | None = None) -> int:
        """Tick until stopped or ``max_ticks`` is reached.

        Returns:
            Number of ticks applied during this call.
        """
        logger.info(
            "Ticker started: +%d min every %.0f s",
            self.minutes_per_tick, self.period_seconds,
        )
        applied = 0
        while max_ticks is None or applied < max_ticks:
            if self._stop.wait(self.period_seconds):
                break
            self.tick()
            applied += 1
        logger.info("Ticker stopped after %d ticks", applied)
        return applied

    def stop(self) -> None:
        self._stop.set()
