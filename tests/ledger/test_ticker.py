"""Tests for the periodic runtime ticker."""

import threading

import pytest

from compressor_guard.ledger import Ticker


class TestTicker:
    def test_tick_advances_running_units(self, ledger):
        ticker = Ticker(ledger, period_seconds=60, minutes_per_tick=1)
        advanced = ticker.tick()
        assert sorted(advanced) == ["c1", "c3"]
        assert ledger.get_unit("c1").current_cycle_run_time_minutes == 29501
        assert ticker.ticks == 1

    def test_run_with_max_ticks(self, ledger):
        ticker = Ticker(ledger, period_seconds=0.001, minutes_per_tick=2)
        applied = ticker.run(max_ticks=3)
        assert applied == 3
        assert ledger.get_unit("c1").total_run_time_minutes == 28506

    def test_stop_before_run(self, ledger):
        ticker = Ticker(ledger, period_seconds=30)
        ticker.stop()
        assert ticker.stopped
        assert ticker.run() == 0
        assert ledger.get_unit("c1").total_run_time_minutes == 28500

    def test_stop_from_other_thread(self, ledger):
        ticker = Ticker(ledger, period_seconds=0.01)
        timer = threading.Timer(0.05, ticker.stop)
        timer.start()
        try:
            applied = ticker.run()
        finally:
            timer.cancel()
        assert ticker.stopped
        assert ledger.get_unit("c1").total_run_time_minutes == 28500 + applied

    def test_invalid_period(self, ledger):
        with pytest.raises(ValueError):
            Ticker(ledger, period_seconds=0)
