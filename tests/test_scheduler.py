"""Tests for codepulse.services.scheduler."""

import pytest

from codepulse.services.scheduler import ScheduledTask, Scheduler
from helpers import process_events_for, wait_until


class TestScheduledTask:
    def test_fires_once(self, qapp):
        calls = []
        task = ScheduledTask(lambda: calls.append(1))
        task.start(10)
        assert task.pending
        assert wait_until(lambda: calls)
        process_events_for(40)
        assert calls == [1]
        assert not task.pending

    def test_restart_replaces_schedule(self, qapp):
        calls = []
        task = ScheduledTask(lambda: calls.append(task.token))
        first = task.start(10)
        second = task.start(30)
        assert second == first + 1
        assert wait_until(lambda: calls)
        process_events_for(50)
        assert calls == [second]

    def test_cancel(self, qapp):
        calls = []
        task = ScheduledTask(lambda: calls.append(1))
        task.start(10)
        task.cancel()
        process_events_for(50)
        assert calls == []

    def test_stale_timeout_is_ignored(self, qapp):
        calls = []
        task = ScheduledTask(lambda: calls.append(1))
        task.start(1000)
        task.cancel()
        # A timeout delivered after cancellation must not run the callback
        task._on_timeout()
        assert calls == []


class TestScheduler:
    @pytest.fixture
    def scheduler(self, qapp):
        s = Scheduler(ping_interval_ms=20, flush_interval_ms=20, idle_timeout_ms=30)
        yield s
        s.stop_all()

    def test_idle_expires_after_quiet(self, scheduler):
        fired = []
        scheduler.idle_expired.connect(lambda: fired.append(1))
        scheduler.touch_idle()
        assert scheduler.idle_pending
        assert wait_until(lambda: fired)
        assert fired == [1]

    def test_touch_postpones_idle(self, qapp):
        scheduler = Scheduler(idle_timeout_ms=150)
        fired = []
        scheduler.idle_expired.connect(lambda: fired.append(1))
        scheduler.touch_idle()
        for _ in range(4):
            process_events_for(30)
            scheduler.touch_idle()
        assert fired == []
        scheduler.stop_all()

    def test_flush_timer_repeats(self, scheduler):
        flushes = []
        scheduler.flush_due.connect(lambda: flushes.append(1))
        scheduler.start_flush()
        assert scheduler.flush_active
        assert wait_until(lambda: len(flushes) >= 2)
        scheduler.stop_flush()
        assert not scheduler.flush_active

    def test_keepalive(self, scheduler):
        pings = []
        scheduler.ping_due.connect(lambda: pings.append(1))
        scheduler.start_keepalive()
        assert wait_until(lambda: pings)

    def test_stop_all(self, scheduler):
        scheduler.start_keepalive()
        scheduler.start_flush()
        scheduler.touch_idle()
        scheduler.stop_all()
        assert not scheduler.keepalive_active
        assert not scheduler.flush_active
        assert not scheduler.idle_pending
