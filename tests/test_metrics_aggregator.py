"""Tests for codepulse.services.metrics_aggregator."""

from codepulse.services.metrics_aggregator import MetricsAggregator
from codepulse.types import BufferSnapshot


def _snap(path="/p/a.py", words=0, lines=0):
    return BufferSnapshot(filepath=path, filetype="python", word_count=words, line_count=lines)


class TestRecordAction:
    def test_creates_entry_and_counts(self):
        agg = MetricsAggregator()
        agg.record_action("/p/a.py", "python")
        agg.record_action("/p/a.py", "python")
        m = agg.get("/p/a.py")
        assert m.action_count == 2
        assert m.filetype == "python"
        assert m.words_added == 0

    def test_ensure_keeps_existing_baseline(self):
        agg = MetricsAggregator()
        agg.ensure("/p/a.py", snapshot=_snap(words=10, lines=2))
        agg.ensure("/p/a.py", snapshot=_snap(words=99, lines=9))
        m = agg.get("/p/a.py")
        assert (m.word_count, m.line_count) == (10, 2)


class TestRecount:
    def test_words_and_lines_removed(self):
        agg = MetricsAggregator()
        agg.ensure("/p/a.py", snapshot=_snap(words=100, lines=50))
        agg.apply_recount("/p/a.py", 130, 45)
        m = agg.get("/p/a.py")
        assert m.words_added == 30
        assert m.lines_removed == 5
        assert m.lines_added == 0

    def test_deleted_words_do_not_subtract(self):
        agg = MetricsAggregator()
        agg.ensure("/p/a.py", snapshot=_snap(words=100, lines=50))
        agg.apply_recount("/p/a.py", 80, 60)
        agg.apply_recount("/p/a.py", 90, 60)
        m = agg.get("/p/a.py")
        assert m.words_added == 10
        assert m.lines_added == 10
        assert m.word_count == 90

    def test_no_baseline_only_sets_snapshot(self):
        agg = MetricsAggregator()
        agg.apply_recount("/p/a.py", 500, 40)
        m = agg.get("/p/a.py")
        assert m.words_added == 0
        assert m.lines_added == 0
        assert (m.word_count, m.line_count) == (500, 40)


class TestFocusClock:
    def test_accrues_only_for_focused_file(self):
        agg = MetricsAggregator()
        agg.ensure("/p/a.py")
        agg.ensure("/p/b.py")
        agg.clock_in("/p/a.py", 100.0)
        agg.switch_focus("/p/b.py", 130.0)
        agg.clock_out(145.0)
        assert agg.get("/p/a.py").active_seconds == 30.0
        assert agg.get("/p/b.py").active_seconds == 15.0
        assert agg.focused_file is None

    def test_clear_keeps_recount_baseline(self):
        agg = MetricsAggregator()
        agg.ensure("/p/a.py", snapshot=_snap(words=100, lines=50))
        agg.apply_recount("/p/a.py", 110, 55)
        agg.clear()

        m = agg.ensure("/p/a.py", snapshot=_snap(words=140, lines=85))
        assert (m.word_count, m.line_count) == (110, 55)
        agg.apply_recount("/p/a.py", 140, 85)
        assert m.words_added == 30
        assert m.lines_added == 30

    def test_switch_to_same_file_keeps_window(self):
        agg = MetricsAggregator()
        agg.ensure("/p/a.py")
        agg.clock_in("/p/a.py", 100.0)
        agg.switch_focus("/p/a.py", 110.0)
        agg.clock_out(120.0)
        assert agg.get("/p/a.py").active_seconds == 20.0

    def test_negative_elapsed_ignored(self):
        agg = MetricsAggregator()
        agg.ensure("/p/a.py")
        agg.clock_in("/p/a.py", 100.0)
        assert agg.clock_out(90.0) == 0.0
        assert agg.get("/p/a.py").active_seconds == 0.0

    def test_clock_out_when_idle(self):
        assert MetricsAggregator().clock_out(5.0) == 0.0


class TestReset:
    def test_reset_keeps_entries_and_snapshot(self):
        agg = MetricsAggregator()
        agg.record_action("/p/a.py", snapshot=_snap(words=10, lines=3))
        agg.apply_recount("/p/a.py", 20, 4)
        agg.reset_counters(["/p/a.py"])
        m = agg.get("/p/a.py")
        assert m.action_count == 0
        assert m.words_added == 0
        assert m.lines_added == 0
        assert (m.word_count, m.line_count) == (20, 4)
        assert len(agg) == 1

    def test_clear(self):
        agg = MetricsAggregator()
        agg.record_action("/p/a.py")
        agg.clock_in("/p/a.py", 1.0)
        agg.clear()
        assert len(agg) == 0
        assert agg.focused_file is None

    def test_active_entries(self):
        agg = MetricsAggregator()
        agg.ensure("/p/idle.py")
        agg.record_action("/p/edited.py")
        agg.ensure("/p/viewed.py").active_seconds = 1.0
        paths = sorted(m.filepath for m in agg.active_entries())
        assert paths == ["/p/edited.py", "/p/viewed.py"]
