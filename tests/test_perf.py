"""Tests for forest_ecosim.perf: per-phase timing."""

from forest_ecosim.perf import PerfMonitor, PhaseStats


class TestPerfMonitor:
    def test_disabled_is_noop(self):
        perf = PerfMonitor(enabled=False)
        with perf.track('trees'):
            pass
        assert perf.get_stats() == {}

    def test_tracks_calls(self):
        perf = PerfMonitor(enabled=True)
        for _ in range(3):
            with perf.track('trees'):
                pass
        with perf.track('bears'):
            pass
        stats = perf.get_stats()
        assert stats['trees'].call_count == 3
        assert stats['bears'].call_count == 1
        assert stats['trees'].total_time >= 0.0

    def test_records_on_exception(self):
        perf = PerfMonitor(enabled=True)
        try:
            with perf.track('year_end'):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert perf.get_stats()['year_end'].call_count == 1

    def test_summary_and_report(self):
        perf = PerfMonitor(enabled=True)
        with perf.track('lumberjacks'):
            sum(range(1000))
        summary = perf.summary()
        assert set(summary['lumberjacks']) == {'total_s', 'calls', 'mean_ms', 'pct'}
        report = perf.report()
        assert 'lumberjacks' in report
        assert 'TOTAL' in report

    def test_reset(self):
        perf = PerfMonitor(enabled=True)
        with perf.track('trees'):
            pass
        perf.reset()
        assert perf.get_stats() == {}

    def test_mean_time_empty(self):
        assert PhaseStats().mean_time == 0.0
