"""
Tests for the Generation Profiler
=================================
Tests for stage timing and the benchmark runner in phonogen/profiler.
"""

import json

import pytest

from phonogen.profiler import GenerationProfiler, StageStats, run_benchmark


class TestStageStats:
    """Tests for StageStats aggregates."""

    def test_empty(self):
        stats = StageStats()
        assert stats.total == 0
        assert stats.mean == 0
        assert stats.stdev == 0
        assert stats.throughput == 0
        assert stats.per_item == 0

    def test_aggregates(self):
        stats = StageStats(times=[1.0, 3.0], items=8)
        assert stats.total == 4.0
        assert stats.count == 2
        assert stats.mean == 2.0
        assert stats.median == 2.0
        assert stats.min == 1.0
        assert stats.max == 3.0
        assert stats.per_item == 0.5
        assert stats.throughput == 2.0
        assert stats.to_dict()['items_per_second'] == 2.0


class TestGenerationProfiler:
    """Tests for stage recording."""

    def test_stage_records(self):
        profiler = GenerationProfiler()
        profiler.start()
        with profiler.stage("work", items=3):
            pass
        with profiler.stage("work", items=2):
            pass
        assert profiler.stages["work"].count == 2
        assert profiler.stages["work"].items == 5

    def test_stage_records_on_error(self):
        profiler = GenerationProfiler()
        with pytest.raises(RuntimeError):
            with profiler.stage("fail"):
                raise RuntimeError("boom")
        assert profiler.stages["fail"].count == 1

    def test_disabled(self):
        profiler = GenerationProfiler(enabled=False)
        with profiler.stage("work"):
            pass
        profiler.record("other", 1.0)
        assert not profiler.stages
        assert profiler.report() == ""
        assert profiler.total_time == 0

    def test_report_and_json(self, tmp_path):
        profiler = GenerationProfiler()
        profiler.start()
        profiler.record("generate", 0.5, items=100)
        report = profiler.report()
        assert "PROFILING REPORT" in report
        assert "generate" in report

        path = tmp_path / "profile.json"
        profiler.save_json(str(path))
        data = json.loads(path.read_text())
        assert data["stages"]["generate"]["items"] == 100


class TestRunBenchmark:
    """Tests for run_benchmark."""

    def test_counts(self):
        profiler = run_benchmark('en', iterations=105, max_syllables=2, seed=1)
        assert profiler.stages["construct"].count == 1
        assert profiler.stages["generate"].count == 10
        assert profiler.stages["generate"].items == 105

    def test_fewer_iterations_than_batches(self):
        profiler = run_benchmark('fr', iterations=3, seed=1)
        assert profiler.stages["generate"].count == 3
        assert profiler.stages["generate"].items == 3

    def test_invalid_iterations(self):
        with pytest.raises(ValueError, match="iterations"):
            run_benchmark('en', iterations=0)

    def test_unknown_variety(self):
        with pytest.raises(ValueError, match="Unknown variety"):
            run_benchmark('klingon', iterations=10)
