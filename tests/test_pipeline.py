"""
Tests for chart/pipeline.py and chart/report.py — load then draw.

Verifies:
    - a successful run loads once and draws once (state RENDERED)
    - a failed run leaves the error message and zero rectangles
    - redraw() replaces the drawing without refetching
    - concurrent first runs share one fetch
    - StageReport bookkeeping
"""
import sys
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from chart.loader import ERROR_MESSAGE, DataLoader, LoadState
from chart.pipeline import ChartPipeline
from chart.report import StageReport
from conftest import SAMPLE_URL, FakeResponse, FakeSession, make_payload


# ── run() ─────────────────────────────────────────────────────────────────────

class TestPipelineRun:
    def test_success_draws_one_rect_per_point(self, make_pipeline, ok_session):
        pipeline = make_pipeline(ok_session)
        result = pipeline.run()
        assert result.ok
        assert pipeline.state is LoadState.RENDERED
        assert pipeline.error is None
        assert len(pipeline.surface.rects()) == len(pipeline.dataset) == 10
        assert pipeline.draw_count == 1

    def test_failure_shows_error_and_no_rects(self, make_pipeline, failing_session):
        pipeline = make_pipeline(failing_session)
        result = pipeline.run()
        assert not result.ok
        assert pipeline.state is LoadState.FAILED
        assert pipeline.error == ERROR_MESSAGE
        assert pipeline.dataset is None
        assert pipeline.surface.rects() == []
        assert pipeline.surface.to_svg() == ""
        assert pipeline.draw_count == 0

    def test_idle_before_run(self, make_pipeline, ok_session):
        pipeline = make_pipeline(ok_session)
        assert pipeline.state is LoadState.IDLE
        assert pipeline.result is None
        assert pipeline.dataset is None
        assert pipeline.error is None

    def test_run_twice_fetches_and_draws_once(self, make_pipeline, ok_session):
        pipeline = make_pipeline(ok_session)
        pipeline.run()
        pipeline.run()
        assert len(ok_session.calls) == 1
        assert pipeline.draw_count == 1

    def test_empty_dataset_is_loaded_not_drawn(self, make_pipeline):
        pipeline = make_pipeline(FakeSession(response=FakeResponse(make_payload([]))))
        result = pipeline.run()
        assert result.ok
        assert pipeline.state is LoadState.LOADED
        assert pipeline.surface.svg is None
        assert "draw" not in pipeline.reports

    def test_unexpected_error_fails_load_report(self, make_pipeline, ok_session):
        pipeline = make_pipeline(ok_session)
        with patch("chart.loader.fetch_json", side_effect=KeyError("bug")) as mock:
            with pytest.raises(KeyError):
                pipeline.run()
            load = pipeline.reports["load"]
            assert load.status == "failed"
            assert "KeyError" in load.errors[0]
            assert pipeline.state is LoadState.FAILED

            result = pipeline.run()
        assert not result.ok
        assert result.error == ERROR_MESSAGE
        assert mock.call_count == 1
        assert "draw" not in pipeline.reports

    def test_draws_when_loader_already_loaded(self, chart_config, ok_session):
        loader = DataLoader(url=SAMPLE_URL, session=ok_session)
        loader.load()
        pipeline = ChartPipeline(loader, chart_config)
        pipeline.run()
        assert pipeline.state is LoadState.RENDERED
        assert "load" not in pipeline.reports
        assert len(ok_session.calls) == 1

    def test_concurrent_first_runs_fetch_once(self, make_pipeline, ok_session):
        pipeline = make_pipeline(ok_session)
        barrier = threading.Barrier(4)

        def worker():
            barrier.wait()
            pipeline.run()

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(ok_session.calls) == 1
        assert pipeline.draw_count == 1

    def test_default_config(self, ok_session):
        pipeline = ChartPipeline(DataLoader(url=SAMPLE_URL, session=ok_session))
        pipeline.run()
        assert pipeline.surface.svg.get("width") == "800"


# ── redraw() ──────────────────────────────────────────────────────────────────

class TestPipelineRedraw:
    def test_redraw_is_idempotent(self, make_pipeline, ok_session):
        pipeline = make_pipeline(ok_session)
        pipeline.run()
        before = pipeline.surface.to_svg()
        pipeline.redraw()
        pipeline.redraw()
        assert len(pipeline.surface.rects()) == 10
        assert pipeline.surface.to_svg() == before
        assert pipeline.draw_count == 3
        assert len(ok_session.calls) == 1
        assert pipeline.state is LoadState.RENDERED

    def test_redraw_before_load_raises(self, make_pipeline, ok_session):
        pipeline = make_pipeline(ok_session)
        with pytest.raises(RuntimeError):
            pipeline.redraw()
        assert pipeline.reports["draw"].status == "failed"

    def test_redraw_after_failure_raises(self, make_pipeline, failing_session):
        pipeline = make_pipeline(failing_session)
        pipeline.run()
        with pytest.raises(RuntimeError):
            pipeline.redraw()


# ── Stage reports ─────────────────────────────────────────────────────────────

class TestStageReports:
    def test_success_reports(self, make_pipeline, ok_session):
        pipeline = make_pipeline(ok_session)
        pipeline.run()
        load, draw = pipeline.reports["load"], pipeline.reports["draw"]
        assert load.status == "completed"
        assert load.items_processed == 10
        assert draw.status == "completed"
        assert draw.items_processed == 10
        assert draw.elapsed_seconds >= 0

    def test_failure_report_carries_detail(self, make_pipeline, failing_session):
        pipeline = make_pipeline(failing_session)
        pipeline.run()
        load = pipeline.reports["load"]
        assert load.status == "failed"
        assert "Name or service not known" in load.errors[0]
        assert "draw" not in pipeline.reports


class TestStageReport:
    def test_lifecycle(self):
        report = StageReport("load")
        assert report.status == "not_started"
        assert report.start() is report
        assert report.status == "started"
        report.finish(items=3)
        assert report.status == "completed"
        assert report.items_processed == 3

    def test_fail(self):
        report = StageReport("load").start()
        report.fail("boom")
        assert report.status == "failed"
        assert report.errors == ["boom"]

    def test_to_dict_omits_empty_errors(self):
        d = StageReport("draw").start().to_dict()
        assert d["stage_name"] == "draw"
        assert "errors" not in d

    def test_to_dict_includes_errors(self):
        report = StageReport("load").start()
        report.fail("boom")
        assert report.to_dict()["errors"] == ["boom"]

    def test_console_summary(self):
        report = StageReport("draw").start()
        report.finish(items=1234)
        summary = report.console_summary()
        assert summary.startswith("draw: completed")
        assert "1,234 points" in summary
        assert summary.endswith("s")
