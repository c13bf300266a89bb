"""
Tests for render_chart.py — the command-line renderer.

The network call is replaced by patching chart.loader.fetch_json.
"""
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import render_chart
from conftest import make_payload


@pytest.fixture()
def fetch_ok(sample_payload):
    with patch("chart.loader.fetch_json", return_value=sample_payload) as mock:
        yield mock


@pytest.fixture()
def fetch_fails():
    with patch(
        "chart.loader.fetch_json",
        side_effect=requests.ConnectionError("Name or service not known"),
    ) as mock:
        yield mock


# ── SVG output ────────────────────────────────────────────────────────────────

class TestSvgOutput:
    def test_writes_svg_to_stdout(self, fetch_ok, capsys):
        assert render_chart.main([]) == 0
        out = capsys.readouterr().out
        assert out.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="800" height="500"')
        assert out.count('class="bar"') == 10

    def test_writes_svg_to_file(self, fetch_ok, tmp_path):
        dest = tmp_path / "out" / "gdp.svg"
        assert render_chart.main(["-o", str(dest)]) == 0
        assert dest.read_text(encoding="utf-8").startswith("<svg ")

    def test_custom_geometry(self, fetch_ok, capsys):
        assert render_chart.main(["--width", "1000", "--height", "600", "--padding", "50"]) == 0
        assert 'width="1000" height="600"' in capsys.readouterr().out

    def test_url_and_timeout_forwarded(self, fetch_ok):
        render_chart.main(["--url", "http://localhost:9000/gdp.json", "--timeout", "3"])
        fetch_ok.assert_called_once()
        args, kwargs = fetch_ok.call_args
        assert args[0] == "http://localhost:9000/gdp.json"
        assert kwargs["timeout"] == 3.0


# ── HTML output ───────────────────────────────────────────────────────────────

class TestHtmlOutput:
    def test_page_structure(self, fetch_ok, capsys):
        assert render_chart.main(["--format", "html"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("<!DOCTYPE html>")
        assert '<h1 id="title">United States GDP</h1>' in out
        assert '<div id="chart"><svg' in out
        assert '<div id="tooltip"' in out

    def test_failure_page_shows_error(self, fetch_fails, capsys):
        assert render_chart.main(["--format", "html"]) == 1
        captured = capsys.readouterr()
        assert "Failed to fetch data" in captured.out
        assert "<rect" not in captured.out
        assert "Failed to fetch data" in captured.err


# ── Failures ──────────────────────────────────────────────────────────────────

class TestFailures:
    def test_fetch_failure_exits_1(self, fetch_fails, capsys):
        assert render_chart.main([]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Failed to fetch data" in captured.err
        assert "Name or service not known" in captured.err

    def test_empty_dataset_exits_1(self, capsys):
        with patch("chart.loader.fetch_json", return_value=make_payload([])):
            assert render_chart.main([]) == 1
        assert "empty" in capsys.readouterr().err

    def test_bad_geometry_exits_2(self, fetch_ok, capsys):
        assert render_chart.main(["--padding", "400"]) == 2
        assert "plot area" in capsys.readouterr().err
        fetch_ok.assert_not_called()
