"""
Pytest fixtures for the GDP chart tests.

Provides a small GDP payload shaped like the public document, the two-point
scenario used throughout the renderer tests, and fake HTTP sessions so no
test touches the network.
"""

import sys
from pathlib import Path

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from chart.dataset import decode_pairs  # noqa: E402
from chart.loader import DataLoader  # noqa: E402
from chart.pipeline import ChartPipeline  # noqa: E402
from utils.config import ChartConfig  # noqa: E402

SAMPLE_URL = "https://example.test/GDP-data.json"

# A few real quarters from the public dataset, in source order
SAMPLE_PAIRS = [
    ["1947-01-01", 243.1],
    ["1947-04-01", 246.3],
    ["1947-07-01", 250.1],
    ["1947-10-01", 260.3],
    ["1948-01-01", 266.2],
    ["1950-01-01", 280.7],
    ["1960-01-01", 542.6],
    ["1980-01-01", 2789.8],
    ["2000-01-01", 10031.0],
    ["2015-07-01", 18064.7],
]

TWO_POINT_PAIRS = [["1947-01-01", 243.1], ["1947-04-01", 246.3]]


def make_payload(pairs):
    return {
        "errors": {},
        "source_name": "Federal Reserve Economic Data",
        "name": "Gross Domestic Product, 1 Decimal",
        "frequency": "quarterly",
        "data": pairs,
    }


# ── Fake HTTP ─────────────────────────────────────────────────────────────────

class FakeResponse:
    """Stands in for requests.Response."""

    def __init__(self, payload=None, status_code=200, bad_json=False):
        self.payload = payload
        self.status_code = status_code
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error", response=None)

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    """Records GET calls; returns a canned response or raises."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response

    def close(self):
        pass


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture()
def sample_payload():
    return make_payload([list(p) for p in SAMPLE_PAIRS])


@pytest.fixture()
def sample_dataset():
    return decode_pairs(SAMPLE_PAIRS)


@pytest.fixture()
def two_point_dataset():
    return decode_pairs(TWO_POINT_PAIRS)


@pytest.fixture()
def chart_config():
    return ChartConfig(width=800, height=500, padding=100)


@pytest.fixture()
def ok_session(sample_payload):
    return FakeSession(response=FakeResponse(sample_payload))


@pytest.fixture()
def failing_session():
    return FakeSession(exc=requests.ConnectionError("Name or service not known"))


@pytest.fixture()
def make_pipeline(chart_config):
    """Factory: ChartPipeline around a given fake session."""

    def _make(session):
        loader = DataLoader(url=SAMPLE_URL, session=session)
        return ChartPipeline(loader, chart_config)

    return _make
