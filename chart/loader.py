"""
Data Loader — fetch the GDP document once and decode it.

The loader makes exactly one state transition per instance:

    Idle → Loading → Loaded   (dataset set, error None)
                   → Failed   (error set, dataset None)

Network errors, bad statuses and malformed JSON are not distinguished;
they are logged and collapsed into ``LoadResult.error``.  Any other
exception also leaves the loader Failed before it propagates.  A second call
to ``load()`` returns the first result without another request.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass

import requests

from chart.dataset import ChartDataError, Dataset, decode_payload
from utils.config import GDP_DATA_URL
from utils.http import fetch_json

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Failed to fetch data"


class LoadState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"
    RENDERED = "rendered"


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Outcome of the single fetch: either a dataset or an error message."""

    dataset: Dataset | None = None
    error: str | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.dataset is not None


class DataLoader:
    """One-shot loader for the GDP dataset."""

    def __init__(
        self,
        url: str = GDP_DATA_URL,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.url = url
        self.session = session
        self.timeout = timeout
        self.state = LoadState.IDLE
        self._result: LoadResult | None = None
        self._lock = threading.Lock()

    @property
    def result(self) -> LoadResult | None:
        return self._result

    def load(self) -> LoadResult:
        """Fetch and decode the dataset, at most once per loader."""
        with self._lock:
            if self._result is not None:
                return self._result
            self.state = LoadState.LOADING
            logger.info("Fetching GDP data from %s", self.url)
            try:
                payload = fetch_json(self.url, session=self.session, timeout=self.timeout)
                dataset = decode_payload(payload)
            except (requests.RequestException, ValueError, ChartDataError) as exc:
                logger.error("Error fetching GDP data: %s", exc)
                self._result = LoadResult(error=ERROR_MESSAGE, detail=str(exc))
                self.state = LoadState.FAILED
            except BaseException as exc:
                # Record the failure so later calls do not fetch again
                logger.exception("Unexpected error loading GDP data")
                self._result = LoadResult(
                    error=ERROR_MESSAGE, detail=f"{type(exc).__name__}: {exc}"
                )
                self.state = LoadState.FAILED
                raise
            else:
                logger.info("Loaded %d GDP data points", len(dataset))
                self._result = LoadResult(dataset=dataset)
                self.state = LoadState.LOADED
            return self._result
