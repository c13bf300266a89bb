"""
Load-then-draw pipeline, with the two stages composed explicitly::

    result = loader.load()                          # LoadResult
    surface = draw(result.dataset, surface, ...)    # DrawingSurface

``ChartPipeline`` owns the drawing surface and the tooltip and is the only
caller of ``draw()`` for them.  ``run()`` is safe to call from several
threads: the first caller loads and draws, the rest get the same outcome.
"""

from __future__ import annotations

import logging
import threading

from chart.dataset import Dataset
from chart.loader import DataLoader, LoadResult, LoadState
from chart.renderer import draw
from chart.report import StageReport
from chart.surface import DrawingSurface, TooltipState
from utils.config import ChartConfig

logger = logging.getLogger(__name__)


class ChartPipeline:
    """Load the GDP dataset once, then draw it."""

    def __init__(self, loader: DataLoader, config: ChartConfig | None = None) -> None:
        self.loader = loader
        self.config = config or ChartConfig()
        self.surface = DrawingSurface()
        self.tooltip = TooltipState()
        self.reports: dict[str, StageReport] = {}
        self._draw_count = 0
        self._lock = threading.RLock()

    # ── state ─────────────────────────────────────────────────────────────

    @property
    def state(self) -> LoadState:
        if self.loader.state is LoadState.LOADED and self._draw_count:
            return LoadState.RENDERED
        return self.loader.state

    @property
    def result(self) -> LoadResult | None:
        return self.loader.result

    @property
    def dataset(self) -> Dataset | None:
        result = self.loader.result
        return result.dataset if result is not None else None

    @property
    def error(self) -> str | None:
        result = self.loader.result
        return result.error if result is not None else None

    @property
    def draw_count(self) -> int:
        return self._draw_count

    # ── stages ────────────────────────────────────────────────────────────

    def run(self) -> LoadResult:
        """Run load then draw, once; later calls return the stored result."""
        with self._lock:
            if self.loader.result is None:
                load_report = StageReport("load").start()
                self.reports["load"] = load_report
                try:
                    result = self.loader.load()
                except Exception as exc:
                    load_report.fail(f"{type(exc).__name__}: {exc}")
                    raise
                if not result.ok:
                    load_report.fail(result.detail or result.error or "unknown error")
                    logger.warning("Chart not drawn: %s", load_report.console_summary())
                    return result
                load_report.finish(items=len(result.dataset))
                if len(result.dataset) == 0:
                    logger.warning("GDP dataset is empty; nothing to draw")

            result = self.loader.result
            if result.ok and len(result.dataset) > 0 and not self._draw_count:
                self.redraw()
            return result

    def redraw(self) -> DrawingSurface:
        """Draw the current dataset again, replacing the previous drawing."""
        with self._lock:
            dataset = self.dataset
            report = StageReport("draw").start()
            self.reports["draw"] = report
            if dataset is None:
                report.fail("No dataset loaded")
                raise RuntimeError("redraw() called before a successful load")
            try:
                draw(dataset, self.surface, self.tooltip, self.config)
            except Exception as exc:
                report.fail(str(exc))
                raise
            report.finish(items=len(dataset))
            self._draw_count += 1
            logger.info(report.console_summary())
            return self.surface
