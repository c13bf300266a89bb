"""
Chart package -- load the GDP dataset and draw it as an SVG bar chart.

Re-exports key entry points so callers can do::

    from chart import ChartPipeline, DataLoader, draw
"""

from chart.dataset import ChartDataError, DataPoint, Dataset, decode_payload
from chart.loader import DataLoader, LoadResult, LoadState
from chart.pipeline import ChartPipeline
from chart.renderer import build_scales, draw
from chart.surface import DrawingSurface, PointerEvent, TooltipState

__all__ = [
    "ChartDataError",
    "DataPoint",
    "Dataset",
    "decode_payload",
    "DataLoader",
    "LoadResult",
    "LoadState",
    "ChartPipeline",
    "build_scales",
    "draw",
    "DrawingSurface",
    "PointerEvent",
    "TooltipState",
]
