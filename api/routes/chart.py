"""
Chart data routes.

Routes:
    GET /api/v1/chart.svg   → the rendered SVG document
    GET /api/v1/dataset     → decoded data points as JSON
    GET /api/v1/status      → pipeline state and stage reports

``chart.svg`` and ``dataset`` answer 503 when the GDP document could not be
loaded; ``status`` always answers 200.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.dependencies import get_pipeline
from api.models import DataPointOut, DatasetOut, StageReportOut, StatusOut
from chart.dataset import ChartDataError
from chart.pipeline import ChartPipeline
from utils.formatting import format_iso_date

router = APIRouter(tags=["chart"])


def _require_dataset(pipeline: ChartPipeline):
    dataset = pipeline.dataset
    if dataset is None:
        raise ChartDataError(pipeline.error or "GDP data not loaded")
    if len(dataset) == 0:
        raise ChartDataError("GDP dataset is empty")
    return dataset


@router.get(
    "/chart.svg",
    summary="Rendered bar chart",
    response_class=Response,
    responses={200: {"content": {"image/svg+xml": {}}}},
)
def chart_svg(pipeline: ChartPipeline = Depends(get_pipeline)) -> Response:
    """Return the bar chart as a standalone SVG document."""
    _require_dataset(pipeline)
    return Response(content=pipeline.surface.to_svg(), media_type="image/svg+xml")


@router.get("/dataset", response_model=DatasetOut, summary="Decoded GDP dataset")
def dataset(pipeline: ChartPipeline = Depends(get_pipeline)) -> DatasetOut:
    """Return every data point in the order received."""
    data = _require_dataset(pipeline)
    start, end = data.date_extent()
    return DatasetOut(
        count=len(data),
        start=format_iso_date(start),
        end=format_iso_date(end),
        max_value=data.max_value(),
        points=[DataPointOut(date=p.iso_date, value=p.value) for p in data],
    )


@router.get("/status", response_model=StatusOut, summary="Pipeline state")
def status(pipeline: ChartPipeline = Depends(get_pipeline)) -> StatusOut:
    """Return the load/draw state and per-stage reports."""
    data = pipeline.dataset
    return StatusOut(
        state=pipeline.state.value,
        source_url=pipeline.loader.url,
        error=pipeline.error,
        point_count=len(data) if data is not None else None,
        rect_count=len(pipeline.surface.rects()),
        draw_count=pipeline.draw_count,
        stages=[StageReportOut(**r.to_dict()) for r in pipeline.reports.values()],
    )
