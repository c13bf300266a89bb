"""
Pydantic response models for the API.

Optional fields default to None so that a failed load still produces a
valid status payload.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── Dataset models ────────────────────────────────────────────────────────────

class DataPointOut(BaseModel):
    """One quarterly GDP reading."""
    date: str = Field(..., description="Calendar date as YYYY-MM-DD", examples=["1947-01-01"])
    value: float = Field(..., description="GDP in billions of USD", examples=[243.1])


class DatasetOut(BaseModel):
    """The decoded dataset, in the order received."""
    count: int = Field(..., description="Number of data points", examples=[275])
    start: str = Field(..., description="Earliest date", examples=["1947-01-01"])
    end: str = Field(..., description="Latest date", examples=["2015-07-01"])
    max_value: float = Field(..., description="Largest GDP value", examples=[18064.7])
    points: list[DataPointOut]


# ── Status models ─────────────────────────────────────────────────────────────

class StageReportOut(BaseModel):
    """What one pipeline stage did."""
    stage_name: str = Field(..., examples=["load"])
    status: str = Field(..., description="started | completed | failed", examples=["completed"])
    elapsed_seconds: float = Field(..., examples=[0.412])
    items_processed: int = Field(..., examples=[275])
    errors: list[str] = Field(default_factory=list)


class StatusOut(BaseModel):
    """Pipeline state: idle, loading, loaded, failed or rendered."""
    state: str = Field(..., examples=["rendered"])
    source_url: str = Field(..., description="Where the GDP document is fetched from")
    error: str | None = Field(None, description="User-visible error message", examples=["Failed to fetch data"])
    point_count: int | None = Field(None, description="Points in the loaded dataset")
    rect_count: int = Field(..., description="Bars currently on the drawing surface")
    draw_count: int = Field(..., description="How many times the chart has been drawn")
    stages: list[StageReportOut] = Field(default_factory=list)
