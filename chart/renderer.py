"""
Chart Renderer — project a Dataset onto the drawing surface.

``draw()`` is the whole rendering step:

  1. build the time (x) and value (y) scales from the Dataset
  2. clear the surface
  3. append the ``<svg>`` and one ``rect.bar`` per point, in Dataset order
  4. attach the mouseover / mousemove / mouseout tooltip handlers
  5. draw the bottom and left axes
  6. draw the two axis captions

The y domain always starts at zero so bars grow from the baseline; it is
not the data minimum.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chart.axes import axis_bottom, axis_left
from chart.dataset import ChartDataError, DataPoint, Dataset
from chart.scales import LinearScale, TimeScale
from chart.surface import DrawingSurface, PointerEvent, SvgElement, TooltipState
from utils.config import ChartConfig
from utils.formatting import format_number, format_tooltip

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChartScales:
    """Scales and bar geometry for one draw."""

    x: TimeScale
    y: LinearScale
    bar_width: float
    baseline: float


def build_scales(dataset: Dataset, config: ChartConfig) -> ChartScales:
    """Derive both scales from the Dataset extent.

    Raises:
        ChartDataError: if the Dataset is empty
    """
    if len(dataset) == 0:
        raise ChartDataError("Cannot draw a chart from an empty dataset")
    w, h, pad = config.width, config.height, config.padding
    x = TimeScale(domain=dataset.date_extent(), range=(pad, w - pad))
    y = LinearScale(domain=(0.0, dataset.max_value()), range=(h - pad, pad))
    return ChartScales(
        x=x,
        y=y,
        bar_width=(w - 2 * pad) / len(dataset),
        baseline=h - pad,
    )


class BarHover:
    """Tooltip handlers shared by every bar of one draw."""

    def __init__(self, tooltip: TooltipState, config: ChartConfig) -> None:
        self.tooltip = tooltip
        self.offset_top = config.tooltip_offset_top
        self.offset_left = config.tooltip_offset_left

    def enter(self, pointer: PointerEvent | None, bar: SvgElement) -> None:
        point: DataPoint = bar.datum
        self.tooltip.show(format_tooltip(point.date, point.value), point.iso_date)

    def move(self, pointer: PointerEvent | None, bar: SvgElement) -> None:
        if pointer is None:
            return
        self.tooltip.move_to(
            left=pointer.page_x + self.offset_left,
            top=pointer.page_y + self.offset_top,
        )

    def leave(self, pointer: PointerEvent | None, bar: SvgElement) -> None:
        self.tooltip.hide()

    def attach(self, bar: SvgElement) -> None:
        bar.on("mouseover", self.enter)
        bar.on("mousemove", self.move)
        bar.on("mouseout", self.leave)


def draw(
    dataset: Dataset,
    surface: DrawingSurface,
    tooltip: TooltipState,
    config: ChartConfig | None = None,
) -> DrawingSurface:
    """Render *dataset* onto *surface*, replacing whatever was there.

    Args:
        dataset: Non-empty Dataset in display order.
        surface: Mount point handle; cleared before drawing.
        tooltip: Shared tooltip element, hidden on every redraw.
        config: Canvas geometry and captions (default: ChartConfig()).

    Returns:
        The same surface, now holding the chart.

    Raises:
        ChartDataError: if the Dataset is empty
    """
    config = config or ChartConfig()
    scales = build_scales(dataset, config)
    w, h, pad = config.width, config.height, config.padding

    surface.clear()
    tooltip.hide()
    svg = surface.append_svg(w, h)

    hover = BarHover(tooltip, config)
    for point in dataset:
        y = scales.y(point.value)
        bar = (
            svg.append("rect")
            .attr("x", scales.x(point.date))
            .attr("y", y)
            .attr("width", scales.bar_width)
            .attr("height", scales.baseline - y)
            .attr("class", "bar")
            .attr("data-date", point.iso_date)
            .attr("data-gdp", format_number(point.value))
            .attr("data-tooltip", format_tooltip(point.date, point.value))
        )
        bar.datum = point
        hover.attach(bar)

    axis_bottom(
        svg.append("g")
        .attr("transform", f"translate(0, {h - pad})")
        .attr("id", "x-axis"),
        scales.x,
    )
    axis_left(
        svg.append("g")
        .attr("transform", f"translate({pad}, 0)")
        .attr("id", "y-axis"),
        scales.y,
    )

    (svg.append("text")
        .attr("x", w / 2)
        .attr("y", h - 50)
        .attr("text-anchor", "middle")
        .attr("class", "axis-label")
        .text(config.x_caption))
    (svg.append("text")
        .attr("x", -h / 2)
        .attr("y", 50)
        .attr("text-anchor", "middle")
        .attr("transform", "rotate(-90)")
        .attr("class", "axis-label")
        .text(config.y_caption))

    logger.debug("Drew %d bars (bar width %.3f)", len(dataset), scales.bar_width)
    return surface
