"""
Axis generators for the bottom (time) and left (value) axes.

Each axis is drawn into an existing ``<g>`` as a set of tick groups and a
domain path. A bottom axis tick looks like::

    <g class="tick" transform="translate(x,0)">
        <line stroke="currentColor" y2="6"/>
        <text fill="currentColor" y="9" dy="0.71em">1950</text>
    </g>
    ...
    <path class="domain" stroke="currentColor" d="M100,6V0H700V6"/>
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from chart.scales import LinearScale, TimeScale
from chart.surface import SvgElement
from utils.formatting import format_px, format_tick, format_year

TICK_SIZE = 6
TICK_PADDING = 3
TICK_COUNT = 10


def _axis_group(group: SvgElement, anchor: str) -> None:
    (group.attr("fill", "none")
          .attr("font-size", 10)
          .attr("font-family", "sans-serif")
          .attr("text-anchor", anchor))


def _draw_ticks(
    group: SvgElement,
    values: Sequence[Any],
    position: Callable[[Any], float],
    label: Callable[[Any], str],
    horizontal: bool,
) -> None:
    for value in values:
        offset = format_px(position(value))
        tick = group.append("g").attr("class", "tick").attr("opacity", 1)
        tick.datum = value
        line = tick.append("line").attr("stroke", "currentColor")
        text = tick.append("text").attr("fill", "currentColor")
        if horizontal:
            tick.attr("transform", f"translate({offset},0)")
            line.attr("y2", TICK_SIZE)
            text.attr("y", TICK_SIZE + TICK_PADDING).attr("dy", "0.71em")
        else:
            tick.attr("transform", f"translate(0,{offset})")
            line.attr("x2", -TICK_SIZE)
            text.attr("x", -(TICK_SIZE + TICK_PADDING)).attr("dy", "0.32em")
        text.text(label(value))


def axis_bottom(group: SvgElement, scale: TimeScale, count: int = TICK_COUNT) -> SvgElement:
    """Draw a bottom time axis with year-only labels into *group*."""
    _axis_group(group, "middle")
    _draw_ticks(group, scale.ticks(count), scale, format_year, horizontal=True)
    r0, r1 = scale.range
    group.append("path").attr("class", "domain").attr("stroke", "currentColor").attr(
        "d", f"M{format_px(r0)},{TICK_SIZE}V0H{format_px(r1)}V{TICK_SIZE}"
    )
    return group


def axis_left(group: SvgElement, scale: LinearScale, count: int = TICK_COUNT) -> SvgElement:
    """Draw a left numeric axis with thousands-separated labels into *group*."""
    _axis_group(group, "end")
    step = scale.step(count)
    _draw_ticks(
        group,
        scale.ticks(count),
        scale,
        lambda value: format_tick(value, step),
        horizontal=False,
    )
    r0, r1 = scale.range
    group.append("path").attr("class", "domain").attr("stroke", "currentColor").attr(
        "d", f"M{-TICK_SIZE},{format_px(r0)}H0V{format_px(r1)}H{-TICK_SIZE}"
    )
    return group
