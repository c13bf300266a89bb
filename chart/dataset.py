"""
GDP dataset model — DataPoint, Dataset and the JSON decoder.

The remote document looks like::

    {
        "source_name": "...",
        "data": [
            ["1947-01-01", 243.1],
            ["1947-04-01", 246.3],
            ...
        ],
        ...
    }

``decode_payload()`` turns the ``data`` array into an immutable ``Dataset``
in the order received.  Any deviation from this shape raises
``ChartDataError``.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any, overload

from utils.formatting import format_iso_date

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_YEAR_ONLY = re.compile(r"^(\d{4})$")


class ChartDataError(Exception):
    """The GDP dataset could not be fetched or decoded.

    Network failures, bad statuses and malformed documents all collapse into
    this one error; the display layer only needs to know the chart cannot be
    drawn.
    """


@dataclass(frozen=True, slots=True)
class DataPoint:
    """One quarterly GDP reading in billions of USD."""

    date: date
    value: float

    @property
    def iso_date(self) -> str:
        return format_iso_date(self.date)


class Dataset(Sequence[DataPoint]):
    """Ordered, immutable sequence of DataPoints.

    Order is significant and never re-sorted; it determines bar order.
    """

    __slots__ = ("_points",)

    def __init__(self, points: Sequence[DataPoint] = ()) -> None:
        self._points: tuple[DataPoint, ...] = tuple(points)

    @overload
    def __getitem__(self, index: int) -> DataPoint: ...

    @overload
    def __getitem__(self, index: slice) -> Dataset: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Dataset(self._points[index])
        return self._points[index]

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[DataPoint]:
        return iter(self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dataset):
            return NotImplemented
        return self._points == other._points

    def __hash__(self) -> int:
        return hash(self._points)

    def __repr__(self) -> str:
        return f"Dataset({len(self._points)} points)"

    def date_extent(self) -> tuple[date, date]:
        """Return (earliest, latest) date."""
        if not self._points:
            raise ChartDataError("Empty dataset has no date extent")
        dates = [p.date for p in self._points]
        return min(dates), max(dates)

    def max_value(self) -> float:
        if not self._points:
            raise ChartDataError("Empty dataset has no maximum value")
        return max(p.value for p in self._points)


def _calendar_date(year: int, month: int, day: int) -> date:
    try:
        return date(year, month, day)
    except OverflowError as exc:
        raise ValueError(f"Year out of range: {year!r}") from exc


def parse_date(raw: Any) -> date:
    """Parse ``YYYY-MM-DD`` or a bare ``YYYY`` into a calendar date.

    Bare years (string or int) map to January 1st of that year.

    Raises:
        ValueError: unrecognised format, impossible date or year out of range
    """
    if isinstance(raw, bool):
        raise ValueError(f"Not a date: {raw!r}")
    if isinstance(raw, int):
        return _calendar_date(raw, 1, 1)
    if not isinstance(raw, str):
        raise ValueError(f"Not a date: {raw!r}")
    text = raw.strip()
    m = _ISO_DATE.match(text)
    if m:
        return _calendar_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    m = _YEAR_ONLY.match(text)
    if m:
        return _calendar_date(int(m.group(1)), 1, 1)
    raise ValueError(f"Unrecognised date format: {raw!r}")


def _parse_value(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"GDP value must be a number, got {raw!r}")
    value = float(raw)
    if value != value or value in (float("inf"), float("-inf")):
        raise ValueError(f"GDP value must be finite, got {raw!r}")
    if value < 0:
        raise ValueError(f"GDP value must be non-negative, got {raw!r}")
    return value


def decode_pairs(pairs: Any) -> Dataset:
    """Convert a list of ``[dateString, number]`` pairs into a Dataset.

    Raises:
        ChartDataError: if any pair is malformed
    """
    if not isinstance(pairs, list):
        raise ChartDataError(
            f"Expected a list of [date, value] pairs, got {type(pairs).__name__}"
        )
    points: list[DataPoint] = []
    for i, pair in enumerate(pairs):
        if not isinstance(pair, (list, tuple)) or len(pair) < 2:
            raise ChartDataError(f"Entry {i} is not a [date, value] pair: {pair!r}")
        try:
            points.append(DataPoint(date=parse_date(pair[0]), value=_parse_value(pair[1])))
        except ValueError as exc:
            raise ChartDataError(f"Entry {i}: {exc}") from exc
    return Dataset(points)


def decode_payload(payload: Any) -> Dataset:
    """Extract the ``data`` array from the decoded JSON document.

    Raises:
        ChartDataError: if the document does not have the expected shape
    """
    if not isinstance(payload, dict):
        raise ChartDataError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    if "data" not in payload:
        raise ChartDataError("JSON document has no 'data' field")
    return decode_pairs(payload["data"])
