"""
Linear and time scales mapping a data domain onto a pixel range.

``LinearScale`` maps numbers, ``TimeScale`` maps calendar dates (linear in
days).  Both are immutable and rebuilt from the Dataset on every draw.

Tick generation follows the usual "1, 2, 5 times a power of ten" rule for
numbers and whole-year intervals for dates, which is what the bottom and
left axes need.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

# Step multipliers for nice numeric ticks, with the error thresholds at which
# the next larger multiplier wins.
_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def tick_step(start: float, stop: float, count: int) -> float:
    """Return a nice step for roughly *count* ticks across [start, stop]."""
    if count <= 0 or start == stop:
        return 0.0
    raw = abs(stop - start) / count
    power = math.floor(math.log10(raw))
    error = raw / 10 ** power
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    return factor * 10 ** power


@dataclass(frozen=True, slots=True)
class LinearScale:
    """Continuous linear mapping from [d0, d1] onto [r0, r1]."""

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            # Degenerate domain maps to the middle of the range
            return (r0 + r1) / 2
        t = (value - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def ticks(self, count: int = 10) -> list[float]:
        """Nice tick values inside the domain, ascending."""
        lo, hi = sorted(self.domain)
        step = tick_step(lo, hi, count)
        if step == 0:
            return [lo]
        # Work in integer multiples of the step to avoid accumulating error
        first = math.ceil(lo / step - 1e-9)
        last = math.floor(hi / step + 1e-9)
        return [_clean(i * step, step) for i in range(first, last + 1)]

    def step(self, count: int = 10) -> float:
        lo, hi = sorted(self.domain)
        return tick_step(lo, hi, count)


@dataclass(frozen=True, slots=True)
class TimeScale:
    """Linear mapping from calendar dates onto [r0, r1]."""

    domain: tuple[date, date]
    range: tuple[float, float]

    def _linear(self) -> LinearScale:
        d0, d1 = self.domain
        return LinearScale(
            domain=(float(d0.toordinal()), float(d1.toordinal())),
            range=self.range,
        )

    def __call__(self, day: date) -> float:
        return self._linear()(float(day.toordinal()))

    def ticks(self, count: int = 10) -> list[date]:
        """January 1st of every k-th year inside the domain.

        k is the nice step for *count* ticks over the fractional-year span,
        never less than one year.
        """
        start, stop = sorted(self.domain)
        if start == stop:
            return [start] if start == date(start.year, 1, 1) else []
        k = max(1, int(tick_step(_fractional_year(start), _fractional_year(stop), count)))
        first_year = start.year if start == date(start.year, 1, 1) else start.year + 1
        first_year = -(-first_year // k) * k
        return [
            date(year, 1, 1)
            for year in range(first_year, stop.year + 1, k)
            if start <= date(year, 1, 1) <= stop
        ]


def _fractional_year(day: date) -> float:
    jan1 = date(day.year, 1, 1).toordinal()
    next_jan1 = date(day.year + 1, 1, 1).toordinal()
    return day.year + (day.toordinal() - jan1) / (next_jan1 - jan1)


def _clean(value: float, step: float) -> float:
    """Round away float noise such as 0.30000000000000004."""
    decimals = max(0, -math.floor(math.log10(step))) if step < 1 else 0
    return round(value, decimals + 1)
