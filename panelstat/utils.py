# SPDX-License-Identifier: GPL-3.0-or-later
# Unit formatting

"""Formatting helpers turning raw magnitudes into short display strings."""

from __future__ import annotations

import math
from enum import Enum
from typing import Iterable, Tuple, Union

Number = Union[int, float]

# Column width of long-format labels, so stacked labels line up
LONG_LABEL_WIDTH = 9


class UnitFamily(Enum):
    """Unit ladders used when scaling a magnitude, smallest unit first."""

    BITS_SHORT = ('b', 'K', 'M', 'G', 'T')
    BITS_LONG = ('bps', 'Kbps', 'Mbps', 'Gbps', 'Tbps')
    BYTES_SHORT = ('B', 'K', 'M', 'G', 'T')
    BYTES_LONG = ('B/s', 'KB/s', 'MB/s', 'GB/s', 'TB/s')

    @property
    def units(self) -> Tuple[str, ...]:
        return self.value

    @property
    def is_long(self) -> bool:
        return self in (UnitFamily.BITS_LONG, UnitFamily.BYTES_LONG)

    @classmethod
    def select(cls, show_bytes: bool, long: bool) -> 'UnitFamily':
        if show_bytes:
            return cls.BYTES_LONG if long else cls.BYTES_SHORT
        return cls.BITS_LONG if long else cls.BITS_SHORT


def format_number(value: Number, integer_from: Number = 100) -> str:
    """Format a value with precision shrinking as it grows.

    Below 10 two decimals are used, below ``integer_from`` one decimal,
    otherwise none. If rounding pushes the text over a boundary
    (9.996 -> "10.00") the next, shorter precision is used instead.
    """
    if value < 10:
        text = f"{value:.2f}"
        if float(text) < 10:
            return text
    if value < integer_from:
        text = f"{value:.1f}"
        if float(text) < integer_from:
            return text
    return f"{value:.0f}"


def format_value(magnitude: Number, family: UnitFamily) -> str:
    """Scale a magnitude into the largest fitting unit of ``family``.

    The value is divided by 1024 while it is above 999 and a larger
    unit remains. Long families separate number and unit with a space
    and are right-aligned to LONG_LABEL_WIDTH columns.

    Args:
        magnitude: Non-negative amount in the family's base unit.
        family: Unit ladder to use.

    Returns:
        Formatted string, e.g. "1.00K" or "  512 B/s".
    """
    value = max(float(magnitude), 0.0)
    units = family.units
    unit_index = 0

    while value > 999 and unit_index < len(units) - 1:
        value /= 1024
        unit_index += 1

    text = format_number(value)
    if family.is_long:
        return f"{text} {units[unit_index]}".rjust(LONG_LABEL_WIDTH)
    return f"{text}{units[unit_index]}"


def last_second_rate(newest_first: Iterable[Number], interval_ms: int) -> float:
    """Convert per-tick deltas into a one-second-equivalent rate.

    Samples are accumulated from newest to oldest until they cover at
    least one second, then the sum is scaled to exactly 1000 ms. This
    keeps labels meaningful when the refresh interval isn't 1000 ms.

    Args:
        newest_first: Per-tick deltas, newest sample first.
        interval_ms: Duration of one tick in milliseconds.

    Returns:
        The rate per second, 0.0 if there is nothing to measure.
    """
    if interval_ms <= 0:
        return 0.0

    total_duration = 0
    total = 0.0
    for sample in newest_first:
        if total_duration >= 1000:
            break
        total += sample
        total_duration += interval_ms

    if total_duration == 0:
        return 0.0
    return total * 1000.0 / total_duration


def format_percent(value: Number, no_decimals: bool = False) -> str:
    """Format a percentage label, e.g. "7.25%", "55.0%", "100%"."""
    if no_decimals:
        return f"{math.floor(value + 0.5)}%"
    return f"{format_number(value)}%"


def format_gigabytes(value: Number, vertical: bool = False) -> str:
    """Format a GiB amount; vertical panels drop the separating space."""
    unit = "GB" if vertical else " GB"
    return f"{format_number(value)}{unit}"


def convert_temperature(celsius: Number, unit: str) -> float:
    """Convert a Celsius reading to 'C', 'F' or 'K'."""
    if unit == 'F':
        return celsius * 9.0 / 5.0 + 32.0
    if unit == 'K':
        return celsius + 273.15
    return float(celsius)


def format_temperature(celsius: Number, unit: str = 'C') -> str:
    """Format a temperature as whole degrees with its unit, e.g. "54°C"."""
    value = convert_temperature(celsius, unit)
    if unit == 'K':
        return f"{math.floor(value + 0.5)}K"
    return f"{math.floor(value + 0.5)}°{unit}"
