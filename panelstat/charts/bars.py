# SPDX-License-Identifier: GPL-3.0-or-later
# Per-core stacked bars

"""Stacked bar chart with one bar per CPU core."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..config import Palette
from .svg import SVG_NS, fmt

CoreLoad = Tuple[float, float]

DEFAULT_BAR_WIDTH = 4
DEFAULT_CHART_HEIGHT = 22
DEFAULT_SPACING = 1
PADDING = 1


def _clamp(percent: float) -> float:
    return min(max(percent, 0.0), 100.0)


class StackedBar:
    """Geometry and rendering of per-core user/system bars.

    Each bar stacks the user share from the bottom and the system share
    on top of it. When the two add up to more than 100% the system
    segment is pinned to the top edge and drawn over the user one.
    """

    def __init__(self, bar_width: int = DEFAULT_BAR_WIDTH,
                 chart_height: int = DEFAULT_CHART_HEIGHT,
                 spacing: int = DEFAULT_SPACING) -> None:
        if bar_width < 1 or chart_height < 1 or spacing < 0:
            raise ValueError("bar geometry must be positive")
        self.bar_width = bar_width
        self.chart_height = chart_height
        self.spacing = spacing

    def width(self, cores: int) -> int:
        """Total width for ``cores`` bars, including padding."""
        if cores <= 0:
            return 2 * PADDING + self.bar_width
        return cores * self.bar_width + (cores - 1) * self.spacing + 2 * PADDING

    def height(self) -> int:
        return self.chart_height + 2 * PADDING

    def aspect_ratio(self, cores: int) -> float:
        return self.width(cores) / self.height()

    def segments(self, user: float, system: float) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """Return ``((y, height), (y, height))`` for the user and system segments."""
        usable = self.chart_height
        bottom = PADDING + usable
        user_h = _clamp(user) / 100.0 * usable
        system_h = _clamp(system) / 100.0 * usable

        user_seg = (bottom - user_h, user_h)
        if user_h + system_h > usable:
            system_seg = (float(PADDING), system_h)
        else:
            system_seg = (bottom - user_h - system_h, system_h)
        return user_seg, system_seg

    def svg(self, core_loads: Sequence[CoreLoad], palette: Palette) -> str:
        """Render the bars.

        Args:
            core_loads: ``(user, system)`` percentages, one pair per core.
            palette: color1 background, color2 frame, color3 user, color4 system.
        """
        width = self.width(len(core_loads))
        height = self.height()
        parts: List[str] = [
            f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
            f'xmlns="{SVG_NS}">',
            f'<rect x="0.5" y="0.5" width="{width - 1}" height="{height - 1}" rx="2" '
            f'fill="{palette.color1.hex()}" stroke="{palette.color2.hex()}" stroke-width="1"/>',
        ]

        for index, (user, system) in enumerate(core_loads):
            x = PADDING + index * (self.bar_width + self.spacing)
            (user_y, user_h), (system_y, system_h) = self.segments(user, system)
            if user_h > 0:
                parts.append(
                    f'<rect class="user" x="{x}" y="{fmt(user_y)}" width="{self.bar_width}" '
                    f'height="{fmt(user_h)}" fill="{palette.color3.hex()}"/>'
                )
            if system_h > 0:
                parts.append(
                    f'<rect class="system" x="{x}" y="{fmt(system_y)}" width="{self.bar_width}" '
                    f'height="{fmt(system_h)}" fill="{palette.color4.hex()}"/>'
                )

        parts.append('</svg>')
        return '\n'.join(parts)
