# SPDX-License-Identifier: GPL-3.0-or-later
# Line charts

"""Single and double line charts over the most recent samples."""

from __future__ import annotations

from typing import Optional, Sequence

from ..config import Palette, Rgba
from ..constants import GRAPH_SAMPLES
from .svg import adaptive_max, framed_chart, line_points, recent_samples, series_layers

# Adaptive scales never drop below this, so idle links don't look busy
DEFAULT_FLOOR = 40.0


def line(samples: Sequence[float], palette: Palette, max_y: Optional[float] = None,
         floor: float = DEFAULT_FLOOR, steps: int = GRAPH_SAMPLES,
         color: Optional[Rgba] = None) -> str:
    """Render one series as a line with a translucent area below it.

    Args:
        samples: Oldest to newest.
        palette: color1 background, color2 frame, color4 line.
        max_y: Fixed vertical scale; adaptive (observed max, at least
            ``floor``) when None.
        floor: Lower bound of the adaptive scale.
        steps: Number of most recent samples drawn.
        color: Line colour overriding color4.
    """
    recent = recent_samples(samples, steps)
    max_value = max_y if max_y is not None else adaptive_max([recent], floor)
    points = line_points(recent, max_value)
    return framed_chart(palette, series_layers(points, color or palette.color4))


def double_line(samples1: Sequence[float], samples2: Sequence[float], palette: Palette,
                max_y: Optional[float] = None, floor: float = DEFAULT_FLOOR,
                steps: int = GRAPH_SAMPLES) -> str:
    """Render two series of equal length over the same X axis.

    The first series uses color4, the second color3; both share one
    vertical scale, fixed by ``max_y`` or the larger observed maximum
    of the two (at least ``floor``).
    """
    if len(samples1) != len(samples2):
        raise ValueError(
            f"series lengths differ: {len(samples1)} != {len(samples2)}"
        )

    recent1 = recent_samples(samples1, steps)
    recent2 = recent_samples(samples2, steps)
    max_value = max_y if max_y is not None else adaptive_max([recent1, recent2], floor)

    layers = series_layers(line_points(recent1, max_value), palette.color4)
    layers += series_layers(line_points(recent2, max_value), palette.color3)
    return framed_chart(palette, layers)
