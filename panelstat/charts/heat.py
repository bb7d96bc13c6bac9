# SPDX-License-Identifier: GPL-3.0-or-later
# Heat chart

"""Temperature style chart: an area shaded with an orange to red gradient."""

from __future__ import annotations

from typing import Optional, Sequence

from ..config import Palette
from ..constants import GRAPH_SAMPLES
from .svg import BASELINE, LINE_SIZE, area, framed_chart, line_points, recent_samples

GRADIENT_ID = 'heat-gradient'

_GRADIENT = (
    f'<linearGradient id="{GRADIENT_ID}" x1="0" y1="{LINE_SIZE}" x2="0" y2="0" '
    'gradientUnits="userSpaceOnUse">'
    '<stop offset="0%" stop-color="#FFA500"/>'
    '<stop offset="90%" stop-color="#FF0000"/>'
    '</linearGradient>'
)


def heat(samples: Sequence[float], palette: Palette, max_y: Optional[float] = None,
         steps: int = GRAPH_SAMPLES) -> str:
    """Render a gradient-filled area chart.

    Args:
        samples: Oldest to newest.
        palette: color1 background, color2 frame.
        max_y: Vertical scale; the observed maximum when None (100 for
            an all-zero series).
        steps: Number of most recent samples drawn.
    """
    recent = recent_samples(samples, steps)
    if max_y is None:
        observed = max(recent, default=0.0)
        max_y = observed if observed > 0 else 100.0

    points = line_points(recent, max_y)
    layers = [area(points, f'url(#{GRADIENT_ID})')]
    if all(y == BASELINE for _, y in points):
        # nothing to shade, keep a visible zero line
        layers.append(
            f'<line x1="1" y1="{BASELINE}" x2="{BASELINE}" y2="{BASELINE}" '
            f'stroke="{palette.color2.hex()}" stroke-width="1"/>'
        )
    return framed_chart(palette, layers, defs=_GRADIENT)
