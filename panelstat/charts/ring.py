# SPDX-License-Identifier: GPL-3.0-or-later
# Ring chart

"""Ring chart: a circular gauge with a centered text label."""

from __future__ import annotations

import html
import math
from typing import List, Optional

from ..config import Palette
from .svg import SVG_NS, fmt

RING_SIZE = 34
CENTER = 17.0
RADIUS = 15.9155
INNER_RADIUS = 12.9155
STROKE_WIDTH = 2


def clamp_percent(percent: float) -> float:
    if math.isnan(percent):
        return 0.0
    return min(max(percent, 0.0), 100.0)


def _point(fraction: float) -> str:
    # 12 o'clock, clockwise
    angle = 2 * math.pi * fraction
    x = CENTER + RADIUS * math.sin(angle)
    y = CENTER - RADIUS * math.cos(angle)
    return f"{fmt(x)} {fmt(y)}"


def arc_path(start: float, end: float) -> Optional[str]:
    """Path data for the arc between two fractions of a full turn.

    Returns None for an arc too short to show. A sweep whose rounded
    end points coincide is drawn as the full circle when it is the
    long way round, since an arc between equal points renders nothing.
    """
    sweep = end - start
    if sweep <= 0.0:
        return None
    start_point = _point(start)
    end_point = _point(end)
    if sweep >= 1.0 or (start_point == end_point and sweep > 0.5):
        diameter = fmt(2 * RADIUS)
        r = fmt(RADIUS)
        return (f"M{fmt(CENTER)} {fmt(CENTER - RADIUS)} "
                f"a {r} {r} 0 0 1 0 {diameter} "
                f"a {r} {r} 0 0 1 0 -{diameter}")
    if start_point == end_point:
        return None
    large_arc = 1 if sweep > 0.5 else 0
    r = fmt(RADIUS)
    return f"M{start_point} A {r} {r} 0 {large_arc} 1 {end_point}"


def _inner_fill(percent: float, palette: Palette) -> List[str]:
    """Disc inside the ring filled from the bottom up to ``percent``."""
    height = percent / 100.0 * 2 * INNER_RADIUS
    y = CENTER + INNER_RADIUS - height
    return [
        '<defs><clipPath id="bottom-fill">'
        f'<rect x="{fmt(CENTER - INNER_RADIUS)}" y="{fmt(y)}" '
        f'width="{fmt(2 * INNER_RADIUS)}" height="{fmt(height)}"/>'
        '</clipPath></defs>',
        f'<circle cx="{fmt(CENTER)}" cy="{fmt(CENTER)}" r="{fmt(INNER_RADIUS)}" '
        f'fill="{palette.color4.hex_rgb()}" fill-opacity="0.35" clip-path="url(#bottom-fill)"/>',
    ]


def ring(value_text: str, percent: float, palette: Palette,
         percent2: Optional[float] = None) -> str:
    """Render a ring gauge.

    The filled arc starts at 12 o'clock and sweeps clockwise over
    ``percent`` (clamped to 0..100) of the circle. At 0% no filled arc
    is drawn, at 100% the remainder arc is left out.

    Args:
        value_text: Label drawn in the middle of the ring.
        percent: Filled share of the ring.
        palette: color1 background, color2 text, color3 remainder, color4 fill.
        percent2: Optional second value shown as an inner disc filled from
            the bottom.

    Returns:
        SVG markup with a 34x34 viewport.
    """
    pct = clamp_percent(percent) / 100.0

    layers = [
        f'<svg width="{RING_SIZE}" height="{RING_SIZE}" '
        f'viewBox="0 0 {RING_SIZE} {RING_SIZE}" xmlns="{SVG_NS}">',
        f'<circle class="ring-back" cx="{fmt(CENTER)}" cy="{fmt(CENTER)}" '
        f'r="{fmt(RADIUS)}" fill="{palette.color1.hex()}"/>',
    ]

    rest = arc_path(pct, 1.0)
    if rest:
        layers.append(
            f'<path class="ring-rest" d="{rest}" fill="none" '
            f'stroke="{palette.color3.hex()}" stroke-width="{STROKE_WIDTH}"/>'
        )
    fill = arc_path(0.0, pct)
    if fill:
        layers.append(
            f'<path class="ring-fill" d="{fill}" fill="none" '
            f'stroke="{palette.color4.hex()}" stroke-width="{STROKE_WIDTH}"/>'
        )
    if percent2 is not None:
        layers.extend(_inner_fill(clamp_percent(percent2), palette))

    layers.append(
        f'<text x="{fmt(CENTER)}" y="22.35" fill="{palette.color2.hex()}" '
        'font-family="Noto Sans, sans-serif" font-size="13" '
        f'text-anchor="middle">{html.escape(value_text, quote=False)}</text>'
    )
    layers.append('</svg>')
    return '\n'.join(layers)
