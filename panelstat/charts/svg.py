# SPDX-License-Identifier: GPL-3.0-or-later
# Shared SVG building blocks

"""Templating shared by every chart renderer.

Renderers produce a list of layer strings and hand them to one of the
document helpers here, which add the viewport, the rounded clip and the
background/frame rectangle. Coordinate generation and colour injection
stay in the individual renderers.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import Palette, Rgba

Point = Tuple[float, float]

# Line-style charts use a 42x42 viewport with a 1 unit margin
LINE_SIZE = 42
PLOT_HEIGHT = 40
BASELINE = 41
TOP = 1
CORNER_RADIUS = 7

SVG_NS = 'http://www.w3.org/2000/svg'


def fmt(value: float) -> str:
    """Format a coordinate without trailing zeros ("17", "1.0845")."""
    text = f"{value:.4f}".rstrip('0').rstrip('.')
    return '0' if text in ('-0', '') else text


def points_attr(points: Iterable[Point]) -> str:
    return ' '.join(f"{fmt(x)},{fmt(y)}" for x, y in points)


def scale_y(value: float, max_value: float) -> int:
    """Map a sample to a Y coordinate of the plot area.

    Samples above ``max_value`` are drawn on the top edge, negative
    ones on the baseline.
    """
    if max_value <= 0:
        return BASELINE
    y = round(BASELINE - (value / max_value) * PLOT_HEIGHT)
    return min(max(y, TOP), BASELINE)


def recent_samples(samples: Iterable[float], steps: int) -> List[float]:
    """The last ``steps`` samples, none when ``steps`` is below 1."""
    return list(samples)[-steps:] if steps > 0 else []


def line_points(samples: Sequence[float], max_value: float, steps: Optional[int] = None) -> List[Point]:
    """Turn the most recent ``steps`` samples into evenly spaced points.

    An empty series becomes a flat line on the baseline.
    """
    if steps is not None:
        samples = recent_samples(samples, steps)
    if not samples:
        return [(TOP, BASELINE), (BASELINE, BASELINE)]
    return [(index * 2 + 1, scale_y(value, max_value)) for index, value in enumerate(samples)]


def adaptive_max(series: Iterable[Sequence[float]], floor: float) -> float:
    """Largest observed sample across ``series``, never below ``floor``."""
    observed = max((max(s, default=0.0) for s in series), default=0.0)
    return max(observed, floor)


def polyline(points: Sequence[Point], color: Rgba) -> str:
    return (f'<polyline fill="none" stroke="{color.hex_rgb()}" stroke-width="1" '
            f'stroke-linejoin="round" points="{points_attr(points)}"/>')


def area(points: Sequence[Point], fill: str, opacity: Optional[float] = None) -> str:
    """Polygon under a line, closed along the baseline."""
    closed = list(points) + [(points[-1][0], BASELINE), (points[0][0], BASELINE)]
    opacity_attr = '' if opacity is None else f' fill-opacity="{fmt(opacity)}"'
    return f'<polygon fill="{fill}"{opacity_attr} points="{points_attr(closed)}"/>'


def series_layers(points: Sequence[Point], color: Rgba) -> List[str]:
    """Translucent area plus its outline, in the series colour."""
    return [
        area(points, color.hex_rgb(), opacity=0.3 * color.alpha / 255),
        polyline(points, color),
    ]


def framed_chart(palette: Palette, layers: Iterable[str], defs: str = '',
                 frame: Optional[Rgba] = None) -> str:
    """Wrap layers in the 42x42 rounded frame used by line-style charts.

    Args:
        palette: color1 fills the background.
        layers: SVG elements drawn between background and frame.
        defs: Extra definitions (gradients) for the layers.
        frame: Frame colour, color2 when not given.
    """
    frame = frame or palette.color2
    size = LINE_SIZE
    rect = (f'x="0.5" y="0.5" width="{size - 1}" height="{size - 1}" '
            f'rx="{CORNER_RADIUS}" ry="{CORNER_RADIUS}"')
    parts = [
        f'<svg width="{size}" height="{size}" viewBox="0 0 {size} {size}" xmlns="{SVG_NS}">',
        '<defs>',
        f'<clipPath id="rounded-clip"><rect x="0" y="0" width="{size}" height="{size}" '
        f'rx="{CORNER_RADIUS}" ry="{CORNER_RADIUS}"/></clipPath>',
        defs,
        '</defs>',
        '<g clip-path="url(#rounded-clip)">',
        f'<rect {rect} fill="{palette.color1.hex()}"/>',
    ]
    parts.extend(layers)
    parts.append(f'<rect {rect} fill="none" stroke="{frame.hex()}" stroke-width="1"/>')
    parts.append('</g></svg>')
    return '\n'.join(p for p in parts if p)
