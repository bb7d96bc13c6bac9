# SPDX-License-Identifier: GPL-3.0-or-later
# Chart and sensor configuration

"""Configuration objects pushed into sensors by the panel shell."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .constants import DEFAULT_REFRESH_INTERVAL
from .errors import ConfigError


class ChartKind(Enum):
    """Rendering algorithm selected for a metric."""

    RING = 'ring'
    LINE = 'line'
    DOUBLE_LINE = 'double_line'
    HEAT = 'heat'
    STACKED_BAR = 'stacked_bar'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, 'ChartKind']) -> 'ChartKind':
        """Accept enum members, values ("double_line") or names ("DoubleLine")."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ConfigError(f"chart kind must be a string, got {value!r}")
        key = value.strip().lower().replace('-', '_')
        aliases = {
            'doubleline': cls.DOUBLE_LINE,
            'stackedbar': cls.STACKED_BAR,
            'stackedbars': cls.STACKED_BAR,
            'stacked_bars': cls.STACKED_BAR,
        }
        if key in aliases:
            return aliases[key]
        for kind in cls:
            if kind.value == key:
                return kind
        raise ConfigError(f"unknown chart kind {value!r}")


class DeviceKind(Enum):
    """Tracked metric, used to pick defaults and allowed chart kinds."""

    CPU = 'cpu'
    CPU_TEMP = 'cputemp'
    MEMORY = 'memory'
    NETWORK = 'network'
    DISKS = 'disks'
    GPU_USAGE = 'gpu'
    GPU_VRAM = 'vram'
    GPU_TEMP = 'gputemp'


class TempUnit(Enum):
    CELSIUS = 'C'
    FAHRENHEIT = 'F'
    KELVIN = 'K'


@dataclass(frozen=True)
class Rgba:
    """8-bit RGBA colour."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self) -> None:
        for channel in (self.red, self.green, self.blue, self.alpha):
            if not isinstance(channel, int) or not 0 <= channel <= 255:
                raise ConfigError(f"colour channel out of range: {channel!r}")

    @classmethod
    def parse(cls, value: Any) -> 'Rgba':
        """Build a colour from "#RRGGBB[AA]", a 3/4 item sequence or an Rgba."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip().lstrip('#')
            if len(text) not in (6, 8):
                raise ConfigError(f"invalid colour {value!r}")
            try:
                channels = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
            except ValueError:
                raise ConfigError(f"invalid colour {value!r}") from None
            return cls(*channels)
        if isinstance(value, (list, tuple)) and len(value) in (3, 4):
            return cls(*(int(c) for c in value))
        raise ConfigError(f"invalid colour {value!r}")

    def hex(self) -> str:
        """Return "#RRGGBBAA"."""
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}{self.alpha:02X}"

    def hex_rgb(self) -> str:
        """Return "#RRGGBB", dropping alpha."""
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    @property
    def opacity(self) -> float:
        return round(self.alpha / 255, 3)


@dataclass(frozen=True)
class Palette:
    """Four colour slots; their meaning depends on the chart kind.

    Ring:        color1 background, color2 text, color3 ring, color4 filled ring
    Line / Heat: color1 background, color2 frame, color4 line
    DoubleLine:  color1 background, color2 frame, color3 second series,
                 color4 first series
    StackedBar:  color1 background, color2 frame, color3 user, color4 system
    """

    color1: Rgba
    color2: Rgba
    color3: Rgba
    color4: Rgba

    @classmethod
    def parse(cls, value: Any) -> 'Palette':
        if isinstance(value, cls):
            return value
        if not isinstance(value, (list, tuple)) or len(value) != 4:
            raise ConfigError("a palette needs exactly four colours")
        return cls(*(Rgba.parse(c) for c in value))

    def slots(self) -> Tuple[Rgba, Rgba, Rgba, Rgba]:
        return (self.color1, self.color2, self.color3, self.color4)

    def to_list(self) -> list:
        return [c.hex() for c in self.slots()]


# Palette used while a device is paused
DISABLED_PALETTE = Palette(
    Rgba(0xFF, 0xFF, 0xFF, 0x01),
    Rgba(0xFF, 0xFF, 0xFF, 0x10),
    Rgba(0xFF, 0xFF, 0xFF, 0x30),
    Rgba(0xFF, 0xFF, 0xFF, 0x70),
)

_BACKGROUND = Rgba(0x1B, 0x1B, 0x1B, 0xFF)
_FOREGROUND = Rgba(0xEE, 0xEE, 0xEE, 0xFF)
_RING = Rgba(0x4A, 0x4A, 0x4A, 0xFF)

_DEFAULT_PALETTES: Dict[DeviceKind, Palette] = {
    DeviceKind.CPU: Palette(_BACKGROUND, _FOREGROUND, Rgba(0x5C, 0xB8, 0x5C), Rgba(0xE0, 0x6C, 0x4C)),
    DeviceKind.CPU_TEMP: Palette(_BACKGROUND, _FOREGROUND, _RING, Rgba(0xFF, 0x8C, 0x1A)),
    DeviceKind.MEMORY: Palette(_BACKGROUND, _FOREGROUND, _RING, Rgba(0x9B, 0x6C, 0xE0)),
    DeviceKind.NETWORK: Palette(_BACKGROUND, _FOREGROUND, Rgba(0xF5, 0xA6, 0x23), Rgba(0x3D, 0xC8, 0x6E)),
    DeviceKind.DISKS: Palette(_BACKGROUND, _FOREGROUND, Rgba(0x4A, 0x90, 0xE2), Rgba(0xE2, 0x4A, 0x6A)),
    DeviceKind.GPU_USAGE: Palette(_BACKGROUND, _FOREGROUND, _RING, Rgba(0x76, 0xB9, 0x00)),
    DeviceKind.GPU_VRAM: Palette(_BACKGROUND, _FOREGROUND, _RING, Rgba(0x2E, 0xA8, 0xD8)),
    DeviceKind.GPU_TEMP: Palette(_BACKGROUND, _FOREGROUND, _RING, Rgba(0xFF, 0x5A, 0x36)),
}

_DEFAULT_KINDS: Dict[DeviceKind, ChartKind] = {
    DeviceKind.CPU: ChartKind.RING,
    DeviceKind.CPU_TEMP: ChartKind.HEAT,
    DeviceKind.MEMORY: ChartKind.RING,
    DeviceKind.NETWORK: ChartKind.DOUBLE_LINE,
    DeviceKind.DISKS: ChartKind.DOUBLE_LINE,
    DeviceKind.GPU_USAGE: ChartKind.RING,
    DeviceKind.GPU_VRAM: ChartKind.RING,
    DeviceKind.GPU_TEMP: ChartKind.HEAT,
}

SUPPORTED_KINDS: Mapping[DeviceKind, frozenset] = MappingProxyType({
    DeviceKind.CPU: frozenset({ChartKind.RING, ChartKind.LINE, ChartKind.STACKED_BAR}),
    DeviceKind.CPU_TEMP: frozenset({ChartKind.RING, ChartKind.LINE, ChartKind.HEAT}),
    DeviceKind.MEMORY: frozenset({ChartKind.RING, ChartKind.LINE}),
    DeviceKind.NETWORK: frozenset({ChartKind.LINE, ChartKind.DOUBLE_LINE}),
    DeviceKind.DISKS: frozenset({ChartKind.LINE, ChartKind.DOUBLE_LINE}),
    DeviceKind.GPU_USAGE: frozenset({ChartKind.RING, ChartKind.LINE}),
    DeviceKind.GPU_VRAM: frozenset({ChartKind.RING, ChartKind.LINE}),
    DeviceKind.GPU_TEMP: frozenset({ChartKind.RING, ChartKind.LINE, ChartKind.HEAT}),
})


def default_palette(kind: DeviceKind) -> Palette:
    return _DEFAULT_PALETTES[kind]


@dataclass(frozen=True)
class SensorConfig:
    """Per-metric settings.

    ``fixed_max`` of None selects the adaptive vertical scale.
    ``extra_series_enabled`` turns on the second series (upload/read)
    for network and disks, and the swap fill inside memory rings.
    """

    chart_kind: ChartKind
    palette: Palette
    fixed_max: Optional[float] = None
    extra_series_enabled: bool = True
    refresh_interval_ms: int = DEFAULT_REFRESH_INTERVAL
    chart_visible: bool = True
    label_visible: bool = False
    no_decimals: bool = False
    show_bytes: bool = False
    bar_width: int = 4
    bar_spacing: int = 1
    temp_unit: TempUnit = TempUnit.CELSIUS

    def __post_init__(self) -> None:
        if self.refresh_interval_ms <= 0:
            raise ConfigError("refresh_interval_ms must be positive")
        if self.fixed_max is not None and self.fixed_max <= 0:
            raise ConfigError("fixed_max must be positive when set")
        if self.bar_width < 1:
            raise ConfigError("bar_width must be at least 1")
        if self.bar_spacing < 0:
            raise ConfigError("bar_spacing can't be negative")

    @classmethod
    def default(cls, kind: DeviceKind) -> 'SensorConfig':
        return cls(chart_kind=_DEFAULT_KINDS[kind], palette=default_palette(kind))

    @classmethod
    def from_dict(cls, kind: DeviceKind, data: Mapping[str, Any]) -> 'SensorConfig':
        """Build a config from a plain mapping, starting from the defaults.

        Unknown keys are ignored so older or newer settings files
        still load. Malformed values raise ConfigError.
        """
        return cls.default(kind).updated(data)

    def updated(self, data: Mapping[str, Any]) -> 'SensorConfig':
        """Return a copy with the recognized keys of ``data`` applied."""
        changes: Dict[str, Any] = {}
        try:
            if 'chart_kind' in data:
                changes['chart_kind'] = ChartKind.parse(data['chart_kind'])
            if 'palette' in data:
                changes['palette'] = Palette.parse(data['palette'])
            if 'fixed_max' in data:
                value = data['fixed_max']
                changes['fixed_max'] = None if value is None else float(value)
            if 'temp_unit' in data:
                changes['temp_unit'] = TempUnit(str(data['temp_unit']).upper())
            for key in ('refresh_interval_ms', 'bar_width', 'bar_spacing'):
                if key in data:
                    changes[key] = int(data[key])
            for key in ('extra_series_enabled', 'chart_visible', 'label_visible',
                        'no_decimals', 'show_bytes'):
                if key in data:
                    changes[key] = bool(data[key])
        except (TypeError, ValueError) as e:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"invalid sensor configuration: {e}") from e
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'chart_kind': self.chart_kind.value,
            'palette': self.palette.to_list(),
            'fixed_max': self.fixed_max,
            'extra_series_enabled': self.extra_series_enabled,
            'refresh_interval_ms': self.refresh_interval_ms,
            'chart_visible': self.chart_visible,
            'label_visible': self.label_visible,
            'no_decimals': self.no_decimals,
            'show_bytes': self.show_bytes,
            'bar_width': self.bar_width,
            'bar_spacing': self.bar_spacing,
            'temp_unit': self.temp_unit.value,
        }


class ColorSlot(Enum):
    COLOR1 = 1
    COLOR2 = 2
    COLOR3 = 3
    COLOR4 = 4


ColorChoices = Tuple[Tuple[str, ColorSlot], ...]


def build_color_choices() -> Mapping[ChartKind, ColorChoices]:
    """Label keys offered by the colour picker for each chart kind.

    The keys are localization identifiers; translating them is up to
    the caller.
    """
    return MappingProxyType({
        ChartKind.RING: (
            ('graph-ring-r1', ColorSlot.COLOR4),
            ('graph-ring-r2', ColorSlot.COLOR3),
            ('graph-ring-back', ColorSlot.COLOR1),
            ('graph-ring-text', ColorSlot.COLOR2),
        ),
        ChartKind.LINE: (
            ('graph-line-graph', ColorSlot.COLOR4),
            ('graph-line-back', ColorSlot.COLOR1),
            ('graph-line-frame', ColorSlot.COLOR2),
        ),
        ChartKind.DOUBLE_LINE: (
            ('graph-line-first', ColorSlot.COLOR4),
            ('graph-line-second', ColorSlot.COLOR3),
            ('graph-line-back', ColorSlot.COLOR1),
            ('graph-line-frame', ColorSlot.COLOR2),
        ),
        ChartKind.HEAT: (
            ('graph-line-back', ColorSlot.COLOR1),
            ('graph-line-frame', ColorSlot.COLOR2),
        ),
        ChartKind.STACKED_BAR: (
            ('graph-bars-system', ColorSlot.COLOR4),
            ('graph-bars-user', ColorSlot.COLOR3),
            ('graph-line-back', ColorSlot.COLOR1),
            ('graph-line-frame', ColorSlot.COLOR2),
        ),
    })
