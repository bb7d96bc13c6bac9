# SPDX-License-Identifier: GPL-3.0-or-later
# Network and disk throughput sensors

"""Throughput sensors with a pair of per-tick delta series."""

from __future__ import annotations

from typing import Optional

from ..charts import double_line, line
from ..config import ChartKind, DeviceKind, SensorConfig
from ..constants import MAX_RATE_SAMPLES
from ..samples import SampleSeries
from ..stats.io import IOStats
from ..utils import UnitFamily, format_value, last_second_rate
from .base import Sensor


class ThroughputSensor(Sensor):
    """Two delta series sharing one chart.

    ``samples`` holds the first series (download / write), ``samples2``
    the second one (upload / read). ``fixed_max`` is a per-second
    bandwidth in the series' base unit, scaled to the refresh interval.
    """

    capacity = MAX_RATE_SAMPLES
    # multiplier applied to counter deltas before they are stored
    scale = 1
    prefixes = ('', '')

    def __init__(self, io_stats: IOStats, config: Optional[SensorConfig] = None,
                 capacity: Optional[int] = None) -> None:
        super().__init__(config, capacity)
        self._io = io_stats
        self.samples2 = SampleSeries(self.capacity)

    @property
    def max_y(self) -> Optional[float]:
        """Vertical scale per tick, None for adaptive."""
        if self._config.fixed_max is None:
            return None
        return self._config.fixed_max * self._config.refresh_interval_ms / 1000.0

    def update(self) -> None:
        first, second = self._io.read_deltas()
        self.samples.push(first * self.scale)
        self.samples2.push(second * self.scale)

    def chart(self) -> str:
        palette = self._config.palette
        if self.chart_kind is ChartKind.DOUBLE_LINE and self._config.extra_series_enabled:
            return double_line(self.samples, self.samples2, palette, max_y=self.max_y)
        return line(self.samples, palette, max_y=self.max_y)

    def rate(self, series: SampleSeries) -> float:
        """Per-second rate of ``series`` over the last second."""
        return last_second_rate(reversed(series), self._config.refresh_interval_ms)

    def _family(self, long: bool) -> UnitFamily:
        return UnitFamily.select(True, long)

    def _format(self, series: SampleSeries, long: bool) -> str:
        return format_value(self.rate(series), self._family(long))

    def first_label(self, long: bool = False) -> str:
        return self._format(self.samples, long)

    def second_label(self, long: bool = False) -> str:
        return self._format(self.samples2, long)

    def label(self) -> str:
        first = f"{self.prefixes[0]}{self.first_label()}"
        if not self._config.extra_series_enabled:
            return first
        return f"{first} {self.prefixes[1]}{self.second_label()}"


class NetworkSensor(ThroughputSensor):
    """Received and sent traffic, stored in bits per tick."""

    key = 'network'
    device_kind = DeviceKind.NETWORK
    scale = 8
    prefixes = ('↓', '↑')

    def __init__(self, io_stats: Optional[IOStats] = None,
                 config: Optional[SensorConfig] = None,
                 capacity: Optional[int] = None) -> None:
        super().__init__(io_stats or IOStats.network(), config, capacity)

    def rate(self, series: SampleSeries) -> float:
        rate = super().rate(series)
        return rate / 8 if self._config.show_bytes else rate

    def _family(self, long: bool) -> UnitFamily:
        return UnitFamily.select(self._config.show_bytes, long)

    def download_label(self, long: bool = False) -> str:
        return self.first_label(long)

    def upload_label(self, long: bool = False) -> str:
        return self.second_label(long)


class DisksSensor(ThroughputSensor):
    """Bytes written and read per tick."""

    key = 'disks'
    device_kind = DeviceKind.DISKS
    prefixes = ('W ', 'R ')

    def __init__(self, io_stats: Optional[IOStats] = None,
                 config: Optional[SensorConfig] = None,
                 capacity: Optional[int] = None) -> None:
        super().__init__(io_stats or IOStats.disks(), config, capacity)

    def write_label(self, long: bool = False) -> str:
        return self.first_label(long)

    def read_label(self, long: bool = False) -> str:
        return self.second_label(long)
