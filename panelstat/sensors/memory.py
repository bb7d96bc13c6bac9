# SPDX-License-Identifier: GPL-3.0-or-later
# Memory sensor

"""Memory usage sensor, sampled in GiB."""

from __future__ import annotations

from typing import Optional

from ..charts import line, ring
from ..config import ChartKind, DeviceKind, SensorConfig
from ..constants import GIB
from ..stats.system import SystemStats
from ..utils import format_gigabytes, format_number
from .base import Sensor


class MemorySensor(Sensor):
    """Used memory (total minus available) in GiB.

    When the extra series is enabled, ring charts show swap usage as
    an inner fill.
    """

    key = 'memory'
    device_kind = DeviceKind.MEMORY

    def __init__(self, stats: Optional[SystemStats] = None,
                 config: Optional[SensorConfig] = None,
                 capacity: Optional[int] = None) -> None:
        super().__init__(config, capacity)
        self._stats = stats or SystemStats()
        self.total_gib = 0.0
        self.swap_percent = 0.0

    @property
    def percent(self) -> float:
        if self.total_gib <= 0:
            return 0.0
        return self.latest() / self.total_gib * 100.0

    def update(self) -> None:
        info = self._stats.get_memory_info()
        self.total_gib = info['mem_total'] / GIB
        if info['swap_total'] > 0:
            self.swap_percent = info['swap_used'] / info['swap_total'] * 100.0
        else:
            self.swap_percent = 0.0
        self.samples.push(info['mem_used'] / GIB)

    def chart(self) -> str:
        palette = self._config.palette
        if self.chart_kind is ChartKind.RING:
            swap = self.swap_percent if self._config.extra_series_enabled else None
            return ring(format_number(self.latest()), self.percent, palette, swap)
        max_y = self._config.fixed_max or self.total_gib or None
        return line(self.samples, palette, max_y=max_y)

    def label(self) -> str:
        return format_gigabytes(self.latest())
