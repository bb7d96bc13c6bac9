# SPDX-License-Identifier: GPL-3.0-or-later
# CPU load sensor

"""CPU load sensor with ring, line and per-core bar charts."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..charts import StackedBar, line, ring
from ..config import ChartKind, DeviceKind, SensorConfig
from ..logging_config import get_logger
from ..stats.system import CpuLoad, CpuStat, SystemStats, compute_load
from ..utils import format_percent
from .base import Sensor, ring_text

logger = get_logger(__name__)

BAR_CHART_HEIGHT = 22


class CpuSensor(Sensor):
    """Total CPU load in percent, plus the last per-core split."""

    key = 'cpu'
    device_kind = DeviceKind.CPU

    def __init__(self, stats: Optional[SystemStats] = None,
                 config: Optional[SensorConfig] = None,
                 capacity: Optional[int] = None) -> None:
        super().__init__(config, capacity)
        self._stats = stats or SystemStats()
        self._previous: Dict[int, CpuStat] = self._stats.read_cpu_stats()
        self.core_loads: List[CpuLoad] = [CpuLoad() for _ in self._previous]
        self.total_load = CpuLoad()
        logger.info("Found %d CPU cores", len(self._previous))

    @property
    def core_count(self) -> int:
        return len(self.core_loads)

    def update(self) -> None:
        current = self._stats.read_cpu_stats()
        loads: List[CpuLoad] = []
        for core in sorted(current):
            prev = self._previous.get(core)
            load = compute_load(prev, current[core]) if prev is not None else None
            loads.append(load or CpuLoad())

        if current:
            self._previous = current
            self.core_loads = loads

        counted = len(loads)
        if counted:
            self.total_load = CpuLoad(
                sum(l.user_pct for l in loads) / counted,
                sum(l.system_pct for l in loads) / counted,
            )
        else:
            self.total_load = CpuLoad()
        self.samples.push(min(self.total_load.total, 100.0))

    def bars(self) -> StackedBar:
        return StackedBar(self._config.bar_width, BAR_CHART_HEIGHT, self._config.bar_spacing)

    def chart(self) -> str:
        kind = self.chart_kind
        palette = self._config.palette
        if kind is ChartKind.RING:
            latest = self.latest()
            return ring(ring_text(latest, self._config.no_decimals), latest, palette)
        if kind is ChartKind.LINE:
            return line(self.samples, palette, max_y=100.0)
        loads = [(l.user_pct, l.system_pct) for l in self.core_loads]
        return self.bars().svg(loads, palette)

    def label(self) -> str:
        return format_percent(self.latest(), self._config.no_decimals)
