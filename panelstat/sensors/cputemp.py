# SPDX-License-Identifier: GPL-3.0-or-later
# CPU temperature sensor

"""CPU temperature sensor backed by psutil sensor readings."""

from __future__ import annotations

from typing import Optional

from ..charts import heat, line, ring
from ..config import ChartKind, DeviceKind, SensorConfig
from ..logging_config import get_logger
from ..stats.system import DEFAULT_CRIT_TEMP, HwmonTemp, SystemStats
from ..utils import format_temperature
from .base import Sensor

logger = get_logger(__name__)


class CpuTempSensor(Sensor):
    """CPU temperature in °C; the chart scale tops out at the critical temperature."""

    key = 'cputemp'
    device_kind = DeviceKind.CPU_TEMP

    def __init__(self, hwmon: Optional[HwmonTemp] = None,
                 config: Optional[SensorConfig] = None,
                 capacity: Optional[int] = None,
                 stats: Optional[SystemStats] = None) -> None:
        super().__init__(config, capacity)
        if hwmon is None:
            hwmon = (stats or SystemStats()).find_cpu_temp()
            if hwmon is None:
                logger.info("No CPU temperature sensor found")
        self._hwmon = hwmon

    @property
    def is_found(self) -> bool:
        return self._hwmon is not None

    @property
    def max_temp(self) -> float:
        if self._config.fixed_max is not None:
            return self._config.fixed_max
        return self._hwmon.crit_temp if self._hwmon else DEFAULT_CRIT_TEMP

    def update(self) -> None:
        value = self._hwmon.read_temp() if self._hwmon else None
        self.samples.push(value if value is not None else 0.0)

    def chart(self) -> str:
        kind = self.chart_kind
        palette = self._config.palette
        if kind is ChartKind.RING:
            text = self.label()
            # drop the unit when it doesn't fit in the ring
            if len(text) > 3:
                text = text[:-1]
            return ring(text, self.latest() / self.max_temp * 100.0, palette)
        if kind is ChartKind.LINE:
            return line(self.samples, palette, max_y=self.max_temp)
        return heat(self.samples, palette, max_y=self.max_temp)

    def label(self) -> str:
        return format_temperature(self.latest(), self._config.temp_unit.value)
