# SPDX-License-Identifier: GPL-3.0-or-later
# GPU sensor

"""Registry entry for one GPU: usage, VRAM and temperature series."""

from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional

from ..charts import heat, line, ring
from ..config import DISABLED_PALETTE, ChartKind, DeviceKind, SensorConfig
from ..constants import GIB, MAX_SAMPLES
from ..errors import GpuReadError
from ..logging_config import get_logger
from ..samples import SampleSeries
from ..stats.gpu.base import GpuDevice
from ..utils import format_gigabytes, format_number, format_percent, format_temperature
from .base import Sensor, check_chart_kind, ring_text

logger = get_logger(__name__)

GPU_METRICS = (DeviceKind.GPU_USAGE, DeviceKind.GPU_VRAM, DeviceKind.GPU_TEMP)

DISABLED_TEXT = '-'


class GpuSensor(Sensor):
    """Binds a GpuDevice to three independent series and configs.

    ``samples`` is the usage series; ``series`` maps every metric to
    its own buffer. While the device is stopped nothing is read, the
    series stay zeroed and charts use the disabled palette.
    """

    device_kind = DeviceKind.GPU_USAGE

    def __init__(self, device: GpuDevice,
                 configs: Optional[Mapping[DeviceKind, SensorConfig]] = None,
                 capacity: int = MAX_SAMPLES) -> None:
        self.device = device
        self.key = device.identity
        configs = configs or {}
        super().__init__(configs.get(DeviceKind.GPU_USAGE), capacity)

        self.configs: Dict[DeviceKind, SensorConfig] = {DeviceKind.GPU_USAGE: self._config}
        for metric in (DeviceKind.GPU_VRAM, DeviceKind.GPU_TEMP):
            config = configs.get(metric) or SensorConfig.default(metric)
            self.configs[metric] = check_chart_kind(self.key, metric, config)

        self.series: Dict[DeviceKind, SampleSeries] = {
            DeviceKind.GPU_USAGE: self.samples,
            DeviceKind.GPU_VRAM: SampleSeries(capacity),
            DeviceKind.GPU_TEMP: SampleSeries(capacity),
        }
        self.disabled = not device.is_active()

    @property
    def name(self) -> str:
        return self.device.name

    @property
    def identity(self) -> str:
        return self.device.identity

    @property
    def vram_total_gib(self) -> float:
        return self.device.vram_total / GIB

    def config_for(self, metric: DeviceKind) -> SensorConfig:
        return self.configs[metric]

    def apply_config(self, config: SensorConfig,
                     metric: DeviceKind = DeviceKind.GPU_USAGE) -> None:
        if metric not in self.configs:
            raise KeyError(metric)
        self.configs[metric] = check_chart_kind(self.key, metric, config)
        if metric is DeviceKind.GPU_USAGE:
            self._config = self.configs[metric]

    def _read(self, metric: DeviceKind, reader: Callable[[], float]) -> float:
        try:
            return float(reader())
        except GpuReadError as e:
            logger.debug("%s: %s read failed: %s", self.name, metric.value, e)
            return 0.0

    def update(self) -> None:
        if not self.device.is_active():
            return
        self.series[DeviceKind.GPU_USAGE].push(self._read(DeviceKind.GPU_USAGE, self.device.usage))
        self.series[DeviceKind.GPU_VRAM].push(
            self._read(DeviceKind.GPU_VRAM, self.device.vram_used) / GIB
        )
        self.series[DeviceKind.GPU_TEMP].push(
            self._read(DeviceKind.GPU_TEMP, self.device.temperature) / 1000.0
        )

    def stop(self) -> None:
        """Pause polling: stop the device, zero the series, grey out charts."""
        self.device.stop()
        for series in self.series.values():
            series.clear()
        self.disabled = True
        logger.info("Stopped polling %s", self.name)

    def restart(self) -> None:
        self.device.restart()
        self.disabled = not self.device.is_active()
        logger.info("Resumed polling %s", self.name)

    def latest_of(self, metric: DeviceKind) -> float:
        return self.series[metric].latest()

    def _max_for(self, metric: DeviceKind) -> float:
        config = self.configs[metric]
        if config.fixed_max is not None:
            return config.fixed_max
        if metric is DeviceKind.GPU_VRAM and self.vram_total_gib > 0:
            return self.vram_total_gib
        return 100.0

    def _ring_text(self, metric: DeviceKind) -> str:
        value = self.latest_of(metric)
        if metric is DeviceKind.GPU_USAGE:
            return ring_text(value, self.configs[metric].no_decimals)
        if metric is DeviceKind.GPU_VRAM:
            return format_number(value)
        text = format_temperature(value, self.configs[metric].temp_unit.value)
        return text[:-1] if len(text) > 3 else text

    def chart(self, metric: DeviceKind = DeviceKind.GPU_USAGE) -> str:
        config = self.configs[metric]
        palette = DISABLED_PALETTE if self.disabled else config.palette
        max_y = self._max_for(metric)
        samples = self.series[metric]

        if config.chart_kind is ChartKind.RING:
            if self.disabled:
                return ring(DISABLED_TEXT, 0.0, palette)
            return ring(self._ring_text(metric), samples.latest() / max_y * 100.0, palette)
        if config.chart_kind is ChartKind.HEAT:
            return heat(samples, palette, max_y=max_y)
        return line(samples, palette, max_y=max_y)

    def label(self, metric: DeviceKind = DeviceKind.GPU_USAGE) -> str:
        if self.disabled:
            return DISABLED_TEXT
        value = self.latest_of(metric)
        config = self.configs[metric]
        if metric is DeviceKind.GPU_USAGE:
            return format_percent(value, config.no_decimals)
        if metric is DeviceKind.GPU_VRAM:
            return format_gigabytes(value)
        return format_temperature(value, config.temp_unit.value)
