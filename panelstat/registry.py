# SPDX-License-Identifier: GPL-3.0-or-later
# Sensor registry

"""Owner of every sensor; the single entry point used by the panel shell."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .config import (
    SUPPORTED_KINDS, ChartKind, ColorChoices, DeviceKind, SensorConfig, build_color_choices,
)
from .constants import DEFAULT_REFRESH_INTERVAL
from .errors import ConfigError, PanelstatError
from .logging_config import get_logger
from .power import PowerStatus
from .sensors import (
    GPU_METRICS, CpuSensor, CpuTempSensor, DisksSensor, GpuSensor,
    MemorySensor, NetworkSensor, Sensor,
)
from .settings import Settings
from .stats.gpu import GpuDevice, HardwareInventory, NvmlContext, discover_gpus

logger = get_logger(__name__)


class SensorRegistry:
    """Live set of sensors, ticked in registration order.

    GPU entries are keyed by device identity and are only added at
    discovery. Configuration changes are validated before they replace
    anything, so a rejected config leaves the sensor untouched.
    """

    def __init__(self, nvml: Optional[NvmlContext] = None,
                 pause_on_battery: bool = True,
                 refresh_interval: int = DEFAULT_REFRESH_INTERVAL) -> None:
        self._sensors: Dict[str, Sensor] = {}
        self._gpus: Dict[str, GpuSensor] = {}
        self._nvml = nvml
        self._color_choices = build_color_choices()
        self.pause_on_battery = pause_on_battery
        self.refresh_interval = refresh_interval
        self.gpus_paused = False

    def register(self, sensor: Sensor) -> Sensor:
        """Add a sensor, moving it onto the registry's refresh interval."""
        if sensor.key in self._sensors:
            raise ValueError(f"sensor {sensor.key!r} already registered")
        _set_interval(sensor, self.refresh_interval)
        self._sensors[sensor.key] = sensor
        if isinstance(sensor, GpuSensor):
            self._gpus[sensor.key] = sensor
        logger.debug("Registered %r", sensor)
        return sensor

    def add_gpus(self, devices: Iterable[GpuDevice],
                 settings: Optional[Settings] = None) -> List[GpuSensor]:
        """Register one GpuSensor per discovered device."""
        added: List[GpuSensor] = []
        for device in devices:
            configs: Dict[DeviceKind, SensorConfig] = {}
            if settings is not None:
                for metric in GPU_METRICS:
                    configs[metric] = _load_config(
                        settings, f"{device.identity}.{metric.value}", metric
                    )
            added.append(self.register(GpuSensor(device, configs)))
        return added

    def __contains__(self, key: str) -> bool:
        return key in self._sensors

    def __len__(self) -> int:
        return len(self._sensors)

    def keys(self) -> List[str]:
        return list(self._sensors)

    def get(self, key: str) -> Sensor:
        try:
            return self._sensors[key]
        except KeyError:
            raise KeyError(f"no sensor {key!r}") from None

    @property
    def gpus(self) -> List[GpuSensor]:
        return list(self._gpus.values())

    def tick(self) -> None:
        """Update every sensor once.

        A sensor failing with an OS or parse error keeps its previous
        samples for this tick; the others still update.
        """
        for key, sensor in self._sensors.items():
            try:
                sensor.update()
            except (OSError, ValueError) as e:
                logger.warning("Updating %s failed: %s", key, e)

    def chart(self, key: str, metric: Optional[DeviceKind] = None) -> str:
        sensor = self.get(key)
        if metric is not None and isinstance(sensor, GpuSensor):
            return sensor.chart(metric)
        return sensor.chart()

    def label(self, key: str, metric: Optional[DeviceKind] = None) -> str:
        sensor = self.get(key)
        if metric is not None and isinstance(sensor, GpuSensor):
            return sensor.label(metric)
        return sensor.label()

    def config(self, key: str, metric: Optional[DeviceKind] = None) -> SensorConfig:
        sensor = self.get(key)
        if metric is not None and isinstance(sensor, GpuSensor):
            return sensor.config_for(metric)
        return sensor.config

    def apply_config(self, key: str, config: SensorConfig,
                     metric: Optional[DeviceKind] = None) -> None:
        """Replace a sensor's configuration between ticks.

        The refresh interval always follows ``set_refresh_interval()``.

        Raises:
            UnsupportedChartError: The chart kind can't render that metric.
        """
        config = replace(config, refresh_interval_ms=self.refresh_interval)
        sensor = self.get(key)
        if metric is not None and isinstance(sensor, GpuSensor):
            sensor.apply_config(config, metric)
        else:
            sensor.apply_config(config)

    def update_config(self, key: str, data: Mapping[str, Any],
                      metric: Optional[DeviceKind] = None) -> SensorConfig:
        """Apply the recognized keys of a plain mapping to a sensor's config."""
        config = self.config(key, metric).updated(data)
        self.apply_config(key, config, metric)
        return config

    def set_refresh_interval(self, interval_ms: int) -> None:
        """Change the tick period every sensor normalizes its rates to.

        This is the one place the interval changes; the timer driving
        ``tick()`` reads it back from here.

        Raises:
            ConfigError: The interval isn't a positive number of milliseconds.
        """
        if interval_ms <= 0:
            raise ConfigError("refresh interval must be positive")
        for sensor in self._sensors.values():
            _set_interval(sensor, interval_ms)
        self.refresh_interval = interval_ms
        logger.info("Refresh interval set to %d ms", interval_ms)

    def color_choices(self, key: str, metric: Optional[DeviceKind] = None) -> ColorChoices:
        """Colour picker entries for the sensor's current chart kind."""
        return self._color_choices[self.config(key, metric).chart_kind]

    def chart_kinds(self, key: str, metric: Optional[DeviceKind] = None) -> List[ChartKind]:
        sensor = self.get(key)
        kind = metric if metric is not None and isinstance(sensor, GpuSensor) else sensor.device_kind
        return sorted(SUPPORTED_KINDS[kind], key=lambda k: list(ChartKind).index(k))

    def pause_gpus(self) -> None:
        for gpu in self._gpus.values():
            gpu.stop()
        self.gpus_paused = True

    def resume_gpus(self) -> None:
        for gpu in self._gpus.values():
            gpu.restart()
        self.gpus_paused = False

    def on_power_status(self, status: PowerStatus) -> None:
        """Pause GPUs on battery, resume them on AC. Unknown state changes nothing."""
        if status.on_ac is None:
            return
        if status.on_battery and self.pause_on_battery and not self.gpus_paused:
            logger.info("On battery, pausing GPU polling")
            self.pause_gpus()
        elif status.on_ac and self.gpus_paused:
            logger.info("On AC power, resuming GPU polling")
            self.resume_gpus()

    def close(self) -> None:
        if self._nvml is not None:
            self._nvml.shutdown()

    @classmethod
    def create_default(cls, settings: Optional[Settings] = None,
                       inventory: Optional[HardwareInventory] = None) -> 'SensorRegistry':
        """Build a registry with every standard sensor and discovered GPU.

        Entries with a malformed stored configuration fall back to the
        defaults and log a warning.
        """
        settings = settings or Settings()
        nvml = NvmlContext() if settings.get("enable_nvml") else None
        registry = cls(nvml, bool(settings.get("pause_gpus_on_battery")),
                       int(settings.get("refresh_interval")))

        factories = (
            (CpuSensor, DeviceKind.CPU),
            (CpuTempSensor, DeviceKind.CPU_TEMP),
            (MemorySensor, DeviceKind.MEMORY),
            (NetworkSensor, DeviceKind.NETWORK),
            (DisksSensor, DeviceKind.DISKS),
        )
        for factory, kind in factories:
            registry.register(factory(config=_load_config(settings, factory.key, kind)))

        registry.add_gpus(discover_gpus(inventory, nvml), settings)
        return registry


def _set_interval(sensor: Sensor, interval_ms: int) -> None:
    if isinstance(sensor, GpuSensor):
        for metric in GPU_METRICS:
            config = sensor.config_for(metric)
            if config.refresh_interval_ms != interval_ms:
                sensor.apply_config(replace(config, refresh_interval_ms=interval_ms), metric)
    elif sensor.config.refresh_interval_ms != interval_ms:
        sensor.apply_config(replace(sensor.config, refresh_interval_ms=interval_ms))


def _load_config(settings: Settings, key: str, kind: DeviceKind) -> SensorConfig:
    try:
        config = settings.sensor_config(key, kind)
    except PanelstatError as e:
        logger.warning("Ignoring stored %s settings: %s", key, e)
        return SensorConfig.default(kind)
    if config.chart_kind not in SUPPORTED_KINDS[kind]:
        logger.warning("Ignoring stored %s chart kind %s", key, config.chart_kind)
        return replace(config, chart_kind=SensorConfig.default(kind).chart_kind)
    return config
