# SPDX-License-Identifier: GPL-3.0-or-later
# Sensor base class

"""Common behaviour of every sensor: samples, configuration, validation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import FrozenSet, Optional

from ..config import SUPPORTED_KINDS, ChartKind, DeviceKind, SensorConfig
from ..constants import MAX_SAMPLES
from ..errors import UnsupportedChartError
from ..logging_config import get_logger
from ..samples import SampleSeries
from ..utils import format_number

logger = get_logger(__name__)


def ring_text(value: float, no_decimals: bool = False) -> str:
    """Short number shown inside a percentage ring."""
    if no_decimals:
        return f"{round(value)}%"
    if value > 99.9:
        return "100"
    return format_number(value)


def check_chart_kind(name: str, device_kind: DeviceKind, config: SensorConfig) -> SensorConfig:
    """Reject a config whose chart kind can't render ``device_kind``."""
    if config.chart_kind not in SUPPORTED_KINDS[device_kind]:
        logger.warning("Rejecting %s chart for %s", config.chart_kind, name)
        raise UnsupportedChartError(name, config.chart_kind)
    return config


class Sensor(ABC):
    """A tracked metric with its own sample buffer and configuration.

    Subclasses read fresh counters in ``update()`` and render the
    buffer in ``chart()`` and ``label()``.
    """

    key: str
    device_kind: DeviceKind
    capacity: int = MAX_SAMPLES

    def __init__(self, config: Optional[SensorConfig] = None,
                 capacity: Optional[int] = None) -> None:
        if capacity is not None:
            self.capacity = capacity
        self._config = check_chart_kind(
            self.key, self.device_kind, config or SensorConfig.default(self.device_kind)
        )
        self.samples = SampleSeries(self.capacity)

    @property
    def config(self) -> SensorConfig:
        return self._config

    @property
    def chart_kind(self) -> ChartKind:
        return self._config.chart_kind

    @property
    def supported_kinds(self) -> FrozenSet[ChartKind]:
        return SUPPORTED_KINDS[self.device_kind]

    def apply_config(self, config: SensorConfig) -> None:
        """Replace the configuration; the old one stays on error."""
        self._config = check_chart_kind(self.key, self.device_kind, config)

    def latest(self) -> float:
        return self.samples.latest()

    @abstractmethod
    def update(self) -> None:
        """Read counters and push a new sample."""

    @abstractmethod
    def chart(self) -> str:
        """Render the current samples as SVG."""

    @abstractmethod
    def label(self) -> str:
        """Short text form of the latest value."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key} {self.chart_kind}>"
