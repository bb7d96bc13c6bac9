# SPDX-License-Identifier: GPL-3.0-or-later
# Exceptions

"""Exception types raised by Panelstat."""


class PanelstatError(Exception):
    """Base class for all Panelstat errors."""


class ConfigError(PanelstatError, ValueError):
    """A configuration value could not be interpreted."""


class UnsupportedChartError(ConfigError):
    """A chart kind was requested for a metric that cannot render it."""

    def __init__(self, sensor: str, kind: object) -> None:
        super().__init__(f"{sensor} does not support chart kind {kind!s}")
        self.sensor = sensor
        self.kind = kind


class GpuReadError(PanelstatError):
    """A GPU counter could not be read this tick."""


class DeviceNotLoadedError(GpuReadError):
    """The vendor library handle for a GPU is not loaded."""
