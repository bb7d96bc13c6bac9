# SPDX-License-Identifier: GPL-3.0-or-later
# Settings management

"""Application settings held in memory.

Loading and saving belong to the panel shell; it feeds values in
with ``update()`` and reads them back with ``as_dict()``.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Mapping, Optional, Union

from .config import DeviceKind, SensorConfig
from .constants import DEFAULT_REFRESH_INTERVAL
from .logging_config import get_logger

logger = get_logger(__name__)

SettingValue = Union[int, float, bool, str, list, dict, None]


class Settings:
    """Application settings manager.
    
    Holds global options plus one mapping per sensor key ("cpu",
    "network", a GPU identity, ...). Sensor mappings are turned into
    SensorConfig objects on request.
    """
    
    DEFAULTS: Dict[str, SettingValue] = {
        "refresh_interval": DEFAULT_REFRESH_INTERVAL,  # milliseconds
        "enable_nvml": True,
        "pause_gpus_on_battery": True,
        "sensors": {},  # sensor key -> config mapping
    }
    
    def __init__(self, values: Optional[Mapping[str, SettingValue]] = None) -> None:
        self._settings: Dict[str, SettingValue] = copy.deepcopy(self.DEFAULTS)
        if values:
            self.update(values)
    
    def update(self, values: Mapping[str, SettingValue]) -> None:
        """Merge values, e.g. ones the shell loaded from disk."""
        self._settings.update(copy.deepcopy(dict(values)))
    
    def get(self, key: str, default: Optional[SettingValue] = None) -> SettingValue:
        """Get a setting value.
        
        Args:
            key: The setting key to retrieve.
            default: Default value if key is not found (falls back to DEFAULTS).
            
        Returns:
            The setting value.
        """
        if default is not None:
            return self._settings.get(key, default)
        return self._settings.get(key, self.DEFAULTS.get(key))
    
    def set(self, key: str, value: SettingValue) -> None:
        self._settings[key] = value
    
    def reset(self) -> None:
        """Reset all settings to defaults."""
        self._settings = copy.deepcopy(self.DEFAULTS)
    
    def as_dict(self) -> Dict[str, SettingValue]:
        return copy.deepcopy(self._settings)
    
    def sensor_config(self, key: str, kind: DeviceKind) -> SensorConfig:
        """Build the SensorConfig stored under ``key``.

        The global refresh interval applies unless the sensor sets
        its own. Malformed entries raise ConfigError.
        """
        sensors = self.get("sensors") or {}
        data: Dict[str, Any] = {"refresh_interval_ms": self.get("refresh_interval")}
        data.update(sensors.get(key, {}))
        return SensorConfig.from_dict(kind, data)
    
    def store_sensor_config(self, key: str, config: SensorConfig) -> None:
        sensors = dict(self.get("sensors") or {})
        sensors[key] = config.to_dict()
        self._settings["sensors"] = sensors
