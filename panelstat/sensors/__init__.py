# SPDX-License-Identifier: GPL-3.0-or-later
# Sensors

"""Stateful sensors, one per tracked metric."""

from .base import Sensor
from .cpu import CpuSensor
from .cputemp import CpuTempSensor
from .gpu import GPU_METRICS, GpuSensor
from .memory import MemorySensor
from .throughput import DisksSensor, NetworkSensor, ThroughputSensor

__all__ = [
    'CpuSensor', 'CpuTempSensor', 'DisksSensor', 'GPU_METRICS', 'GpuSensor',
    'MemorySensor', 'NetworkSensor', 'Sensor', 'ThroughputSensor',
]
