# SPDX-License-Identifier: GPL-3.0-or-later
# System statistics

"""CPU load and memory readers backed by /proc, CPU temperature through psutil."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from ..host import get_host_proc_path
from ..logging_config import get_logger

logger = get_logger(__name__)

# sensor chips reporting CPU package/die temperatures
CPU_TEMP_CHIPS = ('coretemp', 'k10temp', 'cpu', 'zenpower')

DEFAULT_CRIT_TEMP = 100.0


@dataclass
class CpuStat:
    """Cumulative jiffies of one core as listed in /proc/stat."""

    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0
    steal: int = 0

    @property
    def total(self) -> int:
        return (self.user + self.nice + self.system + self.idle
                + self.iowait + self.irq + self.softirq + self.steal)


@dataclass
class CpuLoad:
    """Share of a time window spent in user (incl. nice) and system mode."""

    user_pct: float = 0.0
    system_pct: float = 0.0

    @property
    def total(self) -> float:
        return self.user_pct + self.system_pct


def compute_load(prev: CpuStat, current: CpuStat) -> Optional[CpuLoad]:
    """Load between two readings, None if no time passed.

    Counters going backwards (CPU hotplug, wrap) count as zero.
    """
    def delta(name: str) -> int:
        return max(getattr(current, name) - getattr(prev, name), 0)

    user = delta('user') + delta('nice')
    system = delta('system')
    total = user + system + sum(
        delta(name) for name in ('idle', 'iowait', 'irq', 'softirq', 'steal')
    )
    if total == 0:
        return None
    return CpuLoad(user * 100.0 / total, system * 100.0 / total)


def _read_temperatures() -> Dict[str, List[Any]]:
    """Sensor readings grouped by chip, empty where psutil can't provide them."""
    read = getattr(psutil, 'sensors_temperatures', None)
    if read is None:
        return {}
    try:
        return read() or {}
    except (OSError, RuntimeError) as e:
        logger.debug("Could not read temperature sensors: %s", e)
        return {}


def _label_key(label: Optional[str]) -> Optional[str]:
    """Map a sensor label to the group it competes in."""
    lowered = (label or '').strip().lower()
    if lowered in ('tdie', 'tctl'):
        return lowered
    if lowered.startswith('tccd'):
        return 'tccd'
    if lowered.startswith(('core', 'package')):
        return 'core'
    return None


@dataclass
class HwmonTemp:
    """The CPU sensor group chosen on one chip and its critical threshold."""

    chip: str
    label: str
    crit_temp: float = DEFAULT_CRIT_TEMP

    def read_temp(self) -> Optional[float]:
        """Return the hottest reading of the group in °C.

        Returns:
            Degrees Celsius, or None if the group has no readings.
        """
        entries = _read_temperatures().get(self.chip) or []
        values = [float(entry.current) for entry in entries
                  if _label_key(entry.label) == self.label and entry.current is not None]
        if not values:
            logger.debug("No %s reading on %s", self.label, self.chip)
            return None
        return max(values)


class SystemStats:
    """System memory, CPU and temperature statistics."""

    def __init__(self, proc_path: Optional[Path] = None) -> None:
        self._proc_path = proc_path or get_host_proc_path()

    def read_cpu_stats(self) -> Dict[int, CpuStat]:
        """Read per-core counters from /proc/stat.

        Returns:
            Mapping of core number to its counters; empty on error.
        """
        stats: Dict[int, CpuStat] = {}
        try:
            with open(self._proc_path / 'stat', 'r') as f:
                for line in f:
                    parts = line.split()
                    # skip the aggregate "cpu" line and anything that isn't a core
                    if not parts or not parts[0].startswith('cpu') or parts[0] == 'cpu':
                        continue
                    if len(parts) < 9:
                        continue
                    try:
                        core = int(parts[0][3:])
                        values = [int(v) for v in parts[1:9]]
                    except ValueError:
                        continue
                    stats[core] = CpuStat(*values)
        except OSError as e:
            logger.debug("Could not read %s: %s", self._proc_path / 'stat', e)
        return stats

    def get_memory_info(self) -> Dict[str, int]:
        """Get memory and swap information.
        
        Returns:
            Dictionary with memory statistics in bytes, all zero on error.
        """
        meminfo: Dict[str, int] = {}
        try:
            with open(self._proc_path / 'meminfo', 'r') as f:
                for line in f:
                    parts = line.split()
                    if len(parts) >= 2:
                        meminfo[parts[0].rstrip(':')] = int(parts[1]) * 1024  # kB
        except (OSError, ValueError) as e:
            logger.debug("Could not read meminfo: %s", e)
            meminfo = {}

        mem_total = meminfo.get('MemTotal', 0)
        mem_available = meminfo.get('MemAvailable', 0)
        swap_total = meminfo.get('SwapTotal', 0)
        swap_free = meminfo.get('SwapFree', 0)

        return {
            'mem_total': mem_total,
            'mem_used': max(mem_total - mem_available, 0),
            'mem_available': mem_available,
            'swap_total': swap_total,
            'swap_used': max(swap_total - swap_free, 0),
        }

    def find_cpu_temp(self) -> Optional[HwmonTemp]:
        """Locate the most relevant CPU temperature sensors.

        AMD style labels win in the order Tdie, Tccd, Tctl, and their
        critical temperature comes from the chip's first reported
        threshold. Otherwise every "Core N"/"Package" sensor is tracked
        and the hottest one is used.

        Returns:
            The chosen group, or None if no CPU sensor chip exists.
        """
        temps = _read_temperatures()
        for chip in sorted(temps):
            if not any(candidate in chip.lower() for candidate in CPU_TEMP_CHIPS):
                continue
            entries = temps[chip]
            logger.info("Checking temperature sensors of %s", chip)

            keys = {_label_key(entry.label) for entry in entries}
            for key in ('tdie', 'tccd', 'tctl'):
                if key in keys:
                    crit = next((float(entry.critical) for entry in entries if entry.critical),
                                DEFAULT_CRIT_TEMP)
                    logger.info("Using %s on %s for CPU temperature", key, chip)
                    return HwmonTemp(chip, key, crit)
            if 'core' in keys:
                logger.info("Using core sensors on %s for CPU temperature", chip)
                return HwmonTemp(chip, 'core', DEFAULT_CRIT_TEMP)

        return None
