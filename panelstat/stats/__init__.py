# SPDX-License-Identifier: GPL-3.0-or-later
# Statistics package

"""Raw counter readers for CPU, memory, I/O and GPUs."""

from .io import IOStats
from .system import CpuLoad, CpuStat, HwmonTemp, SystemStats

__all__ = ['CpuLoad', 'CpuStat', 'HwmonTemp', 'IOStats', 'SystemStats']
