# SPDX-License-Identifier: GPL-3.0-or-later
# GPU backends

"""GPU backends and discovery."""

from .amd import AmdGpu
from .base import GpuDevice, GpuVendor
from .detector import discover_gpus
from .identity import compute_identity
from .intel import IntelGpu
from .inventory import HardwareInventory, PciDevice, SysfsInventory
from .nvidia import NvidiaGpu, NvmlContext

__all__ = [
    'AmdGpu', 'GpuDevice', 'GpuVendor', 'HardwareInventory', 'IntelGpu',
    'NvidiaGpu', 'NvmlContext', 'PciDevice', 'SysfsInventory',
    'compute_identity', 'discover_gpus',
]
