# SPDX-License-Identifier: GPL-3.0-or-later
# GPU detection utilities

"""GPU discovery across every backend."""

from __future__ import annotations

from typing import List, Optional, Set

from ...logging_config import get_logger
from . import amd, intel, nvidia
from .base import GpuDevice
from .inventory import HardwareInventory, SysfsInventory
from .nvidia import NvmlContext

logger = get_logger(__name__)


def discover_gpus(inventory: Optional[HardwareInventory] = None,
                  nvml: Optional[NvmlContext] = None) -> List[GpuDevice]:
    """Detect GPUs of every vendor.

    Backends are queried in the order Intel, NVIDIA, AMD. A device
    reported twice (same identity) is kept only once, first one wins.

    Args:
        inventory: Hardware listing; the real sysfs one when None.
        nvml: Shared NVML context; NVIDIA is skipped when None.

    Returns:
        Discovered devices in discovery order.
    """
    inventory = inventory or SysfsInventory()

    candidates: List[GpuDevice] = []
    candidates.extend(intel.discover(inventory))
    if nvml is not None:
        candidates.extend(nvidia.discover(nvml, inventory))
    candidates.extend(amd.discover(inventory))

    seen: Set[str] = set()
    gpus: List[GpuDevice] = []
    for gpu in candidates:
        if gpu.identity in seen:
            logger.debug("Dropping duplicate GPU %s", gpu.identity)
            continue
        seen.add(gpu.identity)
        gpus.append(gpu)

    logger.info("Discovered %d GPU(s)", len(gpus))
    return gpus
