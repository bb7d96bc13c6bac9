# SPDX-License-Identifier: GPL-3.0-or-later
# Intel GPU statistics

"""Intel GPU placeholder backend.

Intel devices are recognised but not polled; discovery yields none.
"""

from __future__ import annotations

from typing import List

from ...constants import PCI_VENDOR_INTEL
from ...errors import GpuReadError
from ...logging_config import get_logger
from .base import GpuDevice, GpuVendor
from .inventory import HardwareInventory

logger = get_logger(__name__)


class IntelGpu(GpuDevice):
    """Intel GPU without a polling path."""

    vendor = GpuVendor.INTEL

    def usage(self) -> float:
        raise GpuReadError("Intel GPU polling is not supported")

    def vram_used(self) -> int:
        raise GpuReadError("Intel GPU polling is not supported")

    def temperature(self) -> int:
        raise GpuReadError("Intel GPU polling is not supported")

    def is_active(self) -> bool:
        return False

    def stop(self) -> None:
        pass

    def restart(self) -> None:
        pass


def discover(inventory: HardwareInventory) -> List[IntelGpu]:
    found = len(inventory.pci_devices(PCI_VENDOR_INTEL))
    if found:
        logger.info("Ignoring %d Intel GPU(s), polling not supported", found)
    return []
