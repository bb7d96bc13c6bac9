# SPDX-License-Identifier: GPL-3.0-or-later
# AMD GPU statistics

"""AMD GPU backend reading amdgpu's sysfs attributes."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from ...constants import PCI_VENDOR_AMD
from ...errors import GpuReadError
from ...logging_config import get_logger
from ...utils import UnitFamily, format_value
from .base import GpuDevice, GpuVendor
from .identity import compute_identity
from .inventory import HardwareInventory, PciDevice, short_address

logger = get_logger(__name__)

FALLBACK_NAME = "AMD GPU"

# Device ids of common Radeon boards, used when lspci isn't available
AMD_DEVICE_NAMES = {
    '0x67df': 'Radeon RX 470/480/570/580',
    '0x687f': 'Radeon RX Vega 56/64',
    '0x66af': 'Radeon VII',
    '0x731f': 'Radeon RX 5600 XT/5700/5700 XT',
    '0x7340': 'Radeon RX 5500/5500 XT',
    '0x73bf': 'Radeon RX 6800/6800 XT/6900 XT',
    '0x73df': 'Radeon RX 6700/6700 XT/6750 XT',
    '0x73ff': 'Radeon RX 6600/6600 XT/6650 XT',
    '0x743f': 'Radeon RX 6400/6500 XT',
    '0x744c': 'Radeon RX 7900 XT/7900 XTX',
    '0x7480': 'Radeon RX 7600/7600 XT',
    '0x747e': 'Radeon RX 7700 XT/7800 XT',
    '0x7550': 'Radeon RX 9070/9070 XT',
    '0x15bf': 'Radeon 780M',
    '0x1681': 'Radeon 680M',
    '0x164e': 'Radeon Graphics (Raphael)',
    '0x1638': 'Radeon Graphics (Cezanne)',
    '0x15d8': 'Radeon Vega (Picasso)',
}


class AmdGpu(GpuDevice):
    """AMD GPU polled through /sys/bus/pci/devices/<addr>/.

    While the device is runtime-suspended, usage and VRAM report zero
    without touching the counters, which would otherwise wake it.
    """

    vendor = GpuVendor.AMD

    def __init__(self, name: str, identity: str, device_path: Path,
                 inventory: HardwareInventory, vram_total: int = 0) -> None:
        super().__init__(name, identity, vram_total)
        self._path = device_path
        self._inventory = inventory
        self._active = True
        self._temp_attr = self._find_temp_attr()

    @property
    def path(self) -> Path:
        return self._path

    def _find_temp_attr(self) -> Optional[str]:
        matches = self._inventory.glob(self._path, 'hwmon/hwmon*/temp1_input')
        return matches[0] if matches else None

    def is_suspended(self) -> bool:
        return self._inventory.read_attr(self._path, 'power/runtime_status') == 'suspended'

    def _read_int(self, attr: str) -> int:
        if not self._active:
            raise GpuReadError(f"{self.name}: polling stopped")
        value = self._inventory.read_attr_int(self._path, attr)
        if value is None:
            raise GpuReadError(f"{self.name}: cannot read {attr}")
        return value

    def usage(self) -> float:
        if self.is_suspended():
            return 0.0
        return float(self._read_int('gpu_busy_percent'))

    def vram_used(self) -> int:
        if self.is_suspended():
            return 0
        return self._read_int('mem_info_vram_used')

    def temperature(self) -> int:
        if self._temp_attr is None:
            raise GpuReadError(f"{self.name}: no temperature sensor")
        if self.is_suspended():
            return 0
        return self._read_int(self._temp_attr)

    def is_active(self) -> bool:
        return self._active

    def stop(self) -> None:
        self._active = False

    def restart(self) -> None:
        self._active = True


def resolve_name(device: PciDevice, inventory: HardwareInventory) -> str:
    """lspci name by bus address, then the static table, then a fallback."""
    name = inventory.pci_names().get(short_address(device.address))
    if name:
        return name
    return AMD_DEVICE_NAMES.get(device.device, FALLBACK_NAME)


def discover(inventory: HardwareInventory) -> List[AmdGpu]:
    """Find every AMD display controller.

    Devices whose identity can't be computed are skipped.
    """
    gpus: List[AmdGpu] = []
    for device in inventory.pci_devices(PCI_VENDOR_AMD):
        identity = compute_identity(
            inventory.canonical_path(device.path),
            device.subsystem_vendor,
            device.subsystem_device,
        )
        if identity is None:
            logger.warning("Skipping AMD device %s without identity", device.address)
            continue

        vram_total = inventory.read_attr_int(device.path, 'mem_info_vram_total') or 0
        gpu = AmdGpu(resolve_name(device, inventory), identity, device.path, inventory, vram_total)
        logger.info("Found AMD GPU %s at %s (%s VRAM)", gpu.name, device.address,
                    format_value(gpu.vram_total, UnitFamily.BYTES_SHORT))
        gpus.append(gpu)
    return gpus
