# SPDX-License-Identifier: GPL-3.0-or-later
# Hardware inventory

"""Access to PCI device listings, replaceable in tests."""

from __future__ import annotations

import os
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from ...constants import PCI_CLASS_DISPLAY
from ...host import get_host_sys_path, read_sysfs, run_host_command
from ...logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PciDevice:
    """A display controller found on the PCI bus."""

    address: str
    path: Path
    vendor: str
    device: str
    subsystem_vendor: str
    subsystem_device: str
    pci_class: str = ''


def short_address(address: str) -> str:
    """Drop the PCI domain: "0000:03:00.0" -> "03:00.0"."""
    parts = address.split(':')
    if len(parts) == 3:
        return ':'.join(parts[1:])
    return address


def parse_lspci(output: str) -> Dict[str, str]:
    """Map bus addresses to device names from ``lspci -mm`` output."""
    names: Dict[str, str] = {}
    for line in output.splitlines():
        try:
            fields = shlex.split(line)
        except ValueError:
            continue
        # slot, class, vendor, device, [-rXX], [-pXX], subsystem vendor, subsystem device
        if len(fields) < 4:
            continue
        names[short_address(fields[0])] = fields[3]
    return names


class HardwareInventory(ABC):
    """Source of PCI display devices and their attributes."""

    @abstractmethod
    def pci_devices(self, vendor_id: Optional[str] = None) -> List[PciDevice]:
        """List display controllers, optionally of one vendor only."""

    @abstractmethod
    def read_attr(self, device_path: Path, name: str) -> Optional[str]:
        """Read an attribute file below a device, None if unavailable."""

    @abstractmethod
    def glob(self, device_path: Path, pattern: str) -> List[str]:
        """Relative names below a device matching ``pattern``, sorted."""

    @abstractmethod
    def pci_names(self) -> Dict[str, str]:
        """Device names keyed by short bus address ("03:00.0")."""

    @abstractmethod
    def device_path(self, address: str) -> Path:
        """Device directory for a full bus address ("0000:03:00.0")."""

    def canonical_path(self, path: Path) -> str:
        return str(path)

    def read_attr_int(self, device_path: Path, name: str) -> Optional[int]:
        text = self.read_attr(device_path, name)
        if text is None:
            return None
        try:
            return int(text)
        except ValueError:
            return None


class SysfsInventory(HardwareInventory):
    """Inventory backed by /sys/bus/pci and ``lspci``."""

    def __init__(self, sys_path: Optional[Path] = None) -> None:
        self._sys_path = sys_path or get_host_sys_path()
        self._names: Optional[Dict[str, str]] = None

    @property
    def devices_dir(self) -> Path:
        return self._sys_path / 'bus' / 'pci' / 'devices'

    def pci_devices(self, vendor_id: Optional[str] = None) -> List[PciDevice]:
        try:
            entries = sorted(self.devices_dir.iterdir())
        except OSError as e:
            logger.info("Cannot list PCI devices: %s", e)
            return []

        devices: List[PciDevice] = []
        for entry in entries:
            vendor = (read_sysfs(entry / 'vendor') or '').lower()
            pci_class = (read_sysfs(entry / 'class') or '').lower()
            if not pci_class.startswith(PCI_CLASS_DISPLAY):
                continue
            if vendor_id is not None and vendor != vendor_id:
                continue
            devices.append(PciDevice(
                address=entry.name,
                path=entry,
                vendor=vendor,
                device=(read_sysfs(entry / 'device') or '').lower(),
                subsystem_vendor=(read_sysfs(entry / 'subsystem_vendor') or '').lower(),
                subsystem_device=(read_sysfs(entry / 'subsystem_device') or '').lower(),
                pci_class=pci_class,
            ))
        return devices

    def read_attr(self, device_path: Path, name: str) -> Optional[str]:
        return read_sysfs(device_path / name)

    def glob(self, device_path: Path, pattern: str) -> List[str]:
        return sorted(str(p.relative_to(device_path)) for p in device_path.glob(pattern))

    def pci_names(self) -> Dict[str, str]:
        if self._names is None:
            self._names = parse_lspci(run_host_command(['lspci', '-mm']))
            logger.debug("lspci reported %d devices", len(self._names))
        return self._names

    def device_path(self, address: str) -> Path:
        return self.devices_dir / address

    def canonical_path(self, path: Path) -> str:
        return os.path.realpath(path)
