# SPDX-License-Identifier: GPL-3.0-or-later
# Shared test fixtures

from __future__ import annotations

from collections import namedtuple
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional

import psutil
import pytest

from panelstat.stats.gpu import nvidia
from panelstat.stats.gpu.inventory import HardwareInventory, PciDevice


def write_files(root: Path, files: Dict[str, str]) -> Path:
    """Create ``files`` (relative path -> content) below ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


class FakeInventory(HardwareInventory):
    """In-memory inventory: attributes keyed by (device path, name)."""

    def __init__(self, devices: Optional[List[PciDevice]] = None,
                 attrs: Optional[Dict[tuple, str]] = None,
                 names: Optional[Dict[str, str]] = None) -> None:
        self.devices = devices or []
        self.attrs = attrs or {}
        self.names = names or {}

    def pci_devices(self, vendor_id=None):
        return [d for d in self.devices if vendor_id is None or d.vendor == vendor_id]

    def read_attr(self, device_path, name):
        return self.attrs.get((str(device_path), name))

    def glob(self, device_path, pattern):
        prefix = str(device_path)
        return sorted(name for path, name in self.attrs
                      if path == prefix and name.startswith('hwmon/') and name.endswith('temp1_input'))

    def pci_names(self):
        return self.names

    def device_path(self, address):
        return Path('/sys/bus/pci/devices') / address


def amd_device(address: str = '0000:03:00.0', device: str = '0x73bf',
               subsystem_device: str = '0x2406') -> PciDevice:
    return PciDevice(
        address=address,
        path=Path('/sys/bus/pci/devices') / address,
        vendor='0x1002',
        device=device,
        subsystem_vendor='0x1da2',
        subsystem_device=subsystem_device,
        pci_class='0x030000',
    )


@pytest.fixture
def fake_inventory():
    return FakeInventory


class FakeNvml:
    """Stand-in for the pynvml module with canned devices."""

    NVML_TEMPERATURE_GPU = 0

    class NVMLError(Exception):
        pass

    def __init__(self, devices: List[dict], fail_init: bool = False) -> None:
        self.devices = devices
        self.fail_init = fail_init
        self.init_calls = 0
        self.shutdown_calls = 0

    def nvmlInit(self):
        self.init_calls += 1
        if self.fail_init:
            raise self.NVMLError("driver not loaded")

    def nvmlShutdown(self):
        self.shutdown_calls += 1

    def nvmlDeviceGetCount(self):
        return len(self.devices)

    def nvmlDeviceGetHandleByIndex(self, index):
        if index >= len(self.devices):
            raise self.NVMLError("invalid index")
        return self.devices[index]

    def nvmlDeviceGetName(self, handle):
        return handle['name']

    def nvmlDeviceGetPciInfo(self, handle):
        return SimpleNamespace(busId=handle['bus_id'], pciSubSystemId=handle['subsystem'])

    def nvmlDeviceGetMemoryInfo(self, handle):
        return SimpleNamespace(total=handle['vram_total'], used=handle['vram_used'])

    def nvmlDeviceGetUtilizationRates(self, handle):
        return SimpleNamespace(gpu=handle['usage'], memory=0)

    def nvmlDeviceGetTemperature(self, handle, sensor):
        return handle['temp']


def nvidia_handle(**overrides) -> dict:
    handle = {
        'name': 'NVIDIA GeForce RTX 3070',
        'bus_id': b'00000000:01:00.0',
        'subsystem': 0x38801462,
        'vram_total': 8 * 1024 ** 3,
        'vram_used': 2 * 1024 ** 3,
        'usage': 37,
        'temp': 61,
    }
    handle.update(overrides)
    return handle


@pytest.fixture
def fake_pynvml(monkeypatch):
    """Install a FakeNvml with one device in place of pynvml."""
    fake = FakeNvml([nvidia_handle()])
    monkeypatch.setattr(nvidia, 'pynvml', fake)
    return fake


# same fields as the entries psutil.sensors_temperatures() returns
TempEntry = namedtuple('TempEntry', ['label', 'current', 'high', 'critical'])


def temp_entry(label: str, current: float, critical: Optional[float] = None) -> TempEntry:
    return TempEntry(label, current, None, critical)


@pytest.fixture
def sensor_temps(monkeypatch):
    """Replace psutil.sensors_temperatures with a mutable chip -> entries dict."""
    temps: Dict[str, List[TempEntry]] = {}
    monkeypatch.setattr(psutil, 'sensors_temperatures', lambda: temps, raising=False)
    return temps
