# SPDX-License-Identifier: GPL-3.0-or-later
# NVIDIA GPU statistics

"""NVIDIA GPU backend using NVML through pynvml."""

from __future__ import annotations

from typing import Any, List, Optional

import pynvml

from ...errors import DeviceNotLoadedError, GpuReadError
from ...logging_config import get_logger
from ...utils import UnitFamily, format_value
from .base import GpuDevice, GpuVendor
from .identity import compute_identity
from .inventory import HardwareInventory

logger = get_logger(__name__)


def _text(value: Any) -> str:
    """NVML returns bytes on older bindings."""
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return str(value)


def normalize_bus_id(bus_id: str) -> str:
    """Turn NVML's "00000000:01:00.0" into sysfs' "0000:01:00.0"."""
    bus_id = bus_id.strip().lower()
    domain, sep, rest = bus_id.partition(':')
    if not sep:
        return bus_id
    return f"{domain[-4:].rjust(4, '0')}:{rest}"


class NvmlContext:
    """Process-wide NVML connection, shared by every NVIDIA device.

    Initialization is attempted once, on first use. A failed attempt
    is remembered so machines without the driver don't retry every tick.
    """

    def __init__(self) -> None:
        self._initialized = False
        self._failed = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def ensure(self) -> bool:
        """Initialize NVML if needed; True when it's usable."""
        if self._initialized:
            return True
        if self._failed:
            return False
        try:
            pynvml.nvmlInit()
        except pynvml.NVMLError as e:
            logger.info("Connection to NVML failed: %s", e)
            self._failed = True
            return False
        logger.debug("Connected to NVML")
        self._initialized = True
        return True

    def device_count(self) -> int:
        if not self.ensure():
            return 0
        try:
            return pynvml.nvmlDeviceGetCount()
        except pynvml.NVMLError as e:
            logger.warning("Failed to get NVIDIA GPU count: %s", e)
            return 0

    def handle_by_index(self, index: int) -> Optional[Any]:
        if not self.ensure():
            return None
        try:
            return pynvml.nvmlDeviceGetHandleByIndex(index)
        except pynvml.NVMLError as e:
            logger.debug("No NVML handle for device %d: %s", index, e)
            return None

    def shutdown(self) -> None:
        """Release NVML."""
        if self._initialized:
            try:
                pynvml.nvmlShutdown()
            except pynvml.NVMLError as e:
                logger.debug("NVML shutdown failed: %s", e)
            self._initialized = False


class NvidiaGpu(GpuDevice):
    """NVIDIA GPU addressed by its NVML index.

    stop() drops the device handle and restart() acquires it again
    from the shared context. Without a handle every read raises
    DeviceNotLoadedError.
    """

    vendor = GpuVendor.NVIDIA

    def __init__(self, context: NvmlContext, index: int, name: str, identity: str,
                 vram_total: int = 0, handle: Optional[Any] = None) -> None:
        super().__init__(name, identity, vram_total)
        self._context = context
        self.index = index
        self._handle = handle

    def _device(self) -> Any:
        if self._handle is None:
            raise DeviceNotLoadedError("nvml device not loaded")
        return self._handle

    def usage(self) -> float:
        try:
            return float(pynvml.nvmlDeviceGetUtilizationRates(self._device()).gpu)
        except pynvml.NVMLError as e:
            raise GpuReadError(f"{self.name}: {e}") from e

    def vram_used(self) -> int:
        try:
            return int(pynvml.nvmlDeviceGetMemoryInfo(self._device()).used)
        except pynvml.NVMLError as e:
            raise GpuReadError(f"{self.name}: {e}") from e

    def temperature(self) -> int:
        try:
            celsius = pynvml.nvmlDeviceGetTemperature(self._device(), pynvml.NVML_TEMPERATURE_GPU)
        except pynvml.NVMLError as e:
            raise GpuReadError(f"{self.name}: {e}") from e
        return int(celsius) * 1000

    def is_active(self) -> bool:
        return self._handle is not None

    def stop(self) -> None:
        self._handle = None

    def restart(self) -> None:
        if self._handle is None:
            self._handle = self._context.handle_by_index(self.index)


def _identity(handle: Any, inventory: HardwareInventory) -> Optional[str]:
    pci = pynvml.nvmlDeviceGetPciInfo(handle)
    address = normalize_bus_id(_text(pci.busId))
    subsystem = int(pci.pciSubSystemId)
    return compute_identity(
        inventory.canonical_path(inventory.device_path(address)),
        f"0x{subsystem & 0xFFFF:04x}",
        f"0x{subsystem >> 16:04x}",
    )


def discover(context: NvmlContext, inventory: HardwareInventory) -> List[NvidiaGpu]:
    """Enumerate NVIDIA GPUs through NVML.

    Devices whose handle, name or PCI info can't be read are skipped.
    """
    gpus: List[NvidiaGpu] = []
    count = context.device_count()
    if count == 0:
        logger.info("No NVIDIA GPUs found")
        return gpus

    for index in range(count):
        handle = context.handle_by_index(index)
        if handle is None:
            continue
        try:
            name = _text(pynvml.nvmlDeviceGetName(handle))
            identity = _identity(handle, inventory)
            vram_total = int(pynvml.nvmlDeviceGetMemoryInfo(handle).total)
        except pynvml.NVMLError as e:
            logger.warning("Skipping NVIDIA device %d: %s", index, e)
            continue
        if identity is None:
            continue

        logger.info("Found NVIDIA GPU %s (index %d, %s VRAM)", name, index,
                    format_value(vram_total, UnitFamily.BYTES_SHORT))
        gpus.append(NvidiaGpu(context, index, name, identity, vram_total, handle))
    return gpus
