# SPDX-License-Identifier: GPL-3.0-or-later
# GPU device base class

"""Capability interface shared by every GPU backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class GpuVendor(Enum):
    """Closed set of supported GPU backends."""

    AMD = 'amd'
    NVIDIA = 'nvidia'
    INTEL = 'intel'


class GpuDevice(ABC):
    """One physical GPU.

    Reads raise GpuReadError when a counter can't be obtained; callers
    turn that into a zero sample for the tick.
    """

    vendor: GpuVendor

    def __init__(self, name: str, identity: str, vram_total: int = 0) -> None:
        self._name = name
        self._identity = identity
        self._vram_total = vram_total

    @property
    def name(self) -> str:
        return self._name

    @property
    def identity(self) -> str:
        """Stable key for this device, usable across restarts."""
        return self._identity

    @property
    def vram_total(self) -> int:
        """VRAM size in bytes, fixed at discovery."""
        return self._vram_total

    @abstractmethod
    def usage(self) -> float:
        """Return GPU busy percentage."""

    @abstractmethod
    def vram_used(self) -> int:
        """Return used VRAM in bytes."""

    @abstractmethod
    def temperature(self) -> int:
        """Return temperature in millidegrees Celsius."""

    @abstractmethod
    def is_active(self) -> bool:
        """True while the device is polled."""

    @abstractmethod
    def stop(self) -> None:
        """Stop polling so the device may sleep."""

    @abstractmethod
    def restart(self) -> None:
        """Resume polling after stop()."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name!r} id={self._identity}>"
