# SPDX-License-Identifier: GPL-3.0-or-later
# Power supply status

"""AC/battery state from /sys/class/power_supply."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .host import get_host_sys_path, read_sysfs, read_sysfs_int


@dataclass(frozen=True)
class PowerStatus:
    """Power source; fields are None when the machine doesn't report them."""

    on_ac: Optional[bool]
    percent: Optional[int]

    @property
    def on_battery(self) -> bool:
        return self.on_ac is False


def get_power_status(sys_path: Optional[Path] = None) -> PowerStatus:
    """Read whether mains power is connected and the battery charge."""
    root = (sys_path or get_host_sys_path()) / 'class' / 'power_supply'
    try:
        supplies = sorted(root.iterdir())
    except OSError:
        return PowerStatus(on_ac=None, percent=None)

    on_ac: Optional[bool] = None
    percent: Optional[int] = None

    for supply in supplies:
        if not supply.is_dir():
            continue
        kind = (read_sysfs(supply / 'type') or '').lower()
        name = supply.name.lower()

        if kind in ('mains', 'ac') or name.startswith(('ac', 'adp', 'mains')):
            online = read_sysfs_int(supply / 'online')
            if online is not None:
                on_ac = online == 1

        if kind == 'battery' or name.startswith('bat'):
            capacity = read_sysfs_int(supply / 'capacity')
            if capacity is not None:
                percent = capacity

    return PowerStatus(on_ac=on_ac, percent=percent)
