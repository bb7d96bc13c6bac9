# SPDX-License-Identifier: GPL-3.0-or-later
# Tests for power supply detection

from conftest import write_files
from panelstat.power import PowerStatus, get_power_status


def test_on_battery(tmp_path):
    write_files(tmp_path, {
        'class/power_supply/AC/type': 'Mains\n',
        'class/power_supply/AC/online': '0\n',
        'class/power_supply/BAT0/type': 'Battery\n',
        'class/power_supply/BAT0/capacity': '67\n',
    })
    status = get_power_status(tmp_path)
    assert status == PowerStatus(on_ac=False, percent=67)
    assert status.on_battery


def test_on_ac(tmp_path):
    write_files(tmp_path, {
        'class/power_supply/ADP1/type': 'Mains\n',
        'class/power_supply/ADP1/online': '1\n',
    })
    status = get_power_status(tmp_path)
    assert status.on_ac is True
    assert status.percent is None
    assert not status.on_battery


def test_desktop_without_supplies(tmp_path):
    status = get_power_status(tmp_path)
    assert status == PowerStatus(on_ac=None, percent=None)
    assert not status.on_battery
