# SPDX-License-Identifier: GPL-3.0-or-later
# Tests for /proc and temperature readers

import psutil
import pytest

from conftest import temp_entry, write_files
from panelstat.stats.io import IOStats
from panelstat.stats.system import CpuStat, SystemStats, compute_load

PROC_STAT = """cpu  300 10 100 900 5 0 2 0 0 0
cpu0 100 0 50 400 2 0 1 0 0 0
cpu1 200 10 50 500 3 0 1 0 0 0
intr 12345
ctxt 9876
"""

MEMINFO = """MemTotal:       16000000 kB
MemFree:         2000000 kB
MemAvailable:    6000000 kB
Buffers:          100000 kB
SwapTotal:       4000000 kB
SwapFree:        3000000 kB
"""


def test_read_cpu_stats(tmp_path):
    write_files(tmp_path, {'stat': PROC_STAT})
    stats = SystemStats(proc_path=tmp_path).read_cpu_stats()
    assert sorted(stats) == [0, 1]
    assert stats[1] == CpuStat(200, 10, 50, 500, 3, 0, 1, 0)


def test_read_cpu_stats_missing_file(tmp_path):
    assert SystemStats(proc_path=tmp_path).read_cpu_stats() == {}


def test_compute_load():
    prev = CpuStat(user=100, nice=0, system=50, idle=850)
    current = CpuStat(user=150, nice=10, system=80, idle=860)
    load = compute_load(prev, current)
    assert load.user_pct == pytest.approx(60.0)
    assert load.system_pct == pytest.approx(30.0)
    assert load.total == pytest.approx(90.0)


def test_compute_load_without_elapsed_time():
    stat = CpuStat(user=1, idle=1)
    assert compute_load(stat, stat) is None


def test_memory_info(tmp_path):
    write_files(tmp_path, {'meminfo': MEMINFO})
    info = SystemStats(proc_path=tmp_path).get_memory_info()
    assert info['mem_total'] == 16000000 * 1024
    assert info['mem_used'] == 10000000 * 1024
    assert info['swap_used'] == 1000000 * 1024


def test_memory_info_missing(tmp_path):
    info = SystemStats(proc_path=tmp_path).get_memory_info()
    assert info['mem_total'] == 0
    assert info['mem_used'] == 0



def test_amd_temperature_prefers_tccd_over_tctl(sensor_temps):
    sensor_temps['nvme'] = [temp_entry('Composite', 30.0, 80.0)]
    sensor_temps['k10temp'] = [
        temp_entry('Tctl', 65.0, 95.0),
        temp_entry('Tccd1', 58.5),
        temp_entry('Tccd2', 57.0),
    ]
    temp = SystemStats().find_cpu_temp()
    assert temp is not None
    assert temp.chip == 'k10temp'
    assert temp.label == 'tccd'
    assert temp.crit_temp == 95.0
    assert temp.read_temp() == 58.5


def test_amd_temperature_tdie_wins(sensor_temps):
    sensor_temps['zenpower'] = [temp_entry('Tctl', 65.0), temp_entry('Tdie', 55.0)]
    temp = SystemStats().find_cpu_temp()
    assert temp.label == 'tdie'
    assert temp.crit_temp == 100.0
    assert temp.read_temp() == 55.0


def test_intel_temperature_uses_hottest_core(sensor_temps):
    sensor_temps['coretemp'] = [
        temp_entry('Package id 0', 50.0, 100.0),
        temp_entry('Core 0', 47.0, 100.0),
        temp_entry('Core 1', 53.0, 100.0),
    ]
    temp = SystemStats().find_cpu_temp()
    assert temp.label == 'core'
    assert temp.read_temp() == 53.0

    sensor_temps['coretemp'] = [temp_entry('Core 0', 71.0)]
    assert temp.read_temp() == 71.0


def test_no_cpu_temperature(sensor_temps):
    sensor_temps['acpitz'] = [temp_entry('', 40.0)]
    assert SystemStats().find_cpu_temp() is None


def test_sensor_disappears(sensor_temps):
    sensor_temps['k10temp'] = [temp_entry('Tctl', 60.0)]
    temp = SystemStats().find_cpu_temp()
    sensor_temps.clear()
    assert temp.read_temp() is None


def test_temperatures_unsupported(monkeypatch):
    monkeypatch.delattr(psutil, 'sensors_temperatures', raising=False)
    assert SystemStats().find_cpu_temp() is None


class TestIOStats:
    def make(self, readings):
        values = iter(readings)
        return IOStats(lambda: next(values), 'test')

    def test_first_read_sets_baseline(self):
        io = self.make([(1000, 500), (1600, 700)])
        assert io.read_deltas() == (0, 0)
        assert io.read_deltas() == (600, 200)

    def test_counter_reset_reads_zero(self):
        io = self.make([(1000, 500), (10, 900)])
        io.read_deltas()
        assert io.read_deltas() == (0, 400)

    def test_unavailable_counters(self):
        io = self.make([None, (5, 5), (8, 9)])
        assert io.read_deltas() == (0, 0)
        assert io.read_deltas() == (0, 0)
        assert io.read_deltas() == (3, 4)

    def test_read_error(self):
        def broken():
            raise OSError("no /proc")

        assert IOStats(broken, 'test').read_deltas() == (0, 0)

    def test_network_ignores_loopback(self, monkeypatch):
        from types import SimpleNamespace

        import panelstat.stats.io as io_module

        counters = {
            'lo': SimpleNamespace(bytes_recv=10 ** 9, bytes_sent=10 ** 9),
            'eth0': SimpleNamespace(bytes_recv=100, bytes_sent=50),
        }
        monkeypatch.setattr(io_module.psutil, 'net_io_counters', lambda pernic: counters)
        io = IOStats.network()
        io.read_deltas()
        counters['eth0'] = SimpleNamespace(bytes_recv=400, bytes_sent=60)
        assert io.read_deltas() == (300, 10)
