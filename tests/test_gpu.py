# SPDX-License-Identifier: GPL-3.0-or-later
# Tests for GPU backends and discovery

import logging
from dataclasses import replace

import pytest

from conftest import FakeInventory, FakeNvml, amd_device, nvidia_handle, write_files
from panelstat.errors import DeviceNotLoadedError, GpuReadError
from panelstat.stats.gpu import (
    AmdGpu, NvidiaGpu, NvmlContext, SysfsInventory, compute_identity, discover_gpus,
)
from panelstat.stats.gpu import amd, intel, nvidia
from panelstat.stats.gpu.inventory import parse_lspci, short_address
from panelstat.stats.gpu.nvidia import normalize_bus_id

AMD_PATH = '/sys/bus/pci/devices/0000:03:00.0'


def amd_attrs(**overrides):
    attrs = {
        (AMD_PATH, 'gpu_busy_percent'): '57',
        (AMD_PATH, 'mem_info_vram_used'): str(3 * 1024 ** 3),
        (AMD_PATH, 'mem_info_vram_total'): str(16 * 1024 ** 3),
        (AMD_PATH, 'hwmon/hwmon4/temp1_input'): '48000',
        (AMD_PATH, 'power/runtime_status'): 'active',
    }
    attrs.update({(AMD_PATH, k): v for k, v in overrides.items()})
    return attrs


class TestIdentity:
    def test_stable(self):
        first = compute_identity('/sys/devices/pci0000:00/0000:03:00.0', '0x1da2', '0x2406')
        second = compute_identity('/sys/devices/pci0000:00/0000:03:00.0', '0x1da2', '0x2406')
        assert first == second
        assert len(first) == 16

    def test_differs_by_path(self):
        one = compute_identity('/sys/devices/pci0000:00/0000:03:00.0', '0x1da2', '0x2406')
        other = compute_identity('/sys/devices/pci0000:00/0000:04:00.0', '0x1da2', '0x2406')
        assert one != other

    def test_differs_by_subsystem(self):
        one = compute_identity('/p', '0x1da2', '0x2406')
        other = compute_identity('/p', '0x1da2', '0x2407')
        assert one != other

    def test_case_insensitive_ids(self):
        assert compute_identity('/p', '0x1DA2', '0x2406') == compute_identity('/p', '0x1da2', '0x2406')

    def test_unknown_path(self):
        assert compute_identity('', '0x1da2', '0x2406') is None


class TestAmd:
    def make(self, **overrides):
        inventory = FakeInventory([amd_device()], amd_attrs(**overrides))
        return amd.discover(inventory)[0]

    def test_reads(self):
        gpu = self.make()
        assert gpu.usage() == 57.0
        assert gpu.vram_used() == 3 * 1024 ** 3
        assert gpu.vram_total == 16 * 1024 ** 3
        assert gpu.temperature() == 48000

    def test_suspended_reads_zero(self):
        inventory = FakeInventory([amd_device()], amd_attrs(**{'power/runtime_status': 'suspended'}))
        gpu = amd.discover(inventory)[0]
        assert gpu.usage() == 0.0
        assert gpu.vram_used() == 0

    def test_missing_counter_raises(self):
        inventory = FakeInventory([amd_device()], {(AMD_PATH, 'mem_info_vram_total'): '1'})
        gpu = amd.discover(inventory)[0]
        with pytest.raises(GpuReadError):
            gpu.usage()
        with pytest.raises(GpuReadError):
            gpu.temperature()

    def test_stop_and_restart(self):
        gpu = self.make()
        gpu.stop()
        assert not gpu.is_active()
        with pytest.raises(GpuReadError):
            gpu.usage()
        gpu.restart()
        assert gpu.is_active()
        assert gpu.usage() == 57.0

    def test_name_from_lspci(self):
        inventory = FakeInventory([amd_device()], amd_attrs(), {'03:00.0': 'Navi 21 [Radeon RX 6800]'})
        assert amd.discover(inventory)[0].name == 'Navi 21 [Radeon RX 6800]'

    def test_name_from_table(self):
        assert self.make().name == 'Radeon RX 6800/6800 XT/6900 XT'

    def test_fallback_name(self):
        inventory = FakeInventory([amd_device(device='0xffff')], amd_attrs())
        assert amd.discover(inventory)[0].name == 'AMD GPU'

    def test_discovery_logs_vram(self, caplog):
        with caplog.at_level(logging.INFO, logger='panelstat'):
            self.make()
        assert '(16.0G VRAM)' in caplog.text


class TestSysfsInventory:
    def test_lists_display_devices(self, tmp_path):
        write_files(tmp_path, {
            'bus/pci/devices/0000:03:00.0/vendor': '0x1002\n',
            'bus/pci/devices/0000:03:00.0/device': '0x73bf\n',
            'bus/pci/devices/0000:03:00.0/class': '0x030000\n',
            'bus/pci/devices/0000:03:00.0/subsystem_vendor': '0x1da2\n',
            'bus/pci/devices/0000:03:00.0/subsystem_device': '0x2406\n',
            'bus/pci/devices/0000:03:00.0/hwmon/hwmon2/temp1_input': '51000\n',
            'bus/pci/devices/0000:00:14.0/vendor': '0x8086\n',
            'bus/pci/devices/0000:00:14.0/class': '0x0c0330\n',
        })
        inventory = SysfsInventory(tmp_path)
        devices = inventory.pci_devices('0x1002')
        assert [d.address for d in devices] == ['0000:03:00.0']
        assert devices[0].subsystem_device == '0x2406'
        assert inventory.pci_devices('0x8086') == []
        assert inventory.glob(devices[0].path, 'hwmon/hwmon*/temp1_input') == ['hwmon/hwmon2/temp1_input']

    def test_discovered_from_sysfs(self, tmp_path, monkeypatch):
        write_files(tmp_path, {
            'bus/pci/devices/0000:03:00.0/vendor': '0x1002\n',
            'bus/pci/devices/0000:03:00.0/device': '0x744c\n',
            'bus/pci/devices/0000:03:00.0/class': '0x030000\n',
            'bus/pci/devices/0000:03:00.0/subsystem_vendor': '0x1da2\n',
            'bus/pci/devices/0000:03:00.0/subsystem_device': '0x2406\n',
            'bus/pci/devices/0000:03:00.0/gpu_busy_percent': '12\n',
            'bus/pci/devices/0000:03:00.0/mem_info_vram_total': '1024\n',
        })
        inventory = SysfsInventory(tmp_path)
        monkeypatch.setattr(inventory, 'pci_names', lambda: {})
        gpus = discover_gpus(inventory)
        assert len(gpus) == 1
        assert gpus[0].name == 'Radeon RX 7900 XT/7900 XTX'
        assert gpus[0].usage() == 12.0

    def test_missing_bus(self, tmp_path):
        assert SysfsInventory(tmp_path).pci_devices() == []


def test_parse_lspci():
    output = (
        '00:02.0 "VGA compatible controller" "Intel Corporation" "Alder Lake-P GT2" -r0c "Lenovo" "Device 3b1a"\n'
        '03:00.0 "VGA compatible controller" "Advanced Micro Devices, Inc. [AMD/ATI]" '
        '"Navi 21 [Radeon RX 6800/6800 XT / 6900 XT]" -rc1 -p00 "Sapphire" "Device 2406"\n'
        'garbage\n'
    )
    names = parse_lspci(output)
    assert names['03:00.0'] == 'Navi 21 [Radeon RX 6800/6800 XT / 6900 XT]'
    assert names['00:02.0'] == 'Alder Lake-P GT2'
    assert len(names) == 2


def test_short_address():
    assert short_address('0000:03:00.0') == '03:00.0'
    assert short_address('03:00.0') == '03:00.0'


class TestNvidia:
    def test_normalize_bus_id(self):
        assert normalize_bus_id('00000000:01:00.0') == '0000:01:00.0'
        assert normalize_bus_id('0000:0A:00.0') == '0000:0a:00.0'

    def test_discover(self, fake_pynvml):
        context = NvmlContext()
        gpus = nvidia.discover(context, FakeInventory())
        assert len(gpus) == 1
        gpu = gpus[0]
        assert gpu.name == 'NVIDIA GeForce RTX 3070'
        assert gpu.vram_total == 8 * 1024 ** 3
        assert gpu.usage() == 37.0
        assert gpu.vram_used() == 2 * 1024 ** 3
        assert gpu.temperature() == 61000

    def test_identity_uses_bus_path_and_subsystem(self, fake_pynvml):
        gpu = nvidia.discover(NvmlContext(), FakeInventory())[0]
        expected = compute_identity('/sys/bus/pci/devices/0000:01:00.0', '0x1462', '0x3880')
        assert gpu.identity == expected

    def test_stop_drops_handle(self, fake_pynvml):
        gpu = nvidia.discover(NvmlContext(), FakeInventory())[0]
        gpu.stop()
        assert not gpu.is_active()
        with pytest.raises(DeviceNotLoadedError, match="nvml device not loaded"):
            gpu.usage()
        gpu.restart()
        assert gpu.is_active()
        assert gpu.usage() == 37.0

    def test_context_initializes_once(self, fake_pynvml):
        context = NvmlContext()
        nvidia.discover(context, FakeInventory())
        context.device_count()
        assert fake_pynvml.init_calls == 1
        context.shutdown()
        assert fake_pynvml.shutdown_calls == 1
        assert not context.initialized

    def test_failed_init_is_remembered(self, monkeypatch):
        fake = FakeNvml([nvidia_handle()], fail_init=True)
        monkeypatch.setattr(nvidia, 'pynvml', fake)
        context = NvmlContext()
        assert nvidia.discover(context, FakeInventory()) == []
        assert context.device_count() == 0
        assert fake.init_calls == 1

    def test_read_error_is_wrapped(self, fake_pynvml):
        gpu = nvidia.discover(NvmlContext(), FakeInventory())[0]

        def broken(handle):
            raise fake_pynvml.NVMLError("gpu lost")

        fake_pynvml.nvmlDeviceGetUtilizationRates = broken
        with pytest.raises(GpuReadError):
            gpu.usage()


class TestDiscovery:
    def test_order_and_dedupe(self, fake_pynvml):
        inventory = FakeInventory(
            [amd_device(), amd_device()],
            amd_attrs(),
        )
        gpus = discover_gpus(inventory, NvmlContext())
        assert [type(g) for g in gpus] == [NvidiaGpu, AmdGpu]

    def test_nvidia_skipped_without_context(self):
        inventory = FakeInventory([amd_device()], amd_attrs())
        gpus = discover_gpus(inventory)
        assert [type(g) for g in gpus] == [AmdGpu]

    def test_intel_yields_nothing(self):
        intel_device = replace(amd_device(), vendor='0x8086')
        inventory = FakeInventory([intel_device])
        assert intel.discover(inventory) == []
        assert discover_gpus(inventory) == []

    def test_identity_independent_of_order(self):
        first = amd_device('0000:03:00.0')
        second = amd_device('0000:04:00.0', subsystem_device='0x2407')
        forward = discover_gpus(FakeInventory([first, second]))
        backward = discover_gpus(FakeInventory([second, first]))
        assert {g.identity for g in forward} == {g.identity for g in backward}
        assert len(forward) == 2
