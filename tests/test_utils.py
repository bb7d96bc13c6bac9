# SPDX-License-Identifier: GPL-3.0-or-later
# Tests for formatting helpers

import pytest

from panelstat.utils import (
    UnitFamily, format_gigabytes, format_number, format_percent,
    format_temperature, format_value, last_second_rate,
)


def test_unit_boundary_crossed_above_999():
    assert format_value(999, UnitFamily.BITS_SHORT) == "999b"
    assert format_value(1024, UnitFamily.BITS_SHORT) == "1.00K"


@pytest.mark.parametrize("value,expected", [
    (0, "0.00B"),
    (5.5, "5.50B"),
    (42, "42.0B"),
    (512, "512B"),
    (1536, "1.50K"),
    (1024 * 1024, "1.00M"),
    (50 * 1024 ** 3, "50.0G"),
])
def test_short_bytes(value, expected):
    assert format_value(value, UnitFamily.BYTES_SHORT) == expected


def test_largest_unit_is_not_exceeded():
    assert format_value(5000 * 1024 ** 4, UnitFamily.BITS_SHORT) == "5000T"


def test_long_family_is_padded():
    text = format_value(512, UnitFamily.BYTES_LONG)
    assert text == "  512 B/s"
    assert len(format_value(2048, UnitFamily.BITS_LONG)) == 9
    assert format_value(2048, UnitFamily.BITS_LONG).endswith("2.00 Kbps")


def test_negative_clamps_to_zero():
    assert format_value(-10, UnitFamily.BITS_SHORT) == "0.00b"


def test_rounding_never_lengthens_text():
    assert format_number(9.996) == "10.0"
    assert format_number(99.96) == "100"


def test_select_family():
    assert UnitFamily.select(show_bytes=True, long=False) is UnitFamily.BYTES_SHORT
    assert UnitFamily.select(show_bytes=False, long=True) is UnitFamily.BITS_LONG


def test_rate_at_half_second_interval():
    assert last_second_rate([100] * 10, 500) == pytest.approx(200.0)


def test_rate_at_one_second_interval_uses_newest_sample():
    assert last_second_rate([300, 100, 100], 1000) == pytest.approx(300.0)


def test_rate_scales_partial_window():
    # 3 x 400ms = 1200ms covering 600 units -> 500 per second
    assert last_second_rate([200, 200, 200, 999], 400) == pytest.approx(500.0)


def test_rate_degenerate_inputs():
    assert last_second_rate([], 1000) == 0.0
    assert last_second_rate([100], 0) == 0.0


def test_percent_labels():
    assert format_percent(99.9) == "99.9%"
    assert format_percent(7.254) == "7.25%"
    assert format_percent(100) == "100%"
    assert format_percent(42.5, no_decimals=True) == "43%"


def test_gigabytes():
    assert format_gigabytes(3.25) == "3.25 GB"
    assert format_gigabytes(15.5, vertical=True) == "15.5GB"


def test_temperature_units():
    assert format_temperature(54.4) == "54°C"
    assert format_temperature(100, 'F') == "212°F"
    assert format_temperature(0, 'K') == "273K"
