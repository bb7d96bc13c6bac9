# SPDX-License-Identifier: GPL-3.0-or-later
# I/O statistics

"""System-wide network and disk I/O counters turned into per-tick deltas."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

import psutil

from ..logging_config import get_logger

logger = get_logger(__name__)

# (first, second) cumulative counters
CounterPair = Tuple[int, int]


def _network_totals() -> Optional[CounterPair]:
    """Bytes received and sent over every interface except loopback."""
    per_nic = psutil.net_io_counters(pernic=True)
    received = sent = 0
    for name, counters in per_nic.items():
        if name == 'lo':
            continue
        received += counters.bytes_recv
        sent += counters.bytes_sent
    return received, sent


def _disk_totals() -> Optional[CounterPair]:
    """Bytes written and read by every block device."""
    counters = psutil.disk_io_counters()
    if counters is None:
        return None
    return counters.write_bytes, counters.read_bytes


class IOStats:
    """Delta tracker for a pair of cumulative I/O counters.

    The first call to ``read_deltas`` only establishes the baseline and
    reports zeros; each later call reports what changed since the
    previous one. Counters going backwards (interface reset) are
    reported as zero.
    """

    def __init__(self, read_totals: Callable[[], Optional[CounterPair]], name: str) -> None:
        self._read_totals = read_totals
        self._name = name
        self._previous: Optional[CounterPair] = None

    @classmethod
    def network(cls) -> 'IOStats':
        return cls(_network_totals, 'network')

    @classmethod
    def disks(cls) -> 'IOStats':
        return cls(_disk_totals, 'disks')

    def read_deltas(self) -> CounterPair:
        """Return the change of both counters since the last call.

        Returns:
            Tuple of deltas in bytes, (0, 0) on error or on first call.
        """
        try:
            current = self._read_totals()
        except (OSError, RuntimeError) as e:
            logger.debug("Could not read %s counters: %s", self._name, e)
            current = None

        if current is None:
            return 0, 0

        previous, self._previous = self._previous, current
        if previous is None:
            return 0, 0
        return (max(current[0] - previous[0], 0),
                max(current[1] - previous[1], 0))

    def reset(self) -> None:
        """Forget the baseline."""
        self._previous = None
