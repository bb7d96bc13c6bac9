# SPDX-License-Identifier: GPL-3.0-or-later
# Refresh timer

"""GLib main-loop timer driving the registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from gi.repository import GLib

from .logging_config import get_logger

if TYPE_CHECKING:
    from .registry import SensorRegistry

logger = get_logger(__name__)


class Ticker:
    """Calls ``registry.tick()`` every ``registry.refresh_interval`` milliseconds."""

    def __init__(self, registry: SensorRegistry) -> None:
        self.registry = registry
        self._timeout_id: Optional[int] = None

    @property
    def interval(self) -> int:
        return self.registry.refresh_interval

    @property
    def running(self) -> bool:
        return self._timeout_id is not None

    def start(self) -> None:
        """Start the timer, replacing one that is already running."""
        self.stop()
        self._timeout_id = GLib.timeout_add(self.interval, self._on_timeout)
        logger.debug("Ticker started, every %d ms", self.interval)

    def stop(self) -> None:
        if self._timeout_id:
            GLib.source_remove(self._timeout_id)
            self._timeout_id = None

    def set_interval(self, interval: int) -> None:
        """Change the tick period and rescale every sensor's rates to it."""
        self.registry.set_refresh_interval(interval)
        if self.running:
            self.start()

    def _on_timeout(self) -> bool:
        self.registry.tick()
        return GLib.SOURCE_CONTINUE
