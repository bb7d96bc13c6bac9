# SPDX-License-Identifier: GPL-3.0-or-later
# Panelstat

"""Panelstat - compact hardware monitors for desktop panels.

This package samples CPU, memory, network, disk and GPU counters into
bounded series and renders them as small SVG charts and text labels
for embedding in a panel applet.
"""

from .constants import APP_ID, APP_NAME, APP_VERSION

__all__ = ['APP_ID', 'APP_NAME', 'APP_VERSION']
__version__ = APP_VERSION
