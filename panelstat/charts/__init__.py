# SPDX-License-Identifier: GPL-3.0-or-later
# Chart renderers

"""Pure SVG renderers used by the sensors."""

from .bars import StackedBar
from .heat import heat
from .line import double_line, line
from .ring import ring

__all__ = ['StackedBar', 'double_line', 'heat', 'line', 'ring']
