# SPDX-License-Identifier: GPL-3.0-or-later
# Application constants

"""Application-wide constants and configuration values."""

# Application identifier
APP_ID = "io.github.panelstat.Panelstat"

# Application metadata
APP_NAME = "Panelstat"
APP_VERSION = "1.0.0"

# Default refresh interval in milliseconds
DEFAULT_REFRESH_INTERVAL = 1000

# Sample buffer sizes
MAX_SAMPLES = 21        # percent / GB sensors
MAX_RATE_SAMPLES = 30   # network / disks keep extra history for rate windows
GRAPH_SAMPLES = 21      # points drawn by line charts

# Byte conversion
GIB = 1_073_741_824

# PCI vendor identifiers
PCI_VENDOR_AMD = "0x1002"
PCI_VENDOR_NVIDIA = "0x10de"
PCI_VENDOR_INTEL = "0x8086"

# Display class prefix in sysfs "class" files (0x03xxxx)
PCI_CLASS_DISPLAY = "0x03"
