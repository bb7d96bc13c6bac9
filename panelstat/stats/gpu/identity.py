# SPDX-License-Identifier: GPL-3.0-or-later
# GPU identity

"""Stable device identities derived from hardware location."""

from __future__ import annotations

import hashlib
from typing import Optional

IDENTITY_LENGTH = 16


def compute_identity(canonical_path: str, subsystem_vendor: str,
                     subsystem_device: str) -> Optional[str]:
    """Hash a device's canonical sysfs path and subsystem ids.

    The result doesn't depend on enumeration order, so configuration
    keyed by it survives restarts and reordering.

    Returns:
        16 hex characters, or None if the path is unknown.
    """
    if not canonical_path:
        return None
    key = '\0'.join((canonical_path, subsystem_vendor.lower(), subsystem_device.lower()))
    return hashlib.sha256(key.encode('utf-8')).hexdigest()[:IDENTITY_LENGTH]
