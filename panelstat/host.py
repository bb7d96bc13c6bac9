# SPDX-License-Identifier: GPL-3.0-or-later
# Host system access helpers

"""Helpers for reaching host paths and commands, also from inside Flatpak."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import List, Optional

from .logging_config import get_logger

logger = get_logger(__name__)


def is_flatpak() -> bool:
    """Check if running inside a Flatpak sandbox.
    
    Returns:
        True if running inside Flatpak, False otherwise.
    """
    return os.path.exists('/.flatpak-info')


def get_host_proc_path() -> Path:
    """Get the path to host /proc.
    
    Returns:
        Path to /proc (or /run/host/proc in Flatpak).
    """
    if os.path.exists('/run/host/proc') and os.path.isdir('/run/host/proc'):
        return Path('/run/host/proc')
    return Path('/proc')


def get_host_sys_path() -> Path:
    """Get the path to host /sys.

    Flatpak exposes the real sysfs at /sys, so this only exists
    to keep callers symmetric with get_host_proc_path().
    """
    return Path('/sys')


def run_host_command(cmd: List[str], timeout: int = 5) -> str:
    """Run a command on the host system using flatpak-spawn.
    
    When running in Flatpak, uses flatpak-spawn --host to execute
    commands on the host system. Otherwise, runs the command directly.
    
    Args:
        cmd: List of command arguments to execute.
        timeout: Maximum time in seconds to wait for the command (default: 5).
        
    Returns:
        The stdout output of the command, or an empty string if the
        command is missing, fails to start or times out.
    """
    if is_flatpak():
        full_cmd = ['flatpak-spawn', '--host'] + cmd
    else:
        full_cmd = cmd
    
    try:
        result = subprocess.run(full_cmd, capture_output=True, text=True, timeout=timeout)
        return result.stdout
    except subprocess.TimeoutExpired:
        logger.warning("Command timed out after %ss: %s", timeout, ' '.join(cmd))
        return ""
    except OSError as e:
        logger.debug("Could not run %s: %s", cmd[0], e)
        return ""


def read_sysfs(path: Path) -> Optional[str]:
    """Read and strip a small sysfs/procfs attribute file.

    Returns:
        The stripped content, or None if the file can't be read.
    """
    try:
        return path.read_text(errors='ignore').strip()
    except OSError:
        return None


def read_sysfs_int(path: Path) -> Optional[int]:
    """Read an integer attribute; accepts decimal and 0x-prefixed hex."""
    text = read_sysfs(path)
    if text is None:
        return None
    try:
        if text.lower().startswith('0x'):
            return int(text, 16)
        return int(text)
    except ValueError:
        return None
