"""
Platform probes used by the provisioning preconditions.

These are the only places that read ambient machine state (current
privilege level and PATH); the Provisioner receives them as callables so
tests can substitute fixed answers.
"""

import os
import shutil
import sys
from typing import Optional


def is_windows() -> bool:
    """Check if running on Windows"""
    return sys.platform.startswith("win")


def is_admin() -> bool:
    """True when the current process holds administrator-equivalent rights."""
    if is_windows():
        import ctypes

        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except OSError:
            return False
    return os.geteuid() == 0


def which(tool: str) -> Optional[str]:
    """Resolve a tool name (or explicit path) to an executable path."""
    return shutil.which(tool)
