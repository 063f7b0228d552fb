"""Filesystem root enumeration for searches that start at every root."""

from __future__ import annotations

import os
import string
import sys


def filesystem_roots() -> list[str]:
    """
    Every existing drive root (`C:\\`, `D:\\`, ...) on Windows, otherwise the
    single root separator.
    """
    if sys.platform == "win32":
        drives = (f"{letter}:\\" for letter in string.ascii_uppercase)
        return [drive for drive in drives if os.path.isdir(drive)]
    return [os.sep]
