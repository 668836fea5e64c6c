"""
Runtime version switcher.

Repoints the current link at an installed version directory.
"""

from .switcher import VersionSwitcher

__all__ = ["VersionSwitcher"]
