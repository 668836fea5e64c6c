"""
On-disk layout of installed runtime versions.

This package handles:
1. Expanding the home-directory marker in configured paths
2. Locating the install root, versions directory and current link
3. Listing installed versions and reading the active one
"""

from .path_resolver import PathResolver, expand

__all__ = ["PathResolver", "expand"]
