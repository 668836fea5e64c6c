"""
Remote release catalog.

This package handles:
1. Fetching the list of published versions
2. Computing the download URL of one version for a platform
"""

from .catalog_client import RemoteCatalogClient

__all__ = ["RemoteCatalogClient"]
