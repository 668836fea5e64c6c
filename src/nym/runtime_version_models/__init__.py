"""
Runtime version models.

This package provides Pydantic data models for parsing the remote release
index (index.json) served by the distribution mirror.
"""

from .version_catalog import VersionCatalog, VersionDescriptor

__all__ = [
    "VersionCatalog",
    "VersionDescriptor",
]
