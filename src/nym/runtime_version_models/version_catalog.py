"""
Pydantic data models for the release index (index.json).

The index is a JSON array, newest release first:

    [
      {"version": "v20.5.0", "date": "2023-07-20", "files": ["linux-x64", ...],
       "npm": "9.8.0", "lts": false, ...},
      ...
    ]

Only "version" is required; everything else is kept as extra data.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel


class VersionDescriptor(BaseModel):
    """
    One release entry of the index.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: str = Field(..., description="Release version, e.g. v18.17.1")
    date: Optional[str] = Field(None, description="Release date")
    files: Optional[List[str]] = Field(None, description="Platform ids with published artifacts")
    npm: Optional[str] = Field(None, description="Bundled npm version")
    lts: Optional[Union[bool, str]] = Field(None, description="LTS codename, or false")

    def normalized_version(self, prefix: str = "v") -> str:
        """The version with the leading prefix character stripped."""
        if prefix and self.version.startswith(prefix):
            return self.version[len(prefix):]
        return self.version


class VersionCatalog(RootModel[List[VersionDescriptor]]):
    """
    The whole index, in server order.
    """

    def versions(self, prefix: str = "v") -> List[str]:
        return [descriptor.normalized_version(prefix) for descriptor in self.root]

    def __len__(self) -> int:
        return len(self.root)
