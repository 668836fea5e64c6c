"""
Shared fixtures for the nym tests.
"""

import io
import json
import tarfile
import zipfile
from typing import Dict, Iterable, List, Optional, Tuple

import pytest
import requests

from nym.nym_config import NymConfig
from nym.nym_logger import NymLogger
from nym.runtime_version_paths import PathResolver


class FakeResponse:
    """Stands in for requests.Response, including use as a context manager."""

    def __init__(
        self,
        body: bytes = b"",
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        fail_after: Optional[int] = None,
    ):
        self.body = body
        self.status_code = status_code
        self.headers = headers if headers is not None else {}
        self.fail_after = fail_after
        self.closed = False

    @classmethod
    def with_length(cls, body: bytes, **kwargs) -> "FakeResponse":
        return cls(body, headers={"Content-Length": str(len(body))}, **kwargs)

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error", response=self)

    def iter_content(self, chunk_size: int = 1) -> Iterable[bytes]:
        for index, start in enumerate(range(0, len(self.body), chunk_size)):
            if self.fail_after is not None and index >= self.fail_after:
                raise requests.ConnectionError("connection reset by peer")
            yield self.body[start:start + chunk_size]

    def json(self):
        return json.loads(self.body.decode("utf-8"))

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *args: object) -> None:
        self.closed = True


class FakeSession:
    """
    Serves canned responses by URL suffix; the first matching suffix wins.
    An exception instance in place of a response is raised instead.
    """

    def __init__(self, routes: Dict[str, object]):
        self.routes = routes
        self.calls: List[Tuple[str, dict]] = []

    def get(self, url: str, **kwargs):
        self.calls.append((url, kwargs))
        for suffix, response in self.routes.items():
            if url.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResponse(b"not found", status_code=404)


def build_tar_gz(path, entries: List[Tuple[str, str, object, int]]) -> str:
    """
    Write a .tar.gz archive.

    entries are (name, kind, payload, mode) with kind "dir", "file",
    "symlink" or "hardlink"; payload is the file bytes or the link target.
    """
    with tarfile.open(path, "w:gz") as tar:
        for name, kind, payload, mode in entries:
            info = tarfile.TarInfo(name)
            info.mode = mode
            if kind == "dir":
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            elif kind in ("symlink", "hardlink"):
                info.type = tarfile.SYMTYPE if kind == "symlink" else tarfile.LNKTYPE
                info.linkname = payload
                tar.addfile(info)
            else:
                info.size = len(payload)
                tar.addfile(info, io.BytesIO(payload))
    return str(path)


def build_zip(path, entries: List[Tuple[str, str, object, int]]) -> str:
    """
    Write a .zip archive; same entry tuples as build_tar_gz (no symlinks).
    """
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, kind, payload, mode in entries:
            if kind == "dir":
                info = zipfile.ZipInfo(name.rstrip("/") + "/")
                info.external_attr = ((0o040000 | mode) << 16) | 0x10
                zf.writestr(info, b"")
            else:
                info = zipfile.ZipInfo(name)
                info.external_attr = (0o100000 | mode) << 16
                info.compress_type = zipfile.ZIP_DEFLATED
                zf.writestr(info, payload)
    return str(path)


PKG_ENTRIES = [
    ("pkg", "dir", None, 0o755),
    ("pkg/bin", "dir", None, 0o755),
    ("pkg/bin/x", "file", b"#!/bin/sh\necho x\n", 0o755),
    ("pkg/lib", "dir", None, 0o755),
    ("pkg/lib/y", "file", b"library y contents", 0o640),
]


@pytest.fixture
def logger():
    return NymLogger("nym.tests")


@pytest.fixture
def install_root(tmp_path):
    root = tmp_path / "nym-root"
    root.mkdir()
    return root


@pytest.fixture
def config(install_root):
    return NymConfig(install_root=str(install_root), chunk_size=10)


@pytest.fixture
def paths(config):
    return PathResolver(config.install_root, config.version_prefix)


@pytest.fixture
def isolated_tempdir(tmp_path, monkeypatch):
    """Route tempfile.mkdtemp into the test's own directory."""
    import tempfile

    temp_root = tmp_path / "tmp"
    temp_root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_root))
    return temp_root


@pytest.fixture
def pkg_entries():
    return list(PKG_ENTRIES)


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def tar_gz_builder():
    return build_tar_gz


@pytest.fixture
def zip_builder():
    return build_zip
