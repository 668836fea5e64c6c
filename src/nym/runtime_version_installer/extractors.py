"""
Archive extractors.

Release archives wrap their content in a single top-level directory
(node-v18.17.1-linux-x64/...). Each extractor works in two passes over the
archive: the first opens it read-only and learns that root prefix, the
second opens it again and writes every entry with the prefix stripped.

Entries that do not sit under the detected prefix (or every entry, when no
prefix could be detected) are extracted at their own relative path and
reported once as a warning, so an unexpected layout never produces an empty
install.
"""

import logging
import os
import shutil
import stat
import tarfile
import zipfile
import zlib
from typing import IO, List, Optional

from nym.nym_exceptions import ExtractionError
from nym.nym_logger import NymLogger

DEFAULT_DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o644


def _normalize_entry_name(name: str) -> str:
    name = name.replace("\\", "/")
    while name.startswith("./"):
        name = name[2:]
    return "" if name == "." else name


def _is_within(root: str, path: str) -> bool:
    try:
        return os.path.commonpath([root, path]) == root
    except ValueError:
        return False


class ArchiveExtractor:
    """
    Base class holding the prefix stripping and path safety rules.
    """

    suffixes: tuple = ()

    def __init__(self, archive_path: str, logger: NymLogger):
        self.archive_path = str(archive_path)
        self.logger = logger
        self.unmatched: List[str] = []

    @classmethod
    def handles(cls, file_name: str) -> bool:
        return file_name.endswith(cls.suffixes)

    def detect_root_prefix(self) -> str:
        """First pass: the archive's root directory name, or "" if there is none."""
        raise NotImplementedError

    def _extract_entries(self, target_dir: str, root_prefix: str) -> int:
        """Second pass: write every entry below target_dir; returns the entry count."""
        raise NotImplementedError

    def extract(self, target_dir: str) -> int:
        """
        Extract the archive into target_dir with its root directory stripped.

        Returns:
            Number of entries written

        Raises:
            ExtractionError: On any read, decompression or write failure
        """
        target_dir = os.path.abspath(target_dir)
        self.unmatched = []

        try:
            root_prefix = self.detect_root_prefix()
            self.logger.log(
                f"Root directory of {os.path.basename(self.archive_path)}: {root_prefix or '(none)'}",
                logging.DEBUG,
            )
            written = self._extract_entries(target_dir, root_prefix)
        except ExtractionError:
            raise
        except (tarfile.TarError, zipfile.BadZipFile, zlib.error, EOFError, OSError) as e:
            raise ExtractionError(f"Failed to extract {self.archive_path}: {e}") from e

        if self.unmatched:
            self.logger.log(
                f"{len(self.unmatched)} entries were outside the root directory "
                f"'{root_prefix}' and were extracted at their own paths "
                f"(first: {self.unmatched[0]})",
                logging.WARNING,
            )
        return written

    def _strip_root(self, name: str, root_prefix: str) -> Optional[str]:
        """
        Entry path with the root prefix removed, "" for the bare root entry,
        or None when the entry does not sit under the prefix.
        """
        name = _normalize_entry_name(name)
        if root_prefix:
            if name.rstrip("/") == root_prefix:
                return ""
            if name.startswith(root_prefix + "/"):
                return name[len(root_prefix) + 1:].strip("/")
        return None

    def relative_path(self, name: str, root_prefix: str) -> str:
        """
        Path of an entry relative to the target directory.

        Returns "" for the bare root directory entry, which is skipped.
        Entries outside the root prefix are recorded in self.unmatched.
        """
        stripped = self._strip_root(name, root_prefix)
        if stripped is not None:
            return stripped

        name = _normalize_entry_name(name)
        if name.strip("/"):
            self.unmatched.append(name)
        return name.strip("/") if not name.startswith("/") else name

    def link_source_path(self, link_name: str, root_prefix: str) -> str:
        """Relative path of a hard link's source; never counted as unmatched."""
        stripped = self._strip_root(link_name, root_prefix)
        if stripped is not None:
            return stripped
        return _normalize_entry_name(link_name)

    @staticmethod
    def destination(target_dir: str, relative: str) -> str:
        """
        Join an entry path onto target_dir, refusing anything that escapes it.

        Symbolic links already written are followed, so a chain of links
        cannot redirect a later entry outside target_dir.
        """
        dest = os.path.normpath(os.path.join(target_dir, relative))
        if dest == target_dir or not _is_within(target_dir, dest):
            raise ExtractionError(f"Archive entry escapes the target directory: {relative}")
        if not _is_within(os.path.realpath(target_dir), os.path.realpath(os.path.dirname(dest))):
            raise ExtractionError(f"Archive entry resolves outside the target directory: {relative}")
        return dest

    @staticmethod
    def write_file(dest: str, source: IO[bytes], mode: int) -> None:
        os.makedirs(os.path.dirname(dest), exist_ok=True)
        if os.path.islink(dest):
            os.unlink(dest)
        with open(dest, "wb") as out:
            shutil.copyfileobj(source, out)
        os.chmod(dest, mode)


class TarGzExtractor(ArchiveExtractor):
    """
    Extracts .tar.gz archives, reading the compressed stream front to back.
    """

    suffixes = (".tar.gz", ".tgz")

    def detect_root_prefix(self) -> str:
        with tarfile.open(self.archive_path, "r|gz") as tar:
            first = tar.next()
        if first is None or not first.isdir():
            return ""
        return _normalize_entry_name(first.name).strip("/")

    def _extract_entries(self, target_dir: str, root_prefix: str) -> int:
        written = 0
        with tarfile.open(self.archive_path, "r|gz") as tar:
            for member in tar:
                relative = self.relative_path(member.name, root_prefix)
                if not relative:
                    continue
                dest = self.destination(target_dir, relative)

                if member.isdir():
                    os.makedirs(dest, exist_ok=True)
                elif member.isreg():
                    source = tar.extractfile(member)
                    if source is None:
                        raise ExtractionError(f"Could not read archive entry {member.name}")
                    with source:
                        self.write_file(dest, source, member.mode & 0o777)
                elif member.issym():
                    self._write_symlink(target_dir, dest, member.linkname)
                elif member.islnk():
                    linked = self.link_source_path(member.linkname, root_prefix)
                    self._copy_hardlink(self.destination(target_dir, linked), dest, member.mode & 0o777)
                else:
                    self.logger.log(f"Skipping special archive entry {member.name}", logging.DEBUG)
                    continue
                written += 1
        return written

    def _write_symlink(self, target_dir: str, dest: str, link_target: str) -> None:
        # resolved through links already on disk, so "t/.." with t -> "." is caught
        resolved = os.path.realpath(os.path.join(os.path.dirname(dest), link_target))
        if os.path.isabs(link_target) or not _is_within(os.path.realpath(target_dir), resolved):
            raise ExtractionError(f"Symbolic link escapes the target directory: {dest} -> {link_target}")

        os.makedirs(os.path.dirname(dest), exist_ok=True)
        if os.path.lexists(dest):
            os.unlink(dest)
        os.symlink(link_target, dest)

    def _copy_hardlink(self, source_path: str, dest: str, mode: int) -> None:
        with open(source_path, "rb") as source:
            self.write_file(dest, source, mode)


class ZipExtractor(ArchiveExtractor):
    """
    Extracts .zip archives through their central directory.
    """

    suffixes = (".zip",)

    def detect_root_prefix(self) -> str:
        with zipfile.ZipFile(self.archive_path) as zf:
            names = zf.namelist()
        if not names:
            return ""
        # first segment of the first entry, whether or not that entry is a directory
        first = _normalize_entry_name(names[0]).lstrip("/")
        if "/" not in first:
            return ""
        return first.split("/")[0]

    @staticmethod
    def _stored_mode(info: zipfile.ZipInfo) -> Optional[int]:
        mode = (info.external_attr >> 16) & 0o777
        return mode or None

    def _extract_entries(self, target_dir: str, root_prefix: str) -> int:
        written = 0
        with zipfile.ZipFile(self.archive_path) as zf:
            for info in zf.infolist():
                relative = self.relative_path(info.filename, root_prefix)
                if not relative:
                    continue
                dest = self.destination(target_dir, relative)
                mode = self._stored_mode(info)

                if info.is_dir() or stat.S_ISDIR(info.external_attr >> 16):
                    os.makedirs(dest, mode=mode or DEFAULT_DIR_MODE, exist_ok=True)
                else:
                    with zf.open(info) as source:
                        self.write_file(dest, source, mode or DEFAULT_FILE_MODE)
                written += 1
        return written
