"""ZIP container I/O.

Purely byte-level: entries go in and come out as (name, bytes) pairs with no
knowledge of content types or relationships.
"""

from __future__ import annotations

import io
import struct
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from openxml_deck.errors import CorruptArchive, PackageIOError

if TYPE_CHECKING:
    from collections.abc import Iterable

# Fixed entry timestamp; the earliest the ZIP format can represent.
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
# -rw-r--r-- regular file
_FILE_ATTR = (0o100644 & 0xFFFF) << 16


@dataclass(frozen=True)
class ZipEntry:
    """A named member of the container."""

    name: str  # e.g., "ppt/slides/slide1.xml"
    data: bytes
    compress: bool = True


def read_container(data: bytes) -> list[ZipEntry]:
    """Read every file entry of a ZIP archive, in archive order.

    Raises:
        CorruptArchive: The bytes are not a ZIP archive, are truncated, fail
            a CRC check, use an unsupported compression method or contain
            the same entry name twice.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data), "r")
    except zipfile.BadZipFile as exc:
        raise CorruptArchive(f"File is not a valid ZIP archive: {exc}") from exc
    except (EOFError, ValueError, OSError, struct.error) as exc:
        raise CorruptArchive(f"Cannot read ZIP central directory: {exc}") from exc

    entries: list[ZipEntry] = []
    seen: set[str] = set()
    with archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            if info.filename in seen:
                raise CorruptArchive(f"Duplicate ZIP entry: {info.filename}")
            seen.add(info.filename)
            try:
                content = archive.read(info)
            except (zipfile.BadZipFile, zlib.error, EOFError, OSError, struct.error) as exc:
                raise CorruptArchive(
                    f"Cannot read ZIP entry '{info.filename}': {exc}"
                ) from exc
            except NotImplementedError as exc:
                raise CorruptArchive(
                    f"Unsupported compression in entry '{info.filename}': {exc}"
                ) from exc
            entries.append(
                ZipEntry(
                    name=info.filename,
                    data=content,
                    compress=info.compress_type != zipfile.ZIP_STORED,
                )
            )
    return entries


def write_container(entries: Iterable[ZipEntry]) -> bytes:
    """Write entries, in the given order, to a new ZIP archive.

    Every entry carries the same timestamp and attributes, so identical
    entries always produce identical archive bytes.

    Raises:
        PackageIOError: The archive could not be written.
    """
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w") as archive:
            for entry in entries:
                info = zipfile.ZipInfo(entry.name.lstrip("/"), date_time=ZIP_EPOCH)
                info.compress_type = (
                    zipfile.ZIP_DEFLATED if entry.compress else zipfile.ZIP_STORED
                )
                info.external_attr = _FILE_ATTR
                info.create_system = 0
                archive.writestr(info, entry.data)
    except (OSError, ValueError, zlib.error) as exc:
        raise PackageIOError(f"Cannot write ZIP archive: {exc}") from exc
    return buffer.getvalue()


def read_file(path: str | Path) -> bytes:
    """Read a package file from disk."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise PackageIOError(f"Cannot read {path}: {exc}") from exc


def write_file(path: str | Path, data: bytes) -> None:
    """Write package bytes to disk."""
    try:
        Path(path).write_bytes(data)
    except OSError as exc:
        raise PackageIOError(f"Cannot write {path}: {exc}") from exc
