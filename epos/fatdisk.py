"""On-disk structures of FAT volumes and a sector-addressed disk image."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

SECTOR_SIZE = 512
"""Bytes in one disk sector."""

MAX_PATH = 64
"""Longest path, in characters including the terminator, that may be opened."""

DIR_SEPARATOR = "/"

DIRENT_SIZE = 32
PARTITION_ENTRY_SIZE = 16
PARTITION_TABLE_OFFSET = 0x1BE
MAX_PARTITIONS = 4

DELETED_MARK = 0xE5
"""First name byte of a deleted directory entry."""
KANJI_MARK = 0x05
"""First name byte standing for a real 0xE5 character."""

_DIRENT = struct.Struct("<11sBBBHHHHHHHI")
_PTINFO = struct.Struct("<BBHBBHII")


class DosFsError(Exception):
    """Base class of filesystem errors."""


class NotFoundError(DosFsError):
    """A path or file does not exist."""


class PathTooLongError(DosFsError):
    """A path exceeds the maximum length."""


class MediaError(DosFsError):
    """The medium could not be read or written, or is inconsistent."""


class FatType(enum.IntEnum):
    """Width of the file allocation table entries."""

    FAT12 = 0
    FAT16 = 1
    FAT32 = 2


class Attr(enum.IntFlag):
    """Directory entry attribute bits."""

    NONE = 0
    READ_ONLY = 0x01
    HIDDEN = 0x02
    SYSTEM = 0x04
    VOLUME_ID = 0x08
    DIRECTORY = 0x10
    ARCHIVE = 0x20
    LONG_NAME = READ_ONLY | HIDDEN | SYSTEM | VOLUME_ID


@dataclass
class DirEntry:
    """One 32-byte directory entry.

    Dates hold the day in bits 0-4, the month in bits 5-8 and years since
    1980 in bits 9-15; times hold two-second units in bits 0-4, minutes in
    bits 5-10 and hours in bits 11-15.
    """

    name: bytes = b" " * 11
    attr: int = 0
    reserved: int = 0
    crttimetenth: int = 0
    crttime: int = 0
    crtdate: int = 0
    lstaccdate: int = 0
    startclus_hi: int = 0
    wrttime: int = 0
    wrtdate: int = 0
    startclus_lo: int = 0
    filesize: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> DirEntry:
        """Decode an entry from its 32 on-disk bytes."""
        if len(data) != DIRENT_SIZE:
            raise ValueError(f"directory entry needs {DIRENT_SIZE} bytes, got {len(data)}")
        return cls(*_DIRENT.unpack(bytes(data)))

    def to_bytes(self) -> bytes:
        """Encode the entry as its 32 on-disk bytes."""
        if len(self.name) != 11:
            raise ValueError("directory entry name must be 11 bytes")
        return _DIRENT.pack(
            bytes(self.name),
            self.attr,
            self.reserved,
            self.crttimetenth,
            self.crttime,
            self.crtdate,
            self.lstaccdate,
            self.startclus_hi,
            self.wrttime,
            self.wrtdate,
            self.startclus_lo,
            self.filesize,
        )

    @property
    def is_directory(self) -> bool:
        return bool(self.attr & Attr.DIRECTORY)

    @property
    def is_long_name(self) -> bool:
        return self.attr & Attr.LONG_NAME == Attr.LONG_NAME

    def first_cluster(self, fat_type: FatType) -> int:
        """Return the starting cluster; only FAT32 uses the high word."""
        if fat_type == FatType.FAT32:
            return self.startclus_hi << 16 | self.startclus_lo
        return self.startclus_lo

    def assign_cluster(self, cluster: int) -> None:
        """Store ``cluster`` as the starting cluster, high and low words."""
        self.startclus_lo = cluster & 0xFFFF
        self.startclus_hi = (cluster >> 16) & 0xFFFF


@dataclass
class PartitionEntry:
    """One 16-byte entry of the master boot record partition table."""

    active: int = 0
    start_head: int = 0
    start_cs: int = 0
    type: int = 0
    end_head: int = 0
    end_cs: int = 0
    start: int = 0
    size: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> PartitionEntry:
        """Decode an entry from its 16 on-disk bytes."""
        if len(data) != PARTITION_ENTRY_SIZE:
            raise ValueError(
                f"partition entry needs {PARTITION_ENTRY_SIZE} bytes, got {len(data)}"
            )
        return cls(*_PTINFO.unpack(bytes(data)))

    def to_bytes(self) -> bytes:
        """Encode the entry as its 16 on-disk bytes."""
        return _PTINFO.pack(
            self.active,
            self.start_head,
            self.start_cs,
            self.type,
            self.end_head,
            self.end_cs,
            self.start,
            self.size,
        )

    @property
    def is_active(self) -> bool:
        return self.active == 0x80


class SectorDevice:
    """A disk image in memory, read and written a sector at a time."""

    def __init__(self, image: bytes | bytearray) -> None:
        if len(image) % SECTOR_SIZE:
            raise ValueError(f"image size {len(image)} is not a multiple of {SECTOR_SIZE}")
        self._image = bytearray(image)

    @property
    def image(self) -> bytes:
        """The whole image as it stands."""
        return bytes(self._image)

    @property
    def sector_count(self) -> int:
        return len(self._image) // SECTOR_SIZE

    def _offset(self, sector: int) -> int:
        if not 0 <= sector < self.sector_count:
            raise MediaError(f"sector {sector} outside a medium of {self.sector_count}")
        return sector * SECTOR_SIZE

    def read_sector(self, sector: int) -> bytes:
        """Return the contents of ``sector``."""
        offset = self._offset(sector)
        return bytes(self._image[offset:offset + SECTOR_SIZE])

    def write_sector(self, sector: int, data: bytes) -> None:
        """Replace the contents of ``sector`` with ``data``."""
        if len(data) != SECTOR_SIZE:
            raise ValueError(f"sector data must be {SECTOR_SIZE} bytes, got {len(data)}")
        offset = self._offset(sector)
        self._image[offset:offset + SECTOR_SIZE] = data