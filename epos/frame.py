"""Physical page-frame allocator built on per-zone bitmaps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from epos.bitmap import Bitmap, buf_size

DEFAULT_PAGE_SIZE = 4096


class OutOfFramesError(Exception):
    """Raised when no suitable run of free frames exists."""


@dataclass
class RamZone:
    """A contiguous range of usable physical memory and its frame bitmap."""

    base: int
    limit: int
    bitmap: Bitmap

    @property
    def end(self) -> int:
        return self.base + self.limit

    def __contains__(self, paddr: int) -> bool:
        return self.base <= paddr < self.end


def _page_roundup(value: int, page_size: int) -> int:
    return -(-value // page_size) * page_size


class FrameAllocator:
    """Hands out runs of physical frames from a list of RAM zones.

    ``ram_zones`` holds ``(start, end)`` address pairs; an empty pair ends the
    list. The front of every zone is reserved for its bookkeeping bitmap.
    """

    def __init__(
        self,
        ram_zones: Iterable[tuple[int, int]],
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page size must be positive")
        self._page_size = page_size
        self._zones: list[RamZone] = []
        for start, end in ram_zones:
            if end - start == 0:
                break
            if end < start:
                raise ValueError(f"zone end {end:#x} lies before start {start:#x}")
            limit = end - start
            overhead = _page_roundup(buf_size(limit // page_size), page_size)
            if overhead >= limit:
                continue
            base = start + overhead
            limit -= overhead
            self._zones.append(RamZone(base, limit, Bitmap(limit // page_size)))

    @property
    def page_size(self) -> int:
        return self._page_size

    def zones(self) -> list[RamZone]:
        """Return the zones frames are allocated from."""
        return list(self._zones)

    @staticmethod
    def _check_count(nframes: int) -> None:
        if nframes < 0:
            raise ValueError("frame count must not be negative")

    def alloc(self, nframes: int) -> int:
        """Allocate ``nframes`` contiguous frames and return their address."""
        self._check_count(nframes)
        for zone in self._zones:
            idx = zone.bitmap.scan(0, nframes, False)
            if idx is not None:
                zone.bitmap.set_multiple(idx, nframes, True)
                return zone.base + idx * self._page_size
        raise OutOfFramesError(f"no run of {nframes} free frames")

    def alloc_in_addr(self, pa: int, nframes: int) -> int:
        """Allocate ``nframes`` contiguous frames starting exactly at ``pa``."""
        self._check_count(nframes)
        for zone in self._zones:
            if pa in zone:
                idx = (pa - zone.base) // self._page_size
                if idx + nframes <= len(zone.bitmap) and zone.bitmap.none(idx, nframes):
                    zone.bitmap.set_multiple(idx, nframes, True)
                    return pa
        raise OutOfFramesError(f"{nframes} frames at {pa:#x} are not free")

    def free(self, paddr: int, nframes: int) -> None:
        """Release frames obtained from :meth:`alloc`; unknown addresses are ignored."""
        self._check_count(nframes)
        for zone in self._zones:
            if paddr in zone:
                idx = (paddr - zone.base) // self._page_size
                zone.bitmap.set_multiple(idx, nframes, False)
                return