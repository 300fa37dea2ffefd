"""Usable RAM zones derived from the boot loader's memory map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

MEMORY_AVAILABLE = 1
"""Memory map type of RAM the kernel may use."""

_U32 = 0xFFFFFFFF


@dataclass(frozen=True)
class MemoryRegion:
    """One entry of the boot loader's memory map."""

    addr: int
    length: int
    type: int = MEMORY_AVAILABLE


def ram_zones(
    memory_map: Iterable[MemoryRegion],
    physfree: int,
    page_size: int = 4096,
    max_zones: int | None = None,
) -> list[tuple[int, int]]:
    """Return ``(start, end)`` page-aligned ranges of usable RAM.

    Memory below ``physfree`` in the region holding it belongs to the kernel,
    and the first page is kept for real-mode use; zones shorter than a page
    are dropped. ``max_zones`` is the capacity of the zone table including
    its terminating empty entry, so at most ``max_zones - 1`` zones come back.
    """
    if page_size <= 0:
        raise ValueError("page size must be positive")
    if max_zones is not None and max_zones < 1:
        raise ValueError("zone table must hold at least the terminator")

    zones: list[tuple[int, int]] = []
    for region in memory_map:
        if region.type != MEMORY_AVAILABLE:
            continue
        start = (region.addr & _U32) // page_size * page_size
        end = ((start + (region.length & _U32)) & _U32) // page_size * page_size

        if start < physfree <= end:
            start = physfree
        if start < page_size <= end:
            start = page_size

        if end >= start + page_size:
            zones.append((start, end))
            if max_zones is not None and len(zones) + 1 >= max_zones:
                break
    return zones