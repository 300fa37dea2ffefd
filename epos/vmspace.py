"""Virtual address space bookkeeping: sorted lists of allocated regions."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class VmError(Exception):
    """Raised when a region cannot be allocated or released."""


class VmProt(enum.IntFlag):
    """Access rights of a region."""

    NONE = 0
    READ = 0x1
    WRITE = 0x2
    EXEC = 0x4
    ALL = READ | WRITE | EXEC


@dataclass
class VmZone:
    """An allocated range of virtual addresses."""

    base: int
    limit: int
    protect: VmProt

    @property
    def end(self) -> int:
        return self.base + self.limit

    def __contains__(self, va: int) -> bool:
        return self.base <= va < self.end


class AddressSpace:
    """Tracks allocated user and kernel regions.

    The kernel list starts with the region from ``user_max`` to ``brk``
    that holds the kernel image itself; it can never be freed.
    """

    def __init__(
        self,
        brk: int,
        user_min: int,
        user_max: int,
        kern_max: int,
        page_size: int = 4096,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page size must be positive")
        if not user_min <= user_max <= brk <= kern_max:
            raise ValueError("address bounds are out of order")
        self._user_min = user_min
        self._user_max = user_max
        self._kern_max = kern_max
        self._page_size = page_size
        self._kernel: list[VmZone] = [VmZone(user_max, brk - user_max, VmProt.ALL)]
        self._user: list[VmZone] = []

    @property
    def page_size(self) -> int:
        return self._page_size

    def _zones_for(self, va: int) -> list[VmZone]:
        return self._user if va < self._user_max else self._kernel

    def alloc_in_addr(self, va: int, npages: int, prot: VmProt) -> int:
        """Allocate ``npages`` pages starting exactly at ``va``; return ``va``."""
        if npages <= 0:
            raise VmError("page count must be positive")
        if va % self._page_size:
            raise VmError(f"address {va:#x} is not page aligned")
        size = npages * self._page_size
        if va < self._user_min or va >= self._kern_max or va + size > self._kern_max:
            raise VmError(f"range {va:#x}+{size:#x} outside the address space")
        if va < self._user_max and va + size > self._user_max:
            raise VmError("range crosses the user/kernel boundary")

        zones = self._zones_for(va)
        index = len(zones)
        for i, zone in enumerate(zones):
            if va in zone:
                raise VmError(f"address {va:#x} is already allocated")
            if va < zone.base:
                if va + size > zone.base:
                    raise VmError(f"range {va:#x}+{size:#x} overlaps an allocation")
                index = i
                break
        zones.insert(index, VmZone(va, size, VmProt(prot)))
        return va

    def alloc(self, npages: int, prot: VmProt, user: bool) -> int:
        """Allocate ``npages`` pages anywhere in user or kernel space.

        The search starts after the first region and takes the first gap
        that is large enough.
        """
        if npages <= 0:
            raise VmError("page count must be positive")
        size = npages * self._page_size
        zones = self._user if user else self._kernel

        if not zones:
            va = self._user_min
            index = 0
        else:
            va = zones[0].end
            index = len(zones)
            for i, zone in enumerate(zones[1:], start=1):
                if va + size <= zone.base:
                    index = i
                    break
                va = zone.end

        top = self._user_max if user else self._kern_max
        if va >= top or va + size > top:
            raise VmError(f"no room for {npages} pages")
        zones.insert(index, VmZone(va, size, VmProt(prot)))
        return va

    def free(self, va: int, npages: int) -> None:
        """Release a region exactly as it was allocated."""
        if npages <= 0:
            raise VmError("page count must be positive")
        if va == self._user_max:
            raise VmError("the kernel image region cannot be freed")
        size = npages * self._page_size
        zones = self._zones_for(va)
        for i, zone in enumerate(zones):
            if zone.base == va and zone.limit == size:
                del zones[i]
                return
        raise VmError(f"no region of {npages} pages at {va:#x}")

    def prot(self, va: int) -> VmProt | None:
        """Return the rights of the region holding ``va``, or None if unallocated."""
        for zone in self._zones_for(va):
            if va in zone:
                return zone.protect
        return None

    def zones(self, user: bool) -> list[VmZone]:
        """Return the user or kernel regions in address order."""
        return list(self._user if user else self._kernel)