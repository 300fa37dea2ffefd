"""Page tables, demand paging and the memory-mapping system calls."""

from __future__ import annotations

from epos.frame import FrameAllocator
from epos.vmspace import AddressSpace, VmError, VmProt

PTE_V = 0x001
"""Page table entry: the mapping is valid."""
PTE_W = 0x002
"""Page table entry: the page is writable."""
PTE_U = 0x004
"""Page table entry: the page is reachable from user mode."""

PROT_WRITE = 0x2

MAP_SHARED = 0x0001
MAP_PRIVATE = 0x0002
MAP_FIXED = 0x0010
MAP_ANON = 0x1000

DEV_MEM_FD = 0x8000
"""Descriptor that maps physical memory directly."""


class PageTable:
    """Maps virtual pages to page table entries (physical address plus flags)."""

    def __init__(self, page_size: int = 4096) -> None:
        if page_size <= 0:
            raise ValueError("page size must be positive")
        self.page_size = page_size
        self._entries: dict[int, int] = {}

    def _page(self, vaddr: int) -> int:
        return vaddr // self.page_size

    def lookup(self, vaddr: int) -> int:
        """Return the entry of the page holding ``vaddr``, or 0 if unmapped."""
        return self._entries.get(self._page(vaddr), 0)

    def map(self, vaddr: int, paddr: int, npages: int, flags: int) -> None:
        """Map ``npages`` pages from ``vaddr`` to physical memory from ``paddr``."""
        for i in range(npages):
            offset = i * self.page_size
            self._entries[self._page(vaddr + offset)] = (paddr + offset) | flags

    def unmap(self, vaddr: int, npages: int) -> None:
        """Remove the mappings of ``npages`` pages from ``vaddr``."""
        for i in range(npages):
            self._entries.pop(self._page(vaddr + i * self.page_size), None)


def handle_page_fault(
    space: AddressSpace,
    frames: FrameAllocator,
    table: PageTable,
    vaddr: int,
    code: int,
) -> int:
    """Back the page holding ``vaddr`` with a fresh frame; return its entry.

    Raises :class:`VmError` for an access outside any region, to a region
    without rights, or one caused by a protection violation; running out of
    frames raises the allocator's error.
    """
    prot = space.prot(vaddr)
    if prot is None or prot == VmProt.NONE:
        raise VmError(f"illegal memory access at {vaddr:#x}")
    if code & PTE_V:
        raise VmError(f"protection violation at {vaddr:#x}")

    flags = PTE_V
    if prot & VmProt.WRITE:
        flags |= PTE_W
    if any(vaddr in zone for zone in space.zones(True)):
        flags |= PTE_U

    paddr = frames.alloc(1)
    page = vaddr // table.page_size * table.page_size
    table.map(page, paddr, 1, flags)
    return table.lookup(vaddr)


def _page_count(length: int, page_size: int) -> int:
    return -(-length // page_size)


def mmap(
    space: AddressSpace,
    table: PageTable,
    addr: int,
    length: int,
    prot: VmProt,
    flags: int,
    fd: int,
    offset: int,
) -> int:
    """Reserve user address space and return its start.

    Anonymous private mappings are backed on demand; ``DEV_MEM_FD`` maps
    physical memory from ``offset`` at once.
    """
    page_size = space.page_size
    if length <= 0:
        raise VmError("length must be positive")
    if fd == -1:
        if not flags & MAP_ANON:
            raise VmError("a mapping without a descriptor must be anonymous")
    elif flags & MAP_ANON:
        raise VmError("an anonymous mapping takes no descriptor")
    if not flags & MAP_PRIVATE:
        raise VmError("only private mappings are supported")
    if fd == DEV_MEM_FD and offset % page_size:
        raise VmError(f"offset {offset:#x} is not page aligned")

    npages = _page_count(length, page_size)
    if flags & MAP_FIXED:
        if addr % page_size:
            raise VmError(f"address {addr:#x} is not page aligned")
        va = space.alloc_in_addr(addr, npages, prot)
        if not any(zone.base == va for zone in space.zones(True)):
            space.free(va, npages)
            raise VmError(f"address {addr:#x} is outside user space")
    else:
        va = space.alloc(npages, prot, True)

    if fd == DEV_MEM_FD:
        pte = PTE_U | PTE_V | (PTE_W if prot & PROT_WRITE else 0)
        table.map(va, offset, npages, pte)
    return va


def munmap(
    space: AddressSpace,
    frames: FrameAllocator,
    table: PageTable,
    addr: int,
    length: int,
) -> None:
    """Release a user mapping, its page table entries and their frames."""
    page_size = space.page_size
    if length <= 0:
        raise VmError("length must be positive")
    npages = _page_count(length, page_size)
    size = npages * page_size
    if not any(z.base == addr and z.limit == size for z in space.zones(True)):
        raise VmError(f"no user mapping of {npages} pages at {addr:#x}")
    space.free(addr, npages)

    for i in range(npages):
        va = addr + i * page_size
        pte = table.lookup(va)
        if pte & PTE_V:
            table.unmap(va, 1)
            # Frames outside RAM zones, such as device memory, are ignored.
            frames.free(pte & ~(page_size - 1), 1)