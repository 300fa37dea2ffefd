# epos

Pieces of a small teaching operating system, written as plain Python objects
that can be used and inspected without any hardware.

## Modules

- `epos.bitmap` — `Bitmap`, a fixed-size bit array with single-bit and range
  operations (`set_multiple`, `count`, `any`, `none`, `all`), first-fit
  searching (`scan`, `scan_and_flip`, which return `None` when nothing fits)
  and `to_bytes` / `from_bytes`; `buf_size` gives the bytes a bitmap of a
  given size occupies in memory.
- `epos.frame` — `FrameAllocator`, a physical frame allocator over RAM zones.
  The front of each zone is reserved for its bitmap. `alloc`, `alloc_in_addr`
  and `free`; running out raises `OutOfFramesError`.
- `epos.ramzones` — `ram_zones` turns a list of `MemoryRegion` entries from a
  boot memory map into page-aligned `(start, end)` zones, leaving out the
  kernel image and the first page.
- `epos.vmspace` — `AddressSpace`, sorted user and kernel regions with
  first-fit `alloc`, fixed `alloc_in_addr`, `free` and `prot` lookup; failures
  raise `VmError`. Rights are `VmProt` flags.
- `epos.pagefault` — `PageTable`, `handle_page_fault` (backs a page with a
  fresh frame) and the `mmap` / `munmap` calls, including `DEV_MEM_FD` for
  mapping physical memory directly.
- `epos.keyboard` — `Keyboard`, PC scan-code decoding with shift, ctrl, alt,
  caps lock and num lock; key releases carry bit 15.
- `epos.console` — `TextConsole`, an 80×25 text screen with newline, carriage
  return, tab, backspace and scrolling; `pit_divisor` for the 8253 timer.
- `epos.timeconv` — `mktime`, `bcd_to_bin`, `cmos_to_epoch` and
  `system_time`.
- `epos.exceptions` — `TrapContext`, `exception_name`, `describe` and
  `format_report` for unhandled CPU exceptions.
- `epos.fatdisk` — FAT on-disk structures: `DirEntry` and `PartitionEntry`
  (both with `from_bytes` / `to_bytes`), `FatType`, `Attr`, the error classes
  `DosFsError`, `NotFoundError`, `PathTooLongError` and `MediaError`, and
  `SectorDevice`, a disk image in memory read and written by sector.

## Installing

```
pip install .
```

## Examples

```python
from epos.bitmap import Bitmap

bits = Bitmap(64)
start = bits.scan_and_flip(0, 4, False)   # first run of four clear bits, now set
assert start == 0 and bits.all(0, 4)
```

```python
from epos.frame import FrameAllocator

frames = FrameAllocator([(0x100000, 0x200000)])
assert frames.alloc(1) == 0x101000        # first page holds the zone's bitmap
```

```python
from epos.keyboard import Keyboard

kbd = Keyboard()
assert kbd.feed(0x1E) == 0x1E61           # 'a'
kbd.feed(0x2A)                            # left shift down
assert kbd.feed(0x1E) == 0x1E41           # 'A'
```

```python
from epos.console import TextConsole
from epos.timeconv import mktime

con = TextConsole()
con.write("hello\r\n")
assert con.row_text(0).startswith("hello") and con.cursor == (1, 0)
assert mktime(2000, 1, 1, 0, 0, 0) == 946684800
```

```python
from epos.fatdisk import DirEntry, SectorDevice

device = SectorDevice(bytearray(512 * 4))
entry = DirEntry(name=b"README  TXT", filesize=100)
device.write_sector(1, entry.to_bytes() + bytes(480))
assert DirEntry.from_bytes(device.read_sector(1)[:32]) == entry
```

## What the package does not do

The FAT support stops at the on-disk records and the sector device. There is
no code here that reads a volume's boot record, follows the allocation table,
walks directories, or opens, reads, writes or deletes files; a program that
needs those must build them on `SectorDevice`, `DirEntry` and
`PartitionEntry`. Nothing talks to real hardware or boots: the allocators,
page table, console and keyboard are in-memory models.

## Running the tests

```
pip install .[test]
pytest
```