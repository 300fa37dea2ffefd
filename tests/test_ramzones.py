import pytest

from epos.frame import FrameAllocator
from epos.ramzones import MEMORY_AVAILABLE, MemoryRegion, ram_zones

PAGE = 4096
PHYSFREE = 0x200000
LOW = MemoryRegion(0, 0x9FC00)
HIGH = MemoryRegion(0x100000, 0x1F00000)


def test_kernel_and_first_page_are_excluded():
    zones = ram_zones([LOW, HIGH], PHYSFREE, PAGE)
    assert len(zones) == 2
    assert zones[0][0] == PAGE
    assert zones[1] == (PHYSFREE, HIGH.addr + HIGH.length)


def test_reserved_regions_are_skipped():
    reserved = MemoryRegion(0x3000000, 0x100000, type=2)
    zones = ram_zones([reserved, HIGH], PHYSFREE, PAGE)
    assert zones == ram_zones([HIGH], PHYSFREE, PAGE)
    assert all(start != reserved.addr for start, _ in zones)


def test_region_smaller_than_a_page_is_dropped():
    tiny = MemoryRegion(0x4000000, PAGE - 1)
    assert ram_zones([tiny], PHYSFREE, PAGE) == []


def test_region_swallowed_by_kernel_is_dropped():
    region = MemoryRegion(0x100000, PHYSFREE - 0x100000)
    assert ram_zones([region], PHYSFREE, PAGE) == []


def test_max_zones_keeps_room_for_terminator():
    regions = [MemoryRegion(0x1000000 * (i + 1), 0x100000) for i in range(5)]
    assert len(ram_zones(regions, PHYSFREE, PAGE, max_zones=3)) == 2
    assert len(ram_zones(regions, PHYSFREE, PAGE)) == 5


def test_available_type_constant_matches_default():
    assert MemoryRegion(0, 1).type == MEMORY_AVAILABLE


@pytest.mark.parametrize("page_size", [0, -4096])
def test_bad_page_size(page_size):
    with pytest.raises(ValueError):
        ram_zones([HIGH], PHYSFREE, page_size)


def test_bad_table_capacity():
    with pytest.raises(ValueError):
        ram_zones([HIGH], PHYSFREE, PAGE, max_zones=0)


def test_zones_feed_frame_allocator():
    zones = ram_zones([LOW, HIGH], PHYSFREE, PAGE)
    frames = FrameAllocator(zones, PAGE)
    addr = frames.alloc(4)
    assert any(start <= addr and addr + 4 * PAGE <= end for start, end in zones)
    assert addr % PAGE == 0