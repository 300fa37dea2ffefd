import pytest

from epos.frame import FrameAllocator, OutOfFramesError

PAGE = 4096
START = 0x100000
END = 0x200000


def make():
    return FrameAllocator([(START, END)], PAGE)


def test_zone_reserves_bitmap_space_at_front():
    zones = make().zones()
    assert len(zones) == 1
    zone = zones[0]
    assert zone.base > START
    assert zone.end == END
    assert (zone.base - START) % PAGE == 0
    assert len(zone.bitmap) == zone.limit // PAGE


def test_alloc_returns_consecutive_frames():
    fa = make()
    base = fa.zones()[0].base
    assert fa.alloc(1) == base
    assert fa.alloc(1) == base + PAGE
    assert fa.alloc(2) == base + 2 * PAGE


def test_free_allows_reuse():
    fa = make()
    first = fa.alloc(3)
    fa.alloc(1)
    fa.free(first, 3)
    assert fa.alloc(2) == first


def test_alloc_in_addr_and_conflict():
    fa = make()
    base = fa.zones()[0].base
    target = base + 4 * PAGE
    assert fa.alloc_in_addr(target, 2) == target
    with pytest.raises(OutOfFramesError):
        fa.alloc_in_addr(target + PAGE, 1)
    assert fa.alloc(4) == base
    assert fa.alloc(1) == target + 2 * PAGE


def test_alloc_in_addr_outside_zones():
    fa = make()
    with pytest.raises(OutOfFramesError):
        fa.alloc_in_addr(END + PAGE, 1)


def test_exhaustion_raises():
    fa = make()
    total = len(fa.zones()[0].bitmap)
    fa.alloc(total)
    with pytest.raises(OutOfFramesError):
        fa.alloc(1)


def test_too_large_request_raises():
    fa = make()
    total = len(fa.zones()[0].bitmap)
    with pytest.raises(OutOfFramesError):
        fa.alloc(total + 1)


def test_empty_pair_ends_zone_list():
    fa = FrameAllocator([(START, END), (0, 0), (0x400000, 0x500000)], PAGE)
    assert len(fa.zones()) == 1


def test_single_page_zone_is_skipped():
    fa = FrameAllocator([(START, START + PAGE), (0x400000, 0x500000)], PAGE)
    zones = fa.zones()
    assert len(zones) == 1
    assert zones[0].end == 0x500000


def test_second_zone_used_when_first_full():
    fa = FrameAllocator([(START, END), (0x400000, 0x500000)], PAGE)
    first, second = fa.zones()
    fa.alloc(len(first.bitmap))
    assert fa.alloc(1) == second.base


def test_free_unknown_address_is_ignored():
    fa = make()
    base = fa.alloc(1)
    fa.free(END + PAGE, 1)
    assert fa.alloc(1) == base + PAGE


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        make().alloc(-1)