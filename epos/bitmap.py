"""Fixed-size bitmap used by the physical frame allocator."""

from __future__ import annotations

ELEM_BITS = 32
"""Bits in one storage element (an ``unsigned long`` on the 32-bit target)."""

_ELEM_BYTES = ELEM_BITS // 8
_HEADER_BYTES = 8
"""Size of the in-memory bitmap header: a bit count and a pointer."""


def _elem_cnt(bit_cnt: int) -> int:
    return -(-bit_cnt // ELEM_BITS)


def _byte_cnt(bit_cnt: int) -> int:
    return _ELEM_BYTES * _elem_cnt(bit_cnt)


def buf_size(bit_cnt: int) -> int:
    """Return the bytes needed to hold a bitmap of ``bit_cnt`` bits in a buffer."""
    if bit_cnt < 0:
        raise ValueError("bit count must not be negative")
    return _HEADER_BYTES + _byte_cnt(bit_cnt)


class Bitmap:
    """An array of bits, all initially false."""

    __slots__ = ("_bit_cnt", "_bits")

    def __init__(self, bit_cnt: int) -> None:
        if bit_cnt < 0:
            raise ValueError("bit count must not be negative")
        self._bit_cnt = bit_cnt
        self._bits = 0

    def __len__(self) -> int:
        return self._bit_cnt

    def __repr__(self) -> str:
        return f"Bitmap({self._bit_cnt}, set={self.count(0, self._bit_cnt, True)})"

    def _check_index(self, idx: int) -> None:
        if not 0 <= idx < self._bit_cnt:
            raise IndexError(f"bit index {idx} out of range for {self._bit_cnt} bits")

    def _check_range(self, start: int, cnt: int) -> int:
        if start < 0 or cnt < 0:
            raise ValueError("start and count must not be negative")
        if start > self._bit_cnt or start + cnt > self._bit_cnt:
            raise IndexError(
                f"range {start}+{cnt} exceeds bitmap of {self._bit_cnt} bits"
            )
        return ((1 << cnt) - 1) << start

    # Single bits.

    def set(self, idx: int, value: bool) -> None:
        """Set bit ``idx`` to ``value``."""
        if value:
            self.mark(idx)
        else:
            self.reset(idx)

    def mark(self, idx: int) -> None:
        """Set bit ``idx`` to true."""
        self._check_index(idx)
        self._bits |= 1 << idx

    def reset(self, idx: int) -> None:
        """Set bit ``idx`` to false."""
        self._check_index(idx)
        self._bits &= ~(1 << idx)

    def flip(self, idx: int) -> None:
        """Toggle bit ``idx``."""
        self._check_index(idx)
        self._bits ^= 1 << idx

    def test(self, idx: int) -> bool:
        """Return the value of bit ``idx``."""
        self._check_index(idx)
        return bool(self._bits >> idx & 1)

    # Ranges of bits.

    def set_all(self, value: bool) -> None:
        """Set every bit to ``value``."""
        self.set_multiple(0, self._bit_cnt, value)

    def set_multiple(self, start: int, cnt: int, value: bool) -> None:
        """Set the ``cnt`` bits starting at ``start`` to ``value``."""
        mask = self._check_range(start, cnt)
        if value:
            self._bits |= mask
        else:
            self._bits &= ~mask

    def count(self, start: int, cnt: int, value: bool) -> int:
        """Return how many of the ``cnt`` bits from ``start`` equal ``value``."""
        mask = self._check_range(start, cnt)
        ones = bin(self._bits & mask).count("1")
        return ones if value else cnt - ones

    def contains(self, start: int, cnt: int, value: bool) -> bool:
        """Return whether any of the ``cnt`` bits from ``start`` equals ``value``."""
        mask = self._check_range(start, cnt)
        selected = self._bits & mask
        return selected != 0 if value else selected != mask

    def any(self, start: int, cnt: int) -> bool:
        """Return whether any bit in the range is true."""
        return self.contains(start, cnt, True)

    def none(self, start: int, cnt: int) -> bool:
        """Return whether no bit in the range is true."""
        return not self.contains(start, cnt, True)

    def all(self, start: int, cnt: int) -> bool:
        """Return whether every bit in the range is true."""
        return not self.contains(start, cnt, False)

    # Searching.

    def scan(self, start: int, cnt: int, value: bool) -> int | None:
        """Return the first index at or after ``start`` of ``cnt`` bits all equal
        to ``value``, or None if there is no such group."""
        if start < 0 or cnt < 0:
            raise ValueError("start and count must not be negative")
        if start > self._bit_cnt:
            raise IndexError(f"start {start} exceeds bitmap of {self._bit_cnt} bits")
        if cnt > self._bit_cnt:
            return None
        for i in range(start, self._bit_cnt - cnt + 1):
            if not self.contains(i, cnt, not value):
                return i
        return None

    def scan_and_flip(self, start: int, cnt: int, value: bool) -> int | None:
        """Like :meth:`scan`, then set the group found to the opposite value."""
        idx = self.scan(start, cnt, value)
        if idx is not None:
            self.set_multiple(idx, cnt, not value)
        return idx

    # Serialisation.

    def to_bytes(self) -> bytes:
        """Return the storage words as little-endian bytes."""
        return self._bits.to_bytes(_byte_cnt(self._bit_cnt), "little")

    @classmethod
    def from_bytes(cls, bit_cnt: int, data: bytes) -> Bitmap:
        """Build a bitmap of ``bit_cnt`` bits from its stored words.

        Bits past ``bit_cnt`` in the last word are cleared.
        """
        bitmap = cls(bit_cnt)
        expected = _byte_cnt(bit_cnt)
        if len(data) != expected:
            raise ValueError(f"expected {expected} bytes, got {len(data)}")
        bitmap._bits = int.from_bytes(data, "little") & ((1 << bit_cnt) - 1)
        return bitmap