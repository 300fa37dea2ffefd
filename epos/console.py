"""Text-mode console and the programmable interval timer divisor."""

from __future__ import annotations

COLUMNS = 80
ROWS = 25
_ROW_BYTES = COLUMNS * 2
_SCREEN_BYTES = _ROW_BYTES * ROWS
_BLANK = 0x20
_ATTR = 0x07

PIT_FREQUENCY = 1193182
"""Input clock of the 8253/8254 timer in Hz."""


def pit_divisor(freq: int) -> int:
    """Return the timer divisor that yields ``freq`` Hz."""
    if freq <= 0:
        raise ValueError("frequency must be positive")
    return PIT_FREQUENCY // freq


class TextConsole:
    """An 80x25 character screen of (character, attribute) cells with a cursor."""

    def __init__(self) -> None:
        self._screen = bytearray(bytes((_BLANK, _ATTR)) * (COLUMNS * ROWS))
        self._pos = 0  # byte offset of the cursor cell

    @property
    def cursor(self) -> tuple[int, int]:
        """The cursor as (row, column)."""
        cell = self._pos // 2
        return divmod(cell, COLUMNS)

    @property
    def screen(self) -> bytes:
        """The raw screen memory, two bytes per cell."""
        return bytes(self._screen)

    def putchar(self, c: int | str) -> int | str:
        """Print one character at the cursor and advance it; return ``c``."""
        code = ord(c) if isinstance(c, str) else c
        code &= 0xFF
        pos = self._pos
        if code == 0x0A:
            pos = (pos // _ROW_BYTES) * _ROW_BYTES + _ROW_BYTES
        elif code == 0x0D:
            pos = (pos // _ROW_BYTES) * _ROW_BYTES
        elif code == 0x09:
            pos += 8
        elif code == 0x08:
            pos = max(pos - 2, 0)
            self._screen[pos] = _BLANK
        else:
            self._screen[pos] = code
            self._screen[pos + 1] = _ATTR
            pos += 2

        if pos >= _SCREEN_BYTES:
            last = _ROW_BYTES * (ROWS - 1)
            self._screen[:last] = self._screen[_ROW_BYTES:]
            self._screen[last:] = bytes((_BLANK, _ATTR)) * COLUMNS
            pos -= _ROW_BYTES
        self._pos = pos
        return c

    def write(self, text: str) -> int:
        """Print every character of ``text``; return how many were printed."""
        for ch in text:
            self.putchar(ch)
        return len(text)

    def row_text(self, row: int) -> str:
        """Return the characters shown on ``row``."""
        if not 0 <= row < ROWS:
            raise IndexError(f"row {row} out of range 0..{ROWS - 1}")
        start = row * _ROW_BYTES
        return bytes(self._screen[start:start + _ROW_BYTES:2]).decode("latin-1")