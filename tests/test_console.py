import pytest

from epos.console import COLUMNS, ROWS, TextConsole, pit_divisor


def test_putchar_writes_and_advances():
    con = TextConsole()
    assert con.putchar("A") == "A"
    assert con.row_text(0).startswith("A ")
    assert con.cursor == (0, 1)
    assert con.screen[1] == 0x07


def test_putchar_accepts_int():
    con = TextConsole()
    assert con.putchar(ord("z")) == ord("z")
    assert con.row_text(0)[0] == "z"


def test_newline_moves_to_next_line_start():
    con = TextConsole()
    con.write("abc\n")
    assert con.cursor == (1, 0)
    con.write("d")
    assert con.row_text(1)[0] == "d"


def test_carriage_return_overwrites():
    con = TextConsole()
    con.write("hello\rJ")
    assert con.row_text(0).startswith("Jello")


def test_tab_moves_four_cells():
    con = TextConsole()
    con.write("\t")
    assert con.cursor == (0, 4)


def test_backspace_blanks_previous_cell():
    con = TextConsole()
    con.write("ab\b")
    assert con.cursor == (0, 1)
    assert con.row_text(0).startswith("a ")


def test_backspace_at_origin_stays():
    con = TextConsole()
    con.write("\b")
    assert con.cursor == (0, 0)


def test_write_returns_length():
    con = TextConsole()
    assert con.write("xyz") == len("xyz")


def test_scrolls_when_past_bottom():
    con = TextConsole()
    for i in range(ROWS):
        con.write(f"line{i}\n")
    assert con.cursor == (ROWS - 1, 0)
    assert con.row_text(0).startswith("line1")
    assert con.row_text(ROWS - 2).startswith(f"line{ROWS - 1}")
    assert con.row_text(ROWS - 1) == " " * COLUMNS


def test_row_out_of_range():
    with pytest.raises(IndexError):
        TextConsole().row_text(ROWS)


def test_pit_divisor():
    assert pit_divisor(1) == 1193182
    assert pit_divisor(1193182) == 1
    with pytest.raises(ValueError):
        pit_divisor(0)