import pytest

from epos.exceptions import (
    FpuState,
    TrapContext,
    describe,
    exception_name,
    format_report,
)


@pytest.mark.parametrize(
    "number, name",
    [
        (0, "Divide Error"),
        (8, "Double Fault"),
        (13, "General Protection"),
        (14, "Page Fault"),
        (16, "x87 FPU Floating-Point Error"),
        (19, "SIMD Floating-Point"),
    ],
)
def test_exception_name(number, name):
    assert exception_name(number) == name


@pytest.mark.parametrize("number", [15, 20, 255])
def test_exception_name_unknown(number):
    assert exception_name(number) is None


def test_describe_unknown():
    assert describe(TrapContext(exception=15)) == "Unknown exception 15"


def test_describe_page_fault_user_write():
    ctx = TrapContext(exception=14, errorcode=6)
    assert describe(ctx, 0x1000) == "Page Fault when writing 0x00001000 in user mode"


def test_describe_page_fault_kernel_read():
    ctx = TrapContext(exception=14, errorcode=0)
    assert describe(ctx, 0xC0100000) == "Page Fault when reading 0xc0100000 in kernel mode"


def test_describe_page_fault_needs_address():
    with pytest.raises(ValueError):
        describe(TrapContext(exception=14))


def test_describe_plain_exception():
    assert describe(TrapContext(exception=6)) == "Invalid Opcode"


def test_report_kernel_mode_has_no_user_stack():
    ctx = TrapContext(fs=0x10, es=0x10, ds=0x10, exception=0, eip=0xC0001234, cs=0x08)
    lines = format_report(ctx).split("\r\n")
    assert lines[0] == "Un-handled exception!"
    assert lines[1] == " fs=0x00000010,  es=0x00000010,  ds=0x00000010"
    assert lines[5] == "eip=0xc0001234,  cs=0x0008, eflags=0x00000000"
    assert not any(line.startswith("esp=") for line in lines)
    assert lines[6] == ""
    assert lines[7] == "Divide Error"


def test_report_user_mode_shows_stack():
    ctx = TrapContext(exception=13, cs=0x1B, esp=0x7FFF0, ss=0x23)
    lines = format_report(ctx).split("\r\n")
    assert lines[6] == "esp=0x0007fff0,  ss=0x0023"
    assert lines[8] == "General Protection"


def test_report_ends_with_line_break():
    report = format_report(TrapContext(exception=3))
    assert report.endswith("Breakpoint\r\n")


def test_report_exception_field_format():
    ctx = TrapContext(exception=14, errorcode=4, cs=0x08)
    lines = format_report(ctx, 0x400000).split("\r\n")
    assert lines[4] == "exception=0x0e, errorcode=0x00000004"
    assert "in user mode" in lines[7]


def test_report_fpu_state_for_fpu_error():
    fpu = FpuState(cwd=0x37F, swd=0x81, fip=0x1234)
    report = format_report(TrapContext(exception=16, fpu=fpu))
    assert "fpu.cwd=0x037f\r\n" in report
    assert "fpu.fip=0x00001234\r\n" in report
    assert report.count("fpu.") == 7


def test_report_fpu_state_only_for_fpu_error():
    fpu = FpuState(cwd=0x37F)
    assert "fpu." not in format_report(TrapContext(exception=0, fpu=fpu))
    assert "fpu." not in format_report(TrapContext(exception=16))