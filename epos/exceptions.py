"""Descriptions and reports of unhandled processor exceptions."""

from __future__ import annotations

from dataclasses import dataclass

_USER_PRIVILEGE = 3
PAGE_FAULT = 14
FPU_ERROR = 16

_NAMES = {
    0: "Divide Error",
    1: "Debug",
    2: "NMI",
    3: "Breakpoint",
    4: "Overflow",
    5: "Bound Range",
    6: "Invalid Opcode",
    7: "Device Not Available",
    8: "Double Fault",
    9: "Coprocessor Segment Overrun",
    10: "Invalid TSS",
    11: "Segment Not Present",
    12: "Stack Fault",
    13: "General Protection",
    14: "Page Fault",
    16: "x87 FPU Floating-Point Error",
    17: "Alignment Check",
    18: "Machine-Check",
    19: "SIMD Floating-Point",
}


@dataclass
class FpuState:
    """Saved x87 environment of the task owning the FPU."""

    cwd: int = 0
    swd: int = 0
    twd: int = 0
    fip: int = 0
    fcs: int = 0
    foo: int = 0
    fos: int = 0


@dataclass
class TrapContext:
    """Registers saved on entry to the kernel, plus the exception number.

    ``esp`` and ``ss`` are meaningful only when the trap came from user mode.
    ``fpu`` holds the state of the task owning the FPU, if any.
    """

    fs: int = 0
    es: int = 0
    ds: int = 0
    edi: int = 0
    esi: int = 0
    ebp: int = 0
    isp: int = 0
    ebx: int = 0
    edx: int = 0
    ecx: int = 0
    eax: int = 0
    exception: int = 0
    errorcode: int = 0
    eip: int = 0
    cs: int = 0
    eflags: int = 0
    esp: int = 0
    ss: int = 0
    fpu: FpuState | None = None

    @property
    def from_user(self) -> bool:
        return bool(self.cs & _USER_PRIVILEGE)


def exception_name(number: int) -> str | None:
    """Return the name of exception ``number``, or None if it has none."""
    return _NAMES.get(number)


def describe(ctx: TrapContext, fault_address: int | None = None) -> str:
    """Return the one-line description of the exception in ``ctx``.

    A page fault needs ``fault_address``, the address that was accessed.
    """
    if ctx.exception == PAGE_FAULT:
        if fault_address is None:
            raise ValueError("a page fault needs the faulting address")
        access = "writing" if ctx.errorcode & 2 else "reading"
        mode = "user" if ctx.errorcode & 4 else "kernel"
        return f"Page Fault when {access} 0x{fault_address:08x} in {mode} mode"
    name = exception_name(ctx.exception)
    if name is None:
        return f"Unknown exception {ctx.exception}"
    return name


def format_report(ctx: TrapContext, fault_address: int | None = None) -> str:
    """Return the full console report printed for an unhandled exception."""
    lines = [
        "Un-handled exception!",
        f" fs=0x{ctx.fs:08x},  es=0x{ctx.es:08x},  ds=0x{ctx.ds:08x}",
        f"edi=0x{ctx.edi:08x}, esi=0x{ctx.esi:08x}, ebp=0x{ctx.ebp:08x}, isp=0x{ctx.isp:08x}",
        f"ebx=0x{ctx.ebx:08x}, edx=0x{ctx.edx:08x}, ecx=0x{ctx.ecx:08x}, eax=0x{ctx.eax:08x}",
        f"exception=0x{ctx.exception:02x}, errorcode=0x{ctx.errorcode:08x}",
        f"eip=0x{ctx.eip:08x},  cs=0x{ctx.cs:04x}, eflags=0x{ctx.eflags:08x}",
    ]
    if ctx.from_user:
        lines.append(f"esp=0x{ctx.esp:08x},  ss=0x{ctx.ss:04x}")
    lines.append("")
    lines.append(describe(ctx, fault_address))
    if ctx.exception == FPU_ERROR and ctx.fpu is not None:
        fpu = ctx.fpu
        lines += [
            f"fpu.cwd=0x{fpu.cwd:04x}",
            f"fpu.swd=0x{fpu.swd:04x}",
            f"fpu.twd=0x{fpu.twd:04x}",
            f"fpu.fip=0x{fpu.fip:08x}",
            f"fpu.fcs=0x{fpu.fcs:04x}",
            f"fpu.foo=0x{fpu.foo:08x}",
            f"fpu.fos=0x{fpu.fos:04x}",
        ]
    return "".join(line + "\r\n" for line in lines)