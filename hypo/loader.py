"""Program loader for the Hypothetical Machine.

Programs are plain text, one memory assignment per line::

    0: 31002 // PUT content of memory address 2
    1: 5000  // GOTO 0
    2: 99103

Anything after the value and a whitespace character is a comment.
"""

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator, Union
from .arith import bounds_cap, in_bounds
from .cpu import CPUState
from .errors import BadAddress, BadFile, BadLine, BadValue

if TYPE_CHECKING:
    from .machine import Machine

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^(\d+):\s*(-?\d+)(\s.*)?$", re.ASCII)

ProgramSource = Union[str, Iterable[str]]


def _iter_lines(source: ProgramSource) -> Iterator[str]:
    """Yield lines without their line terminators.

    Strings split on newlines only, the same as iterating a text file.
    """
    if isinstance(source, str):
        lines = source.split("\n")
        if lines[-1] == "":
            lines.pop()
    else:
        lines = source
    for line in lines:
        yield line.rstrip("\r\n")


def load_program(machine: "Machine", source: ProgramSource) -> None:
    """Load program text into the machine's memory.

    Memory and registers are zeroed first and the CPU is held halted
    until every line has been stored. Lines apply in order, so a later
    line for the same address wins.

    Args:
        machine: Machine to load into
        source: Program text, or an iterable of lines such as an open file

    Raises:
        BadLine: a line does not match ``<addr>: <value> [comment]``
        BadAddress: an address is outside memory
        BadValue: a value can't be parsed
        BadFile: reading the source failed
    """
    machine.cpu.reset()
    machine.cpu.state = CPUState.HALTED
    machine.memory.clear()

    line_no = 0
    try:
        for line_no, line in enumerate(_iter_lines(source), 1):
            _load_line(machine, line, line_no)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Error reading program: %s", e)
        raise BadFile(
            f"Invalid program file: {e}",
            source_line_no=line_no + 1,
        ) from e

    machine.cpu.state = CPUState.RUNNABLE
    logger.info("Program loaded successfully (%d lines)", line_no)


def load_file(machine: "Machine", path: Union[str, Path]) -> None:
    """Load a program from a file path."""
    try:
        f = open(path, encoding="utf-8")
    except OSError as e:
        # The machine is untouched when the file can't even be opened
        logger.warning("Error opening program file %s: %s", path, e)
        raise BadFile(f"Invalid program file: {e}") from e
    with f:
        load_program(machine, f)


def _load_line(machine: "Machine", line: str, line_no: int) -> None:
    """Parse one line and store its value."""
    m = _LINE_RE.match(line)
    if m is None:
        logger.warning("Invalid line %d: %r", line_no, line)
        raise BadLine(
            "Invalid line in program",
            source_line_no=line_no,
            source_text=line,
        )

    addr = int(m.group(1))
    if not in_bounds(addr):
        logger.warning("Out of range memory address on line %d: %d", line_no, addr)
        raise BadAddress(
            f"Invalid memory address {addr} - can't load data there",
            addr=addr,
            source_line_no=line_no,
            source_text=line,
        )

    try:
        value = int(m.group(2))
    except ValueError:
        logger.warning("Invalid data value on line %d: %r", line_no, m.group(2))
        raise BadValue(
            "Invalid value - couldn't parse",
            addr=addr,
            source_line_no=line_no,
            source_text=line,
        )

    machine.memory.write(addr, bounds_cap(value))
