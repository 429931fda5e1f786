"""Read/write hooks for the GET and PUT instructions.

The machine never picks a hook on its own; callers pass one of these
(or any compatible callable) when building a Machine.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, TextIO
import sys

from .errors import InputUnderflow

# Zero-argument function returning one integer
Reader = Callable[[], int]
# One-argument function accepting one integer
Writer = Callable[[int], None]


@dataclass(frozen=True)
class IOHooks:
    """The pair of hooks a machine talks to."""
    read: Reader
    write: Writer


class IOBuffer:
    """Scripted input values and collected output values."""

    def __init__(self, inputs: Optional[Iterable[int]] = None):
        self._input = list(inputs or [])
        self._input_pos = 0
        self._output: list[int] = []
        self.last_in_value: Optional[int] = None
        self.last_out_value: Optional[int] = None

    def read_int(self) -> int:
        """Read next value from input buffer."""
        self.last_in_value = None
        if self._input_pos >= len(self._input):
            raise InputUnderflow("Input buffer is empty")
        value = self._input[self._input_pos]
        self._input_pos += 1
        self.last_in_value = value
        return value

    def write_int(self, value: int) -> None:
        """Append value to output buffer."""
        self.last_out_value = value
        self._output.append(value)

    def get_output(self) -> list[int]:
        """Get accumulated output values."""
        return self._output.copy()

    def reset_io_values(self) -> None:
        """Reset last I/O values for new instruction."""
        self.last_in_value = None
        self.last_out_value = None


def format_word(value: int) -> str:
    """Render a word the way the console shows it: sign or space, 5 digits."""
    return f"{value: 06d}"


def console_input(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    """Prompt until the operator types an integer. Blocks on stdin."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    while True:
        stdout.write("Enter a numeric value: ")
        stdout.flush()
        line = stdin.readline()
        if not line:
            raise EOFError("No more input")
        try:
            return int(line.strip())
        except ValueError:
            stdout.write("Error reading input. Try again.\n")


def console_output(value: int, stdout: Optional[TextIO] = None) -> None:
    """Print one output word."""
    stdout = stdout or sys.stdout
    stdout.write(format_word(value) + "\n")
