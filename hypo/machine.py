"""The Hypothetical Machine: memory, registers, state and I/O hooks."""

from pathlib import Path
from typing import Callable, Optional, Union
from .cpu import CPU, CPUState
from .instructions import Instruction, execute_instruction, fetch
from .iohooks import IOHooks, Reader, Writer, format_word
from .loader import ProgramSource, load_file, load_program
from .memory import Memory

TraceSink = Callable[[Instruction], None]


class Machine:
    """A Hypothetical Machine.

    The machine owns its memory and registers outright and is not safe
    for concurrent use. Both I/O hooks must be supplied by the caller;
    ``hypo.iohooks`` has console and buffered implementations.

    Args:
        read: Returns one integer for GET. May block.
        write: Receives one integer for PUT.
        trace_sink: Receives each instruction before it runs while
            tracing is on.
    """

    def __init__(
        self,
        read: Reader,
        write: Writer,
        trace_sink: Optional[TraceSink] = None,
    ):
        self.memory = Memory()
        self.cpu = CPU()
        self.io = IOHooks(read=read, write=write)
        self.trace = False
        self.trace_sink = trace_sink

    @property
    def state(self) -> CPUState:
        return self.cpu.state

    @property
    def halted(self) -> bool:
        """True when execution can't continue without a reset."""
        return not self.cpu.runnable

    def step(self) -> None:
        """Execute the instruction at PC.

        Anomalies never raise; they move the CPU to a terminal state and
        leave PC, registers and memory as they were. Stepping a machine
        that is not runnable does nothing. An exception raised by an I/O
        hook propagates with PC back on the instruction, so the step can
        be retried.
        """
        if not self.cpu.runnable:
            return

        instr, state = fetch(self.memory, self.cpu.pc)
        if state is not CPUState.RUNNABLE:
            self.cpu.state = state
            return

        if self.trace and self.trace_sink is not None:
            self.trace_sink(instr)

        pc = self.cpu.pc
        self.cpu.pc += 1
        try:
            new_pc = execute_instruction(instr, self.cpu, self.memory, self.io)
        except Exception:
            self.cpu.pc = pc
            raise
        if new_pc is not None:
            self.cpu.pc = new_pc

    def run(self) -> CPUState:
        """Step until the machine leaves the runnable state.

        Returns the terminal state. A program that never halts never
        returns.
        """
        while self.cpu.runnable:
            self.step()
        return self.cpu.state

    def load_program(self, source: ProgramSource) -> None:
        """Replace memory with a program. See :func:`hypo.loader.load_program`."""
        load_program(self, source)

    def load_file(self, path: Union[str, Path]) -> None:
        load_file(self, path)

    def reset_cpu(self) -> None:
        """Zero the registers and make the CPU runnable. Memory is kept."""
        self.cpu.reset()

    def toggle_trace(self) -> bool:
        self.trace = not self.trace
        return self.trace

    def dump_memory(self) -> str:
        """Format memory five words per row."""
        rows = []
        words = self.memory.snapshot()
        for start in range(0, len(words), 5):
            cells = [
                f"{addr:02d}: {format_word(words[addr])}"
                for addr in range(start, min(start + 5, len(words)))
            ]
            rows.append("  ".join(cells))
        return "\n".join(rows)

    def dump_registers(self) -> str:
        return (
            f"PC: {self.cpu.pc:02d}  "
            f"AC: {format_word(self.cpu.ac)}  "
            f"MQ: {format_word(self.cpu.mq)}"
        )

    def dump_state(self) -> str:
        """Format memory, registers and CPU state together."""
        return "\n".join([
            "Memory:",
            self.dump_memory(),
            "",
            "Registers:",
            self.dump_registers(),
            "",
            f"CPU State: {self.cpu.state.value}",
        ])
