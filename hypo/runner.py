"""Program runner with tracing for the Hypothetical Machine."""

import logging
from dataclasses import dataclass, field
from typing import Optional
from .cpu import CPUState
from .errors import (
    HypoError,
    MachineFault,
    StepLimitExceeded,
    ErrorInfo,
)
from .instructions import Instruction
from .iohooks import IOBuffer
from .machine import Machine

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Options for program execution."""
    max_steps: int = 10000
    trace: bool = True
    trace_watch: list[int] = field(default_factory=list)
    trace_include_io: bool = True


@dataclass
class TraceRow:
    """Single row of execution trace."""
    step: int
    addr: int
    ac: int
    mq: int
    mem: dict[str, int]
    in_value: Optional[int] = None
    out_value: Optional[int] = None
    instr_text: str = ""

    def to_dict(self, include_io: bool) -> dict:
        result = {
            "step": self.step,
            "addr": self.addr,
            "ac": self.ac,
            "mq": self.mq,
            "mem": self.mem,
        }
        if include_io:
            result["in_value"] = self.in_value
            result["out_value"] = self.out_value
        result["instr_text"] = self.instr_text
        return result


@dataclass
class RunResult:
    """Result of program execution."""
    status: str  # "ok" | "error"
    output: list[int]
    steps_executed: int
    final_state: dict
    trace_watch: list[int]
    trace: list[dict]
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> dict:
        result = {
            "status": self.status,
            "output": self.output,
            "steps_executed": self.steps_executed,
            "final_state": self.final_state,
            "trace_watch": self.trace_watch,
            "trace": self.trace,
        }
        if self.error:
            result["error"] = self.error.to_dict()
        return result


def run_program(
    program_text: str,
    inputs: Optional[list[int]] = None,
    options: Optional[RunOptions] = None,
) -> RunResult:
    """Load and run a Hypo program until it halts.

    Args:
        program_text: Program source in ``<addr>: <value>`` form
        inputs: Values handed out, in order, to GET instructions
        options: Execution options

    Returns:
        RunResult with execution status, output values, and trace
    """
    if options is None:
        options = RunOptions()

    trace_rows: list[dict] = []
    trace_watch = sorted(set(options.trace_watch))
    error_info: Optional[ErrorInfo] = None
    steps_executed = 0
    traced: list[Instruction] = []

    io_buffer = IOBuffer(inputs)
    machine = Machine(
        read=io_buffer.read_int,
        write=io_buffer.write_int,
        trace_sink=traced.append,
    )
    machine.trace = options.trace

    try:
        machine.load_program(program_text)
    except HypoError as e:
        return RunResult(
            status="error",
            output=[],
            steps_executed=0,
            final_state=machine.cpu.get_state(),
            trace_watch=trace_watch,
            trace=[],
            error=e.to_error_info(),
        )

    instr_addr = machine.cpu.pc
    try:
        while not machine.halted and steps_executed < options.max_steps:
            instr_addr = machine.cpu.pc
            io_buffer.reset_io_values()
            traced.clear()

            machine.step()

            if machine.state in (CPUState.BAD_INSTRUCTION, CPUState.BAD_ADDRESS):
                # Nothing executed; the fetch itself failed
                break
            steps_executed += 1

            if options.trace:
                row = TraceRow(
                    step=steps_executed,
                    addr=instr_addr,
                    ac=machine.cpu.ac,
                    mq=machine.cpu.mq,
                    mem=machine.memory.get_watched(trace_watch),
                    in_value=io_buffer.last_in_value if options.trace_include_io else None,
                    out_value=io_buffer.last_out_value if options.trace_include_io else None,
                    instr_text=str(traced[0]) if traced else "",
                )
                trace_rows.append(row.to_dict(include_io=options.trace_include_io))

        if not machine.halted:
            raise StepLimitExceeded(
                f"Step limit exceeded: {options.max_steps}",
                step=steps_executed,
                addr=machine.cpu.pc,
            )

        if machine.state is not CPUState.HALTED:
            raise MachineFault(
                f"Program terminated with: {machine.state.value}",
                state_name=machine.state.value,
                step=steps_executed,
                addr=instr_addr,
            )

    except HypoError as e:
        # Attach context to error
        e.step = steps_executed
        e.addr = instr_addr
        error_info = e.to_error_info()

    logger.debug("Run finished after %d steps in state %s", steps_executed, machine.state.value)

    return RunResult(
        status="ok" if error_info is None else "error",
        output=io_buffer.get_output(),
        steps_executed=steps_executed,
        final_state=machine.cpu.get_state(),
        trace_watch=trace_watch,
        trace=trace_rows,
        error=error_info,
    )
