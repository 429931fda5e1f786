"""Hypothetical Machine Emulator Core Package."""

from .cpu import CPUState
from .instructions import Instruction, Op
from .machine import Machine
from .runner import run_program, RunOptions, RunResult
from .errors import (
    HypoError,
    LoadError,
    LoadErrorKind,
    HypoRuntimeError,
    InputUnderflow,
)

__all__ = [
    "CPUState",
    "Instruction",
    "Op",
    "Machine",
    "run_program",
    "RunOptions",
    "RunResult",
    "HypoError",
    "LoadError",
    "LoadErrorKind",
    "HypoRuntimeError",
    "InputUnderflow",
]
