"""CPU state model for the Hypothetical Machine."""

from enum import Enum
from .arith import bounds_cap


class CPUState(Enum):
    """Whether the machine can continue or needs a reset."""
    RUNNABLE = "runnable"
    HALTED = "halted"
    BAD_INSTRUCTION = "invalid-instruction"
    BAD_ADDRESS = "invalid-address"
    DIVIDE_BY_ZERO = "divide-by-zero"

    def __str__(self) -> str:
        return self.value


class CPU:
    """Registers and execution state."""

    def __init__(self):
        self.pc: int = 0
        self.ac: int = 0
        self.mq: int = 0
        self.state: CPUState = CPUState.RUNNABLE

    @property
    def runnable(self) -> bool:
        return self.state is CPUState.RUNNABLE

    def set_ac(self, value: int) -> None:
        """Set AC, capped to the word range."""
        self.ac = bounds_cap(value)

    def set_mq(self, value: int) -> None:
        """Set MQ, capped to the word range."""
        self.mq = bounds_cap(value)

    def get_state(self) -> dict:
        """Get current register state as dictionary."""
        return {
            "pc": self.pc,
            "ac": self.ac,
            "mq": self.mq,
            "state": self.state.value,
        }

    def reset(self) -> None:
        """Zero the registers and make the CPU runnable again."""
        self.pc = 0
        self.ac = 0
        self.mq = 0
        self.state = CPUState.RUNNABLE
