"""Custom exceptions for the Hypothetical Machine."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass
class ErrorInfo:
    """Structured error information for API responses."""
    type: str
    message: str
    step: int
    addr: int
    kind: Optional[str] = None
    source_line_no: Optional[int] = None
    source_text: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "message": self.message,
            "step": self.step,
            "addr": self.addr,
            "kind": self.kind,
            "source_line_no": self.source_line_no,
            "source_text": self.source_text,
        }


class HypoError(Exception):
    """Base exception for all Hypo errors."""

    def __init__(
        self,
        message: str,
        step: int = 0,
        addr: int = 0,
        source_line_no: Optional[int] = None,
        source_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.step = step
        self.addr = addr
        self.source_line_no = source_line_no
        self.source_text = source_text

    def to_error_info(self) -> ErrorInfo:
        return ErrorInfo(
            type=self.__class__.__name__,
            message=self.message,
            step=self.step,
            addr=self.addr,
            source_line_no=self.source_line_no,
            source_text=self.source_text,
        )


class LoadErrorKind(Enum):
    """Why a program failed to load."""
    BAD_FILE = "bad-file"
    BAD_LINE = "bad-line"
    BAD_ADDRESS = "bad-address"
    BAD_VALUE = "bad-value"


class LoadError(HypoError):
    """Error while loading a program into memory."""
    kind: LoadErrorKind

    def to_error_info(self) -> ErrorInfo:
        info = super().to_error_info()
        info.kind = self.kind.value
        return info


class BadFile(LoadError):
    """The program source could not be read."""
    kind = LoadErrorKind.BAD_FILE


class BadLine(LoadError):
    """A line does not match the program grammar."""
    kind = LoadErrorKind.BAD_LINE


class BadAddress(LoadError):
    """A line targets an address outside memory."""
    kind = LoadErrorKind.BAD_ADDRESS


class BadValue(LoadError):
    """A line carries a value that can't be parsed."""
    kind = LoadErrorKind.BAD_VALUE


class HypoRuntimeError(HypoError):
    """Error during program execution."""
    pass


class MemoryAccessError(HypoRuntimeError):
    """Memory address out of bounds."""
    pass


class StepLimitExceeded(HypoRuntimeError):
    """Maximum step count exceeded."""
    pass


class InputUnderflow(HypoRuntimeError):
    """GET instruction with empty input buffer."""
    pass


class MachineFault(HypoRuntimeError):
    """Machine stopped in a terminal state other than halted."""

    def __init__(self, message: str, state_name: str, **kwargs):
        super().__init__(message, **kwargs)
        self.state_name = state_name

    def to_error_info(self) -> ErrorInfo:
        info = super().to_error_info()
        info.kind = self.state_name
        return info
