"""Memory model for the Hypothetical Machine."""

from .arith import MEM_SIZE, bounds_cap, in_bounds
from .errors import MemoryAccessError


class Memory:
    """Fixed 50-word memory; instructions and data share it."""

    def __init__(self):
        self.size = MEM_SIZE
        self._data: list[int] = [0] * MEM_SIZE

    def _check_bounds(self, addr: int) -> None:
        """Check if address is within valid range."""
        if not in_bounds(addr):
            raise MemoryAccessError(f"Memory address out of range: {addr}", addr=addr)

    def read(self, addr: int) -> int:
        """Read value from memory address."""
        self._check_bounds(addr)
        return self._data[addr]

    def write(self, addr: int, value: int) -> None:
        """Write bounded value to memory address."""
        self._check_bounds(addr)
        self._data[addr] = bounds_cap(value)

    def clear(self) -> None:
        """Zero every word."""
        self._data = [0] * self.size

    def get_watched(self, addresses: list[int]) -> dict[str, int]:
        """Get values at watched addresses as string-keyed dict."""
        result = {}
        for addr in addresses:
            if in_bounds(addr):
                result[str(addr)] = self._data[addr]
        return result

    def snapshot(self) -> list[int]:
        """Return a copy of the entire memory."""
        return self._data.copy()
