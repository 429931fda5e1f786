"""Bounded arithmetic for the Hypothetical Machine."""

# The Hypo machine has 50 memory words
MEM_SIZE = 50

WORD_MIN = -99999
WORD_MAX = 99999


def in_bounds(addr: int) -> bool:
    """Check whether addr is a valid memory address."""
    return 0 <= addr < MEM_SIZE


def bounds_cap(value: int) -> int:
    """Clamp value to the machine's legal range [-99999, 99999]."""
    if value > WORD_MAX:
        return WORD_MAX
    if value < WORD_MIN:
        return WORD_MIN
    return value


def trunc_divmod(dividend: int, divisor: int) -> tuple[int, int]:
    """Divide truncating toward zero.

    The remainder carries the sign of the dividend, so that
    ``dividend == divisor * quotient + remainder`` always holds.
    Raises ZeroDivisionError for a zero divisor.
    """
    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        quotient = -quotient
    return quotient, dividend - divisor * quotient
