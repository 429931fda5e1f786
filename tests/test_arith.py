"""Tests for bounded arithmetic."""

import pytest
from hypo.arith import bounds_cap, in_bounds, trunc_divmod


class TestBoundsCap:
    """bounds_cap tests."""

    @pytest.mark.parametrize("value", [-99999, -1, 0, 1, 12345, 99999])
    def test_identity_in_range(self, value):
        """Values in range pass through."""
        assert bounds_cap(value) == value

    @pytest.mark.parametrize("value,want", [
        (100000, 99999),
        (133332, 99999),
        (10 ** 12, 99999),
        (-100000, -99999),
        (-(10 ** 12), -99999),
    ])
    def test_clamps_out_of_range(self, value, want):
        """Values outside the range hit the nearest bound."""
        assert bounds_cap(value) == want

    @pytest.mark.parametrize("value", [-(10 ** 9), -100000, -5, 0, 77, 99999, 100000, 10 ** 9])
    def test_idempotent(self, value):
        """Capping twice is the same as capping once."""
        assert bounds_cap(bounds_cap(value)) == bounds_cap(value)


class TestInBounds:
    """in_bounds tests."""

    def test_valid_addresses(self):
        assert all(in_bounds(a) for a in range(50))

    @pytest.mark.parametrize("addr", [-1, 50, 51, 999])
    def test_invalid_addresses(self, addr):
        assert not in_bounds(addr)


class TestTruncDivmod:
    """Truncating division tests."""

    @pytest.mark.parametrize("a,b,want", [
        (12, 9, (1, 3)),
        (-12, 9, (-1, -3)),
        (12, -9, (-1, 3)),
        (-12, -9, (1, -3)),
        (17, 5, (3, 2)),
        (0, 7, (0, 0)),
        (8, 4, (2, 0)),
    ])
    def test_truncates_toward_zero(self, a, b, want):
        """Quotient truncates and remainder follows the dividend."""
        assert trunc_divmod(a, b) == want
        q, r = want
        assert a == b * q + r

    def test_zero_divisor(self):
        with pytest.raises(ZeroDivisionError):
            trunc_divmod(1, 0)
