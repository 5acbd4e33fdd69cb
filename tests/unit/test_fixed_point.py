"""
Тесты для Fixed-Point — целочисленная арифметика сумм

Проверяемые инварианты:
1. mul_div усекает к нулю: ⌊a·b/c⌋
2. Деление на ноль → InvalidInput
3. Отрицательные и нецелые суммы → InvalidInput
4. InvalidInput совместима с ValueError
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lease_verifier.core.errors import InvalidInput, LeaseVerifierError
from lease_verifier.core.math.fixed_point import (
    PERMILLE,
    ceil_div,
    checked_sub,
    mul_div,
    validate_amount,
    validate_permille,
)


amounts = st.integers(min_value=0, max_value=10**30)


# =============================================================================
# ТЕСТЫ: Validation
# =============================================================================


class TestValidateAmount:
    """Тесты validate_amount."""

    def test_valid_amount_passes(self):
        """Неотрицательные int проходят без изменений."""
        assert validate_amount(0) == 0
        assert validate_amount(10**40) == 10**40

    def test_negative_amount_rejected(self):
        with pytest.raises(InvalidInput, match="non-negative"):
            validate_amount(-1, "principal")

    def test_float_rejected(self):
        """float запрещён даже для целых значений."""
        with pytest.raises(InvalidInput, match="integer"):
            validate_amount(1.0)

    def test_bool_rejected(self):
        with pytest.raises(InvalidInput):
            validate_amount(True)

    def test_error_hierarchy(self):
        """InvalidInput — и ValueError, и LeaseVerifierError."""
        with pytest.raises(ValueError):
            validate_amount(-5)
        with pytest.raises(LeaseVerifierError):
            validate_amount(-5)


class TestValidatePermille:
    def test_bounds(self):
        assert validate_permille(0) == 0
        assert validate_permille(PERMILLE) == PERMILLE

    def test_above_upper_rejected(self):
        with pytest.raises(InvalidInput, match="permille"):
            validate_permille(1001)

    def test_custom_upper(self):
        with pytest.raises(InvalidInput):
            validate_permille(500, upper=499)


# =============================================================================
# ТЕСТЫ: Arithmetic
# =============================================================================


class TestMulDiv:
    """Тесты mul_div: умножение-затем-деление с усечением."""

    def test_truncates(self):
        assert mul_div(10000, 450, 550) == 8181
        assert mul_div(7, 1, 2) == 3

    def test_exact(self):
        assert mul_div(100, 50, 10) == 500

    def test_zero_divisor(self):
        with pytest.raises(InvalidInput, match="Division by zero"):
            mul_div(1, 1, 0)

    def test_negative_operand(self):
        with pytest.raises(InvalidInput):
            mul_div(-1, 1, 1)

    def test_no_overflow(self):
        """Промежуточное произведение не переполняется."""
        big = 2**128
        assert mul_div(big, big, big) == big

    @given(a=amounts, b=amounts, c=st.integers(min_value=1, max_value=10**30))
    def test_floor_bounds(self, a, b, c):
        """q·c <= a·b < (q+1)·c."""
        q = mul_div(a, b, c)
        assert q * c <= a * b < (q + 1) * c


class TestCheckedSub:
    def test_valid(self):
        assert checked_sub(7, 5) == 2
        assert checked_sub(5, 5) == 0

    def test_would_go_negative(self):
        with pytest.raises(InvalidInput, match="negative"):
            checked_sub(5, 7, "balance")


class TestCeilDiv:
    def test_rounds_up(self):
        assert ceil_div(7, 2) == 4
        assert ceil_div(6, 2) == 3
        assert ceil_div(0, 5) == 0

    def test_zero_divisor(self):
        with pytest.raises(InvalidInput):
            ceil_div(1, 0)

    @given(a=amounts, c=st.integers(min_value=1, max_value=10**12))
    def test_ceiling_bounds(self, a, c):
        q = ceil_div(a, c)
        assert (q - 1) * c < a <= q * c
