"""
Тесты для Utilization — утилизация пула и кривая ставки

Проверяемые инварианты:
1. Утилизация в [0, 100] при pool_liquidity >= pending_borrow
2. pool_liquidity < pending_borrow → InvalidInput
3. Ставка не убывает по утилизации
4. Ниже 1% утилизации — базовая ставка
"""

from fractions import Fraction

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from lease_verifier.core.domain.pool import LiquidityPoolSnapshot, LppConfig
from lease_verifier.core.errors import InvalidInput
from lease_verifier.core.math.utilization import (
    borrow_rate,
    deposit_capacity,
    pool_utilization,
    quote_annual_interest_rate,
    utilization,
)


amounts = st.integers(min_value=0, max_value=10**24)
percents = st.fractions(min_value=0, max_value=100)


@pytest.fixture
def lpp_config():
    """Кривая: база 7%, оптимум 70%, надбавка 2%."""
    return LppConfig(
        base_interest_rate=70,
        utilization_optimal=700,
        addon_optimal_interest_rate=20,
    )


@pytest.fixture
def empty_pool():
    return LiquidityPoolSnapshot(
        principal_due=0,
        interest_due=0,
        available_liquidity=10000,
        total_shares=0,
    )


# =============================================================================
# ТЕСТЫ: utilization
# =============================================================================


class TestUtilization:
    """Тесты utilization."""

    def test_pending_borrow_only(self):
        assert utilization(0, 1000, 0, 10000) == 10

    def test_with_outstanding_loans(self):
        # L = 3000 + 1000 + 0 = 4000, balance after = 6000
        assert utilization(3000, 1000, 0, 7000) == Fraction(40)

    def test_exact_fraction(self):
        assert utilization(1, 0, 0, 2) == Fraction(100, 3)

    def test_empty_pool(self):
        assert utilization(0, 0, 0, 0) == 0

    def test_fully_utilized(self):
        assert utilization(5000, 0, 100, 0) == 100

    def test_insufficient_liquidity(self):
        with pytest.raises(InvalidInput, match="No Liquidity"):
            utilization(0, 20000, 0, 10000)

    @given(
        principal=amounts,
        interest=amounts,
        pending=amounts,
        liquidity=amounts,
    )
    def test_bounded(self, principal, interest, pending, liquidity):
        assume(liquidity >= pending)
        u = utilization(principal, pending, interest, liquidity)
        assert 0 <= u <= 100

    def test_pool_snapshot(self, empty_pool):
        assert pool_utilization(empty_pool, 1000) == 10
        assert pool_utilization(empty_pool) == 0


# =============================================================================
# ТЕСТЫ: borrow_rate
# =============================================================================


class TestBorrowRate:
    """Тесты borrow_rate."""

    def test_at_optimal(self):
        """В оптимальной точке: base + addon."""
        assert borrow_rate(70, 70, 7, 2) == 90

    def test_half_optimal(self):
        assert borrow_rate(35, 70, 7, 2) == 80

    def test_truncated(self):
        # (7 + 10/70·2)·10 = 72.857...
        assert borrow_rate(10, 70, 7, 2) == 72

    def test_below_one_percent(self):
        """Ниже 1% — base_rate без изменений."""
        assert borrow_rate(Fraction(1, 2), 70, 7, 2) == 7
        assert borrow_rate(0, 70, 7, 2) == 7

    def test_units_differ_across_one_percent(self):
        """Ниже 1% результат в %, с 1% и выше в permille."""
        below = borrow_rate(Fraction(99, 100), 70, 7, 2)
        at_threshold = borrow_rate(1, 70, 7, 2)

        assert below == 7
        # (7 + 1/70·2)·10 = 70.28...
        assert at_threshold == 70
        assert at_threshold == below * 10

    def test_zero_optimal(self):
        with pytest.raises(InvalidInput, match="optimal_utilization"):
            borrow_rate(10, 0, 7, 2)

    def test_float_rejected(self):
        with pytest.raises(InvalidInput):
            borrow_rate(10.0, 70, 7, 2)

    @given(u1=percents, u2=percents)
    def test_monotonic(self, u1, u2):
        low, high = sorted((u1, u2))
        assert borrow_rate(low, 70, 7, 2) <= borrow_rate(high, 70, 7, 2)


class TestQuoteAnnualInterestRate:
    def test_quote(self, empty_pool, lpp_config):
        assert quote_annual_interest_rate(empty_pool, lpp_config, 1000) == 72

    def test_idle_pool_returns_base_permille(self, empty_pool, lpp_config):
        assert quote_annual_interest_rate(empty_pool, lpp_config, 0) == 70


# =============================================================================
# ТЕСТЫ: deposit_capacity
# =============================================================================


class TestDepositCapacity:
    def test_no_minimum(self, empty_pool):
        assert deposit_capacity(0, empty_pool) is None

    def test_capacity(self):
        pool = LiquidityPoolSnapshot(
            principal_due=4000, interest_due=0, available_liquidity=2000, total_shares=6000
        )
        # 4000·1000/500 - 2000 - 4000
        assert deposit_capacity(500, pool) == 2000

    def test_floored_at_zero(self):
        pool = LiquidityPoolSnapshot(
            principal_due=4000, interest_due=0, available_liquidity=6000, total_shares=10000
        )
        assert deposit_capacity(500, pool) == 0
