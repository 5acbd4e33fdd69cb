"""
Тесты для Repayment — распределение платежа

Порядок: overdue margin → overdue interest → due margin → due interest → principal.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lease_verifier.core.domain.position import Position
from lease_verifier.core.errors import InvalidInput
from lease_verifier.core.math.repayment import allocate_repayment


@pytest.fixture
def position():
    return Position(
        principal_due=1000,
        asset_amount=3000,
        loan_interest_rate=50,
        margin_interest_rate=30,
        overdue_margin=10,
        overdue_interest=20,
        due_margin=30,
        due_interest=40,
    )


class TestAllocateRepayment:
    """Тесты allocate_repayment."""

    def test_partial_overdue(self, position):
        result = allocate_repayment(25, position)

        assert result.overdue_margin_paid == 10
        assert result.overdue_interest_paid == 15
        assert result.due_margin_paid == 0
        assert result.due_interest_paid == 0
        assert result.principal_paid == 0
        assert result.change == 0
        assert result.fully_repaid is False

    def test_interest_before_principal(self, position):
        result = allocate_repayment(100, position)

        assert result.margin_paid == 40
        assert result.interest_paid == 60
        assert result.principal_paid == 0

    def test_full_repayment(self, position):
        result = allocate_repayment(1100, position)

        assert result.principal_paid == 1000
        assert result.total_paid == 1100
        assert result.change == 0
        assert result.fully_repaid is True

    def test_overpayment_change(self, position):
        result = allocate_repayment(1200, position)

        assert result.change == 100
        assert result.fully_repaid is True

    def test_zero_payment(self, position):
        result = allocate_repayment(0, position)

        assert result.total_paid == 0
        assert result.fully_repaid is False

    def test_nothing_due_is_not_repaid(self):
        empty = Position(
            principal_due=0,
            asset_amount=10,
            loan_interest_rate=50,
            margin_interest_rate=30,
        )
        result = allocate_repayment(0, empty)

        assert result.total_paid == 0
        assert result.fully_repaid is False

    def test_negative_payment(self, position):
        with pytest.raises(InvalidInput):
            allocate_repayment(-1, position)

    @given(payment=st.integers(min_value=0, max_value=10**6))
    def test_conservation(self, payment):
        position = Position(
            principal_due=1000,
            asset_amount=3000,
            loan_interest_rate=50,
            margin_interest_rate=30,
            overdue_margin=10,
            overdue_interest=20,
            due_margin=30,
            due_interest=40,
        )
        result = allocate_repayment(payment, position)

        assert result.total_paid + result.change == payment
        assert result.total_paid <= position.total_due
        assert result.fully_repaid == (payment >= position.total_due)
