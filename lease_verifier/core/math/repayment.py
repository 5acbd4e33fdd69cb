"""
Repayment — распределение платежа по обязательствам позиции

Протокол гасит обязательства строго по порядку:
    overdue margin → overdue interest → due margin → due interest → principal

Остаток сверх полного долга возвращается как change.
"""

from typing import NamedTuple

from lease_verifier.core.domain.position import Position
from lease_verifier.core.math.fixed_point import validate_amount


class RepaymentBreakdown(NamedTuple):
    """Ожидаемое распределение платежа."""

    overdue_margin_paid: int
    overdue_interest_paid: int
    due_margin_paid: int
    due_interest_paid: int
    principal_paid: int
    change: int
    fully_repaid: bool  # ненулевой principal погашен → ожидается Opened → Paid

    @property
    def margin_paid(self) -> int:
        return self.overdue_margin_paid + self.due_margin_paid

    @property
    def interest_paid(self) -> int:
        return self.overdue_interest_paid + self.due_interest_paid

    @property
    def total_paid(self) -> int:
        return self.margin_paid + self.interest_paid + self.principal_paid


def allocate_repayment(payment: int, position: Position) -> RepaymentBreakdown:
    """
    Распределение платежа (LPN) по траншам позиции.

    Args:
        payment: Сумма платежа (LPN)
        position: Наблюдение позиции до платежа

    Returns:
        RepaymentBreakdown
    """
    remaining = validate_amount(payment, "payment")
    paid = []

    for due in (
        position.overdue_margin,
        position.overdue_interest,
        position.due_margin,
        position.due_interest,
        position.principal_due,
    ):
        portion = min(remaining, due)
        paid.append(portion)
        remaining -= portion

    return RepaymentBreakdown(
        overdue_margin_paid=paid[0],
        overdue_interest_paid=paid[1],
        due_margin_paid=paid[2],
        due_interest_paid=paid[3],
        principal_paid=paid[4],
        change=remaining,
        fully_repaid=position.principal_due > 0 and paid[4] == position.principal_due,
    )
