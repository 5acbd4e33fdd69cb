"""
Interest — начисление процентов по позиции

Модуль вычисляет ожидаемые проценты между двумя моментами времени:
- Линейное начисление по годовой ставке в permille
- Разбиение на "текущий" (due) и "просроченный" (overdue) период
- Четыре транша позиции: loan interest и margin interest, каждый due/overdue

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. to == from → 0
2. to < from → InvalidTimeWindow (отрицательных процентов не бывает)
3. Один общий числитель, без промежуточного усечения годовых процентов
4. Граница due/overdue = max(last_paid, now - due_period) (скользящее окно)

ФОРМУЛЫ:
    interest = ⌊principal × rate × (to - from) / (1000 × NANOSEC_YEAR)⌋

    boundary = max(last_paid, now - due_period)
    overdue  = interest(last_paid → boundary)
    current  = interest(boundary → now)
"""

from typing import Final, NamedTuple

from pydantic import BaseModel, Field

from lease_verifier.core.errors import InvalidTimeWindow
from lease_verifier.core.math.fixed_point import (
    PERMILLE,
    mul_div,
    validate_amount,
)

# =============================================================================
# ВРЕМЕННЫЕ КОНСТАНТЫ
# =============================================================================

# Наносекунд в секунде
NANOSEC: Final[int] = 1_000_000_000

# Наносекунд в году (365 дней, без високосных)
NANOSEC_YEAR: Final[int] = 365 * 24 * 60 * 60 * NANOSEC


# =============================================================================
# НАЧИСЛЕНИЕ
# =============================================================================


def accrue(principal: int, annual_rate_permille: int, from_ts: int, to_ts: int) -> int:
    """
    Проценты за окно [from_ts, to_ts].

    Args:
        principal: Тело долга (Amount)
        annual_rate_permille: Годовая ставка в permille (50 = 5%)
        from_ts: Начало окна (ns since epoch)
        to_ts: Конец окна (ns since epoch)

    Returns:
        ⌊principal · rate · (to - from) / (1000 · NANOSEC_YEAR)⌋

    Raises:
        InvalidTimeWindow: Если to_ts < from_ts
        InvalidInput: Если principal или rate отрицательны

    Examples:
        >>> accrue(100_000, 50, 0, NANOSEC_YEAR)
        5000
        >>> accrue(100_000, 50, 10, 10)
        0
    """
    validate_amount(principal, "principal")
    validate_amount(annual_rate_permille, "annual_rate_permille")
    validate_amount(from_ts, "from_ts")
    validate_amount(to_ts, "to_ts")

    if to_ts == from_ts:
        return 0

    if to_ts < from_ts:
        raise InvalidTimeWindow(from_ts, to_ts)

    return mul_div(
        principal,
        annual_rate_permille * (to_ts - from_ts),
        PERMILLE * NANOSEC_YEAR,
    )


class InterestPeriod(BaseModel):
    """
    Окно начисления процентов.

    Производная величина: создаётся заново на каждый расчёт, не хранится.
    """

    principal: int = Field(..., ge=0, description="Тело долга")
    rate: int = Field(..., ge=0, description="Годовая ставка (permille)")
    from_ts: int = Field(..., ge=0, description="Начало окна (ns)")
    to_ts: int = Field(..., ge=0, description="Конец окна (ns)")

    model_config = {"frozen": True}

    def interest(self) -> int:
        return accrue(self.principal, self.rate, self.from_ts, self.to_ts)


class InterestDue(NamedTuple):
    """Проценты, разбитые по скользящему окну due-периода."""

    current: int  # boundary → now
    overdue: int  # last_paid → boundary
    boundary_ts: int  # max(last_paid, now - due_period)

    @property
    def total(self) -> int:
        return self.current + self.overdue


def due_boundary(last_paid_ts: int, now_ts: int, due_period_ns: int) -> int:
    """Граница между просроченными и текущими процентами."""
    return max(last_paid_ts, now_ts - due_period_ns)


def split_due(
    principal: int,
    annual_rate_permille: int,
    last_paid_ts: int,
    now_ts: int,
    due_period_ns: int,
) -> InterestDue:
    """
    Разбиение процентов на текущие и просроченные.

    Проценты старше одного due-периода переклассифицируются в overdue.

    Args:
        principal: Тело долга
        annual_rate_permille: Годовая ставка (permille)
        last_paid_ts: До какого момента проценты оплачены (ns)
        now_ts: Момент наблюдения (ns)
        due_period_ns: Длина due-периода (ns)

    Returns:
        InterestDue(current, overdue, boundary_ts)

    Raises:
        InvalidTimeWindow: Если now_ts < last_paid_ts
    """
    validate_amount(due_period_ns, "due_period_ns")

    if now_ts < last_paid_ts:
        raise InvalidTimeWindow(last_paid_ts, now_ts)

    boundary = due_boundary(last_paid_ts, now_ts, due_period_ns)

    return InterestDue(
        current=accrue(principal, annual_rate_permille, boundary, now_ts),
        overdue=accrue(principal, annual_rate_permille, last_paid_ts, boundary),
        boundary_ts=boundary,
    )


class PositionInterestDue(NamedTuple):
    """
    Ожидаемые проценты позиции по четырём траншам.

    Loan interest начисляется по ставке пула, margin interest — по марже
    лизера; у каждого транша своя отметка "оплачено до".
    """

    overdue_margin: int
    overdue_interest: int
    due_margin: int
    due_interest: int

    @property
    def overdue_total(self) -> int:
        return self.overdue_margin + self.overdue_interest

    @property
    def due_total(self) -> int:
        return self.due_margin + self.due_interest

    @property
    def total(self) -> int:
        return self.overdue_total + self.due_total


def position_interest_due(
    principal: int,
    loan_rate_permille: int,
    margin_rate_permille: int,
    loan_paid_ts: int,
    margin_paid_ts: int,
    now_ts: int,
    due_period_ns: int,
) -> PositionInterestDue:
    """
    Проценты позиции по всем траншам на момент now_ts.

    Args:
        principal: Тело долга позиции
        loan_rate_permille: Годовая ставка пула (permille)
        margin_rate_permille: Годовая маржа лизера (permille)
        loan_paid_ts: Loan interest оплачен до (ns)
        margin_paid_ts: Margin interest оплачен до (ns)
        now_ts: Момент наблюдения (ns)
        due_period_ns: Длина due-периода (ns)

    Returns:
        PositionInterestDue
    """
    loan = split_due(principal, loan_rate_permille, loan_paid_ts, now_ts, due_period_ns)
    margin = split_due(
        principal, margin_rate_permille, margin_paid_ts, now_ts, due_period_ns
    )

    return PositionInterestDue(
        overdue_margin=margin.overdue,
        overdue_interest=loan.overdue,
        due_margin=margin.current,
        due_interest=loan.current,
    )
