"""
Utilization — утилизация пула и кривая годовой ставки

Модуль воспроизводит котировку ставки пула перед открытием позиции:
- Утилизация пула с учётом займа, который ещё только котируется
- Кусочно-линейная кривая ставки, заякоренная в оптимальной утилизации
- Ёмкость депозитов при минимальной утилизации

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Утилизация — точная дробь (Fraction) в [0, 100]
2. Ставка усекается к нулю ровно один раз, в самом конце
3. pool_liquidity < pending_borrow → InvalidInput (котировка должна была
   упасть раньше с "No Liquidity")

ФОРМУЛЫ:
    L = interest_due + pending_borrow + principal_due
    U = L / (L + (pool_liquidity - pending_borrow)) × 100          (%)

    rate = base                                      если U < 1%
    rate = ⌊(base + U / optimal × addon) × 10⌋       иначе          (permille)
"""

import math
from fractions import Fraction
from numbers import Rational
from typing import Final, Optional, Union

from lease_verifier.core.domain.pool import LiquidityPoolSnapshot, LppConfig
from lease_verifier.core.errors import InvalidInput
from lease_verifier.core.math.fixed_point import (
    PERCENT,
    PERMILLE,
    checked_sub,
    mul_div,
    validate_amount,
)

# Процентная величина: int или точная дробь
Percent = Union[int, Fraction]

# Ниже этой утилизации (%) линейный член не применяется
MIN_UTILIZATION_FOR_CURVE: Final[int] = 1

# Проценты → permille
PERCENT_TO_PERMILLE: Final[int] = PERMILLE // PERCENT


def _validate_percent(value: Percent, name: str) -> Fraction:
    if isinstance(value, bool) or not isinstance(value, Rational):
        raise InvalidInput(f"{name} must be int or Fraction, got {type(value).__name__}")
    if value < 0:
        raise InvalidInput(f"{name} must be non-negative, got {value}")
    return Fraction(value)


# =============================================================================
# UTILIZATION
# =============================================================================


def utilization(
    principal_due: int,
    pending_borrow: int,
    interest_due: int,
    pool_liquidity: int,
) -> Fraction:
    """
    Утилизация пула в процентах с учётом котируемого займа.

    Args:
        principal_due: Суммарное тело займов пула
        pending_borrow: Котируемый займ (ещё не выдан)
        interest_due: Суммарные начисленные проценты пула
        pool_liquidity: Свободный баланс пула (до выдачи pending_borrow)

    Returns:
        Утилизация (%) как Fraction в [0, 100]

    Raises:
        InvalidInput: Если pool_liquidity < pending_borrow

    Examples:
        >>> utilization(0, 1000, 0, 10000)
        Fraction(10, 1)
    """
    validate_amount(principal_due, "principal_due")
    validate_amount(pending_borrow, "pending_borrow")
    validate_amount(interest_due, "interest_due")
    validate_amount(pool_liquidity, "pool_liquidity")

    if pool_liquidity < pending_borrow:
        raise InvalidInput(
            f"No Liquidity: pool_liquidity {pool_liquidity} < pending_borrow {pending_borrow}"
        )

    total_liability = interest_due + pending_borrow + principal_due
    balance_after = checked_sub(pool_liquidity, pending_borrow, "pool balance")
    total = total_liability + balance_after

    if total == 0:
        # Пустой пул без обязательств
        return Fraction(0)

    return Fraction(total_liability * PERCENT, total)


def pool_utilization(snapshot: LiquidityPoolSnapshot, pending_borrow: int = 0) -> Fraction:
    """Утилизация по снапшоту пула."""
    return utilization(
        principal_due=snapshot.principal_due,
        pending_borrow=pending_borrow,
        interest_due=snapshot.interest_due,
        pool_liquidity=snapshot.available_liquidity,
    )


# =============================================================================
# BORROW RATE CURVE
# =============================================================================


def borrow_rate(
    utilization_percent: Percent,
    optimal_utilization: Percent,
    base_rate: Percent,
    addon_rate: Percent,
) -> Union[int, Fraction]:
    """
    Годовая ставка займа по кривой пула.

    Единицы результата зависят от ветки. Ниже 1% утилизации возвращается
    base_rate как есть, в процентах (тип аргумента сохраняется). Иначе
    результат в permille. Вызывающий код, которому нужны permille во всех
    случаях, использует quote_annual_interest_rate.

    Args:
        utilization_percent: Утилизация (%)
        optimal_utilization: Оптимальная утилизация (%), > 0
        base_rate: Базовая ставка (%)
        addon_rate: Надбавка в оптимальной точке (%)

    Returns:
        base_rate (%, без пересчёта) если утилизация < 1%, иначе
        ⌊(base + U/optimal · addon) · 10⌋ (permille, int)

    Raises:
        InvalidInput: Если optimal_utilization == 0 или аргументы отрицательны

    Examples:
        >>> borrow_rate(70, 70, 7, 2)
        90
        >>> borrow_rate(Fraction(1, 2), 70, 7, 2)
        7
    """
    u = _validate_percent(utilization_percent, "utilization_percent")
    optimal = _validate_percent(optimal_utilization, "optimal_utilization")
    base = _validate_percent(base_rate, "base_rate")
    addon = _validate_percent(addon_rate, "addon_rate")

    if optimal == 0:
        raise InvalidInput("optimal_utilization must be positive")

    if u < MIN_UTILIZATION_FOR_CURVE:
        return base_rate

    return math.floor((base + u / optimal * addon) * PERCENT_TO_PERMILLE)


def quote_annual_interest_rate(
    snapshot: LiquidityPoolSnapshot,
    lpp_config: LppConfig,
    pending_borrow: int,
) -> int:
    """
    Ставка, которую пул должен котировать для займа pending_borrow.

    Композиция pool_utilization и borrow_rate по параметрам LppConfig.
    Результат всегда в permille: ниже 1% утилизации это base_interest_rate
    из конфига (он уже в permille).
    """
    u = pool_utilization(snapshot, pending_borrow)

    if u < MIN_UTILIZATION_FOR_CURVE:
        return lpp_config.base_interest_rate

    return borrow_rate(
        u,
        lpp_config.utilization_optimal_percent,
        lpp_config.base_interest_rate_percent,
        lpp_config.addon_optimal_interest_rate_percent,
    )


# =============================================================================
# DEPOSIT CAPACITY
# =============================================================================


def deposit_capacity(
    min_utilization_permille: int,
    snapshot: LiquidityPoolSnapshot,
) -> Optional[int]:
    """
    Сколько LPN пул ещё примет, не опустив утилизацию ниже минимума.

    capacity = ⌊total_due · 1000 / min_utilization⌋ - balance - total_due

    Args:
        min_utilization_permille: Минимальная утилизация пула (permille)
        snapshot: Снапшот пула

    Returns:
        None если минимум не задан (0 — депозиты без ограничений),
        иначе ёмкость >= 0
    """
    validate_amount(min_utilization_permille, "min_utilization_permille")

    if min_utilization_permille == 0:
        return None

    total_due = snapshot.total_due
    ceiling = mul_div(total_due, PERMILLE, min_utilization_permille)

    return max(ceiling - snapshot.available_liquidity - total_due, 0)
